from django.apps import AppConfig


class ContactConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'contact'
    verbose_name = 'Contact Form'

    def ready(self):
        """Register the forms declared in settings."""
        from . import registry
        registry.load_from_settings()
