"""
Contact Form Renderer

Turns the field registry of a form into HTML markup. User-facing text is
escaped; wrappers come from the form configuration and are trusted.
"""
from django.forms.utils import flatatt
from django.urls import reverse
from django.utils.html import format_html
from django.utils.safestring import mark_safe

from .fields import GROUP, BUTTON


class ContactFormRenderer:
    """
    Render a contact form.

    The markup exposes the hooks used by the front-end submit script:
    .form-contact, input[name=_ajax_key], .form-contact-button,
    .form-contact-loader and .form-contact-success.
    """

    BUTTON_CLASS = 'form-contact-button'
    DEFAULT_BUTTON_TITLE = mark_safe('&rarr;')

    def __init__(self, shortcode, security, registry, options=None):
        self.shortcode = shortcode
        self.security = security
        self.registry = registry
        self.options = options or {}

    def render(self, action=None):
        """
        Render the whole form.

        Args:
            action: Submission URL. Defaults to the contact submit endpoint.
        """
        parts = [self.security.security_fields()]

        for entry in self.registry:
            if entry['type'] == BUTTON:
                parts.append(self.render_button(entry))
            elif entry['type'] == GROUP:
                parts.append(self.render_group(entry))
            elif not self.registry.is_grouped(entry['name']):
                parts.append(self.render_field(entry))

        attrs = {
            'id': self.shortcode,
            'class': self._classes('form-contact', self.options.get('class')),
            'method': 'post',
            'action': action or reverse('contact:submit'),
        }
        return format_html('<form{}>{}</form>', flatatt(attrs), mark_safe(''.join(parts)))

    def render_field(self, field):
        options = field.get('options') or {}

        if field['type'] == 'textarea':
            html = self.render_textarea(field, options)
        else:
            html = self.render_input(field, options)

        if field.get('label'):
            html = self.render_label(field, options) + html

        return self._wrap(options.get('wrapper'), '%field', html)

    def render_label(self, field, options):
        attrs = {
            'class': options.get('label_class'),
            'for': self.field_id(field),
        }
        return format_html('<label{}>{}</label>', flatatt(attrs), field['label'])

    def render_input(self, field, options):
        attrs = {
            'class': options.get('input_class'),
            'type': field['type'],
            'name': field['name'],
            'id': self.field_id(field),
            'pattern': options.get('pattern'),
            'placeholder': options.get('placeholder'),
            'value': options.get('default'),
            'required': options.get('required') is True,
        }
        return format_html('<input{}>', flatatt(attrs))

    def render_textarea(self, field, options):
        attrs = {
            'class': options.get('input_class'),
            'name': field['name'],
            'id': self.field_id(field),
            'placeholder': options.get('placeholder'),
            'rows': options.get('rows'),
            'required': options.get('required') is True,
        }
        return format_html('<textarea{}>{}</textarea>', flatatt(attrs), options.get('default') or '')

    def render_group(self, group):
        fields = group.get('fields')
        if not isinstance(fields, (list, tuple)):
            return ''

        html = mark_safe(''.join(self.render_field(field) for field in fields))
        return self._wrap(group.get('wrapper'), '%fields', html)

    def render_button(self, button):
        options = button.get('options') or {}
        attrs = {
            'id': f'{self.shortcode}-button',
            'class': self._classes(options.get('class'), self.BUTTON_CLASS),
            'type': 'submit',
        }
        html = format_html(
            '<button{}>{}'
            '<div id="{}-loader" class="form-contact-loader"><span class="form-contact-spinner"></span></div>'
            '<div id="{}-success" class="form-contact-success">&check;</div>'
            '</button>',
            flatatt(attrs),
            button.get('title') or self.DEFAULT_BUTTON_TITLE,
            self.shortcode,
            self.shortcode,
        )
        return self._wrap(options.get('wrapper'), '%button', html)

    def field_id(self, field):
        return f"{self.shortcode}-{field['name']}"

    @staticmethod
    def _classes(*classes):
        return ' '.join(c.strip() for c in classes if c and c.strip())

    @staticmethod
    def _wrap(wrapper, placeholder, html):
        if not wrapper:
            return html
        return mark_safe(wrapper.replace(placeholder, html))
