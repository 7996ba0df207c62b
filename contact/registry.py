"""
Contact Form Registry

Forms available to the contact endpoints, indexed by form identifier and by
dispatch key. Forms can be registered in code or declared in the
CONTACT_FORMS setting.
"""
import logging

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from .fields import GROUP, BUTTON
from .manager import ContactManager

logger = logging.getLogger(__name__)

_forms = {}


def register(manager):
    """Make a form available for rendering and submission."""
    if manager.shortcode in _forms:
        raise ImproperlyConfigured(f"Contact form '{manager.shortcode}' is already registered")

    existing = get_form_by_ajax_key(manager.ajax_key)
    if existing is not None:
        raise ImproperlyConfigured(
            f"Contact form '{manager.shortcode}' shares the key {manager.ajax_key} "
            f"with '{existing.shortcode}'"
        )

    _forms[manager.shortcode] = manager
    logger.debug(f"Registered contact form {manager.shortcode} ({manager.ajax_key})")
    return manager


def unregister(shortcode):
    return _forms.pop(shortcode, None)


def get_form(shortcode):
    return _forms.get(shortcode)


def get_form_by_ajax_key(ajax_key):
    if not ajax_key:
        return None

    for manager in _forms.values():
        if manager.ajax_key == ajax_key:
            return manager
    return None


def all_forms():
    return list(_forms.values())


def clear():
    _forms.clear()


def build_form(config):
    """
    Build a ContactManager from a CONTACT_FORMS entry.

    Example:
        {
            'shortcode': 'contact-form',
            'receiver': 'owner@example.com',
            'options': {'class': 'site-form'},
            'fields': [
                {'type': 'text', 'name': 'name', 'label': 'Name', 'options': {'required': True}},
                {'type': 'group', 'wrapper': '<div>%fields</div>', 'fields': [...]},
                {'type': 'button', 'title': 'Send'},
            ],
        }
    """
    try:
        shortcode = config['shortcode']
        receiver = config['receiver']
    except KeyError as e:
        raise ImproperlyConfigured(f"CONTACT_FORMS entry is missing {e}") from e

    manager = ContactManager(shortcode, receiver, config.get('options'))

    for entry in config.get('fields', []):
        entry_type = entry.get('type')

        if entry_type == GROUP:
            fields = [_add_field(manager, field) for field in entry.get('fields', [])]
            manager.group_fields(entry.get('wrapper', '%fields'), *fields)
        elif entry_type == BUTTON:
            manager.add_button(entry.get('title'), entry.get('options'))
        else:
            _add_field(manager, entry)

    return manager


def _add_field(manager, entry):
    if 'type' not in entry or 'name' not in entry:
        raise ImproperlyConfigured(f"Contact form field needs a type and a name: {entry!r}")

    return manager.add_field(entry['type'], entry['name'], entry.get('label'), entry.get('options'))


def load_from_settings():
    """Register every form declared in CONTACT_FORMS."""
    loaded = []
    for config in getattr(settings, 'CONTACT_FORMS', []):
        loaded.append(register(build_form(config)))

    if loaded:
        logger.info(f"Loaded {len(loaded)} contact form(s) from settings")
    return loaded
