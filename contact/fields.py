"""
Contact Form Field Registry

Keeps the fields, groups and buttons of a form in the order they were added.
Entries are plain dicts so they can be declared in settings as well.
"""
import re

from django.core.exceptions import ImproperlyConfigured


GROUP = 'group'
BUTTON = 'button'


class FieldRegistry:
    """
    Ordered field, group and button definitions of one contact form.
    """

    def __init__(self):
        self.entries = []
        self.groups = {}
        self.names = set()

    def add_field(self, type, name, label=None, options=None):
        """
        Add a new field to the form.

        Args:
            type: Field type ("text", "email", "tel", "textarea", ...)
            name: Field name. "firstname", "lastname", "name" and "email" feed
                the From header; "subject" becomes the email subject.
            label: Field label. No label element is rendered if empty.
            options: Field configuration:
                - required: True, or the name of another field that may be
                  filled instead of this one
                - default: Initial value
                - pattern: Regular expression the value must match
                - placeholder, rows: Passed to the HTML control
                - wrapper: HTML wrapper, %field marks the insertion point
                - label_class, input_class: CSS classes

        Returns:
            The created field
        """
        if type in (GROUP, BUTTON):
            raise ImproperlyConfigured(f"'{type}' is reserved and cannot be used as a field type")

        if not name:
            raise ImproperlyConfigured("Contact form fields need a name")

        if name in self.names:
            raise ImproperlyConfigured(f"Field '{name}' is already registered on this form")

        options = options or {}
        if options.get('pattern'):
            try:
                re.compile(options['pattern'])
            except re.error as e:
                raise ImproperlyConfigured(f"Invalid pattern for field '{name}': {e}") from e

        field = {
            'type': type,
            'name': name,
            'label': label,
            'options': options,
        }

        self.names.add(name)
        self.entries.append(field)
        return field

    def group_fields(self, wrapper, *fields):
        """
        Group fields under a wrapper.

        The fields must come from add_field(); they stay data fields and are
        rendered inside the wrapper only.

        Args:
            wrapper: HTML wrapper, %fields marks the insertion point
            fields: Fields to group
        """
        for field in fields:
            if field.get('name') not in self.names:
                raise ImproperlyConfigured(
                    f"Field '{field.get('name')}' must be added before it can be grouped"
                )
            self.groups[field['name']] = field

        group = {
            'type': GROUP,
            'wrapper': wrapper,
            'fields': list(fields),
        }
        self.entries.append(group)
        return group

    def add_button(self, title=None, options=None):
        """
        Add a submit button.

        Args:
            title: Button title. An arrow is shown when empty.
            options: Button configuration (class, wrapper with %button)
        """
        button = {
            'type': BUTTON,
            'title': title,
            'options': options or {},
        }
        self.entries.append(button)
        return button

    def is_grouped(self, name):
        return name in self.groups

    def data_fields(self):
        """Fields whose values are submitted, in registration order."""
        return [
            entry for entry in self.entries
            if entry['type'] not in (GROUP, BUTTON)
        ]

    def __iter__(self):
        return iter(self.entries)

    def __len__(self):
        return len(self.entries)
