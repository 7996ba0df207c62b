"""
Contact Form Validation

Checks submitted values against the constraints of the form fields.
Errors are indexed by field name so the front end can flag each input.
"""
import re

from django.core.exceptions import ValidationError
from django.core.validators import EmailValidator


class ContactValidator:
    """
    Validate the data of a contact form submission.

    Usage:
        validator = ContactValidator(data)
        validator.check(fields)
        if not validator.is_valid():
            return validator.errors
    """

    # 10 digits with a leading 0, digit pairs optionally separated by a space
    PHONE_PATTERN = re.compile(r'^0[1-9](?:\s?[0-9]{2}){4}$')

    email_validator = EmailValidator()

    def __init__(self, data):
        self.data = data
        self.errors = {}

    def check(self, fields):
        """
        Check the validity of the fields.

        A truthy "required" option makes the field mandatory. When it names
        another field, filling that field satisfies the requirement too.
        """
        for field in fields:
            name = field['name']
            options = field.get('options') or {}
            required = options.get('required')

            if required:
                alias = required if isinstance(required, str) else None
                if not self.data.get(name) and not (alias and self.data.get(alias)):
                    self.add_error(name, False)
                    continue

            if self.data.get(name):
                self.check_format(field, options)

    def check_format(self, field, options):
        name = field['name']

        if field['type'] == 'email':
            self.is_email(name)
        elif field['type'] == 'tel':
            self.is_phone(name)

        if options.get('pattern') and self.is_valid(name):
            self.matches(name, options['pattern'])

    def is_valid(self, key=None):
        """
        Check for recorded errors.

        Args:
            key: Field to check. Checks every field when empty.
        """
        if key:
            return key not in self.errors
        return not self.errors

    def get_errors(self):
        return self.errors

    def is_email(self, key):
        try:
            self.email_validator(self.data[key])
            is_valid = True
        except ValidationError:
            is_valid = False

        self.add_error(key, is_valid)
        return is_valid

    def is_phone(self, key):
        is_valid = bool(self.PHONE_PATTERN.fullmatch(self.data[key]))
        self.add_error(key, is_valid)
        return is_valid

    def matches(self, key, pattern):
        """Whole-value match, as the HTML pattern attribute does."""
        is_valid = re.fullmatch(pattern, self.data[key]) is not None

        self.add_error(key, is_valid)
        return is_valid

    def add_error(self, key, is_valid):
        if not is_valid:
            self.errors[key] = 1
