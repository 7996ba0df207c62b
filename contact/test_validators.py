"""
Tests for contact form field validation.
"""
import pytest
from django.core.exceptions import ImproperlyConfigured

from contact.fields import FieldRegistry
from contact.validators import ContactValidator


def field(type, name, **options):
    return {'type': type, 'name': name, 'label': None, 'options': options}


class TestRequiredFields:
    """Test presence checks."""

    def test_empty_required_fields_are_errors(self):
        fields = [
            field('text', 'name', required=True),
            field('textarea', 'message', required=True),
        ]
        validator = ContactValidator({'name': '', 'message': ''})
        validator.check(fields)

        assert validator.is_valid() is False
        assert validator.get_errors() == {'name': 1, 'message': 1}

    def test_absent_required_field_is_error(self):
        validator = ContactValidator({})
        validator.check([field('text', 'name', required=True)])

        assert validator.errors == {'name': 1}

    def test_optional_field_may_be_empty(self):
        validator = ContactValidator({'company': ''})
        validator.check([field('text', 'company')])

        assert validator.is_valid() is True

    def test_required_false_is_optional(self):
        validator = ContactValidator({'company': ''})
        validator.check([field('text', 'company', required=False)])

        assert validator.is_valid() is True

    def test_alias_key_satisfies_requirement(self):
        fields = [
            field('email', 'email', required='phone'),
            field('tel', 'phone', required='email'),
        ]
        validator = ContactValidator({'email': '', 'phone': '01 23 45 67 89'})
        validator.check(fields)

        assert validator.is_valid() is True

    def test_alias_key_both_empty(self):
        fields = [
            field('email', 'email', required='phone'),
            field('tel', 'phone', required='email'),
        ]
        validator = ContactValidator({'email': '', 'phone': ''})
        validator.check(fields)

        assert validator.errors == {'email': 1, 'phone': 1}

    def test_is_valid_for_single_key(self):
        validator = ContactValidator({'name': 'Jane', 'message': ''})
        validator.check([
            field('text', 'name', required=True),
            field('textarea', 'message', required=True),
        ])

        assert validator.is_valid('name') is True
        assert validator.is_valid('message') is False


class TestFormats:
    """Test email, phone and pattern checks."""

    @pytest.mark.parametrize('value,is_valid', [
        ('a@b.com', True),
        ('jane.doe@example.co.uk', True),
        ('not-an-email', False),
        ('jane@', False),
    ])
    def test_email(self, value, is_valid):
        validator = ContactValidator({'email': value})
        validator.check([field('email', 'email', required=True)])

        assert validator.is_valid('email') is is_valid

    @pytest.mark.parametrize('value,is_valid', [
        ('0123456789', True),
        ('01 23 45 67 89', True),
        ('123', False),
        ('1123456789', False),
        ('0023456789', False),
        ('0123456789\n', False),
    ])
    def test_phone(self, value, is_valid):
        validator = ContactValidator({'phone': value})
        validator.check([field('tel', 'phone', required=True)])

        assert validator.is_valid('phone') is is_valid

    def test_optional_email_still_checked_when_filled(self):
        validator = ContactValidator({'email': 'not-an-email'})
        validator.check([field('email', 'email')])

        assert validator.errors == {'email': 1}

    def test_pattern_must_match_whole_value(self):
        fields = [field('text', 'zip', pattern=r'[0-9]{5}')]

        validator = ContactValidator({'zip': '75001'})
        validator.check(fields)
        assert validator.is_valid() is True

        validator = ContactValidator({'zip': '75001x'})
        validator.check(fields)
        assert validator.errors == {'zip': 1}


class TestFieldRegistryPatterns:
    """Invalid patterns are rejected when the field is added."""

    def test_invalid_pattern(self):
        registry = FieldRegistry()
        with pytest.raises(ImproperlyConfigured):
            registry.add_field('text', 'zip', options={'pattern': '[0-9'})
