"""
Tests for the contact form nonce and honeypot checks.
"""
from contact.security import ContactSecurity


class TestSecurityKeys:
    """Test keys derived from the form identifier."""

    def test_keys_from_shortcode(self):
        security = ContactSecurity('contact-form')

        assert security.nonce_key == 'contact_form_nonce'
        assert security.action_key == 'send-contact_form'
        assert security.ajax_key == 'contact_form_send'
        assert security.honeypot_key == 'required'


class TestNonce:
    """Test nonce issuing and verification."""

    def test_issued_nonce_verifies(self):
        security = ContactSecurity('contact-form')
        assert security.verify_nonce(security.create_nonce()) is True

    def test_missing_nonce_fails(self):
        security = ContactSecurity('contact-form')
        assert security.verify_nonce(None) is False
        assert security.verify_nonce('') is False

    def test_tampered_nonce_fails(self):
        security = ContactSecurity('contact-form')
        token = security.create_nonce()
        tampered = token[:-1] + ('a' if token[-1] != 'a' else 'b')

        assert security.verify_nonce(tampered) is False

    def test_nonce_of_another_form_fails(self):
        other = ContactSecurity('newsletter')
        security = ContactSecurity('contact-form')

        assert security.verify_nonce(other.create_nonce()) is False

    def test_expired_nonce_fails(self, settings):
        security = ContactSecurity('contact-form')
        token = security.create_nonce()
        settings.CONTACT_NONCE_MAX_AGE = -1

        assert security.verify_nonce(token) is False


class TestVerify:
    """Test the full submission security check."""

    def test_valid_submission(self):
        security = ContactSecurity('contact-form')
        data = {security.nonce_key: security.create_nonce(), 'required': ''}

        assert security.verify(data) is True

    def test_honeypot_filled(self):
        security = ContactSecurity('contact-form')
        data = {security.nonce_key: security.create_nonce(), 'required': 'http://spam.example'}

        assert security.verify(data) is False

    def test_honeypot_filled_without_nonce(self):
        security = ContactSecurity('contact-form')
        assert security.verify({'required': 'bot'}) is False


class TestSecurityFields:
    """Test rendered security inputs."""

    def test_security_fields_markup(self):
        security = ContactSecurity('contact-form')
        html = security.security_fields()

        assert 'name="contact_form_nonce"' in html
        assert '<input type="text" name="required"' in html
        assert '<input type="hidden" name="_ajax_key" value="contact_form_send">' in html
