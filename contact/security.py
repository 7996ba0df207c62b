"""
Contact Form Security

Anti-spam protection shared by the form renderer and the request handler:
a signed nonce binding a rendered form to its submission, and a honeypot
input that humans leave empty.
"""
import logging

from django.conf import settings
from django.core import signing
from django.utils.html import format_html

logger = logging.getLogger(__name__)


class ContactSecurity:
    """
    Security keys and checks for one contact form.

    Usage:
        security = ContactSecurity('contact-form')
        html = security.security_fields()
        if not security.verify(request_data):
            ...
    """

    HONEYPOT_KEY = 'required'
    AJAX_KEY_FIELD = '_ajax_key'
    NONCE_SALT = 'contact.nonce'

    def __init__(self, shortcode):
        key = shortcode.replace('-', '_')
        self.shortcode = shortcode
        self.honeypot_key = self.HONEYPOT_KEY
        self.nonce_key = f'{key}_nonce'
        self.action_key = f'send-{key}'
        self.ajax_key = f'{key}_send'
        self.signer = signing.TimestampSigner(salt=self.NONCE_SALT)

    @property
    def max_age(self):
        return getattr(settings, 'CONTACT_NONCE_MAX_AGE', 86400)

    def create_nonce(self):
        """Sign the form action; the result is embedded in the rendered form."""
        return self.signer.sign(self.action_key)

    def verify_nonce(self, token):
        """
        Check a nonce issued by create_nonce().

        Returns:
            True if the token is intact, unexpired and bound to this form
        """
        if not token:
            return False

        try:
            action = self.signer.unsign(token, max_age=self.max_age)
        except signing.SignatureExpired:
            logger.info(f"Expired nonce for form {self.shortcode}")
            return False
        except signing.BadSignature:
            return False

        return action == self.action_key

    def security_fields(self):
        """Render the nonce, honeypot and dispatch key inputs."""
        return format_html(
            '<input type="hidden" id="{0}" name="{0}" value="{1}">'
            '<input type="text" name="{2}" class="form-contact-honeypot" tabindex="-1" autocomplete="off">'
            '<input type="hidden" name="{3}" value="{4}">',
            self.nonce_key,
            self.create_nonce(),
            self.honeypot_key,
            self.AJAX_KEY_FIELD,
            self.ajax_key,
        )

    def verify(self, data):
        """
        Check the security of a form submission.

        Args:
            data: Submitted form data

        Returns:
            True if the nonce is valid and the honeypot is empty
        """
        if not self.verify_nonce(data.get(self.nonce_key)):
            logger.warning(f"Missing or invalid nonce for form {self.shortcode}")
            return False

        if data.get(self.honeypot_key):
            logger.warning(f"Honeypot filled on form {self.shortcode}")
            return False

        return True
