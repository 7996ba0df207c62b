"""
Contact Form Manager

Builds a contact form and handles its submissions:
security check -> validation -> email -> JSON response.
"""
import logging
from smtplib import SMTPException

from django.conf import settings
from kombu.exceptions import OperationalError
from rest_framework import status
from rest_framework.response import Response

from .fields import FieldRegistry
from .renderer import ContactFormRenderer
from .security import ContactSecurity
from .sender import ContactSender, MissingFieldError
from .validators import ContactValidator

logger = logging.getLogger(__name__)


class ContactManager:
    """
    One contact form: its fields, its security keys and its receiver.

    Usage:
        form = ContactManager('contact-form', 'owner@example.com')
        form.group_fields(
            '<div class="row">%fields</div>',
            form.add_field('text', 'firstname', 'First name', {'required': True}),
            form.add_field('text', 'lastname', 'Last name', {'required': True}),
        )
        form.add_field('email', 'email', 'Email', {'required': True})
        form.add_button('Send')
        registry.register(form)
    """

    def __init__(self, shortcode, receiver, options=None):
        """
        Args:
            shortcode: Form identifier, used for the HTML id and security keys
            receiver: Address the submissions are emailed to
            options: Form options:
                - class: CSS class for the form
        """
        self.shortcode = shortcode
        self.receiver = receiver
        self.options = options or {}
        self.security = ContactSecurity(shortcode)
        self.fields = FieldRegistry()

    @property
    def ajax_key(self):
        return self.security.ajax_key

    def add_field(self, type, name, label=None, options=None):
        return self.fields.add_field(type, name, label, options)

    def group_fields(self, wrapper, *fields):
        return self.fields.group_fields(wrapper, *fields)

    def add_button(self, title=None, options=None):
        return self.fields.add_button(title, options)

    def render(self, action=None):
        """Render the form markup, security fields included."""
        renderer = ContactFormRenderer(self.shortcode, self.security, self.fields, self.options)
        return renderer.render(action)

    def handle(self, request):
        """
        Handle a form submission.

        Args:
            request: DRF request carrying the submitted data

        Returns:
            Response with 403, 400, 200 or 500 status
        """
        data = get_submitted_data(request)

        if not self.security.verify(data):
            return Response({'message': 'Forbidden'}, status=status.HTTP_403_FORBIDDEN)

        data_fields = self.fields.data_fields()

        validator = ContactValidator(data)
        validator.check(data_fields)

        if not validator.is_valid():
            logger.info(f"Form {self.shortcode} rejected: {sorted(validator.errors)}")
            return Response(
                {
                    'message': 'Bad Request',
                    'errors': validator.get_errors(),
                },
                status=status.HTTP_400_BAD_REQUEST
            )

        sender = ContactSender(data_fields, data)
        response = {
            'message': 'Success',
            'success': 1,
        }

        try:
            if self.is_test_mode(request):
                response['data'] = sender.send_test()
            else:
                sender.send_to(self.receiver)
        except MissingFieldError:
            logger.exception(f"Form {self.shortcode} is misconfigured")
            return server_error()
        except (SMTPException, OSError, OperationalError):
            logger.exception(f"Could not send email for form {self.shortcode}")
            return server_error()

        return Response(response, status=status.HTTP_200_OK)

    def is_test_mode(self, request):
        """
        Local hosts get a preview of the email instead of a real send.

        SERVER_NAME comes from the client Host header, so the host list is
        only honoured with DEBUG on. CONTACT_TEST_MODE forces previews.
        """
        if getattr(settings, 'CONTACT_TEST_MODE', False):
            return True

        if not settings.DEBUG:
            return False

        hosts = getattr(settings, 'CONTACT_TEST_MODE_HOSTS', ['localhost', '127.0.0.1'])
        return request.META.get('SERVER_NAME') in hosts

    def __repr__(self):
        return f"<ContactManager {self.shortcode}>"


def get_submitted_data(request):
    """Flatten the request body into a mapping of name -> string."""
    raw = request.data
    if hasattr(raw, 'dict'):
        raw = raw.dict()

    data = {}
    for key, value in raw.items():
        if value is None:
            data[key] = ''
        elif isinstance(value, str):
            data[key] = value
        elif isinstance(value, (int, float, bool)):
            data[key] = str(value)
        # Files and nested values are not form fields
    return data


def server_error():
    return Response(
        {'message': 'Internal Server Error'},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR
    )
