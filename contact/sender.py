"""
Contact Form Email Sender

Formats the data of a valid submission into an HTML email for the form
receiver, and either sends it or returns a preview of it.
"""
import html
import logging
from email.utils import formataddr

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.mail import EmailMessage
from django.core.validators import validate_email
from django.utils.html import escape

logger = logging.getLogger(__name__)


class ContactError(Exception):
    """Base error for contact form handling."""
    pass


class MissingFieldError(ContactError):
    """Raised when a configured field is absent from the submitted data."""

    def __init__(self, name):
        self.name = name
        super().__init__(f"{name} is missing!")


class ContactSender:
    """
    Build and send the email for a contact form submission.

    Usage:
        sender = ContactSender(fields, data)
        sender.send_to('owner@example.com')
        preview = sender.send_test()
    """

    NAME_FIELD = 'name'
    EMAIL_FIELD = 'email'
    SUBJECT_FIELD = 'subject'
    SUBJECT_DEFAULT = 'Contact'
    EMPTY_VALUE = '--'
    CONTENT_TYPE_HEADER = 'Content-Type: text/html; charset=UTF-8'

    def __init__(self, fields, data):
        self.fields = fields
        self.data = data

    def send_to(self, receiver):
        """
        Send the email to the receiver.

        Inline by default; handed to Celery when CONTACT_SEND_ASYNC is on.
        Transport errors propagate to the caller.
        """
        subject = self.get_subject()
        content = self.get_content()
        from_email = self.get_from_email()
        reply_to = self.get_reply_to()

        if getattr(settings, 'CONTACT_SEND_ASYNC', False):
            from .tasks import send_contact_email
            send_contact_email.delay(receiver, subject, content, from_email, reply_to)
            logger.info(f"Contact email to {receiver} queued")
            return 0

        sent = build_message(receiver, subject, content, from_email, reply_to).send(fail_silently=False)
        logger.info(f"Contact email sent to {receiver}")
        return sent

    def send_test(self):
        """Return the email that would be sent, without sending it."""
        return {
            'subject': self.get_subject(),
            'content': self.get_content(),
            'headers': self.get_headers(),
        }

    def get_subject(self):
        return self.sanitize(self.data.get(self.SUBJECT_FIELD) or self.SUBJECT_DEFAULT)

    def get_content(self):
        """
        HTML body: one paragraph per data field, in registration order.

        Raises:
            MissingFieldError: If a field is absent from the submitted data
        """
        message = ''
        for field in self.fields:
            if field['name'] not in self.data:
                raise MissingFieldError(field['name'])

            label = escape(field.get('label') or '')
            # Decode first so entities typed by the user are not escaped twice
            value = escape(html.unescape(self.data[field['name']] or self.EMPTY_VALUE))

            if label:
                message += f'<p><strong>{label}</strong> {value}</p>'
            else:
                message += f'<p>{value}</p>'

        return f'<html><body>{message}</body></html>'

    def get_headers(self):
        headers = [self.CONTENT_TYPE_HEADER]

        name = self.get_sender_name()
        email = self.get_sender_email()

        if name and email:
            headers.append(f'From: {name} <{email}>')
        elif name:
            headers.append(f'From: <{name}>')
        elif email:
            headers.append(f'From: {email}')

        return headers

    def get_sender_name(self):
        first = self.data.get('first' + self.NAME_FIELD)
        last = self.data.get('last' + self.NAME_FIELD)

        if first and last:
            return self.sanitize(f'{last} {first}')
        if self.data.get(self.NAME_FIELD):
            return self.sanitize(self.data[self.NAME_FIELD])
        return ''

    def get_sender_email(self):
        return self.sanitize(self.data.get(self.EMAIL_FIELD) or '')

    def get_reply_address(self):
        """The submitted email, only when it is a single valid address."""
        email = self.get_sender_email()
        if not email:
            return ''

        try:
            validate_email(email)
        except ValidationError:
            logger.warning(f"Ignoring invalid sender address {email!r}")
            return ''
        return email

    def get_from_email(self):
        """Envelope sender: the submitter when a valid address is known."""
        email = self.get_reply_address()
        if not email:
            return getattr(settings, 'CONTACT_EMAIL_FROM', settings.DEFAULT_FROM_EMAIL)
        return formataddr((self.get_sender_name(), email))

    def get_reply_to(self):
        email = self.get_reply_address()
        return [email] if email else []

    @staticmethod
    def sanitize(value):
        """Remove line breaks to prevent header injection."""
        return str(value).replace('\r', '').replace('\n', '')


def build_message(receiver, subject, content, from_email, reply_to=None):
    message = EmailMessage(
        subject=subject,
        body=content,
        from_email=from_email,
        to=[receiver],
        reply_to=reply_to or None,
    )
    message.content_subtype = 'html'
    return message
