"""
Contact Form Email Tasks

Celery task used when CONTACT_SEND_ASYNC is enabled.
"""
import logging

from celery import shared_task

from .sender import build_message

logger = logging.getLogger(__name__)


@shared_task(max_retries=0)
def send_contact_email(receiver, subject, content, from_email, reply_to=None):
    """
    Send a contact form email built by ContactSender.

    Args:
        receiver: Form receiver address
        subject: Email subject
        content: HTML body
        from_email: Sender address
        reply_to: Reply-To addresses

    Failures are logged and re-raised; the task is never retried.
    """
    try:
        sent = build_message(receiver, subject, content, from_email, reply_to).send(fail_silently=False)
    except Exception:
        logger.exception(f"Contact email to {receiver} failed")
        raise

    logger.info(f"Contact email sent to {receiver}")
    return f"Contact email sent to {receiver}" if sent else f"Contact email to {receiver} not sent"
