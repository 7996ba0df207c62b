"""
Shared pytest fixtures for contact form tests.
"""
import pytest
from rest_framework.test import APIClient

from contact import registry
from contact.manager import ContactManager


@pytest.fixture(autouse=True)
def clear_registry():
    """Start and end each test with no registered forms."""
    registry.clear()
    yield
    registry.clear()


@pytest.fixture
def api_client():
    """API client for making requests."""
    return APIClient()


@pytest.fixture
def contact_form():
    """A registered form with a name group, email, phone, subject and message."""
    form = ContactManager('contact-form', 'owner@example.com', {'class': 'site-form'})
    form.group_fields(
        '<div class="row">%fields</div>',
        form.add_field('text', 'firstname', 'First name', {'required': True}),
        form.add_field('text', 'lastname', 'Last name', {'required': True}),
    )
    form.add_field('email', 'email', 'Email', {'required': True})
    form.add_field('tel', 'phone', 'Phone')
    form.add_field('text', 'subject', 'Subject')
    form.add_field('textarea', 'message', 'Message', {'required': True, 'rows': 5})
    form.add_button('Send')
    return registry.register(form)


@pytest.fixture
def valid_data(contact_form):
    """A submission that passes the security check and validation."""
    return {
        contact_form.security.nonce_key: contact_form.security.create_nonce(),
        'required': '',
        '_ajax_key': contact_form.ajax_key,
        'action': contact_form.ajax_key,
        'firstname': 'Jane',
        'lastname': 'Doe',
        'email': 'jane@doe.com',
        'phone': '',
        'subject': 'Hello',
        'message': 'I would like to know more about your services.',
    }
