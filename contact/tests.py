"""
Tests for the contact form endpoints.
"""
import re
from smtplib import SMTPException
from unittest.mock import patch

import pytest
from django.core.exceptions import ImproperlyConfigured
from kombu.exceptions import OperationalError
from rest_framework import status

from contact import registry
from contact.manager import ContactManager

SUBMIT_URL = '/api/contact/submit'


class TestSecurityCheck:
    """Test rejection of forged and automated submissions."""

    def test_missing_nonce(self, api_client, valid_data, contact_form, mailoutbox):
        del valid_data[contact_form.security.nonce_key]

        response = api_client.post(SUBMIT_URL, valid_data)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json() == {'message': 'Forbidden'}
        assert len(mailoutbox) == 0

    def test_tampered_nonce(self, api_client, valid_data, contact_form):
        valid_data[contact_form.security.nonce_key] = 'send-contact_form:1abcde:forged'

        response = api_client.post(SUBMIT_URL, valid_data)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_honeypot_with_valid_nonce(self, api_client, valid_data, mailoutbox):
        valid_data['required'] = 'http://spam.example'

        response = api_client.post(SUBMIT_URL, valid_data)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert len(mailoutbox) == 0

    def test_honeypot_without_nonce(self, api_client, valid_data, contact_form):
        del valid_data[contact_form.security.nonce_key]
        valid_data['required'] = 'bot'

        response = api_client.post(SUBMIT_URL, valid_data)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_security_runs_before_validation(self, api_client, valid_data, contact_form):
        del valid_data[contact_form.security.nonce_key]
        valid_data['email'] = ''

        response = api_client.post(SUBMIT_URL, valid_data)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert 'errors' not in response.json()


class TestValidation:
    """Test field-indexed validation errors."""

    def test_empty_required_fields(self, api_client, valid_data):
        valid_data['firstname'] = ''
        valid_data['message'] = ''

        response = api_client.post(SUBMIT_URL, valid_data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {
            'message': 'Bad Request',
            'errors': {'firstname': 1, 'message': 1},
        }

    def test_invalid_email(self, api_client, valid_data):
        valid_data['email'] = 'not-an-email'

        response = api_client.post(SUBMIT_URL, valid_data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['errors'] == {'email': 1}

    def test_invalid_phone(self, api_client, valid_data):
        valid_data['phone'] = '123'

        response = api_client.post(SUBMIT_URL, valid_data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['errors'] == {'phone': 1}

    def test_valid_phone(self, api_client, valid_data, mailoutbox):
        valid_data['phone'] = '0123456789'

        response = api_client.post(SUBMIT_URL, valid_data)

        assert response.status_code == status.HTTP_200_OK


class TestSending:
    """Test successful submissions."""

    def test_email_sent_to_receiver(self, api_client, valid_data, mailoutbox):
        response = api_client.post(SUBMIT_URL, valid_data)

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {'message': 'Success', 'success': 1}

        assert len(mailoutbox) == 1
        message = mailoutbox[0]
        assert message.to == ['owner@example.com']
        assert message.subject == 'Hello'
        assert message.from_email == 'Doe Jane <jane@doe.com>'
        assert '<p><strong>Phone</strong> --</p>' in message.body

    def test_ajax_key_field_used_without_action(self, api_client, valid_data, mailoutbox):
        del valid_data['action']

        response = api_client.post(SUBMIT_URL, valid_data)

        assert response.status_code == status.HTTP_200_OK

    def test_json_body(self, api_client, valid_data, mailoutbox):
        response = api_client.post(SUBMIT_URL, valid_data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert len(mailoutbox) == 1

    def test_preview_on_local_host(self, api_client, valid_data, mailoutbox, settings):
        settings.DEBUG = True

        response = api_client.post(SUBMIT_URL, valid_data, SERVER_NAME='localhost')

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body['success'] == 1
        assert body['data']['subject'] == 'Hello'
        assert 'From: Doe Jane <jane@doe.com>' in body['data']['headers']
        assert '<p><strong>First name</strong> Jane</p>' in body['data']['content']
        assert len(mailoutbox) == 0

    def test_local_host_ignored_without_debug(self, api_client, valid_data, mailoutbox, settings):
        settings.DEBUG = False

        response = api_client.post(SUBMIT_URL, valid_data, SERVER_NAME='localhost')

        assert response.status_code == status.HTTP_200_OK
        assert 'data' not in response.json()
        assert len(mailoutbox) == 1

    def test_preview_forced_by_setting(self, api_client, valid_data, mailoutbox, settings):
        settings.CONTACT_TEST_MODE = True

        response = api_client.post(SUBMIT_URL, valid_data)

        assert response.status_code == status.HTTP_200_OK
        assert 'data' in response.json()
        assert len(mailoutbox) == 0


class TestFailures:
    """Test configuration and transport failures."""

    def test_unknown_dispatch_key(self, api_client, valid_data):
        valid_data['action'] = 'unknown_send'
        valid_data['_ajax_key'] = 'unknown_send'

        response = api_client.post(SUBMIT_URL, valid_data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {'message': 'Bad Request'}

    def test_body_that_is_not_an_object(self, api_client, mailoutbox):
        response = api_client.post(SUBMIT_URL, [1, 2], format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {'message': 'Bad Request'}
        assert len(mailoutbox) == 0

    def test_missing_configured_field(self, api_client, valid_data, mailoutbox):
        del valid_data['subject']

        response = api_client.post(SUBMIT_URL, valid_data)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {'message': 'Internal Server Error'}
        assert len(mailoutbox) == 0

    def test_mail_transport_failure(self, api_client, valid_data):
        with patch('django.core.mail.EmailMessage.send', side_effect=SMTPException('down')):
            response = api_client.post(SUBMIT_URL, valid_data)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {'message': 'Internal Server Error'}

    def test_mail_connection_refused(self, api_client, valid_data):
        with patch('django.core.mail.EmailMessage.send', side_effect=ConnectionRefusedError()):
            response = api_client.post(SUBMIT_URL, valid_data)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {'message': 'Internal Server Error'}

    def test_broker_unavailable(self, api_client, valid_data, mailoutbox, settings):
        settings.CONTACT_SEND_ASYNC = True

        with patch('contact.tasks.send_contact_email.delay',
                   side_effect=OperationalError('Connection refused')):
            response = api_client.post(SUBMIT_URL, valid_data)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {'message': 'Internal Server Error'}
        assert len(mailoutbox) == 0


class TestRenderView:
    """Test the rendered form endpoint."""

    def test_render_registered_form(self, api_client, contact_form):
        response = api_client.get('/api/contact/forms/contact-form/')

        assert response.status_code == status.HTTP_200_OK
        assert response['Content-Type'].startswith('text/html')
        html = response.content.decode()
        assert 'id="contact-form"' in html
        assert 'class="form-contact site-form"' in html
        assert 'name="contact_form_nonce"' in html

    def test_rendered_nonce_is_accepted(self, api_client, contact_form, valid_data, mailoutbox):
        html = api_client.get('/api/contact/forms/contact-form/').content.decode()
        nonce = re.search(r'name="contact_form_nonce" value="([^"]+)"', html).group(1)
        valid_data['contact_form_nonce'] = nonce

        response = api_client.post(SUBMIT_URL, valid_data)

        assert response.status_code == status.HTTP_200_OK

    def test_render_unknown_form(self, api_client):
        response = api_client.get('/api/contact/forms/missing/')

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestRegistry:
    """Test form registration."""

    def test_lookup_by_ajax_key(self, contact_form):
        assert registry.get_form_by_ajax_key('contact_form_send') is contact_form
        assert registry.get_form_by_ajax_key(None) is None

    def test_duplicate_registration(self, contact_form):
        with pytest.raises(ImproperlyConfigured):
            registry.register(ContactManager('contact-form', 'other@example.com'))

    def test_identifiers_with_the_same_key(self, contact_form):
        with pytest.raises(ImproperlyConfigured):
            registry.register(ContactManager('contact_form', 'other@example.com'))

        assert registry.get_form('contact_form') is None
        assert registry.get_form_by_ajax_key('contact_form_send') is contact_form

    def test_load_from_settings(self, settings):
        settings.CONTACT_FORMS = [
            {
                'shortcode': 'support',
                'receiver': 'support@example.com',
                'options': {'class': 'support-form'},
                'fields': [
                    {
                        'type': 'group',
                        'wrapper': '<div class="row">%fields</div>',
                        'fields': [
                            {'type': 'text', 'name': 'firstname', 'label': 'First name'},
                            {'type': 'text', 'name': 'lastname', 'label': 'Last name'},
                        ],
                    },
                    {'type': 'email', 'name': 'email', 'options': {'required': True}},
                    {'type': 'button', 'title': 'Send'},
                ],
            },
        ]

        loaded = registry.load_from_settings()

        assert len(loaded) == 1
        form = registry.get_form('support')
        assert form.receiver == 'support@example.com'
        assert [f['name'] for f in form.fields.data_fields()] == ['firstname', 'lastname', 'email']
        assert form.fields.is_grouped('firstname')
        assert registry.get_form_by_ajax_key('support_send') is form

    def test_settings_entry_without_receiver(self, settings):
        settings.CONTACT_FORMS = [{'shortcode': 'broken'}]

        with pytest.raises(ImproperlyConfigured):
            registry.load_from_settings()
