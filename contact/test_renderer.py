"""
Tests for contact form markup.
"""
import pytest
from django.core.exceptions import ImproperlyConfigured

from contact.manager import ContactManager


@pytest.fixture
def form():
    return ContactManager('quote-form', 'owner@example.com')


class TestFormMarkup:
    """Test the form element and its security inputs."""

    def test_form_element(self, form):
        html = form.render()

        assert html.startswith(
            '<form action="/api/contact/submit" class="form-contact" id="quote-form" method="post">'
        )
        assert html.endswith('</form>')
        assert 'name="quote_form_nonce"' in html
        assert 'name="_ajax_key" value="quote_form_send"' in html

    def test_form_class_option(self):
        form = ContactManager('quote-form', 'owner@example.com', {'class': 'wide'})
        assert 'class="form-contact wide"' in form.render()

    def test_custom_action(self, form):
        assert 'action="/elsewhere"' in form.render(action='/elsewhere')


class TestFieldMarkup:
    """Test inputs, textareas and labels."""

    def test_input_with_options(self, form):
        form.add_field('tel', 'phone', 'Phone', {
            'required': True,
            'pattern': '0[0-9]{9}',
            'placeholder': '01 23 45 67 89',
            'input_class': 'input',
            'label_class': 'label',
        })
        html = form.render()

        assert '<label class="label" for="quote-form-phone">Phone</label>' in html
        assert (
            '<input class="input" id="quote-form-phone" name="phone" '
            'pattern="0[0-9]{9}" placeholder="01 23 45 67 89" type="tel" required>'
        ) in html

    def test_alias_required_is_not_html_required(self, form):
        form.add_field('email', 'email', None, {'required': 'phone'})
        html = form.render()

        assert '<input id="quote-form-email" name="email" type="email">' in html
        assert '<label' not in html

    def test_textarea_with_default(self, form):
        form.add_field('textarea', 'message', 'Message', {'rows': 4, 'default': 'Hi & bye'})
        html = form.render()

        assert (
            '<textarea id="quote-form-message" name="message" rows="4">Hi &amp; bye</textarea>'
        ) in html

    def test_input_default_value(self, form):
        form.add_field('text', 'subject', None, {'default': 'Quote "request"'})
        assert 'value="Quote &quot;request&quot;"' in form.render()

    def test_label_is_escaped(self, form):
        form.add_field('text', 'name', '<b>Name</b>')
        assert '&lt;b&gt;Name&lt;/b&gt;' in form.render()

    def test_field_wrapper(self, form):
        form.add_field('text', 'name', None, {'wrapper': '<p class="field">%field</p>'})
        assert '<p class="field"><input id="quote-form-name" name="name" type="text"></p>' in form.render()


class TestGroupMarkup:
    """Test grouped fields."""

    def test_grouped_fields_render_once_inside_wrapper(self, form):
        form.group_fields(
            '<div class="row">%fields</div>',
            form.add_field('text', 'firstname'),
            form.add_field('text', 'lastname'),
        )
        form.add_field('email', 'email')
        html = form.render()

        assert html.count('name="firstname"') == 1
        assert html.count('name="lastname"') == 1
        assert (
            '<div class="row">'
            '<input id="quote-form-firstname" name="firstname" type="text">'
            '<input id="quote-form-lastname" name="lastname" type="text">'
            '</div>'
        ) in html
        assert html.index('class="row"') < html.index('name="email"')

    def test_grouped_fields_are_data_fields(self, form):
        form.group_fields(
            '<div>%fields</div>',
            form.add_field('text', 'firstname'),
            form.add_field('text', 'lastname'),
        )
        form.add_button()

        names = [f['name'] for f in form.fields.data_fields()]
        assert names == ['firstname', 'lastname']

    def test_group_requires_registered_fields(self, form):
        with pytest.raises(ImproperlyConfigured):
            form.group_fields('<div>%fields</div>', {'type': 'text', 'name': 'ghost'})


class TestButtonMarkup:
    """Test the submit button."""

    def test_default_button(self, form):
        form.add_button()
        html = form.render()

        assert '<button class="form-contact-button" id="quote-form-button" type="submit">&rarr;' in html
        assert '<div id="quote-form-loader" class="form-contact-loader">' in html
        assert '<span class="form-contact-spinner"></span>' in html
        assert '<div id="quote-form-success" class="form-contact-success">&check;</div>' in html

    def test_button_title_class_and_wrapper(self, form):
        form.add_button('Send <now>', {'class': 'btn', 'wrapper': '<div class="actions">%button</div>'})
        html = form.render()

        assert '<div class="actions"><button class="btn form-contact-button" id="quote-form-button"' in html
        assert 'Send &lt;now&gt;' in html


class TestFieldRegistration:
    """Test registration rules."""

    def test_duplicate_name(self, form):
        form.add_field('text', 'name')
        with pytest.raises(ImproperlyConfigured):
            form.add_field('email', 'name')

    def test_reserved_type(self, form):
        with pytest.raises(ImproperlyConfigured):
            form.add_field('button', 'submit')
