"""
Contact Form Views

Public endpoints for rendering contact forms and receiving their submissions.
"""
import logging
from collections.abc import Mapping

from django.http import HttpResponse
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from . import registry
from .security import ContactSecurity

logger = logging.getLogger(__name__)


class ContactFormSubmitView(APIView):
    """
    Public endpoint for contact form submissions.

    POST /api/contact/submit

    The form is selected by its dispatch key, sent as "action" by the
    front-end script or as the hidden "_ajax_key" input. The nonce
    embedded in the form replaces Django's CSRF cookie check.
    """

    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request):
        """Submit a contact form."""
        if not isinstance(request.data, Mapping):
            logger.info(f"Contact submission body is not an object: {type(request.data).__name__}")
            return Response({'message': 'Bad Request'}, status=status.HTTP_400_BAD_REQUEST)

        ajax_key = request.data.get('action') or request.data.get(ContactSecurity.AJAX_KEY_FIELD)
        manager = registry.get_form_by_ajax_key(ajax_key)

        if manager is None:
            logger.info(f"Submission for unknown contact form: {ajax_key!r}")
            return Response({'message': 'Bad Request'}, status=status.HTTP_400_BAD_REQUEST)

        return manager.handle(request)


class ContactFormRenderView(APIView):
    """
    Rendered contact form markup.

    GET /api/contact/forms/<shortcode>/
    """

    authentication_classes = []
    permission_classes = [AllowAny]

    def get(self, request, shortcode):
        """Return the form as an HTML fragment."""
        manager = registry.get_form(shortcode)

        if manager is None:
            return Response({'message': 'Not Found'}, status=status.HTTP_404_NOT_FOUND)

        return HttpResponse(manager.render(), content_type='text/html; charset=utf-8')
