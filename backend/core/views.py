"""
API views for service-level endpoints.
"""
import logging

from django.conf import settings
from django.utils import timezone
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import AppSetting
from .params import staff_denial

logger = logging.getLogger(__name__)


class HealthView(APIView):
    """Liveness endpoint for load balancers and uptime checks."""

    permission_classes = [AllowAny]

    def get(self, request):
        return Response({
            'status': 'ok',
            'timestamp': timezone.now().isoformat(),
            'environment': 'development' if settings.DEBUG else 'production',
        })


class AppSettingView(APIView):
    """
    GET /settings/<key>/: public read, value is null for unknown keys.
    """

    permission_classes = [AllowAny]

    def get(self, request, key):
        return Response({'key': key, 'value': AppSetting.get_value(key)})


class AppSettingUpdateView(APIView):
    """
    POST /settings/: create or replace a setting (staff only).
    Body: {"key": str, "value": str}
    """

    permission_classes = [AllowAny]

    def post(self, request):
        denied = staff_denial(request)
        if denied:
            return denied

        key = request.data.get('key')
        value = request.data.get('value')
        if not isinstance(key, str) or not key.strip() or len(key) > 100 or not isinstance(value, str):
            return Response(
                {'error': 'Invalid request: key and value required'},
                status=status.HTTP_400_BAD_REQUEST
            )

        setting = AppSetting.set_value(key.strip(), value)
        logger.info(f"Setting {setting.key} updated by {request.user.username}")
        return Response({'key': setting.key, 'value': setting.value})
