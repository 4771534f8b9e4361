"""
Helpers for reading query parameters and the requesting user in API views.
Malformed values raise InvalidArgument so views can fail fast.
"""
import math
import uuid

from django.conf import settings
from rest_framework import status
from rest_framework.response import Response

from .exceptions import InvalidArgument


def viewer_profile(request):
    """
    Returns the authenticated user's profile, or None for anonymous requests
    and accounts that have no profile (e.g. bare superusers).
    """
    if not request.user or not request.user.is_authenticated:
        return None
    return getattr(request.user, 'profile', None)


def viewer_id(request):
    profile = viewer_profile(request)
    return profile.id if profile else None


def staff_denial(request):
    """
    Returns the error Response for requesters who may not manage site
    content (401 when anonymous, 403 for members), or None for staff users
    with a profile.
    """
    if not request.user or not request.user.is_authenticated:
        return Response({'error': 'Authentication required'}, status=status.HTTP_401_UNAUTHORIZED)
    if not request.user.is_staff or viewer_profile(request) is None:
        return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)
    return None


def is_staff(request):
    return bool(request.user and request.user.is_authenticated and request.user.is_staff)


def parse_uuid(value, name):
    if value in (None, ''):
        return None
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise InvalidArgument(f"{name} must be a valid UUID")


def parse_int(value, name, default=None):
    if value in (None, ''):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidArgument(f"{name} must be an integer")


def parse_positive_int(value, name, default=None):
    """Positive integer no greater than settings.MAX_PAGE_LIMIT."""
    number = parse_int(value, name, default)
    if number is not None and number <= 0:
        raise InvalidArgument(f"{name} must be a positive integer")
    if number is not None and number > settings.MAX_PAGE_LIMIT:
        raise InvalidArgument(f"{name} must be at most {settings.MAX_PAGE_LIMIT}")
    return number


def parse_float(value, name, default=None):
    if value in (None, ''):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidArgument(f"{name} must be a number")
    if not math.isfinite(number):
        raise InvalidArgument(f"{name} must be a finite number")
    return number


def parse_bool(value):
    if value == 'true':
        return True
    if value == 'false':
        return False
    return None
