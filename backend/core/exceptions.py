"""
Domain exceptions shared by the feed, map search and recommendation apps.

They subclass DRF's APIException so services can raise them directly and the
framework turns them into HTTP responses.
"""
import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class InvalidArgument(APIException):
    """Malformed caller input: bad limit, coordinates or radius."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid argument.'
    default_code = 'invalid_argument'


class LocationNotFound(APIException):
    """The geocoder could not resolve a free-text location."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Location not found'
    default_code = 'location_not_found'


class RepositoryUnavailable(APIException):
    """A read against the recommendation store failed."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'Recommendation storage is unavailable.'
    default_code = 'repository_unavailable'


def api_exception_handler(exc, context):
    """
    Wraps DRF's default handler so every error body has the shape
    {"error": ...} used throughout the API.

    Server-side failures are logged with the view that raised them.
    """
    response = exception_handler(exc, context)
    if response is None:
        return None

    data = response.data
    if isinstance(data, dict) and set(data.keys()) == {'detail'}:
        data = data['detail']
    response.data = {'error': data}

    if response.status_code >= 500:
        view = context.get('view')
        logger.error(
            f"{exc.__class__.__name__} in {view.__class__.__name__ if view else 'unknown view'}: {exc}"
        )
    return response
