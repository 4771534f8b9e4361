"""
API views for locations app endpoints.
"""
from django.conf import settings
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from community.services import serialize_with_like_counts
from core.exceptions import InvalidArgument
from core.params import parse_float, viewer_id
from .services import GeoService, Geocoder


class MapSearchView(APIView):
    """
    Find recommendations near a location.

    Query parameters:
    - lat, lng: float center coordinates (skip geocoding when both are given)
    - location: free-text place name, geocoded when lat/lng are absent
    - radius: float in miles (default: MAP_DEFAULT_RADIUS_MILES)
    """

    permission_classes = [AllowAny]

    def get(self, request):
        radius = parse_float(
            request.query_params.get('radius'),
            'radius',
            default=settings.MAP_DEFAULT_RADIUS_MILES
        )
        latitude, longitude = self._resolve_center(request)

        recommendations = GeoService().find_within_radius(
            latitude,
            longitude,
            radius,
            viewer_id=viewer_id(request)
        )
        return Response({
            'center': {'latitude': latitude, 'longitude': longitude},
            'radius': radius,
            'count': len(recommendations),
            'recommendations': serialize_with_like_counts(recommendations),
        })

    def _resolve_center(self, request):
        lat = parse_float(request.query_params.get('lat'), 'lat')
        lng = parse_float(request.query_params.get('lng'), 'lng')
        if lat is not None and lng is not None:
            return lat, lng

        location = (request.query_params.get('location') or '').strip()
        if location:
            return Geocoder().geocode(location)

        raise InvalidArgument("Provide either a location or lat and lng")
