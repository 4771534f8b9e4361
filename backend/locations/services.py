"""
Domain services for the locations app: great-circle radius search over
recommendations and free-text geocoding.
"""
import logging
import math
from typing import List, Optional, Tuple
from uuid import UUID

import requests
from django.conf import settings

from core.exceptions import InvalidArgument, LocationNotFound
from recommendations.models import Recommendation
from recommendations.repository import RecommendationRepository

logger = logging.getLogger(__name__)

EARTH_RADIUS_MILES = 3959


def haversine_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Great-circle distance in miles between two points given in degrees.
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)

    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_MILES * c


class GeoService:
    """
    Domain Service that encapsulates all spatial business logic.
    Candidates come from the repository already filtered for visibility;
    distance filtering is a linear scan that keeps their recency order.
    """

    def __init__(self, repository: Optional[RecommendationRepository] = None):
        self.repository = repository or RecommendationRepository()

    def find_within_radius(
        self,
        latitude: float,
        longitude: float,
        radius_miles: float,
        viewer_id: Optional[UUID] = None,
    ) -> List[Recommendation]:
        """
        Returns the recommendations visible to the viewer whose coordinates
        lie within radius_miles of the center, newest first.

        Args:
            latitude: Center latitude in degrees (-90 to 90)
            longitude: Center longitude in degrees (-180 to 180)
            radius_miles: Search radius in miles; the boundary is inclusive
            viewer_id: UserProfile id of the viewer, or None when anonymous

        Raises:
            InvalidArgument: coordinates out of range or radius negative
            RepositoryUnavailable: a storage read failed
        """
        if not self.is_location_valid(latitude, longitude):
            raise InvalidArgument("Invalid coordinates: latitude must be -90 to 90, longitude must be -180 to 180")
        if not math.isfinite(radius_miles) or radius_miles < 0:
            raise InvalidArgument("radius must be a non-negative number of miles")

        candidates = self.repository.located_visible_to(viewer_id)

        results = []
        for rec in candidates:
            if rec.latitude is None or rec.longitude is None:
                continue
            if haversine_miles(latitude, longitude, rec.latitude, rec.longitude) <= radius_miles:
                results.append(rec)

        logger.debug(
            f"Radius search ({latitude}, {longitude}) r={radius_miles}mi: "
            f"{len(results)} of {len(candidates)} candidates"
        )
        return results

    @staticmethod
    def is_location_valid(lat: float, lon: float) -> bool:
        """
        Validates if the coordinates fall within supported bounds.

        Args:
            lat: Latitude coordinate
            lon: Longitude coordinate

        Returns:
            Boolean indicating if coordinates are valid
        """
        return -90 <= lat <= 90 and -180 <= lon <= 180


class Geocoder:
    """
    Adapter over an HTTP geocoding API (OpenStreetMap Nominatim by default)
    that turns free-text locations into coordinates.
    """

    def __init__(self, url: str = None, user_agent: str = None, timeout: float = None):
        """
        Falls back to Django settings for anything not provided.
        """
        self.url = url or settings.GEOCODER_URL
        self.user_agent = user_agent or settings.GEOCODER_USER_AGENT
        self.timeout = timeout or settings.GEOCODER_TIMEOUT

    def geocode(self, query: str) -> Tuple[float, float]:
        """
        Resolves a location string to (latitude, longitude).

        Raises:
            LocationNotFound: nothing matched, or the provider could not be reached
        """
        params = {
            'q': query,
            'format': 'json',
            'limit': 1,
        }
        headers = {
            'User-Agent': self.user_agent,
            'Accept': 'application/json',
        }

        try:
            response = requests.get(self.url, params=params, headers=headers, timeout=self.timeout)
            response.raise_for_status()
            results = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Geocoding request for '{query}' failed: {str(e)}")
            raise LocationNotFound() from e

        if not results:
            logger.warning(f"No geocoding result for '{query}'")
            raise LocationNotFound()

        try:
            return float(results[0]['lat']), float(results[0]['lon'])
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.warning(f"Malformed geocoding result for '{query}': {str(e)}")
            raise LocationNotFound() from e
