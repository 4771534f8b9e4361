import math
from datetime import timedelta
from unittest import mock

import requests
from django.contrib.auth import get_user_model
from django.test import SimpleTestCase, TestCase, override_settings
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from core.exceptions import InvalidArgument, LocationNotFound
from recommendations.models import Recommendation
from user.models import UserProfile
from .services import GeoService, Geocoder, haversine_miles

User = get_user_model()

NEW_YORK = (40.7128, -74.0060)
LOS_ANGELES = (34.0522, -118.2437)
JERSEY_CITY = (40.7178, -74.0431)
PHILADELPHIA = (39.9526, -75.1652)


def make_profile(username):
    user = User.objects.create_user(username=username, password='password123')
    return UserProfile.objects.create(user=user)


class HaversineTests(SimpleTestCase):
    def test_distance_to_self_is_zero(self):
        self.assertEqual(haversine_miles(*NEW_YORK, *NEW_YORK), 0)

    def test_new_york_to_los_angeles(self):
        """Test distance calculation between points."""
        distance = haversine_miles(*NEW_YORK, *LOS_ANGELES)
        # Mean Earth radius of 3959 miles
        self.assertAlmostEqual(distance, 2445.7, delta=1)
        # Published great-circle figure is about 2451 miles
        self.assertAlmostEqual(distance, 2451, delta=10)

    def test_distance_is_symmetric(self):
        self.assertAlmostEqual(
            haversine_miles(*NEW_YORK, *PHILADELPHIA),
            haversine_miles(*PHILADELPHIA, *NEW_YORK)
        )

    def test_is_location_valid(self):
        self.assertTrue(GeoService.is_location_valid(90, -180))
        self.assertFalse(GeoService.is_location_valid(100.0, 0))
        self.assertFalse(GeoService.is_location_valid(0, 200.0))


class StubRepository:
    """In-memory stand-in returning a fixed candidate list."""

    def __init__(self, candidates):
        self.candidates = candidates
        self.viewer_ids = []

    def located_visible_to(self, viewer_id):
        self.viewer_ids.append(viewer_id)
        return list(self.candidates)


class GeoServiceTests(SimpleTestCase):
    def setUp(self):
        self.near = Recommendation(title='Jersey City', rating=4, latitude=JERSEY_CITY[0], longitude=JERSEY_CITY[1])
        self.far = Recommendation(title='Philadelphia', rating=4, latitude=PHILADELPHIA[0], longitude=PHILADELPHIA[1])
        self.unplaced = Recommendation(title='Online', rating=4)
        self.repository = StubRepository([self.near, self.unplaced, self.far])
        self.service = GeoService(repository=self.repository)

    def test_keeps_candidates_inside_radius_in_order(self):
        results = self.service.find_within_radius(*NEW_YORK, 100)
        self.assertEqual(results, [self.near, self.far])

        results = self.service.find_within_radius(*NEW_YORK, 10)
        self.assertEqual(results, [self.near])

    def test_boundary_is_inclusive(self):
        distance = haversine_miles(*NEW_YORK, self.far.latitude, self.far.longitude)

        self.assertIn(self.far, self.service.find_within_radius(*NEW_YORK, distance))
        self.assertNotIn(self.far, self.service.find_within_radius(*NEW_YORK, math.nextafter(distance, 0)))

    def test_zero_radius_matches_exact_location(self):
        results = self.service.find_within_radius(*JERSEY_CITY, 0)
        self.assertEqual(results, [self.near])

    def test_passes_viewer_to_repository(self):
        viewer = object()
        self.service.find_within_radius(*NEW_YORK, 5, viewer_id=viewer)
        self.assertEqual(self.repository.viewer_ids, [viewer])

    def test_rejects_invalid_input(self):
        for args in ((91, 0, 10), (0, -181, 10), (0, 0, -1), (0, 0, float('nan')), (0, 0, float('inf'))):
            with self.assertRaises(InvalidArgument):
                self.service.find_within_radius(*args)
        self.assertEqual(self.repository.viewer_ids, [])

    def test_search_is_idempotent(self):
        first = self.service.find_within_radius(*NEW_YORK, 100)
        second = self.service.find_within_radius(*NEW_YORK, 100)
        self.assertEqual(first, second)


class GeoServiceDatabaseTests(TestCase):
    def setUp(self):
        self.owner = make_profile('owner')
        self.stranger = make_profile('stranger')
        self.now = timezone.now()
        self.public = Recommendation.objects.create(
            user=self.owner, title='Katz', rating=5,
            latitude=NEW_YORK[0], longitude=NEW_YORK[1],
            created_at=self.now - timedelta(minutes=2)
        )
        self.private = Recommendation.objects.create(
            user=self.owner, title='Secret bar', rating=5, is_private=True,
            latitude=JERSEY_CITY[0], longitude=JERSEY_CITY[1],
            created_at=self.now - timedelta(minutes=1)
        )
        self.service = GeoService()

    def test_private_recommendations_only_reach_their_owner(self):
        for viewer_id in (None, self.stranger.id):
            results = self.service.find_within_radius(*NEW_YORK, 50, viewer_id=viewer_id)
            self.assertEqual(results, [self.public])

        results = self.service.find_within_radius(*NEW_YORK, 50, viewer_id=self.owner.id)
        self.assertEqual(results, [self.private, self.public])


class GeocoderTests(SimpleTestCase):
    def setUp(self):
        self.geocoder = Geocoder(url='https://geocoder.test/search', user_agent='tests/1.0', timeout=3)

    def mock_response(self, payload):
        response = mock.Mock()
        response.json.return_value = payload
        response.raise_for_status.return_value = None
        return response

    @mock.patch('locations.services.requests.get')
    def test_geocode(self, mock_get):
        mock_get.return_value = self.mock_response([{'lat': '40.7128', 'lon': '-74.0060'}])

        self.assertEqual(self.geocoder.geocode('New York'), NEW_YORK)
        mock_get.assert_called_once_with(
            'https://geocoder.test/search',
            params={'q': 'New York', 'format': 'json', 'limit': 1},
            headers={'User-Agent': 'tests/1.0', 'Accept': 'application/json'},
            timeout=3
        )

    @mock.patch('locations.services.requests.get')
    def test_no_match(self, mock_get):
        mock_get.return_value = self.mock_response([])
        with self.assertLogs('locations.services', level='WARNING'):
            with self.assertRaises(LocationNotFound):
                self.geocoder.geocode('Atlantis')

    @mock.patch('locations.services.requests.get')
    def test_provider_unreachable(self, mock_get):
        mock_get.side_effect = requests.ConnectionError('down')
        with self.assertRaises(LocationNotFound):
            self.geocoder.geocode('New York')

    @mock.patch('locations.services.requests.get')
    def test_provider_error_status(self, mock_get):
        response = self.mock_response(None)
        response.raise_for_status.side_effect = requests.HTTPError('502')
        mock_get.return_value = response
        with self.assertRaises(LocationNotFound):
            self.geocoder.geocode('New York')

    @mock.patch('locations.services.requests.get')
    def test_malformed_result(self, mock_get):
        mock_get.return_value = self.mock_response([{'display_name': 'New York'}])
        with self.assertRaises(LocationNotFound):
            self.geocoder.geocode('New York')

    @override_settings(GEOCODER_URL='https://configured.test/search', GEOCODER_USER_AGENT='configured', GEOCODER_TIMEOUT=7)
    def test_defaults_come_from_settings(self):
        geocoder = Geocoder()
        self.assertEqual(geocoder.url, 'https://configured.test/search')
        self.assertEqual(geocoder.user_agent, 'configured')
        self.assertEqual(geocoder.timeout, 7)


class MapSearchAPITests(APITestCase):
    def setUp(self):
        self.owner = make_profile('mapper')
        self.url = reverse('map-search')
        self.nearby = Recommendation.objects.create(
            user=self.owner, title='Jersey City diner', rating=4,
            latitude=JERSEY_CITY[0], longitude=JERSEY_CITY[1]
        )
        Recommendation.objects.create(
            user=self.owner, title='Venice Beach', rating=5,
            latitude=LOS_ANGELES[0], longitude=LOS_ANGELES[1]
        )

    def test_search_by_coordinates(self):
        response = self.client.get(self.url, {'lat': NEW_YORK[0], 'lng': NEW_YORK[1], 'radius': 10})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['center'], {'latitude': NEW_YORK[0], 'longitude': NEW_YORK[1]})
        self.assertEqual(response.data['radius'], 10)
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['recommendations'][0]['id'], str(self.nearby.id))
        self.assertEqual(response.data['recommendations'][0]['likeCount'], 0)

    def test_default_radius(self):
        response = self.client.get(self.url, {'lat': NEW_YORK[0], 'lng': NEW_YORK[1]})
        self.assertEqual(response.data['radius'], 50)
        self.assertEqual(response.data['count'], 1)

    @mock.patch('locations.services.requests.get')
    def test_search_by_location_name(self, mock_get):
        mock_get.return_value.json.return_value = [{'lat': str(LOS_ANGELES[0]), 'lon': str(LOS_ANGELES[1])}]

        response = self.client.get(self.url, {'location': 'Los Angeles'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['center'], {'latitude': LOS_ANGELES[0], 'longitude': LOS_ANGELES[1]})
        self.assertEqual([r['title'] for r in response.data['recommendations']], ['Venice Beach'])

    @mock.patch('locations.services.requests.get')
    def test_unknown_location(self, mock_get):
        mock_get.return_value.json.return_value = []

        response = self.client.get(self.url, {'location': 'Atlantis'})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {'error': 'Location not found'})

    def test_missing_center(self):
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {'error': 'Provide either a location or lat and lng'})

    def test_invalid_parameters(self):
        for params in (
            {'lat': 'north', 'lng': 0},
            {'lat': 95, 'lng': 0},
            {'lat': 0, 'lng': 0, 'radius': -5},
            {'lat': 0, 'lng': 0, 'radius': 'nan'},
        ):
            response = self.client.get(self.url, params)
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, params)

    @override_settings(GEOCODER_URL='https://configured.test/search', GEOCODER_TIMEOUT=4)
    @mock.patch('locations.services.requests.get')
    def test_geocoder_settings_apply_per_request(self, mock_get):
        mock_get.return_value.json.return_value = [{'lat': str(NEW_YORK[0]), 'lon': str(NEW_YORK[1])}]

        response = self.client.get(self.url, {'location': 'New York'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(mock_get.call_args.args[0], 'https://configured.test/search')
        self.assertEqual(mock_get.call_args.kwargs['timeout'], 4)
