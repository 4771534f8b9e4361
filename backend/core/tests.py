import importlib
from unittest import mock

from django.contrib.auth.models import User
from django.test import SimpleTestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.exceptions import NotFound
from rest_framework.test import APITestCase

from config import settings as config_settings
from user.models import UserProfile

from .exceptions import (
    InvalidArgument, LocationNotFound, RepositoryUnavailable, api_exception_handler
)
from .models import AppSetting


class HealthAPITests(APITestCase):
    def test_health(self):
        response = self.client.get(reverse('health'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'ok')
        self.assertIn('timestamp', response.data)


class ExceptionHandlerTests(SimpleTestCase):
    def test_status_codes(self):
        self.assertEqual(InvalidArgument().status_code, 400)
        self.assertEqual(LocationNotFound().status_code, 400)
        self.assertEqual(RepositoryUnavailable().status_code, 503)

    def test_detail_is_reshaped_into_error(self):
        response = api_exception_handler(InvalidArgument('limit must be a positive integer'), {})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data, {'error': 'limit must be a positive integer'})

    def test_server_errors_are_logged(self):
        with self.assertLogs('core.exceptions', level='ERROR'):
            response = api_exception_handler(RepositoryUnavailable(), {})
        self.assertEqual(response.status_code, 503)

    def test_framework_exceptions_share_the_shape(self):
        response = api_exception_handler(NotFound('Recommendation not found'), {})
        self.assertEqual(response.data, {'error': 'Recommendation not found'})

    def test_unhandled_exceptions_pass_through(self):
        self.assertIsNone(api_exception_handler(ValueError('boom'), {}))


class SettingsTests(SimpleTestCase):
    def tearDown(self):
        importlib.reload(config_settings)

    def test_dotenv_file_is_loaded_from_base_dir(self):
        with mock.patch('dotenv.load_dotenv') as load_dotenv:
            module = importlib.reload(config_settings)
        load_dotenv.assert_called_once_with(dotenv_path=module.BASE_DIR / '.env')

    def test_environment_overrides_defaults(self):
        with mock.patch.dict('os.environ', {'MAX_PAGE_LIMIT': '25', 'DJANGO_DEBUG': 'false'}):
            module = importlib.reload(config_settings)
        self.assertEqual(module.MAX_PAGE_LIMIT, 25)
        self.assertFalse(module.DEBUG)


class AppSettingAPITests(APITestCase):
    def setUp(self):
        admin_user = User.objects.create_user(username='admin', password='password123', is_staff=True)
        UserProfile.objects.create(user=admin_user)
        member = User.objects.create_user(username='member', password='password123')
        UserProfile.objects.create(user=member)
        self.admin = admin_user
        self.member = member
        self.update_url = reverse('app-settings')

    def test_unknown_key_reads_as_null(self):
        response = self.client.get(reverse('app-setting', args=['hero_title']))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'key': 'hero_title', 'value': None})

    def test_staff_can_set_and_replace(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(self.update_url, {'key': 'hero_title', 'value': 'Find your spot'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'key': 'hero_title', 'value': 'Find your spot'})

        self.client.post(self.update_url, {'key': 'hero_title', 'value': 'Go local'}, format='json')
        self.assertEqual(AppSetting.objects.count(), 1)

        self.client.force_authenticate(user=None)
        response = self.client.get(reverse('app-setting', args=['hero_title']))
        self.assertEqual(response.data['value'], 'Go local')

    def test_invalid_payloads(self):
        self.client.force_authenticate(user=self.admin)
        for payload in ({'value': 'x'}, {'key': 'hero_title'}, {'key': 'hero_title', 'value': 3}):
            response = self.client.post(self.update_url, payload, format='json')
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, payload)
            self.assertEqual(response.data, {'error': 'Invalid request: key and value required'})

    def test_members_cannot_write(self):
        payload = {'key': 'hero_title', 'value': 'x'}
        self.assertEqual(self.client.post(self.update_url, payload, format='json').status_code, status.HTTP_401_UNAUTHORIZED)

        self.client.force_authenticate(user=self.member)
        self.assertEqual(self.client.post(self.update_url, payload, format='json').status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(AppSetting.objects.exists())
