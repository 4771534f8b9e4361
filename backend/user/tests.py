from django.db import IntegrityError, transaction
from django.test import TestCase
from django.urls import reverse
from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.test import APITestCase

from community.models import Like
from recommendations.models import Recommendation
from .models import UserProfile, FollowRelation

User = get_user_model()

class UserProfileTests(TestCase):
    def setUp(self):
        # Create two users for testing interactions
        self.user1 = User.objects.create_user(username='user1', password='password123')
        self.user2 = User.objects.create_user(username='user2', password='password123')

        self.profile1 = UserProfile.objects.create(user=self.user1)
        self.profile2 = UserProfile.objects.create(user=self.user2)

    def test_follow_success(self):
        """Test that one user can successfully follow another."""
        self.profile1.follow(self.profile2)

        self.profile1.refresh_from_db()
        self.profile2.refresh_from_db()

        self.assertEqual(self.profile1.following_count, 1)
        self.assertEqual(self.profile2.followers_count, 1)

        self.assertTrue(self.profile1.is_following(self.profile2))
        self.assertTrue(FollowRelation.objects.filter(follower=self.profile1, following=self.profile2).exists())

    def test_unfollow_success(self):
        """Test that one user can successfully unfollow another."""
        self.profile1.follow(self.profile2)

        self.profile1.unfollow(self.profile2)

        self.profile1.refresh_from_db()
        self.profile2.refresh_from_db()

        self.assertEqual(self.profile1.following_count, 0)
        self.assertEqual(self.profile2.followers_count, 0)

        self.assertFalse(self.profile1.is_following(self.profile2))
        self.assertFalse(FollowRelation.objects.filter(follower=self.profile1, following=self.profile2).exists())

    def test_cannot_follow_self(self):
        """Test that a user cannot follow themselves."""
        self.profile1.follow(self.profile1)

        self.profile1.refresh_from_db()
        self.assertEqual(self.profile1.following_count, 0)

    def test_self_follow_rejected_by_database(self):
        """The check constraint rejects self-follow rows written directly."""
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                FollowRelation.objects.create(follower=self.profile1, following=self.profile1)

    def test_counters_are_plain_values_after_follow(self):
        self.profile1.follow(self.profile2)
        self.assertEqual(self.profile1.following_count, 1)
        self.assertEqual(self.profile2.followers_count, 1)

    def test_is_admin_mirrors_staff_flag(self):
        self.assertFalse(self.profile1.is_admin)
        self.user1.is_staff = True
        self.assertTrue(self.profile1.is_admin)


class UserAPITests(APITestCase):
    def setUp(self):
        self.user1 = User.objects.create_user(username='api_user1', email='one@example.com', password='password123')
        self.profile1 = UserProfile.objects.create(user=self.user1)

        self.user2 = User.objects.create_user(username='api_user2', email='two@example.com', password='password123')
        self.profile2 = UserProfile.objects.create(user=self.user2)

        # Authenticate as user1 for these tests
        self.client.force_authenticate(user=self.user1)

    def test_get_me(self):
        """Test retrieving the current user's profile via API."""
        url = reverse('me')
        response = self.client.get(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['username'], self.user1.username)
        self.assertEqual(response.data['email'], 'one@example.com')

    def test_get_me_requires_authentication(self):
        self.client.force_authenticate(user=None)
        response = self.client.get(reverse('me'))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data, {'error': 'Authentication required'})

    def test_update_me(self):
        response = self.client.patch(
            reverse('me'),
            {'bio': 'Coffee and trails', 'first_name': 'Ada'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['bio'], 'Coffee and trails')
        self.assertEqual(response.data['first_name'], 'Ada')
        self.user1.refresh_from_db()
        self.assertEqual(self.user1.first_name, 'Ada')

    def test_public_profile_hides_email(self):
        response = self.client.get(reverse('profile', args=[self.profile2.id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['username'], 'api_user2')
        self.assertNotIn('email', response.data)

    def test_profile_by_username(self):
        response = self.client.get(reverse('profile-by-username', args=['API_USER2']))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['id'], str(self.profile2.id))

    def test_unknown_profile_returns_404(self):
        response = self.client.get(reverse('profile-by-username', args=['nobody']))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertIn('error', response.data)

    def test_follow_endpoint(self):
        """Test the follow API endpoint."""
        url = reverse('follow', args=[self.profile2.id])
        response = self.client.post(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(self.profile1.is_following(self.profile2))

    def test_follow_self_endpoint(self):
        response = self.client.post(reverse('follow', args=[self.profile1.id]))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(FollowRelation.objects.exists())

    def test_follow_twice_endpoint(self):
        self.client.post(reverse('follow', args=[self.profile2.id]))
        response = self.client.post(reverse('follow', args=[self.profile2.id]))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(FollowRelation.objects.count(), 1)

    def test_follow_requires_authentication(self):
        self.client.force_authenticate(user=None)
        response = self.client.post(reverse('follow', args=[self.profile2.id]))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_unfollow_endpoint(self):
        """Test the unfollow API endpoint."""
        self.profile1.follow(self.profile2)

        url = reverse('unfollow', args=[self.profile2.id])
        response = self.client.post(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(self.profile1.is_following(self.profile2))
        self.assertFalse(self.profile1.is_following(self.profile1))

    def test_unfollow_not_followed_endpoint(self):
        response = self.client.post(reverse('unfollow', args=[self.profile2.id]))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_cannot_follow_already_followed(self):
        """Test that following the same user twice does not increment count or create duplicate relations."""
        self.profile1.follow(self.profile2)
        self.profile1.follow(self.profile2)

        self.profile1.refresh_from_db()
        self.profile2.refresh_from_db()

        self.assertEqual(self.profile1.following_count, 1)
        self.assertEqual(self.profile2.followers_count, 1)
        self.assertEqual(FollowRelation.objects.count(), 1)

    def test_unfollow_not_following(self):
        """Test that unfollowing someone you don't follow does nothing."""
        self.profile1.unfollow(self.profile2)

        self.profile1.refresh_from_db()
        self.assertEqual(self.profile1.following_count, 0)

    def test_user_stats(self):
        rec = Recommendation.objects.create(user=self.profile2, title='Blue Bottle', rating=5)
        Recommendation.objects.create(user=self.profile2, title='Sightglass', rating=4)
        Like.objects.create(user=self.profile1, recommendation=rec)
        self.profile1.follow(self.profile2)

        response = self.client.get(reverse('user-stats', args=[self.profile2.id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {
            'recommendations_count': 2,
            'followers_count': 1,
            'following_count': 0,
            'likes_count': 1,
        })

    def test_featured_users_ranked_by_recommendations(self):
        Recommendation.objects.create(user=self.profile1, title='Tartine', rating=5)
        for title in ('Zuni', 'Nopa'):
            Recommendation.objects.create(user=self.profile2, title=title, rating=4)

        response = self.client.get(reverse('featured-users'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([u['username'] for u in response.data], ['api_user2', 'api_user1'])
        self.assertEqual(response.data[0]['recommendations_count'], 2)


class AuthAPITests(APITestCase):
    def test_register_creates_user_and_profile(self):
        response = self.client.post(reverse('register'), {
            'username': 'newcomer',
            'email': 'New@Example.com',
            'password': 'long-enough-pass',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['email'], 'new@example.com')
        self.assertTrue(UserProfile.objects.filter(user__username='newcomer').exists())

    def test_register_rejects_taken_username(self):
        User.objects.create_user(username='taken', password='password123')
        response = self.client.post(reverse('register'), {
            'username': 'Taken',
            'email': 'x@example.com',
            'password': 'long-enough-pass',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('username', response.data['error'])

    def test_login_and_logout(self):
        user = User.objects.create_user(username='walker', password='password123')
        UserProfile.objects.create(user=user)

        response = self.client.post(reverse('login'), {'username': 'walker', 'password': 'password123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['username'], 'walker')
        self.assertEqual(self.client.get(reverse('me')).status_code, status.HTTP_200_OK)

        response = self.client.post(reverse('logout'))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(self.client.get(reverse('me')).status_code, status.HTTP_401_UNAUTHORIZED)

    def test_login_with_wrong_password(self):
        User.objects.create_user(username='walker', password='password123')
        response = self.client.post(reverse('login'), {'username': 'walker', 'password': 'nope'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data, {'error': 'Invalid username or password'})
