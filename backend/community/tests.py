"""
Tests for the activity feed, likes and comments.
"""
from datetime import timedelta
from unittest import mock

from django.contrib.auth.models import User
from django.db import DatabaseError
from django.test import TestCase, override_settings
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from community.models import Comment, Like
from community.services import FeedService
from core.exceptions import InvalidArgument, RepositoryUnavailable
from recommendations.models import Category, Recommendation
from recommendations.repository import RecommendationRepository
from user.models import UserProfile


def make_profile(username):
    user = User.objects.create_user(username=username, password='password123')
    return UserProfile.objects.create(user=user)


class RecommendationFactoryMixin:
    """Creates recommendations whose age is given in minutes before setUp."""

    def setUp(self):
        self.now = timezone.now()

    def post(self, profile, age_minutes, **kwargs):
        kwargs.setdefault('title', f"{profile} #{age_minutes}")
        kwargs.setdefault('description', 'Worth the trip')
        kwargs.setdefault('rating', 4)
        return Recommendation.objects.create(
            user=profile,
            created_at=self.now - timedelta(minutes=age_minutes),
            **kwargs
        )


class FeedServiceTestCase(RecommendationFactoryMixin, TestCase):
    """Test cases for FeedService.compose_feed"""

    def setUp(self):
        super().setUp()
        self.viewer = make_profile('viewer')
        self.alice = make_profile('alice')
        self.bob = make_profile('bob')
        self.carol = make_profile('carol')
        self.service = FeedService()

    def assertNewestFirst(self, recommendations):
        timestamps = [rec.created_at for rec in recommendations]
        self.assertEqual(timestamps, sorted(timestamps, reverse=True))

    def test_anonymous_feed_is_newest_first_and_bounded(self):
        for age in (7, 3, 12, 1, 9, 5):
            self.post(self.alice if age % 2 else self.bob, age)

        feed = self.service.compose_feed(None, limit=4)

        self.assertEqual(len(feed), 4)
        self.assertNewestFirst(feed)
        self.assertEqual([self.now - rec.created_at for rec in feed],
                         [timedelta(minutes=m) for m in (1, 3, 5, 7)])

    def test_anonymous_feed_shorter_than_limit(self):
        self.post(self.alice, 1)
        self.assertEqual(len(self.service.compose_feed(None, limit=20)), 1)

    def test_default_limit(self):
        for age in range(30):
            self.post(self.carol, age)
        self.assertEqual(len(self.service.compose_feed(None)), 20)

    def test_viewer_without_follows_never_sees_own_recommendations(self):
        own = [self.post(self.viewer, age) for age in range(5)]
        self.post(self.alice, 10)
        self.post(self.bob, 11)

        feed = self.service.compose_feed(self.viewer.id, limit=20)

        self.assertEqual(len(feed), 2)
        self.assertFalse({rec.id for rec in own} & {rec.id for rec in feed})

    def test_viewer_with_follows_never_sees_own_recommendations(self):
        self.viewer.follow(self.alice)
        self.post(self.viewer, 0)
        self.post(self.alice, 1)
        self.post(self.carol, 2)

        feed = self.service.compose_feed(self.viewer.id, limit=20)

        self.assertNotIn(self.viewer.id, {rec.user_id for rec in feed})
        self.assertEqual(len(feed), 2)

    def test_social_priority_under_scarcity(self):
        """Prolific strangers cannot push followed users out of the feed."""
        self.viewer.follow(self.alice)
        for age in range(100, 120):
            self.post(self.alice, age)
        for age in range(20):
            self.post(self.carol, age)

        feed = self.service.compose_feed(self.viewer.id, limit=30)

        self.assertEqual(len(feed), 25)
        self.assertEqual(sum(1 for rec in feed if rec.user_id == self.alice.id), 15)
        self.assertEqual(sum(1 for rec in feed if rec.user_id == self.carol.id), 10)
        self.assertNewestFirst(feed)

    def test_social_and_community_interleave_by_recency(self):
        self.viewer.follow(self.alice)
        social = [self.post(self.alice, age) for age in (2, 4, 6)]
        community = [self.post(self.carol, age) for age in (1, 3, 5)]

        feed = self.service.compose_feed(self.viewer.id, limit=10)

        self.assertEqual(
            [rec.id for rec in feed],
            [community[0].id, social[0].id, community[1].id, social[1].id, community[2].id, social[2].id]
        )

    def test_truncates_after_merge(self):
        self.viewer.follow(self.alice)
        self.viewer.follow(self.bob)
        alice_posts = [self.post(self.alice, age) for age in range(10, 30)]
        bob_posts = [self.post(self.bob, age) for age in range(1, 6)]
        for age in (1000, 1001, 1002):
            self.post(self.carol, age)

        feed = self.service.compose_feed(self.viewer.id, limit=10)

        expected = [rec.id for rec in bob_posts] + [rec.id for rec in alice_posts[:5]]
        self.assertEqual([rec.id for rec in feed], expected)
        self.assertNotIn(self.carol.id, {rec.user_id for rec in feed})

    def test_private_recommendations_are_hidden_from_other_viewers(self):
        self.viewer.follow(self.alice)
        hidden = self.post(self.alice, 0, is_private=True)
        hidden_community = self.post(self.carol, 1, is_private=True)
        self.post(self.alice, 2)

        for viewer_id in (None, self.viewer.id, self.bob.id):
            ids = {rec.id for rec in self.service.compose_feed(viewer_id, limit=50)}
            self.assertNotIn(hidden.id, ids)
            self.assertNotIn(hidden_community.id, ids)

    def test_category_filter_applies_to_both_sets(self):
        coffee = Category.objects.create(name='Coffee')
        self.viewer.follow(self.alice)
        social = self.post(self.alice, 1, category=coffee)
        self.post(self.alice, 2)
        community = self.post(self.carol, 3, category=coffee)
        self.post(self.carol, 4)

        feed = self.service.compose_feed(self.viewer.id, category_id=coffee.id, limit=10)

        self.assertEqual([rec.id for rec in feed], [social.id, community.id])

    def test_feed_is_idempotent(self):
        self.viewer.follow(self.alice)
        for age in range(8):
            self.post(self.alice if age % 2 else self.carol, age)

        first = [rec.id for rec in self.service.compose_feed(self.viewer.id, limit=6)]
        second = [rec.id for rec in self.service.compose_feed(self.viewer.id, limit=6)]
        self.assertEqual(first, second)

    def test_rejects_non_positive_limit(self):
        for limit in (0, -1):
            with self.assertRaises(InvalidArgument):
                self.service.compose_feed(None, limit=limit)
        with self.assertRaises(InvalidArgument):
            self.service.compose_feed(self.viewer.id, limit=True)

    @override_settings(MAX_PAGE_LIMIT=50)
    def test_rejects_limit_above_maximum(self):
        with self.assertRaises(InvalidArgument):
            self.service.compose_feed(None, limit=51)
        self.assertEqual(self.service.compose_feed(None, limit=50), [])

    def test_split_is_configurable(self):
        self.viewer.follow(self.alice)
        for age in range(5):
            self.post(self.alice, age)
            self.post(self.carol, age + 10)

        feed = FeedService(social_limit=2, community_limit=1).compose_feed(self.viewer.id, limit=10)

        self.assertEqual(len(feed), 3)

    def test_community_failure_fails_the_whole_feed(self):
        repository = mock.Mock(spec=RecommendationRepository)
        repository.followed_user_ids.return_value = [self.alice.id]
        repository.find.side_effect = [[self.post(self.alice, 1)], RepositoryUnavailable()]

        with self.assertRaises(RepositoryUnavailable):
            FeedService(repository=repository).compose_feed(self.viewer.id, limit=10)


class RecommendationRepositoryTestCase(TestCase):
    def test_database_errors_become_repository_unavailable(self):
        repository = RecommendationRepository()
        with mock.patch.object(Recommendation.objects, 'filter', side_effect=DatabaseError('down')):
            with self.assertLogs('recommendations.repository', level='ERROR'):
                with self.assertRaises(RepositoryUnavailable):
                    repository.find([])

    def test_follow_lookup_errors_become_repository_unavailable(self):
        repository = RecommendationRepository()
        profile = make_profile('lonely')
        with mock.patch('recommendations.repository.FollowRelation.objects.filter', side_effect=DatabaseError('down')):
            with self.assertRaises(RepositoryUnavailable):
                repository.followed_user_ids(profile.id)


class LikeModelTestCase(TestCase):
    def setUp(self):
        self.profile = make_profile('liker')
        self.rec = Recommendation.objects.create(user=make_profile('author'), title='Dolores Park', rating=5)

    def test_toggle_is_idempotent(self):
        Like.toggle(self.profile, self.rec, True)
        Like.toggle(self.profile, self.rec, True)
        self.assertEqual(Like.objects.count(), 1)

        Like.toggle(self.profile, self.rec, False)
        Like.toggle(self.profile, self.rec, False)
        self.assertEqual(Like.objects.count(), 0)

    def test_counts_for_defaults_to_zero(self):
        other = Recommendation.objects.create(user=self.profile, title='Lands End', rating=4)
        Like.toggle(self.profile, self.rec, True)

        self.assertEqual(Like.counts_for([self.rec.id, other.id]), {self.rec.id: 1, other.id: 0})
        self.assertEqual(Like.counts_for([]), {})


class ActivityFeedAPITestCase(RecommendationFactoryMixin, APITestCase):
    """Test cases for the activity feed endpoint"""

    def setUp(self):
        super().setUp()
        self.viewer = make_profile('feeduser')
        self.author = make_profile('author')
        self.url = reverse('activity-feed')

    def test_anonymous_feed(self):
        newer = self.post(self.author, 1)
        older = self.post(self.author, 2)
        self.post(self.author, 0, is_private=True)
        Like.toggle(self.viewer, older, True)

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item['id'] for item in response.data], [str(newer.id), str(older.id)])
        self.assertEqual(response.data[1]['likeCount'], 1)
        self.assertEqual(response.data[0]['userId'], str(self.author.id))

    def test_authenticated_feed_excludes_own_recommendations(self):
        self.post(self.viewer, 0)
        community = self.post(self.author, 1)
        self.client.force_authenticate(user=self.viewer.user)

        response = self.client.get(self.url, {'limit': 5})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item['id'] for item in response.data], [str(community.id)])

    def test_invalid_limit(self):
        response = self.client.get(self.url, {'limit': 0})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {'error': 'limit must be a positive integer'})

        response = self.client.get(self.url, {'limit': 'ten'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    @override_settings(MAX_PAGE_LIMIT=100)
    def test_oversized_limit_is_rejected_before_storage(self):
        with mock.patch.object(RecommendationRepository, 'find') as find:
            response = self.client.get(self.url, {'limit': '100000000000000000000'})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {'error': 'limit must be at most 100'})
        find.assert_not_called()

    @override_settings(FEED_SOCIAL_LIMIT=1, FEED_COMMUNITY_LIMIT=1)
    def test_feed_limits_follow_settings(self):
        followed = make_profile('followed')
        self.viewer.follow(followed)
        for age in range(3):
            self.post(followed, age)
            self.post(self.author, age + 10)
        self.client.force_authenticate(user=self.viewer.user)

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)

    def test_invalid_category(self):
        response = self.client.get(self.url, {'categoryId': 'coffee'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_storage_failure_returns_503(self):
        with mock.patch.object(RecommendationRepository, 'find', side_effect=RepositoryUnavailable()):
            with self.assertLogs('core.exceptions', level='ERROR'):
                response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertIn('error', response.data)


class LikeAPITestCase(APITestCase):
    def setUp(self):
        self.profile = make_profile('liker')
        self.author = make_profile('author')
        self.rec = Recommendation.objects.create(user=self.author, title='Tartine', rating=5)
        self.url = reverse('like', args=[self.rec.id])
        self.client.force_authenticate(user=self.profile.user)

    def test_like_and_unlike(self):
        response = self.client.post(self.url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'recommendationId': str(self.rec.id), 'liked': True, 'likeCount': 1})

        response = self.client.post(self.url)
        self.assertEqual(response.data['likeCount'], 1)

        response = self.client.delete(self.url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['liked'], False)
        self.assertEqual(response.data['likeCount'], 0)

    def test_like_requires_authentication(self):
        self.client.force_authenticate(user=None)
        response = self.client.post(self.url)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_cannot_like_someone_elses_private_recommendation(self):
        self.rec.is_private = True
        self.rec.save()
        response = self.client.post(self.url)
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(Like.objects.exists())

    def test_user_likes(self):
        self.client.post(self.url)
        response = self.client.get(reverse('user-likes'))
        self.assertEqual(response.data, [str(self.rec.id)])

        self.client.force_authenticate(user=None)
        response = self.client.get(reverse('user-likes'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, [])


class CommentAPITestCase(APITestCase):
    def setUp(self):
        self.profile = make_profile('commenter')
        self.author = make_profile('author')
        self.rec = Recommendation.objects.create(user=self.author, title='Ferry Building', rating=4)
        self.url = reverse('comments', args=[self.rec.id])
        self.client.force_authenticate(user=self.profile.user)

    def test_comment_and_threaded_replies(self):
        response = self.client.post(self.url, {'text': '  Great oysters  '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['text'], 'Great oysters')
        self.assertEqual(response.data['username'], 'commenter')
        top_id = response.data['id']

        reply = self.client.post(self.url, {'text': 'Agreed', 'parentId': top_id}, format='json')
        self.assertEqual(reply.status_code, status.HTTP_201_CREATED)
        nested = self.client.post(self.url, {'text': 'Same', 'parentId': reply.data['id']}, format='json')
        self.assertEqual(nested.data['parentId'], top_id)

        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual([r['text'] for r in response.data[0]['replies']], ['Agreed', 'Same'])

    def test_blank_comment_rejected(self):
        response = self.client.post(self.url, {'text': '   '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Comment.objects.exists())

    def test_unknown_parent_rejected(self):
        other = Recommendation.objects.create(user=self.author, title='Coit Tower', rating=3)
        foreign = Comment.objects.create(user=self.author, recommendation=other, text='Elsewhere')
        response = self.client.post(self.url, {'text': 'Hi', 'parentId': str(foreign.id)}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_comment_requires_authentication(self):
        self.client.force_authenticate(user=None)
        response = self.client.post(self.url, {'text': 'Hello'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
