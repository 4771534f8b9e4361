"""
Tests for the recommendations module.
"""
from datetime import timedelta

from django.contrib.auth.models import User
from django.test import SimpleTestCase, TestCase, override_settings
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from community.models import Like
from recommendations.filters import (
    CategoryEquals, HasLocation, HasProTip, OwnerIn, OwnerNotIn, VisibleTo, combine
)
from recommendations.models import (
    AdminRecommend, Category, CuratorRec, Recommendation, Section, SectionRecommendation, Tag
)
from recommendations.repository import RecommendationRepository
from user.models import UserProfile


def make_profile(username, **user_fields):
    user = User.objects.create_user(username=username, password='password123', **user_fields)
    return UserProfile.objects.create(user=user)


class RecommendationModelTestCase(TestCase):
    """Test cases for Recommendation and Tag models"""

    def setUp(self):
        self.profile = make_profile('modeluser')

    def test_coordinates_must_be_paired(self):
        with self.assertRaises(ValueError):
            Recommendation.objects.create(user=self.profile, title='Half', rating=3, latitude=40.0)

    def test_coordinates_must_be_in_range(self):
        with self.assertRaises(ValueError):
            Recommendation.objects.create(user=self.profile, title='Nowhere', rating=3, latitude=91, longitude=0)
        with self.assertRaises(ValueError):
            Recommendation.objects.create(user=self.profile, title='Nowhere', rating=3, latitude=0, longitude=-181)

    def test_has_location(self):
        rec = Recommendation.objects.create(user=self.profile, title='Pier 39', rating=2, latitude=37.8, longitude=-122.4)
        self.assertTrue(rec.has_location)
        self.assertFalse(Recommendation(user=self.profile, title='Online', rating=5).has_location)

    def test_visibility(self):
        other = make_profile('other')
        rec = Recommendation.objects.create(user=self.profile, title='Secret spot', rating=5, is_private=True)
        self.assertTrue(rec.is_visible_to(self.profile.id))
        self.assertFalse(rec.is_visible_to(other.id))
        self.assertFalse(rec.is_visible_to(None))

    def test_tags_are_normalized(self):
        Tag.objects.create(name='coffee')
        tags = Tag.get_or_create_many([' Coffee', 'brunch', 'BRUNCH', '', None])
        self.assertEqual([tag.name for tag in tags], ['coffee', 'brunch'])
        self.assertEqual(Tag.objects.count(), 2)


class FilterTestCase(SimpleTestCase):
    def test_owner_filters_accept_any_iterable(self):
        self.assertEqual(OwnerIn(['a', 'b']).user_ids, ('a', 'b'))
        self.assertEqual(OwnerNotIn(iter(['a'])), OwnerNotIn(('a',)))

    def test_filters_are_immutable(self):
        with self.assertRaises(Exception):
            CategoryEquals('x').category_id = 'y'

    def test_empty_combination_matches_everything(self):
        self.assertEqual(combine([]), combine(()))
        self.assertFalse(combine([]))


class RecommendationRepositoryTestCase(TestCase):
    def setUp(self):
        self.now = timezone.now()
        self.alice = make_profile('alice')
        self.bob = make_profile('bob')
        self.repository = RecommendationRepository()

    def post(self, profile, age_minutes, **kwargs):
        return Recommendation.objects.create(
            user=profile,
            title=f"{profile} #{age_minutes}",
            rating=4,
            created_at=self.now - timedelta(minutes=age_minutes),
            **kwargs
        )

    def test_followed_user_ids(self):
        carol = make_profile('carol')
        self.alice.follow(self.bob)
        self.alice.follow(carol)
        self.assertCountEqual(self.repository.followed_user_ids(self.alice.id), [self.bob.id, carol.id])
        self.assertEqual(self.repository.followed_user_ids(self.bob.id), [])

    def test_find_orders_newest_first_and_limits(self):
        recs = [self.post(self.alice, age) for age in (5, 1, 3)]
        found = self.repository.find([], limit=2)
        self.assertEqual([rec.id for rec in found], [recs[1].id, recs[2].id])

    def test_find_combines_filters(self):
        coffee = Category.objects.create(name='Coffee')
        match = self.post(self.alice, 1, category=coffee, pro_tip='Order the cortado')
        self.post(self.alice, 2, category=coffee, pro_tip='')
        self.post(self.bob, 3, category=coffee, pro_tip='Sit outside')

        found = self.repository.find([OwnerIn([self.alice.id]), CategoryEquals(coffee.id), HasProTip(True)])
        self.assertEqual([rec.id for rec in found], [match.id])

        without_tip = self.repository.find([HasProTip(False)])
        self.assertEqual(len(without_tip), 1)

    def test_owner_not_in(self):
        self.post(self.alice, 1)
        bob_rec = self.post(self.bob, 2)
        found = self.repository.find([OwnerNotIn([self.alice.id])])
        self.assertEqual([rec.id for rec in found], [bob_rec.id])

    def test_visible_to(self):
        public = self.post(self.alice, 2)
        private = self.post(self.alice, 1, is_private=True)

        self.assertEqual([r.id for r in self.repository.find([VisibleTo(None)])], [public.id])
        self.assertEqual([r.id for r in self.repository.find([VisibleTo(self.bob.id)])], [public.id])
        self.assertEqual(
            [r.id for r in self.repository.find([VisibleTo(self.alice.id)])],
            [private.id, public.id]
        )

    def test_located_visible_to(self):
        located = self.post(self.alice, 1, latitude=37.77, longitude=-122.42)
        self.post(self.alice, 2)
        self.post(self.bob, 3, latitude=37.78, longitude=-122.41, is_private=True)

        found = self.repository.located_visible_to(self.alice.id)
        self.assertEqual([rec.id for rec in found], [located.id])
        self.assertEqual(self.repository.find([HasLocation()])[0].id, located.id)


class RecommendationAPITestCase(APITestCase):
    """Test cases for recommendation CRUD endpoints"""

    def setUp(self):
        self.owner = make_profile('owner')
        self.other = make_profile('other')
        self.list_url = reverse('recommendations:recommendation-list')
        self.payload = {
            'title': 'Blue Bottle Coffee',
            'description': 'Best pour-over in town',
            'rating': 5,
            'proTip': 'Go before 9am',
            'location': 'Oakland, CA',
            'latitude': 37.8044,
            'longitude': -122.2712,
            'tags': ['Coffee', 'cafe'],
        }

    def detail_url(self, rec):
        return reverse('recommendations:recommendation-detail', args=[rec.id])

    def test_create_requires_authentication(self):
        response = self.client.post(self.list_url, self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data, {'error': 'Authentication required'})

    def test_create_recommendation(self):
        self.client.force_authenticate(user=self.owner.user)
        response = self.client.post(self.list_url, self.payload, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['userId'], str(self.owner.id))
        self.assertEqual(response.data['proTip'], 'Go before 9am')
        self.assertEqual(sorted(response.data['tags']), ['cafe', 'coffee'])
        self.assertEqual(response.data['likeCount'], 0)
        self.assertFalse(response.data['isPrivate'])

    def test_create_rejects_unpaired_coordinates(self):
        self.client.force_authenticate(user=self.owner.user)
        del self.payload['longitude']
        response = self.client.post(self.list_url, self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Recommendation.objects.exists())

    def test_create_rejects_out_of_range_values(self):
        self.client.force_authenticate(user=self.owner.user)
        for field, value in (('latitude', 95), ('longitude', 200), ('rating', 6)):
            payload = dict(self.payload, **{field: value})
            response = self.client.post(self.list_url, payload, format='json')
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, field)

    def test_create_with_someone_elses_category(self):
        foreign = Category.objects.create(name='Secret list', user=self.other)
        prebuilt = Category.objects.create(name='Food')
        self.client.force_authenticate(user=self.owner.user)

        response = self.client.post(self.list_url, dict(self.payload, categoryId=str(foreign.id)), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.post(self.list_url, dict(self.payload, categoryId=str(prebuilt.id)), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['categoryId'], str(prebuilt.id))

    def test_list_hides_private_recommendations_from_others(self):
        public = Recommendation.objects.create(user=self.owner, title='Public', rating=4)
        private = Recommendation.objects.create(user=self.owner, title='Private', rating=4, is_private=True)

        response = self.client.get(self.list_url)
        self.assertEqual([item['id'] for item in response.data], [str(public.id)])

        self.client.force_authenticate(user=self.owner.user)
        response = self.client.get(self.list_url, {'userId': str(self.owner.id)})
        self.assertEqual({item['id'] for item in response.data}, {str(public.id), str(private.id)})

    def test_list_filters(self):
        coffee = Category.objects.create(name='Coffee')
        tipped = Recommendation.objects.create(user=self.owner, title='Tipped', rating=4, category=coffee, pro_tip='Ask for oat milk')
        Recommendation.objects.create(user=self.other, title='Plain', rating=3)
        Like.objects.create(user=self.other, recommendation=tipped)

        response = self.client.get(self.list_url, {'categoryId': str(coffee.id)})
        self.assertEqual([item['id'] for item in response.data], [str(tipped.id)])
        self.assertEqual(response.data[0]['likeCount'], 1)

        response = self.client.get(self.list_url, {'hasProTip': 'false'})
        self.assertEqual([item['title'] for item in response.data], ['Plain'])

        response = self.client.get(self.list_url, {'limit': 1})
        self.assertEqual(len(response.data), 1)

    def test_list_rejects_bad_parameters(self):
        self.assertEqual(self.client.get(self.list_url, {'userId': 'me'}).status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self.client.get(self.list_url, {'limit': -3}).status_code, status.HTTP_400_BAD_REQUEST)

    @override_settings(MAX_PAGE_LIMIT=100)
    def test_list_rejects_oversized_limit(self):
        response = self.client.get(self.list_url, {'limit': '100000000000000000000'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {'error': 'limit must be at most 100'})

        self.assertEqual(self.client.get(self.list_url, {'limit': 100}).status_code, status.HTTP_200_OK)

    def test_retrieve(self):
        rec = Recommendation.objects.create(user=self.owner, title='Alcatraz', rating=5)
        response = self.client.get(self.detail_url(rec))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['user']['username'], 'owner')
        self.assertIsNone(response.data['category'])

    def test_retrieve_private_as_stranger_is_not_found(self):
        rec = Recommendation.objects.create(user=self.owner, title='Hidden', rating=5, is_private=True)
        self.client.force_authenticate(user=self.other.user)
        self.assertEqual(self.client.get(self.detail_url(rec)).status_code, status.HTTP_404_NOT_FOUND)

        self.client.force_authenticate(user=self.owner.user)
        self.assertEqual(self.client.get(self.detail_url(rec)).status_code, status.HTTP_200_OK)

    def test_update_by_owner(self):
        rec = Recommendation.objects.create(user=self.owner, title='Old title', rating=3)
        self.client.force_authenticate(user=self.owner.user)
        response = self.client.patch(self.detail_url(rec), {'title': 'New title', 'tags': ['views']}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['title'], 'New title')
        self.assertEqual(response.data['tags'], ['views'])

    def test_update_keeps_coordinates_paired(self):
        rec = Recommendation.objects.create(user=self.owner, title='Pinned', rating=3)
        self.client.force_authenticate(user=self.owner.user)
        response = self.client.patch(self.detail_url(rec), {'latitude': 10}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_by_other_user_is_forbidden(self):
        rec = Recommendation.objects.create(user=self.owner, title='Mine', rating=3)
        self.client.force_authenticate(user=self.other.user)
        response = self.client.patch(self.detail_url(rec), {'title': 'Yours'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertIn('error', response.data)

    def test_delete(self):
        rec = Recommendation.objects.create(user=self.owner, title='Gone soon', rating=1)
        self.client.force_authenticate(user=self.other.user)
        self.assertEqual(self.client.delete(self.detail_url(rec)).status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=self.owner.user)
        self.assertEqual(self.client.delete(self.detail_url(rec)).status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Recommendation.objects.exists())

    def test_pro_tips(self):
        tipped = Recommendation.objects.create(user=self.owner, title='Tipped', rating=4, pro_tip='Book ahead')
        Recommendation.objects.create(user=self.owner, title='Private tip', rating=4, pro_tip='Shh', is_private=True)
        Recommendation.objects.create(user=self.owner, title='No tip', rating=4)

        self.client.force_authenticate(user=self.owner.user)
        response = self.client.get(reverse('recommendations:recommendation-pro-tips'))
        self.assertEqual([item['id'] for item in response.data], [str(tipped.id)])


class CategoryAPITestCase(APITestCase):
    def setUp(self):
        self.owner = make_profile('owner')
        self.other = make_profile('other')
        self.prebuilt = Category.objects.create(name='Food')
        self.url = reverse('recommendations:category-list')

    def test_list_shows_prebuilt_and_own(self):
        Category.objects.create(name='Mine', user=self.owner)
        Category.objects.create(name='Theirs', user=self.other)

        self.assertEqual([c['name'] for c in self.client.get(self.url).data], ['Food'])

        self.client.force_authenticate(user=self.owner.user)
        self.assertEqual([c['name'] for c in self.client.get(self.url).data], ['Food', 'Mine'])

    def test_create_category(self):
        self.client.force_authenticate(user=self.owner.user)
        response = self.client.post(self.url, {'name': '  Bookstores '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['name'], 'Bookstores')
        self.assertEqual(response.data['userId'], str(self.owner.id))

        response = self.client.post(self.url, {'name': 'food'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_category(self):
        mine = Category.objects.create(name='Mine', user=self.owner)
        rec = Recommendation.objects.create(user=self.owner, title='Filed', rating=4, category=mine)
        detail = reverse('recommendations:category-detail', args=[mine.id])

        self.client.force_authenticate(user=self.other.user)
        self.assertEqual(self.client.delete(detail).status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=self.owner.user)
        self.assertEqual(self.client.delete(detail).status_code, status.HTTP_204_NO_CONTENT)
        rec.refresh_from_db()
        self.assertIsNone(rec.category)

    def test_tags(self):
        Tag.get_or_create_many(['parks', 'coffee'])
        response = self.client.get(reverse('recommendations:tags'))
        self.assertEqual([t['name'] for t in response.data], ['coffee', 'parks'])


class CuratorRecAPITestCase(APITestCase):
    def setUp(self):
        self.admin = make_profile('curator', is_staff=True)
        self.member = make_profile('member')
        self.rec = Recommendation.objects.create(user=self.member, title='Muir Woods', rating=5)
        self.manage_url = reverse('recommendations:curator-rec-manage', args=[self.rec.id])

    def test_staff_can_curate(self):
        self.client.force_authenticate(user=self.admin.user)
        response = self.client.post(self.manage_url)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['curatedBy'], str(self.admin.id))

        self.assertEqual(self.client.post(self.manage_url).status_code, status.HTTP_200_OK)
        self.assertEqual(CuratorRec.objects.count(), 1)

        response = self.client.get(reverse('recommendations:curator-rec-ids'))
        self.assertEqual(response.data, [str(self.rec.id)])

        self.assertEqual(self.client.delete(self.manage_url).status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(CuratorRec.objects.exists())

    def test_members_cannot_curate(self):
        self.client.force_authenticate(user=self.member.user)
        self.assertEqual(self.client.post(self.manage_url).status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(
            self.client.get(reverse('recommendations:curator-rec-ids')).status_code,
            status.HTTP_403_FORBIDDEN
        )

        self.client.force_authenticate(user=None)
        self.assertEqual(self.client.post(self.manage_url).status_code, status.HTTP_401_UNAUTHORIZED)

    def test_private_recommendations_cannot_be_curated(self):
        self.rec.is_private = True
        self.rec.save()
        self.client.force_authenticate(user=self.admin.user)
        self.assertEqual(self.client.post(self.manage_url).status_code, status.HTTP_400_BAD_REQUEST)

    def test_public_list(self):
        CuratorRec.objects.create(recommendation=self.rec, curated_by=self.admin)
        response = self.client.get(reverse('recommendations:curator-rec-list'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item['id'] for item in response.data], [str(self.rec.id)])


class SectionModelTestCase(TestCase):
    def setUp(self):
        self.admin = make_profile('editor', is_staff=True)
        self.section = Section.objects.create(title='Weekend picks', created_by=self.admin)

    def test_add_recommendation_appends_in_order(self):
        first = Recommendation.objects.create(user=self.admin, title='Ferry Building', rating=5)
        second = Recommendation.objects.create(user=self.admin, title='Coit Tower', rating=4)

        entry, created = self.section.add_recommendation(first)
        self.assertTrue(created)
        self.assertEqual(entry.display_order, 0)
        self.assertEqual(self.section.add_recommendation(second)[0].display_order, 1)

        again, created = self.section.add_recommendation(first)
        self.assertFalse(created)
        self.assertEqual(again.id, entry.id)

    def test_section_is_capped(self):
        for n in range(Section.MAX_RECOMMENDATIONS):
            rec = Recommendation.objects.create(user=self.admin, title=f"Spot {n}", rating=3)
            self.section.add_recommendation(rec)

        overflow = Recommendation.objects.create(user=self.admin, title='One too many', rating=3)
        with self.assertRaises(ValueError):
            self.section.add_recommendation(overflow)
        self.assertEqual(self.section.entries.count(), Section.MAX_RECOMMENDATIONS)


class AdminRecommendAPITestCase(APITestCase):
    def setUp(self):
        self.admin = make_profile('editor', is_staff=True)
        self.member = make_profile('member')
        self.list_url = reverse('content:admin-recommend-list')
        self.payload = {
            'title': 'Noise-cancelling headphones',
            'imageUrl': 'https://img.test/headphones.jpg',
            'externalUrl': 'https://shop.test/headphones',
            'price': '$199',
        }

    def detail_url(self, admin_recommend):
        return reverse('content:admin-recommend-detail', args=[admin_recommend.id])

    def test_staff_create_update_toggle_delete(self):
        self.client.force_authenticate(user=self.admin.user)

        response = self.client.post(self.list_url, self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['createdBy'], str(self.admin.id))
        self.assertTrue(response.data['isVisible'])
        admin_recommend = AdminRecommend.objects.get()

        response = self.client.patch(self.detail_url(admin_recommend), {'price': '$149'}, format='json')
        self.assertEqual(response.data['price'], '$149')

        toggle_url = reverse('content:admin-recommend-toggle-visibility', args=[admin_recommend.id])
        self.assertFalse(self.client.post(toggle_url).data['isVisible'])
        self.assertTrue(self.client.post(toggle_url).data['isVisible'])

        self.assertEqual(self.client.delete(self.detail_url(admin_recommend)).status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(AdminRecommend.objects.exists())

    def test_create_requires_urls(self):
        self.client.force_authenticate(user=self.admin.user)
        response = self.client.post(self.list_url, {'title': 'No links'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_members_cannot_write(self):
        self.assertEqual(self.client.post(self.list_url, self.payload, format='json').status_code, status.HTTP_401_UNAUTHORIZED)

        self.client.force_authenticate(user=self.member.user)
        self.assertEqual(self.client.post(self.list_url, self.payload, format='json').status_code, status.HTTP_403_FORBIDDEN)

        admin_recommend = AdminRecommend.objects.create(
            title='Desk lamp', image_url='https://img.test/lamp.jpg',
            external_url='https://shop.test/lamp', created_by=self.admin
        )
        toggle_url = reverse('content:admin-recommend-toggle-visibility', args=[admin_recommend.id])
        self.assertEqual(self.client.post(toggle_url).status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(self.client.delete(self.detail_url(admin_recommend)).status_code, status.HTTP_403_FORBIDDEN)

    def test_hidden_cards_are_staff_only(self):
        visible = AdminRecommend.objects.create(
            title='Desk lamp', image_url='https://img.test/lamp.jpg',
            external_url='https://shop.test/lamp', created_by=self.admin
        )
        hidden = AdminRecommend.objects.create(
            title='Draft', image_url='https://img.test/draft.jpg',
            external_url='https://shop.test/draft', created_by=self.admin, is_visible=False
        )

        response = self.client.get(self.list_url)
        self.assertEqual([item['id'] for item in response.data], [str(visible.id)])
        response = self.client.get(self.detail_url(hidden))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data, {'error': 'Admin recommend not found'})

        self.client.force_authenticate(user=self.admin.user)
        self.assertEqual(
            [item['id'] for item in self.client.get(self.list_url).data],
            [str(hidden.id), str(visible.id)]
        )
        self.assertEqual(len(self.client.get(self.list_url, {'visibleOnly': 'true'}).data), 1)
        self.assertEqual(self.client.get(self.detail_url(hidden)).status_code, status.HTTP_200_OK)


class SectionAPITestCase(APITestCase):
    def setUp(self):
        self.admin = make_profile('editor', is_staff=True)
        self.member = make_profile('member')
        self.list_url = reverse('content:section-list')
        self.section = Section.objects.create(title='Coffee crawl', created_by=self.admin)
        self.rec = Recommendation.objects.create(user=self.member, title='Sightglass', rating=5)

    def entry_url(self, section, recommendation):
        return reverse('content:section-recommendation', args=[section.id, recommendation.id])

    def test_sections_are_ordered(self):
        later = Section.objects.create(title='Late night', created_by=self.admin, display_order=2)
        first = Section.objects.create(title='Top picks', created_by=self.admin, display_order=-1)

        response = self.client.get(self.list_url)
        self.assertEqual(
            [item['id'] for item in response.data],
            [str(first.id), str(self.section.id), str(later.id)]
        )

        response = self.client.get(reverse('content:section-detail', args=[later.id]))
        self.assertEqual(response.data['displayOrder'], 2)

    def test_missing_section(self):
        response = self.client.get(reverse('content:section-detail', args=['00000000-0000-0000-0000-000000000000']))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data, {'error': 'Section not found'})

    def test_staff_manage_sections(self):
        self.client.force_authenticate(user=self.admin.user)

        response = self.client.post(self.list_url, {'title': 'Parks', 'displayOrder': 3}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        section = Section.objects.get(title='Parks')
        self.assertEqual(section.created_by, self.admin)

        detail_url = reverse('content:section-detail', args=[section.id])
        response = self.client.patch(detail_url, {'subtitle': 'Green spaces'}, format='json')
        self.assertEqual(response.data['subtitle'], 'Green spaces')

        self.assertEqual(self.client.delete(detail_url).status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(self.client.delete(detail_url).status_code, status.HTTP_404_NOT_FOUND)

    def test_members_cannot_manage_sections(self):
        self.client.force_authenticate(user=self.member.user)
        self.assertEqual(self.client.post(self.list_url, {'title': 'Mine'}, format='json').status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(self.client.post(self.entry_url(self.section, self.rec)).status_code, status.HTTP_403_FORBIDDEN)

    def test_add_and_remove_recommendation(self):
        self.client.force_authenticate(user=self.admin.user)
        url = self.entry_url(self.section, self.rec)

        response = self.client.post(url)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['displayOrder'], 0)
        self.assertEqual(self.client.post(url).status_code, status.HTTP_200_OK)

        self.assertEqual(self.client.delete(url).status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(SectionRecommendation.objects.exists())

    def test_add_rejects_private_and_overflow(self):
        self.client.force_authenticate(user=self.admin.user)
        private = Recommendation.objects.create(user=self.member, title='Secret', rating=5, is_private=True)
        self.assertEqual(self.client.post(self.entry_url(self.section, private)).status_code, status.HTTP_400_BAD_REQUEST)

        for n in range(Section.MAX_RECOMMENDATIONS):
            rec = Recommendation.objects.create(user=self.member, title=f"Cafe {n}", rating=4)
            self.section.add_recommendation(rec)

        response = self.client.post(self.entry_url(self.section, self.rec))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {'error': 'Section can only have up to 8 recommendations'})

    def test_with_recommendations(self):
        later = Recommendation.objects.create(user=self.member, title='Blue Bottle', rating=4)
        self.section.add_recommendation(self.rec)
        self.section.add_recommendation(later)
        self.rec.is_private = True
        self.rec.save()

        shown = AdminRecommend.objects.create(
            title='Pour-over kit', image_url='https://img.test/kit.jpg',
            external_url='https://shop.test/kit', section=self.section, created_by=self.admin
        )
        AdminRecommend.objects.create(
            title='Draft', image_url='https://img.test/draft.jpg', external_url='https://shop.test/draft',
            section=self.section, created_by=self.admin, is_visible=False
        )

        response = self.client.get(reverse('content:section-with-recommendations'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        section = response.data[0]
        self.assertEqual(section['title'], 'Coffee crawl')
        self.assertEqual([item['id'] for item in section['recommendations']], [str(later.id)])
        self.assertEqual(section['recommendations'][0]['likeCount'], 0)
        self.assertEqual([item['id'] for item in section['adminRecommends']], [str(shown.id)])

        self.client.force_authenticate(user=self.member.user)
        section = self.client.get(reverse('content:section-with-recommendations')).data[0]
        self.assertEqual([item['id'] for item in section['recommendations']], [str(self.rec.id), str(later.id)])


class PlatformStatsAPITestCase(APITestCase):
    def test_counts(self):
        author = make_profile('author')
        make_profile('reader')
        Category.objects.create(name='Parks')
        Recommendation.objects.create(user=author, title='Presidio', rating=5)

        response = self.client.get(reverse('content:platform-stats'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'recommendationsCount': 1, 'curatorsCount': 2, 'categoriesCount': 1})
