"""
Views for the recommendations module.
"""
import logging

from django.db.models import Prefetch, Q
from rest_framework.generics import get_object_or_404
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from community.services import serialize_with_like_counts
from core.params import (
    is_staff, parse_bool, parse_positive_int, parse_uuid, staff_denial, viewer_id, viewer_profile
)
from recommendations.filters import CategoryEquals, HasProTip, OwnerIn, VisibleTo
from recommendations.models import (
    AdminRecommend, Category, CuratorRec, Recommendation, Section, SectionRecommendation, Tag
)
from recommendations.repository import RecommendationRepository
from recommendations.serializers import (
    AdminRecommendSerializer, CategorySerializer, CuratorRecSerializer, RecommendationSerializer,
    SectionRecommendationSerializer, SectionSerializer, TagSerializer
)
from user.models import UserProfile
from user.serializers import PublicProfileSerializer

logger = logging.getLogger(__name__)


def _authentication_required():
    return Response(
        {'error': 'Authentication required'},
        status=status.HTTP_401_UNAUTHORIZED
    )


class RecommendationViewSet(viewsets.ViewSet):
    """
    ViewSet for Recommendation CRUD operations.

    Supported Query Parameters for LIST endpoint:
    - userId: Only recommendations by this user
    - categoryId: Only recommendations in this category
    - hasProTip: 'true' / 'false'
    - limit: Maximum number of results

    Private recommendations are only ever returned to their owner.
    """

    permission_classes = [AllowAny]
    lookup_value_regex = '[0-9a-f-]{36}'
    repository = RecommendationRepository()

    def list(self, request):
        """List recommendations visible to the requester, newest first."""
        filters = [VisibleTo(viewer_id(request))]

        owner_id = parse_uuid(request.query_params.get('userId'), 'userId')
        if owner_id:
            filters.append(OwnerIn([owner_id]))

        category_id = parse_uuid(request.query_params.get('categoryId'), 'categoryId')
        if category_id:
            filters.append(CategoryEquals(category_id))

        has_pro_tip = parse_bool(request.query_params.get('hasProTip'))
        if has_pro_tip is not None:
            filters.append(HasProTip(has_pro_tip))

        limit = parse_positive_int(request.query_params.get('limit'), 'limit')

        recommendations = self.repository.find(filters, limit=limit)
        return Response(serialize_with_like_counts(recommendations))

    def create(self, request):
        """Create a recommendation owned by the requester."""
        profile = viewer_profile(request)
        if profile is None:
            return _authentication_required()

        serializer = RecommendationSerializer(data=request.data, context={'profile': profile})
        serializer.is_valid(raise_exception=True)
        recommendation = serializer.save()
        return Response(
            RecommendationSerializer(recommendation, context={'like_counts': {}}).data,
            status=status.HTTP_201_CREATED
        )

    def retrieve(self, request, pk=None):
        """
        Retrieve a recommendation with its author and category.
        Private recommendations answer 404 to anyone but the owner.
        """
        recommendation = get_object_or_404(
            Recommendation.objects.select_related('user__user', 'category'),
            pk=pk
        )
        if not recommendation.is_visible_to(viewer_id(request)):
            return Response(
                {'error': 'Recommendation not found'},
                status=status.HTTP_404_NOT_FOUND
            )

        data = dict(RecommendationSerializer(recommendation).data)
        data['user'] = PublicProfileSerializer(recommendation.user).data
        data['category'] = CategorySerializer(recommendation.category).data if recommendation.category else None
        return Response(data)

    def partial_update(self, request, pk=None):
        """Update a recommendation (owner only)."""
        profile = viewer_profile(request)
        if profile is None:
            return _authentication_required()

        recommendation = get_object_or_404(Recommendation, pk=pk)
        if recommendation.user_id != profile.id:
            raise PermissionDenied("You can only edit your own recommendations")

        serializer = RecommendationSerializer(
            recommendation,
            data=request.data,
            partial=True,
            context={'profile': profile}
        )
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)

    def destroy(self, request, pk=None):
        """Delete a recommendation (owner only)."""
        profile = viewer_profile(request)
        if profile is None:
            return _authentication_required()

        recommendation = get_object_or_404(Recommendation, pk=pk)
        if recommendation.user_id != profile.id:
            raise PermissionDenied("You can only delete your own recommendations")

        recommendation.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=['get'], url_path='pro-tips')
    def pro_tips(self, request):
        """Latest public recommendations that carry a pro tip."""
        limit = parse_positive_int(request.query_params.get('limit'), 'limit', default=4)
        recommendations = self.repository.find([VisibleTo(None), HasProTip(True)], limit=limit)
        return Response(serialize_with_like_counts(recommendations))


class CategoryViewSet(viewsets.ViewSet):
    """
    Pre-built categories are shared by everyone; authenticated users can add
    and delete their own.
    """

    permission_classes = [AllowAny]
    lookup_value_regex = '[0-9a-f-]{36}'

    def list(self, request):
        owner_id = viewer_id(request)
        query = Q(user__isnull=True)
        if owner_id:
            query |= Q(user_id=owner_id)
        categories = Category.objects.filter(query).order_by('name')
        return Response(CategorySerializer(categories, many=True).data)

    def create(self, request):
        profile = viewer_profile(request)
        if profile is None:
            return _authentication_required()

        serializer = CategorySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        name = serializer.validated_data['name']
        if Category.objects.filter(Q(user__isnull=True) | Q(user=profile), name__iexact=name).exists():
            return Response(
                {'error': 'Category already exists'},
                status=status.HTTP_400_BAD_REQUEST
            )

        category = serializer.save(user=profile)
        return Response(CategorySerializer(category).data, status=status.HTTP_201_CREATED)

    def destroy(self, request, pk=None):
        """Delete an owned category; its recommendations become uncategorized."""
        profile = viewer_profile(request)
        if profile is None:
            return _authentication_required()

        category = get_object_or_404(Category, pk=pk)
        if category.user_id != profile.id:
            raise PermissionDenied("Not authorized to delete this category")

        category.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


class TagListView(APIView):
    """All tags, alphabetically."""

    permission_classes = [AllowAny]

    def get(self, request):
        return Response(TagSerializer(Tag.objects.order_by('name'), many=True).data)


class CuratorRecViewSet(viewsets.ViewSet):
    """
    Admin-curated recommendations.
    Listing is public; managing the list requires a staff account.
    """

    permission_classes = [AllowAny]

    def list(self, request):
        """Most recently curated recommendations visible to the requester."""
        limit = parse_positive_int(request.query_params.get('limit'), 'limit', default=8)
        requester = viewer_id(request)

        visibility = Q(recommendation__is_private=False)
        if requester:
            visibility |= Q(recommendation__user_id=requester)

        curated = (
            CuratorRec.objects.filter(visibility)
            .select_related('recommendation')
            .order_by('-created_at')[:limit]
        )
        recommendations = [entry.recommendation for entry in curated]
        return Response(serialize_with_like_counts(recommendations))

    @action(detail=False, methods=['get'])
    def ids(self, request):
        """Ids of every curated recommendation (staff only)."""
        if not request.user.is_authenticated:
            return _authentication_required()
        if not request.user.is_staff:
            return Response(
                {'error': 'Permission denied'},
                status=status.HTTP_403_FORBIDDEN
            )

        ids = CuratorRec.objects.values_list('recommendation_id', flat=True).distinct()
        return Response([str(rec_id) for rec_id in ids])


class CuratorRecManageView(APIView):
    """
    Add or remove a recommendation from the curated list (staff only).
    """

    permission_classes = [AllowAny]

    def post(self, request, recommendation_id):
        denied = staff_denial(request)
        if denied:
            return denied

        recommendation = get_object_or_404(Recommendation, pk=recommendation_id)
        if recommendation.is_private:
            return Response(
                {'error': 'Private recommendations cannot be curated'},
                status=status.HTTP_400_BAD_REQUEST
            )

        curator_rec, created = CuratorRec.objects.get_or_create(
            recommendation=recommendation,
            defaults={'curated_by': viewer_profile(request)}
        )
        return Response(
            CuratorRecSerializer(curator_rec).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK
        )

    def delete(self, request, recommendation_id):
        denied = staff_denial(request)
        if denied:
            return denied

        CuratorRec.objects.filter(recommendation_id=recommendation_id).delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


class PlatformStatsView(APIView):
    """Headline counts for the landing page."""

    permission_classes = [AllowAny]

    def get(self, request):
        return Response({
            'recommendationsCount': Recommendation.objects.count(),
            'curatorsCount': UserProfile.objects.count(),
            'categoriesCount': Category.objects.count(),
        })


class AdminRecommendViewSet(viewsets.ViewSet):
    """
    Staff-written promotional cards.

    Reading is public but hidden cards are only listed for staff, who may
    pass visibleOnly=true to see what members see. Writes are staff only.
    """

    permission_classes = [AllowAny]
    lookup_value_regex = '[0-9a-f-]{36}'

    def _get(self, request, pk):
        admin_recommend = AdminRecommend.objects.filter(pk=pk).first()
        if admin_recommend is None or not (admin_recommend.is_visible or is_staff(request)):
            return None
        return admin_recommend

    def _not_found(self):
        return Response(
            {'error': 'Admin recommend not found'},
            status=status.HTTP_404_NOT_FOUND
        )

    def list(self, request):
        admin_recommends = AdminRecommend.objects.order_by('-created_at')
        if parse_bool(request.query_params.get('visibleOnly')) or not is_staff(request):
            admin_recommends = admin_recommends.filter(is_visible=True)
        return Response(AdminRecommendSerializer(admin_recommends, many=True).data)

    def retrieve(self, request, pk=None):
        admin_recommend = self._get(request, pk)
        if admin_recommend is None:
            return self._not_found()
        return Response(AdminRecommendSerializer(admin_recommend).data)

    def create(self, request):
        denied = staff_denial(request)
        if denied:
            return denied

        serializer = AdminRecommendSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        admin_recommend = serializer.save(created_by=viewer_profile(request))
        logger.info(f"Admin recommend {admin_recommend.id} created by {request.user.username}")
        return Response(AdminRecommendSerializer(admin_recommend).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        denied = staff_denial(request)
        if denied:
            return denied

        admin_recommend = self._get(request, pk)
        if admin_recommend is None:
            return self._not_found()

        serializer = AdminRecommendSerializer(admin_recommend, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)

    def destroy(self, request, pk=None):
        denied = staff_denial(request)
        if denied:
            return denied

        admin_recommend = self._get(request, pk)
        if admin_recommend is None:
            return self._not_found()

        admin_recommend.delete()
        logger.info(f"Admin recommend {pk} deleted by {request.user.username}")
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['post'], url_path='toggle-visibility')
    def toggle_visibility(self, request, pk=None):
        denied = staff_denial(request)
        if denied:
            return denied

        admin_recommend = self._get(request, pk)
        if admin_recommend is None:
            return self._not_found()

        admin_recommend.is_visible = not admin_recommend.is_visible
        admin_recommend.save(update_fields=['is_visible', 'updated_at'])
        return Response(AdminRecommendSerializer(admin_recommend).data)


class SectionViewSet(viewsets.ViewSet):
    """
    Homepage sections, ordered by displayOrder then newest first.
    Reading is public; writes are staff only.
    """

    permission_classes = [AllowAny]
    lookup_value_regex = '[0-9a-f-]{36}'

    def _not_found(self):
        return Response(
            {'error': 'Section not found'},
            status=status.HTTP_404_NOT_FOUND
        )

    def list(self, request):
        return Response(SectionSerializer(Section.objects.order_by('display_order', '-created_at'), many=True).data)

    def retrieve(self, request, pk=None):
        section = Section.objects.filter(pk=pk).first()
        if section is None:
            return self._not_found()
        return Response(SectionSerializer(section).data)

    def create(self, request):
        denied = staff_denial(request)
        if denied:
            return denied

        serializer = SectionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        section = serializer.save(created_by=viewer_profile(request))
        logger.info(f"Section {section.id} created by {request.user.username}")
        return Response(SectionSerializer(section).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        denied = staff_denial(request)
        if denied:
            return denied

        section = Section.objects.filter(pk=pk).first()
        if section is None:
            return self._not_found()

        serializer = SectionSerializer(section, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)

    def destroy(self, request, pk=None):
        denied = staff_denial(request)
        if denied:
            return denied

        deleted, _ = Section.objects.filter(pk=pk).delete()
        if not deleted:
            return self._not_found()
        logger.info(f"Section {pk} deleted by {request.user.username}")
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=['get'], url_path='with-recommendations')
    def with_recommendations(self, request):
        """
        Every section with its recommendations (in display order, private
        ones only for their owner) and its visible admin recommends (oldest
        first).
        """
        requester = viewer_id(request)
        sections = Section.objects.order_by('display_order', '-created_at').prefetch_related(
            Prefetch(
                'entries',
                queryset=SectionRecommendation.objects.select_related('recommendation')
                .prefetch_related('recommendation__tags')
                .order_by('display_order', 'created_at')
            ),
            Prefetch(
                'admin_recommends',
                queryset=AdminRecommend.objects.filter(is_visible=True).order_by('created_at')
            ),
        )

        data = []
        for section in sections:
            recommendations = [
                entry.recommendation for entry in section.entries.all()
                if entry.recommendation.is_visible_to(requester)
            ]
            item = dict(SectionSerializer(section).data)
            item['recommendations'] = serialize_with_like_counts(recommendations)
            item['adminRecommends'] = AdminRecommendSerializer(section.admin_recommends.all(), many=True).data
            data.append(item)
        return Response(data)


class SectionRecommendationView(APIView):
    """
    Add (POST) or remove (DELETE) a recommendation from a section (staff only).
    """

    permission_classes = [AllowAny]

    def post(self, request, section_id, recommendation_id):
        denied = staff_denial(request)
        if denied:
            return denied

        section = get_object_or_404(Section, pk=section_id)
        recommendation = get_object_or_404(Recommendation, pk=recommendation_id)
        if recommendation.is_private:
            return Response(
                {'error': 'Private recommendations cannot be added to a section'},
                status=status.HTTP_400_BAD_REQUEST
            )

        try:
            entry, created = section.add_recommendation(recommendation)
        except ValueError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(
            SectionRecommendationSerializer(entry).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK
        )

    def delete(self, request, section_id, recommendation_id):
        denied = staff_denial(request)
        if denied:
            return denied

        SectionRecommendation.objects.filter(section_id=section_id, recommendation_id=recommendation_id).delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
