"""
API views for community app endpoints.
Handles the activity feed, likes and comments.
"""
import logging

from rest_framework.generics import get_object_or_404
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from core.params import parse_int, parse_uuid, viewer_id, viewer_profile
from recommendations.models import Recommendation
from .models import Comment, Like
from .serializers import AddCommentSerializer, CommentSerializer, LikeStatusSerializer
from .services import FeedService, serialize_with_like_counts

logger = logging.getLogger(__name__)


def _authentication_required():
    return Response(
        {'error': 'Authentication required'},
        status=status.HTTP_401_UNAUTHORIZED
    )


def _visible_recommendation(request, recommendation_id):
    """Private recommendations do not exist for anyone but their owner."""
    recommendation = get_object_or_404(Recommendation, pk=recommendation_id)
    if not recommendation.is_visible_to(viewer_id(request)):
        return None
    return recommendation


def _not_found():
    return Response(
        {'error': 'Recommendation not found'},
        status=status.HTTP_404_NOT_FOUND
    )


class ActivityFeedView(APIView):
    """
    Activity feed: recommendations from followed users blended with recent
    community activity. Anonymous requests get the latest public
    recommendations.

    Query params:
    - categoryId: Restrict the feed to one category
    - limit: Number of recommendations (default 20)
    """

    permission_classes = [AllowAny]

    def get(self, request):
        category_id = parse_uuid(request.query_params.get('categoryId'), 'categoryId')
        limit = parse_int(request.query_params.get('limit'), 'limit')

        recommendations = FeedService().compose_feed(
            viewer_id(request),
            category_id=category_id,
            limit=limit
        )
        return Response(serialize_with_like_counts(recommendations))


class LikeView(APIView):
    """Like (POST) or unlike (DELETE) a recommendation."""

    permission_classes = [AllowAny]

    def _set_like(self, request, recommendation_id, liked):
        profile = viewer_profile(request)
        if profile is None:
            return _authentication_required()

        recommendation = _visible_recommendation(request, recommendation_id)
        if recommendation is None:
            return _not_found()

        Like.toggle(profile, recommendation, liked)
        serializer = LikeStatusSerializer({
            'recommendationId': recommendation.id,
            'liked': liked,
            'likeCount': Like.objects.filter(recommendation=recommendation).count(),
        })
        return Response(serializer.data)

    def post(self, request, recommendation_id):
        return self._set_like(request, recommendation_id, True)

    def delete(self, request, recommendation_id):
        return self._set_like(request, recommendation_id, False)


class UserLikesView(APIView):
    """Ids of the recommendations the requester has liked."""

    permission_classes = [AllowAny]

    def get(self, request):
        profile = viewer_profile(request)
        if profile is None:
            return Response([])

        ids = Like.objects.filter(user=profile).order_by('-created_at').values_list('recommendation_id', flat=True)
        return Response([str(rec_id) for rec_id in ids])


class CommentListCreateView(APIView):
    """
    GET: top-level comments on a recommendation, oldest first, each with
    its replies.
    POST: add a comment, or a reply when parentId is given.
    """

    permission_classes = [AllowAny]

    def get(self, request, recommendation_id):
        recommendation = _visible_recommendation(request, recommendation_id)
        if recommendation is None:
            return _not_found()

        comments = (
            Comment.objects.filter(recommendation=recommendation, parent__isnull=True)
            .select_related('user__user')
            .prefetch_related('replies__user__user')
            .order_by('created_at')
        )
        return Response(CommentSerializer(comments, many=True).data)

    def post(self, request, recommendation_id):
        profile = viewer_profile(request)
        if profile is None:
            return _authentication_required()

        recommendation = _visible_recommendation(request, recommendation_id)
        if recommendation is None:
            return _not_found()

        serializer = AddCommentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        parent = None
        parent_id = serializer.validated_data.get('parentId')
        if parent_id:
            parent = Comment.objects.filter(id=parent_id, recommendation=recommendation).first()
            if parent is None:
                return Response(
                    {'error': 'Parent comment not found'},
                    status=status.HTTP_400_BAD_REQUEST
                )
            # Replies are one level deep
            if parent.parent_id is not None:
                parent = parent.parent

        comment = Comment.objects.create(
            user=profile,
            recommendation=recommendation,
            parent=parent,
            text=serializer.validated_data['text']
        )
        logger.info(f"Comment {comment.id} added to {recommendation.id} by {profile.id}")
        return Response(CommentSerializer(comment).data, status=status.HTTP_201_CREATED)
