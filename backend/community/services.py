"""
Domain service for the Activity feed.
Blends recommendations from followed users with recent community activity.
"""
import logging
from typing import List, Optional
from uuid import UUID

from django.conf import settings

from core.exceptions import InvalidArgument
from recommendations.filters import CategoryEquals, OwnerIn, OwnerNotIn, VisibleTo
from recommendations.models import Recommendation
from recommendations.repository import RecommendationRepository
from recommendations.serializers import RecommendationSerializer
from .models import Like

logger = logging.getLogger(__name__)


class FeedService:
    """
    Domain service responsible for composing the "Activity" feed.

    Followed users' recommendations and the rest of the community are fetched
    separately, each with its own cap, and merged by recency.
    """

    def __init__(
        self,
        repository: Optional[RecommendationRepository] = None,
        social_limit: Optional[int] = None,
        community_limit: Optional[int] = None,
    ):
        self.repository = repository or RecommendationRepository()
        # Number of followed-user recommendations fetched per request
        self.social_limit = social_limit if social_limit is not None else settings.FEED_SOCIAL_LIMIT
        # Number of community recommendations fetched per request
        self.community_limit = community_limit if community_limit is not None else settings.FEED_COMMUNITY_LIMIT

    def compose_feed(
        self,
        viewer_id: Optional[UUID],
        category_id: Optional[UUID] = None,
        limit: Optional[int] = None,
    ) -> List[Recommendation]:
        """
        Generates the activity feed for a viewer:
        1. Anonymous viewer: latest recommendations
        2. Viewer following nobody: latest recommendations by anyone but the viewer
        3. Otherwise: up to social_limit posts by followed users plus up to
           community_limit posts by everyone else, merged by created_at and
           truncated to limit

        Args:
            viewer_id: UserProfile id of the viewer, or None when anonymous
            category_id: Optional category to restrict the feed to
            limit: Maximum number of recommendations returned (default FEED_DEFAULT_LIMIT)

        Returns:
            List of Recommendation instances, newest first

        Raises:
            InvalidArgument: limit is not a positive integer or exceeds MAX_PAGE_LIMIT
            RepositoryUnavailable: a storage read failed
        """
        limit = self._validate_limit(settings.FEED_DEFAULT_LIMIT if limit is None else limit)

        filters = [VisibleTo(viewer_id)]
        if category_id is not None:
            filters.append(CategoryEquals(category_id))

        if viewer_id is None:
            return self.repository.find(filters, limit=limit)

        followed_ids = self.repository.followed_user_ids(viewer_id)

        if not followed_ids:
            return self.repository.find(filters + [OwnerNotIn([viewer_id])], limit=limit)

        social = self.repository.find(filters + [OwnerIn(followed_ids)], limit=self.social_limit)
        community = self.repository.find(
            filters + [OwnerNotIn(followed_ids + [viewer_id])],
            limit=self.community_limit,
        )

        # sorted() is stable, so equal timestamps keep social-before-community order
        combined = sorted(social + community, key=lambda rec: rec.created_at, reverse=True)

        logger.debug(
            f"Feed for {viewer_id}: {len(social)} social, {len(community)} community, limit {limit}"
        )
        return combined[:limit]

    @staticmethod
    def _validate_limit(limit) -> int:
        if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
            raise InvalidArgument("limit must be a positive integer")
        if limit > settings.MAX_PAGE_LIMIT:
            raise InvalidArgument(f"limit must be at most {settings.MAX_PAGE_LIMIT}")
        return limit


def serialize_with_like_counts(recommendations: List[Recommendation], context: Optional[dict] = None) -> list:
    """
    Serializes recommendations for API responses, adding likeCount from a
    single grouped count query.
    """
    context = dict(context or {})
    context['like_counts'] = Like.counts_for(rec.id for rec in recommendations)
    return RecommendationSerializer(recommendations, many=True, context=context).data
