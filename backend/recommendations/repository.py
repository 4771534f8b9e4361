"""
Read accessor over stored recommendations and the follow graph.

Services read through this class instead of querying the ORM directly.
"""
import logging
from typing import Iterable, List, Optional
from uuid import UUID

from django.db import DatabaseError

from core.exceptions import RepositoryUnavailable
from user.models import FollowRelation
from .filters import HasLocation, RecommendationFilter, VisibleTo, combine
from .models import Recommendation

logger = logging.getLogger(__name__)


class RecommendationRepository:
    """
    Storage-facing collaborator for the activity feed and map search.
    Every read is all-or-nothing: a database error is logged and re-raised
    as RepositoryUnavailable, without retries.
    """

    def followed_user_ids(self, viewer_id: UUID) -> List[UUID]:
        """
        Returns the ids of the users the viewer follows.
        """
        try:
            return list(
                FollowRelation.objects.filter(follower_id=viewer_id)
                .values_list('following_id', flat=True)
            )
        except DatabaseError as e:
            logger.error(f"Error fetching follows for {viewer_id}: {str(e)}")
            raise RepositoryUnavailable() from e

    def find(self, filters: Iterable[RecommendationFilter] = (), limit: Optional[int] = None) -> List[Recommendation]:
        """
        Returns recommendations matching every filter, newest first.

        Args:
            filters: Predicates combined with AND
            limit: Optional row cap

        Returns:
            List of Recommendation instances ordered by created_at descending
        """
        try:
            queryset = (
                Recommendation.objects.filter(combine(filters))
                .select_related('category')
                .prefetch_related('tags')
                .order_by('-created_at')
            )
            if limit is not None:
                queryset = queryset[:limit]
            return list(queryset)
        except DatabaseError as e:
            logger.error(f"Error fetching recommendations: {str(e)}")
            raise RepositoryUnavailable() from e

    def located_visible_to(self, viewer_id: Optional[UUID]) -> List[Recommendation]:
        """
        Returns every recommendation with coordinates that the viewer may see,
        newest first.
        """
        return self.find([HasLocation(), VisibleTo(viewer_id)])
