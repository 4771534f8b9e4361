"""
Typed predicates over Recommendation rows.

Each filter is a small immutable value that knows how to express itself as a
Django Q object. A list of filters is combined with AND semantics by
`combine`.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple
from uuid import UUID

from django.db.models import Q


class RecommendationFilter(ABC):
    """Base class for recommendation predicates"""

    @abstractmethod
    def to_q(self) -> Q:
        pass


@dataclass(frozen=True)
class OwnerIn(RecommendationFilter):
    """Authored by one of the given users."""
    user_ids: Tuple[UUID, ...]

    def __post_init__(self):
        object.__setattr__(self, 'user_ids', tuple(self.user_ids))

    def to_q(self) -> Q:
        return Q(user_id__in=self.user_ids)


@dataclass(frozen=True)
class OwnerNotIn(RecommendationFilter):
    """Authored by none of the given users."""
    user_ids: Tuple[UUID, ...]

    def __post_init__(self):
        object.__setattr__(self, 'user_ids', tuple(self.user_ids))

    def to_q(self) -> Q:
        return ~Q(user_id__in=self.user_ids)


@dataclass(frozen=True)
class CategoryEquals(RecommendationFilter):
    category_id: UUID

    def to_q(self) -> Q:
        return Q(category_id=self.category_id)


@dataclass(frozen=True)
class VisibleTo(RecommendationFilter):
    """
    Visibility predicate: public rows, plus private rows owned by the viewer.
    An anonymous viewer (None) sees public rows only.
    """
    viewer_id: Optional[UUID] = None

    def to_q(self) -> Q:
        if self.viewer_id is None:
            return Q(is_private=False)
        return Q(is_private=False) | Q(user_id=self.viewer_id)


@dataclass(frozen=True)
class HasLocation(RecommendationFilter):
    """Both coordinates are stored."""

    def to_q(self) -> Q:
        return Q(latitude__isnull=False, longitude__isnull=False)


@dataclass(frozen=True)
class HasProTip(RecommendationFilter):
    present: bool = True

    def to_q(self) -> Q:
        with_tip = Q(pro_tip__isnull=False) & ~Q(pro_tip='')
        return with_tip if self.present else ~with_tip


def combine(filters: Iterable[RecommendationFilter]) -> Q:
    """AND together the Q objects of every filter; no filters matches everything."""
    query = Q()
    for predicate in filters:
        query &= predicate.to_q()
    return query
