"""
Relational models for the community app: likes and threaded comments on
recommendations.
"""
import uuid
from django.db import models
from django.db.models import Count
from recommendations.models import Recommendation
from user.models import UserProfile


class Like(models.Model):
    """A user's like on a recommendation. At most one per (user, recommendation)."""
    user = models.ForeignKey(UserProfile, on_delete=models.CASCADE, related_name='likes')
    recommendation = models.ForeignKey(Recommendation, on_delete=models.CASCADE, related_name='likes')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'community_like'
        constraints = [
            models.UniqueConstraint(fields=['user', 'recommendation'], name='likes_pk'),
        ]
        indexes = [
            models.Index(fields=['user'], name='idx_likes_user'),
            models.Index(fields=['recommendation'], name='idx_likes_rec'),
        ]

    def __str__(self):
        return f"{self.user} likes {self.recommendation_id}"

    @classmethod
    def toggle(cls, user: UserProfile, recommendation: Recommendation, liked: bool) -> bool:
        """
        Sets the like state for user on recommendation. Idempotent in both
        directions.

        Returns:
            bool: True if the recommendation is now liked by the user
        """
        if liked:
            cls.objects.get_or_create(user=user, recommendation=recommendation)
        else:
            cls.objects.filter(user=user, recommendation=recommendation).delete()
        return liked

    @classmethod
    def counts_for(cls, recommendation_ids) -> dict:
        """
        Returns {recommendation_id: like_count} for the given ids, with 0 for
        recommendations nobody liked.
        """
        recommendation_ids = list(recommendation_ids)
        counts = {rec_id: 0 for rec_id in recommendation_ids}
        if not recommendation_ids:
            return counts

        rows = (
            cls.objects.filter(recommendation_id__in=recommendation_ids)
            .values('recommendation_id')
            .annotate(count=Count('id'))
        )
        for row in rows:
            counts[row['recommendation_id']] = row['count']
        return counts


class Comment(models.Model):
    """
    Comment on a recommendation. A comment with a parent is a reply; replies
    are one level deep.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(UserProfile, on_delete=models.CASCADE, related_name='comments')
    recommendation = models.ForeignKey(Recommendation, on_delete=models.CASCADE, related_name='comments')
    parent = models.ForeignKey(
        'self',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='replies'
    )
    text = models.TextField(max_length=1000)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'community_comment'
        ordering = ['created_at']
        indexes = [
            models.Index(fields=['recommendation', 'created_at'], name='idx_comments_rec_created'),
        ]

    def __str__(self):
        return f"Comment by {self.user} on {self.recommendation_id}"
