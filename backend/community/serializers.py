"""
DRF Serializers for likes and comments on recommendations.
"""
from rest_framework import serializers
from .models import Comment


class CommentSerializer(serializers.ModelSerializer):
    """
    Serializer for a comment; top-level comments carry their replies.
    """
    userId = serializers.UUIDField(source='user_id', read_only=True)
    username = serializers.CharField(source='user.user.username', read_only=True)
    avatarUrl = serializers.CharField(source='user.avatar_url', read_only=True, allow_null=True)
    recommendationId = serializers.UUIDField(source='recommendation_id', read_only=True)
    parentId = serializers.UUIDField(source='parent_id', read_only=True, allow_null=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Comment
        fields = ['id', 'userId', 'username', 'avatarUrl', 'recommendationId', 'parentId', 'text', 'createdAt']

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if instance.parent_id is None:
            data['replies'] = CommentSerializer(instance.replies.all(), many=True).data
        return data


class AddCommentSerializer(serializers.Serializer):
    """Serializer for adding a comment or a reply."""
    text = serializers.CharField(max_length=1000)
    parentId = serializers.UUIDField(required=False, allow_null=True)

    def validate_text(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Comment cannot be blank")
        return value


class LikeStatusSerializer(serializers.Serializer):
    """Like state of a recommendation after a like/unlike request."""
    recommendationId = serializers.UUIDField()
    liked = serializers.BooleanField()
    likeCount = serializers.IntegerField()
