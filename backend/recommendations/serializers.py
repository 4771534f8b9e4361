"""
Serializers for the recommendations module.

Recommendation records use the camelCase keys the web client consumes.
"""
from rest_framework import serializers
from recommendations.models import (
    AdminRecommend, Category, CuratorRec, Recommendation, Section, SectionRecommendation, Tag
)


class CategorySerializer(serializers.ModelSerializer):
    userId = serializers.UUIDField(source='user_id', read_only=True, allow_null=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Category
        fields = ['id', 'name', 'userId', 'createdAt']
        read_only_fields = ['id']

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Category name cannot be blank")
        return value


class TagSerializer(serializers.ModelSerializer):
    class Meta:
        model = Tag
        fields = ['id', 'name']


class RecommendationSerializer(serializers.ModelSerializer):
    """
    Read/write serializer for Recommendation.

    Expects 'profile' (the author) in context on create. When 'like_counts'
    ({recommendation_id: count}) is in context, likeCount is read from it.
    """
    userId = serializers.UUIDField(source='user_id', read_only=True)
    imageUrl = serializers.CharField(source='image_url', required=False, allow_null=True, allow_blank=True)
    proTip = serializers.CharField(source='pro_tip', max_length=500, required=False, allow_null=True, allow_blank=True)
    categoryId = serializers.PrimaryKeyRelatedField(
        source='category',
        queryset=Category.objects.all(),
        pk_field=serializers.UUIDField(),
        required=False,
        allow_null=True
    )
    latitude = serializers.FloatField(min_value=-90, max_value=90, required=False, allow_null=True)
    longitude = serializers.FloatField(min_value=-180, max_value=180, required=False, allow_null=True)
    externalUrl = serializers.CharField(source='external_url', required=False, allow_null=True, allow_blank=True)
    isPrivate = serializers.BooleanField(source='is_private', required=False)
    tags = serializers.ListField(
        child=serializers.CharField(max_length=50),
        required=False,
        write_only=True
    )
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)
    likeCount = serializers.SerializerMethodField()

    class Meta:
        model = Recommendation
        fields = [
            'id',
            'userId',
            'title',
            'description',
            'imageUrl',
            'rating',
            'proTip',
            'categoryId',
            'location',
            'latitude',
            'longitude',
            'externalUrl',
            'isPrivate',
            'tags',
            'createdAt',
            'updatedAt',
            'likeCount',
        ]
        read_only_fields = ['id']

    def get_likeCount(self, obj):
        like_counts = self.context.get('like_counts')
        if like_counts is None:
            return obj.likes.count()
        return like_counts.get(obj.id, 0)

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data['tags'] = [tag.name for tag in instance.tags.all()]
        return data

    def validate_categoryId(self, value):
        """Only pre-built categories or the author's own may be used."""
        if value is None or value.user_id is None:
            return value
        profile = self.context.get('profile')
        if profile is None or value.user_id != profile.id:
            raise serializers.ValidationError("Category not available")
        return value

    def validate(self, attrs):
        latitude = attrs.get('latitude', self.instance.latitude if self.instance else None)
        longitude = attrs.get('longitude', self.instance.longitude if self.instance else None)
        if (latitude is None) != (longitude is None):
            raise serializers.ValidationError("latitude and longitude must be provided together")
        return attrs

    def create(self, validated_data):
        tag_names = validated_data.pop('tags', [])
        recommendation = Recommendation.objects.create(user=self.context['profile'], **validated_data)
        recommendation.tags.set(Tag.get_or_create_many(tag_names))
        return recommendation

    def update(self, instance, validated_data):
        tag_names = validated_data.pop('tags', None)
        instance = super().update(instance, validated_data)
        if tag_names is not None:
            instance.tags.set(Tag.get_or_create_many(tag_names))
        return instance


class CuratorRecSerializer(serializers.ModelSerializer):
    recommendationId = serializers.UUIDField(source='recommendation_id', read_only=True)
    curatedBy = serializers.UUIDField(source='curated_by_id', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = CuratorRec
        fields = ['id', 'recommendationId', 'curatedBy', 'createdAt']


class SectionSerializer(serializers.ModelSerializer):
    subtitle = serializers.CharField(max_length=300, required=False, allow_null=True, allow_blank=True)
    displayOrder = serializers.IntegerField(source='display_order', required=False)
    createdBy = serializers.UUIDField(source='created_by_id', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Section
        fields = ['id', 'title', 'subtitle', 'displayOrder', 'createdBy', 'createdAt', 'updatedAt']
        read_only_fields = ['id']

    def validate_title(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Section title cannot be blank")
        return value


class SectionRecommendationSerializer(serializers.ModelSerializer):
    sectionId = serializers.UUIDField(source='section_id', read_only=True)
    recommendationId = serializers.UUIDField(source='recommendation_id', read_only=True)
    displayOrder = serializers.IntegerField(source='display_order', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = SectionRecommendation
        fields = ['id', 'sectionId', 'recommendationId', 'displayOrder', 'createdAt']


class AdminRecommendSerializer(serializers.ModelSerializer):
    subtitle = serializers.CharField(max_length=300, required=False, allow_null=True, allow_blank=True)
    imageUrl = serializers.CharField(source='image_url')
    externalUrl = serializers.CharField(source='external_url')
    price = serializers.CharField(max_length=50, required=False, allow_null=True, allow_blank=True)
    isVisible = serializers.BooleanField(source='is_visible', required=False)
    sectionId = serializers.PrimaryKeyRelatedField(
        source='section',
        queryset=Section.objects.all(),
        pk_field=serializers.UUIDField(),
        required=False,
        allow_null=True
    )
    createdBy = serializers.UUIDField(source='created_by_id', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = AdminRecommend
        fields = [
            'id',
            'title',
            'subtitle',
            'imageUrl',
            'externalUrl',
            'price',
            'isVisible',
            'sectionId',
            'createdBy',
            'createdAt',
            'updatedAt',
        ]
        read_only_fields = ['id']
