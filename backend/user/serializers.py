from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.db import transaction
from rest_framework import serializers
from .models import UserProfile

User = get_user_model()


class UserProfileSerializer(serializers.ModelSerializer):
    username= serializers.CharField(source="user.username",read_only=True)
    email = serializers.CharField(source="user.email",read_only=True)
    first_name = serializers.CharField(source="user.first_name",read_only=True)
    last_name = serializers.CharField(source="user.last_name",read_only=True)
    is_admin = serializers.BooleanField(read_only=True)

    class Meta:
        model = UserProfile
        fields = [
            "id",
            "username",
            "email",
            "first_name",
            "last_name",
            "avatar_url",
            "bio",
            "instagram_url",
            "tiktok_url",
            "youtube_url",
            "followers_count",
            "following_count",
            "is_verified",
            "is_admin",
            "created_at",
        ]
        read_only_fields = ["id","followers_count","following_count","is_verified","created_at"]


class PublicProfileSerializer(UserProfileSerializer):
    """Profile as shown to other users: no email address."""

    class Meta(UserProfileSerializer.Meta):
        fields = [f for f in UserProfileSerializer.Meta.fields if f != "email"]


class ProfileUpdateSerializer(serializers.ModelSerializer):
    first_name = serializers.CharField(source="user.first_name",required=False,allow_blank=True,max_length=150)
    last_name = serializers.CharField(source="user.last_name",required=False,allow_blank=True,max_length=150)

    class Meta:
        model = UserProfile
        fields = [
            "first_name",
            "last_name",
            "avatar_url",
            "bio",
            "instagram_url",
            "tiktok_url",
            "youtube_url",
        ]

    def update(self, instance, validated_data):
        user_data = validated_data.pop("user",{})
        with transaction.atomic():
            for attr,value in user_data.items():
                setattr(instance.user,attr,value)
            if user_data:
                instance.user.save(update_fields=list(user_data.keys()))
            return super().update(instance,validated_data)


class RegisterSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True,min_length=8)
    first_name = serializers.CharField(required=False,allow_blank=True,max_length=150)
    last_name = serializers.CharField(required=False,allow_blank=True,max_length=150)

    def validate_username(self,value):
        if User.objects.filter(username__iexact=value).exists():
            raise serializers.ValidationError("Username is already taken")
        return value

    def validate_email(self,value):
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("Email is already registered")
        return value.lower()

    def validate_password(self,value):
        validate_password(value)
        return value

    def create(self,validated_data):
        with transaction.atomic():
            user = User.objects.create_user(
                username=validated_data["username"],
                email=validated_data["email"],
                password=validated_data["password"],
                first_name=validated_data.get("first_name",""),
                last_name=validated_data.get("last_name",""),
            )
            return UserProfile.objects.create(user=user)


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField(write_only=True)


class UserStatsSerializer(serializers.Serializer):
    recommendations_count = serializers.IntegerField()
    followers_count = serializers.IntegerField()
    following_count = serializers.IntegerField()
    likes_count = serializers.IntegerField()


class FeaturedUserSerializer(PublicProfileSerializer):
    recommendations_count = serializers.IntegerField(read_only=True)

    class Meta(PublicProfileSerializer.Meta):
        fields = PublicProfileSerializer.Meta.fields + ["recommendations_count"]

