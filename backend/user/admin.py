from django.contrib import admin
from .models import UserProfile, FollowRelation


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'followers_count', 'following_count', 'is_verified', 'created_at']
    list_filter = ['is_verified']
    search_fields = ['user__username', 'user__email']
    readonly_fields = ['id', 'followers_count', 'following_count', 'created_at']


@admin.register(FollowRelation)
class FollowRelationAdmin(admin.ModelAdmin):
    list_display = ['id', 'follower', 'following', 'created_at']
    search_fields = ['follower__user__username', 'following__user__username']
    readonly_fields = ['created_at', 'updated_at']
