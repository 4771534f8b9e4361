"""
Django admin configuration for community app.
"""
from django.contrib import admin
from community.models import Comment, Like


@admin.register(Like)
class LikeAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'recommendation', 'created_at']
    search_fields = ['user__user__username', 'recommendation__title']
    readonly_fields = ['created_at']


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'recommendation', 'parent', 'created_at']
    list_filter = ['created_at']
    search_fields = ['user__user__username', 'recommendation__title', 'text']
    readonly_fields = ['id', 'created_at']
