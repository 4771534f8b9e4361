"""
Django admin configuration for recommendations models.
"""
from django.contrib import admin
from recommendations.models import (
    AdminRecommend, Category, CuratorRec, Recommendation, Section, SectionRecommendation, Tag
)


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ['id', 'name', 'user', 'created_at']
    list_filter = ['created_at']
    search_fields = ['name', 'user__user__username']
    readonly_fields = ['id', 'created_at']


@admin.register(Tag)
class TagAdmin(admin.ModelAdmin):
    list_display = ['id', 'name', 'created_at']
    search_fields = ['name']
    readonly_fields = ['id', 'created_at']


@admin.register(Recommendation)
class RecommendationAdmin(admin.ModelAdmin):
    list_display = ['id', 'title', 'user', 'category', 'rating', 'is_private', 'created_at']
    list_filter = ['rating', 'is_private', 'created_at']
    search_fields = ['title', 'description', 'location', 'user__user__username']
    readonly_fields = ['id', 'updated_at']
    filter_horizontal = ['tags']


@admin.register(CuratorRec)
class CuratorRecAdmin(admin.ModelAdmin):
    list_display = ['id', 'recommendation', 'curated_by', 'created_at']
    list_filter = ['created_at']
    search_fields = ['recommendation__title', 'curated_by__user__username']
    readonly_fields = ['id']


class SectionRecommendationInline(admin.TabularInline):
    model = SectionRecommendation
    extra = 0
    raw_id_fields = ['recommendation']
    readonly_fields = ['created_at']


@admin.register(Section)
class SectionAdmin(admin.ModelAdmin):
    list_display = ['id', 'title', 'display_order', 'created_by', 'created_at']
    search_fields = ['title', 'subtitle']
    readonly_fields = ['id', 'updated_at']
    inlines = [SectionRecommendationInline]


@admin.register(AdminRecommend)
class AdminRecommendAdmin(admin.ModelAdmin):
    list_display = ['id', 'title', 'section', 'is_visible', 'created_by', 'created_at']
    list_filter = ['is_visible', 'created_at']
    search_fields = ['title', 'subtitle']
    readonly_fields = ['id', 'updated_at']
