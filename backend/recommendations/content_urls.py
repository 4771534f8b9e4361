"""
URL configuration for staff-managed site content: admin recommends,
homepage sections and platform stats.
"""
from django.urls import path, include
from rest_framework.routers import SimpleRouter
from recommendations.views import (
    AdminRecommendViewSet, PlatformStatsView, SectionRecommendationView, SectionViewSet
)

router = SimpleRouter()
router.register(r'admin-recommends', AdminRecommendViewSet, basename='admin-recommend')
router.register(r'sections', SectionViewSet, basename='section')

app_name = 'content'

urlpatterns = [
    path('platform/stats/', PlatformStatsView.as_view(), name='platform-stats'),
    path(
        'sections/<uuid:section_id>/recommendations/<uuid:recommendation_id>/',
        SectionRecommendationView.as_view(),
        name='section-recommendation'
    ),
    path('', include(router.urls)),
]
