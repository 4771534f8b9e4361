"""
URL configuration for the recommendations module.
"""
from django.urls import path, include
from rest_framework.routers import SimpleRouter
from recommendations.views import (
    RecommendationViewSet, CategoryViewSet, CuratorRecViewSet,
    CuratorRecManageView, TagListView
)

router = SimpleRouter()
router.register(r'categories', CategoryViewSet, basename='category')
router.register(r'curator-recs', CuratorRecViewSet, basename='curator-rec')
router.register(r'', RecommendationViewSet, basename='recommendation')

app_name = 'recommendations'

urlpatterns = [
    path('tags/', TagListView.as_view(), name='tags'),
    path('curator-recs/<uuid:recommendation_id>/', CuratorRecManageView.as_view(), name='curator-rec-manage'),
    path('', include(router.urls)),
]
