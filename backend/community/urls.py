"""
URL routing for community app endpoints.
"""
from django.urls import path
from .views import ActivityFeedView, CommentListCreateView, LikeView, UserLikesView

urlpatterns = [
    path('activity-feed/', ActivityFeedView.as_view(), name='activity-feed'),
    path('like/<uuid:recommendation_id>/', LikeView.as_view(), name='like'),
    path('likes/', UserLikesView.as_view(), name='user-likes'),
    path('comments/<uuid:recommendation_id>/', CommentListCreateView.as_view(), name='comments'),
]
