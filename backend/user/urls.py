from django.urls import path
from .views import (
    FeaturedUsersView,
    FollowView,
    LoginView,
    LogoutView,
    MeView,
    ProfileByUsernameView,
    ProfileView,
    RegisterView,
    UnfollowView,
    UserStatsView,
)

urlpatterns = [
    path("register/", RegisterView.as_view(), name="register"),
    path("login/", LoginView.as_view(), name="login"),
    path("logout/", LogoutView.as_view(), name="logout"),
    path("me/", MeView.as_view(), name="me"),
    path("featured/", FeaturedUsersView.as_view(), name="featured-users"),
    path("by-username/<str:username>/", ProfileByUsernameView.as_view(), name="profile-by-username"),
    path("<uuid:id>/", ProfileView.as_view(), name="profile"),
    path("<uuid:id>/stats/", UserStatsView.as_view(), name="user-stats"),
    path("<uuid:id>/follow/", FollowView.as_view(), name="follow"),
    path("<uuid:id>/unfollow/", UnfollowView.as_view(), name="unfollow"),
]
