import logging

from django.contrib.auth import authenticate, login, logout
from django.db.models import Count
from rest_framework import status
from rest_framework.generics import get_object_or_404
from rest_framework.response import Response
from rest_framework.views import APIView

from community.models import Like
from core.params import parse_positive_int, viewer_profile
from .models import UserProfile
from .serializers import (
    FeaturedUserSerializer,
    LoginSerializer,
    ProfileUpdateSerializer,
    PublicProfileSerializer,
    RegisterSerializer,
    UserProfileSerializer,
    UserStatsSerializer,
)

logger = logging.getLogger(__name__)


def _authentication_required():
    return Response(
        {"error":"Authentication required"},
        status=status.HTTP_401_UNAUTHORIZED,
    )


class RegisterView(APIView):

    def post(self,request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        profile = serializer.save()
        login(request,profile.user)
        logger.info(f"Registered user {profile.user.username}")
        return Response(UserProfileSerializer(profile).data,status=status.HTTP_201_CREATED)


class LoginView(APIView):

    def post(self,request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = authenticate(
            request,
            username=serializer.validated_data["username"],
            password=serializer.validated_data["password"],
        )
        if user is None:
            return Response(
                {"error":"Invalid username or password"},
                status=status.HTTP_401_UNAUTHORIZED,
            )
        login(request,user)
        profile,_ = UserProfile.objects.get_or_create(user=user)
        return Response(UserProfileSerializer(profile).data)


class LogoutView(APIView):

    def post(self,request):
        logout(request)
        return Response(status=status.HTTP_204_NO_CONTENT)


class MeView(APIView):

    def get(self,request):
        profile = viewer_profile(request)
        if profile is None:
            return _authentication_required()
        serializer = UserProfileSerializer(profile)
        return Response(serializer.data)

    def patch(self,request):
        profile = viewer_profile(request)
        if profile is None:
            return _authentication_required()
        serializer = ProfileUpdateSerializer(profile,data=request.data,partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(UserProfileSerializer(profile).data)


class ProfileView(APIView):

    def get(self,request,id):
        profile = get_object_or_404(UserProfile,id=id)
        serializer = PublicProfileSerializer(profile)
        return Response(serializer.data)


class ProfileByUsernameView(APIView):

    def get(self,request,username):
        profile = get_object_or_404(UserProfile,user__username__iexact=username)
        serializer = PublicProfileSerializer(profile)
        return Response(serializer.data)


class UserStatsView(APIView):

    def get(self,request,id):
        profile = get_object_or_404(UserProfile,id=id)
        stats = {
            "recommendations_count":profile.recommendations.count(),
            "followers_count":profile.followers_count,
            "following_count":profile.following_count,
            "likes_count":Like.objects.filter(recommendation__user=profile).count(),
        }
        return Response(UserStatsSerializer(stats).data)


class FeaturedUsersView(APIView):
    """Users with the most public recommendations."""

    def get(self,request):
        limit = parse_positive_int(request.query_params.get("limit"),"limit",default=8)
        profiles = (
            UserProfile.objects.select_related("user")
            .annotate(recommendations_count=Count("recommendations"))
            .filter(recommendations_count__gt=0)
            .order_by("-recommendations_count","-followers_count")[:limit]
        )
        return Response(FeaturedUserSerializer(profiles,many=True).data)


class FollowView(APIView):

    def post(self,request,id):
        follower = viewer_profile(request)
        if follower is None:
            return _authentication_required()
        followed_profile = get_object_or_404(UserProfile,id=id)

        if follower == followed_profile:
            return Response(
                {"success":False,"message":"An account can not follow itself"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        if follower.is_following(followed_profile):
            return Response(
                {"success":False,"message":"Followed account is already followed"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        follower.follow(followed_profile)
        return Response(
            {"success":True,"message":"Successfully followed"},
            status=status.HTTP_200_OK,
        )


class UnfollowView(APIView):

    def post(self,request,id):
        follower = viewer_profile(request)
        if follower is None:
            return _authentication_required()
        followed = get_object_or_404(UserProfile,id=id)

        if follower == followed:
            return Response(
                {"success":False,"message":"An account can not unfollow itself"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        if not follower.is_following(followed):
            return Response(
                {"success":False,"message":"Account is not followed"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        follower.unfollow(followed)
        return Response(
            {"success":True,"message":"Successfully unfollowed"},
            status=status.HTTP_200_OK,
        )
