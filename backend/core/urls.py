"""
URL routing for core endpoints.
"""
from django.urls import path
from .views import AppSettingUpdateView, AppSettingView, HealthView

urlpatterns = [
    path('health/', HealthView.as_view(), name='health'),
    path('settings/', AppSettingUpdateView.as_view(), name='app-settings'),
    path('settings/<str:key>/', AppSettingView.as_view(), name='app-setting'),
]
