"""
URL routing for locations app.
"""
from django.urls import path
from .views import MapSearchView

urlpatterns = [
    path('search/', MapSearchView.as_view(), name='map-search'),
]
