from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/',include('core.urls')),
    path('api/',include('community.urls')),
    path('api/', include('recommendations.content_urls')),
    path('api/user/',include('user.urls')),
    path('api/map/', include('locations.urls')),
    path('api/recommendations/', include('recommendations.urls')),
]
