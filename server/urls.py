"""Root URL configuration."""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/files/', include('server.apps.files.urls')),
    path('api/share/', include('server.apps.sharing.urls')),
]
