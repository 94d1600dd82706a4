from django.contrib import admin
from django.urls import path, include
from apps.core.views import DashboardView
from apps.museum.urls import collections_patterns, culture_patterns, expo_patterns

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/collections/', include(collections_patterns, namespace='collections')),
    path('api/culture/', include(culture_patterns, namespace='culture')),
    path('api/expo/', include(expo_patterns, namespace='expo')),
    path('api/core/', include('apps.core.urls', namespace='core')),

    # UI Endpoints
    path('api/ui/dashboard/', DashboardView.as_view(), name='ui-dashboard'),
]
