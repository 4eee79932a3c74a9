"""
URL configuration for eraser project.

Funnel pages live at the root, the dashboard under /dashboard/, the REST
surface under /api/ and the document vault under /vault/.
"""
from django.contrib import admin
from django.urls import path, include

from community.views import vault_file

urlpatterns = [
    path('eraseradmin/', admin.site.urls),
    path('', include('funnel.urls', namespace='funnel')),
    path('accounts/', include('users.urls', namespace='users')),
    path('dashboard/', include('community.urls', namespace='community')),
    path('api/', include('funnel.api_urls')),
    path('api/', include('users.api_urls')),
    path('api/', include('community.api_urls')),
    path('api/', include('integrations.urls')),
    path('vault/<path:path>', vault_file, name='vault_file'),
]
