# config/urls.py

from django.contrib import admin
from django.urls import path, include

from apps.core.views import health_check

urlpatterns = [
    # Admin
    path('admin/', admin.site.urls),

    # REST API
    path('api/', include('apps.core.urls')),
    path('api/', include('apps.board.urls')),

    # Liveness
    path('health/', health_check, name='health'),
]

# Admin titles
admin.site.site_header = 'TaskFlow Admin'
admin.site.site_title = 'TaskFlow'
admin.site.index_title = 'Administration'
