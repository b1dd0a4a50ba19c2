# apps/core/urls.py

from django.urls import path
from . import views

app_name = 'core'

urlpatterns = [
    # === AUTHENTICATION ===
    path('auth/register', views.register_view, name='register'),
    path('auth/login', views.login_view, name='login'),
    path('auth/me', views.me_view, name='me'),
    path('auth/password', views.change_password_view, name='change_password'),

    # === PROJECTS ===
    path('projects', views.projects_view, name='projects'),
    # Before <uuid:project_id> so "join" is never read as an id
    path('projects/join', views.join_project_view, name='join_project'),
    path('projects/<uuid:project_id>', views.project_detail_view, name='project_detail'),

    # Membership
    path('projects/<uuid:project_id>/members', views.project_members_view, name='project_members'),
    path('projects/<uuid:project_id>/members/<uuid:user_id>', views.project_member_detail_view,
         name='project_member_detail'),
]
