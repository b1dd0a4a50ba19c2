# apps/board/urls.py

from django.urls import path
from . import views

app_name = 'board'

urlpatterns = [
    # Tasks of the caller
    path('my-tasks', views.my_tasks_view, name='my_tasks'),

    # Kanban - tasks of a project
    path('projects/<uuid:project_id>/tasks', views.project_tasks_view, name='project_tasks'),

    # Drag-and-drop status change
    path('projects/<uuid:project_id>/tasks/<uuid:task_id>', views.project_task_status_view,
         name='project_task_status'),

    # Task detail / update / delete
    path('tasks/<uuid:task_id>', views.task_detail_view, name='task_detail'),
]
