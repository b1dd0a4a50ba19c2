# apps/board/views.py

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods

from apps.core.exceptions import AuthorizationError, NotFoundError
from apps.core.models import Task
from apps.core.permissions import (
    ProjectPermissions,
    project_access_required,
    require_project_role,
    token_required,
)
from apps.core.serializers import serialize_task
from apps.core.utils import form_data_for_update, parse_json_body, strip_protected_fields, validate_form

from .broadcast import TASK_CREATED, TASK_DELETED, TASK_UPDATED, broadcast_project_event
from .forms import TaskForm, TaskStatusForm

logger = logging.getLogger(__name__)

TASK_FIELDS = ['title', 'description', 'status', 'priority', 'assignee']


def _hydrated_tasks():
    return Task.objects.select_related('assignee', 'created_by', 'project')


def _get_task_or_404(task_id, project_id=None):
    queryset = _hydrated_tasks()
    if project_id is not None:
        queryset = queryset.filter(project_id=project_id)

    try:
        return queryset.get(pk=task_id)
    except (Task.DoesNotExist, DjangoValidationError):
        raise NotFoundError('Task not found')


def _task_payload(request):
    """JSON body with `assigneeId` mapped onto the form's `assignee` field"""
    payload = strip_protected_fields(parse_json_body(request))
    if 'assignee_id' in payload:
        payload['assignee'] = payload.pop('assignee_id')
    return payload


@require_GET
@token_required
def my_tasks_view(request):
    """Tasks assigned to the caller across all projects"""
    tasks = _hydrated_tasks().filter(
        assignee=request.user,
        project__memberships__user=request.user,
    ).order_by('-created_at')

    return JsonResponse([serialize_task(t) for t in tasks], safe=False)


@csrf_exempt
@require_http_methods(["GET", "POST"])
@token_required
@project_access_required
def project_tasks_view(request, project_id):
    """
    GET: tasks of the project, newest first (any member)
    POST: create a task in the project (any member)
    """
    project = request.project  # Injected by the decorator

    if request.method == 'GET':
        tasks = _hydrated_tasks().filter(project=project).order_by('-created_at')
        return JsonResponse([serialize_task(t) for t in tasks], safe=False)

    form = TaskForm(_task_payload(request), project=project)
    validate_form(form)

    task = form.save(commit=False)
    task.project = project
    task.created_by = request.user
    task.save()

    task = _get_task_or_404(task.pk)
    task_data = serialize_task(task)

    logger.info(f"🆕 Task created: '{task.title}' in '{project.name}' by {request.user.email}")
    broadcast_project_event(TASK_CREATED, project.pk, task=task_data)

    return JsonResponse(task_data, status=201)


@csrf_exempt
@require_http_methods(["PATCH"])
@token_required
@project_access_required
def project_task_status_view(request, project_id, task_id):
    """
    Status-only change used by drag-and-drop between columns

    Same edit rule as a full update: owners move any task, members
    only tasks they created or are assigned to.
    """
    task = _get_task_or_404(task_id, project_id=request.project.pk)

    if not ProjectPermissions.can_edit_task(request.user, request.project_role, task):
        raise AuthorizationError('Can only edit your own tasks')

    data = validate_form(TaskStatusForm(parse_json_body(request)))

    old_status = task.status
    task.status = data['status']
    task.save(update_fields=['status', 'updated_at'])

    task_data = serialize_task(task)

    logger.info(f"🔀 Task '{task.title}' moved {old_status} -> {task.status} by {request.user.email}")
    broadcast_project_event(TASK_UPDATED, task.project_id, task=task_data)

    return JsonResponse(task_data)


@csrf_exempt
@require_http_methods(["GET", "PUT", "PATCH", "DELETE"])
@token_required
def task_detail_view(request, task_id):
    """
    GET: hydrated task (any member)
    PUT/PATCH: update (owner, creator or assignee)
    DELETE: delete (owner or creator)
    """
    task = _get_task_or_404(task_id)
    role = require_project_role(task.project, request.user)

    if request.method == 'GET':
        return JsonResponse(serialize_task(task))

    if request.method == 'DELETE':
        if not ProjectPermissions.can_delete_task(request.user, role, task):
            raise AuthorizationError('Only project owners and task creators can delete tasks')

        project_id = task.project_id
        task.delete()

        logger.info(f"🗑️ Task deleted: {task_id} by {request.user.email}")
        broadcast_project_event(TASK_DELETED, project_id, taskId=str(task_id))

        return HttpResponse(status=204)

    if not ProjectPermissions.can_edit_task(request.user, role, task):
        raise AuthorizationError('Can only edit your own tasks')

    payload = _task_payload(request)
    form = TaskForm(form_data_for_update(task, TASK_FIELDS, payload), instance=task, project=task.project)
    validate_form(form)
    form.save()

    task = _get_task_or_404(task.pk)
    task_data = serialize_task(task)

    logger.info(f"✏️ Task updated: '{task.title}' by {request.user.email}")
    broadcast_project_event(TASK_UPDATED, task.project_id, task=task_data)

    return JsonResponse(task_data)
