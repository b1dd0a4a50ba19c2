# apps/core/views.py

import logging

from django.core.cache import cache
from django.db import connection
from django.http import HttpResponse, JsonResponse
from django.utils import timezone
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from apps.board.broadcast import MEMBER_JOINED, MEMBER_LEFT, PROJECT_UPDATED, broadcast_project_event

from .auth_service import auth_service
from .exceptions import AuthorizationError
from .forms import JoinProjectForm, LoginForm, PasswordChangeForm, ProfileForm, ProjectForm, RegisterForm
from .permissions import ProjectPermissions, project_access_required, token_required
from .project_service import project_service
from .serializers import serialize_member, serialize_project, serialize_user
from .utils import form_data_for_update, parse_json_body, strip_protected_fields, validate_form

logger = logging.getLogger(__name__)

PROJECT_FIELDS = ['name', 'description', 'status', 'deadline']


# === AUTHENTICATION ===

@csrf_exempt
@require_POST
def register_view(request):
    """Creates an account and returns {token, user}"""
    form = RegisterForm(parse_json_body(request))
    data = validate_form(form)

    user, token = auth_service.register(data)

    return JsonResponse({'token': token, 'user': serialize_user(user)}, status=201)


@csrf_exempt
@require_POST
def login_view(request):
    """Checks email/password and returns {token, user}"""
    form = LoginForm(parse_json_body(request))
    data = validate_form(form)

    user, token = auth_service.login(data['email'], data['password'])

    return JsonResponse({'token': token, 'user': serialize_user(user)})


@csrf_exempt
@require_http_methods(["GET", "PATCH"])
@token_required
def me_view(request):
    """
    GET: current user
    PATCH: update profile fields (names, profile image)
    """
    if request.method == 'PATCH':
        payload = parse_json_body(request)
        form = ProfileForm(payload)
        data = validate_form(form)
        auth_service.update_profile(request.user, data)

    return JsonResponse(serialize_user(request.user))


@csrf_exempt
@require_POST
@token_required
def change_password_view(request):
    form = PasswordChangeForm(request.user, parse_json_body(request))
    data = validate_form(form)

    auth_service.change_password(request.user, data['new_password'])

    return HttpResponse(status=204)


# === PROJECTS ===

@csrf_exempt
@require_http_methods(["GET", "POST"])
@token_required
def projects_view(request):
    """
    GET: projects the caller belongs to
    POST: create a project; the caller becomes its owner
    """
    if request.method == 'GET':
        projects = project_service.list_for_user(request.user)
        return JsonResponse([serialize_project(p) for p in projects], safe=False)

    payload = strip_protected_fields(parse_json_body(request))
    data = validate_form(ProjectForm(payload))

    project = project_service.create_project(request.user, data)

    return JsonResponse(serialize_project(project), status=201)


@csrf_exempt
@require_http_methods(["GET", "PUT", "PATCH", "DELETE"])
@token_required
@project_access_required
def project_detail_view(request, project_id):
    """
    GET: hydrated project (any member)
    PUT/PATCH: update (owner only)
    DELETE: delete with members and tasks (owner only)
    """
    project = request.project  # Injected by the decorator

    if request.method == 'GET':
        return JsonResponse(serialize_project(project_service.get_hydrated(project.pk)))

    if not ProjectPermissions.can_edit_project(request.project_role):
        action = 'delete' if request.method == 'DELETE' else 'update'
        raise AuthorizationError(f'Only project owners can {action} projects')

    if request.method == 'DELETE':
        project_service.delete_project(project)
        return HttpResponse(status=204)

    payload = strip_protected_fields(parse_json_body(request))
    form = ProjectForm(form_data_for_update(project, PROJECT_FIELDS, payload), instance=project)
    data = validate_form(form)

    updated = project_service.update_project(project, data)
    project_data = serialize_project(updated)

    broadcast_project_event(PROJECT_UPDATED, updated.pk, project=project_data)

    return JsonResponse(project_data)


@csrf_exempt
@require_POST
@token_required
def join_project_view(request):
    """Redeems an invite code; the caller becomes a 'member'"""
    form = JoinProjectForm(parse_json_body(request))
    data = validate_form(form)

    project = project_service.join_by_invite_code(request.user, data['invite_code'])
    project_data = serialize_project(project)

    broadcast_project_event(MEMBER_JOINED, project.pk, project=project_data)

    return JsonResponse(project_data)


@require_GET
@token_required
@project_access_required
def project_members_view(request, project_id):
    members = project_service.list_members(request.project)
    return JsonResponse([serialize_member(m) for m in members], safe=False)


@csrf_exempt
@require_http_methods(["DELETE"])
@token_required
@project_access_required
def project_member_detail_view(request, project_id, user_id):
    """
    Removes a member

    The owner removes anyone but themselves; a member may leave.
    """
    membership = project_service.get_membership(request.project, user_id)

    if not ProjectPermissions.can_remove_member(request.user, request.project_role, membership):
        raise AuthorizationError('Cannot remove this member')

    project_service.remove_member(membership)

    broadcast_project_event(MEMBER_LEFT, project_id, userId=str(user_id))

    return HttpResponse(status=204)


# === MONITORING ===

@require_GET
def health_check(request):
    """
    Health check for monitoring
    """
    try:
        # Database
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")

        # Cache (Redis in production)
        cache.set('health_check', 'ok', 60)
        cache.get('health_check')

        status = {
            'status': 'healthy',
            'database': 'ok',
            'cache': 'ok',
            'timestamp': timezone.now().isoformat(),
        }

        return JsonResponse(status)

    except Exception as e:
        logger.error(f"❌ Health check failed: {e}")
        status = {
            'status': 'unhealthy',
            'error': str(e),
            'timestamp': timezone.now().isoformat(),
        }

        return JsonResponse(status, status=503)
