# apps/core/permissions.py

from functools import wraps

from django.core.exceptions import ValidationError as DjangoValidationError

from .auth_service import auth_service
from .exceptions import AuthorizationError, NotFoundError
from .models import Project, ProjectMember
from .utils import get_bearer_token


class ProjectPermissions:
    """
    Role rules for projects and tasks

    Roles come from ProjectMember: 'owner' (project creator) or
    'member' (joined through the invite code). None means no access.
    """

    @staticmethod
    def is_owner(role):
        return role == ProjectMember.ROLE_OWNER

    @staticmethod
    def can_access_project(role):
        """Any membership gives read access to the project and its tasks"""
        return role is not None

    @staticmethod
    def can_edit_project(role):
        """Only the owner updates or deletes a project"""
        return role == ProjectMember.ROLE_OWNER

    @staticmethod
    def can_edit_task(user, role, task):
        """Owner edits any task; members only tasks they created or are assigned to"""
        if role is None:
            return False

        if role == ProjectMember.ROLE_OWNER:
            return True

        return task.created_by_id == user.pk or task.assignee_id == user.pk

    @staticmethod
    def can_delete_task(user, role, task):
        """Owner or the task creator"""
        if role is None:
            return False

        return role == ProjectMember.ROLE_OWNER or task.created_by_id == user.pk

    @staticmethod
    def can_remove_member(user, role, membership):
        """Owner removes members; a member may remove themselves. The owner row stays."""
        if role is None or membership.role == ProjectMember.ROLE_OWNER:
            return False

        return role == ProjectMember.ROLE_OWNER or membership.user_id == user.pk


def get_project_or_404(project_id, queryset=None):
    queryset = queryset if queryset is not None else Project.objects.all()
    try:
        return queryset.get(pk=project_id)
    except (Project.DoesNotExist, DjangoValidationError):
        raise NotFoundError('Project not found')


def require_project_role(project, user):
    """Role of the user in the project or AuthorizationError"""
    role = ProjectMember.objects.role_for(project, user)
    if not ProjectPermissions.can_access_project(role):
        raise AuthorizationError('Access denied to this project')
    return role


# Decorators for views

def token_required(view_func):
    """
    Bearer token gate

    Resolves `Authorization: Bearer <token>` to a user and sets
    request.user. Raises AuthenticationError otherwise.
    """

    @wraps(view_func)
    def wrapped_view(request, *args, **kwargs):
        token = get_bearer_token(request.headers.get('Authorization'))
        request.user = auth_service.authenticate_token(token)
        return view_func(request, *args, **kwargs)

    return wrapped_view


def project_access_required(view_func):
    """
    Project membership gate
    Expects the view to receive project_id; requires token_required first.

    Adds request.project and request.project_role for the view.
    """

    @wraps(view_func)
    def wrapped_view(request, project_id, *args, **kwargs):
        project = get_project_or_404(project_id)

        request.project_role = require_project_role(project, request.user)
        request.project = project
        return view_func(request, project_id, *args, **kwargs)

    return wrapped_view
