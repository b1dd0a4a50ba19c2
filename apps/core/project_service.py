# apps/core/project_service.py

"""
Project service - project lifecycle and membership

All writes that belong together run inside one transaction.
Broadcasts are scheduled by the views once the service returns.
"""

import logging
from typing import Dict

from django.db import IntegrityError, transaction

from .exceptions import ConflictError, NotFoundError
from .models import Project, ProjectMember, User

logger = logging.getLogger(__name__)


class ProjectService:
    """Encapsulates project creation, update, deletion and membership"""

    _invite_code_retries = 3

    def list_for_user(self, user: User):
        """Hydrated projects of the user, most recently updated first"""
        return Project.objects.for_user(user).hydrated().order_by('-updated_at')

    def get_hydrated(self, project_id) -> Project:
        project = Project.objects.hydrated().filter(pk=project_id).first()
        if project is None:
            raise NotFoundError('Project not found')
        return project

    def create_project(self, user: User, data: Dict) -> Project:
        """
        Creates the project and the creator's owner membership

        Both rows are written in one transaction: a project never
        exists without its owner.
        """
        for attempt in range(self._invite_code_retries):
            try:
                with transaction.atomic():
                    project = Project.objects.create(created_by=user, **data)
                    ProjectMember.objects.create(
                        project=project,
                        user=user,
                        role=ProjectMember.ROLE_OWNER,
                    )
                break
            except IntegrityError:
                # Invite code collision, a fresh code is drawn on retry
                if attempt == self._invite_code_retries - 1:
                    raise
                logger.warning("Invite code collision, retrying project creation")

        logger.info(f"📁 Project created: '{project.name}' by {user.email}")
        return self.get_hydrated(project.pk)

    def update_project(self, project: Project, data: Dict) -> Project:
        """Applies cleaned ProjectForm data (never invite_code or created_by)"""
        for field, value in data.items():
            setattr(project, field, value)
        project.save()

        logger.info(f"✏️ Project updated: '{project.name}'")
        return self.get_hydrated(project.pk)

    def delete_project(self, project: Project) -> None:
        """Deletes the project; members and tasks go with it"""
        name = project.name
        project.delete()
        logger.info(f"🗑️ Project deleted: '{name}'")

    def join_by_invite_code(self, user: User, invite_code: str) -> Project:
        """
        Adds the user as 'member' of the project owning the code

        Raises NotFoundError for an unknown code and ConflictError
        when the user is already a member.
        """
        project = Project.objects.filter(invite_code=invite_code.strip().upper()).first()
        if project is None:
            raise NotFoundError('Invalid invite code')

        if ProjectMember.objects.role_for(project, user):
            raise ConflictError('Already a member of this project')

        try:
            with transaction.atomic():
                ProjectMember.objects.create(
                    project=project,
                    user=user,
                    role=ProjectMember.ROLE_MEMBER,
                )
        except IntegrityError:
            # Concurrent redemption by the same user
            raise ConflictError('Already a member of this project')

        # Membership changes count as a project update
        project.save(update_fields=['updated_at'])

        logger.info(f"🤝 {user.email} joined project '{project.name}'")
        return self.get_hydrated(project.pk)

    def list_members(self, project: Project):
        return project.memberships.select_related('user').order_by('joined_at')

    def get_membership(self, project: Project, user_id) -> ProjectMember:
        membership = project.memberships.select_related('user').filter(user_id=user_id).first()
        if membership is None:
            raise NotFoundError('Member not found')
        return membership

    def remove_member(self, membership: ProjectMember) -> None:
        """
        Removes a member row

        Tasks assigned to the leaving user become unassigned, so
        assignees are always project members.
        """
        with transaction.atomic():
            membership.project.tasks.filter(assignee_id=membership.user_id).update(assignee=None)
            membership.delete()

        logger.info(f"👋 {membership.user.email} left project '{membership.project.name}'")


# Global service instance
project_service = ProjectService()
