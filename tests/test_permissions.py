# tests/test_permissions.py

import pytest

from apps.core.models import ProjectMember
from apps.core.permissions import ProjectPermissions
from apps.core.utils import form_data_for_update, get_bearer_token, strip_protected_fields, to_snake_case

OWNER = ProjectMember.ROLE_OWNER
MEMBER = ProjectMember.ROLE_MEMBER


class FakeUser:
    def __init__(self, pk):
        self.pk = pk


class FakeTask:
    def __init__(self, created_by_id, assignee_id=None):
        self.created_by_id = created_by_id
        self.assignee_id = assignee_id


class FakeMembership:
    def __init__(self, user_id, role):
        self.user_id = user_id
        self.role = role


@pytest.mark.parametrize('role, expected', [(OWNER, True), (MEMBER, True), (None, False)])
def test_can_access_project(role, expected):
    assert ProjectPermissions.can_access_project(role) is expected


@pytest.mark.parametrize('role, expected', [(OWNER, True), (MEMBER, False), (None, False)])
def test_can_edit_project(role, expected):
    assert ProjectPermissions.can_edit_project(role) is expected


@pytest.mark.parametrize('role, task, expected', [
    (OWNER, FakeTask(created_by_id=2), True),
    (MEMBER, FakeTask(created_by_id=1), True),
    (MEMBER, FakeTask(created_by_id=2, assignee_id=1), True),
    (MEMBER, FakeTask(created_by_id=2, assignee_id=3), False),
    (None, FakeTask(created_by_id=1), False),
])
def test_can_edit_task(role, task, expected):
    assert ProjectPermissions.can_edit_task(FakeUser(1), role, task) is expected


@pytest.mark.parametrize('role, task, expected', [
    (OWNER, FakeTask(created_by_id=2), True),
    (MEMBER, FakeTask(created_by_id=1), True),
    (MEMBER, FakeTask(created_by_id=2, assignee_id=1), False),
    (None, FakeTask(created_by_id=1), False),
])
def test_can_delete_task(role, task, expected):
    assert ProjectPermissions.can_delete_task(FakeUser(1), role, task) is expected


@pytest.mark.parametrize('role, membership, expected', [
    (OWNER, FakeMembership(user_id=2, role=MEMBER), True),
    (OWNER, FakeMembership(user_id=1, role=OWNER), False),
    (MEMBER, FakeMembership(user_id=1, role=MEMBER), True),
    (MEMBER, FakeMembership(user_id=3, role=MEMBER), False),
])
def test_can_remove_member(role, membership, expected):
    assert ProjectPermissions.can_remove_member(FakeUser(1), role, membership) is expected


@pytest.mark.parametrize('key, expected', [
    ('assigneeId', 'assignee_id'),
    ('firstName', 'first_name'),
    ('profileImageUrl', 'profile_image_url'),
    ('title', 'title'),
    ('invite_code', 'invite_code'),
    ('profileImageURL', 'profile_image_url'),
    ('taskID', 'task_id'),
])
def test_to_snake_case(key, expected):
    assert to_snake_case(key) == expected


@pytest.mark.parametrize('header, expected', [
    ('Bearer abc.def', 'abc.def'),
    ('bearer abc.def', 'abc.def'),
    ('Token abc.def', None),
    ('Bearer', None),
    ('', None),
    (None, None),
])
def test_get_bearer_token(header, expected):
    assert get_bearer_token(header) == expected


def test_strip_protected_fields():
    data = {'title': 'x', 'id': '1', 'created_by': '2', 'project_id': '3', 'invite_code': 'A'}

    assert strip_protected_fields(data) == {'title': 'x'}


@pytest.mark.django_db
def test_form_data_for_update_keeps_absent_fields(alice, project):
    data = form_data_for_update(project, ['name', 'description', 'deadline'], {'name': 'New', 'status': 'x'})

    assert data == {'name': 'New', 'description': 'First sprint', 'deadline': ''}
