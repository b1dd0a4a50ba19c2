# tests/test_commands.py

from io import StringIO

import pytest
from django.core.management import call_command

from apps.core.models import Project, ProjectMember, Task, User

pytestmark = pytest.mark.django_db


def test_seed_creates_demo_data():
    out = StringIO()
    call_command('seed', stdout=out)

    project = Project.objects.get(name='Sprint 1')
    assert User.objects.filter(email__in=['alice@example.com', 'bob@example.com']).count() == 2
    assert ProjectMember.objects.role_for(project, User.objects.get(email='alice@example.com')) == 'owner'
    assert ProjectMember.objects.role_for(project, User.objects.get(email='bob@example.com')) == 'member'
    assert project.tasks.count() == 3
    assert project.invite_code in out.getvalue()


def test_seed_is_idempotent():
    call_command('seed', stdout=StringIO())
    call_command('seed', stdout=StringIO())

    assert Project.objects.count() == 1
    assert Task.objects.count() == 3


def test_seed_flush_recreates_project():
    call_command('seed', stdout=StringIO())
    first_code = Project.objects.get().invite_code

    call_command('seed', '--flush', stdout=StringIO())

    assert Project.objects.count() == 1
    assert Project.objects.get().invite_code != first_code


def test_health_check(client):
    response = client.get('/health/')

    assert response.status_code == 200
    assert response.json()['status'] == 'healthy'
