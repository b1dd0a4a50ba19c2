# tests/conftest.py

import json

import pytest
from django.core.cache import cache
from django.test import Client

from apps.core.auth_service import auth_service
from apps.core.models import ProjectMember, Task, User
from apps.core.project_service import project_service

PASSWORD = 'secret123'


class ApiClient:
    """Django test client speaking JSON with an optional bearer token"""

    def __init__(self, token=None):
        self.client = Client()
        self.token = token

    def _headers(self):
        if self.token:
            return {'HTTP_AUTHORIZATION': f'Bearer {self.token}'}
        return {}

    def request(self, method, path, data=None):
        body = json.dumps(data) if data is not None else ''
        handler = getattr(self.client, method.lower())
        return handler(path, data=body, content_type='application/json', **self._headers())

    def get(self, path):
        return self.client.get(path, **self._headers())

    def post(self, path, data=None):
        return self.request('POST', path, data)

    def put(self, path, data=None):
        return self.request('PUT', path, data)

    def patch(self, path, data=None):
        return self.request('PATCH', path, data)

    def delete(self, path):
        return self.request('DELETE', path)


@pytest.fixture(autouse=True)
def clear_cache():
    """Login attempt counters live in the cache"""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def make_user(db):
    def _make_user(email='alice@x.com', first_name='Alice', last_name='Smith', password=PASSWORD):
        return User.objects.create_user(
            email=email, password=password, first_name=first_name, last_name=last_name
        )
    return _make_user


@pytest.fixture
def alice(make_user):
    return make_user()


@pytest.fixture
def bob(make_user):
    return make_user(email='bob@x.com', first_name='Bob', last_name='Jones')


@pytest.fixture
def carol(make_user):
    return make_user(email='carol@x.com', first_name='Carol', last_name='White')


@pytest.fixture
def anonymous_client():
    return ApiClient()


@pytest.fixture
def client_for():
    def _client_for(user):
        return ApiClient(auth_service.issue_token(user))
    return _client_for


@pytest.fixture
def project(alice):
    """'Sprint 1' owned by alice"""
    return project_service.create_project(alice, {'name': 'Sprint 1', 'description': 'First sprint'})


@pytest.fixture
def shared_project(project, bob):
    """'Sprint 1' with bob as member"""
    ProjectMember.objects.create(project=project, user=bob, role=ProjectMember.ROLE_MEMBER)
    return project


@pytest.fixture
def make_task(db):
    def _make_task(project, created_by, title='Write spec', **extra):
        return Task.objects.create(project=project, created_by=created_by, title=title, **extra)
    return _make_task
