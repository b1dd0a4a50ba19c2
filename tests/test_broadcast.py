# tests/test_broadcast.py

from unittest import mock

import pytest
from django.db import transaction
from django.test import override_settings

from apps.board import broadcast
from apps.board.broadcast import (
    TASK_UPDATED,
    broadcast_project_event,
    build_envelope,
    project_group_name,
)

pytestmark = pytest.mark.django_db


def test_project_group_name():
    assert project_group_name('1234') == 'project_1234'


@override_settings(BOARD_PROJECT_GROUP_PREFIX='room')
def test_project_group_name_uses_configured_prefix():
    assert project_group_name('1234') == 'room_1234'


def test_build_envelope():
    envelope = build_envelope(TASK_UPDATED, 'abc', task={'id': '1'})

    assert envelope == {'type': 'task_updated', 'projectId': 'abc', 'task': {'id': '1'}}


def test_unknown_event_type_is_refused():
    with pytest.raises(ValueError):
        broadcast_project_event('something_else', 'abc')


def test_event_is_published_after_commit(django_capture_on_commit_callbacks):
    with mock.patch.object(broadcast, 'publish') as publish:
        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            envelope = broadcast_project_event(TASK_UPDATED, 'abc', task={'id': '1'})
            publish.assert_not_called()

    assert len(callbacks) == 1
    publish.assert_called_once_with(TASK_UPDATED, 'abc', envelope)


def test_event_is_dropped_on_rollback(django_capture_on_commit_callbacks):
    with mock.patch.object(broadcast, 'publish') as publish:
        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            try:
                with transaction.atomic():
                    broadcast_project_event(TASK_UPDATED, 'abc')
                    raise RuntimeError('rollback')
            except RuntimeError:
                pass

    assert callbacks == []
    publish.assert_not_called()


def test_publish_sends_to_project_group():
    channel_layer = mock.Mock()
    channel_layer.group_send = mock.AsyncMock()

    with mock.patch.object(broadcast, 'get_channel_layer', return_value=channel_layer):
        broadcast.publish(TASK_UPDATED, 'abc', {'type': TASK_UPDATED, 'projectId': 'abc'})

    channel_layer.group_send.assert_awaited_once_with(
        'project_abc',
        {'type': 'task_updated', 'message': {'type': 'task_updated', 'projectId': 'abc'}},
    )


def test_publish_failure_does_not_raise():
    channel_layer = mock.Mock()
    channel_layer.group_send = mock.AsyncMock(side_effect=ConnectionError('redis down'))

    with mock.patch.object(broadcast, 'get_channel_layer', return_value=channel_layer):
        broadcast.publish(TASK_UPDATED, 'abc', {})


def test_request_succeeds_when_channel_layer_is_down(client_for, alice, project, django_capture_on_commit_callbacks):
    channel_layer = mock.Mock()
    channel_layer.group_send = mock.AsyncMock(side_effect=ConnectionError('redis down'))

    with mock.patch.object(broadcast, 'get_channel_layer', return_value=channel_layer):
        with django_capture_on_commit_callbacks(execute=True):
            response = client_for(alice).patch(f'/api/projects/{project.pk}', {'name': 'Renamed'})

    assert response.status_code == 200
    channel_layer.group_send.assert_awaited_once()
