# apps/board/broadcast.py

"""
Project event publishing

Events go to the Channels group of the project, so only sockets that
joined that project's room receive them. Publishing happens after the
surrounding transaction commits and is fire-and-forget: a failure is
logged and never reaches the HTTP caller.
"""

import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.conf import settings
from django.db import transaction

logger = logging.getLogger(__name__)

# Event kinds sent to clients
PROJECT_UPDATED = 'project_updated'
MEMBER_JOINED = 'member_joined'
MEMBER_LEFT = 'member_left'
TASK_CREATED = 'task_created'
TASK_UPDATED = 'task_updated'
TASK_DELETED = 'task_deleted'

EVENT_TYPES = (PROJECT_UPDATED, MEMBER_JOINED, MEMBER_LEFT, TASK_CREATED, TASK_UPDATED, TASK_DELETED)


def project_group_name(project_id):
    """Channels group of a project's room"""
    return f"{settings.BOARD_PROJECT_GROUP_PREFIX}_{project_id}"


def build_envelope(event_type, project_id, **payload):
    """Server -> client envelope: {type, projectId, <payload>}"""
    envelope = {'type': event_type, 'projectId': str(project_id)}
    envelope.update(payload)
    return envelope


def publish(event_type, project_id, envelope):
    """Sends an envelope to the project's group right away"""
    try:
        channel_layer = get_channel_layer()
        if channel_layer is None:
            logger.warning("No channel layer configured, event dropped")
            return

        async_to_sync(channel_layer.group_send)(
            project_group_name(project_id),
            {
                'type': event_type,
                'message': envelope,
            }
        )
        logger.debug(f"📡 {event_type} published to project {project_id}")

    except Exception as e:
        logger.warning(f"⚠️ Failed to publish {event_type} for project {project_id}: {e}")


def broadcast_project_event(event_type, project_id, **payload):
    """
    Schedules an event for the project's subscribers

    Runs once the current transaction commits (immediately in
    autocommit mode).
    """
    if event_type not in EVENT_TYPES:
        raise ValueError(f"Unknown event type: {event_type}")

    envelope = build_envelope(event_type, project_id, **payload)
    transaction.on_commit(lambda: publish(event_type, project_id, envelope))
    return envelope
