# apps/board/consumers.py

import json
import logging
import uuid

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer
from django.utils import timezone

from apps.core.models import ProjectMember

from .broadcast import project_group_name

logger = logging.getLogger(__name__)

# Close code for handshakes without a valid token
CLOSE_UNAUTHENTICATED = 4401


class ProjectEventsConsumer(AsyncWebsocketConsumer):
    """
    WebSocket consumer for real-time project events

    One socket per client. The client joins project rooms with
    `join_project` and only receives events of the rooms it joined.

    Client -> server: join_project, leave_project, ping
    Server -> client: joined_project, left_project, pong, error and
    the project events (task_created, task_updated, ...)
    """

    async def connect(self):
        """
        Accepts authenticated sockets only
        """
        self.user = self.scope.get('user')
        self.project_groups = {}

        if self.user is None or not self.user.is_authenticated:
            logger.warning("❌ WebSocket rejected - not authenticated")
            await self.close(code=CLOSE_UNAUTHENTICATED)
            return

        await self.accept()
        logger.info(f"✅ WebSocket connected - {self.user.email}")

    async def disconnect(self, close_code):
        """
        Leaves every joined room
        """
        for group_name in list(getattr(self, 'project_groups', {}).values()):
            await self.channel_layer.group_discard(group_name, self.channel_name)

        if getattr(self, 'project_groups', None) is not None:
            self.project_groups.clear()

        user = getattr(self, 'user', None)
        if user is not None and user.is_authenticated:
            logger.info(f"🔌 WebSocket disconnected - {user.email} ({close_code})")

    async def receive(self, text_data=None, bytes_data=None):
        """
        Dispatches client envelopes by their `type`
        """
        try:
            data = json.loads(text_data or '')
        except json.JSONDecodeError:
            logger.error(f"❌ Invalid JSON received via WebSocket from {self.user.email}")
            await self.send_error('Invalid JSON')
            return

        if not isinstance(data, dict):
            await self.send_error('Message must be an object')
            return

        message_type = data.get('type')

        # Heartbeat
        if message_type == 'ping':
            await self.send_json({
                'type': 'pong',
                'timestamp': self.get_timestamp()
            })

        elif message_type == 'join_project':
            await self.join_project(data.get('projectId'))

        elif message_type == 'leave_project':
            await self.leave_project(data.get('projectId'))

        else:
            await self.send_error(f'Unknown message type: {message_type}')

    # === Rooms ===

    async def join_project(self, project_id):
        project_id = self.parse_project_id(project_id)
        if project_id is None:
            await self.send_error('Invalid projectId')
            return

        if not await self.is_project_member(project_id):
            logger.warning(f"❌ {self.user.email} denied room of project {project_id}")
            await self.send_error('Access denied to this project', projectId=project_id)
            return

        group_name = project_group_name(project_id)
        await self.channel_layer.group_add(group_name, self.channel_name)
        self.project_groups[project_id] = group_name

        await self.send_json({'type': 'joined_project', 'projectId': project_id})
        logger.info(f"📥 {self.user.email} joined room of project {project_id}")

    async def leave_project(self, project_id):
        project_id = self.parse_project_id(project_id)
        if project_id is None:
            await self.send_error('Invalid projectId')
            return

        group_name = self.project_groups.pop(project_id, None)
        if group_name:
            await self.channel_layer.group_discard(group_name, self.channel_name)

        await self.send_json({'type': 'left_project', 'projectId': project_id})

    # === Handlers for project events (group_send types) ===

    async def project_updated(self, event):
        await self.forward_event(event)

    async def member_joined(self, event):
        await self.forward_event(event)

    async def member_left(self, event):
        """
        A member left; a socket of that user stops receiving the room
        """
        message = event['message']
        if message.get('userId') == str(self.user.pk):
            group_name = self.project_groups.pop(message['projectId'], None)
            if group_name:
                await self.channel_layer.group_discard(group_name, self.channel_name)
        await self.forward_event(event)

    async def task_created(self, event):
        await self.forward_event(event)

    async def task_updated(self, event):
        await self.forward_event(event)

    async def task_deleted(self, event):
        await self.forward_event(event)

    # === Helpers ===

    async def forward_event(self, event):
        await self.send_json(event['message'])

    async def send_json(self, content):
        await self.send(text_data=json.dumps(content))

    async def send_error(self, message, **extra):
        content = {'type': 'error', 'message': message}
        content.update(extra)
        await self.send_json(content)

    @staticmethod
    def parse_project_id(value):
        """Normalised project id string, None when not a UUID"""
        try:
            return str(uuid.UUID(str(value)))
        except (TypeError, ValueError, AttributeError):
            return None

    @database_sync_to_async
    def is_project_member(self, project_id):
        return ProjectMember.objects.filter(project_id=project_id, user=self.user).exists()

    def get_timestamp(self):
        """
        Current timestamp in ISO format
        """
        return timezone.now().isoformat()
