# apps/core/management/commands/seed.py

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.core.models import Project, ProjectMember, Task, User
from apps.core.project_service import project_service

DEMO_PASSWORD = 'demo12345'

DEMO_USERS = [
    {'email': 'alice@example.com', 'first_name': 'Alice', 'last_name': 'Owner'},
    {'email': 'bob@example.com', 'first_name': 'Bob', 'last_name': 'Member'},
]

DEMO_TASKS = [
    {'title': 'Write the project brief', 'status': Task.STATUS_DONE, 'priority': 'high'},
    {'title': 'Set up the Kanban board', 'status': Task.STATUS_IN_PROGRESS, 'priority': 'medium'},
    {'title': 'Invite the team', 'status': Task.STATUS_TODO, 'priority': 'low'},
]


class Command(BaseCommand):
    help = 'Populates the database with demo users, a project and tasks'

    def add_arguments(self, parser):
        parser.add_argument(
            '--flush',
            action='store_true',
            help='Deletes existing projects and demo users before seeding',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write('🌱 Seeding demo data...')

        if options['flush']:
            self._flush()

        alice, bob = [self._get_or_create_user(data) for data in DEMO_USERS]

        project = Project.objects.filter(name='Sprint 1', created_by=alice).first()
        if project is None:
            project = project_service.create_project(alice, {
                'name': 'Sprint 1',
                'description': 'Demo project created by the seed command',
            })
            self.stdout.write(f'  📁 Project created: {project.name}')

        ProjectMember.objects.get_or_create(
            project=project, user=bob,
            defaults={'role': ProjectMember.ROLE_MEMBER}
        )

        for data in DEMO_TASKS:
            Task.objects.get_or_create(
                project=project,
                title=data['title'],
                defaults={
                    'status': data['status'],
                    'priority': data['priority'],
                    'created_by': alice,
                    'assignee': bob,
                }
            )

        self.stdout.write(
            self.style.SUCCESS(
                '\n✅ Demo data ready!\n'
                f'  Users: {", ".join(u["email"] for u in DEMO_USERS)} (password: {DEMO_PASSWORD})\n'
                f'  Project: {project.name} (invite code: {project.invite_code})\n'
            )
        )

    def _flush(self):
        """Removes projects (with their members and tasks) and the demo users"""
        self.stdout.write('  🧹 Flushing existing data...')
        Task.objects.all().delete()
        Project.objects.all().delete()
        User.objects.filter(email__in=[u['email'] for u in DEMO_USERS]).delete()

    def _get_or_create_user(self, data):
        user = User.objects.get_by_email(data['email'])
        if user is None:
            user = User.objects.create_user(password=DEMO_PASSWORD, **data)
            self.stdout.write(f'  👤 User created: {user.email}')
        return user
