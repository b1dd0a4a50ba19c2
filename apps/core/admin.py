# apps/core/admin.py

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html
from .models import User, Project, ProjectMember, Task


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin for the email-based user model"""

    list_display = [
        'email', 'get_full_name', 'is_active', 'is_staff', 'created_at'
    ]
    list_filter = ['is_staff', 'is_active', 'created_at']
    search_fields = ['email', 'first_name', 'last_name']
    ordering = ['-created_at']
    readonly_fields = ['created_at', 'updated_at', 'last_login']

    fieldsets = (
        (None, {
            'fields': ('email', 'password')
        }),
        ('Profile', {
            'fields': ('first_name', 'last_name', 'profile_image_url')
        }),
        ('Permissions', {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
            'classes': ('collapse',)
        }),
        ('Dates', {
            'fields': ('last_login', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        })
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'first_name', 'last_name', 'password1', 'password2'),
        }),
    )


class ProjectMemberInline(admin.TabularInline):
    """Memberships inside the project page"""
    model = ProjectMember
    extra = 0
    fields = ['user', 'role', 'joined_at']
    readonly_fields = ['joined_at']
    autocomplete_fields = ['user']


class TaskInline(admin.TabularInline):
    """Tasks inside the project page"""
    model = Task
    extra = 0
    fields = ['title', 'status', 'priority', 'assignee', 'created_by']
    ordering = ['-created_at']
    show_change_link = True

    def has_add_permission(self, request, obj=None):
        """Read-only listing; tasks are created through the API"""
        return False


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    """Admin for projects"""

    list_display = [
        'name', 'status_badge', 'created_by', 'members_count',
        'tasks_count', 'deadline', 'updated_at'
    ]
    list_filter = ['status', 'created_at']
    search_fields = ['name', 'description', 'invite_code', 'created_by__email']
    readonly_fields = ['invite_code', 'created_at', 'updated_at']

    fieldsets = (
        ('Basic information', {
            'fields': ('name', 'description', 'status', 'deadline')
        }),
        ('Team', {
            'fields': ('created_by', 'invite_code')
        }),
        ('Dates', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        })
    )

    inlines = [ProjectMemberInline, TaskInline]

    def status_badge(self, obj):
        """Project status with a colored badge"""
        colors = {
            Project.STATUS_ACTIVE: '#10B981',  # green
            Project.STATUS_COMPLETED: '#3B82F6',  # blue
            Project.STATUS_ON_HOLD: '#F59E0B',  # yellow
        }
        return format_html(
            '<span style="background-color: {}; color: white; '
            'padding: 3px 8px; border-radius: 4px; font-size: 11px;">{}</span>',
            colors.get(obj.status, '#6B7280'), obj.get_status_display()
        )

    status_badge.short_description = 'Status'

    def members_count(self, obj):
        """Number of members"""
        return obj.memberships.count()

    members_count.short_description = 'Members'

    def tasks_count(self, obj):
        """Number of tasks"""
        return obj.tasks.count()

    tasks_count.short_description = 'Tasks'


@admin.register(ProjectMember)
class ProjectMemberAdmin(admin.ModelAdmin):
    """Admin for memberships"""

    list_display = ['project', 'user', 'role', 'joined_at']
    list_filter = ['role', 'joined_at']
    search_fields = ['project__name', 'user__email']
    autocomplete_fields = ['user', 'project']


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    """Admin for Kanban tasks"""

    list_display = [
        'title', 'project', 'status', 'priority_badge',
        'assignee', 'created_by', 'updated_at'
    ]
    list_filter = ['status', 'priority', 'project']
    search_fields = ['title', 'description', 'project__name']
    date_hierarchy = 'created_at'
    readonly_fields = ['created_at', 'updated_at']
    autocomplete_fields = ['assignee', 'created_by', 'project']

    def priority_badge(self, obj):
        """Priority with an icon"""
        icons = {
            'low': '🟢',
            'medium': '🟡',
            'high': '🔴',
        }
        return f"{icons.get(obj.priority, '')} {obj.get_priority_display()}"

    priority_badge.short_description = 'Priority'
