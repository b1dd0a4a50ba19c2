# apps/__init__.py

"""
TaskFlow - Django applications

This package holds every application of the system:
- core: users, projects, memberships, JWT authentication and permissions
- board: Kanban tasks and the real-time WebSocket events
"""

__version__ = '0.1.0'
