# apps/core/__init__.py

"""
Core - main application of TaskFlow

Holds:
- Models (User, Project, ProjectMember, Task)
- JWT authentication service and project permissions
- Auth and project API views
- Seed command for development
"""
