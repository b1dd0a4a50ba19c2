# apps/board/__init__.py

"""
Board - Kanban application of TaskFlow

Features:
- Task API (create, update, drag-and-drop status, delete)
- Project rooms over WebSockets for real-time updates
"""
