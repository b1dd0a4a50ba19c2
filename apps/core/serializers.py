# apps/core/serializers.py

"""
Response structures for the JSON API

Every resource leaves the API through one of these functions, with
camelCase keys. Projects are hydrated with creator, members and tasks;
tasks with assignee, creator and a project summary.
"""


def _iso(value):
    return value.isoformat() if value else None


def _id(value):
    return str(value) if value else None


def serialize_user(user):
    if user is None:
        return None

    return {
        'id': str(user.pk),
        'firstName': user.first_name,
        'lastName': user.last_name,
        'email': user.email,
        'profileImageUrl': user.profile_image_url or None,
    }


def serialize_project_summary(project):
    """Project without relations"""
    return {
        'id': str(project.pk),
        'name': project.name,
        'description': project.description,
        'status': project.status,
        'deadline': _iso(project.deadline),
        'inviteCode': project.invite_code,
        'createdBy': _id(project.created_by_id),
        'createdAt': _iso(project.created_at),
        'updatedAt': _iso(project.updated_at),
    }


def serialize_member(membership):
    return {
        'id': str(membership.pk),
        'projectId': str(membership.project_id),
        'userId': str(membership.user_id),
        'role': membership.role,
        'joinedAt': _iso(membership.joined_at),
        'user': serialize_user(membership.user),
    }


def serialize_task_summary(task):
    """Task without relations"""
    return {
        'id': str(task.pk),
        'title': task.title,
        'description': task.description,
        'status': task.status,
        'priority': task.priority,
        'projectId': str(task.project_id),
        'assigneeId': _id(task.assignee_id),
        'createdBy': _id(task.created_by_id),
        'createdAt': _iso(task.created_at),
        'updatedAt': _iso(task.updated_at),
    }


def serialize_project(project):
    """Hydrated project: summary + creator + members + tasks"""
    data = serialize_project_summary(project)
    data.update({
        'creator': serialize_user(project.created_by),
        'members': [serialize_member(m) for m in project.memberships.all()],
        'tasks': [serialize_task_summary(t) for t in project.tasks.all()],
    })
    return data


def serialize_task(task):
    """Hydrated task: summary + assignee + creator + project summary"""
    data = serialize_task_summary(task)
    data.update({
        'assignee': serialize_user(task.assignee),
        'creator': serialize_user(task.created_by),
        'project': serialize_project_summary(task.project),
    })
    return data
