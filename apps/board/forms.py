# apps/board/forms.py

from django import forms

from apps.core.models import Task, User


class TaskForm(forms.ModelForm):
    """
    Task create/update payload

    The assignee must be a member of the task's project. project and
    created_by are set by the view, never by the caller.
    """

    class Meta:
        model = Task
        fields = ['title', 'description', 'status', 'priority', 'assignee']
        error_messages = {
            'assignee': {
                'invalid_choice': 'Assignee must be a member of this project',
            },
        }

    def __init__(self, *args, project=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.project = project
        self.fields['assignee'].queryset = User.objects.filter(memberships__project=project)
        self.fields['status'].required = False
        self.fields['priority'].required = False

    def clean_title(self):
        title = self.cleaned_data['title'].strip()
        if not title:
            raise forms.ValidationError("Title cannot be empty")
        return title

    def clean_status(self):
        return self._value_or_default('status', Task.STATUS_TODO)

    def clean_priority(self):
        return self._value_or_default('priority', 'medium')

    def _value_or_default(self, field, default):
        """Default only when the key was not sent; an explicit empty value is an error"""
        value = self.cleaned_data.get(field)
        if value:
            return value
        if field in self.data:
            raise forms.ValidationError(f"{field.capitalize()} cannot be empty")
        return default


class TaskStatusForm(forms.Form):
    """Status-only change (drag-and-drop between Kanban columns)"""

    status = forms.ChoiceField(choices=Task.STATUS_CHOICES)
