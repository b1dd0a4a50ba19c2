# apps/core/forms.py

"""
Request structures of the JSON API

Views bind the parsed JSON body to these forms; business logic only
ever sees cleaned_data.
"""

from django import forms
from django.contrib.auth import password_validation
from django.core.exceptions import ValidationError

from .models import Project


class RegisterForm(forms.Form):
    """New account"""

    email = forms.EmailField(max_length=255)
    password = forms.CharField(strip=False)
    first_name = forms.CharField(max_length=100)
    last_name = forms.CharField(max_length=100)
    profile_image_url = forms.URLField(max_length=500, required=False, assume_scheme='https')

    def clean_email(self):
        return self.cleaned_data['email'].strip().lower()

    def clean_password(self):
        password = self.cleaned_data.get('password')
        password_validation.validate_password(password)
        return password


class LoginForm(forms.Form):
    """Email + password"""

    email = forms.EmailField(max_length=255)
    password = forms.CharField(strip=False)


class ProfileForm(forms.Form):
    """Mutable profile fields; absent fields are left unchanged"""

    first_name = forms.CharField(max_length=100, required=False)
    last_name = forms.CharField(max_length=100, required=False)
    profile_image_url = forms.URLField(max_length=500, required=False, assume_scheme='https')

    def clean(self):
        cleaned_data = super().clean()
        # Keep only the keys the caller actually sent
        return {key: value for key, value in cleaned_data.items() if key in self.data}

    def clean_first_name(self):
        value = self.cleaned_data.get('first_name')
        if 'first_name' in self.data and not value:
            raise ValidationError("First name cannot be empty")
        return value

    def clean_last_name(self):
        value = self.cleaned_data.get('last_name')
        if 'last_name' in self.data and not value:
            raise ValidationError("Last name cannot be empty")
        return value


class PasswordChangeForm(forms.Form):
    """Current password + new password"""

    current_password = forms.CharField(strip=False)
    new_password = forms.CharField(strip=False)

    def __init__(self, user, *args, **kwargs):
        self.user = user
        super().__init__(*args, **kwargs)

    def clean_current_password(self):
        current_password = self.cleaned_data.get('current_password')
        if not self.user.check_password(current_password):
            raise ValidationError("Current password is incorrect")
        return current_password

    def clean_new_password(self):
        new_password = self.cleaned_data.get('new_password')
        password_validation.validate_password(new_password, self.user)
        return new_password


class ProjectForm(forms.ModelForm):
    """
    Project create/update payload

    invite_code and created_by are not fields here, so callers can
    never set them.
    """

    class Meta:
        model = Project
        fields = ['name', 'description', 'status', 'deadline']

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['status'].required = False

    def clean_status(self):
        status = self.cleaned_data.get('status')
        if status:
            return status
        if 'status' in self.data:
            raise ValidationError("Status cannot be empty")
        return Project.STATUS_ACTIVE

    def clean_name(self):
        name = self.cleaned_data['name'].strip()
        if not name:
            raise ValidationError("Name cannot be empty")
        return name


class JoinProjectForm(forms.Form):
    """Invite-code redemption"""

    invite_code = forms.CharField(max_length=20)

    def clean_invite_code(self):
        return self.cleaned_data['invite_code'].strip().upper()
