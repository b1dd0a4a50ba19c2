# apps/core/utils.py

import json
import logging
import re
from typing import Dict, Iterable, Optional

from django.forms.models import model_to_dict

from .exceptions import ValidationError

logger = logging.getLogger(__name__)

_WORD_BOUNDARY = re.compile(r'(.)([A-Z][a-z]+)')
_ACRONYM_BOUNDARY = re.compile(r'([a-z0-9])([A-Z])')

# Identity / ownership fields a caller may never set through an update
PROTECTED_FIELDS = ('id', 'created_by', 'project', 'project_id', 'invite_code')


def to_snake_case(key: str) -> str:
    """
    Converts a camelCase key to snake_case
    Ex: "assigneeId" -> "assignee_id"
    """
    key = _WORD_BOUNDARY.sub(r'\1_\2', key)
    return _ACRONYM_BOUNDARY.sub(r'\1_\2', key).lower()


def parse_json_body(request) -> Dict:
    """
    Reads the request body as a JSON object with snake_case keys

    An empty body is an empty object. Anything else than an
    object is a validation error.
    """
    if not request.body:
        return {}

    try:
        data = json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError('Malformed JSON body')

    if not isinstance(data, dict):
        raise ValidationError('JSON body must be an object')

    return {to_snake_case(key): value for key, value in data.items()}


def strip_protected_fields(data: Dict, protected: Iterable[str] = PROTECTED_FIELDS) -> Dict:
    """Removes identity/ownership keys from an update payload"""
    stripped = [key for key in protected if key in data]
    if stripped:
        logger.debug(f"Ignoring protected fields in payload: {', '.join(stripped)}")
    return {key: value for key, value in data.items() if key not in protected}


def form_data_for_update(instance, fields: Iterable[str], payload: Dict) -> Dict:
    """
    Builds form data for a partial update

    Current values of `fields` overlaid with the payload, so that
    fields absent from the payload keep their value.
    """
    data = model_to_dict(instance, fields=fields)
    data.update({key: value for key, value in payload.items() if key in fields})
    return {key: ('' if value is None else value) for key, value in data.items()}


def form_errors(form) -> Dict:
    """Form errors as {field: [messages]}"""
    return {field: [str(message) for message in messages] for field, messages in form.errors.items()}


def validate_form(form):
    """Returns cleaned_data or raises ValidationError with the field errors"""
    if not form.is_valid():
        raise ValidationError('Invalid input data', errors=form_errors(form))
    return form.cleaned_data


def get_bearer_token(header_value: Optional[str]) -> Optional[str]:
    """
    Extracts the token from an Authorization header value
    Ex: "Bearer abc.def.ghi" -> "abc.def.ghi"
    """
    if not header_value:
        return None

    parts = header_value.split()
    if len(parts) != 2 or parts[0].lower() != 'bearer':
        return None

    return parts[1]
