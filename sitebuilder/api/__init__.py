"""
HTTP API blueprints for the site builder.
"""
from flask import request

from ..utils.exceptions import ValidationError


def get_json_body() -> dict:
    """Request JSON object, or ValidationError when missing or not an object."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data
