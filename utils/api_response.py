"""
JSON envelopes shared by every API route.

    {"success": true, "data": {...}, "message": "..."}
    {"success": false, "error": "...", "conflicts": [...]}
"""

from flask import jsonify
from typing import Any


def api_success(
    data: dict | list | None = None,
    message: str | None = None,
    warning: str | None = None,
    status: int = 200,
    **extra_fields: Any
) -> tuple:
    """
    Success envelope.

    Extra keyword fields land at the top level of the body, next to
    'data' (search flags, reservation_code, failed bulk items).
    """
    body = {'success': True}
    if data is not None:
        body['data'] = data
    if message:
        body['message'] = message
    if warning:
        body['warning'] = warning
    body.update(extra_fields)
    return jsonify(body), status


def api_error(error: str, status: int = 400, **extra_fields: Any) -> tuple:
    """Error envelope; extra fields carry conflicts or minimum stay details."""
    body = {'success': False, 'error': error}
    body.update(extra_fields)
    return jsonify(body), status
