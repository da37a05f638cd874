"""
Request body parsing for API Gateway events.
"""

import base64
import binascii
import json
from typing import Any, Dict

from serverless_tasks.handlers.utils.errors import ValidationError

INVALID_JSON_MESSAGE = "Invalid JSON format in request body"


def parse_json_body(event: Dict[str, Any], default: Any = None) -> Any:
    """
    Return the event body as a Python value.

    The body may already be structured (direct invocations, tests) or JSON
    text, optionally base64 encoded by API Gateway. A missing body yields
    `default`.

    Raises:
        ValidationError: If the body is not valid JSON
    """
    body = event.get('body')
    if body is None or body == '':
        return default

    if not isinstance(body, (str, bytes)):
        return body

    try:
        if event.get('isBase64Encoded'):
            body = base64.b64decode(body)
        return json.loads(body)
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ValidationError(message=INVALID_JSON_MESSAGE) from exc


def parse_json_object(event: Dict[str, Any]) -> Dict[str, Any]:
    """Like parse_json_body, but the body must be a JSON object."""
    body = parse_json_body(event, default={})
    if not isinstance(body, dict):
        raise ValidationError(message="Request body must be a JSON object")
    return body
