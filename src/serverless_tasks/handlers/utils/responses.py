"""
Response formatter shared by every HTTP-facing function.

Builds the `{statusCode, headers, body}` envelope API Gateway expects. The body
is always JSON text; DynamoDB Decimal values are rendered back into plain
numbers on the way out.
"""

import json
from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel

JSON_HEADERS = {
    "Content-Type": "application/json",
}

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type,Authorization",
    "Access-Control-Allow-Methods": "OPTIONS,POST,GET",
}


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True)
    if isinstance(value, set):
        return sorted(value, key=str)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_json(body: Any, indent: Optional[int] = None) -> str:
    """Serialize a response body, accepting pydantic models and Decimals."""
    if isinstance(body, BaseModel):
        body = body.model_dump(by_alias=True)
    return json.dumps(body, default=_json_default, indent=indent)


def create_api_response(
    status_code: int,
    body: Any,
    cors_enabled: bool = True,
    headers: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """Create a standardized API Gateway proxy response."""
    response_headers = dict(JSON_HEADERS)
    if cors_enabled:
        response_headers.update(CORS_HEADERS)
    if headers:
        response_headers.update(headers)

    return {
        "statusCode": status_code,
        "headers": response_headers,
        "body": body if isinstance(body, str) else to_json(body),
    }
