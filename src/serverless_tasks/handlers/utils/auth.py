"""
Caller-identity helpers for API Gateway events.

Tokens are verified upstream by the API Gateway Cognito authorizer before the
function is invoked. These helpers only read the claim the authorizer attached
to the request context; they do not verify signatures or expiry.
"""

from typing import Any, Dict, Optional

from serverless_tasks.handlers.utils.errors import UnauthorizedError
from serverless_tasks.handlers.utils.observability import logger

USERNAME_CLAIM = 'cognito:username'


def extract_caller_username(event: Dict[str, Any]) -> Optional[str]:
    """Return the authorizer-asserted username claim, or None when absent."""
    request_context = event.get('requestContext') or {}
    authorizer = request_context.get('authorizer') or {}
    claims = authorizer.get('claims') or {}

    username = claims.get(USERNAME_CLAIM)
    return username or None


def require_caller_identity(event: Dict[str, Any]) -> str:
    """
    Return the caller's username or raise UnauthorizedError.

    Call this before touching any store so anonymous requests cause no reads
    or writes.
    """
    username = extract_caller_username(event)
    if username is None:
        raise UnauthorizedError(message=f"Missing '{USERNAME_CLAIM}' claim")

    logger.append_keys(caller=username)
    return username
