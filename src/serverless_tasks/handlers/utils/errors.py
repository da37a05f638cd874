"""
Service error hierarchy and its mapping onto HTTP responses.

Handlers never build error responses by hand: the logic and data access layers
raise a BaseServiceError subclass, and handle_service_errors turns it (or a
pydantic ValidationError, or anything unexpected) into a formatted response.
"""

import uuid
from enum import Enum
from functools import wraps
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from serverless_tasks.handlers.utils.observability import count_metric, logger, tracer
from serverless_tasks.handlers.utils.responses import create_api_response


class ErrorCategory(str, Enum):
    """Error categories for classification."""
    VALIDATION = "VALIDATION"
    AUTHENTICATION = "AUTHENTICATION"
    AUTHORIZATION = "AUTHORIZATION"
    NOT_FOUND = "NOT_FOUND"
    EXTERNAL_SERVICE = "EXTERNAL_SERVICE"
    INFRASTRUCTURE = "INFRASTRUCTURE"


class BaseServiceError(Exception):
    """Base exception class for service errors."""

    def __init__(
        self,
        message: str,
        error_code: str,
        category: ErrorCategory = ErrorCategory.INFRASTRUCTURE,
        user_message: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.category = category
        self.user_message = user_message or "Internal Server Error"
        self.error_id = str(uuid.uuid4())

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging."""
        return {
            "error_id": self.error_id,
            "error_code": self.error_code,
            "message": self.message,
            "user_message": self.user_message,
            "category": self.category.value,
        }


class ValidationError(BaseServiceError):
    """Raised when request input is malformed or incomplete."""

    def __init__(self, message: str, field_errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            category=ErrorCategory.VALIDATION,
            user_message=message,
        )
        self.field_errors = field_errors or []


class UnauthorizedError(BaseServiceError):
    """Raised when the caller-identity claim is missing."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(
            message=message,
            error_code="UNAUTHORIZED",
            category=ErrorCategory.AUTHORIZATION,
            user_message="Unauthorized",
        )


class ResourceNotFoundError(BaseServiceError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            message=f"{resource_type} with ID '{resource_id}' not found",
            error_code="RESOURCE_NOT_FOUND",
            category=ErrorCategory.NOT_FOUND,
            user_message=f"{resource_type} not found",
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class AccountExistsError(BaseServiceError):
    """Raised when the identity store already holds an account for the email."""

    def __init__(self, username: str):
        super().__init__(
            message=f"Account '{username}' already exists",
            error_code="ACCOUNT_EXISTS",
            category=ErrorCategory.VALIDATION,
            user_message="Email already exists.",
        )


class InvalidCredentialsError(BaseServiceError):
    """Raised for any rejected sign-in; never says which credential was wrong."""

    def __init__(self, reason: str):
        super().__init__(
            message=f"Authentication rejected: {reason}",
            error_code="INVALID_CREDENTIALS",
            category=ErrorCategory.AUTHENTICATION,
            user_message="Invalid email or password.",
        )


class ExternalServiceError(BaseServiceError):
    """Raised when a downstream AWS service or HTTP endpoint fails."""

    def __init__(
        self,
        message: str,
        service_name: str,
        error_code: str = "EXTERNAL_SERVICE_ERROR",
        user_message: Optional[str] = None,
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            category=ErrorCategory.EXTERNAL_SERVICE,
            user_message=user_message,
        )
        self.service_name = service_name


STATUS_MAPPING = {
    "VALIDATION_ERROR": 400,
    "ACCOUNT_EXISTS": 400,
    "INVALID_CREDENTIALS": 400,
    "UNAUTHORIZED": 401,
    "RESOURCE_NOT_FOUND": 404,
}


def get_http_status_code(error: BaseServiceError) -> int:
    """Get the HTTP status code for an error; unknown codes are server faults."""
    return STATUS_MAPPING.get(error.error_code, 500)


def format_error_response(error: BaseServiceError) -> Dict[str, Any]:
    """Client-facing error body. Internal detail stays in the logs."""
    return {"message": error.user_message}


@tracer.capture_method
def log_service_error(error: BaseServiceError) -> None:
    """Log and count a service error."""
    count_metric("ErrorCount")
    count_metric(f"Error{error.category.value.title().replace('_', '')}Count")
    tracer.put_annotation("error_code", error.error_code)

    log = logger.error if get_http_status_code(error) >= 500 else logger.warning
    log("Service error occurred", extra=error.to_dict())


def validation_error_from_pydantic(exc: PydanticValidationError, message: Optional[str] = None) -> ValidationError:
    """Build a ValidationError naming every offending field."""
    field_errors = [
        {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
        for error in exc.errors()
    ]
    if message is None:
        missing = [item["field"] for item, error in zip(field_errors, exc.errors()) if error["type"] == "missing"]
        if missing and len(missing) == len(field_errors):
            message = f"Missing required fields: {', '.join(missing)}"
        else:
            message = "Invalid input: " + "; ".join(f"{item['field']}: {item['message']}" for item in field_errors)
    return ValidationError(message=message, field_errors=field_errors)


def handle_service_errors(cors_enabled: bool = True) -> Callable:
    """Decorator factory turning raised errors into API Gateway responses."""

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except BaseServiceError as e:
                log_service_error(e)
                return create_api_response(
                    status_code=get_http_status_code(e),
                    body=format_error_response(e),
                    cors_enabled=cors_enabled,
                )
            except PydanticValidationError as e:
                error = validation_error_from_pydantic(e)
                log_service_error(error)
                return create_api_response(
                    status_code=400,
                    body=format_error_response(error),
                    cors_enabled=cors_enabled,
                )
            except Exception as e:
                logger.exception("Unexpected error in handler", extra={
                    "error": str(e),
                    "function_name": func.__name__,
                })
                count_metric("UnexpectedError")
                return create_api_response(
                    status_code=500,
                    body={"message": "Internal Server Error"},
                    cors_enabled=cors_enabled,
                )

        return wrapper

    return decorator
