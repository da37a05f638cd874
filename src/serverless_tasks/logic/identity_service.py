"""
Business logic for account sign-up and sign-in.
"""

import re
from typing import Any, Dict

from pydantic import ValidationError as PydanticValidationError

from serverless_tasks.dal import IdentityProvider
from serverless_tasks.handlers.utils.errors import ValidationError, validation_error_from_pydantic
from serverless_tasks.handlers.utils.observability import count_metric, logger, tracer
from serverless_tasks.models.input import SignInRequest, SignUpRequest
from serverless_tasks.models.output import MessageOutput, SignInOutput

EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')


class IdentityService:
    """Provisions accounts and authenticates them against an IdentityProvider."""

    def __init__(
        self,
        identity_provider: IdentityProvider,
        validate_email: bool = False,
        password_min_length: int = 0,
    ):
        """
        Initialize identity service.

        Args:
            identity_provider: Account store (Cognito in production)
            validate_email: Reject emails that are not shaped like an address
            password_min_length: Minimum password length, 0 disables the check
        """
        self.identity_provider = identity_provider
        self.validate_email = validate_email
        self.password_min_length = password_min_length

    def _check_signup_policy(self, request: SignUpRequest) -> None:
        if self.validate_email and not EMAIL_PATTERN.match(request.email):
            raise ValidationError(
                message="Invalid email format.",
                field_errors=[{"field": "email", "message": "Invalid email format"}],
            )
        if self.password_min_length and len(request.password) < self.password_min_length:
            raise ValidationError(
                message=f"Password must be at least {self.password_min_length} characters long.",
                field_errors=[{"field": "password", "message": "Password too short"}],
            )

    @tracer.capture_method
    def sign_up(self, body: Dict[str, Any]) -> MessageOutput:
        """
        Create an account and make its password permanent.

        The account is created with the password as a temporary credential and
        immediately promoted, so the user can sign in without a reset challenge.

        Raises:
            ValidationError: Missing fields or a signup policy violation
            AccountExistsError: The email is already registered
            ExternalServiceError: Any other identity store failure
        """
        try:
            request = SignUpRequest.model_validate(body)
        except PydanticValidationError as e:
            raise validation_error_from_pydantic(e, message="All fields are required.") from e

        self._check_signup_policy(request)

        self.identity_provider.create_user(
            username=request.email,
            attributes={
                'given_name': request.first_name,
                'family_name': request.last_name,
                'email': request.email,
                'email_verified': 'true',
            },
            temporary_password=request.password,
        )
        self.identity_provider.set_permanent_password(username=request.email, password=request.password)

        count_metric("SignUpCount")
        logger.info("User created", extra={"username": request.email})
        return MessageOutput(message="User created successfully.")

    @tracer.capture_method
    def sign_in(self, body: Dict[str, Any]) -> SignInOutput:
        """
        Exchange email and password for an ID token.

        Raises:
            ValidationError: Missing email or password
            InvalidCredentialsError: The identity store rejected the credentials
            ExternalServiceError: Any other identity store failure
        """
        try:
            request = SignInRequest.model_validate(body)
        except PydanticValidationError as e:
            raise validation_error_from_pydantic(e, message="Email and password are required.") from e

        id_token = self.identity_provider.authenticate(username=request.email, password=request.password)

        count_metric("SignInCount")
        logger.info("User signed in", extra={"username": request.email})
        return SignInOutput(id_token=id_token)
