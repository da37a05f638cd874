"""
Cognito user pool implementation of the IdentityProvider capability.

Maps the Cognito error codes callers care about onto service errors:
an existing username becomes AccountExistsError, and every rejected
authentication (unknown user, wrong password, pending challenge) becomes the
same InvalidCredentialsError. A NotAuthorizedException that describes the
app client itself is a server-side failure and surfaces as ExternalServiceError.
"""

from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from serverless_tasks.handlers.utils.errors import (
    AccountExistsError,
    ExternalServiceError,
    InvalidCredentialsError,
)
from serverless_tasks.handlers.utils.observability import logger, tracer

AUTH_FLOW = 'ADMIN_USER_PASSWORD_AUTH'

# Cognito codes that mean "these credentials do not authenticate"
REJECTED_CREDENTIAL_CODES = frozenset({
    'NotAuthorizedException',
    'UserNotFoundException',
    'UserNotConfirmedException',
    'PasswordResetRequiredException',
})


# NotAuthorizedException messages that describe the app client, not the user
MISCONFIGURATION_MESSAGES = (
    'auth flow not enabled',
    'unable to verify secret hash',
)


def _error_code(error: ClientError) -> str:
    return error.response.get('Error', {}).get('Code', 'Unknown')


def _is_client_misconfiguration(error: ClientError) -> bool:
    message = (error.response.get('Error', {}).get('Message') or '').lower()
    return any(marker in message for marker in MISCONFIGURATION_MESSAGES)


class CognitoHandler:
    """IdentityProvider backed by a Cognito user pool and app client."""

    def __init__(
        self,
        user_pool_id: str,
        client_id: str,
        region_name: Optional[str] = None,
        cognito_client: Optional[Any] = None,
    ):
        self.user_pool_id = user_pool_id
        self.client_id = client_id
        self.client = cognito_client or boto3.client('cognito-idp', region_name=region_name)

    def _external_error(self, operation: str, error: Exception) -> ExternalServiceError:
        logger.error(f"Cognito {operation} failed", extra={
            "user_pool_id": self.user_pool_id,
            "error": str(error),
        })
        code = _error_code(error) if isinstance(error, ClientError) else type(error).__name__
        return ExternalServiceError(
            message=f"Cognito {operation} failed: {code}",
            service_name="Cognito",
            error_code=f"COGNITO_{code}",
        )

    @tracer.capture_method
    def create_user(self, username: str, attributes: Dict[str, str], temporary_password: str) -> None:
        """Create an account with a temporary password, without sending an invitation."""
        try:
            self.client.admin_create_user(
                UserPoolId=self.user_pool_id,
                Username=username,
                UserAttributes=[{'Name': name, 'Value': value} for name, value in attributes.items()],
                TemporaryPassword=temporary_password,
                MessageAction='SUPPRESS',
            )
        except ClientError as e:
            if _error_code(e) == 'UsernameExistsException':
                raise AccountExistsError(username=username) from e
            raise self._external_error("AdminCreateUser", e) from e
        except BotoCoreError as e:
            raise self._external_error("AdminCreateUser", e) from e

    @tracer.capture_method
    def set_permanent_password(self, username: str, password: str) -> None:
        """Promote the account's password to permanent, leaving FORCE_CHANGE_PASSWORD."""
        try:
            self.client.admin_set_user_password(
                UserPoolId=self.user_pool_id,
                Username=username,
                Password=password,
                Permanent=True,
            )
        except (ClientError, BotoCoreError) as e:
            raise self._external_error("AdminSetUserPassword", e) from e

    @tracer.capture_method
    def authenticate(self, username: str, password: str) -> str:
        """
        Exchange a username/password pair for an ID token.

        Raises:
            InvalidCredentialsError: If Cognito rejects the credentials or answers with a challenge
            ExternalServiceError: For any other failure
        """
        try:
            response = self.client.admin_initiate_auth(
                AuthFlow=AUTH_FLOW,
                UserPoolId=self.user_pool_id,
                ClientId=self.client_id,
                AuthParameters={
                    'USERNAME': username,
                    'PASSWORD': password,
                },
            )
        except ClientError as e:
            code = _error_code(e)
            if code in REJECTED_CREDENTIAL_CODES and not _is_client_misconfiguration(e):
                raise InvalidCredentialsError(reason=code) from e
            raise self._external_error("AdminInitiateAuth", e) from e
        except BotoCoreError as e:
            raise self._external_error("AdminInitiateAuth", e) from e

        result = response.get('AuthenticationResult')
        if not result or not result.get('IdToken'):
            raise InvalidCredentialsError(reason=f"challenge {response.get('ChallengeName', 'unknown')}")
        return result['IdToken']
