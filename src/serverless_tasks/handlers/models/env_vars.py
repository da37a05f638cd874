"""
Environment variable models for type-safe configuration.

Each function reads its settings through aws_lambda_env_modeler, which
validates os.environ against one of these pydantic models (and caches the
result for the life of the process). Every variable has a fallback default so a
function still starts when its stack omits it.
"""

from typing import Annotated

from aws_lambda_env_modeler import BaseModel as BaseEnvModel, get_environment_variables
from pydantic import Field

DEFAULT_REGION = 'eu-west-1'
DEFAULT_WEATHER_API_URL = (
    'https://api.open-meteo.com/v1/forecast'
    '?latitude=50.4375&longitude=30.5&hourly=temperature_2m&timezone=auto'
)


class RegionEnvVars(BaseEnvModel):
    """Settings every function shares."""

    AWS_REGION: Annotated[str, Field(
        default=DEFAULT_REGION,
        description='AWS region for SDK clients',
        min_length=1,
    )] = DEFAULT_REGION


class ApiHandlerEnvVars(RegionEnvVars):
    """Settings of the booking API (identity, tables, reservations)."""

    # Cognito user pool holding the accounts
    cup_id: Annotated[str, Field(
        default='',
        description='Cognito user pool id',
    )] = ''

    # App client allowed to use ADMIN_USER_PASSWORD_AUTH
    cup_client_id: Annotated[str, Field(
        default='',
        description='Cognito user pool app client id',
    )] = ''

    tables_table: Annotated[str, Field(
        default='Tables',
        description='DynamoDB table name for restaurant tables',
        min_length=1,
    )] = 'Tables'

    reservations_table: Annotated[str, Field(
        default='Reservations',
        description='DynamoDB table name for reservations',
        min_length=1,
    )] = 'Reservations'

    SIGNUP_VALIDATE_EMAIL: Annotated[bool, Field(
        default=False,
        description='Reject sign-ups whose email is not shaped like an address',
    )] = False

    SIGNUP_PASSWORD_MIN_LENGTH: Annotated[int, Field(
        default=0,
        description='Minimum sign-up password length, 0 disables the check',
        ge=0,
        le=256,
    )] = 0


class EventsHandlerEnvVars(RegionEnvVars):
    """Settings of the event ingestion function."""

    TABLE_NAME: Annotated[str, Field(
        default='Events',
        description='DynamoDB table name for ingested events',
        min_length=1,
    )] = 'Events'


class UuidGeneratorEnvVars(RegionEnvVars):
    """Settings of the scheduled UUID batch writer."""

    S3_BUCKET_NAME: Annotated[str, Field(
        default='uuid-storage',
        description='S3 bucket receiving UUID batches',
        min_length=3,
    )] = 'uuid-storage'


class WeatherProcessorEnvVars(RegionEnvVars):
    """Settings of the weather fetch function."""

    WEATHER_TABLE: Annotated[str, Field(
        default='Weather',
        description='DynamoDB table name for weather records',
        min_length=1,
    )] = 'Weather'

    WEATHER_API_URL: Annotated[str, Field(
        default=DEFAULT_WEATHER_API_URL,
        description='Forecast endpoint queried on every invocation',
    )] = DEFAULT_WEATHER_API_URL

    WEATHER_API_TIMEOUT_SECONDS: Annotated[float, Field(
        default=10.0,
        description='HTTP timeout for the forecast request',
        gt=0,
        le=900,
    )] = 10.0


def get_api_handler_env_vars() -> ApiHandlerEnvVars:
    return get_environment_variables(model=ApiHandlerEnvVars)


def get_events_handler_env_vars() -> EventsHandlerEnvVars:
    return get_environment_variables(model=EventsHandlerEnvVars)


def get_uuid_generator_env_vars() -> UuidGeneratorEnvVars:
    return get_environment_variables(model=UuidGeneratorEnvVars)


def get_weather_processor_env_vars() -> WeatherProcessorEnvVars:
    return get_environment_variables(model=WeatherProcessorEnvVars)
