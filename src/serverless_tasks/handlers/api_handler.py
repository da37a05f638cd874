"""
Booking API - identity, tables and reservations behind one REST API.

The API Gateway REST API proxies every resource to this function; the
dispatcher picks the route from the method and the resource template. Table
and reservation routes require the Cognito authorizer's username claim.
"""

from functools import lru_cache
from typing import Any, Dict, List

import boto3
from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.utilities.typing import LambdaContext

from serverless_tasks.dal.cognito_handler import CognitoHandler
from serverless_tasks.dal.dynamodb_handler import DynamoDBHandler
from serverless_tasks.handlers.models.env_vars import ApiHandlerEnvVars, get_api_handler_env_vars
from serverless_tasks.handlers.utils.auth import require_caller_identity
from serverless_tasks.handlers.utils.dispatcher import Route, RouteDispatcher
from serverless_tasks.handlers.utils.errors import handle_service_errors
from serverless_tasks.handlers.utils.observability import count_metric, logger, metrics, tracer
from serverless_tasks.handlers.utils.request import parse_json_object
from serverless_tasks.handlers.utils.responses import create_api_response
from serverless_tasks.logic.booking_service import ReservationService, TableService
from serverless_tasks.logic.identity_service import IdentityService


class BookingApi:
    """Route handlers of the booking API. Each takes an API Gateway event and returns a response."""

    def __init__(
        self,
        identity_service: IdentityService,
        table_service: TableService,
        reservation_service: ReservationService,
    ):
        self.identity_service = identity_service
        self.table_service = table_service
        self.reservation_service = reservation_service

    @tracer.capture_method
    @handle_service_errors()
    def sign_up(self, event: Dict[str, Any]) -> Dict[str, Any]:
        response = self.identity_service.sign_up(parse_json_object(event))
        return create_api_response(status_code=200, body=response)

    @tracer.capture_method
    @handle_service_errors()
    def sign_in(self, event: Dict[str, Any]) -> Dict[str, Any]:
        response = self.identity_service.sign_in(parse_json_object(event))
        return create_api_response(status_code=200, body=response)

    @tracer.capture_method
    @handle_service_errors()
    def list_tables(self, event: Dict[str, Any]) -> Dict[str, Any]:
        require_caller_identity(event)
        return create_api_response(status_code=200, body=self.table_service.list_tables())

    @tracer.capture_method
    @handle_service_errors()
    def create_table(self, event: Dict[str, Any]) -> Dict[str, Any]:
        require_caller_identity(event)
        response = self.table_service.create_table(parse_json_object(event))
        return create_api_response(status_code=200, body=response)

    @tracer.capture_method
    @handle_service_errors()
    def get_table(self, event: Dict[str, Any]) -> Dict[str, Any]:
        require_caller_identity(event)
        path_parameters = event.get('pathParameters') or {}
        table_id = path_parameters.get('tableId', '')
        return create_api_response(status_code=200, body=self.table_service.get_table(table_id))

    @tracer.capture_method
    @handle_service_errors()
    def list_reservations(self, event: Dict[str, Any]) -> Dict[str, Any]:
        require_caller_identity(event)
        return create_api_response(status_code=200, body=self.reservation_service.list_reservations())

    @tracer.capture_method
    @handle_service_errors()
    def create_reservation(self, event: Dict[str, Any]) -> Dict[str, Any]:
        require_caller_identity(event)
        response = self.reservation_service.create_reservation(parse_json_object(event))
        return create_api_response(status_code=200, body=response)

    def routes(self) -> List[Route]:
        return [
            Route('POST', '/signup', self.sign_up),
            Route('POST', '/signin', self.sign_in),
            Route('GET', '/tables', self.list_tables),
            Route('POST', '/tables', self.create_table),
            Route('GET', '/tables/{tableId}', self.get_table),
            Route('GET', '/reservations', self.list_reservations),
            Route('POST', '/reservations', self.create_reservation),
        ]


def build_booking_api(env_vars: ApiHandlerEnvVars) -> BookingApi:
    """Wire the AWS-backed services from configuration."""
    dynamodb = boto3.resource('dynamodb', region_name=env_vars.AWS_REGION)
    identity_provider = CognitoHandler(
        user_pool_id=env_vars.cup_id,
        client_id=env_vars.cup_client_id,
        region_name=env_vars.AWS_REGION,
    )
    return BookingApi(
        identity_service=IdentityService(
            identity_provider=identity_provider,
            validate_email=env_vars.SIGNUP_VALIDATE_EMAIL,
            password_min_length=env_vars.SIGNUP_PASSWORD_MIN_LENGTH,
        ),
        table_service=TableService(DynamoDBHandler(env_vars.tables_table, dynamodb_resource=dynamodb)),
        reservation_service=ReservationService(
            DynamoDBHandler(env_vars.reservations_table, dynamodb_resource=dynamodb),
        ),
    )


@lru_cache(maxsize=1)
def get_dispatcher() -> RouteDispatcher:
    """Build the dispatcher once per execution environment."""
    env_vars = get_api_handler_env_vars()
    return RouteDispatcher(build_booking_api(env_vars).routes())


@tracer.capture_lambda_handler
@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST, clear_state=True)
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Lambda entry point for the booking API.

    Args:
        event: API Gateway REST proxy event
        context: Lambda context object

    Returns:
        API Gateway proxy response
    """
    count_metric("RequestCount")
    try:
        response = get_dispatcher().resolve(event)
    except Exception as e:
        count_metric("RequestError")
        logger.exception("Unhandled error in lambda handler", extra={"error": str(e)})
        return create_api_response(status_code=500, body={"message": "Internal Server Error"})

    logger.info("Request completed", extra={"status_code": response["statusCode"]})
    return response
