"""
Event ingestion function.

Accepts `{"principalId": <int>, "content": <any>}` either as a structured body
(direct invocation) or as JSON text (API Gateway), stores it as an event record
and answers 201 with the stored record.
"""

from functools import lru_cache
from typing import Any, Callable, Dict

from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.utilities.typing import LambdaContext

from serverless_tasks.dal.dynamodb_handler import DynamoDBHandler
from serverless_tasks.handlers.models.env_vars import get_events_handler_env_vars
from serverless_tasks.handlers.utils.errors import handle_service_errors
from serverless_tasks.handlers.utils.observability import count_metric, logger, metrics, tracer
from serverless_tasks.handlers.utils.request import parse_json_body
from serverless_tasks.handlers.utils.responses import create_api_response
from serverless_tasks.logic.event_service import EventService
from serverless_tasks.models.output import EventCreatedOutput


@lru_cache(maxsize=1)
def get_event_service() -> EventService:
    env_vars = get_events_handler_env_vars()
    return EventService(DynamoDBHandler(env_vars.TABLE_NAME, region_name=env_vars.AWS_REGION))


@handle_service_errors(cors_enabled=False)
def ingest_event(event: Dict[str, Any], service_factory: Callable[[], EventService]) -> Dict[str, Any]:
    """
    Parse, validate, store.

    The service is built inside the guarded call, so configuration and client
    construction failures are mapped to a response like any other error.
    """
    event_service = service_factory()
    record = event_service.ingest(parse_json_body(event))
    return create_api_response(
        status_code=201,
        body=EventCreatedOutput(event=record.to_item()),
        cors_enabled=False,
    )


@tracer.capture_lambda_handler
@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST)
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    count_metric("RequestCount")
    response = ingest_event(event, get_event_service)
    logger.info("Ingestion completed", extra={"status_code": response["statusCode"]})
    return response
