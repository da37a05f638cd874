"""
Hello function behind an HTTP API (payload format 2.0).

A single registered route, GET /hello; every other method or path gets the
dispatcher's 404.
"""

from typing import Any, Dict

from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.utilities.typing import LambdaContext

from serverless_tasks.handlers.utils.dispatcher import Route, RouteDispatcher
from serverless_tasks.handlers.utils.observability import count_metric, logger, metrics, tracer
from serverless_tasks.handlers.utils.responses import create_api_response
from serverless_tasks.models.output import HelloOutput


@tracer.capture_method
def hello(event: Dict[str, Any]) -> Dict[str, Any]:
    count_metric("HelloCount")
    return create_api_response(status_code=200, body=HelloOutput(), cors_enabled=False)


dispatcher = RouteDispatcher([Route('GET', '/hello', hello)], cors_enabled=False)


@tracer.capture_lambda_handler
@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_HTTP)
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    return dispatcher.resolve(event)
