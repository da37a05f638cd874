"""
Weather processor - fetches the current forecast and stores it in DynamoDB.

Outbound calls (the forecast request and the DynamoDB write) are traced as
X-Ray subsegments through the Tracer's automatic patching of httpx and boto3.
"""

from functools import lru_cache
from typing import Any, Callable, Dict

from aws_lambda_powertools.utilities.typing import LambdaContext

from serverless_tasks.dal.dynamodb_handler import DynamoDBHandler
from serverless_tasks.dal.weather_api import WeatherApiClient
from serverless_tasks.handlers.models.env_vars import get_weather_processor_env_vars
from serverless_tasks.handlers.utils.errors import BaseServiceError, log_service_error
from serverless_tasks.handlers.utils.observability import count_metric, logger, metrics, tracer
from serverless_tasks.handlers.utils.responses import create_api_response
from serverless_tasks.logic.weather_service import WeatherService
from serverless_tasks.models.output import WeatherStoredOutput

FAILURE_MESSAGE = "Failed to fetch/store weather data"


@lru_cache(maxsize=1)
def get_weather_service() -> WeatherService:
    env_vars = get_weather_processor_env_vars()
    return WeatherService(
        forecast_source=WeatherApiClient(env_vars.WEATHER_API_URL, timeout=env_vars.WEATHER_API_TIMEOUT_SECONDS),
        weather_store=DynamoDBHandler(env_vars.WEATHER_TABLE, region_name=env_vars.AWS_REGION),
    )


def store_forecast(service_factory: Callable[[], WeatherService]) -> Dict[str, Any]:
    """Build the service, run one fetch-and-store cycle and shape the response."""
    logger.info("Fetching weather data")
    try:
        record = service_factory().fetch_and_store()
    except BaseServiceError as e:
        log_service_error(e)
        return create_api_response(status_code=500, body={"message": FAILURE_MESSAGE}, cors_enabled=False)
    except Exception as e:
        count_metric("UnexpectedError")
        logger.exception("Error fetching/storing weather data", extra={"error": str(e)})
        return create_api_response(status_code=500, body={"message": FAILURE_MESSAGE}, cors_enabled=False)

    logger.info("Weather data saved", extra={"record_id": record.id})
    return create_api_response(
        status_code=200,
        body=WeatherStoredOutput(data=record.to_item()),
        cors_enabled=False,
    )


@tracer.capture_lambda_handler
@logger.inject_lambda_context
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    return store_forecast(get_weather_service)
