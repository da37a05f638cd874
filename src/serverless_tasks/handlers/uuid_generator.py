"""
Scheduled UUID batch writer.

Triggered by an EventBridge schedule. Each run uploads one JSON object holding
ten fresh UUIDs to S3, keyed by the run's timestamp. Failures are logged and
re-raised so the invocation is marked failed and the platform's retry policy
applies.
"""

from functools import lru_cache
from typing import Any, Dict

from aws_lambda_powertools.utilities.typing import LambdaContext

from serverless_tasks.dal.s3_handler import S3Handler
from serverless_tasks.handlers.models.env_vars import get_uuid_generator_env_vars
from serverless_tasks.handlers.utils.observability import count_metric, logger, metrics, tracer
from serverless_tasks.logic.uuid_service import UuidBatchService


@lru_cache(maxsize=1)
def get_uuid_batch_service() -> UuidBatchService:
    env_vars = get_uuid_generator_env_vars()
    return UuidBatchService(S3Handler(env_vars.S3_BUCKET_NAME, region_name=env_vars.AWS_REGION))


@tracer.capture_lambda_handler
@logger.inject_lambda_context
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    try:
        return get_uuid_batch_service().write_batch()
    except Exception:
        count_metric("UuidBatchFailed")
        logger.exception("UUID batch upload failed")
        raise
