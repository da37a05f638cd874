"""
SQS and SNS batch consumers.

Both consumers walk their batch in delivery order and log each message. There
is no per-record error isolation and no partial batch response: the invocation
answers 200 once every record has been logged, and a failure on any record
fails the whole invocation.
"""

from typing import Any, Dict, Iterable

from aws_lambda_powertools.utilities.data_classes import SNSEvent, SQSEvent, event_source
from aws_lambda_powertools.utilities.typing import LambdaContext

from serverless_tasks.handlers.utils.observability import count_metric, logger, metrics, tracer
from serverless_tasks.handlers.utils.responses import create_api_response
from serverless_tasks.models.output import MessageOutput

PROCESSED = MessageOutput(message="Messages processed successfully")


@tracer.capture_method
def log_messages(source: str, messages: Iterable[str]) -> int:
    """Log every message body in order; returns how many were seen."""
    count = 0
    for count, message in enumerate(messages, start=1):
        logger.info(f"{source} message received", extra={"message_body": message, "position": count})

    count_metric(f"{source}MessagesProcessed", value=count)
    logger.info(f"{source} batch processed", extra={"record_count": count})
    return count


@tracer.capture_lambda_handler
@logger.inject_lambda_context
@metrics.log_metrics(capture_cold_start_metric=True)
@event_source(data_class=SQSEvent)
def sqs_handler(event: SQSEvent, context: LambdaContext) -> Dict[str, Any]:
    log_messages("SQS", (record.body for record in event.records))
    return create_api_response(status_code=200, body=PROCESSED, cors_enabled=False)


@tracer.capture_lambda_handler
@logger.inject_lambda_context
@metrics.log_metrics(capture_cold_start_metric=True)
@event_source(data_class=SNSEvent)
def sns_handler(event: SNSEvent, context: LambdaContext) -> Dict[str, Any]:
    log_messages("SNS", (record.sns.message for record in event.records))
    return create_api_response(status_code=200, body=PROCESSED, cors_enabled=False)
