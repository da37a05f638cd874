"""
AWS Lambda Handlers Module.

Entry points of the deployed functions. Each module exposes a
`lambda_handler(event, context)` (the queue module exposes `sqs_handler` and
`sns_handler`):

- api_handler: booking REST API (sign-up, sign-in, tables, reservations)
- events_handler: event ingestion
- hello_handler: HTTP API greeting
- queue_handlers: SQS and SNS batch consumers
- uuid_generator: scheduled UUID batch writer
- weather_processor: forecast fetch and store
"""

from serverless_tasks.handlers.utils.observability import logger, metrics, tracer

__all__ = [
    "logger",
    "tracer",
    "metrics",
]
