"""
Shared observability instances for every function in the package.

One Logger, Tracer and Metrics object is created per process and imported by
the handler, logic and data access layers, so a single invocation produces one
structured log stream, one trace and one metrics blob.
"""

import os

from aws_lambda_powertools.logging import Logger
from aws_lambda_powertools.metrics import Metrics, MetricUnit
from aws_lambda_powertools.tracing import Tracer

SERVICE_NAME = os.environ.get('POWERTOOLS_SERVICE_NAME', 'serverless-tasks')
METRICS_NAMESPACE = os.environ.get('POWERTOOLS_METRICS_NAMESPACE', 'ServerlessTasks')

# Log level is read from LOG_LEVEL / POWERTOOLS_LOG_LEVEL
logger: Logger = Logger(service=SERVICE_NAME, utc=True)

# Disabled outside Lambda or by setting POWERTOOLS_TRACE_DISABLED to "true"
tracer: Tracer = Tracer(service=SERVICE_NAME)

metrics: Metrics = Metrics(namespace=METRICS_NAMESPACE, service=SERVICE_NAME)


def count_metric(name: str, value: int = 1) -> None:
    """Add a Count metric to the current invocation's metrics blob."""
    metrics.add_metric(name=name, unit=MetricUnit.Count, value=value)
