"""
DynamoDB implementation of the DocumentStore capability.

Wraps a boto3 Table resource with consistent error translation, metrics and
tracing. Floats are converted to Decimal before writes, since the boto3
serializer rejects float values.
"""

import json
import time
from decimal import Decimal
from functools import wraps
from typing import Any, Callable, Dict, List, Optional

import boto3
from aws_lambda_powertools.metrics import MetricUnit
from botocore.exceptions import BotoCoreError, ClientError

from serverless_tasks.handlers.utils.errors import ExternalServiceError
from serverless_tasks.handlers.utils.observability import count_metric, logger, metrics, tracer


def to_dynamodb_item(item: Dict[str, Any]) -> Dict[str, Any]:
    """Deep-copy an item replacing every float with a Decimal."""
    return json.loads(json.dumps(item), parse_float=Decimal)


def translate_errors(operation: str) -> Callable:
    """Decorator translating botocore failures into ExternalServiceError."""

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(self: 'DynamoDBHandler', *args, **kwargs):
            operation_start = time.time()
            count_metric(f"DynamoDB{operation}Count")

            try:
                result = func(self, *args, **kwargs)
            except ClientError as e:
                error_code = e.response['Error']['Code']
                count_metric(f"DynamoDB{operation}Error")
                logger.error(f"DynamoDB {operation} error", extra={
                    "error_code": error_code,
                    "error_message": e.response['Error'].get('Message'),
                    "table_name": self.table_name,
                })
                raise ExternalServiceError(
                    message=f"DynamoDB {operation} failed on {self.table_name}: {error_code}",
                    service_name="DynamoDB",
                    error_code=f"DYNAMODB_{error_code}",
                ) from e
            except BotoCoreError as e:
                count_metric(f"DynamoDB{operation}Error")
                logger.error(f"DynamoDB connection error during {operation}", extra={
                    "error": str(e),
                    "table_name": self.table_name,
                })
                raise ExternalServiceError(
                    message=f"Database connection error: {e}",
                    service_name="DynamoDB",
                    error_code="DATABASE_CONNECTION_ERROR",
                ) from e

            duration_ms = (time.time() - operation_start) * 1000
            metrics.add_metric(name=f"DynamoDB{operation}Duration", unit=MetricUnit.Milliseconds, value=duration_ms)
            return result

        return wrapper

    return decorator


class DynamoDBHandler:
    """DocumentStore backed by a single DynamoDB table."""

    def __init__(
        self,
        table_name: str,
        region_name: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        dynamodb_resource: Optional[Any] = None,
    ):
        """
        Initialize DynamoDB handler.

        Args:
            table_name: Name of the DynamoDB table
            region_name: AWS region name
            endpoint_url: DynamoDB endpoint URL (for local testing)
            dynamodb_resource: Existing boto3 DynamoDB resource to share
        """
        self.table_name = table_name

        if dynamodb_resource is None:
            resource_kwargs = {}
            if region_name:
                resource_kwargs['region_name'] = region_name
            if endpoint_url:
                resource_kwargs['endpoint_url'] = endpoint_url
            dynamodb_resource = boto3.resource('dynamodb', **resource_kwargs)

        self.table = dynamodb_resource.Table(table_name)

        logger.debug("DynamoDB handler initialized", extra={
            "table_name": table_name,
            "region_name": region_name,
            "endpoint_url": endpoint_url,
        })

    @tracer.capture_method
    @translate_errors("GetItem")
    def get_item(self, key: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Get a single item by primary key.

        Returns:
            Item data or None if not found

        Raises:
            ExternalServiceError: If the DynamoDB call fails
        """
        response = self.table.get_item(Key=key)
        return response.get('Item')

    @tracer.capture_method
    @translate_errors("PutItem")
    def put_item(self, item: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create or replace an item.

        Returns:
            The item as written

        Raises:
            ExternalServiceError: If the DynamoDB call fails
        """
        stored = to_dynamodb_item(item)
        self.table.put_item(Item=stored)

        logger.info("Item stored successfully", extra={
            "table_name": self.table_name,
            "item_id": str(item.get('id', 'unknown')),
        })
        return stored

    @tracer.capture_method
    @translate_errors("Scan")
    def scan_all(self) -> List[Dict[str, Any]]:
        """Scan the whole table, following LastEvaluatedKey pagination."""
        items: List[Dict[str, Any]] = []
        scan_kwargs: Dict[str, Any] = {}

        while True:
            response = self.table.scan(**scan_kwargs)
            items.extend(response.get('Items', []))

            last_evaluated_key = response.get('LastEvaluatedKey')
            if not last_evaluated_key:
                break
            scan_kwargs['ExclusiveStartKey'] = last_evaluated_key

        tracer.put_annotation("scanned_items", len(items))
        logger.debug("Table scanned", extra={"table_name": self.table_name, "item_count": len(items)})
        return items
