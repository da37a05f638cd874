"""
S3 implementation of the ObjectStore capability.
"""

from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from serverless_tasks.handlers.utils.errors import ExternalServiceError
from serverless_tasks.handlers.utils.observability import count_metric, logger, tracer


class S3Handler:
    """ObjectStore writing into a single bucket."""

    def __init__(self, bucket_name: str, region_name: Optional[str] = None, s3_client: Optional[Any] = None):
        self.bucket_name = bucket_name
        self.client = s3_client or boto3.client('s3', region_name=region_name)

    @tracer.capture_method
    def put_object(self, key: str, body: str, content_type: str) -> None:
        """
        Write `body` under `key`.

        Raises:
            ExternalServiceError: If the upload fails
        """
        try:
            self.client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=body.encode('utf-8'),
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            count_metric("S3PutObjectError")
            logger.error("S3 put_object failed", extra={
                "bucket": self.bucket_name,
                "key": key,
                "error": str(e),
            })
            raise ExternalServiceError(
                message=f"Upload to s3://{self.bucket_name}/{key} failed: {e}",
                service_name="S3",
                error_code="S3_PUT_OBJECT_FAILED",
            ) from e

        count_metric("S3PutObjectCount")
        logger.info("Object uploaded", extra={"bucket": self.bucket_name, "key": key, "size": len(body)})
