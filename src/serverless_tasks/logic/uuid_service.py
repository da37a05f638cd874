"""
Business logic for the scheduled UUID batch writer.
"""

from typing import Any, Callable, Dict

from serverless_tasks.dal import ObjectStore
from serverless_tasks.handlers.utils.observability import count_metric, logger, tracer
from serverless_tasks.handlers.utils.responses import to_json
from serverless_tasks.models.records import UuidBatch, utc_now_iso

CONTENT_TYPE = 'application/json'


class UuidBatchService:
    """Writes one batch of fresh tokens per call, keyed by the write timestamp."""

    def __init__(self, object_store: ObjectStore, clock: Callable[[], str] = utc_now_iso):
        self.object_store = object_store
        self.clock = clock

    @tracer.capture_method
    def write_batch(self) -> Dict[str, Any]:
        """
        Generate a batch and upload it as a new object.

        Failures are not recovered here; they propagate to the caller.
        """
        batch = UuidBatch.generate()
        key = self.clock()

        self.object_store.put_object(key=key, body=to_json(batch, indent=4), content_type=CONTENT_TYPE)

        count_metric("UuidBatchWritten")
        logger.info("UUID batch uploaded", extra={
            "location": f"s3://{self.object_store.bucket_name}/{key}",
            "count": len(batch.ids),
        })
        return {"bucket": self.object_store.bucket_name, "key": key, "count": len(batch.ids)}
