"""
Business logic for event ingestion.
"""

from typing import Any

from pydantic import ValidationError as PydanticValidationError

from serverless_tasks.dal import DocumentStore
from serverless_tasks.handlers.utils.errors import ValidationError, validation_error_from_pydantic
from serverless_tasks.handlers.utils.observability import count_metric, logger, tracer
from serverless_tasks.models.input import CreateEventRequest
from serverless_tasks.models.records import EventRecord

MISSING_FIELDS_MESSAGE = "Invalid input: principalId and content are required"


class EventService:
    """Stores ingested events; events are append-only."""

    def __init__(self, events_store: DocumentStore):
        self.events_store = events_store

    @tracer.capture_method
    def ingest(self, payload: Any) -> EventRecord:
        """
        Build and persist an event record.

        Args:
            payload: Decoded request body, expected to be an object with
                `principalId` and `content`

        Raises:
            ValidationError: The payload is not an object or lacks a required field
            ExternalServiceError: The write failed
        """
        if not isinstance(payload, dict):
            raise ValidationError(message=MISSING_FIELDS_MESSAGE)

        try:
            request = CreateEventRequest.model_validate(payload)
        except PydanticValidationError as e:
            raise validation_error_from_pydantic(e, message=MISSING_FIELDS_MESSAGE) from e

        record = EventRecord.create(principal_id=request.principal_id, content=request.content)
        self.events_store.put_item(record.to_item())

        count_metric("EventIngested")
        logger.info("Event stored", extra={"event_id": record.id, "principal_id": record.principal_id})
        return record
