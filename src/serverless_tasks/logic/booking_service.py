"""
Business logic for restaurant tables and reservations.

Both services sit on a DocumentStore keyed by `id`. Neither offers update or
delete: records are created once and then only read.
"""

from typing import Any, Dict, List

from pydantic import ValidationError as PydanticValidationError

from serverless_tasks.dal import DocumentStore
from serverless_tasks.handlers.utils.errors import ResourceNotFoundError, validation_error_from_pydantic
from serverless_tasks.handlers.utils.observability import count_metric, logger, tracer
from serverless_tasks.models.input import CreateReservationRequest
from serverless_tasks.models.output import (
    CreateReservationOutput,
    CreateTableOutput,
    ListReservationsOutput,
    ListTablesOutput,
)
from serverless_tasks.models.records import ReservationRecord, build_table_item


class TableService:
    """Restaurant table catalogue."""

    def __init__(self, tables_store: DocumentStore):
        self.tables_store = tables_store

    @tracer.capture_method
    def list_tables(self) -> ListTablesOutput:
        tables: List[Dict[str, Any]] = self.tables_store.scan_all()
        logger.info("Tables listed", extra={"table_count": len(tables)})
        return ListTablesOutput(tables=tables)

    @tracer.capture_method
    def get_table(self, table_id: str) -> Dict[str, Any]:
        """
        Look up one table.

        Raises:
            ResourceNotFoundError: No table has this id
        """
        tracer.put_annotation("table_id", table_id)
        item = self.tables_store.get_item({'id': table_id})
        if item is None:
            raise ResourceNotFoundError(resource_type="Table", resource_id=table_id)
        return item

    @tracer.capture_method
    def create_table(self, fields: Dict[str, Any]) -> CreateTableOutput:
        item = build_table_item(fields)
        self.tables_store.put_item(item)

        count_metric("TableCreated")
        logger.info("Table created", extra={"table_id": str(item['id'])})
        return CreateTableOutput(id=item['id'])


class ReservationService:
    """Reservations against restaurant tables."""

    def __init__(self, reservations_store: DocumentStore):
        self.reservations_store = reservations_store

    @tracer.capture_method
    def list_reservations(self) -> ListReservationsOutput:
        reservations = self.reservations_store.scan_all()
        logger.info("Reservations listed", extra={"reservation_count": len(reservations)})
        return ListReservationsOutput(reservations=reservations)

    @tracer.capture_method
    def create_reservation(self, body: Dict[str, Any]) -> CreateReservationOutput:
        """
        Validate and store a reservation.

        Raises:
            ValidationError: A required field is missing or empty; nothing is written
        """
        try:
            request = CreateReservationRequest.model_validate(body)
        except PydanticValidationError as e:
            raise validation_error_from_pydantic(e) from e

        reservation = ReservationRecord.create(
            table_id=request.table_id,
            client_name=request.client_name,
            phone_number=request.phone_number,
            date=request.date,
            slot_time_start=request.slot_time_start,
            slot_time_end=request.slot_time_end,
        )
        self.reservations_store.put_item(reservation.to_item())

        count_metric("ReservationCreated")
        logger.info("Reservation created", extra={
            "reservation_id": reservation.id,
            "table_id": str(reservation.table_id),
        })
        return CreateReservationOutput(reservation_id=reservation.id)
