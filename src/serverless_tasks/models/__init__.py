"""
Service Models Package

Pydantic models used throughout the service: request (input) models, response
(output) models and the persisted domain records.
"""

from .input import CreateEventRequest, CreateReservationRequest, SignInRequest, SignUpRequest
from .output import (
    CreateReservationOutput,
    CreateTableOutput,
    EventCreatedOutput,
    HelloOutput,
    ListReservationsOutput,
    ListTablesOutput,
    MessageOutput,
    SignInOutput,
    WeatherStoredOutput,
)
from .records import EventRecord, ReservationRecord, UuidBatch, WeatherRecord, build_table_item

__all__ = [
    # Input models
    "CreateEventRequest",
    "CreateReservationRequest",
    "SignInRequest",
    "SignUpRequest",

    # Output models
    "CreateReservationOutput",
    "CreateTableOutput",
    "EventCreatedOutput",
    "HelloOutput",
    "ListReservationsOutput",
    "ListTablesOutput",
    "MessageOutput",
    "SignInOutput",
    "WeatherStoredOutput",

    # Domain records
    "EventRecord",
    "ReservationRecord",
    "UuidBatch",
    "WeatherRecord",
    "build_table_item",
]
