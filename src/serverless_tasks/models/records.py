"""
Domain records persisted by the functions.

Each record type owns its creation rule (generated id, server-set timestamp)
through a `create` classmethod; handlers never assemble stored items by hand.
Records are dumped by alias, so stored attribute names are the camelCase names
clients see.
"""

from datetime import datetime, timezone
from typing import Annotated, Any, Dict, List, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

UUID_BATCH_SIZE = 10

# Client-supplied reservation values, kept as sent
Scalar = Union[int, str]

# Forecast fields copied from the weather API document, in storage order
FORECAST_FIELDS = (
    'elevation',
    'generationtime_ms',
    'hourly',
    'hourly_units',
    'latitude',
    'longitude',
    'timezone',
    'timezone_abbreviation',
    'utc_offset_seconds',
)


def utc_now_iso() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def new_id() -> str:
    return str(uuid4())


class Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_item(self) -> Dict[str, Any]:
        """Plain dict for the document store and for response bodies."""
        return self.model_dump(by_alias=True)


class EventRecord(Record):
    """An ingested event. Never mutated after creation."""

    id: str
    principal_id: Annotated[int, Field(alias='principalId')]
    created_at: Annotated[str, Field(alias='createdAt')]
    body: Any

    @classmethod
    def create(cls, principal_id: int, content: Any) -> 'EventRecord':
        return cls(id=new_id(), principal_id=principal_id, created_at=utc_now_iso(), body=content)


class ReservationRecord(Record):
    """A table booking for one time window on one date."""

    id: str
    table_id: Annotated[Scalar, Field(alias='tableId')]
    client_name: Annotated[Scalar, Field(alias='clientName')]
    phone_number: Annotated[Scalar, Field(alias='phoneNumber')]
    date: Scalar
    slot_time_start: Annotated[Scalar, Field(alias='slotTimeStart')]
    slot_time_end: Annotated[Scalar, Field(alias='slotTimeEnd')]
    created_at: Annotated[str, Field(alias='createdAt')]

    @classmethod
    def create(
        cls,
        table_id: Scalar,
        client_name: Scalar,
        phone_number: Scalar,
        date: Scalar,
        slot_time_start: Scalar,
        slot_time_end: Scalar,
    ) -> 'ReservationRecord':
        """
        Create a new reservation with generated ID and creation timestamp.

        Args:
            table_id: Reference to the booked table
            client_name: Name the booking is made under
            phone_number: Contact number for the booking
            date: Booking date as sent by the client
            slot_time_start: Start of the time window
            slot_time_end: End of the time window

        Returns:
            New ReservationRecord instance
        """
        return cls(
            id=new_id(),
            table_id=table_id,
            client_name=client_name,
            phone_number=phone_number,
            date=date,
            slot_time_start=slot_time_start,
            slot_time_end=slot_time_end,
            created_at=utc_now_iso(),
        )


def build_table_item(fields: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge client-supplied table fields with the generated defaults.

    Tables are schemaless apart from `id` (kept when supplied, generated
    otherwise) and `minOrder` (0 when absent or null).
    """
    table_id = fields.get('id')
    if table_id is None or table_id == '':
        table_id = new_id()

    item = {**fields, 'id': table_id}
    if item.get('minOrder') is None:
        item['minOrder'] = 0
    return item


class UuidBatch(BaseModel):
    """Fixed-size list of distinct tokens written as one object."""

    ids: List[str]

    @field_validator('ids')
    @classmethod
    def validate_ids(cls, v: List[str]) -> List[str]:
        if len(v) != UUID_BATCH_SIZE:
            raise ValueError(f'a batch holds exactly {UUID_BATCH_SIZE} ids')
        if len(set(v)) != len(v):
            raise ValueError('batch ids must be distinct')
        return v

    @classmethod
    def generate(cls) -> 'UuidBatch':
        ids: List[str] = []
        while len(ids) < UUID_BATCH_SIZE:
            token = new_id()
            if token not in ids:
                ids.append(token)
        return cls(ids=ids)


class WeatherRecord(Record):
    """A forecast snapshot copied from the weather API."""

    id: str
    forecast: Dict[str, Any]

    @classmethod
    def from_api_document(cls, document: Dict[str, Any]) -> 'WeatherRecord':
        """Keep the fixed forecast field subset of an API document."""
        forecast = {name: document.get(name) for name in FORECAST_FIELDS}
        return cls(id=new_id(), forecast=forecast)
