"""
Input models for request validation using Pydantic.

Field names follow Python conventions; aliases carry the camelCase names used on
the wire. Required text fields must be non-empty once surrounding whitespace is
removed; passwords are taken exactly as sent.
"""

from typing import Annotated, Any, Union

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

# Reservation values may be JSON numbers or non-empty text
ScalarValue = Union[int, NonEmptyStr]

Password = Annotated[str, Field(min_length=1, repr=False)]


class SignUpRequest(CamelModel):
    """Request model for account creation."""

    first_name: Annotated[NonEmptyStr, Field(alias='firstName', examples=['Ada'])]
    last_name: Annotated[NonEmptyStr, Field(alias='lastName', examples=['Lovelace'])]
    email: Annotated[NonEmptyStr, Field(examples=['ada@example.com'])]
    password: Password


class SignInRequest(CamelModel):
    """Request model for password sign-in."""

    email: NonEmptyStr
    password: Password


class CreateReservationRequest(CamelModel):
    """Request model for booking a table."""

    table_id: Annotated[ScalarValue, Field(alias='tableId', examples=['1', 'table-7'])]
    client_name: Annotated[ScalarValue, Field(alias='clientName', examples=['John Doe'])]
    phone_number: Annotated[ScalarValue, Field(alias='phoneNumber', examples=['0123456789', 380501234567])]
    date: Annotated[ScalarValue, Field(examples=['2024-10-01'])]
    slot_time_start: Annotated[ScalarValue, Field(alias='slotTimeStart', examples=['13:00'])]
    slot_time_end: Annotated[ScalarValue, Field(alias='slotTimeEnd', examples=['15:00'])]


class CreateEventRequest(CamelModel):
    """Request model for event ingestion. `content` may be any JSON value, including null."""

    principal_id: Annotated[int, Field(alias='principalId', examples=[1])]
    content: Any

    @field_validator('principal_id')
    @classmethod
    def validate_principal_id(cls, v: int) -> int:
        """A zero principal id is treated the same as a missing one."""
        if v == 0:
            raise ValueError('principalId must be non-zero')
        return v
