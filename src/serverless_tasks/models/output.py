"""
Output models for API responses using Pydantic.

Dumped by alias through the response formatter, so field names on the wire are
camelCase.
"""

from typing import Annotated, Any, Dict, List, Union

from pydantic import BaseModel, ConfigDict, Field


class OutputModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class MessageOutput(OutputModel):
    """Plain acknowledgement."""

    message: str


class SignInOutput(OutputModel):
    """Session token issued by the identity store."""

    id_token: Annotated[str, Field(alias='idToken', description='Cognito ID token')]


class ListTablesOutput(OutputModel):
    tables: List[Dict[str, Any]]


class CreateTableOutput(OutputModel):
    id: Annotated[Union[int, str], Field(description='Resolved table id')]


class ListReservationsOutput(OutputModel):
    reservations: List[Dict[str, Any]]


class CreateReservationOutput(OutputModel):
    reservation_id: Annotated[str, Field(alias='reservationId')]
    message: str = 'Reservation created successfully'


class EventCreatedOutput(OutputModel):
    """Ingestion result; repeats the status code in the body."""

    status_code: Annotated[int, Field(alias='statusCode')] = 201
    event: Dict[str, Any]


class HelloOutput(OutputModel):
    status_code: Annotated[int, Field(alias='statusCode')] = 200
    message: str = 'Hello from Lambda'


class WeatherStoredOutput(OutputModel):
    message: str = 'Weather data stored'
    data: Dict[str, Any]
