"""
Business Logic Layer Module.

Services hold the business rules and coordinate between the handlers and the
data access layer. Every service receives its capabilities (document store,
object store, identity provider, forecast source) through its constructor.
"""

from serverless_tasks.logic.booking_service import ReservationService, TableService
from serverless_tasks.logic.event_service import EventService
from serverless_tasks.logic.identity_service import IdentityService
from serverless_tasks.logic.uuid_service import UuidBatchService
from serverless_tasks.logic.weather_service import WeatherService

__all__ = [
    "EventService",
    "IdentityService",
    "ReservationService",
    "TableService",
    "UuidBatchService",
    "WeatherService",
]
