"""
Unit tests for the business logic layer.

Services are exercised against the in-memory capability fakes from conftest.
"""

import json
import re
from unittest.mock import MagicMock

import pytest

from serverless_tasks.handlers.utils.errors import (
    AccountExistsError,
    ExternalServiceError,
    InvalidCredentialsError,
    ResourceNotFoundError,
    ValidationError,
)
from serverless_tasks.logic.booking_service import ReservationService, TableService
from serverless_tasks.logic.event_service import MISSING_FIELDS_MESSAGE, EventService
from serverless_tasks.logic.identity_service import IdentityService
from serverless_tasks.logic.uuid_service import UuidBatchService
from serverless_tasks.logic.weather_service import WeatherService

SIGN_UP = {"firstName": "Ada", "lastName": "Lovelace", "email": "ada@example.com", "password": "Secret123!"}

RESERVATION = {
    "tableId": "1",
    "clientName": "John Doe",
    "phoneNumber": "0123456789",
    "date": "2024-10-01",
    "slotTimeStart": "13:00",
    "slotTimeEnd": "15:00",
}


class TestIdentityService:
    """Test cases for sign-up and sign-in."""

    @pytest.fixture
    def service(self, identity_provider):
        return IdentityService(identity_provider)

    def test_sign_up_creates_confirmed_account(self, service, identity_provider):
        """Test that sign-up provisions the account with a permanent password."""
        result = service.sign_up(SIGN_UP)

        assert result.message == "User created successfully."
        user = identity_provider.users["ada@example.com"]
        assert user["permanent"] is True
        assert user["password"] == "Secret123!"
        assert user["attributes"] == {
            "given_name": "Ada",
            "family_name": "Lovelace",
            "email": "ada@example.com",
            "email_verified": "true",
        }

    def test_password_passed_through_unchanged(self, service, identity_provider):
        """Test that surrounding and inner spaces in a password reach the identity store."""
        service.sign_up({**SIGN_UP, "password": "  pass word  "})

        assert identity_provider.users["ada@example.com"]["password"] == "  pass word  "
        assert service.sign_in({"email": "ada@example.com", "password": "  pass word  "}).id_token

    def test_names_and_email_trimmed(self, service, identity_provider):
        """Test that whitespace around names and email is removed."""
        service.sign_up({**SIGN_UP, "firstName": " Ada ", "email": " ada@example.com "})

        assert identity_provider.users["ada@example.com"]["attributes"]["given_name"] == "Ada"

    def test_sign_up_duplicate_email(self, service):
        """Test that a second sign-up with the same email is rejected."""
        service.sign_up(SIGN_UP)

        with pytest.raises(AccountExistsError) as exc_info:
            service.sign_up(SIGN_UP)

        assert exc_info.value.user_message == "Email already exists."

    @pytest.mark.parametrize("field", ["firstName", "lastName", "email", "password"])
    def test_sign_up_missing_field(self, service, identity_provider, field):
        """Test that every sign-up field is required and nothing is created."""
        body = {k: v for k, v in SIGN_UP.items() if k != field}

        with pytest.raises(ValidationError) as exc_info:
            service.sign_up(body)

        assert exc_info.value.user_message == "All fields are required."
        assert identity_provider.users == {}

    def test_email_shape_not_checked_by_default(self, service, identity_provider):
        """Test that email format is delegated to the identity store unless enabled."""
        service.sign_up({**SIGN_UP, "email": "not-an-email"})

        assert "not-an-email" in identity_provider.users

    def test_email_shape_checked_when_enabled(self, identity_provider):
        """Test the optional email format policy."""
        service = IdentityService(identity_provider, validate_email=True)

        with pytest.raises(ValidationError) as exc_info:
            service.sign_up({**SIGN_UP, "email": "not-an-email"})

        assert exc_info.value.user_message == "Invalid email format."

    def test_password_length_policy(self, identity_provider):
        """Test the optional minimum password length."""
        service = IdentityService(identity_provider, password_min_length=12)

        with pytest.raises(ValidationError) as exc_info:
            service.sign_up({**SIGN_UP, "password": "short"})

        assert exc_info.value.user_message == "Password must be at least 12 characters long."
        assert identity_provider.users == {}

    def test_sign_in_returns_token(self, service):
        """Test a successful sign-in after sign-up."""
        service.sign_up(SIGN_UP)

        result = service.sign_in({"email": "ada@example.com", "password": "Secret123!"})

        assert result.id_token == "id-token-for-ada@example.com"

    def test_sign_in_same_error_for_unknown_user_and_wrong_password(self, service):
        """Test that the failure does not reveal whether the account exists."""
        service.sign_up(SIGN_UP)

        with pytest.raises(InvalidCredentialsError) as wrong_password:
            service.sign_in({"email": "ada@example.com", "password": "nope"})
        with pytest.raises(InvalidCredentialsError) as unknown_user:
            service.sign_in({"email": "ghost@example.com", "password": "Secret123!"})

        assert wrong_password.value.user_message == unknown_user.value.user_message == "Invalid email or password."

    def test_sign_in_missing_field(self, service):
        """Test that email and password are both required."""
        with pytest.raises(ValidationError) as exc_info:
            service.sign_in({"email": "ada@example.com"})

        assert exc_info.value.user_message == "Email and password are required."

    def test_provider_failure_propagates(self, service, identity_provider, store_failure):
        """Test that identity store outages surface as external errors."""
        identity_provider.fail_with = store_failure

        with pytest.raises(ExternalServiceError):
            service.sign_in({"email": "ada@example.com", "password": "x"})


class TestTableService:
    """Test cases for the table catalogue."""

    @pytest.fixture
    def service(self, tables_store):
        return TableService(tables_store)

    def test_list_empty(self, service):
        """Test listing an empty catalogue."""
        assert service.list_tables().tables == []

    def test_create_then_get(self, service):
        """Test that a created table can be read back with its defaults."""
        created = service.create_table({"number": 1, "places": 8, "isVip": True})

        table = service.get_table(created.id)

        assert table["id"] == created.id
        assert table["minOrder"] == 0
        assert table["places"] == 8

    def test_create_keeps_supplied_id(self, service, tables_store):
        """Test that a client id is used as the key."""
        assert service.create_table({"id": "t-7", "number": 7}).id == "t-7"
        assert "t-7" in tables_store.items

    def test_generated_ids_distinct(self, service, tables_store):
        """Test that two tables without ids get distinct ids."""
        first = service.create_table({"number": 1})
        second = service.create_table({"number": 2})

        assert first.id != second.id
        assert len(tables_store.items) == 2

    def test_list_returns_all(self, service):
        """Test that every stored table is listed."""
        service.create_table({"number": 1})
        service.create_table({"number": 2})

        assert sorted(t["number"] for t in service.list_tables().tables) == [1, 2]

    def test_get_missing_table(self, service):
        """Test the not-found error."""
        with pytest.raises(ResourceNotFoundError) as exc_info:
            service.get_table("missing")

        assert exc_info.value.user_message == "Table not found"


class TestReservationService:
    """Test cases for reservations."""

    @pytest.fixture
    def service(self, reservations_store):
        return ReservationService(reservations_store)

    def test_create_reservation(self, service, reservations_store):
        """Test storing a reservation with its time window."""
        result = service.create_reservation(RESERVATION)

        assert result.message == "Reservation created successfully"
        stored = reservations_store.items[result.reservation_id]
        assert stored["tableId"] == "1"
        assert stored["slotTimeStart"] == "13:00"
        assert stored["slotTimeEnd"] == "15:00"
        assert stored["createdAt"]

    def test_missing_field_writes_nothing(self, service, reservations_store):
        """Test that an incomplete reservation is rejected before any write."""
        body = {k: v for k, v in RESERVATION.items() if k != "phoneNumber"}

        with pytest.raises(ValidationError) as exc_info:
            service.create_reservation(body)

        assert "phoneNumber" in exc_info.value.user_message
        assert reservations_store.put_calls == 0

    def test_list_reservations(self, service):
        """Test listing stored reservations."""
        service.create_reservation(RESERVATION)
        service.create_reservation({**RESERVATION, "tableId": "2"})

        assert len(service.list_reservations().reservations) == 2

    def test_numeric_values_accepted(self, service, reservations_store):
        """Test that JSON numbers are accepted for reservation fields and stored as sent."""
        result = service.create_reservation({**RESERVATION, "tableId": 7, "phoneNumber": 380501234567})

        stored = reservations_store.items[result.reservation_id]
        assert stored["tableId"] == 7
        assert stored["phoneNumber"] == 380501234567

    def test_store_failure_propagates(self, service, reservations_store, store_failure):
        """Test that write failures are not swallowed."""
        reservations_store.fail_with = store_failure

        with pytest.raises(ExternalServiceError):
            service.create_reservation(RESERVATION)


class TestEventService:
    """Test cases for event ingestion."""

    @pytest.fixture
    def service(self, events_store):
        return EventService(events_store)

    def test_ingest_stores_record(self, service, events_store):
        """Test that an event is stored with id, principal, timestamp and body."""
        record = service.ingest({"principalId": 1, "content": {"name": "John"}})

        assert events_store.items[record.id] == {
            "id": record.id,
            "principalId": 1,
            "createdAt": record.created_at,
            "body": {"name": "John"},
        }

    def test_null_content_accepted(self, service):
        """Test that explicit null content is stored."""
        assert service.ingest({"principalId": 2, "content": None}).body is None

    @pytest.mark.parametrize("payload", [
        {"content": "x"},
        {"principalId": 1},
        {"principalId": 0, "content": "x"},
        None,
        ["principalId", "content"],
    ])
    def test_invalid_payload(self, service, events_store, payload):
        """Test that incomplete or non-object payloads are rejected without a write."""
        with pytest.raises(ValidationError) as exc_info:
            service.ingest(payload)

        assert exc_info.value.user_message == MISSING_FIELDS_MESSAGE
        assert events_store.put_calls == 0

    def test_ids_unique(self, service):
        """Test that repeated ingestion yields distinct ids."""
        ids = {service.ingest({"principalId": 1, "content": "x"}).id for _ in range(5)}

        assert len(ids) == 5


class TestUuidBatchService:
    """Test cases for the UUID batch writer."""

    def test_write_batch(self, object_store):
        """Test that one object with ten distinct ids is written under the clock key."""
        service = UuidBatchService(object_store, clock=lambda: "2024-10-01T12:00:00.000Z")

        result = service.write_batch()

        assert result == {"bucket": "uuid-storage", "key": "2024-10-01T12:00:00.000Z", "count": 10}
        stored = object_store.objects["2024-10-01T12:00:00.000Z"]
        assert stored["content_type"] == "application/json"
        ids = json.loads(stored["body"])["ids"]
        assert len(ids) == 10
        assert len(set(ids)) == 10

    def test_body_is_pretty_printed(self, object_store):
        """Test the four-space indentation of the stored document."""
        UuidBatchService(object_store, clock=lambda: "k").write_batch()

        assert object_store.objects["k"]["body"].startswith('{\n    "ids": [\n        "')

    def test_default_key_is_timestamp(self, object_store):
        """Test that the default key is an ISO-8601 UTC timestamp."""
        key = UuidBatchService(object_store).write_batch()["key"]

        assert re.match(r'^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$', key)

    def test_failure_propagates(self, object_store, store_failure):
        """Test that upload failures reach the caller."""
        object_store.fail_with = store_failure

        with pytest.raises(ExternalServiceError):
            UuidBatchService(object_store).write_batch()


class TestWeatherService:
    """Test cases for the weather fetch-and-store cycle."""

    def test_fetch_and_store(self, events_store):
        """Test that the forecast subset is stored under a fresh id."""
        source = MagicMock()
        source.fetch.return_value = {"latitude": 50.4375, "longitude": 30.5, "hourly": {"time": []}}

        record = WeatherService(source, events_store).fetch_and_store()

        stored = events_store.items[record.id]
        assert stored["forecast"]["latitude"] == 50.4375
        assert stored["forecast"]["hourly"] == {"time": []}
        assert stored["forecast"]["elevation"] is None

    def test_fetch_failure_writes_nothing(self, events_store):
        """Test that a failed fetch never reaches the store."""
        source = MagicMock()
        source.fetch.side_effect = ExternalServiceError("down", service_name="WeatherAPI")

        with pytest.raises(ExternalServiceError):
            WeatherService(source, events_store).fetch_and_store()

        assert events_store.put_calls == 0
