"""
Data Access Layer (DAL) interfaces.

The logic layer depends only on these narrow capability protocols. Concrete
boto3/httpx implementations live in the sibling modules and are injected by the
handler modules when they build their services.
"""

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable


@runtime_checkable
class DocumentStore(Protocol):
    """Key-value table supporting point get, put and full scan."""

    table_name: str

    def get_item(self, key: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Retrieve an item by primary key, None when absent."""
        ...

    def put_item(self, item: Dict[str, Any]) -> Dict[str, Any]:
        """Create or replace an item."""
        ...

    def scan_all(self) -> List[Dict[str, Any]]:
        """Return every item in the table."""
        ...


@runtime_checkable
class ObjectStore(Protocol):
    """Blob storage supporting keyed puts."""

    bucket_name: str

    def put_object(self, key: str, body: str, content_type: str) -> None:
        ...


@runtime_checkable
class IdentityProvider(Protocol):
    """Account provisioning and password authentication."""

    def create_user(self, username: str, attributes: Dict[str, str], temporary_password: str) -> None:
        ...

    def set_permanent_password(self, username: str, password: str) -> None:
        ...

    def authenticate(self, username: str, password: str) -> str:
        """Exchange credentials for an ID token."""
        ...


@runtime_checkable
class ForecastSource(Protocol):
    """External HTTP endpoint returning a forecast document."""

    def fetch(self) -> Dict[str, Any]:
        ...


__all__ = [
    'DocumentStore',
    'ObjectStore',
    'IdentityProvider',
    'ForecastSource',
]
