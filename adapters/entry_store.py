"""
Adapter for the spreadsheet-backed remote entry store.

Every operation is a GET against a single web app endpoint with an ``action``
query parameter. Responses are JSON objects; a top-level ``error`` field marks
a failure regardless of the action.
"""

import json
import logging
from typing import Any, Callable, Dict, List, Optional

from requests.exceptions import RequestException

from adapters.http_client import HTTPClientAdapter
from domain.exceptions import (
    EntryStoreError,
    InvalidResponseError,
    RemoteStoreError,
    StoreTransportError,
)
from domain.mapper import filter_rows, normalize_row
from infrastructure.config import Settings
from infrastructure.telemetry import get_tracer

# Get logger for this module
logger = logging.getLogger(__name__)

Row = Dict[str, str]


class EntryStoreAdapter:
    """Client for the remote entry store web app."""

    def __init__(self, http_client: HTTPClientAdapter, base_url: str) -> None:
        self.http_client = http_client
        self.base_url = base_url

    @classmethod
    def from_settings(cls, settings: Settings) -> "EntryStoreAdapter":
        """Create an adapter with its own HTTP client from runtime settings."""
        http_client = HTTPClientAdapter(
            timeout=settings.timeout,
            user_agent=settings.user_agent,
            verify_ssl=settings.verify_ssl,
        )
        return cls(http_client=http_client, base_url=settings.require_store_url())

    def _request(self, action: str, params: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        """
        Call ``action`` and return the decoded response envelope.

        Raises:
            StoreTransportError: Network failure or non-2xx status
            InvalidResponseError: Body is not a JSON object
            RemoteStoreError: Body carries an ``error`` field
        """
        query = {"action": action}
        query.update(params or {})

        with get_tracer().start_as_current_span("entry_store.request") as span:
            span.set_attribute("store.action", action)
            logger.debug("Calling store action %s with %s", action, params or {})

            try:
                content_type, content, status_code = self.http_client.get(
                    self.base_url, params=query
                )
            except RequestException as e:
                span.set_attribute("error.type", type(e).__name__)
                logger.error("Store action %s failed: %s", action, e)
                raise StoreTransportError(f"{action}: {e}") from e

            span.set_attribute("status_code", status_code)
            if not 200 <= status_code < 300:
                logger.error("Store action %s returned HTTP %d", action, status_code)
                raise StoreTransportError(f"{action}: HTTP error {status_code}")

            if "application/json" not in content_type:
                logger.debug("Store returned %r, parsing body as JSON anyway", content_type)

            result = self._decode(action, content)

            if result.get("error"):
                span.set_attribute("error.type", "RemoteStoreError")
                logger.error("Store action %s reported: %s", action, result["error"])
                raise RemoteStoreError(str(result["error"]))

            return result

    def _decode(self, action: str, content: str) -> Dict[str, Any]:
        try:
            result = json.loads(content)
        except json.JSONDecodeError as e:
            logger.error("Could not parse %s response as JSON: %s", action, e)
            raise InvalidResponseError(f"{action}: invalid response from entry store") from e
        if not isinstance(result, dict):
            raise InvalidResponseError(
                f"{action}: expected a JSON object, got {type(result).__name__}"
            )
        return result

    def test_connection(self) -> bool:
        """Return True if the store answers the ``test`` action."""
        try:
            self._request("test")
        except EntryStoreError as e:
            logger.warning("Connection test failed: %s", e)
            return False
        logger.info("Connection test successful")
        return True

    def fetch_rows(self) -> List[Row]:
        """Fetch every entry row, with column names normalized."""
        result = self._request("fetchData")
        data = result.get("data") or []
        if not isinstance(data, list):
            raise InvalidResponseError("fetchData: 'data' is not a list")
        rows = [normalize_row(row) for row in data if isinstance(row, dict)]
        logger.info("Fetched %d rows from entry store", len(rows))
        return rows

    def is_registered(self, identifier: str, month: str) -> bool:
        """Ask the store whether ``identifier`` already completed ``month``."""
        result = self._request("checkId", {"idNumber": identifier, "month": month})
        return bool(result.get("used", False))

    def record_timestamp(self, identifier: str, month: str) -> None:
        """Append a completion record. Does not check for duplicates."""
        result = self._request("recordTimestamp", {"id": identifier, "monthData": month})
        if not result.get("success"):
            raise RemoteStoreError(str(result.get("error") or "Failed to record timestamp"))
        logger.info("Timestamp recorded: ID %s, month %s", identifier, month)

    def register_if_absent(
        self,
        identifier: str,
        month: str,
        is_registered: Optional[Callable[[str, str], bool]] = None,
    ) -> bool:
        """
        Record a completion unless one already exists.

        The store offers no conditional insert, so this is a check followed by a
        write: two sessions racing on the same identifier and month can both
        pass the check. An atomic store only has to replace this method.

        Args:
            identifier: Viewer identifier
            month: Canonical month name
            is_registered: Check to use instead of ``self.is_registered``

        Returns:
            True if a record was written, False if the pair was already registered
        """
        check = is_registered or self.is_registered
        with get_tracer().start_as_current_span("entry_store.register_if_absent") as span:
            span.set_attribute("registration.month", month)
            if check(identifier, month):
                span.set_attribute("registration.duplicate", True)
                return False
            self.record_timestamp(identifier, month)
            span.set_attribute("registration.duplicate", False)
            return True

    def registrations_for_id(self, identifier: str) -> List[Row]:
        return filter_rows(self.fetch_rows(), "id", identifier)

    def registrations_for_month(self, month: str) -> List[Row]:
        return filter_rows(self.fetch_rows(), "month", month)
