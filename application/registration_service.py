"""
Application services for viewer registrations.

A registration is the recorded fact that an identifier finished viewing a
month. The remote store is the only place this is kept.
"""

import logging
from datetime import datetime, timezone

from opentelemetry import trace

from adapters.entry_store import EntryStoreAdapter
from domain.exceptions import EntryStoreError
from domain.models import RegistrationResult, RegistrationStatus

# Get logger for this module
logger = logging.getLogger(__name__)

# Get tracer for this module
tracer = trace.get_tracer(__name__)


def fail_open_on_check_error(error: EntryStoreError) -> bool:
    """
    Answer for a registration check that could not reach the store.

    The viewing flow stays available when the store is down, at the cost of
    possibly letting a duplicate through.
    """
    logger.warning("Registration check failed, allowing access: %s", error)
    return False


class RegistrationService:
    """Checks and records registrations against the entry store."""

    def __init__(self, store: EntryStoreAdapter) -> None:
        self.store = store

    def check_already_registered(self, identifier: str, month: str) -> bool:
        """Return True if the pair is registered; False when it is not or the check fails."""
        with tracer.start_as_current_span("check_already_registered") as span:
            span.set_attribute("registration.month", month)
            try:
                used = self.store.is_registered(identifier, month)
            except EntryStoreError as e:
                span.set_attribute("error.type", type(e).__name__)
                return fail_open_on_check_error(e)
            span.set_attribute("registration.used", used)
            logger.debug("ID %s registered for %s: %s", identifier, month, used)
            return used

    def commit_completion(self, identifier: str, month: str) -> RegistrationResult:
        """
        Record that ``identifier`` completed ``month`` unless it already did.

        Args:
            identifier: Viewer identifier
            month: Month that was viewed

        Returns:
            RegistrationResult; ``success`` is False for missing input, duplicates
            and store failures
        """
        normalized_id = (identifier or "").strip()
        normalized_month = (month or "").strip()

        if not normalized_id or not normalized_month:
            return RegistrationResult(
                success=False, message="ID Number and Month are required."
            )

        with tracer.start_as_current_span("commit_completion") as span:
            span.set_attribute("registration.month", normalized_month)
            logger.info(
                "Attempting to register ID %s for %s", normalized_id, normalized_month
            )

            try:
                written = self.store.register_if_absent(
                    normalized_id,
                    normalized_month,
                    is_registered=self.check_already_registered,
                )
            except EntryStoreError as e:
                logger.error("Registration failed: %s", e)
                span.set_attribute("success", False)
                span.set_attribute("error.type", type(e).__name__)
                return RegistrationResult(
                    success=False, message=f"Registration failed: {e}"
                )

            if not written:
                logger.warning(
                    "Registration denied: ID %s has already been registered for %s",
                    normalized_id,
                    normalized_month,
                )
                span.set_attribute("success", False)
                return RegistrationResult(
                    success=False,
                    message=(
                        f"This ID has already been registered for {normalized_month}. "
                        "Duplicate registrations are not allowed."
                    ),
                )

            span.set_attribute("success", True)
            logger.info(
                "Successfully registered ID %s for %s", normalized_id, normalized_month
            )
            return RegistrationResult(
                success=True,
                message=(
                    f"Registration successful for ID {normalized_id} in {normalized_month}."
                ),
                data={
                    "id": normalized_id,
                    "month": normalized_month,
                    "timestamp": datetime.now(timezone.utc).isoformat(),
                },
            )

    def registration_status(self, identifier: str, month: str) -> RegistrationStatus:
        """Describe whether the pair is registered, with the recorded date when available."""
        normalized_id = identifier.strip()
        normalized_month = month.strip()

        if not self.check_already_registered(normalized_id, normalized_month):
            return RegistrationStatus(
                is_registered=False,
                message=f"ID {normalized_id} is available for registration in {normalized_month}",
            )

        registration_date = None
        try:
            for row in self.store.registrations_for_id(normalized_id):
                if row.get("month") == normalized_month:
                    registration_date = row.get("timestamp") or row.get("date") or None
                    break
        except EntryStoreError as e:
            logger.warning("Could not look up registration date: %s", e)

        return RegistrationStatus(
            is_registered=True,
            message=f"ID {normalized_id} is already registered for {normalized_month}",
            registration_date=registration_date,
        )

    def registration_history(self, identifier: str) -> RegistrationResult:
        """List every stored registration row for ``identifier``."""
        try:
            history = self.store.registrations_for_id(identifier)
        except EntryStoreError as e:
            logger.error("Failed to fetch registration history: %s", e)
            return RegistrationResult(
                success=False,
                message=f"Failed to retrieve registration history: {e}",
            )
        return RegistrationResult(
            success=True,
            message=f"Found {len(history)} registration(s) for ID {identifier}",
            data=history,
        )

    def month_registrations(self, month: str) -> RegistrationResult:
        """List every stored registration row for ``month``."""
        try:
            registrations = self.store.registrations_for_month(month)
        except EntryStoreError as e:
            logger.error("Failed to fetch registrations for %s: %s", month, e)
            return RegistrationResult(
                success=False,
                message=f"Failed to retrieve registrations for {month}: {e}",
            )
        return RegistrationResult(
            success=True,
            message=f"Found {len(registrations)} registration(s) for {month}",
            data=registrations,
        )
