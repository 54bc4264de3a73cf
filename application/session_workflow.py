"""
Viewing session workflow.

Drives one viewer through ``INPUT -> VIEWING -> COMPLETED``. ``back`` and
``reset`` are the only ways back to ``INPUT``. Errors are shown over the
``INPUT`` screen without changing the state.
"""

import logging
from typing import List, Optional

from opentelemetry import trace

from adapters.entry_store import EntryStoreAdapter
from application.registration_service import RegistrationService
from domain.exceptions import EntriesUnavailableError, EntryStoreError, InvalidTransitionError
from domain.mapper import filter_entries_by_month, map_rows
from domain.models import ImprovementEntry, RegistrationResult, SessionState, ViewingSession
from domain.months import canonical_month
from domain.validation import validate_identifier

# Get logger for this module
logger = logging.getLogger(__name__)

# Get tracer for this module
tracer = trace.get_tracer(__name__)

INVALID_IDENTIFIER_MESSAGE = "ID Number must be exactly 8 digits."
INVALID_MONTH_MESSAGE = "Please select a valid month."
LOAD_FAILED_MESSAGE = (
    "Failed to load entries from the entry store. "
    "Please check your internet connection and configuration."
)


class SessionWorkflow:
    """State machine behind the input, slideshow and completion screens."""

    def __init__(
        self, store: EntryStoreAdapter, registrations: RegistrationService
    ) -> None:
        self.store = store
        self.registrations = registrations
        self.state = SessionState.INPUT
        self.session: Optional[ViewingSession] = None
        self.error: Optional[str] = None
        self.last_result: Optional[RegistrationResult] = None

    def load_entries(self, month: str) -> List[ImprovementEntry]:
        """
        Fetch every entry and keep those of ``month``.

        Returns:
            Entries of the month in store order; empty if the month has none

        Raises:
            EntriesUnavailableError: If the store could not be read
        """
        with tracer.start_as_current_span("load_entries") as span:
            span.set_attribute("entries.month", month)
            try:
                rows = self.store.fetch_rows()
            except EntryStoreError as e:
                span.set_attribute("error.type", type(e).__name__)
                raise EntriesUnavailableError(str(e)) from e

            entries = filter_entries_by_month(map_rows(rows), month)
            span.set_attribute("entries.count", len(entries))
            logger.info("Loaded %d entries for %s (of %d rows)", len(entries), month, len(rows))
            return entries

    def start(self, identifier: str, month: str) -> bool:
        """
        Submit the input form.

        Returns:
            True if a viewing session started; otherwise ``self.error`` says why
        """
        self._require(SessionState.INPUT, "start")
        self.error = None

        if not validate_identifier(identifier):
            self.error = INVALID_IDENTIFIER_MESSAGE
            return False

        selected_month = canonical_month(month or "")
        if not selected_month:
            self.error = INVALID_MONTH_MESSAGE
            return False

        with tracer.start_as_current_span("session.start") as span:
            span.set_attribute("session.month", selected_month)

            if self.registrations.check_already_registered(identifier, selected_month):
                self.error = (
                    f"ID {identifier} has already completed viewing entries for "
                    f"{selected_month}. Each ID can only view entries once per month."
                )
                span.set_attribute("session.outcome", "duplicate")
                return False

            try:
                entries = self.load_entries(selected_month)
            except EntriesUnavailableError as e:
                logger.error("Error fetching entries: %s", e)
                self.error = LOAD_FAILED_MESSAGE
                span.set_attribute("session.outcome", "unavailable")
                return False

            if not entries:
                self.error = (
                    f"No entries found for {selected_month}. Please try a different "
                    "month or check if the data is available in the spreadsheet."
                )
                span.set_attribute("session.outcome", "empty")
                return False

            self.session = ViewingSession(
                identifier=identifier, month=selected_month, entries=tuple(entries)
            )
            self.state = SessionState.VIEWING
            span.set_attribute("session.outcome", "viewing")
            span.set_attribute("session.entries", len(entries))
            return True

    def advance(self) -> Optional[RegistrationResult]:
        """
        Go to the next entry, or complete the session from the last one.

        The session always moves to ``COMPLETED`` after the last entry, even if
        the completion record could not be written; the outcome is kept in
        ``last_result``.

        Returns:
            The RegistrationResult when a completion was committed, else None
        """
        session = self._viewing_session("advance")
        if not session.is_last:
            self.session = session.next()
            return None

        result = self.registrations.commit_completion(session.identifier, session.month)
        if not result.success:
            logger.warning("Completion not recorded: %s", result.message)
        self.last_result = result
        self.state = SessionState.COMPLETED
        return result

    def retreat(self) -> None:
        """Go to the previous entry; nothing happens on the first one."""
        session = self._viewing_session("retreat")
        self.session = session.previous()

    def back(self) -> None:
        """Leave the slideshow without completing it."""
        self._require(SessionState.VIEWING, "back")
        self._return_to_input()

    def reset(self) -> None:
        """Start over from the completion screen."""
        self._require(SessionState.COMPLETED, "reset")
        self._return_to_input()

    def dismiss_error(self) -> None:
        self.error = None

    def current_session(self) -> ViewingSession:
        """
        Return the session shown on the slideshow or completion screen.

        Raises:
            InvalidTransitionError: If no session has been started
        """
        if self.session is None:
            raise InvalidTransitionError(f"no session while {self.state.value}")
        return self.session

    def _return_to_input(self) -> None:
        self.session = None
        self.error = None
        self.last_result = None
        self.state = SessionState.INPUT

    def _viewing_session(self, action: str) -> ViewingSession:
        self._require(SessionState.VIEWING, action)
        return self.current_session()

    def _require(self, state: SessionState, action: str) -> None:
        if self.state is not state:
            raise InvalidTransitionError(
                f"cannot {action} while {self.state.value}; expected {state.value}"
            )
