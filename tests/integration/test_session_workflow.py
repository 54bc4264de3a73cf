from typing import Dict, List
from unittest.mock import MagicMock

import pytest

from adapters.entry_store import EntryStoreAdapter
from application.registration_service import RegistrationService
from application.session_workflow import (
    INVALID_IDENTIFIER_MESSAGE,
    INVALID_MONTH_MESSAGE,
    LOAD_FAILED_MESSAGE,
    SessionWorkflow,
)
from domain.exceptions import EntriesUnavailableError, InvalidTransitionError, StoreTransportError
from domain.models import RegistrationResult, SessionState
from tests.helpers.fakes import called_actions, json_response, store_with_responses


def _workflow(*responses: tuple) -> tuple:
    store, http_client = store_with_responses(*responses)
    return SessionWorkflow(store=store, registrations=RegistrationService(store)), http_client


@pytest.fixture
def mock_store(sheet_rows: List[Dict[str, str]]) -> MagicMock:
    """Store mock returning the sample rows."""
    store = MagicMock(spec=EntryStoreAdapter)
    store.fetch_rows.return_value = sheet_rows
    return store


@pytest.fixture
def mock_registrations() -> MagicMock:
    registrations = MagicMock(spec=RegistrationService)
    registrations.check_already_registered.return_value = False
    registrations.commit_completion.return_value = RegistrationResult(
        success=True, message="Registration successful for ID 12345678 in May."
    )
    return registrations


@pytest.fixture
def workflow(mock_store: MagicMock, mock_registrations: MagicMock) -> SessionWorkflow:
    return SessionWorkflow(store=mock_store, registrations=mock_registrations)


class TestLoadEntries:
    @pytest.mark.integration
    def test_returns_only_entries_of_the_month(self, workflow: SessionWorkflow) -> None:
        entries = workflow.load_entries("May")

        assert [entry.id for entry in entries] == [
            "entry-1",
            "entry-2",
            "entry-3",
            "entry-4",
            "entry-6",
        ]

    @pytest.mark.integration
    def test_month_match_is_case_insensitive(self, workflow: SessionWorkflow) -> None:
        assert len(workflow.load_entries("june")) == 1

    @pytest.mark.integration
    def test_is_repeatable(self, workflow: SessionWorkflow) -> None:
        assert workflow.load_entries("May") == workflow.load_entries("May")

    @pytest.mark.integration
    def test_empty_month_is_not_an_error(self, workflow: SessionWorkflow) -> None:
        assert workflow.load_entries("December") == []

    @pytest.mark.integration
    def test_store_failure_raises(self, workflow: SessionWorkflow, mock_store: MagicMock) -> None:
        mock_store.fetch_rows.side_effect = StoreTransportError("fetchData: refused")

        with pytest.raises(EntriesUnavailableError, match="refused"):
            workflow.load_entries("May")


class TestStart:
    @pytest.mark.integration
    def test_valid_submission_starts_viewing(self, workflow: SessionWorkflow) -> None:
        assert workflow.start("12345678", "may") is True

        assert workflow.state is SessionState.VIEWING
        assert workflow.error is None
        assert workflow.session is not None
        assert workflow.session.month == "May"
        assert workflow.session.position == 0
        assert len(workflow.session.entries) == 5

    @pytest.mark.integration
    @pytest.mark.parametrize("identifier", ["1234567", "1234567a", "123456789"])
    def test_invalid_identifier_never_reaches_store(
        self, workflow: SessionWorkflow, mock_store: MagicMock, identifier: str
    ) -> None:
        assert workflow.start(identifier, "May") is False

        assert workflow.state is SessionState.INPUT
        assert workflow.error == INVALID_IDENTIFIER_MESSAGE
        mock_store.fetch_rows.assert_not_called()

    @pytest.mark.integration
    def test_missing_month(self, workflow: SessionWorkflow, mock_registrations: MagicMock) -> None:
        assert workflow.start("12345678", "") is False

        assert workflow.error == INVALID_MONTH_MESSAGE
        mock_registrations.check_already_registered.assert_not_called()

    @pytest.mark.integration
    def test_duplicate_registration(
        self, workflow: SessionWorkflow, mock_registrations: MagicMock, mock_store: MagicMock
    ) -> None:
        mock_registrations.check_already_registered.return_value = True

        assert workflow.start("12345678", "May") is False

        assert workflow.state is SessionState.INPUT
        assert workflow.error is not None
        assert "ID 12345678 has already completed viewing entries for May" in workflow.error
        mock_store.fetch_rows.assert_not_called()

    @pytest.mark.integration
    def test_load_failure_and_empty_month_have_different_messages(
        self, workflow: SessionWorkflow, mock_store: MagicMock
    ) -> None:
        assert workflow.start("12345678", "December") is False
        empty_message = workflow.error

        mock_store.fetch_rows.side_effect = StoreTransportError("down")
        assert workflow.start("12345678", "May") is False

        assert empty_message is not None and "No entries found for December" in empty_message
        assert workflow.error == LOAD_FAILED_MESSAGE
        assert workflow.state is SessionState.INPUT

    @pytest.mark.integration
    def test_error_can_be_dismissed(self, workflow: SessionWorkflow) -> None:
        workflow.start("1", "May")
        workflow.dismiss_error()
        assert workflow.error is None
        assert workflow.state is SessionState.INPUT


class TestNavigation:
    @pytest.mark.integration
    def test_advance_and_retreat(self, workflow: SessionWorkflow) -> None:
        workflow.start("12345678", "May")
        assert workflow.session is not None

        assert workflow.advance() is None
        assert workflow.advance() is None
        assert workflow.session.position == 2

        workflow.retreat()
        assert workflow.session.position == 1

    @pytest.mark.integration
    def test_retreat_at_first_entry_is_noop(self, workflow: SessionWorkflow) -> None:
        workflow.start("12345678", "May")
        workflow.retreat()
        assert workflow.session is not None
        assert workflow.session.position == 0

    @pytest.mark.integration
    def test_advance_from_last_entry_completes(
        self, workflow: SessionWorkflow, mock_registrations: MagicMock
    ) -> None:
        workflow.start("12345678", "May")
        for _ in range(4):
            workflow.advance()
        assert workflow.session is not None
        assert workflow.session.is_last

        result = workflow.advance()

        assert result is not None and result.success is True
        assert workflow.state is SessionState.COMPLETED
        assert workflow.session.position == 4
        mock_registrations.commit_completion.assert_called_once_with("12345678", "May")

    @pytest.mark.integration
    def test_completion_failure_still_completes(
        self, workflow: SessionWorkflow, mock_registrations: MagicMock
    ) -> None:
        mock_registrations.commit_completion.return_value = RegistrationResult(
            success=False, message="Registration failed: down"
        )
        workflow.start("12345678", "June")

        result = workflow.advance()

        assert result is not None and result.success is False
        assert workflow.last_result == result
        assert workflow.state is SessionState.COMPLETED

    @pytest.mark.integration
    def test_back_returns_to_input(self, workflow: SessionWorkflow) -> None:
        workflow.start("12345678", "May")
        workflow.back()

        assert workflow.state is SessionState.INPUT
        assert workflow.session is None

    @pytest.mark.integration
    def test_reset_after_completion(self, workflow: SessionWorkflow) -> None:
        workflow.start("12345678", "June")
        workflow.advance()
        workflow.reset()

        assert workflow.state is SessionState.INPUT
        assert workflow.session is None
        assert workflow.last_result is None

    @pytest.mark.integration
    def test_transitions_from_wrong_state_are_rejected(self, workflow: SessionWorkflow) -> None:
        with pytest.raises(InvalidTransitionError):
            workflow.advance()
        with pytest.raises(InvalidTransitionError):
            workflow.reset()

        workflow.start("12345678", "May")
        with pytest.raises(InvalidTransitionError):
            workflow.start("12345678", "May")
        with pytest.raises(InvalidTransitionError):
            workflow.reset()

    @pytest.mark.integration
    def test_current_session(self, workflow: SessionWorkflow) -> None:
        with pytest.raises(InvalidTransitionError):
            workflow.current_session()

        workflow.start("12345678", "June")
        assert workflow.current_session().month == "June"

        workflow.advance()
        assert workflow.state is SessionState.COMPLETED
        assert workflow.current_session().identifier == "12345678"

        workflow.reset()
        with pytest.raises(InvalidTransitionError):
            workflow.current_session()


class TestAgainstStoreContract:
    """Workflow wired to a real adapter over a mocked HTTP client."""

    @pytest.mark.integration
    def test_full_session(self, sheet_rows: List[Dict[str, str]]) -> None:
        workflow, http_client = _workflow(
            json_response({"used": False}),
            json_response({"data": sheet_rows}),
            json_response({"used": False}),
            json_response({"success": True}),
        )

        assert workflow.start("12345678", "June") is True
        result = workflow.advance()

        assert result is not None and result.success is True
        assert workflow.state is SessionState.COMPLETED
        assert called_actions(http_client) == [
            "checkId",
            "fetchData",
            "checkId",
            "recordTimestamp",
        ]

    @pytest.mark.integration
    def test_registered_between_start_and_completion(
        self, sheet_rows: List[Dict[str, str]]
    ) -> None:
        workflow, http_client = _workflow(
            json_response({"used": False}),
            json_response({"data": sheet_rows}),
            json_response({"used": True}),
        )

        workflow.start("12345678", "June")
        result = workflow.advance()

        assert result is not None and result.success is False
        assert workflow.state is SessionState.COMPLETED
        assert "recordTimestamp" not in called_actions(http_client)
