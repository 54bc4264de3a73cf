import argparse
import logging
from typing import Callable, List, Optional

from opentelemetry import trace

from adapters.entry_store import EntryStoreAdapter
from application.registration_service import RegistrationService
from domain.exceptions import ConfigurationError
from domain.months import canonical_month
from domain.validation import validate_identifier
from infrastructure.config import load_settings

# Get logger for this module
logger = logging.getLogger(__name__)

# Get tracer for this module
tracer = trace.get_tracer(__name__)


def setup_argument_parser() -> argparse.ArgumentParser:
    """Configure CLI arguments for the registration lookups."""
    parser = argparse.ArgumentParser(description="Inspect viewer registrations")
    subparsers = parser.add_subparsers(dest="command", required=True)

    status = subparsers.add_parser(
        "status", help="Show whether an ID has completed a month"
    )
    status.add_argument("--id", dest="identifier", required=True)
    status.add_argument("--month", required=True)

    history = subparsers.add_parser(
        "history", help="List every registration recorded for an ID"
    )
    history.add_argument("--id", dest="identifier", required=True)

    month = subparsers.add_parser(
        "month", help="List every registration recorded for a month"
    )
    month.add_argument("--month", required=True)

    subparsers.add_parser("ping", help="Test the connection to the entry store")
    return parser


class RegistrationCLI:
    """CLI for registration status, history, month listings and connectivity checks."""

    def __init__(
        self,
        store: Optional[EntryStoreAdapter] = None,
        output: Callable[[str], None] = print,
    ) -> None:
        self.parser = setup_argument_parser()
        self.store = store
        self.output = output

    def run(self, args: Optional[List[str]] = None) -> int:
        """Execute the CLI command."""
        parsed_args = self.parser.parse_args(args)

        with tracer.start_as_current_span("registration_cli.run") as span:
            span.set_attribute("cli.command", parsed_args.command)

            if getattr(parsed_args, "identifier", None) is not None and not validate_identifier(
                parsed_args.identifier
            ):
                logger.error("ID Number must be exactly 8 digits")
                span.set_attribute("exit_code", 1)
                return 1

            try:
                store = self.store or EntryStoreAdapter.from_settings(load_settings())
            except ConfigurationError as e:
                logger.error("Configuration error: %s", e)
                span.set_attribute("exit_code", 1)
                return 1

            if parsed_args.command == "ping":
                exit_code = 0 if store.test_connection() else 1
            elif parsed_args.command == "status":
                exit_code = self._status(store, parsed_args.identifier, parsed_args.month)
            elif parsed_args.command == "month":
                exit_code = self._month(store, parsed_args.month)
            else:
                exit_code = self._history(store, parsed_args.identifier)

            span.set_attribute("exit_code", exit_code)
            return exit_code

    def _status(self, store: EntryStoreAdapter, identifier: str, month: str) -> int:
        selected_month = canonical_month(month)
        if not selected_month:
            logger.error("Invalid month: %s", month)
            return 1

        status = RegistrationService(store).registration_status(identifier, selected_month)
        self.output(status.message)
        if status.registration_date:
            self.output(f"Registered on: {status.registration_date}")
        return 0

    def _history(self, store: EntryStoreAdapter, identifier: str) -> int:
        result = RegistrationService(store).registration_history(identifier)
        self.output(result.message)
        if not result.success:
            return 1
        for row in result.data:
            self.output(
                f"  {row.get('month', '-')}: {row.get('timestamp') or row.get('date') or '-'}"
            )
        return 0

    def _month(self, store: EntryStoreAdapter, month: str) -> int:
        selected_month = canonical_month(month)
        if not selected_month:
            logger.error("Invalid month: %s", month)
            return 1

        result = RegistrationService(store).month_registrations(selected_month)
        self.output(result.message)
        if not result.success:
            return 1
        for row in result.data:
            self.output(
                f"  {row.get('id', '-')}: {row.get('timestamp') or row.get('date') or '-'}"
            )
        return 0
