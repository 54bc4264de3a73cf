"""
Terminal presentation of the viewing workflow.

Shows the input form, the entry slideshow and the completion screen as plain
text. All decisions are made by ``SessionWorkflow``; this module only renders
its state and forwards key presses.
"""

import argparse
import logging
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from opentelemetry import trace

from adapters.entry_store import EntryStoreAdapter
from application.registration_service import RegistrationService
from application.session_workflow import SessionWorkflow
from domain.exceptions import ConfigurationError, InvalidTransitionError
from domain.models import ImprovementEntry, SessionState
from domain.images import image_url
from domain.months import format_date_time
from domain.validation import digits_only
from infrastructure.config import load_settings
from infrastructure.logging import setup_logger

# Get logger for this module
logger = logging.getLogger(__name__)

# Get tracer for this module
tracer = trace.get_tracer(__name__)

NAVIGATION_HELP = "[n]ext  [p]revious  [b]ack to form  [q]uit"


def setup_argument_parser() -> argparse.ArgumentParser:
    """Configure CLI arguments."""
    parser = argparse.ArgumentParser(
        description="View the improvement entries of a month, one at a time"
    )
    parser.add_argument("--id", dest="identifier", help="8-digit ID number")
    parser.add_argument(
        "--month", help="Month whose entries to view, in any letter case"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Increase logging verbosity"
    )
    return parser


def build_workflow() -> SessionWorkflow:
    """Wire a workflow against the store configured in the environment."""
    store = EntryStoreAdapter.from_settings(load_settings())
    return SessionWorkflow(store=store, registrations=RegistrationService(store))


class ViewerCLI:
    """Interactive terminal front end for one viewing session."""

    def __init__(
        self,
        workflow: Optional[SessionWorkflow] = None,
        prompt: Callable[[str], str] = input,
        output: Callable[[str], None] = print,
    ) -> None:
        self.parser = setup_argument_parser()
        self.workflow = workflow
        self.prompt = prompt
        self.output = output

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run the viewer.

        Returns:
            0 once the session is completed or the user quits, 1 on failure
        """
        parsed_args = self.parser.parse_args(args)
        if parsed_args.verbose:
            setup_logger(verbose=True)

        with tracer.start_as_current_span("viewer_cli.run") as span:
            try:
                if self.workflow is None:
                    self.workflow = build_workflow()
            except ConfigurationError as e:
                logger.error("Configuration error: %s", e)
                span.set_attribute("exit_code", 1)
                return 1

            interactive = not (parsed_args.identifier and parsed_args.month)
            try:
                exit_code = self._loop(
                    self.workflow, parsed_args.identifier, parsed_args.month, interactive
                )
            except (EOFError, KeyboardInterrupt):
                self.output("")
                logger.info("Viewer closed before completion")
                exit_code = 1

            span.set_attribute("exit_code", exit_code)
            return exit_code

    def _loop(
        self,
        workflow: SessionWorkflow,
        identifier: Optional[str],
        month: Optional[str],
        interactive: bool,
    ) -> int:
        while True:
            if workflow.state is SessionState.INPUT:
                if interactive:
                    identifier, month = self._ask_form(identifier, month)
                    if identifier is None:
                        return 0
                if not workflow.start(identifier or "", month or ""):
                    self.output(f"Error: {workflow.error}")
                    workflow.dismiss_error()
                    if not interactive:
                        return 1
                    identifier, month = None, None
                continue

            if workflow.state is SessionState.VIEWING:
                self._render_slide()
                choice = self.prompt(f"{NAVIGATION_HELP}: ").strip().lower()
                if choice in ("n", ""):
                    workflow.advance()
                elif choice == "p":
                    workflow.retreat()
                elif choice == "b":
                    workflow.back()
                    if not interactive:
                        return 0
                    identifier, month = None, None
                elif choice == "q":
                    return 0
                continue

            self._render_completion()
            return 0

    def _ask_form(
        self, identifier: Optional[str], month: Optional[str]
    ) -> Tuple[Optional[str], Optional[str]]:
        if not identifier:
            raw = self.prompt("Enter 8-digit ID number (blank to quit): ")
            if not raw.strip():
                return None, None
            identifier = digits_only(raw)
        if not month:
            month = self.prompt("Select month (e.g. May): ").strip()
        return identifier, month

    def _workflow(self) -> SessionWorkflow:
        if self.workflow is None:
            raise InvalidTransitionError("viewer has no workflow")
        return self.workflow

    def _render_slide(self) -> None:
        session = self._workflow().current_session()
        position, total = session.progress
        self.output("")
        self.output(f"ID {session.identifier} | {session.month} | {position} / {total}")
        self.output(render_entry(session.current_entry))
        if session.is_last:
            self.output("This is the last entry; [n] completes the session.")

    def _render_completion(self) -> None:
        workflow = self._workflow()
        session = workflow.current_session()
        result = workflow.last_result
        self.output("")
        self.output(
            f"You have viewed all {len(session.entries)} improvement entries for {session.month}."
        )
        self.output(f"  ID number: {session.identifier}")
        self.output(f"  Completed at: {datetime.now():%Y-%m-%d %H:%M:%S}")
        if result is not None:
            self.output(f"  {result.message}")


def render_entry(entry: ImprovementEntry) -> str:
    """Format one entry as a text slide."""
    lines = [
        f"== {entry.title or '(untitled)'} ==",
        f"Date: {format_date_time(entry.date_time) if entry.date_time else '-'}",
        f"Control number: {entry.control_number or '-'}",
        f"Category: {entry.category or '-'}",
    ]
    if entry.description:
        lines.append(entry.description)
    lines.append(f"Before: {image_url(entry.before_image) or '(no image)'}")
    lines.append(f"After:  {image_url(entry.after_image) or '(no image)'}")
    if entry.improvement:
        lines.append(f"Improvement: {entry.improvement}")
    if entry.improvement_effect:
        lines.append(f"Effect: {entry.improvement_effect}")
    return "\n".join(lines)
