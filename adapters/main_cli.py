import argparse
import sys

from infrastructure.logging import setup_logger
from infrastructure.telemetry import setup_opentelemetry, shutdown_opentelemetry

from adapters.registration_cli import RegistrationCLI
from adapters.viewer_cli import ViewerCLI


def main() -> int:
    """
    Unified entry point for the `entry-viewer` command.

    Subcommands:
        view      – Run the interactive viewing session.
        status    – Show whether an ID has completed a month.
        history   – List the registrations of an ID.
        month     – List the registrations of a month.
        ping      – Test the connection to the entry store.
    """
    # Setup shared infrastructure
    setup_logger()
    setup_opentelemetry()

    # Top‑level parser only defines subcommands; each subcommand parses its own arguments.
    parser = argparse.ArgumentParser(
        prog="entry-viewer", description="Improvement entry viewer"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("view", help="View a month's entries and record completion")
    subparsers.add_parser("status", help="Show whether an ID has completed a month")
    subparsers.add_parser("history", help="List the registrations of an ID")
    subparsers.add_parser("month", help="List the registrations of a month")
    subparsers.add_parser("ping", help="Test the connection to the entry store")

    args, remaining = parser.parse_known_args()

    try:
        if args.command == "view":
            return ViewerCLI().run(remaining)
        return RegistrationCLI().run([args.command, *remaining])
    finally:
        shutdown_opentelemetry()


if __name__ == "__main__":
    sys.exit(main())
