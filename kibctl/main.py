#!/usr/bin/env python3
"""
kibctl - Entry Point

This module serves as the command line entry point. It parses the command
line, builds the settings and logging, runs one dashboard command and maps
its outcome to the process exit code: 0 on success, 1 for usage and
validation errors, 2 for failures while talking to Kibana.
"""
import argparse
import logging
import sys
from typing import Callable, Dict, List, Optional

import structlog
from pydantic import ValidationError

from kibctl import __version__
from kibctl.client.http_client import KibanaHTTPClient
from kibctl.config import Settings, load_settings
from kibctl.dashboards import DashboardService
from kibctl.errors import ConfigurationError, KibctlError
from kibctl.i18n import _
from kibctl.models import DashboardRecord

# Set up structured logger
logger = structlog.get_logger(__name__)

ID_COLUMN_WIDTH = 40


class CLIParser(argparse.ArgumentParser):
    """Argument parser reporting usage errors with exit code 1."""

    def error(self, message: str) -> None:
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def setup_logging(settings: Settings) -> None:
    """Set up structured logging based on configuration.

    Verbose runs log to stdout at the configured level. Otherwise only
    warnings and errors are logged, to stderr, so stdout carries nothing but
    command output.
    """
    if settings.verbose:
        numeric_level = getattr(logging, settings.log_level.value, logging.DEBUG)
        stream = sys.stdout
    else:
        numeric_level = logging.WARNING
        stream = sys.stderr

    if settings.structured_logging:
        renderers = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        renderers = [structlog.dev.ConsoleRenderer(colors=False)]

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            *renderers,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    # structlog hands its rendered lines to the standard library, which also
    # carries httpx's own request log.
    logging.basicConfig(stream=stream, level=numeric_level, format="%(message)s", force=True)
    logging.getLogger("httpcore").setLevel(max(numeric_level, logging.INFO))


def build_client(settings: Settings) -> KibanaHTTPClient:
    """Create the HTTP gateway for the configured Kibana server."""
    return KibanaHTTPClient.from_settings(settings)


def format_dashboard_table(records: List[DashboardRecord]) -> str:
    """Render records as an ``ID  NAME`` table, ids padded to a fixed width."""
    lines = [f"{'ID':<{ID_COLUMN_WIDTH}} NAME"]
    for record in records:
        lines.append(f"{record.id:<{ID_COLUMN_WIDTH}} {record.title}")
    return "\n".join(lines) + "\n"


def run_import(args: argparse.Namespace, settings: Settings) -> int:
    """Import the dashboard definition read from stdin."""
    settings.require_host()
    payload = sys.stdin.buffer.read()
    with build_client(settings) as client:
        DashboardService(client).import_dashboard(payload)
    return 0


def run_export(args: argparse.Namespace, settings: Settings) -> int:
    """Write the dashboard named on the command line, with dependencies, to stdout."""
    settings.require_credentials()
    if not args.name:
        raise ConfigurationError("dashboard name missing")
    with build_client(settings) as client:
        document = DashboardService(client).export_dashboard(args.name)
    sys.stdout.write(document.decode("utf-8"))
    sys.stdout.flush()
    return 0


def run_list(args: argparse.Namespace, settings: Settings) -> int:
    """Print the dashboards whose title matches the pattern."""
    settings.require_credentials()
    with build_client(settings) as client:
        records = DashboardService(client).list_dashboards(args.pattern or "")
    sys.stdout.write(format_dashboard_table(records))
    sys.stdout.flush()
    return 0


COMMANDS: Dict[str, Callable[[argparse.Namespace, Settings], int]] = {
    "import": run_import,
    "export": run_export,
    "list": run_list,
}


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = CLIParser(
        prog="kibctl",
        description=_("kibctl is a cli tool for kibana"),
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=None,
        help=_("provide additional details"),
    )
    parser.add_argument(
        "--host",
        default=None,
        help=_("Kibana api endpoint (required, env KIBANA_HOST)"),
    )
    parser.add_argument(
        "-u", "--username",
        default=None,
        help=_("Basic auth username (required, env KIBANA_USERNAME)"),
    )
    parser.add_argument(
        "-p", "--password",
        default=None,
        help=_("Basic auth password (required, env KIBANA_PASSWORD)"),
    )

    resources = parser.add_subparsers(dest="resource", metavar="COMMAND")
    resources.required = True
    dashboard = resources.add_parser("dashboard", help=_("options for dashboard"))

    commands = dashboard.add_subparsers(dest="command", metavar="ACTION")
    commands.required = True
    commands.add_parser(
        "import",
        help=_("import PAYLOAD - import the dashboard definition read from stdin"),
    )
    export = commands.add_parser(
        "export",
        help=_("export NAME - export a json including the visualisation and index-pattern dependencies"),
    )
    export.add_argument("name", nargs="?", default="", metavar="NAME")
    listing = commands.add_parser(
        "list",
        help=_("list PATTERN - list dashboards with title matching the pattern"),
    )
    listing.add_argument("pattern", nargs="?", default="", metavar="PATTERN")

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application."""
    args = parse_args(argv)

    try:
        settings = load_settings(
            host=args.host,
            username=args.username,
            password=args.password,
            verbose=args.verbose,
        )
    except ValidationError as e:
        print(f"invalid configuration: {e}", file=sys.stderr)
        return 1

    setup_logging(settings)
    logger.debug("kibctl starting", version=__version__, command=args.command)

    try:
        return COMMANDS[args.command](args, settings)

    except KibctlError as e:
        print(str(e), file=sys.stderr)
        return e.exit_code

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130

    except Exception as e:
        logger.exception("Unhandled exception", error=str(e))
        return 2


if __name__ == "__main__":
    sys.exit(main())
