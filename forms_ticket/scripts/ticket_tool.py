#!/usr/bin/env python3
"""Encrypt or inspect forms authentication tickets.

This script provides a command-line interface around TicketCodec using
machine-key settings from a YAML file or a bundled profile.

Usage:
    forms-ticket encrypt --profile example --name alice
    forms-ticket decrypt --config machine_key.yaml <HEX>

Examples:
    # Issue a persistent ticket valid for two hours
    forms-ticket encrypt --profile example --name alice \\
        --timeout-minutes 120 --persistent --user-data "roles=admin"

    # Decode a cookie value captured from the legacy site
    forms-ticket decrypt --config machine_key.yaml 4A1F...

    # Debug mode
    forms-ticket decrypt --log-level DEBUG --profile example 4A1F...
"""

import argparse
import sys
from dataclasses import replace
from datetime import timedelta
from typing import Any, Dict, List, Optional

import yaml

from forms_ticket.codec import TicketCodec
from forms_ticket.configs import list_profiles, load_config_file, load_profile
from forms_ticket.core.constants import DEFAULT_COOKIE_PATH, DEFAULT_TICKET_VERSION
from forms_ticket.core.ticket import Ticket
from forms_ticket.crypto.exceptions import ConfigurationError, InvalidTicketError
from forms_ticket.utils.logging import get_logger, set_log_level

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser.

    Returns
    -------
    argparse.ArgumentParser
        Parser with ``encrypt`` and ``decrypt`` subcommands.
    """
    parser = argparse.ArgumentParser(
        prog="forms-ticket",
        description="Encrypt or decrypt forms authentication tickets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: WARNING)",
    )

    # Shared machine-key source
    source = argparse.ArgumentParser(add_help=False)
    group = source.add_mutually_exclusive_group(required=True)
    group.add_argument("--config", help="YAML file with a machine_key section")
    group.add_argument(
        "--profile",
        help=f"Bundled profile name (available: {', '.join(list_profiles())})",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    encrypt = subparsers.add_parser(
        "encrypt", parents=[source], help="Issue and encrypt a new ticket"
    )
    encrypt.add_argument("--name", required=True, help="User name")
    encrypt.add_argument(
        "--timeout-minutes",
        type=int,
        default=30,
        help="Ticket lifetime in minutes (default: 30)",
    )
    encrypt.add_argument(
        "--persistent", action="store_true", help="Mark the ticket persistent"
    )
    encrypt.add_argument("--user-data", default="", help="Application payload")
    encrypt.add_argument(
        "--cookie-path",
        default=DEFAULT_COOKIE_PATH,
        help=f"Cookie path (default: {DEFAULT_COOKIE_PATH})",
    )
    encrypt.add_argument(
        "--version",
        type=int,
        default=DEFAULT_TICKET_VERSION,
        help=f"Ticket version byte (default: {DEFAULT_TICKET_VERSION})",
    )

    decrypt = subparsers.add_parser(
        "decrypt", parents=[source], help="Decrypt and print a ticket"
    )
    decrypt.add_argument("ticket", help="Hex encoded ticket")

    return parser


def load_codec(args: argparse.Namespace) -> TicketCodec:
    """Create the codec selected by ``--config`` or ``--profile``."""
    if args.config:
        config = load_config_file(args.config)
    else:
        config = load_profile(args.profile)
    return TicketCodec.from_config(config)


def ticket_to_dict(ticket: Ticket) -> Dict[str, Any]:
    """Convert a ticket to a plain dictionary for display.

    Parameters
    ----------
    ticket : Ticket
        Decoded ticket.

    Returns
    -------
    Dict[str, Any]
        Field values, with times as ISO 8601 UTC strings and raw ticks.
    """
    return {
        "version": ticket.version,
        "name": ticket.name,
        "issue_date": ticket.issue_date_utc.isoformat(),
        "issue_date_ticks": ticket.issue_date_ticks,
        "expiration": ticket.expiration_utc.isoformat(),
        "expiration_ticks": ticket.expiration_ticks,
        "is_persistent": ticket.is_persistent,
        "user_data": ticket.user_data,
        "cookie_path": ticket.cookie_path,
        "expired": ticket.expired,
    }


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point.

    Parameters
    ----------
    argv : List[str], optional
        Arguments (defaults to ``sys.argv[1:]``).

    Returns
    -------
    int
        Exit status: 0 on success, 1 for an invalid ticket, 2 for a
        configuration problem.
    """
    args = build_parser().parse_args(argv)
    set_log_level(args.log_level)

    try:
        codec = load_codec(args)
    except (ConfigurationError, FileNotFoundError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    logger.debug("Codec loaded from %s", args.config or f"profile {args.profile}")

    if args.command == "encrypt":
        ticket = Ticket.issue(
            args.name,
            timedelta(minutes=args.timeout_minutes),
            is_persistent=args.persistent,
            user_data=args.user_data,
            cookie_path=args.cookie_path,
        )
        ticket = replace(ticket, version=args.version)
        print(codec.encrypt(ticket))
        return 0

    try:
        ticket = codec.decrypt(args.ticket)
    except InvalidTicketError as e:
        print(str(e), file=sys.stderr)
        return 1

    print(yaml.safe_dump(ticket_to_dict(ticket), sort_keys=False), end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())
