"""
Steam Checks - CLI.

============================================================
RESPONSIBILITY
============================================================
Operator commands for testing the admission checks against
the live Steam Web API, outside the game server.

- check:       would this SteamID64 pass the checks?
- runtests:    raw result of every Web API lookup
- show-config: effective configuration (API key masked)

============================================================
USAGE
============================================================
python -m steam_checks.cli check 76561197960287930
python -m steam_checks.cli --config steamchecks.yaml runtests 76561197960287930
python -m steam_checks.cli show-config

============================================================
"""

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import replace
from typing import List, Optional

from . import __version__
from .client import SteamWebApiClient
from .config import SteamChecksConfig, load_config_from_file, log_configuration_warnings
from .diagnostics import check_identity, run_api_diagnostics
from .messages import MessageCatalog
from .pipeline import EvaluationPipeline
from .types import ConfigurationError


logger = logging.getLogger(__name__)


OUTPUT_PREFIX = "[SteamChecks] "


# ============================================================
# CLI ARGUMENT PARSER
# ============================================================

def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="steam-checks",
        description="Steam profile admission checks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
  STEAM_API_KEY              Steam Web API key
  STEAM_CHECKS_CONFIG        Config file (YAML or JSON)
  STEAM_CHECKS_LOG_ONLY      Log denials instead of kicking
  STEAM_CHECKS_KICK_MESSAGE  Suffix appended to kick messages

Examples:
  %(prog)s check 76561197960287930
  %(prog)s runtests 76561197960287930
  %(prog)s --config steamchecks.yaml show-config
        """
    )

    parser.add_argument(
        "--config", "-c",
        type=str,
        metavar="PATH",
        help="Configuration file (default: $STEAM_CHECKS_CONFIG)",
    )

    parser.add_argument(
        "--api-key",
        type=str,
        help="Steam Web API key (overrides config and environment)",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="INFO",
        help="Logging level (default: INFO)",
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    check_parser = subparsers.add_parser(
        "check",
        help="Run the admission checks for a SteamID64",
    )
    check_parser.add_argument("steamid", help="SteamID64 to check")

    tests_parser = subparsers.add_parser(
        "runtests",
        help="Call every Web API lookup for a SteamID64 and print the results",
    )
    tests_parser.add_argument("steamid", help="SteamID64 to test with")

    subparsers.add_parser(
        "show-config",
        help="Print the effective configuration",
    )

    return parser


# ============================================================
# CONFIGURATION
# ============================================================

def build_config(args: argparse.Namespace) -> SteamChecksConfig:
    """
    Resolve configuration: file, then environment, then CLI flags.

    Raises:
        ConfigurationError: config file missing or invalid
    """
    base = load_config_from_file(args.config) if args.config else None
    config = SteamChecksConfig.from_env(base)
    if args.api_key:
        config = replace(config, api_key=args.api_key)
    return config


def validate_steamid(steamid: str) -> List[str]:
    """SteamID64s are 17 digit numbers."""
    errors = []
    if not steamid.isdigit() or len(steamid) != 17:
        errors.append(f"'{steamid}' is not a SteamID64")
    return errors


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s | %(levelname)-5s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def report(function: str, result: str) -> None:
    print(f"{OUTPUT_PREFIX}{function} - {result}")


# ============================================================
# COMMANDS
# ============================================================

async def run_check(config: SteamChecksConfig, steamid: str) -> int:
    messages = MessageCatalog(config.messages)
    async with SteamWebApiClient.from_config(config) as client:
        pipeline = EvaluationPipeline(config, client, messages)
        report("CheckPlayer", await check_identity(pipeline, steamid, messages))
    return 0


async def run_tests(config: SteamChecksConfig, steamid: str) -> int:
    async with SteamWebApiClient.from_config(config) as client:
        for entry in await run_api_diagnostics(client, steamid):
            print(f"{OUTPUT_PREFIX}{entry.format()}")
    return 0


def show_config(config: SteamChecksConfig) -> int:
    print(json.dumps(config.to_dict(), indent=2))
    return 0


# ============================================================
# MAIN ENTRY POINT
# ============================================================

def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Args:
        argv: Command line arguments (default: sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    try:
        config = build_config(args)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.command == "show-config":
        return show_config(config)

    errors = validate_steamid(args.steamid)
    if errors:
        for error in errors:
            report("SteamCheckTests", error)
        return 1

    if not config.enabled:
        log_configuration_warnings(config, MessageCatalog(config.messages))
        return 1

    try:
        if args.command == "check":
            return asyncio.run(run_check(config, args.steamid))
        return asyncio.run(run_tests(config, args.steamid))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130


# ============================================================
# MODULE EXECUTION
# ============================================================

if __name__ == "__main__":
    sys.exit(main())
