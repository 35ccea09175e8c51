# cli/cli.py
"""
CLI registry and dispatcher for sponsorship API commands.
"""
from __future__ import annotations

import argparse
import asyncio
import os
import sys
import traceback
from pathlib import Path
from typing import Callable, Dict, Optional

from cli.bootstrap import (
    CommandResult,
    build_probes,
    check_api_health,
    init_database,
    login,
)
from sponsorship.services.identity import ReadySignal


def _supports_color() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


SUPPORTS_COLOR = _supports_color()

GREEN = '\033[92m' if SUPPORTS_COLOR else ''
RED = '\033[91m' if SUPPORTS_COLOR else ''
BLUE = '\033[94m' if SUPPORTS_COLOR else ''
RESET = '\033[0m' if SUPPORTS_COLOR else ''


def print_success(message: str):
    print(f"{GREEN}[✓]{RESET} {message}")


def print_error(message: str):
    print(f"{RED}[✗]{RESET} {message}")


def print_info(message: str):
    print(f"{BLUE}[i]{RESET} {message}")


def _report(result: CommandResult) -> int:
    if result.success:
        print_success(result.message)
        return 0
    print_error(result.message)
    return 1


async def cmd_health(args: argparse.Namespace) -> int:
    """Command: check the API health endpoint."""
    print_info("Checking API health...")
    result = await check_api_health(api_url=args.api_url)
    for name, check in result.data.get("checks", {}).items():
        print_info(f"  {name}: {check.get('status', 'unknown')}")
    return _report(result)


async def cmd_login(args: argparse.Namespace) -> int:
    """Command: resolve the identity and open a session."""
    print_info("Resolving identity...")
    probes = build_probes(
        fid=args.fid,
        username=args.username,
        context_file=Path(args.context_file) if args.context_file else None,
    )
    ready = ReadySignal(lambda: print_info("Ready"))
    result = await login(probes, api_url=args.api_url, ready=ready)
    if result.success:
        print_info(f"  identity source: {result.data.get('source')}")
    return _report(result)


async def cmd_init_db(args: argparse.Namespace) -> int:
    """Command: create the database schema."""
    print_info("Creating database schema...")
    return _report(await init_database())


COMMANDS: Dict[str, Callable] = {
    'health': cmd_health,
    'login': cmd_login,
    'init-db': cmd_init_db,
}


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Sponsorship API CLI')
    subparsers = parser.add_subparsers(dest='command', help='Command to execute')

    health_parser = subparsers.add_parser('health', help='Check API health')
    health_parser.add_argument('--api-url', default=None, help='API base URL')

    login_parser = subparsers.add_parser('login', help='Authenticate the current identity')
    login_parser.add_argument('--api-url', default=None, help='API base URL')
    login_parser.add_argument('--fid', default=None, help='Identity fid (skips polling)')
    login_parser.add_argument('--username', default=None, help='Identity username')
    login_parser.add_argument('--context-file', default=None, help='Identity context JSON file')

    subparsers.add_parser('init-db', help='Create database tables')

    return parser


def main(args: Optional[list] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 1

    command_func = COMMANDS[parsed_args.command]
    try:
        return asyncio.run(command_func(parsed_args))
    except KeyboardInterrupt:
        print_error("Interrupted by user")
        return 130
    except Exception as e:
        print_error(f"Error executing command: {e}")
        if os.getenv('DEBUG'):
            traceback.print_exc()
        return 1


if __name__ == '__main__':
    sys.exit(main())
