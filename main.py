"""
Watchtower — CLI Entry Point

Usage:
  # Crawl the police contact directory and replace the local store
  python main.py refresh

  # Crawl only if no directory has been stored yet
  python main.py init

  # Look up a phone number in the local store
  python main.py search 9876543210

  # Flag a number as a scammer
  python main.py flag 9876543210 --name "Unknown caller"

  # Check a link against Google Safe Browsing
  python main.py check-url https://example.com/login
"""

import argparse
import asyncio
import logging
import sys

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger("watchtower")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Watchtower — police directory lookup and scam-number checker"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("refresh", help="Crawl the directory and replace the local store")
    subparsers.add_parser("init", help="Crawl the directory only if no store exists yet")

    search_parser = subparsers.add_parser("search", help="Look up a phone number")
    search_parser.add_argument("phone", help="Full or partial phone number")

    flag_parser = subparsers.add_parser("flag", help="Flag a phone number as a scammer")
    flag_parser.add_argument("phone", help="Phone number to flag")
    flag_parser.add_argument("--name", default=None, help="Known name for the number")
    flag_parser.add_argument(
        "--designation", default=None, help="Known designation for the number"
    )

    url_parser = subparsers.add_parser("check-url", help="Check a URL with Safe Browsing")
    url_parser.add_argument("url", help="URL to check")

    return parser.parse_args(argv)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
        datefmt="%H:%M:%S",
    )


def format_record(record) -> str:
    lines = [
        f"Name:        {record.name or 'N/A'}",
        f"Designation: {record.designation or 'N/A'}",
        f"Phone:       {record.phone or 'N/A'}",
    ]
    if record.flagged:
        lines.append("Status:      SCAMMER")
    return "\n".join(lines)


async def run_refresh(container, initial_only: bool = False) -> int:
    service = container.directory_service
    if initial_only:
        response = await service.ensure_initialized()
        if response is None:
            print("Database loaded, ready to search!")
            return 0
    else:
        response = await service.refresh()

    print(response.message)
    if response.error:
        print(f"  Last error: {response.error}")
    return 0 if response.updated else 1


async def run_search(container, phone: str) -> int:
    record = await container.directory_service.search(phone)
    if record is None:
        print("No match found in database")
        return 1
    print("Match found!")
    print(format_record(record))
    return 0


async def run_flag(container, phone: str, name=None, designation=None) -> int:
    from watchtower.domain.entities.contact_record import ContactRecord

    known = None
    if name or designation:
        known = ContactRecord(name=name or "", designation=designation or "", phone=phone)
    record = await container.directory_service.flag_as_scammer(phone, known)
    print(f"Number {record.phone} flagged as scammer successfully!")
    return 0


async def run_check_url(container, url: str) -> int:
    flagged = await container.reputation.is_flagged_unsafe(url)
    print(f"UNSAFE: {url}" if flagged else f"No known threats: {url}")
    return 1 if flagged else 0


async def dispatch(args, container) -> int:
    if args.command == "refresh":
        return await run_refresh(container)
    if args.command == "init":
        return await run_refresh(container, initial_only=True)
    if args.command == "search":
        return await run_search(container, args.phone)
    if args.command == "flag":
        return await run_flag(container, args.phone, args.name, args.designation)
    if args.command == "check-url":
        return await run_check_url(container, args.url)
    raise ValueError(f"Unknown command: {args.command}")


def main(argv=None) -> int:
    args = parse_args(argv)

    from watchtower.domain.interfaces.i_reputation_gateway import ReputationLookupError
    from watchtower.infrastructure.config import Config
    from watchtower.infrastructure.container import Container

    config = Config.from_env()
    configure_logging(config.log_level)
    container = Container(config)

    try:
        return asyncio.run(dispatch(args, container))
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except ReputationLookupError as e:
        print(f"URL check failed: {e}", file=sys.stderr)
        return 2
    except OSError as e:
        logger.error(f"Could not save contacts: {e}")
        print(f"Could not save contacts: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
