"""Command-line interface for Eventmaster.

Commands:
  - eventmaster init-db       : Create tables and indexes (idempotent)
  - eventmaster fetch-events  : Run one Ticketmaster ingestion cycle and exit
  - eventmaster serve         : Start the API server (with scheduled ingestion)

Typical usage:
  eventmaster fetch-events --json
  eventmaster serve --host 0.0.0.0 --port 8080
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

from pydantic import ValidationError

from eventmaster.configs.logging import setup_logging
from eventmaster.configs.settings import Settings, get_settings
from eventmaster.ingestion.errors import IngestionError
from eventmaster.ingestion.orchestrator import IngestionRunResult, build_ingestion_service
from eventmaster.ingestion.system_user import ensure_system_user
from eventmaster.repositories.base import RepositoryError
from eventmaster.repositories.database import Database
from eventmaster.repositories.postgres import PostgresUserRepository


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="eventmaster", description="Eventmaster CLI")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    p.add_argument("--json-logs", action="store_true", help="Emit JSON logs")
    sub = p.add_subparsers(dest="cmd")

    sub.add_parser("init-db", help="Create database schema")

    pf = sub.add_parser("fetch-events", help="Run one Ticketmaster ingestion cycle")
    pf.add_argument("--json", action="store_true", help="Print the run summary as JSON")

    ps = sub.add_parser("serve", help="Run the API server")
    ps.add_argument("--host", default="127.0.0.1")
    ps.add_argument("--port", type=int, default=8080)
    ps.add_argument("--reload", action="store_true", help="Auto-reload on code changes")

    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Run the CLI with the given arguments."""
    try:
        return _main_impl(argv)
    except ValidationError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 2
    except IngestionError as e:
        print(f"Error: ingestion failed: {e}", file=sys.stderr)
        return 1
    except RepositoryError as e:
        print(f"Error: database: {e}", file=sys.stderr)
        return 1


def _main_impl(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    if args.version:
        from eventmaster import __version__

        print(f"eventmaster version {__version__}")
        return 0

    if not args.cmd:
        print("Error: Command required. Use --help for usage info.", file=sys.stderr)
        return 1

    settings = get_settings()
    setup_logging(args.log_level or settings.LOG_LEVEL, args.json_logs or settings.LOG_JSON)

    if args.cmd == "init-db":
        database = Database.from_settings(settings)
        try:
            database.create_schema()
        finally:
            database.close()
        print("Schema ready.")
        return 0

    if args.cmd == "fetch-events":
        result = asyncio.run(_fetch_events(settings))
        if args.json:
            print(json.dumps(result.to_dict(), indent=2))
        else:
            print(
                f"total={result.total} new={result.created} "
                f"skipped={result.skipped} failed={result.failed}"
            )
        return 0

    if args.cmd == "serve":
        import uvicorn

        uvicorn.run("eventmaster.main:app", host=args.host, port=args.port, reload=args.reload)
        return 0

    return 1


async def _fetch_events(settings: Settings) -> IngestionRunResult:
    database = Database.from_settings(settings)
    try:
        database.create_schema()
        system_user_id = ensure_system_user(
            PostgresUserRepository(database), settings.SYSTEM_USER_EMAIL
        )
        service = build_ingestion_service(settings, database, system_user_id)
        try:
            return await service.fetch_and_save_events()
        finally:
            await service.close()
    finally:
        database.close()


if __name__ == "__main__":
    sys.exit(main())
