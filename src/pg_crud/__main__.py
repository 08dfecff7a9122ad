"""Command line helpers: ``python -m pg_crud check`` / ``create-db NAME``."""

import argparse
import asyncio
import logging
import sys
from typing import Optional

from dotenv import load_dotenv

from pg_crud.bootstrap import close_pool, init_pool
from pg_crud.core.inspector import create_database
from pg_crud.exceptions import ConnectionFailure
from pg_crud.models.config import ADMIN_DATABASE, ConnectionInfo, DatabaseConfig

logger = logging.getLogger("pg_crud")


async def check() -> int:
    """Connect using the environment configuration and report the result."""
    try:
        pool = await init_pool()
    except (ConnectionFailure, ValueError) as e:
        logger.error(str(e))
        return 1
    await close_pool(pool)
    return 0


async def create_db(args: argparse.Namespace) -> int:
    """Create a database on the configured server.

    Server coordinates come from the environment configuration (DATABASE_URL
    or the db_* variables); command line flags override single values.
    """
    try:
        config = DatabaseConfig.from_env(args.env_file, default_database=ADMIN_DATABASE)
    except ValueError as e:
        logger.error(str(e))
        return 1

    info = ConnectionInfo.from_config(config)

    overrides = {
        "host": args.host,
        "port": args.port,
        "user": args.user,
        "password": args.password,
    }
    info = info.model_copy(
        update={key: value for key, value in overrides.items() if value is not None}
    )
    created = await create_database(info, args.name, verbose=True)
    if not created:
        logger.error(
            f"Could not create database {args.name!r}. Create the database manually."
        )
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pg-crud", description="PostgreSQL connection and database helpers"
    )
    parser.add_argument("--env-file", help="Path to a .env file")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("check", help="Verify the configured database is reachable")

    create = subparsers.add_parser("create-db", help="Create a database")
    create.add_argument("name", help="Name of the database to create")
    create.add_argument("--host")
    create.add_argument("--port", type=int)
    create.add_argument("--user")
    create.add_argument("--password")

    return parser


def cli_entry(argv: Optional[list[str]] = None) -> None:
    """Synchronous entry point for the ``pg-crud`` console script."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO)
    load_dotenv(args.env_file)

    if args.command == "check":
        code = asyncio.run(check())
    else:
        code = asyncio.run(create_db(args))
    sys.exit(code)


if __name__ == "__main__":
    cli_entry()
