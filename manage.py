#!/usr/bin/env python3
"""
Material stock ledger management CLI.

Usage:
    python manage.py serve              Start the API server
    python manage.py migrate            Apply pending database migrations
    python manage.py migration-status   Show applied and pending migrations
    python manage.py verify             Run schema integrity checks
    python manage.py init-stock         Create missing stock rows for the catalog
"""

import argparse
import asyncio
import json
import sys


def cmd_serve(args: argparse.Namespace) -> None:
    import uvicorn

    from src.config import get_settings

    settings = get_settings()
    host = args.host or settings.api.host
    port = args.port or settings.api.port

    print(f"Starting server on {host}:{port}...")
    uvicorn.run(
        "src.api.main:app",
        host=host,
        port=port,
        reload=args.reload,
    )


def cmd_migrate(args: argparse.Namespace) -> None:
    from src.config import configure_logging
    from src.infrastructure.storage.sqlite.migrations import initialize_database

    configure_logging()
    results = asyncio.run(initialize_database(create_backup_before=not args.no_backup))

    if not results:
        print("Database is up to date.")
        return
    for result in results:
        state = "ok" if result.success else f"FAILED: {result.error}"
        print(f"  {result.version}: {state}")
    if not all(r.success for r in results):
        sys.exit(1)


def cmd_migration_status(args: argparse.Namespace) -> None:
    from src.infrastructure.storage.sqlite.migrations import get_migration_status

    status = asyncio.run(get_migration_status())
    print(json.dumps(status, indent=2))


def cmd_verify(args: argparse.Namespace) -> None:
    from src.infrastructure.storage.sqlite.migrations import verify_schema_integrity

    checks = asyncio.run(verify_schema_integrity())
    failed = False
    for check in checks:
        print(f"  {check['check']}: {check['status']}")
        failed = failed or check["status"] != "PASS"
    if failed:
        sys.exit(1)


async def _init_stock() -> int:
    from src.application.use_cases import InitializeStockUseCase
    from src.infrastructure.storage.sqlite import close_pool

    try:
        created = await InitializeStockUseCase().execute()
        return len(created)
    finally:
        await close_pool()


def cmd_init_stock(args: argparse.Namespace) -> None:
    from src.config import configure_logging

    configure_logging()
    count = asyncio.run(_init_stock())
    print(f"Created {count} stock row(s).")


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Material stock ledger management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # serve
    p_serve = sub.add_parser("serve", help="Start the API server")
    p_serve.add_argument("--host", default=None, help="Bind host (default: API_HOST)")
    p_serve.add_argument("--port", type=int, default=None, help="Bind port (default: API_PORT)")
    p_serve.add_argument("--reload", action="store_true", help="Reload on code changes")
    p_serve.set_defaults(func=cmd_serve)

    # migrate
    p_migrate = sub.add_parser("migrate", help="Apply pending migrations")
    p_migrate.add_argument("--no-backup", action="store_true", help="Skip the pre-migration backup")
    p_migrate.set_defaults(func=cmd_migrate)

    # migration-status
    p_status = sub.add_parser("migration-status", help="Show migration status")
    p_status.set_defaults(func=cmd_migration_status)

    # verify
    p_verify = sub.add_parser("verify", help="Run schema integrity checks")
    p_verify.set_defaults(func=cmd_verify)

    # init-stock
    p_init = sub.add_parser("init-stock", help="Create missing stock rows for the catalog")
    p_init.set_defaults(func=cmd_init_stock)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
