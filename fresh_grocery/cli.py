"""CLI commands for database and catalog operations."""

import argparse
import sys
from pathlib import Path
from typing import NoReturn

from dotenv import load_dotenv
from flask import Flask

from fresh_grocery import create_app
from fresh_grocery.database import (
    check_db_connection,
    get_current_revision,
    get_pending_migrations,
    upgrade_database,
)
from fresh_grocery.exceptions import BusinessLogicException
from fresh_grocery.models.profile import AppRole
from fresh_grocery.startup import load_test_data_hook


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Fresh Grocery CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    upgrade_parser = subparsers.add_parser(
        "upgrade-db",
        help="Apply database migrations",
    )
    upgrade_parser.add_argument("--recreate", action="store_true")
    upgrade_parser.add_argument("--yes-i-am-sure", action="store_true")

    load_test_data_parser = subparsers.add_parser(
        "load-test-data",
        help="Recreate database and load the sample catalog",
    )
    load_test_data_parser.add_argument("--yes-i-am-sure", action="store_true")

    import_parser = subparsers.add_parser(
        "import-products",
        help="Import products from a CSV file",
    )
    import_parser.add_argument("csv_path", type=Path)
    import_parser.add_argument("--dry-run", action="store_true")

    grant_parser = subparsers.add_parser(
        "grant-role",
        help="Grant a role to an existing user",
    )
    grant_parser.add_argument("user_id")
    grant_parser.add_argument("role", choices=[role.value for role in AppRole])

    return parser


def _require_database(app: Flask) -> None:
    if not check_db_connection():
        print("Cannot connect to database.", file=sys.stderr)
        sys.exit(1)

    print(f"Using database: {app.config['SQLALCHEMY_DATABASE_URI']}")


def handle_upgrade_db(
    app: Flask, recreate: bool = False, confirmed: bool = False
) -> None:
    with app.app_context():
        _require_database(app)

        if recreate and not confirmed:
            print("--recreate requires --yes-i-am-sure flag", file=sys.stderr)
            sys.exit(1)

        current_rev = get_current_revision()
        pending = get_pending_migrations()

        if current_rev:
            print(f"Current database revision: {current_rev}")
        else:
            print("Database has no migration version")

        if recreate or pending:
            try:
                applied = upgrade_database(recreate=recreate)
                if applied:
                    print(f"Successfully applied {len(applied)} migration(s)")
                else:
                    print("Database migration completed")
            except Exception as e:
                print(f"Migration failed: {e}", file=sys.stderr)
                sys.exit(1)
        else:
            print("Database is up to date.")


def handle_load_test_data(app: Flask, confirmed: bool = False) -> None:
    with app.app_context():
        _require_database(app)

        if not confirmed:
            print("--yes-i-am-sure flag is required", file=sys.stderr)
            sys.exit(1)

        try:
            print("Recreating database from scratch...")
            applied = upgrade_database(recreate=True)
            if applied:
                print(f"Database recreated with {len(applied)} migration(s)")

            load_test_data_hook(app)
            print("Test data loaded")

        except Exception as e:
            print(f"Failed to load test data: {e}", file=sys.stderr)
            sys.exit(1)


def handle_import_products(app: Flask, csv_path: Path, dry_run: bool = False) -> None:
    if not csv_path.is_file():
        print(f"File not found: {csv_path}", file=sys.stderr)
        sys.exit(1)

    with app.app_context():
        _require_database(app)

        container = app.container  # type: ignore[attr-defined]
        session = container.db_session()
        try:
            import_service = container.product_import_service()
            result = import_service.import_csv(
                csv_path.read_text(encoding="utf-8-sig"), dry_run=dry_run
            )
            session.commit()
        except BusinessLogicException as e:
            session.rollback()
            print(f"Import failed: {e.message}", file=sys.stderr)
            sys.exit(1)
        finally:
            session.close()
            container.db_session.reset()

    for error in result.errors:
        print(f"Row {error.row}: {error.message}", file=sys.stderr)

    if dry_run:
        print(f"Dry run: {len(result.valid)} valid row(s), {len(result.errors)} error(s)")
    else:
        print(f"Imported {result.imported} product(s), skipped {len(result.errors)} row(s)")


def handle_grant_role(app: Flask, user_id: str, role: str) -> None:
    with app.app_context():
        _require_database(app)

        container = app.container  # type: ignore[attr-defined]
        session = container.db_session()
        try:
            profile = container.profile_service().grant_role(user_id, AppRole(role))
            roles = sorted(profile.role_names)
            session.commit()
        except BusinessLogicException as e:
            session.rollback()
            print(f"Failed to grant role: {e.message}", file=sys.stderr)
            sys.exit(1)
        finally:
            session.close()
            container.db_session.reset()

    print(f"User {user_id} now has roles: {', '.join(roles)}")


def main() -> NoReturn:
    load_dotenv()

    parser = create_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    app = create_app()

    if args.command == "upgrade-db":
        handle_upgrade_db(
            app=app,
            recreate=args.recreate,
            confirmed=args.yes_i_am_sure,
        )
    elif args.command == "load-test-data":
        handle_load_test_data(
            app=app,
            confirmed=args.yes_i_am_sure,
        )
    elif args.command == "import-products":
        handle_import_products(app=app, csv_path=args.csv_path, dry_run=args.dry_run)
    elif args.command == "grant-role":
        handle_grant_role(app=app, user_id=args.user_id, role=args.role)
    else:
        print(f"Unknown command: {args.command}", file=sys.stderr)
        sys.exit(1)

    sys.exit(0)


if __name__ == "__main__":
    main()
