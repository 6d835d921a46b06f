"""
Command-line restaurant import.

Usage:
    menu-import restaurant_data.json --console
    cat restaurant_data.json | menu-import -
"""
import argparse
import json
import sys
from pathlib import Path
from typing import Optional, Sequence

from sqlalchemy.orm import sessionmaker

from menu_import.core.config import get_settings
from menu_import.core.errors import InputError, MenuImportError
from menu_import.core.logging import configure_logging
from menu_import.db.base import Base
from menu_import.db.session import build_engine
from menu_import.services.importer import import_restaurants
from menu_import.services.result_formatter import format_failure, format_import_result

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_INPUT_ERROR = 2


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Import restaurants, menus, and menu items from JSON")
    parser.add_argument("path", help="JSON file to import, or '-' to read from stdin")
    parser.add_argument(
        "--console",
        action="store_true",
        help="Print import events as they happen",
    )
    parser.add_argument(
        "--database-url",
        help="Database URL (default: DATABASE_URL setting)",
    )
    parser.add_argument(
        "--create-schema",
        action="store_true",
        help="Create missing tables before importing (development databases)",
    )
    return parser.parse_args(list(argv))


def _read_input(path: str) -> bytes:
    if path == "-":
        return sys.stdin.buffer.read()
    return Path(path).read_bytes()


def _print_response(response) -> None:
    print(json.dumps(response.model_dump(mode="json"), indent=2))


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run one import and print the formatted result. Returns the exit code."""
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    settings = get_settings()
    configure_logging(level=settings.LOG_LEVEL, force=True)

    try:
        content = _read_input(args.path)
    except OSError as e:
        print(f"Error: cannot read {args.path}: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    engine = build_engine(args.database_url or settings.DATABASE_URL)
    if args.create_schema:
        Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    try:
        with SessionLocal() as session:
            report = import_restaurants(session, content, console=args.console)
    except InputError as e:
        _print_response(format_failure(e))
        return EXIT_INPUT_ERROR
    except MenuImportError as e:
        _print_response(format_failure(e))
        return EXIT_FAILED
    finally:
        engine.dispose()

    _print_response(format_import_result(report))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
