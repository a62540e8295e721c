#!/usr/bin/env python3

import sys
import json
from pathlib import Path
from logger import get_logger

logger = get_logger()


def cmd_export(args, services):
    """Export all data to a JSON file."""
    snapshot = services.data.export_snapshot()
    output_path = Path(args.output)

    with open(output_path, "w") as f:
        json.dump(snapshot, f, indent=2)

    logger.info(
        f"Exported {len(snapshot['transactions'])} transaction(s) "
        f"and {len(snapshot['categories'])} categories to {output_path}"
    )


def cmd_import(args, services):
    """Import data from a JSON file, replacing the sections it contains."""
    input_path = Path(args.input)
    if not input_path.exists():
        logger.error(f"File not found: {input_path}")
        sys.exit(1)

    try:
        with open(input_path, "r") as f:
            payload = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in {input_path}: {e}")
        sys.exit(1)

    result = services.data.import_snapshot(payload)
    if not result.ok:
        logger.error(result.message)
        for error in result.details.get("errors", []):
            logger.error(f"  {error}")
        sys.exit(1)

    logger.info(
        f"Imported {result.value['transactions']} transaction(s) "
        f"and {result.value['categories']} categories."
    )


def cmd_clear(args, services):
    """Delete all data and restore the default categories."""
    if not args.yes:
        confirm = input("Delete ALL transactions and settings? (y/n): ").strip().lower()
        if confirm != "y":
            logger.info("Cancelled.")
            return

    result = services.data.clear_all()
    if not result.ok:
        logger.error(result.message)
        sys.exit(1)

    logger.info("All data cleared.")


def setup_parser(subparsers):
    """Setup data subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "data",
        help="Export, import and clear data",
        description="Back up and restore all data as JSON",
    )

    data_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available data commands",
        dest="subcommand",
        required=True,
    )

    export_parser = data_subparsers.add_parser(
        "export",
        help="Export everything to JSON",
        epilog="""
Examples:
  python -m cli data export --output backup.json
        """,
    )
    export_parser.add_argument("--output", required=True, help="Output JSON file path")
    export_parser.set_defaults(func=cmd_export)

    import_parser = data_subparsers.add_parser("import", help="Import a JSON backup")
    import_parser.add_argument("input", help="JSON file to import")
    import_parser.set_defaults(func=cmd_import)

    clear_parser = data_subparsers.add_parser("clear", help="Delete all data")
    clear_parser.add_argument(
        "-y", "--yes", action="store_true", help="Do not ask for confirmation"
    )
    clear_parser.set_defaults(func=cmd_clear)
