#!/usr/bin/env python3
"""
Pocketbook CLI - Unified command-line interface for tracking spending.

Usage:
    python -m cli <command> <subcommand> [options]

Commands:
    transactions Add, list, edit and delete transactions
    search       Regex search, suggestions and pattern help
    categories   Manage categories
    budget       Manage the monthly budget cap
    stats        Spending statistics
    data         Export, import and clear data
    migrate      Database migrations

Examples:
    python -m cli transactions add --description "Lunch at cafeteria" --amount 12.50 \\
        --category Food --date 2025-09-25
    python -m cli search run "lunch|dinner"
    python -m cli search run "/^coffee/" --highlight
    python -m cli stats summary
    python -m cli migrate apply
"""

import sys
import argparse
from cli import transactions, search, categories, budget, stats, data, migrate
from config import load_config
from services.base import Services
from db.manager import DatabaseManager, apply_pending_migrations
from logger import setup_logging


def main():
    """Main CLI entry point with subcommands."""
    parser = argparse.ArgumentParser(
        prog="cli",
        description="Pocketbook - Personal spending tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
        required=True,
    )

    # Register each command's subparser
    transactions.setup_parser(subparsers)
    search.setup_parser(subparsers)
    categories.setup_parser(subparsers)
    budget.setup_parser(subparsers)
    stats.setup_parser(subparsers)
    data.setup_parser(subparsers)
    migrate.setup_parser(subparsers)

    args = parser.parse_args()

    if hasattr(args, "func"):
        try:
            config = load_config()
            setup_logging(config)

            db_manager = DatabaseManager(config)

            # Migrate commands need db_manager for raw database operations
            if args.command == "migrate":
                args.func(args, db_manager)
            else:
                apply_pending_migrations(db_manager)
                services = Services(config, db_manager=db_manager)
                args.func(args, services)
        except Exception as e:
            print(f"Error: {e}")
            sys.exit(1)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
