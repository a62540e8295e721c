#!/usr/bin/env python3

import sys
from logger import get_logger

logger = get_logger()


def cmd_list(args, services):
    """List all categories with how many transactions use each."""
    categories = services.categories.find_all()

    if not categories:
        logger.info("No categories found.")
        return

    counts = {}
    for transaction in services.transactions.find_all():
        counts[transaction.category] = counts.get(transaction.category, 0) + 1

    logger.info("\nCategories:")
    logger.info("=" * 80)
    for category in categories:
        logger.info(f"{category:<30} {counts.get(category, 0)} transaction(s)")

    logger.info(f"\nTotal categories: {len(categories)}")


def cmd_add(args, services):
    """Add a category."""
    result = services.categories.add(args.name)
    if not result.ok:
        logger.error(result.message)
        sys.exit(1)

    logger.info(f"Added category '{result.value}'.")


def cmd_remove(args, services):
    """Remove a category no transaction uses."""
    result = services.categories.remove(args.name)
    if not result.ok:
        logger.error(result.message)
        sys.exit(1)

    logger.info(f"Removed category '{result.value}'.")


def cmd_reset(args, services):
    """Restore the default categories."""
    categories = services.categories.reset()
    logger.info(f"Categories reset: {', '.join(categories)}")


def setup_parser(subparsers):
    """Setup categories subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "categories",
        help="Manage categories",
        description="List, add and remove transaction categories",
    )

    categories_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available category commands",
        dest="subcommand",
        required=True,
    )

    list_parser = categories_subparsers.add_parser("list", help="List all categories")
    list_parser.set_defaults(func=cmd_list)

    add_parser = categories_subparsers.add_parser("add", help="Add a category")
    add_parser.add_argument("name", help="Category name (letters, single spaces and hyphens)")
    add_parser.set_defaults(func=cmd_add)

    remove_parser = categories_subparsers.add_parser(
        "remove", help="Remove an unused category"
    )
    remove_parser.add_argument("name", help="Category name")
    remove_parser.set_defaults(func=cmd_remove)

    reset_parser = categories_subparsers.add_parser(
        "reset", help="Restore the default categories"
    )
    reset_parser.set_defaults(func=cmd_reset)
