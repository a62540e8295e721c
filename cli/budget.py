#!/usr/bin/env python3

import sys
from logger import get_logger

logger = get_logger()


def cmd_show(args, services):
    """Show this month's spending against the budget cap."""
    view = services.budget.view()
    if view is None:
        logger.info("No budget cap set.")
        return

    logger.info(f"Budget cap: {view['cap']:.2f}")
    logger.info(f"Spent this month: {view['spent']:.2f} ({view['percentage']:.1f}%)")
    logger.info(f"Remaining: {view['remaining']:.2f}")
    if view["over_budget"]:
        logger.warning("Over budget!")


def cmd_set(args, services):
    """Set the monthly budget cap."""
    result = services.budget.set(args.amount)
    if not result.ok:
        logger.error(result.message)
        sys.exit(1)

    logger.info(f"Budget cap set to {result.value:.2f}.")


def cmd_clear(args, services):
    """Remove the budget cap."""
    services.budget.clear()
    logger.info("Budget cap removed.")


def setup_parser(subparsers):
    """Setup budget subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "budget",
        help="Manage the monthly budget cap",
        description="Show, set or remove the monthly spending cap",
    )

    budget_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available budget commands",
        dest="subcommand",
        required=True,
    )

    show_parser = budget_subparsers.add_parser("show", help="Show budget status")
    show_parser.set_defaults(func=cmd_show)

    set_parser = budget_subparsers.add_parser("set", help="Set the budget cap")
    set_parser.add_argument("amount", type=float, help="Monthly cap (0 disables it)")
    set_parser.set_defaults(func=cmd_set)

    clear_parser = budget_subparsers.add_parser("clear", help="Remove the budget cap")
    clear_parser.set_defaults(func=cmd_clear)
