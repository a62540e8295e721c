#!/usr/bin/env python3

from tools.statistics import calculate_statistics
from logger import get_logger

logger = get_logger()


def cmd_summary(args, services):
    """Print the spending dashboard."""
    stats = calculate_statistics(
        services.transactions.find_all(), services.budget.get()
    )

    basic = stats["basic"]
    logger.info("\nOverview")
    logger.info("=" * 80)
    logger.info(f"Transactions: {basic['total_transactions']}")
    logger.info(f"Total spent: {basic['total_amount']:.2f}")
    logger.info(f"Average: {basic['average_amount']:.2f}")

    periods = stats["periods"]
    logger.info("\nPeriods")
    logger.info("=" * 80)
    for label in ("today", "week", "month", "year"):
        logger.info(f"{label.capitalize():<10} {periods[label]:>12.2f}")

    categories = stats["categories"]["sorted"]
    if categories:
        logger.info("\nBy category")
        logger.info("=" * 80)
        for entry in categories:
            logger.info(
                f"{entry['category']:<20} {entry['amount']:>12.2f} "
                f"({entry['count']} txn, avg {entry['average']:.2f})"
            )

    if args.trends:
        logger.info("\nLast 12 months")
        logger.info("=" * 80)
        for month in stats["trends"]:
            logger.info(
                f"{month['month_name'][:3]} {month['year']}  "
                f"{month['spending']:>12.2f}  ({month['transaction_count']} txn)"
            )

    budget = stats["budget"]
    if budget is not None:
        logger.info("\nBudget")
        logger.info("=" * 80)
        logger.info(
            f"{budget['spent']:.2f} of {budget['cap']:.2f} "
            f"({budget['percentage']:.1f}%), {budget['remaining']:.2f} remaining"
        )
        if budget["over_budget"]:
            logger.warning("Over budget!")

    summary = services.transactions.summary()
    if summary["date_range"]:
        date_range = summary["date_range"]
        logger.info(
            f"\nData spans {date_range['earliest']} to {date_range['latest']} "
            f"({date_range['day_span']} days); last updated {summary['last_updated']}"
        )


def setup_parser(subparsers):
    """Setup stats subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "stats",
        help="Spending statistics",
        description="Totals, period spending, categories and trends",
    )

    stats_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available statistics commands",
        dest="subcommand",
        required=True,
    )

    summary_parser = stats_subparsers.add_parser(
        "summary", help="Show the spending dashboard"
    )
    summary_parser.add_argument(
        "--trends", action="store_true", help="Include 12-month trends"
    )
    summary_parser.set_defaults(func=cmd_summary)
