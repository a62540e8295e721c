#!/usr/bin/env python3

import sys
from datetime import date
from decimal import Decimal, InvalidOperation
from logger import get_logger

logger = get_logger()


def _parse_day(value, label):
    """Parse a YYYY-MM-DD option value, exiting on bad input."""
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        logger.error(f"Invalid {label} '{value}'. Use YYYY-MM-DD format.")
        sys.exit(1)


def _parse_amount(value, label):
    if value is None:
        return None
    try:
        return Decimal(value)
    except InvalidOperation:
        logger.error(f"Invalid {label} '{value}'.")
        sys.exit(1)


def _report_errors(result):
    """Log a failed Result, including per-field errors, and exit."""
    logger.error(result.message)
    for field, error in result.details.items():
        if hasattr(error, "message"):
            logger.error(f"  {field}: {error.message}")
    sys.exit(1)


def print_transaction(transaction):
    logger.info(f"ID: {transaction.id}")
    logger.info(f"Date: {transaction.date.isoformat()}")
    logger.info(f"Description: {transaction.description}")
    logger.info(f"Amount: {transaction.amount_text}")
    logger.info(f"Category: {transaction.category}")


def print_transaction_table(transactions):
    logger.info(f"{'Date':<12} {'Amount':>10}  {'Category':<15} Description")
    logger.info("-" * 80)
    for t in transactions:
        logger.info(
            f"{t.date.isoformat():<12} {t.amount_text:>10}  {t.category:<15} {t.description}"
        )


def cmd_add(args, services):
    """Add a new transaction."""
    result = services.transactions.create(
        {
            "description": args.description,
            "amount": args.amount,
            "category": args.category,
            "date": args.date or date.today().isoformat(),
        }
    )
    if not result.ok:
        _report_errors(result)

    logger.info("Transaction added.")
    print_transaction(result.value)


def cmd_list(args, services):
    """List transactions, sorted and optionally filtered."""
    date_from = _parse_day(args.date_from, "start date")
    date_to = _parse_day(args.date_to, "end date")
    min_amount = _parse_amount(args.min_amount, "minimum amount")
    max_amount = _parse_amount(args.max_amount, "maximum amount")

    filtered = services.transactions.filtered(
        category=args.category,
        date_from=date_from,
        date_to=date_to,
        min_amount=min_amount,
        max_amount=max_amount,
        search_term=args.contains,
    )
    kept = {t.id for t in filtered}
    transactions = [
        t
        for t in services.transactions.sorted(args.sort, args.direction)
        if t.id in kept
    ]

    if not transactions:
        logger.info("No transactions found.")
        return

    print_transaction_table(transactions)
    total = sum((t.amount for t in transactions), Decimal("0"))
    logger.info(f"\nTotal: {len(transactions)} transaction(s), {total:.2f}")


def cmd_show(args, services):
    """Show one transaction in full."""
    transaction = services.transactions.find(args.transaction_id)
    if transaction is None:
        logger.error(f"Transaction {args.transaction_id} not found.")
        sys.exit(1)

    print_transaction(transaction)
    logger.info(f"Created: {transaction.created_at}")
    logger.info(f"Updated: {transaction.updated_at}")


def cmd_edit(args, services):
    """Change fields of an existing transaction."""
    changes = {
        field: value
        for field, value in (
            ("description", args.description),
            ("amount", args.amount),
            ("category", args.category),
            ("date", args.date),
        )
        if value is not None
    }
    if not changes:
        logger.error("Nothing to change. Pass at least one field option.")
        sys.exit(1)

    result = services.transactions.update(args.transaction_id, changes)
    if not result.ok:
        _report_errors(result)

    logger.info("Transaction updated.")
    print_transaction(result.value)


def cmd_delete(args, services):
    """Delete a transaction."""
    transaction = services.transactions.find(args.transaction_id)
    if transaction is None:
        logger.error(f"Transaction {args.transaction_id} not found.")
        sys.exit(1)

    if not args.yes:
        print_transaction(transaction)
        confirm = input("Delete this transaction? (y/n): ").strip().lower()
        if confirm != "y":
            logger.info("Cancelled.")
            return

    services.transactions.delete(args.transaction_id)
    logger.info(f"Deleted transaction {args.transaction_id}.")


def setup_parser(subparsers):
    """Setup transactions subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "transactions",
        help="Add and manage transactions",
        description="Add, list, edit and delete spending transactions",
    )

    transactions_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available transaction commands",
        dest="subcommand",
        required=True,
    )

    # transactions add
    add_parser = transactions_subparsers.add_parser(
        "add",
        help="Add a transaction",
        epilog="""
Examples:
  python -m cli transactions add --description "Lunch at cafeteria" --amount 12.50 --category Food
  python -m cli transactions add --description "Bus pass" --amount 40 --category Transport --date 2025-09-01
        """,
    )
    add_parser.add_argument("--description", required=True, help="What was bought")
    add_parser.add_argument("--amount", required=True, help="Amount, e.g. 12.50")
    add_parser.add_argument("--category", required=True, help="Existing category name")
    add_parser.add_argument("--date", help="Date in YYYY-MM-DD format (default: today)")
    add_parser.set_defaults(func=cmd_add)

    # transactions list
    list_parser = transactions_subparsers.add_parser(
        "list",
        help="List transactions",
        description="List transactions with optional sorting and filters",
    )
    list_parser.add_argument(
        "--sort",
        default="date",
        choices=["date", "amount", "description", "category", "createdAt", "updatedAt"],
        help="Field to sort by (default: date)",
    )
    list_parser.add_argument(
        "--direction",
        default="desc",
        choices=["asc", "desc"],
        help="Sort direction (default: desc)",
    )
    list_parser.add_argument("--category", help="Only this category ('all' for every one)")
    list_parser.add_argument("--from", dest="date_from", help="Earliest date (YYYY-MM-DD)")
    list_parser.add_argument("--to", dest="date_to", help="Latest date (YYYY-MM-DD)")
    list_parser.add_argument("--min-amount", help="Smallest amount to include")
    list_parser.add_argument("--max-amount", help="Largest amount to include")
    list_parser.add_argument(
        "--contains", help="Case-insensitive text the description must contain"
    )
    list_parser.set_defaults(func=cmd_list)

    # transactions show
    show_parser = transactions_subparsers.add_parser("show", help="Show a transaction")
    show_parser.add_argument("transaction_id", help="Transaction ID")
    show_parser.set_defaults(func=cmd_show)

    # transactions edit
    edit_parser = transactions_subparsers.add_parser(
        "edit",
        help="Edit a transaction",
        description="Change one or more fields of a transaction",
    )
    edit_parser.add_argument("transaction_id", help="Transaction ID")
    edit_parser.add_argument("--description", help="New description")
    edit_parser.add_argument("--amount", help="New amount")
    edit_parser.add_argument("--category", help="New category")
    edit_parser.add_argument("--date", help="New date (YYYY-MM-DD)")
    edit_parser.set_defaults(func=cmd_edit)

    # transactions delete
    delete_parser = transactions_subparsers.add_parser(
        "delete", help="Delete a transaction"
    )
    delete_parser.add_argument("transaction_id", help="Transaction ID")
    delete_parser.add_argument(
        "-y", "--yes", action="store_true", help="Do not ask for confirmation"
    )
    delete_parser.set_defaults(func=cmd_delete)
