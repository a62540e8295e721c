#!/usr/bin/env python3

import sys
from search.highlight import highlight_terminal
from logger import get_logger

logger = get_logger()


def _print_results(transactions, services, highlight=False):
    compiled = services.search.last_compiled if highlight else None
    logger.info(f"{'Date':<12} {'Amount':>10}  {'Category':<15} Description")
    logger.info("-" * 80)
    for t in transactions:
        description = highlight_terminal(t.description, compiled) if compiled else t.description
        logger.info(
            f"{t.date.isoformat():<12} {t.amount_text:>10}  {t.category:<15} {description}"
        )
    logger.info(f"\n{len(transactions)} match(es)")


def _print_suggestions(suggestions):
    for suggestion in suggestions:
        marker = " (advanced)" if suggestion.advanced else ""
        logger.info(f"  {suggestion.name}{marker}: {suggestion.query}")
        if suggestion.description:
            logger.info(f"      {suggestion.description}")


def cmd_run(args, services):
    """Run a single regex search over all transactions."""
    result = services.search.search(
        services.transactions.find_all(),
        args.pattern,
        case_insensitive=not args.case_sensitive,
    )
    if not result.ok:
        logger.error(result.message)
        sys.exit(1)

    if not result.value:
        logger.info("No transactions match.")
        return
    _print_results(result.value, services, highlight=args.highlight)


def cmd_interactive(args, services):
    """Read patterns from the prompt until an empty line or EOF.

    ``:history`` lists previous searches, ``:clear`` empties the history.
    """
    print("\nInteractive Search")
    print("=" * 80)
    print("Enter a pattern (bare or /pattern/flags). ':history' lists past")
    print("searches, ':clear' forgets them, an empty line quits.")

    transactions = services.transactions.find_all()
    while True:
        try:
            query = input("search> ").strip()
        except EOFError:
            break
        if not query:
            break

        if query == ":history":
            history = services.search.get_history()
            if not history:
                print("No searches yet.")
            for entry in history:
                print(f"  {entry.display_pattern}  ({entry.timestamp})")
            continue
        if query == ":clear":
            services.search.clear_history()
            print("History cleared.")
            continue

        result = services.search.search(
            transactions, query, case_insensitive=not args.case_sensitive
        )
        if not result.ok:
            print(result.message)
            continue
        if not result.value:
            print("No transactions match.")
            continue
        _print_results(result.value, services, highlight=args.highlight)


def cmd_suggest(args, services):
    """Show pattern suggestions derived from the stored transactions."""
    suggestions = services.search.suggestions(services.transactions.find_all())

    for group in ("amounts", "dates", "descriptions", "categories", "advanced"):
        entries = suggestions.get(group) or []
        if not entries:
            continue
        logger.info(f"\n{group.capitalize()}:")
        _print_suggestions(entries)

    words = services.search.common_words(services.transactions.find_all())
    if words:
        logger.info(f"\nCommon words: {', '.join(words)}")


def cmd_patterns(args, services):
    """List the fixed quick patterns."""
    logger.info("\nQuick patterns:")
    _print_suggestions(services.search.quick_patterns().values())


def cmd_validate(args, services):
    """Check that a pattern compiles, with a hint if it does not."""
    result = services.search.validate_pattern(args.pattern, args.flags)
    if not result.ok:
        logger.error(f"Invalid pattern: {result.details.get('error', result.message)}")
        logger.info(f"Hint: {result.details.get('suggestion')}")
        sys.exit(1)

    logger.info(f"Pattern {result.value.display_pattern} is valid.")


def cmd_tutorial(args, services):
    """Print the regex quick reference."""
    tutorial = services.search.regex_tutorial()
    for section, entries in tutorial.items():
        logger.info(f"\n{section.capitalize()}:")
        for token, meaning in entries.items():
            logger.info(f"  {token:<20} {meaning}")


def setup_parser(subparsers):
    """Setup search subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "search",
        help="Regex search over transactions",
        description="Search transactions with regular expressions",
    )

    search_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available search commands",
        dest="subcommand",
        required=True,
    )

    # search run
    run_parser = search_subparsers.add_parser(
        "run",
        help="Search transactions once",
        epilog="""
Examples:
  python -m cli search run "lunch|dinner"
  python -m cli search run "/^coffee/i" --highlight
  python -m cli search run LUNCH --case-sensitive
        """,
    )
    run_parser.add_argument("pattern", help="Pattern, bare or as /pattern/flags")
    run_parser.add_argument(
        "--case-sensitive",
        action="store_true",
        help="Match case exactly unless the pattern carries its own flags",
    )
    run_parser.add_argument(
        "--highlight", action="store_true", help="Mark matches in descriptions"
    )
    run_parser.set_defaults(func=cmd_run)

    # search interactive
    interactive_parser = search_subparsers.add_parser(
        "interactive", help="Search repeatedly with history"
    )
    interactive_parser.add_argument("--case-sensitive", action="store_true")
    interactive_parser.add_argument("--highlight", action="store_true")
    interactive_parser.set_defaults(func=cmd_interactive)

    # search suggest
    suggest_parser = search_subparsers.add_parser(
        "suggest", help="Suggest patterns based on your data"
    )
    suggest_parser.set_defaults(func=cmd_suggest)

    # search patterns
    patterns_parser = search_subparsers.add_parser(
        "patterns", help="List quick patterns"
    )
    patterns_parser.set_defaults(func=cmd_patterns)

    # search validate
    validate_parser = search_subparsers.add_parser(
        "validate", help="Check a pattern for errors"
    )
    validate_parser.add_argument("pattern", help="Pattern to check")
    validate_parser.add_argument(
        "--flags", default="i", help="Default flags for a bare pattern (default: i)"
    )
    validate_parser.set_defaults(func=cmd_validate)

    # search tutorial
    tutorial_parser = search_subparsers.add_parser(
        "tutorial", help="Show a regex quick reference"
    )
    tutorial_parser.set_defaults(func=cmd_tutorial)
