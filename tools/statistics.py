"""Spending statistics over a set of transactions.

All functions are pure: they read the transactions they are given and
return new dictionaries. Record dates are calendar days, so a record
dated today is always inside any window that ends today.
"""

import calendar
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Dict, List, Optional, Union

from dateutil.relativedelta import relativedelta

from models.transaction import Transaction

TREND_MONTHS = 12
WEEK_DAYS = 7

DateLike = Union[date, datetime]


def _as_date(value: Optional[DateLike]) -> date:
    if value is None:
        return date.today()
    if isinstance(value, datetime):
        return value.date()
    return value


def _total(transactions) -> Decimal:
    return sum((t.amount for t in transactions), Decimal("0"))


def spending_for_period(
    transactions: List[Transaction], start: DateLike, end: DateLike
) -> Decimal:
    """Sum of amounts for records dated within ``[start, end]`` inclusive."""
    start_day = _as_date(start)
    end_day = _as_date(end)
    return _total(t for t in transactions if start_day <= t.date <= end_day)


def period_totals(
    transactions: List[Transaction], now: Optional[DateLike] = None
) -> Dict[str, Decimal]:
    """Spending for today, the trailing week, this month and this year.

    The week covers the 7 calendar days ending today.
    """
    today = _as_date(now)
    week_start = today - timedelta(days=WEEK_DAYS - 1)
    month_start = today.replace(day=1)
    year_start = today.replace(month=1, day=1)

    return {
        "today": spending_for_period(transactions, today, today),
        "week": spending_for_period(transactions, week_start, today),
        "month": spending_for_period(transactions, month_start, today),
        "year": spending_for_period(transactions, year_start, today),
    }


def category_statistics(transactions: List[Transaction]) -> Dict:
    """Per-category totals and counts, sorted by total (highest first).

    Returns:
        Dictionary with:
        - "totals": category -> total amount (Decimal)
        - "counts": category -> number of transactions
        - "sorted": list of {"category", "amount", "count", "average"}
        - "top": category with the highest total, or None
        - "top_amount": that category's total (Decimal("0") if none)
    """
    totals: Dict[str, Decimal] = {}
    counts: Dict[str, int] = {}

    for transaction in transactions:
        category = transaction.category
        if category not in totals:
            totals[category] = Decimal("0")
            counts[category] = 0
        totals[category] += transaction.amount
        counts[category] += 1

    ranked = sorted(
        (
            {
                "category": category,
                "amount": amount,
                "count": counts[category],
                "average": amount / counts[category],
            }
            for category, amount in totals.items()
        ),
        key=lambda entry: entry["amount"],
        reverse=True,
    )

    return {
        "totals": totals,
        "counts": counts,
        "sorted": ranked,
        "top": ranked[0]["category"] if ranked else None,
        "top_amount": ranked[0]["amount"] if ranked else Decimal("0"),
    }


def monthly_trends(
    transactions: List[Transaction], now: Optional[DateLike] = None
) -> List[Dict]:
    """Spending for each of the trailing 12 calendar months, oldest first.

    Example entry:
        {
            "year": 2025,
            "month": 1,
            "month_name": "January",
            "spending": Decimal("20.00"),
            "transaction_count": 2,
            "average": Decimal("10.00"),
        }
    """
    current_month = _as_date(now).replace(day=1)
    trends = []

    for offset in range(TREND_MONTHS - 1, -1, -1):
        month_start = current_month - relativedelta(months=offset)
        next_month = month_start + relativedelta(months=1)

        in_month = [t for t in transactions if month_start <= t.date < next_month]
        spending = _total(in_month)

        trends.append(
            {
                "year": month_start.year,
                "month": month_start.month,
                "month_name": calendar.month_name[month_start.month],
                "spending": spending,
                "transaction_count": len(in_month),
                "average": spending / len(in_month) if in_month else Decimal("0"),
            }
        )

    return trends


def budget_view(
    transactions: List[Transaction],
    cap: Optional[float],
    now: Optional[DateLike] = None,
) -> Optional[Dict]:
    """Current month's spending against the budget cap.

    A missing or zero cap disables the view. ``percentage`` is not capped,
    so values above 100 mean the budget is exceeded.
    """
    if not cap:
        return None

    today = _as_date(now)
    cap_amount = Decimal(str(cap))
    spent = spending_for_period(transactions, today.replace(day=1), today)

    return {
        "cap": cap_amount,
        "spent": spent,
        "remaining": max(Decimal("0"), cap_amount - spent),
        "percentage": float(spent / cap_amount * 100),
        "over_budget": spent > cap_amount,
    }


def calculate_statistics(
    transactions: List[Transaction],
    budget_cap: Optional[float] = None,
    now: Optional[DateLike] = None,
) -> Dict:
    """Full dashboard summary.

    Returns:
        Dictionary with "basic", "periods", "categories", "trends" and
        "budget" (None without a cap).
    """
    count = len(transactions)
    total = _total(transactions)
    periods = period_totals(transactions, now)

    return {
        "basic": {
            "total_transactions": count,
            "total_amount": total,
            "average_amount": total / count if count else Decimal("0"),
        },
        "periods": periods,
        "categories": category_statistics(transactions),
        "trends": monthly_trends(transactions, now),
        "budget": budget_view(transactions, budget_cap, now),
    }
