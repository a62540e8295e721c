from datetime import date, datetime
from decimal import Decimal

from tools.statistics import (
    budget_view,
    calculate_statistics,
    category_statistics,
    monthly_trends,
    period_totals,
    spending_for_period,
)
from tests.helpers import make_transaction

NOW = date(2025, 9, 25)


def sample_transactions():
    return [
        make_transaction("Lunch", "12.50", "Food", "2025-09-25"),
        make_transaction("Coffee", "4.00", "Food", "2025-09-19"),
        make_transaction("Bus pass", "40.00", "Transport", "2025-09-18"),
        make_transaction("Novel", "15.00", "Books", "2025-08-31"),
        make_transaction("Course book", "60.00", "Books", "2024-12-31"),
    ]


class TestPeriods:
    """Tests for period spending."""

    def test_spending_for_period_is_inclusive(self):
        total = spending_for_period(
            sample_transactions(), date(2025, 9, 18), date(2025, 9, 25)
        )

        assert total == Decimal("56.50")

    def test_accepts_datetimes(self):
        total = spending_for_period(
            sample_transactions(), datetime(2025, 9, 25, 0, 0), datetime(2025, 9, 25, 23, 59)
        )

        assert total == Decimal("12.50")

    def test_period_totals(self):
        totals = period_totals(sample_transactions(), NOW)

        assert totals["today"] == Decimal("12.50")
        assert totals["week"] == Decimal("16.50")
        assert totals["month"] == Decimal("56.50")
        assert totals["year"] == Decimal("71.50")

    def test_week_covers_seven_days(self):
        """Test that the trailing week starts six days before today."""
        transactions = [
            make_transaction(amount="1.00", transaction_date="2025-09-19"),
            make_transaction(amount="2.00", transaction_date="2025-09-18"),
        ]

        assert period_totals(transactions, NOW)["week"] == Decimal("1.00")

    def test_empty(self):
        assert period_totals([], NOW) == {
            "today": Decimal("0"),
            "week": Decimal("0"),
            "month": Decimal("0"),
            "year": Decimal("0"),
        }


class TestCategoryStatistics:
    """Tests for category_statistics."""

    def test_totals_and_ranking(self):
        stats = category_statistics(sample_transactions())

        assert stats["totals"]["Books"] == Decimal("75.00")
        assert stats["counts"]["Food"] == 2
        assert [entry["category"] for entry in stats["sorted"]] == [
            "Books",
            "Transport",
            "Food",
        ]
        assert stats["sorted"][0]["average"] == Decimal("37.50")
        assert stats["top"] == "Books"
        assert stats["top_amount"] == Decimal("75.00")

    def test_empty(self):
        stats = category_statistics([])

        assert stats["sorted"] == []
        assert stats["top"] is None
        assert stats["top_amount"] == Decimal("0")


class TestMonthlyTrends:
    """Tests for monthly_trends."""

    def test_twelve_months_oldest_first(self):
        trends = monthly_trends(sample_transactions(), NOW)

        assert len(trends) == 12
        assert (trends[0]["year"], trends[0]["month"]) == (2024, 10)
        assert (trends[-1]["year"], trends[-1]["month"]) == (2025, 9)
        assert trends[-1]["month_name"] == "September"

    def test_monthly_values(self):
        trends = monthly_trends(sample_transactions(), NOW)
        by_month = {(t["year"], t["month"]): t for t in trends}

        assert by_month[(2025, 9)]["spending"] == Decimal("56.50")
        assert by_month[(2025, 9)]["transaction_count"] == 3
        assert by_month[(2024, 12)]["average"] == Decimal("60.00")
        assert by_month[(2025, 1)]["spending"] == Decimal("0")
        assert by_month[(2025, 1)]["average"] == Decimal("0")


class TestBudgetView:
    """Tests for budget_view."""

    def test_no_cap(self):
        assert budget_view(sample_transactions(), None, NOW) is None
        assert budget_view(sample_transactions(), 0, NOW) is None

    def test_under_budget(self):
        view = budget_view(sample_transactions(), 100, NOW)

        assert view["spent"] == Decimal("56.50")
        assert view["remaining"] == Decimal("43.50")
        assert view["percentage"] == 56.5
        assert view["over_budget"] is False

    def test_percentage_is_not_capped(self):
        view = budget_view(sample_transactions(), 50, NOW)

        assert view["percentage"] == 113.0
        assert view["remaining"] == Decimal("0")
        assert view["over_budget"] is True


class TestCalculateStatistics:
    """Tests for calculate_statistics."""

    def test_summary(self):
        stats = calculate_statistics(sample_transactions(), 100, NOW)

        assert stats["basic"] == {
            "total_transactions": 5,
            "total_amount": Decimal("131.50"),
            "average_amount": Decimal("26.30"),
        }
        assert stats["periods"]["month"] == Decimal("56.50")
        assert stats["categories"]["top"] == "Books"
        assert len(stats["trends"]) == 12
        assert stats["budget"]["cap"] == Decimal("100")

    def test_empty(self):
        stats = calculate_statistics([], None, NOW)

        assert stats["basic"]["total_transactions"] == 0
        assert stats["basic"]["average_amount"] == Decimal("0")
        assert stats["budget"] is None
