from datetime import date
from decimal import Decimal

import pytest

from models.working_set import WorkingSet
from services.transactions import TransactionService
from tests.helpers import make_transaction

TODAY = date(2025, 9, 25)

LUNCH = {
    "description": "Lunch at cafeteria",
    "amount": "12.50",
    "category": "Food",
    "date": "2025-09-25",
}


class TestTransactionService:
    """Tests for TransactionService."""

    def test_create_transaction(self, services):
        """Test creating a transaction from raw input."""
        result = services.transactions.create(LUNCH, today=TODAY)

        assert result.ok
        transaction = result.value
        assert transaction.id.startswith("txn_")
        assert transaction.description == "Lunch at cafeteria"
        assert transaction.amount == Decimal("12.50")
        assert transaction.category == "Food"
        assert transaction.date == TODAY
        assert transaction.created_at == transaction.updated_at

    def test_created_transaction_is_persisted(self, services):
        services.transactions.create(LUNCH, today=TODAY)

        stored = services.storage.load()

        assert len(stored) == 1
        assert stored[0].amount_text == "12.50"

    def test_create_generates_unique_ids(self, services):
        first = services.transactions.create(LUNCH, today=TODAY).value
        second = services.transactions.create(LUNCH, today=TODAY).value

        assert first.id != second.id

    def test_create_with_invalid_fields(self, services):
        """Test that invalid input is rejected with per-field errors."""
        result = services.transactions.create(
            {**LUNCH, "amount": "0", "date": "2025-09-26"}, today=TODAY
        )

        assert not result.ok
        assert result.reason == "invalid_transaction"
        assert result.details["amount"].reason == "too_small"
        assert result.details["date"].reason == "future"
        assert services.transactions.find_all() == []

    def test_create_with_unknown_category(self, services):
        result = services.transactions.create({**LUNCH, "category": "Pets"}, today=TODAY)

        assert result.reason == "unknown_category"
        assert services.transactions.find_all() == []

    def test_add_duplicate_id(self, services):
        transaction = make_transaction(transaction_id="txn_fixed")
        services.transactions.add(transaction)

        result = services.transactions.add(make_transaction(transaction_id="txn_fixed"))

        assert result.reason == "duplicate_id"
        assert len(services.transactions.find_all()) == 1

    def test_find(self, services):
        created = services.transactions.create(LUNCH, today=TODAY).value

        assert services.transactions.find(created.id) == created
        assert services.transactions.find("txn_missing") is None

    def test_find_all_returns_copy(self, services):
        services.transactions.create(LUNCH, today=TODAY)

        services.transactions.find_all().clear()

        assert len(services.transactions.find_all()) == 1

    def test_update_transaction(self, services):
        created = services.transactions.create(LUNCH, today=TODAY).value

        result = services.transactions.update(
            created.id, {"amount": "15", "category": "Other"}, today=TODAY
        )

        assert result.ok
        updated = result.value
        assert updated.id == created.id
        assert updated.created_at == created.created_at
        assert updated.amount == Decimal("15.00")
        assert updated.category == "Other"
        assert updated.description == created.description
        assert services.transactions.find(created.id) == updated
        assert services.storage.load()[0].category == "Other"

    def test_update_ignores_unknown_fields(self, services):
        created = services.transactions.create(LUNCH, today=TODAY).value

        result = services.transactions.update(
            created.id, {"id": "txn_other", "createdAt": "x"}, today=TODAY
        )

        assert result.value.id == created.id

    def test_update_not_found(self, services):
        result = services.transactions.update("txn_missing", {"amount": "1"})

        assert result.reason == "not_found"

    def test_update_with_invalid_value(self, services):
        created = services.transactions.create(LUNCH, today=TODAY).value

        result = services.transactions.update(
            created.id, {"description": "the the cat"}, today=TODAY
        )

        assert result.details["description"].reason == "duplicate_word"
        assert services.transactions.find(created.id) == created

    def test_update_with_unknown_category(self, services):
        created = services.transactions.create(LUNCH, today=TODAY).value

        result = services.transactions.update(
            created.id, {"category": "Pets"}, today=TODAY
        )

        assert result.reason == "unknown_category"

    def test_delete_transaction(self, services):
        created = services.transactions.create(LUNCH, today=TODAY).value

        result = services.transactions.delete(created.id)

        assert result.ok
        assert result.value.id == created.id
        assert services.transactions.find_all() == []
        assert services.storage.load() == []

    def test_delete_not_found(self, services):
        assert services.transactions.delete("txn_missing").reason == "not_found"

    def test_set_all(self, services):
        transactions = [make_transaction(), make_transaction(description="Tea")]

        services.transactions.set_all(transactions)

        assert [t.description for t in services.storage.load()] == [
            "Lunch at cafeteria",
            "Tea",
        ]

    def test_works_without_storage(self):
        """Test that the service can run purely in memory."""
        service = TransactionService(WorkingSet())

        assert service.create(LUNCH, today=TODAY).ok
        assert len(service.find_all()) == 1


class TestSortingAndFiltering:
    """Tests for sorted and filtered views."""

    @pytest.fixture
    def service(self):
        working_set = WorkingSet(
            transactions=[
                make_transaction("Lunch", "12.50", "Food", "2025-09-20"),
                make_transaction("Bus pass", "40.00", "Transport", "2025-09-01"),
                make_transaction("Novel", "8.99", "Books", "2025-09-25"),
            ]
        )
        return TransactionService(working_set)

    def test_sort_by_date_descending(self, service):
        assert [t.description for t in service.sorted()] == ["Novel", "Lunch", "Bus pass"]

    def test_sort_by_amount_ascending(self, service):
        result = service.sorted("amount", "asc")

        assert [t.description for t in result] == ["Novel", "Lunch", "Bus pass"]

    def test_sort_by_description(self, service):
        result = service.sorted("description", "asc")

        assert [t.description for t in result] == ["Bus pass", "Lunch", "Novel"]

    def test_unknown_sort_field_keeps_order(self, service):
        result = service.sorted("colour")

        assert [t.description for t in result] == ["Lunch", "Bus pass", "Novel"]

    def test_filter_by_category(self, service):
        assert [t.description for t in service.filtered(category="Food")] == ["Lunch"]
        assert len(service.filtered(category="all")) == 3

    def test_filter_by_date_range(self, service):
        result = service.filtered(date_from=date(2025, 9, 2), date_to=date(2025, 9, 24))

        assert [t.description for t in result] == ["Lunch"]

    def test_filter_by_amount_range(self, service):
        result = service.filtered(min_amount=Decimal("10"), max_amount=Decimal("40"))

        assert [t.description for t in result] == ["Lunch", "Bus pass"]

    def test_filter_by_search_term(self, service):
        assert [t.description for t in service.filtered(search_term="BUS")] == [
            "Bus pass"
        ]

    def test_summary(self, service):
        summary = service.summary()

        assert summary["transaction_count"] == 3
        assert summary["category_count"] == 6
        assert summary["has_budget_cap"] is False
        assert summary["total_spending"] == Decimal("61.49")
        assert summary["date_range"] == {
            "earliest": "2025-09-01",
            "latest": "2025-09-25",
            "day_span": 25,
        }

    def test_summary_when_empty(self):
        summary = TransactionService(WorkingSet()).summary()

        assert summary["transaction_count"] == 0
        assert summary["date_range"] is None
        assert summary["last_updated"] is None
