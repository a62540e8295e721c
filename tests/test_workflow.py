"""End-to-end workflow through the Services container."""

from datetime import date

from search.highlight import highlight_matches
from services.base import Services

TODAY = date(2025, 9, 25)


class TestWorkflow:
    """Add, search, protect categories and reload from storage."""

    def test_add_search_and_protect_category(self, services):
        added = services.transactions.create(
            {
                "description": "Lunch at cafeteria",
                "amount": "12.50",
                "category": "Food",
                "date": "2025-09-25",
            },
            today=TODAY,
        )
        assert added.ok

        found = services.search.search(services.transactions.find_all(), "lunch")
        assert [t.id for t in found.value] == [added.value.id]

        missed = services.search.search(
            services.transactions.find_all(), "LUNCH", case_insensitive=False
        )
        assert missed.value == []

        assert services.categories.remove("Food").reason == "in_use"

    def test_highlight_last_search(self, services):
        services.transactions.create(
            {
                "description": "Coffee & cake",
                "amount": "6",
                "category": "Food",
                "date": "2025-09-20",
            },
            today=TODAY,
        )

        result = services.search.search(services.transactions.find_all(), "coffee")

        assert (
            highlight_matches(result.value[0].description, services.search.last_compiled)
            == "<mark>Coffee</mark> &amp; cake"
        )

    def test_new_container_reloads_stored_data(
        self, services, test_config, db_manager_with_schema
    ):
        services.transactions.create(
            {
                "description": "Bus pass",
                "amount": "40",
                "category": "Transport",
                "date": "2025-09-01",
            },
            today=TODAY,
        )
        services.categories.add("Pets")
        services.budget.set(200)

        reloaded = Services(test_config, db_manager=db_manager_with_schema)

        assert [t.description for t in reloaded.transactions.find_all()] == ["Bus pass"]
        assert "Pets" in reloaded.categories.find_all()
        assert reloaded.budget.get() == 200.0

    def test_search_settings_come_from_config(self, test_config, db_manager_with_schema):
        test_config.search_history_size = 2
        test_config.search_max_pattern_length = 4

        services = Services(test_config, db_manager=db_manager_with_schema)

        assert services.search.history_size == 2
        assert services.search.validate_pattern("abcde").reason == "too_long"
