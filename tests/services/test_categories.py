from datetime import date

from models.working_set import DEFAULT_CATEGORIES


class TestCategoryService:
    """Tests for CategoryService."""

    def test_default_categories(self, services):
        """Test that a fresh store is seeded with the default categories."""
        assert services.categories.find_all() == DEFAULT_CATEGORIES

    def test_add_category(self, services):
        result = services.categories.add("  Eating Out ")

        assert result.ok
        assert result.value == "Eating Out"
        assert services.categories.find_all()[-1] == "Eating Out"
        assert services.storage.load_categories()[-1] == "Eating Out"

    def test_add_duplicate(self, services):
        result = services.categories.add("Food")

        assert result.reason == "duplicate_category"
        assert services.categories.find_all().count("Food") == 1

    def test_add_invalid_name(self, services):
        result = services.categories.add("Food 2")

        assert result.reason == "invalid_characters"

    def test_remove_unused_category(self, services):
        result = services.categories.remove("Books")

        assert result.ok
        assert "Books" not in services.categories.find_all()
        assert "Books" not in services.storage.load_categories()

    def test_remove_category_in_use(self, services):
        """Test that a category referenced by a transaction cannot be removed."""
        services.transactions.create(
            {
                "description": "Lunch at cafeteria",
                "amount": "12.50",
                "category": "Food",
                "date": "2025-09-25",
            },
            today=date(2025, 9, 25),
        )

        result = services.categories.remove("Food")

        assert not result.ok
        assert result.reason == "in_use"
        assert result.details["count"] == 1
        assert "Food" in services.categories.find_all()

    def test_remove_unknown_category(self, services):
        assert services.categories.remove("Pets").reason == "not_found"

    def test_cannot_remove_last_category(self, services):
        services.categories.set_all(["Food"])

        result = services.categories.remove("Food")

        assert result.reason == "last_category"
        assert services.categories.find_all() == ["Food"]

    def test_set_all_cleans_input(self, services):
        result = services.categories.set_all(["Food", " Books ", "", None, "Food"])

        assert result == ["Food", "Books"]
        assert services.storage.load_categories() == ["Food", "Books"]

    def test_set_all_keeps_categories_in_use(self, services):
        """Test that replacing the list never orphans a transaction's category."""
        services.transactions.create(
            {
                "description": "Lunch at cafeteria",
                "amount": "12.50",
                "category": "Food",
                "date": "2025-09-25",
            },
            today=date(2025, 9, 25),
        )

        result = services.categories.set_all(["Books"])

        assert result == ["Books", "Food"]
        assert services.storage.load_categories() == ["Books", "Food"]

    def test_set_all_rejects_empty_list(self, services):
        result = services.categories.set_all(["", "  ", None])

        assert result == DEFAULT_CATEGORIES
        assert services.categories.find_all() == DEFAULT_CATEGORIES

    def test_find_all_returns_copy(self, services):
        services.categories.find_all().clear()

        assert services.categories.find_all() == DEFAULT_CATEGORIES

    def test_reset_restores_defaults(self, services):
        services.categories.set_all(["Pets"])

        result = services.categories.reset()

        assert result == DEFAULT_CATEGORIES
        assert services.storage.load_categories() == DEFAULT_CATEGORIES

    def test_reset_keeps_categories_in_use(self, services):
        """Test that reset never orphans a transaction's category."""
        services.categories.add("Pets")
        services.transactions.create(
            {
                "description": "Dog food",
                "amount": "20",
                "category": "Pets",
                "date": "2025-09-20",
            },
            today=date(2025, 9, 25),
        )

        result = services.categories.reset()

        assert result == DEFAULT_CATEGORIES + ["Pets"]
