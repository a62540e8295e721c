from search.compiler import PatternCompiler
from search.matcher import matches, searchable_fields
from tests.helpers import make_transaction, transaction_record


def compile_pattern(raw, flags="gi"):
    return PatternCompiler().compile(raw, flags).value


class TestSearchableFields:
    """Tests for the texts a record exposes to search."""

    def test_transaction_fields(self):
        transaction = make_transaction()

        assert searchable_fields(transaction) == [
            "Lunch at cafeteria",
            "Food",
            "12.50",
            "2025-09-25",
        ]

    def test_serialized_record_fields(self):
        assert searchable_fields(transaction_record()) == [
            "Lunch at cafeteria",
            "Food",
            "12.50",
            "2025-09-25",
        ]

    def test_missing_fields_are_none(self):
        assert searchable_fields({"description": "Tea"}) == ["Tea", None, None, None]


class TestMatches:
    """Tests for per-record matching."""

    def test_matches_description(self):
        assert matches(compile_pattern("cafeteria"), make_transaction())

    def test_matches_category(self):
        assert matches(compile_pattern("^food$"), make_transaction())

    def test_matches_amount_text(self):
        """Test that amounts are matched with two decimals."""
        assert matches(compile_pattern(r"^12\.50$"), make_transaction())
        assert not matches(compile_pattern(r"^12\.5$"), make_transaction())

    def test_matches_date(self):
        assert matches(compile_pattern("^2025-09"), make_transaction())

    def test_no_field_matches(self):
        assert not matches(compile_pattern("dinner"), make_transaction())

    def test_non_text_values_never_match(self):
        record = {"description": None, "category": 7, "amount": "x", "date": None}

        assert not matches(compile_pattern("7"), record)
