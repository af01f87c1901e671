"""Unit tests for ingredient normalization and deduplication."""

import pytest

from chefmate.ingredients.normalizer import (
    COMMON_INGREDIENTS,
    add_ingredient,
    clean_ingredient,
    comparison_key,
    is_suggestion_taken,
    normalize_ingredients,
    parse_bulk_input,
    remove_ingredient,
)


class TestCleanIngredient:
    """Test stripping of decorative markers and whitespace."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("🍗 Chicken", "Chicken"),
            ("  rice  ", "rice"),
            ("🫒 Olive Oil", "Olive Oil"),
            ("🧂", ""),
            ("", ""),
        ],
    )
    def test_clean_ingredient(self, raw, expected):
        assert clean_ingredient(raw) == expected

    def test_comparison_key_ignores_case_and_markers(self):
        assert comparison_key("🍗 Chicken") == comparison_key("  CHICKEN ")


class TestAddIngredient:
    """Test add_ingredient dedup and ordering."""

    def test_appends_cleaned_value(self):
        assert add_ingredient(("rice",), "🍗 Chicken") == ("rice", "Chicken")

    def test_case_insensitive_duplicate_is_ignored(self):
        """Test that a case variant of an existing ingredient is not added."""
        assert add_ingredient(("Chicken",), "chicken") == ("Chicken",)

    def test_decorated_duplicate_is_ignored(self):
        assert add_ingredient(("chicken",), "🍗 Chicken") == ("chicken",)

    def test_empty_after_cleaning_is_ignored(self):
        assert add_ingredient(("rice",), "  🧂 ") == ("rice",)

    def test_does_not_mutate_input(self):
        existing = ["rice"]
        result = add_ingredient(existing, "beans")
        assert existing == ["rice"]
        assert result == ("rice", "beans")


class TestRemoveIngredient:
    """Test exact-match removal."""

    def test_removes_exact_element(self):
        assert remove_ingredient(("rice", "beans"), "rice") == ("beans",)

    def test_removal_is_case_sensitive(self):
        """Test that removal does not case-fold."""
        assert remove_ingredient(("Rice", "beans"), "rice") == ("Rice", "beans")

    def test_missing_target_leaves_set_unchanged(self):
        assert remove_ingredient(("rice",), "tofu") == ("rice",)


class TestParseBulkInput:
    """Test splitting typed ingredient text."""

    def test_splits_on_all_separators(self):
        """Test comma, ampersand and the word 'and' all split."""
        assert parse_bulk_input("chicken, rice and carrots & peas") == (
            "chicken",
            "rice",
            "carrots",
            "peas",
        )

    def test_and_is_case_insensitive(self):
        assert parse_bulk_input("eggs AND spinach") == ("eggs", "spinach")

    def test_and_inside_a_word_does_not_split(self):
        """Test that 'and' only splits as a whole word."""
        assert parse_bulk_input("candy, brandy") == ("candy", "brandy")

    def test_drops_empty_segments_and_duplicates(self):
        assert parse_bulk_input(" , rice,, Rice & ") == ("rice",)

    def test_extends_existing_set(self):
        assert parse_bulk_input("rice, tofu", existing=("Tofu",)) == ("Tofu", "rice")

    def test_empty_text_returns_existing(self):
        assert parse_bulk_input("", existing=("rice",)) == ("rice",)


class TestNormalizeIngredients:
    """Test normalize_ingredients on caller-supplied lists."""

    def test_dedupes_and_cleans(self):
        assert normalize_ingredients(["🍗 Chicken", "chicken", " rice ", ""]) == ("Chicken", "rice")

    def test_skips_non_string_entries(self):
        assert normalize_ingredients(["rice", 3, None, "beans"]) == ("rice", "beans")

    def test_none_gives_empty_set(self):
        assert normalize_ingredients(None) == ()


class TestSuggestions:
    """Test quick-add suggestion helpers."""

    def test_common_ingredients_are_decorated(self):
        assert len(COMMON_INGREDIENTS) == 20
        assert all(clean_ingredient(item) != item for item in COMMON_INGREDIENTS)

    def test_suggestion_taken_by_substring(self):
        """Test substring matching in both directions."""
        assert is_suggestion_taken(("oil",), "🫒 Olive Oil")
        assert is_suggestion_taken(("Extra Virgin Olive Oil",), "🫒 Olive Oil")

    def test_suggestion_not_taken(self):
        assert not is_suggestion_taken(("rice",), "🧀 Cheese")
        assert not is_suggestion_taken((), "🧀 Cheese")
