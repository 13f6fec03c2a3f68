"""
Unit tests for the validation and consistency pipeline.

Stores are replaced by mocks so the tests cover only the checks and their
order: existence, required fields, ranges, references.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.core.exceptions import NotFoundError, ValidationError
from app.services.validation import (
    EntityRules,
    load_existing,
    validate_create,
    validate_update,
)


def make_store(kind, get_result=None):
    store = MagicMock()
    store.kind = kind
    store.get = AsyncMock(return_value=get_result)
    store.get_or_404 = AsyncMock(side_effect=NotFoundError(kind))
    return store


@pytest.fixture
def restaurant_store():
    return make_store("Restaurant", get_result=SimpleNamespace(id=1))


@pytest.fixture
def food_item_store():
    return make_store("Food item", get_result=SimpleNamespace(id=7))


@pytest.fixture
def food_item_rules(restaurant_store):
    return EntityRules(
        kind="Food item",
        store=make_store("Food item"),
        required=("name", "restaurant_id"),
        references={"restaurant_id": restaurant_store},
    )


@pytest.fixture
def review_rules(food_item_store):
    return EntityRules(
        kind="Review",
        store=make_store("Review"),
        required=("food_item_id", "rating"),
        references={"food_item_id": food_item_store},
        ranges={"rating": (1, 5)},
    )


class TestCreateChecks:
    """Checks applied when creating a record."""

    @pytest.mark.asyncio
    async def test_accepts_complete_fields(self, food_item_rules, restaurant_store):
        # Arrange
        fields = {"name": "Pho", "restaurant_id": 1, "price": 0}

        # Act
        values = await validate_create(None, food_item_rules, fields)

        # Assert: zero price is kept as a real value
        assert values == {"name": "Pho", "restaurant_id": 1, "price": 0}
        restaurant_store.get.assert_awaited_once_with(None, 1)

    @pytest.mark.asyncio
    async def test_missing_required_field(self, food_item_rules):
        with pytest.raises(ValidationError) as exc_info:
            await validate_create(None, food_item_rules, {"name": "Pho"})
        assert "restaurant_id" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_blank_required_field(self, food_item_rules):
        with pytest.raises(ValidationError):
            await validate_create(None, food_item_rules, {"name": "   ", "restaurant_id": 1})

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rating", [0, 6, -1])
    async def test_rating_out_of_range(self, review_rules, rating):
        with pytest.raises(ValidationError) as exc_info:
            await validate_create(None, review_rules, {"food_item_id": 7, "rating": rating})
        assert exc_info.value.message == "Rating must be between 1 and 5."

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rating", [1, 5])
    async def test_rating_bounds_are_inclusive(self, review_rules, rating):
        values = await validate_create(None, review_rules, {"food_item_id": 7, "rating": rating})
        assert values["rating"] == rating

    @pytest.mark.asyncio
    async def test_missing_reference_names_target_kind(self, review_rules, food_item_store):
        # Arrange: the referenced food item does not exist
        food_item_store.get.return_value = None

        # Act / Assert
        with pytest.raises(NotFoundError) as exc_info:
            await validate_create(None, review_rules, {"food_item_id": 99, "rating": 3})
        assert exc_info.value.kind == "Food item"
        assert exc_info.value.message == "Food item not found."

    @pytest.mark.asyncio
    async def test_range_checked_before_reference(self, review_rules, food_item_store):
        """A bad rating is reported without looking up the food item."""
        food_item_store.get.return_value = None

        with pytest.raises(ValidationError):
            await validate_create(None, review_rules, {"food_item_id": 99, "rating": 9})
        food_item_store.get.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_required_checked_before_range(self, review_rules):
        with pytest.raises(ValidationError) as exc_info:
            await validate_create(None, review_rules, {"rating": 9})
        assert "food_item_id" in exc_info.value.message


class TestUpdateChecks:
    """Checks applied to presence-tagged partial updates."""

    @pytest.mark.asyncio
    async def test_omitted_required_field_is_allowed(self, food_item_rules):
        existing = SimpleNamespace(id=3, name="Pho", restaurant_id=1, price=8.0)

        changes = await validate_update(None, food_item_rules, existing, {"price": 0})

        assert changes == {"price": 0}

    @pytest.mark.asyncio
    async def test_supplied_required_field_must_not_be_blank(self, food_item_rules):
        existing = SimpleNamespace(id=3, name="Pho", restaurant_id=1)

        with pytest.raises(ValidationError):
            await validate_update(None, food_item_rules, existing, {"name": ""})

    @pytest.mark.asyncio
    async def test_unchanged_reference_is_not_looked_up(self, food_item_rules, restaurant_store):
        existing = SimpleNamespace(id=3, name="Pho", restaurant_id=1)

        await validate_update(None, food_item_rules, existing, {"restaurant_id": 1, "name": "Bun"})

        restaurant_store.get.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_changed_reference_must_exist(self, food_item_rules, restaurant_store):
        existing = SimpleNamespace(id=3, name="Pho", restaurant_id=1)
        restaurant_store.get.return_value = None

        with pytest.raises(NotFoundError) as exc_info:
            await validate_update(None, food_item_rules, existing, {"restaurant_id": 2})
        assert exc_info.value.message == "New restaurant not found."

    @pytest.mark.asyncio
    async def test_rating_only_checked_when_supplied(self, review_rules):
        existing = SimpleNamespace(id=4, food_item_id=7, rating=4, comment="ok")

        changes = await validate_update(None, review_rules, existing, {"comment": "better"})

        assert changes == {"comment": "better"}

    @pytest.mark.asyncio
    async def test_missing_target(self, review_rules):
        with pytest.raises(NotFoundError) as exc_info:
            await load_existing(None, review_rules, 404)
        assert exc_info.value.message == "Review not found."
