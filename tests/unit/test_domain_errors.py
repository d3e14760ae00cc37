from __future__ import annotations

import pytest

from cozinha.app.domain.errors import (
    FavoriteConflictError,
    FavoriteNotFoundError,
    InvalidQueryError,
    KitchenError,
    QuotaExceededError,
    RecipeNotFoundError,
    RecipeRepositoryError,
)


class TestKitchenError:
    def test_base_exception(self) -> None:
        error = KitchenError("Base error")
        assert str(error) == "Base error"
        assert isinstance(error, Exception)


class TestQuotaExceededError:
    def test_default_message(self) -> None:
        error = QuotaExceededError()
        assert str(error) == "Daily quota exceeded"
        assert error.limit == 0
        assert error.used == 0
        assert error.reset_hint == "amanhã às 00:00"

    def test_custom_message_and_usage(self) -> None:
        error = QuotaExceededError("Limite atingido", limit=3, used=3)
        assert str(error) == "Limite atingido"
        assert error.limit == 3
        assert error.used == 3


class TestInvalidQueryError:
    def test_default_message(self) -> None:
        assert str(InvalidQueryError()) == "Invalid search request"


class TestNotFoundErrors:
    def test_recipe_not_found(self) -> None:
        error = RecipeNotFoundError("abc")
        assert "abc" in str(error)
        assert error.recipe_id == "abc"

    def test_favorite_not_found(self) -> None:
        error = FavoriteNotFoundError("abc")
        assert error.recipe_id == "abc"


class TestFavoriteConflictError:
    def test_message(self) -> None:
        error = FavoriteConflictError("r-1")
        assert "already in favorites" in str(error)
        assert error.recipe_id == "r-1"


class TestRecipeRepositoryError:
    def test_operation_and_reason(self) -> None:
        error = RecipeRepositoryError("insert", "connection reset")
        assert str(error) == "Recipe repository error during insert: connection reset"
        assert error.operation == "insert"
        assert error.reason == "connection reset"


class TestErrorHierarchy:
    @pytest.mark.parametrize(
        "error",
        [
            InvalidQueryError(),
            QuotaExceededError(),
            RecipeNotFoundError("x"),
            FavoriteNotFoundError("x"),
            FavoriteConflictError("x"),
            RecipeRepositoryError("op", "why"),
        ],
    )
    def test_all_inherit_from_kitchen_error(self, error: Exception) -> None:
        assert isinstance(error, KitchenError)
