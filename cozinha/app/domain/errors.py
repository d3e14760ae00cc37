from __future__ import annotations


class KitchenError(Exception):
    pass


class InvalidQueryError(KitchenError):
    def __init__(self, message: str = "Invalid search request"):
        super().__init__(message)


class QuotaExceededError(KitchenError):
    def __init__(
        self,
        message: str = "Daily quota exceeded",
        limit: int = 0,
        used: int = 0,
        reset_hint: str = "amanhã às 00:00",
    ):
        super().__init__(message)
        self.limit = limit
        self.used = used
        self.reset_hint = reset_hint


class RecipeNotFoundError(KitchenError):
    def __init__(self, recipe_id: str):
        super().__init__(f"Recipe not found: {recipe_id}")
        self.recipe_id = recipe_id


class FavoriteNotFoundError(KitchenError):
    def __init__(self, recipe_id: str):
        super().__init__(f"Favorite not found for recipe: {recipe_id}")
        self.recipe_id = recipe_id


class FavoriteConflictError(KitchenError):
    def __init__(self, recipe_id: str):
        super().__init__(f"Recipe already in favorites: {recipe_id}")
        self.recipe_id = recipe_id


class RecipeRepositoryError(KitchenError):
    def __init__(self, operation: str, reason: str):
        super().__init__(f"Recipe repository error during {operation}: {reason}")
        self.operation = operation
        self.reason = reason
