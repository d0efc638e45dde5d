# src/app/services/recipe_service.py
"""
Recipe service.
Recipe CRUD with explicit ownership checks, and the newest-first feed.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable

from src.app.domain.errors import InvalidRecipeError, NotOwnerError, RecipeNotFoundError
from src.app.domain.models import UNKNOWN_AUTHOR, Difficulty, Recipe, RecipeSummary
from src.app.infra.db.base import RecipeRepository

logger = logging.getLogger(__name__)

MIN_TITLE_LENGTH = 2
MIN_CATEGORY_LENGTH = 1
MIN_COOKING_TIME = 1
EDITABLE_FIELDS = ("title", "ingredients", "instructions", "cooking_time", "difficulty", "category")


def split_lines(value: str | Iterable[str] | None) -> list[str]:
    """Split a textarea value into trimmed, non-empty lines."""
    if value is None:
        return []
    items = value.split("\n") if isinstance(value, str) else value
    return [str(item).strip() for item in items if str(item).strip()]


def _validate_fields(fields: dict[str, Any], partial: bool) -> dict[str, Any]:
    cleaned: dict[str, Any] = {}
    errors: list[str] = []

    def present(name: str) -> bool:
        return not partial or name in fields

    if present("title"):
        title = str(fields.get("title") or "").strip()
        if len(title) < MIN_TITLE_LENGTH:
            errors.append("Title is required")
        cleaned["title"] = title

    for name, message in (("ingredients", "Ingredients are required"), ("instructions", "Instructions are required")):
        if present(name):
            lines = split_lines(fields.get(name))
            if not lines:
                errors.append(message)
            cleaned[name] = lines

    if present("cooking_time"):
        try:
            cooking_time = int(fields.get("cooking_time"))
        except (TypeError, ValueError):
            cooking_time = 0
        if cooking_time < MIN_COOKING_TIME:
            errors.append("Cooking time must be at least 1 minute")
        cleaned["cooking_time"] = cooking_time

    if present("difficulty"):
        difficulty = str(fields.get("difficulty") or "").strip().lower()
        if difficulty not in {level.value for level in Difficulty}:
            errors.append("Difficulty must be one of easy, medium, hard")
        cleaned["difficulty"] = difficulty

    if present("category"):
        category = str(fields.get("category") or "").strip()
        if len(category) < MIN_CATEGORY_LENGTH:
            errors.append("Category is required")
        cleaned["category"] = category

    if errors:
        raise InvalidRecipeError(errors)
    return cleaned


class RecipeService:
    """
    Service for recipes.

    Unlike the social layer, ownership here is an explicit check that raises
    NotOwnerError, and missing rows raise RecipeNotFoundError.
    """

    def __init__(self, repository: RecipeRepository):
        self._repo = repository

    def list_feed(self, limit: int = 20, offset: int = 0) -> list[RecipeSummary]:
        """
        List recipes newest first with author display names and derived counts.
        """
        aggregates = self._repo.list_recipes(limit=limit, offset=offset)
        names = self._repo.fetch_display_names([item.recipe.user_id for item in aggregates])
        return [
            RecipeSummary(
                recipe=item.recipe,
                author_name=names.get(item.recipe.user_id, UNKNOWN_AUTHOR),
                likes_count=item.likes_count,
                comments_count=item.comments_count,
            )
            for item in aggregates
        ]

    def get_recipe(self, recipe_id: str) -> Recipe:
        recipe = self._repo.get_recipe(recipe_id)
        if recipe is None:
            raise RecipeNotFoundError(recipe_id)
        return recipe

    def author_name(self, recipe: Recipe) -> str:
        return self._repo.fetch_display_names([recipe.user_id]).get(recipe.user_id, UNKNOWN_AUTHOR)

    def create_recipe(self, user_id: str, draft: dict[str, Any]) -> Recipe:
        """
        Validate and store a new recipe owned by `user_id`.

        Raises:
            InvalidRecipeError: If any field fails validation
        """
        fields = _validate_fields(draft, partial=False)
        return self._repo.insert_recipe(user_id, fields)

    def update_recipe(self, recipe_id: str, user_id: str, changes: dict[str, Any]) -> Recipe:
        """
        Apply changes to a recipe owned by `user_id`.

        Raises:
            RecipeNotFoundError: If the recipe does not exist
            NotOwnerError: If the actor is not the owner
            InvalidRecipeError: If a changed field fails validation
        """
        recipe = self._require_owned(recipe_id, user_id)
        editable = {key: value for key, value in changes.items() if key in EDITABLE_FIELDS}
        if not editable:
            return recipe

        fields = _validate_fields(editable, partial=True)
        updated = self._repo.update_recipe(recipe_id, user_id, fields)
        if updated is None:
            # Deleted between the ownership check and the update.
            raise RecipeNotFoundError(recipe_id)

        logger.info("Recipe updated: id=%s, user=%s, fields=%s", recipe_id, user_id, sorted(fields))
        return updated

    def delete_recipe(self, recipe_id: str, user_id: str) -> None:
        """
        Raises:
            RecipeNotFoundError: If the recipe does not exist
            NotOwnerError: If the actor is not the owner
        """
        self._require_owned(recipe_id, user_id)
        if not self._repo.delete_recipe(recipe_id, user_id):
            raise RecipeNotFoundError(recipe_id)
        logger.info("Recipe deleted: id=%s, user=%s", recipe_id, user_id)

    def _require_owned(self, recipe_id: str, user_id: str) -> Recipe:
        recipe = self.get_recipe(recipe_id)
        if recipe.user_id != user_id:
            raise NotOwnerError("recipe", recipe_id)
        return recipe
