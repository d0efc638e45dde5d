from __future__ import annotations

import logging
from typing import Any

from supabase import Client

from src.app.domain.errors import StoreError
from src.app.domain.models import Profile, Recipe, RecipeAggregate
from src.app.infra.db.base import ProfileRepository, RecipeRepository
from src.app.infra.db.supabase_common import (
    create_supabase_client,
    execute,
    first_row,
    is_malformed_id,
    now_iso,
    row_to_aggregate,
    row_to_profile,
    row_to_recipe,
    rows,
)

logger = logging.getLogger(__name__)


class SupabaseRecipeRepository(RecipeRepository):
    TABLE_NAME = "recipes"
    PROFILES_TABLE = "profiles"

    def __init__(self, client: Client | None = None):
        self._client = client or create_supabase_client()

    def list_recipes(self, limit: int = 20, offset: int = 0) -> list[RecipeAggregate]:
        result = execute(
            "list_recipes",
            self._client.table(self.TABLE_NAME)
            .select("*, likes(count), comments(count)")
            .order("created_at", desc=True)
            .range(offset, offset + limit - 1),
        )
        return [row_to_aggregate(row) for row in rows(result)]

    def get_recipe(self, recipe_id: str) -> Recipe | None:
        try:
            result = execute(
                "get_recipe",
                self._client.table(self.TABLE_NAME).select("*").eq("id", recipe_id).limit(1),
            )
        except StoreError as error:
            if is_malformed_id(error):
                return None
            raise
        row = first_row(result)
        return row_to_recipe(row) if row else None

    def insert_recipe(self, user_id: str, fields: dict[str, Any]) -> Recipe:
        payload = {**fields, "user_id": user_id}
        result = execute("insert_recipe", self._client.table(self.TABLE_NAME).insert(payload))
        row = first_row(result)
        if not row:
            raise StoreError("insert_recipe", "Store returned no row for the new recipe")
        recipe = row_to_recipe(row)
        logger.info("Created recipe: id=%s, user=%s", recipe.id, user_id)
        return recipe

    def update_recipe(self, recipe_id: str, user_id: str, changes: dict[str, Any]) -> Recipe | None:
        payload = {**changes, "updated_at": now_iso()}
        result = execute(
            "update_recipe",
            self._client.table(self.TABLE_NAME)
            .update(payload)
            .eq("id", recipe_id)
            .eq("user_id", user_id),
        )
        row = first_row(result)
        return row_to_recipe(row) if row else None

    def delete_recipe(self, recipe_id: str, user_id: str) -> bool:
        result = execute(
            "delete_recipe",
            self._client.table(self.TABLE_NAME)
            .delete()
            .eq("id", recipe_id)
            .eq("user_id", user_id),
        )
        return bool(rows(result))

    def fetch_display_names(self, user_ids: list[str]) -> dict[str, str]:
        unique_ids = sorted({str(user_id) for user_id in user_ids if user_id})
        if not unique_ids:
            return {}

        result = execute(
            "fetch_display_names",
            self._client.table(self.PROFILES_TABLE).select("id, full_name").in_("id", unique_ids),
        )
        return {
            str(row["id"]): str(row["full_name"])
            for row in rows(result)
            if row.get("full_name")
        }


class SupabaseProfileRepository(ProfileRepository):
    TABLE_NAME = "profiles"

    def __init__(self, client: Client | None = None):
        self._client = client or create_supabase_client()

    def get_profile(self, user_id: str) -> Profile | None:
        result = execute(
            "get_profile",
            self._client.table(self.TABLE_NAME).select("*").eq("id", user_id).limit(1),
        )
        row = first_row(result)
        return row_to_profile(row) if row else None

    def find_profile_id_by_username(self, username: str) -> str | None:
        result = execute(
            "find_profile_by_username",
            self._client.table(self.TABLE_NAME).select("id").eq("username", username).limit(1),
        )
        row = first_row(result)
        return str(row["id"]) if row else None

    def insert_profile(self, user_id: str, username: str, full_name: str | None) -> Profile:
        result = execute(
            "insert_profile",
            self._client.table(self.TABLE_NAME).insert(
                {"id": user_id, "username": username, "full_name": full_name}
            ),
        )
        row = first_row(result)
        if not row:
            raise StoreError("insert_profile", "Store returned no row for the new profile")
        logger.info("Created profile: id=%s, username=%s", user_id, username)
        return row_to_profile(row)

    def update_profile(self, user_id: str, changes: dict[str, Any]) -> Profile | None:
        result = execute(
            "update_profile",
            self._client.table(self.TABLE_NAME).update(changes).eq("id", user_id),
        )
        row = first_row(result)
        return row_to_profile(row) if row else None
