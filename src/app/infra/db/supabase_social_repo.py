from __future__ import annotations

import logging

from supabase import Client

from src.app.domain.errors import RecipeNotFoundError, StoreError
from src.app.domain.models import Comment, CommentWithAuthor, Like, RecipeAggregate
from src.app.infra.db.base import SocialRepository
from src.app.infra.db.supabase_common import (
    create_supabase_client,
    execute,
    first_row,
    is_malformed_id,
    now_iso,
    row_to_aggregate,
    row_to_comment,
    row_to_comment_with_author,
    row_to_like,
    rows,
)

logger = logging.getLogger(__name__)

LIKE_COLUMNS = "id, recipe_id, user_id, created_at"
RECIPE_SOCIAL_COLUMNS = "*, likes(count), comments(count)"
COMMENT_WITH_AUTHOR_COLUMNS = "*, author:profiles(full_name, username)"


class SupabaseSocialRepository(SocialRepository):
    LIKES_TABLE = "likes"
    COMMENTS_TABLE = "comments"
    RECIPES_TABLE = "recipes"

    def __init__(self, client: Client | None = None):
        self._client = client or create_supabase_client()

    def find_like(self, recipe_id: str, user_id: str) -> Like | None:
        try:
            result = execute(
                "find_like",
                self._client.table(self.LIKES_TABLE)
                .select(LIKE_COLUMNS)
                .eq("recipe_id", recipe_id)
                .eq("user_id", user_id)
                .limit(1),
            )
        except StoreError as error:
            if is_malformed_id(error):
                return None
            raise
        row = first_row(result)
        return row_to_like(row) if row else None

    def insert_like(self, recipe_id: str, user_id: str) -> Like:
        try:
            result = execute(
                "insert_like",
                self._client.table(self.LIKES_TABLE).insert({"recipe_id": recipe_id, "user_id": user_id}),
            )
        except StoreError as error:
            if is_malformed_id(error):
                raise RecipeNotFoundError(recipe_id) from error
            raise
        row = first_row(result)
        if not row:
            raise StoreError("insert_like", "Store returned no row for the new like")
        return row_to_like(row)

    def delete_like(self, like_id: str) -> bool:
        result = execute(
            "delete_like",
            self._client.table(self.LIKES_TABLE).delete().eq("id", like_id),
        )
        return bool(rows(result))

    def insert_comment(self, recipe_id: str, user_id: str, content: str) -> Comment:
        result = execute(
            "insert_comment",
            self._client.table(self.COMMENTS_TABLE).insert(
                {"recipe_id": recipe_id, "user_id": user_id, "content": content}
            ),
        )
        row = first_row(result)
        if not row:
            raise StoreError("insert_comment", "Store returned no row for the new comment")
        return row_to_comment(row)

    def update_comment(self, comment_id: str, user_id: str, content: str) -> int:
        try:
            result = execute(
                "update_comment",
                self._client.table(self.COMMENTS_TABLE)
                .update({"content": content, "updated_at": now_iso()})
                .eq("id", comment_id)
                .eq("user_id", user_id),
            )
        except StoreError as error:
            if is_malformed_id(error):
                return 0
            raise
        return len(rows(result))

    def delete_comment(self, comment_id: str, user_id: str) -> int:
        try:
            result = execute(
                "delete_comment",
                self._client.table(self.COMMENTS_TABLE)
                .delete()
                .eq("id", comment_id)
                .eq("user_id", user_id),
            )
        except StoreError as error:
            if is_malformed_id(error):
                return 0
            raise
        return len(rows(result))

    def get_comment(self, comment_id: str) -> Comment | None:
        try:
            result = execute(
                "get_comment",
                self._client.table(self.COMMENTS_TABLE).select("*").eq("id", comment_id).limit(1),
            )
        except StoreError as error:
            if is_malformed_id(error):
                return None
            raise
        row = first_row(result)
        return row_to_comment(row) if row else None

    def fetch_recipe_social(self, recipe_id: str) -> RecipeAggregate | None:
        try:
            result = execute(
                "fetch_recipe_social",
                self._client.table(self.RECIPES_TABLE)
                .select(RECIPE_SOCIAL_COLUMNS)
                .eq("id", recipe_id)
                .limit(1),
            )
        except StoreError as error:
            if is_malformed_id(error):
                logger.debug("Malformed recipe id treated as not found: %s", recipe_id)
                return None
            raise
        row = first_row(result)
        return row_to_aggregate(row) if row else None

    def has_user_liked(self, recipe_id: str, user_id: str) -> bool:
        result = execute(
            "fetch_user_like",
            self._client.table(self.LIKES_TABLE)
            .select("id")
            .eq("recipe_id", recipe_id)
            .eq("user_id", user_id)
            .limit(1),
        )
        return bool(rows(result))

    def fetch_comments(self, recipe_id: str) -> list[CommentWithAuthor]:
        result = execute(
            "fetch_comments",
            self._client.table(self.COMMENTS_TABLE)
            .select(COMMENT_WITH_AUTHOR_COLUMNS)
            .eq("recipe_id", recipe_id)
            .order("created_at", desc=True),
        )
        return [row_to_comment_with_author(row) for row in rows(result)]
