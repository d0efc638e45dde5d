# src/app/infra/db/supabase_common.py
"""
Helpers shared by the Supabase repositories: client creation, PostgREST error
translation and row parsing.
"""
from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from typing import Any, Optional

import httpx
from dotenv import find_dotenv, load_dotenv
from postgrest.exceptions import APIError
from supabase import Client, create_client

from src.app.domain.errors import DuplicateRowError, StoreError
from src.app.domain.models import (
    UNKNOWN_AUTHOR,
    Comment,
    CommentWithAuthor,
    Like,
    Profile,
    Recipe,
    RecipeAggregate,
)

logger = logging.getLogger(__name__)

# Postgres SQLSTATE codes surfaced by PostgREST
UNIQUE_VIOLATION = "23505"
INVALID_TEXT_REPRESENTATION = "22P02"


def create_supabase_client() -> Client:
    """Client for repositories used outside the API process (reads .env if present)."""
    env_path = find_dotenv(usecwd=True)
    if env_path:
        load_dotenv(dotenv_path=env_path, override=False)
    url = os.getenv("SUPABASE_URL")
    key = os.getenv("SUPABASE_SERVICE_ROLE_KEY")
    if not url or not key:
        raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY required")
    return create_client(url, key)


def execute(operation: str, query: Any) -> Any:
    """Run a PostgREST query, translating client errors into StoreError."""
    try:
        return query.execute()
    except APIError as error:
        code = getattr(error, "code", None)
        message = getattr(error, "message", None) or str(error)
        if code == UNIQUE_VIOLATION:
            logger.warning("Unique violation during %s: %s", operation, message)
            raise DuplicateRowError(operation, message) from error
        logger.error("Store error during %s: code=%s, message=%s", operation, code, message)
        raise StoreError(operation, message, code=code) from error
    except (httpx.HTTPError, ConnectionError, TimeoutError) as error:
        logger.error("Network error during %s: %s", operation, error)
        raise StoreError(operation, str(error)) from error


def is_malformed_id(error: StoreError) -> bool:
    """True when PostgREST rejected an id that is not a valid uuid."""
    return error.code == INVALID_TEXT_REPRESENTATION


def first_row(result: Any) -> Optional[dict[str, Any]]:
    data = getattr(result, "data", None)
    if isinstance(data, list):
        return data[0] if data else None
    if isinstance(data, dict) and data:
        return data
    return None


def rows(result: Any) -> list[dict[str, Any]]:
    data = getattr(result, "data", None)
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and data:
        return [data]
    return []


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def parse_datetime(value: str | datetime | None) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        return None

    try:
        normalized = value.replace("Z", "+00:00") if value.endswith("Z") else value
        return datetime.fromisoformat(normalized)
    except ValueError:
        return None


def _optional_int(value: object) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _optional_str(value: object) -> str | None:
    return str(value) if value else None


def _text_list(value: object) -> list[str]:
    # Older rows store ingredients/instructions as one newline-separated string.
    if isinstance(value, str):
        items = value.split("\n")
    elif isinstance(value, list):
        items = [str(item) for item in value if item is not None]
    else:
        return []
    return [item.strip() for item in items if item.strip()]


def embedded_count(value: object) -> int:
    """Read a PostgREST embedded aggregate such as `likes(count)` -> [{"count": 3}]."""
    if isinstance(value, list):
        if not value or not isinstance(value[0], dict):
            return 0
        return _optional_int(value[0].get("count")) or 0
    if isinstance(value, dict):
        return _optional_int(value.get("count")) or 0
    return _optional_int(value) or 0


def row_to_recipe(row: dict[str, Any]) -> Recipe:
    return Recipe(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        title=str(row.get("title") or ""),
        ingredients=_text_list(row.get("ingredients")),
        instructions=_text_list(row.get("instructions")),
        cooking_time=_optional_int(row.get("cooking_time")),
        difficulty=_optional_str(row.get("difficulty")),
        category=_optional_str(row.get("category")),
        created_at=parse_datetime(row.get("created_at")),
        updated_at=parse_datetime(row.get("updated_at")),
    )


def row_to_aggregate(row: dict[str, Any]) -> RecipeAggregate:
    return RecipeAggregate(
        recipe=row_to_recipe(row),
        likes_count=embedded_count(row.get("likes")),
        comments_count=embedded_count(row.get("comments")),
    )


def row_to_like(row: dict[str, Any]) -> Like:
    return Like(
        id=str(row["id"]),
        recipe_id=str(row["recipe_id"]),
        user_id=str(row["user_id"]),
        created_at=parse_datetime(row.get("created_at")),
    )


def row_to_comment(row: dict[str, Any]) -> Comment:
    return Comment(
        id=str(row["id"]),
        recipe_id=str(row["recipe_id"]),
        user_id=str(row["user_id"]),
        content=str(row.get("content") or ""),
        created_at=parse_datetime(row.get("created_at")),
        updated_at=parse_datetime(row.get("updated_at")),
    )


def row_to_comment_with_author(row: dict[str, Any]) -> CommentWithAuthor:
    author = row.get("author") or {}
    if isinstance(author, list):
        author = author[0] if author else {}
    comment = row_to_comment(row)
    return CommentWithAuthor(
        id=comment.id,
        recipe_id=comment.recipe_id,
        user_id=comment.user_id,
        content=comment.content,
        created_at=comment.created_at,
        updated_at=comment.updated_at,
        author_name=_optional_str(author.get("full_name")) or UNKNOWN_AUTHOR,
        author_username=_optional_str(author.get("username")),
    )


def row_to_profile(row: dict[str, Any]) -> Profile:
    return Profile(
        id=str(row["id"]),
        username=str(row["username"]),
        full_name=_optional_str(row.get("full_name")),
        created_at=parse_datetime(row.get("created_at")),
        updated_at=parse_datetime(row.get("updated_at")),
    )
