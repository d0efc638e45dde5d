from __future__ import annotations

import os

# Settings() is built at import time and requires these.
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")

from datetime import datetime, timedelta, timezone
from itertools import count
from typing import Any, Optional

import pytest

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
from src.app.infra.db.base import ProfileRepository, RecipeRepository, SocialRepository

BASE_TIME = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


class _Clock:
    def __init__(self) -> None:
        self._ticks = count()

    def now(self) -> datetime:
        return BASE_TIME + timedelta(seconds=next(self._ticks))


class InMemoryStore:
    """
    Shared tables for the repository stubs. Enforces the unique (recipe_id, user_id)
    constraint on likes and the unique username constraint on profiles.
    """

    def __init__(self) -> None:
        self.recipes: dict[str, Recipe] = {}
        self.likes: dict[str, Like] = {}
        self.comments: dict[str, Comment] = {}
        self.profiles: dict[str, Profile] = {}
        self.clock = _Clock()
        self._ids = count(1)
        self.failing: dict[str, str] = {}
        self.calls: list[str] = []

    def next_id(self, prefix: str) -> str:
        return f"{prefix}-{next(self._ids)}"

    def touch(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.failing:
            raise StoreError(operation, self.failing[operation])

    def fail(self, operation: str, reason: str = "connection refused") -> None:
        self.failing[operation] = reason

    def add_recipe(self, user_id: str, title: str = "Pancakes", recipe_id: Optional[str] = None) -> Recipe:
        recipe = Recipe(
            id=recipe_id or self.next_id("recipe"),
            user_id=user_id,
            title=title,
            ingredients=["flour", "milk"],
            instructions=["mix", "fry"],
            cooking_time=15,
            difficulty="easy",
            category="breakfast",
            created_at=self.clock.now(),
        )
        self.recipes[recipe.id] = recipe
        return recipe

    def add_profile(self, user_id: str, username: str, full_name: Optional[str] = None) -> Profile:
        profile = Profile(id=user_id, username=username, full_name=full_name, created_at=self.clock.now())
        self.profiles[user_id] = profile
        return profile

    def add_like(self, recipe_id: str, user_id: str) -> Like:
        like = Like(id=self.next_id("like"), recipe_id=recipe_id, user_id=user_id, created_at=self.clock.now())
        self.likes[like.id] = like
        return like

    def add_comment(self, recipe_id: str, user_id: str, content: str) -> Comment:
        comment = Comment(
            id=self.next_id("comment"),
            recipe_id=recipe_id,
            user_id=user_id,
            content=content,
            created_at=self.clock.now(),
        )
        self.comments[comment.id] = comment
        return comment

    def likes_for(self, recipe_id: str) -> list[Like]:
        return [like for like in self.likes.values() if like.recipe_id == recipe_id]

    def comments_for(self, recipe_id: str) -> list[Comment]:
        return [comment for comment in self.comments.values() if comment.recipe_id == recipe_id]


class InMemorySocialRepository(SocialRepository):
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store
        # Simulates a concurrent insert landing between find_like and insert_like.
        self.hide_likes_on_find = False

    def find_like(self, recipe_id: str, user_id: str) -> Optional[Like]:
        self.store.touch("find_like")
        if self.hide_likes_on_find:
            return None
        return next(
            (like for like in self.store.likes_for(recipe_id) if like.user_id == user_id),
            None,
        )

    def insert_like(self, recipe_id: str, user_id: str) -> Like:
        self.store.touch("insert_like")
        if any(like.user_id == user_id for like in self.store.likes_for(recipe_id)):
            raise DuplicateRowError("insert_like")
        return self.store.add_like(recipe_id, user_id)

    def delete_like(self, like_id: str) -> bool:
        self.store.touch("delete_like")
        return self.store.likes.pop(like_id, None) is not None

    def insert_comment(self, recipe_id: str, user_id: str, content: str) -> Comment:
        self.store.touch("insert_comment")
        return self.store.add_comment(recipe_id, user_id, content)

    def update_comment(self, comment_id: str, user_id: str, content: str) -> int:
        self.store.touch("update_comment")
        comment = self.store.comments.get(comment_id)
        if comment is None or comment.user_id != user_id:
            return 0
        comment.content = content
        comment.updated_at = self.store.clock.now()
        return 1

    def delete_comment(self, comment_id: str, user_id: str) -> int:
        self.store.touch("delete_comment")
        comment = self.store.comments.get(comment_id)
        if comment is None or comment.user_id != user_id:
            return 0
        del self.store.comments[comment_id]
        return 1

    def get_comment(self, comment_id: str) -> Optional[Comment]:
        self.store.touch("get_comment")
        return self.store.comments.get(comment_id)

    def fetch_recipe_social(self, recipe_id: str) -> Optional[RecipeAggregate]:
        self.store.touch("fetch_recipe_social")
        recipe = self.store.recipes.get(recipe_id)
        if recipe is None:
            return None
        return RecipeAggregate(
            recipe=recipe,
            likes_count=len(self.store.likes_for(recipe_id)),
            comments_count=len(self.store.comments_for(recipe_id)),
        )

    def has_user_liked(self, recipe_id: str, user_id: str) -> bool:
        self.store.touch("fetch_user_like")
        return any(like.user_id == user_id for like in self.store.likes_for(recipe_id))

    def fetch_comments(self, recipe_id: str) -> list[CommentWithAuthor]:
        self.store.touch("fetch_comments")
        ordered = sorted(self.store.comments_for(recipe_id), key=lambda c: c.created_at, reverse=True)
        result = []
        for comment in ordered:
            profile = self.store.profiles.get(comment.user_id)
            result.append(
                CommentWithAuthor(
                    id=comment.id,
                    recipe_id=comment.recipe_id,
                    user_id=comment.user_id,
                    content=comment.content,
                    created_at=comment.created_at,
                    updated_at=comment.updated_at,
                    author_name=(profile.full_name if profile and profile.full_name else UNKNOWN_AUTHOR),
                    author_username=profile.username if profile else None,
                )
            )
        return result


class InMemoryRecipeRepository(RecipeRepository):
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    def list_recipes(self, limit: int = 20, offset: int = 0) -> list[RecipeAggregate]:
        self.store.touch("list_recipes")
        ordered = sorted(self.store.recipes.values(), key=lambda r: r.created_at, reverse=True)
        return [
            RecipeAggregate(
                recipe=recipe,
                likes_count=len(self.store.likes_for(recipe.id)),
                comments_count=len(self.store.comments_for(recipe.id)),
            )
            for recipe in ordered[offset:offset + limit]
        ]

    def get_recipe(self, recipe_id: str) -> Optional[Recipe]:
        self.store.touch("get_recipe")
        return self.store.recipes.get(recipe_id)

    def insert_recipe(self, user_id: str, fields: dict[str, Any]) -> Recipe:
        self.store.touch("insert_recipe")
        recipe = Recipe(id=self.store.next_id("recipe"), user_id=user_id, created_at=self.store.clock.now(), **fields)
        self.store.recipes[recipe.id] = recipe
        return recipe

    def update_recipe(self, recipe_id: str, user_id: str, changes: dict[str, Any]) -> Optional[Recipe]:
        self.store.touch("update_recipe")
        recipe = self.store.recipes.get(recipe_id)
        if recipe is None or recipe.user_id != user_id:
            return None
        for key, value in changes.items():
            setattr(recipe, key, value)
        recipe.updated_at = self.store.clock.now()
        return recipe

    def delete_recipe(self, recipe_id: str, user_id: str) -> bool:
        self.store.touch("delete_recipe")
        recipe = self.store.recipes.get(recipe_id)
        if recipe is None or recipe.user_id != user_id:
            return False
        del self.store.recipes[recipe_id]
        return True

    def fetch_display_names(self, user_ids: list[str]) -> dict[str, str]:
        self.store.touch("fetch_display_names")
        return {
            user_id: self.store.profiles[user_id].full_name
            for user_id in set(user_ids)
            if user_id in self.store.profiles and self.store.profiles[user_id].full_name
        }


class InMemoryProfileRepository(ProfileRepository):
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    def get_profile(self, user_id: str) -> Optional[Profile]:
        self.store.touch("get_profile")
        return self.store.profiles.get(user_id)

    def find_profile_id_by_username(self, username: str) -> Optional[str]:
        self.store.touch("find_profile_by_username")
        return next(
            (profile.id for profile in self.store.profiles.values() if profile.username == username),
            None,
        )

    def insert_profile(self, user_id: str, username: str, full_name: Optional[str]) -> Profile:
        self.store.touch("insert_profile")
        if user_id in self.store.profiles or self.find_profile_id_by_username(username):
            raise DuplicateRowError("insert_profile")
        return self.store.add_profile(user_id, username, full_name)

    def update_profile(self, user_id: str, changes: dict[str, Any]) -> Optional[Profile]:
        self.store.touch("update_profile")
        profile = self.store.profiles.get(user_id)
        if profile is None:
            return None
        if "username" in changes:
            holder = self.find_profile_id_by_username(changes["username"])
            if holder is not None and holder != user_id:
                raise DuplicateRowError("update_profile")
        for key, value in changes.items():
            if key == "updated_at":
                value = datetime.fromisoformat(value)
            setattr(profile, key, value)
        return profile


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def social_repo(store: InMemoryStore) -> InMemorySocialRepository:
    return InMemorySocialRepository(store)


@pytest.fixture
def recipe_repo(store: InMemoryStore) -> InMemoryRecipeRepository:
    return InMemoryRecipeRepository(store)


@pytest.fixture
def profile_repo(store: InMemoryStore) -> InMemoryProfileRepository:
    return InMemoryProfileRepository(store)
