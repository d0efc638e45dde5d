# src/app/infra/db/base.py
"""
Abstract base classes for the repositories backing recipes and their social layer.
This interface allows the services to run against Supabase or an in-memory store.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from src.app.domain.models import (
    Comment,
    CommentWithAuthor,
    Like,
    Profile,
    Recipe,
    RecipeAggregate,
)


class SocialRepository(ABC):
    """
    Abstract interface for likes and comments.

    Implementations:
    - SupabaseSocialRepository: PostgREST tables `likes`, `comments`, `recipes`, `profiles`

    Every method raises StoreError (or a subclass) when the store call fails.
    """

    @abstractmethod
    def find_like(self, recipe_id: str, user_id: str) -> Optional[Like]:
        """
        Look up the like a user left on a recipe.

        Returns:
            The like, or None if the user has not liked the recipe
        """
        pass

    @abstractmethod
    def insert_like(self, recipe_id: str, user_id: str) -> Like:
        """
        Create a like row.

        Raises:
            DuplicateRowError: If the (recipe, user) pair already has a like
            RecipeNotFoundError: If the recipe id is not a valid id
        """
        pass

    @abstractmethod
    def delete_like(self, like_id: str) -> bool:
        """
        Delete a like by id.

        Returns:
            True if a row was removed
        """
        pass

    @abstractmethod
    def insert_comment(self, recipe_id: str, user_id: str, content: str) -> Comment:
        pass

    @abstractmethod
    def update_comment(self, comment_id: str, user_id: str, content: str) -> int:
        """
        Update content on the row matching BOTH comment_id and user_id.

        Returns:
            Number of rows matched (0 when the actor is not the author,
            the comment does not exist or the id is malformed)
        """
        pass

    @abstractmethod
    def delete_comment(self, comment_id: str, user_id: str) -> int:
        """
        Delete the row matching BOTH comment_id and user_id.

        Returns:
            Number of rows removed
        """
        pass

    @abstractmethod
    def get_comment(self, comment_id: str) -> Optional[Comment]:
        pass

    @abstractmethod
    def fetch_recipe_social(self, recipe_id: str) -> Optional[RecipeAggregate]:
        """
        Fetch a recipe with its like and comment counts.

        Returns:
            The aggregate, or None if the recipe does not exist
        """
        pass

    @abstractmethod
    def has_user_liked(self, recipe_id: str, user_id: str) -> bool:
        pass

    @abstractmethod
    def fetch_comments(self, recipe_id: str) -> list[CommentWithAuthor]:
        """
        Fetch comments for a recipe, newest first, with author display names.
        """
        pass


class RecipeRepository(ABC):
    """
    Abstract interface for recipe CRUD and the feed.
    """

    @abstractmethod
    def list_recipes(self, limit: int = 20, offset: int = 0) -> list[RecipeAggregate]:
        """
        List recipes ordered by creation date descending, with derived counts.
        """
        pass

    @abstractmethod
    def get_recipe(self, recipe_id: str) -> Optional[Recipe]:
        pass

    @abstractmethod
    def insert_recipe(self, user_id: str, fields: dict[str, Any]) -> Recipe:
        pass

    @abstractmethod
    def update_recipe(self, recipe_id: str, user_id: str, changes: dict[str, Any]) -> Optional[Recipe]:
        """
        Update the recipe matching BOTH recipe_id and user_id.

        Returns:
            The updated recipe, or None if no row matched
        """
        pass

    @abstractmethod
    def delete_recipe(self, recipe_id: str, user_id: str) -> bool:
        pass

    @abstractmethod
    def fetch_display_names(self, user_ids: list[str]) -> dict[str, str]:
        """
        Map user ids to profile display names in a single query.
        Users without a profile or a display name are left out.
        """
        pass


class ProfileRepository(ABC):
    """
    Abstract interface for user profiles.
    """

    @abstractmethod
    def get_profile(self, user_id: str) -> Optional[Profile]:
        pass

    @abstractmethod
    def find_profile_id_by_username(self, username: str) -> Optional[str]:
        """
        Returns:
            The id of the profile holding the username, or None if it is free
        """
        pass

    @abstractmethod
    def insert_profile(self, user_id: str, username: str, full_name: Optional[str]) -> Profile:
        pass

    @abstractmethod
    def update_profile(self, user_id: str, changes: dict[str, Any]) -> Optional[Profile]:
        pass
