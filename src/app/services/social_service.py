# src/app/services/social_service.py
"""
Social interaction service.
Likes and comments against the shared store, plus the aggregate read that
composes a recipe with its social data.
"""
from __future__ import annotations

import logging
from typing import Optional

from src.app.domain.errors import DuplicateRowError, RecipeNotFoundError, StoreError
from src.app.domain.models import (
    MutationOutcome,
    MutationResult,
    RecipeFetchResult,
    RecipeWithSocial,
)
from src.app.infra.db.base import SocialRepository

logger = logging.getLogger(__name__)

UNKNOWN_ERROR = "Unknown error"


def _error_message(error: Exception) -> str:
    if isinstance(error, StoreError):
        return error.reason or UNKNOWN_ERROR
    return str(error) or UNKNOWN_ERROR


class SocialService:
    """
    Service for likes and comments.

    Responsibilities:
    - Toggle a user's like on a recipe
    - Create, update and delete comments (ownership enforced by query predicate)
    - Assemble the RecipeWithSocial view on every read

    No public method raises. Failures come back as MutationResult(success=False)
    or RecipeFetchResult(error=...), so callers never need exception handling.
    """

    def __init__(self, repository: SocialRepository):
        self._repo = repository

    def toggle_like(self, recipe_id: str, user_id: str) -> MutationResult:
        """
        Like the recipe if the user has not liked it yet, otherwise unlike it.

        This is check-then-act, not an atomic upsert. Two concurrent calls may
        both see "no like"; the store's unique (recipe_id, user_id) constraint
        rejects the second insert, which is reported as a no-op.

        Args:
            recipe_id: The recipe
            user_id: The actor

        Returns:
            MutationResult with `liked` set to the state the store ends up in
        """
        try:
            existing = self._repo.find_like(recipe_id, user_id)

            if existing:
                removed = self._repo.delete_like(existing.id)
                outcome = MutationOutcome.APPLIED if removed else MutationOutcome.NOOP
                logger.info("Like removed: recipe=%s, user=%s, outcome=%s", recipe_id, user_id, outcome.value)
                return MutationResult.ok(outcome, liked=False)

            try:
                self._repo.insert_like(recipe_id, user_id)
            except DuplicateRowError:
                logger.warning("Like already present, treating as liked: recipe=%s, user=%s", recipe_id, user_id)
                return MutationResult.ok(MutationOutcome.NOOP, liked=True)
            except RecipeNotFoundError:
                logger.info("Like on unknown recipe ignored: recipe=%s, user=%s", recipe_id, user_id)
                return MutationResult.ok(MutationOutcome.NOT_FOUND, liked=False)

            logger.info("Like added: recipe=%s, user=%s", recipe_id, user_id)
            return MutationResult.ok(MutationOutcome.APPLIED, liked=True)

        except Exception as error:
            logger.exception("Error toggling like: recipe=%s, user=%s", recipe_id, user_id)
            return MutationResult.failure(_error_message(error))

    def add_comment(self, recipe_id: str, user_id: str, content: str) -> MutationResult:
        """
        Post a comment. `content` is expected to be trimmed and non-empty already.
        """
        try:
            comment = self._repo.insert_comment(recipe_id, user_id, content)
            logger.info("Comment added: id=%s, recipe=%s, user=%s", comment.id, recipe_id, user_id)
            return MutationResult.ok()
        except Exception as error:
            logger.exception("Error adding comment: recipe=%s, user=%s", recipe_id, user_id)
            return MutationResult.failure(_error_message(error))

    def update_comment(self, comment_id: str, user_id: str, content: str) -> MutationResult:
        """
        Update a comment's content where id AND author both match.

        A non-author's edit matches zero rows and still reports success; the
        outcome says whether the comment was missing or owned by someone else.
        """
        try:
            matched = self._repo.update_comment(comment_id, user_id, content)
            if matched:
                logger.info("Comment updated: id=%s, user=%s", comment_id, user_id)
                return MutationResult.ok()
            return MutationResult.ok(self._classify_unmatched(comment_id, user_id, "update"))
        except Exception as error:
            logger.exception("Error updating comment: id=%s, user=%s", comment_id, user_id)
            return MutationResult.failure(_error_message(error))

    def delete_comment(self, comment_id: str, user_id: str) -> MutationResult:
        """
        Delete a comment where id AND author both match. Same no-op semantics as update.
        """
        try:
            removed = self._repo.delete_comment(comment_id, user_id)
            if removed:
                logger.info("Comment deleted: id=%s, user=%s", comment_id, user_id)
                return MutationResult.ok()
            return MutationResult.ok(self._classify_unmatched(comment_id, user_id, "delete"))
        except Exception as error:
            logger.exception("Error deleting comment: id=%s, user=%s", comment_id, user_id)
            return MutationResult.failure(_error_message(error))

    def _classify_unmatched(self, comment_id: str, user_id: str, action: str) -> MutationOutcome:
        comment = self._repo.get_comment(comment_id)
        if comment is None:
            outcome = MutationOutcome.NOT_FOUND
        elif comment.user_id != user_id:
            outcome = MutationOutcome.FORBIDDEN
        else:
            # Author matched but the row changed underneath us.
            outcome = MutationOutcome.NOOP
        logger.info(
            "Comment %s matched no rows: id=%s, user=%s, outcome=%s",
            action, comment_id, user_id, outcome.value,
        )
        return outcome

    def get_recipe_with_social(self, recipe_id: str, user_id: Optional[str] = None) -> RecipeFetchResult:
        """
        Compose a recipe with its like count, the actor's like state and its comments.

        Args:
            recipe_id: The recipe
            user_id: The actor, or None when nobody is signed in

        Returns:
            RecipeFetchResult; `not_found` when the recipe does not exist,
            `failed` when a store call errored
        """
        try:
            aggregate = self._repo.fetch_recipe_social(recipe_id)
            if aggregate is None:
                return RecipeFetchResult()

            user_has_liked = self._repo.has_user_liked(recipe_id, user_id) if user_id else False
            comments = self._repo.fetch_comments(recipe_id)

            return RecipeFetchResult(
                recipe=RecipeWithSocial(
                    recipe=aggregate.recipe,
                    likes_count=aggregate.likes_count,
                    comments_count=aggregate.comments_count,
                    user_has_liked=user_has_liked,
                    comments=comments,
                )
            )
        except Exception as error:
            logger.exception("Error fetching recipe with social data: recipe=%s", recipe_id)
            return RecipeFetchResult(error=_error_message(error))
