# src/app/domain/models.py
"""
Domain models for recipes and their social layer (likes, comments, profiles).
These are pure data structures with no infrastructure dependencies.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

UNKNOWN_AUTHOR = "Unknown"


class Difficulty(str, Enum):
    """Difficulty levels accepted for a recipe."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class MutationOutcome(str, Enum):
    """What a social mutation actually did to the store."""
    APPLIED = "applied"
    NOOP = "noop"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"


@dataclass
class Recipe:
    """A recipe owned by exactly one user (its creator)."""
    id: str
    user_id: str
    title: str
    ingredients: list[str] = field(default_factory=list)
    instructions: list[str] = field(default_factory=list)
    cooking_time: Optional[int] = None  # minutes
    difficulty: Optional[str] = None
    category: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class Like:
    """A single user's like on a recipe. At most one per (recipe, user)."""
    id: str
    recipe_id: str
    user_id: str
    created_at: Optional[datetime] = None


@dataclass
class Comment:
    id: str
    recipe_id: str
    user_id: str
    content: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class CommentWithAuthor(Comment):
    """Comment enriched with the author's profile for display."""
    author_name: str = UNKNOWN_AUTHOR
    author_username: Optional[str] = None


@dataclass
class Profile:
    """Public profile. Shares its id with the identity provider's user id."""
    id: str
    username: str
    full_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class RecipeAggregate:
    """A recipe row with like/comment counts computed by the store at read time."""
    recipe: Recipe
    likes_count: int = 0
    comments_count: int = 0


@dataclass
class RecipeWithSocial:
    """
    Read-only composition of a recipe with its social data.
    Rebuilt on every read; never persisted.
    """
    recipe: Recipe
    likes_count: int
    comments_count: int
    user_has_liked: bool
    comments: list[CommentWithAuthor] = field(default_factory=list)


@dataclass
class RecipeSummary:
    """Feed entry: a recipe with its author's display name and counts."""
    recipe: Recipe
    author_name: str = UNKNOWN_AUTHOR
    likes_count: int = 0
    comments_count: int = 0


@dataclass
class MutationResult:
    """
    Tagged result of a social mutation.

    `success` is False only when the store call itself failed. A predicate that
    matched zero rows still reports success; `outcome` tells the caller whether
    anything changed and why not.
    """
    success: bool
    error: Optional[str] = None
    outcome: Optional[MutationOutcome] = MutationOutcome.APPLIED
    liked: Optional[bool] = None

    @classmethod
    def ok(
        cls,
        outcome: MutationOutcome = MutationOutcome.APPLIED,
        liked: Optional[bool] = None,
    ) -> MutationResult:
        return cls(success=True, outcome=outcome, liked=liked)

    @classmethod
    def failure(cls, error: str) -> MutationResult:
        return cls(success=False, error=error, outcome=None)

    @property
    def changed(self) -> bool:
        return self.success and self.outcome == MutationOutcome.APPLIED


@dataclass
class RecipeFetchResult:
    """Result of the aggregate read. Not-found is distinct from a store error."""
    recipe: Optional[RecipeWithSocial] = None
    error: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.recipe is not None

    @property
    def not_found(self) -> bool:
        return self.recipe is None and self.error is None

    @property
    def failed(self) -> bool:
        return self.error is not None
