from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from src.app.domain.models import CommentWithAuthor, MutationResult, RecipeWithSocial
from src.app.schemas.recipes import RecipeResponse, recipe_to_response

OutcomeValue = Literal["applied", "noop", "not_found", "forbidden"]


class CommentResponse(BaseModel):
    id: str
    recipeId: str
    userId: str
    content: str
    authorName: str
    authorUsername: Optional[str] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class RecipeWithSocialResponse(BaseModel):
    recipe: RecipeResponse
    likesCount: int = 0
    commentsCount: int = 0
    userHasLiked: bool = False
    comments: list[CommentResponse] = Field(default_factory=list)


class MutationResponse(BaseModel):
    success: bool
    outcome: Optional[OutcomeValue] = None
    liked: Optional[bool] = None
    error: Optional[str] = None


class CommentContent(BaseModel):
    content: str = Field(..., min_length=1)

    @field_validator("content", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value


class CommentCreate(CommentContent):
    pass


class CommentUpdate(CommentContent):
    pass


def comment_to_response(comment: CommentWithAuthor) -> CommentResponse:
    return CommentResponse(
        id=comment.id,
        recipeId=comment.recipe_id,
        userId=comment.user_id,
        content=comment.content,
        authorName=comment.author_name,
        authorUsername=comment.author_username,
        createdAt=comment.created_at,
        updatedAt=comment.updated_at,
    )


def social_to_response(view: RecipeWithSocial) -> RecipeWithSocialResponse:
    return RecipeWithSocialResponse(
        recipe=recipe_to_response(view.recipe),
        likesCount=view.likes_count,
        commentsCount=view.comments_count,
        userHasLiked=view.user_has_liked,
        comments=[comment_to_response(comment) for comment in view.comments],
    )


def mutation_to_response(result: MutationResult) -> MutationResponse:
    return MutationResponse(
        success=result.success,
        outcome=result.outcome.value if result.outcome else None,
        liked=result.liked,
        error=result.error,
    )
