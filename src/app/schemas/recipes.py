from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field

from src.app.domain.models import Recipe, RecipeSummary

DifficultyValue = Literal["easy", "medium", "hard"]


class RecipeResponse(BaseModel):
    id: str
    userId: str
    title: str
    ingredients: list[str] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)
    cookingTime: Optional[int] = None
    difficulty: Optional[str] = None
    category: Optional[str] = None
    authorName: Optional[str] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class RecipeSummaryResponse(BaseModel):
    id: str
    userId: str
    title: str
    category: Optional[str] = None
    difficulty: Optional[str] = None
    cookingTime: Optional[int] = None
    authorName: str
    likesCount: int = 0
    commentsCount: int = 0
    createdAt: Optional[datetime] = None


# Ingredients/instructions arrive either as a list or as one newline-separated textarea value.
TextLines = Union[list[str], str]


class RecipeCreate(BaseModel):
    title: str = Field(..., min_length=2, max_length=200)
    ingredients: TextLines
    instructions: TextLines
    cookingTime: int = Field(..., ge=1)
    difficulty: DifficultyValue
    category: str = Field(..., min_length=1, max_length=80)

    def to_fields(self) -> dict:
        return {
            "title": self.title,
            "ingredients": self.ingredients,
            "instructions": self.instructions,
            "cooking_time": self.cookingTime,
            "difficulty": self.difficulty,
            "category": self.category,
        }


class RecipeUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=2, max_length=200)
    ingredients: Optional[TextLines] = None
    instructions: Optional[TextLines] = None
    cookingTime: Optional[int] = Field(default=None, ge=1)
    difficulty: Optional[DifficultyValue] = None
    category: Optional[str] = Field(default=None, min_length=1, max_length=80)

    def to_changes(self) -> dict:
        names = {"cookingTime": "cooking_time"}
        return {
            names.get(key, key): value
            for key, value in self.model_dump(exclude_unset=True).items()
        }


def recipe_to_response(recipe: Recipe, author_name: Optional[str] = None) -> RecipeResponse:
    return RecipeResponse(
        id=recipe.id,
        userId=recipe.user_id,
        title=recipe.title,
        ingredients=recipe.ingredients,
        instructions=recipe.instructions,
        cookingTime=recipe.cooking_time,
        difficulty=recipe.difficulty,
        category=recipe.category,
        authorName=author_name,
        createdAt=recipe.created_at,
        updatedAt=recipe.updated_at,
    )


def summary_to_response(summary: RecipeSummary) -> RecipeSummaryResponse:
    recipe = summary.recipe
    return RecipeSummaryResponse(
        id=recipe.id,
        userId=recipe.user_id,
        title=recipe.title,
        category=recipe.category,
        difficulty=recipe.difficulty,
        cookingTime=recipe.cooking_time,
        authorName=summary.author_name,
        likesCount=summary.likes_count,
        commentsCount=summary.comments_count,
        createdAt=recipe.created_at,
    )
