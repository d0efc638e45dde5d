# src/app/routers/recipes.py
from __future__ import annotations

import logging
from typing import NoReturn, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from starlette.concurrency import run_in_threadpool

from src.app.config import settings
from src.app.deps import CurrentUser, get_current_user, get_recipe_service
from src.app.domain.errors import (
    InvalidRecipeError,
    NotOwnerError,
    RecipeNotFoundError,
    SocialError,
    StoreError,
)
from src.app.schemas.recipes import (
    RecipeCreate,
    RecipeResponse,
    RecipeSummaryResponse,
    RecipeUpdate,
    recipe_to_response,
    summary_to_response,
)
from src.app.services.recipe_service import RecipeService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recipes", tags=["recipes"])


def _raise_http(exc: SocialError) -> NoReturn:
    if isinstance(exc, RecipeNotFoundError):
        raise HTTPException(status_code=404, detail="Recipe not found.")
    if isinstance(exc, NotOwnerError):
        raise HTTPException(status_code=403, detail="You are not authorized to edit this recipe.")
    if isinstance(exc, InvalidRecipeError):
        raise HTTPException(status_code=400, detail=exc.errors)
    if isinstance(exc, StoreError):
        logger.warning("Recipe store call failed: %s", exc)
        raise HTTPException(status_code=502, detail=exc.reason)
    raise HTTPException(status_code=500, detail=str(exc))


@router.get("/", response_model=list[RecipeSummaryResponse])
async def list_recipes(
    limit: Optional[int] = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0),
    service: RecipeService = Depends(get_recipe_service),
) -> list[RecipeSummaryResponse]:
    page_size = min(limit or settings.FEED_PAGE_SIZE, settings.FEED_MAX_PAGE_SIZE)
    try:
        feed = await run_in_threadpool(service.list_feed, page_size, offset)
    except SocialError as exc:
        _raise_http(exc)
    return [summary_to_response(item) for item in feed]


@router.post("/", response_model=RecipeResponse, status_code=status.HTTP_201_CREATED)
async def create_recipe(
    payload: RecipeCreate,
    user: CurrentUser = Depends(get_current_user),
    service: RecipeService = Depends(get_recipe_service),
) -> RecipeResponse:
    try:
        recipe = await run_in_threadpool(service.create_recipe, str(user.id), payload.to_fields())
    except SocialError as exc:
        _raise_http(exc)
    return recipe_to_response(recipe)


@router.get("/{recipe_id}", response_model=RecipeResponse)
async def get_recipe(
    recipe_id: str,
    service: RecipeService = Depends(get_recipe_service),
) -> RecipeResponse:
    try:
        recipe = await run_in_threadpool(service.get_recipe, recipe_id)
        author_name = await run_in_threadpool(service.author_name, recipe)
    except SocialError as exc:
        _raise_http(exc)
    return recipe_to_response(recipe, author_name)


@router.patch("/{recipe_id}", response_model=RecipeResponse)
async def update_recipe(
    recipe_id: str,
    payload: RecipeUpdate,
    user: CurrentUser = Depends(get_current_user),
    service: RecipeService = Depends(get_recipe_service),
) -> RecipeResponse:
    try:
        recipe = await run_in_threadpool(service.update_recipe, recipe_id, str(user.id), payload.to_changes())
    except SocialError as exc:
        _raise_http(exc)
    return recipe_to_response(recipe)


@router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_recipe(
    recipe_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: RecipeService = Depends(get_recipe_service),
) -> Response:
    try:
        await run_in_threadpool(service.delete_recipe, recipe_id, str(user.id))
    except SocialError as exc:
        _raise_http(exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
