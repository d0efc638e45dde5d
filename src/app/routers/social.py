# src/app/routers/social.py
"""
Likes, comments and the aggregate recipe view.
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from starlette.concurrency import run_in_threadpool

from src.app.config import settings
from src.app.deps import CurrentUser, get_current_user, get_optional_user, get_social_service
from src.app.domain.models import MutationResult
from src.app.schemas.social import (
    CommentContent,
    CommentCreate,
    CommentUpdate,
    MutationResponse,
    RecipeWithSocialResponse,
    mutation_to_response,
    social_to_response,
)
from src.app.services.social_service import SocialService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["social"])


def _check_length(payload: CommentContent) -> str:
    if len(payload.content) > settings.COMMENT_MAX_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Comment must be at most {settings.COMMENT_MAX_LENGTH} characters",
        )
    return payload.content


def _respond(result: MutationResult, action: str) -> MutationResponse:
    # Zero-row predicates are successes; only store failures become HTTP errors.
    if not result.success:
        logger.warning("Social mutation failed: action=%s, error=%s", action, result.error)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Failed to {action}: {result.error}",
        )
    return mutation_to_response(result)


@router.get("/recipes/{recipe_id}/social", response_model=RecipeWithSocialResponse)
async def get_recipe_social(
    recipe_id: str,
    user: CurrentUser | None = Depends(get_optional_user),
    service: SocialService = Depends(get_social_service),
) -> RecipeWithSocialResponse:
    user_id = str(user.id) if user else None
    result = await run_in_threadpool(service.get_recipe_with_social, recipe_id, user_id)
    if result.failed:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Failed to load recipe: {result.error}",
        )
    if result.not_found:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recipe not found.")
    return social_to_response(result.recipe)


@router.post("/recipes/{recipe_id}/like", response_model=MutationResponse)
async def toggle_like(
    recipe_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: SocialService = Depends(get_social_service),
) -> MutationResponse:
    result = await run_in_threadpool(service.toggle_like, recipe_id, str(user.id))
    return _respond(result, "update like")


@router.post(
    "/recipes/{recipe_id}/comments",
    response_model=MutationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    recipe_id: str,
    payload: CommentCreate,
    user: CurrentUser = Depends(get_current_user),
    service: SocialService = Depends(get_social_service),
) -> MutationResponse:
    content = _check_length(payload)
    result = await run_in_threadpool(service.add_comment, recipe_id, str(user.id), content)
    return _respond(result, "add comment")


@router.patch("/comments/{comment_id}", response_model=MutationResponse)
async def update_comment(
    comment_id: str,
    payload: CommentUpdate,
    user: CurrentUser = Depends(get_current_user),
    service: SocialService = Depends(get_social_service),
) -> MutationResponse:
    content = _check_length(payload)
    result = await run_in_threadpool(service.update_comment, comment_id, str(user.id), content)
    return _respond(result, "update comment")


@router.delete("/comments/{comment_id}", response_model=MutationResponse)
async def delete_comment(
    comment_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: SocialService = Depends(get_social_service),
) -> MutationResponse:
    result = await run_in_threadpool(service.delete_comment, comment_id, str(user.id))
    return _respond(result, "delete comment")
