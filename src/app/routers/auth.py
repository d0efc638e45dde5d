from __future__ import annotations

from fastapi import APIRouter, Depends

from src.app.deps import CurrentUser, get_current_user

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me", response_model=CurrentUser)
async def me(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Echo the identity resolved from the bearer token."""
    return user
