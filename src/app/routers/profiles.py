from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from starlette.concurrency import run_in_threadpool

from src.app.deps import CurrentUser, get_current_user, get_profile_service
from src.app.domain.errors import (
    InvalidProfileError,
    ProfileNotFoundError,
    StoreError,
    UsernameTakenError,
    UsernameUnavailableError,
)
from src.app.schemas.profiles import ProfileResponse, ProfileUpdate, profile_to_response
from src.app.services.profile_service import ProfileService

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(
    user: CurrentUser = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    try:
        profile = await run_in_threadpool(service.ensure_profile, str(user.id), user.email)
    except (UsernameTakenError, UsernameUnavailableError) as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except StoreError as exc:
        raise HTTPException(status_code=502, detail=exc.reason)
    return profile_to_response(profile)


@router.patch("/me", response_model=ProfileResponse)
async def update_my_profile(
    payload: ProfileUpdate,
    user: CurrentUser = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    try:
        profile = await run_in_threadpool(
            service.update_profile,
            str(user.id),
            payload.username,
            payload.fullName,
        )
    except InvalidProfileError as exc:
        raise HTTPException(status_code=400, detail=exc.errors)
    except UsernameTakenError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except ProfileNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except StoreError as exc:
        raise HTTPException(status_code=502, detail=exc.reason)
    return profile_to_response(profile)
