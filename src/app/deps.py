# src/app/deps.py (singleton client, exposed as dependencies)

from __future__ import annotations
from supabase import create_client, Client
from src.app.config import settings
from src.app.infra.db.supabase_recipes_repo import SupabaseProfileRepository, SupabaseRecipeRepository
from src.app.infra.db.supabase_social_repo import SupabaseSocialRepository
from src.app.services.profile_service import ProfileService
from src.app.services.recipe_service import RecipeService
from src.app.services.social_service import SocialService
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel

_client: Client | None = None

def get_supabase() -> Client:
    global _client
    if _client is None:
        _client = create_client(str(settings.SUPABASE_URL),
                                settings.SUPABASE_SERVICE_ROLE_KEY)
    return _client


auth_scheme = HTTPBearer(auto_error=False)

class CurrentUser(BaseModel):
    id: str
    email: str | None = None
    name: str | None = None

def _resolve_user(token: str, supa: Client) -> CurrentUser:
    try:
        # validates the token against GoTrue (supabase-py admin API)
        res = supa.auth.get_user(token)
        user = res.user if res else None
        if not user:
            raise HTTPException(status_code=401, detail="Invalid token")

        name = None
        meta = getattr(user, "user_metadata", None) or {}
        if isinstance(meta, dict):
            name = meta.get("name") or meta.get("full_name")

        return CurrentUser(id=str(user.id), email=user.email, name=name)
    except HTTPException:
        raise
    except Exception:
        raise HTTPException(status_code=401, detail="Invalid/expired token")

async def get_current_user(
    cred: HTTPAuthorizationCredentials | None = Depends(auth_scheme),
    supa: Client = Depends(get_supabase),
) -> CurrentUser:
    """
    Takes Authorization: Bearer <access_token> issued by Supabase,
    validates it with GoTrue and returns the minimal user data.
    """
    if cred is None or cred.scheme.lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token")
    return _resolve_user(cred.credentials, supa)

async def get_optional_user(
    cred: HTTPAuthorizationCredentials | None = Depends(auth_scheme),
    supa: Client = Depends(get_supabase),
) -> CurrentUser | None:
    """Same as get_current_user, but anonymous readers get None instead of 401."""
    if cred is None or cred.scheme.lower() != "bearer":
        return None
    return _resolve_user(cred.credentials, supa)


def get_social_service(supa: Client = Depends(get_supabase)) -> SocialService:
    return SocialService(SupabaseSocialRepository(supa))

def get_recipe_service(supa: Client = Depends(get_supabase)) -> RecipeService:
    return RecipeService(SupabaseRecipeRepository(supa))

def get_profile_service(supa: Client = Depends(get_supabase)) -> ProfileService:
    return ProfileService(SupabaseProfileRepository(supa), max_attempts=settings.USERNAME_MAX_ATTEMPTS)
