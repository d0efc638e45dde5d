# src/app/services/profile_service.py
"""
Profile management service.
Creates default profiles with a unique username and applies profile edits.
"""
from __future__ import annotations

import logging
from itertools import islice
from typing import Optional

from src.app.domain.errors import (
    DuplicateRowError,
    InvalidProfileError,
    ProfileNotFoundError,
    UsernameTakenError,
    UsernameUnavailableError,
)
from src.app.domain.models import Profile
from src.app.infra.db.base import ProfileRepository
from src.app.infra.db.supabase_common import now_iso
from src.services.usernames import (
    DEFAULT_USERNAME,
    normalize_username,
    username_base_from_email,
    username_candidates,
)

logger = logging.getLogger(__name__)

DEFAULT_USERNAME_MAX_ATTEMPTS = 1000
MIN_USERNAME_LENGTH = 2
MIN_FULL_NAME_LENGTH = 2


class ProfileService:
    """
    Service for user profiles.

    Responsibilities:
    - Generate a globally unique username from a base
    - Create the default profile on first sign-in
    - Update username / display name
    """

    def __init__(
        self,
        repository: ProfileRepository,
        max_attempts: int = DEFAULT_USERNAME_MAX_ATTEMPTS,
    ):
        self._repo = repository
        self.max_attempts = max_attempts

    def generate_unique_username(self, base: str) -> str:
        """
        Probe `base`, then `base1`, `base2`, ... until one is unused.

        Args:
            base: The preferred username

        Returns:
            The first free candidate

        Raises:
            UsernameUnavailableError: If every candidate within max_attempts is taken
        """
        base = base or DEFAULT_USERNAME
        for candidate in islice(username_candidates(base), self.max_attempts):
            if self._repo.find_profile_id_by_username(candidate) is None:
                return candidate
        raise UsernameUnavailableError(base, self.max_attempts)

    def default_profile_fields(self, email: Optional[str]) -> dict[str, str]:
        prefix = (email or "").split("@")[0] or DEFAULT_USERNAME
        return {
            "username": self.generate_unique_username(username_base_from_email(email)),
            "full_name": prefix,
        }

    def ensure_profile(self, user_id: str, email: Optional[str] = None) -> Profile:
        """
        Return the user's profile, creating the default one if it does not exist.
        """
        existing = self._repo.get_profile(user_id)
        if existing:
            return existing

        fields = self.default_profile_fields(email)
        profile = self._insert_default(user_id, fields)
        if profile:
            return profile

        # A concurrent sign-in took the generated username; probe again once.
        logger.warning("Username taken during sign-in, regenerating: user=%s, username=%s", user_id, fields["username"])
        fields = self.default_profile_fields(email)
        profile = self._insert_default(user_id, fields)
        if profile:
            return profile
        raise UsernameTakenError(fields["username"])

    def _insert_default(self, user_id: str, fields: dict[str, str]) -> Optional[Profile]:
        """Insert the default profile; None when the username was taken underneath us."""
        try:
            return self._repo.insert_profile(user_id, fields["username"], fields["full_name"])
        except DuplicateRowError:
            # Either a concurrent request created this profile or took the username.
            return self._repo.get_profile(user_id)

    def update_profile(
        self,
        user_id: str,
        username: Optional[str] = None,
        full_name: Optional[str] = None,
    ) -> Profile:
        """
        Apply profile edits.

        Raises:
            InvalidProfileError: If a field is too short
            UsernameTakenError: If another profile holds the username
            ProfileNotFoundError: If the user has no profile yet
        """
        changes: dict[str, str] = {}
        errors: list[str] = []

        if username is not None:
            normalized = normalize_username(username)
            if len(normalized) < MIN_USERNAME_LENGTH:
                errors.append("Username is required")
            else:
                changes["username"] = normalized

        if full_name is not None:
            display_name = full_name.strip()
            if len(display_name) < MIN_FULL_NAME_LENGTH:
                errors.append("Display name is required")
            else:
                changes["full_name"] = display_name

        if errors:
            raise InvalidProfileError(errors)

        if "username" in changes:
            holder = self._repo.find_profile_id_by_username(changes["username"])
            if holder is not None and holder != user_id:
                raise UsernameTakenError(changes["username"])

        if not changes:
            profile = self._repo.get_profile(user_id)
            if profile is None:
                raise ProfileNotFoundError(user_id)
            return profile

        changes["updated_at"] = now_iso()
        try:
            profile = self._repo.update_profile(user_id, changes)
        except DuplicateRowError as error:
            raise UsernameTakenError(changes.get("username", "")) from error

        if profile is None:
            raise ProfileNotFoundError(user_id)

        logger.info("Profile updated: id=%s, fields=%s", user_id, sorted(changes))
        return profile
