from __future__ import annotations

from typing import Optional


class SocialError(Exception):
    pass


class StoreError(SocialError):
    def __init__(self, operation: str, reason: str, code: Optional[str] = None):
        super().__init__(f"Store error during {operation}: {reason}")
        self.operation = operation
        self.reason = reason
        self.code = code


class DuplicateRowError(StoreError):
    def __init__(self, operation: str, reason: str = "duplicate key value violates unique constraint"):
        super().__init__(operation, reason, code="23505")


class RecipeNotFoundError(SocialError):
    def __init__(self, recipe_id: str):
        super().__init__(f"Recipe not found: {recipe_id}")
        self.recipe_id = recipe_id


class CommentNotFoundError(SocialError):
    def __init__(self, comment_id: str):
        super().__init__(f"Comment not found: {comment_id}")
        self.comment_id = comment_id


class NotOwnerError(SocialError):
    def __init__(self, resource: str, resource_id: str):
        super().__init__(f"Only the owner can modify this {resource}: {resource_id}")
        self.resource = resource
        self.resource_id = resource_id


class InvalidRecipeError(SocialError):
    def __init__(self, errors: list[str]):
        super().__init__(f"Invalid recipe: {', '.join(errors)}")
        self.errors = errors


class ProfileError(SocialError):
    pass


class InvalidProfileError(ProfileError):
    def __init__(self, errors: list[str]):
        super().__init__(f"Invalid profile: {', '.join(errors)}")
        self.errors = errors


class ProfileNotFoundError(ProfileError):
    def __init__(self, user_id: str):
        super().__init__(f"Profile not found: {user_id}")
        self.user_id = user_id


class UsernameTakenError(ProfileError):
    def __init__(self, username: str):
        super().__init__(f"Username already taken: {username}")
        self.username = username


class UsernameUnavailableError(ProfileError):
    def __init__(self, base: str, attempts: int):
        super().__init__(f"No free username for '{base}' after {attempts} attempts")
        self.base = base
        self.attempts = attempts
