from __future__ import annotations

import pytest

from src.app.domain.errors import (
    CommentNotFoundError,
    DuplicateRowError,
    InvalidProfileError,
    InvalidRecipeError,
    NotOwnerError,
    ProfileError,
    ProfileNotFoundError,
    RecipeNotFoundError,
    SocialError,
    StoreError,
    UsernameTakenError,
    UsernameUnavailableError,
)


class TestSocialError:
    def test_base_exception(self) -> None:
        error = SocialError("Base error")
        assert str(error) == "Base error"
        assert isinstance(error, Exception)


class TestStoreError:
    def test_message_and_attributes(self) -> None:
        error = StoreError("insert_like", "connection refused", code="08006")

        assert str(error) == "Store error during insert_like: connection refused"
        assert error.operation == "insert_like"
        assert error.reason == "connection refused"
        assert error.code == "08006"

    def test_code_defaults_to_none(self) -> None:
        assert StoreError("fetch_comments", "timeout").code is None


class TestDuplicateRowError:
    def test_is_store_error_with_unique_violation_code(self) -> None:
        error = DuplicateRowError("insert_like")

        assert isinstance(error, StoreError)
        assert error.code == "23505"
        assert "duplicate key" in error.reason


class TestNotFoundErrors:
    def test_recipe_not_found(self) -> None:
        error = RecipeNotFoundError("r1")
        assert str(error) == "Recipe not found: r1"
        assert error.recipe_id == "r1"

    def test_comment_not_found(self) -> None:
        error = CommentNotFoundError("c1")
        assert str(error) == "Comment not found: c1"
        assert error.comment_id == "c1"


class TestNotOwnerError:
    def test_attributes(self) -> None:
        error = NotOwnerError("recipe", "r1")

        assert error.resource == "recipe"
        assert error.resource_id == "r1"
        assert "owner" in str(error)


class TestValidationErrors:
    def test_invalid_recipe_lists_errors(self) -> None:
        error = InvalidRecipeError(["Title is required", "Category is required"])

        assert error.errors == ["Title is required", "Category is required"]
        assert str(error) == "Invalid recipe: Title is required, Category is required"

    def test_invalid_profile_is_profile_error(self) -> None:
        error = InvalidProfileError(["Username is required"])

        assert isinstance(error, ProfileError)
        assert error.errors == ["Username is required"]


class TestProfileErrors:
    def test_username_taken(self) -> None:
        error = UsernameTakenError("alice")
        assert error.username == "alice"
        assert str(error) == "Username already taken: alice"

    def test_username_unavailable(self) -> None:
        error = UsernameUnavailableError("alice", 3)

        assert error.base == "alice"
        assert error.attempts == 3
        assert "3 attempts" in str(error)

    def test_profile_not_found(self) -> None:
        assert ProfileNotFoundError("u1").user_id == "u1"


class TestExceptionHierarchy:
    def test_all_inherit_from_social_error(self) -> None:
        errors = [
            StoreError("op", "reason"),
            DuplicateRowError("op"),
            RecipeNotFoundError("r1"),
            CommentNotFoundError("c1"),
            NotOwnerError("recipe", "r1"),
            InvalidRecipeError([]),
            InvalidProfileError([]),
            ProfileNotFoundError("u1"),
            UsernameTakenError("alice"),
            UsernameUnavailableError("alice", 1),
        ]
        for error in errors:
            assert isinstance(error, SocialError)

    def test_catch_store_error_catches_duplicate(self) -> None:
        with pytest.raises(StoreError):
            raise DuplicateRowError("insert_like")
