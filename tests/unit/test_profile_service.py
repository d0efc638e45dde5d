from __future__ import annotations

import pytest

from src.app.domain.errors import (
    InvalidProfileError,
    ProfileNotFoundError,
    UsernameTakenError,
    UsernameUnavailableError,
)
from src.app.services.profile_service import ProfileService


@pytest.fixture
def service(profile_repo) -> ProfileService:
    return ProfileService(profile_repo)


class TestGenerateUniqueUsername:
    def test_free_base_is_used_as_is(self, service) -> None:
        assert service.generate_unique_username("alice") == "alice"

    def test_skips_taken_candidates(self, service, store) -> None:
        store.add_profile("u1", "alice")
        store.add_profile("u2", "alice1")

        assert service.generate_unique_username("alice") == "alice2"

    def test_gap_is_reused(self, service, store) -> None:
        store.add_profile("u1", "alice")
        store.add_profile("u3", "alice2")

        assert service.generate_unique_username("alice") == "alice1"

    def test_exhaustion_raises(self, profile_repo, store) -> None:
        store.add_profile("u1", "alice")
        store.add_profile("u2", "alice1")
        service = ProfileService(profile_repo, max_attempts=2)

        with pytest.raises(UsernameUnavailableError) as exc_info:
            service.generate_unique_username("alice")

        assert exc_info.value.attempts == 2


class TestEnsureProfile:
    def test_returns_existing(self, service, store) -> None:
        existing = store.add_profile("u1", "alice", "Alice")

        assert service.ensure_profile("u1", "other@example.com") is existing
        assert "insert_profile" not in store.calls

    def test_creates_default_profile(self, service, store) -> None:
        store.add_profile("u1", "alice")

        profile = service.ensure_profile("u2", "Alice@example.com")

        assert profile.id == "u2"
        assert profile.username == "alice1"
        assert profile.full_name == "Alice"

    def test_missing_email_uses_default_base(self, service) -> None:
        profile = service.ensure_profile("u1", None)

        assert profile.username == "user"


class TestUpdateProfile:
    def test_updates_fields(self, service, store) -> None:
        store.add_profile("u1", "alice", "Alice")

        profile = service.update_profile("u1", username="Alice.Cooks", full_name="  Alice C  ")

        assert profile.username == "alice.cooks"
        assert profile.full_name == "Alice C"
        assert profile.updated_at is not None

    def test_short_fields_are_rejected(self, service, store) -> None:
        store.add_profile("u1", "alice", "Alice")

        with pytest.raises(InvalidProfileError) as exc_info:
            service.update_profile("u1", username="!", full_name=" ")

        assert exc_info.value.errors == ["Username is required", "Display name is required"]

    def test_username_owned_by_other_is_taken(self, service, store) -> None:
        store.add_profile("u1", "alice", "Alice")
        store.add_profile("u2", "bob", "Bob")

        with pytest.raises(UsernameTakenError):
            service.update_profile("u2", username="alice")

        assert store.profiles["u2"].username == "bob"

    def test_keeping_own_username_is_allowed(self, service, store) -> None:
        store.add_profile("u1", "alice", "Alice")

        assert service.update_profile("u1", username="alice").username == "alice"

    def test_missing_profile(self, service) -> None:
        with pytest.raises(ProfileNotFoundError):
            service.update_profile("u404", full_name="Nobody")

    def test_no_changes_returns_current(self, service, store) -> None:
        existing = store.add_profile("u1", "alice", "Alice")

        assert service.update_profile("u1") is existing
        assert "update_profile" not in store.calls


class TestEnsureProfileRace:
    def test_regenerates_when_username_taken_concurrently(self, service, profile_repo, store, monkeypatch) -> None:
        insert = profile_repo.insert_profile
        attempts = []

        def racing_insert(user_id, username, full_name):
            attempts.append(username)
            if len(attempts) == 1:
                # Another sign-in claims the same username first.
                store.add_profile("u-other", username, "Other")
            return insert(user_id, username, full_name)

        monkeypatch.setattr(profile_repo, "insert_profile", racing_insert)

        profile = service.ensure_profile("u1", "alice@example.com")

        assert attempts == ["alice", "alice1"]
        assert profile.id == "u1"
        assert profile.username == "alice1"

    def test_gives_up_after_second_collision(self, service, profile_repo, store, monkeypatch) -> None:
        insert = profile_repo.insert_profile
        attempts = []

        def always_racing(user_id, username, full_name):
            attempts.append(username)
            store.add_profile(f"u-other-{len(attempts)}", username, "Other")
            return insert(user_id, username, full_name)

        monkeypatch.setattr(profile_repo, "insert_profile", always_racing)

        with pytest.raises(UsernameTakenError):
            service.ensure_profile("u1", "alice@example.com")

        assert attempts == ["alice", "alice1"]
        assert "u1" not in store.profiles

    def test_concurrent_creation_of_same_profile_returns_it(self, service, profile_repo, store, monkeypatch) -> None:
        insert = profile_repo.insert_profile

        def racing_insert(user_id, username, full_name):
            store.add_profile(user_id, username, full_name)
            return insert(user_id, username, full_name)

        monkeypatch.setattr(profile_repo, "insert_profile", racing_insert)

        profile = service.ensure_profile("u1", "alice@example.com")

        assert profile is store.profiles["u1"]
