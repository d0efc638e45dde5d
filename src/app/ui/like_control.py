# src/app/ui/like_control.py
"""
Like control: renders a recipe's like count and the actor's like state, and
toggles it with an optimistic update that is rolled back if the store call fails.
"""
from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from src.app.domain.models import MutationResult
from src.app.services.social_service import SocialService
from src.app.ui.lifecycle import Mountable, invoke_callback
from src.app.ui.notifications import Notifier, Toast

logger = logging.getLogger(__name__)

DEFAULT_ANIMATION_MS = 300
LIKE_FAILED_MESSAGE = "Failed to update like"

LikeChangeListener = Callable[[int, bool], Any]


class ControlStatus(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    CONFIRMED = "confirmed"
    ROLLED_BACK = "rolled_back"


@dataclass(frozen=True)
class LikeSnapshot:
    is_liked: bool
    likes_count: int

    def flipped(self) -> LikeSnapshot:
        if self.is_liked:
            return LikeSnapshot(is_liked=False, likes_count=max(0, self.likes_count - 1))
        return LikeSnapshot(is_liked=True, likes_count=self.likes_count + 1)


def _initial_count(value: Any) -> int:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number) or number < 0:
        return 0
    return int(number)


class LikeControl(Mountable):
    """
    Optimistic like toggle for one recipe.

    State:
    - is_liked / likes_count: what the control displays
    - committed: last state the store confirmed (or the initial state)
    - status: IDLE -> PENDING -> CONFIRMED | ROLLED_BACK
    - is_animating: cosmetic, cleared `animation_ms` after a click

    Local state is never re-fetched after a confirmed toggle, so it can drift
    from the store when other actors like or unlike concurrently.
    """

    def __init__(
        self,
        recipe_id: str,
        user_id: Optional[str],
        service: SocialService,
        notifier: Notifier,
        initial_likes: Any = 0,
        initial_liked: bool = False,
        on_like_change: Optional[LikeChangeListener] = None,
        animation_ms: int = DEFAULT_ANIMATION_MS,
    ):
        super().__init__()
        self.recipe_id = recipe_id
        self.user_id = user_id
        self._service = service
        self._notifier = notifier
        self._on_like_change = on_like_change
        self.animation_ms = animation_ms

        self._committed = LikeSnapshot(is_liked=bool(initial_liked), likes_count=_initial_count(initial_likes))
        self.is_liked = self._committed.is_liked
        self.likes_count = self._committed.likes_count
        self.is_animating = False
        self.status = ControlStatus.IDLE
        self._animation_timer: Optional[asyncio.TimerHandle] = None

    @property
    def enabled(self) -> bool:
        return self.user_id is not None and self.is_mounted

    @property
    def committed(self) -> LikeSnapshot:
        return self._committed

    @property
    def snapshot(self) -> LikeSnapshot:
        return LikeSnapshot(is_liked=self.is_liked, likes_count=self.likes_count)

    @property
    def is_pending(self) -> bool:
        return self.status == ControlStatus.PENDING

    @property
    def label(self) -> str:
        return "Unlike recipe" if self.is_liked else "Like recipe"

    async def toggle(self) -> bool:
        """
        Flip the like optimistically and confirm it with the store.

        Returns:
            True if the toggle was confirmed, False if it was ignored,
            rolled back or discarded after unmount
        """
        if not self.enabled:
            return False
        if self.is_pending:
            logger.debug("Like toggle ignored while pending: recipe=%s", self.recipe_id)
            return False

        previous = self.snapshot
        self._apply(previous.flipped())
        self.status = ControlStatus.PENDING
        self._start_animation()

        try:
            result = await self._call(self._service.toggle_like, self.recipe_id, self.user_id)
        except Exception as error:
            logger.exception("Like toggle call failed: recipe=%s", self.recipe_id)
            result = MutationResult.failure(str(error) or LIKE_FAILED_MESSAGE)

        if self._discard_if_unmounted("toggle_like"):
            return False

        if not result.success:
            self._apply(previous)
            self.status = ControlStatus.ROLLED_BACK
            self._notifier.notify(Toast.error(result.error or LIKE_FAILED_MESSAGE))
            return False

        self._committed = self.snapshot
        self.status = ControlStatus.CONFIRMED
        await invoke_callback(self._on_like_change, self.likes_count, self.is_liked)
        return True

    def reconcile(self, likes_count: Any, is_liked: bool) -> bool:
        """
        Adopt state read back from the store after a refetch.
        Ignored while a toggle is pending; that toggle settles the state itself.
        """
        if self.is_pending or not self.is_mounted:
            return False
        self._committed = LikeSnapshot(is_liked=bool(is_liked), likes_count=_initial_count(likes_count))
        self._apply(self._committed)
        return True

    def unmount(self) -> None:
        super().unmount()
        if self._animation_timer is not None:
            self._animation_timer.cancel()
            self._animation_timer = None

    def _apply(self, snapshot: LikeSnapshot) -> None:
        self.is_liked = snapshot.is_liked
        self.likes_count = snapshot.likes_count

    def _start_animation(self) -> None:
        self.is_animating = True
        if self._animation_timer is not None:
            self._animation_timer.cancel()
        loop = asyncio.get_running_loop()
        self._animation_timer = loop.call_later(self.animation_ms / 1000, self._end_animation)

    def _end_animation(self) -> None:
        self.is_animating = False
        self._animation_timer = None
