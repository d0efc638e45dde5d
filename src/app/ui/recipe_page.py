# src/app/ui/recipe_page.py
"""
Recipe detail page state. Owns the aggregate view and wires the like control
and comment panel to it.
"""
from __future__ import annotations

import logging
from typing import Optional

from src.app.domain.models import RecipeFetchResult, RecipeWithSocial
from src.app.services.social_service import SocialService
from src.app.ui.comment_panel import CommentPanel
from src.app.ui.like_control import DEFAULT_ANIMATION_MS, LikeControl
from src.app.ui.lifecycle import Mountable
from src.app.ui.notifications import Notifier

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Recipe not found."


class RecipeDetailState(Mountable):
    """
    Page-level state for one recipe.

    Fetch failures become inline `error` text that replaces the page body.
    Without an actor the page still loads; it just has no like control and
    the comment form is disabled.
    """

    def __init__(
        self,
        recipe_id: str,
        user_id: Optional[str],
        service: SocialService,
        notifier: Notifier,
        animation_ms: int = DEFAULT_ANIMATION_MS,
    ):
        super().__init__()
        self.recipe_id = recipe_id
        self.user_id = user_id
        self._service = service
        self._notifier = notifier
        self._animation_ms = animation_ms

        self.is_loading = False
        self.error: Optional[str] = None
        self.recipe: Optional[RecipeWithSocial] = None
        self.like_control: Optional[LikeControl] = None
        self.comment_panel: Optional[CommentPanel] = None

    @property
    def is_owner(self) -> bool:
        return bool(self.user_id and self.recipe and self.recipe.recipe.user_id == self.user_id)

    async def load(self) -> bool:
        """Fetch the aggregate view and build the child units."""
        self.is_loading = True
        self.error = None
        result = await self._fetch()

        if self._discard_if_unmounted("load"):
            return False

        self.is_loading = False
        if not self._accept(result):
            return False

        self._build_children()
        return True

    async def refresh_comments(self) -> None:
        """Full refetch after a comment mutation; the panel never patches its list."""
        result = await self._fetch()

        if self._discard_if_unmounted("refresh_comments"):
            return

        if result.failed:
            # Keep the page; the stale list stays visible until the next refresh.
            logger.warning("Comment refresh failed: recipe=%s, error=%s", self.recipe_id, result.error)
            return

        if not self._accept(result):
            self._teardown_children()
            return

        if self.comment_panel is not None:
            self.comment_panel.set_comments(self.recipe.comments)
        if self.like_control is not None:
            self.like_control.reconcile(self.recipe.likes_count, self.recipe.user_has_liked)

    def on_like_change(self, likes_count: int, is_liked: bool) -> None:
        if self.recipe is None:
            return
        self.recipe.likes_count = likes_count
        self.recipe.user_has_liked = is_liked

    def unmount(self) -> None:
        super().unmount()
        self._teardown_children()

    async def _fetch(self) -> RecipeFetchResult:
        try:
            return await self._call(self._service.get_recipe_with_social, self.recipe_id, self.user_id)
        except Exception as error:
            logger.exception("Recipe fetch call failed: recipe=%s", self.recipe_id)
            return RecipeFetchResult(error=str(error) or "Unknown error")

    def _accept(self, result: RecipeFetchResult) -> bool:
        if result.failed:
            self.recipe = None
            self.error = f"Failed to load recipe: {result.error}"
            return False
        if result.not_found:
            self.recipe = None
            self.error = NOT_FOUND_MESSAGE
            return False
        self.recipe = result.recipe
        self.error = None
        return True

    def _build_children(self) -> None:
        self._teardown_children()
        if self.recipe is None:
            return

        if self.user_id is not None:
            self.like_control = LikeControl(
                recipe_id=self.recipe_id,
                user_id=self.user_id,
                service=self._service,
                notifier=self._notifier,
                initial_likes=self.recipe.likes_count,
                initial_liked=self.recipe.user_has_liked,
                on_like_change=self.on_like_change,
                animation_ms=self._animation_ms,
            )

        self.comment_panel = CommentPanel(
            recipe_id=self.recipe_id,
            user_id=self.user_id,
            service=self._service,
            notifier=self._notifier,
            on_comment_change=self.refresh_comments,
            comments=self.recipe.comments,
        )

    def _teardown_children(self) -> None:
        if self.like_control is not None:
            self.like_control.unmount()
            self.like_control = None
        if self.comment_panel is not None:
            self.comment_panel.unmount()
            self.comment_panel = None
