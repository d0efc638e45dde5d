# src/app/ui/comment_panel.py
"""
Comment panel: lists a recipe's comments and lets the signed-in actor add,
edit and delete their own. The panel never edits its list in place; after
every successful mutation it asks the owning context to refetch.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Optional

from src.app.domain.models import CommentWithAuthor, MutationResult
from src.app.services.social_service import SocialService
from src.app.ui.lifecycle import Mountable, invoke_callback
from src.app.ui.notifications import Notifier, Toast

logger = logging.getLogger(__name__)

RefreshRequest = Callable[[], Any]


class CommentMode(str, Enum):
    VIEWING = "viewing"
    EDITING = "editing"


class CommentPanel(Mountable):
    """
    Stateful comment list for one recipe.

    At most one comment is in EDITING mode across the whole panel; starting an
    edit on another row drops the previous edit buffer.
    """

    def __init__(
        self,
        recipe_id: str,
        user_id: Optional[str],
        service: SocialService,
        notifier: Notifier,
        on_comment_change: RefreshRequest,
        comments: Optional[list[CommentWithAuthor]] = None,
    ):
        super().__init__()
        self.recipe_id = recipe_id
        self.user_id = user_id
        self._service = service
        self._notifier = notifier
        self._on_comment_change = on_comment_change
        self._comments: list[CommentWithAuthor] = list(comments or [])

        self.new_comment = ""
        self.is_submitting = False
        self.editing_comment_id: Optional[str] = None
        self._pending_ids: set[str] = set()
        self.edit_content = ""

    @property
    def comments(self) -> list[CommentWithAuthor]:
        return list(self._comments)

    @property
    def title(self) -> str:
        return f"Comments ({len(self._comments)})"

    @property
    def can_post(self) -> bool:
        return self.user_id is not None

    @property
    def can_submit(self) -> bool:
        return self.can_post and not self.is_submitting and bool(self.new_comment.strip())

    def set_comments(self, comments: list[CommentWithAuthor]) -> None:
        """Replace the list with the owner's latest fetch."""
        self._comments = list(comments)
        if self.editing_comment_id and not any(c.id == self.editing_comment_id for c in self._comments):
            self.cancel_edit()

    def can_modify(self, comment: CommentWithAuthor) -> bool:
        return self.user_id is not None and comment.user_id == self.user_id

    def is_busy(self, comment_id: str) -> bool:
        return comment_id in self._pending_ids

    def mode_for(self, comment_id: str) -> CommentMode:
        return CommentMode.EDITING if comment_id == self.editing_comment_id else CommentMode.VIEWING

    def set_input(self, text: str) -> None:
        self.new_comment = text

    def set_edit_content(self, text: str) -> None:
        self.edit_content = text

    async def submit(self) -> bool:
        """
        Post the input buffer as a new comment.

        Returns:
            True if the comment was stored. Blank input or no actor returns
            False without calling the service and leaves the buffer as is.
        """
        content = self.new_comment.strip()
        if not self.can_post or not content or self.is_submitting:
            return False

        self.is_submitting = True
        try:
            result = await self._run(self._service.add_comment, self.recipe_id, self.user_id, content)
        finally:
            if self.is_mounted:
                self.is_submitting = False

        if self._discard_if_unmounted("add_comment"):
            return False

        if not result.success:
            self._notifier.notify(Toast.error(result.error or "Failed to add comment"))
            return False

        self.new_comment = ""
        await self._request_refresh()
        self._notifier.notify(Toast.success("Comment added", "Your comment has been posted successfully."))
        return True

    def start_edit(self, comment: CommentWithAuthor) -> bool:
        if not self.can_modify(comment):
            return False
        self.editing_comment_id = comment.id
        self.edit_content = comment.content
        return True

    def cancel_edit(self) -> None:
        self.editing_comment_id = None
        self.edit_content = ""

    async def save_edit(self) -> bool:
        """
        Save the edit buffer for the comment in EDITING mode.
        On failure the panel stays in edit mode so the text is not lost.
        """
        comment_id = self.editing_comment_id
        content = self.edit_content.strip()
        if not self.can_post or comment_id is None or not content or self.is_busy(comment_id):
            return False

        result = await self._run_for(comment_id, self._service.update_comment, comment_id, self.user_id, content)

        if self._discard_if_unmounted("update_comment"):
            return False

        if not result.success:
            self._notifier.notify(Toast.error(result.error or "Failed to update comment"))
            return False

        if self.editing_comment_id == comment_id:
            self.cancel_edit()
        await self._request_refresh()
        self._notifier.notify(Toast.success("Comment updated", "Your comment has been updated successfully."))
        return True

    async def delete(self, comment_id: str) -> bool:
        comment = next((c for c in self._comments if c.id == comment_id), None)
        if comment is None or not self.can_modify(comment) or self.is_busy(comment_id):
            return False

        result = await self._run_for(comment_id, self._service.delete_comment, comment_id, self.user_id)

        if self._discard_if_unmounted("delete_comment"):
            return False

        if not result.success:
            self._notifier.notify(Toast.error(result.error or "Failed to delete comment"))
            return False

        if self.editing_comment_id == comment_id:
            self.cancel_edit()
        await self._request_refresh()
        self._notifier.notify(Toast.success("Comment deleted", "Your comment has been removed."))
        return True

    async def _run(self, func: Callable[..., MutationResult], *args: Any) -> MutationResult:
        try:
            return await self._call(func, *args)
        except Exception as error:
            logger.exception("Comment call failed: recipe=%s", self.recipe_id)
            return MutationResult.failure(str(error) or "Unknown error")

    async def _run_for(self, comment_id: str, func: Callable[..., MutationResult], *args: Any) -> MutationResult:
        # One in-flight edit or delete per comment.
        self._pending_ids.add(comment_id)
        try:
            return await self._run(func, *args)
        finally:
            self._pending_ids.discard(comment_id)

    async def _request_refresh(self) -> None:
        await invoke_callback(self._on_comment_change)
