# src/app/ui/notifications.py
"""
Transient toast notifications raised by the like control and the comment panel.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class ToastVariant(str, Enum):
    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


@dataclass(frozen=True)
class Toast:
    title: str
    description: str
    variant: ToastVariant = ToastVariant.DEFAULT

    @classmethod
    def success(cls, title: str, description: str) -> Toast:
        return cls(title=title, description=description)

    @classmethod
    def error(cls, description: str) -> Toast:
        return cls(title="Error", description=description, variant=ToastVariant.DESTRUCTIVE)


class Notifier(ABC):
    """Surface for transient success/failure messages."""

    @abstractmethod
    def notify(self, toast: Toast) -> None:
        pass


class ToastQueue(Notifier):
    """
    In-memory notifier keeping the most recent toasts for the view to drain.
    """

    def __init__(self, limit: int = 20) -> None:
        self._toasts: deque[Toast] = deque(maxlen=limit)

    def notify(self, toast: Toast) -> None:
        level = logging.WARNING if toast.variant == ToastVariant.DESTRUCTIVE else logging.DEBUG
        logger.log(level, "toast title=%s description=%s", toast.title, toast.description)
        self._toasts.append(toast)

    def drain(self) -> list[Toast]:
        toasts = list(self._toasts)
        self._toasts.clear()
        return toasts

    @property
    def pending(self) -> list[Toast]:
        return list(self._toasts)

    def __len__(self) -> int:
        return len(self._toasts)
