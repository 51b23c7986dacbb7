import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Deque, List, Optional

from ...application.ports.notifier import Notifier
from ...config import settings


@dataclass
class Toast:
    kind: str  # "success" | "error"
    message: str
    created_at: datetime = field(default_factory=datetime.utcnow)


class ToastNotifier(Notifier):
    """Keeps the most recent toasts in memory and logs each one."""

    def __init__(self, history_size: Optional[int] = None) -> None:
        self._logger = logging.getLogger(__name__)
        self._toasts: Deque[Toast] = deque(maxlen=history_size or settings.TOAST_HISTORY_SIZE)

    def success(self, message: str) -> None:
        self._push("success", message)
        self._logger.info(f"TOAST success: {message}")

    def error(self, message: str) -> None:
        self._push("error", message)
        self._logger.warning(f"TOAST error: {message}")

    def _push(self, kind: str, message: str) -> None:
        self._toasts.append(Toast(kind=kind, message=message))

    @property
    def toasts(self) -> List[Toast]:
        return list(self._toasts)

    def latest(self) -> Optional[Toast]:
        return self._toasts[-1] if self._toasts else None

    def clear(self) -> None:
        self._toasts.clear()
