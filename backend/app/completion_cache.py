from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional

from app.schemas import CursorPosition

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingCompletion:
    text: str
    position: CursorPosition


class PendingCompletionCache:
    """
    Single-slot store bridging an async generation to the inline-suggestion query.

    `store` always overwrites. `consume_if_at` hands the text out once, and only
    to a query at exactly the stored position.
    """

    def __init__(self) -> None:
        self._pending: Optional[PendingCompletion] = None
        self._lock = threading.Lock()

    @property
    def pending(self) -> Optional[PendingCompletion]:
        return self._pending

    def store(self, text: str, position: CursorPosition) -> None:
        with self._lock:
            if self._pending is not None:
                logger.debug("discarding unconsumed completion at %s", self._pending.position)
            self._pending = PendingCompletion(text=text, position=position)

    def consume_if_at(self, position: CursorPosition) -> Optional[str]:
        with self._lock:
            if self._pending is None or self._pending.position != position:
                return None
            text = self._pending.text
            self._pending = None
            return text

    def clear(self) -> None:
        with self._lock:
            self._pending = None
