from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

AUTOSAVE_DELAY_SECONDS = 0.45


class AutosaveDebouncer:
    """Trailing-edge debouncer: a burst of schedule() calls ends in one save of the last snapshot."""

    def __init__(
        self,
        save: Callable[[Any], Any],
        delay: float = AUTOSAVE_DELAY_SECONDS,
        timer_factory: Callable[..., Any] = threading.Timer,
    ):
        self._save = save
        self._delay = delay
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._timer = None
        self._pending: Optional[Any] = None
        self._has_pending = False

    @property
    def pending(self) -> bool:
        return self._has_pending

    def schedule(self, snapshot) -> None:
        with self._lock:
            self._pending = snapshot
            self._has_pending = True
            if self._timer is not None:
                self._timer.cancel()
            self._timer = self._timer_factory(self._delay, self._fire)
            if hasattr(self._timer, "daemon"):
                self._timer.daemon = True
            self._timer.start()

    def _take(self):
        with self._lock:
            if not self._has_pending:
                return False, None
            snapshot = self._pending
            self._pending = None
            self._has_pending = False
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            return True, snapshot

    def _fire(self) -> None:
        ready, snapshot = self._take()
        if not ready:
            return
        try:
            self._save(snapshot)
        except Exception as exc:
            logger.warning("Autosave failed: %s", exc)

    def flush(self) -> bool:
        ready, snapshot = self._take()
        if not ready:
            return False
        self._save(snapshot)
        return True

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._pending = None
            self._has_pending = False
