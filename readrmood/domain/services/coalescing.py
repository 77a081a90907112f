"""Coalescing trigger batching bursts of change notifications."""

import asyncio
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class CoalescingTrigger:
    """
    Runs a callback once per burst of ``trigger()`` calls.

    Each ``trigger()`` (re)starts a timer of ``window`` seconds on the
    running asyncio loop; the callback fires when the window passes with no
    further triggers. Without a running loop the trigger stays pending until
    ``flush()`` is called, which runs the callback synchronously. The value
    returned by the most recent callback is kept in ``last_result``.
    """

    def __init__(self, callback: Callable[[], object], window: float = 0.15):
        if window <= 0:
            raise ValueError("Coalescing window must be positive")
        self._callback = callback
        self.window = window
        self._handle: Optional[asyncio.TimerHandle] = None
        self._pending = False
        self.fire_count = 0
        self.last_result: object = None

    @property
    def pending(self) -> bool:
        return self._pending

    def trigger(self) -> None:
        """Note a change; evaluation happens after the window closes."""
        if self._pending:
            logger.debug("Coalescing trigger into pending evaluation")
        self._pending = True
        self._cancel_handle()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._handle = loop.call_later(self.window, self._fire)

    def flush(self) -> bool:
        """Run a pending callback now. Returns True if one ran."""
        if not self._pending:
            return False
        self._fire()
        return True

    def cancel(self) -> None:
        self._cancel_handle()
        self._pending = False

    def _cancel_handle(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._cancel_handle()
        self._pending = False
        self.fire_count += 1
        self.last_result = self._callback()
