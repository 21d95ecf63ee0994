"""Upper bound on how long a CLI run waits for the daemon."""

import asyncio
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class TimeoutGuard:
    """
    One-shot timer racing against the daemon.

    start() arms the timer on the running loop; if cancel() is not called
    within timeout seconds, on_timeout fires once.
    """

    def __init__(self, timeout: float, on_timeout: Callable[[], None]):
        self.timeout = timeout
        self._on_timeout = on_timeout
        self._handle: Optional[asyncio.TimerHandle] = None
        self.fired = False

    @property
    def armed(self) -> bool:
        return self._handle is not None

    def start(self) -> None:
        if self._handle is not None or self.fired:
            return
        self._handle = asyncio.get_running_loop().call_later(self.timeout, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self.fired = True
        logger.debug("Timed out after %.1fs", self.timeout)
        self._on_timeout()
