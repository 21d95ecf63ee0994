"""Single-assignment result of one in-flight daemon call.

A PendingCall settles exactly once, either resolved with a value or failed
with a CliError, and accepts exactly one continuation:

    pending = session.call("applySettings", [patch, False])
    pending.next(lambda error, value: ...)

The continuation always runs from the event loop (Future.add_done_callback),
whether it was registered before or after the call settled.
"""

import asyncio
from enum import Enum
from typing import Any, Callable, Optional

from vpnctl.core.errors import CliError, InternalError

Continuation = Callable[[Optional[CliError], Any], None]


class CallState(Enum):
    PENDING = "pending"
    RESOLVED = "resolved"
    FAILED = "failed"


class PendingCall:
    """One remote call's eventual outcome."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        loop = loop or asyncio.get_running_loop()
        # Holds (error, value); errors are not stored as Future exceptions so
        # an unobserved failure never logs "exception was never retrieved".
        self._future: asyncio.Future = loop.create_future()
        self._state = CallState.PENDING
        self._has_continuation = False

    @classmethod
    def failed(cls, error: CliError, loop: Optional[asyncio.AbstractEventLoop] = None) -> "PendingCall":
        """Create a call that has already failed with error."""
        call = cls(loop)
        call.fail(error)
        return call

    @property
    def state(self) -> CallState:
        return self._state

    @property
    def done(self) -> bool:
        return self._state is not CallState.PENDING

    def resolve(self, value: Any) -> None:
        self._settle(CallState.RESOLVED, None, value)

    def fail(self, error: CliError) -> None:
        self._settle(CallState.FAILED, error, None)

    def next(self, callback: Continuation) -> None:
        """
        Register the continuation, called as callback(error, value).

        Raises:
            InternalError: If a continuation was already registered
        """
        if self._has_continuation:
            raise InternalError("PendingCall already has a continuation")
        self._has_continuation = True
        self._future.add_done_callback(lambda future: callback(*future.result()))

    def _settle(self, state: CallState, error: Optional[CliError], value: Any) -> None:
        if self.done:
            raise InternalError(f"PendingCall already {self._state.value}")
        self._state = state
        self._future.set_result((error, value))
