"""
Base class for CLI commands.

A command runs in two phases. validate() happens before any connection is
made and rejects everything that can be rejected locally. on_active() runs
once the daemon session is active; the default implementation builds a
single request, sends it and maps the reply to an exit code.
"""

import logging
from abc import ABC
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, List, Optional, Tuple

from vpnctl.core.errors import CliError, ErrorKind, ExitCode, InternalError
from vpnctl.daemon.snapshot import Snapshot

if TYPE_CHECKING:
    from vpnctl.core.app import CliApp
    from vpnctl.daemon.session import DaemonSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RpcRequest:
    """A daemon method call, ready to send."""
    method: str
    args: Tuple[Any, ...] = ()


class CliCommand(ABC):
    """Abstract base class for commands run against the daemon."""

    name: str = ""
    # Number of parameters after the command name
    arity: int = 0
    usage: str = ""

    def describe(self) -> str:
        """Help text for this command."""
        return self.__doc__ or ""

    def usage_line(self) -> str:
        return f"vpnctl {self.name} {self.usage}".rstrip()

    def check_arity(self, params: List[str]) -> None:
        """
        Raises:
            CliError: INVALID_ARGS if the parameter count is wrong
        """
        if len(params) != self.arity:
            raise CliError(
                ErrorKind.INVALID_ARGS,
                f"Expected {self.arity} argument(s), got {len(params)}. "
                f"Usage: {self.usage_line()}",
            )

    def validate(self, params: List[str]) -> None:
        """Local checks made before connecting. Raises CliError."""

    def build_request(self, snapshot: Snapshot, params: List[str]) -> RpcRequest:
        """Build the request to send once the daemon is active."""
        raise InternalError(f"'{self.name}' does not send a request")

    def on_active(self, session: "DaemonSession", app: "CliApp", params: List[str]) -> None:
        """Called once, when the daemon session first becomes active."""
        if len(params) != self.arity:
            raise InternalError(f"'{self.name}' started with unchecked arguments")

        request = self.build_request(session.snapshot(), params)
        session.call(request.method, request.args).next(
            app.guarded(self.handle_reply, app)
        )

    def handle_reply(self, app: "CliApp", error: Optional[CliError], value: Any) -> None:
        if error is not None:
            if error.code:
                logger.debug("Daemon error %s: %s", error.code, error.message)
            app.fail(error)
            return
        self.on_success(app, value)

    def on_success(self, app: "CliApp", value: Any) -> None:
        app.exit(ExitCode.SUCCESS)
