"""Drives one CLI command against the daemon.

execute() is the dispatcher: it looks up the command, checks the argument
count and everything else that can be checked locally, and only then hands
the command to a CliApp, which owns the event loop for the rest of the run.

A CliApp run has two suspension points, waiting for the session's first
activation and waiting for the command's single call to come back. Both are
bounded by one TimeoutGuard. Whatever settles first sets the exit code;
everything after that is discarded.
"""

import asyncio
import functools
import logging
from typing import Callable, List, Optional

from vpnctl.commands import CliCommand, get_command
from vpnctl.core.configs import ClientConfig, get_client_config
from vpnctl.core.errors import CliError, ErrorKind, ExitCode, InternalError, exit_code_for
from vpnctl.core.timeout import TimeoutGuard
from vpnctl.daemon.session import DaemonSession
from vpnctl.ui.output import UIManager

logger = logging.getLogger(__name__)

SessionFactory = Callable[[ClientConfig], DaemonSession]


class CliApp:
    """Event-loop driver for a single command run."""

    def __init__(
        self,
        config: ClientConfig,
        session_factory: SessionFactory = DaemonSession.from_config,
        ui: Optional[UIManager] = None,
    ):
        self.config = config
        self.ui = ui or UIManager()
        self._session_factory = session_factory
        self._session: Optional[DaemonSession] = None
        self._exit: Optional[asyncio.Future] = None

    def run(self, command: CliCommand, params: List[str]) -> ExitCode:
        """Run command to completion and return its exit code."""
        return asyncio.run(self.run_async(command, params))

    async def run_async(self, command: CliCommand, params: List[str]) -> ExitCode:
        self._exit = asyncio.get_running_loop().create_future()
        session = self._session_factory(self.config)
        self._session = session
        guard = TimeoutGuard(self.config.timeout, self.guarded(self._on_timeout))

        session.on_first_active(self.guarded(command.on_active, session, self, params))
        guard.start()
        try:
            session.connect()
            return await self._exit
        except CliError as e:
            # Raised synchronously by connect(); nothing is in flight yet
            self.fail(e)
            return self._exit.result()
        finally:
            guard.cancel()
            await session.close()

    @property
    def exited(self) -> bool:
        return self._exit is not None and self._exit.done()

    def exit(self, code: ExitCode) -> None:
        """Set the run's exit code. Only the first call has any effect."""
        if self._exit is None:
            raise InternalError("exit() called outside of a run")
        if self._exit.done():
            logger.debug("Discarding exit %s, already exiting with %s", code, self._exit.result())
            return
        self._exit.set_result(code)

    def fail(self, error: CliError) -> None:
        """Report error on one stderr line and exit with its mapped code."""
        if self.exited:
            logger.debug("Discarding %r, already exiting", error)
            return
        if error.kind is ErrorKind.INTERNAL:
            self.ui.error(f"Internal error: {error.message}")
        else:
            self.ui.error(f"Error: {error.message}")
        self.exit(exit_code_for(error.kind))

    def guarded(self, fn: Callable, *args) -> Callable:
        """
        Wrap a callback the event loop will invoke for us.

        Nothing may unwind out of a loop callback, so every failure is
        turned into an exit right here.
        """
        @functools.wraps(fn)
        def wrapper(*call_args):
            try:
                fn(*args, *call_args)
            except CliError as e:
                logger.debug("Failing with error: %r", e)
                self.fail(e)
            except Exception as e:
                logger.debug("Unexpected error in %s", getattr(fn, "__name__", fn), exc_info=True)
                self.fail(InternalError(f"{type(e).__name__}: {e}"))
        return wrapper

    def _on_timeout(self) -> None:
        if self._session is not None and self._session.has_been_active:
            message = "Timed out waiting for a response from the daemon"
        else:
            message = "Unable to connect to the daemon"
        raise CliError(ErrorKind.UNREACHABLE, message)


def execute(
    name: str,
    params: List[str],
    config: Optional[ClientConfig] = None,
    session_factory: SessionFactory = DaemonSession.from_config,
    ui: Optional[UIManager] = None,
) -> ExitCode:
    """
    Dispatch a command by name.

    Args:
        name: Command name as typed on the command line
        params: Arguments after the command name
        config: Client configuration (loaded from disk if omitted)
        session_factory: Creates the daemon session once arguments are valid
        ui: Output sink

    Returns:
        The process exit code
    """
    ui = ui or UIManager()
    try:
        command = get_command(name)
        command.check_arity(params)
        command.validate(params)
        if config is None:
            try:
                config = get_client_config()
            except ValueError as e:
                raise CliError(ErrorKind.INVALID_ARGS, f"Invalid configuration: {e}") from e
    except CliError as e:
        logger.debug("Rejected before connecting: %r", e)
        ui.error(f"Error: {e.message}")
        return exit_code_for(e.kind)

    return CliApp(config, session_factory, ui).run(command, params)
