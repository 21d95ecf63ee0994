"""Error taxonomy and exit-code mapping for vpnctl.

Every failure the CLI can report is a CliError carrying an ErrorKind.
exit_code_for() is the single place that turns a kind into the process
exit status; the codes are part of the CLI's public contract and must not
change between releases.
"""

from enum import Enum, IntEnum
from typing import Optional


class ErrorKind(Enum):
    """Failure categories reported by the CLI."""
    INVALID_ARGS = "invalid_args"   # Bad command line, detected locally
    UNREACHABLE = "unreachable"     # Daemon never became active / went away
    RPC_FAILURE = "rpc_failure"     # Daemon rejected the request
    INTERNAL = "internal"           # Broken invariant in the client itself


class ExitCode(IntEnum):
    """Process exit statuses. 2 is left to Click's own usage errors."""
    SUCCESS = 0
    INVALID_ARGS = 1
    UNREACHABLE = 3
    RPC_FAILURE = 4
    INTERNAL = 127


_EXIT_CODES = {
    ErrorKind.INVALID_ARGS: ExitCode.INVALID_ARGS,
    ErrorKind.UNREACHABLE: ExitCode.UNREACHABLE,
    ErrorKind.RPC_FAILURE: ExitCode.RPC_FAILURE,
    ErrorKind.INTERNAL: ExitCode.INTERNAL,
}


class CliError(Exception):
    """
    A failure with a known kind.

    Args:
        kind: Error category, decides the exit code
        message: One-line, user-facing description
        code: Optional error code reported by the daemon
    """

    def __init__(self, kind: ErrorKind, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.code = code

    def __repr__(self) -> str:
        return f"CliError({self.kind.name}, {self.message!r})"


class InternalError(CliError):
    """A "can't happen" branch was reached. Never recovered from."""

    def __init__(self, message: str):
        super().__init__(ErrorKind.INTERNAL, message)


def exit_code_for(kind: Optional[ErrorKind]) -> ExitCode:
    """
    Map an error kind to the process exit code.

    Args:
        kind: The failure kind, or None for success

    Returns:
        The ExitCode for that outcome
    """
    if kind is None:
        return ExitCode.SUCCESS
    return _EXIT_CODES[kind]
