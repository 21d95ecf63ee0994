"""
Commands understood by vpnctl.
Each command is a CliCommand; get_command() looks one up by name.
"""

from types import MappingProxyType

from vpnctl.commands.apply_settings import ApplySettingsCommand
from vpnctl.commands.base import CliCommand, RpcRequest
from vpnctl.commands.get_command import GetCommand
from vpnctl.commands.set_command import SetCommand
from vpnctl.core.errors import CliError, ErrorKind

COMMANDS = MappingProxyType({
    command.name: command
    for command in (SetCommand(), GetCommand(), ApplySettingsCommand())
})


def get_command(name: str) -> CliCommand:
    """
    Raises:
        CliError: INVALID_ARGS if there is no such command
    """
    try:
        return COMMANDS[name]
    except KeyError:
        raise CliError(ErrorKind.INVALID_ARGS, f"Unknown command: {name}") from None


__all__ = [
    "COMMANDS",
    "CliCommand",
    "RpcRequest",
    "get_command",
    "SetCommand",
    "GetCommand",
    "ApplySettingsCommand",
]
