"""The `get` command: print one daemon setting."""

from types import MappingProxyType
from typing import TYPE_CHECKING, List

from vpnctl.commands.base import CliCommand
from vpnctl.commands.values import DEBUG_LOGGING, REGION, SETTING_DEBUG_LOGGING, SETTING_LOCATION
from vpnctl.core.errors import CliError, ErrorKind, ExitCode, InternalError
from vpnctl.daemon.snapshot import LOCATION_AUTO, Snapshot

if TYPE_CHECKING:
    from vpnctl.core.app import CliApp
    from vpnctl.daemon.session import DaemonSession

GET_SUPPORTED_TYPES = MappingProxyType({
    DEBUG_LOGGING: "Whether debug logging is enabled.",
    REGION: 'The selected region (or "auto")',
})


def format_value(snapshot: Snapshot, setting: str) -> str:
    """Render a setting from the snapshot the way `set` accepts it."""
    if setting == DEBUG_LOGGING:
        return "true" if snapshot.settings.get(SETTING_DEBUG_LOGGING) else "false"

    if setting == REGION:
        location_id = snapshot.settings.get(SETTING_LOCATION) or LOCATION_AUTO
        if location_id == LOCATION_AUTO:
            return LOCATION_AUTO
        for location in snapshot.locations:
            if location.id == location_id:
                return location.display_name
        return str(location_id)

    raise InternalError(f"Unhandled setting type: {setting}")


class GetCommand(CliCommand):
    """Print a setting from the VPN daemon."""

    name = "get"
    arity = 1
    usage = "<type>"

    def describe(self) -> str:
        lines = [self.__doc__, "", "\b", "Available types:"]
        lines += [f"  - {name} - {desc}" for name, desc in GET_SUPPORTED_TYPES.items()]
        return "\n".join(lines)

    def validate(self, params: List[str]) -> None:
        if params[0] not in GET_SUPPORTED_TYPES:
            raise CliError(ErrorKind.INVALID_ARGS, f"Unknown type: {params[0]}")

    def on_active(self, session: "DaemonSession", app: "CliApp", params: List[str]) -> None:
        # Answered from the snapshot; no request needed
        app.ui.out(format_value(session.snapshot(), params[0]))
        app.exit(ExitCode.SUCCESS)
