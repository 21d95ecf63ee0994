"""The `set` command: change one daemon setting."""

import logging
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, List

from vpnctl.commands.base import CliCommand, RpcRequest
from vpnctl.commands.values import (
    DEBUG_LOGGING,
    DEBUG_LOGGING_UNSET,
    DEFAULT_DEBUG_LOGGING,
    REGION,
    SETTING_DEBUG_LOGGING,
    SETTING_LOCATION,
    parse_boolean_param,
)
from vpnctl.core.errors import CliError, ErrorKind, ExitCode, InternalError
from vpnctl.daemon.snapshot import LOCATION_AUTO, Snapshot

if TYPE_CHECKING:
    from vpnctl.core.app import CliApp

logger = logging.getLogger(__name__)

APPLY_SETTINGS = "applySettings"

# Descriptions are only used for help text.
SET_SUPPORTED_TYPES = MappingProxyType({
    DEBUG_LOGGING: "Enable or disable debug logging.",
    REGION: 'Select a region (or "auto")',
})


def match_location(snapshot: Snapshot, name: str) -> str:
    """
    Resolve a region name from the command line to a location id.

    "auto" resolves to itself without looking at the snapshot. Otherwise
    the first location whose display name matches exactly wins.

    Returns:
        The location id, or "" if nothing matched
    """
    if name == LOCATION_AUTO:
        return LOCATION_AUTO

    # O(N), but this runs once per process; an index would be thrown away.
    for location in snapshot.locations:
        if location.display_name == name:
            return location.id

    logger.debug("No match found for specified location: %s", name)
    return ""


class SetCommand(CliCommand):
    """Change settings in the VPN daemon."""

    name = "set"
    arity = 2
    usage = "<type> <value>"

    def describe(self) -> str:
        # "\b" keeps Click from rewrapping the list
        lines = [self.__doc__, "", "\b", "Available types:"]
        lines += [f"  - {name} - {desc}" for name, desc in SET_SUPPORTED_TYPES.items()]
        return "\n".join(lines)

    def validate(self, params: List[str]) -> None:
        setting, value = params
        if setting not in SET_SUPPORTED_TYPES:
            raise CliError(ErrorKind.INVALID_ARGS, f"Unknown type: {setting}")
        if setting == DEBUG_LOGGING:
            parse_boolean_param(value)

    def build_request(self, snapshot: Snapshot, params: List[str]) -> RpcRequest:
        setting, value = params

        if setting == REGION:
            location_id = match_location(snapshot, value)
            if not location_id:
                raise CliError(ErrorKind.INVALID_ARGS, f"Unknown region: {value}")
            logger.info("Setting location to %s (%s)", location_id, value)
            # Changing region reconnects if currently connected
            return RpcRequest(APPLY_SETTINGS, ({SETTING_LOCATION: location_id}, True))

        if setting == DEBUG_LOGGING:
            enabled = parse_boolean_param(value)
            new_value = list(DEFAULT_DEBUG_LOGGING) if enabled else DEBUG_LOGGING_UNSET
            return RpcRequest(APPLY_SETTINGS, ({SETTING_DEBUG_LOGGING: new_value}, False))

        # validate() already rejected anything else
        raise InternalError(f"Unhandled setting type: {setting}")

    def on_success(self, app: "CliApp", value: Any) -> None:
        logger.info("Setting change succeeded")
        app.exit(ExitCode.SUCCESS)
