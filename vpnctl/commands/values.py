"""Setting names and value grammar shared by the get and set commands."""

from typing import List

from vpnctl.core.errors import CliError, ErrorKind

# Setting type names as typed on the command line
DEBUG_LOGGING = "debugLogging"
REGION = "region"

# Daemon settings keys
SETTING_DEBUG_LOGGING = "debugLogging"
SETTING_LOCATION = "location"

# The daemon's documented default debug logging filter set.
DEFAULT_DEBUG_LOGGING: List[str] = [
    "*.debug=true",
    "qt*.debug=false",
    "latency.*=false",
]

# Clears the debug logging override. Sent as JSON null with the key present,
# which the daemon treats differently from a missing key or `false`.
DEBUG_LOGGING_UNSET = None

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off"}


def parse_boolean_param(value: str) -> bool:
    """
    Parse a boolean command line value (case-insensitive).

    Raises:
        CliError: INVALID_ARGS if value is not a recognised boolean
    """
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise CliError(
        ErrorKind.INVALID_ARGS,
        f"Invalid boolean value: {value} (expected true or false)",
    )
