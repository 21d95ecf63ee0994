"""The `applysettings` command: send a raw settings patch."""

import json
from typing import List

from vpnctl.commands.base import CliCommand, RpcRequest
from vpnctl.commands.set_command import APPLY_SETTINGS
from vpnctl.core.errors import CliError, ErrorKind
from vpnctl.daemon.snapshot import Snapshot


def parse_settings(text: str) -> dict:
    """
    Parse a JSON settings object.

    Raises:
        CliError: INVALID_ARGS if text is not a JSON object
    """
    try:
        settings = json.loads(text)
    except json.JSONDecodeError as e:
        raise CliError(ErrorKind.INVALID_ARGS, f"Invalid settings JSON: {e}") from e
    if not isinstance(settings, dict):
        raise CliError(ErrorKind.INVALID_ARGS, "Settings must be a JSON object")
    return settings


class ApplySettingsCommand(CliCommand):
    """Apply settings given as a JSON object, e.g. '{"allowLAN": true}'."""

    name = "applysettings"
    arity = 1
    usage = "<json>"

    def validate(self, params: List[str]) -> None:
        parse_settings(params[0])

    def build_request(self, snapshot: Snapshot, params: List[str]) -> RpcRequest:
        return RpcRequest(APPLY_SETTINGS, (parse_settings(params[0]), False))
