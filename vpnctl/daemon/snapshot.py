"""Read-only view of daemon state.

The daemon pushes its full state on connect and whenever it changes. The
session turns each push into a new Snapshot rather than mutating the old
one, so a command that holds a Snapshot always sees one consistent view.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple

# Sentinel location id meaning "let the daemon pick".
LOCATION_AUTO = "auto"


@dataclass(frozen=True)
class Location:
    """A VPN region known to the daemon."""
    id: str
    display_name: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Location":
        return cls(id=str(data["id"]), display_name=str(data.get("displayName", "")))


@dataclass(frozen=True)
class Snapshot:
    """Daemon settings and locations as observed at one point in time."""
    settings: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    locations: Tuple[Location, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Snapshot":
        """
        Build a Snapshot from the payload of a daemon state message.

        Raises:
            AttributeError, KeyError, TypeError: If the payload is malformed
        """
        settings = dict(data.get("settings") or {})
        locations = tuple(Location.from_dict(loc) for loc in data.get("locations") or [])
        return cls(settings=MappingProxyType(settings), locations=locations)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "settings": dict(self.settings),
            "locations": [
                {"id": loc.id, "displayName": loc.display_name} for loc in self.locations
            ],
        }
