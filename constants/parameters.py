from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from constants.gnss_constants import Constellation
from constants.common_utils import hex_to_rgb


DISPLAY_MODES = ("2D", "3D")
LINK_STYLES = ("solid", "dash")


@dataclass(frozen=True)
class ParserParameters:
    HEADER_SCAN_LINE_LIMIT: int = 100  # Maximum lines skipped before the first epoch
    POSITION_SCALE: float = 1000.0  # SP3 positions are in km, output in meters
    CONTINUITY_TOLERANCE_S: float = (
        1.0  # Maximum gap in seconds between two events of the same run
    )
    DEFAULT_KEYWORD: str = "P"  # SP3 position record identifier
    USE_EPOCH_SECONDS: bool = False  # Epoch seconds are ignored unless enabled


@dataclass(frozen=True)
class StyleConstants:
    # Point/label scale and alpha for GNSS satellites
    GNSS_SCALE: float = 0.5
    GNSS_ALPHA: int = 128

    # Billboard/label scale and alpha for LEO satellites
    LEO_SCALE: float = 1.0
    LEO_ALPHA: int = 200

    POINT_PIXEL_SIZE: float = 10.0
    BILLBOARD_SCALE: float = 0.05
    LABEL_SCALE: float = 2.0
    LABEL_FONT: str = "11pt Lucida Console"

    PATH_WIDTH: float = 0.5
    PATH_RESOLUTION: int = 240

    # Event link line appearance
    LINK_SOLID_WIDTH: float = 0.8
    LINK_SOLID_ALPHA: int = 255
    LINK_DASH_WIDTH: float = 0.3
    LINK_DASH_ALPHA: int = 160
    EVENT_POINT_PIXEL_SIZE: float = 8.0
    EVENT_LABEL_SCALE: float = 0.5


STYLE = StyleConstants()


def _check_mode(mode: str) -> str:
    if mode not in DISPLAY_MODES:
        raise ValueError(f"Unsupported display mode {mode!r}. Must be one of {DISPLAY_MODES}.")
    return mode


@dataclass
class OrbitViewParameters:
    """Appearance of the satellites synthesized from SP3 orbits."""

    leo_color: str = "#00bcd4"
    leo_billboard: str = "satellite.png"
    gnss_color: dict[Constellation, str] = field(
        default_factory=lambda: {
            Constellation.GPS: "#2196f3",
            Constellation.BDS: "#f44336",
            Constellation.GAL: "#4caf50",
            Constellation.GLO: "#ff9800",
        }
    )
    mode: str = "3D"

    def __post_init__(self):
        _check_mode(self.mode)
        hex_to_rgb(self.leo_color)
        for const in Constellation:
            if const not in self.gnss_color:
                raise ValueError(f"Missing color for constellation {const.name}")
            hex_to_rgb(self.gnss_color[const])

    @classmethod
    def fromDict(cls, data: Mapping[str, Any]) -> "OrbitViewParameters":
        """Build from the viewer option layout (``leoColor``, ``gnssColor``...)."""
        defaults = cls()
        gnss_color = dict(defaults.gnss_color)
        for name, color in (data.get("gnssColor") or {}).items():
            try:
                gnss_color[Constellation[name]] = color
            except KeyError:
                raise ValueError(f"Unknown constellation {name!r} in gnssColor") from None
        return cls(
            leo_color=data.get("leoColor", defaults.leo_color),
            leo_billboard=data.get("leoBillboard", defaults.leo_billboard),
            gnss_color=gnss_color,
            mode=data.get("mode", defaults.mode),
        )


@dataclass
class LinkViewParameters:
    """Appearance of the inter-satellite link events."""

    event_color: str = "#ffc107"
    event_link: str = "solid"
    mode: str = "3D"
    label: bool = False

    def __post_init__(self):
        _check_mode(self.mode)
        if self.event_link not in LINK_STYLES:
            raise ValueError(
                f"Unsupported link style {self.event_link!r}. Must be one of {LINK_STYLES}."
            )
        hex_to_rgb(self.event_color)

    @classmethod
    def fromDict(cls, data: Mapping[str, Any]) -> "LinkViewParameters":
        """Build from the viewer option layout (``eventColor``, ``eventLink``...)."""
        defaults = cls()
        return cls(
            event_color=data.get("eventColor", defaults.event_color),
            event_link=data.get("eventLink", defaults.event_link),
            mode=data.get("mode", defaults.mode),
            label=bool(data.get("label", defaults.label)),
        )
