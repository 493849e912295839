from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pandas as pd

from constants.gnss_constants import Constellation
from utilities.exceptions import StructuralParseError

__all__ = [
    "Constellation",
    "LinkEvent",
    "EventPart",
    "EventRun",
    "OrbitData",
    "LinkData",
]

# Number of values stored per epoch in a flat satellite track: time, x, y, z
TRACK_STRIDE = 4


@dataclass(frozen=True)
class LinkEvent:
    """One contact record between a GNSS and a LEO satellite.

    ``interval`` uses the compact ``yyyymmddHHMMSS-yyyymmddHHMMSS`` form and
    each ``position`` row is ``[yyyymmddHHMMSS, x, y, z]`` in the Earth-fixed
    frame.
    """

    gnss: Optional[str]
    leo: Optional[str]
    type: Any
    position: Tuple[Tuple[Any, ...], ...]
    interval: str

    @property
    def pairId(self) -> str:
        return f"{self.gnss}/{self.leo}"

    @classmethod
    def fromDict(cls, record: Mapping[str, Any], index: Optional[int] = None):
        """Build from a raw event record (``gnss``, ``leo``, ``type``, ...)."""
        if isinstance(record, LinkEvent):
            return record
        missing = [key for key in ("type", "position", "interval") if key not in record]
        if missing:
            raise StructuralParseError(
                f"Event record is missing field(s) {', '.join(missing)}",
                index,
                repr(dict(record)),
            )
        return cls(
            gnss=record.get("gnss"),
            leo=record.get("leo"),
            type=record["type"],
            position=tuple(tuple(row) for row in record["position"]),
            interval=record["interval"],
        )


@dataclass
class EventPart:
    """A LinkEvent after time and frame conversion."""

    type: Any
    interval: str  # ISO 8601 start/end
    position: List[list] = field(default_factory=list)  # [iso, x, y, z] rows (ECI)

    def toDict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "interval": self.interval,
            "position": [list(row) for row in self.position],
        }


# Temporally contiguous events of one satellite pair
EventRun = List[EventPart]


class OrbitData:
    """
    Per satellite inertial tracks decoded from one SP3 file.

    Each track is a flat list ``[iso, x, y, z, iso, x, y, z, ...]`` with one
    group of four values per epoch, time ascending, in meters. This layout is
    the ``cartesian`` array expected by the viewer and is kept as is.
    """

    def __init__(self, interval: str = ""):
        self.interval = interval  # ISO 8601 "first epoch/last epoch"
        # key: satellite id (e.g. "G01"), value: flat track list
        self.tracks: Dict[str, list] = {}

    def addSample(self, sat_id: str, time_iso: str, x: float, y: float, z: float) -> None:
        """Append one epoch to the track of ``sat_id``."""
        self.tracks.setdefault(sat_id, []).extend((time_iso, x, y, z))

    def satelliteIds(self) -> List[str]:
        return list(self.tracks.keys())

    def numEpochs(self, sat_id: str) -> int:
        return len(self.tracks.get(sat_id, ())) // TRACK_STRIDE

    def toDict(self) -> Dict[str, Any]:
        """Flat mapping ``{"interval": ..., "<sat id>": [...]}``."""
        out: Dict[str, Any] = {"interval": self.interval}
        out.update({sat_id: list(track) for sat_id, track in self.tracks.items()})
        return out

    def toDataFrame(self) -> pd.DataFrame:
        """Long form table with columns ``sat_id, time, x_m, y_m, z_m``."""
        rows = []
        for sat_id, track in self.tracks.items():
            for i in range(0, len(track), TRACK_STRIDE):
                time_iso, x, y, z = track[i : i + TRACK_STRIDE]
                rows.append((sat_id, pd.Timestamp(time_iso), x, y, z))
        return pd.DataFrame(rows, columns=["sat_id", "time", "x_m", "y_m", "z_m"])

    def __repr__(self):
        return f"OrbitData(interval={self.interval!r}, satellites={len(self.tracks)})"


class LinkData:
    """
    Link events of one monitoring window grouped into runs.

    ``runs`` maps the pair id ``"<gnss>/<leo>"`` to a list of runs, each run a
    list of :class:`EventPart` that are contiguous in time.
    """

    def __init__(self, interval: str = ""):
        self.interval = interval  # ISO 8601 window "start/end"
        self.runs: Dict[str, List[EventRun]] = {}

    def addEventPart(self, pair_id: str, part: EventPart, continuous: bool) -> None:
        """Append ``part`` to the last run of ``pair_id`` or open a new run."""
        pair_runs = self.runs.setdefault(pair_id, [])
        if continuous and pair_runs:
            pair_runs[-1].append(part)
        else:
            pair_runs.append([part])

    def pairIds(self) -> List[str]:
        return list(self.runs.keys())

    def toDict(self) -> Dict[str, Any]:
        """Mapping ``{"interval": ..., "<gnss>/<leo>": [[part, ...], ...]}``."""
        out: Dict[str, Any] = {"interval": self.interval}
        for pair_id, pair_runs in self.runs.items():
            out[pair_id] = [[part.toDict() for part in run] for run in pair_runs]
        return out

    def __repr__(self):
        return f"LinkData(interval={self.interval!r}, pairs={len(self.runs)})"
