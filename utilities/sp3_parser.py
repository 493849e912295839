"""SP3 precise orbit parser.

Only what the viewer needs is decoded: the epoch lines (``*``) and the
position records (``P``). Velocity records (``V``) are skipped and
header content is ignored apart from locating the first epoch. Every position
is converted from the Earth-fixed frame to the inertial frame at its epoch and
scaled from kilometers to meters.

``parse_sp3`` works on text already in memory. ``parse_sp3_file`` is a thin
helper reading a file from disk first.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Tuple

import pandas as pd

from constants.parameters import ParserParameters
from utilities.exceptions import (
    MalformedEpochError,
    MissingHeaderError,
    StructuralParseError,
)
from utilities.frame_transform import ecef_to_eci
from utilities.gnss_data_structures import OrbitData
from utilities.time_utils import iso_interval, to_iso_string

logger = logging.getLogger(__name__)

_EPOCH_MARKER = "*"
_POSITION_MARKER = "P"
_VELOCITY_MARKER = "V"
_EOF_MARKER = "EOF"


def _find_first_epoch(lines: List[str], params: ParserParameters) -> int:
    """Return the index of the first epoch line."""
    for i, line in enumerate(lines):
        if i > params.HEADER_SCAN_LINE_LIMIT:
            raise MissingHeaderError(
                f"No epoch line within the first {params.HEADER_SCAN_LINE_LIMIT} lines",
                i,
                line,
            )
        if _EOF_MARKER in line:
            raise MissingHeaderError("End marker found before the first epoch line", i, line)
        if line.startswith(_EPOCH_MARKER):
            return i
    raise MissingHeaderError("No epoch line found", len(lines))


def _parse_epoch_line(line: str, index: int, use_seconds: bool = False) -> pd.Timestamp:
    """Parse ``*  yyyy mm dd HH MM SS.ssss``. Seconds are dropped unless ``use_seconds``."""
    parts = line.lstrip(_EPOCH_MARKER).split()
    if len(parts) < 5:
        raise MalformedEpochError("Epoch line has fewer than 5 date fields", index, line)
    try:
        year, month, day, hour, minute = map(int, parts[:5])
        ts = pd.Timestamp(year=year, month=month, day=day, hour=hour, minute=minute)
        if use_seconds and len(parts) > 5:
            ts += pd.Timedelta(seconds=float(parts[5]))
        return ts
    except ValueError as e:
        raise MalformedEpochError(f"Invalid epoch date ({e})", index, line) from e


def _parse_coordinates(parts: List[str], index: int, line: str) -> Tuple[float, float, float]:
    if len(parts) < 4:
        raise StructuralParseError("Position record has fewer than 3 coordinates", index, line)
    try:
        coords = tuple(float(v) for v in parts[1:4])
    except ValueError as e:
        raise StructuralParseError(f"Invalid position coordinate ({e})", index, line) from e
    if not all(math.isfinite(v) for v in coords):
        raise StructuralParseError("Non finite position coordinate", index, line)
    return coords


def parse_sp3(
    text: str,
    keyword: Optional[str] = None,
    *,
    params: Optional[ParserParameters] = None,
) -> OrbitData:
    """Parse SP3 text into inertial satellite tracks.

    Parameters
    ----------
    text : str
        Full content of the SP3 file.
    keyword : str, optional
        Keep only position records whose token contains this fragment, e.g.
        ``"G"`` for GPS or ``"L"`` for LEO. ``"P"`` (the default when empty)
        keeps every satellite. The satellite id is the record token without
        its leading ``P`` (``PG01`` -> ``G01``).
    params : ParserParameters, optional
        Scan limit and unit scale.

    Returns
    -------
    OrbitData
        Tracks keyed by satellite id with ``interval`` set to
        ``first epoch/last epoch``.

    Raises
    ------
    MissingHeaderError
        No epoch line before the end marker or within the scan limit.
    MalformedEpochError
        An epoch line with missing or invalid date fields.
    StructuralParseError
        A bad position record or a file without end marker.
    """
    params = params or ParserParameters()
    if not keyword:
        keyword = params.DEFAULT_KEYWORD
    scale = params.POSITION_SCALE

    lines = text.splitlines()
    first_index = _find_first_epoch(lines, params)

    result = OrbitData()
    start: Optional[pd.Timestamp] = None
    epoch: Optional[pd.Timestamp] = None
    epoch_iso = ""
    num_epochs = 0

    for i in range(first_index, len(lines)):
        line = lines[i]
        parts = line.split()
        if not parts:
            continue
        token = parts[0]

        if token.startswith(_EPOCH_MARKER):
            epoch = _parse_epoch_line(line, i, params.USE_EPOCH_SECONDS)
            epoch_iso = to_iso_string(epoch)
            if start is None:
                start = epoch
            num_epochs += 1
            continue

        if _EOF_MARKER in token:
            result.interval = iso_interval(start, epoch)
            logger.debug(
                "Parsed SP3: %d epochs, %d satellites, interval %s",
                num_epochs,
                len(result.tracks),
                result.interval,
            )
            return result

        if token.startswith(_VELOCITY_MARKER):
            continue

        if token.startswith(_POSITION_MARKER) and keyword in token:
            sat_id = token[len(_POSITION_MARKER) :]
            if not sat_id:
                raise StructuralParseError("Position record without satellite id", i, line)
            x, y, z = _parse_coordinates(parts, i, line)
            pos_eci = ecef_to_eci(epoch, x, y, z)
            result.addSample(
                sat_id,
                epoch_iso,
                float(pos_eci[0] * scale),
                float(pos_eci[1] * scale),
                float(pos_eci[2] * scale),
            )

    raise StructuralParseError(f"Missing {_EOF_MARKER} marker, file is truncated", len(lines))


def parse_sp3_file(file_path: str, keyword: Optional[str] = None, **kwargs) -> OrbitData:
    """Read an SP3 file and parse it with :func:`parse_sp3`."""
    with open(file_path, "r") as f:
        return parse_sp3(f.read(), keyword, **kwargs)
