"""Inter-satellite link event loader.

Events of one monitoring window arrive as a chronological list of contacts
between a GNSS satellite and a LEO satellite. They are grouped per satellite
pair into runs of contiguous events: two events belong to the same run when
the second starts at most one second after the first one ended.

Input layout::

    {
        "name": "...",
        "interval": "20150411010000-20150411045959",
        "events": [
            {
                "gnss": "G01",
                "leo": "L01",
                "type": 1,
                "position": [["20150411010000", x, y, z], ...],
                "interval": "20150411010000-20150411010010",
            },
            ...
        ],
    }
"""

from __future__ import annotations

import logging
from functools import partial, reduce
from typing import Any, Iterable, List, Mapping, NamedTuple, Optional, Sequence, Tuple

from constants.parameters import ParserParameters
from utilities.exceptions import StructuralParseError
from utilities.frame_transform import ecef_to_eci
from utilities.gnss_data_structures import EventPart, LinkData, LinkEvent
from utilities.time_utils import (
    iso_interval,
    parse_compact_datetime,
    parse_compact_interval,
    to_iso_string,
)

logger = logging.getLogger(__name__)


def is_continuous(
    before: LinkEvent, after: LinkEvent, *, tolerance_s: float = 1.0
) -> bool:
    """Return True if ``after`` continues the run ``before`` belongs to.

    Both events must involve the same satellites, differ in interval, and
    ``after`` must start strictly after ``before`` ends, by no more than
    ``tolerance_s`` seconds.
    """
    if before.gnss != after.gnss or before.leo != after.leo:
        return False
    if before.interval == after.interval:
        return False
    _, before_end = parse_compact_interval(before.interval)
    after_start, _ = parse_compact_interval(after.interval)
    if before_end >= after_start:
        return False
    return (after_start - before_end).total_seconds() <= tolerance_s


def _matches_keywords(gnss: Optional[str], keywords: Sequence[str]) -> bool:
    if not keywords:
        return True
    return any(keyword in (gnss or "") for keyword in keywords)


def _convert_positions(event: LinkEvent, index: int) -> List[list]:
    """Convert ``[yyyymmddHHMMSS, x, y, z]`` rows to inertial ``[iso, x, y, z]``."""
    rows = []
    for row in event.position:
        if len(row) < 4:
            raise StructuralParseError(
                "Event position row has fewer than 4 fields", index, repr(list(row))
            )
        time = parse_compact_datetime(str(row[0]))
        try:
            x, y, z = (float(v) for v in row[1:4])
        except (TypeError, ValueError) as e:
            raise StructuralParseError(
                f"Invalid event position coordinate ({e})", index, repr(list(row))
            ) from e
        pos_eci = ecef_to_eci(time, x, y, z)
        rows.append(
            [to_iso_string(time), float(pos_eci[0]), float(pos_eci[1]), float(pos_eci[2])]
        )
    return rows


class _StitchState(NamedTuple):
    last_event: LinkEvent
    link_data: LinkData
    num_filtered: int = 0


def _stitch_step(
    state: _StitchState,
    indexed_event: Tuple[int, LinkEvent],
    *,
    keywords: Sequence[str],
    tolerance_s: float,
) -> _StitchState:
    index, event = indexed_event
    # Filtered events still become the reference for the next continuity check.
    if not _matches_keywords(event.gnss, keywords):
        return state._replace(last_event=event, num_filtered=state.num_filtered + 1)

    start, end = parse_compact_interval(event.interval)
    part = EventPart(
        type=event.type,
        interval=iso_interval(start, end),
        position=_convert_positions(event, index),
    )
    state.link_data.addEventPart(
        event.pairId,
        part,
        is_continuous(state.last_event, event, tolerance_s=tolerance_s),
    )
    return state._replace(last_event=event)


def load_event_links(
    data: Mapping[str, Any],
    keywords: Optional[Iterable[str]] = None,
    *,
    params: Optional[ParserParameters] = None,
) -> LinkData:
    """Group the events of one window into per pair runs.

    Parameters
    ----------
    data : Mapping
        Window record with ``interval`` and ordered ``events``.
    keywords : Iterable[str], optional
        GNSS id fragments to keep (e.g. ``["G", "C"]``). Events whose GNSS id
        contains none of them are dropped. Empty or ``None`` keeps all.
    params : ParserParameters, optional
        Continuity tolerance.

    Returns
    -------
    LinkData
        Window interval plus runs keyed by ``"<gnss>/<leo>"``.
    """
    params = params or ParserParameters()
    keywords = list(keywords or [])

    if "interval" not in data:
        raise StructuralParseError("Event window record has no interval")
    window_start, window_end = parse_compact_interval(data["interval"])
    result = LinkData(iso_interval(window_start, window_end))

    events = [
        LinkEvent.fromDict(record, index)
        for index, record in enumerate(data.get("events") or [])
    ]
    if not events:
        return result

    step = partial(
        _stitch_step, keywords=keywords, tolerance_s=params.CONTINUITY_TOLERANCE_S
    )
    state = reduce(step, enumerate(events), _StitchState(events[0], result))

    logger.debug(
        "Loaded %d events (%d filtered) into %d pairs for window %s",
        len(events),
        state.num_filtered,
        len(result.runs),
        result.interval,
    )
    return result
