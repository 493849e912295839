"""CZML packets for inter-satellite link events."""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from constants.common_utils import hex_to_rgb, rgba
from constants.parameters import STYLE, LinkViewParameters
from utilities.gnss_data_structures import EventRun, LinkData
from utilities.time_utils import iso_interval, parse_iso_interval
from visualization.czml_utils import (
    copy_schedule,
    inertial_position_block,
    interval_show,
    label_block,
)

logger = logging.getLogger(__name__)


def compute_show_and_availability(
    runs: List[EventRun], window: str
) -> Tuple[List[dict], List[str]]:
    """Visibility schedule of one satellite pair over ``window``.

    The schedule alternates hidden spans (before, between and after runs) and
    visible spans (first event start to last event end of each run) and tiles
    the whole window. Run spans are clipped to the window and runs entirely
    outside it are skipped. The availability lists the visible spans only.
    """
    window_start, window_end = parse_iso_interval(window)
    if not runs:
        return [interval_show(window, False)], []

    show = []
    availability = []
    cursor = window_start
    for run in runs:
        run_start = parse_iso_interval(run[0].interval)[0]
        run_end = parse_iso_interval(run[-1].interval)[1]
        if run_end < window_start or run_start > window_end:
            continue
        run_start = min(max(run_start, cursor), window_end)
        run_end = min(max(run_end, run_start), window_end)

        visible = iso_interval(run_start, run_end)
        show.append(interval_show(iso_interval(cursor, run_start), False))
        show.append(interval_show(visible, True))
        availability.append(visible)
        cursor = run_end

    show.append(interval_show(iso_interval(cursor, window_end), False))
    return show, availability


def flatten_event_positions(runs: List[EventRun]) -> list:
    """``[time, x, y, z, ...]`` over every event of every run, in order."""
    positions = []
    for run in runs:
        for part in run:
            for row in part.position:
                positions.extend(row[:4])
    return positions


def _link_style(view: LinkViewParameters) -> Tuple[float, int]:
    if view.event_link == "dash":
        return STYLE.LINK_DASH_WIDTH, STYLE.LINK_DASH_ALPHA
    return STYLE.LINK_SOLID_WIDTH, STYLE.LINK_SOLID_ALPHA


def event_to_czml(
    data: LinkData, view: LinkViewParameters, leo_id: Optional[str] = None
) -> List[dict]:
    """Build one CZML packet per satellite pair.

    The packet draws a line between the live positions of the two satellites
    (referenced by ``<id>#position``) while a run is active. ``leo_id``
    replaces the LEO end of every line, e.g. when the LEO packet in the scene
    uses another id than the event records.
    """
    rgb = hex_to_rgb(view.event_color)
    width, alpha = _link_style(view)

    packets = []
    for pair_id, runs in data.runs.items():
        gnss, leo = pair_id.split("/", 1)
        references = [f"{gnss}#position", f"{leo_id or leo}#position"]
        show, availability = compute_show_and_availability(runs, data.interval)

        packet = {
            "id": f"{pair_id}/{data.interval}",
            "name": pair_id,
            "parent": data.interval,
            "description": f"<p>GNSS:{gnss} LEO:{leo}",
            "availability": availability,
            "polyline": {
                # No 3D connecting line in a 2D projection.
                "show": False if view.mode == "2D" else copy_schedule(show),
                "width": width,
                "material": {"solidColor": {"color": rgba(rgb, alpha)}},
                "followSurface": False,
                "positions": {"references": references},
            },
            "point": {
                "pixelSize": STYLE.EVENT_POINT_PIXEL_SIZE,
                "color": rgba(rgb, alpha),
                "show": copy_schedule(show),
            },
            "position": inertial_position_block(flatten_event_positions(runs)),
        }
        if view.label:
            packet["label"] = label_block(
                gnss, rgb, alpha, STYLE.EVENT_LABEL_SCALE, copy_schedule(show)
            )
        packets.append(packet)

    logger.debug("Built %d link packets for %s", len(packets), data.interval)
    return packets
