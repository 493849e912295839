"""CZML packets for satellites decoded from SP3 orbits."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Union

import pandas as pd

from constants.common_utils import hex_to_rgb, rgba
from constants.gnss_constants import constellation_from_sat_id, orbit_period_s
from constants.parameters import STYLE, OrbitViewParameters
from utilities.gnss_data_structures import OrbitData
from utilities.time_utils import format_time, iso_interval
from visualization.czml_utils import inertial_position_block, interval_show, label_block

logger = logging.getLogger(__name__)


def _keep_satellite(sat_id: str, keywords: Optional[Sequence[str]]) -> bool:
    if not keywords:
        return True
    return any(keyword in sat_id for keyword in keywords)


def _satellite_packet(
    sat_id: str,
    track: list,
    view: OrbitViewParameters,
    interval: str,
    description: str,
) -> dict:
    constellation = constellation_from_sat_id(sat_id)
    is_gnss = constellation is not None
    if is_gnss:
        rgb = hex_to_rgb(view.gnss_color[constellation])
        scale, alpha = STYLE.GNSS_SCALE, STYLE.GNSS_ALPHA
    else:
        rgb = hex_to_rgb(view.leo_color)
        scale, alpha = STYLE.LEO_SCALE, STYLE.LEO_ALPHA

    packet = {
        "id": sat_id,
        "name": "satellite",
        "availability": interval,
        "description": description,
    }
    if is_gnss:
        packet["point"] = {
            "pixelSize": STYLE.POINT_PIXEL_SIZE * scale,
            "color": rgba(rgb, alpha),
            "show": True,
        }
    else:
        packet["billboard"] = {
            "eyeOffset": {"cartesian": [0, 0, 0]},
            "horizontalOrigin": "CENTER",
            "image": view.leo_billboard,
            "pixelOffset": {"cartesian2": [0, 0]},
            "scale": STYLE.BILLBOARD_SCALE * scale,
            "show": True,
            "verticalOrigin": "CENTER",
        }
    packet["label"] = label_block(sat_id, rgb, alpha, STYLE.LABEL_SCALE * scale, True)

    if is_gnss:
        packet["path"] = {
            "show": [interval_show(interval, view.mode != "2D")],
            "width": STYLE.PATH_WIDTH,
            "material": {"solidColor": {"color": rgba(rgb, alpha)}},
            "leadTime": 0,
            "trailTime": orbit_period_s(sat_id),
            "resolution": STYLE.PATH_RESOLUTION,
        }

    packet["position"] = inertial_position_block(
        list(track), epoch=interval.split("/")[0]
    )
    return packet


def sp3_to_czml(
    orbits: Union[OrbitData, Iterable[OrbitData]],
    view: OrbitViewParameters,
    start: pd.Timestamp | datetime | str,
    end: pd.Timestamp | datetime | str,
    keywords: Optional[Sequence[str]] = None,
) -> List[dict]:
    """Build one CZML packet per satellite.

    GNSS satellites (id prefix G/C/E/R) are drawn as colored points with a
    trailing orbit path, every other satellite as a billboard icon.

    Args:
        orbits: One or several parsed SP3 files
        view: Colors, billboard image and display mode
        start, end: Display interval, also the availability of every packet
        keywords: Keep only satellites whose id contains one of these
    Returns:
        List of CZML packets
    """
    if isinstance(orbits, OrbitData):
        orbits = [orbits]
    start, end = pd.Timestamp(start), pd.Timestamp(end)
    interval = iso_interval(start, end)
    time_range = f"{format_time(start)}->{format_time(end)}"

    packets = []
    for orbit in orbits:
        for sat_id, track in orbit.tracks.items():
            if not _keep_satellite(sat_id, keywords):
                continue
            packets.append(
                _satellite_packet(
                    sat_id, track, view, interval, f"{sat_id}\r\n{time_range}"
                )
            )

    logger.debug("Built %d satellite packets for %s", len(packets), interval)
    return packets
