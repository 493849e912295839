"""Shared CZML packet builders."""

from __future__ import annotations

from typing import Iterable, List, Optional

from constants.common_utils import rgba
from constants.parameters import STYLE

CZML_VERSION = "1.0"


def interval_show(interval: str, visible: bool) -> dict:
    """One entry of an interval based boolean property."""
    return {"interval": interval, "boolean": visible}


def copy_schedule(schedule: List[dict]) -> List[dict]:
    return [dict(entry) for entry in schedule]


def label_block(
    text: str,
    rgb: List[int],
    alpha: int,
    scale: float,
    show,
) -> dict:
    """Label drawn to the right of an entity, filled with its color."""
    return {
        "fillColor": rgba(rgb, alpha),
        "font": STYLE.LABEL_FONT,
        "horizontalOrigin": "LEFT",
        "outlineColor": rgba([255, 255, 255], alpha),
        "outlineWidth": 0.5,
        "pixelOffset": {"cartesian2": [12, 0]},
        "scale": scale,
        "show": show,
        "style": "FILL_AND_OUTLINE",
        "text": text,
        "verticalOrigin": "CENTER",
    }


def inertial_position_block(cartesian: list, epoch: Optional[str] = None) -> dict:
    """Time tagged inertial position sampled as ``[time, x, y, z, ...]``."""
    block = {
        "interpolationAlgorithm": "LAGRANGE",
        "interpolationDegree": 2,
        "referenceFrame": "INERTIAL",
    }
    if epoch is not None:
        block["epoch"] = epoch
    block["cartesian"] = cartesian
    return block


def czml_document_packet(name: str, interval: str, multiplier: float = 1) -> dict:
    """The leading ``document`` packet with a clock looping over ``interval``."""
    return {
        "id": "document",
        "name": name,
        "version": CZML_VERSION,
        "clock": {
            "interval": interval,
            "currentTime": interval.split("/")[0],
            "multiplier": multiplier,
            "range": "LOOP_STOP",
            "step": "SYSTEM_CLOCK_MULTIPLIER",
        },
    }


def build_czml_document(
    packets: Iterable[dict], name: str, interval: str, multiplier: float = 1
) -> List[dict]:
    """Prepend a document packet so the packets load as a standalone CZML."""
    return [czml_document_packet(name, interval, multiplier), *packets]
