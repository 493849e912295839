"""Structured logging utilities for summarizing decoded orbit and link data."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from constants.gnss_constants import constellation_from_sat_id
from utilities.gnss_data_structures import TRACK_STRIDE, LinkData, OrbitData


@dataclass
class SatelliteDebugRecord:
    sat_id: str
    constellation: str
    num_epochs: int
    first_time: Optional[str] = None
    last_time: Optional[str] = None


@dataclass
class PairDebugRecord:
    pair_id: str
    num_runs: int
    num_events: int
    longest_run: int


def _fmt(value: Optional[str]) -> str:
    return value if value is not None else "-"


def orbit_debug_records(orbit: OrbitData) -> List[SatelliteDebugRecord]:
    records = []
    for sat_id, track in orbit.tracks.items():
        constellation = constellation_from_sat_id(sat_id)
        records.append(
            SatelliteDebugRecord(
                sat_id=sat_id,
                constellation=constellation.name if constellation else "LEO",
                num_epochs=orbit.numEpochs(sat_id),
                first_time=track[0] if track else None,
                last_time=track[-TRACK_STRIDE] if len(track) >= TRACK_STRIDE else None,
            )
        )
    return records


def link_debug_records(links: LinkData) -> List[PairDebugRecord]:
    return [
        PairDebugRecord(
            pair_id=pair_id,
            num_runs=len(runs),
            num_events=sum(len(run) for run in runs),
            longest_run=max((len(run) for run in runs), default=0),
        )
        for pair_id, runs in links.runs.items()
    ]


def log_orbit_summary(logger: logging.Logger, orbit: OrbitData) -> None:
    """Emit one line per satellite track of ``orbit``."""

    if logger is None or not logger.isEnabledFor(logging.INFO):
        return

    logger.info(
        "SP3 %s | %d satellites", orbit.interval, len(orbit.tracks)
    )
    for rec in orbit_debug_records(orbit):
        logger.info(
            "    %s %s | epochs=%d first=%s last=%s",
            rec.sat_id,
            rec.constellation,
            rec.num_epochs,
            _fmt(rec.first_time),
            _fmt(rec.last_time),
        )


def log_link_summary(logger: logging.Logger, links: LinkData) -> None:
    """Emit one line per satellite pair of ``links``."""

    if logger is None or not logger.isEnabledFor(logging.INFO):
        return

    logger.info("Events %s | %d pairs", links.interval, len(links.runs))
    for rec in link_debug_records(links):
        logger.info(
            "    %s | runs=%d events=%d longest_run=%d",
            rec.pair_id,
            rec.num_runs,
            rec.num_events,
            rec.longest_run,
        )
