"""Earth-fixed (ECEF) to inertial (ECI) conversion for visualization.

Only the Earth rotation about the polar axis is applied: the inertial frame is
obtained by rotating the Earth-fixed coordinates by the Greenwich mean sidereal
angle. Precession, nutation and polar motion are ignored.
"""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

import numpy as np
import pandas as pd

from constants.common_utils import rotation_z
from utilities.time_utils import gmst_rad


def rotate_about_polar_axis(position: Sequence[float], angle_rad: float) -> np.ndarray:
    """Rotate ``position`` by ``angle_rad`` about the Z-axis.

    [X]     [C -S  0][X]
    [Y]  =  [S  C  0][Y]
    [Z]eci  [0  0  1][Z]ecef
    """
    pos = np.asarray(position, dtype=float)
    # rotation_z is the frame (passive) rotation, its inverse rotates the vector.
    rotated = rotation_z(-angle_rad) @ pos
    # Keep the polar component bit-exact.
    rotated[2] = pos[2]
    return rotated


def ecef_to_eci(
    time: pd.Timestamp | datetime, x: float, y: float, z: float
) -> np.ndarray:
    """Convert one Earth-fixed position sampled at ``time`` to the inertial frame.

    Args:
        time: UTC instant of the sample
        x, y, z: Earth-fixed coordinates (any length unit)
    Returns:
        Inertial coordinates (3,) in the same unit
    """
    return rotate_about_polar_axis((x, y, z), gmst_rad(time))
