import re

import numpy as np


_HEX_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}$")


def rotation_z(rad: float) -> np.ndarray:
    """
    Compute rotation matrix for a rotation around the Z-axis.

    Args:
        rad: Rotation angle in radians
    Returns:
        3x3 rotation matrix
    """
    cos_rad = np.cos(rad)
    sin_rad = np.sin(rad)
    return np.array(
        [
            [cos_rad, sin_rad, 0],
            [-sin_rad, cos_rad, 0],
            [0, 0, 1],
        ]
    )


def hex_to_rgb(hex_color: str) -> list[int]:
    """
    Convert a ``#rrggbb`` color string into ``[r, g, b]`` integers.

    Args:
        hex_color: Color string such as ``"#ffc107"``
    Returns:
        List of three integers in [0, 255]
    """
    if not isinstance(hex_color, str) or not _HEX_COLOR_RE.match(hex_color):
        raise ValueError(f"Invalid hex color: {hex_color!r}. Expected '#rrggbb'.")
    return [int(hex_color[i : i + 2], 16) for i in (1, 3, 5)]


def rgba(rgb: list[int], alpha: int) -> dict:
    """Return a CZML color property for the given rgb triple and alpha."""
    return {"rgba": [rgb[0], rgb[1], rgb[2], alpha]}
