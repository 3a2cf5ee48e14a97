"""Load sample points from PLY or E57 files into a NumPy (N, 3) array.

Supported formats
-----------------
* **PLY** – via the ``plyfile`` library (``vertex`` element, x/y/z).
* **E57** – via the ``pye57`` library (``cartesianX/Y/Z`` of one scan).
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import pye57
from plyfile import PlyData

logger = logging.getLogger(__name__)


def load_ply(path: str | Path) -> np.ndarray:
    """Read the vertex positions of a binary or ASCII PLY file."""
    ply = PlyData.read(str(path))
    vertex = ply["vertex"]
    positions = np.column_stack(
        [np.asarray(vertex[axis], dtype=np.float64) for axis in ("x", "y", "z")]
    )
    logger.info("Loaded %d points from PLY %s", len(positions), Path(path).name)
    return positions


def load_e57(path: str | Path, scan_index: int = 0) -> np.ndarray:
    """Read the cartesian coordinates of scan *scan_index* from an E57 file."""
    e57 = pye57.E57(str(path))
    try:
        raw = e57.read_scan_raw(scan_index)
        positions = np.column_stack(
            [np.asarray(raw[key], dtype=np.float64) for key in ("cartesianX", "cartesianY", "cartesianZ")]
        )
    finally:
        e57.close()
    logger.info("Loaded %d points from E57 %s (scan %d)", len(positions), Path(path).name, scan_index)
    return positions


def load_points(path: str | Path) -> np.ndarray:
    """Auto-detect the format of *path* and return its (N, 3) positions.

    Raises ``ValueError`` for unsupported extensions.
    """
    p = Path(path)
    ext = p.suffix.lower()
    if ext == ".ply":
        return load_ply(p)
    if ext == ".e57":
        return load_e57(p)
    raise ValueError(
        f"Unsupported point file format '{ext}'. Supported: .ply, .e57"
    )
