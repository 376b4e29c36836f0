"""
Metaball scalar field.

Each blob contributes r² / d² at a query point, with the horizontal
distance divided by the character-cell aspect ratio.  The field is the
plain sum of all contributions; it is never stored, only sampled.

All functions accept either scalar coordinates or numpy arrays, so the
renderer can evaluate a whole grid in one call.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence, Union

import numpy as np

Coord = Union[float, np.ndarray]

# Terminal cells are roughly twice as tall as they are wide.
ASPECT_RATIO = 2.0

# Squared distance below which a point counts as sitting on the blob centre.
SINGULARITY_EPSILON = 1e-4
SINGULARITY_VALUE = 1000.0


# ---------------------------------------------------------------------------
# Blob
# ---------------------------------------------------------------------------

@dataclass
class Blob:
    """A single influence source in grid space."""
    x: float = 0.0
    y: float = 0.0
    radius: float = 1.0


# ---------------------------------------------------------------------------
# Field evaluation
# ---------------------------------------------------------------------------

def influence_at(
    blob: Blob,
    x: Coord,
    y: Coord,
    aspect_ratio: float = ASPECT_RATIO,
) -> Coord:
    """Contribution of one blob at (x, y).

    Returns ``SINGULARITY_VALUE`` where the aspect-corrected squared
    distance falls below ``SINGULARITY_EPSILON``, otherwise
    ``radius² / dist²``.  Scalar input gives a float back.
    """
    dx = (np.asarray(x, dtype=np.float64) - blob.x) / aspect_ratio
    dy = np.asarray(y, dtype=np.float64) - blob.y
    dist_sq = dx * dx + dy * dy
    near = dist_sq < SINGULARITY_EPSILON

    r2 = blob.radius * blob.radius
    value = np.where(near, SINGULARITY_VALUE, r2 / np.where(near, 1.0, dist_sq))
    if value.ndim == 0:
        return float(value)
    return value


def field_at(
    blobs: Iterable[Blob],
    x: Coord,
    y: Coord,
    aspect_ratio: float = ASPECT_RATIO,
) -> Coord:
    """Sum of every blob's influence at (x, y), added in list order."""
    total: Coord = 0.0
    for b in blobs:
        total = total + influence_at(b, x, y, aspect_ratio)
    return total


def sample_grid(
    blobs: Sequence[Blob],
    width: int,
    height: int,
    aspect_ratio: float = ASPECT_RATIO,
    dx: float = 0.0,
    dy: float = 0.0,
) -> np.ndarray:
    """Evaluate the field on integer corners → (height+1, width+1) array.

    ``dx``/``dy`` shift every sample point, which is how the sub-pixel
    passes reuse this function.
    """
    ys = np.arange(height + 1, dtype=np.float64) + dy
    xs = np.arange(width + 1, dtype=np.float64) + dx
    y_grid, x_grid = np.meshgrid(ys, xs, indexing="ij")
    grid = field_at(blobs, x_grid, y_grid, aspect_ratio)
    if np.ndim(grid) == 0:
        # no blobs at all
        return np.zeros((height + 1, width + 1), dtype=np.float64)
    return grid
