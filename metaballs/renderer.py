"""
Metaball renderer — numpy-vectorised field quantisation to text.

The field is sampled once per frame on integer corners (one extra row
and column for neighbour lookups), each style turns samples into glyph
indices, and the indices are joined into a newline-terminated frame.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from .engine import RenderStyle
from .glyphs import GlyphSet, get_glyphs

if TYPE_CHECKING:
    from .engine import MetaballScene

logger = logging.getLogger(__name__)

GOOEY_BANDS = (0.3, 0.6, 0.9, 1.0, 1.3, 2.0)


# ---------------------------------------------------------------------------
# Per-style glyph index maps
# ---------------------------------------------------------------------------

def gradient_indices(field: np.ndarray, threshold: float, ramp_len: int = 10) -> np.ndarray:
    """Lower half of the ramp below threshold, upper half above.

    Excess above threshold saturates at 3.0, and both halves are clamped,
    so arbitrarily large values still land on the last glyph.
    """
    mid = ramp_len // 2
    top = ramp_len - 1

    above = field >= threshold
    excess = np.minimum(field - threshold, 3.0) / 3.0
    hi = np.minimum(mid + (excess * (top - mid)).astype(np.intp), top)
    # cap before the cast so inf never reaches astype
    below = np.minimum(field, threshold) / threshold * mid
    lo = np.minimum(below.astype(np.intp), mid - 1)

    idx = np.where(above, hi, lo)
    return np.where(field < threshold * 0.1, 0, idx)


def edge_mask(inside: np.ndarray) -> np.ndarray:
    """True where any 4-neighbour has a different inside/outside state.

    Neighbours past the array border are skipped, not wrapped.
    """
    edge = np.zeros(inside.shape, dtype=bool)
    vertical = inside[1:, :] != inside[:-1, :]
    horizontal = inside[:, 1:] != inside[:, :-1]
    edge[1:, :] |= vertical      # differs from the cell above
    edge[:-1, :] |= vertical     # differs from the cell below
    edge[:, 1:] |= horizontal    # left
    edge[:, :-1] |= horizontal   # right
    return edge


def contour_indices(grid: np.ndarray, threshold: float, height: int, width: int) -> np.ndarray:
    """Outline cells using the full corner grid for neighbour lookups."""
    inside = grid >= threshold
    edge = edge_mask(inside)[:height, :width]
    field = grid[:height, :width]
    inside = inside[:height, :width]

    edge_idx = np.select(
        [field > threshold * 1.5, field > threshold * 1.2],
        [4, 3],
        default=2,
    )
    return np.where(edge, edge_idx, np.where(inside, 1, 0))


def solid_indices(field: np.ndarray, threshold: float) -> np.ndarray:
    return np.select(
        [field > threshold * 3.0, field > threshold * 2.0, field >= threshold],
        [3, 2, 1],
        default=0,
    )


def blocks_indices(
    field: np.ndarray,
    coverage: np.ndarray,
    samples: int,
    threshold: float,
) -> np.ndarray:
    """Shade by how many sub-samples are inside.

    Full coverage is split once more by raw magnitude so the solid block
    only shows in the dense core.
    """
    idx = (coverage * 4) // samples
    full = np.where(field > threshold * 2.0, 4, 3)
    return np.where(coverage >= samples, full, np.minimum(idx, 3))


def subpixel_coverage(scene: "MetaballScene", grid: np.ndarray) -> np.ndarray:
    """Count of sub-samples at or above threshold for each visible cell."""
    c = scene.config
    count = np.zeros((c.height, c.width), dtype=np.intp)
    for dy in c.subpixel_offsets:
        for dx in c.subpixel_offsets:
            if dx == 0.0 and dy == 0.0:
                sub = grid
            else:
                sub = scene.sample_grid(dx, dy)
            count += sub[:c.height, :c.width] >= c.threshold
    return count


def gooey_indices(field: np.ndarray, threshold: float) -> np.ndarray:
    bands = np.array(GOOEY_BANDS, dtype=np.float64) * threshold
    return np.digitize(field, bands)


# ---------------------------------------------------------------------------
# Frame assembly
# ---------------------------------------------------------------------------

def _style_indices(scene: "MetaballScene", grid: np.ndarray) -> np.ndarray:
    c = scene.config
    field = grid[:c.height, :c.width]
    style = scene.style

    if style is RenderStyle.GRADIENT:
        return gradient_indices(field, c.threshold, len(glyphs_for(style)))
    if style is RenderStyle.CONTOUR:
        return contour_indices(grid, c.threshold, c.height, c.width)
    if style is RenderStyle.SOLID:
        return solid_indices(field, c.threshold)
    if style is RenderStyle.BLOCKS:
        coverage = subpixel_coverage(scene, grid)
        samples = len(c.subpixel_offsets) ** 2
        return blocks_indices(field, coverage, samples, c.threshold)
    return gooey_indices(field, c.threshold)


def glyphs_for(style: RenderStyle) -> GlyphSet:
    return get_glyphs(style.label)


def to_text(indices: np.ndarray, glyphs: GlyphSet) -> str:
    """Join an index grid into rows, each terminated by a newline."""
    table = np.array(list(glyphs.glyphs))
    chars = table[indices]
    return "".join("".join(row) + "\n" for row in chars)


def render_frame(scene: "MetaballScene") -> str:
    """Render one frame of *scene* in its current style."""
    grid = scene.sample_grid()
    indices = _style_indices(scene, grid)
    return to_text(indices, glyphs_for(scene.style))

