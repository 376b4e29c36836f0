"""
Metaball scene engine.

Owns the blobs, moves them along fixed motion profiles as simulated
time advances, and cycles the render style on a dwell timer.  Blob
positions are a pure function of total simulated time, so the same
time always gives the same scene.
"""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .field import ASPECT_RATIO, Blob, field_at, sample_grid

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Fixed scene constants
# ---------------------------------------------------------------------------

WIDTH = 80
HEIGHT = 35
THRESHOLD = 1.0
STYLE_DWELL = 5.0                # simulated seconds per render style
SUBPIXEL_OFFSETS = (0.0, 0.5)    # per axis, for Blocks supersampling

# Accumulated dt may land a hair under the dwell after many small steps.
DWELL_TOLERANCE = 1e-9


# ---------------------------------------------------------------------------
# Render style
# ---------------------------------------------------------------------------

class RenderStyle(enum.Enum):
    GRADIENT = "Gradient"
    CONTOUR = "Contour"
    SOLID = "Solid"
    BLOCKS = "Blocks"
    GOOEY = "Gooey"

    @property
    def label(self) -> str:
        return self.value

    def next(self) -> "RenderStyle":
        """Cyclic successor; Gooey wraps back to Gradient."""
        members = list(RenderStyle)
        return members[(members.index(self) + 1) % len(members)]


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SceneConfig:
    """Grid and field constants.

    Defaults are the module constants; anything else is mainly for tests.
    Invalid values are rejected here rather than per sample.
    """
    width: int = WIDTH
    height: int = HEIGHT
    threshold: float = THRESHOLD
    aspect_ratio: float = ASPECT_RATIO
    style_dwell: float = STYLE_DWELL
    subpixel_offsets: Tuple[float, ...] = SUBPIXEL_OFFSETS

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"grid size must be positive, got {self.width}x{self.height}"
            )
        if not self.threshold > 0:
            raise ValueError(f"threshold must be positive, got {self.threshold}")
        if not self.aspect_ratio > 0:
            raise ValueError(f"aspect_ratio must be positive, got {self.aspect_ratio}")
        if not self.style_dwell > 0:
            raise ValueError(f"style_dwell must be positive, got {self.style_dwell}")
        if not self.subpixel_offsets:
            raise ValueError("subpixel_offsets must not be empty")
        if any(not 0.0 <= o < 1.0 for o in self.subpixel_offsets):
            raise ValueError(
                f"subpixel_offsets must lie in [0, 1), got {self.subpixel_offsets}"
            )

    @property
    def center(self) -> Tuple[float, float]:
        return self.width / 2.0, self.height / 2.0


# ---------------------------------------------------------------------------
# Motion profiles
# ---------------------------------------------------------------------------

WOBBLE = "wobble"
ORBIT = "orbit"


@dataclass(frozen=True)
class MotionProfile:
    """Path of one blob around the grid centre.

    ``wobble`` oscillates each axis independently (sin on x, cos on y);
    ``orbit`` runs an ellipse at a single angular frequency.
    """
    name: str
    kind: str
    radius: float
    freq_x: float
    freq_y: float
    phase: float
    radius_x: float
    radius_y: float

    def position(self, t: float, cx: float, cy: float) -> Tuple[float, float]:
        if self.kind == WOBBLE:
            return (
                cx + math.sin(t * self.freq_x + self.phase) * self.radius_x,
                cy + math.cos(t * self.freq_y + self.phase) * self.radius_y,
            )
        if self.kind == ORBIT:
            return (
                cx + math.cos(t * self.freq_x + self.phase) * self.radius_x,
                cy + math.sin(t * self.freq_y + self.phase) * self.radius_y,
            )
        raise ValueError(f"unknown motion kind {self.kind!r}")


MOTION_PROFILES: Tuple[MotionProfile, ...] = (
    MotionProfile("wobble", WOBBLE, 4.0, 0.5, 0.7, 0.0, 8.0, 4.0),
    MotionProfile("orbit-a", ORBIT, 3.0, 1.2, 1.2, 0.0, 20.0, 10.0),
    MotionProfile("orbit-b", ORBIT, 3.5, 0.8, 0.8, math.pi * 0.5, 25.0, 11.0),
    MotionProfile("orbit-c", ORBIT, 2.5, 1.5, 1.5, math.pi, 18.0, 8.0),
    MotionProfile("orbit-d", ORBIT, 3.2, 0.6, 0.6, math.pi * 1.5, 28.0, 12.0),
)


# ---------------------------------------------------------------------------
# Scene
# ---------------------------------------------------------------------------

class MetaballScene:
    """Blob state, simulated clock and render-style timer.

    Parameters:
        config:   Grid/field constants (or defaults).
        profiles: Motion profile per blob; one blob is created for each.
    """

    def __init__(
        self,
        config: Optional[SceneConfig] = None,
        profiles: Sequence[MotionProfile] = MOTION_PROFILES,
    ) -> None:
        self.config = config or SceneConfig()
        self.profiles: Tuple[MotionProfile, ...] = tuple(profiles)
        self.time: float = 0.0
        self.style: RenderStyle = RenderStyle.GRADIENT
        self.style_timer: float = 0.0
        self.blobs: List[Blob] = [Blob(radius=p.radius) for p in self.profiles]
        self._place_blobs()
        logger.info(
            "Scene created: %d blobs on %dx%d grid",
            len(self.blobs), self.config.width, self.config.height,
        )

    # ── simulation ────────────────────────────────────────────────────────

    def advance(self, dt: float) -> None:
        """Advance simulated time by *dt* seconds."""
        if not dt > 0:
            raise ValueError(f"dt must be positive, got {dt}")
        self.time += dt
        self.style_timer += dt

        if self.style_timer >= self.config.style_dwell - DWELL_TOLERANCE:
            self.style_timer = 0.0
            previous, self.style = self.style, self.style.next()
            logger.debug(
                "Style %s -> %s at t=%.2f", previous.label, self.style.label, self.time
            )

        self._place_blobs()

    def _place_blobs(self) -> None:
        cx, cy = self.config.center
        for blob, profile in zip(self.blobs, self.profiles):
            blob.x, blob.y = profile.position(self.time, cx, cy)

    # ── sampling ──────────────────────────────────────────────────────────

    def field_at(self, x, y):
        return field_at(self.blobs, x, y, self.config.aspect_ratio)

    def sample_grid(self, dx: float = 0.0, dy: float = 0.0) -> np.ndarray:
        """Corner-sampled field, shape (height+1, width+1)."""
        c = self.config
        return sample_grid(self.blobs, c.width, c.height, c.aspect_ratio, dx, dy)

    def render(self) -> str:
        """Render the current state as one text frame."""
        from .renderer import render_frame
        return render_frame(self)
