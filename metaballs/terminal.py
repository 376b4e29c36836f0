"""
Terminal driver — fixed-step animation loop with best-effort pacing.

Each tick advances the scene by a constant simulated step, renders,
writes the frame plus a status line in one write, then sleeps for what
is left of the frame interval.  Slow frames just run late; there is no
catch-up and no frame dropping.
"""

from __future__ import annotations

import logging
import sys
import time
from dataclasses import dataclass
from typing import Optional, TextIO

from .engine import MetaballScene

logger = logging.getLogger(__name__)

HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"
CLEAR_SCREEN = "\x1b[2J"
CURSOR_HOME = "\x1b[H"
CLEAR_TO_EOL = "\x1b[K"


@dataclass(frozen=True)
class DriverConfig:
    """Loop timing.

    ``time_step`` is simulated seconds per tick regardless of wall time;
    ``frame_interval`` is the wall-clock target per tick (~30 fps).
    """
    time_step: float = 0.05
    frame_interval: float = 0.033

    def __post_init__(self):
        if not self.time_step > 0:
            raise ValueError(f"time_step must be positive, got {self.time_step}")
        if self.frame_interval < 0:
            raise ValueError(f"frame_interval must be >= 0, got {self.frame_interval}")


def status_line(scene: MetaballScene, frame: int, fps: float) -> str:
    return f"Metaballs [{scene.style.label}] | Frame: {frame} | FPS: {fps:.1f}{CLEAR_TO_EOL}"


class TerminalDriver:
    """Runs a scene against a text stream.

    Parameters:
        scene:  The scene to animate.
        config: Loop timing (or defaults).
        out:    Output stream, stdout by default.
    """

    def __init__(
        self,
        scene: MetaballScene,
        config: Optional[DriverConfig] = None,
        out: Optional[TextIO] = None,
    ) -> None:
        self.scene = scene
        self.config = config or DriverConfig()
        self.out = out if out is not None else sys.stdout
        self.frame_count = 0
        self._start_time = time.perf_counter()

    @property
    def fps(self) -> float:
        elapsed = time.perf_counter() - self._start_time
        if elapsed <= 0:
            return 0.0
        return self.frame_count / elapsed

    # ── animation loop ────────────────────────────────────────────────────

    def tick(self) -> None:
        """Advance, render and emit one frame."""
        self.scene.advance(self.config.time_step)
        frame = self.scene.render()
        self.frame_count += 1
        self.out.write(CURSOR_HOME + frame + status_line(self.scene, self.frame_count, self.fps))
        self.out.flush()

    def run(self, max_frames: Optional[int] = None) -> int:
        """Loop until *max_frames* ticks (forever if None) or Ctrl-C.

        Returns the number of frames drawn.  The cursor is always restored.
        """
        logger.info("Driver started (step=%.3fs, interval=%.3fs)",
                    self.config.time_step, self.config.frame_interval)
        self.out.write(HIDE_CURSOR + CLEAR_SCREEN)
        self._start_time = time.perf_counter()
        try:
            while max_frames is None or self.frame_count < max_frames:
                frame_start = time.perf_counter()
                self.tick()
                remaining = self.config.frame_interval - (time.perf_counter() - frame_start)
                if remaining > 0:
                    time.sleep(remaining)
        except KeyboardInterrupt:
            logger.info("Interrupted")
        finally:
            self.out.write(SHOW_CURSOR + "\n")
            self.out.flush()
        logger.info("Driver stopped after %d frames (%.1f fps)", self.frame_count, self.fps)
        return self.frame_count
