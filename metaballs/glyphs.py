"""
Glyph sets for the render styles.

Each set lists its characters from emptiest to densest:
  - gradient: 10-step density ramp
  - contour:  blank, interior fill, then light/medium/heavy edge
  - solid:    blank, then three fill levels
  - blocks:   shading by sub-pixel coverage, plus a full block
  - gooey:    outside halo, skin and core/merge zones
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class GlyphSet:
    """Immutable character ramp for one render style."""
    name: str
    glyphs: str
    description: str

    def __getitem__(self, idx: int) -> str:
        return self.glyphs[idx]

    def __len__(self) -> int:
        return len(self.glyphs)


BLANK = " "

GLYPH_SETS: Dict[str, GlyphSet] = {
    "gradient": GlyphSet(
        name="Gradient",
        glyphs=" .:-=+*#%@",
        description="density ramp; lower half below threshold, upper half above",
    ),
    "contour": GlyphSet(
        name="Contour",
        glyphs=" .O#@",
        description="outline only; edges thicken where blobs merge",
    ),
    "solid": GlyphSet(
        name="Solid",
        glyphs=" *#@",
        description="three-level fill above threshold",
    ),
    "blocks": GlyphSet(
        name="Blocks",
        glyphs=" ░▒▓█",
        description="2x2 sub-pixel coverage shading",
    ),
    "gooey": GlyphSet(
        name="Gooey",
        glyphs=" ·○◯●◉◈",
        description="halo, skin and core bands emphasising merge points",
    ),
}


# ── Accessors ─────────────────────────────────────────────────────────────

def get_glyphs(name: str) -> GlyphSet:
    key = name.lower()
    if key not in GLYPH_SETS:
        available = ", ".join(list_styles())
        raise KeyError(f"Unknown style '{name}'. Available: {available}")
    return GLYPH_SETS[key]


def list_styles() -> List[str]:
    return list(GLYPH_SETS.keys())
