"""
Terminal Metaballs
==================

A real-time ASCII rendering of an implicit-surface ("metaball") field.

Five circular influence sources drift around the screen centre; their
fields Σ(rᵢ² / dᵢ²) are summed on a character grid and quantised to
glyphs.  Blobs that approach each other merge smoothly because their
fields simply add.

The animation features:
  - Aspect-corrected field so blobs look round in a terminal
  - One centre wobble and four elliptical orbiters at distinct rates
  - Fixed simulated time step, independent of real frame rate
  - Five render styles cycled every 5 simulated seconds:
    gradient, contour (edge detection), solid, blocks (2x2
    sub-pixel supersampling) and gooey
"""

__version__ = "1.0.0"
__author__ = "Terminal Metaballs"
