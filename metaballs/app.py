"""
Application entry point — CLI parsing, dependency checks, terminal launch.
"""

from __future__ import annotations

import argparse
import logging
import sys

from . import __version__


def _check_deps() -> list:
    missing = []
    try:
        import numpy  # noqa: F401
    except ImportError:
        missing.append("numpy")
    return missing


def _parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="metaballs",
        description="Terminal Metaballs — animated implicit-surface field in ASCII.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "examples:\n"
            "  %(prog)s                  # run until Ctrl-C\n"
            "  %(prog)s --frames 300     # stop after 300 frames\n"
            "  %(prog)s --once           # print a single frame\n"
            "  %(prog)s --list-styles    # show render styles\n"
            "  %(prog)s -v 2>debug.log   # debug logging to a file\n"
        ),
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("--frames", type=int, default=None, help="Stop after N frames (default: run forever)")
    p.add_argument("--once", action="store_true", help="Print one frame without terminal control and exit")
    p.add_argument("--list-styles", action="store_true", help="List render styles and exit")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return p.parse_args(argv)


def main(argv=None) -> None:
    args = _parse_args(argv)

    # Anything below WARNING would scribble over the animation.
    level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    logger = logging.getLogger("metaballs")

    if args.list_styles:
        from .glyphs import GLYPH_SETS, list_styles
        print("Render styles (cycled in this order):")
        for key in list_styles():
            g = GLYPH_SETS[key]
            print(f"  {g.name:10s}  [{g.glyphs}]  {g.description}")
        sys.exit(0)

    missing = _check_deps()
    if missing:
        print(f"ERROR: Missing packages: {', '.join(missing)}\n"
              f"Install: pip install {' '.join(missing)}", file=sys.stderr)
        sys.exit(1)

    if args.frames is not None and args.frames < 1:
        print("ERROR: --frames must be at least 1.", file=sys.stderr)
        sys.exit(1)

    from .engine import MetaballScene
    from .terminal import DriverConfig, TerminalDriver

    logger.info("Starting Terminal Metaballs v%s", __version__)
    scene = MetaballScene()
    config = DriverConfig()

    if args.once:
        scene.advance(config.time_step)
        sys.stdout.write(scene.render())
        sys.stdout.flush()
        return

    TerminalDriver(scene, config).run(max_frames=args.frames)
