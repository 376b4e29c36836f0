#!/usr/bin/env python3
"""
Terminal Metaballs — quick launcher.

Usage:
    python run_metaballs.py [options]

Run ``python run_metaballs.py --help`` for full options.
"""

from metaballs.app import main

if __name__ == "__main__":
    main()
