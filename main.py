#!/usr/bin/env python3
"""
AnvilScope - Minecraft Region File Reader
=========================================

Main entry point when running from a source checkout.

Usage:
    python main.py <file> [--chunk X Z] [--json] [--debug]

Arguments:
    file    Region file (.mca) to read
"""

import sys
from pathlib import Path

# Add the project root to path if needed
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from anvilscope.cli import main


if __name__ == "__main__":
    sys.exit(main())
