#!/usr/bin/env python3
"""
Ludusavi wrapper launcher script.

Point a launcher's wrapper field (or Steam launch options) at this file:
  Heroic/Lutris: /path/to/bin/ludusavi_wrapper.py --cache
  Steam:         /path/to/bin/ludusavi_wrapper.py --cache %command%
"""

import os
import sys

# Repository root (parent of bin/), so the script works without installation
SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.dirname(SCRIPT_DIR)
sys.path.insert(0, PROJECT_ROOT)

from ludusavi_wrapper.cli import main  # noqa: E402

if __name__ == "__main__":
    main()
