#!/usr/bin/env python3
"""Run the bedtime story proxy for local development."""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from story_proxy.server import main  # noqa: E402


if __name__ == "__main__":
    main()
