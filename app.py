#!/usr/bin/env python3
"""
Steam Checks - Application Entry Point.

============================================================
USAGE
============================================================
Direct execution:
    python app.py check 76561197960287930
    python app.py runtests 76561197960287930
    python app.py show-config

Environment-based configuration:
    STEAM_API_KEY=... python app.py check 76561197960287930

============================================================
"""

import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.absolute()
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from steam_checks.cli import main


# ============================================================
# ENTRY POINT
# ============================================================

if __name__ == "__main__":
    sys.exit(main())
