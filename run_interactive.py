"""
Interactive Monte Carlo frontier session.

Usage:
    python run_interactive.py

For installed package, use: fc-interactive
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from frontier_cloud.cli.interactive import main

if __name__ == "__main__":
    main()
