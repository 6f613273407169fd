"""
CLI entry point for the Monte Carlo frontier.

Usage:
    python run_cli.py                                  # Hosted sample data
    python run_cli.py --returns r.csv --vols v.csv --corr c.csv
    python run_cli.py --rf 4 --sims 100000 --seed 7
    python run_cli.py --weights 60,40 --point 7.5,11

For installed package, use: fc-analyze
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from frontier_cloud.cli.main import main

if __name__ == "__main__":
    sys.exit(main())
