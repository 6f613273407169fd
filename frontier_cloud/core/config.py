"""
Analysis Configuration
======================

Defaults and user-configurable assumptions for a frontier-cloud run.

ASSUMPTIONS (User-Configurable):
--------------------------------
1. RISK-FREE RATE: entered as a percentage, clamped to [0, 100]
   - Stored as a decimal (5 -> 0.05)

2. SIMULATION COUNT: number of random portfolios in the cloud
   - Clamped to [1,000, 200,000]; blank input means 50,000

3. FRONTIER BINS: number of equal-width volatility bins used to
   extract the upper envelope of the cloud (default 120)

4. SEED: optional; without one every run draws a fresh cloud
"""

import math
from dataclasses import dataclass
from typing import Any, Optional

from frontier_cloud.errors import ValidationError


# Hosted sample datasets (returns, volatilities, correlations)
DATA_URLS = {
    'returns': "https://capitalogic.co/wp-content/uploads/2025/09/Asset_Returns.csv",
    'vols': "https://capitalogic.co/wp-content/uploads/2025/09/Asset_Volatilities.csv",
    'corr': "https://capitalogic.co/wp-content/uploads/2025/09/Asset_Correlations.csv",
}

MIN_SIMULATIONS = 1_000
MAX_SIMULATIONS = 200_000
DEFAULT_SIMULATIONS = 50_000
DEFAULT_BINS = 120
DEFAULT_RISK_FREE_PCT = 0.0
DEFAULT_TIMEOUT = 30.0

# Allowed deviation of the decimal weight sum from 1
WEIGHT_TOLERANCE = 1e-6


def clamp(x: float, lo: float, hi: float) -> float:
    """Clamp x into [lo, hi]."""
    return max(lo, min(hi, x))


def _to_float(value: Any, what: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{what} must be numeric, got {value!r}") from None
    if math.isnan(number):
        raise ValidationError(f"{what} must be numeric, got {value!r}")
    return number


def clamp_simulations(value: Any = None) -> int:
    """
    Parse and clamp a requested simulation count.

    Blank input falls back to DEFAULT_SIMULATIONS. Fractional input is
    truncated before clamping.

    Args:
        value: int, float or numeric string

    Returns:
        Simulation count within [MIN_SIMULATIONS, MAX_SIMULATIONS]

    Raises:
        ValidationError: If the value is not numeric
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return DEFAULT_SIMULATIONS
    count = _to_float(value, "Simulation count")
    if math.isinf(count):
        return MAX_SIMULATIONS if count > 0 else MIN_SIMULATIONS
    return int(clamp(int(count), MIN_SIMULATIONS, MAX_SIMULATIONS))


def clamp_risk_free(pct: Any = None) -> float:
    """
    Convert a risk-free percentage into a clamped decimal rate.

    Args:
        pct: Rate in percent (e.g. 4.5 for 4.5%); blank means 0

    Returns:
        Decimal rate within [0, 1]

    Raises:
        ValidationError: If the value is not numeric
    """
    if pct is None or (isinstance(pct, str) and not pct.strip()):
        return 0.0
    return clamp(_to_float(pct, "Risk-free rate") / 100, 0.0, 1.0)


@dataclass
class AnalysisConfig:
    """
    Stores all configurable assumptions for a run.

    Attributes:
        returns_source: URL or path of the mean returns dataset
        vols_source: URL or path of the volatilities dataset
        corr_source: URL or path of the correlations dataset
        risk_free_pct: Risk-free rate in percent (clamped when read)
        simulations: Requested simulation count (clamped when read)
        n_bins: Number of volatility bins for the frontier estimate
        seed: Random seed, None for a fresh cloud on every run
        timeout: HTTP timeout in seconds for remote datasets
    """

    returns_source: str = DATA_URLS['returns']
    vols_source: str = DATA_URLS['vols']
    corr_source: str = DATA_URLS['corr']
    risk_free_pct: Any = DEFAULT_RISK_FREE_PCT
    simulations: Any = DEFAULT_SIMULATIONS
    n_bins: int = DEFAULT_BINS
    seed: Optional[int] = None
    timeout: float = DEFAULT_TIMEOUT

    @property
    def risk_free_rate(self) -> float:
        """Decimal risk-free rate, clamped to [0, 1]."""
        return clamp_risk_free(self.risk_free_pct)

    @property
    def n_simulations(self) -> int:
        """Simulation count, clamped to the allowed range."""
        return clamp_simulations(self.simulations)

    @property
    def sources(self) -> dict:
        return {
            'returns': self.returns_source,
            'vols': self.vols_source,
            'corr': self.corr_source,
        }

    def print_config(self):
        """Print current configuration."""
        print("\n" + "=" * 60)
        print("CURRENT ANALYSIS CONFIGURATION")
        print("=" * 60)
        print(f"Returns data:     {self.returns_source}")
        print(f"Volatility data:  {self.vols_source}")
        print(f"Correlation data: {self.corr_source}")
        print(f"Risk-Free Rate:   {self.risk_free_rate*100:.2f}%")
        print(f"Simulations:      {self.n_simulations:,}")
        print(f"Frontier Bins:    {self.n_bins}")
        print(f"Seed:             {self.seed if self.seed is not None else 'random'}")
        print("=" * 60)
