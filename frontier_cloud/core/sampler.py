"""
Monte Carlo Sampler
===================

Approximates the feasible set of long-only portfolios with a cloud of
random weight vectors:
1. Draw n independent uniform values per portfolio
2. Normalize each row to sum to 1
3. Evaluate return, volatility and Sharpe ratio for every row at once

More samples sharpen the cloud's upper edge but never make it an exact
efficient frontier.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from frontier_cloud.core.config import DEFAULT_SIMULATIONS, clamp_simulations
from frontier_cloud.core.portfolio import (
    PortfolioModel,
    PortfolioPoint,
    normalize_weights,
    sharpe_ratio,
)

logger = logging.getLogger(__name__)


def _read_only(arr: np.ndarray) -> np.ndarray:
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True)
class PortfolioCloud:
    """Container for a sampled cloud, stored column-wise."""

    weights: np.ndarray   # shape (n_portfolios, n_assets), rows sum to 1
    returns: np.ndarray   # shape (n_portfolios,)
    vols: np.ndarray      # shape (n_portfolios,)
    sharpes: np.ndarray   # shape (n_portfolios,)
    rf_rate: float

    def __len__(self) -> int:
        return len(self.returns)

    def point(self, index: int) -> PortfolioPoint:
        """The cloud member at `index` as a PortfolioPoint."""
        return PortfolioPoint(
            ret=float(self.returns[index]),
            vol=float(self.vols[index]),
            sharpe=float(self.sharpes[index]),
            weights=tuple(float(w) for w in self.weights[index]),
        )

    def points(self) -> List[PortfolioPoint]:
        return [self.point(i) for i in range(len(self))]

    def to_frame(self, asset_names: Optional[List[str]] = None) -> pd.DataFrame:
        """
        The cloud as a DataFrame with ret, vol, sharpe and one weight column per asset.
        """
        if asset_names is None:
            asset_names = [f"Asset_{i+1}" for i in range(self.weights.shape[1])]
        df = pd.DataFrame(self.weights, columns=[f"w_{name}" for name in asset_names])
        df.insert(0, 'sharpe', self.sharpes)
        df.insert(0, 'vol', self.vols)
        df.insert(0, 'ret', self.returns)
        return df

    def to_records(self) -> List[Dict]:
        return [self.point(i).to_dict() for i in range(len(self))]


class MonteCarloSampler:
    """Random-weight portfolio sampler."""

    def __init__(
        self,
        model: PortfolioModel,
        n_simulations=DEFAULT_SIMULATIONS,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        """
        Args:
            model: PortfolioModel with returns, covariance and risk-free rate.
            n_simulations: Requested number of portfolios; clamped to the
                allowed range.
            seed: Random seed for a reproducible cloud.
            rng: Generator to draw from; takes precedence over `seed`.
        """
        self.model = model
        self.n_simulations = clamp_simulations(n_simulations)
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    def sample_weights(self) -> np.ndarray:
        """Draw normalized random weights, one portfolio per row."""
        raw = self.rng.random((self.n_simulations, self.model.n_assets))
        return normalize_weights(raw)

    def run(self) -> PortfolioCloud:
        """
        Sample and evaluate a fresh cloud.

        Returns:
            PortfolioCloud with `n_simulations` members
        """
        weights = self.sample_weights()
        returns = self.model.portfolio_return(weights)
        vols = self.model.portfolio_std(weights)
        sharpes = sharpe_ratio(returns, vols, self.model.rf_rate)

        logger.info(f"Sampled {self.n_simulations:,} portfolios over {self.model.n_assets} assets")

        return PortfolioCloud(
            weights=_read_only(weights),
            returns=_read_only(np.asarray(returns, dtype=float)),
            vols=_read_only(np.asarray(vols, dtype=float)),
            sharpes=_read_only(np.asarray(sharpes, dtype=float)),
            rf_rate=self.model.rf_rate,
        )
