"""
Frontier Estimator
==================

Derives an approximate efficient frontier from a sampled cloud.

This is a heuristic upper envelope, NOT a mean-variance optimizer:
1. Split the observed volatility range into equal-width bins
2. In every non-empty bin keep the portfolio with the highest return
3. Sort the winners by volatility to form the frontier polyline

Empty bins are skipped, not interpolated, so the result depends entirely on
how densely the cloud covers the upper edge of the feasible set.

The optimum points are picked by linear scan:
- Minimum variance: lowest volatility on the estimated frontier
- Maximum Sharpe: highest Sharpe ratio anywhere in the cloud
"""

import logging
from dataclasses import dataclass
from typing import List

import numpy as np
import pandas as pd

from frontier_cloud.core.config import DEFAULT_BINS
from frontier_cloud.core.portfolio import PortfolioPoint, sharpe_ratio
from frontier_cloud.core.sampler import PortfolioCloud
from frontier_cloud.errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Frontier:
    """
    Estimated frontier as indices into the cloud it was built from.

    Attributes:
        cloud: The sampled cloud
        indices: Cloud row of each frontier point, ordered by volatility
    """

    cloud: PortfolioCloud
    indices: np.ndarray

    def __len__(self) -> int:
        return len(self.indices)

    @property
    def returns(self) -> np.ndarray:
        return self.cloud.returns[self.indices]

    @property
    def vols(self) -> np.ndarray:
        return self.cloud.vols[self.indices]

    def points(self) -> List[PortfolioPoint]:
        return [self.cloud.point(i) for i in self.indices]


class FrontierEstimator:
    """Binned upper-envelope estimator."""

    def __init__(self, n_bins: int = DEFAULT_BINS):
        if int(n_bins) < 1:
            raise ConfigurationError(f"n_bins must be at least 1, got {n_bins}")
        self.n_bins = int(n_bins)

    def bin_index(self, vols: np.ndarray) -> np.ndarray:
        """
        Bin number of each volatility.

        Bin b covers [min + b*step, min + (b+1)*step) with
        step = (max - min) / n_bins, so the maximum lands in bin n_bins.
        A cloud with a single volatility value forms one bin.
        """
        lo = vols.min()
        step = (vols.max() - lo) / self.n_bins
        if step <= 0:
            return np.zeros(len(vols), dtype=int)
        return np.floor((vols - lo) / step).astype(int)

    def estimate(self, cloud: PortfolioCloud) -> Frontier:
        """
        Estimate the frontier of `cloud`.

        Non-finite points take no part. Within a bin, ties on return go to
        the earliest cloud member.

        Args:
            cloud: Sampled PortfolioCloud

        Returns:
            Frontier sorted by non-decreasing volatility
        """
        finite = np.isfinite(cloud.vols) & np.isfinite(cloud.returns)
        rows = np.flatnonzero(finite)
        if len(rows) == 0:
            logger.warning("No finite portfolios in the cloud; frontier is empty")
            return Frontier(cloud=cloud, indices=np.array([], dtype=int))

        df = pd.DataFrame({
            'ret': cloud.returns[rows],
            'vol': cloud.vols[rows],
            'bin': self.bin_index(cloud.vols[rows]),
        }, index=rows)

        # idxmax returns the first label holding the maximum
        winners = df.groupby('bin')['ret'].idxmax()
        frontier = df.loc[winners.to_numpy()].sort_values('vol', kind='mergesort')
        indices = frontier.index.to_numpy(dtype=int)

        logger.info(f"Estimated frontier with {len(indices)} points from {len(rows):,} portfolios")
        return Frontier(cloud=cloud, indices=indices)


def find_min_variance(frontier: Frontier) -> PortfolioPoint:
    """
    Lowest-volatility point of the estimated frontier.

    Ties go to the point met first in frontier order.

    Raises:
        ValueError: If the frontier is empty
    """
    if len(frontier) == 0:
        raise ValueError("Cannot pick a minimum-variance point from an empty frontier")
    position = int(np.argmin(frontier.vols))
    return frontier.cloud.point(frontier.indices[position])


def find_max_sharpe(cloud: PortfolioCloud, rf_rate: float) -> PortfolioPoint:
    """
    Highest-Sharpe point of the whole cloud, not only the frontier.

    Sharpe ratios are recomputed at `rf_rate`. NaN ratios are skipped;
    ties go to the earliest cloud member.

    Raises:
        ValueError: If the cloud has no point with a defined Sharpe ratio
    """
    sharpes = sharpe_ratio(cloud.returns, cloud.vols, rf_rate)
    if len(cloud) == 0 or np.all(np.isnan(sharpes)):
        raise ValueError("Cannot pick a maximum-Sharpe point from an empty cloud")
    index = int(np.nanargmax(sharpes))

    point = cloud.point(index)
    return PortfolioPoint(ret=point.ret, vol=point.vol, sharpe=float(sharpes[index]), weights=point.weights)
