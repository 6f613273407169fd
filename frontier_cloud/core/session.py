"""
Session State
=============

One immutable SessionState per run. Every step takes the current state and
returns a new one, so a rejected or failed step leaves the caller's state
exactly as it was:

    state = run_session(config)                     # load + sample + frontier
    state = add_weight_point(state, [60, 40])       # user portfolio (percent)
    state = add_return_vol_point(state, 7.5, 11.0)  # manual point (percent)
    state = clear_weight_points(state)

The presentation layer only keeps a reference to the latest state.
"""

import logging
import math
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from frontier_cloud.core.config import (
    DEFAULT_BINS,
    DEFAULT_SIMULATIONS,
    WEIGHT_TOLERANCE,
    AnalysisConfig,
)
from frontier_cloud.core.frontier import (
    Frontier,
    FrontierEstimator,
    find_max_sharpe,
    find_min_variance,
)
from frontier_cloud.core.loader import AssetData, DataLoader
from frontier_cloud.core.portfolio import PortfolioModel, PortfolioPoint, sharpe_ratio
from frontier_cloud.core.sampler import MonteCarloSampler, PortfolioCloud
from frontier_cloud.errors import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionState:
    """
    Everything the presentation layer draws for one run.

    Attributes:
        data: Loaded asset data (None before the first run)
        cov_matrix: Covariance matrix derived from `data`
        rf_rate: Risk-free rate (decimal)
        n_simulations: Clamped simulation count
        cloud: Sampled portfolios
        frontier: Estimated frontier (indices into `cloud`)
        min_variance: Lowest-volatility frontier point
        max_sharpe: Highest-Sharpe cloud point
        user_weight_points: Portfolios added from user weights
        user_rv_points: Points entered directly as return/volatility
    """

    data: Optional[AssetData] = None
    cov_matrix: Optional[np.ndarray] = None
    rf_rate: float = 0.0
    n_simulations: int = DEFAULT_SIMULATIONS
    cloud: Optional[PortfolioCloud] = None
    frontier: Optional[Frontier] = None
    min_variance: Optional[PortfolioPoint] = None
    max_sharpe: Optional[PortfolioPoint] = None
    user_weight_points: Tuple[PortfolioPoint, ...] = ()
    user_rv_points: Tuple[PortfolioPoint, ...] = ()

    @property
    def is_loaded(self) -> bool:
        return self.data is not None and self.data.n_assets > 0

    @property
    def asset_names(self) -> List[str]:
        return list(self.data.names) if self.data is not None else []

    def model(self) -> PortfolioModel:
        """PortfolioModel for the loaded data at this state's risk-free rate."""
        if not self.is_loaded:
            raise ValidationError("Load data first.")
        return PortfolioModel(self.data.mean_returns, self.cov_matrix, self.asset_names, self.rf_rate)

    def to_dict(self) -> Dict[str, Any]:
        """
        Plain-data view of the run for a rendering layer.

        Returns:
            Dictionary with assets, settings, cloud, frontier, optimum points
            and both user point collections
        """
        def point(p: Optional[PortfolioPoint]):
            return p.to_dict() if p is not None else None

        return {
            'assets': self.asset_names,
            'rf_rate': self.rf_rate,
            'n_simulations': self.n_simulations,
            'cloud': self.cloud.to_records() if self.cloud is not None else [],
            'frontier': [p.to_dict() for p in self.frontier.points()] if self.frontier is not None else [],
            'min_variance': point(self.min_variance),
            'max_sharpe': point(self.max_sharpe),
            'user_weight_points': [p.to_dict() for p in self.user_weight_points],
            'user_rv_points': [p.to_dict() for p in self.user_rv_points],
        }


# =============================================================================
# RUN
# =============================================================================

def compute_session(
    data: AssetData,
    rf_rate: float = 0.0,
    n_simulations=DEFAULT_SIMULATIONS,
    n_bins: int = DEFAULT_BINS,
    seed: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
    previous: Optional[SessionState] = None,
) -> SessionState:
    """
    Sample the cloud and estimate the frontier for loaded data.

    User points of `previous` are carried into the new state and re-evaluated
    against the new data and risk-free rate. Weight portfolios whose length
    no longer matches the asset count are dropped.

    Args:
        data: Loaded AssetData
        rf_rate: Risk-free rate (decimal)
        n_simulations: Requested simulation count (clamped)
        n_bins: Volatility bins for the frontier estimate
        seed: Random seed for a reproducible cloud
        rng: Generator to draw from; takes precedence over `seed`
        previous: State being replaced

    Returns:
        New SessionState
    """
    estimator = FrontierEstimator(n_bins)
    cov = data.covariance()
    model = PortfolioModel(data.mean_returns, cov, list(data.names), rf_rate)

    sampler = MonteCarloSampler(model, n_simulations, seed=seed, rng=rng)
    cloud = sampler.run()
    frontier = estimator.estimate(cloud)

    if previous is None:
        previous = SessionState()

    return SessionState(
        data=data,
        cov_matrix=cov,
        rf_rate=model.rf_rate,
        n_simulations=sampler.n_simulations,
        cloud=cloud,
        frontier=frontier,
        min_variance=find_min_variance(frontier) if len(frontier) else None,
        max_sharpe=find_max_sharpe(cloud, model.rf_rate),
        user_weight_points=_carry_weight_points(previous.user_weight_points, model),
        user_rv_points=tuple(
            replace(p, sharpe=sharpe_ratio(p.ret, p.vol, model.rf_rate))
            for p in previous.user_rv_points
        ),
    )


def _carry_weight_points(
    points: Tuple[PortfolioPoint, ...], model: PortfolioModel
) -> Tuple[PortfolioPoint, ...]:
    kept = tuple(model.evaluate(p.weights) for p in points if len(p.weights) == model.n_assets)
    if len(kept) < len(points):
        logger.warning(
            f"Dropped {len(points) - len(kept)} user portfolio(s) that don't match "
            f"the {model.n_assets} loaded assets"
        )
    return kept


def run_session(
    config: AnalysisConfig,
    previous: Optional[SessionState] = None,
    loader: Optional[DataLoader] = None,
    rng: Optional[np.random.Generator] = None,
) -> SessionState:
    """
    Load the datasets named in `config` and compute a new state.

    Settings are validated before anything is fetched. Any failure raises
    and no state is returned, so the caller keeps `previous`.

    Args:
        config: AnalysisConfig with sources and settings
        previous: Current state, whose user points carry over
        loader: DataLoader to use (default: one built from config.timeout)
        rng: Generator to draw from; takes precedence over config.seed

    Returns:
        New SessionState

    Raises:
        ValidationError: If the risk-free rate or simulation count is not numeric
        DataLoadError: If any dataset can't be fetched or parsed
        ConfigurationError: If the bin count is below 1 or the datasets
            disagree in dimension
    """
    rf_rate = config.risk_free_rate
    n_simulations = config.n_simulations
    n_bins = FrontierEstimator(config.n_bins).n_bins

    if loader is None:
        loader = DataLoader(config.timeout)

    data = loader.load(config.returns_source, config.vols_source, config.corr_source)

    return compute_session(
        data,
        rf_rate=rf_rate,
        n_simulations=n_simulations,
        n_bins=n_bins,
        seed=config.seed,
        rng=rng,
        previous=previous,
    )


# =============================================================================
# USER POINTS
# =============================================================================

def _parse_pct(value: Any, blank_as_zero: bool) -> float:
    if value is None or (isinstance(value, str) and not value.strip()):
        if blank_as_zero:
            return 0.0
        raise ValueError("blank")
    number = float(value)
    if math.isnan(number):
        raise ValueError("nan")
    return number


def equal_weights_pct(n_assets: int) -> List[float]:
    """Equal-weight portfolio in percent, e.g. [50.0, 50.0] for two assets."""
    if n_assets <= 0:
        return []
    return [100.0 / n_assets] * n_assets


def add_weight_point(state: SessionState, weights_pct: Sequence[Any]) -> SessionState:
    """
    Add a user portfolio given as percentage weights.

    Blank entries count as 0. The weights must sum to 100%.

    Args:
        state: Current state (data must be loaded)
        weights_pct: One percentage per asset, e.g. [60, 40]

    Returns:
        New state with the portfolio appended

    Raises:
        ValidationError: If no data is loaded, the count is wrong, an entry
            is not numeric, or the weights don't sum to 100%
    """
    if not state.is_loaded:
        raise ValidationError("Load data first.")

    weights_pct = list(weights_pct)
    if not weights_pct:
        raise ValidationError("No weight inputs.")
    if len(weights_pct) != state.data.n_assets:
        raise ValidationError(
            f"Expected {state.data.n_assets} weights, got {len(weights_pct)}"
        )

    try:
        weights = np.array([_parse_pct(w, blank_as_zero=True) for w in weights_pct]) / 100
    except (TypeError, ValueError):
        raise ValidationError(f"Weights must be numeric, got {weights_pct!r}") from None

    if abs(weights.sum() - 1) > WEIGHT_TOLERANCE:
        raise ValidationError("Weights must sum to 100%.")

    point = state.model().evaluate(weights)
    logger.info(f"Added weight portfolio: return {point.ret*100:.2f}%, volatility {point.vol*100:.2f}%")
    return replace(state, user_weight_points=state.user_weight_points + (point,))


def add_return_vol_point(state: SessionState, ret_pct: Any, vol_pct: Any) -> SessionState:
    """
    Add a point entered directly as return and volatility percentages.

    Portfolio math is bypassed; the Sharpe ratio uses the state's
    risk-free rate.

    Raises:
        ValidationError: If either value is missing or not numeric
    """
    try:
        ret = _parse_pct(ret_pct, blank_as_zero=False) / 100
        vol = _parse_pct(vol_pct, blank_as_zero=False) / 100
    except (TypeError, ValueError):
        raise ValidationError("Enter both return and volatility.") from None

    point = PortfolioPoint(ret=ret, vol=vol, sharpe=sharpe_ratio(ret, vol, state.rf_rate))
    logger.info(f"Added return/volatility point: {ret*100:.2f}% / {vol*100:.2f}%")
    return replace(state, user_rv_points=state.user_rv_points + (point,))


def clear_weight_points(state: SessionState) -> SessionState:
    return replace(state, user_weight_points=())


def clear_return_vol_points(state: SessionState) -> SessionState:
    return replace(state, user_rv_points=())


# =============================================================================
# REPORT
# =============================================================================

def summary_report(state: SessionState) -> str:
    """
    Generate a text summary of a run.

    Args:
        state: Computed SessionState

    Returns:
        Formatted string report
    """
    if not state.is_loaded:
        raise ValidationError("Load data first.")

    names = state.asset_names
    lines = []
    lines.append("=" * 70)
    lines.append("EFFICIENT FRONTIER (MONTE CARLO) SUMMARY REPORT")
    lines.append("=" * 70)

    lines.append("\n--- Individual Asset Statistics ---")
    lines.append(f"{'Asset':<16} {'Mean':>12} {'Volatility':>12}")
    lines.append("-" * 42)
    for name, stats in state.model().get_asset_stats().items():
        lines.append(f"{name:<16} {stats['mean']*100:>11.2f}% {stats['std']*100:>11.2f}%")

    lines.append(f"\nRisk-free rate: {state.rf_rate:.4f} ({state.rf_rate*100:.2f}%)")
    lines.append(f"Simulated portfolios: {state.n_simulations:,}")
    if state.frontier is not None:
        lines.append(f"Estimated frontier points: {len(state.frontier)}")

    for title, point in (
        ("Minimum Variance Portfolio (estimated)", state.min_variance),
        ("Maximum Sharpe Ratio Portfolio (sampled)", state.max_sharpe),
    ):
        if point is None:
            continue
        lines.append(f"\n--- {title} ---")
        lines.append("Weights:")
        for name, w in zip(names, point.weights):
            lines.append(f"  {name}: {w*100:.2f}%")
        lines.append(f"Expected Return: {point.ret:.6f} ({point.ret*100:.2f}%)")
        lines.append(f"Volatility: {point.vol:.6f} ({point.vol*100:.2f}%)")
        lines.append(f"Sharpe Ratio: {point.sharpe:.6f}")

    if state.user_weight_points:
        lines.append("\n--- User Portfolios ---")
        for n, point in enumerate(state.user_weight_points, 1):
            weights = ", ".join(f"{name} {w*100:.1f}%" for name, w in zip(names, point.weights))
            lines.append(f"  #{n}: return {point.ret*100:.2f}%, volatility {point.vol*100:.2f}% ({weights})")

    if state.user_rv_points:
        lines.append("\n--- User Return/Volatility Points ---")
        for n, point in enumerate(state.user_rv_points, 1):
            lines.append(f"  #{n}: return {point.ret*100:.2f}%, volatility {point.vol*100:.2f}%")

    lines.append("\nNote: the frontier is the upper envelope of the sampled cloud,")
    lines.append("an approximation rather than an optimized mean-variance frontier.")
    lines.append("\n" + "=" * 70)

    return "\n".join(lines)
