"""Core computational modules: loading, portfolio math, sampling and frontier estimation."""

from frontier_cloud.core.config import AnalysisConfig, clamp_risk_free, clamp_simulations
from frontier_cloud.core.frontier import Frontier, FrontierEstimator, find_max_sharpe, find_min_variance
from frontier_cloud.core.loader import AssetData, DataLoader, load_asset_data
from frontier_cloud.core.portfolio import (
    PortfolioModel,
    PortfolioPoint,
    compute_covariance,
    expected_return,
    normalize_weights,
    portfolio_volatility,
)
from frontier_cloud.core.sampler import MonteCarloSampler, PortfolioCloud
from frontier_cloud.core.session import (
    SessionState,
    add_return_vol_point,
    add_weight_point,
    clear_return_vol_points,
    clear_weight_points,
    compute_session,
    equal_weights_pct,
    run_session,
    summary_report,
)

__all__ = [
    "AnalysisConfig",
    "clamp_risk_free",
    "clamp_simulations",
    "Frontier",
    "FrontierEstimator",
    "find_max_sharpe",
    "find_min_variance",
    "AssetData",
    "DataLoader",
    "load_asset_data",
    "PortfolioModel",
    "PortfolioPoint",
    "compute_covariance",
    "expected_return",
    "normalize_weights",
    "portfolio_volatility",
    "MonteCarloSampler",
    "PortfolioCloud",
    "SessionState",
    "add_return_vol_point",
    "add_weight_point",
    "clear_return_vol_points",
    "clear_weight_points",
    "compute_session",
    "equal_weights_pct",
    "run_session",
    "summary_report",
]
