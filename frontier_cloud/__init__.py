"""
Frontier Cloud - Monte Carlo Efficient Frontier
===============================================

Loads per-asset mean returns, volatilities and correlations, samples a cloud
of random long-only portfolios, estimates the efficient frontier as the
cloud's upper envelope and marks the minimum-variance and maximum-Sharpe
portfolios. User portfolios and manual return/volatility points can be
overlaid.

Usage:
    from frontier_cloud import AnalysisConfig, run_session, add_weight_point
    from frontier_cloud.visualization import plot_frontier_cloud

Classes:
    AnalysisConfig - Data sources and run settings
    DataLoader - Loads the three datasets (URL, CSV or Excel)
    PortfolioModel - Portfolio return/volatility/Sharpe for one dataset
    MonteCarloSampler - Random portfolio cloud
    FrontierEstimator - Binned upper-envelope frontier
    SessionState - Immutable result of a run

Functions:
    run_session - Load data and compute a new state
    add_weight_point / add_return_vol_point - Overlay user points
    summary_report - Text summary of a run
"""

from frontier_cloud.core import (
    AnalysisConfig,
    DataLoader,
    FrontierEstimator,
    MonteCarloSampler,
    PortfolioModel,
    SessionState,
    add_return_vol_point,
    add_weight_point,
    clear_return_vol_points,
    clear_weight_points,
    compute_covariance,
    compute_session,
    equal_weights_pct,
    run_session,
    summary_report,
)
from frontier_cloud.errors import (
    ConfigurationError,
    DataLoadError,
    FrontierCloudError,
    InvalidWeights,
    ValidationError,
)

__version__ = "1.0.0"

__all__ = [
    "AnalysisConfig",
    "DataLoader",
    "FrontierEstimator",
    "MonteCarloSampler",
    "PortfolioModel",
    "SessionState",
    "add_return_vol_point",
    "add_weight_point",
    "clear_return_vol_points",
    "clear_weight_points",
    "compute_covariance",
    "compute_session",
    "equal_weights_pct",
    "run_session",
    "summary_report",
    "ConfigurationError",
    "DataLoadError",
    "FrontierCloudError",
    "InvalidWeights",
    "ValidationError",
]
