"""
Portfolio Math
==============

Covariance construction and the per-portfolio statistics used by the
Monte Carlo sampler and by user-entered portfolios:
- Covariance matrix from volatilities and correlations
- Expected return (dot product with mean returns)
- Volatility (square root of the quadratic form w^T * Sigma * w)
- Sharpe ratio against a risk-free rate
- Weight normalization

All functions accept a single weight vector or a 2D array holding one
portfolio per row, so the whole Monte Carlo cloud is evaluated in one
vectorized call.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np

from frontier_cloud.errors import ConfigurationError, InvalidWeights

# Volatility below this is treated as riskless (Sharpe ratio reported as 0)
RISKLESS_VOL = 1e-10


@dataclass(frozen=True)
class PortfolioPoint:
    """
    A single portfolio on the risk-return plane.

    Attributes:
        ret: Expected return (decimal)
        vol: Volatility / standard deviation (decimal)
        sharpe: Sharpe ratio at the risk-free rate used to build the point
        weights: Decimal weights summing to 1, or None for points entered
            directly as a return/volatility pair
    """

    ret: float
    vol: float
    sharpe: float
    weights: Optional[Tuple[float, ...]] = None

    def to_dict(self) -> Dict:
        return {
            'ret': self.ret,
            'vol': self.vol,
            'sharpe': self.sharpe,
            'weights': list(self.weights) if self.weights is not None else None,
        }


def compute_covariance(volatilities, correlations) -> np.ndarray:
    """
    Build a covariance matrix from volatilities and a correlation matrix.

    Formula: cov[i, j] = vol[i] * vol[j] * corr[i, j]

    Args:
        volatilities: Vector of asset volatilities (length n)
        correlations: Correlation matrix (n x n)

    Returns:
        Covariance matrix (n x n)

    Raises:
        ConfigurationError: If the dimensions don't match
    """
    vols = np.asarray(volatilities, dtype=float).flatten()
    corr = np.asarray(correlations, dtype=float)

    if corr.ndim != 2 or corr.shape[0] != corr.shape[1]:
        raise ConfigurationError(f"Correlation matrix must be square, got shape {corr.shape}")
    if corr.shape[0] != len(vols):
        raise ConfigurationError(
            f"Correlation matrix shape {corr.shape} doesn't match "
            f"number of volatilities {len(vols)}"
        )

    return np.outer(vols, vols) * corr


def expected_return(weights, mean_returns):
    """
    Calculate expected portfolio return.

    Formula: mu_p = w^T * mu = sum(w_i * mu_i)

    This is a plain dot product; the weights need not sum to 1.

    Args:
        weights: Weight vector, or 2D array with one portfolio per row
        mean_returns: Vector of asset mean returns

    Returns:
        Expected return (float for a vector, array for a matrix)
    """
    return np.dot(np.asarray(weights, dtype=float), np.asarray(mean_returns, dtype=float))


def portfolio_variance(weights, cov_matrix):
    """
    Calculate portfolio variance using the quadratic form.

    Formula: sigma_p^2 = w^T * Sigma * w

    Args:
        weights: Weight vector, or 2D array with one portfolio per row
        cov_matrix: Covariance matrix

    Returns:
        Portfolio variance (float for a vector, array for a matrix)
    """
    w = np.asarray(weights, dtype=float)
    cov = np.asarray(cov_matrix, dtype=float)
    if w.ndim == 1:
        return float(np.dot(w, np.dot(cov, w)))
    return np.einsum('ij,jk,ik->i', w, cov, w)


def portfolio_volatility(weights, cov_matrix):
    """
    Calculate portfolio volatility (standard deviation).

    Formula: sigma_p = sqrt(w^T * Sigma * w)

    Non-negative for a positive semi-definite covariance matrix. An invalid
    matrix can give a negative variance and therefore NaN; that is an input
    quality problem and is passed through.
    """
    with np.errstate(invalid='ignore'):
        vol = np.sqrt(portfolio_variance(weights, cov_matrix))
    if np.ndim(vol) == 0:
        return float(vol)
    return vol


def sharpe_ratio(ret, vol, rf_rate: float = 0.0):
    """
    Calculate the Sharpe ratio: (mu_p - rf) / sigma_p

    Returns 0.0 where the volatility is effectively zero and NaN where it
    is not finite.
    """
    ret_arr = np.asarray(ret, dtype=float)
    vol_arr = np.asarray(vol, dtype=float)
    with np.errstate(divide='ignore', invalid='ignore'):
        sharpe = np.where(vol_arr > RISKLESS_VOL, (ret_arr - rf_rate) / vol_arr, 0.0)
        sharpe = np.where(np.isfinite(vol_arr), sharpe, np.nan)
    if sharpe.ndim == 0:
        return float(sharpe)
    return sharpe


def normalize_weights(weights) -> np.ndarray:
    """
    Scale weights so they sum to 1.

    Args:
        weights: Weight vector, or 2D array normalized row by row

    Returns:
        Normalized weights with the same shape as the input

    Raises:
        InvalidWeights: If a sum is zero (e.g. all-zero input) or non-finite
    """
    w = np.asarray(weights, dtype=float)
    totals = w.sum(axis=-1, keepdims=True)

    if np.any(totals == 0) or not np.all(np.isfinite(totals)):
        raise InvalidWeights("Weights must have a non-zero, finite sum to be normalized")

    return w / totals


class PortfolioModel:
    """
    Portfolio statistics for one loaded dataset.

    Holds the expected returns, the covariance matrix and the risk-free rate
    so that any weight vector can be turned into a point on the risk-return
    plane.

    Attributes:
        expected_returns (np.ndarray): Vector of mean returns for each asset
        cov_matrix (np.ndarray): Covariance matrix of asset returns
        asset_names (List[str]): Names of the assets
        n_assets (int): Number of assets
        rf_rate (float): Risk-free rate (decimal)

    Example:
        >>> model = PortfolioModel([0.10, 0.05], [[0.04, 0.0], [0.0, 0.01]])
        >>> round(model.portfolio_std([0.5, 0.5]), 4)
        0.1118
    """

    def __init__(
        self,
        expected_returns,
        cov_matrix,
        asset_names: Optional[List[str]] = None,
        rf_rate: float = 0.0
    ):
        """
        Initialize the model.

        Args:
            expected_returns: Vector of mean returns for each asset
            cov_matrix: Covariance matrix of asset returns (n x n)
            asset_names: Optional list of asset names (default: Asset_1, Asset_2, ...)
            rf_rate: Risk-free rate as a decimal

        Raises:
            ConfigurationError: If dimensions don't match
        """
        self.expected_returns = np.array(expected_returns, dtype=float).flatten()
        self.cov_matrix = np.array(cov_matrix, dtype=float)
        self.n_assets = len(self.expected_returns)
        self.rf_rate = float(rf_rate)

        self._validate_inputs()

        if asset_names is None:
            self.asset_names = [f"Asset_{i+1}" for i in range(self.n_assets)]
        else:
            self.asset_names = list(asset_names)
            if len(self.asset_names) != self.n_assets:
                raise ConfigurationError(
                    f"Got {len(self.asset_names)} asset names for {self.n_assets} assets"
                )

    def _validate_inputs(self):
        """Validate that inputs are properly formatted."""
        if self.n_assets == 0:
            raise ConfigurationError("No assets to model")
        if self.cov_matrix.shape != (self.n_assets, self.n_assets):
            raise ConfigurationError(
                f"Covariance matrix shape {self.cov_matrix.shape} doesn't match "
                f"number of assets {self.n_assets}"
            )

    def portfolio_return(self, weights):
        """Expected return: mu_p = w' * mu"""
        return expected_return(weights, self.expected_returns)

    def portfolio_variance(self, weights):
        """Variance: var_p = w' * Sigma * w"""
        return portfolio_variance(weights, self.cov_matrix)

    def portfolio_std(self, weights):
        """Volatility: sigma_p = sqrt(w' * Sigma * w)"""
        return portfolio_volatility(weights, self.cov_matrix)

    def portfolio_stats(self, weights) -> Dict[str, float]:
        """
        Calculate all portfolio statistics.

        Args:
            weights: Portfolio weights

        Returns:
            Dictionary containing mean, std, variance, and Sharpe ratio
        """
        ret = float(self.portfolio_return(weights))
        var = self.portfolio_variance(weights)
        std = float(np.sqrt(var)) if var >= 0 else float('nan')

        return {
            'mean': ret,
            'std': std,
            'variance': var,
            'sharpe': sharpe_ratio(ret, std, self.rf_rate)
        }

    def evaluate(self, weights) -> PortfolioPoint:
        """
        Turn a weight vector into a PortfolioPoint.

        The weights are used as given; callers normalize first.
        """
        w = np.asarray(weights, dtype=float).flatten()
        if len(w) != self.n_assets:
            raise ConfigurationError(f"Got {len(w)} weights for {self.n_assets} assets")
        stats = self.portfolio_stats(w)
        return PortfolioPoint(
            ret=stats['mean'],
            vol=stats['std'],
            sharpe=stats['sharpe'],
            weights=tuple(float(x) for x in w),
        )

    def get_asset_stats(self) -> Dict[str, Dict[str, float]]:
        """
        Get individual asset statistics.

        Returns:
            Dictionary mapping asset names to their stats
        """
        stats = {}
        for i, name in enumerate(self.asset_names):
            stats[name] = {
                'mean': float(self.expected_returns[i]),
                'std': float(np.sqrt(self.cov_matrix[i, i])),
                'variance': float(self.cov_matrix[i, i])
            }
        return stats
