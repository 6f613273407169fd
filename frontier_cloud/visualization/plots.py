"""
Plotting Module for the Monte Carlo Frontier
============================================

Draws a computed SessionState on the risk-return plane:
- Random portfolio cloud, coloured by Sharpe ratio
- Estimated efficient frontier (upper envelope of the cloud)
- Minimum Variance and Maximum Sharpe portfolios
- Individual assets
- User portfolios and manually entered return/volatility points

Both axes are shown in percent.
"""

import logging
from typing import List, Optional, Tuple

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.figure import Figure
from matplotlib.ticker import FuncFormatter

from frontier_cloud.core.session import SessionState
from frontier_cloud.errors import ValidationError

logger = logging.getLogger(__name__)

_PCT = FuncFormatter(lambda v, _: f"{v:.1f}%")


def plot_frontier_cloud(
    state: SessionState,
    show_assets: bool = True,
    show_user_points: bool = True,
    figsize: Tuple[int, int] = (12, 8),
    save_path: Optional[str] = None,
    title: str = "Efficient Frontier (Monte Carlo Estimate)"
) -> Figure:
    """
    Create a scatter plot of the sampled cloud and its estimated frontier.

    Args:
        state: Computed SessionState
        show_assets: If True, show individual assets
        show_user_points: If True, show user portfolios and manual points
        figsize: Figure size (width, height)
        save_path: If provided, save the figure to this path
        title: Plot title

    Returns:
        matplotlib Figure object
    """
    if state.cloud is None or len(state.cloud) == 0:
        raise ValidationError("Run the simulation before plotting.")

    cloud = state.cloud
    fig, ax = plt.subplots(figsize=figsize)

    # Random portfolios
    scatter = ax.scatter(cloud.vols * 100, cloud.returns * 100,
                         c=cloud.sharpes, cmap='viridis', s=4, alpha=0.5,
                         linewidths=0, zorder=1)
    colorbar = fig.colorbar(scatter, ax=ax)
    colorbar.set_label('Sharpe Ratio', fontsize=11)

    # Estimated frontier
    if state.frontier is not None and len(state.frontier):
        ax.plot(state.frontier.vols * 100, state.frontier.returns * 100,
                color='#111111', linewidth=2, label='Efficient Frontier (estimated)', zorder=3)

    if state.min_variance is not None:
        mvp = state.min_variance
        ax.scatter([mvp.vol * 100], [mvp.ret * 100],
                   c='#ef4444', s=120, marker='o', edgecolors='black',
                   label=f"Min Variance (σ={mvp.vol*100:.2f}%, μ={mvp.ret*100:.2f}%)",
                   zorder=6)
        ax.annotate('Min Variance', (mvp.vol * 100, mvp.ret * 100),
                    xytext=(8, -8), textcoords='offset points', fontsize=10)

    if state.max_sharpe is not None:
        tan = state.max_sharpe
        ax.scatter([tan.vol * 100], [tan.ret * 100],
                   c='#2563eb', s=120, marker='o', edgecolors='black',
                   label=f"Max Sharpe (Sharpe={tan.sharpe:.3f})",
                   zorder=6)
        ax.annotate('Max Sharpe', (tan.vol * 100, tan.ret * 100),
                    xytext=(8, -8), textcoords='offset points', fontsize=10)

    if show_assets and state.is_loaded:
        asset_vols = np.asarray(state.data.volatilities) * 100
        asset_rets = np.asarray(state.data.mean_returns) * 100
        ax.scatter(asset_vols, asset_rets,
                   c='white', s=80, marker='s', edgecolors='black',
                   label='Individual Assets', zorder=5)
        for name, x, y in zip(state.asset_names, asset_vols, asset_rets):
            ax.annotate(name, (x, y), xytext=(5, 5), textcoords='offset points',
                        fontsize=9, fontweight='bold')

    if show_user_points:
        if state.user_weight_points:
            ax.scatter([p.vol * 100 for p in state.user_weight_points],
                       [p.ret * 100 for p in state.user_weight_points],
                       c='#dc2626', s=60, marker='o', edgecolors='black',
                       label='User Portfolios', zorder=7)
        if state.user_rv_points:
            ax.scatter([p.vol * 100 for p in state.user_rv_points],
                       [p.ret * 100 for p in state.user_rv_points],
                       c='#1d4ed8', s=80, marker='^', edgecolors='black',
                       label='User Return/Volatility Points', zorder=7)

    # Formatting
    ax.set_xlim(left=0, right=np.nanmax(cloud.vols) * 110)
    ax.xaxis.set_major_formatter(_PCT)
    ax.yaxis.set_major_formatter(_PCT)
    ax.set_xlabel('Volatility (σ)', fontsize=12)
    ax.set_ylabel('Expected Return', fontsize=12)
    ax.set_title(title, fontsize=14, fontweight='bold')
    ax.legend(loc='upper left', fontsize=9)
    ax.grid(True, alpha=0.3)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        logger.info(f"Figure saved to: {save_path}")

    return fig


def plot_portfolio_weights(
    weights,
    asset_names: List[str],
    title: str = "Portfolio Weights",
    figsize: Tuple[int, int] = (10, 6),
    save_path: Optional[str] = None
) -> Figure:
    """
    Create a bar chart of portfolio weights.

    Args:
        weights: Array of portfolio weights (decimal)
        asset_names: List of asset names
        title: Plot title
        figsize: Figure size
        save_path: Optional path to save figure

    Returns:
        matplotlib Figure object
    """
    weights = np.asarray(weights, dtype=float)
    fig, ax = plt.subplots(figsize=figsize)

    bars = ax.bar(asset_names, weights * 100, color='#2563eb', edgecolor='black')

    for bar, w in zip(bars, weights):
        ax.annotate(f'{w*100:.1f}%',
                    xy=(bar.get_x() + bar.get_width() / 2, bar.get_height()),
                    xytext=(0, 3), textcoords='offset points',
                    ha='center', va='bottom', fontsize=10, fontweight='bold')

    ax.set_xlabel('Assets', fontsize=12)
    ax.set_ylabel('Weight %', fontsize=12)
    ax.set_title(title, fontsize=14, fontweight='bold')
    ax.grid(True, axis='y', alpha=0.3)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        logger.info(f"Figure saved to: {save_path}")

    return fig
