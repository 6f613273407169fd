"""Visualization modules for the sampled frontier."""

from frontier_cloud.visualization.plots import (
    plot_frontier_cloud,
    plot_portfolio_weights,
)

__all__ = [
    "plot_frontier_cloud",
    "plot_portfolio_weights",
]
