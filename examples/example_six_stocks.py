"""
Six-Stock Monte Carlo Frontier
==============================
6 Stocks: HD, IBM, INTC, JNJ, JPM, KO (monthly figures)
Risk-free rate: 0.05% monthly

Builds the datasets in memory instead of fetching them, then runs the same
steps as fc-analyze: sample the cloud, estimate the frontier, overlay a
user portfolio and save the chart.
"""

from pathlib import Path

import numpy as np

from frontier_cloud.core import (
    DataLoader,
    add_return_vol_point,
    add_weight_point,
    compute_session,
    summary_report,
)
from frontier_cloud.visualization import plot_frontier_cloud

PROJECT_ROOT = Path(__file__).parent.parent
OUTPUT_DIR = PROJECT_ROOT / 'output'
OUTPUT_DIR.mkdir(exist_ok=True)

# === Data for 6 stocks ===
asset_names = ['HD', 'IBM', 'INTC', 'JNJ', 'JPM', 'KO']

# Expected returns (monthly)
mean_returns = np.array([0.015392, -0.001335, 0.013972, 0.008750, 0.014342, 0.006737])

# Covariance matrix of monthly returns
cov_matrix = np.array([
    [0.00257569, 0.00144976, 0.00059154, 0.00051405, 0.00117486, 0.00061042],
    [0.00144976, 0.00420389, 0.00153980, 0.00077403, 0.00169090, 0.00034819],
    [0.00059154, 0.00153980, 0.00382510, 0.00072826, 0.00104477, 0.00048172],
    [0.00051405, 0.00077403, 0.00072826, 0.00159242, 0.00084915, 0.00082336],
    [0.00117486, 0.00169090, 0.00104477, 0.00084915, 0.00322618, 0.00039425],
    [0.00061042, 0.00034819, 0.00048172, 0.00082336, 0.00039425, 0.00147278]
])

RF_RATE = 0.0005  # 0.05% monthly

# The loader takes volatilities and correlations, so split the covariance
vols = np.sqrt(np.diag(cov_matrix))
corr = cov_matrix / np.outer(vols, vols)
np.fill_diagonal(corr, 1.0)

# ============================================================================
# SIMULATE
# ============================================================================
data = DataLoader().load_direct(asset_names, mean_returns, vols, corr)
state = compute_session(data, rf_rate=RF_RATE, n_simulations=100_000, seed=2024)

# Equal-weight portfolio and a hand-picked monthly target
state = add_weight_point(state, [100 / 6] * 6)
state = add_return_vol_point(state, 1.2, 4.5)

print(summary_report(state))

# ============================================================================
# PLOT
# ============================================================================
save_path = OUTPUT_DIR / 'six_stocks_frontier.png'
plot_frontier_cloud(state, title="Six Stocks - Monte Carlo Frontier", save_path=str(save_path))
print(f"\nChart saved to: {save_path}")
