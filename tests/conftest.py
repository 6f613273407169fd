"""Shared fixtures: two-asset datasets on disk and in memory."""

import logging

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from frontier_cloud.core.loader import DataLoader


RETURNS_CSV = """Asset,Mean Return
Equities,0.10
Bonds,0.05
"""

VOLS_CSV = """Asset,Volatility
Equities,0.20
Bonds,0.10
"""

CORR_CSV = """Asset,Equities,Bonds
Equities,1,0
Bonds,0,1
"""


@pytest.fixture
def dataset_files(tmp_path):
    """Paths of the two-asset returns, volatilities and correlations CSVs."""
    paths = {
        'returns': tmp_path / "returns.csv",
        'vols': tmp_path / "vols.csv",
        'corr': tmp_path / "corr.csv",
    }
    paths['returns'].write_text(RETURNS_CSV)
    paths['vols'].write_text(VOLS_CSV)
    paths['corr'].write_text(CORR_CSV)
    return {key: str(path) for key, path in paths.items()}


@pytest.fixture
def two_asset_data():
    return DataLoader().load_direct(
        ["Equities", "Bonds"],
        [0.10, 0.05],
        [0.20, 0.10],
        np.eye(2),
    )


@pytest.fixture
def three_asset_data():
    corr = np.array([
        [1.0, 0.3, -0.2],
        [0.3, 1.0, 0.5],
        [-0.2, 0.5, 1.0],
    ])
    return DataLoader().load_direct(
        ["Stocks", "Credit", "Gold"],
        [0.09, 0.05, 0.04],
        [0.18, 0.08, 0.15],
        corr,
    )


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo setup_logger() so log records reach caplog in later tests."""
    yield
    logger = logging.getLogger("frontier_cloud")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
