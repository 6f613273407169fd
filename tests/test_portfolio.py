"""Tests for covariance construction and portfolio math."""

import numpy as np
import pytest

from frontier_cloud.core.portfolio import (
    PortfolioModel,
    compute_covariance,
    expected_return,
    normalize_weights,
    portfolio_volatility,
    sharpe_ratio,
)
from frontier_cloud.errors import ConfigurationError, InvalidWeights, ValidationError


MEANS = np.array([0.10, 0.05])
VOLS = np.array([0.20, 0.10])
CORR = np.eye(2)


def _random_psd_cov(n_assets: int = 4, seed: int = 0) -> np.ndarray:
    rng = np.random.default_rng(seed)
    a = rng.normal(0.0, 0.1, (n_assets, n_assets))
    return a @ a.T


def test_covariance_from_vols_and_correlations():
    cov = compute_covariance(VOLS, CORR)
    np.testing.assert_allclose(cov, [[0.04, 0.0], [0.0, 0.01]])


def test_covariance_preserves_symmetry():
    vols = [0.2, 0.15, 0.1]
    corr = [[1.0, 0.3, -0.2], [0.3, 1.0, 0.5], [-0.2, 0.5, 1.0]]
    cov = compute_covariance(vols, corr)
    assert np.array_equal(cov, cov.T)


def test_covariance_dimension_mismatch_raises():
    with pytest.raises(ConfigurationError, match="doesn't match"):
        compute_covariance([0.2, 0.1, 0.3], CORR)


def test_covariance_non_square_raises():
    with pytest.raises(ConfigurationError, match="square"):
        compute_covariance([0.2, 0.1], np.ones((2, 3)))


def test_two_asset_equal_weight_scenario():
    cov = compute_covariance(VOLS, CORR)
    weights = [0.5, 0.5]
    assert expected_return(weights, MEANS) == pytest.approx(0.075)
    assert portfolio_volatility(weights, cov) == pytest.approx(np.sqrt(0.0125))
    assert portfolio_volatility(weights, cov) == pytest.approx(0.1118, abs=1e-4)


def test_expected_return_is_linear():
    rng = np.random.default_rng(3)
    w1, w2, returns = rng.normal(size=(3, 5))
    a, b = 2.5, -1.3
    combined = expected_return(a * w1 + b * w2, returns)
    assert combined == pytest.approx(a * expected_return(w1, returns) + b * expected_return(w2, returns))


def test_volatility_is_non_negative_for_normalized_weights():
    cov = _random_psd_cov()
    weights = normalize_weights(np.random.default_rng(1).random((500, 4)))
    vols = portfolio_volatility(weights, cov)
    assert vols.shape == (500,)
    assert np.all(vols >= 0)


def test_volatility_matrix_matches_single_vector():
    cov = _random_psd_cov()
    weights = normalize_weights(np.random.default_rng(2).random((10, 4)))
    vols = portfolio_volatility(weights, cov)
    for row, vol in zip(weights, vols):
        assert portfolio_volatility(row, cov) == pytest.approx(vol)


def test_normalize_weights_sums_to_one():
    normalized = normalize_weights([3.0, 1.0, 4.0, 2.0])
    assert normalized.sum() == pytest.approx(1.0, abs=1e-9)
    np.testing.assert_allclose(normalized, [0.3, 0.1, 0.4, 0.2])


def test_normalize_weights_row_wise():
    rows = normalize_weights(np.random.default_rng(4).random((100, 6)))
    np.testing.assert_allclose(rows.sum(axis=1), 1.0, atol=1e-9)


def test_normalize_all_zero_weights_raises():
    with pytest.raises(InvalidWeights):
        normalize_weights([0.0, 0.0, 0.0])


def test_invalid_weights_is_a_validation_error():
    with pytest.raises(ValidationError):
        normalize_weights([[0.2, 0.8], [0.0, 0.0]])


def test_sharpe_ratio():
    assert sharpe_ratio(0.08, 0.2, 0.02) == pytest.approx(0.3)
    assert sharpe_ratio(0.05, 0.0, 0.02) == 0.0
    np.testing.assert_allclose(sharpe_ratio([0.1, 0.04], [0.2, 0.1], 0.0), [0.5, 0.4])


def test_sharpe_ratio_of_non_finite_volatility_is_nan():
    assert np.isnan(sharpe_ratio(0.05, float("nan")))
    assert np.isnan(sharpe_ratio(0.05, float("inf")))
    assert np.isnan(sharpe_ratio([0.1, 0.05], [0.2, np.nan])).tolist() == [False, True]


def test_model_evaluate_two_assets():
    model = PortfolioModel(MEANS, compute_covariance(VOLS, CORR), ["Equities", "Bonds"], rf_rate=0.01)
    point = model.evaluate([0.6, 0.4])
    assert point.ret == pytest.approx(0.08)
    assert point.vol == pytest.approx(np.sqrt(0.016))
    assert point.sharpe == pytest.approx((0.08 - 0.01) / np.sqrt(0.016))
    assert point.weights == (0.6, 0.4)


def test_model_rejects_mismatched_covariance():
    with pytest.raises(ConfigurationError):
        PortfolioModel(MEANS, np.eye(3))


def test_model_rejects_wrong_weight_count():
    model = PortfolioModel(MEANS, compute_covariance(VOLS, CORR))
    with pytest.raises(ConfigurationError):
        model.evaluate([0.2, 0.3, 0.5])


def test_model_default_names_and_asset_stats():
    model = PortfolioModel(MEANS, compute_covariance(VOLS, CORR))
    assert model.asset_names == ["Asset_1", "Asset_2"]
    stats = model.get_asset_stats()
    assert stats["Asset_1"]["std"] == pytest.approx(0.20)
    assert stats["Asset_2"]["mean"] == pytest.approx(0.05)


def test_point_to_dict_is_plain_data():
    model = PortfolioModel(MEANS, compute_covariance(VOLS, CORR))
    data = model.evaluate([0.5, 0.5]).to_dict()
    assert set(data) == {"ret", "vol", "sharpe", "weights"}
    assert data["weights"] == [0.5, 0.5]
