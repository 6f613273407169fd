"""Tests for the Monte Carlo sampler and simulation-count clamping."""

import numpy as np
import pytest

from frontier_cloud.core.config import (
    DEFAULT_SIMULATIONS,
    MAX_SIMULATIONS,
    MIN_SIMULATIONS,
    clamp_risk_free,
    clamp_simulations,
)
from frontier_cloud.core.portfolio import PortfolioModel, sharpe_ratio
from frontier_cloud.core.sampler import MonteCarloSampler
from frontier_cloud.errors import ValidationError


def _make_model(data, rf_rate=0.0):
    return PortfolioModel(data.mean_returns, data.covariance(), list(data.names), rf_rate)


def test_small_count_is_raised_to_minimum(three_asset_data):
    sampler = MonteCarloSampler(_make_model(three_asset_data), n_simulations=5, seed=1)
    assert sampler.n_simulations == MIN_SIMULATIONS
    assert len(sampler.run()) == 1000


def test_clamp_simulations_bounds():
    assert clamp_simulations(10_000_000) == MAX_SIMULATIONS == 200_000
    assert clamp_simulations(-5) == MIN_SIMULATIONS
    assert clamp_simulations(float("inf")) == MAX_SIMULATIONS
    assert clamp_simulations(2500) == 2500


def test_clamp_simulations_parses_text():
    assert clamp_simulations(None) == DEFAULT_SIMULATIONS == 50_000
    assert clamp_simulations("  ") == DEFAULT_SIMULATIONS
    assert clamp_simulations("2500") == 2500
    assert clamp_simulations("1500.7") == 1500


def test_clamp_simulations_rejects_non_numeric():
    with pytest.raises(ValidationError, match="numeric"):
        clamp_simulations("abc")


def test_clamp_risk_free():
    assert clamp_risk_free("") == 0.0
    assert clamp_risk_free(4.5) == pytest.approx(0.045)
    assert clamp_risk_free(-3) == 0.0
    assert clamp_risk_free("150") == 1.0
    with pytest.raises(ValidationError):
        clamp_risk_free("four")


def test_weights_are_normalized_and_long_only(three_asset_data):
    cloud = MonteCarloSampler(_make_model(three_asset_data), 2000, seed=7).run()
    assert cloud.weights.shape == (2000, 3)
    np.testing.assert_allclose(cloud.weights.sum(axis=1), 1.0, atol=1e-9)
    assert np.all(cloud.weights >= 0)


def test_same_seed_gives_same_cloud(three_asset_data):
    model = _make_model(three_asset_data)
    first = MonteCarloSampler(model, 1000, seed=42).run()
    second = MonteCarloSampler(model, 1000, seed=42).run()
    np.testing.assert_array_equal(first.weights, second.weights)
    np.testing.assert_array_equal(first.returns, second.returns)


def test_different_seeds_give_different_clouds(three_asset_data):
    model = _make_model(three_asset_data)
    first = MonteCarloSampler(model, 1000, seed=1).run()
    second = MonteCarloSampler(model, 1000, seed=2).run()
    assert not np.array_equal(first.weights, second.weights)


def test_injected_generator_takes_precedence(three_asset_data):
    model = _make_model(three_asset_data)
    first = MonteCarloSampler(model, 1000, seed=1, rng=np.random.default_rng(9)).run()
    second = MonteCarloSampler(model, 1000, rng=np.random.default_rng(9)).run()
    np.testing.assert_array_equal(first.weights, second.weights)


def test_returns_stay_within_asset_range(three_asset_data):
    cloud = MonteCarloSampler(_make_model(three_asset_data), 5000, seed=3).run()
    means = three_asset_data.mean_returns
    assert cloud.returns.min() >= means.min() - 1e-12
    assert cloud.returns.max() <= means.max() + 1e-12


def test_sharpes_use_model_risk_free_rate(three_asset_data):
    cloud = MonteCarloSampler(_make_model(three_asset_data, rf_rate=0.02), 1000, seed=5).run()
    assert cloud.rf_rate == 0.02
    np.testing.assert_allclose(cloud.sharpes, sharpe_ratio(cloud.returns, cloud.vols, 0.02))


def test_cloud_arrays_are_read_only(three_asset_data):
    cloud = MonteCarloSampler(_make_model(three_asset_data), 1000, seed=5).run()
    with pytest.raises(ValueError):
        cloud.returns[0] = 1.0
    with pytest.raises(ValueError):
        cloud.weights[0, 0] = 1.0


def test_cloud_to_frame(three_asset_data):
    cloud = MonteCarloSampler(_make_model(three_asset_data), 1000, seed=5).run()
    df = cloud.to_frame(list(three_asset_data.names))
    assert list(df.columns) == ["ret", "vol", "sharpe", "w_Stocks", "w_Credit", "w_Gold"]
    assert len(df) == 1000
    point = cloud.point(0)
    assert point.ret == df["ret"].iloc[0]
    assert len(point.weights) == 3
