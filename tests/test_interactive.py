"""Tests for the menu-driven session, driven by scripted input."""

import pytest

from frontier_cloud.cli.interactive import InteractiveSession, get_user_config
from frontier_cloud.core.config import AnalysisConfig


def _scripted(*answers):
    remaining = iter(answers)

    def ask(prompt=""):
        try:
            return next(remaining)
        except StopIteration:
            raise EOFError from None
    return ask


def _make_session(files, tmp_path, *answers):
    config = AnalysisConfig(
        returns_source=files['returns'],
        vols_source=files['vols'],
        corr_source=files['corr'],
        simulations=1000,
        seed=5,
    )
    return InteractiveSession(config, input_func=_scripted(*answers), output_dir=str(tmp_path))


def test_run_prefills_equal_weights(dataset_files, tmp_path):
    session = _make_session(dataset_files, tmp_path)
    session.run_simulation()
    assert session.state.is_loaded
    assert session.weight_inputs == ["50.00", "50.00"]


def test_failed_run_keeps_state(dataset_files, tmp_path, capsys):
    session = _make_session(dataset_files, tmp_path)
    session.run_simulation()
    before = session.state

    session.config.vols_source = str(tmp_path / "missing.csv")
    session.run_simulation()

    assert session.state is before
    assert "Failed to load sample data" in capsys.readouterr().out


def test_add_weights_accepts_and_rejects(dataset_files, tmp_path, capsys):
    session = _make_session(dataset_files, tmp_path, "60", "40", "60", "30")
    session.run_simulation()

    session.add_weights()
    assert len(session.state.user_weight_points) == 1
    assert session.weight_inputs == ["60", "40"]

    session.add_weights()
    assert len(session.state.user_weight_points) == 1
    assert "Weights must sum to 100%." in capsys.readouterr().out


def test_add_weights_before_load(dataset_files, tmp_path, capsys):
    session = _make_session(dataset_files, tmp_path)
    session.add_weights()
    assert "Load data first." in capsys.readouterr().out


def test_add_point_rejects_non_numeric(dataset_files, tmp_path, capsys):
    session = _make_session(dataset_files, tmp_path, "abc", "5", "7.5", "11")
    session.run_simulation()

    session.add_point()
    assert session.state.user_rv_points == ()
    assert "Enter both return and volatility." in capsys.readouterr().out

    session.add_point()
    assert session.state.user_rv_points[0].ret == pytest.approx(0.075)


def test_menu_loop(dataset_files, tmp_path):
    session = _make_session(dataset_files, tmp_path, "1", "3", "", "", "5", "6", "12", "4", "8", "x", "0")
    session.loop()

    assert session.state.is_loaded
    assert session.state.user_weight_points == ()
    assert len(session.state.user_rv_points) == 1
    assert list(tmp_path.glob("efficient_frontier_*.png"))


def test_loop_ends_on_eof(dataset_files, tmp_path):
    session = _make_session(dataset_files, tmp_path)
    session.loop()
    assert not session.state.is_loaded


def test_get_user_config(capsys):
    config = get_user_config(_scripted("", "", "", "4", "2500", "7"))
    assert config.risk_free_rate == pytest.approx(0.04)
    assert config.n_simulations == 2500
    assert config.seed == 7
    assert "CURRENT ANALYSIS CONFIGURATION" in capsys.readouterr().out


def test_get_user_config_restores_defaults_on_bad_input():
    config = get_user_config(_scripted("", "", "", "abc", "", ""))
    assert config.risk_free_rate == 0.0
