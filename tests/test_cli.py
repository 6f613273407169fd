"""End-to-end tests for the fc-analyze command."""

import json

import pytest

from frontier_cloud.cli.main import build_parser, main, parse_pair_list
from frontier_cloud.core.config import DATA_URLS


def _args(files, tmp_path, *extra):
    return [
        '--returns', files['returns'],
        '--vols', files['vols'],
        '--corr', files['corr'],
        '--sims', '5',
        '--seed', '3',
        '--output-dir', str(tmp_path / "out"),
        '--log-dir', str(tmp_path / "logs"),
        *extra,
    ]


def test_parser_defaults():
    args = build_parser().parse_args([])
    assert args.returns == DATA_URLS['returns']
    assert args.rf == '0'
    assert args.weights == []
    assert args.json_path is None


def test_parse_pair_list():
    assert parse_pair_list("60, 40") == ["60", "40"]
    assert parse_pair_list("7.5,") == ["7.5", ""]


def test_full_run_writes_outputs(dataset_files, tmp_path):
    json_path = tmp_path / "result.json"
    code = main(_args(dataset_files, tmp_path,
                      '--rf', '1', '--weights', '60,40', '--point', '7.5,11',
                      '--json', str(json_path)))

    assert code == 0
    result = json.loads(json_path.read_text())
    assert result['n_simulations'] == 1000
    assert result['rf_rate'] == pytest.approx(0.01)
    assert len(result['user_weight_points']) == 1
    assert len(result['user_rv_points']) == 1
    assert (tmp_path / "out" / "efficient_frontier.png").exists()
    assert (tmp_path / "out" / "max_sharpe_weights.png").exists()
    assert list((tmp_path / "logs").glob("log_frontier_analysis_*.txt"))


def test_no_plots(dataset_files, tmp_path):
    assert main(_args(dataset_files, tmp_path, '--no-plots')) == 0
    assert not (tmp_path / "out").exists()


def test_missing_file_fails(dataset_files, tmp_path):
    files = dict(dataset_files, corr=str(tmp_path / "missing.csv"))
    assert main(_args(files, tmp_path, '--no-plots')) == 1


def test_bad_weights_fail(dataset_files, tmp_path):
    assert main(_args(dataset_files, tmp_path, '--no-plots', '--weights', '60,30')) == 1


def test_incomplete_point_fails(dataset_files, tmp_path):
    assert main(_args(dataset_files, tmp_path, '--no-plots', '--point', '7.5')) == 1


def test_bad_bin_count_fails_without_traceback(dataset_files, tmp_path):
    assert main(_args(dataset_files, tmp_path, '--no-plots', '--bins', '0')) == 1
    log_text = "".join(p.read_text() for p in (tmp_path / "logs").glob("*.txt"))
    assert "n_bins must be at least 1" in log_text
    assert "Traceback" not in log_text
