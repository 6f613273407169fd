"""
Main Runner Script for the Monte Carlo Efficient Frontier
=========================================================

This script runs the full workflow in one go:
1. Loading the returns, volatilities and correlations datasets
2. Sampling random portfolios
3. Estimating the efficient frontier and marking MVP / Max Sharpe
4. Adding user portfolios and return/volatility points
5. Saving the chart, a JSON export and the log

Usage:
    fc-analyze                                   # Run with the hosted sample data
    fc-analyze --returns r.csv --vols v.csv --corr c.csv
    fc-analyze --rf 4 --sims 100000 --seed 7     # Risk-free 4%, seeded cloud
    fc-analyze --weights 60,40 --point 7.5,11    # Overlay user points (percent)
"""

import sys
import json
import argparse
import logging
import traceback
from datetime import datetime
from typing import List, Optional
from pathlib import Path

import matplotlib.pyplot as plt

from frontier_cloud.core.config import DATA_URLS, DEFAULT_BINS, DEFAULT_SIMULATIONS, AnalysisConfig
from frontier_cloud.core.session import (
    SessionState,
    add_return_vol_point,
    add_weight_point,
    run_session,
    summary_report,
)
from frontier_cloud.errors import FrontierCloudError, ValidationError
from frontier_cloud.visualization import plot_frontier_cloud, plot_portfolio_weights

PACKAGE_ROOT = Path(__file__).parent.parent.parent


# =============================================================================
# LOGGING SETUP
# =============================================================================

def setup_logger(script_name: str = "frontier_cloud", log_dir: Optional[str] = None) -> logging.Logger:
    """
    Sets up a logger that writes to both file and console.

    The logger is the package's root logger, so messages from the core
    modules end up in the same file.

    Args:
        script_name: Name of the script (used in log filename)
        log_dir: Directory for log files (default: logs/ at the package root)

    Returns:
        Configured logger instance
    """
    log_dir = Path(log_dir) if log_dir else PACKAGE_ROOT / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)

    # Generate unique log filename
    timestamp = datetime.now().strftime("%Y_%m_%d_%H%M")
    log_filename = log_dir / f"log_{script_name}_{timestamp}.txt"

    logger = logging.getLogger("frontier_cloud")
    logger.setLevel(logging.INFO)
    logger.propagate = False

    # Clear existing handlers (prevent duplicates)
    if logger.hasHandlers():
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    file_handler = logging.FileHandler(log_filename, encoding='utf-8')
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger


# =============================================================================
# ANALYSIS CLASS
# =============================================================================

class AnalysisCheckpoint:
    """
    Tracks the progress of a run.
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self.steps_completed = []
        self.start_time = datetime.now()
        self.current_step = None

    def start_step(self, step_name: str):
        """Mark a step as started."""
        self.current_step = step_name
        self.logger.info(f"[CHECKPOINT] Starting: {step_name}")

    def complete_step(self, step_name: str):
        """Mark a step as completed."""
        self.steps_completed.append(step_name)
        self.logger.info(f"[CHECKPOINT] Completed: {step_name}")

    def get_progress_summary(self) -> dict:
        """Get summary of analysis progress."""
        elapsed = (datetime.now() - self.start_time).total_seconds()
        return {
            'steps_completed': list(self.steps_completed),
            'current_step': self.current_step,
            'elapsed_seconds': elapsed
        }

    def log_final_report(self):
        """Log final analysis report."""
        summary = self.get_progress_summary()
        self.logger.info("=" * 60)
        self.logger.info("  ANALYSIS COMPLETE")
        self.logger.info("=" * 60)
        self.logger.info(f"  Steps completed: {len(summary['steps_completed'])}")
        self.logger.info(f"  Total time: {summary['elapsed_seconds']:.2f} seconds")
        self.logger.info("=" * 60)


# =============================================================================
# MAIN ANALYSIS FUNCTIONS
# =============================================================================

def get_output_dir(output_dir: Optional[str] = None) -> Path:
    """Get (and create) the output directory path."""
    path = Path(output_dir) if output_dir else PACKAGE_ROOT / "output"
    path.mkdir(parents=True, exist_ok=True)
    return path


def parse_pair_list(text: str) -> List[str]:
    """Split a comma-separated option value ("60,40") into its entries."""
    return [part.strip() for part in text.split(',')]


def run_full_analysis(
    config: AnalysisConfig,
    user_weights: Optional[List[List[str]]] = None,
    user_points: Optional[List[List[str]]] = None,
    save_plots: bool = True,
    output_dir: Optional[str] = None,
    json_path: Optional[str] = None,
    logger: Optional[logging.Logger] = None
) -> SessionState:
    """
    Run the complete workflow and return the final state.

    Args:
        config: AnalysisConfig with sources and settings
        user_weights: Percentage weight lists to add as user portfolios
        user_points: [return %, volatility %] pairs to add as manual points
        save_plots: If True, save plots to files
        output_dir: Directory for output files
        json_path: If provided, write the plain-data export here
        logger: Logger instance

    Returns:
        Final SessionState
    """
    if logger is None:
        logger = setup_logger()

    checkpoint = AnalysisCheckpoint(logger)

    logger.info("=" * 70)
    logger.info("  MONTE CARLO EFFICIENT FRONTIER")
    logger.info("=" * 70)
    logger.info(f"  Risk-free rate: {config.risk_free_rate*100:.2f}%")
    logger.info(f"  Simulations: {config.n_simulations:,}")
    logger.info(f"  Frontier bins: {config.n_bins}")
    logger.info("=" * 70)

    checkpoint.start_step("Load Data and Simulate")
    state = run_session(config)
    checkpoint.complete_step("Load Data and Simulate")

    checkpoint.start_step("Add User Points")
    for weights in user_weights or []:
        state = add_weight_point(state, weights)
    for pair in user_points or []:
        if len(pair) != 2:
            raise ValidationError(f"A point needs RETURN,VOLATILITY, got {','.join(pair)!r}")
        state = add_return_vol_point(state, pair[0], pair[1])
    checkpoint.complete_step("Add User Points")

    for line in summary_report(state).splitlines():
        logger.info(line)

    if save_plots:
        checkpoint.start_step("Generate Plots")
        out = get_output_dir(output_dir)

        plot_frontier_cloud(state, save_path=str(out / "efficient_frontier.png"))
        logger.info("Saved: efficient_frontier.png")

        if state.min_variance is not None:
            plot_portfolio_weights(
                state.min_variance.weights, state.asset_names,
                title="Minimum Variance Portfolio Weights",
                save_path=str(out / "mvp_weights.png")
            )
            logger.info("Saved: mvp_weights.png")

        plot_portfolio_weights(
            state.max_sharpe.weights, state.asset_names,
            title="Maximum Sharpe Portfolio Weights",
            save_path=str(out / "max_sharpe_weights.png")
        )
        logger.info("Saved: max_sharpe_weights.png")

        checkpoint.complete_step("Generate Plots")

    if json_path:
        checkpoint.start_step("Export JSON")
        Path(json_path).parent.mkdir(parents=True, exist_ok=True)
        with open(json_path, 'w', encoding='utf-8') as f:
            json.dump(state.to_dict(), f)
        logger.info(f"Saved: {json_path}")
        checkpoint.complete_step("Export JSON")

    checkpoint.log_final_report()
    return state


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='fc-analyze',
        description='Monte Carlo Efficient Frontier Tool',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  fc-analyze                                      # Hosted sample data
  fc-analyze --returns r.csv --vols v.csv --corr c.csv
  fc-analyze --rf 4 --sims 100000 --seed 7
  fc-analyze --weights 60,40 --weights 50,50 --point 7.5,11
        """
    )

    parser.add_argument('--returns', default=DATA_URLS['returns'],
                        help='Mean returns dataset (URL, CSV or Excel path)')
    parser.add_argument('--vols', default=DATA_URLS['vols'],
                        help='Volatilities dataset (URL, CSV or Excel path)')
    parser.add_argument('--corr', default=DATA_URLS['corr'],
                        help='Correlations dataset (URL, CSV or Excel path)')
    parser.add_argument('--rf', '-r', default='0',
                        help='Risk-free rate in percent, clamped to 0-100 (default: 0)')
    parser.add_argument('--sims', '-n', default=str(DEFAULT_SIMULATIONS),
                        help='Number of simulated portfolios, clamped to 1,000-200,000 '
                             f'(default: {DEFAULT_SIMULATIONS:,})')
    parser.add_argument('--bins', type=int, default=DEFAULT_BINS,
                        help=f'Volatility bins for the frontier estimate (default: {DEFAULT_BINS})')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for a reproducible cloud')
    parser.add_argument('--weights', '-w', action='append', default=[], metavar='W1,W2,...',
                        help='User portfolio weights in percent; repeatable')
    parser.add_argument('--point', '-p', action='append', default=[], metavar='RET,VOL',
                        help='Return/volatility point in percent; repeatable')
    parser.add_argument('--no-plots', action='store_true',
                        help='Disable plot generation')
    parser.add_argument('--show-plots', action='store_true',
                        help='Show plots interactively (default: just save)')
    parser.add_argument('--json', dest='json_path', default=None,
                        help='Write the plain-data result to this JSON file')
    parser.add_argument('--output-dir', '-o', default=None,
                        help='Directory for charts (default: output/)')
    parser.add_argument('--log-dir', default=None,
                        help='Directory for log files (default: logs/)')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the frontier script."""
    args = build_parser().parse_args(argv)

    logger = setup_logger("frontier_analysis", args.log_dir)

    config = AnalysisConfig(
        returns_source=args.returns,
        vols_source=args.vols,
        corr_source=args.corr,
        risk_free_pct=args.rf,
        simulations=args.sims,
        n_bins=args.bins,
        seed=args.seed,
    )

    try:
        run_full_analysis(
            config,
            user_weights=[parse_pair_list(w) for w in args.weights],
            user_points=[parse_pair_list(p) for p in args.point],
            save_plots=not args.no_plots,
            output_dir=args.output_dir,
            json_path=args.json_path,
            logger=logger
        )

        if args.show_plots and not args.no_plots:
            plt.show()

        logger.info("Analysis completed successfully!")
        return 0

    except FrontierCloudError as e:
        logger.error(f"Analysis failed: {e}")
        logger.debug(traceback.format_exc())
        return 1
    except Exception as e:
        logger.error(f"Analysis failed: {e}")
        logger.error(traceback.format_exc())
        return 1
    finally:
        plt.close('all')


if __name__ == "__main__":
    sys.exit(main())
