"""
================================================================================
MONTE CARLO EFFICIENT FRONTIER - INTERACTIVE SESSION
================================================================================
A menu-driven session around one immutable SessionState.

This tool will:
1. Ask for the three dataset locations and the run settings
2. Load the data, sample random portfolios and estimate the frontier
3. Let you add and clear user portfolios (weights in percent)
4. Let you add and clear manual return/volatility points (percent)
5. Print a summary and save the chart

Every rejected action prints one message and leaves the session unchanged.
A failed run keeps the previous results.
================================================================================
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional

import matplotlib.pyplot as plt

from frontier_cloud.cli.main import get_output_dir
from frontier_cloud.core.config import DATA_URLS, DEFAULT_SIMULATIONS, AnalysisConfig
from frontier_cloud.core.loader import DataLoader
from frontier_cloud.core.session import (
    SessionState,
    add_return_vol_point,
    add_weight_point,
    clear_return_vol_points,
    clear_weight_points,
    equal_weights_pct,
    run_session,
    summary_report,
)
from frontier_cloud.errors import DataLoadError, FrontierCloudError
from frontier_cloud.visualization import plot_frontier_cloud

logger = logging.getLogger(__name__)

MENU = """
--- Menu ---
  1. Run simulation (load data)
  2. Equal-weight inputs
  3. Add weight portfolio
  4. Clear weight portfolios
  5. Add return/volatility point
  6. Clear return/volatility points
  7. Show summary
  8. Save chart
  9. Settings
  0. Quit
"""


class InteractiveSession:
    """
    Holds the current SessionState and the pending weight inputs.

    Attributes:
        config: AnalysisConfig used for the next run
        state: Current SessionState
        weight_inputs: Weight entries (percent) used by "Add weight portfolio"
    """

    def __init__(
        self,
        config: AnalysisConfig,
        input_func: Callable[[str], str] = input,
        loader: Optional[DataLoader] = None,
        output_dir: Optional[str] = None
    ):
        self.config = config
        self.state = SessionState()
        self.weight_inputs: List[str] = []
        self.input = input_func
        self.loader = loader
        self.output_dir = output_dir

    def notify(self, message: str):
        """Show a single blocking-style notification."""
        print(f"\n>>> {message}")

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def run_simulation(self):
        try:
            self.state = run_session(self.config, previous=self.state, loader=self.loader)
        except DataLoadError as e:
            logger.error(f"Data load failed: {e}")
            self.notify("Failed to load sample data")
            return
        except FrontierCloudError as e:
            logger.error(f"Run failed: {e}")
            self.notify(str(e))
            return

        print(f"\nLoaded {self.state.data.n_assets} assets: {', '.join(self.state.asset_names)}")
        print(f"Sampled {self.state.n_simulations:,} portfolios, "
              f"{len(self.state.frontier)} frontier points")

        if len(self.weight_inputs) != self.state.data.n_assets:
            self.set_equal_weights()

    def set_equal_weights(self):
        if not self.state.is_loaded:
            self.weight_inputs = []
            return
        self.weight_inputs = [f"{w:.2f}" for w in equal_weights_pct(self.state.data.n_assets)]
        for name, w in zip(self.state.asset_names, self.weight_inputs):
            print(f"  {name} (%): {w}")

    def add_weights(self):
        if not self.state.is_loaded:
            self.notify("Load data first.")
            return

        print("\nEnter weights in percent (press Enter to keep the shown value):")
        entries = []
        for i, name in enumerate(self.state.asset_names):
            current = self.weight_inputs[i] if i < len(self.weight_inputs) else ""
            answer = self.input(f"  {name} (%) [{current}]: ").strip()
            entries.append(answer if answer else current)

        try:
            self.state = add_weight_point(self.state, entries)
        except FrontierCloudError as e:
            logger.warning(f"Weight portfolio rejected: {e}")
            self.notify(str(e))
            return

        self.weight_inputs = entries
        point = self.state.user_weight_points[-1]
        print(f"Added: return {point.ret*100:.2f}%, volatility {point.vol*100:.2f}%")

    def add_point(self):
        ret = self.input("  Return (%): ").strip()
        vol = self.input("  Volatility (%): ").strip()
        try:
            self.state = add_return_vol_point(self.state, ret, vol)
        except FrontierCloudError as e:
            logger.warning(f"Return/volatility point rejected: {e}")
            self.notify(str(e))
            return
        print(f"Added point: return {ret}%, volatility {vol}%")

    def show_summary(self):
        if not self.state.is_loaded:
            self.notify("Load data first.")
            return
        print("\n" + summary_report(self.state))

    def save_chart(self) -> Optional[str]:
        if self.state.cloud is None:
            self.notify("Run the simulation first.")
            return None
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        path = get_output_dir(self.output_dir) / f"efficient_frontier_{timestamp}.png"
        plot_frontier_cloud(self.state, save_path=str(path))
        plt.close('all')
        print(f"Chart saved to: {path}")
        return str(path)

    def edit_settings(self):
        self.config = get_user_config(self.input, self.config)

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    def loop(self):
        actions = {
            '1': self.run_simulation,
            '2': self.set_equal_weights,
            '3': self.add_weights,
            '4': lambda: setattr(self, 'state', clear_weight_points(self.state)),
            '5': self.add_point,
            '6': lambda: setattr(self, 'state', clear_return_vol_points(self.state)),
            '7': self.show_summary,
            '8': self.save_chart,
            '9': self.edit_settings,
        }

        while True:
            print(MENU)
            try:
                choice = self.input("Select option [0-9]: ").strip()
            except EOFError:
                break
            if choice in ('0', 'q', 'quit'):
                break
            action = actions.get(choice)
            if action is None:
                print("Invalid option.")
                continue
            action()


def get_user_config(
    input_func: Callable[[str], str] = input,
    config: Optional[AnalysisConfig] = None
) -> AnalysisConfig:
    """
    Interactive configuration setup.

    Pressing Enter keeps the current value.

    Returns:
        Configured AnalysisConfig object
    """
    config = config or AnalysisConfig()

    print("\n" + "=" * 70)
    print("MONTE CARLO FRONTIER - CONFIGURATION")
    print("=" * 70)

    print("\n--- Data Sources (URL, CSV or Excel path) ---")
    for attr, key, label in (
        ('returns_source', 'returns', 'Mean returns'),
        ('vols_source', 'vols', 'Volatilities'),
        ('corr_source', 'corr', 'Correlations'),
    ):
        current = getattr(config, attr)
        answer = input_func(f"{label} [{current}]: ").strip().strip('"').strip("'")
        if answer.lower() == 'default':
            answer = DATA_URLS[key]
        if answer:
            setattr(config, attr, answer)

    print("\n--- Run Settings ---")
    rf = input_func(f"Risk-free rate in % [{config.risk_free_pct}]: ").strip()
    if rf:
        config.risk_free_pct = rf

    sims = input_func(f"Simulations (1,000-200,000) [{config.simulations or DEFAULT_SIMULATIONS}]: ").strip()
    if sims:
        config.simulations = sims

    seed = input_func(f"Random seed (blank for none) [{config.seed}]: ").strip()
    if seed:
        try:
            config.seed = int(seed)
        except ValueError:
            print("Invalid seed. Keeping previous value.")

    try:
        config.print_config()
    except FrontierCloudError as e:
        print(f"Invalid setting: {e}. Restoring defaults.")
        config.risk_free_pct = 0
        config.simulations = DEFAULT_SIMULATIONS

    return config


def main():
    """Main entry point for the interactive session."""
    print("\n" + "=" * 70)
    print("   MONTE CARLO EFFICIENT FRONTIER")
    print("   Random portfolios, estimated frontier, custom overlays")
    print("=" * 70)

    logging.basicConfig(level=logging.WARNING, format='%(asctime)s - %(levelname)s - %(message)s')

    config = get_user_config()
    session = InteractiveSession(config)
    session.run_simulation()
    session.loop()

    print("\nGoodbye.")


if __name__ == "__main__":
    main()
