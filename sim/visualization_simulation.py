"""
Visualization simulation for the DAOStake Economic Model.

This script runs a randomized staking scenario and plots the results.
"""

import sys
import os

# Add the core directory to the path
sys.path.append(os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "core"))
from stake_config import DECIMAL_PRECISION, StakeConfig
from staking_model import DAOStakeEconomicModel


def run_visualization_simulation():
    config = StakeConfig(blocks_per_period=1000, period_count=24)
    model = DAOStakeEconomicModel(pool_weights=(1, 2, 5), config=config)

    print("Running simulation with visualizations...")
    results = model.simulate_staking_scenario(500, n_users=10, plot_results=True, seed=42)

    print("\nSimulation Results:")
    for key, value in results.items():
        if isinstance(value, list):
            value = [amount / DECIMAL_PRECISION for amount in value]
        elif isinstance(value, int) and key != 'final_block':
            value = value / DECIMAL_PRECISION
        print(f"  {key}: {value}")


if __name__ == "__main__":
    run_visualization_simulation()
