"""
Simple simulation for the DAOStake Economic Model.

This script walks two stakers through one pool and prints the YAO they earn.
"""

import sys
import os

# Add the core directory to the path
sys.path.append(os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "core"))
from stake_config import DECIMAL_PRECISION, StakeConfig
from staking_model import DAOStakeEconomicModel


def fmt(amount):
    return f"{amount / DECIMAL_PRECISION:,.4f}"


def run_basic_simulation():
    # Short periods so the whole schedule fits in a few thousand blocks
    config = StakeConfig(blocks_per_period=100, period_count=24)
    model = DAOStakeEconomicModel(pool_weights=(1, 3), config=config)
    stake = model.dao_stake

    print(f"Emission window: blocks {stake.start_block} to {stake.end_block}")
    print(f"Total emission over the window: {fmt(stake.schedule.total_emission())} YAO")

    print("\nFunding stakers...")
    for user in ("alice", "bob"):
        for pid in range(stake.pool_length()):
            model.fund_user(user, pid, 100 * DECIMAL_PRECISION)

    print("alice deposits 100 LP into pool 0, bob deposits 50 LP into pool 1")
    model.deposit("alice", 0, 100 * DECIMAL_PRECISION)
    model.deposit("bob", 1, 50 * DECIMAL_PRECISION)

    model.advance_blocks(250)
    print(f"\nAfter 250 blocks (period {model.get_system_state()['period']}):")
    print(f"  alice pending: {fmt(stake.pending_reward(0, 'alice'))} YAO")
    print(f"  bob pending:   {fmt(stake.pending_reward(1, 'bob'))} YAO")

    print("\nalice claims, bob emergency-withdraws")
    paid = model.claim("alice", 0)
    returned = model.emergency_withdraw("bob", 1)
    print(f"  alice received {fmt(paid)} YAO")
    print(f"  bob got back {fmt(returned)} LP and forfeited their reward")

    model.advance_blocks(stake.end_block - model.chain.block_number)
    paid = model.withdraw("alice", 0, 100 * DECIMAL_PRECISION)
    print(f"\nalice withdraws at the end of emission and receives {fmt(paid)} YAO")

    state = model.get_system_state()
    print("\nFinal state:")
    print(f"  Emitted:          {fmt(state['emitted'])} YAO")
    print(f"  Treasury minted:  {fmt(state['treasury_minted'])} YAO")
    print(f"  Community minted: {fmt(state['community_minted'])} YAO")
    print(f"  Claimed:          {fmt(state['claimed'])} YAO")
    print(f"  Left in engine:   {fmt(state['engine_yao_balance'])} YAO")


if __name__ == "__main__":
    run_basic_simulation()
