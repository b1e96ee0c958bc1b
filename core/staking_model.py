"""
Economic Model for the DAOStake system.

This main module combines the individual contracts into a complete model of
a DAOStake deployment: a chain, the YAO token, the staking engine and one LP
token per pool. It can be used to simulate staking scenarios and inspect how
the emitted YAO is distributed.
"""

import numpy as np
import matplotlib.pyplot as plt

from chain_host import Chain
from dao_stake import DAOStake
from erc20_token import ERC20Token
from safe_math import UINT256_MAX
from stake_config import DECIMAL_PRECISION, DEFAULT_CONFIG, YAO_INITIAL_SUPPLY
from yao_token import YAOToken

DEPLOYER = "deployer"
TREASURY_WALLET = "treasury_wallet"
COMMUNITY_WALLET = "community_wallet"
LP_FAUCET = "lp_faucet"
YAO_ADDRESS = "yao_token"
STAKE_ADDRESS = "dao_stake"
LP_FAUCET_SUPPLY = 10 ** 9 * DECIMAL_PRECISION


class DAOStakeEconomicModel:
    """
    Complete economic model of a DAOStake deployment.
    Combines all components and provides simulation capabilities.
    """

    def __init__(self, pool_weights=(1,), config=DEFAULT_CONFIG, start_block=1,
                 initial_supply=YAO_INITIAL_SUPPLY):
        self.config = config
        self.chain = Chain(block_number=start_block)

        # Create reward token, pre-minting the initial supply to the treasury
        self.yao_token = YAOToken(self.chain, YAO_ADDRESS, TREASURY_WALLET, initial_supply,
                                  owner=DEPLOYER)
        self.initial_supply = initial_supply

        # Create the staking engine and hand it the minting right
        self.dao_stake = DAOStake(self.chain, STAKE_ADDRESS, TREASURY_WALLET, COMMUNITY_WALLET,
                                  YAO_ADDRESS, owner=DEPLOYER, start_block=start_block,
                                  config=config)
        self.yao_token.transfer_ownership(DEPLOYER, STAKE_ADDRESS)

        # Create one LP token per pool
        self.lp_tokens = []
        for pid, weight in enumerate(pool_weights):
            lp_token = ERC20Token(self.chain, f"lp_token_{pid}", f"LP Token {pid}", f"LP{pid}",
                                  initial_holder=LP_FAUCET, initial_supply=LP_FAUCET_SUPPLY)
            self.lp_tokens.append(lp_token)
            self.dao_stake.add_pool(DEPLOYER, weight, lp_token.address)

        # Users that have interacted with the model
        self.users = set()

        # History tracking for simulations
        self.block_history = []
        self.emitted_history = []
        self.treasury_history = []
        self.community_history = []
        self.staked_history = []
        self.claimed_history = []
        self._claimed_total = 0
        self._update_history()

    def fund_user(self, user, pid, amount):
        """
        Gives a user LP tokens from the faucet and approves the engine.

        Args:
            user: Address of the user
            pid: Pool id whose LP token is funded
            amount: LP amount to give
        """
        lp_token = self.lp_tokens[pid]
        lp_token.transfer(LP_FAUCET, user, amount)
        lp_token.approve(user, STAKE_ADDRESS, UINT256_MAX)
        self.users.add(user)

    def deposit(self, user, pid, amount):
        """Deposits LP tokens for a user and records history."""
        paid = self.dao_stake.deposit(user, pid, amount)
        self._claimed_total += paid
        self._update_history()
        return paid

    def withdraw(self, user, pid, amount):
        """Withdraws LP tokens for a user and records history."""
        paid = self.dao_stake.withdraw(user, pid, amount)
        self._claimed_total += paid
        self._update_history()
        return paid

    def claim(self, user, pid):
        """Claims pending YAO without changing the stake."""
        return self.deposit(user, pid, 0)

    def emergency_withdraw(self, user, pid):
        """Withdraws everything for a user, forfeiting rewards."""
        amount = self.dao_stake.emergency_withdraw(user, pid)
        self._update_history()
        return amount

    def advance_blocks(self, blocks):
        """Advances the chain by the given number of blocks."""
        self.chain.mine(blocks)
        self._update_history()

    def total_staked(self, pid):
        """Returns the LP tokens held by the engine for a pool."""
        return self.lp_tokens[pid].balance_of(STAKE_ADDRESS)

    def get_system_state(self):
        """
        Returns the current state of the system.

        Returns:
            Dictionary with system state
        """
        yao = self.yao_token
        emitted = yao.total_supply - self.initial_supply
        treasury_minted = yao.balance_of(TREASURY_WALLET) - self.initial_supply
        current_block = self.chain.block_number
        period = self.dao_stake.schedule.period_of(current_block)

        return {
            'block': current_block,
            'period': period if 1 <= period <= self.config.period_count else None,
            'emitted': emitted,
            'treasury_minted': treasury_minted,
            'community_minted': yao.balance_of(COMMUNITY_WALLET),
            'engine_yao_balance': yao.balance_of(STAKE_ADDRESS),
            'claimed': self._claimed_total,
            'total_staked': [self.total_staked(pid) for pid in range(len(self.lp_tokens))],
        }

    def _update_history(self):
        """Updates history tracking for simulations."""
        state = self.get_system_state()

        self.block_history.append(state['block'])
        self.emitted_history.append(state['emitted'] / DECIMAL_PRECISION)
        self.treasury_history.append(state['treasury_minted'] / DECIMAL_PRECISION)
        self.community_history.append(state['community_minted'] / DECIMAL_PRECISION)
        self.staked_history.append(sum(state['total_staked']) / DECIMAL_PRECISION)
        self.claimed_history.append(state['claimed'] / DECIMAL_PRECISION)

    def simulate_staking_scenario(self, steps, n_users=5, blocks_per_step=None,
                                  plot_results=True, seed=None):
        """
        Runs a simulation with random user actions over the emission window.

        Each step advances the chain and lets one random user deposit,
        withdraw part of their stake or claim. All pools are settled at
        the end.

        Args:
            steps: Number of simulation steps
            n_users: Number of simulated users
            blocks_per_step: Blocks mined per step (default: spread the
                steps evenly over the emission window)
            plot_results: Whether to plot the results
            seed: Seed for the random number generator

        Returns:
            Dictionary with simulation results
        """
        rng = np.random.default_rng(seed)
        if blocks_per_step is None:
            blocks_per_step = max(1, self.config.emission_blocks // steps)

        users = [f"user{i}" for i in range(n_users)]
        budget = 1000 * DECIMAL_PRECISION
        for user in users:
            for pid in range(len(self.lp_tokens)):
                self.fund_user(user, pid, budget)

        actions = rng.choice(["deposit", "withdraw", "claim"], size=steps, p=[0.5, 0.3, 0.2])
        for step in range(steps):
            user = users[rng.integers(n_users)]
            pid = int(rng.integers(len(self.lp_tokens)))
            staked = self.dao_stake.user_info(pid, user).amount
            wallet = self.lp_tokens[pid].balance_of(user)

            if actions[step] == "deposit" and wallet > 0:
                self.deposit(user, pid, min(wallet, int(wallet * rng.uniform(0.1, 0.5))))
            elif actions[step] == "withdraw" and staked > 0:
                self.withdraw(user, pid, min(staked, int(staked * rng.uniform(0.1, 1.0))))
            else:
                self.claim(user, pid)

            self.advance_blocks(blocks_per_step)

        self.dao_stake.mass_settle()
        self._update_history()

        if plot_results:
            periods, rates = self.dao_stake.schedule.emission_curve()
            blocks = np.array(self.block_history)

            fig, axs = plt.subplots(3, 1, figsize=(12, 14))

            # Plot emission schedule
            axs[0].step(periods, rates, where='post')
            axs[0].set_title('Emission Rate per Period')
            axs[0].set_xlabel('Period')
            axs[0].set_ylabel('YAO per block')

            # Plot cumulative distribution
            axs[1].plot(blocks, self.emitted_history, label='Emitted')
            axs[1].plot(blocks, self.treasury_history, label='Treasury')
            axs[1].plot(blocks, self.community_history, label='Community')
            axs[1].plot(blocks, self.claimed_history, label='Claimed by stakers')
            axs[1].set_title('Cumulative YAO Distribution')
            axs[1].set_ylabel('YAO')
            axs[1].legend()

            # Plot total staked
            axs[2].plot(blocks, self.staked_history)
            axs[2].set_title('Total LP Staked')
            axs[2].set_xlabel('Block')
            axs[2].set_ylabel('LP')

            plt.tight_layout()
            plt.show()

        final_state = self.get_system_state()
        pending = sum(
            self.dao_stake.pending_reward(pid, user)
            for pid in range(len(self.lp_tokens))
            for user in users
        )

        return {
            'final_block': final_state['block'],
            'emitted': final_state['emitted'],
            'treasury_minted': final_state['treasury_minted'],
            'community_minted': final_state['community_minted'],
            'claimed': final_state['claimed'],
            'pending': pending,
            'engine_yao_balance': final_state['engine_yao_balance'],
            'total_staked': final_state['total_staked'],
        }
