"""
DAOStake Model.

This module simulates the DAOStake contract: users deposit LP tokens into
weighted pools and earn a share of the YAO emitted by the decaying emission
schedule. Every settlement splits the pool-level reward between the treasury
wallet (15%), the community wallet (15%) and the pool's stakers (30%); the
remaining 40% of supply is pre-minted outside this contract.

Rewards accrue lazily. Each pool keeps an accumulator of reward per staked
unit (scaled by DECIMAL_PRECISION) that is only advanced when someone touches
the pool, and each user keeps a reward debt equal to what their stake had
already earned at the last touch. The difference is the pending reward.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Tuple

import safe_math
from chain_host import Contract, transactional
from emission_schedule import EmissionSchedule
from stake_config import DECIMAL_PRECISION, DEFAULT_CONFIG, PERCENT_DENOMINATOR
from stake_errors import (
    AccessDeniedError,
    ConfigurationError,
    DAOStakeError,
    InsufficientBalanceError,
)

logger = logging.getLogger(__name__)


@dataclass
class PoolInfo:
    """
    State of one staking pool.

    The LP token is held by address only and resolved through the chain,
    so the pool never owns the token contract.
    """
    lp_token: str                 # Address of the staked LP token
    weight: int                   # Share of emission relative to total_weight
    last_reward_block: int        # Last block the accumulator was advanced to
    acc_reward_per_share: int = 0  # Accumulated YAO per staked unit, times 1e18


@dataclass
class UserInfo:
    """A user's position in one pool."""
    amount: int = 0       # LP tokens deposited
    reward_debt: int = 0  # amount * acc_reward_per_share / 1e18 at the last settlement


@dataclass
class SettlementShares:
    """How one pool-level reward is split between the recipients."""
    total_reward: int
    treasury: int
    community: int
    pool: int


class DAOStake(Contract):
    """
    Simulates the DAOStake contract: weighted LP staking pools paying YAO.
    """

    STATE_FIELDS = ("owner", "treasury_wallet", "community_wallet", "yao_token",
                    "pools", "users", "total_weight")

    def __init__(self, chain, address, treasury_wallet, community_wallet, yao_token,
                 owner, start_block=None, config=DEFAULT_CONFIG):
        _require_wallet(chain, treasury_wallet, "treasury")
        _require_wallet(chain, community_wallet, "community")
        _require_contract(chain, yao_token, "YAO token")

        super().__init__(chain, address)

        # Admin of the contract
        self.owner = owner

        # Beneficiary wallets
        self.treasury_wallet = treasury_wallet
        self.community_wallet = community_wallet

        # Address of the reward token; this contract must own it to mint
        self.yao_token = yao_token

        # Pools, indexed by pool id
        self.pools: List[PoolInfo] = []

        # (pool id, user address) -> UserInfo
        self.users: Dict[Tuple[int, str], UserInfo] = {}

        # Sum of all pool weights
        self.total_weight = 0

        # Reward split
        self.config = config

        # Emission window and rate table; fixed for the contract's lifetime
        start_block = chain.block_number if start_block is None else start_block
        self.schedule = EmissionSchedule(start_block, config)
        self.start_block = self.schedule.start_block
        self.end_block = self.schedule.end_block

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def pool_length(self):
        """Returns the number of pools."""
        return len(self.pools)

    def pool_info(self, pid):
        """Returns the PoolInfo of a pool."""
        return self._pool(pid)

    def user_info(self, pid, user):
        """Returns a user's position in a pool (zero if never touched)."""
        self._pool(pid)
        return self.users.get((pid, user), UserInfo())

    def get_multiplier(self, from_block, to_block):
        """Returns the full-weight reward emitted over [from_block, to_block)."""
        return self.schedule.multiplier(from_block, to_block)

    def pending_reward(self, pid, user):
        """
        Returns the YAO a user could claim from a pool right now.

        The pool is not settled; its accumulator is projected to the current
        block the same way settle() would advance it.

        Args:
            pid: Pool id
            user: Address of the user

        Returns:
            Pending YAO amount
        """
        pool = self._pool(pid)
        position = self.users.get((pid, user), UserInfo())
        acc_reward_per_share = pool.acc_reward_per_share

        current_block = self.chain.block_number
        lp_supply = self._lp_token(pool).balance_of(self.address)
        if current_block > pool.last_reward_block and lp_supply != 0:
            shares = self._split_reward(pool, current_block)
            acc_reward_per_share = safe_math.add(
                acc_reward_per_share,
                safe_math.mul_div(shares.pool, DECIMAL_PRECISION, lp_supply))

        return _pending(position, acc_reward_per_share)

    # ------------------------------------------------------------------
    # Settlement
    # ------------------------------------------------------------------

    @transactional
    def settle(self, pid):
        """
        Advances a pool's accumulator to the current block.

        Mints the treasury and community shares, and the pool share to this
        contract when the pool has stakers. A pool without stakers sends its
        share to the community wallet instead and leaves the accumulator as
        is. Calling it again in the same block does nothing.

        Args:
            pid: Pool id

        Returns:
            The total pool-level reward settled (0 for a no-op)
        """
        pool = self._pool(pid)
        current_block = self.chain.block_number
        if current_block <= pool.last_reward_block:
            return 0

        shares = self._split_reward(pool, current_block)
        lp_supply = self._lp_token(pool).balance_of(self.address)

        community_share = shares.community
        pool_share = shares.pool
        if lp_supply == 0:
            community_share = safe_math.add(community_share, pool_share)
            pool_share = 0

        # Mint before any accumulator write; a failed mint reverts the call
        yao = self._yao()
        yao.mint(self.address, self.treasury_wallet, shares.treasury)
        yao.mint(self.address, self.community_wallet, community_share)
        if lp_supply > 0:
            yao.mint(self.address, self.address, pool_share)
            pool.acc_reward_per_share = safe_math.add(
                pool.acc_reward_per_share,
                safe_math.mul_div(pool_share, DECIMAL_PRECISION, lp_supply))

        pool.last_reward_block = current_block

        self.emit("PoolSettled", pid=pid, last_reward_block=current_block,
                  total_reward=shares.total_reward)
        logger.debug("Settled pool %d to block %d: total=%d treasury=%d community=%d pool=%d",
                     pid, current_block, shares.total_reward, shares.treasury,
                     community_share, pool_share)
        return shares.total_reward

    @transactional
    def mass_settle(self):
        """
        Settles every pool in ascending pool id order.

        Cost grows with the number of pools; callers with many pools may
        prefer settling them individually.
        """
        for pid in range(len(self.pools)):
            self.settle(pid)

    def _split_reward(self, pool, current_block):
        multiplier = self.schedule.multiplier(pool.last_reward_block, current_block)
        if self.total_weight == 0:
            total_reward = 0
        else:
            total_reward = safe_math.mul_div(multiplier, pool.weight, self.total_weight)

        config = self.config
        return SettlementShares(
            total_reward=total_reward,
            treasury=safe_math.mul_div(total_reward, config.treasury_percent, PERCENT_DENOMINATOR),
            community=safe_math.mul_div(total_reward, config.community_percent, PERCENT_DENOMINATOR),
            pool=safe_math.mul_div(total_reward, config.pool_percent, PERCENT_DENOMINATOR),
        )

    # ------------------------------------------------------------------
    # Staking
    # ------------------------------------------------------------------

    @transactional
    def deposit(self, caller, pid, amount):
        """
        Deposits LP tokens into a pool, claiming any pending YAO first.

        A zero amount only claims. The caller must have approved this
        contract for at least `amount` on the pool's LP token.

        Args:
            caller: Address of the depositor
            pid: Pool id
            amount: LP tokens to deposit

        Returns:
            The YAO reward paid out
        """
        _require_amount(amount)
        pool = self._pool(pid)
        self.settle(pid)

        position = self._position(pid, caller)
        paid = 0
        if position.amount > 0:
            paid = self._settle_user_and_claim(pool, position, caller)
            # Debt is synced before the LP pull so a callback cannot claim again
            position.reward_debt = safe_math.mul_div(
                position.amount, pool.acc_reward_per_share, DECIMAL_PRECISION)

        if amount > 0:
            self._lp_token(pool).transfer_from(self.address, caller, self.address, amount)
            position.amount = safe_math.add(position.amount, amount)

        position.reward_debt = safe_math.mul_div(
            position.amount, pool.acc_reward_per_share, DECIMAL_PRECISION)

        self.emit("Deposit", user=caller, pid=pid, amount=amount)
        logger.info("%s deposited %d into pool %d (reward paid %d)", caller, amount, pid, paid)
        return paid

    @transactional
    def withdraw(self, caller, pid, amount):
        """
        Withdraws LP tokens from a pool, claiming any pending YAO.

        A zero amount only claims.

        Args:
            caller: Address of the depositor
            pid: Pool id
            amount: LP tokens to withdraw

        Returns:
            The YAO reward paid out
        """
        _require_amount(amount)
        pool = self._pool(pid)
        position = self._position(pid, caller)
        if position.amount < amount:
            raise InsufficientBalanceError(
                f"withdraw: not good (requested {amount}, staked {position.amount})")

        self.settle(pid)
        paid = self._settle_user_and_claim(pool, position, caller)

        if amount > 0:
            position.amount = safe_math.sub(position.amount, amount)
        position.reward_debt = safe_math.mul_div(
            position.amount, pool.acc_reward_per_share, DECIMAL_PRECISION)

        if amount > 0:
            self._lp_token(pool).transfer(self.address, caller, amount)

        self.emit("Withdraw", user=caller, pid=pid, amount=amount)
        logger.info("%s withdrew %d from pool %d (reward paid %d)", caller, amount, pid, paid)
        return paid

    @transactional
    def emergency_withdraw(self, caller, pid):
        """
        Returns all of the caller's LP tokens without settling or paying
        rewards. Pending YAO is forfeited.

        The position is zeroed before the tokens leave the contract, so a
        re-entrant call finds nothing left to withdraw.

        Args:
            caller: Address of the depositor
            pid: Pool id

        Returns:
            The LP amount returned
        """
        pool = self._pool(pid)
        position = self._position(pid, caller)

        amount = position.amount
        position.amount = 0
        position.reward_debt = 0

        self._lp_token(pool).transfer(self.address, caller, amount)

        self.emit("EmergencyWithdraw", user=caller, pid=pid, amount=amount)
        logger.warning("%s emergency-withdrew %d from pool %d", caller, amount, pid)
        return amount

    def _settle_user_and_claim(self, pool, position, user):
        # The pool must already be settled to the current block
        pending = _pending(position, pool.acc_reward_per_share)
        return self._safe_reward_transfer(user, pending)

    def _safe_reward_transfer(self, to, amount):
        """
        Transfers up to `amount` YAO from this contract to `to`.

        Rounding in the accumulator can leave the contract holding slightly
        less than a claim; the transfer is then capped at the balance rather
        than failing.
        """
        yao = self._yao()
        balance = yao.balance_of(self.address)
        if amount > balance:
            logger.warning("Reward transfer to %s capped at %d (requested %d)", to, balance, amount)
            amount = balance
        yao.transfer(self.address, to, amount)
        return amount

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------

    @transactional
    def add_pool(self, caller, weight, lp_token, with_update=False):
        """
        Adds a new pool for an LP token.

        Args:
            caller: Must be the owner
            weight: Emission weight of the new pool
            lp_token: Address of the LP token contract
            with_update: Settle every existing pool first

        Returns:
            The new pool id
        """
        self._require_owner(caller)
        _require_amount(weight)
        _require_contract(self.chain, lp_token, "LP token")
        if any(pool.lp_token == lp_token for pool in self.pools):
            raise ConfigurationError(f"LP token {lp_token} already has a pool")

        current_block = self.chain.block_number
        if current_block >= self.end_block:
            raise ConfigurationError(
                f"Cannot add a pool at block {current_block}: emission ended at {self.end_block}")

        if with_update:
            self.mass_settle()

        self.total_weight = safe_math.add(self.total_weight, weight)
        self.pools.append(PoolInfo(
            lp_token=lp_token,
            weight=weight,
            last_reward_block=current_block,
        ))

        pid = len(self.pools) - 1
        self.emit("PoolAdded", pid=pid, lp_token=lp_token, weight=weight)
        logger.info("Added pool %d for %s with weight %d", pid, lp_token, weight)
        return pid

    @transactional
    def set_pool_weight(self, caller, pid, weight, with_update=False):
        """Changes the emission weight of a pool."""
        self._require_owner(caller)
        _require_amount(weight)
        pool = self._pool(pid)

        if with_update:
            self.mass_settle()

        self.total_weight = safe_math.add(safe_math.sub(self.total_weight, pool.weight), weight)
        old_weight = pool.weight
        pool.weight = weight

        self.emit("PoolWeightUpdated", pid=pid, old_weight=old_weight, new_weight=weight)
        logger.info("Pool %d weight changed from %d to %d", pid, old_weight, weight)

    @transactional
    def set_treasury_wallet(self, caller, wallet):
        self._require_owner(caller)
        _require_wallet(self.chain, wallet, "treasury")
        self.treasury_wallet = wallet
        self.emit("TreasuryWalletUpdated", wallet=wallet)
        logger.info("Treasury wallet set to %s", wallet)

    @transactional
    def set_community_wallet(self, caller, wallet):
        self._require_owner(caller)
        _require_wallet(self.chain, wallet, "community")
        self.community_wallet = wallet
        self.emit("CommunityWalletUpdated", wallet=wallet)
        logger.info("Community wallet set to %s", wallet)

    @transactional
    def set_yao_token(self, caller, yao_token):
        self._require_owner(caller)
        _require_contract(self.chain, yao_token, "YAO token")
        self.yao_token = yao_token
        self.emit("YAOTokenUpdated", token=yao_token)
        logger.info("YAO token set to %s", yao_token)

    @transactional
    def transfer_yao_ownership(self, caller, new_owner):
        """
        Hands ownership of the YAO token to new_owner.

        This contract can no longer mint afterwards, so every later
        settlement that has to mint will revert. Irrevocable.
        """
        self._require_owner(caller)
        self._yao().transfer_ownership(self.address, new_owner)
        logger.warning("YAO ownership handed from %s to %s", self.address, new_owner)

    @transactional
    def transfer_ownership(self, caller, new_owner):
        self._require_owner(caller)
        if new_owner is None:
            raise ConfigurationError("Ownable: new owner is the zero address")
        previous_owner = self.owner
        self.owner = new_owner
        self.emit("OwnershipTransferred", previous_owner=previous_owner, new_owner=new_owner)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_owner(self, caller):
        if caller != self.owner:
            raise AccessDeniedError(f"Ownable: {caller!r} is not the owner")

    def _pool(self, pid):
        if isinstance(pid, bool) or not isinstance(pid, int) or not 0 <= pid < len(self.pools):
            raise ConfigurationError(f"Unknown pool id {pid!r}")
        return self.pools[pid]

    def _position(self, pid, user):
        key = (pid, user)
        if key not in self.users:
            self.users[key] = UserInfo()
        return self.users[key]

    def _lp_token(self, pool):
        return self.chain.contract_at(pool.lp_token)

    def _yao(self):
        return self.chain.contract_at(self.yao_token)


def _pending(position, acc_reward_per_share):
    # A negative result means the debt bookkeeping is broken; sub() raises
    accrued = safe_math.mul_div(position.amount, acc_reward_per_share, DECIMAL_PRECISION)
    return safe_math.sub(accrued, position.reward_debt)


def _require_amount(amount):
    safe_math.require_amount(amount, DAOStakeError)


def _require_wallet(chain, wallet, label):
    if wallet is None:
        raise ConfigurationError(f"The {label} wallet must be set")
    if chain.is_contract(wallet):
        raise ConfigurationError(f"The {label} wallet must not be a contract: {wallet}")


def _require_contract(chain, address, label):
    if not chain.is_contract(address):
        raise ConfigurationError(f"The {label} must be a contract: {address!r}")
