"""
Configuration for the DAOStake model.

Protocol constants of the reference deployment and the StakeConfig parameter
set that the emission schedule and the staking engine are built from.
"""

from dataclasses import dataclass

from stake_errors import ConfigurationError

# Constants from the reference deployment
DECIMAL_PRECISION = 10 ** 18
BLOCKS_PER_PERIOD = 172800  # ~30 days at 15s blocks
PERIOD_COUNT = 24

# Emission parameters
BASE_REWARD_PER_PERIOD = 4_320_000 * DECIMAL_PRECISION
BASE_REWARD_PER_BLOCK = BASE_REWARD_PER_PERIOD // BLOCKS_PER_PERIOD  # 25 YAO
DECAY_NUMERATOR = 9900
DECAY_DENOMINATOR = 10000

# Reward split, in percent of the pool-level reward
TREASURY_PERCENT = 15
COMMUNITY_PERCENT = 15
POOL_PERCENT = 30
PERCENT_DENOMINATOR = 100

# Reward token
YAO_NAME = "YAO Token"
YAO_SYMBOL = "YAO"
YAO_DECIMALS = 18
YAO_INITIAL_SUPPLY = 37_034_997 * DECIMAL_PRECISION  # pre-mint, 40% of supply


@dataclass(frozen=True)
class StakeConfig:
    """
    Parameters of one DAOStake deployment.

    The defaults mirror the reference deployment. Tests and simulations
    shorten the periods so that a whole schedule fits in a few hundred blocks.
    """
    blocks_per_period: int = BLOCKS_PER_PERIOD
    period_count: int = PERIOD_COUNT
    base_reward_per_block: int = BASE_REWARD_PER_BLOCK
    decay_numerator: int = DECAY_NUMERATOR
    decay_denominator: int = DECAY_DENOMINATOR
    treasury_percent: int = TREASURY_PERCENT
    community_percent: int = COMMUNITY_PERCENT
    pool_percent: int = POOL_PERCENT

    def __post_init__(self):
        for name in ("blocks_per_period", "period_count", "decay_denominator"):
            value = getattr(self, name)
            if not isinstance(value, int) or value <= 0:
                raise ConfigurationError(f"{name} must be a positive integer, got {value!r}")

        for name in ("base_reward_per_block", "decay_numerator", "treasury_percent",
                     "community_percent", "pool_percent"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 0:
                raise ConfigurationError(f"{name} must be a non-negative integer, got {value!r}")

        if self.decay_numerator > self.decay_denominator:
            raise ConfigurationError("Decay must not increase the emission rate")

        split = self.treasury_percent + self.community_percent + self.pool_percent
        if split > PERCENT_DENOMINATOR:
            raise ConfigurationError(f"Reward split exceeds 100%: {split}%")

    @property
    def emission_blocks(self):
        """Length of the whole emission window in blocks."""
        return self.blocks_per_period * self.period_count


DEFAULT_CONFIG = StakeConfig()
