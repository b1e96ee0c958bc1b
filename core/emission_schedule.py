"""
Emission Schedule Model for the DAOStake system.

The schedule is a fixed table of per-block YAO rates, one per period, built
once by geometric decay from a base rate. The multiplier integrates that
table over a block range, which is what every pool settlement distributes.
"""

import logging

import numpy as np

import safe_math
from stake_config import DECIMAL_PRECISION, DEFAULT_CONFIG
from stake_errors import PeriodOutOfRangeError

logger = logging.getLogger(__name__)


class EmissionSchedule:
    """
    Per-period emission rates and the range multiplier over them.

    Period k (1-based) covers blocks [start + (k-1)*L, start + k*L).
    Emission is zero outside [start_block, end_block).
    """

    def __init__(self, start_block, config=DEFAULT_CONFIG):
        self.start_block = start_block
        self.blocks_per_period = config.blocks_per_period
        self.period_count = config.period_count
        self.end_block = start_block + config.emission_blocks

        rates = [config.base_reward_per_block]
        for _ in range(2, config.period_count + 1):
            rates.append(safe_math.mul_div(rates[-1], config.decay_numerator, config.decay_denominator))

        # Write-once: index 0 holds the rate of period 1
        self._rates = tuple(rates)

    def rate_of(self, period):
        """
        Returns the per-block emission rate of a period.

        Args:
            period: Period id in [1, period_count]

        Returns:
            Reward units emitted per block during that period
        """
        if not 1 <= period <= self.period_count:
            raise PeriodOutOfRangeError(
                f"Period {period} is outside the schedule [1, {self.period_count}]")
        return self._rates[period - 1]

    def period_of(self, block_number):
        """Returns the 1-based period a block belongs to."""
        return (block_number - self.start_block) // self.blocks_per_period + 1

    def period_start(self, period):
        """Returns the first block of a period."""
        return self.start_block + (period - 1) * self.blocks_per_period

    def multiplier(self, from_block, to_block):
        """
        Returns the reward units emitted for a full-weight pool over
        blocks [from_block, to_block).

        The range is clamped to the emission window. A range that spans
        several periods is summed as the remainder of the first period, the
        full periods in between and the used part of the last period.

        Args:
            from_block: First block of the range (inclusive)
            to_block: End of the range (exclusive)

        Returns:
            Total emitted reward units over the range
        """
        from_block = max(from_block, self.start_block)
        to_block = min(to_block, self.end_block)
        if from_block >= to_block:
            return 0

        first = self.period_of(from_block)
        # Period of the last emitting block, so a range ending on a boundary
        # never reads past the schedule
        last = self.period_of(to_block - 1)

        if first == last:
            return safe_math.mul(to_block - from_block, self.rate_of(first))

        head = safe_math.mul(self.period_start(first + 1) - from_block, self.rate_of(first))
        tail = safe_math.mul(to_block - self.period_start(last), self.rate_of(last))
        total = safe_math.add(head, tail)

        for period in range(first + 1, last):
            total = safe_math.add(total, safe_math.mul(self.blocks_per_period, self.rate_of(period)))

        logger.debug("multiplier(%d, %d) spans periods %d..%d = %d",
                     from_block, to_block, first, last, total)
        return total

    def total_emission(self):
        """Returns the multiplier over the whole emission window."""
        return self.multiplier(self.start_block, self.end_block)

    def emission_curve(self):
        """
        Returns the schedule as arrays for plotting.

        Returns:
            Tuple of (period ids, per-block rate in whole tokens)
        """
        periods = np.arange(1, self.period_count + 1)
        rates = np.array([rate / DECIMAL_PRECISION for rate in self._rates], dtype=float)
        return periods, rates
