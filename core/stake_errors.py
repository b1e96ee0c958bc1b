"""
Exceptions raised by the DAOStake model.

Every error derives from ValueError, the convention the rest of the model
follows, so callers can keep catching ValueError.
"""


class DAOStakeError(ValueError):
    """Base class for every error raised by the model."""


class ConfigurationError(DAOStakeError):
    """Invalid address, pool or parameter supplied to a configuration call."""


class AccessDeniedError(DAOStakeError):
    """Caller is not allowed to perform an owner-only operation."""


class InsufficientBalanceError(DAOStakeError):
    """Withdrawal exceeds the caller's recorded stake."""


class TokenTransferError(DAOStakeError):
    """A token balance or allowance does not cover the requested transfer."""


class ArithmeticOverflowError(DAOStakeError, ArithmeticError):
    """uint256 overflow, underflow or division by zero."""


class PeriodOutOfRangeError(DAOStakeError):
    """Emission rate requested for a period outside the schedule."""
