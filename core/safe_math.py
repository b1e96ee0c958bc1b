"""
Checked uint256 arithmetic.

Python integers never overflow, so every operation here checks its result
against the uint256 range the contracts run in. Division truncates toward
zero, which is the documented source of small under-distribution.
"""

from stake_errors import ArithmeticOverflowError

UINT256_MAX = 2 ** 256 - 1


def _require_uint(value):
    if isinstance(value, bool) or not isinstance(value, int):
        raise ArithmeticOverflowError(f"SafeMath: expected an integer, got {value!r}")
    if value < 0 or value > UINT256_MAX:
        raise ArithmeticOverflowError(f"SafeMath: {value} is outside the uint256 range")
    return value


def add(a, b):
    """Returns a + b, failing on overflow."""
    result = _require_uint(a) + _require_uint(b)
    if result > UINT256_MAX:
        raise ArithmeticOverflowError("SafeMath: addition overflow")
    return result


def sub(a, b):
    """Returns a - b, failing when b > a."""
    if _require_uint(b) > _require_uint(a):
        raise ArithmeticOverflowError("SafeMath: subtraction overflow")
    return a - b


def mul(a, b):
    """Returns a * b, failing on overflow."""
    result = _require_uint(a) * _require_uint(b)
    if result > UINT256_MAX:
        raise ArithmeticOverflowError("SafeMath: multiplication overflow")
    return result


def div(a, b):
    """Returns a // b, failing on division by zero."""
    if _require_uint(b) == 0:
        raise ArithmeticOverflowError("SafeMath: division by zero")
    return _require_uint(a) // b


def mul_div(a, b, c):
    """Returns a * b // c with the intermediate product checked."""
    return div(mul(a, b), c)


def require_amount(amount, error=ArithmeticOverflowError):
    """Rejects anything but a non-negative integer amount, raising `error`."""
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise error(f"Amounts must be integers, got {amount!r}")
    if amount < 0:
        raise error("Amount must not be negative")
    return amount
