"""Conversions between human odds/amounts and on-chain integers.

The protocol stores implied probability as ``probability * 10^20``.
Encoding goes through float multiplication so that integers match the
ones produced by other relayer clients; decoding uses ``decimal`` so no
extra error is introduced on the way back. The two directions are not
exact inverses.
"""

import math
from decimal import Decimal, localcontext
from typing import Union

from ..errors import RangeError
from .utils import FRACTION_DENOMINATOR, PERCENTAGE_PRECISION_EXPONENT

# Enough precision for any uint256 value
UINT256_DIGITS = 78


def decimal_to_fixed_point(decimal: float) -> str:
    """Convert a probability in [0, 1] to fixed-point percentage odds.

    Args:
        decimal: Implied probability (e.g. 0.5)

    Returns:
        Integer string (e.g. "50000000000000000000")

    Raises:
        RangeError: If decimal is outside [0, 1]
    """
    if math.isnan(decimal) or decimal < 0 or decimal > 1:
        raise RangeError(f"{decimal} not in valid range. Must be between 0 and 1")

    product = float(decimal) * 10.0**PERCENTAGE_PRECISION_EXPONENT
    # repr() gives the shortest digits that round-trip the float; any
    # fractional part is truncated.
    return str(int(Decimal(repr(product))))


def fixed_point_to_decimal(fixed: Union[int, str]) -> float:
    """Convert fixed-point percentage odds back to a probability.

    Args:
        fixed: Percentage odds as int or integer string

    Returns:
        Implied probability as a float

    Raises:
        RangeError: If fixed is negative or not below 10^20
    """
    value = int(fixed)
    if value < 0 or value >= FRACTION_DENOMINATOR:
        raise RangeError(
            f"{fixed} not in valid range. Must be between 0 and {FRACTION_DENOMINATOR}"
        )

    with localcontext() as ctx:
        ctx.prec = 40
        return float(Decimal(value) / Decimal(FRACTION_DENOMINATOR))


def taker_odds(percentage_odds: Union[int, str]) -> int:
    """Implied odds of the side opposite to a maker order.

    Args:
        percentage_odds: Maker's fixed-point percentage odds

    Returns:
        Fixed-point odds the taker receives
    """
    value = int(percentage_odds)
    if value < 0 or value >= FRACTION_DENOMINATOR:
        raise RangeError(f"Invalid percentage odds: {percentage_odds}")
    return FRACTION_DENOMINATOR - value


def to_base_units(amount: Union[int, float, str, Decimal], decimals: int) -> int:
    """Parse a human readable token amount into base units.

    Args:
        amount: Human readable amount (e.g. 10.5)
        decimals: Token decimals (e.g. 18 for WETH, 6 for USDC)

    Returns:
        Amount in base units (e.g. 10500000 for 10.5 USDC)

    Raises:
        ValueError: If amount has more precision than the token supports
    """
    with localcontext() as ctx:
        ctx.prec = UINT256_DIGITS
        scaled = Decimal(str(amount)).scaleb(decimals)
    if scaled != scaled.to_integral_value():
        raise ValueError(f"{amount} has more than {decimals} decimal places")
    return int(scaled)


def from_base_units(amount: Union[int, str], decimals: int) -> str:
    """Format a base-unit amount as a human readable string.

    Args:
        amount: Amount in base units
        decimals: Token decimals

    Returns:
        Human readable string (e.g. "1.5"), trailing zeros stripped
    """
    with localcontext() as ctx:
        ctx.prec = UINT256_DIGITS
        value = Decimal(int(amount)).scaleb(-decimals)
    text = f"{value:f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
