"""Schema checks run before anything is hashed or signed.

Every validator raises SchemaError naming the offending field.
"""

import re
import time
from typing import Any, Optional, Sequence

from eth_utils import (
    decode_hex,
    is_0x_prefixed,
    is_address,
    is_checksum_address,
    is_checksum_formatted_address,
    is_hexstr,
)

from ..errors import SchemaError
from .types import (
    BaseTokenMakerOrder,
    FillDetailsMetadata,
    LegacyMakerOrder,
    MakerOrder,
    NewOrder,
    OrderSchema,
)
from .utils import FRACTION_DENOMINATOR

_UINT_RE = re.compile(r"[0-9]+")


def _hex_bytes(value: Any) -> Optional[bytes]:
    if not isinstance(value, str) or not is_0x_prefixed(value) or not is_hexstr(value):
        return None
    try:
        return decode_hex(value)
    except ValueError:
        return None


def is_bytes32_hex(value: Any) -> bool:
    """True for a 0x-prefixed 32-byte hex string."""
    raw = _hex_bytes(value)
    return raw is not None and len(raw) == 32


def is_hex_data(value: Any) -> bool:
    """True for a non-empty 0x-prefixed hex string of whole bytes."""
    return bool(_hex_bytes(value))


def is_valid_address(value: Any) -> bool:
    """True for a 20-byte hex address whose checksum is valid if mixed case."""
    if not isinstance(value, str) or not is_address(value):
        return False
    return not is_checksum_formatted_address(value) or is_checksum_address(value)


def parse_uint(value: Any) -> Optional[int]:
    """Parse a non-negative integer from an int or decimal string.

    Returns:
        The integer, or None if value is not a non-negative integer
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, str) and _UINT_RE.fullmatch(value):
        return int(value)
    return None


def is_positive_integer(value: Any) -> bool:
    """True for an int or decimal string greater than zero."""
    parsed = parse_uint(value)
    return parsed is not None and parsed > 0


def validate_address(value: Any, name: str) -> None:
    """Check that value is an address with a valid checksum (if mixed case)."""
    if not is_valid_address(value):
        raise SchemaError(f"{name} is not a valid address")


def _validate_odds(value: Any, name: str = "percentageOdds") -> None:
    if not is_positive_integer(value):
        raise SchemaError(f"{name} as a number is not positive")
    if parse_uint(value) >= FRACTION_DENOMINATOR:
        raise SchemaError(f"{name} must be less than {FRACTION_DENOMINATOR}")


def _validate_expiry(value: Any, now: Optional[float] = None) -> None:
    expiry = parse_uint(value)
    if expiry is None:
        raise SchemaError("expiry undefined or malformed")
    current = time.time() if now is None else now
    if expiry <= current:
        raise SchemaError("expiry before current time")


def validate_new_order(
    order: NewOrder, schema: OrderSchema, now: Optional[float] = None
) -> None:
    """Validate caller input for a new maker order.

    Args:
        order: New order parameters
        schema: Order schema of the deployment
        now: Override for the current unix time (tests)

    Raises:
        SchemaError: If any field is malformed
    """
    if not is_bytes32_hex(order.market_hash):
        raise SchemaError("marketHash undefined or malformed")
    if not is_positive_integer(order.total_bet_size):
        raise SchemaError("totalBetSize undefined or malformed")
    _validate_odds(order.percentage_odds)
    _validate_expiry(order.expiry, now)
    if not isinstance(order.is_maker_betting_outcome_one, bool):
        raise SchemaError("isMakerBettingOutcomeOne undefined or malformed")
    if schema is OrderSchema.BASE_TOKEN:
        validate_address(order.base_token, "baseToken")


def validate_maker_order(order: MakerOrder, now: Optional[float] = None) -> None:
    """Validate a complete (unsigned) maker order.

    Raises:
        SchemaError: If any field is malformed
    """
    if not isinstance(order, (BaseTokenMakerOrder, LegacyMakerOrder)):
        raise SchemaError(f"Unsupported order type: {type(order).__name__}")
    if not is_bytes32_hex(order.market_hash):
        raise SchemaError("marketHash is not a valid bytes32 hex string")
    validate_address(order.maker, "maker")
    if not is_positive_integer(order.total_bet_size):
        raise SchemaError("totalBetSize as a number is not positive")
    _validate_odds(order.percentage_odds)
    _validate_expiry(order.expiry, now)
    validate_address(order.executor, "executor")
    if not is_positive_integer(order.salt):
        raise SchemaError("salt as a number is not positive")
    if not isinstance(order.is_maker_betting_outcome_one, bool):
        raise SchemaError("isMakerBettingOutcomeOne undefined or malformed")

    if isinstance(order, BaseTokenMakerOrder):
        validate_address(order.base_token, "baseToken")
    else:
        validate_address(order.relayer, "relayer")
        for name, fee in (
            ("relayerMakerFee", order.relayer_maker_fee),
            ("relayerTakerFee", order.relayer_taker_fee),
        ):
            if parse_uint(fee) is None:
                raise SchemaError(f"{name} is not a non-negative integer")


def validate_signed_maker_order(order: MakerOrder, now: Optional[float] = None) -> None:
    """Validate a maker order and its signature field.

    Raises:
        SchemaError: If the order or signature is malformed
    """
    validate_maker_order(order, now)
    if not is_hex_data(getattr(order, "signature", None)):
        raise SchemaError("signature is not a valid hex string")


def validate_fill_details_metadata(metadata: FillDetailsMetadata) -> None:
    """Check that every metadata field is a string."""
    for name, value in metadata.to_dict().items():
        if not isinstance(value, str):
            raise SchemaError(f"{name} is not a string")


def validate_taker_amounts(orders: Sequence[Any], taker_amounts: Sequence[Any]) -> None:
    """Check taker amounts are positive and pair one-to-one with orders."""
    if not isinstance(taker_amounts, (list, tuple)):
        raise SchemaError("takerAmounts is not a list")
    if len(orders) == 0:
        raise SchemaError("orders is empty")
    if len(orders) != len(taker_amounts):
        raise SchemaError(
            f"orders and takerAmounts length mismatch: {len(orders)} != {len(taker_amounts)}"
        )
    if not all(is_positive_integer(amount) for amount in taker_amounts):
        raise SchemaError("takerAmounts has some invalid number strings")


def validate_order_hashes(order_hashes: Sequence[Any]) -> None:
    """Check a list of order hashes."""
    if not isinstance(order_hashes, (list, tuple)):
        raise SchemaError("orderHashes is not a list")
    if not all(is_bytes32_hex(order_hash) for order_hash in order_hashes):
        raise SchemaError("orderHashes has some invalid order hashes")
