"""Order and fill hashing for the SportX contracts.

Hashes are keccak256 over Solidity tight packing (``abi.encodePacked``).
Field order and widths match the verifying contracts; reordering any
field produces hashes the chain rejects.
"""

from typing import Any, List, Optional, Sequence, Tuple, Union

from eth_abi.exceptions import EncodingError
from eth_abi.packed import encode_packed
from eth_utils import keccak, to_bytes

from ..errors import SchemaError
from .codec import ensure_canonical
from .types import (
    BaseTokenContractOrder,
    ContractOrder,
    LegacyContractOrder,
    MakerOrder,
)

BASE_TOKEN_ORDER_LAYOUT = [
    "bytes32",  # marketHash
    "address",  # baseToken
    "uint256",  # totalBetSize
    "uint256",  # percentageOdds
    "uint256",  # expiry
    "uint256",  # salt
    "address",  # maker
    "address",  # executor
    "bool",  # isMakerBettingOutcomeOne
]

LEGACY_ORDER_LAYOUT = [
    "bytes32",  # marketHash
    "uint256",  # totalBetSize
    "uint256",  # percentageOdds
    "uint256",  # expiry
    "uint256",  # relayerMakerFee
    "uint256",  # relayerTakerFee
    "uint256",  # salt
    "address",  # maker
    "address",  # relayer
    "address",  # executor
    "bool",  # isMakerBettingOutcomeOne
]

AnyOrder = Union[MakerOrder, ContractOrder]


def _pack(types: List[str], values: List[Any]) -> bytes:
    try:
        return encode_packed(types, values)
    except EncodingError as exc:
        raise SchemaError(f"Order cannot be packed: {exc}") from exc


def _market_hash_bytes(market_hash: str) -> bytes:
    try:
        raw = to_bytes(hexstr=market_hash)
    except (TypeError, ValueError):
        raise SchemaError(f"marketHash is not hex: {market_hash!r}") from None
    if len(raw) != 32:
        raise SchemaError(f"marketHash must be 32 bytes, got {len(raw)}")
    return raw


def _order_fields(order: ContractOrder) -> Tuple[List[str], List[Any]]:
    if isinstance(order, BaseTokenContractOrder):
        return list(BASE_TOKEN_ORDER_LAYOUT), [
            _market_hash_bytes(order.market_hash),
            order.base_token,
            order.total_bet_size,
            order.percentage_odds,
            order.expiry,
            order.salt,
            order.maker,
            order.executor,
            order.is_maker_betting_outcome_one,
        ]
    return list(LEGACY_ORDER_LAYOUT), [
        _market_hash_bytes(order.market_hash),
        order.total_bet_size,
        order.percentage_odds,
        order.expiry,
        order.relayer_maker_fee,
        order.relayer_taker_fee,
        order.salt,
        order.maker,
        order.relayer,
        order.executor,
        order.is_maker_betting_outcome_one,
    ]


def compute_order_hash(order: AnyOrder) -> str:
    """Compute the contract hash of a maker order.

    Args:
        order: Wire or canonical order of either schema

    Returns:
        bytes32 hex string (lowercase, 0x-prefixed)

    Raises:
        SchemaError: If the order cannot be canonicalized
    """
    types, values = _order_fields(ensure_canonical(order))
    return "0x" + keccak(_pack(types, values)).hex()


def verify_order_hash(order_hash: str, order: AnyOrder) -> bool:
    """Check that order_hash is the hash of order.

    Args:
        order_hash: The order hash to verify
        order: Order to check against

    Returns:
        True if the hash matches, False otherwise
    """
    try:
        return compute_order_hash(order) == order_hash.lower()
    except SchemaError:
        return False


def _fill_hash_bytes(
    order: AnyOrder,
    taker_amount: int,
    fill_salt: int,
    submitter_fee: Optional[int],
) -> bytes:
    canonical = ensure_canonical(order)
    if not isinstance(canonical, LegacyContractOrder):
        raise SchemaError("Fill hashes are only defined for legacy relayer-fee orders")

    types, values = _order_fields(canonical)
    types += ["uint256", "uint256"]
    values += [int(taker_amount), int(fill_salt)]
    if submitter_fee is not None:
        types.append("uint256")
        values.append(int(submitter_fee))
    return keccak(_pack(types, values))


def compute_fill_hash(
    order: AnyOrder,
    taker_amount: Union[int, str],
    fill_salt: Union[int, str],
    submitter_fee: Optional[Union[int, str]] = None,
) -> str:
    """Compute the hash of filling one legacy order.

    The submitter fee is appended only when given; None omits the field
    entirely rather than packing a zero.

    Args:
        order: Legacy order (wire or canonical)
        taker_amount: Amount the taker fills, in base units
        fill_salt: Random 256-bit fill salt
        submitter_fee: Optional fee paid to the fill submitter

    Returns:
        bytes32 hex string

    Raises:
        SchemaError: If order is not a legacy order
    """
    return "0x" + _fill_hash_bytes(order, taker_amount, fill_salt, submitter_fee).hex()


def compute_multi_fill_hash(
    orders: Sequence[AnyOrder],
    taker_amounts: Sequence[Union[int, str]],
    fill_salt: Union[int, str],
    submitter_fee: Optional[Union[int, str]] = None,
) -> str:
    """Chain the fill hashes of several legacy orders into one hash.

    ``acc = fill(0)``, then ``acc = keccak(acc || fill(i))`` for each
    following order. The result depends on the order of the list; with a
    single order it equals compute_fill_hash.

    Args:
        orders: Legacy orders to fill
        taker_amounts: Taker amount per order (same length as orders)
        fill_salt: Fill salt shared by every order
        submitter_fee: Optional submitter fee shared by every order

    Returns:
        bytes32 hex string

    Raises:
        SchemaError: If the lists are empty or differ in length
    """
    if len(orders) != len(taker_amounts):
        raise SchemaError(
            f"orders and takerAmounts length mismatch: {len(orders)} != {len(taker_amounts)}"
        )
    if not orders:
        raise SchemaError("At least one order is required")

    acc = _fill_hash_bytes(orders[0], taker_amounts[0], fill_salt, submitter_fee)
    for order, taker_amount in zip(orders[1:], taker_amounts[1:]):
        acc = keccak(acc + _fill_hash_bytes(order, taker_amount, fill_salt, submitter_fee))
    return "0x" + acc.hex()
