"""Wire <-> canonical conversion for maker orders.

The order schema is a deployment setting: wire dicts are parsed with the
schema the caller was configured with, and canonical conversion dispatches
on the order's dataclass type.
"""

from typing import Any, Dict, Mapping, Type, Union

from eth_utils import to_checksum_address

from ..errors import SchemaError
from .types import (
    BaseTokenContractOrder,
    BaseTokenMakerOrder,
    ContractOrder,
    LegacyContractOrder,
    LegacyMakerOrder,
    MakerOrder,
    OrderSchema,
    SignedBaseTokenMakerOrder,
    SignedLegacyMakerOrder,
    SignedMakerOrder,
)
from .validation import is_valid_address

# camelCase wire key -> dataclass attribute
_BASE_TOKEN_FIELDS = {
    "marketHash": "market_hash",
    "baseToken": "base_token",
    "maker": "maker",
    "totalBetSize": "total_bet_size",
    "percentageOdds": "percentage_odds",
    "expiry": "expiry",
    "executor": "executor",
    "salt": "salt",
    "isMakerBettingOutcomeOne": "is_maker_betting_outcome_one",
}

_LEGACY_FIELDS = {
    "marketHash": "market_hash",
    "maker": "maker",
    "totalBetSize": "total_bet_size",
    "percentageOdds": "percentage_odds",
    "expiry": "expiry",
    "relayer": "relayer",
    "relayerMakerFee": "relayer_maker_fee",
    "relayerTakerFee": "relayer_taker_fee",
    "executor": "executor",
    "salt": "salt",
    "isMakerBettingOutcomeOne": "is_maker_betting_outcome_one",
}

_NUMERIC_FIELDS = {
    "total_bet_size",
    "percentage_odds",
    "salt",
    "relayer_maker_fee",
    "relayer_taker_fee",
}

_WIRE_CLASSES: Dict[OrderSchema, Type[Any]] = {
    OrderSchema.BASE_TOKEN: BaseTokenMakerOrder,
    OrderSchema.LEGACY_RELAYER_FEE: LegacyMakerOrder,
}

_SIGNED_CLASSES: Dict[OrderSchema, Type[Any]] = {
    OrderSchema.BASE_TOKEN: SignedBaseTokenMakerOrder,
    OrderSchema.LEGACY_RELAYER_FEE: SignedLegacyMakerOrder,
}

_FIELD_MAPS = {
    OrderSchema.BASE_TOKEN: _BASE_TOKEN_FIELDS,
    OrderSchema.LEGACY_RELAYER_FEE: _LEGACY_FIELDS,
}


def _to_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise SchemaError(f"{name} is not an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise SchemaError(f"{name} is not an integer: {value!r}") from None


def _to_address(value: Any, name: str) -> str:
    if not is_valid_address(value):
        raise SchemaError(f"{name} is not a valid address: {value!r}")
    return to_checksum_address(value)


def to_canonical_order(order: MakerOrder) -> ContractOrder:
    """Convert a wire order to its canonical integer form.

    Args:
        order: Base-token or legacy maker order (signed or not)

    Returns:
        Contract order of the matching schema

    Raises:
        SchemaError: If a numeric field is not an integer or an address
            is malformed
    """
    if isinstance(order, BaseTokenMakerOrder):
        return BaseTokenContractOrder(
            market_hash=order.market_hash,
            base_token=_to_address(order.base_token, "baseToken"),
            maker=_to_address(order.maker, "maker"),
            total_bet_size=_to_int(order.total_bet_size, "totalBetSize"),
            percentage_odds=_to_int(order.percentage_odds, "percentageOdds"),
            expiry=_to_int(order.expiry, "expiry"),
            executor=_to_address(order.executor, "executor"),
            salt=_to_int(order.salt, "salt"),
            is_maker_betting_outcome_one=order.is_maker_betting_outcome_one,
        )
    if isinstance(order, LegacyMakerOrder):
        return LegacyContractOrder(
            market_hash=order.market_hash,
            maker=_to_address(order.maker, "maker"),
            total_bet_size=_to_int(order.total_bet_size, "totalBetSize"),
            percentage_odds=_to_int(order.percentage_odds, "percentageOdds"),
            expiry=_to_int(order.expiry, "expiry"),
            relayer=_to_address(order.relayer, "relayer"),
            relayer_maker_fee=_to_int(order.relayer_maker_fee, "relayerMakerFee"),
            relayer_taker_fee=_to_int(order.relayer_taker_fee, "relayerTakerFee"),
            executor=_to_address(order.executor, "executor"),
            salt=_to_int(order.salt, "salt"),
            is_maker_betting_outcome_one=order.is_maker_betting_outcome_one,
        )
    raise SchemaError(f"Unsupported order type: {type(order).__name__}")


def ensure_canonical(order: Union[MakerOrder, ContractOrder]) -> ContractOrder:
    """Return order unchanged if canonical, else convert it."""
    if isinstance(order, (BaseTokenContractOrder, LegacyContractOrder)):
        return order
    return to_canonical_order(order)


def order_to_dict(order: Union[MakerOrder, ContractOrder]) -> Dict[str, Any]:
    """Render a wire or canonical order as a camelCase wire dict.

    Numeric fields become decimal strings; expiry stays an int.
    """
    if isinstance(order, (BaseTokenMakerOrder, LegacyMakerOrder)):
        return order.to_dict()
    rendered: Dict[str, Any] = {}
    for wire_key, attr in _FIELD_MAPS[order.schema].items():
        value = getattr(order, attr)
        rendered[wire_key] = str(value) if attr in _NUMERIC_FIELDS else value
    return rendered


def _parse(data: Mapping[str, Any], schema: OrderSchema, cls: Type[Any], extra: Dict[str, Any]) -> Any:
    kwargs: Dict[str, Any] = {}
    for wire_key, attr in _FIELD_MAPS[schema].items():
        if wire_key not in data:
            raise SchemaError(f"{wire_key} missing from {schema.value} order")
        value = data[wire_key]
        if attr in _NUMERIC_FIELDS and isinstance(value, int) and not isinstance(value, bool):
            value = str(value)
        elif attr == "expiry":
            value = _to_int(value, "expiry")
        kwargs[attr] = value
    kwargs.update(extra)
    return cls(**kwargs)


def order_from_dict(data: Mapping[str, Any], schema: OrderSchema) -> MakerOrder:
    """Parse a camelCase wire dict into a maker order.

    Keys outside the schema (e.g. ``orderHash`` on relayer listings) are
    ignored.

    Args:
        data: Wire order dict
        schema: Order schema of the deployment

    Returns:
        BaseTokenMakerOrder or LegacyMakerOrder

    Raises:
        SchemaError: If a schema field is missing
    """
    return _parse(data, schema, _WIRE_CLASSES[schema], {})


def signed_order_from_dict(data: Mapping[str, Any], schema: OrderSchema) -> SignedMakerOrder:
    """Parse a camelCase wire dict (with ``signature``) into a signed order."""
    if "signature" not in data:
        raise SchemaError("signature missing from signed order")
    return _parse(data, schema, _SIGNED_CLASSES[schema], {"signature": data["signature"]})


def sign_wire_order(order: MakerOrder, signature: str) -> SignedMakerOrder:
    """Attach a signature to an unsigned wire order."""
    cls = _SIGNED_CLASSES[order.schema]
    fields = {attr: getattr(order, attr) for attr in _FIELD_MAPS[order.schema].values()}
    return cls(signature=signature, **fields)
