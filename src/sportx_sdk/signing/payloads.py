"""EIP-712 payload builders.

One builder per signing purpose. The domain shapes differ between
purposes (some carry a version, some use a salt instead of chainId), so
each builder spells out its own domain. Every integer in a message is a
decimal string.
"""

from typing import Any, Dict, List, Sequence

from eth_abi import encode
from eth_utils import function_signature_to_4byte_selector, to_checksum_address

from ..errors import SchemaError
from .types import (
    BaseTokenContractOrder,
    CANCEL_ALL_ORDERS_TYPES,
    CANCEL_DETAILS_TYPES,
    CANCEL_EVENT_ORDERS_TYPES,
    CANCEL_ORDER_HASHES_TYPES,
    CancelAllOrders,
    CancelDetails,
    CancelEventOrders,
    CancelOrderHashes,
    ContractOrder,
    EIP712_DOMAIN_FIELDS,
    FILL_DETAILS_TYPES,
    FILL_OBJECT_TYPES,
    FILL_OBJECT_WITH_BENEFICIARY_TYPES,
    FillDetails,
    META_TRANSACTION_TYPES,
    ORDER_EIP712_TYPES,
    OrderSchema,
    PERMIT_TYPES,
    Permit,
)
from .utils import DEFAULT_EIP712_VERSION, left_pad_32
from .validation import is_valid_address

FILL_DOMAIN_NAME = "SportX"
CANCEL_ORDER_DOMAIN_NAME = "CancelOrderSportX"
CANCEL_ORDER_V2_DOMAIN_NAME = "CancelOrderV2SportX"
CANCEL_ALL_DOMAIN_NAME = "CancelAllOrdersSportX"
CANCEL_EVENT_DOMAIN_NAME = "CancelOrderEventsSportX"
CANCEL_DOMAIN_VERSION = "1.0"
META_TRANSACTION_DOMAIN_VERSION = "1"

APPROVE_FUNCTION = "approve(address,uint256)"


def _domain_types(domain: Dict[str, Any]) -> List[Dict[str, str]]:
    return [EIP712_DOMAIN_FIELDS[key] for key in domain]


def _typed_data(
    domain: Dict[str, Any],
    types: Dict[str, List[Dict[str, str]]],
    primary_type: str,
    message: Dict[str, Any],
) -> Dict[str, Any]:
    return {
        "types": {"EIP712Domain": _domain_types(domain), **types},
        "primaryType": primary_type,
        "domain": domain,
        "message": message,
    }


def _checksum(address: str, name: str) -> str:
    if not is_valid_address(address):
        raise SchemaError(f"Invalid {name}: {address}")
    return to_checksum_address(address)


def create_fill_domain(
    chain_id: int, verifying_contract: str, version: str = DEFAULT_EIP712_VERSION
) -> Dict[str, Any]:
    """Create the chainId-bound EIP-712 domain for fills and orders.

    Args:
        chain_id: Chain ID (416 for SX mainnet)
        verifying_contract: EIP-712 fill hasher address
        version: Protocol era ("1.0", "3.0", "4.0", ...)

    Returns:
        EIP-712 domain dictionary

    Raises:
        SchemaError: If the verifying contract is invalid
    """
    return {
        "name": FILL_DOMAIN_NAME,
        "version": version,
        "chainId": str(chain_id),
        "verifyingContract": _checksum(verifying_contract, "verifying contract"),
    }


def order_message(order: ContractOrder) -> Dict[str, Any]:
    """Render a canonical order as an EIP-712 ``Order`` message."""
    if isinstance(order, BaseTokenContractOrder):
        return {
            "marketHash": order.market_hash,
            "baseToken": order.base_token,
            "totalBetSize": str(order.total_bet_size),
            "percentageOdds": str(order.percentage_odds),
            "expiry": str(order.expiry),
            "salt": str(order.salt),
            "maker": order.maker,
            "executor": order.executor,
            "isMakerBettingOutcomeOne": order.is_maker_betting_outcome_one,
        }
    return {
        "marketHash": order.market_hash,
        "totalBetSize": str(order.total_bet_size),
        "percentageOdds": str(order.percentage_odds),
        "expiry": str(order.expiry),
        "relayerMakerFee": str(order.relayer_maker_fee),
        "relayerTakerFee": str(order.relayer_taker_fee),
        "salt": str(order.salt),
        "maker": order.maker,
        "relayer": order.relayer,
        "executor": order.executor,
        "isMakerBettingOutcomeOne": order.is_maker_betting_outcome_one,
    }


def _fill_orders_schema(orders: Sequence[ContractOrder]) -> OrderSchema:
    if not orders:
        raise SchemaError("At least one order is required")
    schemas = {order.schema for order in orders}
    if len(schemas) != 1:
        raise SchemaError("All filled orders must share one order schema")
    return schemas.pop()


def _fill_types(details: FillDetails, with_beneficiary: bool) -> Dict[str, List[Dict[str, str]]]:
    schema = _fill_orders_schema(details.orders)
    return {
        "Details": FILL_DETAILS_TYPES,
        "FillObject": FILL_OBJECT_WITH_BENEFICIARY_TYPES if with_beneficiary else FILL_OBJECT_TYPES,
        "Order": ORDER_EIP712_TYPES[schema],
    }


def _fill_message(details: FillDetails, with_beneficiary: bool) -> Dict[str, Any]:
    if len(details.orders) != len(details.taker_amounts):
        raise SchemaError(
            f"orders and takerAmounts length mismatch: "
            f"{len(details.orders)} != {len(details.taker_amounts)}"
        )
    if len(details.orders) != len(details.maker_sigs):
        raise SchemaError("Every filled order needs exactly one maker signature")

    fills: Dict[str, Any] = {
        "orders": [order_message(order) for order in details.orders],
        "makerSigs": list(details.maker_sigs),
        "takerAmounts": [str(amount) for amount in details.taker_amounts],
        "fillSalt": str(details.fill_salt),
    }
    if with_beneficiary:
        fills["beneficiary"] = _checksum(details.beneficiary, "beneficiary")
    return {**details.metadata.to_dict(), "fills": fills}


def fill_order_payload(
    details: FillDetails, chain_id: int, verifying_contract: str, version: str = "1.0"
) -> Dict[str, Any]:
    """Build the original fill payload (no beneficiary).

    Args:
        details: Orders, signatures, amounts and metadata being filled
        chain_id: Chain ID
        verifying_contract: EIP-712 fill hasher address
        version: Domain version

    Returns:
        EIP-712 typed data with primaryType ``Details``
    """
    return _typed_data(
        create_fill_domain(chain_id, verifying_contract, version),
        _fill_types(details, with_beneficiary=False),
        "Details",
        _fill_message(details, with_beneficiary=False),
    )


def fill_order_payload_with_beneficiary(
    details: FillDetails,
    chain_id: int,
    verifying_contract: str,
    version: str = DEFAULT_EIP712_VERSION,
) -> Dict[str, Any]:
    """Build the fill payload whose FillObject names a beneficiary.

    The beneficiary defaults to the zero address (the taker keeps the
    winnings).
    """
    return _typed_data(
        create_fill_domain(chain_id, verifying_contract, version),
        _fill_types(details, with_beneficiary=True),
        "Details",
        _fill_message(details, with_beneficiary=True),
    )


def salted_fill_order_payload(
    details: FillDetails,
    chain_id: int,
    verifying_contract: str,
    version: str = DEFAULT_EIP712_VERSION,
) -> Dict[str, Any]:
    """Build the fill payload whose domain carries the chain ID as a salt."""
    domain = {
        "name": FILL_DOMAIN_NAME,
        "version": version,
        "verifyingContract": _checksum(verifying_contract, "verifying contract"),
        "salt": left_pad_32(chain_id),
    }
    return _typed_data(
        domain,
        _fill_types(details, with_beneficiary=True),
        "Details",
        _fill_message(details, with_beneficiary=True),
    )


def order_payload(
    order: ContractOrder,
    chain_id: int,
    verifying_contract: str,
    version: str = DEFAULT_EIP712_VERSION,
) -> Dict[str, Any]:
    """Wrap a single canonical order in an EIP-712 ``Order`` payload."""
    return _typed_data(
        create_fill_domain(chain_id, verifying_contract, version),
        {"Order": ORDER_EIP712_TYPES[order.schema]},
        "Order",
        order_message(order),
    )


def cancel_orders_payload(details: CancelDetails, chain_id: int) -> Dict[str, Any]:
    """Build the early cancel payload ``{message, orders}``."""
    domain = {
        "name": CANCEL_ORDER_DOMAIN_NAME,
        "version": CANCEL_DOMAIN_VERSION,
        "chainId": str(chain_id),
    }
    message = {"message": details.message, "orders": list(details.orders)}
    return _typed_data(domain, CANCEL_DETAILS_TYPES, "Details", message)


def cancel_order_hashes_payload(cancel: CancelOrderHashes, chain_id: int) -> Dict[str, Any]:
    """Build the salted cancel payload ``{orderHashes, salt, timestamp}``.

    The domain is bound to the chain ID only and carries no version.
    """
    domain = {"name": CANCEL_ORDER_V2_DOMAIN_NAME, "chainId": str(chain_id)}
    message = {
        "orderHashes": list(cancel.order_hashes),
        "salt": cancel.salt,
        "timestamp": str(cancel.timestamp),
    }
    return _typed_data(domain, CANCEL_ORDER_HASHES_TYPES, "Details", message)


def cancel_all_orders_payload(cancel: CancelAllOrders, chain_id: int) -> Dict[str, Any]:
    """Build the cancel-all payload ``{salt, timestamp}``."""
    domain = {
        "name": CANCEL_ALL_DOMAIN_NAME,
        "version": CANCEL_DOMAIN_VERSION,
        "chainId": str(chain_id),
    }
    message = {"salt": cancel.salt, "timestamp": str(cancel.timestamp)}
    return _typed_data(domain, CANCEL_ALL_ORDERS_TYPES, "Details", message)


def cancel_event_orders_payload(cancel: CancelEventOrders, chain_id: int) -> Dict[str, Any]:
    """Build the cancel-by-event payload ``{sportXEventId, salt, timestamp}``."""
    domain = {
        "name": CANCEL_EVENT_DOMAIN_NAME,
        "version": CANCEL_DOMAIN_VERSION,
        "chainId": str(chain_id),
    }
    message = {
        "sportXEventId": cancel.sportx_event_id,
        "salt": cancel.salt,
        "timestamp": str(cancel.timestamp),
    }
    return _typed_data(domain, CANCEL_EVENT_ORDERS_TYPES, "Details", message)


def encode_approve_call(spender: str, amount: int) -> str:
    """ABI-encode an ERC-20 ``approve(spender, amount)`` call.

    Returns:
        0x-prefixed call data (4-byte selector + encoded arguments)
    """
    selector = function_signature_to_4byte_selector(APPROVE_FUNCTION)
    arguments = encode(["address", "uint256"], [_checksum(spender, "spender"), int(amount)])
    return "0x" + (selector + arguments).hex()


def meta_transaction_payload(
    function_signature: str,
    nonce: int,
    from_address: str,
    chain_id: int,
    token_address: str,
    token_name: str,
) -> Dict[str, Any]:
    """Build a meta-transaction payload for a token that relays calls.

    Args:
        function_signature: ABI-encoded call (e.g. from encode_approve_call)
        nonce: Meta-transaction nonce of from_address on the token
        from_address: Address the call executes as
        chain_id: Chain ID, carried as the domain salt
        token_address: Token contract (verifying contract)
        token_name: Token name as read from the chain

    Returns:
        EIP-712 typed data with primaryType ``MetaTransaction``
    """
    domain = {
        "name": token_name,
        "version": META_TRANSACTION_DOMAIN_VERSION,
        "verifyingContract": _checksum(token_address, "token address"),
        "salt": left_pad_32(chain_id),
    }
    message = {
        "nonce": str(nonce),
        "from": _checksum(from_address, "from address"),
        "functionSignature": function_signature,
    }
    return _typed_data(domain, META_TRANSACTION_TYPES, "MetaTransaction", message)


def permit_payload(
    permit: Permit,
    chain_id: int,
    token_address: str,
    token_name: str,
    token_version: str = "1",
) -> Dict[str, Any]:
    """Build a DAI-style permit payload.

    Args:
        permit: Holder, spender, nonce, expiry and allowed flag
        chain_id: Chain ID
        token_address: Token contract (verifying contract)
        token_name: Token name as read from the chain
        token_version: Token-specific domain version

    Returns:
        EIP-712 typed data with primaryType ``Permit``
    """
    domain = {
        "name": token_name,
        "version": token_version,
        "chainId": str(chain_id),
        "verifyingContract": _checksum(token_address, "token address"),
    }
    message = {
        "holder": _checksum(permit.holder, "holder"),
        "spender": _checksum(permit.spender, "spender"),
        "nonce": str(permit.nonce),
        "expiry": str(permit.expiry),
        "allowed": permit.allowed,
    }
    return _typed_data(domain, PERMIT_TYPES, "Permit", message)
