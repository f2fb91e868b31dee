"""Order, fill, cancel and approval types for SportX signing.

Wire types carry numeric fields as decimal strings, exactly as the relayer
exchanges them. Contract types carry Python ints and mirror the structs
the verifying contracts hash.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Union

from .utils import DEFAULT_METADATA_VALUE, ZERO_ADDRESS


class OrderSchema(str, Enum):
    """Maker order layout used by a protocol deployment."""

    BASE_TOKEN = "base-token"
    LEGACY_RELAYER_FEE = "legacy-relayer-fee"


class SignatureScheme(str, Enum):
    """How a maker signs an order hash."""

    PERSONAL_SIGN = "personal-sign"
    """Sign the raw 32-byte order hash as an EIP-191 personal message."""

    TYPED_DATA = "typed-data"
    """Sign the canonical order wrapped in an EIP-712 payload."""


class FillScheme(str, Enum):
    """How a taker authorizes a fill."""

    CHAINED_HASH = "chained-hash"
    """Personal-sign the chained multi-fill hash (legacy orders only)."""

    FILL_DETAILS = "fill-details"
    """EIP-712 Details payload, chainId domain, no beneficiary."""

    FILL_DETAILS_WITH_BENEFICIARY = "fill-details-with-beneficiary"
    """EIP-712 Details payload, chainId domain, with beneficiary."""

    SALTED_DOMAIN = "salted-domain"
    """EIP-712 Details payload, chain id carried as the domain salt."""


class CancelScheme(str, Enum):
    """Shape of the cancel-by-order-hashes payload."""

    MESSAGE_ORDERS = "message-orders"
    """{message, orders} bound only to chainId."""

    SALTED_HASHES = "salted-hashes"
    """{orderHashes, salt, timestamp}, replay resistant."""


# ── Wire orders ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class BaseTokenMakerOrder:
    """Maker order for deployments that settle in a per-order base token."""

    schema: ClassVar[OrderSchema] = OrderSchema.BASE_TOKEN

    market_hash: str
    """Market identifier (bytes32 hex string)."""

    base_token: str
    """Token the bet is denominated in."""

    maker: str
    """Maker's address."""

    total_bet_size: str
    """Maker's stake in base units."""

    percentage_odds: str
    """Maker's implied odds, fixed point (< 10^20)."""

    expiry: int
    """Unix timestamp (seconds) after which the order is invalid."""

    executor: str
    """Executor address published by the relayer."""

    salt: str
    """Random 256-bit integer string."""

    is_maker_betting_outcome_one: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "marketHash": self.market_hash,
            "baseToken": self.base_token,
            "maker": self.maker,
            "totalBetSize": self.total_bet_size,
            "percentageOdds": self.percentage_odds,
            "expiry": self.expiry,
            "executor": self.executor,
            "salt": self.salt,
            "isMakerBettingOutcomeOne": self.is_maker_betting_outcome_one,
        }


@dataclass(frozen=True)
class LegacyMakerOrder:
    """Maker order for deployments that charge relayer maker/taker fees."""

    schema: ClassVar[OrderSchema] = OrderSchema.LEGACY_RELAYER_FEE

    market_hash: str
    maker: str
    total_bet_size: str
    percentage_odds: str
    expiry: int
    relayer: str
    relayer_maker_fee: str
    relayer_taker_fee: str
    executor: str
    salt: str
    is_maker_betting_outcome_one: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "marketHash": self.market_hash,
            "maker": self.maker,
            "totalBetSize": self.total_bet_size,
            "percentageOdds": self.percentage_odds,
            "expiry": self.expiry,
            "relayer": self.relayer,
            "relayerMakerFee": self.relayer_maker_fee,
            "relayerTakerFee": self.relayer_taker_fee,
            "executor": self.executor,
            "salt": self.salt,
            "isMakerBettingOutcomeOne": self.is_maker_betting_outcome_one,
        }


@dataclass(frozen=True)
class SignedBaseTokenMakerOrder(BaseTokenMakerOrder):
    """Base-token maker order with the maker's signature."""

    signature: str
    """65-byte signature as a 0x-prefixed hex string."""

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "signature": self.signature}


@dataclass(frozen=True)
class SignedLegacyMakerOrder(LegacyMakerOrder):
    """Legacy maker order with the maker's signature."""

    signature: str

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "signature": self.signature}


MakerOrder = Union[BaseTokenMakerOrder, LegacyMakerOrder]
SignedMakerOrder = Union[SignedBaseTokenMakerOrder, SignedLegacyMakerOrder]


# ── Contract (canonical) orders ──────────────────────────────────────


@dataclass(frozen=True)
class BaseTokenContractOrder:
    """Canonical base-token order with integer fields."""

    schema: ClassVar[OrderSchema] = OrderSchema.BASE_TOKEN

    market_hash: str
    base_token: str
    maker: str
    total_bet_size: int
    percentage_odds: int
    expiry: int
    executor: str
    salt: int
    is_maker_betting_outcome_one: bool


@dataclass(frozen=True)
class LegacyContractOrder:
    """Canonical legacy order with integer fields."""

    schema: ClassVar[OrderSchema] = OrderSchema.LEGACY_RELAYER_FEE

    market_hash: str
    maker: str
    total_bet_size: int
    percentage_odds: int
    expiry: int
    relayer: str
    relayer_maker_fee: int
    relayer_taker_fee: int
    executor: str
    salt: int
    is_maker_betting_outcome_one: bool


ContractOrder = Union[BaseTokenContractOrder, LegacyContractOrder]


# ── Caller inputs ────────────────────────────────────────────────────


@dataclass
class NewOrder:
    """Parameters for a new maker order."""

    market_hash: str
    total_bet_size: str
    """Stake in base units (see to_base_units)."""

    percentage_odds: str
    """Fixed-point implied odds (see decimal_to_fixed_point)."""

    expiry: int
    is_maker_betting_outcome_one: bool
    base_token: Optional[str] = None
    """Required for base-token deployments, ignored by legacy ones."""


@dataclass
class FillDetailsMetadata:
    """Human readable fill description shown to the taker when signing."""

    action: str = DEFAULT_METADATA_VALUE
    market: str = DEFAULT_METADATA_VALUE
    betting: str = DEFAULT_METADATA_VALUE
    stake: str = DEFAULT_METADATA_VALUE
    odds: str = DEFAULT_METADATA_VALUE
    returning: str = DEFAULT_METADATA_VALUE

    def to_dict(self) -> Dict[str, str]:
        return {
            "action": self.action,
            "market": self.market,
            "betting": self.betting,
            "stake": self.stake,
            "odds": self.odds,
            "returning": self.returning,
        }


@dataclass
class FillDetails:
    """Everything a taker signs to fill one or more maker orders."""

    metadata: FillDetailsMetadata
    orders: List[ContractOrder]
    maker_sigs: List[str]
    taker_amounts: List[int]
    fill_salt: int
    beneficiary: str = ZERO_ADDRESS


@dataclass
class CancelDetails:
    """Early cancel shape: free-form message plus order hashes."""

    message: str
    orders: List[str]


@dataclass
class CancelOrderHashes:
    """Cancel specific orders (salted)."""

    order_hashes: List[str]
    salt: str
    """bytes32 hex string."""

    timestamp: int


@dataclass
class CancelAllOrders:
    """Cancel every open order of the signer."""

    salt: str
    timestamp: int


@dataclass
class CancelEventOrders:
    """Cancel every open order of the signer on one sporting event."""

    sportx_event_id: str
    salt: str
    timestamp: int


@dataclass
class Permit:
    """DAI-style permit authorizing a spender."""

    holder: str
    spender: str
    nonce: int
    expiry: int
    allowed: bool


@dataclass
class TokenMetadata:
    """Token data read from chain before building an approval."""

    name: str
    nonce: int


# ── Signed results ───────────────────────────────────────────────────


@dataclass
class ApproveSpenderPayload:
    """Signed meta-transaction approval."""

    owner: str
    spender: str
    token_address: str
    amount: int
    signature: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "owner": self.owner,
            "spender": self.spender,
            "tokenAddress": self.token_address,
            "amount": str(self.amount),
            "signature": self.signature,
        }


@dataclass
class FillOrdersRequest:
    """Signed fill ready for the relayer."""

    order_hashes: List[str]
    taker_amounts: List[str]
    taker: str
    taker_sig: str
    fill_salt: str
    metadata: FillDetailsMetadata = field(default_factory=FillDetailsMetadata)
    affiliate_address: Optional[str] = None
    approve_proxy_payload: Optional[ApproveSpenderPayload] = None
    beneficiary: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "orderHashes": self.order_hashes,
            "takerAmounts": self.taker_amounts,
            "taker": self.taker,
            "takerSig": self.taker_sig,
            "fillSalt": self.fill_salt,
            **self.metadata.to_dict(),
        }
        if self.beneficiary is not None:
            payload["beneficiary"] = self.beneficiary
        if self.affiliate_address is not None:
            payload["affiliateAddress"] = self.affiliate_address
        if self.approve_proxy_payload is not None:
            payload["approveProxyPayload"] = self.approve_proxy_payload.to_dict()
        return payload


@dataclass
class CancelOrdersRequest:
    """Signed early-shape cancel."""

    message: str
    orders: List[str]
    cancel_signature: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "orders": self.orders,
            "cancelSignature": self.cancel_signature,
        }


@dataclass
class CancelOrderHashesRequest:
    """Signed salted cancel of specific orders."""

    order_hashes: List[str]
    salt: str
    timestamp: int
    maker: str
    signature: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "orderHashes": self.order_hashes,
            "salt": self.salt,
            "timestamp": self.timestamp,
            "maker": self.maker,
            "signature": self.signature,
        }


@dataclass
class CancelAllOrdersRequest:
    """Signed cancel of every open order."""

    salt: str
    timestamp: int
    maker: str
    signature: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "salt": self.salt,
            "timestamp": self.timestamp,
            "maker": self.maker,
            "signature": self.signature,
        }


@dataclass
class CancelEventOrdersRequest:
    """Signed cancel of every open order on one event."""

    sportx_event_id: str
    salt: str
    timestamp: int
    maker: str
    signature: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sportXEventId": self.sportx_event_id,
            "salt": self.salt,
            "timestamp": self.timestamp,
            "maker": self.maker,
            "signature": self.signature,
        }


@dataclass
class PermitRequest:
    """Signed permit."""

    permit: Permit
    signature: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "holder": self.permit.holder,
            "spender": self.permit.spender,
            "nonce": str(self.permit.nonce),
            "expiry": str(self.permit.expiry),
            "allowed": self.permit.allowed,
            "signature": self.signature,
        }


# ── EIP-712 type tables ──────────────────────────────────────────────

EIP712_DOMAIN_FIELDS = {
    "name": {"name": "name", "type": "string"},
    "version": {"name": "version", "type": "string"},
    "chainId": {"name": "chainId", "type": "uint256"},
    "verifyingContract": {"name": "verifyingContract", "type": "address"},
    "salt": {"name": "salt", "type": "bytes32"},
}

# Field order matches the order hash layout of each schema
ORDER_EIP712_TYPES = {
    OrderSchema.BASE_TOKEN: [
        {"name": "marketHash", "type": "bytes32"},
        {"name": "baseToken", "type": "address"},
        {"name": "totalBetSize", "type": "uint256"},
        {"name": "percentageOdds", "type": "uint256"},
        {"name": "expiry", "type": "uint256"},
        {"name": "salt", "type": "uint256"},
        {"name": "maker", "type": "address"},
        {"name": "executor", "type": "address"},
        {"name": "isMakerBettingOutcomeOne", "type": "bool"},
    ],
    OrderSchema.LEGACY_RELAYER_FEE: [
        {"name": "marketHash", "type": "bytes32"},
        {"name": "totalBetSize", "type": "uint256"},
        {"name": "percentageOdds", "type": "uint256"},
        {"name": "expiry", "type": "uint256"},
        {"name": "relayerMakerFee", "type": "uint256"},
        {"name": "relayerTakerFee", "type": "uint256"},
        {"name": "salt", "type": "uint256"},
        {"name": "maker", "type": "address"},
        {"name": "relayer", "type": "address"},
        {"name": "executor", "type": "address"},
        {"name": "isMakerBettingOutcomeOne", "type": "bool"},
    ],
}

FILL_DETAILS_TYPES = [
    {"name": "action", "type": "string"},
    {"name": "market", "type": "string"},
    {"name": "betting", "type": "string"},
    {"name": "stake", "type": "string"},
    {"name": "odds", "type": "string"},
    {"name": "returning", "type": "string"},
    {"name": "fills", "type": "FillObject"},
]

FILL_OBJECT_TYPES = [
    {"name": "orders", "type": "Order[]"},
    {"name": "makerSigs", "type": "bytes[]"},
    {"name": "takerAmounts", "type": "uint256[]"},
    {"name": "fillSalt", "type": "uint256"},
]

FILL_OBJECT_WITH_BENEFICIARY_TYPES = FILL_OBJECT_TYPES + [
    {"name": "beneficiary", "type": "address"},
]

CANCEL_DETAILS_TYPES = {
    "Details": [
        {"name": "message", "type": "string"},
        {"name": "orders", "type": "string[]"},
    ],
}

CANCEL_ORDER_HASHES_TYPES = {
    "Details": [
        {"name": "orderHashes", "type": "string[]"},
        {"name": "salt", "type": "bytes32"},
        {"name": "timestamp", "type": "uint256"},
    ],
}

CANCEL_ALL_ORDERS_TYPES = {
    "Details": [
        {"name": "salt", "type": "bytes32"},
        {"name": "timestamp", "type": "uint256"},
    ],
}

CANCEL_EVENT_ORDERS_TYPES = {
    "Details": [
        {"name": "sportXEventId", "type": "string"},
        {"name": "salt", "type": "bytes32"},
        {"name": "timestamp", "type": "uint256"},
    ],
}

META_TRANSACTION_TYPES = {
    "MetaTransaction": [
        {"name": "nonce", "type": "uint256"},
        {"name": "from", "type": "address"},
        {"name": "functionSignature", "type": "bytes"},
    ],
}

PERMIT_TYPES = {
    "Permit": [
        {"name": "holder", "type": "address"},
        {"name": "spender", "type": "address"},
        {"name": "nonce", "type": "uint256"},
        {"name": "expiry", "type": "uint256"},
        {"name": "allowed", "type": "bool"},
    ],
}
