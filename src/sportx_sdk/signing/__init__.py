"""SportX Order Signing Module.

This module turns betting parameters into the canonical structures the
SportX contracts verify, and signs them.

Key components:
- Fixed-point odds conversion (lossy float encoding, exact decoding)
- Order hashing (packed encoding + keccak256) for both order schemas
- Legacy fill hashing and multi-fill hash chaining
- EIP-712 payloads for fills, cancels, approvals and permits
- Signer adapters (local private key, delegated wallet)

Example usage:
    ```python
    from sportx_sdk.signing import (
        BaseTokenMakerOrder,
        LocalAccountSigner,
        compute_order_hash,
        decimal_to_fixed_point,
        generate_salt,
        sign_order,
    )

    order = BaseTokenMakerOrder(
        market_hash="0x...",
        base_token="0x...",
        maker="0x...",
        total_bet_size="10000000",
        percentage_odds=decimal_to_fixed_point(0.5),  # "50000000000000000000"
        expiry=2209006800,
        executor="0x...",
        salt=str(generate_salt()),
        is_maker_betting_outcome_one=True,
    )

    order_hash = compute_order_hash(order)
    signed = await sign_order(order, LocalAccountSigner("0x..."))
    ```
"""

from .types import (
    OrderSchema,
    SignatureScheme,
    FillScheme,
    CancelScheme,
    BaseTokenMakerOrder,
    LegacyMakerOrder,
    SignedBaseTokenMakerOrder,
    SignedLegacyMakerOrder,
    MakerOrder,
    SignedMakerOrder,
    BaseTokenContractOrder,
    LegacyContractOrder,
    ContractOrder,
    NewOrder,
    FillDetailsMetadata,
    FillDetails,
    CancelDetails,
    CancelOrderHashes,
    CancelAllOrders,
    CancelEventOrders,
    Permit,
    TokenMetadata,
    ApproveSpenderPayload,
    FillOrdersRequest,
    CancelOrdersRequest,
    CancelOrderHashesRequest,
    CancelAllOrdersRequest,
    CancelEventOrdersRequest,
    PermitRequest,
    ORDER_EIP712_TYPES,
)
from .odds import (
    decimal_to_fixed_point,
    fixed_point_to_decimal,
    taker_odds,
    to_base_units,
    from_base_units,
)
from .codec import (
    to_canonical_order,
    order_from_dict,
    signed_order_from_dict,
    order_to_dict,
    sign_wire_order,
)
from .order_hash import (
    compute_order_hash,
    verify_order_hash,
    compute_fill_hash,
    compute_multi_fill_hash,
)
from .payloads import (
    create_fill_domain,
    fill_order_payload,
    fill_order_payload_with_beneficiary,
    salted_fill_order_payload,
    order_payload,
    cancel_orders_payload,
    cancel_order_hashes_payload,
    cancel_all_orders_payload,
    cancel_event_orders_payload,
    meta_transaction_payload,
    encode_approve_call,
    permit_payload,
)
from .signers import (
    OrderSigner,
    LocalAccountSigner,
    WalletProvider,
    WalletSigner,
    sign_hash_with_key,
    sign_typed_data_with_key,
    sign_order,
    recover_hash_signer,
    recover_typed_data_signer,
    verify_typed_data_signature,
    verify_order_signature,
)
from .utils import (
    SX_MAINNET_CHAIN_ID,
    SX_TORONTO_CHAIN_ID,
    EIP712_FILL_HASHER_MAINNET,
    DEFAULT_EIP712_VERSION,
    ZERO_ADDRESS,
    FRACTION_DENOMINATOR,
    generate_salt,
    generate_salt_hex,
    current_timestamp,
    left_pad_32,
)

__all__ = [
    # Types
    "OrderSchema",
    "SignatureScheme",
    "FillScheme",
    "CancelScheme",
    "BaseTokenMakerOrder",
    "LegacyMakerOrder",
    "SignedBaseTokenMakerOrder",
    "SignedLegacyMakerOrder",
    "MakerOrder",
    "SignedMakerOrder",
    "BaseTokenContractOrder",
    "LegacyContractOrder",
    "ContractOrder",
    "NewOrder",
    "FillDetailsMetadata",
    "FillDetails",
    "CancelDetails",
    "CancelOrderHashes",
    "CancelAllOrders",
    "CancelEventOrders",
    "Permit",
    "TokenMetadata",
    "ApproveSpenderPayload",
    "FillOrdersRequest",
    "CancelOrdersRequest",
    "CancelOrderHashesRequest",
    "CancelAllOrdersRequest",
    "CancelEventOrdersRequest",
    "PermitRequest",
    "ORDER_EIP712_TYPES",
    # Odds
    "decimal_to_fixed_point",
    "fixed_point_to_decimal",
    "taker_odds",
    "to_base_units",
    "from_base_units",
    # Codec
    "to_canonical_order",
    "order_from_dict",
    "signed_order_from_dict",
    "order_to_dict",
    "sign_wire_order",
    # Hashing
    "compute_order_hash",
    "verify_order_hash",
    "compute_fill_hash",
    "compute_multi_fill_hash",
    # Payloads
    "create_fill_domain",
    "fill_order_payload",
    "fill_order_payload_with_beneficiary",
    "salted_fill_order_payload",
    "order_payload",
    "cancel_orders_payload",
    "cancel_order_hashes_payload",
    "cancel_all_orders_payload",
    "cancel_event_orders_payload",
    "meta_transaction_payload",
    "encode_approve_call",
    "permit_payload",
    # Signers
    "OrderSigner",
    "LocalAccountSigner",
    "WalletProvider",
    "WalletSigner",
    "sign_hash_with_key",
    "sign_typed_data_with_key",
    "sign_order",
    "recover_hash_signer",
    "recover_typed_data_signer",
    "verify_typed_data_signature",
    "verify_order_signature",
    # Utils
    "SX_MAINNET_CHAIN_ID",
    "SX_TORONTO_CHAIN_ID",
    "EIP712_FILL_HASHER_MAINNET",
    "DEFAULT_EIP712_VERSION",
    "ZERO_ADDRESS",
    "FRACTION_DENOMINATOR",
    "generate_salt",
    "generate_salt_hex",
    "current_timestamp",
    "left_pad_32",
]
