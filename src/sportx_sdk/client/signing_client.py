"""SportX signing client.

Composes validation, hashing, payload building and a signer into signed
request bodies for the relayer. Transport is left to the caller: every
operation returns a dataclass whose ``to_dict()`` is the JSON body.

The protocol variants (order schema, order signing, fill and cancel
shapes) are fixed once in the configuration, e.g. a legacy deployment:

    {"order_schema": OrderSchema.LEGACY_RELAYER_FEE,
     "fill_scheme": FillScheme.CHAINED_HASH,
     "relayer": "0x...", "executor": "0x..."}
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, TypedDict, Union

import structlog
from eth_utils import to_checksum_address

from ..chain import TokenMetadataReader
from ..errors import SchemaError, SportXError
from ..signing.codec import to_canonical_order
from ..signing.order_hash import compute_multi_fill_hash, compute_order_hash
from ..signing.payloads import (
    cancel_all_orders_payload,
    cancel_event_orders_payload,
    cancel_order_hashes_payload,
    cancel_orders_payload,
    encode_approve_call,
    fill_order_payload,
    fill_order_payload_with_beneficiary,
    meta_transaction_payload,
    permit_payload,
    salted_fill_order_payload,
)
from ..signing.signers import OrderSigner, sign_order
from ..signing.types import (
    ApproveSpenderPayload,
    BaseTokenMakerOrder,
    CancelAllOrders,
    CancelAllOrdersRequest,
    CancelDetails,
    CancelEventOrders,
    CancelEventOrdersRequest,
    CancelOrderHashes,
    CancelOrderHashesRequest,
    CancelOrdersRequest,
    CancelScheme,
    FillDetails,
    FillDetailsMetadata,
    FillOrdersRequest,
    FillScheme,
    LegacyMakerOrder,
    MakerOrder,
    NewOrder,
    OrderSchema,
    Permit,
    PermitRequest,
    SignatureScheme,
    SignedMakerOrder,
)
from ..signing.utils import (
    DEFAULT_EIP712_VERSION,
    DEFAULT_METADATA_VALUE,
    EIP712_FILL_HASHER_MAINNET,
    SX_MAINNET_CHAIN_ID,
    ZERO_ADDRESS,
    current_timestamp,
    generate_salt,
    generate_salt_hex,
)
from ..signing.validation import (
    validate_address,
    validate_fill_details_metadata,
    validate_maker_order,
    validate_new_order,
    validate_order_hashes,
    validate_signed_maker_order,
    validate_taker_amounts,
)

logger = structlog.get_logger("sportx.client")

# Fill schemes whose FillObject carries a beneficiary
_BENEFICIARY_SCHEMES = (FillScheme.FILL_DETAILS_WITH_BENEFICIARY, FillScheme.SALTED_DOMAIN)


class SigningConfig(TypedDict, total=False):
    """Deployment configuration for the signing client."""

    chain_id: int
    """Chain ID. Default: 416 (SX mainnet)"""

    order_schema: OrderSchema
    """Maker order layout. Default: OrderSchema.BASE_TOKEN"""

    order_signing: SignatureScheme
    """How makers sign orders. Default: SignatureScheme.PERSONAL_SIGN"""

    fill_scheme: FillScheme
    """How takers sign fills. Default: FillScheme.FILL_DETAILS_WITH_BENEFICIARY"""

    cancel_scheme: CancelScheme
    """Shape of cancel-by-hash payloads. Default: CancelScheme.SALTED_HASHES"""

    eip712_version: str
    """Fill/order domain version. Default: "4.0" """

    verifying_contract: str
    """EIP-712 fill hasher. Default: SX mainnet fill hasher"""

    executor: str
    """Executor address published by the relayer (required to create orders)"""

    relayer: str
    """Relayer address (legacy relayer-fee schema only)"""

    relayer_maker_fee: int
    """Relayer maker fee (legacy relayer-fee schema only). Default: 0"""

    relayer_taker_fee: int
    """Relayer taker fee (legacy relayer-fee schema only). Default: 0"""

    submitter_fee: int
    """Submitter fee appended to chained fill hashes (optional)"""


@dataclass
class ResolvedSigningConfig:
    """Resolved signing configuration with all defaults applied."""

    chain_id: int
    order_schema: OrderSchema
    order_signing: SignatureScheme
    fill_scheme: FillScheme
    cancel_scheme: CancelScheme
    eip712_version: str
    verifying_contract: str
    executor: Optional[str]
    relayer: Optional[str]
    relayer_maker_fee: int
    relayer_taker_fee: int
    submitter_fee: Optional[int]


def resolve_config(config: Optional[SigningConfig] = None) -> ResolvedSigningConfig:
    """Apply defaults to a partial configuration.

    Raises:
        SchemaError: If a configured address is invalid
    """
    config = config or {}
    resolved = ResolvedSigningConfig(
        chain_id=config.get("chain_id", SX_MAINNET_CHAIN_ID),
        order_schema=OrderSchema(config.get("order_schema", OrderSchema.BASE_TOKEN)),
        order_signing=SignatureScheme(
            config.get("order_signing", SignatureScheme.PERSONAL_SIGN)
        ),
        fill_scheme=FillScheme(
            config.get("fill_scheme", FillScheme.FILL_DETAILS_WITH_BENEFICIARY)
        ),
        cancel_scheme=CancelScheme(config.get("cancel_scheme", CancelScheme.SALTED_HASHES)),
        eip712_version=config.get("eip712_version", DEFAULT_EIP712_VERSION),
        verifying_contract=config.get("verifying_contract", EIP712_FILL_HASHER_MAINNET),
        executor=config.get("executor"),
        relayer=config.get("relayer"),
        relayer_maker_fee=config.get("relayer_maker_fee", 0),
        relayer_taker_fee=config.get("relayer_taker_fee", 0),
        submitter_fee=config.get("submitter_fee"),
    )

    validate_address(resolved.verifying_contract, "verifying_contract")
    for name in ("executor", "relayer"):
        value = getattr(resolved, name)
        if value is not None:
            validate_address(value, name)
    if resolved.fill_scheme is FillScheme.CHAINED_HASH and (
        resolved.order_schema is not OrderSchema.LEGACY_RELAYER_FEE
    ):
        raise SchemaError("Chained fill hashes require the legacy relayer-fee order schema")
    return resolved


class SportXSigningClient:
    """Produces signed SportX relayer requests.

    Example:
        ```python
        client = SportXSigningClient(
            LocalAccountSigner(private_key),
            {"executor": "0x...", "chain_id": 416},
        )

        signed = await client.new_order(NewOrder(
            market_hash="0x...",
            base_token="0x...",
            total_bet_size=str(to_base_units("10", 6)),
            percentage_odds=decimal_to_fixed_point(0.5),
            expiry=current_timestamp() + 3600,
            is_maker_betting_outcome_one=True,
        ))
        body = {"orders": [signed.to_dict()]}
        ```
    """

    def __init__(
        self,
        signer: OrderSigner,
        config: Optional[SigningConfig] = None,
        token_reader: Optional[TokenMetadataReader] = None,
    ):
        """Initialize the signing client.

        Args:
            signer: Signer for the maker/taker wallet
            config: Optional deployment configuration
            token_reader: Chain reader, required for approvals
        """
        self._signer = signer
        self._config = resolve_config(config)
        self._token_reader = token_reader

    @property
    def config(self) -> ResolvedSigningConfig:
        return self._config

    def _check_schema(self, order: MakerOrder) -> None:
        if order.schema is not self._config.order_schema:
            raise SchemaError(
                f"{type(order).__name__} does not match configured order schema "
                f"{self._config.order_schema.value}"
            )

    def _build_order(self, order: NewOrder, maker: str) -> MakerOrder:
        cfg = self._config
        if cfg.executor is None:
            raise SchemaError("executor must be configured to create orders")

        if cfg.order_schema is OrderSchema.BASE_TOKEN:
            return BaseTokenMakerOrder(
                market_hash=order.market_hash,
                base_token=to_checksum_address(order.base_token),
                maker=maker,
                total_bet_size=str(order.total_bet_size),
                percentage_odds=str(order.percentage_odds),
                expiry=int(order.expiry),
                executor=to_checksum_address(cfg.executor),
                salt=str(generate_salt()),
                is_maker_betting_outcome_one=order.is_maker_betting_outcome_one,
            )

        if cfg.relayer is None:
            raise SchemaError("relayer must be configured for legacy relayer-fee orders")
        return LegacyMakerOrder(
            market_hash=order.market_hash,
            maker=maker,
            total_bet_size=str(order.total_bet_size),
            percentage_odds=str(order.percentage_odds),
            expiry=int(order.expiry),
            relayer=to_checksum_address(cfg.relayer),
            relayer_maker_fee=str(cfg.relayer_maker_fee),
            relayer_taker_fee=str(cfg.relayer_taker_fee),
            executor=to_checksum_address(cfg.executor),
            salt=str(generate_salt()),
            is_maker_betting_outcome_one=order.is_maker_betting_outcome_one,
        )

    async def new_order(self, order: NewOrder) -> SignedMakerOrder:
        """Create and sign one maker order."""
        signed = await self.new_orders([order])
        return signed[0]

    async def new_orders(self, orders: Sequence[NewOrder]) -> List[SignedMakerOrder]:
        """Create and sign maker orders, each with a fresh 256-bit salt.

        Every order is validated before any of them is signed.

        Args:
            orders: New order parameters

        Returns:
            Signed wire orders, in input order

        Raises:
            SchemaError: If any order is malformed or the client is
                missing the executor/relayer configuration
            SigningFailure: If the signer rejects
        """
        if not orders:
            raise SchemaError("orders is empty")
        cfg = self._config
        maker = to_checksum_address(await self._signer.get_address())

        built = []
        for order in orders:
            validate_new_order(order, cfg.order_schema)
            wire = self._build_order(order, maker)
            validate_maker_order(wire)
            built.append(wire)

        signed = [
            await sign_order(
                wire,
                self._signer,
                cfg.order_signing,
                chain_id=cfg.chain_id,
                verifying_contract=cfg.verifying_contract,
                version=cfg.eip712_version,
            )
            for wire in built
        ]
        logger.info(
            "client.orders_signed",
            count=len(signed),
            schema=cfg.order_schema.value,
            scheme=cfg.order_signing.value,
        )
        return signed

    async def fill_orders(
        self,
        orders: Sequence[SignedMakerOrder],
        taker_amounts: Sequence[Union[int, str]],
        metadata: Optional[FillDetailsMetadata] = None,
        affiliate: Optional[str] = None,
        approval: Optional[ApproveSpenderPayload] = None,
        beneficiary: Optional[str] = None,
    ) -> FillOrdersRequest:
        """Sign a fill of one or more signed maker orders.

        Args:
            orders: Signed maker orders to fill
            taker_amounts: Amount to fill per order, in base units
            metadata: Human readable fill description (defaults to "N/A")
            affiliate: Affiliate address credited with the fill
            approval: Signed token approval sent along with the fill
            beneficiary: Address receiving the winnings (beneficiary
                schemes only; defaults to the zero address)

        Returns:
            FillOrdersRequest ready for the relayer

        Raises:
            SchemaError: If orders or amounts are malformed or the orders
                do not match the configured schema
            SigningFailure: If the signer rejects
        """
        cfg = self._config
        validate_taker_amounts(orders, taker_amounts)
        for order in orders:
            self._check_schema(order)
            validate_signed_maker_order(order)
        metadata = metadata or FillDetailsMetadata()
        validate_fill_details_metadata(metadata)
        if affiliate is not None:
            validate_address(affiliate, "affiliateAddress")
        if beneficiary is not None:
            if cfg.fill_scheme not in _BENEFICIARY_SCHEMES:
                raise SchemaError(
                    f"Fill scheme {cfg.fill_scheme.value} does not carry a beneficiary"
                )
            validate_address(beneficiary, "beneficiary")

        taker = to_checksum_address(await self._signer.get_address())
        fill_salt = generate_salt()
        amounts = [int(amount) for amount in taker_amounts]
        order_hashes = [compute_order_hash(order) for order in orders]

        request_beneficiary = None
        if cfg.fill_scheme is FillScheme.CHAINED_HASH:
            fill_hash = compute_multi_fill_hash(orders, amounts, fill_salt, cfg.submitter_fee)
            taker_sig = await self._signer.sign_hash(fill_hash)
        else:
            details = FillDetails(
                metadata=metadata,
                orders=[to_canonical_order(order) for order in orders],
                maker_sigs=[order.signature for order in orders],
                taker_amounts=amounts,
                fill_salt=fill_salt,
                beneficiary=to_checksum_address(beneficiary or ZERO_ADDRESS),
            )
            if cfg.fill_scheme is FillScheme.FILL_DETAILS:
                payload = fill_order_payload(
                    details, cfg.chain_id, cfg.verifying_contract, cfg.eip712_version
                )
            elif cfg.fill_scheme is FillScheme.SALTED_DOMAIN:
                payload = salted_fill_order_payload(
                    details, cfg.chain_id, cfg.verifying_contract, cfg.eip712_version
                )
            else:
                payload = fill_order_payload_with_beneficiary(
                    details, cfg.chain_id, cfg.verifying_contract, cfg.eip712_version
                )
            if cfg.fill_scheme in _BENEFICIARY_SCHEMES:
                request_beneficiary = details.beneficiary
            taker_sig = await self._signer.sign_typed_data(payload)

        logger.info(
            "client.fill_signed",
            orders=len(order_hashes),
            scheme=cfg.fill_scheme.value,
            order_hashes=order_hashes,
        )
        return FillOrdersRequest(
            order_hashes=order_hashes,
            taker_amounts=[str(amount) for amount in amounts],
            taker=taker,
            taker_sig=taker_sig,
            fill_salt=str(fill_salt),
            metadata=metadata,
            affiliate_address=to_checksum_address(affiliate) if affiliate else None,
            approve_proxy_payload=approval,
            beneficiary=request_beneficiary,
        )

    async def cancel_orders(
        self, order_hashes: Sequence[str], message: Optional[str] = None
    ) -> Union[CancelOrdersRequest, CancelOrderHashesRequest]:
        """Sign a cancellation of specific orders.

        Args:
            order_hashes: Hashes of the orders to cancel
            message: Free-form message (message-orders scheme only;
                defaults to "N/A")

        Returns:
            CancelOrdersRequest or CancelOrderHashesRequest, per the
            configured cancel scheme
        """
        validate_order_hashes(order_hashes)
        if message is not None and not isinstance(message, str):
            raise SchemaError("message is not a string")
        cfg = self._config

        if cfg.cancel_scheme is CancelScheme.MESSAGE_ORDERS:
            details = CancelDetails(
                message=message or DEFAULT_METADATA_VALUE, orders=list(order_hashes)
            )
            signature = await self._signer.sign_typed_data(
                cancel_orders_payload(details, cfg.chain_id)
            )
            logger.info("client.cancel_signed", orders=len(order_hashes), scheme=cfg.cancel_scheme.value)
            return CancelOrdersRequest(
                message=details.message, orders=details.orders, cancel_signature=signature
            )

        maker = to_checksum_address(await self._signer.get_address())
        cancel = CancelOrderHashes(
            order_hashes=list(order_hashes),
            salt=generate_salt_hex(),
            timestamp=current_timestamp(),
        )
        signature = await self._signer.sign_typed_data(
            cancel_order_hashes_payload(cancel, cfg.chain_id)
        )
        logger.info("client.cancel_signed", orders=len(order_hashes), scheme=cfg.cancel_scheme.value)
        return CancelOrderHashesRequest(
            order_hashes=cancel.order_hashes,
            salt=cancel.salt,
            timestamp=cancel.timestamp,
            maker=maker,
            signature=signature,
        )

    async def cancel_all_orders(self) -> CancelAllOrdersRequest:
        """Sign a cancellation of every open order of the signer."""
        maker = to_checksum_address(await self._signer.get_address())
        cancel = CancelAllOrders(salt=generate_salt_hex(), timestamp=current_timestamp())
        signature = await self._signer.sign_typed_data(
            cancel_all_orders_payload(cancel, self._config.chain_id)
        )
        logger.info("client.cancel_all_signed", timestamp=cancel.timestamp)
        return CancelAllOrdersRequest(
            salt=cancel.salt, timestamp=cancel.timestamp, maker=maker, signature=signature
        )

    async def cancel_event_orders(self, sportx_event_id: str) -> CancelEventOrdersRequest:
        """Sign a cancellation of every open order on one sporting event."""
        if not isinstance(sportx_event_id, str) or not sportx_event_id:
            raise SchemaError("sportXEventId is not a non-empty string")
        maker = to_checksum_address(await self._signer.get_address())
        cancel = CancelEventOrders(
            sportx_event_id=sportx_event_id,
            salt=generate_salt_hex(),
            timestamp=current_timestamp(),
        )
        signature = await self._signer.sign_typed_data(
            cancel_event_orders_payload(cancel, self._config.chain_id)
        )
        logger.info("client.cancel_event_signed", sportx_event_id=sportx_event_id)
        return CancelEventOrdersRequest(
            sportx_event_id=sportx_event_id,
            salt=cancel.salt,
            timestamp=cancel.timestamp,
            maker=maker,
            signature=signature,
        )

    def _require_reader(self) -> TokenMetadataReader:
        if self._token_reader is None:
            raise SportXError("A token_reader is required to sign approvals")
        return self._token_reader

    async def approve_spender(
        self, token_address: str, spender: str, amount: int
    ) -> ApproveSpenderPayload:
        """Sign a meta-transaction that approves spender on token_address.

        Reads the token name and the owner's nonce once, then signs the
        ``approve(spender, amount)`` call as a MetaTransaction.

        Args:
            token_address: Token that relays meta-transactions
            spender: Address to approve
            amount: Allowance in base units

        Returns:
            ApproveSpenderPayload (pass as ``approval`` to fill_orders)
        """
        validate_address(token_address, "tokenAddress")
        validate_address(spender, "spender")
        if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
            raise SchemaError("amount is not a non-negative integer")

        reader = self._require_reader()
        owner = to_checksum_address(await self._signer.get_address())
        metadata = await reader.read_token_metadata(token_address, owner)
        payload = meta_transaction_payload(
            encode_approve_call(spender, amount),
            metadata.nonce,
            owner,
            self._config.chain_id,
            token_address,
            metadata.name,
        )
        signature = await self._signer.sign_typed_data(payload)
        logger.info("client.approval_signed", token=token_address, nonce=metadata.nonce)
        return ApproveSpenderPayload(
            owner=owner,
            spender=to_checksum_address(spender),
            token_address=to_checksum_address(token_address),
            amount=amount,
            signature=signature,
        )

    async def approve_with_permit(
        self, token_address: str, spender: str, token_version: str = "1"
    ) -> PermitRequest:
        """Sign a DAI-style permit giving spender an unlimited allowance.

        The permit never expires (expiry 0).
        """
        validate_address(token_address, "tokenAddress")
        validate_address(spender, "spender")

        reader = self._require_reader()
        holder = to_checksum_address(await self._signer.get_address())
        metadata = await reader.read_token_metadata(token_address, holder)
        permit = Permit(
            holder=holder,
            spender=to_checksum_address(spender),
            nonce=metadata.nonce,
            expiry=0,
            allowed=True,
        )
        signature = await self._signer.sign_typed_data(
            permit_payload(
                permit, self._config.chain_id, token_address, metadata.name, token_version
            )
        )
        logger.info("client.permit_signed", token=token_address, nonce=metadata.nonce)
        return PermitRequest(permit=permit, signature=signature)
