"""Signer adapters for SportX orders, fills, cancels and approvals.

Two strategies produce signatures:
- LocalAccountSigner (private key held in process, eth_account)
- WalletSigner (delegated EIP-1193 wallet: MetaMask, injected providers)

Both satisfy the OrderSigner protocol so the signing client never needs
to know which one it holds.
"""

import json
from typing import Any, Dict, Protocol

import structlog
from eth_account import Account
from eth_account.messages import encode_defunct, encode_typed_data
from eth_utils import to_bytes, to_checksum_address

from ..errors import SchemaError, SigningFailure
from .codec import sign_wire_order, to_canonical_order
from .order_hash import compute_order_hash
from .payloads import order_payload
from .types import MakerOrder, SignatureScheme, SignedMakerOrder
from .utils import DEFAULT_EIP712_VERSION, EIP712_FILL_HASHER_MAINNET, SX_MAINNET_CHAIN_ID

logger = structlog.get_logger("signing.signers")


def _hash_bytes(hash_hex: str) -> bytes:
    try:
        raw = to_bytes(hexstr=hash_hex)
    except (TypeError, ValueError):
        raise SchemaError(f"Hash is not hex: {hash_hex!r}") from None
    if len(raw) != 32:
        raise SchemaError(f"Hash must be 32 bytes, got {len(raw)}")
    return raw


def _signature_bytes(signature: str) -> bytes:
    return bytes.fromhex(signature[2:] if signature.startswith("0x") else signature)


def _signature_hex(signature: bytes) -> str:
    return "0x" + bytes(signature).hex()


def sign_hash_with_key(private_key: str, hash_hex: str) -> str:
    """Personal-sign (EIP-191) the 32 raw bytes of a hash.

    The wallet-facing message is the binary hash, not its hex text.

    Args:
        private_key: Private key (hex string with or without 0x prefix)
        hash_hex: bytes32 hex string

    Returns:
        65-byte signature as a 0x-prefixed hex string
    """
    signable = encode_defunct(primitive=_hash_bytes(hash_hex))
    signed = Account.sign_message(signable, private_key=private_key)
    return _signature_hex(signed.signature)


def sign_typed_data_with_key(private_key: str, payload: Dict[str, Any]) -> str:
    """Sign an EIP-712 payload (types, primaryType, domain, message).

    Args:
        private_key: Private key (hex string with or without 0x prefix)
        payload: Full typed-data dict, as built by the payload builders

    Returns:
        65-byte signature as a 0x-prefixed hex string
    """
    signable = encode_typed_data(full_message=payload)
    signed = Account.sign_message(signable, private_key=private_key)
    return _signature_hex(signed.signature)


class OrderSigner(Protocol):
    """Protocol for anything that can sign on behalf of one address."""

    async def get_address(self) -> str:
        """Get the signer's address."""
        ...

    async def sign_hash(self, hash_hex: str) -> str:
        """Personal-sign the raw bytes of a 32-byte hash.

        Args:
            hash_hex: bytes32 hex string

        Returns:
            Signature as hex string
        """
        ...

    async def sign_typed_data(self, payload: Dict[str, Any]) -> str:
        """Sign EIP-712 typed data.

        Args:
            payload: Dict with types, primaryType, domain, and message

        Returns:
            Signature as hex string
        """
        ...


class LocalAccountSigner:
    """OrderSigner backed by a private key held in process."""

    def __init__(self, private_key: str):
        self._private_key = private_key
        self._address = Account.from_key(private_key).address

    @property
    def address(self) -> str:
        return self._address

    async def get_address(self) -> str:
        return self._address

    async def sign_hash(self, hash_hex: str) -> str:
        return sign_hash_with_key(self._private_key, hash_hex)

    async def sign_typed_data(self, payload: Dict[str, Any]) -> str:
        return sign_typed_data_with_key(self._private_key, payload)


class WalletProvider(Protocol):
    """EIP-1193 style provider (``window.ethereum`` and friends)."""

    is_metamask: bool

    async def request(self, method: str, params: list) -> Any:
        """Send a JSON-RPC request to the wallet."""
        ...


class WalletSigner:
    """OrderSigner that delegates to an external wallet.

    MetaMask only understands ``eth_signTypedData_v4`` with the payload
    serialized as a JSON string; other wallets take ``eth_signTypedData``
    with the payload object. Hashes always go through ``personal_sign``.
    """

    def __init__(self, provider: WalletProvider, address: str):
        self._provider = provider
        self._address = to_checksum_address(address)

    async def get_address(self) -> str:
        return self._address

    async def _request(self, method: str, params: list) -> str:
        try:
            signature = await self._provider.request(method, params)
        except Exception as exc:
            logger.warning("wallet.sign_failed", method=method, error=str(exc))
            raise SigningFailure(f"{method} failed: {exc}") from exc
        if not isinstance(signature, str):
            raise SigningFailure(f"{method} returned {type(signature).__name__}, expected hex string")
        return signature

    async def sign_hash(self, hash_hex: str) -> str:
        _hash_bytes(hash_hex)
        return await self._request("personal_sign", [hash_hex, self._address])

    async def sign_typed_data(self, payload: Dict[str, Any]) -> str:
        if getattr(self._provider, "is_metamask", False):
            return await self._request(
                "eth_signTypedData_v4", [self._address, json.dumps(payload)]
            )
        return await self._request("eth_signTypedData", [self._address, payload])


async def sign_order(
    order: MakerOrder,
    signer: OrderSigner,
    scheme: SignatureScheme = SignatureScheme.PERSONAL_SIGN,
    chain_id: int = SX_MAINNET_CHAIN_ID,
    verifying_contract: str = EIP712_FILL_HASHER_MAINNET,
    version: str = DEFAULT_EIP712_VERSION,
) -> SignedMakerOrder:
    """Sign a maker order with the configured strategy.

    Args:
        order: Unsigned wire order
        signer: Signer for the order's maker
        scheme: PERSONAL_SIGN signs the packed order hash, TYPED_DATA signs
            the order wrapped in an EIP-712 ``Order`` payload
        chain_id: Chain ID (TYPED_DATA only)
        verifying_contract: EIP-712 verifying contract (TYPED_DATA only)
        version: Domain version (TYPED_DATA only)

    Returns:
        The order with its signature attached
    """
    if scheme is SignatureScheme.TYPED_DATA:
        payload = order_payload(to_canonical_order(order), chain_id, verifying_contract, version)
        signature = await signer.sign_typed_data(payload)
    else:
        signature = await signer.sign_hash(compute_order_hash(order))
    return sign_wire_order(order, signature)


def recover_hash_signer(hash_hex: str, signature: str) -> str:
    """Recover the address that personal-signed a 32-byte hash."""
    signable = encode_defunct(primitive=_hash_bytes(hash_hex))
    return Account.recover_message(signable, signature=_signature_bytes(signature))


def recover_typed_data_signer(payload: Dict[str, Any], signature: str) -> str:
    """Recover the address that signed an EIP-712 payload."""
    signable = encode_typed_data(full_message=payload)
    return Account.recover_message(signable, signature=_signature_bytes(signature))


def verify_typed_data_signature(
    payload: Dict[str, Any],
    signature: str,
    expected_signer: str,
) -> bool:
    """Verify an EIP-712 signature locally (EOA signatures only).

    Args:
        payload: Typed data that was signed
        signature: Signature hex string
        expected_signer: Expected signer address

    Returns:
        True if signature is valid and from expected signer
    """
    try:
        recovered = recover_typed_data_signer(payload, signature)
        return recovered.lower() == expected_signer.lower()
    except Exception:
        return False


def verify_order_signature(
    order: SignedMakerOrder,
    scheme: SignatureScheme = SignatureScheme.PERSONAL_SIGN,
    chain_id: int = SX_MAINNET_CHAIN_ID,
    verifying_contract: str = EIP712_FILL_HASHER_MAINNET,
    version: str = DEFAULT_EIP712_VERSION,
) -> bool:
    """Check that a signed order was signed by its maker."""
    try:
        if scheme is SignatureScheme.TYPED_DATA:
            payload = order_payload(
                to_canonical_order(order), chain_id, verifying_contract, version
            )
            recovered = recover_typed_data_signer(payload, order.signature)
        else:
            recovered = recover_hash_signer(compute_order_hash(order), order.signature)
    except Exception:
        return False
    return recovered.lower() == order.maker.lower()
