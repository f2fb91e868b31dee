"""Token metadata reads needed before signing an approval.

Meta-transaction and permit domains embed the token's on-chain name, and
their messages embed the holder's current nonce. Both are read with one
concurrent round trip per approval.
"""

from __future__ import annotations

import asyncio
from typing import Protocol

import structlog
from web3 import AsyncWeb3

from .signing.types import TokenMetadata

logger = structlog.get_logger("sportx.chain")

# ── ABI fragments ────────────────────────────────────────────────────

TOKEN_NAME_ABI = {
    "name": "name",
    "type": "function",
    "stateMutability": "view",
    "inputs": [],
    "outputs": [{"name": "", "type": "string"}],
}


def nonce_abi(function_name: str) -> dict:
    """ABI fragment for a ``<function_name>(address) -> uint256`` view.

    Meta-transaction tokens expose ``getNonce(user)``; DAI-style permit
    tokens expose ``nonces(owner)``.
    """
    return {
        "name": function_name,
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": "user", "type": "address"}],
        "outputs": [{"name": "nonce", "type": "uint256"}],
    }


class TokenMetadataReader(Protocol):
    """Source of the chain data an approval signature depends on."""

    async def read_token_metadata(self, token_address: str, owner: str) -> TokenMetadata:
        """Read the token's name and owner's nonce."""
        ...

    async def get_chain_id(self) -> int:
        """Chain ID of the connected network."""
        ...


class Web3TokenReader:
    """TokenMetadataReader over an AsyncWeb3 connection.

    Network and contract errors propagate to the caller unchanged.
    """

    def __init__(self, w3: AsyncWeb3, nonce_function: str = "getNonce") -> None:
        self._w3 = w3
        self._nonce_function = nonce_function

    async def read_token_metadata(self, token_address: str, owner: str) -> TokenMetadata:
        token = self._w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(token_address),
            abi=[TOKEN_NAME_ABI, nonce_abi(self._nonce_function)],
        )
        name, nonce = await asyncio.gather(
            token.functions.name().call(),
            token.functions[self._nonce_function](
                AsyncWeb3.to_checksum_address(owner)
            ).call(),
        )
        logger.debug(
            "chain.token_metadata",
            token=token_address,
            owner=owner,
            nonce=nonce,
        )
        return TokenMetadata(name=name, nonce=int(nonce))

    async def get_chain_id(self) -> int:
        return int(await self._w3.eth.chain_id)
