"""Constants and small helpers shared by the signing modules."""

import secrets
import time

# SX Network chain IDs
SX_MAINNET_CHAIN_ID = 416
SX_TORONTO_CHAIN_ID = 647

# EIP-712 fill hasher on SX mainnet (verifying contract for fill payloads)
EIP712_FILL_HASHER_MAINNET = "0x3E96B0a25d51e3Cc89C557f152797c33B839968f"

# Current fill payload domain version
DEFAULT_EIP712_VERSION = "4.0"

# Zero address
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# Odds are stored on chain as probability * 10^20
PERCENTAGE_PRECISION_EXPONENT = 20
FRACTION_DENOMINATOR = 10**PERCENTAGE_PRECISION_EXPONENT

# Placeholder for fill metadata fields the caller leaves out
DEFAULT_METADATA_VALUE = "N/A"


def generate_salt() -> int:
    """Generate a random 256-bit integer salt from a CSPRNG.

    Returns:
        Salt as a Python int (0 <= salt < 2**256)
    """
    return int.from_bytes(secrets.token_bytes(32), "big")


def generate_salt_hex() -> str:
    """Generate a random bytes32 salt as a 0x-prefixed hex string."""
    return "0x" + secrets.token_bytes(32).hex()


def current_timestamp() -> int:
    """Current unix time in whole seconds."""
    return int(time.time())


def left_pad_32(value: int) -> str:
    """Left-zero-pad an integer to a 32-byte hex string.

    Args:
        value: Non-negative integer (e.g. a chain ID)

    Returns:
        0x-prefixed, 64 hex character string
    """
    if value < 0:
        raise ValueError(f"Cannot pad negative value: {value}")
    return "0x" + value.to_bytes(32, "big").hex()
