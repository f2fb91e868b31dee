"""Shared fixtures for the SportX SDK tests."""

import time

import pytest
from eth_account import Account

from sportx_sdk.signing import BaseTokenMakerOrder, LegacyMakerOrder

# Test wallet (DO NOT use in production)
TEST_PRIVATE_KEY = "0x" + "ab" * 32  # Deterministic test key
TEST_ADDRESS = Account.from_key(TEST_PRIVATE_KEY).address

OTHER_PRIVATE_KEY = "0x" + "cd" * 32
OTHER_ADDRESS = Account.from_key(OTHER_PRIVATE_KEY).address

# TEST_ADDRESS with every letter case flipped: right shape, wrong checksum
BAD_CHECKSUM_ADDRESS = "0x" + TEST_ADDRESS[2:].swapcase()

MARKET_HASH = "0x" + "12" * 32
BASE_TOKEN = "0x" + "11" * 20
EXECUTOR = "0x" + "22" * 20
RELAYER = "0x" + "33" * 20
VERIFYING_CONTRACT = "0x" + "44" * 20

FIXED_SALT = "123456789012345678901234567890"


def future_expiry(seconds: int = 3600) -> int:
    return int(time.time()) + seconds


@pytest.fixture
def base_order() -> BaseTokenMakerOrder:
    return BaseTokenMakerOrder(
        market_hash=MARKET_HASH,
        base_token=BASE_TOKEN,
        maker=TEST_ADDRESS,
        total_bet_size="1000000000000000000",
        percentage_odds="50000000000000000000",
        expiry=2209006800,
        executor=EXECUTOR,
        salt=FIXED_SALT,
        is_maker_betting_outcome_one=True,
    )


@pytest.fixture
def legacy_order() -> LegacyMakerOrder:
    return LegacyMakerOrder(
        market_hash=MARKET_HASH,
        maker=TEST_ADDRESS,
        total_bet_size="1000000000000000000",
        percentage_odds="50000000000000000000",
        expiry=2209006800,
        relayer=RELAYER,
        relayer_maker_fee="0",
        relayer_taker_fee="0",
        executor=EXECUTOR,
        salt=FIXED_SALT,
        is_maker_betting_outcome_one=False,
    )
