"""Tests for order codec and order/fill hashing."""

from dataclasses import replace

import pytest
from eth_utils import keccak, to_checksum_address

from sportx_sdk.errors import SchemaError
from sportx_sdk.signing import (
    BaseTokenContractOrder,
    LegacyContractOrder,
    OrderSchema,
    SignedBaseTokenMakerOrder,
    compute_fill_hash,
    compute_multi_fill_hash,
    compute_order_hash,
    order_from_dict,
    order_to_dict,
    sign_wire_order,
    signed_order_from_dict,
    to_canonical_order,
    verify_order_hash,
)

from .conftest import (
    BAD_CHECKSUM_ADDRESS,
    BASE_TOKEN,
    EXECUTOR,
    MARKET_HASH,
    OTHER_ADDRESS,
    RELAYER,
)

# Hash of the base-token fixture order with a 10 token bet
KNOWN_ORDER_HASH = "0x8b60d4a25ca262e9cd0bf46330683098fc14b964c82b8a91586542ab8229e81a"


def _u256(value) -> bytes:
    return int(value).to_bytes(32, "big")


def _addr(value: str) -> bytes:
    return bytes.fromhex(value[2:])


def _legacy_packed(order) -> bytes:
    return (
        bytes.fromhex(order.market_hash[2:])
        + _u256(order.total_bet_size)
        + _u256(order.percentage_odds)
        + _u256(order.expiry)
        + _u256(order.relayer_maker_fee)
        + _u256(order.relayer_taker_fee)
        + _u256(order.salt)
        + _addr(order.maker)
        + _addr(order.relayer)
        + _addr(order.executor)
        + (b"\x01" if order.is_maker_betting_outcome_one else b"\x00")
    )


class TestOrderCodec:
    """Tests for wire <-> canonical conversion."""

    def test_to_canonical_base_token(self, base_order):
        """Test that numeric strings become ints and addresses are checksummed."""
        canonical = to_canonical_order(base_order)

        assert isinstance(canonical, BaseTokenContractOrder)
        assert canonical.total_bet_size == 10**18
        assert canonical.percentage_odds == 5 * 10**19
        assert canonical.salt == int(base_order.salt)
        assert canonical.base_token == to_checksum_address(BASE_TOKEN)
        assert canonical.executor == to_checksum_address(EXECUTOR)
        assert canonical.market_hash == MARKET_HASH
        assert canonical.is_maker_betting_outcome_one is True

    def test_to_canonical_legacy(self, legacy_order):
        """Test legacy conversion keeps relayer fields."""
        canonical = to_canonical_order(legacy_order)

        assert isinstance(canonical, LegacyContractOrder)
        assert canonical.relayer == to_checksum_address(RELAYER)
        assert canonical.relayer_maker_fee == 0
        assert canonical.relayer_taker_fee == 0

    def test_to_canonical_rejects_bad_number(self, base_order):
        """Test that a non-integer numeric field raises SchemaError."""
        with pytest.raises(SchemaError):
            to_canonical_order(replace(base_order, total_bet_size="1.5"))

    def test_to_canonical_rejects_bad_checksum(self, base_order):
        """Test that a wrong checksum is an error, not silently corrected."""
        with pytest.raises(SchemaError, match="maker"):
            to_canonical_order(replace(base_order, maker=BAD_CHECKSUM_ADDRESS))
        with pytest.raises(SchemaError, match="maker"):
            compute_order_hash(replace(base_order, maker=BAD_CHECKSUM_ADDRESS))

    def test_order_from_dict_round_trip(self, base_order):
        """Test parsing a wire dict back into the same order."""
        parsed = order_from_dict(base_order.to_dict(), OrderSchema.BASE_TOKEN)
        assert parsed == base_order

    def test_order_from_dict_ignores_extra_keys(self, legacy_order):
        """Test that relayer listing extras such as orderHash are ignored."""
        data = {**legacy_order.to_dict(), "orderHash": "0x" + "00" * 32}
        assert order_from_dict(data, OrderSchema.LEGACY_RELAYER_FEE) == legacy_order

    def test_order_from_dict_missing_field(self, base_order):
        """Test that a missing schema field raises SchemaError."""
        data = base_order.to_dict()
        del data["baseToken"]

        with pytest.raises(SchemaError, match="baseToken"):
            order_from_dict(data, OrderSchema.BASE_TOKEN)

    def test_order_from_dict_wrong_schema(self, base_order):
        """Test that a base-token dict does not parse as a legacy order."""
        with pytest.raises(SchemaError):
            order_from_dict(base_order.to_dict(), OrderSchema.LEGACY_RELAYER_FEE)

    def test_signed_order_from_dict(self, base_order):
        """Test parsing a signed order."""
        signed = sign_wire_order(base_order, "0x" + "aa" * 65)
        parsed = signed_order_from_dict(signed.to_dict(), OrderSchema.BASE_TOKEN)

        assert isinstance(parsed, SignedBaseTokenMakerOrder)
        assert parsed.signature == "0x" + "aa" * 65
        assert parsed.to_dict()["signature"] == "0x" + "aa" * 65

    def test_signed_order_from_dict_requires_signature(self, base_order):
        """Test that an unsigned dict is rejected as a signed order."""
        with pytest.raises(SchemaError):
            signed_order_from_dict(base_order.to_dict(), OrderSchema.BASE_TOKEN)

    def test_order_to_dict_canonical(self, base_order):
        """Test rendering a canonical order as a wire dict."""
        rendered = order_to_dict(to_canonical_order(base_order))

        assert rendered["totalBetSize"] == base_order.total_bet_size
        assert rendered["salt"] == base_order.salt
        assert rendered["expiry"] == base_order.expiry
        assert rendered["baseToken"] == to_checksum_address(BASE_TOKEN)


class TestOrderHash:
    """Tests for packed-encoding order hashes."""

    def test_format(self, base_order):
        """Test that hashes are lowercase 0x-prefixed bytes32."""
        order_hash = compute_order_hash(base_order)

        assert order_hash.startswith("0x")
        assert len(order_hash) == 66
        assert order_hash == order_hash.lower()

    def test_base_token_layout(self, base_order):
        """Test the base-token field order and widths."""
        expected = keccak(
            bytes.fromhex(base_order.market_hash[2:])
            + _addr(base_order.base_token)
            + _u256(base_order.total_bet_size)
            + _u256(base_order.percentage_odds)
            + _u256(base_order.expiry)
            + _u256(base_order.salt)
            + _addr(base_order.maker)
            + _addr(base_order.executor)
            + b"\x01"
        )
        assert compute_order_hash(base_order) == "0x" + expected.hex()

    def test_legacy_layout(self, legacy_order):
        """Test the legacy field order and widths."""
        expected = keccak(_legacy_packed(legacy_order))
        assert compute_order_hash(legacy_order) == "0x" + expected.hex()

    def test_known_base_token_hash(self, base_order):
        """Test a fixed base-token order against a known hash."""
        order = replace(base_order, total_bet_size="10000000000000000000")

        assert compute_order_hash(order) == KNOWN_ORDER_HASH

    def test_deterministic(self, base_order):
        """Test that hashing the same order twice gives the same hash."""
        assert compute_order_hash(base_order) == compute_order_hash(base_order)

    def test_wire_and_canonical_agree(self, legacy_order):
        """Test that wire and canonical orders hash identically."""
        assert compute_order_hash(legacy_order) == compute_order_hash(
            to_canonical_order(legacy_order)
        )

    def test_address_case_does_not_matter(self, base_order):
        """Test that lowercase and checksummed addresses hash identically."""
        lowered = replace(base_order, maker=base_order.maker.lower())
        assert compute_order_hash(lowered) == compute_order_hash(base_order)

    def test_every_field_matters(self, base_order):
        """Test that changing any single field changes the hash."""
        original = compute_order_hash(base_order)
        variants = [
            replace(base_order, market_hash="0x" + "13" * 32),
            replace(base_order, base_token="0x" + "55" * 20),
            replace(base_order, total_bet_size="2"),
            replace(base_order, percentage_odds="1"),
            replace(base_order, expiry=base_order.expiry + 1),
            replace(base_order, salt="1"),
            replace(base_order, maker=OTHER_ADDRESS),
            replace(base_order, executor="0x" + "66" * 20),
            replace(base_order, is_maker_betting_outcome_one=False),
        ]
        hashes = {compute_order_hash(variant) for variant in variants}

        assert original not in hashes
        assert len(hashes) == len(variants)

    def test_bad_market_hash(self, base_order):
        """Test that a short market hash raises SchemaError."""
        with pytest.raises(SchemaError):
            compute_order_hash(replace(base_order, market_hash="0x1234"))

    def test_verify_order_hash(self, base_order):
        """Test order hash verification."""
        order_hash = compute_order_hash(base_order)

        assert verify_order_hash(order_hash, base_order) is True
        assert verify_order_hash(order_hash.upper().replace("0X", "0x"), base_order) is True
        assert verify_order_hash("0x" + "00" * 32, base_order) is False
        assert verify_order_hash(order_hash, replace(base_order, total_bet_size="x")) is False


class TestFillHash:
    """Tests for legacy fill hashes and multi-fill chaining."""

    def test_fill_hash_layout(self, legacy_order):
        """Test that the fill hash appends takerAmount and fillSalt."""
        expected = keccak(_legacy_packed(legacy_order) + _u256(500) + _u256(42))
        assert compute_fill_hash(legacy_order, 500, 42) == "0x" + expected.hex()

    def test_submitter_fee_appended(self, legacy_order):
        """Test that a submitter fee is packed after the fill salt."""
        expected = keccak(
            _legacy_packed(legacy_order) + _u256(500) + _u256(42) + _u256(7)
        )
        assert compute_fill_hash(legacy_order, 500, 42, submitter_fee=7) == "0x" + expected.hex()

    def test_absent_fee_differs_from_zero_fee(self, legacy_order):
        """Test that an omitted submitter fee is not packed as zero."""
        assert compute_fill_hash(legacy_order, 500, 42) != compute_fill_hash(
            legacy_order, 500, 42, submitter_fee=0
        )

    def test_base_token_not_supported(self, base_order):
        """Test that fill hashing rejects base-token orders."""
        with pytest.raises(SchemaError):
            compute_fill_hash(base_order, 500, 42)

    def test_multi_fill_single_order(self, legacy_order):
        """Test that one order chains to its own fill hash."""
        assert compute_multi_fill_hash([legacy_order], [500], 42) == compute_fill_hash(
            legacy_order, 500, 42
        )

    def test_multi_fill_chaining(self, legacy_order):
        """Test acc = keccak(acc || fill(i)) left to right."""
        second = replace(legacy_order, salt="99")
        first_fill = bytes.fromhex(compute_fill_hash(legacy_order, 500, 42)[2:])
        second_fill = bytes.fromhex(compute_fill_hash(second, 600, 42)[2:])
        expected = keccak(first_fill + second_fill)

        result = compute_multi_fill_hash([legacy_order, second], [500, 600], 42)

        assert result == "0x" + expected.hex()

    def test_multi_fill_order_dependent(self, legacy_order):
        """Test that reordering the orders changes the chained hash."""
        second = replace(legacy_order, salt="99")

        forward = compute_multi_fill_hash([legacy_order, second], [500, 500], 42)
        backward = compute_multi_fill_hash([second, legacy_order], [500, 500], 42)

        assert forward != backward

    def test_multi_fill_length_mismatch(self, legacy_order):
        """Test that orders and amounts must pair up."""
        with pytest.raises(SchemaError):
            compute_multi_fill_hash([legacy_order, legacy_order], [500], 42)

    def test_multi_fill_empty(self):
        """Test that an empty fill is rejected."""
        with pytest.raises(SchemaError):
            compute_multi_fill_hash([], [], 42)
