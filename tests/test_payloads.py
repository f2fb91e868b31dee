"""Tests for EIP-712 payload builders."""

import pytest
from eth_account.messages import encode_typed_data
from eth_utils import to_checksum_address

from sportx_sdk.errors import SchemaError
from sportx_sdk.signing import (
    CancelAllOrders,
    CancelDetails,
    CancelEventOrders,
    CancelOrderHashes,
    FillDetails,
    FillDetailsMetadata,
    ORDER_EIP712_TYPES,
    OrderSchema,
    Permit,
    ZERO_ADDRESS,
    cancel_all_orders_payload,
    cancel_event_orders_payload,
    cancel_order_hashes_payload,
    cancel_orders_payload,
    create_fill_domain,
    encode_approve_call,
    fill_order_payload,
    fill_order_payload_with_beneficiary,
    left_pad_32,
    meta_transaction_payload,
    order_payload,
    permit_payload,
    salted_fill_order_payload,
    to_canonical_order,
)

from .conftest import BAD_CHECKSUM_ADDRESS, OTHER_ADDRESS, TEST_ADDRESS, VERIFYING_CONTRACT

CHAIN_ID = 416
SALT = "0x" + "5a" * 32
MAKER_SIG = "0x" + "11" * 65


def _fill_details(order, beneficiary=ZERO_ADDRESS) -> FillDetails:
    return FillDetails(
        metadata=FillDetailsMetadata(action="N/A", market="Team A vs Team B"),
        orders=[to_canonical_order(order)],
        maker_sigs=[MAKER_SIG],
        taker_amounts=[1000],
        fill_salt=42,
        beneficiary=beneficiary,
    )


def _domain_type_names(payload):
    return [field["name"] for field in payload["types"]["EIP712Domain"]]


def _encodes(payload) -> bool:
    """The payload is accepted by a reference EIP-712 encoder."""
    return encode_typed_data(full_message=payload).body is not None


class TestFillDomain:
    """Tests for the chainId-bound fill domain."""

    def test_fields(self):
        """Test domain values and canonical key order."""
        domain = create_fill_domain(CHAIN_ID, VERIFYING_CONTRACT)

        assert list(domain) == ["name", "version", "chainId", "verifyingContract"]
        assert domain["name"] == "SportX"
        assert domain["version"] == "4.0"
        assert domain["chainId"] == "416"
        assert domain["verifyingContract"] == to_checksum_address(VERIFYING_CONTRACT)

    def test_invalid_contract(self):
        """Test that an invalid verifying contract is rejected."""
        with pytest.raises(SchemaError):
            create_fill_domain(CHAIN_ID, "0x1234")

    def test_bad_checksum_contract(self):
        """Test that a mixed-case contract with a wrong checksum is rejected."""
        with pytest.raises(SchemaError):
            create_fill_domain(CHAIN_ID, BAD_CHECKSUM_ADDRESS)


class TestFillPayloads:
    """Tests for the three fill payload variants."""

    def test_fill_without_beneficiary(self, base_order):
        """Test the original FillObject shape."""
        payload = fill_order_payload(_fill_details(base_order), CHAIN_ID, VERIFYING_CONTRACT)

        assert payload["primaryType"] == "Details"
        assert payload["domain"]["version"] == "1.0"
        assert "beneficiary" not in payload["message"]["fills"]
        assert [f["name"] for f in payload["types"]["FillObject"]] == [
            "orders",
            "makerSigs",
            "takerAmounts",
            "fillSalt",
        ]
        assert payload["types"]["Order"] == ORDER_EIP712_TYPES[OrderSchema.BASE_TOKEN]
        assert _encodes(payload)

    def test_message_numbers_are_strings(self, base_order):
        """Test that every numeric message field is a decimal string."""
        payload = fill_order_payload(_fill_details(base_order), CHAIN_ID, VERIFYING_CONTRACT)
        fills = payload["message"]["fills"]

        assert fills["takerAmounts"] == ["1000"]
        assert fills["fillSalt"] == "42"
        order = fills["orders"][0]
        assert order["totalBetSize"] == base_order.total_bet_size
        assert order["expiry"] == str(base_order.expiry)
        assert order["salt"] == base_order.salt

    def test_metadata_in_message(self, base_order):
        """Test that metadata fields are spread into Details."""
        payload = fill_order_payload(_fill_details(base_order), CHAIN_ID, VERIFYING_CONTRACT)
        message = payload["message"]

        assert message["market"] == "Team A vs Team B"
        assert message["betting"] == "N/A"
        assert [f["name"] for f in payload["types"]["Details"]][-1] == "fills"

    def test_fill_with_beneficiary(self, base_order):
        """Test the beneficiary FillObject shape."""
        payload = fill_order_payload_with_beneficiary(
            _fill_details(base_order, beneficiary=OTHER_ADDRESS.lower()),
            CHAIN_ID,
            VERIFYING_CONTRACT,
        )

        assert payload["domain"]["version"] == "4.0"
        assert payload["types"]["FillObject"][-1] == {"name": "beneficiary", "type": "address"}
        assert payload["message"]["fills"]["beneficiary"] == OTHER_ADDRESS
        assert _encodes(payload)

    def test_fill_beneficiary_defaults_to_zero(self, legacy_order):
        """Test the zero address default beneficiary."""
        payload = fill_order_payload_with_beneficiary(
            _fill_details(legacy_order), CHAIN_ID, VERIFYING_CONTRACT, "3.0"
        )

        assert payload["message"]["fills"]["beneficiary"] == ZERO_ADDRESS
        assert payload["types"]["Order"] == ORDER_EIP712_TYPES[OrderSchema.LEGACY_RELAYER_FEE]
        assert _encodes(payload)

    def test_salted_domain(self, base_order):
        """Test that the salted variant carries the chain id as salt."""
        payload = salted_fill_order_payload(
            _fill_details(base_order), CHAIN_ID, VERIFYING_CONTRACT
        )

        assert _domain_type_names(payload) == ["name", "version", "verifyingContract", "salt"]
        assert "chainId" not in payload["domain"]
        assert payload["domain"]["salt"] == "0x" + "00" * 30 + "01a0"
        assert _encodes(payload)

    def test_salted_domain_differs_from_chain_domain(self, base_order):
        """Test that the two domain styles hash differently."""
        details = _fill_details(base_order)
        chain_bound = fill_order_payload_with_beneficiary(details, CHAIN_ID, VERIFYING_CONTRACT)
        salted = salted_fill_order_payload(details, CHAIN_ID, VERIFYING_CONTRACT)

        assert (
            encode_typed_data(full_message=chain_bound).header
            != encode_typed_data(full_message=salted).header
        )

    def test_mixed_schemas_rejected(self, base_order, legacy_order):
        """Test that one fill cannot mix order schemas."""
        details = _fill_details(base_order)
        details.orders.append(to_canonical_order(legacy_order))
        details.maker_sigs.append(MAKER_SIG)
        details.taker_amounts.append(1)

        with pytest.raises(SchemaError):
            fill_order_payload(details, CHAIN_ID, VERIFYING_CONTRACT)

    def test_length_mismatch_rejected(self, base_order):
        """Test that amounts must pair with orders."""
        details = _fill_details(base_order)
        details.taker_amounts.append(5)

        with pytest.raises(SchemaError):
            fill_order_payload(details, CHAIN_ID, VERIFYING_CONTRACT)


class TestOrderPayload:
    """Tests for single-order typed data."""

    def test_order_payload(self, legacy_order):
        """Test primary type and message of an order payload."""
        canonical = to_canonical_order(legacy_order)
        payload = order_payload(canonical, CHAIN_ID, VERIFYING_CONTRACT)

        assert payload["primaryType"] == "Order"
        assert set(payload["types"]) == {"EIP712Domain", "Order"}
        assert payload["message"]["relayerMakerFee"] == "0"
        assert payload["message"]["isMakerBettingOutcomeOne"] is False
        assert _encodes(payload)


class TestCancelPayloads:
    """Tests for the cancellation payloads."""

    def test_early_cancel(self):
        """Test the {message, orders} shape."""
        payload = cancel_orders_payload(
            CancelDetails(message="N/A", orders=["0x" + "ab" * 32]), CHAIN_ID
        )

        assert payload["domain"] == {
            "name": "CancelOrderSportX",
            "version": "1.0",
            "chainId": "416",
        }
        assert payload["message"]["orders"] == ["0x" + "ab" * 32]
        assert _encodes(payload)

    def test_cancel_order_hashes(self):
        """Test the salted cancel shape and its version-less domain."""
        cancel = CancelOrderHashes(
            order_hashes=["0x" + "ab" * 32], salt=SALT, timestamp=1_700_000_000
        )
        payload = cancel_order_hashes_payload(cancel, CHAIN_ID)

        assert payload["domain"] == {"name": "CancelOrderV2SportX", "chainId": "416"}
        assert _domain_type_names(payload) == ["name", "chainId"]
        assert payload["message"] == {
            "orderHashes": ["0x" + "ab" * 32],
            "salt": SALT,
            "timestamp": "1700000000",
        }
        assert _encodes(payload)

    def test_cancel_all(self):
        """Test the cancel-all shape."""
        payload = cancel_all_orders_payload(
            CancelAllOrders(salt=SALT, timestamp=1_700_000_000), CHAIN_ID
        )

        assert payload["domain"]["name"] == "CancelAllOrdersSportX"
        assert payload["domain"]["version"] == "1.0"
        assert payload["message"] == {"salt": SALT, "timestamp": "1700000000"}
        assert _encodes(payload)

    def test_cancel_event(self):
        """Test the cancel-by-event shape."""
        payload = cancel_event_orders_payload(
            CancelEventOrders(sportx_event_id="L7178624", salt=SALT, timestamp=1_700_000_000),
            CHAIN_ID,
        )

        assert payload["domain"]["name"] == "CancelOrderEventsSportX"
        assert payload["message"]["sportXEventId"] == "L7178624"
        assert _encodes(payload)

    def test_salt_changes_signable_hash(self):
        """Test that two cancels differing only in salt hash differently."""
        first = cancel_all_orders_payload(CancelAllOrders(salt=SALT, timestamp=1), CHAIN_ID)
        second = cancel_all_orders_payload(
            CancelAllOrders(salt="0x" + "5b" * 32, timestamp=1), CHAIN_ID
        )

        assert (
            encode_typed_data(full_message=first).body
            != encode_typed_data(full_message=second).body
        )


class TestApprovalPayloads:
    """Tests for approve calls, meta-transactions and permits."""

    def test_encode_approve_call(self):
        """Test selector and argument layout of approve call data."""
        call = encode_approve_call(OTHER_ADDRESS, 2**256 - 1)

        assert call.startswith("0x095ea7b3")
        assert len(call) == 2 + 8 + 64 * 2
        assert call[10:74] == "00" * 12 + OTHER_ADDRESS[2:].lower()
        assert call[74:] == "f" * 64

    def test_meta_transaction_payload(self):
        """Test the meta-transaction domain and message."""
        call = encode_approve_call(OTHER_ADDRESS, 10)
        payload = meta_transaction_payload(
            call, 3, TEST_ADDRESS, CHAIN_ID, VERIFYING_CONTRACT, "Wrapped Ether"
        )

        assert payload["primaryType"] == "MetaTransaction"
        assert payload["domain"]["name"] == "Wrapped Ether"
        assert payload["domain"]["version"] == "1"
        assert payload["domain"]["salt"] == left_pad_32(CHAIN_ID)
        assert payload["message"] == {
            "nonce": "3",
            "from": TEST_ADDRESS,
            "functionSignature": call,
        }
        assert _encodes(payload)

    def test_permit_payload(self):
        """Test the permit shape."""
        permit = Permit(
            holder=TEST_ADDRESS, spender=OTHER_ADDRESS, nonce=0, expiry=0, allowed=True
        )
        payload = permit_payload(permit, CHAIN_ID, VERIFYING_CONTRACT, "Dai Stablecoin")

        assert payload["primaryType"] == "Permit"
        assert payload["domain"]["chainId"] == "416"
        assert payload["message"]["allowed"] is True
        assert payload["message"]["expiry"] == "0"
        assert _encodes(payload)
