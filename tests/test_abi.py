from eth_utils import to_checksum_address

from pdpind.constants import ADD_SERVICE_PROVIDER_SELECTOR, ZERO_ADDRESS
from pdpind.decoding.abi import (
    AbiType,
    AbiValues,
    decode_add_service_provider,
    decode_bytes_string,
    decode_string_address_bool_bytes,
    decode_value,
    read_uint256_array_at,
)

from payloads import PAYER, PROVIDER, abi_encode, word


def test_decode_string_address_bool_bytes() -> None:
    data = abi_encode(("string", "label=cold"), ("address", PAYER), ("bool", True), ("bytes", b"\x01" * 65))
    out = decode_string_address_bool_bytes(data)
    assert out.string_value == "label=cold"
    assert out.address_value == to_checksum_address(PAYER)
    assert out.bool_value is True
    assert out.bytes_value == b"\x01" * 65


def test_decode_string_address_bool_bytes_short_payload_gives_defaults() -> None:
    out = decode_string_address_bool_bytes(bytes(3 * 32))
    assert out.string_value == ""
    assert out.address_value == ZERO_ADDRESS
    assert out.bool_value is False
    assert out.bytes_value == b""


def test_bad_offset_only_zeroes_that_field() -> None:
    data = bytearray(abi_encode(("string", "meta"), ("address", PAYER), ("bool", True), ("bytes", b"sig")))
    data[3 * 32 : 4 * 32] = word(10_000)  # bytes offset past the end
    out = decode_string_address_bool_bytes(bytes(data))
    assert out.string_value == "meta"
    assert out.bool_value is True
    assert out.bytes_value == b""


def test_decode_bytes_string() -> None:
    out = decode_bytes_string(abi_encode(("bytes", b"\xde\xad"), ("string", "piece-meta")))
    assert out.bytes_value == b"\xde\xad"
    assert out.string_value == "piece-meta"


def test_decode_bytes_string_empty_and_short() -> None:
    assert decode_bytes_string(b"").bytes_value == b""
    assert decode_bytes_string(bytes(63)).string_value == ""


def test_invalid_utf8_does_not_raise() -> None:
    out = decode_bytes_string(abi_encode(("bytes", b""), ("bytes", b"\xff\xfeok")))
    assert out.string_value.endswith("ok")


def test_huge_length_word_is_ignored() -> None:
    data = bytearray(abi_encode(("bytes", b"abc"), ("string", "x")))
    data[64:96] = word(2**256 - 1)  # length of the bytes tail
    assert decode_bytes_string(bytes(data)).bytes_value == b""


def test_decode_add_service_provider() -> None:
    call = ADD_SERVICE_PROVIDER_SELECTOR + abi_encode(
        ("address", PROVIDER), ("string", "https://pdp.example"), ("string", "https://retrieve.example")
    )
    params = decode_add_service_provider(call)
    assert params.provider == to_checksum_address(PROVIDER)
    assert params.pdp_url == "https://pdp.example"
    assert params.piece_retrieval_url == "https://retrieve.example"


def test_decode_add_service_provider_too_short() -> None:
    params = decode_add_service_provider(ADD_SERVICE_PROVIDER_SELECTOR + bytes(95))
    assert params.provider == ZERO_ADDRESS
    assert params.pdp_url == ""


def test_decode_value_tags() -> None:
    data = abi_encode(("uint", 7), ("address", PAYER), ("bool", False), ("string", "s"))
    assert decode_value(data, 0, "uint64") == AbiValues.Uint256(value=7)
    assert decode_value(data, 1, "address").type is AbiType.ADDRESS
    assert decode_value(data, 2, "bool").value is False
    assert decode_value(data, 3, "string").value == "s"
    assert decode_value(data, 9, "bytes32") == AbiValues.Bytes()


def test_read_uint256_array() -> None:
    data = abi_encode(("uint", 1), ("uint[]", [5, 6, 7]))
    assert read_uint256_array_at(data, 32) == [5, 6, 7]
    assert read_uint256_array_at(data[:-32], 32) == []
