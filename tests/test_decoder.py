import pytest

from pdpind.core.models import Meta
from pdpind.decoding.decoder import decode_event
from pdpind.decoding.registry_builder import event_spec_from_signature
from pdpind.decoding.specs import DataFieldSpec, EventRegistry, EventSpec, ProjectionRefs, TopicFieldSpec

from payloads import PROVIDER, abi_encode, topic, word

META = Meta(1, 1000, "0xtx", 0, "0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045")


@pytest.fixture
def sample_registry() -> EventRegistry:
    spec = EventSpec(
        topic0="0x123",
        name="TestEvent",
        topic_fields=[TopicFieldSpec("user", 1, "address")],
        data_fields=[DataFieldSpec("amount", 0, "uint256")],
        projection={
            "user": ProjectionRefs.TopicRef(name="user"),
            "amount": ProjectionRefs.DataRef(name="amount"),
        },
    )
    registry = EventRegistry()
    registry[spec.topic0] = spec
    return registry


def test_decode_event_success(sample_registry: EventRegistry) -> None:
    topics = ["0x123", "0x" + "0" * 24 + "1234567890123456789012345678901234567890"]
    data = bytes.fromhex("0000000000000000000000000000000000000000000000000000000000000064")  # 100

    parsed = decode_event(topics=topics, data=data, meta=META, registry=sample_registry)

    assert parsed is not None
    assert parsed.name == "TestEvent"
    assert parsed.contract == META.address
    assert parsed.values["user"] == "0x1234567890123456789012345678901234567890"
    assert parsed.values["amount"] == 100


def test_decode_event_unknown_topic(sample_registry: EventRegistry) -> None:
    parsed = decode_event(topics=["0x999"], data=b"", meta=META, registry=sample_registry)
    assert parsed is None


def test_decode_event_missing_topic_or_short_head(sample_registry: EventRegistry) -> None:
    assert decode_event(topics=["0x123"], data=word(1), meta=META, registry=sample_registry) is None
    assert decode_event(topics=["0x123", topic(PROVIDER)], data=bytes(31), meta=META, registry=sample_registry) is None


def test_decode_dynamic_fields() -> None:
    spec = event_spec_from_signature(
        "PiecesAdded(uint256 indexed setId, uint256[] pieceIds, uint256[] leafCounts, bytes extraData)"
    )
    data = abi_encode(("uint[]", [0, 1]), ("uint[]", [64, 32]), ("bytes", b"\xca\xfe"))

    parsed = decode_event(topics=[spec.topic0, topic(7)], data=data, meta=META, registry={spec.topic0: spec})

    assert parsed is not None
    assert parsed.values == {"setId": 7, "pieceIds": [0, 1], "leafCounts": [64, 32], "extraData": b"\xca\xfe"}


def test_malformed_dynamic_field_keeps_event() -> None:
    spec = event_spec_from_signature("PiecesRemoved(uint256 indexed setId, uint256[] pieceIds)")
    parsed = decode_event(topics=[spec.topic0, topic(3)], data=word(4096), meta=META, registry={spec.topic0: spec})
    assert parsed is not None
    assert parsed.values["pieceIds"] == []


def test_signed_data_field() -> None:
    spec = event_spec_from_signature("Moved(int24 tick)")
    parsed = decode_event(topics=[spec.topic0], data=b"\xff" * 32, meta=META, registry={spec.topic0: spec})
    assert parsed is not None
    assert parsed.values["tick"] == -1


def test_invalid_signature() -> None:
    with pytest.raises(ValueError):
        event_spec_from_signature("NoParens")
