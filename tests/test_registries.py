from dataclasses import replace
from pathlib import Path

import pytest

from pdpind.abi_events import (
    get_event_topic0,
    get_events_from_abi,
    make_event_registry_from_abi,
    make_event_registry_from_events,
)
from pdpind.decoding.registries import (
    PDP_VERIFIER_EVENTS,
    WARM_STORAGE_EVENTS,
    make_default_registry,
    make_pdp_verifier_registry,
    make_warm_storage_registry,
)
from pdpind.decoding.registry import EventRegistryProvider, add_many
from pdpind.decoding.registry_builder import EventParam, event_spec_from_signature, parse_signature
from pdpind.decoding.specs import ProjectionRefs

ABI = Path(__file__).parent / "abi" / "pdp_verifier_abi.json"


def test_make_pdp_verifier_registry():
    assert len(make_pdp_verifier_registry()) == len(PDP_VERIFIER_EVENTS)


def test_make_warm_storage_registry():
    assert len(make_warm_storage_registry()) == len(WARM_STORAGE_EVENTS)


def test_make_default_registry():
    registry = make_default_registry()
    names = {spec.name for spec in registry.values()}
    assert len(registry) == 14
    assert {"PiecesAdded", "PossessionProven", "DataSetRailCreated", "RailRateUpdated"} <= names
    assert all(topic0 == topic0.lower() for topic0 in registry)


def test_make_event_registry_from_abi():
    assert ABI.is_file()
    registry = make_event_registry_from_abi(ABI)
    events = get_events_from_abi(ABI)
    assert len(registry) == 7  # ABI defines 7 events next to one function
    assert len(registry) == len(events)
    assert set(registry.keys()) == set([get_event_topic0(event) for event in events.values()])


def test_abi_and_signature_registries_agree():
    from_abi = make_event_registry_from_abi(ABI)
    from_signatures = make_pdp_verifier_registry()
    assert set(from_abi) == set(from_signatures)
    for topic0, spec in from_signatures.items():
        assert from_abi[topic0].topic_fields == spec.topic_fields
        assert from_abi[topic0].data_fields == spec.data_fields


def test_registry_provider():
    registry = make_pdp_verifier_registry()
    assert EventRegistryProvider(registry).get_registry() is registry


def test_parse_signature():
    name, params = parse_signature("ProviderApproved(address indexed provider, uint256 indexed providerId)")
    assert name == "ProviderApproved"
    assert params == [EventParam("provider", "address", True), EventParam("providerId", "uint256", True)]

    _, params = parse_signature("Foo(uint256[], bytes32 indexed)")
    assert params == [EventParam("arg0", "uint256[]", False), EventParam("arg1", "bytes32", True)]


def test_parse_signature_rejects_garbage():
    with pytest.raises(ValueError):
        parse_signature("Foo(uint256 a b c)")
    with pytest.raises(ValueError):
        parse_signature("Foo((uint256,address) pair)")


def test_projection_must_reference_declared_fields():
    with pytest.raises(ValueError):
        event_spec_from_signature("Foo(uint256 a)", {"b": ProjectionRefs.DataRef(name="b")})
    spec = event_spec_from_signature(
        "Foo(uint256 a)", {"a": ProjectionRefs.DataRef(name="a"), "src": ProjectionRefs.Constant(value="x")}
    )
    assert set(spec.projection) == {"a", "src"}


def test_make_event_registry_from_events_lowercases_topic0():
    events = get_events_from_abi(ABI)
    registry = make_event_registry_from_events(events.values())
    assert len(registry) == len(events)

    spec = event_spec_from_signature("RailRateUpdated(uint256 indexed railId, uint256 newRate)")
    shouting = replace(spec, topic0="0x" + spec.topic0[2:].upper())
    add_many(registry, [shouting])
    assert registry[spec.topic0] is shouting
    assert shouting.topic0 not in registry
