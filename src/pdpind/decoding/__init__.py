"""Event and call payload decoding.

This package provides:
- Byte primitives (equals, to_uint256, to_i32, view, to_bytes)
- Manual head/tail ABI decoders for the fixed payload shapes we index
- Event specification system (EventSpec, TopicFieldSpec, DataFieldSpec)
- Generic decoder that translates raw logs into ParsedEvent objects
- Registries for the PDP verifier and warm storage service events
"""

from pdpind.decoding.abi import (
    AbiType,
    AbiValue,
    AbiValues,
    AddServiceProviderParams,
    BytesStringResult,
    StringAddressBoolBytesResult,
    decode_add_service_provider,
    decode_bytes_string,
    decode_string_address_bool_bytes,
)
from pdpind.decoding.calls import find_add_service_provider
from pdpind.decoding.decoder import ParsedEvent, decode_event
from pdpind.decoding.registry import add_event_spec, add_many
from pdpind.decoding.registry_builder import make_registry
from pdpind.decoding.specs import (
    DataFieldSpec,
    EventRegistry,
    EventSpec,
    Projection,
    TopicFieldSpec,
)
from pdpind.decoding.utils import equals, to_bytes, to_i32, to_uint256, view

__all__ = [
    "AbiType",
    "AbiValue",
    "AbiValues",
    "AddServiceProviderParams",
    "BytesStringResult",
    "StringAddressBoolBytesResult",
    "decode_add_service_provider",
    "decode_bytes_string",
    "decode_string_address_bool_bytes",
    "find_add_service_provider",
    "ParsedEvent",
    "decode_event",
    "add_event_spec",
    "add_many",
    "make_registry",
    "DataFieldSpec",
    "EventRegistry",
    "EventSpec",
    "Projection",
    "TopicFieldSpec",
    "equals",
    "to_bytes",
    "to_i32",
    "to_uint256",
    "view",
]
