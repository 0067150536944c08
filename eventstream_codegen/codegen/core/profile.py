"""
Backend profiles.

A BackendProfile is the per-target-language table that drives the one
generic TypeMapper and ShapeCodeEmitter: type spellings, numeric casts,
container spellings, blob and timestamp encoding calls, and wire access.

Patterns use string.Template placeholders:
    $value   the expression being converted or checked
    $type    the target type name of the shape
    $target  a temporary being filled by a staged conversion
    $object, $key   wire object and (quoted) field name
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Mapping, Optional, Union

from .ir import Renderer
from .naming import NamingCase
from .shapes import ShapeKind


@dataclass(frozen=True)
class Staged:
    """
    A conversion that needs a temporary.

    The temporary is declared with type_name (and init, if any), then
    statement fills it from $value.
    """

    type_name: str
    statement: str
    init: Optional[str] = None


Conversion = Union[str, Staged]


@dataclass(frozen=True)
class ClientProfile:
    """Spellings used by the client stub composer."""

    method_case: NamingCase = NamingCase.CAMEL_CASE
    async_suffix: str = "Async"
    callbacks_suffix: str = ""
    future_type: str = "$type"
    streaming_result_type: str = "$type"
    handler_type: str = "${operation}StreamHandler"
    runtime_fault: str = "RuntimeError"
    application_fault: str = "ServiceError"
    supports_blocking: bool = True
    callback_names: tuple = ("onStreamEvent", "onStreamError", "onStreamClosed")


@dataclass(frozen=True)
class BackendProfile:
    """Everything the generic engine needs to know about one target."""

    name: str
    renderer: Renderer

    # Type mapping
    type_names: Mapping[ShapeKind, str]
    list_type: str
    map_type: str
    set_type: Optional[str] = None
    named_type: str = "$name"
    enum_type: Optional[str] = None
    optional_type: Optional[str] = None
    optional_for_required: bool = False
    unsupported: Mapping[ShapeKind, str] = field(default_factory=dict)

    # Wire values: native primitive <-> wire value
    box: Mapping[ShapeKind, str] = field(default_factory=dict)
    unbox: Mapping[ShapeKind, str] = field(default_factory=dict)

    # Canonical encodings
    timestamp_encode: str = "$value"
    timestamp_decode: str = "$value"
    blob_encode: str = "$value"
    blob_decode: str = "$value"
    blob_nonempty: str = "$value.length > 0"
    blob_wire_nonempty: str = "$value"
    empty_text: str = '""'
    empty_blob: str = "[]"

    # Named types delegate to their own entry points
    struct_to_wire: Conversion = "$value.toPayload()"
    struct_from_wire: Conversion = "$type.fromPayload($value)"

    # Wire object field access
    wire_has: str = "$object.has($key)"
    wire_get: str = "$object.get($key)"
    wire_put: str = "$object.put($key, $value)"

    # Typed member access
    is_present: str = "$value != null"
    optional_value: str = "$value"
    optional_wrap: str = "$value"

    # Containers
    inline_collections: bool = True
    wire_list_source: str = "$value"
    wire_map_source: str = "$value"
    typed_map_source: str = "$value"
    wire_array_type: str = ""
    wire_object_type: str = ""
    new_wire_array: Optional[str] = None
    new_wire_object: Optional[str] = None
    new_list: Optional[str] = None
    new_set: Optional[str] = None
    new_map: Optional[str] = None
    wire_append: str = "$target.push($value)"
    wire_put_entry: str = "$target[$key] = $value"
    typed_append: str = "$target.push($value)"
    typed_set_add: str = "$target.add($value)"
    typed_put_entry: str = "$target[$key] = $value"

    # Validation
    type_checks: Mapping[ShapeKind, str] = field(default_factory=dict)
    validate_struct_call: Optional[str] = None
    validate_struct_check: Optional[str] = None
    count_present_term: str = "($value ? 1 : 0)"
    count_present_join: str = " + "
    exactly_one: str = "$terms == 1"

    # Naming of locals and fields
    local_case: NamingCase = NamingCase.CAMEL_CASE
    field_case: NamingCase = NamingCase.CAMEL_CASE
    reserved_words: FrozenSet[str] = frozenset()

    client: ClientProfile = field(default_factory=ClientProfile)

    def is_supported(self, kind: ShapeKind) -> bool:
        return kind not in self.unsupported

    def literal(self, value: str) -> str:
        """Quote a string for the target language."""
        return self.renderer.string_literal(value)
