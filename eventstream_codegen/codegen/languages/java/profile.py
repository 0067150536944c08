"""
Java backend profile.

Models are classes with boxed fields converted through Gson's
JsonObject tree. Collections are transformed with loops.
"""

from typing import Tuple

from ...core.ir import Check, ForEach, ForEachEntry, Line, Ref, Renderer, Stmt
from ...core.naming import NamingCase
from ...core.profile import BackendProfile, ClientProfile
from ...core.shapes import ShapeKind
from .naming import java_local_reserved

_PRIMITIVE = "new JsonPrimitive($value)"


class JavaRenderer(Renderer):
    """Brace-delimited rendering with local type inference in loops."""

    def for_each_header(self, node: ForEach) -> str:
        return f"for (var {node.item} : {self.expr(node.source)})"

    def for_each_entry_header(self, node: ForEachEntry) -> str:
        return f"for (var {node.key}Entry : {self.expr(node.source)})"

    def entry_prelude(self, node: ForEachEntry) -> Tuple[Stmt, ...]:
        return (
            Line(Ref(f"var {node.key} = {node.key}Entry.getKey()")),
            Line(Ref(f"var {node.value} = {node.key}Entry.getValue()")),
        )

    def fail(self, node: Check) -> Stmt:
        return Line(Ref(f"throw new IllegalArgumentException({self.string_literal(node.message)})"))


def create_java_profile(indent_size: int = 4) -> BackendProfile:
    """Profile for generated Java models."""
    return BackendProfile(
        name="java",
        renderer=JavaRenderer(indent_size),
        type_names={
            ShapeKind.BOOLEAN: "Boolean",
            ShapeKind.BYTE: "Byte",
            ShapeKind.SHORT: "Short",
            ShapeKind.INTEGER: "Integer",
            ShapeKind.LONG: "Long",
            ShapeKind.BIG_INTEGER: "BigInteger",
            ShapeKind.FLOAT: "Float",
            ShapeKind.DOUBLE: "Double",
            ShapeKind.STRING: "String",
            ShapeKind.TIMESTAMP: "Instant",
            ShapeKind.BLOB: "byte[]",
            ShapeKind.DOCUMENT: "JsonElement",
        },
        list_type="List<$element>",
        set_type="Set<$element>",
        map_type="Map<$key, $value>",
        box={
            ShapeKind.BOOLEAN: _PRIMITIVE,
            ShapeKind.BYTE: _PRIMITIVE,
            ShapeKind.SHORT: _PRIMITIVE,
            ShapeKind.INTEGER: _PRIMITIVE,
            ShapeKind.LONG: _PRIMITIVE,
            ShapeKind.BIG_INTEGER: _PRIMITIVE,
            ShapeKind.FLOAT: _PRIMITIVE,
            ShapeKind.DOUBLE: _PRIMITIVE,
            ShapeKind.STRING: _PRIMITIVE,
            ShapeKind.ENUM: "new JsonPrimitive($value.getValue())",
            ShapeKind.TIMESTAMP: _PRIMITIVE,
            ShapeKind.BLOB: _PRIMITIVE,
        },
        unbox={
            ShapeKind.BOOLEAN: "$value.getAsBoolean()",
            ShapeKind.BYTE: "$value.getAsByte()",
            ShapeKind.SHORT: "$value.getAsShort()",
            ShapeKind.INTEGER: "$value.getAsInt()",
            ShapeKind.LONG: "$value.getAsLong()",
            ShapeKind.BIG_INTEGER: "$value.getAsBigInteger()",
            ShapeKind.FLOAT: "$value.getAsFloat()",
            ShapeKind.DOUBLE: "$value.getAsDouble()",
            ShapeKind.STRING: "$value.getAsString()",
            ShapeKind.ENUM: "$type.fromValue($value.getAsString())",
            ShapeKind.TIMESTAMP: "$value.getAsDouble()",
            ShapeKind.BLOB: "$value.getAsString()",
        },
        timestamp_encode="$value.toEpochMilli() / 1000.0",
        timestamp_decode="Instant.ofEpochMilli(Math.round($value * 1000))",
        blob_encode="Base64.getEncoder().encodeToString($value)",
        blob_decode="Base64.getDecoder().decode($value)",
        blob_nonempty="$value.length > 0",
        blob_wire_nonempty="!$value.isEmpty()",
        empty_text='""',
        empty_blob="new byte[0]",
        struct_to_wire="$value.toJson()",
        struct_from_wire="$type.fromJson($value.getAsJsonObject())",
        wire_has="$object.has($key) && !$object.get($key).isJsonNull()",
        wire_get="$object.get($key)",
        wire_put="$object.add($key, $value)",
        is_present="$value != null",
        inline_collections=False,
        wire_list_source="$value.getAsJsonArray()",
        wire_map_source="$value.getAsJsonObject().entrySet()",
        typed_map_source="$value.entrySet()",
        wire_array_type="JsonArray",
        wire_object_type="JsonObject",
        new_wire_array="new JsonArray()",
        new_wire_object="new JsonObject()",
        new_list="new ArrayList<>()",
        new_set="new HashSet<>()",
        new_map="new HashMap<>()",
        wire_append="$target.add($value)",
        wire_put_entry="$target.add($key, $value)",
        typed_append="$target.add($value)",
        typed_set_add="$target.add($value)",
        typed_put_entry="$target.put($key, $value)",
        validate_struct_call="$value.validate()",
        local_case=NamingCase.CAMEL_CASE,
        field_case=NamingCase.CAMEL_CASE,
        reserved_words=java_local_reserved(),
        client=ClientProfile(
            method_case=NamingCase.CAMEL_CASE,
            async_suffix="Async",
            callbacks_suffix="",
            future_type="CompletableFuture<$type>",
            streaming_result_type="CompletableFuture<$type>",
            handler_type="${operation}StreamHandler",
            runtime_fault="RuntimeException",
            application_fault="ServiceError",
            supports_blocking=True,
        ),
    )
