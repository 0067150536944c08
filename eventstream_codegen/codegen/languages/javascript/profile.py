"""
TypeScript backend profile.

Named types become interfaces with free normalize/deserialize/validate
functions; wire helpers live in the generated model_utils module.
"""

from ...core.ir import (
    TO_WIRE,
    Check,
    Collect,
    CollectEntries,
    Declare,
    ForEach,
    ForEachEntry,
    Line,
    Ref,
    Renderer,
    Stmt,
)
from ...core.naming import NamingCase
from ...core.profile import BackendProfile, ClientProfile
from ...core.shapes import FLOAT_KINDS, INTEGER_KINDS, ShapeKind
from .naming import typescript_local_reserved

UNSUPPORTED_MESSAGE = "Javascript codegen does not yet support {}"


class TypeScriptRenderer(Renderer):
    """Brace-delimited rendering with arrow-function collections."""

    def declare(self, node: Declare) -> str:
        if node.value is None:
            return f"let {node.name}: {node.type_name};"
        return f"let {node.name}: {node.type_name} = {self.expr(node.value)};"

    def for_each_header(self, node: ForEach) -> str:
        return f"for (const {node.item} of {self.expr(node.source)})"

    def for_each_entry_header(self, node: ForEachEntry) -> str:
        return f"for (const [{node.key}, {node.value}] of {self.expr(node.source)})"

    def fail(self, node: Check) -> Stmt:
        error = "TypeError" if node.error == "type" else "Error"
        return Line(Ref(f"throw new {error}({self.string_literal(node.message)})"))

    def collect(self, node: Collect) -> str:
        source = self.expr(node.source)
        body = self.expr(node.body)
        if body == node.item:
            return f"Array.from({source})"
        return f"Array.from({source}, ({node.item}: any) => {body})"

    def collect_entries(self, node: CollectEntries) -> str:
        source = self.expr(node.source)
        body = self.expr(node.body)
        if node.direction == TO_WIRE:
            return (
                f"Object.fromEntries(Array.from({source}, "
                f"([{node.key}, {node.value}]: [string, any]) => [{node.key}, {body}]))"
            )
        return (
            f"new Map(Object.entries({source}).map("
            f"([{node.key}, {node.value}]: [string, any]) => [{node.key}, {body}]))"
        )


def create_typescript_profile(indent_size: int = 4) -> BackendProfile:
    """Profile for generated TypeScript models."""
    type_names = {
        ShapeKind.BOOLEAN: "boolean",
        ShapeKind.STRING: "string",
        ShapeKind.TIMESTAMP: "Date",
        ShapeKind.BLOB: "model_utils.Payload",
        ShapeKind.DOCUMENT: "any",
    }
    for kind in (INTEGER_KINDS | FLOAT_KINDS) - {ShapeKind.BIG_INTEGER}:
        type_names[kind] = "number"

    type_checks = {
        ShapeKind.BOOLEAN: "typeof $value === 'boolean'",
        ShapeKind.STRING: "typeof $value === 'string'",
        ShapeKind.ENUM: "typeof $value === 'string'",
        ShapeKind.TIMESTAMP: "$value instanceof Date",
        ShapeKind.BLOB: "model_utils.isPayload($value)",
        ShapeKind.LIST: "Array.isArray($value)",
        ShapeKind.MAP: "$value instanceof Map",
        ShapeKind.STRUCTURE: "typeof $value === 'object'",
        ShapeKind.UNION: "typeof $value === 'object'",
    }
    for kind in (INTEGER_KINDS | FLOAT_KINDS) - {ShapeKind.BIG_INTEGER}:
        type_checks[kind] = "typeof $value === 'number'"

    return BackendProfile(
        name="javascript",
        renderer=TypeScriptRenderer(indent_size),
        type_names=type_names,
        list_type="Array<$element>",
        map_type="Map<$key, $value>",
        unsupported={
            ShapeKind.SET: UNSUPPORTED_MESSAGE.format("Set"),
            ShapeKind.BIG_INTEGER: UNSUPPORTED_MESSAGE.format("BigInteger"),
        },
        unbox={ShapeKind.ENUM: "$value as $type"},
        timestamp_encode="model_utils.encodeDateAsNumber($value)",
        timestamp_decode="model_utils.decodeDateFromNumber($value)",
        blob_encode="model_utils.encodePayloadAsString($value)",
        blob_decode="model_utils.decodePayloadFromString($value)",
        blob_nonempty="model_utils.payloadLength($value) > 0",
        blob_wire_nonempty="$value.length > 0",
        empty_text='""',
        empty_blob="new Uint8Array(0)",
        struct_to_wire="normalize$type($value)",
        struct_from_wire="deserialize$type($value)",
        wire_has="$object[$key] !== undefined",
        wire_get="$object[$key]",
        wire_put="$object[$key] = $value",
        is_present="$value !== undefined",
        inline_collections=True,
        type_checks=type_checks,
        validate_struct_call="validate$type($value)",
        local_case=NamingCase.CAMEL_CASE,
        field_case=NamingCase.CAMEL_CASE,
        reserved_words=typescript_local_reserved(),
        client=ClientProfile(
            method_case=NamingCase.CAMEL_CASE,
            async_suffix="",
            callbacks_suffix="WithCallbacks",
            future_type="Promise<model.$type>",
            streaming_result_type="Promise<model.$type>",
            handler_type="${operation}StreamHandler",
            runtime_fault="Error",
            application_fault="ServiceError",
            supports_blocking=False,
            callback_names=("onStreamEvent", "onStreamError", "onStreamClosed"),
        ),
    )
