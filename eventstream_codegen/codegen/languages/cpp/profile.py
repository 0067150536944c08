"""
C++ backend profile.

Models are classes over Aws::Crt types; JSON goes through
Aws::Crt::JsonObject and JsonView. Every field is an
Aws::Crt::Optional, and collections are transformed with loops.
"""

from typing import Tuple

from ...core.ir import Check, ForEachEntry, Line, Ref, Renderer, Stmt
from ...core.naming import NamingCase
from ...core.profile import BackendProfile, ClientProfile, Staged
from ...core.shapes import ShapeKind
from .naming import cpp_local_reserved


class CppRenderer(Renderer):
    """Brace-delimited rendering; validation failures return false."""

    def for_each_entry_header(self, node: ForEachEntry) -> str:
        return f"for (const auto &{node.key}Entry : {self.expr(node.source)})"

    def entry_prelude(self, node: ForEachEntry) -> Tuple[Stmt, ...]:
        return (
            Line(Ref(f"const auto &{node.key} = {node.key}Entry.first")),
            Line(Ref(f"const auto &{node.value} = {node.key}Entry.second")),
        )

    def fail(self, node: Check) -> Stmt:
        return Line(Ref("return false"))


def create_cpp_profile(indent_size: int = 4) -> BackendProfile:
    """Profile for generated C++ models."""
    json = "Aws::Crt::JsonObject()"
    return BackendProfile(
        name="cpp",
        renderer=CppRenderer(indent_size),
        type_names={
            ShapeKind.BOOLEAN: "bool",
            ShapeKind.BYTE: "int8_t",
            ShapeKind.SHORT: "int16_t",
            ShapeKind.INTEGER: "int",
            ShapeKind.LONG: "int64_t",
            # Big integers are carried as 64-bit values
            ShapeKind.BIG_INTEGER: "int64_t",
            ShapeKind.FLOAT: "float",
            ShapeKind.DOUBLE: "double",
            ShapeKind.STRING: "Aws::Crt::String",
            ShapeKind.TIMESTAMP: "Aws::Crt::DateTime",
            ShapeKind.BLOB: "Aws::Crt::Vector<uint8_t>",
            ShapeKind.DOCUMENT: "Aws::Crt::JsonObject",
        },
        list_type="Aws::Crt::Vector<$element>",
        set_type="std::set<$element>",
        map_type="Aws::Crt::Map<$key, $value>",
        enum_type="Aws::Crt::String",
        optional_type="Aws::Crt::Optional<$type>",
        optional_for_required=True,
        box={
            ShapeKind.BOOLEAN: f"{json}.AsBool($value)",
            # No narrow JSON integer type: bytes and shorts widen to int
            ShapeKind.BYTE: f"{json}.AsInteger(static_cast<int>($value))",
            ShapeKind.SHORT: f"{json}.AsInteger(static_cast<int>($value))",
            ShapeKind.INTEGER: f"{json}.AsInteger($value)",
            ShapeKind.LONG: f"{json}.AsInt64($value)",
            ShapeKind.BIG_INTEGER: f"{json}.AsInt64($value)",
            ShapeKind.FLOAT: f"{json}.AsDouble(static_cast<double>($value))",
            ShapeKind.DOUBLE: f"{json}.AsDouble($value)",
            ShapeKind.STRING: f"{json}.AsString($value)",
            ShapeKind.ENUM: f"{json}.AsString($value)",
            ShapeKind.TIMESTAMP: f"{json}.AsDouble($value)",
            ShapeKind.BLOB: f"{json}.AsString($value)",
            ShapeKind.LIST: f"{json}.AsArray($value)",
        },
        unbox={
            ShapeKind.BOOLEAN: "$value.AsBool()",
            ShapeKind.BYTE: "static_cast<int8_t>($value.AsInteger())",
            ShapeKind.SHORT: "static_cast<int16_t>($value.AsInteger())",
            ShapeKind.INTEGER: "$value.AsInteger()",
            ShapeKind.LONG: "$value.AsInt64()",
            ShapeKind.BIG_INTEGER: "$value.AsInt64()",
            ShapeKind.FLOAT: "static_cast<float>($value.AsDouble())",
            ShapeKind.DOUBLE: "$value.AsDouble()",
            ShapeKind.STRING: "$value.AsString()",
            ShapeKind.ENUM: "$value.AsString()",
            ShapeKind.TIMESTAMP: "$value.AsDouble()",
            ShapeKind.BLOB: "$value.AsString()",
            ShapeKind.DOCUMENT: "$value.Materialize()",
        },
        timestamp_encode="$value.SecondsWithMSPrecision()",
        timestamp_decode="Aws::Crt::DateTime(static_cast<uint64_t>(std::llround($value * 1000)))",
        blob_encode="Aws::Crt::Base64Encode($value)",
        blob_decode="Aws::Crt::Base64Decode($value)",
        blob_nonempty="$value.size() > 0",
        blob_wire_nonempty="$value.size() > 0",
        empty_text='Aws::Crt::String("")',
        empty_blob="Aws::Crt::Vector<uint8_t>()",
        struct_to_wire=Staged("Aws::Crt::JsonObject", "$value.SerializeToJsonObject($target)"),
        struct_from_wire=Staged("$type", "$type::s_loadFromJsonView($target, $value)"),
        wire_has="$object.ValueExists($key)",
        wire_get="$object.GetJsonObject($key)",
        wire_put="$object.WithObject($key, $value)",
        is_present="$value.has_value()",
        optional_value="$value.value()",
        optional_wrap="Aws::Crt::Optional<$type>($value)",
        inline_collections=False,
        wire_list_source="$value.AsArray()",
        wire_map_source="$value.GetAllObjects()",
        typed_map_source="$value",
        wire_array_type="Aws::Crt::Vector<Aws::Crt::JsonObject>",
        wire_object_type="Aws::Crt::JsonObject",
        wire_append="$target.push_back($value)",
        wire_put_entry="$target.WithObject($key, $value)",
        typed_append="$target.push_back($value)",
        typed_set_add="$target.insert($value)",
        typed_put_entry="$target[$key] = $value",
        validate_struct_check="$value.Validate()",
        local_case=NamingCase.CAMEL_CASE,
        field_case=NamingCase.CAMEL_CASE,
        reserved_words=cpp_local_reserved(),
        client=ClientProfile(
            method_case=NamingCase.PASCAL_CASE,
            async_suffix="Async",
            callbacks_suffix="",
            future_type="std::future<$type>",
            streaming_result_type="std::future<$type>",
            handler_type="${operation}StreamHandler",
            runtime_fault="std::runtime_error",
            application_fault="ServiceError",
            supports_blocking=True,
            callback_names=("OnStreamEvent", "OnStreamError", "OnStreamClosed"),
        ),
    )
