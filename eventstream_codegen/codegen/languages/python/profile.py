"""
Python backend profile.

Generated models are plain classes with _to_payload/_from_payload
entry points; collections are transformed with comprehensions.
"""

from typing import List, Sequence

from ...core.ir import (
    Check,
    Collect,
    CollectEntries,
    Conditional,
    Declare,
    ForEach,
    ForEachEntry,
    If,
    Line,
    Ref,
    Renderer,
    Stmt,
)
from ...core.naming import NamingCase
from ...core.profile import BackendProfile, ClientProfile
from ...core.shapes import FLOAT_KINDS, INTEGER_KINDS, ShapeKind
from .naming import python_local_reserved


class PythonRenderer(Renderer):
    """Indentation-delimited rendering."""

    terminator = ""

    def statement(self, node: Stmt, level: int) -> List[str]:
        if isinstance(node, Check):
            return self.block(f"if not ({self.expr(node.test)})", (self.fail(node),), level)
        return super().statement(node, level)

    def block(self, header: str, body: Sequence[Stmt], level: int) -> List[str]:
        pad = self.indent_unit * level
        lines = [f"{pad}{header}:"]
        for statement in body:
            lines.extend(self.statement(statement, level + 1))
        if len(lines) == 1:
            lines.append(f"{pad}{self.indent_unit}pass")
        return lines

    def if_block(self, node: If, level: int) -> List[str]:
        lines = self.block(f"if {self.expr(node.test)}", node.body, level)
        if node.orelse:
            lines.extend(self.block("else", node.orelse, level))
        return lines

    def declare(self, node: Declare) -> str:
        value = "None" if node.value is None else self.expr(node.value)
        return f"{node.name} = {value}"

    def conditional(self, node: Conditional) -> str:
        return (
            f"({self.expr(node.then)} if {self.expr(node.test)} "
            f"else {self.expr(node.otherwise)})"
        )

    def for_each_header(self, node: ForEach) -> str:
        return f"for {node.item} in {self.expr(node.source)}"

    def for_each_entry_header(self, node: ForEachEntry) -> str:
        return f"for {node.key}, {node.value} in {self.expr(node.source)}.items()"

    def fail(self, node: Check) -> Stmt:
        error = "TypeError" if node.error == "type" else "ValueError"
        return Line(Ref(f"raise {error}({self.string_literal(node.message)})"))

    def collect(self, node: Collect) -> str:
        source = self.expr(node.source)
        body = self.expr(node.body)
        if node.into == "set":
            if body == node.item:
                return f"set({source})"
            return f"{{{body} for {node.item} in {source}}}"
        if body == node.item:
            return f"list({source})"
        return f"[{body} for {node.item} in {source}]"

    def collect_entries(self, node: CollectEntries) -> str:
        source = self.expr(node.source)
        body = self.expr(node.body)
        if body == node.value:
            return f"dict({source})"
        return f"{{{node.key}: {body} for {node.key}, {node.value} in {source}.items()}}"

    def string_literal(self, value: str) -> str:
        return repr(value)


def _for_kinds(kinds, pattern: str):
    return {kind: pattern for kind in kinds}


def create_python_profile(indent_size: int = 4) -> BackendProfile:
    """Profile for generated Python models."""
    type_names = {
        ShapeKind.BOOLEAN: "bool",
        ShapeKind.STRING: "str",
        ShapeKind.TIMESTAMP: "datetime.datetime",
        ShapeKind.BLOB: "bytes",
        ShapeKind.DOCUMENT: "typing.Any",
    }
    type_names.update(_for_kinds(INTEGER_KINDS, "int"))
    type_names.update(_for_kinds(FLOAT_KINDS, "float"))

    unbox = {}
    unbox.update(_for_kinds(INTEGER_KINDS, "int($value)"))
    unbox.update(_for_kinds(FLOAT_KINDS, "float($value)"))

    type_checks = {
        ShapeKind.BOOLEAN: "isinstance($value, bool)",
        ShapeKind.STRING: "isinstance($value, str)",
        ShapeKind.ENUM: "isinstance($value, str)",
        ShapeKind.TIMESTAMP: "isinstance($value, datetime.datetime)",
        ShapeKind.BLOB: "isinstance($value, (bytes, bytearray))",
        ShapeKind.LIST: "isinstance($value, list)",
        ShapeKind.SET: "isinstance($value, (set, frozenset))",
        ShapeKind.MAP: "isinstance($value, dict)",
        ShapeKind.STRUCTURE: "isinstance($value, $type)",
        ShapeKind.UNION: "isinstance($value, $type)",
    }
    type_checks.update(_for_kinds(INTEGER_KINDS, "isinstance($value, int)"))
    type_checks.update(_for_kinds(FLOAT_KINDS, "isinstance($value, (float, int))"))

    return BackendProfile(
        name="python",
        renderer=PythonRenderer(indent_size),
        type_names=type_names,
        list_type="typing.List[$element]",
        set_type="typing.Set[$element]",
        map_type="typing.Dict[$key, $value]",
        enum_type="str",
        optional_type="typing.Optional[$type]",
        unbox=unbox,
        timestamp_encode="round($value.timestamp(), 3)",
        timestamp_decode="datetime.datetime.fromtimestamp($value, datetime.timezone.utc)",
        blob_encode="base64.b64encode($value).decode('utf-8')",
        blob_decode="base64.b64decode($value)",
        blob_nonempty="len($value) > 0",
        blob_wire_nonempty="$value",
        empty_text="''",
        empty_blob="b''",
        struct_to_wire="$value._to_payload()",
        struct_from_wire="$type._from_payload($value)",
        wire_has="$key in $object",
        wire_get="$object[$key]",
        wire_put="$object[$key] = $value",
        is_present="$value is not None",
        inline_collections=True,
        wire_append="$target.append($value)",
        typed_append="$target.append($value)",
        type_checks=type_checks,
        validate_struct_call="$value._validate()",
        count_present_term="$value",
        count_present_join=", ",
        exactly_one="[$terms].count(True) == 1",
        local_case=NamingCase.SNAKE_CASE,
        field_case=NamingCase.SNAKE_CASE,
        reserved_words=python_local_reserved(),
        client=ClientProfile(
            method_case=NamingCase.SNAKE_CASE,
            async_suffix="_async",
            callbacks_suffix="_with_callbacks",
            future_type="concurrent.futures.Future",
            streaming_result_type="concurrent.futures.Future",
            handler_type="${operation}StreamHandler",
            runtime_fault="RuntimeError",
            application_fault="ServiceError",
            supports_blocking=True,
            callback_names=("on_stream_event", "on_stream_error", "on_stream_closed"),
        ),
    )
