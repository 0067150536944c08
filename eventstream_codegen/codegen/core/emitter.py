"""
Per-shape transform code emission.

ShapeCodeEmitter is a recursive visitor over resolved shape kinds that
produces serialize, deserialize, normalize and validate snippets for
any shape. It builds IR nodes and renders them once with the profile's
renderer, so every backend shares the same recursion rules.
"""

import re
from dataclasses import dataclass
from string import Template
from typing import List, Mapping, Optional, Union

from ...logging_config import get_logger
from .ir import (
    FROM_WIRE,
    TO_WIRE,
    Assign,
    Check,
    Collect,
    CollectEntries,
    Conditional,
    Declare,
    Expr,
    ForEach,
    ForEachEntry,
    Fragment,
    If,
    Line,
    Pattern,
    Ref,
    Stmt,
)
from .naming import LocalNames
from .profile import BackendProfile, Conversion, Staged
from .shapes import Member, Shape, ShapeGraph, ShapeKind, ShapeRef
from .types import TypeMapper

logger = get_logger(__name__)

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


@dataclass(frozen=True)
class WireField:
    """A keyed field of a wire object, used as a destination or source."""

    object: str
    key: str


Location = Union[str, WireField]


class ShapeCodeEmitter:
    """
    Emits transform code for shapes on one backend profile.

    Every transform takes a shape (or member), a source expression and a
    destination expression, and returns target-language statements.
    """

    def __init__(
        self,
        graph: ShapeGraph,
        profile: BackendProfile,
        type_mapper: Optional[TypeMapper] = None,
    ):
        self.graph = graph
        self.profile = profile
        self.types = type_mapper or TypeMapper(graph, profile)
        self._names = LocalNames(profile.local_case)

    # Public transform operations

    def serialize(self, shape: ShapeRef, source: str, destination: Location, level: int = 0) -> str:
        """Typed value -> canonical wire value stored at destination."""
        return self._render(self.serialize_ir(shape, source, destination), level)

    def deserialize(self, shape: ShapeRef, source: Location, destination: str, level: int = 0) -> str:
        """Canonical wire value read from source -> typed value in destination."""
        return self._render(self.deserialize_ir(shape, source, destination), level)

    def normalize(self, shape: ShapeRef, source: str, destination: str, level: int = 0) -> str:
        """Rich typed value -> minimal plain wire value (epoch numbers, base64 text)."""
        return self._render(self.normalize_ir(shape, source, destination), level)

    def validate(self, shape: ShapeRef, source: str, label: Optional[str] = None, level: int = 0) -> str:
        """Type conformance checks for a value; label names it in failures."""
        return self._render(self.validate_ir(shape, source, label), level)

    def serialize_ir(self, shape: ShapeRef, source: str, destination: Location) -> List[Stmt]:
        self._begin(source, destination)
        fragment = self._to_wire(self.graph.resolve(shape), Ref(source), self._hint(shape, source))
        return [*fragment.statements, self._store(destination, fragment.value)]

    def deserialize_ir(self, shape: ShapeRef, source: Location, destination: str) -> List[Stmt]:
        self._begin(source, destination)
        fragment = self._from_wire(
            self.graph.resolve(shape), self._load(source), self._hint(shape, destination)
        )
        return [*fragment.statements, Assign(Ref(destination), fragment.value)]

    def normalize_ir(self, shape: ShapeRef, source: str, destination: str) -> List[Stmt]:
        self._begin(source, destination)
        fragment = self._to_wire(self.graph.resolve(shape), Ref(source), self._hint(shape, source))
        return [*fragment.statements, Assign(Ref(destination), fragment.value)]

    def validate_ir(self, shape: ShapeRef, source: str, label: Optional[str] = None) -> List[Stmt]:
        self._begin(source)
        resolved = self.graph.resolve(shape)
        return self._checks(resolved, Ref(source), label or resolved.name, self._hint(shape, source))

    # Member-level operations

    def serialize_member(self, member: Member, source: str, wire_object: str, level: int = 0) -> str:
        """Write a structure field into a wire object, omitting it when absent."""
        self._begin(source, wire_object)
        p = self.profile
        fragment = self._to_wire(
            self.graph.resolve(member),
            Pattern.of(p.optional_value, value=Ref(source)),
            member.name,
        )
        store = self._store(WireField(wire_object, member.name), fragment.value)
        statement = If(
            Pattern.of(p.is_present, value=Ref(source)),
            (*fragment.statements, store),
        )
        return self._render([statement], level)

    def deserialize_member(self, member: Member, wire_object: str, destination: str, level: int = 0) -> str:
        """
        Read a structure field from a wire object when present.

        An absent required blob decodes to an empty payload.
        """
        self._begin(wire_object, destination)
        p = self.profile
        target = self.graph.resolve(member)
        fragment = self._from_wire(target, self._load(WireField(wire_object, member.name)), member.name)
        type_name = self.types.type_name(target)

        def wrap(value: Expr) -> Expr:
            if self._is_optional(member):
                return Pattern.of(p.optional_wrap, value=value, type=Ref(type_name))
            return value

        orelse = ()
        if target.kind == ShapeKind.BLOB and member.required:
            orelse = (Assign(Ref(destination), wrap(Ref(p.empty_blob))),)

        statement = If(
            Pattern.of(p.wire_has, object=Ref(wire_object), key=Ref(p.literal(member.name))),
            (*fragment.statements, Assign(Ref(destination), wrap(fragment.value))),
            orelse,
        )
        return self._render([statement], level)

    def validate_member(self, member: Member, source: str, container: str, level: int = 0) -> str:
        """Presence check for required members plus type checks when present."""
        self._begin(source)
        p = self.profile
        label = f"{container}.{member.name}"
        present = Pattern.of(p.is_present, value=Ref(source))
        checks = self._checks(
            self.graph.resolve(member),
            Pattern.of(p.optional_value, value=Ref(source)),
            label,
            member.name,
        )
        if member.required:
            statements = [Check(present, f"{label} is required", "value"), *checks]
        elif checks:
            statements = [If(present, tuple(checks))]
        else:
            statements = []
        return self._render(statements, level)

    def validate_union(self, shape: ShapeRef, sources: Mapping[str, str], level: int = 0) -> str:
        """Check that exactly one union member is set."""
        resolved = self.graph.resolve(shape)
        members = self.graph.members_of(resolved)
        if not members:
            return ""
        p = self.profile
        renderer = p.renderer
        terms = p.count_present_join.join(
            renderer.expr(
                Pattern.of(
                    p.count_present_term,
                    value=Pattern.of(p.is_present, value=Ref(sources[m.name])),
                )
            )
            for m in members
        )
        check = Check(
            Pattern.of(p.exactly_one, terms=Ref(terms)),
            f"{resolved.name} must have exactly one member set",
            "value",
        )
        return self._render([check], level)

    # Wire conversion

    def _to_wire(self, shape: Shape, value: Expr, hint: str) -> Fragment:
        self.types.check_supported(shape)
        p = self.profile
        kind = shape.kind

        if kind in (ShapeKind.LIST, ShapeKind.SET):
            return self._list_to_wire(shape, value, hint)
        if kind == ShapeKind.MAP:
            return self._map_to_wire(shape, value, hint)
        if kind in (ShapeKind.STRUCTURE, ShapeKind.UNION):
            converted = self._convert(p.struct_to_wire, value, self.types.type_name(shape), hint, "Json")
            return Fragment(converted.statements, self._box(kind, converted.value))

        if kind == ShapeKind.TIMESTAMP:
            native = Pattern.of(p.timestamp_encode, value=value)
        elif kind == ShapeKind.BLOB:
            # Zero-length payloads never reach the encoder
            native = Conditional(
                Pattern.of(p.blob_nonempty, value=value),
                Pattern.of(p.blob_encode, value=value),
                Ref(p.empty_text),
            )
        else:
            native = value
        return Fragment((), self._box(kind, native))

    def _from_wire(self, shape: Shape, value: Expr, hint: str) -> Fragment:
        self.types.check_supported(shape)
        p = self.profile
        kind = shape.kind

        if kind in (ShapeKind.LIST, ShapeKind.SET):
            return self._list_from_wire(shape, value, hint)
        if kind == ShapeKind.MAP:
            return self._map_from_wire(shape, value, hint)
        if kind in (ShapeKind.STRUCTURE, ShapeKind.UNION):
            return self._convert(p.struct_from_wire, value, self.types.type_name(shape), hint, "Value")

        native = self._unbox(kind, value, self.types.type_name(shape))
        if kind == ShapeKind.TIMESTAMP:
            native = Pattern.of(p.timestamp_decode, value=native)
        elif kind == ShapeKind.BLOB:
            native = Conditional(
                Pattern.of(p.blob_wire_nonempty, value=native),
                Pattern.of(p.blob_decode, value=native),
                Ref(p.empty_blob),
            )
        return Fragment((), native)

    def _list_to_wire(self, shape: Shape, value: Expr, hint: str) -> Fragment:
        p = self.profile
        source_kind = "set" if shape.kind == ShapeKind.SET else "list"
        item = self._names.fresh(hint, "Item")
        inner = self._to_wire(self.graph.resolve(shape.element), Ref(item), item)

        if p.inline_collections and not inner.statements:
            return Fragment((), Collect(value, item, inner.value, source_kind, "wire"))

        array = self._names.fresh(hint, "JsonArray")
        body = (
            *inner.statements,
            Line(Pattern.of(p.wire_append, target=Ref(array), value=inner.value)),
        )
        statements = (
            Declare(p.wire_array_type, array, self._init(p.new_wire_array, p.wire_array_type)),
            ForEach(item, value, body),
        )
        return Fragment(statements, self._box(ShapeKind.LIST, Ref(array)))

    def _map_to_wire(self, shape: Shape, value: Expr, hint: str) -> Fragment:
        p = self.profile
        self.types.require_string_key(shape)
        key = self._names.fresh(hint, "Key")
        entry = self._names.fresh(hint, "Value")
        inner = self._to_wire(self.graph.resolve(shape.value), Ref(entry), entry)

        if p.inline_collections and not inner.statements:
            return Fragment((), CollectEntries(value, key, entry, inner.value, TO_WIRE))

        obj = self._names.fresh(hint, "JsonObject")
        body = (
            *inner.statements,
            Line(Pattern.of(p.wire_put_entry, target=Ref(obj), key=Ref(key), value=inner.value)),
        )
        statements = (
            Declare(p.wire_object_type, obj, self._init(p.new_wire_object, p.wire_object_type)),
            ForEachEntry(key, entry, Pattern.of(p.typed_map_source, value=value), body),
        )
        return Fragment(statements, self._box(ShapeKind.MAP, Ref(obj)))

    def _list_from_wire(self, shape: Shape, value: Expr, hint: str) -> Fragment:
        p = self.profile
        is_set = shape.kind == ShapeKind.SET
        item = self._names.fresh(hint, "Item")
        inner = self._from_wire(self.graph.resolve(shape.element), Ref(item), item)
        source = Pattern.of(p.wire_list_source, value=value)

        if p.inline_collections and not inner.statements:
            return Fragment((), Collect(source, item, inner.value, "wire", "set" if is_set else "list"))

        type_name = self.types.type_name(shape)
        result = self._names.fresh(hint, "Items")
        add = p.typed_set_add if is_set else p.typed_append
        body = (*inner.statements, Line(Pattern.of(add, target=Ref(result), value=inner.value)))
        statements = (
            Declare(type_name, result, self._init(p.new_set if is_set else p.new_list, type_name)),
            ForEach(item, source, body),
        )
        return Fragment(statements, Ref(result))

    def _map_from_wire(self, shape: Shape, value: Expr, hint: str) -> Fragment:
        p = self.profile
        self.types.require_string_key(shape)
        key = self._names.fresh(hint, "Key")
        entry = self._names.fresh(hint, "Value")
        inner = self._from_wire(self.graph.resolve(shape.value), Ref(entry), entry)

        if p.inline_collections and not inner.statements:
            return Fragment((), CollectEntries(value, key, entry, inner.value, FROM_WIRE))

        type_name = self.types.type_name(shape)
        result = self._names.fresh(hint, "Map")
        body = (
            *inner.statements,
            Line(Pattern.of(p.typed_put_entry, target=Ref(result), key=Ref(key), value=inner.value)),
        )
        statements = (
            Declare(type_name, result, self._init(p.new_map, type_name)),
            ForEachEntry(key, entry, Pattern.of(p.wire_map_source, value=value), body),
        )
        return Fragment(statements, Ref(result))

    # Validation

    def _checks(self, shape: Shape, value: Expr, label: str, hint: str) -> List[Stmt]:
        self.types.check_supported(shape)
        p = self.profile
        kind = shape.kind
        type_name = self.types.type_name(shape)
        statements: List[Stmt] = []

        pattern = p.type_checks.get(kind)
        if pattern:
            statements.append(
                Check(
                    Pattern.of(pattern, value=value, type=Ref(type_name)),
                    f"{label} must be of type {type_name}",
                    "type",
                )
            )

        if kind in (ShapeKind.STRUCTURE, ShapeKind.UNION):
            if p.validate_struct_check:
                statements.append(
                    Check(
                        Pattern.of(p.validate_struct_check, value=value, type=Ref(type_name)),
                        f"{label} is not a valid {type_name}",
                        "value",
                    )
                )
            elif p.validate_struct_call:
                statements.append(
                    Line(Pattern.of(p.validate_struct_call, value=value, type=Ref(type_name)))
                )

        elif kind in (ShapeKind.LIST, ShapeKind.SET):
            item = self._names.fresh(hint, "Item")
            inner = self._checks(self.graph.resolve(shape.element), Ref(item), f"{label} element", item)
            if inner:
                statements.append(ForEach(item, value, tuple(inner)))

        elif kind == ShapeKind.MAP:
            self.types.require_string_key(shape)
            key = self._names.fresh(hint, "Key")
            entry = self._names.fresh(hint, "Value")
            inner = self._checks(self.graph.resolve(shape.value), Ref(entry), f"{label} value", entry)
            if inner:
                statements.append(
                    ForEachEntry(key, entry, Pattern.of(p.typed_map_source, value=value), tuple(inner))
                )

        return statements

    # Helpers

    def _begin(self, *locations: Location):
        """Start a fresh snippet; names already in use are reserved."""
        self._names = LocalNames(self.profile.local_case, self.profile.reserved_words)
        for location in locations:
            text = location.object if isinstance(location, WireField) else location
            self._names.reserve(*_IDENTIFIER.findall(text))

    def _hint(self, shape: ShapeRef, text: Location) -> str:
        if isinstance(shape, Member):
            return shape.name
        if isinstance(text, WireField):
            return text.key
        identifiers = _IDENTIFIER.findall(text)
        return identifiers[-1] if identifiers else "value"

    def _is_optional(self, member: Member) -> bool:
        return bool(self.profile.optional_type) and (
            not member.required or self.profile.optional_for_required
        )

    def _load(self, source: Location) -> Expr:
        if isinstance(source, WireField):
            return Pattern.of(
                self.profile.wire_get,
                object=Ref(source.object),
                key=Ref(self.profile.literal(source.key)),
            )
        return Ref(source)

    def _store(self, destination: Location, value: Expr) -> Stmt:
        if isinstance(destination, WireField):
            return Line(
                Pattern.of(
                    self.profile.wire_put,
                    object=Ref(destination.object),
                    key=Ref(self.profile.literal(destination.key)),
                    value=value,
                )
            )
        return Assign(Ref(destination), value)

    def _box(self, kind: ShapeKind, value: Expr) -> Expr:
        pattern = self.profile.box.get(kind)
        return Pattern.of(pattern, value=value) if pattern else value

    def _unbox(self, kind: ShapeKind, value: Expr, type_name: str) -> Expr:
        pattern = self.profile.unbox.get(kind)
        return Pattern.of(pattern, value=value, type=Ref(type_name)) if pattern else value

    @staticmethod
    def _init(pattern: Optional[str], type_name: str) -> Optional[Expr]:
        return Pattern.of(pattern, type=Ref(type_name)) if pattern else None

    def _convert(self, conversion: Conversion, value: Expr, type_name: str, hint: str, role: str) -> Fragment:
        if isinstance(conversion, Staged):
            temp = self._names.fresh(hint, role)
            declared = Template(conversion.type_name).safe_substitute(type=type_name)
            statements = (
                Declare(declared, temp, self._init(conversion.init, type_name)),
                Line(
                    Pattern.of(
                        conversion.statement,
                        target=Ref(temp),
                        value=value,
                        type=Ref(type_name),
                    )
                ),
            )
            return Fragment(statements, Ref(temp))
        return Fragment((), Pattern.of(conversion, value=value, type=Ref(type_name)))

    def _render(self, statements: List[Stmt], level: int) -> str:
        return self.profile.renderer.render(statements, level)


def check_shape_supported(emitter: ShapeCodeEmitter, shape: ShapeRef):
    """
    Walk a shape and everything it reaches, raising for unsupported kinds.

    Raises:
        CodegenError: For the first unsupported shape found
    """
    seen = set()
    pending = [emitter.graph.resolve(shape)]
    while pending:
        current = pending.pop()
        if current.id in seen:
            continue
        seen.add(current.id)
        emitter.types.check_supported(current)
        if current.kind == ShapeKind.MAP:
            emitter.types.require_string_key(current)
        for member in emitter.graph.members_of(current):
            pending.append(emitter.graph.resolve(member))
