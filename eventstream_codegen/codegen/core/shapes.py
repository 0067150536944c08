"""
Shape graph for code generation.

Shapes live in an id-indexed arena and reference each other only by
ShapeId, so recursive and mutually-referencing types never own each
other. Member indirection is resolved once when the graph is built.

Also provides a loader for Smithy JSON AST model documents.
"""

import json
import re
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from ...logging_config import get_logger
from .errors import CodegenError

logger = get_logger(__name__)

PRELUDE_NAMESPACE = "smithy.api"


class ShapeKind(Enum):
    """Closed set of shape kinds the generator understands."""

    BOOLEAN = "boolean"
    BYTE = "byte"
    SHORT = "short"
    INTEGER = "integer"
    LONG = "long"
    BIG_INTEGER = "bigInteger"
    FLOAT = "float"
    DOUBLE = "double"
    STRING = "string"
    ENUM = "enum"
    TIMESTAMP = "timestamp"
    BLOB = "blob"
    DOCUMENT = "document"
    LIST = "list"
    SET = "set"
    MAP = "map"
    STRUCTURE = "structure"
    UNION = "union"
    MEMBER = "member"


INTEGER_KINDS = frozenset(
    {
        ShapeKind.BYTE,
        ShapeKind.SHORT,
        ShapeKind.INTEGER,
        ShapeKind.LONG,
        ShapeKind.BIG_INTEGER,
    }
)
FLOAT_KINDS = frozenset({ShapeKind.FLOAT, ShapeKind.DOUBLE})
COLLECTION_KINDS = frozenset({ShapeKind.LIST, ShapeKind.SET, ShapeKind.MAP})
NAMED_KINDS = frozenset({ShapeKind.STRUCTURE, ShapeKind.UNION, ShapeKind.ENUM})


@dataclass(frozen=True, order=True)
class ShapeId:
    """Globally unique (namespace, name) pair."""

    namespace: str
    name: str

    @classmethod
    def parse(cls, value: Union[str, "ShapeId"]) -> "ShapeId":
        """
        Parse "namespace#Name".

        A bare name without a namespace refers to the prelude, so
        "String" is the same as "smithy.api#String".
        """
        if isinstance(value, ShapeId):
            return value

        text = str(value).strip()
        if "#" not in text:
            namespace, name = PRELUDE_NAMESPACE, text
        else:
            namespace, _, name = text.partition("#")

        if not namespace or not name or "$" in name:
            raise CodegenError(f"Invalid shape id: {value!r}")

        return cls(namespace, name)

    def __str__(self) -> str:
        return f"{self.namespace}#{self.name}"


@dataclass(frozen=True)
class Member:
    """Named reference from a container shape to its target shape."""

    name: str
    target: ShapeId
    container: ShapeId
    required: bool = False
    deprecated: bool = False
    streaming: bool = False
    documentation: Optional[str] = None

    @property
    def kind(self) -> ShapeKind:
        return ShapeKind.MEMBER


@dataclass(frozen=True)
class EnumValue:
    """One literal of an enum-constrained string."""

    name: str
    value: str
    documentation: Optional[str] = None


@dataclass(frozen=True)
class Shape:
    """
    A single data shape.

    Structures and unions keep their members in declaration order.
    Lists and sets hold one member named "member"; maps hold "key" and
    "value".
    """

    id: ShapeId
    kind: ShapeKind
    members: Tuple[Member, ...] = ()
    enum_values: Tuple[EnumValue, ...] = ()
    streaming: bool = False
    error: Optional[str] = None
    deprecated: bool = False
    documentation: Optional[str] = None
    traits: Dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def name(self) -> str:
        return self.id.name

    @property
    def namespace(self) -> str:
        return self.id.namespace

    @property
    def is_enum(self) -> bool:
        return self.kind == ShapeKind.ENUM

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def get_member(self, name: str) -> Member:
        for member in self.members:
            if member.name == name:
                return member
        raise CodegenError(f"Shape {self.id} has no member named '{name}'", self.id)

    @property
    def element(self) -> Member:
        """Element member of a list or set."""
        return self.get_member("member")

    @property
    def key(self) -> Member:
        return self.get_member("key")

    @property
    def value(self) -> Member:
        return self.get_member("value")


@dataclass(frozen=True)
class EventStreamInfo:
    """Event-stream metadata for one side of an operation."""

    member_name: str
    event_stream_target: ShapeId


@dataclass(frozen=True)
class Operation:
    """An RPC operation of a service."""

    id: ShapeId
    input: Optional[ShapeId] = None
    output: Optional[ShapeId] = None
    errors: Tuple[ShapeId, ...] = ()
    input_event_stream: Optional[EventStreamInfo] = None
    output_event_stream: Optional[EventStreamInfo] = None
    documentation: Optional[str] = None

    @property
    def name(self) -> str:
        return self.id.name

    @property
    def is_streaming(self) -> bool:
        return (
            self.input_event_stream is not None
            or self.output_event_stream is not None
        )


@dataclass(frozen=True)
class Service:
    """A service shape: a named, versioned set of operations."""

    id: ShapeId
    version: str = ""
    operations: Tuple[ShapeId, ...] = ()
    documentation: Optional[str] = None

    @property
    def name(self) -> str:
        return self.id.name


ShapeRef = Union[Shape, Member, ShapeId, str]


def _prelude_shapes() -> List[Shape]:
    """Simple shapes of the smithy.api prelude."""
    simple = {
        "Boolean": ShapeKind.BOOLEAN,
        "PrimitiveBoolean": ShapeKind.BOOLEAN,
        "Byte": ShapeKind.BYTE,
        "PrimitiveByte": ShapeKind.BYTE,
        "Short": ShapeKind.SHORT,
        "PrimitiveShort": ShapeKind.SHORT,
        "Integer": ShapeKind.INTEGER,
        "PrimitiveInteger": ShapeKind.INTEGER,
        "Long": ShapeKind.LONG,
        "PrimitiveLong": ShapeKind.LONG,
        "BigInteger": ShapeKind.BIG_INTEGER,
        "Float": ShapeKind.FLOAT,
        "PrimitiveFloat": ShapeKind.FLOAT,
        "Double": ShapeKind.DOUBLE,
        "PrimitiveDouble": ShapeKind.DOUBLE,
        "String": ShapeKind.STRING,
        "Timestamp": ShapeKind.TIMESTAMP,
        "Blob": ShapeKind.BLOB,
        "Document": ShapeKind.DOCUMENT,
    }
    shapes = [Shape(ShapeId(PRELUDE_NAMESPACE, name), kind) for name, kind in simple.items()]
    shapes.append(Shape(ShapeId(PRELUDE_NAMESPACE, "Unit"), ShapeKind.STRUCTURE))
    return shapes


UNIT_ID = ShapeId(PRELUDE_NAMESPACE, "Unit")


class ShapeGraph:
    """
    Read-only arena of shapes, operations and services.

    Every member target, operation input, output and error is checked
    when the graph is built, so later lookups never fail on a dangling
    reference.
    """

    def __init__(
        self,
        shapes: Iterable[Shape] = (),
        operations: Iterable[Operation] = (),
        services: Iterable[Service] = (),
        include_prelude: bool = True,
    ):
        self._shapes: Dict[ShapeId, Shape] = {}
        if include_prelude:
            for shape in _prelude_shapes():
                self._shapes[shape.id] = shape
        for shape in shapes:
            self._shapes[shape.id] = shape

        self._operations: Dict[ShapeId, Operation] = {op.id: op for op in operations}
        self._services: Dict[ShapeId, Service] = {svc.id: svc for svc in services}
        self._link()

    # Construction

    def _link(self):
        """Resolve member targets once and derive event-stream metadata."""
        for shape_id, shape in list(self._shapes.items()):
            if not shape.members:
                continue
            linked = []
            for member in shape.members:
                target = self._require(member.target, shape_id)
                linked.append(replace(member, streaming=target.streaming))
            self._shapes[shape_id] = replace(shape, members=tuple(linked))

        for op_id, operation in list(self._operations.items()):
            for ref in (operation.input, operation.output, *operation.errors):
                if ref is not None:
                    self._require(ref, op_id)
            self._operations[op_id] = replace(
                operation,
                input_event_stream=self._event_stream_info(operation.input),
                output_event_stream=self._event_stream_info(operation.output),
            )

        for svc_id, service in self._services.items():
            for op_id in service.operations:
                if op_id not in self._operations:
                    raise CodegenError(
                        f"Unresolvable shape id: {op_id} (referenced from {svc_id})",
                        op_id,
                    )

        logger.debug(
            "Shape graph linked: %d shapes, %d operations, %d services",
            len(self._shapes),
            len(self._operations),
            len(self._services),
        )

    def _require(self, shape_id: ShapeId, referrer: ShapeId) -> Shape:
        shape = self._shapes.get(shape_id)
        if shape is None:
            raise CodegenError(
                f"Unresolvable shape id: {shape_id} (referenced from {referrer})",
                shape_id,
            )
        return shape

    def _event_stream_info(self, shape_id: Optional[ShapeId]) -> Optional[EventStreamInfo]:
        if shape_id is None:
            return None
        shape = self._shapes[shape_id]
        for member in shape.members:
            target = self._shapes[member.target]
            if member.streaming and target.kind == ShapeKind.UNION:
                return EventStreamInfo(member.name, target.id)
        return None

    # Lookup

    def __contains__(self, shape_id: object) -> bool:
        try:
            return ShapeId.parse(shape_id) in self._shapes
        except CodegenError:
            return False

    def __iter__(self) -> Iterator[Shape]:
        return iter(self._shapes.values())

    def __len__(self) -> int:
        return len(self._shapes)

    def get_shape(self, shape_id: Union[ShapeId, str]) -> Shape:
        """Look up a shape by id."""
        parsed = ShapeId.parse(shape_id)
        shape = self._shapes.get(parsed)
        if shape is None:
            raise CodegenError(f"Unresolvable shape id: {parsed}", parsed)
        return shape

    def resolve(self, ref: ShapeRef) -> Shape:
        """
        Resolve any shape reference to a concrete shape.

        Members are followed to their target, so the result never has
        the MEMBER kind.
        """
        if isinstance(ref, Shape):
            return ref
        if isinstance(ref, Member):
            return self._shapes[ref.target]
        return self.get_shape(ref)

    def get_operation(self, operation_id: Union[ShapeId, str]) -> Operation:
        parsed = ShapeId.parse(operation_id)
        if parsed not in self._operations:
            raise CodegenError(f"No operation shape found for: {parsed}", parsed)
        return self._operations[parsed]

    def find_service(self, service_id: Union[ShapeId, str]) -> Optional[Service]:
        try:
            return self._services.get(ShapeId.parse(service_id))
        except CodegenError:
            return None

    def get_service(self, service_id: Union[ShapeId, str]) -> Service:
        service = self.find_service(service_id)
        if service is None:
            raise CodegenError(f"No service shape ID found for: {service_id}")
        return service

    @property
    def services(self) -> List[Service]:
        return sorted(self._services.values(), key=lambda svc: str(svc.id))

    def operations_of(self, service: Union[Service, ShapeId, str]) -> List[Operation]:
        """Operations of a service, sorted by their id string."""
        if not isinstance(service, Service):
            service = self.get_service(service)
        operations = [self._operations[op_id] for op_id in service.operations]
        return sorted(operations, key=lambda op: str(op.id))

    def members_of(self, shape: ShapeRef, include_streaming: bool = False) -> List[Member]:
        """
        Ordered members of a structure or union.

        Streaming members are event-stream metadata, not fields, and are
        left out unless asked for.
        """
        resolved = self.resolve(shape)
        return [m for m in resolved.members if include_streaming or not m.streaming]


# Smithy JSON AST loading

_SIMPLE_TYPES = {
    "boolean": ShapeKind.BOOLEAN,
    "byte": ShapeKind.BYTE,
    "short": ShapeKind.SHORT,
    "integer": ShapeKind.INTEGER,
    "long": ShapeKind.LONG,
    "bigInteger": ShapeKind.BIG_INTEGER,
    "float": ShapeKind.FLOAT,
    "double": ShapeKind.DOUBLE,
    "string": ShapeKind.STRING,
    "timestamp": ShapeKind.TIMESTAMP,
    "blob": ShapeKind.BLOB,
    "document": ShapeKind.DOCUMENT,
}

_AGGREGATE_TYPES = {
    "list": ShapeKind.LIST,
    "set": ShapeKind.SET,
    "map": ShapeKind.MAP,
    "structure": ShapeKind.STRUCTURE,
    "union": ShapeKind.UNION,
}

_IGNORED_TYPES = {"resource"}


def _normalize_traits(raw: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Qualify bare trait names with the prelude namespace."""
    traits = {}
    for name, value in (raw or {}).items():
        key = name if "#" in name else f"{PRELUDE_NAMESPACE}#{name}"
        traits[key] = value
    return traits


def _trait(traits: Dict[str, Any], name: str, default: Any = None) -> Any:
    return traits.get(f"{PRELUDE_NAMESPACE}#{name}", default)


def _has_trait(traits: Dict[str, Any], name: str) -> bool:
    return f"{PRELUDE_NAMESPACE}#{name}" in traits


def _target_of(node: Any, context: str) -> ShapeId:
    if not isinstance(node, dict) or "target" not in node:
        raise CodegenError(f"Missing 'target' in {context}")
    return ShapeId.parse(node["target"])


def _enum_literal_name(value: str) -> str:
    name = re.sub(r"[^A-Za-z0-9]+", "_", value).strip("_").upper()
    if not name or name[0].isdigit():
        name = f"V_{name}"
    return name


def _load_member(name: str, node: Dict[str, Any], container: ShapeId) -> Member:
    traits = _normalize_traits(node.get("traits"))
    return Member(
        name=name,
        target=_target_of(node, f"member {container}${name}"),
        container=container,
        required=_has_trait(traits, "required"),
        deprecated=_has_trait(traits, "deprecated"),
        documentation=_trait(traits, "documentation"),
    )


def _load_enum_values(shape_type: str, node: Dict[str, Any], traits: Dict[str, Any]):
    if shape_type == "enum":
        values = []
        for name, member in (node.get("members") or {}).items():
            member_traits = _normalize_traits(member.get("traits"))
            value = _trait(member_traits, "enumValue", name)
            values.append(EnumValue(name, str(value), _trait(member_traits, "documentation")))
        return tuple(values)

    values = []
    for entry in _trait(traits, "enum", []):
        value = str(entry["value"])
        values.append(
            EnumValue(entry.get("name") or _enum_literal_name(value), value, entry.get("documentation"))
        )
    return tuple(values)


def _load_shape(shape_id: ShapeId, node: Dict[str, Any]) -> Shape:
    shape_type = node.get("type")
    traits = _normalize_traits(node.get("traits"))
    common = dict(
        streaming=_has_trait(traits, "streaming"),
        error=_trait(traits, "error"),
        deprecated=_has_trait(traits, "deprecated"),
        documentation=_trait(traits, "documentation"),
        traits=traits,
    )

    if shape_type == "enum" or (shape_type == "string" and _has_trait(traits, "enum")):
        return Shape(
            shape_id,
            ShapeKind.ENUM,
            enum_values=_load_enum_values(shape_type, node, traits),
            **common,
        )

    if shape_type in _SIMPLE_TYPES:
        return Shape(shape_id, _SIMPLE_TYPES[shape_type], **common)

    kind = _AGGREGATE_TYPES.get(shape_type)
    if kind is None:
        raise CodegenError(f"Unsupported shape type '{shape_type}' for {shape_id}", shape_id)

    if kind in (ShapeKind.LIST, ShapeKind.SET):
        members = (_load_member("member", node.get("member", {}), shape_id),)
    elif kind == ShapeKind.MAP:
        members = (
            _load_member("key", node.get("key", {}), shape_id),
            _load_member("value", node.get("value", {}), shape_id),
        )
    else:
        members = tuple(
            _load_member(name, member, shape_id)
            for name, member in (node.get("members") or {}).items()
        )

    return Shape(shape_id, kind, members=members, **common)


def _load_operation(op_id: ShapeId, node: Dict[str, Any]) -> Operation:
    traits = _normalize_traits(node.get("traits"))

    def optional_target(key: str) -> Optional[ShapeId]:
        if key not in node:
            return None
        target = _target_of(node[key], f"{op_id} {key}")
        return None if target == UNIT_ID else target

    return Operation(
        id=op_id,
        input=optional_target("input"),
        output=optional_target("output"),
        errors=tuple(_target_of(err, f"{op_id} errors") for err in node.get("errors", [])),
        documentation=_trait(traits, "documentation"),
    )


def _load_service(svc_id: ShapeId, node: Dict[str, Any]) -> Service:
    traits = _normalize_traits(node.get("traits"))
    return Service(
        id=svc_id,
        version=str(node.get("version", "")),
        operations=tuple(
            _target_of(op, f"{svc_id} operations") for op in node.get("operations", [])
        ),
        documentation=_trait(traits, "documentation"),
    )


def load_shape_graph(model: Dict[str, Any]) -> ShapeGraph:
    """
    Build a ShapeGraph from a Smithy JSON AST document.

    Args:
        model: Parsed JSON model with a top-level "shapes" object

    Returns:
        Linked, read-only ShapeGraph

    Raises:
        CodegenError: If the document is malformed or references are dangling
    """
    if not isinstance(model, dict) or not isinstance(model.get("shapes"), dict):
        raise CodegenError("Model document must be a JSON object with a 'shapes' object")

    shapes: List[Shape] = []
    operations: List[Operation] = []
    services: List[Service] = []

    for raw_id, node in model["shapes"].items():
        shape_id = ShapeId.parse(raw_id)
        shape_type = node.get("type") if isinstance(node, dict) else None

        if shape_type == "operation":
            operations.append(_load_operation(shape_id, node))
        elif shape_type == "service":
            services.append(_load_service(shape_id, node))
        elif shape_type in _IGNORED_TYPES:
            logger.debug("Ignoring %s shape %s", shape_type, shape_id)
        else:
            shapes.append(_load_shape(shape_id, node or {}))

    logger.debug(
        "Loaded model: %d shapes, %d operations, %d services",
        len(shapes),
        len(operations),
        len(services),
    )
    return ShapeGraph(shapes, operations, services)


def load_shape_graph_file(path: Union[str, Path]) -> ShapeGraph:
    """Load a Smithy JSON AST file into a ShapeGraph."""
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            model = json.load(f)
    except json.JSONDecodeError as e:
        raise CodegenError(f"Invalid JSON in model file {path}: {e}") from e
    except OSError as e:
        raise CodegenError(f"Failed to read model file {path}: {e}") from e
    return load_shape_graph(model)
