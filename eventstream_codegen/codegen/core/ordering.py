"""
Declaration ordering for the named types of a service.

Walks the shape graph breadth-first from the service operations and
produces DataModelObject units in an order where every type comes
before the types that contain it.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Tuple

from ...logging_config import get_logger
from .errors import CodegenError
from .shapes import Operation, Shape, ShapeGraph, ShapeId, ShapeKind, Service

logger = get_logger(__name__)

REQUEST_SUFFIX = "Request"
RESPONSE_SUFFIX = "Response"


@dataclass(frozen=True, eq=False)
class DataModelObject:
    """
    Unit of named-type declaration.

    Wraps a shape, or stands in for a synthesized empty request/response
    when an operation declares no input or output. Two units are equal
    when they wrap the same shape.
    """

    name: str
    shape: Optional[Shape]
    application_type: str

    @property
    def key(self) -> str:
        return str(self.shape.id) if self.shape is not None else self.application_type

    @property
    def is_placeholder(self) -> bool:
        return self.shape is None

    @property
    def kind(self) -> Optional[ShapeKind]:
        return self.shape.kind if self.shape is not None else None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DataModelObject):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __repr__(self) -> str:
        return f"DataModelObject({self.name!r}, {self.application_type!r})"


def placeholder_request(operation: Operation) -> DataModelObject:
    """Synthesized empty request unit for an operation without input."""
    name = operation.name + REQUEST_SUFFIX
    return DataModelObject(name, None, f"{operation.id.namespace}#{name}")


def placeholder_response(operation: Operation) -> DataModelObject:
    """Synthesized empty response unit for an operation without output."""
    name = operation.name + RESPONSE_SUFFIX
    return DataModelObject(name, None, f"{operation.id.namespace}#{name}")


# Worklist entry: a shape plus the ids on the path that discovered it
_Pending = Tuple[Shape, FrozenSet[ShapeId]]


class DependencyOrderer:
    """
    Computes a forward-reference-safe emission order.

    Each sweep level is processed from its last discovered shape to its
    first. A structure, union or enum is emitted when it is visited and
    re-emitted (moved to the end) each time it is visited again deeper
    in the graph. Reversing the emitted list at the end puts every type
    before every type that transitively contains it, and keeps
    unrelated types in discovery order.
    """

    def __init__(
        self,
        graph: ShapeGraph,
        service: Service,
        builtin_namespace_prefix: str = "smithy",
    ):
        self.graph = graph
        self.service = service
        self.builtin_namespace_prefix = builtin_namespace_prefix

    def order(self) -> List[DataModelObject]:
        """
        Return the ordered units for the service.

        Raises:
            CodegenError: If a locally namespaced shape has no generator
        """
        emitted: Dict[str, DataModelObject] = {}
        placeholders: List[DataModelObject] = []
        seeds: List[Shape] = []

        for operation in self.graph.operations_of(self.service):
            if operation.input is not None:
                seeds.append(self.graph.get_shape(operation.input))
            else:
                placeholders.append(placeholder_request(operation))

            if operation.output is not None:
                seeds.append(self.graph.get_shape(operation.output))
            else:
                placeholders.append(placeholder_response(operation))

            seeds.extend(self.graph.get_shape(error) for error in operation.errors)

            # Event-stream targets are not fields, so they are seeded directly
            for info in (operation.input_event_stream, operation.output_event_stream):
                if info is not None:
                    seeds.append(self.graph.get_shape(info.event_stream_target))

        # Placeholders come out last, in discovery order, after the reversal
        for unit in reversed(placeholders):
            emitted[unit.key] = unit

        level = self._dedupe([(shape, frozenset()) for shape in seeds])
        depth = 0
        while level:
            for shape, _ in reversed(level):
                self._visit(shape, emitted)

            next_level: List[_Pending] = []
            for shape, path in level:
                next_level.extend(self._expand(shape, path))

            level = self._dedupe(next_level)
            depth += 1

        ordered = list(reversed(list(emitted.values())))
        logger.debug(
            "Ordered %d units for %s in %d sweeps: %s",
            len(ordered),
            self.service.id,
            depth,
            ", ".join(unit.name for unit in ordered),
        )
        return ordered

    def _is_builtin(self, shape: Shape) -> bool:
        return shape.namespace.startswith(self.builtin_namespace_prefix)

    def _visit(self, shape: Shape, emitted: Dict[str, DataModelObject]):
        """Emit or re-emit a unit for a shape visited in this sweep."""
        if self._is_builtin(shape):
            return

        if shape.kind in (ShapeKind.STRUCTURE, ShapeKind.UNION, ShapeKind.ENUM):
            unit = DataModelObject(shape.name, shape, str(shape.id))
            emitted.pop(unit.key, None)
            emitted[unit.key] = unit
        elif shape.kind in (ShapeKind.LIST, ShapeKind.SET, ShapeKind.MAP):
            pass
        elif shape.namespace == self.service.id.namespace:
            raise CodegenError(f"No generator for type with shape ID: {shape.id}", shape.id)

    def _expand(self, shape: Shape, path: FrozenSet[ShapeId]) -> List[_Pending]:
        """Shapes referenced by a visited shape, for the next sweep."""
        if self._is_builtin(shape):
            return []

        if shape.kind in (ShapeKind.STRUCTURE, ShapeKind.UNION):
            targets = [m.target for m in self.graph.members_of(shape)]
        elif shape.kind in (ShapeKind.LIST, ShapeKind.SET, ShapeKind.MAP):
            targets = [m.target for m in shape.members]
        else:
            return []

        child_path = path | {shape.id}
        pending = []
        for target in targets:
            if target in child_path:
                logger.debug("Cycle through %s cut at %s", shape.id, target)
                continue
            pending.append((self.graph.get_shape(target), child_path))
        return pending

    @staticmethod
    def _dedupe(level: List[_Pending]) -> List[_Pending]:
        """Keep the first occurrence of each shape in a sweep level."""
        seen = set()
        unique = []
        for shape, path in level:
            if shape.id in seen:
                continue
            seen.add(shape.id)
            unique.append((shape, path))
        return unique


def order_service_shapes(
    graph: ShapeGraph, service: Service, builtin_namespace_prefix: str = "smithy"
) -> List[DataModelObject]:
    """Convenience wrapper around DependencyOrderer."""
    return DependencyOrderer(graph, service, builtin_namespace_prefix).order()
