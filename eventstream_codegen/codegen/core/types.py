"""
Type mapping from shapes to target type expressions.

One TypeMapper drives every backend; the spellings come from the
BackendProfile.
"""

from string import Template

from ...logging_config import get_logger
from .errors import CodegenError
from .naming import upper_first
from .profile import BackendProfile
from .shapes import Member, Shape, ShapeGraph, ShapeKind, ShapeRef

logger = get_logger(__name__)


class TypeMapper:
    """Maps resolved shapes to target-language type names."""

    def __init__(self, graph: ShapeGraph, profile: BackendProfile):
        self.graph = graph
        self.profile = profile

    def check_supported(self, shape: Shape):
        """
        Raise for a shape kind the active profile cannot represent.

        Raises:
            CodegenError: Naming the offending shape and kind
        """
        reason = self.profile.unsupported.get(shape.kind)
        if reason is not None:
            raise CodegenError(
                f"{reason} (shape {shape.id}, kind {shape.kind.value})", shape.id
            )

    def require_string_key(self, map_shape: Shape) -> Shape:
        """Return the key shape of a map, which must resolve to a string."""
        key = self.graph.resolve(map_shape.key)
        if key.kind not in (ShapeKind.STRING, ShapeKind.ENUM):
            raise CodegenError(
                f"Map {map_shape.id} has key {key.id} of kind {key.kind.value}; "
                "map keys must be strings",
                map_shape.id,
            )
        return key

    def class_name(self, shape: ShapeRef) -> str:
        """Name of the generated type for a structure, union or enum."""
        return upper_first(self.graph.resolve(shape).name)

    def type_name(self, shape: ShapeRef) -> str:
        """
        Target type expression for a shape.

        Members resolve to their target first.

        Raises:
            CodegenError: If the shape kind is unsupported by the profile
        """
        resolved = self.graph.resolve(shape)
        self.check_supported(resolved)
        profile = self.profile
        kind = resolved.kind

        if kind == ShapeKind.ENUM and profile.enum_type:
            return profile.enum_type

        if kind in (ShapeKind.STRUCTURE, ShapeKind.UNION, ShapeKind.ENUM):
            return Template(profile.named_type).safe_substitute(name=self.class_name(resolved))

        if kind == ShapeKind.LIST:
            element = self.type_name(resolved.element)
            return Template(profile.list_type).safe_substitute(element=element)

        if kind == ShapeKind.SET:
            element = self.type_name(resolved.element)
            return Template(profile.set_type).safe_substitute(element=element)

        if kind == ShapeKind.MAP:
            self.require_string_key(resolved)
            return Template(profile.map_type).safe_substitute(
                key=profile.type_names[ShapeKind.STRING],
                value=self.type_name(resolved.value),
            )

        try:
            return profile.type_names[kind]
        except KeyError:
            raise CodegenError(
                f"No {profile.name} type for shape {resolved.id} of kind {kind.value}",
                resolved.id,
            ) from None

    def member_type_name(self, member: Member, optional: bool = True) -> str:
        """
        Declared type of a structure field.

        Non-required members get the profile's optional wrapper.
        """
        type_name = self.type_name(member)
        wrap = not member.required or self.profile.optional_for_required
        if optional and wrap and self.profile.optional_type:
            return Template(self.profile.optional_type).safe_substitute(type=type_name)
        return type_name
