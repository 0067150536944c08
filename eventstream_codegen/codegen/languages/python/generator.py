"""
Python code generator implementation.

Generates a model module of plain classes with payload conversion,
validation and JSON entry points, plus an optional client module.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from ...core.client import CALLBACKS, HANDLER, PLAIN, ClientModel
from ...core.config import GeneratorConfig
from ...core.generator import CodeGenerator, GenerationContext
from ...core.naming import NameSanitizer, NamingCase
from ...core.ordering import DataModelObject
from ...core.output import OutputComposer
from ...core.profile import BackendProfile
from ...core.shapes import Member, Shape, ShapeKind
from .naming import create_python_sanitizer
from .profile import create_python_profile


def _docstring(text: Optional[str]) -> str:
    if not text:
        return ""
    return text.strip().replace("\\", "\\\\").replace('"""', '\\"\\"\\"')


class PythonGenerator(CodeGenerator):
    """Code generator for Python model classes and clients."""

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "python"

    @property
    def file_extension(self) -> str:
        """Return Python file extension."""
        return ".py"

    @property
    def comment_prefix(self) -> str:
        return "#"

    def get_template_directory(self) -> Path:
        """Return the Python templates directory."""
        return Path(__file__).parent / "templates"

    def create_profile(self) -> BackendProfile:
        return create_python_profile(self.config.indent_size)

    def create_sanitizer(self) -> NameSanitizer:
        return create_python_sanitizer()

    def render_model(self, context: GenerationContext, output: OutputComposer):
        types = [self._unit_data(context, unit) for unit in context.units]
        code = self.render_template(
            "model.py.j2",
            {
                "service_name": context.service_name,
                "service_id": str(context.service.id),
                "types": types,
                "add_comments": self.config.add_comments,
            },
        )
        output.add(f"{context.module_dir}/model.py", code)

    def render_client(
        self, context: GenerationContext, client: ClientModel, output: OutputComposer
    ):
        code = self.render_template(
            "client.py.j2",
            {
                "service_name": context.service_name,
                "client": client,
                "operations": [self._operation_data(op) for op in client.operations],
                "PLAIN": PLAIN,
                "HANDLER": HANDLER,
                "CALLBACKS": CALLBACKS,
                "add_comments": self.config.add_comments,
            },
        )
        output.add(f"{context.module_dir}/client.py", code)

    # Model

    def _unit_data(self, context: GenerationContext, unit: DataModelObject) -> Dict[str, Any]:
        """Template data for one named type."""
        shape = unit.shape
        data: Dict[str, Any] = {
            "class_name": unit.name,
            "model_name": repr(unit.application_type),
            "doc": _docstring(shape.documentation) if shape is not None else "",
            "deprecated": bool(shape is not None and shape.deprecated),
        }

        if shape is None:
            data.update(kind="structure", members=[], error=None, union_check="")
            return data

        data["class_name"] = context.types.class_name(shape)
        if shape.kind == ShapeKind.ENUM:
            sanitizer = NameSanitizer()
            data.update(
                kind="enum",
                literals=[
                    {
                        "constant": sanitizer.sanitize_name(value.name, NamingCase.SCREAMING_SNAKE),
                        "literal": repr(value.value),
                        "doc": _docstring(value.documentation),
                    }
                    for value in shape.enum_values
                ],
            )
            return data

        members = [
            self._member_data(context, shape, data["class_name"], member)
            for member in context.graph.members_of(shape)
        ]
        union_check = ""
        if shape.kind == ShapeKind.UNION:
            union_check = context.emitter.validate_union(
                shape, {m["name"]: f"self.{m['field']}" for m in members}, level=2
            )

        data.update(
            kind="union" if shape.kind == ShapeKind.UNION else "structure",
            members=members,
            error=repr(shape.error) if shape.is_error else None,
            union_check=union_check,
        )
        return data

    def _member_data(
        self, context: GenerationContext, shape: Shape, class_name: str, member: Member
    ) -> Dict[str, Any]:
        emitter = context.emitter
        field = self.field_name(member)
        return {
            "name": member.name,
            "field": field,
            "type": context.types.member_type_name(member),
            "plain_type": context.types.type_name(member),
            "required": member.required,
            "deprecated": member.deprecated,
            "doc": _docstring(member.documentation),
            "serialize": emitter.serialize_member(member, f"self.{field}", "payload", level=2),
            "deserialize": emitter.deserialize_member(member, "payload", f"new.{field}", level=2),
            "validate": emitter.validate_member(member, f"self.{field}", class_name, level=2),
        }

    # Client

    def _operation_data(self, stubs) -> Dict[str, Any]:
        methods: List[Dict[str, Any]] = []
        for method in stubs.methods:
            methods.append(
                {
                    "name": method.name,
                    "blocking": method.blocking,
                    "style": method.style,
                    "async_name": stubs.method(method.style, False).name,
                }
            )
        return {
            "name": stubs.name,
            "model_name": repr(stubs.model_name),
            "request_type": stubs.request_type,
            "response_type": stubs.response_type,
            "stream": stubs.stream,
            "methods": methods,
            "doc": _docstring(stubs.documentation),
            "handler_async": stubs.method(HANDLER, False),
        }


# Factory functions
def create_python_generator(config: GeneratorConfig = None) -> PythonGenerator:
    """Create a Python generator."""
    return PythonGenerator(config or GeneratorConfig())
