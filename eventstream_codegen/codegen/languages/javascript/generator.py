"""
TypeScript code generator implementation.

Generates model interfaces with normalize/deserialize/validate
functions, a model_utils helper module and an optional client.
"""

from pathlib import Path
from typing import Any, Dict

from ...core.client import CALLBACKS, HANDLER, PLAIN, ClientModel, OperationStubs
from ...core.config import GeneratorConfig
from ...core.generator import CodeGenerator, GenerationContext
from ...core.naming import NameSanitizer, NamingCase
from ...core.ordering import DataModelObject
from ...core.output import OutputComposer
from ...core.profile import BackendProfile
from ...core.shapes import Member, ShapeKind
from .naming import create_typescript_sanitizer
from .profile import create_typescript_profile


def _doc_comment(text) -> str:
    if not text:
        return ""
    return text.strip().replace("*/", "*\\/")


class TypeScriptGenerator(CodeGenerator):
    """Code generator for TypeScript models and clients."""

    @property
    def language_name(self) -> str:
        return "javascript"

    @property
    def file_extension(self) -> str:
        return ".ts"

    def get_template_directory(self) -> Path:
        return Path(__file__).parent / "templates"

    def create_profile(self) -> BackendProfile:
        return create_typescript_profile(self.config.indent_size)

    def create_sanitizer(self) -> NameSanitizer:
        return create_typescript_sanitizer()

    def render_model(self, context: GenerationContext, output: OutputComposer):
        types = [self._unit_data(context, unit) for unit in context.units]
        template_context = {
            "service_name": context.service_name,
            "service_id": str(context.service.id),
            "types": types,
            "add_comments": self.config.add_comments,
        }
        output.add(
            f"{context.module_dir}/model.ts",
            self.render_template("model.ts.j2", template_context),
        )
        output.add(
            f"{context.module_dir}/model_utils.ts",
            self.render_template("model_utils.ts.j2", template_context),
        )

    def render_client(
        self, context: GenerationContext, client: ClientModel, output: OutputComposer
    ):
        code = self.render_template(
            "client.ts.j2",
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
        output.add(f"{context.module_dir}/client.ts", code)

    def _unit_data(self, context: GenerationContext, unit: DataModelObject) -> Dict[str, Any]:
        shape = unit.shape
        literal = self.profile.literal
        data: Dict[str, Any] = {
            "name": unit.name,
            "model_name": literal(unit.application_type),
            "doc": _doc_comment(shape.documentation) if shape is not None else "",
            "deprecated": bool(shape is not None and shape.deprecated),
            "members": [],
            "error": None,
            "union_check": "",
            "kind": "structure",
        }
        if shape is None:
            return data

        data["name"] = context.types.class_name(shape)
        if shape.kind == ShapeKind.ENUM:
            sanitizer = NameSanitizer()
            data.update(
                kind="enum",
                literals=[
                    {
                        "constant": sanitizer.sanitize_name(value.name, NamingCase.SCREAMING_SNAKE),
                        "literal": literal(value.value),
                        "doc": _doc_comment(value.documentation),
                    }
                    for value in shape.enum_values
                ],
            )
            return data

        members = [
            self._member_data(context, data["name"], member)
            for member in context.graph.members_of(shape)
        ]
        if shape.kind == ShapeKind.UNION:
            data["kind"] = "union"
            data["union_check"] = context.emitter.validate_union(
                shape, {m["name"]: f"value.{m['field']}" for m in members}, level=1
            )
        data["members"] = members
        data["error"] = literal(shape.error) if shape.is_error else None
        return data

    def _member_data(self, context: GenerationContext, class_name: str, member: Member) -> Dict[str, Any]:
        emitter = context.emitter
        field = self.field_name(member)
        return {
            "name": member.name,
            "field": field,
            "type": context.types.type_name(member),
            "required": member.required,
            "deprecated": member.deprecated,
            "doc": _doc_comment(member.documentation),
            "serialize": emitter.serialize_member(member, f"value.{field}", "normalizedValue", level=1),
            "deserialize": emitter.deserialize_member(member, "value", f"deserializedValue.{field}", level=1),
            "validate": emitter.validate_member(member, f"value.{field}", class_name, level=1),
        }

    def _operation_data(self, stubs: OperationStubs) -> Dict[str, Any]:
        return {
            "name": stubs.name,
            "model_name": self.profile.literal(stubs.model_name),
            "request_type": stubs.request_type,
            "response_type": stubs.response_type,
            "stream": stubs.stream,
            "methods": stubs.methods,
            "doc": _doc_comment(stubs.documentation),
            "handler_method": stubs.method(HANDLER, False),
        }


def create_typescript_generator(config: GeneratorConfig = None) -> TypeScriptGenerator:
    """Create a TypeScript generator."""
    return TypeScriptGenerator(config or GeneratorConfig())
