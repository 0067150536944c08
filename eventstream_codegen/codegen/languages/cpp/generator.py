"""
C++ code generator implementation.

Generates a model header and source pair of Aws::Crt based classes,
and optionally a client header and source pair.
"""

from pathlib import Path
from typing import Any, Dict, List

from ...core.client import CALLBACKS, HANDLER, PLAIN, ClientModel, OperationStubs
from ...core.config import GeneratorConfig
from ...core.generator import CodeGenerator, GenerationContext
from ...core.naming import NameSanitizer, NamingCase, upper_first
from ...core.ordering import DataModelObject
from ...core.output import OutputComposer
from ...core.profile import BackendProfile
from ...core.shapes import Member, ShapeKind
from .naming import cpp_accessor, cpp_field, create_cpp_sanitizer
from .profile import create_cpp_profile


def _comment(text) -> str:
    if not text:
        return ""
    return " ".join(text.split()).replace("*/", "*\\/")


class CppGenerator(CodeGenerator):
    """Code generator for C++ models and clients."""

    @property
    def language_name(self) -> str:
        return "cpp"

    @property
    def file_extension(self) -> str:
        return ".cpp"

    def get_template_directory(self) -> Path:
        return Path(__file__).parent / "templates"

    def create_profile(self) -> BackendProfile:
        return create_cpp_profile(self.config.indent_size)

    def create_sanitizer(self) -> NameSanitizer:
        return create_cpp_sanitizer()

    def namespace(self, context: GenerationContext) -> str:
        """C++ namespace for a service, e.g. "aws.greengrass" -> "Aws::Greengrass"."""
        configured = self.config.custom.get("namespace")
        if configured:
            return configured
        return "::".join(upper_first(part) for part in context.service.id.namespace.split("."))

    def header_path(self, context: GenerationContext, suffix: str) -> str:
        return f"{self.config.include_subdirectory}/{upper_first(context.service_name)}{suffix}.h"

    def source_path(self, context: GenerationContext, suffix: str) -> str:
        return f"{self.config.source_subdirectory}/{upper_first(context.service_name)}{suffix}.cpp"

    def _include(self, context: GenerationContext, suffix: str) -> str:
        # Headers are included relative to the include root's parent
        parts = self.header_path(context, suffix).split("/")
        return "/".join(parts[1:]) if len(parts) > 1 else parts[0]

    def _base_context(self, context: GenerationContext) -> Dict[str, Any]:
        return {
            "service_name": context.service_name,
            "service_id": str(context.service.id),
            "namespace": self.namespace(context),
            "export_macro": self.config.custom.get("export_macro", ""),
            "model_include": self._include(context, "Model"),
            "client_include": self._include(context, "Client"),
            "add_comments": self.config.add_comments,
        }

    def render_model(self, context: GenerationContext, output: OutputComposer):
        template_context = self._base_context(context)
        template_context["types"] = [self._unit_data(context, unit) for unit in context.units]
        output.add(
            self.header_path(context, "Model"),
            self.render_template("Model.h.j2", template_context),
        )
        output.add(
            self.source_path(context, "Model"),
            self.render_template("Model.cpp.j2", template_context),
        )

    def render_client(
        self, context: GenerationContext, client: ClientModel, output: OutputComposer
    ):
        template_context = self._base_context(context)
        template_context.update(
            client=client,
            operations=[self._operation_data(op) for op in client.operations],
            PLAIN=PLAIN,
            HANDLER=HANDLER,
            CALLBACKS=CALLBACKS,
            callbacks=self.profile.client.callback_names,
        )
        output.add(
            self.header_path(context, "Client"),
            self.render_template("Client.h.j2", template_context),
        )
        output.add(
            self.source_path(context, "Client"),
            self.render_template("Client.cpp.j2", template_context),
        )

    def _unit_data(self, context: GenerationContext, unit: DataModelObject) -> Dict[str, Any]:
        shape = unit.shape
        literal = self.profile.literal
        data: Dict[str, Any] = {
            "name": unit.name,
            "model_name": literal(unit.application_type),
            "doc": _comment(shape.documentation) if shape is not None else "",
            "deprecated": bool(shape is not None and shape.deprecated),
            "kind": "structure",
            "members": [],
            "error": None,
            "union_check": "",
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
                        "doc": _comment(value.documentation),
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
                shape, {m["name"]: m["data_member"] for m in members}, level=2
            )
        data["members"] = members
        data["error"] = literal(shape.error) if shape.is_error else None
        return data

    def _member_data(self, context: GenerationContext, class_name: str, member: Member) -> Dict[str, Any]:
        emitter = context.emitter
        field = self.field_name(member)
        data_member = cpp_field(field)
        return {
            "name": member.name,
            "field": field,
            "data_member": data_member,
            "accessor": cpp_accessor(field),
            "type": context.types.type_name(member),
            "optional_type": context.types.member_type_name(member),
            "required": member.required,
            "deprecated": member.deprecated,
            "doc": _comment(member.documentation),
            "serialize": emitter.serialize_member(member, data_member, "payloadObject", level=2),
            "deserialize": emitter.deserialize_member(member, "jsonView", f"model.{data_member}", level=2),
            "validate": emitter.validate_member(member, data_member, class_name, level=2),
        }

    def _operation_data(self, stubs: OperationStubs) -> Dict[str, Any]:
        methods: List[Dict[str, Any]] = []
        for method in stubs.methods:
            methods.append(
                {
                    "name": method.name,
                    "blocking": method.blocking,
                    "style": method.style,
                    "return_type": method.return_type,
                    "async_name": stubs.method(method.style, False).name,
                    "params": method.parameter_names,
                }
            )
        return {
            "name": stubs.name,
            "model_name": self.profile.literal(stubs.model_name),
            "request_type": stubs.request_type,
            "response_type": stubs.response_type,
            "stream": stubs.stream,
            "methods": methods,
            "doc": _comment(stubs.documentation),
            "handler_async": stubs.method(HANDLER, False),
        }


def create_cpp_generator(config: GeneratorConfig = None) -> CppGenerator:
    """Create a C++ generator."""
    return CppGenerator(config or GeneratorConfig())
