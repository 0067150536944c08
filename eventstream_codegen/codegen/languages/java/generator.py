"""
Java code generator implementation.

Generates one source file per model type in the model package, a
shared ServiceError base class and an optional client class.
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
from .naming import create_java_sanitizer, package_path
from .profile import create_java_profile


def _javadoc(text) -> str:
    if not text:
        return ""
    return " ".join(text.split()).replace("*/", "*&#47;")


class JavaGenerator(CodeGenerator):
    """Code generator for Java models and clients."""

    @property
    def language_name(self) -> str:
        return "java"

    @property
    def file_extension(self) -> str:
        return ".java"

    def get_template_directory(self) -> Path:
        return Path(__file__).parent / "templates"

    def create_profile(self) -> BackendProfile:
        return create_java_profile(self.config.indent_size)

    def create_sanitizer(self) -> NameSanitizer:
        return create_java_sanitizer()

    @property
    def base_package(self) -> str:
        return self.config.java_base_package

    @property
    def model_package(self) -> str:
        return f"{self.config.java_base_package}.{self.config.model_relative_package}"

    def render_model(self, context: GenerationContext, output: OutputComposer):
        directory = package_path(self.model_package)
        common = {
            "package": self.model_package,
            "service_name": context.service_name,
            "add_comments": self.config.add_comments,
        }
        output.add(
            f"{directory}/ServiceError.java",
            self.render_template("ServiceError.java.j2", common),
        )
        for unit in context.units:
            data = self._unit_data(context, unit)
            template = "Enum.java.j2" if data["kind"] == "enum" else "Model.java.j2"
            output.add(
                f"{directory}/{data['name']}.java",
                self.render_template(template, dict(common, type=data)),
            )

    def render_client(
        self, context: GenerationContext, client: ClientModel, output: OutputComposer
    ):
        code = self.render_template(
            "Client.java.j2",
            {
                "package": self.base_package,
                "model_package": self.model_package,
                "service_name": context.service_name,
                "client": client,
                "operations": [self._operation_data(op) for op in client.operations],
                "callbacks": self.profile.client.callback_names,
                "PLAIN": PLAIN,
                "HANDLER": HANDLER,
                "CALLBACKS": CALLBACKS,
                "add_comments": self.config.add_comments,
            },
        )
        output.add(f"{package_path(self.base_package)}/{client.client_class}.java", code)

    def _unit_data(self, context: GenerationContext, unit: DataModelObject) -> Dict[str, Any]:
        shape = unit.shape
        literal = self.profile.literal
        data: Dict[str, Any] = {
            "name": unit.name,
            "model_name": literal(unit.application_type),
            "doc": _javadoc(shape.documentation) if shape is not None else "",
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
                        "doc": _javadoc(value.documentation),
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
                shape, {m["name"]: f"this.{m['field']}" for m in members}, level=2
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
            "accessor": upper_first(field),
            "type": context.types.member_type_name(member),
            "required": member.required,
            "deprecated": member.deprecated,
            "doc": _javadoc(member.documentation),
            "serialize": emitter.serialize_member(member, f"this.{field}", "payload", level=2),
            "deserialize": emitter.deserialize_member(member, "payload", f"model.{field}", level=2),
            "validate": emitter.validate_member(member, f"this.{field}", class_name, level=2),
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
            "doc": _javadoc(stubs.documentation),
            "handler_async": stubs.method(HANDLER, False),
        }


def create_java_generator(config: GeneratorConfig = None) -> JavaGenerator:
    """Create a Java generator."""
    return JavaGenerator(config or GeneratorConfig())
