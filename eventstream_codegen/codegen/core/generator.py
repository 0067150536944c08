"""
Base generator interface for all code generation targets.

Defines the contract that all language generators must implement and
the shared pipeline: service checks, declaration ordering, per-unit
emission and client stub composition.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from ...logging_config import get_logger
from .client import ClientModel, ClientStubComposer
from .config import GeneratorConfig
from .emitter import ShapeCodeEmitter, check_shape_supported
from .errors import CodegenError
from .naming import NameSanitizer, upper_first
from .ordering import DataModelObject, DependencyOrderer
from .output import OutputComposer, OutputUnit, module_directory
from .profile import BackendProfile
from .shapes import Member, Service, ShapeGraph, ShapeKind
from .templates import TemplateEngine, create_template_engine
from .types import TypeMapper

logger = get_logger(__name__)


@dataclass
class GenerationContext:
    """Per-run state shared by the model and client renderers."""

    graph: ShapeGraph
    service: Service
    config: GeneratorConfig
    types: TypeMapper
    emitter: ShapeCodeEmitter
    units: List[DataModelObject]
    module_dir: str

    @property
    def service_name(self) -> str:
        return upper_first(self.service.name)


class CodeGenerator(ABC):
    """Abstract base class for all code generators."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize generator with optional configuration."""
        self.config = config or GeneratorConfig()
        self._template_engine = None
        self._setup_templates()
        self.profile = self.create_profile()
        self.sanitizer = self.create_sanitizer()

    def _setup_templates(self):
        """Setup template engine for this generator."""
        template_dir = self.get_template_directory()
        if template_dir:
            self._template_engine = create_template_engine(template_dir)
        else:
            # Fallback to in-memory templates
            self._template_engine = create_template_engine()

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the target language (e.g., 'python', 'cpp')."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for generated files (e.g., '.py', '.ts')."""
        pass

    @property
    def comment_prefix(self) -> str:
        return "//"

    @abstractmethod
    def create_profile(self) -> BackendProfile:
        """Build the backend profile driving type mapping and emission."""
        pass

    def create_sanitizer(self) -> NameSanitizer:
        """Sanitizer for declared field names."""
        return NameSanitizer(self.profile.reserved_words)

    @abstractmethod
    def render_model(self, context: GenerationContext, output: OutputComposer):
        """Render the type declaration units."""
        pass

    @abstractmethod
    def render_client(
        self, context: GenerationContext, client: ClientModel, output: OutputComposer
    ):
        """Render the client stub units."""
        pass

    def get_template_directory(self) -> Optional[Path]:
        """
        Return the directory containing templates for this generator.

        Subclasses should override this to provide their template directory.
        Return None to use in-memory templates only.

        Returns:
            Path to template directory or None
        """
        return None

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._setup_templates()
        return self._template_engine

    def generate(self, graph: ShapeGraph) -> List[OutputUnit]:
        """
        Generate every output unit for the configured service.

        Args:
            graph: Shape graph holding the service

        Returns:
            Rendered units, not yet written anywhere

        Raises:
            CodegenError: On any modeling or backend support problem
        """
        config = self.config
        if config.generate_server_stubs:
            raise CodegenError("Server stub generation not implemented yet!")

        if not config.service_shape_id:
            raise CodegenError("No service shape ID found for: <unset>")
        service = graph.get_service(config.service_shape_id)

        if config.require_operation_io:
            self.check_operations(graph, service)

        context = self.create_context(graph, service)
        for unit in context.units:
            if unit.shape is not None:
                check_shape_supported(context.emitter, unit.shape)

        output = OutputComposer(self.comment_prefix, config.license_header)
        self.render_model(context, output)

        if config.generate_client_stubs:
            client = ClientStubComposer(graph, service, context.types, self.profile).compose()
            self.render_client(context, client, output)

        units = output.units
        logger.info(
            "Generated %d %s units for %s (%d types)",
            len(units),
            self.language_name,
            service.id,
            len(context.units),
        )
        return units

    def create_context(self, graph: ShapeGraph, service: Service) -> GenerationContext:
        types = TypeMapper(graph, self.profile)
        orderer = DependencyOrderer(graph, service, self.config.builtin_namespace_prefix)
        return GenerationContext(
            graph=graph,
            service=service,
            config=self.config,
            types=types,
            emitter=ShapeCodeEmitter(graph, self.profile, types),
            units=orderer.order(),
            module_dir=module_directory(service, self.config.module_override_directory),
        )

    def check_operations(self, graph: ShapeGraph, service: Service):
        """
        Every operation must declare both an input and an output shape.

        Raises:
            CodegenError: After logging each offending operation
        """
        missing = False
        for operation in graph.operations_of(service):
            if operation.input is None or operation.output is None:
                logger.error(
                    "Operation %s must define both an input shape and output shape.",
                    operation.id,
                )
                missing = True
        if missing:
            raise CodegenError("Operations found with no defined input or output shapes!")

    def validate_service(self, graph: ShapeGraph, service: Service) -> List[str]:
        """
        Collect warnings about the service that do not stop generation.

        Language generators may override this to add their own checks.

        Returns:
            List of warning messages (empty if no issues)
        """
        warnings = []
        seen = set()
        orderer = DependencyOrderer(graph, service, self.config.builtin_namespace_prefix)

        for unit in orderer.order():
            shape = unit.shape
            if shape is None:
                warnings.append(f"{unit.name} is synthesized with no members")
                continue
            if shape.id in seen:
                continue
            seen.add(shape.id)

            if shape.kind == ShapeKind.STRUCTURE and not graph.members_of(shape) and not shape.is_error:
                warnings.append(f"Structure {shape.id} has no members")
            if shape.deprecated:
                warnings.append(f"Shape {shape.id} is deprecated")
            for member in graph.members_of(shape):
                if member.deprecated:
                    warnings.append(f"Member {shape.name}.{member.name} is deprecated")

        return warnings

    def field_name(self, member: Member) -> str:
        """Declared name of a structure field."""
        return self.sanitizer.sanitize_name(member.name, self.profile.field_case)

    def format_code(self, code: str) -> str:
        """
        Apply language-specific formatting to generated code.

        Args:
            code: Raw generated code

        Returns:
            Formatted code
        """
        # Basic cleanup - remove excessive blank lines
        lines = code.split("\n")
        formatted_lines = []
        blank_count = 0

        for line in lines:
            stripped = line.rstrip()
            if not stripped:
                blank_count += 1
                if blank_count <= 2:  # Allow max 2 consecutive blank lines
                    formatted_lines.append("")
            else:
                blank_count = 0
                formatted_lines.append(stripped)

        return "\n".join(formatted_lines)

    # Template helper methods

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a template with context.

        Args:
            template_name: Template file name
            context: Template variables

        Returns:
            Rendered content
        """
        return self.format_code(self.template_engine.render_template(template_name, context))

    def template_exists(self, template_name: str) -> bool:
        """Check if a template exists."""
        return self.template_engine.template_exists(template_name)


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self,
        units: List[OutputUnit] = None,
        warnings: List[str] = None,
        metadata: Dict[str, Any] = None,
    ):
        """
        Initialize generation result.

        Args:
            units: Generated output units
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
        """
        self.units = units or []
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.success = True
        self.error_message: Optional[str] = None
        self.exception: Optional[Exception] = None

    @property
    def code(self) -> str:
        """All units concatenated, each under a path banner."""
        return "\n".join(f"==> {unit.path} <==\n{unit.content}" for unit in self.units)

    def get_unit(self, path: str) -> OutputUnit:
        for unit in self.units:
            if unit.path == path:
                return unit
        raise KeyError(path)

    @classmethod
    def error(cls, message: str, exception: Exception = None) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls()
        result.success = False
        result.error_message = message
        result.exception = exception
        return result


def generate_code(generator: CodeGenerator, graph: ShapeGraph) -> GenerationResult:
    """
    Generate code using the specified generator with error handling.

    A failed run never carries partial output.

    Args:
        generator: Code generator instance
        graph: Shape graph holding the configured service

    Returns:
        GenerationResult with units, warnings, and metadata
    """
    try:
        units = generator.generate(graph)
        service = graph.get_service(generator.config.service_shape_id)
        warnings = generator.validate_service(graph, service)

        metadata = {
            "language": generator.language_name,
            "file_extension": generator.file_extension,
            "service": str(service.id),
            "operation_count": len(service.operations),
            "unit_count": len(units),
            "client_stubs": generator.config.generate_client_stubs,
        }

        return GenerationResult(units, warnings, metadata)

    except Exception as e:
        logger.debug("Generation failed", exc_info=True)
        return GenerationResult.error(f"Code generation failed: {str(e)}", exception=e)
