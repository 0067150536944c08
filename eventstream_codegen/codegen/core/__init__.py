"""
Core code generation components.

Provides the shape graph, ordering, type mapping and code emission
shared by all language generators.
"""

from .client import ClientModel, ClientStubComposer
from .config import ConfigError, ConfigManager, GeneratorConfig, load_config
from .emitter import ShapeCodeEmitter
from .errors import CodegenError
from .generator import CodeGenerator, GenerationResult, generate_code
from .naming import NameSanitizer, NamingCase
from .ordering import DataModelObject, DependencyOrderer, order_service_shapes
from .output import OutputComposer, OutputUnit, write_output_units
from .shapes import ShapeGraph, ShapeId, ShapeKind, load_shape_graph, load_shape_graph_file
from .templates import TemplateEngine, TemplateError, create_template_engine
from .types import TypeMapper

__all__ = [
    # Model
    "ShapeGraph",
    "ShapeId",
    "ShapeKind",
    "load_shape_graph",
    "load_shape_graph_file",
    # Engine
    "DependencyOrderer",
    "DataModelObject",
    "order_service_shapes",
    "TypeMapper",
    "ShapeCodeEmitter",
    "ClientStubComposer",
    "ClientModel",
    "OutputComposer",
    "OutputUnit",
    "write_output_units",
    # Base generator interface
    "CodeGenerator",
    "CodegenError",
    "GenerationResult",
    "generate_code",
    # Naming utilities
    "NameSanitizer",
    "NamingCase",
    # Configuration system
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Template system
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
