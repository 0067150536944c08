"""
Event-stream code generation module.

Generates data models and clients in various languages from a service
model.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .core.config import ConfigManager, GeneratorConfig, load_config
from .core.errors import CodegenError
from .core.generator import CodeGenerator, GenerationResult, generate_code
from .core.output import OutputUnit, write_output_units
from .core.shapes import ShapeGraph, load_shape_graph, load_shape_graph_file
from .registry import (
    GeneratorRegistry,
    RegistryError,
    get_generator,
    get_language_info,
    list_all_language_info,
    list_supported_languages,
)


def generate_from_model(
    model: Union[ShapeGraph, Dict[str, Any], str, Path],
    language: str = "python",
    config: Optional[Union[GeneratorConfig, Dict[str, Any], str, Path]] = None,
) -> GenerationResult:
    """
    Generate code for one service of a model.

    Args:
        model: ShapeGraph, parsed Smithy JSON document, or path to one
        language: Target language name or alias
        config: Generator configuration, settings dict or JSON file path

    Returns:
        GenerationResult with generated units
    """
    if isinstance(model, ShapeGraph):
        graph = model
    elif isinstance(model, dict):
        graph = load_shape_graph(model)
    else:
        graph = load_shape_graph_file(model)

    generator = get_generator(language, config)
    return generate_code(generator, graph)


def quick_generate(model: Dict[str, Any], language: str = "python", **settings) -> List[OutputUnit]:
    """
    Generate units from a model document, raising on failure.

    Args:
        model: Parsed Smithy JSON document
        language: Target language
        **settings: Generator settings (snake_case or camelCase)

    Returns:
        Generated output units
    """
    result = generate_from_model(model, language, settings)
    if not result.success:
        raise CodegenError(result.error_message)
    return result.units


__all__ = [
    "GeneratorRegistry",
    "RegistryError",
    "CodeGenerator",
    "CodegenError",
    "GenerationResult",
    "GeneratorConfig",
    "ConfigManager",
    "OutputUnit",
    "generate_from_model",
    "quick_generate",
    "generate_code",
    "get_generator",
    "get_language_info",
    "list_all_language_info",
    "list_supported_languages",
    "load_config",
    "write_output_units",
]
