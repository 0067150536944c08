"""
Language-specific code generators.

One backend per target: python, javascript (TypeScript), cpp and java.
"""

from .cpp import CppGenerator, create_cpp_generator
from .java import JavaGenerator, create_java_generator
from .javascript import TypeScriptGenerator, create_typescript_generator
from .python import PythonGenerator, create_python_generator

__all__ = [
    "CppGenerator",
    "JavaGenerator",
    "PythonGenerator",
    "TypeScriptGenerator",
    "create_cpp_generator",
    "create_java_generator",
    "create_python_generator",
    "create_typescript_generator",
]
