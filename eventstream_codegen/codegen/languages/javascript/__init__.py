"""
TypeScript code generator module.
"""

from .generator import TypeScriptGenerator, create_typescript_generator
from .naming import create_typescript_sanitizer
from .profile import TypeScriptRenderer, create_typescript_profile

__all__ = [
    "TypeScriptGenerator",
    "create_typescript_generator",
    "create_typescript_sanitizer",
    "TypeScriptRenderer",
    "create_typescript_profile",
]
