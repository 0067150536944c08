"""
Python-specific naming utilities and sanitization.

Handles Python reserved words and the names the generated model uses
for its own plumbing.
"""

import keyword

from ...core.naming import NameSanitizer

# Python reserved keywords
PYTHON_RESERVED_WORDS = frozenset(keyword.kwlist)

# Names taken by generated model and client code
PYTHON_MODEL_NAMES = frozenset(
    {
        "self",
        "cls",
        "new",
        "payload",
        "data",
        "base64",
        "datetime",
        "json",
        "typing",
        "concurrent",
        "model",
    }
)

# Built-in functions the generated code calls
PYTHON_BUILTIN_TYPES = frozenset(
    {
        "int",
        "float",
        "str",
        "bool",
        "list",
        "dict",
        "set",
        "len",
        "isinstance",
        "super",
        "ValueError",
        "TypeError",
        "RuntimeError",
    }
)


def create_python_sanitizer() -> NameSanitizer:
    """Create a name sanitizer for generated field names."""
    return NameSanitizer(PYTHON_RESERVED_WORDS)


def python_local_reserved() -> frozenset:
    """Names a generated local variable must never shadow."""
    return PYTHON_RESERVED_WORDS | PYTHON_MODEL_NAMES | PYTHON_BUILTIN_TYPES
