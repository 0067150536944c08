"""
TypeScript-specific naming utilities.
"""

from ...core.naming import NameSanitizer

# TypeScript reserved and strict-mode words
TYPESCRIPT_RESERVED_WORDS = frozenset(
    {
        "break",
        "case",
        "catch",
        "class",
        "const",
        "continue",
        "debugger",
        "default",
        "delete",
        "do",
        "else",
        "enum",
        "export",
        "extends",
        "false",
        "finally",
        "for",
        "function",
        "if",
        "import",
        "in",
        "instanceof",
        "new",
        "null",
        "return",
        "super",
        "switch",
        "this",
        "throw",
        "true",
        "try",
        "typeof",
        "var",
        "void",
        "while",
        "with",
        "implements",
        "interface",
        "let",
        "package",
        "private",
        "protected",
        "public",
        "static",
        "yield",
        "await",
        "async",
    }
)

# Names taken by generated model functions
TYPESCRIPT_MODEL_NAMES = frozenset({"value", "normalizedValue", "deserializedValue", "model_utils"})


def create_typescript_sanitizer() -> NameSanitizer:
    """Create a name sanitizer for generated property names."""
    return NameSanitizer(TYPESCRIPT_RESERVED_WORDS)


def typescript_local_reserved() -> frozenset:
    return TYPESCRIPT_RESERVED_WORDS | TYPESCRIPT_MODEL_NAMES
