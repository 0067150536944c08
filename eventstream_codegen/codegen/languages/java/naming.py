"""
Java-specific naming utilities.
"""

from ...core.naming import NameSanitizer

JAVA_RESERVED_WORDS = frozenset(
    {
        "abstract", "assert", "boolean", "break", "byte", "case", "catch",
        "char", "class", "const", "continue", "default", "do", "double",
        "else", "enum", "extends", "final", "finally", "float", "for",
        "goto", "if", "implements", "import", "instanceof", "int",
        "interface", "long", "native", "new", "package", "private",
        "protected", "public", "return", "short", "static", "strictfp",
        "super", "switch", "synchronized", "this", "throw", "throws",
        "transient", "try", "void", "volatile", "while", "true", "false",
        "null", "var", "record", "yield",
    }
)

# Parameter and local names used by generated model code
JAVA_MODEL_NAMES = frozenset({"payload", "model", "request", "json"})


def create_java_sanitizer() -> NameSanitizer:
    return NameSanitizer(JAVA_RESERVED_WORDS)


def java_local_reserved() -> frozenset:
    return JAVA_RESERVED_WORDS | JAVA_MODEL_NAMES


def package_path(package: str) -> str:
    """Directory for a dotted Java package name."""
    return package.replace(".", "/")
