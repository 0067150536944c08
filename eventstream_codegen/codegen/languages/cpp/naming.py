"""
C++-specific naming utilities.
"""

from ...core.naming import NameSanitizer, upper_first

CPP_RESERVED_WORDS = frozenset(
    {
        "alignas", "alignof", "and", "asm", "auto", "bool", "break", "case",
        "catch", "char", "class", "const", "constexpr", "continue", "default",
        "delete", "do", "double", "else", "enum", "explicit", "export",
        "extern", "false", "float", "for", "friend", "goto", "if", "inline",
        "int", "long", "mutable", "namespace", "new", "noexcept", "not",
        "nullptr", "operator", "or", "private", "protected", "public",
        "register", "return", "short", "signed", "sizeof", "static",
        "struct", "switch", "template", "this", "throw", "true", "try",
        "typedef", "typename", "union", "unsigned", "using", "virtual",
        "void", "volatile", "while", "xor",
    }
)

# Parameter and local names used by generated model code
CPP_MODEL_NAMES = frozenset({"payloadObject", "jsonView", "model", "request"})


def create_cpp_sanitizer() -> NameSanitizer:
    return NameSanitizer(CPP_RESERVED_WORDS)


def cpp_local_reserved() -> frozenset:
    return CPP_RESERVED_WORDS | CPP_MODEL_NAMES


def cpp_field(field_name: str) -> str:
    """Data member name for a structure field, e.g. "topic" -> "m_topic"."""
    return f"m_{field_name}"


def cpp_accessor(field_name: str) -> str:
    """Accessor suffix for a structure field, e.g. "topic" -> "Topic"."""
    return upper_first(field_name)
