"""
Naming utilities for safe code generation.

Handles case conversion of shape and member names, reserved-word
conflicts and collision-free local variable names.
"""

import re
from enum import Enum
from typing import Dict, Iterable, Optional, Set


class NamingCase(Enum):
    """Different naming case styles."""

    SNAKE_CASE = "snake"  # thing_name
    CAMEL_CASE = "camel"  # thingName
    PASCAL_CASE = "pascal"  # ThingName
    SCREAMING_SNAKE = "screaming_snake"  # THING_NAME


_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")


def to_snake_case(name: str) -> str:
    """Convert camelCase, PascalCase or kebab-case to snake_case."""
    name = name.replace("-", "_")
    name = _ACRONYM_BOUNDARY.sub(r"\1_\2", name)
    name = _WORD_BOUNDARY.sub(r"\1_\2", name)
    name = re.sub(r"_+", "_", name.lower())
    return name.strip("_")


def to_camel_case(name: str) -> str:
    parts = to_snake_case(name).split("_")
    return parts[0] + "".join(part.capitalize() for part in parts[1:])


def to_pascal_case(name: str) -> str:
    return "".join(part.capitalize() for part in to_snake_case(name).split("_") if part)


def upper_first(name: str) -> str:
    return name[:1].upper() + name[1:]


def lower_first(name: str) -> str:
    return name[:1].lower() + name[1:]


def convert_case(name: str, target_case: NamingCase) -> str:
    """Convert name to target case style."""
    if target_case == NamingCase.SNAKE_CASE:
        return to_snake_case(name)
    if target_case == NamingCase.CAMEL_CASE:
        return to_camel_case(name)
    if target_case == NamingCase.PASCAL_CASE:
        return to_pascal_case(name)
    if target_case == NamingCase.SCREAMING_SNAKE:
        return to_snake_case(name).upper()
    return name


class NameSanitizer:
    """Handles name sanitization and case conversion."""

    def __init__(
        self,
        reserved_words: Optional[Iterable[str]] = None,
        builtin_types: Optional[Iterable[str]] = None,
    ):
        """
        Initialize name sanitizer.

        Args:
            reserved_words: Set of language reserved words
            builtin_types: Set of builtin type names that might conflict
        """
        self.reserved_words = set(reserved_words or ())
        self.builtin_types = set(builtin_types or ())
        self._name_cache: Dict[str, str] = {}

    def sanitize_name(
        self,
        name: str,
        target_case: NamingCase = NamingCase.SNAKE_CASE,
        suffix_on_conflict: str = "_",
    ) -> str:
        """
        Sanitize a name for safe use in target language.

        The same input always maps to the same output, so members keep
        stable field names across every unit that mentions them.

        Args:
            name: Original name to sanitize
            target_case: Desired case style
            suffix_on_conflict: Suffix to add for reserved-word conflicts

        Returns:
            Sanitized name safe for use
        """
        cache_key = f"{name}_{target_case.value}_{suffix_on_conflict}"
        if cache_key in self._name_cache:
            return self._name_cache[cache_key]

        cleaned = re.sub(r"[^a-zA-Z0-9_-]", "_", name).strip("_-") or "field"
        converted = convert_case(cleaned, target_case)
        if converted[0].isdigit():
            converted = f"_{converted}"

        if converted in self.reserved_words or converted in self.builtin_types:
            converted = f"{converted}{suffix_on_conflict}"

        self._name_cache[cache_key] = converted
        return converted


class LocalNames:
    """
    Allocates collision-free local variable names.

    Names derive from a base (usually the member name) plus a role
    suffix, e.g. "items" + "Item" -> "itemsItem"; repeats get a counter.
    """

    def __init__(self, case: NamingCase = NamingCase.CAMEL_CASE, reserved: Iterable[str] = ()):
        self.case = case
        self._used: Set[str] = set(reserved)

    def reserve(self, *names: str):
        self._used.update(names)

    def fresh(self, base: str, role: str) -> str:
        base = re.sub(r"[^a-zA-Z0-9_]", "_", base).strip("_") or "value"
        if self.case == NamingCase.SNAKE_CASE:
            candidate = f"{to_snake_case(base)}_{to_snake_case(role)}"
        else:
            candidate = f"{lower_first(base)}{upper_first(role)}"

        name = candidate
        counter = 2
        while name in self._used:
            name = f"{candidate}{counter}"
            counter += 1
        self._used.add(name)
        return name
