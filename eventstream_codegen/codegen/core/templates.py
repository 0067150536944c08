"""
Jinja2 rendering for the backend templates.

Each backend ships a directory of ``*.j2`` files. An in-memory overlay
sits in front of it so single templates can be replaced without
touching the package.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from jinja2 import (
    ChoiceLoader,
    DictLoader,
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateNotFound,
    TemplateSyntaxError,
)

from .naming import (
    NamingCase,
    convert_case,
    lower_first,
    to_camel_case,
    to_pascal_case,
    to_snake_case,
    upper_first,
)


class TemplateError(Exception):
    """Exception raised for template-related errors."""

    pass


class TemplateEngine:
    """Jinja2 environment configured for generating source text."""

    def __init__(self, template_dir: Optional[Path] = None):
        """
        Args:
            template_dir: Backend template directory, or None for
                in-memory templates only
        """
        self.template_dir = template_dir
        self._overrides: Dict[str, str] = {}

        loaders: List[Any] = [DictLoader(self._overrides)]
        if template_dir is not None and Path(template_dir).is_dir():
            loaders.append(FileSystemLoader(str(template_dir)))

        self._env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        self._env.filters.update(
            snake_case=to_snake_case,
            camel_case=to_camel_case,
            pascal_case=to_pascal_case,
            screaming_snake=lambda name: convert_case(name, NamingCase.SCREAMING_SNAKE),
            upper_first=upper_first,
            lower_first=lower_first,
            indent_code=indent_code,
            comment=comment_lines,
        )

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a named template.

        Raises:
            TemplateError: If the template is missing or fails to render
        """
        try:
            template = self._env.get_template(template_name)
        except TemplateNotFound as e:
            raise TemplateError(f"Template not found: {template_name}") from e
        except TemplateSyntaxError as e:
            raise TemplateError(f"Syntax error in {template_name} line {e.lineno}: {e.message}") from e
        return self._render(template, context, template_name)

    def render_string(self, template_string: str, context: Dict[str, Any]) -> str:
        try:
            template = self._env.from_string(template_string)
        except TemplateSyntaxError as e:
            raise TemplateError(f"Syntax error in template string: {e.message}") from e
        return self._render(template, context, "<string>")

    def _render(self, template, context: Dict[str, Any], label: str) -> str:
        try:
            return template.render(**context)
        except Exception as e:
            raise TemplateError(f"Failed to render template {label}: {e}") from e

    def add_template(self, name: str, content: str):
        """Register an in-memory template, shadowing a file of the same name."""
        self._overrides[name] = content
        if self._env.cache is not None:
            self._env.cache.clear()

    def template_exists(self, template_name: str) -> bool:
        return template_name in self._env.list_templates()


def indent_code(value: str, spaces: int = 4, first: bool = False) -> str:
    """Indent every non-blank line of a multi-line string."""
    indent = " " * spaces
    lines = str(value).split("\n")
    indented = [indent + line if line.strip() else line for line in lines]
    if not first and indented:
        indented[0] = lines[0]
    return "\n".join(indented)


def comment_lines(value: str, style: str = "//") -> str:
    """Prefix each line with a line-comment marker."""
    lines = str(value).strip().split("\n")
    return "\n".join(f"{style} {line}".rstrip() for line in lines)


def create_template_engine(template_dir: Optional[Path] = None) -> TemplateEngine:
    """Create a template engine, file-backed when template_dir is given."""
    return TemplateEngine(template_dir)
