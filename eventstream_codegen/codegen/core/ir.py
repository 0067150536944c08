"""
Tagged intermediate representation for emitted code.

Transform code is built as a tree of small statement and expression
nodes and rendered to text once, by a language renderer. Nested
snippets are composed as nodes, never as text, so nothing has to be
escaped at nesting boundaries.
"""

from dataclasses import dataclass
from string import Template
from typing import Dict, List, Optional, Sequence, Tuple

TO_WIRE = "to_wire"
FROM_WIRE = "from_wire"


class Expr:
    """Base class for expression nodes."""


class Stmt:
    """Base class for statement nodes."""


@dataclass(frozen=True)
class Ref(Expr):
    """Leaf expression: a variable, literal or pre-spelled source text."""

    text: str


@dataclass(frozen=True)
class Pattern(Expr):
    """
    Profile-supplied spelling with $-placeholders.

    Arguments are expressions, rendered before substitution.
    """

    template: str
    args: Tuple[Tuple[str, Expr], ...] = ()

    @classmethod
    def of(cls, template: str, **args: Expr) -> "Pattern":
        return cls(template, tuple(args.items()))


@dataclass(frozen=True)
class Conditional(Expr):
    test: Expr
    then: Expr
    otherwise: Expr


@dataclass(frozen=True)
class Collect(Expr):
    """
    Element-wise transform of a list or set into a new collection.

    source_kind and into are one of "list", "set" or "wire".
    """

    source: Expr
    item: str
    body: Expr
    source_kind: str
    into: str


@dataclass(frozen=True)
class CollectEntries(Expr):
    """Value-wise transform of a string-keyed map."""

    source: Expr
    key: str
    value: str
    body: Expr
    direction: str


@dataclass(frozen=True)
class Line(Stmt):
    """Expression statement."""

    expr: Expr


@dataclass(frozen=True)
class Assign(Stmt):
    target: Expr
    value: Expr


@dataclass(frozen=True)
class Declare(Stmt):
    type_name: str
    name: str
    value: Optional[Expr] = None


@dataclass(frozen=True)
class If(Stmt):
    test: Expr
    body: Tuple[Stmt, ...]
    orelse: Tuple[Stmt, ...] = ()


@dataclass(frozen=True)
class ForEach(Stmt):
    item: str
    source: Expr
    body: Tuple[Stmt, ...]


@dataclass(frozen=True)
class ForEachEntry(Stmt):
    key: str
    value: str
    source: Expr
    body: Tuple[Stmt, ...]


@dataclass(frozen=True)
class Check(Stmt):
    """
    Validation: fail with message unless test holds.

    error is "value" for presence failures and "type" for type
    conformance failures.
    """

    test: Expr
    message: str
    error: str = "value"


@dataclass(frozen=True)
class Fragment:
    """Statements that must run first, and the expression they produce."""

    statements: Tuple[Stmt, ...]
    value: Expr


class Renderer:
    """
    Renders IR nodes to source text.

    The base class renders brace-delimited languages; subclasses adjust
    the handful of constructs that differ.
    """

    indent_unit = "    "
    terminator = ";"

    def __init__(self, indent_size: int = 4):
        self.indent_unit = " " * indent_size

    # Public API

    def render(self, statements: Sequence[Stmt], level: int = 0) -> str:
        lines: List[str] = []
        for statement in statements:
            lines.extend(self.statement(statement, level))
        return "\n".join(lines)

    def expr(self, node: Expr) -> str:
        if isinstance(node, Ref):
            return node.text
        if isinstance(node, Pattern):
            values: Dict[str, str] = {name: self.expr(arg) for name, arg in node.args}
            return Template(node.template).safe_substitute(values)
        if isinstance(node, Conditional):
            return self.conditional(node)
        if isinstance(node, Collect):
            return self.collect(node)
        if isinstance(node, CollectEntries):
            return self.collect_entries(node)
        raise TypeError(f"Unknown expression node: {node!r}")

    def statement(self, node: Stmt, level: int) -> List[str]:
        pad = self.indent_unit * level
        if isinstance(node, Line):
            return [f"{pad}{self.expr(node.expr)}{self.terminator}"]
        if isinstance(node, Assign):
            return [f"{pad}{self.expr(node.target)} = {self.expr(node.value)}{self.terminator}"]
        if isinstance(node, Declare):
            return [pad + self.declare(node)]
        if isinstance(node, If):
            return self.if_block(node, level)
        if isinstance(node, ForEach):
            return self.block(self.for_each_header(node), node.body, level)
        if isinstance(node, ForEachEntry):
            return self.block(
                self.for_each_entry_header(node),
                self.entry_prelude(node) + tuple(node.body),
                level,
            )
        if isinstance(node, Check):
            return self.block(
                f"if (!({self.expr(node.test)}))", (self.fail(node),), level
            )
        raise TypeError(f"Unknown statement node: {node!r}")

    # Language hooks

    def block(self, header: str, body: Sequence[Stmt], level: int) -> List[str]:
        pad = self.indent_unit * level
        lines = [f"{pad}{header} {{"]
        for statement in body:
            lines.extend(self.statement(statement, level + 1))
        lines.append(f"{pad}}}")
        return lines

    def if_block(self, node: If, level: int) -> List[str]:
        lines = self.block(f"if ({self.expr(node.test)})", node.body, level)
        if node.orelse:
            else_lines = self.block("else", node.orelse, level)
            lines[-1] = lines[-1] + " " + else_lines[0].lstrip()
            lines.extend(else_lines[1:])
        return lines

    def declare(self, node: Declare) -> str:
        if node.value is None:
            return f"{node.type_name} {node.name}{self.terminator}"
        return f"{node.type_name} {node.name} = {self.expr(node.value)}{self.terminator}"

    def conditional(self, node: Conditional) -> str:
        return (
            f"({self.expr(node.test)} ? {self.expr(node.then)} : "
            f"{self.expr(node.otherwise)})"
        )

    def for_each_header(self, node: ForEach) -> str:
        return f"for (const auto &{node.item} : {self.expr(node.source)})"

    def for_each_entry_header(self, node: ForEachEntry) -> str:
        return f"for (const auto &[{node.key}, {node.value}] : {self.expr(node.source)})"

    def entry_prelude(self, node: ForEachEntry) -> Tuple[Stmt, ...]:
        return ()

    def fail(self, node: Check) -> Stmt:
        return Line(Ref(f"throw std::invalid_argument({self.string_literal(node.message)})"))

    def collect(self, node: Collect) -> str:
        raise NotImplementedError(f"{type(self).__name__} renders collections as loops")

    def collect_entries(self, node: CollectEntries) -> str:
        raise NotImplementedError(f"{type(self).__name__} renders maps as loops")

    def string_literal(self, value: str) -> str:
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
