"""Lox AST — parse-time node definitions.

Nodes are frozen and compare by identity: the resolver keys its table by
node, so two structurally equal `Variable` nodes are distinct entries.
"""

from __future__ import annotations

from dataclasses import dataclass

from .tokens import Token


# ============================================================
# EXPRESSIONS
# ============================================================


@dataclass(frozen=True, eq=False)
class Expr:
    """Base for all expressions."""


@dataclass(frozen=True, eq=False)
class Assign(Expr):
    """name = value."""

    name: Token
    value: Expr


@dataclass(frozen=True, eq=False)
class Binary(Expr):
    """left op right, for arithmetic, comparison and equality."""

    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True, eq=False)
class Call(Expr):
    """callee(arguments). paren is the closing ')' for error lines."""

    callee: Expr
    paren: Token
    arguments: list[Expr]


@dataclass(frozen=True, eq=False)
class Get(Expr):
    """target.name."""

    target: Expr
    name: Token


@dataclass(frozen=True, eq=False)
class Grouping(Expr):
    """( expression )."""

    expression: Expr


@dataclass(frozen=True, eq=False)
class Literal(Expr):
    """nil, true, false, number, or string."""

    value: float | str | bool | None


@dataclass(frozen=True, eq=False)
class Logical(Expr):
    """left and/or right."""

    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True, eq=False)
class Set(Expr):
    """target.name = value."""

    target: Expr
    name: Token
    value: Expr


@dataclass(frozen=True, eq=False)
class Unary(Expr):
    """!right or -right."""

    operator: Token
    right: Expr


@dataclass(frozen=True, eq=False)
class Variable(Expr):
    name: Token


# ============================================================
# STATEMENTS
# ============================================================


@dataclass(frozen=True, eq=False)
class Stmt:
    """Base for all statements."""


@dataclass(frozen=True, eq=False)
class Block(Stmt):
    """{ statements }."""

    statements: list[Stmt]


@dataclass(frozen=True, eq=False)
class Function(Stmt):
    """fun name(params) { body }."""

    name: Token
    params: list[Token]
    body: list[Stmt]


@dataclass(frozen=True, eq=False)
class Class(Stmt):
    """class Name { methods }."""

    name: Token
    methods: list[Function]


@dataclass(frozen=True, eq=False)
class Expression(Stmt):
    """Bare expression as statement."""

    expression: Expr


@dataclass(frozen=True, eq=False)
class If(Stmt):
    """if (condition) then_branch else else_branch."""

    condition: Expr
    then_branch: Stmt
    else_branch: Stmt | None


@dataclass(frozen=True, eq=False)
class Print(Stmt):
    expression: Expr


@dataclass(frozen=True, eq=False)
class Return(Stmt):
    """return value?; keyword is kept for error lines."""

    keyword: Token
    value: Expr | None


@dataclass(frozen=True, eq=False)
class Var(Stmt):
    """var name = initializer?."""

    name: Token
    initializer: Expr | None


@dataclass(frozen=True, eq=False)
class While(Stmt):
    """while (condition) body. `for` loops desugar to this."""

    condition: Expr
    body: Stmt
