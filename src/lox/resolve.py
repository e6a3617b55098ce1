"""Lox resolver — static scope analysis over a parsed program.

Walks the statements once, before evaluation, and records for every local
variable reference how many environment frames separate it from the frame
that declares the name. Globals are left unrecorded so the interpreter
looks them up by name, which keeps forward references and REPL
redefinition working.
"""

from __future__ import annotations

from typing import Iterable

from .ast import (
    Assign,
    Binary,
    Block,
    Call,
    Class,
    Expr,
    Expression,
    Function,
    Get,
    Grouping,
    If,
    Literal,
    Logical,
    Print,
    Return,
    Set,
    Stmt,
    Unary,
    Var,
    Variable,
    While,
)
from .errors import StaticError
from .tokens import Token

FN_NONE = "NONE"
FN_FUNCTION = "FUNCTION"


class Resolver:
    def __init__(self, globals: Iterable[str] = ()) -> None:
        self.errors: list[StaticError] = []
        self.locals: dict[Expr, int] = {}
        # Innermost scope last; the global scope is never pushed.
        self.scopes: list[dict[str, bool]] = []
        self.current_function: str = FN_NONE
        # Names declared at top level, by this program or an earlier run.
        self.globals: set[str] = set(globals)

    def error(self, token: Token, msg: str) -> None:
        self.errors.append(StaticError.at_token(token, msg))

    # ── Scope management ──────────────────────────────────────

    def begin_scope(self) -> None:
        self.scopes.append({})

    def end_scope(self) -> None:
        self.scopes.pop()

    def declare(self, name: Token) -> None:
        if len(self.scopes) == 0:
            self.globals.add(name.lexeme)
            return
        scope = self.scopes[-1]
        if name.lexeme in scope:
            self.error(name, "Already a variable with this name in this scope.")
        scope[name.lexeme] = False

    def define(self, name: Token) -> None:
        if len(self.scopes) == 0:
            return
        self.scopes[-1][name.lexeme] = True

    def resolve_local(self, expr: Expr, name: Token) -> None:
        # Distance 0 is the innermost scope.
        distance = 0
        for scope in reversed(self.scopes):
            if name.lexeme in scope:
                self.locals[expr] = distance
                return
            distance += 1

    def resolve_initializer_read(self, expr: Variable) -> None:
        """A read of a name whose innermost declaration is still initializing.

        It binds to the next declaration outward, local or global, so
        `{ var a = a + 1; }` reads the outer `a`. Without one it is an error.
        """
        name = expr.name.lexeme
        distance = 1
        for scope in reversed(self.scopes[:-1]):
            if name in scope:
                self.locals[expr] = distance
                return
            distance += 1
        if name not in self.globals:
            self.error(expr.name, "Can't read local variable in its own initializer.")

    # ── Statements ────────────────────────────────────────────

    def resolve_stmts(self, stmts: list[Stmt]) -> None:
        for s in stmts:
            self.resolve_stmt(s)

    def resolve_stmt(self, stmt: Stmt) -> None:
        if isinstance(stmt, Block):
            self.begin_scope()
            self.resolve_stmts(stmt.statements)
            self.end_scope()
        elif isinstance(stmt, Class):
            # Method bodies are not resolved; see runtime.LoxClass.
            self.declare(stmt.name)
            self.define(stmt.name)
        elif isinstance(stmt, Expression):
            self.resolve_expr(stmt.expression)
        elif isinstance(stmt, Function):
            # Defined before the body so the function can recurse.
            self.declare(stmt.name)
            self.define(stmt.name)
            self.resolve_function(stmt, FN_FUNCTION)
        elif isinstance(stmt, If):
            self.resolve_expr(stmt.condition)
            self.resolve_stmt(stmt.then_branch)
            if stmt.else_branch is not None:
                self.resolve_stmt(stmt.else_branch)
        elif isinstance(stmt, Print):
            self.resolve_expr(stmt.expression)
        elif isinstance(stmt, Return):
            if self.current_function == FN_NONE:
                self.error(stmt.keyword, "Can't return from top-level code.")
            if stmt.value is not None:
                self.resolve_expr(stmt.value)
        elif isinstance(stmt, Var):
            self.declare(stmt.name)
            if stmt.initializer is not None:
                self.resolve_expr(stmt.initializer)
            self.define(stmt.name)
        elif isinstance(stmt, While):
            self.resolve_expr(stmt.condition)
            self.resolve_stmt(stmt.body)
        else:
            raise TypeError("unhandled statement type: " + type(stmt).__name__)

    def resolve_function(self, fn: Function, kind: str) -> None:
        enclosing = self.current_function
        self.current_function = kind
        self.begin_scope()
        for param in fn.params:
            self.declare(param)
            self.define(param)
        self.resolve_stmts(fn.body)
        self.end_scope()
        self.current_function = enclosing

    # ── Expressions ───────────────────────────────────────────

    def resolve_expr(self, expr: Expr) -> None:
        if isinstance(expr, Variable):
            if len(self.scopes) > 0 and self.scopes[-1].get(expr.name.lexeme) is False:
                self.resolve_initializer_read(expr)
            else:
                self.resolve_local(expr, expr.name)
        elif isinstance(expr, Assign):
            self.resolve_expr(expr.value)
            self.resolve_local(expr, expr.name)
        elif isinstance(expr, Binary) or isinstance(expr, Logical):
            self.resolve_expr(expr.left)
            self.resolve_expr(expr.right)
        elif isinstance(expr, Call):
            self.resolve_expr(expr.callee)
            for arg in expr.arguments:
                self.resolve_expr(arg)
        elif isinstance(expr, Get):
            # Property names are dynamic; only the target is resolved.
            self.resolve_expr(expr.target)
        elif isinstance(expr, Set):
            self.resolve_expr(expr.value)
            self.resolve_expr(expr.target)
        elif isinstance(expr, Grouping):
            self.resolve_expr(expr.expression)
        elif isinstance(expr, Unary):
            self.resolve_expr(expr.right)
        elif isinstance(expr, Literal):
            pass
        else:
            raise TypeError("unhandled expression type: " + type(expr).__name__)


# ============================================================
# PUBLIC API
# ============================================================


def resolve(
    stmts: list[Stmt], globals: Iterable[str] = ()
) -> tuple[dict[Expr, int], list[StaticError]]:
    """Resolve a parsed program. Returns (resolution table, static errors).

    `globals` names the top-level bindings that already exist, such as
    natives and names defined by earlier runs of a session.
    """
    resolver = Resolver(globals)
    resolver.resolve_stmts(stmts)
    return resolver.locals, resolver.errors
