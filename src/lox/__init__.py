"""Public API for the Lox scanner, parser, resolver and interpreter."""

from __future__ import annotations

from typing import TextIO

from .ast import Stmt
from .errors import (
    LoxError as LoxError,
    LoxRuntimeError as LoxRuntimeError,
    StackOverflowFault as StackOverflowFault,
    StaticError as StaticError,
)
from .parse import parse_tokens
from .runtime import Interpreter as Interpreter
from .scan import tokenize as tokenize
from .session import (
    RunResult as RunResult,
    Session as Session,
    call_with_deep_stack,
    compile_source,
    raise_recursion_limit,
)


def parse(source: str) -> tuple[list[Stmt], list[StaticError]]:
    """Scan and parse Lox source. Returns (statements, static errors)."""
    tokens, errors = tokenize(source)
    stmts, parse_errors = parse_tokens(tokens)
    return stmts, errors + parse_errors


def check(source: str) -> list[StaticError]:
    """Scan, parse and resolve Lox source. Returns static errors (empty = ok)."""
    raise_recursion_limit()
    natives = Interpreter().globals.values.keys()
    _, _, errors = call_with_deep_stack(lambda: compile_source(source, natives))
    return errors


def run(source: str, stdout: TextIO | None = None) -> RunResult:
    """Run Lox source once in a fresh session."""
    return Session(stdout).run(source)
