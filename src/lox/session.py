"""Drives source text through scan, parse, resolve and interpret."""

from __future__ import annotations

from dataclasses import dataclass, field
import sys
import threading
from typing import Callable, Iterable, TextIO, TypeVar

from .ast import Expr, Stmt
from .errors import LoxError, LoxRuntimeError, StackOverflowFault, StaticError
from .parse import parse_tokens
from .resolve import resolve
from .runtime import Interpreter
from .scan import tokenize

EXIT_OK = 0
EXIT_USAGE = 64
EXIT_STATIC_ERROR = 65
EXIT_NO_INPUT = 66
EXIT_RUNTIME_ERROR = 70

# Each Lox call costs several Python frames, so the default limit of 1000
# would cap Lox recursion at roughly 160 calls.
RECURSION_LIMIT = 60_000
# Runs happen on a worker thread with this much stack, enough for
# RECURSION_LIMIT frames without the process itself crashing.
STACK_SIZE = 512 * 1024 * 1024

T = TypeVar("T")


@dataclass
class RunResult:
    """Outcome of one run: every static error, or the error that aborted it."""

    static_errors: list[StaticError] = field(default_factory=list)
    runtime_error: LoxError | None = None

    @property
    def exit_code(self) -> int:
        if self.static_errors:
            return EXIT_STATIC_ERROR
        if self.runtime_error is not None:
            return EXIT_RUNTIME_ERROR
        return EXIT_OK

    @property
    def ok(self) -> bool:
        return not self.static_errors and self.runtime_error is None


def compile_source(
    source: str, globals: Iterable[str] = ()
) -> tuple[list[Stmt], dict[Expr, int], list[StaticError]]:
    """Scan, parse and resolve. Returns (statements, resolution table, errors).

    Resolution is skipped when scanning or parsing failed; the statements
    must not be evaluated when errors is non-empty. A parser that runs out
    of stack raises StackOverflowFault carrying the errors found so far.
    """
    tokens, errors = tokenize(source)
    try:
        stmts, parse_errors = parse_tokens(tokens)
    except StackOverflowFault as fault:
        fault.errors = errors + fault.errors
        raise
    errors = errors + parse_errors
    if errors:
        return stmts, {}, errors
    try:
        table, resolve_errors = resolve(stmts, globals)
    except RecursionError:
        raise StackOverflowFault() from None
    return stmts, table, resolve_errors


def raise_recursion_limit() -> None:
    if sys.getrecursionlimit() < RECURSION_LIMIT:
        sys.setrecursionlimit(RECURSION_LIMIT)


def call_with_deep_stack(fn: Callable[[], T]) -> T:
    """Call fn on a worker thread with a STACK_SIZE stack and return its result.

    Exceptions raised by fn are re-raised in the calling thread.
    """
    outcome: list[T] = []
    failure: list[BaseException] = []

    def target() -> None:
        try:
            outcome.append(fn())
        except BaseException as e:
            failure.append(e)

    previous = threading.stack_size(STACK_SIZE)
    try:
        worker = threading.Thread(target=target, name="lox-run")
        worker.start()
    finally:
        threading.stack_size(previous)
    worker.join()
    if failure:
        raise failure[0]
    return outcome[0]


class Session:
    """A persistent interpreter fed one source text at a time.

    Globals and resolved locals carry over between runs, which is what the
    interactive prompt needs; static errors never carry over.
    """

    def __init__(self, stdout: TextIO | None = None):
        raise_recursion_limit()
        self.interpreter: Interpreter = Interpreter(stdout)

    def run(self, source: str) -> RunResult:
        return call_with_deep_stack(lambda: self._run(source))

    def _run(self, source: str) -> RunResult:
        try:
            stmts, table, errors = compile_source(
                source, self.interpreter.globals.values.keys()
            )
        except StackOverflowFault as e:
            return RunResult(e.errors, e)
        if errors:
            return RunResult(errors)
        for expr, depth in table.items():
            self.interpreter.resolve(expr, depth)
        return RunResult([], self.interpreter.interpret(stmts))


def format_error(error: LoxError) -> str:
    """Render a diagnostic the way the CLI prints it."""
    if isinstance(error, LoxRuntimeError) or isinstance(error, StackOverflowFault):
        return error.report()
    return str(error)
