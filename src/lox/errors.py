"""Static errors, runtime errors, and fatal faults."""

from __future__ import annotations

from .tokens import TK_EOF, Token


class LoxError(Exception):
    """Base error for scanning, parsing, resolving and evaluating Lox."""


class StaticError(LoxError):
    """Error found before evaluation: lexical, syntax, or resolution.

    `where` is empty for lexical errors, otherwise " at end" or " at 'x'".
    """

    def __init__(self, line: int, where: str, msg: str):
        self.line: int = line
        self.where: str = where
        self.msg: str = msg
        super().__init__("[line " + str(line) + "] Error" + where + ": " + msg)

    @classmethod
    def at_token(cls, token: Token, msg: str) -> StaticError:
        if token.kind == TK_EOF:
            return cls(token.line, " at end", msg)
        return cls(token.line, " at '" + token.lexeme + "'", msg)


class LoxRuntimeError(LoxError):
    """Error raised during evaluation, attributed to the offending token."""

    def __init__(self, token: Token, msg: str):
        self.token: Token = token
        self.msg: str = msg
        super().__init__(msg)

    def report(self) -> str:
        return self.msg + "\n[line " + str(self.token.line) + "]"


class StackOverflowFault(LoxError):
    """The host stack ran out while parsing or evaluating.

    `errors` holds the static errors found before the parser ran out, so
    they are reported alongside the fault.
    """

    def __init__(
        self, line: int | None = None, errors: list[StaticError] | None = None
    ):
        self.line: int | None = line
        self.errors: list[StaticError] = errors if errors is not None else []
        self.msg: str = "Stack overflow."
        super().__init__(self.msg)

    def report(self) -> str:
        if self.line is None:
            return self.msg
        return self.msg + "\n[line " + str(self.line) + "]"
