"""Lexes Lox source into a flat token list ending with TK_EOF."""

from __future__ import annotations

from .errors import StaticError
from .tokens import (
    KEYWORDS,
    SINGLE_OPS,
    TK_EOF,
    TK_IDENTIFIER,
    TK_NUMBER,
    TK_SLASH,
    TK_STRING,
    TWO_CHAR_OPS,
    Token,
)


def _is_digit(c: str) -> bool:
    return c >= "0" and c <= "9"


def _is_alpha(c: str) -> bool:
    return (c >= "a" and c <= "z") or (c >= "A" and c <= "Z") or c == "_"


def _is_alnum(c: str) -> bool:
    return _is_alpha(c) or _is_digit(c)


class Scanner:
    """Single pass over the source.

    Lexical errors are collected in `errors` and never stop the scan, so one
    run reports every bad character and unterminated string it finds.
    """

    def __init__(self, source: str):
        self.source: str = source
        self.tokens: list[Token] = []
        self.errors: list[StaticError] = []
        self.start: int = 0
        self.current: int = 0
        self.line: int = 1

    def scan_tokens(self) -> list[Token]:
        while not self.at_end():
            self.start = self.current
            self.scan_token()
        self.tokens.append(Token(TK_EOF, "", None, self.line))
        return self.tokens

    # ── Helpers ──────────────────────────────────────────────

    def at_end(self) -> bool:
        return self.current >= len(self.source)

    def advance(self) -> str:
        c = self.source[self.current]
        self.current += 1
        return c

    def match(self, expected: str) -> bool:
        if self.at_end() or self.source[self.current] != expected:
            return False
        self.current += 1
        return True

    def peek(self) -> str:
        if self.at_end():
            return "\0"
        return self.source[self.current]

    def peek_next(self) -> str:
        if self.current + 1 >= len(self.source):
            return "\0"
        return self.source[self.current + 1]

    def add_token(self, kind: str, literal: float | str | None = None) -> None:
        text = self.source[self.start : self.current]
        self.tokens.append(Token(kind, text, literal, self.line))

    def error(self, msg: str) -> None:
        self.errors.append(StaticError(self.line, "", msg))

    # ── Tokens ───────────────────────────────────────────────

    def scan_token(self) -> None:
        c = self.advance()
        if c in SINGLE_OPS:
            self.add_token(SINGLE_OPS[c])
            return
        if c in TWO_CHAR_OPS:
            single, double = TWO_CHAR_OPS[c]
            self.add_token(double if self.match("=") else single)
            return
        if c == "/":
            if self.match("/"):
                # Line comment
                while self.peek() != "\n" and not self.at_end():
                    self.advance()
            else:
                self.add_token(TK_SLASH)
            return
        if c == " " or c == "\r" or c == "\t":
            return
        if c == "\n":
            self.line += 1
            return
        if c == '"':
            self.string()
            return
        if _is_digit(c):
            self.number()
            return
        if _is_alpha(c):
            self.identifier()
            return
        self.error("Unexpected character.")

    def string(self) -> None:
        while self.peek() != '"' and not self.at_end():
            if self.peek() == "\n":
                self.line += 1
            self.advance()
        if self.at_end():
            self.error("Unterminated string.")
            return
        self.advance()  # closing "
        value = self.source[self.start + 1 : self.current - 1]
        self.add_token(TK_STRING, value)

    def number(self) -> None:
        while _is_digit(self.peek()):
            self.advance()
        if self.peek() == "." and _is_digit(self.peek_next()):
            self.advance()
            while _is_digit(self.peek()):
                self.advance()
        self.add_token(TK_NUMBER, float(self.source[self.start : self.current]))

    def identifier(self) -> None:
        while _is_alnum(self.peek()):
            self.advance()
        text = self.source[self.start : self.current]
        self.add_token(KEYWORDS.get(text, TK_IDENTIFIER))


def tokenize(source: str) -> tuple[list[Token], list[StaticError]]:
    """Scan Lox source. Returns (tokens, lexical errors)."""
    scanner = Scanner(source)
    tokens = scanner.scan_tokens()
    return tokens, scanner.errors
