"""Token kinds, keywords, and the Token record."""

from __future__ import annotations

from dataclasses import dataclass


# Single-character tokens
TK_LEFT_PAREN = "LEFT_PAREN"
TK_RIGHT_PAREN = "RIGHT_PAREN"
TK_LEFT_BRACE = "LEFT_BRACE"
TK_RIGHT_BRACE = "RIGHT_BRACE"
TK_COMMA = "COMMA"
TK_DOT = "DOT"
TK_MINUS = "MINUS"
TK_PLUS = "PLUS"
TK_SEMICOLON = "SEMICOLON"
TK_SLASH = "SLASH"
TK_STAR = "STAR"

# One or two character tokens
TK_BANG = "BANG"
TK_BANG_EQUAL = "BANG_EQUAL"
TK_EQUAL = "EQUAL"
TK_EQUAL_EQUAL = "EQUAL_EQUAL"
TK_GREATER = "GREATER"
TK_GREATER_EQUAL = "GREATER_EQUAL"
TK_LESS = "LESS"
TK_LESS_EQUAL = "LESS_EQUAL"

# Literals
TK_IDENTIFIER = "IDENTIFIER"
TK_STRING = "STRING"
TK_NUMBER = "NUMBER"

# Keywords
TK_AND = "AND"
TK_CLASS = "CLASS"
TK_ELSE = "ELSE"
TK_FALSE = "FALSE"
TK_FUN = "FUN"
TK_FOR = "FOR"
TK_IF = "IF"
TK_NIL = "NIL"
TK_OR = "OR"
TK_PRINT = "PRINT"
TK_RETURN = "RETURN"
TK_SUPER = "SUPER"
TK_THIS = "THIS"
TK_TRUE = "TRUE"
TK_VAR = "VAR"
TK_WHILE = "WHILE"

TK_EOF = "EOF"

KEYWORDS: dict[str, str] = {
    "and": TK_AND,
    "class": TK_CLASS,
    "else": TK_ELSE,
    "false": TK_FALSE,
    "for": TK_FOR,
    "fun": TK_FUN,
    "if": TK_IF,
    "nil": TK_NIL,
    "or": TK_OR,
    "print": TK_PRINT,
    "return": TK_RETURN,
    "super": TK_SUPER,
    "this": TK_THIS,
    "true": TK_TRUE,
    "var": TK_VAR,
    "while": TK_WHILE,
}

# Operators whose first character may be followed by '='
TWO_CHAR_OPS: dict[str, tuple[str, str]] = {
    "!": (TK_BANG, TK_BANG_EQUAL),
    "=": (TK_EQUAL, TK_EQUAL_EQUAL),
    "<": (TK_LESS, TK_LESS_EQUAL),
    ">": (TK_GREATER, TK_GREATER_EQUAL),
}

SINGLE_OPS: dict[str, str] = {
    "(": TK_LEFT_PAREN,
    ")": TK_RIGHT_PAREN,
    "{": TK_LEFT_BRACE,
    "}": TK_RIGHT_BRACE,
    ",": TK_COMMA,
    ".": TK_DOT,
    "-": TK_MINUS,
    "+": TK_PLUS,
    ";": TK_SEMICOLON,
    "*": TK_STAR,
}


@dataclass(frozen=True)
class Token:
    """A scanned token: kind, exact source text, literal value, and line."""

    kind: str
    lexeme: str
    literal: float | str | None
    line: int

    def __repr__(self) -> str:
        return (
            "Token("
            + self.kind
            + ", "
            + repr(self.lexeme)
            + ", "
            + repr(self.literal)
            + ", "
            + str(self.line)
            + ")"
        )
