"""Scanner tests."""

import re

from lox.scan import tokenize
from lox.tokens import (
    KEYWORDS,
    TK_BANG_EQUAL,
    TK_EOF,
    TK_EQUAL,
    TK_EQUAL_EQUAL,
    TK_IDENTIFIER,
    TK_LESS_EQUAL,
    TK_NUMBER,
    TK_SLASH,
    TK_STRING,
)


def _kinds(source: str) -> list[str]:
    tokens, errors = tokenize(source)
    assert errors == [], [str(e) for e in errors]
    return [t.kind for t in tokens]


def test_empty_source_is_just_eof():
    tokens, errors = tokenize("")
    assert errors == []
    assert len(tokens) == 1
    assert tokens[0].kind == TK_EOF
    assert tokens[0].line == 1


def test_two_char_operators_are_greedy():
    assert _kinds("!= == <= = /") == [
        TK_BANG_EQUAL,
        TK_EQUAL_EQUAL,
        TK_LESS_EQUAL,
        TK_EQUAL,
        TK_SLASH,
        TK_EOF,
    ]


def test_keywords_and_identifiers():
    for word, kind in KEYWORDS.items():
        assert _kinds(word) == [kind, TK_EOF]
    assert _kinds("classy _x or2") == [TK_IDENTIFIER, TK_IDENTIFIER, TK_IDENTIFIER, TK_EOF]


def test_numbers_are_floats():
    tokens, _ = tokenize("12 3.5 7.")
    assert tokens[0].kind == TK_NUMBER
    assert tokens[0].literal == 12.0
    assert isinstance(tokens[0].literal, float)
    assert tokens[1].literal == 3.5
    # Trailing dot is not part of the number.
    assert tokens[2].literal == 7.0
    assert tokens[3].lexeme == "."


def test_string_literal_has_no_escapes():
    tokens, _ = tokenize('"a\\nb"')
    assert tokens[0].kind == TK_STRING
    assert tokens[0].literal == "a\\nb"
    assert tokens[0].lexeme == '"a\\nb"'


def test_multiline_string_advances_line():
    tokens, _ = tokenize('"one\ntwo" x')
    assert tokens[0].literal == "one\ntwo"
    assert tokens[1].line == 2


def test_comments_and_newlines():
    tokens, _ = tokenize("a // comment ( ) {\nb")
    assert [t.lexeme for t in tokens] == ["a", "b", ""]
    assert tokens[1].line == 2


def test_unexpected_characters_do_not_stop_scanning():
    tokens, errors = tokenize("a @ b # c")
    assert [t.lexeme for t in tokens] == ["a", "b", "c", ""]
    assert [str(e) for e in errors] == [
        "[line 1] Error: Unexpected character.",
        "[line 1] Error: Unexpected character.",
    ]


def test_unterminated_string_is_reported_and_dropped():
    tokens, errors = tokenize('print "oops\n')
    assert [t.kind for t in tokens][-1] == TK_EOF
    assert len(tokens) == 2
    assert len(errors) == 1
    assert errors[0].msg == "Unterminated string."
    assert errors[0].line == 2


def test_lexemes_reproduce_significant_characters():
    source = 'var x = 10; // set\nfun f(a, b) { return a >= b and !nil; }\nprint "hi there" + x;'
    tokens, errors = tokenize(source)
    assert errors == []
    without_comments = re.sub(r"//[^\n]*", "", source)
    joined = "".join(t.lexeme for t in tokens)
    # Whitespace inside string literals is significant, so compare with the
    # string contents masked out.
    assert re.sub(r"\s", "", joined.replace("hi there", "")) == re.sub(
        r"\s", "", without_comments.replace("hi there", "")
    )
