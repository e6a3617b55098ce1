"""Environment chain tests, plus resolver distances checked against real frames."""

import io
import random

import pytest

from lox import LoxRuntimeError, parse, run
from lox.ast import Variable
from lox.environment import Environment
from lox.resolve import resolve
from lox.runtime import Interpreter
from lox.tokens import TK_IDENTIFIER, Token


def _name(lexeme: str) -> Token:
    return Token(TK_IDENTIFIER, lexeme, None, 1)


def test_define_shadows_without_touching_outer():
    outer = Environment()
    outer.define("a", 1.0)
    inner = Environment(outer)
    inner.define("a", 2.0)
    assert inner.get(_name("a")) == 2.0
    assert outer.get(_name("a")) == 1.0


def test_get_walks_outward():
    outer = Environment()
    outer.define("a", "x")
    inner = Environment(Environment(outer))
    assert inner.get(_name("a")) == "x"


def test_get_undefined():
    with pytest.raises(LoxRuntimeError) as exc:
        Environment(Environment()).get(_name("nope"))
    assert exc.value.msg == "Undefined variable 'nope'."


def test_assign_updates_defining_frame():
    outer = Environment()
    outer.define("a", 1.0)
    inner = Environment(outer)
    inner.assign(_name("a"), 5.0)
    assert outer.values["a"] == 5.0
    assert "a" not in inner.values


def test_assign_never_creates_binding():
    env = Environment()
    with pytest.raises(LoxRuntimeError) as exc:
        env.assign(_name("a"), 1.0)
    assert exc.value.msg == "Undefined variable 'a'."
    assert env.values == {}


def test_distance_access_skips_name_search():
    root = Environment()
    root.define("a", "root")
    mid = Environment(root)
    mid.define("a", "mid")
    leaf = Environment(mid)
    assert leaf.ancestor(0) is leaf
    assert leaf.ancestor(2) is root
    assert leaf.get_at(2, "a") == "root"
    leaf.assign_at(1, _name("a"), "changed")
    assert mid.values["a"] == "changed"
    assert root.values["a"] == "root"


class _FrameRecorder(Interpreter):
    """Records, for each resolved Variable, which frame actually defines it."""

    def __init__(self) -> None:
        super().__init__(io.StringIO())
        self.seen: list[tuple[int, int]] = []

    def evaluate(self, expr):
        if isinstance(expr, Variable) and expr in self.locals:
            links = 0
            env = self.environment
            while expr.name.lexeme not in env.values:
                env = env.enclosing
                links += 1
            self.seen.append((self.locals[expr], links))
        return super().evaluate(expr)


def test_resolved_distances_match_runtime_links():
    src = """
var g = 0;
fun make(p) {
    var a = p;
    {
        var b = a;
        {
            fun get() { return a + b + p; }
            print get();
        }
        {
            var a = a + b;
            print a;
        }
    }
    for (var i = 0; i < 2; i = i + 1) {
        var c = i;
        { print c + a; }
    }
}
make(1);
"""
    stmts, errors = parse(src)
    assert errors == []
    table, errors = resolve(stmts)
    assert errors == []
    interp = _FrameRecorder()
    for expr, depth in table.items():
        interp.resolve(expr, depth)
    assert interp.interpret(stmts) is None
    assert interp.seen
    for recorded, actual in interp.seen:
        assert recorded == actual


def _random_program(rng: random.Random) -> tuple[str, list[str]]:
    """Nested blocks with shadowing; returns (source, expected prints)."""
    names = ["a", "b", "c"]
    lines: list[str] = []
    expected: list[str] = []
    counter = [0]

    def emit_block(depth: int, visible: dict[str, int]) -> None:
        local: dict[str, int] = dict(visible)
        declared: set[str] = set()
        for _ in range(rng.randint(1, 4)):
            choice = rng.random()
            if choice < 0.4:
                name = rng.choice(names)
                if name in declared:
                    continue
                counter[0] += 1
                declared.add(name)
                local[name] = counter[0]
                lines.append("var " + name + " = " + str(counter[0]) + ";")
            elif choice < 0.7 and local:
                name = rng.choice(sorted(local))
                lines.append("print " + name + ";")
                expected.append(str(local[name]))
            elif depth < 5:
                lines.append("{")
                emit_block(depth + 1, local)
                lines.append("}")
        for name in sorted(local):
            lines.append("print " + name + ";")
            expected.append(str(local[name]))

    lines.append("{")
    emit_block(0, {})
    lines.append("}")
    return "\n".join(lines), expected


@pytest.mark.parametrize("seed", range(25))
def test_random_nested_shadowing_reads_innermost(seed: int):
    source, expected = _random_program(random.Random(seed))
    out = io.StringIO()
    result = run(source, stdout=out)
    assert result.ok, source
    assert out.getvalue().split() == expected, source

