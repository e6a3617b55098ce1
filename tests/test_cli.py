"""CLI tests for the lox entry point."""

import io
import sys
from pathlib import Path

from lox.cli import main


def _script(tmp_path: Path, source: str) -> str:
    path = tmp_path / "script.lox"
    path.write_text(source)
    return str(path)


def test_run_file_success(tmp_path, capsys):
    code = main([_script(tmp_path, 'print "hello";')])
    out = capsys.readouterr()
    assert code == 0
    assert out.out == "hello\n"
    assert out.err == ""


def test_run_file_static_error(tmp_path, capsys):
    code = main([_script(tmp_path, "print 1;\nvar = 2;")])
    out = capsys.readouterr()
    assert code == 65
    assert out.out == "[line 2] Error at '=': Expect variable name.\n"


def test_run_file_runtime_error(tmp_path, capsys):
    code = main([_script(tmp_path, 'print "a";\nprint nope;\nprint "b";')])
    out = capsys.readouterr()
    assert code == 70
    assert out.out == "a\n"
    assert out.err == "Undefined variable 'nope'.\n[line 2]\n"


def test_missing_file(tmp_path, capsys):
    code = main([str(tmp_path / "missing.lox")])
    out = capsys.readouterr()
    assert code == 66
    assert "No such file or directory" in out.err


def test_too_many_arguments(capsys):
    code = main(["a.lox", "b.lox"])
    out = capsys.readouterr()
    assert code == 64
    assert out.err == "Usage: lox [script]\n"


def test_unknown_flag(capsys):
    assert main(["--nope"]) == 64


def test_help(capsys):
    assert main(["--help"]) == 0
    assert "lox [OPTIONS] [SCRIPT]" in capsys.readouterr().out


def test_prompt_keeps_state_between_lines(monkeypatch, capsys):
    lines = "var x = 10;\nprint x +;\nprint x + 1;\n"
    monkeypatch.setattr(sys, "stdin", io.StringIO(lines))
    code = main([])
    out = capsys.readouterr()
    assert code == 0
    assert out.out == (
        "> > [line 1] Error at ';': Expect expression.\n> 11\n> \n"
    )
