"""Command-line entry point: run a .lox file, or start an interactive prompt."""

from __future__ import annotations

import sys
from typing import TextIO

from .session import (
    EXIT_NO_INPUT,
    EXIT_OK,
    EXIT_USAGE,
    RunResult,
    Session,
    format_error,
)


USAGE: str = """\
lox [OPTIONS] [SCRIPT]

Run a Lox script, or start an interactive prompt when no script is given.

Options:
  --help             Show this help message
"""


def report(result: RunResult) -> None:
    """Static errors go to stdout, runtime errors to stderr."""
    for err in result.static_errors:
        print(str(err))
    if result.runtime_error is not None:
        print(format_error(result.runtime_error), file=sys.stderr)


def run_file(filepath: str) -> int:
    try:
        with open(filepath, "rb") as f:
            raw = f.read()
    except FileNotFoundError:
        print("lox: " + filepath + ": No such file or directory", file=sys.stderr)
        return EXIT_NO_INPUT
    except OSError as e:
        print("lox: " + filepath + ": " + str(e), file=sys.stderr)
        return EXIT_NO_INPUT
    try:
        source = raw.decode("utf-8")
    except ValueError:
        print("lox: " + filepath + ": invalid utf-8", file=sys.stderr)
        return EXIT_NO_INPUT

    result = Session().run(source)
    report(result)
    return result.exit_code


def run_prompt(stdin: TextIO | None = None) -> int:
    """Read-eval-print loop; one session, so globals outlive each line."""
    stream = stdin if stdin is not None else sys.stdin
    session = Session()
    while True:
        print("> ", end="", flush=True)
        line = stream.readline()
        if line == "":
            print()
            return EXIT_OK
        report(session.run(line))


def main(argv: list[str] | None = None) -> int:
    args = argv if argv is not None else sys.argv[1:]
    filepath: str = ""
    for arg in args:
        if arg == "--help" or arg == "-h":
            print(USAGE, end="")
            return EXIT_OK
        if arg.startswith("-"):
            print("lox: unknown flag '" + arg + "'", file=sys.stderr)
            return EXIT_USAGE
        if filepath != "":
            print("Usage: lox [script]", file=sys.stderr)
            return EXIT_USAGE
        filepath = arg
    if filepath == "":
        return run_prompt()
    return run_file(filepath)


if __name__ == "__main__":
    sys.exit(main())
