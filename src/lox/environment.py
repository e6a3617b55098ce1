"""Chained name -> value frames."""

from __future__ import annotations

from .errors import LoxRuntimeError
from .tokens import Token


class Environment:
    """One frame of bindings with an optional enclosing frame.

    A frame stays alive as long as anything holds it: the active frame
    chain, or a closure that captured it. Frames are shared by reference,
    so two closures over one frame see each other's writes.
    """

    def __init__(self, enclosing: Environment | None = None):
        self.enclosing: Environment | None = enclosing
        self.values: dict[str, object] = {}

    def define(self, name: str, value: object) -> None:
        """Bind name in this frame, shadowing any outer binding."""
        self.values[name] = value

    def get(self, name: Token) -> object:
        env: Environment | None = self
        while env is not None:
            if name.lexeme in env.values:
                return env.values[name.lexeme]
            env = env.enclosing
        raise LoxRuntimeError(name, "Undefined variable '" + name.lexeme + "'.")

    def assign(self, name: Token, value: object) -> None:
        env: Environment | None = self
        while env is not None:
            if name.lexeme in env.values:
                env.values[name.lexeme] = value
                return
            env = env.enclosing
        raise LoxRuntimeError(name, "Undefined variable '" + name.lexeme + "'.")

    # ---- Resolved access ---------------------------------------------------
    # Distances come from the resolver only; no name search is done here.

    def ancestor(self, distance: int) -> Environment:
        env = self
        for _ in range(distance):
            assert env.enclosing is not None, "resolved distance past global frame"
            env = env.enclosing
        return env

    def get_at(self, distance: int, name: str) -> object:
        return self.ancestor(distance).values[name]

    def assign_at(self, distance: int, name: Token, value: object) -> None:
        self.ancestor(distance).values[name.lexeme] = value
