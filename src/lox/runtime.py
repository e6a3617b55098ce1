"""Lox runtime — runtime values and the tree-walking interpreter.

Lox values map onto Python values directly: nil is None, booleans are
bool, numbers are always float, strings are str. Callables, classes and
instances are the classes below.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import math
import sys
import time
from typing import Callable, TextIO

from .ast import (
    Assign,
    Binary,
    Block,
    Call,
    Class,
    Expr,
    Expression,
    Function,
    Get,
    Grouping,
    If,
    Literal,
    Logical,
    Print,
    Return,
    Set,
    Stmt,
    Unary,
    Var,
    Variable,
    While,
)
from .environment import Environment
from .errors import LoxError, LoxRuntimeError, StackOverflowFault
from .tokens import (
    TK_BANG,
    TK_BANG_EQUAL,
    TK_EQUAL_EQUAL,
    TK_GREATER,
    TK_GREATER_EQUAL,
    TK_LESS,
    TK_LESS_EQUAL,
    TK_MINUS,
    TK_OR,
    TK_PLUS,
    TK_SLASH,
    TK_STAR,
    Token,
)


# ============================================================
# Values
# ============================================================


class LoxCallable:
    """Anything that can appear before '(' in a call expression."""

    def arity(self) -> int:
        raise NotImplementedError

    def call(self, interpreter: Interpreter, arguments: list[object]) -> object:
        raise NotImplementedError


@dataclass(eq=False)
class NativeFunction(LoxCallable):
    """Host function with fixed arity, e.g. clock()."""

    name: str
    fn_arity: int
    fn: Callable[[Interpreter, list[object]], object]

    def arity(self) -> int:
        return self.fn_arity

    def call(self, interpreter: Interpreter, arguments: list[object]) -> object:
        return self.fn(interpreter, arguments)

    def __str__(self) -> str:
        return "<native fn>"


@dataclass(eq=False)
class LoxFunction(LoxCallable):
    """A declared function plus the frame that was active at declaration."""

    declaration: Function
    closure: Environment

    def arity(self) -> int:
        return len(self.declaration.params)

    def call(self, interpreter: Interpreter, arguments: list[object]) -> object:
        env = Environment(self.closure)
        for param, arg in zip(self.declaration.params, arguments):
            env.define(param.lexeme, arg)
        result = interpreter.execute_block(self.declaration.body, env)
        if result is None:
            return None
        return result.value

    def __str__(self) -> str:
        return "<fn " + self.declaration.name.lexeme + ">"


@dataclass(eq=False)
class LoxClass(LoxCallable):
    """A class value. Calling it makes an instance; it takes no arguments.

    `methods` is carried but never filled in or consulted: method dispatch
    and `this` are not supported.
    """

    name: str
    methods: dict[str, LoxFunction] = field(default_factory=dict)

    def arity(self) -> int:
        return 0

    def call(self, interpreter: Interpreter, arguments: list[object]) -> object:
        return LoxInstance(self)

    def __str__(self) -> str:
        return self.name


@dataclass(eq=False)
class LoxInstance:
    klass: LoxClass
    fields: dict[str, object] = field(default_factory=dict)

    def get(self, name: Token) -> object:
        if name.lexeme in self.fields:
            return self.fields[name.lexeme]
        raise LoxRuntimeError(name, "Undefined property '" + name.lexeme + "'.")

    def set(self, name: Token, value: object) -> None:
        self.fields[name.lexeme] = value

    def __str__(self) -> str:
        return self.klass.name + " instance"


def _native_clock(interpreter: Interpreter, arguments: list[object]) -> object:
    return time.time()


# ============================================================
# Statement results
# ============================================================


@dataclass
class Returning:
    """A `return` unwinding to the nearest call; None means normal completion."""

    value: object


# ============================================================
# Value helpers
# ============================================================


def is_truthy(value: object) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(a: object, b: object) -> bool:
    # Values of different types are never equal, so true != 1.
    if type(a) is not type(b):
        return False
    if isinstance(a, float) and isinstance(b, float):
        # Bitwise-style: NaN equals NaN, 0 and -0 differ.
        if math.isnan(a) or math.isnan(b):
            return math.isnan(a) and math.isnan(b)
        return a == b and math.copysign(1.0, a) == math.copysign(1.0, b)
    return a == b


def _format_number(n: float) -> str:
    if math.isnan(n):
        return "NaN"
    if math.isinf(n):
        return "Infinity" if n > 0 else "-Infinity"
    if n.is_integer():
        if n == 0 and math.copysign(1.0, n) < 0:
            return "-0"
        return str(int(n))
    return repr(n)


def stringify(value: object) -> str:
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return _format_number(value)
    return str(value)


def _divide(a: float, b: float) -> float:
    # IEEE-754 semantics: x/0 is an infinity, 0/0 is NaN.
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


# ============================================================
# Interpreter
# ============================================================


class Interpreter:
    """Evaluates resolved statements.

    One instance is meant to live for a whole session: `globals` and the
    resolution table `locals` persist across calls to `interpret`.
    """

    def __init__(self, stdout: TextIO | None = None):
        self.stdout: TextIO = stdout if stdout is not None else sys.stdout
        self.globals: Environment = Environment()
        self.environment: Environment = self.globals
        self.locals: dict[Expr, int] = {}
        self.globals.define("clock", NativeFunction("clock", 0, _native_clock))

    def resolve(self, expr: Expr, depth: int) -> None:
        self.locals[expr] = depth

    def interpret(self, statements: list[Stmt]) -> LoxError | None:
        """Run top-level statements; returns the error that aborted them, if any."""
        try:
            for st in statements:
                self.execute(st)
        except LoxRuntimeError as e:
            return e
        except RecursionError:
            self.environment = self.globals
            return StackOverflowFault()
        return None

    # ---- Statements --------------------------------------------------------

    def execute_block(
        self, statements: list[Stmt], environment: Environment
    ) -> Returning | None:
        previous = self.environment
        try:
            self.environment = environment
            for st in statements:
                result = self.execute(st)
                if result is not None:
                    return result
            return None
        finally:
            self.environment = previous

    def execute(self, stmt: Stmt) -> Returning | None:
        if isinstance(stmt, Expression):
            self.evaluate(stmt.expression)
            return None

        if isinstance(stmt, Print):
            value = self.evaluate(stmt.expression)
            self.stdout.write(stringify(value) + "\n")
            return None

        if isinstance(stmt, Var):
            value: object = None
            if stmt.initializer is not None:
                value = self.evaluate(stmt.initializer)
            self.environment.define(stmt.name.lexeme, value)
            return None

        if isinstance(stmt, Block):
            return self.execute_block(stmt.statements, Environment(self.environment))

        if isinstance(stmt, If):
            if is_truthy(self.evaluate(stmt.condition)):
                return self.execute(stmt.then_branch)
            if stmt.else_branch is not None:
                return self.execute(stmt.else_branch)
            return None

        if isinstance(stmt, While):
            while is_truthy(self.evaluate(stmt.condition)):
                result = self.execute(stmt.body)
                if result is not None:
                    return result
            return None

        if isinstance(stmt, Function):
            fn = LoxFunction(stmt, self.environment)
            self.environment.define(stmt.name.lexeme, fn)
            return None

        if isinstance(stmt, Return):
            value = None
            if stmt.value is not None:
                value = self.evaluate(stmt.value)
            return Returning(value)

        if isinstance(stmt, Class):
            # Declared first so the name exists while the class is built.
            self.environment.define(stmt.name.lexeme, None)
            klass = LoxClass(stmt.name.lexeme)
            self.environment.assign(stmt.name, klass)
            return None

        raise TypeError("unhandled statement type: " + type(stmt).__name__)

    # ---- Expressions -------------------------------------------------------

    def evaluate(self, expr: Expr) -> object:
        if isinstance(expr, Literal):
            return expr.value

        if isinstance(expr, Grouping):
            return self.evaluate(expr.expression)

        if isinstance(expr, Variable):
            return self._look_up_variable(expr.name, expr)

        if isinstance(expr, Assign):
            value = self.evaluate(expr.value)
            distance = self.locals.get(expr)
            if distance is not None:
                self.environment.assign_at(distance, expr.name, value)
            else:
                self.globals.assign(expr.name, value)
            return value

        if isinstance(expr, Unary):
            right = self.evaluate(expr.right)
            if expr.operator.kind == TK_MINUS:
                return -self._check_number_operand(expr.operator, right)
            if expr.operator.kind == TK_BANG:
                return not is_truthy(right)
            raise TypeError("unknown unary operator: " + expr.operator.lexeme)

        if isinstance(expr, Logical):
            left = self.evaluate(expr.left)
            if expr.operator.kind == TK_OR:
                if is_truthy(left):
                    return left
            elif not is_truthy(left):
                return left
            return self.evaluate(expr.right)

        if isinstance(expr, Binary):
            left = self.evaluate(expr.left)
            right = self.evaluate(expr.right)
            return self._eval_binary(expr.operator, left, right)

        if isinstance(expr, Call):
            return self._eval_call(expr)

        if isinstance(expr, Get):
            target = self.evaluate(expr.target)
            if isinstance(target, LoxInstance):
                return target.get(expr.name)
            raise LoxRuntimeError(expr.name, "Only instances have properties.")

        if isinstance(expr, Set):
            target = self.evaluate(expr.target)
            if not isinstance(target, LoxInstance):
                raise LoxRuntimeError(expr.name, "Only instances have fields.")
            value = self.evaluate(expr.value)
            target.set(expr.name, value)
            return value

        raise TypeError("unhandled expression type: " + type(expr).__name__)

    def _look_up_variable(self, name: Token, expr: Expr) -> object:
        distance = self.locals.get(expr)
        if distance is not None:
            return self.environment.get_at(distance, name.lexeme)
        return self.globals.get(name)

    def _eval_call(self, expr: Call) -> object:
        callee = self.evaluate(expr.callee)
        arguments = [self.evaluate(arg) for arg in expr.arguments]
        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError(expr.paren, "Can only call functions and classes.")
        if len(arguments) != callee.arity():
            raise LoxRuntimeError(
                expr.paren,
                "Expected "
                + str(callee.arity())
                + " arguments but got "
                + str(len(arguments))
                + ".",
            )
        return callee.call(self, arguments)

    def _eval_binary(self, operator: Token, left: object, right: object) -> object:
        op = operator.kind
        if op == TK_PLUS:
            if isinstance(left, float) and isinstance(right, float):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise LoxRuntimeError(
                operator, "Operands must be two numbers or two strings."
            )
        if op == TK_EQUAL_EQUAL:
            return is_equal(left, right)
        if op == TK_BANG_EQUAL:
            return not is_equal(left, right)

        a, b = self._check_number_operands(operator, left, right)
        if op == TK_MINUS:
            return a - b
        if op == TK_STAR:
            return a * b
        if op == TK_SLASH:
            return _divide(a, b)
        if op == TK_GREATER:
            return a > b
        if op == TK_GREATER_EQUAL:
            return a >= b
        if op == TK_LESS:
            return a < b
        if op == TK_LESS_EQUAL:
            return a <= b
        raise TypeError("unknown binary operator: " + operator.lexeme)

    def _check_number_operand(self, operator: Token, operand: object) -> float:
        if isinstance(operand, float):
            return operand
        raise LoxRuntimeError(operator, "Operand must be a number.")

    def _check_number_operands(
        self, operator: Token, left: object, right: object
    ) -> tuple[float, float]:
        if isinstance(left, float) and isinstance(right, float):
            return left, right
        raise LoxRuntimeError(operator, "Operands must be numbers.")
