"""Lox parser — recursive descent, one method per grammar production."""

from __future__ import annotations

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
from .errors import StackOverflowFault, StaticError
from .tokens import (
    TK_AND,
    TK_BANG,
    TK_BANG_EQUAL,
    TK_CLASS,
    TK_COMMA,
    TK_DOT,
    TK_ELSE,
    TK_EOF,
    TK_EQUAL,
    TK_EQUAL_EQUAL,
    TK_FALSE,
    TK_FOR,
    TK_FUN,
    TK_GREATER,
    TK_GREATER_EQUAL,
    TK_IDENTIFIER,
    TK_IF,
    TK_LEFT_BRACE,
    TK_LEFT_PAREN,
    TK_LESS,
    TK_LESS_EQUAL,
    TK_MINUS,
    TK_NIL,
    TK_NUMBER,
    TK_OR,
    TK_PLUS,
    TK_PRINT,
    TK_RETURN,
    TK_RIGHT_BRACE,
    TK_RIGHT_PAREN,
    TK_SEMICOLON,
    TK_SLASH,
    TK_STAR,
    TK_STRING,
    TK_TRUE,
    TK_VAR,
    TK_WHILE,
    Token,
)

MAX_ARGS = 255

# Tokens that begin a declaration or statement; panic mode stops before them.
SYNC_KINDS: set[str] = {
    TK_CLASS,
    TK_FUN,
    TK_VAR,
    TK_FOR,
    TK_IF,
    TK_WHILE,
    TK_PRINT,
    TK_RETURN,
}


class ParseError(Exception):
    """Unwinds the parser to the enclosing declaration for resynchronisation."""


class Parser:
    """Recursive descent parser for Lox.

    Syntax errors are recorded in `errors`; parsing resumes at the next
    statement boundary so a single pass can report several of them.
    """

    def __init__(self, tokens: list[Token]):
        self.tokens: list[Token] = tokens
        self.pos: int = 0
        self.errors: list[StaticError] = []

    # ── Helpers ──────────────────────────────────────────────

    def current(self) -> Token:
        return self.tokens[self.pos]

    def previous(self) -> Token:
        return self.tokens[self.pos - 1]

    def at_end(self) -> bool:
        return self.current().kind == TK_EOF

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        if not self.at_end():
            self.pos += 1
        return tok

    def at(self, kind: str) -> bool:
        return self.current().kind == kind

    def match(self, *kinds: str) -> bool:
        for kind in kinds:
            if self.at(kind):
                self.advance()
                return True
        return False

    def expect(self, kind: str, msg: str) -> Token:
        if self.at(kind):
            return self.advance()
        raise self.error(self.current(), msg)

    def error(self, token: Token, msg: str) -> ParseError:
        self.errors.append(StaticError.at_token(token, msg))
        return ParseError(msg)

    def synchronize(self) -> None:
        self.advance()
        while not self.at_end():
            if self.previous().kind == TK_SEMICOLON:
                return
            if self.current().kind in SYNC_KINDS:
                return
            self.advance()

    # ── Top Level ────────────────────────────────────────────

    def parse_program(self) -> list[Stmt]:
        stmts: list[Stmt] = []
        while not self.at_end():
            stmt = self.parse_declaration()
            if stmt is not None:
                stmts.append(stmt)
        return stmts

    def parse_declaration(self) -> Stmt | None:
        try:
            if self.match(TK_CLASS):
                return self.parse_class_decl()
            if self.match(TK_FUN):
                return self.parse_function("function")
            if self.match(TK_VAR):
                return self.parse_var_decl()
            return self.parse_stmt()
        except ParseError:
            self.synchronize()
            return None

    def parse_class_decl(self) -> Class:
        name = self.expect(TK_IDENTIFIER, "Expect class name.")
        self.expect(TK_LEFT_BRACE, "Expect '{' before class body.")
        methods: list[Function] = []
        while not self.at(TK_RIGHT_BRACE) and not self.at_end():
            methods.append(self.parse_function("method"))
        self.expect(TK_RIGHT_BRACE, "Expect '}' after class body.")
        return Class(name, methods)

    def parse_function(self, kind: str) -> Function:
        name = self.expect(TK_IDENTIFIER, "Expect " + kind + " name.")
        self.expect(TK_LEFT_PAREN, "Expect '(' after " + kind + " name.")
        params: list[Token] = []
        if not self.at(TK_RIGHT_PAREN):
            params.append(self.expect(TK_IDENTIFIER, "Expect parameter name."))
            while self.match(TK_COMMA):
                if len(params) >= MAX_ARGS:
                    self.error(self.current(), "Can't have more than 255 parameters.")
                params.append(self.expect(TK_IDENTIFIER, "Expect parameter name."))
        self.expect(TK_RIGHT_PAREN, "Expect ')' after parameters.")
        self.expect(TK_LEFT_BRACE, "Expect '{' before " + kind + " body.")
        body = self.parse_block()
        return Function(name, params, body)

    def parse_var_decl(self) -> Var:
        name = self.expect(TK_IDENTIFIER, "Expect variable name.")
        initializer: Expr | None = None
        if self.match(TK_EQUAL):
            initializer = self.parse_expr()
        self.expect(TK_SEMICOLON, "Expect ';' after variable declaration.")
        return Var(name, initializer)

    # ── Statements ───────────────────────────────────────────

    def parse_stmt(self) -> Stmt:
        if self.match(TK_FOR):
            return self.parse_for_stmt()
        if self.match(TK_IF):
            return self.parse_if_stmt()
        if self.match(TK_PRINT):
            return self.parse_print_stmt()
        if self.match(TK_RETURN):
            return self.parse_return_stmt()
        if self.match(TK_WHILE):
            return self.parse_while_stmt()
        if self.match(TK_LEFT_BRACE):
            return Block(self.parse_block())
        return self.parse_expr_stmt()

    def parse_for_stmt(self) -> Stmt:
        """for (init; cond; incr) body, desugared to a block around a while."""
        self.expect(TK_LEFT_PAREN, "Expect '(' after 'for'.")
        initializer: Stmt | None
        if self.match(TK_SEMICOLON):
            initializer = None
        elif self.match(TK_VAR):
            initializer = self.parse_var_decl()
        else:
            initializer = self.parse_expr_stmt()

        condition: Expr | None = None
        if not self.at(TK_SEMICOLON):
            condition = self.parse_expr()
        self.expect(TK_SEMICOLON, "Expect ';' after loop condition.")

        increment: Expr | None = None
        if not self.at(TK_RIGHT_PAREN):
            increment = self.parse_expr()
        self.expect(TK_RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self.parse_stmt()
        if increment is not None:
            body = Block([body, Expression(increment)])
        if condition is None:
            condition = Literal(True)
        body = While(condition, body)
        if initializer is not None:
            body = Block([initializer, body])
        return body

    def parse_if_stmt(self) -> If:
        self.expect(TK_LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self.parse_expr()
        self.expect(TK_RIGHT_PAREN, "Expect ')' after if condition.")
        then_branch = self.parse_stmt()
        else_branch: Stmt | None = None
        if self.match(TK_ELSE):
            else_branch = self.parse_stmt()
        return If(condition, then_branch, else_branch)

    def parse_print_stmt(self) -> Print:
        value = self.parse_expr()
        self.expect(TK_SEMICOLON, "Expect ';' after value.")
        return Print(value)

    def parse_return_stmt(self) -> Return:
        keyword = self.previous()
        value: Expr | None = None
        if not self.at(TK_SEMICOLON):
            value = self.parse_expr()
        self.expect(TK_SEMICOLON, "Expect ';' after return value.")
        return Return(keyword, value)

    def parse_while_stmt(self) -> While:
        self.expect(TK_LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self.parse_expr()
        self.expect(TK_RIGHT_PAREN, "Expect ')' after condition.")
        body = self.parse_stmt()
        return While(condition, body)

    def parse_block(self) -> list[Stmt]:
        """Statements up to the closing '}'; the '{' is already consumed."""
        stmts: list[Stmt] = []
        while not self.at(TK_RIGHT_BRACE) and not self.at_end():
            stmt = self.parse_declaration()
            if stmt is not None:
                stmts.append(stmt)
        self.expect(TK_RIGHT_BRACE, "Expect '}' after block.")
        return stmts

    def parse_expr_stmt(self) -> Expression:
        expr = self.parse_expr()
        self.expect(TK_SEMICOLON, "Expect ';' after expression.")
        return Expression(expr)

    # ── Expressions ──────────────────────────────────────────

    def parse_expr(self) -> Expr:
        return self.parse_assignment()

    def parse_assignment(self) -> Expr:
        """Assignment = ( Call '.' )? IDENT '=' Assignment | Or"""
        expr = self.parse_or()
        if self.match(TK_EQUAL):
            equals = self.previous()
            value = self.parse_assignment()
            if isinstance(expr, Variable):
                return Assign(expr.name, value)
            if isinstance(expr, Get):
                return Set(expr.target, expr.name, value)
            # Reported, but the parser is not confused: no panic.
            self.error(equals, "Invalid assignment target.")
        return expr

    def parse_or(self) -> Expr:
        """Or = And ( 'or' And )*"""
        expr = self.parse_and()
        while self.match(TK_OR):
            operator = self.previous()
            right = self.parse_and()
            expr = Logical(expr, operator, right)
        return expr

    def parse_and(self) -> Expr:
        """And = Equality ( 'and' Equality )*"""
        expr = self.parse_equality()
        while self.match(TK_AND):
            operator = self.previous()
            right = self.parse_equality()
            expr = Logical(expr, operator, right)
        return expr

    def parse_equality(self) -> Expr:
        """Equality = Comparison ( ( '!=' | '==' ) Comparison )*"""
        expr = self.parse_comparison()
        while self.match(TK_BANG_EQUAL, TK_EQUAL_EQUAL):
            operator = self.previous()
            right = self.parse_comparison()
            expr = Binary(expr, operator, right)
        return expr

    def parse_comparison(self) -> Expr:
        """Comparison = Term ( ( '>' | '>=' | '<' | '<=' ) Term )*"""
        expr = self.parse_term()
        while self.match(TK_GREATER, TK_GREATER_EQUAL, TK_LESS, TK_LESS_EQUAL):
            operator = self.previous()
            right = self.parse_term()
            expr = Binary(expr, operator, right)
        return expr

    def parse_term(self) -> Expr:
        """Term = Factor ( ( '-' | '+' ) Factor )*"""
        expr = self.parse_factor()
        while self.match(TK_MINUS, TK_PLUS):
            operator = self.previous()
            right = self.parse_factor()
            expr = Binary(expr, operator, right)
        return expr

    def parse_factor(self) -> Expr:
        """Factor = Unary ( ( '/' | '*' ) Unary )*"""
        expr = self.parse_unary()
        while self.match(TK_SLASH, TK_STAR):
            operator = self.previous()
            right = self.parse_unary()
            expr = Binary(expr, operator, right)
        return expr

    def parse_unary(self) -> Expr:
        """Unary = ( '!' | '-' ) Unary | Call"""
        if self.match(TK_BANG, TK_MINUS):
            operator = self.previous()
            right = self.parse_unary()
            return Unary(operator, right)
        return self.parse_call()

    def parse_call(self) -> Expr:
        """Call = Primary ( '(' Arguments? ')' | '.' IDENT )*"""
        expr = self.parse_primary()
        while True:
            if self.match(TK_LEFT_PAREN):
                expr = self.finish_call(expr)
            elif self.match(TK_DOT):
                name = self.expect(TK_IDENTIFIER, "Expect property name after '.'.")
                expr = Get(expr, name)
            else:
                break
        return expr

    def finish_call(self, callee: Expr) -> Call:
        arguments: list[Expr] = []
        if not self.at(TK_RIGHT_PAREN):
            arguments.append(self.parse_expr())
            while self.match(TK_COMMA):
                if len(arguments) >= MAX_ARGS:
                    self.error(self.current(), "Can't have more than 255 arguments.")
                arguments.append(self.parse_expr())
        paren = self.expect(TK_RIGHT_PAREN, "Expect ')' after arguments.")
        return Call(callee, paren, arguments)

    def parse_primary(self) -> Expr:
        """Parse a primary expression."""
        if self.match(TK_FALSE):
            return Literal(False)
        if self.match(TK_TRUE):
            return Literal(True)
        if self.match(TK_NIL):
            return Literal(None)
        if self.match(TK_NUMBER, TK_STRING):
            return Literal(self.previous().literal)
        if self.match(TK_IDENTIFIER):
            return Variable(self.previous())
        if self.match(TK_LEFT_PAREN):
            expr = self.parse_expr()
            self.expect(TK_RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr)
        raise self.error(self.current(), "Expect expression.")


def parse_tokens(tokens: list[Token]) -> tuple[list[Stmt], list[StaticError]]:
    """Parse a token list. Returns (statements, syntax errors).

    Statements that failed to parse are left out; callers must not evaluate
    the result when errors is non-empty.
    """
    parser = Parser(tokens)
    try:
        stmts = parser.parse_program()
    except RecursionError:
        raise StackOverflowFault(parser.current().line, parser.errors) from None
    return stmts, parser.errors
