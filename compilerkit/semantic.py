"""Semantic analysis of a token stream: declarations, scopes and type checks."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterable

from .symbols import (
    SemanticError,
    Symbol,
    SymbolTable,
    SymbolType,
    type_from_string,
    type_to_string,
)
from .tokens import Token, TokenType

_TYPE_KEYWORDS = frozenset(
    {"int", "float", "string", "bool", "char", "double", "short", "long", "void"}
)
_IF_BLOCK_DECLARATION_TYPES = frozenset({"int", "bool"})


class ASTNodeType(Enum):
    """Kind of node in the abstract syntax tree."""

    PROGRAM = auto()
    DECLARATION = auto()
    ASSIGNMENT = auto()
    LITERAL = auto()


@dataclass
class ASTNode:
    """A node of the abstract syntax tree built during analysis."""

    type: ASTNodeType
    value: str = ""
    line: int = 0
    children: list[ASTNode] = field(default_factory=list)

    def add_child(self, child: ASTNode) -> None:
        self.children.append(child)


def _is_type_keyword(keyword: str) -> bool:
    return keyword.lower() in _TYPE_KEYWORDS


def _is_type_compatible(expected: SymbolType, actual: SymbolType) -> bool:
    if expected == actual:
        return True
    if expected is SymbolType.FLOAT and actual is SymbolType.INTEGER:
        return True
    if expected is SymbolType.DOUBLE and actual in (SymbolType.INTEGER, SymbolType.FLOAT):
        return True
    return expected is SymbolType.STRING and actual is SymbolType.CHAR


class SemanticAnalyzer:
    """Checks declarations, assignments and scopes; collects errors and warnings."""

    def __init__(self) -> None:
        self.tokens: list[Token] = []
        self.symbol_table = SymbolTable()
        self.errors: list[SemanticError] = []
        self.warnings: list[SemanticError] = []
        self.discovered_symbols: list[Symbol] = []
        self.ast = ASTNode(ASTNodeType.PROGRAM, "Program")
        self._current_node = self.ast
        self._position = 0

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def set_tokens(self, tokens: Iterable[Token]) -> None:
        self.tokens = list(tokens)
        self._position = 0

    def reset(self) -> None:
        self.symbol_table.clear()
        self.errors = []
        self.warnings = []
        self.discovered_symbols = []
        self._position = 0
        self.ast = ASTNode(ASTNodeType.PROGRAM, "Program")
        self._current_node = self.ast

    def analyze(self) -> bool:
        """Analyse the whole token stream; return True when no errors were found."""
        self.reset()
        while not self._at_end():
            self._statement()
        for symbol in self.symbol_table.discovered_symbols():
            if not symbol.is_initialized:
                self._warning(
                    f"Variable '{symbol.name}' declared but never initialized",
                    symbol.line,
                )
        return not self.has_errors

    # statements

    def _statement(self) -> None:
        token = self._peek()
        if token.type is TokenType.KEYWORD:
            keyword = token.lexeme.lower()
            if _is_type_keyword(keyword):
                if self._is_function_declaration():
                    self._function_declaration()
                else:
                    self._declaration()
            elif keyword == "if":
                self._if_statement()
            else:
                self._advance()
        elif token.type is TokenType.IDENTIFIER:
            if self._peek(1).type is TokenType.ASSIGN:
                self._assignment()
            else:
                if not self.symbol_table.exists(token.lexeme):
                    self._error(f"Undeclared identifier '{token.lexeme}'", token.line)
                self._advance()
        elif token.type is TokenType.LBRACE:
            self.symbol_table.enter_scope()
            self._advance()
            while not self._at_end() and not self._check(TokenType.RBRACE):
                self._statement()
            self._expect(TokenType.RBRACE, "Expected '}' to close block.")
            self.symbol_table.exit_scope()
        else:
            self._advance()

    def _declare(self, symbol: Symbol) -> None:
        if self.symbol_table.add(symbol):
            self.discovered_symbols.append(symbol)

    def _function_declaration(self) -> None:
        self._advance()
        self._advance()
        self._expect(TokenType.LPAREN, "Expected '(' after function name.")
        self.symbol_table.enter_scope()

        while not self._at_end() and not self._check(TokenType.RPAREN):
            if _is_type_keyword(self._peek().lexeme):
                param_type = self._advance()
                if self._check(TokenType.IDENTIFIER):
                    param_name = self._advance()
                    self._declare(
                        Symbol(
                            param_name.lexeme,
                            type_from_string(param_type.lexeme),
                            self.symbol_table.current_scope,
                            param_name.line,
                        )
                    )
                else:
                    self._error("Expected parameter name after type", param_type.line)
            else:
                self._error("Expected parameter type", self._peek().line)
                break
            if not self._check(TokenType.RPAREN) and not self._match(TokenType.COMMA):
                self._error("Expected ',' or ')' in parameter list", self._peek().line)
                break

        self._expect(TokenType.RPAREN, "Expected ')' to close parameter list.")
        if self._check(TokenType.LBRACE):
            self._statement()
        else:
            self._error("Expected '{' after function signature", self._peek().line)
        self.symbol_table.exit_scope()

    def _declaration(self) -> None:
        type_token = self._advance()
        symbol_type = type_from_string(type_token.lexeme)

        if not self._check(TokenType.IDENTIFIER):
            self._error("Expected identifier after type declaration", self._current_line())
            return

        id_token = self._advance()
        name, line = id_token.lexeme, id_token.line

        if self.symbol_table.exists_in_current_scope(name):
            self._error(f"Variable '{name}' already declared in this scope", line)
            return

        symbol = Symbol(name, symbol_type, self.symbol_table.current_scope, line)

        if self._check(TokenType.ASSIGN):
            self._advance()
            if not self._at_end():
                value_type = self._infer_type(self._peek())
                if not _is_type_compatible(symbol_type, value_type):
                    self._error(
                        f"Type mismatch: cannot assign {type_to_string(value_type)} "
                        f"to {type_to_string(symbol_type)}",
                        line,
                    )
                else:
                    parts: list[str] = []
                    while not self._at_end() and not self._check(TokenType.SEMICOLON):
                        parts.append(self._advance().lexeme)
                    symbol.value = " ".join(parts).strip()
                    symbol.is_initialized = True

        self._declare(symbol)

        node = ASTNode(
            ASTNodeType.DECLARATION, f"{type_to_string(symbol_type)} {name}", line
        )
        if symbol.is_initialized:
            node.add_child(ASTNode(ASTNodeType.LITERAL, symbol.value, line))
        self._current_node.add_child(node)

        if self._check(TokenType.SEMICOLON):
            self._advance()
        else:
            self._error(f"Missing ';' after declaration of '{name}'", line)

    def _assignment(self) -> None:
        id_token = self._advance()
        name, line = id_token.lexeme, id_token.line

        symbol = self.symbol_table.lookup(name)
        if symbol is None:
            self._error(f"Undeclared variable '{name}'", line)
            self._advance()
            if not self._at_end():
                self._advance()
            return

        if not self._match(TokenType.ASSIGN):
            self._error("Expected '=' in assignment", line)
            return
        if self._at_end():
            self._error("Expected value after '='", line)
            return

        value_token = self._advance()
        value_type = self._infer_type(value_token)
        if not _is_type_compatible(symbol.type, value_type):
            self._error(
                f"Type mismatch: cannot assign {type_to_string(value_type)} "
                f"to {type_to_string(symbol.type)} variable '{name}'",
                line,
            )
        else:
            self.symbol_table.update(name, value_token.lexeme)
            node = ASTNode(ASTNodeType.ASSIGNMENT, name, line)
            node.add_child(ASTNode(ASTNodeType.LITERAL, value_token.lexeme, line))
            self._current_node.add_child(node)

        if self._check(TokenType.SEMICOLON):
            self._advance()
        else:
            self._error(f"Missing ';' after assignment to '{name}'", line)

    def _expression(self) -> None:
        while (
            not self._at_end()
            and not self._check(TokenType.SEMICOLON)
            and not self._check(TokenType.RPAREN)
        ):
            token = self._advance()
            if token.type is TokenType.IDENTIFIER and not self.symbol_table.exists(
                token.lexeme
            ):
                self._error(f"Undeclared identifier '{token.lexeme}'", token.line)

    def _if_statement(self) -> None:
        self._advance()
        self._expect(TokenType.LPAREN, "Expected '(' after 'if'.")
        self._expression()
        self._expect(TokenType.RPAREN, "Expected ')' after if condition.")

        if self._check(TokenType.LBRACE):
            self.symbol_table.enter_scope()
            self._advance()
            while not self._at_end() and not self._check(TokenType.RBRACE):
                token = self._peek()
                if (
                    token.type is TokenType.KEYWORD
                    and token.lexeme in _IF_BLOCK_DECLARATION_TYPES
                ):
                    self._declaration()
                else:
                    self._advance()
            self._match(TokenType.RBRACE)
            self.symbol_table.exit_scope()

    def _infer_type(self, token: Token) -> SymbolType:
        literal_types = {
            TokenType.INTEGER_LITERAL: SymbolType.INTEGER,
            TokenType.FLOAT_LITERAL: SymbolType.FLOAT,
            TokenType.STRING_LITERAL: SymbolType.STRING,
            TokenType.CHAR_LITERAL: SymbolType.CHAR,
            TokenType.LOGICAL_NOT: SymbolType.BOOLEAN,
        }
        if token.type in literal_types:
            return literal_types[token.type]
        if token.type is TokenType.KEYWORD:
            if token.lexeme.lower() in ("true", "false"):
                return SymbolType.BOOLEAN
            return SymbolType.UNKNOWN
        if token.type is TokenType.IDENTIFIER:
            symbol = self.symbol_table.lookup(token.lexeme)
            return symbol.type if symbol is not None else SymbolType.UNKNOWN
        return SymbolType.UNKNOWN

    def _is_function_declaration(self) -> bool:
        return (
            self._peek(1).type is TokenType.IDENTIFIER
            and self._peek(2).type is TokenType.LPAREN
        )

    # token cursor

    def _at_end(self) -> bool:
        return self._position >= len(self.tokens)

    def _peek(self, offset: int = 0) -> Token:
        index = self._position + offset
        if index >= len(self.tokens):
            return Token.end_of_file()
        return self.tokens[index]

    def _advance(self) -> Token:
        if self._at_end():
            return Token.end_of_file()
        token = self.tokens[self._position]
        self._position += 1
        return token

    def _check(self, token_type: TokenType) -> bool:
        return not self._at_end() and self.tokens[self._position].type is token_type

    def _match(self, token_type: TokenType) -> bool:
        if self._check(token_type):
            self._advance()
            return True
        return False

    def _expect(self, token_type: TokenType, message: str) -> bool:
        if self._match(token_type):
            return True
        self._error(message, self._current_line())
        return False

    def _current_line(self) -> int:
        return 0 if self._at_end() else self.tokens[self._position].line

    def _error(self, message: str, line: int | None = None) -> None:
        if line is None or line < 0:
            line = self._current_line()
        self.errors.append(SemanticError(message, line, "Error"))

    def _warning(self, message: str, line: int | None = None) -> None:
        if line is None or line < 0:
            line = self._current_line()
        self.warnings.append(SemanticError(message, line, "Warning"))