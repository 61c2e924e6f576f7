"""Recursive-descent parser for the arithmetic expression grammar.

E -> T E'
E' -> + T E' | ε
T -> F T'
T' -> * F T' | ε
F -> ( E ) | id | num
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .tokens import Token

EPSILON = "ε"


@dataclass
class ParseTreeNode:
    """A grammar symbol in the parse tree; terminals may carry the matched lexeme."""

    symbol: str
    value: str = ""
    is_terminal: bool = False
    children: list[ParseTreeNode] = field(default_factory=list)

    def add_child(self, child: ParseTreeNode) -> None:
        self.children.append(child)


@dataclass
class ParseTree:
    """The tree built for one parse, named after its grammar."""

    grammar_name: str = ""
    root: ParseTreeNode | None = None


@dataclass(frozen=True)
class ParseError:
    """A syntax error at a token position."""

    message: str
    position: int
    expected: str
    found: str

    def __str__(self) -> str:
        return (
            f"Parse Error at position {self.position}: {self.message}\n"
            f"Expected: {self.expected}\nFound: {self.found}"
        )


class Parser:
    """Parses a token list into a parse tree, collecting errors as it goes."""

    def __init__(self, grammar: str | None = None) -> None:
        self.grammar = grammar
        self.tokens: list[Token] = []
        self.errors: list[ParseError] = []
        self._position = 0

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def set_tokens(self, tokens: Iterable[Token]) -> None:
        self.tokens = list(tokens)
        self._position = 0

    def reset(self) -> None:
        self._position = 0
        self.errors = []

    def parse(self) -> ParseTree:
        """Parse the tokens; syntax errors are recorded in ``errors``."""
        self.reset()
        if self.grammar is None:
            self.errors.append(ParseError("No grammar set", 0, "", ""))
            return ParseTree()
        tree = ParseTree(self.grammar)
        if not self.tokens:
            self._error("Empty token stream", "tokens")
            return tree
        tree.root = self._expression()
        return tree

    def _expression(self) -> ParseTreeNode:
        node = ParseTreeNode("E")
        node.add_child(self._term())
        node.add_child(self._expression_rest())
        return node

    def _expression_rest(self) -> ParseTreeNode:
        node = ParseTreeNode("E'")
        if self._check("+", "PLUS"):
            self._advance()
            node.add_child(ParseTreeNode("+", is_terminal=True))
            node.add_child(self._term())
            node.add_child(self._expression_rest())
        else:
            node.add_child(ParseTreeNode(EPSILON, is_terminal=True))
        return node

    def _term(self) -> ParseTreeNode:
        node = ParseTreeNode("T")
        node.add_child(self._factor())
        node.add_child(self._term_rest())
        return node

    def _term_rest(self) -> ParseTreeNode:
        node = ParseTreeNode("T'")
        if self._check("*", "MULTIPLY"):
            self._advance()
            node.add_child(ParseTreeNode("*", is_terminal=True))
            node.add_child(self._factor())
            node.add_child(self._term_rest())
        else:
            node.add_child(ParseTreeNode(EPSILON, is_terminal=True))
        return node

    def _factor(self) -> ParseTreeNode:
        node = ParseTreeNode("F")
        if self._check("(", "LPAREN"):
            self._advance()
            node.add_child(ParseTreeNode("(", is_terminal=True))
            node.add_child(self._expression())
            if self._check(")", "RPAREN"):
                self._advance()
                node.add_child(ParseTreeNode(")", is_terminal=True))
            else:
                self._error("Expected ')'", ")")
        elif self._check("IDENTIFIER", "id"):
            token = self._advance()
            node.add_child(ParseTreeNode("id", token.lexeme, True))
        elif self._check("INTEGER", "num", "INTEGER_LITERAL"):
            token = self._advance()
            node.add_child(ParseTreeNode("num", token.lexeme, True))
        else:
            self._error("Expected '(', identifier, or number", "id | num | (")
        return node

    def _at_end(self) -> bool:
        return self._position >= len(self.tokens)

    def _advance(self) -> Token:
        if self._at_end():
            return Token.end_of_file()
        token = self.tokens[self._position]
        self._position += 1
        return token

    def _check(self, *expected: str) -> bool:
        if self._at_end():
            return False
        token = self.tokens[self._position]
        return any(e in (token.type_string, token.lexeme) for e in expected)

    def _current_token_string(self) -> str:
        if self._at_end():
            return "EOF"
        token = self.tokens[self._position]
        return f"{token.type_string} ('{token.lexeme}')"

    def _error(self, message: str, expected: str) -> None:
        self.errors.append(
            ParseError(message, self._position, expected, self._current_token_string())
        )