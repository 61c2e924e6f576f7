"""Tokens produced by lexical analysis and the errors it reports."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    """Category of a lexical token."""

    KEYWORD = auto()
    IDENTIFIER = auto()
    INTEGER_LITERAL = auto()
    FLOAT_LITERAL = auto()
    STRING_LITERAL = auto()
    CHAR_LITERAL = auto()
    PLUS = auto()
    MINUS = auto()
    MULTIPLY = auto()
    DIVIDE = auto()
    MODULO = auto()
    ASSIGN = auto()
    EQUAL = auto()
    NOT_EQUAL = auto()
    LESS_THAN = auto()
    GREATER_THAN = auto()
    LESS_EQUAL = auto()
    GREATER_EQUAL = auto()
    LOGICAL_AND = auto()
    LOGICAL_OR = auto()
    LOGICAL_NOT = auto()
    LPAREN = auto()
    RPAREN = auto()
    LBRACE = auto()
    RBRACE = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    SEMICOLON = auto()
    COMMA = auto()
    DOT = auto()
    COMMENT = auto()
    WHITESPACE = auto()
    ERROR = auto()
    END_OF_FILE = auto()


@dataclass(frozen=True)
class Token:
    """A lexeme with its category and the line and column it starts at."""

    type: TokenType
    lexeme: str = ""
    line: int = 0
    column: int = 0

    @property
    def type_string(self) -> str:
        return self.type.name

    @classmethod
    def end_of_file(cls) -> Token:
        return cls(TokenType.END_OF_FILE, "", 0, 0)


@dataclass(frozen=True)
class LexerError:
    """A problem found while scanning source text."""

    message: str
    line: int
    column: int
    lexeme: str = ""

    def __str__(self) -> str:
        return (
            f"Error at Line {self.line}, Column {self.column}: "
            f"{self.message} (near '{self.lexeme}')"
        )