"""Symbols, scoped symbol tables and semantic diagnostics."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SymbolType(Enum):
    """Data type of a declared symbol."""

    INTEGER = "int"
    FLOAT = "float"
    DOUBLE = "double"
    STRING = "string"
    CHAR = "char"
    BOOLEAN = "bool"
    VOID = "void"
    UNKNOWN = "unknown"


_TYPE_NAMES = {
    "int": SymbolType.INTEGER,
    "short": SymbolType.INTEGER,
    "long": SymbolType.INTEGER,
    "float": SymbolType.FLOAT,
    "double": SymbolType.DOUBLE,
    "string": SymbolType.STRING,
    "char": SymbolType.CHAR,
    "bool": SymbolType.BOOLEAN,
    "void": SymbolType.VOID,
}


def type_from_string(name: str) -> SymbolType:
    """Symbol type for a type keyword, case-insensitively; UNKNOWN if unrecognised."""
    return _TYPE_NAMES.get(name.lower(), SymbolType.UNKNOWN)


def type_to_string(symbol_type: SymbolType) -> str:
    return symbol_type.value


@dataclass
class Symbol:
    """A declared name with its type, scope level and declaring line."""

    name: str
    type: SymbolType
    scope: int = 0
    line: int = 0
    value: str = ""
    is_initialized: bool = False


class SymbolTable:
    """Nested scopes of symbols; scope 0 is the global scope."""

    def __init__(self) -> None:
        self._scopes: list[dict[str, Symbol]] = [{}]
        self._discovered: list[Symbol] = []

    @property
    def current_scope(self) -> int:
        return len(self._scopes) - 1

    def enter_scope(self) -> None:
        self._scopes.append({})

    def exit_scope(self) -> None:
        """Leave the innermost scope; the global scope is never left."""
        if len(self._scopes) > 1:
            self._scopes.pop()

    def add(self, symbol: Symbol) -> bool:
        """Declare a symbol in the current scope; False if the name is taken there."""
        scope = self._scopes[-1]
        if symbol.name in scope:
            return False
        symbol.scope = self.current_scope
        scope[symbol.name] = symbol
        self._discovered.append(symbol)
        return True

    def exists(self, name: str) -> bool:
        return self.lookup(name) is not None

    def exists_in_current_scope(self, name: str) -> bool:
        return name in self._scopes[-1]

    def lookup(self, name: str) -> Symbol | None:
        """The innermost visible symbol with the name, or None."""
        for scope in reversed(self._scopes):
            if name in scope:
                return scope[name]
        return None

    def update(self, name: str, value: str) -> bool:
        """Give a visible symbol a value and mark it initialised."""
        symbol = self.lookup(name)
        if symbol is None:
            return False
        symbol.value = value
        symbol.is_initialized = True
        return True

    def clear(self) -> None:
        self._scopes = [{}]
        self._discovered = []

    def discovered_symbols(self) -> list[Symbol]:
        """Every symbol ever declared, in declaration order, including closed scopes."""
        return list(self._discovered)


@dataclass(frozen=True)
class SemanticError:
    """A semantic error or warning tied to a source line."""

    message: str = ""
    line: int = 0
    kind: str = "Error"

    def __str__(self) -> str:
        return f"Line {self.line}: {self.message}"