"""Automata, regex conversion, expression parsing, semantic analysis and translation for a small compiler."""

__version__ = "0.1.0"

__all__ = [
    "automaton",
    "regex",
    "nfa_to_dfa",
    "minimizer",
    "manager",
    "tokens",
    "parser",
    "symbols",
    "semantic",
    "translator",
    "codegen",
]