"""Thompson construction of an NFA from a regular expression."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from .automaton import Automaton, AutomatonType, State, Transition

EPSILON = "E"
_OPERATORS = frozenset("|*+?.")
_PRECEDENCE = {"|": 1, ".": 2, "*": 3, "+": 3, "?": 3}


class RegexError(ValueError):
    """Raised for a regular expression that cannot be turned into an NFA."""


def validate_regex(regex: str) -> None:
    """Raise RegexError if the expression is empty, unbalanced or starts with an operator."""
    if not regex:
        raise RegexError("Regex cannot be empty")
    depth = 0
    for index, char in enumerate(regex):
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                raise RegexError("Unmatched closing parenthesis")
        if index == 0 and char in "*+?|":
            raise RegexError(f"Invalid operator '{char}' at start")
    if depth != 0:
        raise RegexError("Unmatched opening parenthesis")


def is_valid_regex(regex: str) -> bool:
    try:
        validate_regex(regex)
    except RegexError:
        return False
    return True


def insert_concat_operator(regex: str) -> str:
    """Make implicit concatenation explicit with '.'."""
    out: list[str] = []
    for current, following in zip(regex, regex[1:]):
        out.append(current)
        if current not in "(|" and following not in ")|*+?":
            out.append(".")
    if regex:
        out.append(regex[-1])
    return "".join(out)


def infix_to_postfix(regex: str) -> str:
    """Convert an expression to postfix with the shunting-yard algorithm."""
    postfix: list[str] = []
    stack: list[str] = []
    for char in insert_concat_operator(regex):
        if char == "(":
            stack.append(char)
        elif char == ")":
            while stack and stack[-1] != "(":
                postfix.append(stack.pop())
            if stack:
                stack.pop()
        elif char in _OPERATORS:
            while (
                stack
                and stack[-1] != "("
                and _PRECEDENCE.get(stack[-1], 0) >= _PRECEDENCE[char]
            ):
                postfix.append(stack.pop())
            stack.append(char)
        else:
            postfix.append(char)
    postfix.extend(reversed(stack))
    return "".join(postfix)


@dataclass
class _Fragment:
    start: str
    end: str
    states: list[State] = field(default_factory=list)
    transitions: list[Transition] = field(default_factory=list)

    def merge(self, other: _Fragment) -> None:
        self.states.extend(other.states)
        self.transitions.extend(other.transitions)


class RegexToNFA:
    """Builds an NFA from a regular expression; states are named q0, q1, ..."""

    def __init__(self) -> None:
        self._counter = 0

    def _next_id(self) -> str:
        state_id = f"q{self._counter}"
        self._counter += 1
        return state_id

    def _bare(self) -> _Fragment:
        start, end = self._next_id(), self._next_id()
        return _Fragment(start, end, [State(start), State(end)])

    def _literal(self, symbol: str) -> _Fragment:
        frag = self._bare()
        frag.transitions.append(Transition(frag.start, frag.end, symbol))
        return frag

    def _epsilon(self) -> _Fragment:
        return self._literal(EPSILON)

    @staticmethod
    def _concatenate(a: _Fragment, b: _Fragment) -> _Fragment:
        result = _Fragment(a.start, b.end)
        result.merge(a)
        result.merge(b)
        result.transitions.append(Transition(a.end, b.start, EPSILON))
        return result

    def _alternate(self, a: _Fragment, b: _Fragment) -> _Fragment:
        result = self._bare()
        result.merge(a)
        result.merge(b)
        result.transitions += [
            Transition(result.start, a.start, EPSILON),
            Transition(result.start, b.start, EPSILON),
            Transition(a.end, result.end, EPSILON),
            Transition(b.end, result.end, EPSILON),
        ]
        return result

    def _star(self, a: _Fragment) -> _Fragment:
        result = self._bare()
        result.merge(a)
        result.transitions += [
            Transition(result.start, a.start, EPSILON),
            Transition(result.start, result.end, EPSILON),
            Transition(a.end, a.start, EPSILON),
            Transition(a.end, result.end, EPSILON),
        ]
        return result

    def _plus(self, a: _Fragment) -> _Fragment:
        star = self._star(a)
        copy = self._bare()
        for t in a.transitions:
            source = copy.start if t.source == a.start else t.source
            target = copy.end if t.target == a.end else t.target
            copy.transitions.append(Transition(source, target, t.symbols))
        return self._concatenate(copy, star)

    def _optional(self, a: _Fragment) -> _Fragment:
        result = self._bare()
        result.merge(a)
        result.transitions += [
            Transition(result.start, a.start, EPSILON),
            Transition(result.start, result.end, EPSILON),
            Transition(a.end, result.end, EPSILON),
        ]
        return result

    def convert(self, regex: str) -> Automaton:
        """Build the NFA for the expression; raise RegexError if it is malformed."""
        validate_regex(regex)
        self._counter = 0
        stack: list[_Fragment] = []
        for char in infix_to_postfix(regex):
            if char in "|.":
                if len(stack) < 2:
                    raise RegexError("Invalid regex expression")
                b = stack.pop()
                a = stack.pop()
                stack.append(
                    self._alternate(a, b) if char == "|" else self._concatenate(a, b)
                )
            elif char in "*+?":
                if not stack:
                    raise RegexError("Invalid regex expression")
                a = stack.pop()
                unary = {"*": self._star, "+": self._plus, "?": self._optional}[char]
                stack.append(unary(a))
            elif char in (EPSILON, "ε"):
                stack.append(self._epsilon())
            else:
                stack.append(self._literal(char))

        if len(stack) != 1:
            raise RegexError("Invalid regex expression")
        final = stack.pop()

        nfa = Automaton(f"nfa_{self._counter}", f"NFA from /{regex}/", AutomatonType.NFA)
        for state in final.states:
            nfa.add_state(state)
        if nfa.state(final.start) is not None:
            nfa.set_initial(final.start)
        end_state = nfa.state(final.end)
        if end_state is not None:
            end_state.is_final = True
        for transition in final.transitions:
            nfa.add_transition(transition)
            for symbol in transition.symbols:
                if symbol != EPSILON:
                    nfa.add_symbol(symbol)

        columns = max(1, math.ceil(math.sqrt(len(final.states))))
        for index, state in enumerate(nfa.states):
            row, col = divmod(index, columns)
            state.position = (100.0 + col * 120, 100.0 + row * 120)
        return nfa