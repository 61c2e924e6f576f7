"""Finite automata: states, transitions and the automaton itself."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator

EPSILON_SYMBOLS = frozenset({"E", "ε"})


class AutomatonType(Enum):
    """Kind of finite automaton."""

    DFA = "DFA"
    NFA = "NFA"


@dataclass
class State:
    """A state with a display label and a position on a canvas."""

    id: str
    label: str = ""
    position: tuple[float, float] = (0.0, 0.0)
    is_initial: bool = False
    is_final: bool = False

    def __post_init__(self) -> None:
        if not self.label:
            self.label = self.id


@dataclass(frozen=True)
class Transition:
    """A move from one state to another on any of its symbols."""

    source: str
    target: str
    symbols: tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        symbols = self.symbols
        if isinstance(symbols, str):
            symbols = (symbols,)
        object.__setattr__(self, "symbols", tuple(symbols))

    def has_symbol(self, symbol: str) -> bool:
        return symbol in self.symbols

    @property
    def is_epsilon(self) -> bool:
        return any(symbol in EPSILON_SYMBOLS for symbol in self.symbols)


class Automaton:
    """A finite automaton whose states keep their insertion order."""

    def __init__(
        self,
        automaton_id: str = "",
        name: str = "",
        kind: AutomatonType = AutomatonType.NFA,
    ) -> None:
        self.id = automaton_id
        self.name = name
        self.kind = kind
        self.initial_state_id = ""
        self.alphabet: set[str] = set()
        self._states: dict[str, State] = {}
        self._transitions: list[Transition] = []

    def __repr__(self) -> str:
        return (
            f"Automaton(id={self.id!r}, name={self.name!r}, kind={self.kind.name}, "
            f"states={len(self._states)}, transitions={len(self._transitions)})"
        )

    @property
    def states(self) -> list[State]:
        return list(self._states.values())

    @property
    def transitions(self) -> list[Transition]:
        return list(self._transitions)

    def add_state(self, state: State) -> bool:
        """Add a state; return False if a state with that id already exists."""
        if state.id in self._states:
            return False
        self._states[state.id] = state
        if state.is_initial and not self.initial_state_id:
            self.initial_state_id = state.id
        return True

    def remove_state(self, state_id: str) -> bool:
        """Remove a state together with every transition touching it."""
        if self._states.pop(state_id, None) is None:
            return False
        self._transitions = [
            t for t in self._transitions if state_id not in (t.source, t.target)
        ]
        if self.initial_state_id == state_id:
            self.initial_state_id = ""
        return True

    def state(self, state_id: str) -> State | None:
        return self._states.get(state_id)

    def add_transition(self, transition: Transition) -> None:
        self._transitions.append(transition)

    def transitions_from(self, state_id: str) -> list[Transition]:
        return [t for t in self._transitions if t.source == state_id]

    def add_symbol(self, symbol: str) -> None:
        self.alphabet.add(symbol)

    def set_initial(self, state_id: str) -> None:
        """Make the given state the only initial one."""
        self.initial_state_id = state_id
        for state in self._states.values():
            state.is_initial = state.id == state_id

    def is_valid(self) -> bool:
        """An automaton is valid when its initial state and every transition end exist."""
        if not self.initial_state_id or self.initial_state_id not in self._states:
            return False
        return all(
            t.source in self._states and t.target in self._states
            for t in self._transitions
        )

    def is_dfa(self) -> bool:
        return self.kind is AutomatonType.DFA

    def epsilon_closure(self, state_ids: Iterable[str]) -> set[str]:
        """All states reachable from the given ones through epsilon moves alone."""
        closure = set(state_ids)
        pending: deque[str] = deque(closure)
        while pending:
            current = pending.popleft()
            for transition in self.transitions_from(current):
                if transition.is_epsilon and transition.target not in closure:
                    closure.add(transition.target)
                    pending.append(transition.target)
        return closure

    def _is_final_set(self, state_ids: Iterable[str]) -> bool:
        return any(
            (state := self._states.get(sid)) is not None and state.is_final
            for sid in state_ids
        )

    def _run_deterministic(self, text: str) -> Iterator[str]:
        current = self.initial_state_id
        yield current
        for char in text:
            step = next(
                (t.target for t in self.transitions_from(current) if t.has_symbol(char)),
                None,
            )
            if step is None:
                return
            current = step
            yield current

    def accepts(self, text: str) -> bool:
        """Whether the automaton accepts the text, one symbol per character."""
        if not self.initial_state_id or self.initial_state_id not in self._states:
            return False
        if self.is_dfa():
            visited = list(self._run_deterministic(text))
            if len(visited) != len(text) + 1:
                return False
            return self._is_final_set([visited[-1]])
        current = self.epsilon_closure({self.initial_state_id})
        for char in text:
            moved = {
                t.target
                for sid in current
                for t in self.transitions_from(sid)
                if t.has_symbol(char)
            }
            current = self.epsilon_closure(moved)
            if not current:
                return False
        return self._is_final_set(current)