"""A registry of token-recognising automata with built-in defaults."""

from __future__ import annotations

import string
from typing import Iterator

from .automaton import Automaton, AutomatonType, State, Transition

_LETTERS = string.ascii_lowercase + string.ascii_uppercase + "_"
_DIGITS = string.digits


def identifier_automaton() -> Automaton:
    """DFA for a letter or underscore followed by letters, digits and underscores."""
    automaton = Automaton("IDENTIFIER", "Identifier", AutomatonType.DFA)
    automaton.add_state(State("q0", "q0", (100.0, 100.0), is_initial=True))
    automaton.add_state(State("q1", "q1", (200.0, 100.0), is_final=True))
    for char in _LETTERS:
        automaton.add_transition(Transition("q0", "q1", char))
        automaton.add_transition(Transition("q1", "q1", char))
    for char in _DIGITS:
        automaton.add_transition(Transition("q1", "q1", char))
    automaton.set_initial("q0")
    return automaton


def integer_automaton() -> Automaton:
    """DFA for one or more decimal digits."""
    automaton = Automaton("INTEGER", "Integer", AutomatonType.DFA)
    automaton.add_state(State("q0", "q0", (100.0, 200.0), is_initial=True))
    automaton.add_state(State("q1", "q1", (200.0, 200.0), is_final=True))
    for char in _DIGITS:
        automaton.add_transition(Transition("q0", "q1", char))
        automaton.add_transition(Transition("q1", "q1", char))
    automaton.set_initial("q0")
    return automaton


def float_automaton() -> Automaton:
    """DFA for digits, a dot, then digits."""
    automaton = Automaton("FLOAT", "Float", AutomatonType.DFA)
    automaton.add_state(State("q0", "q0", (100.0, 300.0), is_initial=True))
    automaton.add_state(State("q1", "q1", (200.0, 300.0)))
    automaton.add_state(State("q2", "q2", (300.0, 300.0)))
    automaton.add_state(State("q3", "q3", (400.0, 300.0), is_final=True))
    for char in _DIGITS:
        automaton.add_transition(Transition("q0", "q1", char))
        automaton.add_transition(Transition("q1", "q1", char))
        automaton.add_transition(Transition("q2", "q3", char))
        automaton.add_transition(Transition("q3", "q3", char))
    automaton.add_transition(Transition("q1", "q2", "."))
    automaton.set_initial("q0")
    return automaton


class AutomatonManager:
    """Ordered collection of automata keyed by id, starting with the defaults."""

    def __init__(self) -> None:
        self._automata: dict[str, Automaton] = {}
        self.create_default_automatons()

    def add(self, automaton: Automaton) -> bool:
        """Add an automaton; return False if its id is already taken."""
        if automaton.id in self._automata:
            return False
        self._automata[automaton.id] = automaton
        return True

    def remove(self, automaton_id: str) -> bool:
        return self._automata.pop(automaton_id, None) is not None

    def get(self, automaton_id: str) -> Automaton | None:
        return self._automata.get(automaton_id)

    def index_of(self, automaton_id: str) -> int:
        """Position of the automaton; raise KeyError if there is none with that id."""
        for index, key in enumerate(self._automata):
            if key == automaton_id:
                return index
        raise KeyError(automaton_id)

    def ids(self) -> list[str]:
        return list(self._automata)

    def __contains__(self, automaton_id: object) -> bool:
        return automaton_id in self._automata

    def __len__(self) -> int:
        return len(self._automata)

    def __iter__(self) -> Iterator[Automaton]:
        return iter(list(self._automata.values()))

    def clear(self) -> None:
        self._automata.clear()

    def find_match(self, text: str) -> str | None:
        """Id of the first automaton accepting the text, or None."""
        return next((a.id for a in self._automata.values() if a.accepts(text)), None)

    def find_all_matches(self, text: str) -> list[str]:
        return [a.id for a in self._automata.values() if a.accepts(text)]

    def create_default_automatons(self) -> None:
        for factory in (identifier_automaton, integer_automaton, float_automaton):
            self.add(factory())