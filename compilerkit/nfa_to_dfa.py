"""Subset construction of a DFA from an NFA."""

from __future__ import annotations

from collections import deque
from typing import AbstractSet, Iterable

from .automaton import Automaton, AutomatonType, State


def state_set_name(states: Iterable[str]) -> str:
    """Name of a DFA state built from a set of NFA states."""
    members = sorted(set(states))
    if not members:
        return "∅"
    return "{" + ",".join(members) + "}"


def move(nfa: Automaton, states: Iterable[str], symbol: str) -> set[str]:
    """States reachable from the given ones on a single symbol."""
    return {
        t.target
        for state_id in states
        for t in nfa.transitions_from(state_id)
        if t.has_symbol(symbol)
    }


def _has_final(nfa: Automaton, states: AbstractSet[str]) -> bool:
    return any(
        (state := nfa.state(sid)) is not None and state.is_final for sid in states
    )


def nfa_to_dfa(nfa: Automaton) -> Automaton:
    """Build the DFA equivalent to an NFA; raise ValueError if the NFA is not valid."""
    if not nfa.is_valid():
        raise ValueError("automaton is not valid")

    dfa = Automaton("", f"{nfa.name} (DFA)", AutomatonType.DFA)
    alphabet = sorted(nfa.alphabet)
    for symbol in alphabet:
        dfa.add_symbol(symbol)

    start = frozenset(nfa.epsilon_closure({nfa.initial_state_id}))
    start_id = state_set_name(start)
    dfa.add_state(
        State(start_id, start_id, (100.0, 100.0), is_initial=True,
              is_final=_has_final(nfa, start))
    )
    dfa.set_initial(start_id)

    seen = {start_id}
    pending: deque[frozenset[str]] = deque([start])
    while pending:
        current = pending.popleft()
        current_id = state_set_name(current)
        for symbol in alphabet:
            following = frozenset(nfa.epsilon_closure(move(nfa, current, symbol)))
            if not following:
                continue
            following_id = state_set_name(following)
            if following_id not in seen:
                seen.add(following_id)
                pending.append(following)
                dfa.add_state(
                    State(following_id, following_id,
                          is_final=_has_final(nfa, following))
                )
            dfa.add_transition_from = None if False else None
            from .automaton import Transition
            dfa.add_transition(Transition(current_id, following_id, symbol))
    return dfa