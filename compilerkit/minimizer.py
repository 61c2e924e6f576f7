"""Minimisation of deterministic finite automata by the table-filling method."""

from __future__ import annotations

from collections import deque
from dataclasses import replace
from typing import AbstractSet, Sequence

from .automaton import Automaton, AutomatonType, State, Transition

Pair = tuple[str, str]


def _pair(first: str, second: str) -> Pair:
    return (first, second) if first < second else (second, first)


def _step(dfa: Automaton, state_id: str, symbol: str) -> str | None:
    return next(
        (t.target for t in dfa.transitions_from(state_id) if t.has_symbol(symbol)),
        None,
    )


def reachable_states(dfa: Automaton) -> set[str]:
    """Ids of the states reachable from the initial state."""
    initial = dfa.initial_state_id
    if not initial:
        return set()
    reachable = {initial}
    pending = deque([initial])
    while pending:
        current = pending.popleft()
        for transition in dfa.transitions_from(current):
            if transition.target not in reachable:
                reachable.add(transition.target)
                pending.append(transition.target)
    return reachable


def distinguishable_pairs(dfa: Automaton) -> set[Pair]:
    """Pairs of states, each ordered, that some input tells apart."""
    state_ids = [state.id for state in dfa.states]
    alphabet = sorted(dfa.alphabet)
    all_pairs = [
        (first, second)
        for index, first in enumerate(state_ids)
        for second in state_ids[index + 1:]
    ]

    distinguishable = {
        _pair(first, second)
        for first, second in all_pairs
        if dfa.state(first).is_final != dfa.state(second).is_final
    }

    changed = True
    while changed:
        changed = False
        for first, second in all_pairs:
            pair = _pair(first, second)
            if pair in distinguishable:
                continue
            for symbol in alphabet:
                next_first = _step(dfa, first, symbol)
                next_second = _step(dfa, second, symbol)
                if (
                    next_first
                    and next_second
                    and next_first != next_second
                    and _pair(next_first, next_second) in distinguishable
                ):
                    distinguishable.add(pair)
                    changed = True
                    break
    return distinguishable


def equivalence_classes(
    dfa: Automaton, distinguishable: AbstractSet[Pair]
) -> list[set[str]]:
    """Group states that are not distinguishable from a class's first state."""
    classes: list[set[str]] = []
    processed: set[str] = set()
    state_ids = [state.id for state in dfa.states]
    for state_id in state_ids:
        if state_id in processed:
            continue
        members = {state_id}
        processed.add(state_id)
        for other_id in state_ids:
            if other_id in processed or other_id == state_id:
                continue
            if _pair(state_id, other_id) not in distinguishable:
                members.add(other_id)
                processed.add(other_id)
        classes.append(members)
    return classes


def _class_index(classes: Sequence[AbstractSet[str]], state_id: str) -> int | None:
    return next((i for i, members in enumerate(classes) if state_id in members), None)


def _build_minimized(dfa: Automaton, classes: Sequence[set[str]]) -> Automaton:
    minimized = Automaton("", f"{dfa.name} (Minimized)", AutomatonType.DFA)
    alphabet = sorted(dfa.alphabet)
    for symbol in alphabet:
        minimized.add_symbol(symbol)

    class_ids: list[str] = []
    for members in classes:
        ordered = sorted(members)
        new_id = ordered[0] if len(ordered) == 1 else "{" + ",".join(ordered) + "}"
        class_ids.append(new_id)
        is_initial = dfa.initial_state_id in members
        is_final = any(
            (state := dfa.state(sid)) is not None and state.is_final for sid in ordered
        )
        minimized.add_state(
            State(new_id, new_id, (0.0, 0.0), is_initial=is_initial, is_final=is_final)
        )
        if is_initial:
            minimized.set_initial(new_id)

    for members, source_id in zip(classes, class_ids):
        representative = sorted(members)[0]
        for symbol in alphabet:
            target = _step(dfa, representative, symbol)
            if target is None:
                continue
            target_index = _class_index(classes, target)
            if target_index is not None:
                minimized.add_transition(
                    Transition(source_id, class_ids[target_index], symbol)
                )
    return minimized


def minimize_dfa(dfa: Automaton) -> Automaton:
    """Return the minimal DFA equivalent to the given one.

    Raises ValueError if the automaton is not a valid DFA. The input is left unchanged.
    """
    if not dfa.is_dfa() or not dfa.is_valid():
        raise ValueError("automaton is not a valid DFA")

    working = Automaton(dfa.id, dfa.name, AutomatonType.DFA)
    for state in dfa.states:
        working.add_state(replace(state))
    for transition in dfa.transitions:
        working.add_transition(transition)
    for symbol in dfa.alphabet:
        working.add_symbol(symbol)
    working.set_initial(dfa.initial_state_id)

    reachable = reachable_states(working)
    for state in working.states:
        if state.id not in reachable:
            working.remove_state(state.id)

    classes = equivalence_classes(working, distinguishable_pairs(working))
    return _build_minimized(working, classes)