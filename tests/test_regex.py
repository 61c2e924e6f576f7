import pytest

from compilerkit.regex import (
    RegexError,
    RegexToNFA,
    infix_to_postfix,
    insert_concat_operator,
    is_valid_regex,
    validate_regex,
)


@pytest.mark.parametrize(
    "regex, message",
    [
        ("", "Regex cannot be empty"),
        ("a)(", "Unmatched closing parenthesis"),
        ("(ab", "Unmatched opening parenthesis"),
        ("*a", "Invalid operator '*' at start"),
        ("|a", "Invalid operator '|' at start"),
    ],
)
def test_validate_errors(regex, message):
    with pytest.raises(RegexError) as info:
        validate_regex(regex)
    assert str(info.value) == message
    assert not is_valid_regex(regex)


def test_valid_regex():
    assert is_valid_regex("(a|b)*c")


def test_insert_concat_operator():
    assert insert_concat_operator("ab") == "a.b"
    assert insert_concat_operator("a|b") == "a|b"
    assert insert_concat_operator("") == ""


def test_postfix_drops_parentheses_keeps_operands():
    postfix = infix_to_postfix("(a|b)*c")
    assert "(" not in postfix and ")" not in postfix
    assert sorted(c for c in postfix if c.isalpha()) == ["a", "b", "c"]


def test_postfix_concat_binds_tighter_than_alternation():
    assert infix_to_postfix("ab|c").endswith("|")


@pytest.mark.parametrize(
    "regex, accepted, rejected",
    [
        ("ab", ["ab"], ["", "a", "abb"]),
        ("a|b", ["a", "b"], ["", "ab"]),
        ("a*", ["", "a", "aaaa"], ["b", "ab"]),
        ("a+", ["a", "aaa"], ["", "b"]),
        ("ab?", ["a", "ab"], ["abb", ""]),
        ("(a|b)*c", ["c", "abc", "bbac"], ["ab", "ca"]),
    ],
)
def test_language(regex, accepted, rejected):
    nfa = RegexToNFA().convert(regex)
    for text in accepted:
        assert nfa.accepts(text), text
    for text in rejected:
        assert not nfa.accepts(text), text


def test_epsilon_literal():
    nfa = RegexToNFA().convert("E")
    assert nfa.accepts("")
    assert nfa.alphabet == set()


def test_nfa_shape():
    nfa = RegexToNFA().convert("a|b")
    assert nfa.name == "NFA from /a|b/"
    assert nfa.id == f"nfa_{len(nfa.states)}"
    assert nfa.alphabet == {"a", "b"}
    assert nfa.is_valid()
    assert not nfa.is_dfa()
    assert sum(s.is_initial for s in nfa.states) == 1
    assert sum(s.is_final for s in nfa.states) == 1
    assert nfa.states[0].position == (100.0, 100.0)


def test_state_ids_are_unique():
    nfa = RegexToNFA().convert("(ab)+|c*")
    ids = [s.id for s in nfa.states]
    assert len(ids) == len(set(ids))


def test_counter_resets_between_conversions():
    converter = RegexToNFA()
    first = converter.convert("ab")
    second = converter.convert("ab")
    assert [s.id for s in first.states] == [s.id for s in second.states]


@pytest.mark.parametrize("regex", ["a||b", "()", "(|a)"])
def test_malformed_expressions(regex):
    with pytest.raises(RegexError):
        RegexToNFA().convert(regex)