# compilerkit

A compact toolkit covering the classic stages of a teaching compiler. It has
no dependencies outside the standard library and supports Python 3.10 and
later.

| Module | What it holds |
| --- | --- |
| `compilerkit.automaton` | `State`, `Transition`, `Automaton` and `AutomatonType`: epsilon closures and acceptance |
| `compilerkit.regex` | Thompson construction of an NFA from a regular expression (`RegexToNFA`) |
| `compilerkit.nfa_to_dfa` | subset construction (`nfa_to_dfa`) |
| `compilerkit.minimizer` | DFA minimization by table filling (`minimize_dfa`) |
| `compilerkit.manager` | `AutomatonManager`, a registry of token-recognising automata |
| `compilerkit.tokens` | `TokenType`, `Token` and `LexerError` |
| `compilerkit.parser` | a recursive-descent parser for arithmetic expressions |
| `compilerkit.symbols` | `SymbolType`, `Symbol`, scoped `SymbolTable`, `SemanticError` |
| `compilerkit.semantic` | `SemanticAnalyzer` and a small AST (`ASTNode`) |
| `compilerkit.translator` | `StatementTranslator`, statement-by-statement translation |
| `compilerkit.codegen` | `CodeGenerator` for Python, Java, JavaScript or x86 assembly |

## Automata

An `Automaton` keeps its states in insertion order. Transitions carry one or
more symbols; a transition on `"E"` or `"ε"` is an epsilon move.
`accepts(text)` reads the text one character at a time, following a single
path for a DFA and the epsilon-closed set of states for an NFA.

## From a regular expression to a minimal DFA

```python
from compilerkit.regex import RegexToNFA, is_valid_regex
from compilerkit.nfa_to_dfa import nfa_to_dfa
from compilerkit.minimizer import minimize_dfa

pattern = "a(b|c)*"
assert is_valid_regex(pattern)

nfa = RegexToNFA().convert(pattern)
dfa = nfa_to_dfa(nfa)
minimal = minimize_dfa(dfa)

print(minimal.accepts("abcb"))   # True
print(minimal.accepts("ba"))     # False
```

Supported syntax: `|`, implicit concatenation, `*`, `+`, `?`, parentheses
and `E` (or `ε`) for the empty string. NFA states are named `q0`, `q1`, ...;
DFA states are named after the sets of NFA states they stand for, such as
`{q0,q2}`.

Malformed expressions — empty text, unbalanced parentheses, or an operator
at the very start — make `validate_regex` and `RegexToNFA.convert` raise
`RegexError`; `is_valid_regex` gives the same verdict as a boolean.
`nfa_to_dfa` raises `ValueError` for an automaton that is not valid, and
`minimize_dfa` for one that is not a valid DFA; the input is left unchanged.

The helpers `insert_concat_operator` and `infix_to_postfix` expose the
intermediate forms used during conversion:

```python
from compilerkit.regex import insert_concat_operator, infix_to_postfix

insert_concat_operator("ab*")   # "a.b*"
infix_to_postfix("a|b")         # "ab|"
```

## Recognizing lexemes

`AutomatonManager` starts out with three automata — `IDENTIFIER`,
`INTEGER` and `FLOAT` — and tries them in order:

```python
from compilerkit.manager import AutomatonManager

manager = AutomatonManager()
manager.find_match("count_1")        # "IDENTIFIER"
manager.find_match("42")             # "INTEGER"
manager.find_all_matches("3.14")     # ["FLOAT"]
"INTEGER" in manager                 # True
```

`find_match` returns `None` when no automaton accepts the text. Further
automata can be registered with `add` (which returns `False` for an id that
is already taken) and dropped with `remove`; `index_of` raises `KeyError`
for an unknown id.

## Parsing expressions

`Parser` parses a token list with the grammar

```
E  -> T E'
E' -> + T E' | ε
T  -> F T'
T' -> * F T' | ε
F  -> ( E ) | id | num
```

```python
from compilerkit.parser import Parser
from compilerkit.tokens import Token, TokenType

parser = Parser("Expression")
parser.set_tokens([
    Token(TokenType.IDENTIFIER, "a"),
    Token(TokenType.PLUS, "+"),
    Token(TokenType.INTEGER_LITERAL, "2"),
])
tree = parser.parse()
tree.root.symbol      # "E"
parser.has_errors     # False
```

Problems are collected in `parser.errors` as `ParseError` records rather
than raised, so a partial tree is always returned. A `Parser` created
without a grammar name records "No grammar set" and returns an empty tree.

## Semantic analysis

```python
from compilerkit.semantic import SemanticAnalyzer
from compilerkit.tokens import Token, TokenType

tokens = [
    Token(TokenType.KEYWORD, "int", 1, 1),
    Token(TokenType.IDENTIFIER, "x", 1, 5),
    Token(TokenType.ASSIGN, "=", 1, 7),
    Token(TokenType.INTEGER_LITERAL, "5", 1, 9),
    Token(TokenType.SEMICOLON, ";", 1, 10),
]
analyzer = SemanticAnalyzer()
analyzer.set_tokens(tokens)
analyzer.analyze()                          # True
analyzer.symbol_table.lookup("x").value     # "5"
```

`analyze` fills the `SymbolTable`, builds an `ASTNode` tree in
`analyzer.ast`, and records `SemanticError` entries in `errors` (undeclared
names, redeclarations, type mismatches, missing semicolons) and `warnings`
(variables never initialized). It returns `True` when there are no errors.

## Translation

`CodeGenerator` folds adjacent integer additions (`2 + 3` becomes `5`) when
tokens are set, and `generate` returns the program in the chosen
`TargetLanguage`:

```python
from compilerkit.codegen import CodeGenerator
from compilerkit.translator import TargetLanguage

generator = CodeGenerator(tokens, TargetLanguage.PYTHON)
generator.generate()   # "# Generated Python Code\n\nx = 5\n"
```

For `TargetLanguage.ASSEMBLY`, pass the analyzer's `SymbolTable` as
`symbol_table` to get `.data` and `.bss` entries for the declared
variables. `StatementTranslator` does the statement-level work for the
other languages and can be used on its own.

## What the package does not do

There is no lexer that turns source text into tokens: every stage after the
automata takes a list of `Token` values that the caller builds. The package
has no command-line program and does not run the code it generates.

## Running the tests

Install the `test` extra and run `pytest` from the project directory.