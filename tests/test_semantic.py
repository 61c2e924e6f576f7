import pytest

from compilerkit.semantic import ASTNode, ASTNodeType, SemanticAnalyzer
from compilerkit.symbols import SymbolType
from compilerkit.tokens import Token, TokenType as T


def kw(lexeme, line=1):
    return Token(T.KEYWORD, lexeme, line, 0)


def ident(lexeme, line=1):
    return Token(T.IDENTIFIER, lexeme, line, 0)


def num(lexeme, line=1):
    return Token(T.INTEGER_LITERAL, lexeme, line, 0)


def sym(token_type, lexeme, line=1):
    return Token(token_type, lexeme, line, 0)


SEMI = sym(T.SEMICOLON, ";")
ASSIGN = sym(T.ASSIGN, "=")
LBRACE = sym(T.LBRACE, "{")
RBRACE = sym(T.RBRACE, "}")
LPAREN = sym(T.LPAREN, "(")
RPAREN = sym(T.RPAREN, ")")


def run(tokens):
    analyzer = SemanticAnalyzer()
    analyzer.set_tokens(tokens)
    ok = analyzer.analyze()
    return analyzer, ok


def messages(items):
    return [item.message for item in items]


def test_initialised_declaration():
    analyzer, ok = run([kw("int"), ident("x"), ASSIGN, num("5"), SEMI])
    assert ok is True
    assert analyzer.errors == []
    assert analyzer.warnings == []
    [symbol] = analyzer.discovered_symbols
    assert symbol.name == "x"
    assert symbol.type is SymbolType.INTEGER
    assert symbol.value == "5"
    assert symbol.is_initialized


def test_declaration_builds_ast():
    analyzer, _ = run([kw("int"), ident("x"), ASSIGN, num("5"), SEMI])
    assert analyzer.ast.type is ASTNodeType.PROGRAM
    assert analyzer.ast.value == "Program"
    [decl] = analyzer.ast.children
    assert decl.type is ASTNodeType.DECLARATION
    assert decl.value == "int x"
    assert [c.value for c in decl.children] == ["5"]


def test_uninitialised_declaration_warns():
    analyzer, ok = run([kw("int", 3), ident("x", 3), SEMI])
    assert ok is True
    assert messages(analyzer.warnings) == ["Variable 'x' declared but never initialized"]
    assert analyzer.warnings[0].line == 3
    assert analyzer.warnings[0].kind == "Warning"


def test_assignment_initialises_variable():
    analyzer, ok = run(
        [kw("int"), ident("x"), SEMI, ident("x"), ASSIGN, num("3"), SEMI]
    )
    assert ok is True
    assert analyzer.warnings == []
    assert analyzer.symbol_table.lookup("x").value == "3"
    assign = analyzer.ast.children[1]
    assert assign.type is ASTNodeType.ASSIGNMENT
    assert assign.value == "x"
    assert assign.children[0].value == "3"


def test_assignment_to_undeclared_variable():
    analyzer, ok = run([ident("y", 2), ASSIGN, num("3"), SEMI])
    assert ok is False
    assert messages(analyzer.errors) == ["Undeclared variable 'y'"]
    assert analyzer.errors[0].line == 2


def test_declaration_type_mismatch():
    analyzer, ok = run(
        [kw("int"), ident("x"), ASSIGN, sym(T.STRING_LITERAL, '"hi"'), SEMI]
    )
    assert ok is False
    assert "Type mismatch: cannot assign string to int" in messages(analyzer.errors)


def test_float_accepts_integer():
    analyzer, ok = run([kw("float"), ident("f"), ASSIGN, num("1"), SEMI])
    assert ok is True
    assert analyzer.discovered_symbols[0].type is SymbolType.FLOAT


def test_assignment_type_mismatch_names_variable():
    analyzer, ok = run(
        [kw("int"), ident("x"), SEMI, ident("x"), ASSIGN, kw("true"), SEMI]
    )
    assert ok is False
    assert messages(analyzer.errors) == [
        "Type mismatch: cannot assign bool to int variable 'x'"
    ]


def test_duplicate_declaration_in_same_scope():
    tokens = [kw("int"), ident("x"), SEMI, kw("int"), ident("x"), SEMI]
    analyzer, ok = run(tokens)
    assert ok is False
    assert messages(analyzer.errors) == ["Variable 'x' already declared in this scope"]


def test_shadowing_in_block_is_allowed():
    tokens = [
        kw("int"), ident("x"), ASSIGN, num("1"), SEMI,
        LBRACE, kw("int"), ident("x"), ASSIGN, num("2"), SEMI, RBRACE,
    ]
    analyzer, ok = run(tokens)
    assert ok is True
    assert [s.scope for s in analyzer.discovered_symbols] == [0, 1]


def test_missing_semicolon_after_declaration():
    analyzer, ok = run([kw("int"), ident("x"), ASSIGN, num("1")])
    assert ok is False
    assert messages(analyzer.errors) == ["Missing ';' after declaration of 'x'"]


def test_missing_closing_brace():
    analyzer, ok = run([LBRACE, kw("int"), ident("x"), ASSIGN, num("1"), SEMI])
    assert ok is False
    assert messages(analyzer.errors) == ["Expected '}' to close block."]
    assert analyzer.errors[0].line == 0


def test_function_parameters_are_declared():
    tokens = [
        kw("int"), ident("add"), LPAREN,
        kw("int"), ident("a"), sym(T.COMMA, ","), kw("int"), ident("b"),
        RPAREN, LBRACE, RBRACE,
    ]
    analyzer, ok = run(tokens)
    assert ok is True
    assert [s.name for s in analyzer.discovered_symbols] == ["a", "b"]
    assert all(s.scope == 1 for s in analyzer.discovered_symbols)
    assert len(analyzer.warnings) == 2


def test_function_without_body():
    tokens = [kw("void"), ident("f"), LPAREN, RPAREN, SEMI]
    analyzer, ok = run(tokens)
    assert ok is False
    assert messages(analyzer.errors) == ["Expected '{' after function signature"]


def test_if_condition_with_undeclared_identifier():
    tokens = [kw("if"), LPAREN, ident("z"), RPAREN, LBRACE, RBRACE]
    analyzer, ok = run(tokens)
    assert ok is False
    assert messages(analyzer.errors) == ["Undeclared identifier 'z'"]


def test_if_block_declarations_are_scoped():
    tokens = [
        kw("int"), ident("x"), ASSIGN, num("1"), SEMI,
        kw("if"), LPAREN, ident("x"), RPAREN,
        LBRACE, kw("int"), ident("x"), ASSIGN, num("2"), SEMI, RBRACE,
    ]
    analyzer, ok = run(tokens)
    assert ok is True
    assert len(analyzer.discovered_symbols) == 2
    assert analyzer.symbol_table.current_scope == 0


def test_undeclared_identifier_statement():
    analyzer, ok = run([ident("foo", 4), SEMI])
    assert ok is False
    assert messages(analyzer.errors) == ["Undeclared identifier 'foo'"]
    assert str(analyzer.errors[0]) == "Line 4: Undeclared identifier 'foo'"


def test_analysis_is_repeatable():
    analyzer = SemanticAnalyzer()
    analyzer.set_tokens([ident("y"), ASSIGN, num("3"), SEMI])
    first = analyzer.analyze()
    first_errors = list(analyzer.errors)
    second = analyzer.analyze()
    assert first == second
    assert analyzer.errors == first_errors


def test_reset_clears_state():
    analyzer, _ = run([kw("int"), ident("x"), SEMI, ident("q"), SEMI])
    assert analyzer.errors and analyzer.warnings
    analyzer.reset()
    assert analyzer.errors == []
    assert analyzer.warnings == []
    assert analyzer.discovered_symbols == []
    assert analyzer.ast.children == []
    assert analyzer.symbol_table.lookup("x") is None


def test_ast_node_add_child():
    parent = ASTNode(ASTNodeType.PROGRAM, "Program")
    child = ASTNode(ASTNodeType.LITERAL, "7", 1)
    parent.add_child(child)
    assert parent.children == [child]


@pytest.mark.parametrize(
    "type_name,literal,ok_expected",
    [
        ("double", sym(T.FLOAT_LITERAL, "1.5"), True),
        ("string", sym(T.CHAR_LITERAL, "'a'"), True),
        ("char", num("1"), False),
        ("bool", kw("false"), True),
    ],
)
def test_type_compatibility(type_name, literal, ok_expected):
    analyzer, ok = run([kw(type_name), ident("v"), ASSIGN, literal, SEMI])
    assert ok is ok_expected