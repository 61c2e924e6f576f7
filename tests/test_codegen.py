from compilerkit.codegen import CodeGenerator, fold_constants
from compilerkit.symbols import Symbol, SymbolTable, SymbolType
from compilerkit.tokens import Token, TokenType
from compilerkit.translator import TargetLanguage

T = TokenType


def tok(kind, lexeme, line=1):
    return Token(kind, lexeme, line, 0)


def declaration(name, value):
    return [
        tok(T.KEYWORD, "int"),
        tok(T.IDENTIFIER, name),
        tok(T.ASSIGN, "="),
        tok(T.INTEGER_LITERAL, value),
        tok(T.SEMICOLON, ";"),
    ]


EXIT = "    mov eax, 1\n    mov ebx, 0\n    int 0x80\n"
TEXT_HEADER = "section .text\n    global _start\n\n_start:\n"


def test_fold_single_addition():
    tokens = [
        tok(T.INTEGER_LITERAL, "1"),
        tok(T.PLUS, "+"),
        tok(T.INTEGER_LITERAL, "2"),
        tok(T.SEMICOLON, ";"),
    ]
    folded = fold_constants(tokens)
    assert [t.type for t in folded] == [T.INTEGER_LITERAL, T.SEMICOLON]
    assert folded[0].lexeme == "3"


def test_fold_chain_repeats_until_done():
    tokens = [
        tok(T.INTEGER_LITERAL, "1"),
        tok(T.PLUS, "+"),
        tok(T.INTEGER_LITERAL, "2"),
        tok(T.PLUS, "+"),
        tok(T.INTEGER_LITERAL, "3"),
    ]
    folded = fold_constants(tokens)
    assert len(folded) == 1
    assert folded[0].lexeme == "6"


def test_fold_leaves_identifiers_alone():
    tokens = [tok(T.IDENTIFIER, "a"), tok(T.PLUS, "+"), tok(T.INTEGER_LITERAL, "2")]
    assert fold_constants(tokens) == tokens


def test_set_tokens_folds():
    gen = CodeGenerator()
    gen.set_tokens([tok(T.INTEGER_LITERAL, "4"), tok(T.PLUS, "+"), tok(T.INTEGER_LITERAL, "5")])
    assert [t.lexeme for t in gen.tokens] == ["9"]


def test_python_declaration():
    gen = CodeGenerator(declaration("x", "5"), TargetLanguage.PYTHON)
    assert gen.generate() == "# Generated Python Code\n\nx = 5\n"
    assert gen.generated_code.startswith("# Generated Python Code")


def test_java_wraps_in_main_class():
    gen = CodeGenerator(declaration("x", "5"), TargetLanguage.JAVA)
    code = gen.generate()
    assert code == (
        "// Generated Java Code\nimport java.util.*;\n\npublic class Main {\n"
        "    int x = 5;\n}\n"
    )


def test_javascript_declaration():
    gen = CodeGenerator(declaration("x", "5"), TargetLanguage.JAVASCRIPT)
    assert gen.generate() == "// Generated JavaScript Code\n\nlet x = 5;\n"


def test_reset_clears_generated_code():
    gen = CodeGenerator(declaration("x", "5"))
    gen.generate()
    gen.reset()
    assert gen.generated_code == ""


def test_assembly_simple_assignment_with_symbols():
    table = SymbolTable()
    table.add(Symbol("x", SymbolType.INTEGER, value="5", is_initialized=True))
    gen = CodeGenerator(declaration("x", "5"), TargetLanguage.ASSEMBLY, table)
    code = gen.generate()
    assert code == (
        "section .data\n    x dd 5\n"
        "section .bss\n"
        + TEXT_HEADER
        + "    ; x = 5\n    mov eax, 5\n    mov [x], eax\n\n"
        + EXIT
    )


def test_assembly_binary_expression():
    tokens = [
        tok(T.KEYWORD, "int"),
        tok(T.IDENTIFIER, "z"),
        tok(T.ASSIGN, "="),
        tok(T.IDENTIFIER, "x"),
        tok(T.PLUS, "+"),
        tok(T.IDENTIFIER, "y"),
        tok(T.SEMICOLON, ";"),
    ]
    code = CodeGenerator(tokens, TargetLanguage.ASSEMBLY).generate()
    assert "    ; z = x + y\n    mov eax, [x]\n    add eax, [y]\n    mov [z], eax\n\n" in code


def test_assembly_folds_constants_first():
    tokens = [
        tok(T.KEYWORD, "int"),
        tok(T.IDENTIFIER, "z"),
        tok(T.ASSIGN, "="),
        tok(T.INTEGER_LITERAL, "2"),
        tok(T.PLUS, "+"),
        tok(T.INTEGER_LITERAL, "3"),
        tok(T.SEMICOLON, ";"),
    ]
    code = CodeGenerator(tokens, TargetLanguage.ASSEMBLY).generate()
    assert "    mov eax, 5\n    mov [z], eax\n" in code
    assert "add eax" not in code


def test_assembly_return_replaces_default_exit():
    tokens = [tok(T.KEYWORD, "return"), tok(T.INTEGER_LITERAL, "0"), tok(T.SEMICOLON, ";")]
    code = CodeGenerator(tokens, TargetLanguage.ASSEMBLY).generate()
    assert code.endswith("    ; return 0\n    mov eax, 1\n    mov ebx, 0\n    int 0x80\n\n")
    assert code.count("int 0x80") == 1


def test_assembly_char_and_expression_symbols():
    table = SymbolTable()
    table.add(Symbol("c", SymbolType.CHAR, value="'a'", is_initialized=True))
    table.add(Symbol("y", SymbolType.INTEGER, value="a + b", is_initialized=True))
    table.add(Symbol("d", SymbolType.CHAR))
    code = CodeGenerator([], TargetLanguage.ASSEMBLY, table).generate()
    assert code.startswith("section .data\n    c db 'a'\nsection .bss\n")
    assert "    y resd 1\n" in code
    assert "    d resb 1\n" in code


def test_assembly_empty_program_exits():
    code = CodeGenerator([], TargetLanguage.ASSEMBLY).generate()
    assert code == "section .data\nsection .bss\n" + TEXT_HEADER + EXIT