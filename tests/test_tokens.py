import pytest

from compilerkit.tokens import LexerError, Token, TokenType


def test_type_string_is_member_name():
    token = Token(TokenType.INTEGER_LITERAL, "42", 1, 5)
    assert token.type_string == "INTEGER_LITERAL"
    assert Token(TokenType.MULTIPLY, "*").type_string == "MULTIPLY"


def test_token_defaults_position_to_zero():
    token = Token(TokenType.IDENTIFIER, "x")
    assert (token.line, token.column) == (0, 0)


def test_end_of_file_token():
    token = Token.end_of_file()
    assert token.type is TokenType.END_OF_FILE
    assert token.lexeme == ""


def test_tokens_compare_by_value():
    assert Token(TokenType.PLUS, "+", 2, 3) == Token(TokenType.PLUS, "+", 2, 3)
    assert Token(TokenType.PLUS, "+", 2, 3) != Token(TokenType.PLUS, "+", 2, 4)


def test_token_is_immutable():
    token = Token(TokenType.PLUS, "+", 1, 1)
    with pytest.raises(AttributeError):
        token.lexeme = "-"
    assert token.lexeme == "+"
    assert token == Token(TokenType.PLUS, "+", 1, 1)


def test_lexer_error_string():
    error = LexerError("Unexpected character", 3, 7, "@")
    assert str(error) == "Error at Line 3, Column 7: Unexpected character (near '@')"


def test_lexer_error_default_lexeme_is_empty():
    error = LexerError("Unterminated string", 1, 2)
    assert str(error).endswith("(near '')")