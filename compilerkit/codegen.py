"""Code generation from a C-like token stream into several target languages."""

from __future__ import annotations

from typing import Iterable

from .symbols import SymbolTable, SymbolType
from .tokens import Token, TokenType
from .translator import StatementTranslator, TargetLanguage, is_type_keyword

_EXPRESSION_OPERATORS = ("+", "-", "*", "/")


def _to_int(lexeme: str) -> int:
    try:
        return int(lexeme)
    except ValueError:
        return 0


def fold_constants(tokens: Iterable[Token]) -> list[Token]:
    """Replace every ``integer + integer`` run with its sum until none is left."""
    current = list(tokens)
    while True:
        folded: list[Token] = []
        changed = False
        index = 0
        while index < len(current):
            window = current[index:index + 3]
            if (
                len(window) == 3
                and window[0].type is TokenType.INTEGER_LITERAL
                and window[1].type is TokenType.PLUS
                and window[2].type is TokenType.INTEGER_LITERAL
            ):
                total = _to_int(window[0].lexeme) + _to_int(window[2].lexeme)
                folded.append(Token(TokenType.INTEGER_LITERAL, str(total), 0, 0))
                index += 3
                changed = True
            else:
                folded.append(current[index])
                index += 1
        current = folded
        if not changed:
            return current


def _operand(token: Token) -> str:
    if token.type is TokenType.IDENTIFIER:
        return f"[{token.lexeme}]"
    return token.lexeme


class CodeGenerator:
    """Generates target-language code from tokens and, for assembly, a symbol table."""

    def __init__(
        self,
        tokens: Iterable[Token] = (),
        target_language: TargetLanguage = TargetLanguage.PYTHON,
        symbol_table: SymbolTable | None = None,
    ) -> None:
        self.tokens: list[Token] = []
        self.target_language = target_language
        self.symbol_table = symbol_table
        self.source_code = ""
        self.generated_code = ""
        self._position = 0
        self.set_tokens(tokens)

    def set_tokens(self, tokens: Iterable[Token]) -> None:
        """Store the tokens with integer additions folded into constants."""
        self.tokens = fold_constants(tokens)
        self._position = 0

    def reset(self) -> None:
        self.generated_code = ""
        self._position = 0

    def generate(self) -> str:
        """Generate code in the target language and return it."""
        self.reset()
        if self.target_language is TargetLanguage.PYTHON:
            code = "# Generated Python Code\n\n" + self._translate(0)
        elif self.target_language is TargetLanguage.JAVA:
            code = (
                "// Generated Java Code\n"
                "import java.util.*;\n\n"
                "public class Main {\n"
                + self._translate(1)
                + "}\n"
            )
        elif self.target_language is TargetLanguage.JAVASCRIPT:
            code = "// Generated JavaScript Code\n\n" + self._translate(0)
        else:
            code = self._assembly()
        self.generated_code = code
        return code

    def _translate(self, indent_level: int) -> str:
        translator = StatementTranslator(self.tokens, self.target_language)
        translator.indent_level = indent_level
        return translator.run()

    # assembly

    def _data_sections(self) -> tuple[str, str]:
        data = "section .data\n"
        bss = "section .bss\n"
        if self.symbol_table is None:
            return data, bss
        for symbol in self.symbol_table.discovered_symbols():
            value = symbol.value
            is_expression = bool(value) and any(op in value for op in _EXPRESSION_OPERATORS)
            is_char = symbol.type is SymbolType.CHAR
            if value and not is_expression:
                if is_char:
                    data += f"    {symbol.name} db '{value[1:-1]}'\n"
                else:
                    data += f"    {symbol.name} dd {value}\n"
            elif is_char:
                bss += f"    {symbol.name} resb 1\n"
            else:
                bss += f"    {symbol.name} resd 1\n"
        return data, bss

    def _assembly(self) -> str:
        data, bss = self._data_sections()
        text = "section .text\n    global _start\n\n_start:\n"

        self._position = 0
        while not self._at_end():
            token = self._peek()
            if token.type is TokenType.KEYWORD and is_type_keyword(token.lexeme):
                self._advance()
                name = self._advance().lexeme
                if self._match(TokenType.ASSIGN):
                    lhs = self._advance()
                    if self._check(TokenType.SEMICOLON):
                        text += f"    ; {name} = {lhs.lexeme}\n"
                        text += f"    mov eax, {_operand(lhs)}\n"
                        text += f"    mov [{name}], eax\n\n"
                        self._match(TokenType.SEMICOLON)
                        continue
                    op = self._advance()
                    rhs = self._advance()
                    text += f"    ; {name} = {lhs.lexeme} {op.lexeme} {rhs.lexeme}\n"
                    text += f"    mov eax, {_operand(lhs)}\n"
                    if op.lexeme == "+":
                        text += f"    add eax, {_operand(rhs)}\n"
                    elif op.lexeme == "-":
                        text += f"    sub eax, {_operand(rhs)}\n"
                    text += f"    mov [{name}], eax\n\n"
                self._match(TokenType.SEMICOLON)
            elif token.type is TokenType.KEYWORD and token.lexeme == "return":
                self._advance()
                value = self._advance().lexeme
                self._match(TokenType.SEMICOLON)
                text += f"    ; return {value}\n"
                text += "    mov eax, 1\n"
                text += f"    mov ebx, {value}\n"
                text += "    int 0x80\n\n"
            else:
                self._advance()

        if "int 0x80" not in text:
            text += "    mov eax, 1\n    mov ebx, 0\n    int 0x80\n"
        return data + bss + text

    # token cursor

    def _at_end(self) -> bool:
        return self._position >= len(self.tokens)

    def _peek(self) -> Token:
        if self._at_end():
            return Token.end_of_file()
        return self.tokens[self._position]

    def _advance(self) -> Token:
        if self._at_end():
            return Token.end_of_file()
        token = self.tokens[self._position]
        self._position += 1
        return token

    def _check(self, token_type: TokenType) -> bool:
        return not self._at_end() and self.tokens[self._position].type is token_type

    def _match(self, token_type: TokenType) -> bool:
        if self._check(token_type):
            self._advance()
            return True
        return False