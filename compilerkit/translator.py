"""Statement-by-statement translation of a C-like token stream into other languages."""

from __future__ import annotations

import re
from enum import Enum
from typing import Iterable

from .tokens import Token, TokenType

_TYPE_KEYWORDS = frozenset(
    {"int", "float", "string", "bool", "char", "double", "short", "long", "void"}
)
_CONTROL_KEYWORDS = frozenset({"if", "while", "for"})
_INTEGER = re.compile(r"[+-]?\d+")
_INDENT = "    "


class TargetLanguage(Enum):
    """Language that generated code is written in."""

    PYTHON = "python"
    JAVA = "java"
    JAVASCRIPT = "javascript"
    ASSEMBLY = "assembly"


def is_type_keyword(keyword: str) -> bool:
    """Whether the word names a built-in type, case-insensitively."""
    return keyword.lower() in _TYPE_KEYWORDS


def extract_loop_variable(init: str) -> str:
    """Name of the variable assigned in a for-loop initialiser; "i" if none is."""
    eq_index = init.find("=")
    if eq_index == -1:
        return "i"
    left = init[:eq_index].strip()
    return left.split(" ")[-1]


def condition_to_range(condition: str, init: str) -> str:
    """A Python ``range(...)`` call equivalent to a counting loop's bounds."""
    limit = "10"
    if "<=" in condition:
        parts = condition.split("<=")
        if len(parts) > 1:
            raw_limit = parts[-1].strip()
            if _INTEGER.fullmatch(raw_limit):
                limit = str(int(raw_limit) + 1)
            else:
                limit = f"{raw_limit} + 1"
    elif "<" in condition:
        limit = condition.split("<")[-1].strip()

    start = "0"
    if "=" in init:
        start = init.split("=")[-1].strip()
    return f"range({start}, {limit})"


class StatementTranslator:
    """Translates statements one after another into the target language.

    ``indent_level`` is the indentation the output starts at; it may be set
    before calling :meth:`run`.
    """

    def __init__(self, tokens: Iterable[Token], language: TargetLanguage) -> None:
        self.tokens: list[Token] = list(tokens)
        self.language = language
        self.indent_level = 0
        self._position = 0
        self._code = ""

    @property
    def _python(self) -> bool:
        return self.language is TargetLanguage.PYTHON

    def run(self) -> str:
        """Translate every statement and return the generated code."""
        self._position = 0
        self._code = ""
        while not self._at_end():
            self._statement()
        return self._code

    # statements

    def _statement(self) -> None:
        if self._at_end():
            return
        token = self._peek()
        lexeme = token.lexeme

        if lexeme.startswith("#"):
            self._preprocessor()
            return
        if lexeme == "using":
            self._advance()
            if self._peek().lexeme == "namespace":
                self._advance()
                self._advance()
                self._match(TokenType.SEMICOLON)
            return
        if lexeme == "cout":
            self._cout()
            return
        if lexeme == "cin":
            self._cin()
            return
        if self._is_function_declaration():
            self._function_declaration()
            return
        if lexeme.lower() in _CONTROL_KEYWORDS:
            {"if": self._if_statement, "while": self._while_loop, "for": self._for_loop}[
                lexeme.lower()
            ]()
            return
        if token.type is TokenType.KEYWORD and is_type_keyword(lexeme):
            self._declaration()
            return
        if token.type is TokenType.KEYWORD:
            if lexeme.lower() == "return":
                self._code += self._indent() + "return"
                self._advance()
                if not self._check(TokenType.SEMICOLON):
                    self._code += " " + self._expression()
                self._match(TokenType.SEMICOLON)
                self._code += "\n"
            else:
                self._code += self._indent() + self._advance().lexeme + " "
            return
        if token.type is TokenType.IDENTIFIER:
            self._assignment()
            return
        if token.type is TokenType.COMMENT:
            self._code += self._indent() + self._comment(self._advance().lexeme) + "\n"
            return
        if token.type is TokenType.LBRACE:
            if not self._python:
                self._code += " {\n"
            self.indent_level += 1
            self._advance()
            self._block()
            return
        if token.type is TokenType.RBRACE:
            self._advance()
            self._close_brace()
            return
        if token.type is TokenType.SEMICOLON:
            self._advance()
            return

        self._code += f"# [Skipped unknown token: {lexeme}]\n"
        self._advance()

    def _comment(self, comment: str) -> str:
        if not self._python:
            return comment
        if comment.startswith("//"):
            return "#" + comment[2:]
        if comment.startswith("/*"):
            body = comment[2:-2] if len(comment) >= 4 else comment[2:]
            return "'''" + body + "'''"
        return comment

    def _close_brace(self) -> None:
        if not self._python:
            self.indent_level -= 1
            self._code += self._indent() + "}\n"

    def _block(self) -> None:
        while not self._at_end() and not self._check(TokenType.RBRACE):
            self._statement()
        if self._check(TokenType.RBRACE):
            self._advance()
            self._close_brace()

    def _body(self) -> None:
        """Translate a loop or branch body; the indent was already raised."""
        if self._check(TokenType.LBRACE):
            self._advance()
            self._block()
            self.indent_level -= 1
        else:
            self._statement()
            self.indent_level -= 1
            if not self._python:
                self._code += self._indent() + "}\n"

    def _is_function_declaration(self) -> bool:
        if self._at_end() or not is_type_keyword(self._peek().lexeme):
            return False
        return (
            self._peek(1).type is TokenType.IDENTIFIER
            and self._peek(2).type is TokenType.LPAREN
        )

    def _map_type(self, cpp_type: str) -> str:
        if self.language is TargetLanguage.JAVA:
            lower = cpp_type.lower()
            if lower == "string":
                return "String"
            if lower == "bool":
                return "boolean"
        return cpp_type

    def _function_declaration(self) -> None:
        return_type = self._advance().lexeme
        name = self._advance().lexeme
        self._match(TokenType.LPAREN)

        params: list[str] = []
        while not self._check(TokenType.RPAREN) and not self._at_end():
            start = self._position
            if self._check(TokenType.KEYWORD):
                param_type = self._advance().lexeme
                if self._check(TokenType.IDENTIFIER):
                    param_name = self._advance().lexeme
                    if self.language in (TargetLanguage.PYTHON, TargetLanguage.JAVASCRIPT):
                        params.append(param_name)
                    elif self.language is TargetLanguage.JAVA:
                        params.append(f"{self._map_type(param_type)} {param_name}")
                    else:
                        params.append(f"{param_type} {param_name}")
            if self._check(TokenType.COMMA):
                self._advance()
            if self._position == start:
                self._advance()
        self._match(TokenType.RPAREN)

        joined = ", ".join(params)
        self._code += self._indent()
        if self._python:
            self._code += f"def {name}({joined}):\n"
        elif self.language is TargetLanguage.JAVA:
            self._code += f"public static {self._map_type(return_type)} {name}({joined}) {{\n"
        elif self.language is TargetLanguage.JAVASCRIPT:
            self._code += f"function {name}({joined}) {{\n"
        else:
            self._code += f"{return_type} {name}({joined}) {{\n"

        self.indent_level += 1
        if self._check(TokenType.LBRACE):
            self._advance()
            self._block()
        self.indent_level -= 1
        if not self._python:
            self._code += self._indent() + "}\n"
        self._code += "\n"

    def _output_parts(self, separator: str) -> tuple[list[str], bool]:
        parts: list[str] = []
        has_endl = False
        while not self._check(TokenType.SEMICOLON) and not self._at_end():
            token = self._peek()
            if token.lexeme == "<<":
                self._advance()
                continue
            if token.lexeme == "endl":
                has_endl = True
                self._advance()
                continue
            if self._python and token.type is TokenType.STRING_LITERAL:
                parts.append(self._advance().lexeme)
                continue
            expr = ""
            while (
                not self._check(TokenType.SEMICOLON)
                and self._peek().lexeme != "<<"
                and not self._at_end()
            ):
                expr += self._advance().lexeme + separator
            if expr:
                parts.append(expr.strip())
        return parts, has_endl

    def _cout(self) -> None:
        self._advance()
        self._code += self._indent()
        if self._python:
            self._code += "print("
            parts, _ = self._output_parts("")
            self._code += ", ".join(parts) + ")\n"
        elif self.language is TargetLanguage.JAVA:
            self._code += "System.out.print("
            parts, has_endl = self._output_parts(" ")
            if has_endl:
                self._code = self._code.replace("print(", "println(")
            self._code += " + ".join(parts) + ");\n"
        elif self.language is TargetLanguage.JAVASCRIPT:
            self._code += "console.log("
            parts, _ = self._output_parts(" ")
            self._code += " + ".join(parts) + ");\n"
        self._match(TokenType.SEMICOLON)

    def _cin(self) -> None:
        self._advance()
        names: list[str] = []
        while not self._check(TokenType.SEMICOLON) and not self._at_end():
            if self._check(TokenType.IDENTIFIER) and self._peek().lexeme != ">>":
                names.append(self._advance().lexeme)
            else:
                self._advance()
        self._match(TokenType.SEMICOLON)

        for name in names:
            self._code += self._indent()
            if self._python:
                self._code += f"{name} = input()\n"
            elif self.language is TargetLanguage.JAVA:
                self._code += "Scanner scanner = new Scanner(System.in);\n"
                self._code += self._indent() + f"{name} = scanner.nextLine();\n"
            elif self.language is TargetLanguage.JAVASCRIPT:
                self._code += (
                    f"// {name} = readline() // (Node.js requires 'readline' module)\n"
                )

    def _preprocessor(self) -> None:
        self._advance()
        header = ""
        if self._check(TokenType.LESS_THAN):
            self._advance()
            while not self._at_end() and not self._check(TokenType.GREATER_THAN):
                header += self._advance().lexeme
            self._advance()

        note = ""
        if header == "iostream":
            note = {
                TargetLanguage.JAVA: "// C++ <iostream> is handled by System.out and java.util.Scanner\n",
                TargetLanguage.PYTHON: "# C++ <iostream> is equivalent to standard input/output functions like print() and input()\n",
                TargetLanguage.JAVASCRIPT: "// C++ <iostream> is equivalent to console.log() and prompt() or process.stdin\n",
            }.get(self.language, "")
        elif header == "string":
            if self.language is TargetLanguage.JAVA:
                note = "// C++ <string> corresponds to the built-in String class\n"
            elif self.language in (TargetLanguage.PYTHON, TargetLanguage.JAVASCRIPT):
                note = "# C++ <string> corresponds to the built-in string type\n"
        if note:
            self._code += self._indent() + note

        while not self._at_end() and self._peek().lexeme != "\n":
            if self._check(TokenType.KEYWORD) or self._check(TokenType.IDENTIFIER):
                break
            self._advance()

    def _if_statement(self) -> None:
        self._advance()
        self._code += self._indent() + ("if " if self._python else "if (")
        self._code += self._condition()
        self._code += ":\n" if self._python else ") {\n"
        self.indent_level += 1
        self._body()

        if self._check(TokenType.KEYWORD) and self._peek().lexeme == "else":
            self._advance()
            self._code += self._indent()
            if self._check(TokenType.KEYWORD) and self._peek().lexeme == "if":
                self._code += "el" if self._python else "else "
                self._if_statement()
            else:
                self._code += "else:\n" if self._python else "else {\n"
                self.indent_level += 1
                self._body()

    def _while_loop(self) -> None:
        self._advance()
        self._code += self._indent() + ("while " if self._python else "while (")
        self._code += self._condition()
        self._code += ":\n" if self._python else ") {\n"
        self.indent_level += 1
        self._body()

    def _collect_until(self, *stops: TokenType) -> str:
        text = ""
        while not any(self._check(stop) for stop in stops) and not self._at_end():
            text += self._advance().lexeme + " "
        return text

    def _for_loop(self) -> None:
        self._advance()
        self._match(TokenType.LPAREN)
        init = self._collect_until(TokenType.SEMICOLON)
        self._match(TokenType.SEMICOLON)
        cond = self._collect_until(TokenType.SEMICOLON)
        self._match(TokenType.SEMICOLON)
        inc = self._collect_until(TokenType.RPAREN, TokenType.LBRACE)
        self._match(TokenType.RPAREN)

        self._code += self._indent()
        if self._python:
            variable = extract_loop_variable(init)
            self._code += f"for {variable} in {condition_to_range(cond, init)}:\n"
        else:
            self._code += f"for ({init.strip()}; {cond.strip()}; {inc.strip()}) {{\n"
        self.indent_level += 1
        self._body()

    def _declaration(self) -> None:
        type_lexeme = self._advance().lexeme
        if not self._check(TokenType.IDENTIFIER):
            self._code += (
                self._indent()
                + f"# Error: Missing identifier after type '{type_lexeme}'\n"
            )
            self._skip_to_next_statement()
            return

        name = self._advance().lexeme
        self._code += self._indent()
        if self.language is TargetLanguage.JAVASCRIPT:
            self._code += f"let {name}"
        elif self._python:
            self._code += name
        elif self.language is TargetLanguage.JAVA:
            self._code += f"{self._map_type(type_lexeme)} {name}"
        else:
            self._code += f"{type_lexeme} {name}"

        if self._match(TokenType.ASSIGN):
            self._code += " = " + self._expression()
        elif self._python:
            self._code += " = None"
        self._code += "\n" if self._python else ";\n"
        self._match(TokenType.SEMICOLON)

    def _call_arguments(self) -> list[str]:
        args: list[str] = []
        while not self._check(TokenType.RPAREN) and not self._at_end():
            arg = ""
            depth = 0
            while not self._at_end():
                if self._check(TokenType.LPAREN):
                    depth += 1
                if self._check(TokenType.RPAREN):
                    if depth == 0:
                        break
                    depth -= 1
                if self._check(TokenType.COMMA) and depth == 0:
                    break
                arg += self._advance().lexeme + " "
            if arg.strip():
                args.append(arg.strip())
            if self._check(TokenType.COMMA):
                self._advance()
        return args

    def _assignment(self) -> None:
        name = self._advance().lexeme
        self._code += self._indent() + name
        if self._check(TokenType.LPAREN):
            self._advance()
            args = self._call_arguments()
            self._match(TokenType.RPAREN)
            self._code += "(" + ", ".join(args) + ")"
        elif self._match(TokenType.ASSIGN):
            self._code += " = " + self._expression()
        self._code += "\n" if self._python else ";\n"
        self._match(TokenType.SEMICOLON)

    def _python_word(self, lexeme: str, *, null: bool) -> str:
        if lexeme == "!":
            return "not " if self._python else lexeme
        if not self._python:
            return lexeme
        words = {"true": "True", "false": "False", "&&": "and", "||": "or"}
        if null:
            words.update({"NULL": "None", "nullptr": "None"})
        return words.get(lexeme, lexeme)

    def _expression(self) -> str:
        result = ""
        while not self._at_end() and not any(
            self._check(t)
            for t in (TokenType.SEMICOLON, TokenType.RPAREN, TokenType.COMMA)
        ):
            result += self._python_word(self._advance().lexeme, null=True) + " "
        return result.strip()

    def _condition(self) -> str:
        self._match(TokenType.LPAREN)
        depth = 0
        result = ""
        while not self._at_end():
            if self._check(TokenType.LPAREN):
                depth += 1
            if self._check(TokenType.RPAREN):
                if depth == 0:
                    break
                depth -= 1
            if self._check(TokenType.LBRACE) and depth == 0:
                break
            result += self._python_word(self._advance().lexeme, null=False) + " "
        self._match(TokenType.RPAREN)
        return result.strip()

    def _skip_to_next_statement(self) -> None:
        while not self._at_end() and not any(
            self._check(t)
            for t in (TokenType.SEMICOLON, TokenType.LBRACE, TokenType.RBRACE)
        ):
            self._advance()
        self._match(TokenType.SEMICOLON)

    # token cursor

    def _indent(self) -> str:
        return _INDENT * max(self.indent_level, 0)

    def _at_end(self) -> bool:
        return self._position >= len(self.tokens)

    def _peek(self, offset: int = 0) -> Token:
        index = self._position + offset
        if index >= len(self.tokens):
            return Token.end_of_file()
        return self.tokens[index]

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