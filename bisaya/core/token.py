"""Lexical vocabulary of the bisaya language: token categories, keyword tables, and the Token itself.

All keywords are case-sensitive Cebuano words:

```
SUGOD ... KATAPUSAN         ; program delimiters, each alone on its own line
MUGNA <type> x, y=1         ; declaration
KUNG / KUNG DILI / KUNG WALA  ; if / else-if / else, bodies introduced by PUNDOK
MINTRAS, BUHAT, ALANG SA    ; while, do, for-with-range
IPAKITA: / DAWAT:           ; output / input
```
"""

from dataclasses import dataclass
from enum import Enum


TAB_WIDTH = 4  # columns a tab advances when computing token positions


class TokenType(Enum):
    KEYWORD = "Keyword"
    DATA_TYPE = "DataType"
    IDENTIFIER = "Identifier"

    NUMBER_LITERAL = "NumberLiteral"
    STRING_LITERAL = "StringLiteral"
    CHAR_LITERAL = "CharLiteral"
    BOOLEAN_LITERAL = "BooleanLiteral"

    ARITHMETIC_OPERATOR = "ArithmeticOperator"
    LOGICAL_OPERATOR = "LogicalOperator"
    RELATIONAL_OPERATOR = "RelationalOperator"
    ASSIGNMENT_OPERATOR = "AssignmentOperator"
    CONCATENATOR = "Concatenator"
    CARRIAGE_RETURN = "CarriageReturn"

    LEFT_PAREN = "LeftParen"
    RIGHT_PAREN = "RightParen"
    LEFT_BRACE = "LeftBrace"
    RIGHT_BRACE = "RightBrace"
    COMMA = "Comma"
    COLON = "Colon"

    def __str__(self):
        return self.value


KEYWORDS = {
    "SUGOD", "KATAPUSAN", "MUGNA", "KUNG", "WALA", "PUNDOK", "MINTRAS", "BUHAT", "ALANG", "SA", "IPAKITA", "DAWAT",
}
DATA_TYPES = {"NUMERO", "TIPIK", "LETRA", "TINUOD"}
LOGICAL_OPERATORS = {"UG", "O", "DILI"}

TRUE = "OO"
FALSE = "DILI"
BOOLEANS = {TRUE, FALSE}

RELATIONAL_OPERATORS = {">=", "<=", "==", "<>", ">", "<"}
ARITHMETIC_OPERATORS = {"+", "-", "*", "/", "%"}

SYMBOLS = {
    "=": TokenType.ASSIGNMENT_OPERATOR,
    "&": TokenType.CONCATENATOR,
    "$": TokenType.CARRIAGE_RETURN,
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    ",": TokenType.COMMA,
    ":": TokenType.COLON,
}


@dataclass(frozen=True)
class Token:
    """A categorized lexeme. text is the exact source spelling, delimiters included, so that joining the text of every
    token reproduces the source minus whitespace and comments.
    """
    type: TokenType
    text: str
    line: int
    column: int

    @property
    def value(self):
        """Literal payload of the token: quotes, apostrophes, and escape brackets stripped."""
        if self.type in (TokenType.STRING_LITERAL, TokenType.CHAR_LITERAL, TokenType.BOOLEAN_LITERAL):
            return self.text[1:-1]
        return self.text

    @property
    def end(self):
        """Column just past the last character of this token."""
        return self.column + len(self.text)

    def matches(self, type, text=None):
        """Whether this token has the given type (and, if given, the given text)."""
        return self.type is type and (text is None or self.text == text)

    def __repr__(self):
        return f"{self.type}({self.text!r})@{self.line}:{self.column}"
