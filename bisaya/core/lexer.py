"""Lexical analysis for the bisaya language. Source text is scanned one line at a time, because statements occupy one
line each outside of explicit blocks: the result of tokenize is a list of lines, each a list of Tokens.

Two spellings are ambiguous at the character level and are resolved here:
    - a double-quoted literal whose content is a boolean spelling ("OO"/"DILI") is a boolean, not a string
    - "--" is a comment, except right after an identifier (the postfix decrement x--) or right before one that ends
      the expression, when no operand precedes it (the prefix decrement --x, as in "--x" or "ALANG SA (i=3, i>0, --i)")
"""

from bisaya.core.token import (
    ARITHMETIC_OPERATORS, BOOLEANS, DATA_TYPES, KEYWORDS, LOGICAL_OPERATORS, RELATIONAL_OPERATORS, SYMBOLS, TAB_WIDTH,
    Token, TokenType
)
from bisaya.lang.error import LexError


DIGITS = "0123456789"
PREFIX_CONTEXT = {  # token types after which "--x" is a prefix decrement rather than a comment
    TokenType.LEFT_PAREN, TokenType.LEFT_BRACE, TokenType.COMMA, TokenType.COLON, TokenType.ASSIGNMENT_OPERATOR,
    TokenType.ARITHMETIC_OPERATOR, TokenType.RELATIONAL_OPERATOR, TokenType.LOGICAL_OPERATOR, TokenType.CONCATENATOR,
}


class Lexer:
    TAB_WIDTH = TAB_WIDTH

    def __init__(self, source):
        self.source = source

        self.text = ""
        self.pos = 0
        self.line = 0
        self.column = 1
        self.current_char = None

    def tokenize(self):
        """Returns one list of Tokens per source line that contains any. Raises LexError on the first bad lexeme."""
        lines = []
        for line_num, text in enumerate(self.source.split("\n"), 1):
            tokens = self.tokenize_line(text.rstrip("\r"), line_num)
            if tokens:
                lines.append(tokens)
        return lines

    def tokenize_line(self, text, line_num):
        self.text = text
        self.pos = 0
        self.line = line_num
        self.column = 1
        self.current_char = text[0] if text else None

        tokens = []
        while self.current_char is not None:
            if self.current_char.isspace():
                self.advance()
                continue

            if self.current_char == "-" and self.peek() == "-":
                if not (Lexer._follows_identifier(tokens, self.column) or self._prefixes_identifier(tokens)):
                    break  # comment: rest of the line is ignored
                tokens.append(self.read_symbol())
                tokens.append(self.read_symbol())
                continue

            if self.current_char.isalpha() or self.current_char == "_":
                tokens.append(self.read_word())
            elif self.current_char in DIGITS:
                tokens.append(self.read_number())
            elif self.current_char == '"':
                tokens.append(self.read_string())
            elif self.current_char == "'":
                tokens.append(self.read_char())
            elif self.current_char == "[":
                tokens.append(self.read_escape())
            else:
                tokens.append(self.read_symbol())

        return tokens

    def advance(self):
        """Moves to the next character of the current line. Tabs advance the column by TAB_WIDTH."""
        self.column += Lexer.TAB_WIDTH if self.current_char == "\t" else 1
        self.pos += 1
        self.current_char = self.text[self.pos] if self.pos < len(self.text) else None

    def peek(self, n=1):
        idx = self.pos + n
        return self.text[idx] if idx < len(self.text) else None

    @staticmethod
    def _follows_identifier(tokens, column):
        """Whether the last token is an identifier ending exactly at column (no whitespace in between)."""
        return bool(tokens) and tokens[-1].type is TokenType.IDENTIFIER and tokens[-1].end == column

    def _prefixes_identifier(self, tokens):
        """Whether the "--" at the cursor touches a following identifier that ends the expression (only ')', ',', '}', or
        the end of the line come after it) and no operand precedes it.
        """
        if tokens and tokens[-1].type not in PREFIX_CONTEXT:
            return False

        start = idx = self.pos + 2
        if idx >= len(self.text) or not (self.text[idx].isalpha() or self.text[idx] == "_"):
            return False
        while idx < len(self.text) and (self.text[idx].isalnum() or self.text[idx] == "_"):
            idx += 1

        if self.text[start:idx] in KEYWORDS | DATA_TYPES | LOGICAL_OPERATORS:
            return False
        rest = self.text[idx:].lstrip()
        return not rest or rest[0] in ")},"

    def _token(self, type, start, start_col):
        return Token(type, self.text[start:self.pos], self.line, start_col)

    def read_word(self):
        start, start_col = self.pos, self.column
        while self.current_char is not None and (self.current_char.isalnum() or self.current_char == "_"):
            self.advance()

        word = self.text[start:self.pos]
        if word in KEYWORDS:
            return self._token(TokenType.KEYWORD, start, start_col)
        if word in DATA_TYPES:
            return self._token(TokenType.DATA_TYPE, start, start_col)
        if word in LOGICAL_OPERATORS:
            return self._token(TokenType.LOGICAL_OPERATOR, start, start_col)
        return self._token(TokenType.IDENTIFIER, start, start_col)

    def read_number(self):
        start, start_col = self.pos, self.column
        has_dot = False

        while self.current_char is not None and (self.current_char in DIGITS or self.current_char == "."):
            if self.current_char == ".":
                if has_dot:
                    break
                has_dot = True
            self.advance()

        return self._token(TokenType.NUMBER_LITERAL, start, start_col)

    def _read_delimited(self, closing, kind):
        """Consumes from the current (opening) character through closing. Raises LexError if the line ends first."""
        start, start_col = self.pos, self.column
        self.advance()  # skip opening delimiter

        while self.current_char is not None and self.current_char != closing:
            self.advance()

        if self.current_char is None:
            raise LexError("unterminated {} literal", kind, at=self._token(None, start, start_col))

        self.advance()  # skip closing delimiter
        return start, start_col

    def read_string(self):
        start, start_col = self._read_delimited('"', "string")
        token = self._token(TokenType.STRING_LITERAL, start, start_col)

        if token.value in BOOLEANS:
            return self._token(TokenType.BOOLEAN_LITERAL, start, start_col)
        return token

    def read_char(self):
        start, start_col = self._read_delimited("'", "char")
        token = self._token(TokenType.CHAR_LITERAL, start, start_col)

        if len(token.value) != 1:
            raise LexError("char literal {} must hold exactly one character", token.text, at=token)
        return token

    def read_escape(self):
        """[x] escapes: the character right after '[' is literal, so '[[]' is '[' and '[]]' is ']'. A lone '[]' is empty."""
        start, start_col = self.pos, self.column
        self.advance()  # skip '['

        if self.current_char == "]" and self.peek() != "]":
            self.advance()
            return self._token(TokenType.STRING_LITERAL, start, start_col)

        if self.current_char is not None:
            self.advance()
        while self.current_char is not None and self.current_char != "]":
            self.advance()

        if self.current_char is None:
            raise LexError("unterminated escape code", at=self._token(None, start, start_col))

        self.advance()  # skip ']'
        return self._token(TokenType.STRING_LITERAL, start, start_col)

    def read_symbol(self):
        start, start_col = self.pos, self.column

        pair = self.text[self.pos:self.pos + 2]
        if pair in RELATIONAL_OPERATORS:
            self.advance()
            self.advance()
            return self._token(TokenType.RELATIONAL_OPERATOR, start, start_col)

        char = self.current_char
        self.advance()

        if char in RELATIONAL_OPERATORS:
            return self._token(TokenType.RELATIONAL_OPERATOR, start, start_col)
        if char in ARITHMETIC_OPERATORS:
            return self._token(TokenType.ARITHMETIC_OPERATOR, start, start_col)
        if char in SYMBOLS:
            return self._token(SYMBOLS[char], start, start_col)

        raise LexError("unknown symbol '{}'", char, at=self._token(None, start, start_col))


def tokenize(source):
    """Converts source into a list of lines of Tokens."""
    return Lexer(source).tokenize()
