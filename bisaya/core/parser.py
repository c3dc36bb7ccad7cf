"""Recursive-descent parser for the bisaya language. Expressions are parsed by precedence climbing.

All grammar can be loosely defined as follows:

```
<program>     ::= "SUGOD" <statement>* "KATAPUSAN"
<block>       ::= "{" <statement>* "}"
<statement>   ::= <declaration> | <assignment> | <if> | <while> | <do_while> | <for>
                | <input> | <output> | <expr>
<declaration> ::= "MUGNA" <type> <ident> ("=" <expr>)? ("," <ident> ("=" <expr>)?)*
<assignment>  ::= <ident> "=" <expr>
<if>          ::= "KUNG" "(" <expr> ")" "PUNDOK" <block>
                  ("KUNG" "DILI" "(" <expr> ")" "PUNDOK" <block>)*   ; else-if chain, nested Ifs
                  ("KUNG" "WALA" "PUNDOK" <block>)?                  ; else
<while>       ::= "MINTRAS" "(" <expr> ")" "PUNDOK" <block>
<do_while>    ::= "BUHAT" "PUNDOK"? <block> "MINTRAS" "(" <expr> ")"
<for>         ::= "ALANG" "SA" "(" <assignment> "," <expr> "," <expr> ")" "PUNDOK" <block>
<input>       ::= "DAWAT" ":" <ident> ("," <ident>)*
<output>      ::= "IPAKITA" ":" <expr>
```

Simple statements must end their line. The token lines produced by the lexer are read through a two-dimensional cursor:
advancing past the last token of a line transparently continues on the next one.
"""

from enum import IntEnum

from bisaya.core.ast import (
    Assignment, BinaryOp, Block, Call, Declaration, DoWhile, ForLoop, If, Input, Literal, Output, UnaryOp, Variable,
    While
)
from bisaya.core.token import TRUE, TokenType
from bisaya.core.values import Value
from bisaya.lang.error import ParseError


class Precedence(IntEnum):
    LOWEST = 0
    LOGICAL = 1         # UG O
    RELATIONAL = 2      # == <> < > <= >= & =
    ADDITIVE = 3        # + -
    MULTIPLICATIVE = 4  # * / %


PRECEDENCES = {
    "UG": Precedence.LOGICAL,
    "O": Precedence.LOGICAL,
    "==": Precedence.RELATIONAL,
    "<>": Precedence.RELATIONAL,
    "<": Precedence.RELATIONAL,
    ">": Precedence.RELATIONAL,
    "<=": Precedence.RELATIONAL,
    ">=": Precedence.RELATIONAL,
    "&": Precedence.RELATIONAL,
    "=": Precedence.RELATIONAL,
    "+": Precedence.ADDITIVE,
    "-": Precedence.ADDITIVE,
    "*": Precedence.MULTIPLICATIVE,
    "/": Precedence.MULTIPLICATIVE,
    "%": Precedence.MULTIPLICATIVE,
}
RIGHT_ASSOCIATIVE = {"="}  # x = y = 4 stores 4 in y, then in x

BINARY_TYPES = (
    TokenType.ARITHMETIC_OPERATOR, TokenType.RELATIONAL_OPERATOR, TokenType.LOGICAL_OPERATOR,
    TokenType.CONCATENATOR, TokenType.ASSIGNMENT_OPERATOR,
)


class Parser:

    def __init__(self, lines):
        self.lines = lines
        self.row = 0   # index of the current line
        self.col = 0   # index of the current token within it
        self.last = None  # most recently consumed token

    # ---------- CURSOR ----------
    def peek(self, offset=0):
        """Token offset positions ahead of the cursor, crossing line boundaries. None past the end of the program."""
        row, col = self.row, self.col + offset
        while row < len(self.lines) and col >= len(self.lines[row]):
            col -= len(self.lines[row])
            row += 1
        return self.lines[row][col] if row < len(self.lines) else None

    @property
    def current(self):
        return self.peek()

    def advance(self):
        token = self.current
        if token is None:
            self.error("more input")

        self.col += 1
        if self.col >= len(self.lines[self.row]):
            self.row += 1
            self.col = 0

        self.last = token
        return token

    def check(self, type, text=None):
        token = self.current
        return token is not None and token.matches(type, text)

    def accept(self, type, text=None):
        """Consumes and returns the current token if it matches, else returns None."""
        if self.check(type, text):
            return self.advance()
        return None

    def expect(self, type, text=None, expected=None):
        """Consumes the current token, which must match, or raises ParseError naming expected."""
        if not self.check(type, text):
            self.error(expected or (f"'{text}'" if text else str(type)))
        return self.advance()

    def error(self, expected):
        token = self.current
        if token is None:
            raise ParseError("expected {}, got end of program", expected, at=self.last)
        raise ParseError("expected {}, got {} '{}'", [expected, str(token.type), token.text], at=token)

    def end_of_statement(self):
        """Simple statements end their line; only a closing brace may follow them on it."""
        token = self.current
        if token is not None and token.line == self.last.line and not token.matches(TokenType.RIGHT_BRACE):
            self.error("end of line")

    # ---------- TOP LEVEL ----------
    def parse(self):
        start = self.expect(TokenType.KEYWORD, "SUGOD", "'SUGOD' to start the program")
        self.end_of_statement()

        statements = self.statements(lambda: self.check(TokenType.KEYWORD, "KATAPUSAN"))
        self.expect(TokenType.KEYWORD, "KATAPUSAN", "'KATAPUSAN' to end the program")

        if self.current is not None:
            self.error("nothing after 'KATAPUSAN'")

        return Block(tuple(statements), line=start.line, column=start.column)

    def statements(self, at_end):
        statements = []
        while self.current is not None and not at_end():
            if self.check(TokenType.KEYWORD, "MUGNA"):
                statements.extend(self.declaration())
            else:
                statements.append(self.statement())
        return statements

    def block(self):
        brace = self.expect(TokenType.LEFT_BRACE, expected="'{'")
        statements = self.statements(lambda: self.check(TokenType.RIGHT_BRACE))
        self.expect(TokenType.RIGHT_BRACE, expected="'}'")
        return Block(tuple(statements), line=brace.line, column=brace.column)

    def block_body(self):
        """PUNDOK {...}: the body of an if or a loop."""
        self.expect(TokenType.KEYWORD, "PUNDOK", "'PUNDOK' before the block")
        return self.block()

    # ---------- STATEMENTS ----------
    def statement(self):
        token = self.current

        if token.matches(TokenType.KEYWORD, "KUNG"):
            following = self.peek(1)
            if following is not None and following.matches(TokenType.LOGICAL_OPERATOR, "DILI"):
                raise ParseError("'KUNG DILI' used without a preceding 'KUNG'", at=token)
            if following is not None and following.matches(TokenType.KEYWORD, "WALA"):
                raise ParseError("'KUNG WALA' used without a preceding 'KUNG'", at=token)
            return self.if_statement()

        if token.matches(TokenType.KEYWORD, "MINTRAS"):
            return self.while_statement()
        if token.matches(TokenType.KEYWORD, "BUHAT"):
            return self.do_while_statement()
        if token.matches(TokenType.KEYWORD, "ALANG"):
            return self.for_statement()
        if token.matches(TokenType.KEYWORD, "DAWAT"):
            return self.input_statement()
        if token.matches(TokenType.KEYWORD, "IPAKITA"):
            return self.output_statement()

        if token.type in (TokenType.KEYWORD, TokenType.DATA_TYPE):
            self.error("statement")

        following = self.peek(1)
        if token.type is TokenType.IDENTIFIER and following is not None \
                and following.matches(TokenType.ASSIGNMENT_OPERATOR):
            node = self.assignment()
        else:
            node = self.expression()

        self.end_of_statement()
        return node

    def declaration(self):
        """MUGNA <type> a, b=1: one Declaration per name, in order."""
        self.expect(TokenType.KEYWORD, "MUGNA")
        data_type = self.expect(TokenType.DATA_TYPE, expected="data type")

        declarations = []
        while True:
            name = self.expect(TokenType.IDENTIFIER, expected="variable name")
            init = None
            if self.accept(TokenType.ASSIGNMENT_OPERATOR):
                init = self.expression()

            declarations.append(Declaration(name.text, data_type.text, init, line=name.line, column=name.column))
            if not self.accept(TokenType.COMMA):
                break

        self.end_of_statement()
        return declarations

    def assignment(self):
        name = self.expect(TokenType.IDENTIFIER, expected="variable name")
        self.expect(TokenType.ASSIGNMENT_OPERATOR, expected="'='")
        value = self.expression()
        return Assignment(name.text, value, line=name.line, column=name.column)

    def condition(self):
        """( <expr> )"""
        self.expect(TokenType.LEFT_PAREN, expected="'(' before the condition")
        node = self.expression()
        self.expect(TokenType.RIGHT_PAREN, expected="')' after the condition")
        return node

    def if_statement(self, chained=False):
        # Else-if chains are represented as nested If nodes in else_branch.
        kung = self.expect(TokenType.KEYWORD, "KUNG")
        if chained:
            self.expect(TokenType.LOGICAL_OPERATOR, "DILI")

        condition = self.condition()
        then_block = self.block_body()

        else_branch = None
        if self.check(TokenType.KEYWORD, "KUNG"):
            following = self.peek(1)
            if following is not None and following.matches(TokenType.LOGICAL_OPERATOR, "DILI"):
                else_branch = self.if_statement(chained=True)
            elif following is not None and following.matches(TokenType.KEYWORD, "WALA"):
                self.advance()
                self.advance()
                else_branch = self.block_body()

        return If(condition, then_block, else_branch, line=kung.line, column=kung.column)

    def while_statement(self):
        token = self.expect(TokenType.KEYWORD, "MINTRAS")
        condition = self.condition()
        body = self.block_body()
        return While(condition, body, line=token.line, column=token.column)

    def do_while_statement(self):
        token = self.expect(TokenType.KEYWORD, "BUHAT")
        self.accept(TokenType.KEYWORD, "PUNDOK")
        body = self.block()

        self.expect(TokenType.KEYWORD, "MINTRAS", "'MINTRAS' after the 'BUHAT' block")
        condition = self.condition()
        self.end_of_statement()
        return DoWhile(body, condition, line=token.line, column=token.column)

    def for_statement(self):
        token = self.expect(TokenType.KEYWORD, "ALANG")
        self.expect(TokenType.KEYWORD, "SA", "'SA' after 'ALANG'")
        self.expect(TokenType.LEFT_PAREN, expected="'(' after 'ALANG SA'")

        init = self.assignment()
        self.expect(TokenType.COMMA, expected="',' after the loop initializer")
        condition = self.expression()
        self.expect(TokenType.COMMA, expected="',' after the loop condition")
        increment = self.increment()
        self.expect(TokenType.RIGHT_PAREN, expected="')' after the loop increment")

        body = self.block_body()
        return ForLoop(init, condition, increment, body, line=token.line, column=token.column)

    def increment(self):
        """Loop update: any expression that assigns, such as i++, --i, or i = i + 2."""
        token = self.current
        node = self.expression()

        if isinstance(node, Assignment):
            return node
        if isinstance(node, BinaryOp) and node.op == "=" and isinstance(node.left, Variable):
            return Assignment(node.left.name, node.right, line=node.line, column=node.column)

        if token is None:
            self.error("loop increment")
        raise ParseError("expected loop increment such as {}, got '{}'", ["i++", token.text], at=token)

    def input_statement(self):
        token = self.expect(TokenType.KEYWORD, "DAWAT")
        self.expect(TokenType.COLON, expected="':' after 'DAWAT'")

        names = [self.expect(TokenType.IDENTIFIER, expected="variable name").text]
        while self.accept(TokenType.COMMA):
            names.append(self.expect(TokenType.IDENTIFIER, expected="variable name").text)

        self.end_of_statement()
        return Input(tuple(names), line=token.line, column=token.column)

    def output_statement(self):
        token = self.expect(TokenType.KEYWORD, "IPAKITA")
        self.expect(TokenType.COLON, expected="':' after 'IPAKITA'")
        expression = self.expression()
        self.end_of_statement()
        return Output(expression, line=token.line, column=token.column)

    # ---------- EXPRESSIONS ----------
    def _precedence(self, token):
        """Binding power of token as a binary operator on the current line, or None if it is not one."""
        if token is None or token.type not in BINARY_TYPES or token.line != self.last.line:
            return None
        return PRECEDENCES.get(token.text)

    def expression(self, min_precedence=Precedence.LOWEST):
        left = self.unary()

        while True:
            op = self.current
            precedence = self._precedence(op)
            if precedence is None or precedence <= min_precedence:
                break

            self.advance()
            if self.current is None or self.current.line != op.line:
                raise ParseError("expected expression after {}, got end of line", op.text, at=op)
            right = self.expression(precedence - 1 if op.text in RIGHT_ASSOCIATIVE else precedence)
            left = BinaryOp(left, op.text, right, line=op.line, column=op.column)

        return left

    def _doubled(self, first, second):
        """Whether first and second spell ++ or -- with no space in between."""
        return first is not None and second is not None \
            and first.type is TokenType.ARITHMETIC_OPERATOR and first.text in ("+", "-") \
            and second.matches(TokenType.ARITHMETIC_OPERATOR, first.text) \
            and first.line == second.line and first.end == second.column

    def _step(self, name, op, at):
        """x++ / ++x / x-- / --x: assign the variable its value stepped by one."""
        step = UnaryOp(op, Variable(name.text, line=name.line, column=name.column), line=at.line, column=at.column)
        return Assignment(name.text, step, line=at.line, column=at.column)

    def unary(self):
        token = self.current
        if token is None:
            self.error("expression")

        if token.type is TokenType.ARITHMETIC_OPERATOR and token.text in ("+", "-"):
            second, name = self.peek(1), self.peek(2)
            if self._doubled(token, second) and name is not None and name.type is TokenType.IDENTIFIER \
                    and second.line == name.line and second.end == name.column:
                self.advance()
                self.advance()
                self.advance()
                return self._step(name, token.text * 2, token)

            self.advance()
            return UnaryOp(token.text, self.unary(), line=token.line, column=token.column)

        if token.matches(TokenType.LOGICAL_OPERATOR, "DILI"):
            self.advance()
            return UnaryOp("DILI", self.unary(), line=token.line, column=token.column)

        return self.primary()

    def primary(self):
        token = self.current
        position = {"line": token.line, "column": token.column}

        if token.type is TokenType.NUMBER_LITERAL:
            self.advance()
            value = Value.of_float(token.text) if "." in token.text else Value.of_int(token.text)
            return Literal(value, **position)

        if token.type is TokenType.STRING_LITERAL:
            self.advance()
            return Literal(Value.of_string(token.value), **position)

        if token.type is TokenType.CHAR_LITERAL:
            self.advance()
            return Literal(Value.of_char(token.value), **position)

        if token.type is TokenType.BOOLEAN_LITERAL:
            self.advance()
            return Literal(Value.of_bool(token.value == TRUE), **position)

        if token.type is TokenType.CARRIAGE_RETURN:
            self.advance()
            return Literal(Value.of_string("\n"), **position)

        if token.type is TokenType.IDENTIFIER:
            self.advance()

            first, second = self.peek(0), self.peek(1)
            if self._doubled(first, second) and first.line == token.line and token.end == first.column:
                self.advance()
                self.advance()
                return self._step(token, first.text * 2, token)

            if self.check(TokenType.LEFT_PAREN) and self.current.line == token.line:
                return self.call(token)

            return Variable(token.text, **position)

        if token.type is TokenType.LEFT_PAREN:
            self.advance()
            node = self.expression()
            self.expect(TokenType.RIGHT_PAREN, expected="')'")
            return node

        self.error("expression")

    def call(self, name):
        self.expect(TokenType.LEFT_PAREN)

        args = []
        if not self.check(TokenType.RIGHT_PAREN):
            args.append(self.expression())
            while self.accept(TokenType.COMMA):
                args.append(self.expression())

        self.expect(TokenType.RIGHT_PAREN, expected="')' after arguments")
        return Call(name.text, tuple(args), line=name.line, column=name.column)


def parse(lines):
    """Builds the AST of a program from the token lines produced by the lexer."""
    return Parser(lines).parse()
