"""Tree-walking evaluator for the bisaya language.

Evaluation is eager, strict, and left-to-right: every child expression, including the side effect of any nested
assignment, completes before its parent operator applies. Logical UG/O evaluate both operands (no short-circuit).

The evaluator performs input/output only through io, an object with two methods:
    read_line() -> str | None   ; one line of external input, None at end of input
    write(text)                 ; program output, no newline added
"""

import math

from bisaya.core.ast import Variable
from bisaya.core.values import DATA_TYPE_KINDS, ConversionError, Kind, Value, convert, operand, parse, wrap, zero
from bisaya.lang.error import BisayaRuntimeError


ARITHMETIC = {"+", "-", "*", "/", "%"}
RELATIONAL = {"==", "<>", "<", ">", "<=", ">="}
LOGICAL = {"UG", "O"}


def _escape(msg):
    """Makes msg safe to use as a BisayaError template."""
    return msg.replace("{", "{{").replace("}", "}}")


def _truncate_div(left, right):
    """Integer division rounding toward zero."""
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient


def _truncate_mod(left, right):
    """Remainder with the sign of the dividend, matching _truncate_div."""
    return left - right * _truncate_div(left, right)


class Evaluator:
    """Executes an AST against an Environment.

    strict decides whether assigning a value of a different kind to an existing variable is rejected (True) or
    silently allowed (False). Declarations are never checked: re-declaring a name overwrites it.
    """

    def __init__(self, env, io, strict=False, warn=None):
        self.env = env
        self.io = io
        self.strict = strict
        self.warn = warn  # called like ErrorHandler.warn, if given

    def evaluate(self, node):
        """Evaluates node. Expressions return a Value, statements return None."""
        method = getattr(self, f"eval_{type(node).__name__}", None)
        if method is None:
            raise BisayaRuntimeError("cannot evaluate {}", type(node).__name__, at=node, internal=True)
        return method(node)

    def execute(self, block):
        """Runs a whole program (its root Block)."""
        self.evaluate(block)

    # ---------- STATEMENTS ----------
    def eval_Block(self, node):
        for statement in node.statements:
            self.evaluate(statement)

    def eval_Declaration(self, node):
        kind = DATA_TYPE_KINDS[node.data_type]
        if node.init is None:
            value = zero(kind)
        else:
            value = self._convert(self.evaluate(node.init), kind, node)
        self.env.set(node.name, value)

    def eval_Assignment(self, node):
        return self._assign(node.name, self.evaluate(node.value), node)

    def eval_If(self, node):
        if self._condition(node.condition):
            self.evaluate(node.then_block)
        elif node.else_branch is not None:
            self.evaluate(node.else_branch)

    def eval_While(self, node):
        while self._condition(node.condition):
            self.evaluate(node.body)

    def eval_DoWhile(self, node):
        self.evaluate(node.body)
        while self._condition(node.condition):
            self.evaluate(node.body)

    def eval_ForLoop(self, node):
        self.evaluate(node.init)
        while self._condition(node.condition):
            self.evaluate(node.body)
            self.evaluate(node.increment)

    def eval_Input(self, node):
        line = self.io.read_line()
        if line is None:
            raise BisayaRuntimeError("end of input while reading {}", ", ".join(node.names), at=node)

        fields = [field.strip() for field in line.split(",")]
        if len(fields) < len(node.names):
            msg = "expected {} value(s) separated by commas, got {}"
            raise BisayaRuntimeError(msg, [str(len(node.names)), str(len(fields))], at=node)

        for name, text in zip(node.names, fields):
            current = self.env.get(name)
            if current is None:
                raise BisayaRuntimeError("variable {} was never declared", name, at=node)
            try:
                value = parse(text, current.kind)
            except ConversionError as e:
                raise BisayaRuntimeError("invalid input for {}: " + _escape(str(e)), name, at=node)
            self.env.set(name, value)

        if len(fields) > len(node.names) and self.warn:
            self.warn("{} extra input value(s) ignored", str(len(fields) - len(node.names)), at=node)

    def eval_Output(self, node):
        self.io.write(self.evaluate(node.expression).render())

    # ---------- EXPRESSIONS ----------
    def eval_Literal(self, node):
        return node.value

    def eval_Variable(self, node):
        value = self.env.get(node.name)
        if value is None:
            raise BisayaRuntimeError("variable {} was never declared", node.name, at=node)
        return value

    def eval_Call(self, node):
        raise BisayaRuntimeError("function calls are not supported: {}", f"{node.name}(...)", at=node)

    def eval_UnaryOp(self, node):
        value = self.evaluate(node.operand)
        op = node.op

        if op == "DILI":
            if value.kind is not Kind.BOOL:
                raise BisayaRuntimeError("DILI expects a boolean, got {}", str(value.kind), at=node)
            return Value.of_bool(not value.data)

        if not value.is_numeric:
            raise BisayaRuntimeError("operator {} expects a number, got {}", [op, str(value.kind)], at=node)

        if op == "-":
            return wrap(-value.data)
        if op == "+":
            return value
        if op == "++":
            return wrap(value.data + 1)
        if op == "--":
            return wrap(value.data - 1)

        raise BisayaRuntimeError("unknown unary operator {}", op, at=node, internal=True)

    def eval_BinaryOp(self, node):
        op = node.op

        if op == "=":
            # the left side is a target, not a value: it may not exist yet
            if not isinstance(node.left, Variable):
                raise BisayaRuntimeError("can only assign to a variable", at=node)
            return self._assign(node.left.name, self.evaluate(node.right), node)

        left = self.evaluate(node.left)
        right = self.evaluate(node.right)

        if op in LOGICAL:
            if left.kind is not Kind.BOOL or right.kind is not Kind.BOOL:
                msg = "{} expects booleans, got {} and {}"
                raise BisayaRuntimeError(msg, [op, str(left.kind), str(right.kind)], at=node)
            return Value.of_bool(left.data and right.data if op == "UG" else left.data or right.data)

        if op == "&":
            return Value.of_string(left.render() + right.render())

        a, b = operand(left), operand(right)
        numeric = not isinstance(a, str) and not isinstance(b, str)

        if op in ARITHMETIC:
            if numeric:
                return wrap(self._arithmetic(op, a, b, node))
            if op == "+":
                return Value.of_string(left.render() + right.render())

        elif op in RELATIONAL:
            if numeric or (isinstance(a, str) and isinstance(b, str)):
                return Value.of_bool(Evaluator._compare(op, a, b))

        msg = "unsupported operand types for {}: {} and {}"
        raise BisayaRuntimeError(msg, [op, str(left.kind), str(right.kind)], at=node)

    # ---------- HELPERS ----------
    @staticmethod
    def _arithmetic(op, a, b, node):
        integral = isinstance(a, int) and isinstance(b, int)

        if op == "+":
            return a + b
        if op == "-":
            return a - b
        if op == "*":
            return a * b

        if b == 0:
            raise BisayaRuntimeError("division by zero", at=node)
        if op == "/":
            return _truncate_div(a, b) if integral else a / b
        return _truncate_mod(a, b) if integral else math.fmod(a, b)

    @staticmethod
    def _compare(op, a, b):
        return {
            "==": lambda: a == b,
            "<>": lambda: a != b,
            "<": lambda: a < b,
            ">": lambda: a > b,
            "<=": lambda: a <= b,
            ">=": lambda: a >= b,
        }[op]()

    def _condition(self, node):
        value = self.evaluate(node)
        if value.kind is not Kind.BOOL:
            raise BisayaRuntimeError("condition must be a boolean, got {}", str(value.kind), at=node)
        return value.data

    def _convert(self, value, kind, node):
        try:
            return convert(value, kind)
        except ConversionError as e:
            raise BisayaRuntimeError(_escape(str(e)) + " in declaration of {}", node.name, at=node)

    def _assign(self, name, value, node):
        """Stores value in name and returns the stored value, enforcing the strict policy if enabled."""
        current = self.env.get(name) if self.strict else None

        if current is not None and current.kind is not value.kind:
            if current.kind is Kind.CHAR and value.kind is Kind.STRING and len(value.data) == 1:
                value = Value.of_char(value.data)
            else:
                msg = "cannot assign {} value to {}, which holds {} value"
                raise BisayaRuntimeError(msg, [str(value.kind), name, str(current.kind)], at=node)

        self.env.set(name, value)
        return value


def evaluate(tree, env, io, strict=False, warn=None):
    """Executes the program tree, reading and writing variables in env and performing I/O through io."""
    Evaluator(env, io, strict, warn).execute(tree)
