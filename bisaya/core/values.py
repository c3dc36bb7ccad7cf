"""Runtime values of the bisaya language. A Value is an explicit tagged union over five kinds; nothing relies on Python's
own numeric promotion (note that bool is an int subclass in Python, which is exactly what has to be kept apart here).

Coercion rule applied before every operator except UG/O: a boolean operand is rendered as its literal spelling and a
char as its one-character text, so that

    5 + "OO"   ->  "5OO"
    'a' == "a" ->  "OO"
"""

from dataclasses import dataclass
from enum import Enum

from bisaya.core.token import FALSE, TRUE


class Kind(Enum):
    INT = "integer"
    FLOAT = "float"
    CHAR = "char"
    BOOL = "boolean"
    STRING = "string"

    def __str__(self):
        return self.value


DATA_TYPE_KINDS = {
    "NUMERO": Kind.INT,
    "TIPIK": Kind.FLOAT,
    "LETRA": Kind.CHAR,  # char-or-string: longer text stays a STRING
    "TINUOD": Kind.BOOL,
}


class ConversionError(ValueError):
    """A value or input text cannot be converted to the requested kind."""


@dataclass(frozen=True)
class Value:
    kind: Kind
    data: object

    @classmethod
    def of_int(cls, data):
        return cls(Kind.INT, int(data))

    @classmethod
    def of_float(cls, data):
        return cls(Kind.FLOAT, float(data))

    @classmethod
    def of_char(cls, data):
        assert isinstance(data, str) and len(data) == 1, "chars hold exactly one character"
        return cls(Kind.CHAR, data)

    @classmethod
    def of_bool(cls, data):
        return cls(Kind.BOOL, bool(data))

    @classmethod
    def of_string(cls, data):
        return cls(Kind.STRING, str(data))

    @property
    def is_numeric(self):
        return self.kind in (Kind.INT, Kind.FLOAT)

    def render(self):
        """Textual form used by output, concatenation, and the coercion rule."""
        if self.kind is Kind.BOOL:
            return TRUE if self.data else FALSE
        if self.kind is Kind.FLOAT:
            text = repr(self.data)  # shortest round-trip digits
            return text[:-2] if text.endswith(".0") else text
        return str(self.data)

    def __str__(self):
        return self.render()

    def __repr__(self):
        return f"{self.kind.name}({self.data!r})"


def operand(value):
    """Coerced operand form: int/float for numbers, str for everything else."""
    if value.kind in (Kind.BOOL, Kind.CHAR):
        return value.render()
    return value.data


def wrap(data):
    """Inverse of operand for operator results. bool is checked first because it is an int subclass."""
    if isinstance(data, bool):
        return Value.of_bool(data)
    if isinstance(data, int):
        return Value.of_int(data)
    if isinstance(data, float):
        return Value.of_float(data)
    return Value.of_string(data)


def zero(kind):
    """Value of a declared but uninitialized variable."""
    return {
        Kind.INT: Value.of_int(0),
        Kind.FLOAT: Value.of_float(0.0),
        Kind.CHAR: Value.of_char("\0"),
        Kind.BOOL: Value.of_bool(False),
        Kind.STRING: Value.of_string(""),
    }[kind]


def convert(value, kind):
    """Converts value to kind for declarations: numbers widen/narrow (narrowing truncates), one-character strings become
    chars. Raises ConversionError otherwise.
    """
    if kind is Kind.INT and value.is_numeric:
        try:
            return Value.of_int(value.data)
        except (OverflowError, ValueError):
            raise ConversionError(f"cannot convert {value.render()} to {kind}")

    if kind is Kind.FLOAT and value.is_numeric:
        return Value.of_float(value.data)

    if kind is Kind.CHAR:
        if value.kind is Kind.CHAR:
            return value
        if value.kind is Kind.STRING:
            return Value.of_char(value.data) if len(value.data) == 1 else value

    if value.kind is kind:
        return value

    raise ConversionError(f"cannot convert {value.kind} to {kind}")


def parse(text, kind):
    """Converts a field of external input to kind. Raises ConversionError if text is not a valid spelling."""
    try:
        if kind is Kind.INT:
            return Value.of_int(text)
        if kind is Kind.FLOAT:
            return Value.of_float(text)
    except ValueError:
        raise ConversionError(f"'{text}' is not a valid {kind}")

    if kind is Kind.CHAR:
        if not text:
            raise ConversionError(f"expected a {kind}, got nothing")
        return Value.of_char(text[0])

    if kind is Kind.BOOL:
        if text not in (TRUE, FALSE):
            raise ConversionError(f"'{text}' is not a valid {kind}, expected {TRUE} or {FALSE}")
        return Value.of_bool(text == TRUE)

    return Value.of_string(text)
