"""Error handling for the bisaya language. Only BisayaErrors should be encountered while running a program: if another
type of error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.
"""

import sys

from termcolor import colored

from bisaya.core.token import TAB_WIDTH


class BisayaError(Exception):
    """Templates an error/warning message so that it can be used to throw a bisaya error/warning. msg may contain '{}'
    slots, which are filled with exprs (emphasised when displayed). at is anything with line/column attributes (a
    Token or an AST node) and marks the offending source text.
    """
    phase = None

    def __init__(self, msg, exprs=None, at=None, length=None, internal=False):
        if exprs is None:
            exprs = []
        if isinstance(exprs, str):
            exprs = [exprs]

        self.plain_msg = msg.format(*exprs)
        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # color expr snippets

        self.line = getattr(at, "line", None)
        self.column = getattr(at, "column", None)
        if length is None:
            length = len(getattr(at, "text", ""))
        self.length = max(length, 1)  # needed for error display

        self.internal = internal
        super().__init__(self.plain_msg)


class LexError(BisayaError):
    """Malformed literal or unknown symbol in the source text."""
    phase = "lexical"


class ParseError(BisayaError):
    """Token that does not fit the grammar production expected at that point."""
    phase = "syntax"


class BisayaRuntimeError(BisayaError):
    """Failure while evaluating a program: bad operand types, undeclared names, unconvertible input."""
    phase = "runtime"


class ErrorHandler:
    """Context manager that will silently suppress Python errors and raise custom bisaya errors/warnings."""
    ERROR = "red"
    WARNING = "magenta"
    TRACE = "cyan"

    def __init__(self, fatal=True, verbose=False, stream=None):
        self.fatal = fatal
        self.verbose = verbose
        self.stream = stream if stream is not None else sys.stderr
        self.traceback = {}  # path: source lines of the program being run

    def register_file(self, path, source=""):
        """Registers path (and its source, used for diagnoses) in traceback."""
        self.traceback[path] = source.split("\n")

    def remove_file(self, path):
        """Removes path from traceback. Should be called after a successful run."""
        self.traceback.pop(path, None)

    def _current(self):
        """Most recently registered (path, lines), or (None, []) if nothing is registered."""
        if not self.traceback:
            return None, []
        path = next(reversed(self.traceback))
        return path, self.traceback[path]

    @staticmethod
    def diagnose(error, line, warning=False):
        """Returns offending part of line highlighted and bolded, with a caret underneath it."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        line = line.replace("\t", " " * TAB_WIDTH)  # columns count tabs as TAB_WIDTH
        start = min(error.column - 1, len(line))
        end = start + error.length

        diagnosis = "  " + line[:start]
        diagnosis += colored(line[start:end], color, attrs=["bold"])
        diagnosis += line[end:] + "\n"

        diagnosis += "  " + " " * start
        diagnosis += colored("^" + "~" * (end - start - 1), color, attrs=["bold"])

        return diagnosis

    def _locate(self, error):
        """Returns 'path:line:col: ' for error, or as much of it as is known, plus the offending source line."""
        path, lines = self._current()
        location = f"{path}:" if path else ""
        line = None

        if error.line is not None:
            location += f"{error.line}:{error.column}:"
            if 0 < error.line <= len(lines):
                line = lines[error.line - 1]

        return (location + " " if location else ""), line

    def _print(self, text):
        print(text, file=self.stream)

    def warn(self, *args, **kwargs):
        """Generates and prints runtime warning message based on args."""
        error = BisayaError(*args, **kwargs)
        location, line = self._locate(error)

        error_msg = colored(location, attrs=["bold"])
        error_msg += colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.msg
        self._print(error_msg)

        if line is not None:
            self._print(ErrorHandler.diagnose(error, line, warning=True))

    def trace(self, msg):
        """Prints msg dimmed if in verbose mode. Used for Environment access tracing."""
        if self.verbose:
            self._print(colored(msg, ErrorHandler.TRACE, attrs=["dark"]))

    def throw(self, error):
        """Throws error using error and self.traceback. error must be a BisayaError. Exits if self.fatal."""
        location, line = self._locate(error)

        error_msg = colored(location, attrs=["bold"])
        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        label = f"{error.phase} error: " if error.phase else "error: "
        error_msg += colored(label, ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        self._print(error_msg)

        if not error.internal and line is not None:
            self._print(ErrorHandler.diagnose(error, line))

        if self.fatal:
            sys.exit(1)
        self.traceback = {}  # if error occurred, reset traceback (no need if error is fatal)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(BisayaError("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(BisayaError("program nested too deeply, maximum recursion depth exceeded"))
        elif exc_type is not None and issubclass(exc_type, BisayaError):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(BisayaError("unknown error: '{}'", f"{exc_type.__name__}: {exc_val}", internal=True))
            do_exit = True

        return not do_exit
