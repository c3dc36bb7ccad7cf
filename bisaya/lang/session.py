"""Session control for the bisaya language. A Session takes one program (from a file or from the shell) through the
whole pipeline: lexing, parsing, and evaluation against a fresh Environment.
"""

from bisaya.core.environment import Environment
from bisaya.core.evaluator import evaluate
from bisaya.core.lexer import tokenize
from bisaya.core.parser import parse
from bisaya.lang.console import ConsoleIO
from bisaya.lang.error import BisayaError


class Session:
    """Governs a single bisaya program run. Phases are lazy and cached: tokens and tree are computed on first use."""
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path, source=None, io=None, strict=False):
        self.error_handler = error_handler

        self.path = path                               # used for error messages
        self.io = io if io is not None else ConsoleIO()
        self.strict = strict                           # reject cross-kind reassignment

        if source is None:
            if path == Session.SH_FILE:
                raise BisayaError("'<in>' is a reserved filename")
            try:
                with open(path, "r", encoding="utf-8") as file:
                    source = file.read()
            except OSError:
                raise BisayaError("'{}' could not be opened", path)

        self.source = source
        self.error_handler.register_file(path, source)

        self._tokens = None
        self._tree = None
        self.env = None  # Environment of the last run

    @property
    def tokens(self):
        """Token lines of the program. Raises LexError."""
        if self._tokens is None:
            self._tokens = tokenize(self.source)
        return self._tokens

    @property
    def tree(self):
        """Root Block of the program. Raises LexError or ParseError."""
        if self._tree is None:
            self._tree = parse(self.tokens)
        return self._tree

    def run(self):
        """Evaluates the program against a new Environment, which is returned. Raises any BisayaError encountered."""
        trace = self.error_handler.trace if self.error_handler.verbose else None
        self.env = Environment(trace=trace)

        evaluate(self.tree, self.env, self.io, strict=self.strict, warn=self.error_handler.warn)

        self.error_handler.remove_file(self.path)  # error was not raised
        return self.env

    def dump_tokens(self):
        """One row per token: type, text, line, and column, padded into columns."""
        rows = []
        for line in self.tokens:
            for token in line:
                rows.append(f"{str(token.type):<20} \t {token.text:<10} \t Line: {token.line} \t Col: {token.column}")
        return "\n".join(rows)

    def dump_tree(self):
        return self.tree.display()
