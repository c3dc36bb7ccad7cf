"""Input/output capabilities handed to the evaluator: the real console, or an in-memory buffer."""

import sys


class ConsoleIO:
    """Reads program input from stdin and writes program output to stdout."""

    def __init__(self, stdin=None, stdout=None):
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout

    def read_line(self):
        """Returns the next line without its line break, or None at end of input."""
        self.stdout.flush()  # prompts written with IPAKITA must show before blocking
        line = self.stdin.readline()
        if not line:
            return None
        return line.rstrip("\r\n")

    def write(self, text):
        self.stdout.write(text)


class BufferIO:
    """Serves queued input lines and records everything written in data."""

    def __init__(self, lines=None):
        self.lines = list(lines) if lines is not None else []
        self.data = ""

    def read_line(self):
        return self.lines.pop(0) if self.lines else None

    def write(self, text):
        self.data += text
