"""Variable store of a bisaya program run: one flat namespace, no block or function scoping. An Environment is created
at the start of a run and discarded at its end; only the evaluator touches it in between.
"""


class Environment:

    def __init__(self, trace=None):
        """trace, if given, is called with a one-line description of every access (see ErrorHandler.trace)."""
        self.variables = {}
        self.trace = trace

    def get(self, name):
        """Returns the current Value of name, or None if name was never declared or assigned."""
        value = self.variables.get(name)
        if self.trace:
            self.trace(f"get: {name} = {value!r}" if value is not None else f"get: {name} (not found)")
        return value

    def set(self, name, value):
        """Creates or overwrites the entry for name."""
        if self.trace:
            self.trace(f"set: {name} = {value!r}")
        self.variables[name] = value

    def __contains__(self, name):
        return name in self.variables

    def __iter__(self):
        return iter(self.variables)

    def __len__(self):
        return len(self.variables)
