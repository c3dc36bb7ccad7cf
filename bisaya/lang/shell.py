"""Handles interactive/command-line mode for the bisaya interpreter. Uses cmd as backend."""

import cmd

from bisaya.lang.error import BisayaError
from bisaya.lang.session import Session


class Shell(cmd.Cmd):
    """Bisaya++ interpreter shell. Lines are buffered from SUGOD to KATAPUSAN and then run as one program."""
    intro = "Bisaya++ interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used while a program is being typed
    _tmp_prompt = "> "       # also used for prompt swapping

    def __init__(self, error_handler, io=None, strict=False, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.error_handler = error_handler
        self.io = io
        self.strict = strict

        self._tmp_lines = []
        self.env = None  # Environment of the last program run

    def onecmd(self, line):
        if line == "EOF":
            return self.do_EOF("")
        if self._tmp_lines:  # inside a program, every line belongs to it
            return self.default(line)
        return super().onecmd(line)

    def default(self, line):
        """Buffers a program line, running the program once KATAPUSAN is typed."""
        with self.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            bare = line.split("--", 1)[0].strip()  # "KATAPUSAN -- end" still ends the program
            if not self._tmp_lines and bare != "SUGOD":
                raise BisayaError("programs must start with {}", "SUGOD")

            self._tmp_lines.append(line)
            if bare != "KATAPUSAN":
                self.prompt = self.secondary_prompt
                return

            source = "\n".join(self._tmp_lines)
            self._tmp_lines = []
            self.prompt = self._tmp_prompt

            sess = Session(self.error_handler, Session.SH_FILE, source, io=self.io, strict=self.strict)
            self.env = sess.run()
            self.stdout.write("\n")

    def do_vars(self, arg):
        """Lists the variables left by the last program run."""
        if not self.env:
            self.stdout.write("no variables\n")
            return
        for name in self.env:
            self.stdout.write(f"{name} = {self.env.get(name)!r}\n")

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        self.stdout.write(
            "Welcome to the Bisaya++ interpreter!\n\n"
            "Bisaya++ is a small educational language with Cebuano keywords. Type a whole program, \n"
            "starting with SUGOD and ending with KATAPUSAN; it runs as soon as KATAPUSAN is entered.\n\n"
            "Try it out by typing:\n"
            "    SUGOD\n"
            "    MUGNA NUMERO x=5\n"
            "    IPAKITA: x & $ & \"OO\"\n"
            "    KATAPUSAN\n\n"
            "Type 'vars' to list the variables of the last run and 'exit' to quit.\n")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        self.stdout.write("\n")
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
