"""Uses the bisaya language implementation to interpret .bpp files/run in command-line mode. Also uses error handling
context manager. Called from the bisaya executable script.
"""

import argparse

from bisaya.lang.error import ErrorHandler
from bisaya.lang.session import Session
from bisaya.lang.shell import Shell


def main(argv=None):
    """Runs bisaya interpreter. Called from bisaya executable script."""
    with ErrorHandler() as error_handler:
        parser = argparse.ArgumentParser(prog="bisaya", description="Bisaya++ interpreter")
        parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
        parser.add_argument("--tokens", action="store_true", help="print the tokens of file instead of running it")
        parser.add_argument("--ast", action="store_true", help="print the syntax tree of file instead of running it")
        parser.add_argument("--strict", action="store_true", help="reject assigning a value of a different type")
        parser.add_argument("--verbose", action="store_true", help="trace every variable access to stderr")
        args = parser.parse_args(argv)

        error_handler.verbose = args.verbose

        if args.file is not None:
            sess = Session(error_handler, args.file, strict=args.strict)

            if args.tokens:
                print(sess.dump_tokens())
            if args.ast:
                print(sess.dump_tree())
            if not (args.tokens or args.ast):
                sess.run()

        else:
            error_handler.fatal = False
            Shell(error_handler, strict=args.strict).cmdloop()


if __name__ == "__main__":
    main()
