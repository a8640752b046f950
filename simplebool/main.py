"""Runs the simplebool interpreter on a program given as an argument or in a file, or in command-line mode. Also uses the
error handling context manager. Called from the simplebool executable script.

Python version must be >=3.8, because error handling requires that dicts are insertion-ordered and reversible views are
used for diagnostics.
"""

import argparse
import sys

from simplebool.lang.error import ErrorHandler, GenericException
from simplebool.lang.session import Session
from simplebool.lang.shell import Shell
from simplebool.pure.evaluator import Evaluator

RECURSION_LIMIT = 10000  # shift, substitute and step recurse once per level of term nesting


def non_negative(value):
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative step count, got {value}")
    return number


def render(term, source=False):
    return term.to_source() if source else str(term)


def main(argv=None):
    """Runs simplebool interpreter. Called from simplebool executable script."""
    assert sys.version_info >= (3, 8), "simplebool cannot be run with python < 3.8"
    sys.setrecursionlimit(max(sys.getrecursionlimit(), RECURSION_LIMIT))

    with ErrorHandler() as error_handler:
        parser = argparse.ArgumentParser(prog="simplebool", description="untyped lambda calculus interpreter")
        parser.add_argument("program", nargs="?",
                            help="program to run (if empty and no file, goes to command-line mode)")
        parser.add_argument("-f", "--file", help="file containing the program to run")
        parser.add_argument("--tokens", action="store_true", help="print the token stream before running")
        parser.add_argument("--tree", action="store_true", help="print the parsed term as a tree before running")
        parser.add_argument("--trace", action="store_true", help="print every reduction step")
        parser.add_argument("--source", action="store_true", help="print terms in surface syntax")
        parser.add_argument("--max-steps", type=non_negative, default=Evaluator.MAX_STEPS,
                            help="stop evaluating after this many steps (default: no limit)")
        args = parser.parse_args(argv)

        if args.program is not None and args.file is not None:
            parser.error("give either a program or --file, not both")

        options = {"max_steps": args.max_steps, "trace": args.trace}

        if args.program is None and args.file is None:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True, **options)).cmdloop()
            return 0

        if args.file is not None:
            program = Session.read(args.file)
            sess = Session(error_handler, args.file, **options)
        else:
            program = args.program
            sess = Session(error_handler, Session.ARGV_FILE, **options)

        if not program or program.isspace():
            raise GenericException("program cannot be empty", diagnosis=False)

        if args.tokens:
            print(" ".join(str(token) for token in sess.tokenize(program)))

        term = sess.add(program)

        if args.tree:
            print(term.display())
        print(f"   {render(term, args.source)}")

        sess.run()
        for evaluation in sess.results:
            print(f"=> {render(evaluation.term, args.source)}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
