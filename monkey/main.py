"""Runs Monkey source files, a single snippet, or the interactive shell. Called from the `monkey` console script.

Basic program flow:
    1. Lexer (syntax/lexer.py): source text to tokens
    2. Parser (syntax/parser.py): tokens to an AST (syntax/ast.py) using Pratt parsing, collecting errors
    3. Evaluator (runtime/evaluator.py): walks the AST against an Environment, producing Objects

lang/ wraps that pipeline for the host: sessions, the shell and error reporting.
"""

import argparse
import sys

from monkey.lang.error import ErrorHandler
from monkey.lang.session import Session
from monkey.lang.shell import Shell


DEFAULT_RECURSION_LIMIT = 10000


def build_parser():
    parser = argparse.ArgumentParser(prog="monkey", description="Monkey language interpreter")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("-e", "--eval", dest="source", help="evaluate SOURCE, print the result and exit")
    parser.add_argument("--recursion-limit", type=int, default=DEFAULT_RECURSION_LIMIT,
                        help="maximum host recursion depth available to Monkey programs (default: %(default)s)")
    return parser


def main(argv=None):
    """Runs Monkey interpreter. Called from the monkey console script."""
    with ErrorHandler() as error_handler:
        args = build_parser().parse_args(argv)
        sys.setrecursionlimit(args.recursion_limit)

        if args.source is not None:
            sess = Session(error_handler, Session.SH_FILE, cmd_line=True)
            error_handler.fatal = True

            if args.source.strip():
                sess.add(args.source, 1)
                sess.run()

            for result in sess.results:
                print(result.inspect())

        elif args.file is not None:
            Session(error_handler, args.file, cmd_line=False).run()

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True)).cmdloop()


if __name__ == "__main__":
    main()
