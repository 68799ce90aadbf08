"""Host-level error reporting for the Monkey interpreter.

Monkey programs report their own failures as values (parser error lists, Error objects), and Session turns those into
GenericExceptions. If any other type of error makes it all the way to ErrorHandler, it is assumed to be an internal
issue. RecursionError is the exception: it means the Monkey program recursed deeper than the host stack allows.
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error/warning message. Each of exprs is formatted into msg in bold. msg is used verbatim when
    there are no exprs, so messages containing braces need no escaping.
    """

    def __init__(self, msg, exprs=None, internal=False):
        if exprs is None:
            exprs = []
        if isinstance(exprs, str):
            exprs = [exprs]

        if exprs:
            msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))
        self.msg = msg
        self.exprs = exprs
        self.internal = internal

        super().__init__(self.msg)


class ErrorHandler:
    """Context manager that suppresses Python errors and reports Monkey errors/warnings instead."""
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True):
        self.fatal = fatal
        self.traceback = {}

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Should be called prior to Session add/run."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path. Should be called after successful Session add/run."""
        self.traceback[path] = (None, None)

    def warn(self, *args, **kwargs):
        """Generates and prints a warning message based on args (see GenericException)."""
        warning = GenericException(*args, **kwargs)
        print(colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + warning.msg)

    def throw(self, error):
        """Prints error (a GenericException) along with self.traceback, a dict of file: (line, line_num) representing
        where the error originated. Exits if self.fatal.
        """
        error_msg = ""
        lines = 0
        for file, (line, line_num) in self.traceback.items():
            if line:
                first, *others = line.splitlines()
                error_msg += f"  File '{file}', line {line_num}:\n"
                error_msg += f"    {first}\n"
                if others:
                    error_msg += "    ...\n"  # multi-line source, only the first line is shown
                lines += 1

        if lines:
            error_msg = "Traceback:\n" + error_msg

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg)

        if self.fatal:
            sys.exit(1)
        self.traceback = {path: (None, None) for path in self.traceback}

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(GenericException("maximum recursion depth exceeded"))
        elif exc_type is GenericException:
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(GenericException(f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True))
            do_exit = True

        return not do_exit
