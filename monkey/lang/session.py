"""Session control for the Monkey interpreter. Feeds source text through lexer, parser and evaluator, either from a
file or line by line in command-line mode, against one Environment that lives as long as the session.
"""

from monkey.lang.error import GenericException
from monkey.runtime.environment import Environment
from monkey.runtime.evaluator import evaluate
from monkey.runtime.object import is_error
from monkey.syntax import ast
from monkey.syntax.lexer import Lexer
from monkey.syntax.parser import Parser


class Session:
    """Governs a Monkey session, with control over the top-level Environment."""
    SH_FILE = "<in>"  # command-line interpreter filename
    OPENERS = "({["
    CLOSERS = ")}]"

    def __init__(self, error_handler, path, cmd_line):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode

        self.env = Environment()
        self.to_exec = {}  # dict of line num: source to execute
        self.results = []  # Objects produced by run, oldest first

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r") as file:
                    source = file.read()
            except OSError:
                raise GenericException("'{}' could not be opened", path)

            if source.strip():
                self.add(source, 1)
            else:
                self.error_handler.warn("'{}' is empty", path)

        elif not cmd_line:
            raise GenericException("'<in>' is a reserved filename")

    @staticmethod
    def preprocess_line(line):
        """Preprocesses a line from the command-line, which should already be prefixed with any previous unfinished
        lines. Returns the line without trailing whitespace and whether it still has unclosed brackets, in which case
        a line continuation is necessary. Brackets inside string literals are ignored.
        """
        line = line.rstrip()

        depth = 0
        in_string = False
        for char in line:
            if char == '"':
                in_string = not in_string
            elif in_string:
                continue
            elif char in Session.OPENERS:
                depth += 1
            elif char in Session.CLOSERS:
                depth -= 1

        return line, depth > 0

    def add(self, source, line_num):
        """Queues source for execution. Evaluation is delayed until run is called."""
        if not source or source.isspace():
            raise ValueError("source cannot be empty")
        self.to_exec[line_num] = source

    def run(self):
        """Parses and evaluates every queued source in order. Raises a GenericException for parse errors and for
        Error objects produced by evaluation.
        """
        for line_num, source in list(self.to_exec.items()):
            self.error_handler.register_line(self.path, source, line_num)
            try:
                result, program = self.execute(source)
            finally:
                del self.to_exec[line_num]

            if program.statements and not isinstance(program.statements[-1], ast.LetStatement):
                self.results.append(result)

            self.error_handler.remove_line(self.path)

    def execute(self, source):
        """Parses and evaluates source in this session's Environment. Returns (result, program)."""
        parser = Parser(Lexer(source))
        program = parser.parse_program()

        if parser.errors:
            raise GenericException("parser errors:\n" + "\n".join(f"  {msg}" for msg in parser.errors))

        result = evaluate(program, self.env)
        if is_error(result):
            raise GenericException(result.message)
        return result, program

    def pop(self):
        """Removes the oldest result and returns its rendering."""
        return self.results.pop(0).inspect()
