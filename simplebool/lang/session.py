"""Session control for simplebool. Runs programs through the lexer, term builder and evaluator, either for a single
program given on the command line/in a file, or line by line in command-line mode.
"""

from simplebool.lang.error import GenericException
from simplebool.lang.lexical import Lexer, tokenize
from simplebool.pure.builder import TermBuilder
from simplebool.pure.evaluator import Evaluator


class Session:
    """Governs a simplebool session: programs added with add() are parsed immediately and evaluated by run()."""
    SH_FILE = "<in>"      # command-line interpreter filename
    ARGV_FILE = "<argv>"  # program given as a command line argument
    COMMENT = ";;"

    def __init__(self, error_handler, path=ARGV_FILE, max_steps=Evaluator.MAX_STEPS, trace=False, cmd_line=False):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path            # used for error messages
        self.cmd_line = cmd_line    # whether or not in command-line mode
        self.max_steps = max_steps  # evaluator step cap, None for no cap
        self.trace = trace          # whether or not to print every reduction step

        self.to_exec = {}  # dict of line num: (expr, Term) to evaluate
        self.results = []  # Evaluations, in order of execution

        if self.cmd_line:
            self.error_handler.fatal = False

    @staticmethod
    def read(path):
        """Returns the program in file path with comments stripped. The whole file is a single program."""
        lines = []
        try:
            with open(path, "r", encoding="utf-8") as file:
                for line in file:
                    lines.append(Session.preprocess_line(line)[0])
        except OSError:
            raise GenericException("'{}' could not be opened", path, diagnosis=False)

        return " ".join(line for line in lines if line)

    @staticmethod
    def preprocess_line(line, add_to_prev=""):
        """Strips comments and surrounding whitespace from line, prepending add_to_prev (an unfinished previous line).
        Returns updated value of line and whether or not it continues on the next line (more '(' than ')').
        """
        if Session.COMMENT in line:
            line = line[:line.index(Session.COMMENT)]  # get rid of comments

        line = f"{add_to_prev} {line.strip()}".strip() if add_to_prev else line.strip()
        return line, line.count("(") > line.count(")")

    def tokenize(self, expr, line_num=1):
        """Returns the tokens of expr, END included."""
        self.error_handler.register_line(self.path, expr, line_num)  # in case error is raised
        tokens = tokenize(expr)
        self.error_handler.remove_line(self.path)
        return tokens

    def add(self, expr, line_num=1):
        """Parses expr and queues it for evaluation. Returns the parsed Term. Evaluation is delayed until run is
        called.
        """
        if not expr or expr.isspace():
            raise ValueError("expr cannot be empty")

        self.error_handler.register_line(self.path, expr, line_num)  # in case error is raised

        term = TermBuilder(Lexer(expr), warn=self.error_handler.warn).build()
        self.to_exec[line_num] = (expr, term)

        self.error_handler.remove_line(self.path)  # error was not raised
        return term

    def run(self):
        """Evaluates this session's queued programs. Will raise any errors that are encountered, and warns about programs
        that did not reach a normal form within the step cap.
        """
        evaluator = Evaluator(self.max_steps, on_step=self._on_step if self.trace else None)

        for line_num, (expr, term) in list(self.to_exec.items()):
            self.error_handler.register_line(self.path, expr, line_num)

            try:
                evaluation = evaluator.evaluate(term)
            finally:
                del self.to_exec[line_num]

            if not evaluation.normal_form:
                msg = "'{}' did not reach a normal form within {} steps"
                self.error_handler.warn(msg, (expr, evaluation.steps), diagnosis=False)

            self.results.append(evaluation)
            self.error_handler.remove_line(self.path)

    def pop(self):
        """Removes and returns the latest Evaluation."""
        return self.results.pop()

    def _on_step(self, step, term):
        self.error_handler.register_step("β", str(term), step)
