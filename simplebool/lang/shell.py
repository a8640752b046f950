"""Handles interactive/command-line mode for the simplebool interpreter. Uses cmd as backend."""

import cmd

from simplebool.lang.error import GenericException


class Shell(cmd.Cmd):
    """Lambda calculus interpreter shell."""
    intro = "simplebool :: untyped lambda calculus, call-by-value\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self.line_num = 0

    def default(self, line):
        """Evaluates a program and prints its result."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            line, add_to_prev = self.sess.preprocess_line(line, self._tmp_line)

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
            else:
                self._tmp_line = ""
                self.prompt = self._tmp_prompt

                try:
                    self.sess.add(line, self.line_num)
                except ValueError:
                    return  # if line is empty, terminate

                self.sess.run()

                if self.sess.results:
                    print(f"=> {self.sess.pop().term}")

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the simplebool interpreter!\n\n"
              "Every line is a program in the untyped lambda calculus. Lambdas are written \n"
              "'l x:Bool. body' (the type is required but ignored), application is \n"
              "juxtaposition and associates to the left, and a lambda's body extends as far \n"
              "to the right as possible.\n\n"
              "Try it out by typing '(l x:Bool. x) (l y:Bool. y)'. Results are printed with \n"
              "each variable's de Bruijn index: {λ y. [y=0]}.\n\n"
              "Commands: 'steps N' caps evaluation at N steps ('steps' removes the cap), \n"
              "'trace' toggles printing every reduction step, 'exit' quits.")

    def do_steps(self, arg):
        """Sets the evaluation step cap."""
        with self.sess.error_handler:
            if not arg:
                self.sess.max_steps = None
            elif arg.isdigit():
                self.sess.max_steps = int(arg)
            else:
                raise GenericException("'{}' is not a valid step count", arg)

    def do_trace(self, arg):
        """Toggles printing every reduction step."""
        self.sess.trace = not self.sess.trace
        print(f"trace {'on' if self.sess.trace else 'off'}")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
