"""Incremental term builder: folds a token stream into a Term while assigning de Bruijn indices.

The surface grammar has no application operator:

```
<term> ::= <var>                                ; "variable"
         | "l" <var> ":" <type> "." <term>      ; "lambda"
                                                ; - lambda bodies are greedy: l x:Bool. x y = l x:Bool. (x y)
         | <term> <term>                        ; "application"
                                                ; - associating by left: a b c d = (((a b) c) d)
         | "(" <term> ")"
<type> ::= "Bool" | "Bool" "->" <type>          ; parsed and discarded
```

Instead of recursive descent, the builder keeps a stack of PartialTerms: one for the whole program, one per open
parenthesis and one per lambda whose body is still being read. Each new variable is combined into the top of the stack,
and closing a parenthesis (or reaching the end of the program) seals the entries above it and folds them into the entry
below. A lambda entry on the stack is exactly a lambda whose body still absorbs terms to its right.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from simplebool.lang.error import ErrorHandler, ParseError, StructuralError
from simplebool.lang.lexical import Category, Lexer, Token
from simplebool.pure.term import Application, Lambda, Term, Variable


class Opener(Enum):
    """What pushed a PartialTerm onto the builder stack."""
    PROGRAM = auto()
    PAREN = auto()
    LAMBDA = auto()


@dataclass
class PartialTerm:
    """Builder stack entry. For a lambda entry, term is the body read so far and name the bound parameter."""
    opener: Opener
    name: Optional[str] = None
    term: Optional[Term] = None
    token: Optional[Token] = None  # token that opened this entry, for error messages
    sealed: bool = False

    @property
    def is_empty(self):
        return self.term is None

    def combine(self, term):
        """Attaches term to the right of this entry: an empty entry becomes term, anything else is applied to it."""
        if self.sealed:
            raise StructuralError("cannot combine '{}' into a sealed {} entry", (str(term), self.opener.name.lower()))
        Term.require(term, deep=False)

        if self.term is None:
            self.term = term
        else:
            self.term = Application(self.term, term)

    def seal(self):
        """Marks this entry as unable to absorb further terms and returns the finished Term."""
        if self.term is None:
            raise StructuralError("cannot seal an empty {} entry", self.opener.name.lower())

        self.sealed = True
        if self.opener is Opener.LAMBDA:
            return Lambda(self.name, self.term)
        return self.term


class TermBuilder:
    """Builds a single Term from a Lexer. warn is called like ErrorHandler.warn for suspicious input that is still
    accepted, and defaults to printing the warning through a fresh ErrorHandler.
    """

    def __init__(self, lexer, warn=None):
        self.lexer = lexer
        self.expr = lexer.expr
        self.warn = warn if warn is not None else ErrorHandler().warn

        self.bound = []  # binding context, innermost name last
        self.stack = []
        self.parens = 0

    @classmethod
    def from_string(cls, expr, warn=None):
        return cls(Lexer(expr), warn)

    @property
    def top(self):
        return self.stack[-1]

    def build(self):
        """Consumes the lexer up to END and returns the program's Term."""
        self.bound = []
        self.stack = [PartialTerm(Opener.PROGRAM)]
        self.parens = 0

        token = self.lexer.next_token()
        while token.category is not Category.END:
            if token.category is Category.LAMBDA:
                self.parse_lambda(token)
            elif token.category is Category.VARIABLE:
                self.top.combine(self.resolve(token))
            elif token.category is Category.OPEN_PAREN:
                self.stack.append(PartialTerm(Opener.PAREN, token=token))
                self.parens += 1
            elif token.category is Category.CLOSE_PAREN:
                self.close_paren(token)
            else:
                self._error("'{}' has unexpected token '{}'", token)

            token = self.lexer.next_token()

        return self.finish(token)

    def resolve(self, token):
        """Returns the Variable for token. Bound names get the distance to their innermost binder. Free names are placed
        above the whole binding context, ordered by the first letter of their name ('a' = 0).
        """
        name = token.text
        for index, bound_name in enumerate(reversed(self.bound)):
            if bound_name == name:
                return Variable(name, index)

        first = name[0].lower()
        if not name[0].isascii() or not "a" <= first <= "z":
            self._error("'{}' has free variable '{}' that does not start with a letter from a to z", token)
        if len(name) > 1:
            msg = "'{}' has free variable '{}', which is indexed by its first letter only"
            self.warn(msg, (self.expr, name), start=token.start, end=token.end)

        return Variable(name, len(self.bound) + ord(first) - ord("a"))

    def parse_lambda(self, token):
        """Parses `<var> ":" <type> "."` after a lambda token and opens the lambda's body."""
        param = self.expect(Category.VARIABLE, "a lambda parameter")
        self.bound.append(param.text)
        self.expect(Category.COLON, "':'")
        self.parse_type()

        self.stack.append(PartialTerm(Opener.LAMBDA, name=param.text, token=token))

    def parse_type(self):
        """Parses a type up to and including the lambda dot. The type is returned as tokens and not used otherwise."""
        type_tokens = []
        while True:
            type_tokens.append(self.expect(Category.KEYWORD_BOOL, "'Bool'"))

            token = self.lexer.next_token()
            if token.category is Category.LAMBDA_DOT:
                return type_tokens
            elif token.category is not Category.ARROW:
                self._error("'{}' expected '->' or '.' after 'Bool', found '{}'", token)
            type_tokens.append(token)

    def expect(self, category, description):
        """Returns the next token, which has to be of category."""
        token = self.lexer.next_token()
        if token.category is not category:
            self._error("'{}' expected " + description + ", found '{}'", token)
        return token

    def close_paren(self, token):
        """Closes every lambda opened since the matching '(', then the parenthesis itself."""
        if self.parens == 0:
            self._error("'{}' has unmatched '{}'", token)

        while self.top.opener is Opener.LAMBDA:
            self.discharge()
        self.discharge()
        self.parens -= 1

    def discharge(self):
        """Pops the top entry, seals it, and combines the result into the entry below it."""
        entry = self.stack.pop()
        if entry.is_empty:
            if entry.opener is Opener.LAMBDA:
                self._error("'{}' has a lambda with an empty body", entry.token)
            self._error("'{}' has empty parentheses at '{}'", entry.token)

        if entry.opener is Opener.LAMBDA:
            self.bound.pop()
        self.top.combine(entry.seal())

    def finish(self, end):
        """Folds every entry left on the stack into the program entry at END."""
        if self.parens != 0:
            unmatched = next(entry for entry in reversed(self.stack) if entry.opener is Opener.PAREN)
            self._error("'{}' has unmatched '{}'", unmatched.token)

        while len(self.stack) > 1:
            self.discharge()

        program = self.stack.pop()
        if program.is_empty:
            raise ParseError("program '{}' contains no term", self.expr, start=end.start, end=end.end)
        return program.seal()

    def _error(self, msg, token):
        raise ParseError(msg, (self.expr, token.text or str(token)), start=token.start, end=token.end)


def build(expr, warn=None):
    """Returns the Term for program text expr. Free variables with multi-letter names are reported through warn (see
    TermBuilder).
    """
    return TermBuilder.from_string(expr, warn).build()
