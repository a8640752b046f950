"""Lexical analysis for simplebool programs. Turns program text into the token stream consumed by pure/builder.py.

The token alphabet can be loosely defined as follows:

```
<lambda>  ::= "l" | "λ"         ; "l" must be a word of its own, "λ" may be glued to the parameter
<bool>    ::= "Bool"            ; the only base type
<arrow>   ::= "->"
<symbol>  ::= "." | "(" | ")" | ":"
<var>     ::= <letter> (<letter> | <digit> | "_" | "'")*
```

Whitespace and the symbols above separate words: `l x:Bool.x(y)` is the same token stream as `l x : Bool . x ( y )`.
Anything else (a lone "-", "%", a word starting with a digit, ...) is an invalid token and raises a LexicalError: the
builder never sees an INVALID token.
"""

import re
from dataclasses import dataclass
from enum import Enum, auto

from simplebool.lang.error import LexicalError


class Category(Enum):
    """Token categories."""
    VARIABLE = auto()
    LAMBDA = auto()
    LAMBDA_DOT = auto()
    OPEN_PAREN = auto()
    CLOSE_PAREN = auto()
    COLON = auto()
    ARROW = auto()

    KEYWORD_BOOL = auto()

    END = auto()
    INVALID = auto()


@dataclass(frozen=True)
class Token:
    """A single token. start/end index into the program text and are only used for error messages."""
    category: Category
    text: str = ""
    start: int = 0
    end: int = 0

    DISPLAY = {
        Category.LAMBDA: "λ",
        Category.KEYWORD_BOOL: "Ɓ",
        Category.LAMBDA_DOT: ".",
        Category.OPEN_PAREN: "(",
        Category.CLOSE_PAREN: ")",
        Category.COLON: ":",
        Category.ARROW: "→",
        Category.END: "<END>",
        Category.INVALID: "<INVALID>",
    }

    def __str__(self):
        if self.category is Category.VARIABLE:
            return self.text
        return Token.DISPLAY[self.category]


class Lexer:
    """Scans program text on demand. Iterating over a Lexer yields every token up to and including END."""
    LAMBDA = ("l", "λ")
    BOOL = "Bool"
    ARROW = "->"
    SYMBOLS = {
        ".": Category.LAMBDA_DOT,
        "(": Category.OPEN_PAREN,
        ")": Category.CLOSE_PAREN,
        ":": Category.COLON,
        "λ": Category.LAMBDA,
    }
    SEPARATORS = ".():-λ"
    VARIABLE = re.compile(r"[^\W\d_][\w']*\Z")

    def __init__(self, expr):
        self.expr = expr
        self.pos = 0

    @staticmethod
    def is_separator(char):
        return char.isspace() or char in Lexer.SEPARATORS

    def next_token(self):
        """Returns the next token. Once the end of the program is reached, every call returns END."""
        expr = self.expr
        while self.pos < len(expr) and expr[self.pos].isspace():
            self.pos += 1

        start = self.pos
        if start >= len(expr):
            return Token(Category.END, "", start, start)

        char = expr[start]
        if char in Lexer.SYMBOLS:
            self.pos += 1
            return Token(Lexer.SYMBOLS[char], char, start, self.pos)

        if char == "-":
            if not expr.startswith(Lexer.ARROW, start):
                self._invalid(Token(Category.INVALID, char, start, start + 1))
            self.pos += len(Lexer.ARROW)
            return Token(Category.ARROW, Lexer.ARROW, start, self.pos)

        while self.pos < len(expr) and not Lexer.is_separator(expr[self.pos]):
            self.pos += 1
        text = expr[start:self.pos]

        if text in Lexer.LAMBDA:
            return Token(Category.LAMBDA, text, start, self.pos)
        elif text == Lexer.BOOL:
            return Token(Category.KEYWORD_BOOL, text, start, self.pos)
        elif Lexer.VARIABLE.match(text):
            return Token(Category.VARIABLE, text, start, self.pos)
        self._invalid(Token(Category.INVALID, text, start, self.pos))

    def _invalid(self, token):
        raise LexicalError("'{}' contains invalid token '{}'", (self.expr, token.text), start=token.start, end=token.end)

    def __iter__(self):
        while True:
            token = self.next_token()
            yield token
            if token.category is Category.END:
                return


def tokenize(expr):
    """Returns the list of tokens in expr, END included."""
    return list(Lexer(expr))
