"""Untyped lambda calculus terms using de Bruijn indices, and the substitution algebra over them.

The `pure` directory contains the interpreter core: terms (this module), the term builder (builder.py) and the
call-by-value evaluator (evaluator.py). Nothing in here knows about program text beyond the display names it keeps.

Formally,

```
<term> ::= <index>          ; "variable"
                            ; - number of binders between the occurrence and its binder, innermost = 0
         | "λ" "." <term>   ; "lambda"
                            ; - the parameter name is kept for display only
         | <term> <term>    ; "application"
```

Terms are immutable: shift and substitute return new terms and never modify their operands, so no subterm is ever
shared between two parents by accident. Equality compares structure and indices only, which for de Bruijn terms is
alpha-equivalence: `λx. x == λy. y`.

Source: Pierce, Types and Programming Languages, §6.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from simplebool.lang.error import StructuralError


class Term(ABC):
    """Superclass for every lambda term. Subclasses validate themselves on construction, so an invalid term (a Lambda
    with no body, a Variable with no name, an Application missing a side) can't be built in the first place.
    """

    @property
    @abstractmethod
    def nodes(self):
        """Child terms, left to right."""

    @abstractmethod
    def is_valid(self):
        """Whether or not this term and all of its children are well-formed."""

    @property
    def is_value(self):
        """Whether or not evaluation considers this term fully reduced at the top level. Only lambdas are values."""
        return False

    def validate(self):
        """Raises a StructuralError if this term is not well-formed."""
        Term.require(self)

    @staticmethod
    def require(term, deep=True):
        """Raises a StructuralError unless term is a well-formed Term. Children of a constructed term were checked when
        they were built, so constructors pass deep=False.
        """
        if not isinstance(term, Term) or (deep and not term.is_valid()):
            raise StructuralError("invalid term '{}'", repr(term))

    def shift(self, distance):
        """Returns this term with `distance` added to the index of every free variable. A variable is free if its index
        is at least the number of lambdas crossed on the way down to it.
        """
        return self._shift(distance, 0)

    def substitute(self, target, replacement):
        """Returns this term with every free occurrence of variable `target` replaced by `replacement`. Under `depth`
        lambdas the variable has index target + depth, and the replacement has to be shifted up by depth before it is
        inserted there.
        """
        Term.require(replacement, deep=False)
        return self._substitute(target, replacement, 0)

    @abstractmethod
    def _shift(self, distance, depth):
        ...

    @abstractmethod
    def _substitute(self, target, replacement, depth):
        ...

    @abstractmethod
    def to_source(self):
        """Renders this term in surface syntax. Names are display names, so the result only re-parses to an equal term
        if no reduction has moved a variable under a binder of the same name.
        """

    def display(self, indents=0):
        """Recursively displays term tree with readable format.

        Format:
        <Term>(<attrs>, nodes=[
            <Term>(<attrs>, nodes=[
                ...
                <Term>(<attrs>)  # <-- if nodes is empty
            ])
        ])
        """
        attrs = self._attrs()
        result = f"{'    ' * indents}{type(self).__name__}({attrs}"
        if self.nodes:
            result += ", nodes=[" if attrs else "nodes=["
            for node in self.nodes:
                result += "\n" + node.display(indents + 1) + ","
            result = result[:-1] + f"\n{'    ' * indents}]"
        return result + ")"

    def _attrs(self):
        return ""


@dataclass(frozen=True)
class Variable(Term):
    """Variable occurrence: display name plus de Bruijn index."""
    name: str = field(compare=False)
    index: int

    def __post_init__(self):
        if not self.is_valid():
            raise StructuralError("invalid variable '{}' with index '{}'", (self.name, self.index))

    @property
    def nodes(self):
        return ()

    def is_valid(self):
        return isinstance(self.name, str) and bool(self.name) and isinstance(self.index, int) and self.index >= 0

    def _shift(self, distance, depth):
        if self.index >= depth:
            if self.index + distance < 0:
                raise StructuralError("shifting '{}' by {} gives a negative index", (str(self), distance))
            return Variable(self.name, self.index + distance)
        return self

    def _substitute(self, target, replacement, depth):
        if self.index == target + depth:
            return replacement._shift(depth, 0)
        return self

    def to_source(self):
        return self.name

    def _attrs(self):
        return f"name='{self.name}', index={self.index}"

    def __str__(self):
        return f"[{self.name}={self.index}]"


@dataclass(frozen=True)
class Lambda(Term):
    """Lambda abstraction binding one (nameless) variable. Its body refers to it as index 0."""
    name: str = field(compare=False)
    body: Term

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise StructuralError("lambda parameter must have a name, got '{}'", repr(self.name))
        Term.require(self.body, deep=False)

    @property
    def nodes(self):
        return (self.body,)

    @property
    def is_value(self):
        return True

    def is_valid(self):
        return isinstance(self.name, str) and bool(self.name) and isinstance(self.body, Term) and self.body.is_valid()

    def _shift(self, distance, depth):
        return Lambda(self.name, self.body._shift(distance, depth + 1))

    def _substitute(self, target, replacement, depth):
        return Lambda(self.name, self.body._substitute(target, replacement, depth + 1))

    def to_source(self):
        return f"l {self.name}:Bool. {self.body.to_source()}"

    def _attrs(self):
        return f"name='{self.name}'"

    def __str__(self):
        return f"{{λ {self.name}. {self.body}}}"


@dataclass(frozen=True)
class Application(Term):
    """Application of `left` (function position) to `right` (argument position)."""
    left: Term
    right: Term

    def __post_init__(self):
        Term.require(self.left, deep=False)
        Term.require(self.right, deep=False)

    @property
    def nodes(self):
        return (self.left, self.right)

    def is_valid(self):
        return all(isinstance(node, Term) and node.is_valid() for node in (self.left, self.right))

    def _shift(self, distance, depth):
        return Application(self.left._shift(distance, depth), self.right._shift(distance, depth))

    def _substitute(self, target, replacement, depth):
        return Application(
            self.left._substitute(target, replacement, depth),
            self.right._substitute(target, replacement, depth)
        )

    def to_source(self):
        left = self.left.to_source()
        if isinstance(self.left, Lambda):
            left = f"({left})"

        right = self.right.to_source()
        if not isinstance(self.right, Variable):
            right = f"({right})"
        return f"{left} {right}"

    def __str__(self):
        return f"({self.left} <- {self.right})"


def shift(term, distance):
    """Functional form of Term.shift. Raises a StructuralError if term isn't a Term."""
    Term.require(term, deep=False)
    return term.shift(distance)


def substitute(term, target, replacement):
    """Functional form of Term.substitute. Raises a StructuralError if either operand isn't a Term. Constructed Terms
    are well-formed, so neither operand is walked to check it.
    """
    Term.require(term, deep=False)
    return term.substitute(target, replacement)


def term_subst_top(s, t):
    """Beta-reduction of (λ. t) s, where s is the argument and t the lambda body: s moves one binder deeper, replaces
    variable 0 in t, and then every free variable of the result moves one binder out since the lambda is gone.
    """
    s = shift(s, 1)
    t = substitute(t, 0, s)
    return shift(t, -1)
