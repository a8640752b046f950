"""Call-by-value small-step evaluator.

Evaluation rules, tried in order (v is a value, i.e. a lambda):

```
(λ. t) v  ->  t[0 := v]                 ; "beta", see term.term_subst_top
v t       ->  v t'      if t -> t'      ; "right congruence"
t u       ->  t' u      if t -> t'      ; "left congruence"
```

A term no rule applies to is stuck. Being stuck is how evaluation ends, not an error: step() reports it as a
StepResult, and evaluate() loops until it sees one. Nothing detects divergence: `(λx. x x) (λx. x x)` steps forever
unless the Evaluator has a step cap.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from simplebool.pure.term import Application, Lambda, Term, term_subst_top


class Outcome(Enum):
    REDUCED = auto()
    STUCK = auto()


@dataclass(frozen=True)
class StepResult:
    """Result of a single step: either REDUCED with the reduct, or STUCK."""
    outcome: Outcome
    term: Optional[Term] = None

    @classmethod
    def reduced(cls, term):
        return cls(Outcome.REDUCED, term)

    @classmethod
    def stuck(cls):
        return cls(Outcome.STUCK)

    @property
    def is_stuck(self):
        return self.outcome is Outcome.STUCK


@dataclass(frozen=True)
class Evaluation:
    """Result of evaluate(): the last term, the number of steps taken, and whether or not the last term is stuck (it
    isn't if the step cap was reached first).
    """
    term: Term
    steps: int
    normal_form: bool


class Evaluator:
    """Drives terms to normal form. max_steps caps the number of steps per evaluate() call (None = no cap), and
    on_step(step, term) is called with every reduct.
    """
    MAX_STEPS = None

    def __init__(self, max_steps=MAX_STEPS, on_step=None):
        if max_steps is not None and max_steps < 0:
            raise ValueError(f"max_steps must be non-negative, got {max_steps}")
        self.max_steps = max_steps
        self.on_step = on_step

    @staticmethod
    def is_value(term):
        return term.is_value

    def step(self, term):
        """Reduces exactly one subterm of term."""
        if isinstance(term, Application):
            left, right = term.left, term.right

            if isinstance(left, Lambda) and self.is_value(right):
                return StepResult.reduced(term_subst_top(right, left.body))

            elif self.is_value(left):
                result = self.step(right)
                if result.is_stuck:
                    return result
                return StepResult.reduced(Application(left, result.term))

            result = self.step(left)
            if result.is_stuck:
                return result
            return StepResult.reduced(Application(result.term, right))

        return StepResult.stuck()

    def evaluate(self, term):
        """Steps term until it is stuck or the step cap is reached."""
        Term.require(term)

        steps = 0
        while self.max_steps is None or steps < self.max_steps:
            result = self.step(term)
            if result.is_stuck:
                return Evaluation(term, steps, True)

            term = result.term
            steps += 1
            if self.on_step is not None:
                self.on_step(steps, term)

        return Evaluation(term, steps, self.step(term).is_stuck)


def evaluate(term, max_steps=Evaluator.MAX_STEPS):
    """Returns the normal form of term (or the term reached after max_steps steps)."""
    return Evaluator(max_steps).evaluate(term).term
