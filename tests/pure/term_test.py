import unittest
from unittest import mock

from simplebool.lang.error import StructuralError
from simplebool.pure.term import Application, Lambda, Variable, shift, substitute, term_subst_top


def var(name, index):
    return Variable(name, index)


def lam(name, body):
    return Lambda(name, body)


def app(left, right):
    return Application(left, right)


IDENTITY = lam("x", var("x", 0))
TERMS = [
    var("x", 0),
    var("z", 25),
    IDENTITY,
    lam("x", lam("y", app(var("x", 1), var("y", 0)))),
    lam("x", app(var("x", 0), var("y", 25))),
    app(var("x", 23), var("y", 24)),
    app(lam("x", app(var("x", 0), var("a", 1))), lam("y", lam("z", app(var("b", 3), var("y", 1))))),
]


class TermTestCase(unittest.TestCase):

    def test_invalid(self):
        should_raise = [
            lambda: Variable("", 0),
            lambda: Variable("x", -1),
            lambda: Variable("x", None),
            lambda: Lambda("", IDENTITY),
            lambda: Lambda("x", None),
            lambda: Application(IDENTITY, None),
            lambda: Application(None, IDENTITY),
        ]
        for case in should_raise:
            self.assertRaises(StructuralError, case)

    def test_equality_ignores_names(self):
        self.assertEqual(lam("x", var("x", 0)), lam("y", var("y", 0)))
        self.assertNotEqual(lam("x", var("x", 0)), lam("x", var("x", 1)))
        self.assertNotEqual(app(IDENTITY, IDENTITY), lam("x", app(var("x", 0), var("x", 0))))

    def test_is_value(self):
        self.assertTrue(IDENTITY.is_value)
        self.assertFalse(var("x", 0).is_value)
        self.assertFalse(app(IDENTITY, IDENTITY).is_value)

    def test_str(self):
        cases = {
            var("x", 3): "[x=3]",
            IDENTITY: "{λ x. [x=0]}",
            app(var("x", 23), IDENTITY): "([x=23] <- {λ x. [x=0]})",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, str(case), expected)

    def test_to_source(self):
        cases = {
            IDENTITY: "l x:Bool. x",
            app(app(var("a", 0), var("b", 1)), var("c", 2)): "a b c",
            app(var("a", 0), app(var("b", 1), var("c", 2))): "a (b c)",
            app(IDENTITY, IDENTITY): "(l x:Bool. x) (l x:Bool. x)",
            lam("x", app(var("x", 0), var("y", 25))): "l x:Bool. x y",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, case.to_source(), expected)

    def test_display(self):
        expected = (
            "Lambda(name='x', nodes=[\n"
            "    Application(nodes=[\n"
            "        Variable(name='x', index=0),\n"
            "        Variable(name='y', index=25)\n"
            "    ])\n"
            "])"
        )
        self.assertEqual(expected, lam("x", app(var("x", 0), var("y", 25))).display())


class ShiftTestCase(unittest.TestCase):

    def test_zero_is_identity(self):
        for case in TERMS:
            self.assertEqual(case, shift(case, 0), case)

    def test_additive(self):
        for case in TERMS:
            for d1, d2 in [(1, 2), (3, -1), (5, -5), (2, 0)]:
                self.assertEqual(shift(case, d1 + d2), shift(shift(case, d1), d2), (case, d1, d2))

    def test_only_free_variables(self):
        cases = {
            var("x", 0): var("x", 2),
            IDENTITY: IDENTITY,
            lam("x", app(var("x", 0), var("y", 1))): lam("x", app(var("x", 0), var("y", 3))),
            lam("x", lam("y", app(var("x", 1), var("z", 2)))): lam("x", lam("y", app(var("x", 1), var("z", 4)))),
            app(var("x", 23), var("y", 24)): app(var("x", 25), var("y", 26)),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, shift(case, 2), case)

    def test_names_preserved(self):
        shifted = shift(lam("foo", app(var("foo", 0), var("bar", 1))), 1)
        self.assertEqual("{λ foo. ([foo=0] <- [bar=2])}", str(shifted))

    def test_negative_index(self):
        self.assertRaises(StructuralError, shift, var("x", 0), -1)
        self.assertEqual(IDENTITY, shift(IDENTITY, -1))

    def test_invalid(self):
        should_raise = [None, "x", 0]
        for case in should_raise:
            self.assertRaises(StructuralError, shift, case, 1)


class SubstituteTestCase(unittest.TestCase):

    def test_without_target(self):
        cases = [
            (IDENTITY, 0),
            (lam("x", lam("y", app(var("x", 1), var("y", 0)))), 0),
            (app(var("x", 23), var("y", 24)), 0),
            (lam("x", app(var("x", 0), var("y", 25))), 23),
        ]
        for case, target in cases:
            self.assertEqual(case, substitute(case, target, var("q", 7)), case)

    def test_replaces_target(self):
        replacement = var("w", 3)
        cases = {
            var("x", 0): var("w", 3),
            app(var("x", 0), var("y", 1)): app(var("w", 3), var("y", 1)),
            # under one binder the target is index 1 and the replacement moves up by one
            lam("y", app(var("x", 1), var("y", 0))): lam("y", app(var("w", 4), var("y", 0))),
            lam("y", lam("z", var("x", 2))): lam("y", lam("z", var("w", 5))),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, substitute(case, 0, replacement), case)

    def test_replacement_shifted_per_occurrence(self):
        term = app(var("x", 0), lam("y", var("x", 1)))
        result = substitute(term, 0, lam("a", var("f", 1)))
        self.assertEqual(app(lam("a", var("f", 1)), lam("y", lam("a", var("f", 2)))), result)

    def test_copies_are_independent(self):
        replacement = lam("a", var("a", 0))
        result = substitute(app(var("x", 0), var("x", 0)), 0, replacement)
        self.assertEqual(app(replacement, replacement), result)
        self.assertEqual(replacement, result.left)

    def test_invalid(self):
        self.assertRaises(StructuralError, substitute, None, 0, IDENTITY)
        self.assertRaises(StructuralError, substitute, IDENTITY, 0, None)
        self.assertRaises(StructuralError, substitute, IDENTITY, 0, "x")


class TermSubstTopTestCase(unittest.TestCase):

    def test_identity(self):
        for value in [IDENTITY, lam("y", var("z", 26)), lam("f", lam("x", app(var("f", 1), var("x", 0))))]:
            self.assertEqual(value, term_subst_top(value, var("x", 0)), value)

    def test_free_variables_move_out(self):
        # (λx. x y) v, with y free (index 1 inside the lambda) -> v y, with y at index 0
        body = app(var("x", 0), var("y", 1))
        self.assertEqual(app(IDENTITY, var("y", 0)), term_subst_top(IDENTITY, body))

    def test_argument_free_variables(self):
        # (λx. λy. x) (λa. b), with b free -> λy. λa. b, where b sits under two binders
        body = lam("y", var("x", 1))
        argument = lam("a", var("b", 1))
        self.assertEqual(lam("y", lam("a", var("b", 2))), term_subst_top(argument, body))

    def test_operands_not_rewalked(self):
        body = lam("y", app(app(var("x", 1), var("y", 0)), lam("z", var("x", 2))))
        argument = lam("a", app(var("a", 0), var("a", 0)))
        with mock.patch.object(Lambda, "is_valid") as lambda_valid, \
                mock.patch.object(Application, "is_valid") as application_valid:
            result = term_subst_top(argument, body)

        self.assertEqual(lam("y", app(app(argument, var("y", 0)), lam("z", argument))), result)
        lambda_valid.assert_not_called()
        application_valid.assert_not_called()


if __name__ == '__main__':
    unittest.main()
