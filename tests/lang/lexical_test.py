import unittest

from simplebool.lang.error import LexicalError
from simplebool.lang.lexical import Category, Lexer, Token, tokenize


class LexerTestCase(unittest.TestCase):

    def test_categories(self):
        cases = {
            "l x:Bool. x": [
                Category.LAMBDA, Category.VARIABLE, Category.COLON, Category.KEYWORD_BOOL, Category.LAMBDA_DOT,
                Category.VARIABLE, Category.END
            ],
            "λx:Bool->Bool.x": [
                Category.LAMBDA, Category.VARIABLE, Category.COLON, Category.KEYWORD_BOOL, Category.ARROW,
                Category.KEYWORD_BOOL, Category.LAMBDA_DOT, Category.VARIABLE, Category.END
            ],
            "(x y)": [Category.OPEN_PAREN, Category.VARIABLE, Category.VARIABLE, Category.CLOSE_PAREN, Category.END],
            "   ": [Category.END],
            "": [Category.END],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, [token.category for token in tokenize(case)], case)

    def test_text_and_span(self):
        tokens = tokenize("l foo:Bool. foo")
        self.assertEqual(Token(Category.VARIABLE, "foo", 2, 5), tokens[1])
        self.assertEqual(Token(Category.VARIABLE, "foo", 12, 15), tokens[-2])
        self.assertEqual(Token(Category.END, "", 15, 15), tokens[-1])

    def test_words(self):
        cases = {
            "l": Category.LAMBDA,
            "Bool": Category.KEYWORD_BOOL,
            "lx": Category.VARIABLE,
            "Boolean": Category.VARIABLE,
            "x'": Category.VARIABLE,
            "x_1": Category.VARIABLE,
        }
        for case, expected in cases.items():
            self.assertEqual(expected, Lexer(case).next_token().category, case)

    def test_invalid(self):
        should_raise = ["x - y", "x -", "1x", "x%", "_x", "l x:Bool. x $"]
        for case in should_raise:
            self.assertRaises(LexicalError, tokenize, case)

        try:
            tokenize("a -b")
        except LexicalError as error:
            self.assertEqual("a -b", error.expr)
            self.assertEqual((2, 3), (error.start, error.end))
        else:
            self.fail("'-' was not rejected")

    def test_end_repeats(self):
        lexer = Lexer("x")
        self.assertEqual(Category.VARIABLE, lexer.next_token().category)
        self.assertEqual(Category.END, lexer.next_token().category)
        self.assertEqual(Category.END, lexer.next_token().category)

    def test_str(self):
        self.assertEqual("λ x : Ɓ → Ɓ . x <END>", " ".join(str(token) for token in tokenize("l x:Bool->Bool. x")))


if __name__ == '__main__':
    unittest.main()
