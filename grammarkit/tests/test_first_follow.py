import unittest

from grammarkit.first_follow import FirstFollow
from grammarkit.grammar import Grammar
from grammarkit.symbols import EOL, EPSILON
from grammarkit.tests import grammars
from grammarkit.trace import NarratingTrace


def reversed_copy(g: Grammar) -> Grammar:
    """Same grammar, productions inserted in the opposite order."""
    r = Grammar(g.symbols)
    r.set_axiom(g.axiom)
    for p in reversed(list(g.productions())):
        r.add_production(p.antecedent, p.consequent)
    return r


class TestFirst(unittest.TestCase):
    def setUp(self):
        self.ff = FirstFollow(grammars.expr())

    def test_sequences(self):
        ff = self.ff
        self.assertEqual(ff.first([EPSILON]), {EPSILON})
        self.assertEqual(ff.first([]), {EPSILON})
        self.assertEqual(ff.first(["+", "E", "id"]), {"+"})
        self.assertEqual(ff.first(["id", "*"]), {"id"})
        self.assertEqual(ff.first([EPSILON, "+"]), {"+"})
        self.assertEqual(ff.first([EOL]), {EPSILON})
        self.assertEqual(ff.first(["E", ")"]), {"(", "id"})
        self.assertEqual(ff[["T"]], {"(", "id"})

    def test_expression_sets(self):
        ff = self.ff
        self.assertEqual(ff.first_sets["F"], {"(", "id"})
        self.assertEqual(ff.first_sets["T"], ff.first_sets["F"])
        self.assertEqual(ff.first_sets["E"], ff.first_sets["T"])
        self.assertEqual(ff.follow("E"), {"+", ")", EOL})
        self.assertEqual(ff.follow("T"), {"+", "*", ")", EOL})
        self.assertEqual(ff.follow("F"), {"+", "*", ")", EOL})

    def test_unknown_symbols(self):
        self.assertEqual(self.ff.first(["nothing"]), set())
        self.assertEqual(self.ff.first(["nothing", "id"]), set())
        self.assertEqual(self.ff.follow("nothing"), set())
        self.assertEqual(self.ff.follow("id"), set())

    def test_follow_returns_copy(self):
        self.ff.follow("E").add("x")
        self.assertNotIn("x", self.ff.follow("E"))


class TestNullable(unittest.TestCase):
    def test_nullable_prefix(self):
        ff = FirstFollow(grammars.nullable_prefix())
        self.assertEqual(ff.first_sets["A"], {EPSILON})
        self.assertEqual(ff.first_sets["S"], {"b"})
        self.assertEqual(ff.follow("A"), {"b"})
        self.assertEqual(ff.follow("S"), {EOL})
        self.assertTrue(ff.nullable("A"))
        self.assertFalse(ff.nullable("S"))
        self.assertFalse(ff.nullable("nothing"))

    def test_ll1_expression(self):
        ff = FirstFollow(grammars.expr_ll1())
        self.assertEqual(ff.first_sets["E'"], {"+", EPSILON})
        self.assertEqual(ff.first_sets["T'"], {"*", EPSILON})
        self.assertEqual(ff.first_sets["E"], {"(", "id"})
        self.assertEqual(ff.follow("E"), {")", EOL})
        self.assertEqual(ff.follow("E'"), {")", EOL})
        self.assertEqual(ff.follow("T"), {"+", ")", EOL})
        self.assertEqual(ff.follow("T'"), {"+", ")", EOL})
        self.assertEqual(ff.follow("F"), {"+", "*", ")", EOL})
        self.assertEqual(ff.first(["T'", "E'"]), {"*", "+", EPSILON})
        self.assertEqual(ff.first(["T'", "E'", ")"]), {"*", "+", ")"})

    def test_nullable_axiom_followed_by_eol(self):
        g = grammars.nullable_axiom()
        g.add_production("Z", ["S", EOL])
        g.set_axiom("Z")
        ff = FirstFollow(g)
        self.assertEqual(ff.first_sets["S"], {"a", EPSILON})
        self.assertEqual(ff.first_sets["Z"], {"a", EPSILON})
        self.assertNotIn(EOL, ff.first_sets["Z"])
        self.assertEqual(ff.follow("S"), {EOL})


class TestFixedPoint(unittest.TestCase):
    def test_axiom_follow_has_eol(self):
        for factory in grammars.ALL:
            g = factory()
            self.assertIn(EOL, FirstFollow(g).follow(g.axiom), factory.__name__)

    def test_follow_never_has_epsilon(self):
        for factory in grammars.ALL:
            ff = FirstFollow(factory())
            for s in ff.follow_sets.values():
                self.assertNotIn(EPSILON, s)

    def test_order_independent(self):
        for factory in grammars.ALL:
            g = factory()
            a = FirstFollow(g)
            b = FirstFollow(reversed_copy(g))
            self.assertEqual(a.first_sets, b.first_sets, factory.__name__)
            self.assertEqual(a.follow_sets, b.follow_sets, factory.__name__)

    def test_pass_bound(self):
        for factory in grammars.ALL:
            g = factory()
            ff = FirstFollow(g)
            bound = len(g.rules) * len(g.symbols.terminals(include_epsilon=True)) + 1
            self.assertLessEqual(ff.passes["first"], bound)
            self.assertLessEqual(ff.passes["follow"], bound)
            self.assertGreaterEqual(ff.passes["first"], 1)


class TestPredictionSymbols(unittest.TestCase):
    def test_common_prefix(self):
        ff = FirstFollow(grammars.common_prefix())
        self.assertEqual(ff.prediction_symbols("S", ["a"]), {"a"})
        self.assertEqual(ff.prediction_symbols("S", ["a", "b"]), {"a"})

    def test_epsilon_uses_follow(self):
        ff = FirstFollow(grammars.expr_ll1())
        self.assertEqual(ff.prediction_symbols("E'", [EPSILON]), {")", EOL})
        self.assertEqual(ff.prediction_symbols("E'", ["+", "T", "E'"]), {"+"})
        self.assertEqual(ff.prediction_symbols("T'", [EPSILON]), {"+", ")", EOL})
        self.assertNotIn(EPSILON, ff.prediction_symbols("T'", [EPSILON]))


class TestNarration(unittest.TestCase):
    def test_first(self):
        ff = FirstFollow(grammars.expr_ll1())
        trace = NarratingTrace()
        self.assertEqual(ff.first(["T'", "E'"], trace), ff.first(["T'", "E'"]))
        text = trace.text()
        self.assertIn("First(T' E')", text)
        self.assertIn("T' is nullable, continue with the rest", text)
        self.assertIn("- empty string: add EPSILON", text)

    def test_follow(self):
        ff = FirstFollow(grammars.expr())
        trace = NarratingTrace()
        self.assertEqual(ff.follow("E", trace), {"+", ")", EOL})
        self.assertEqual(trace.lines[0], "Follow(E):")
        self.assertIn("  - E is the axiom: add $", trace.lines)
        self.assertIn("  - in F -> ( E )", trace.lines)
        self.assertEqual(trace.lines[-1], "Follow(E) = { $ + ) }")

    def test_follow_at_end(self):
        ff = FirstFollow(grammars.expr())
        trace = NarratingTrace()
        ff.follow("T", trace)
        self.assertIn("    T is at the end of the production", trace.lines)
        self.assertIn("    add Follow(E) = { $ + ) }", trace.lines)

    def test_fixed_point_passes(self):
        trace = NarratingTrace()
        quiet = FirstFollow(grammars.expr())
        loud = FirstFollow(grammars.expr(), trace)
        self.assertEqual(quiet.first_sets, loud.first_sets)
        self.assertEqual(quiet.follow_sets, loud.follow_sets)
        self.assertIn("FIRST pass 1", trace.lines)
        self.assertIn("FOLLOW(E) = { $ }: axiom", trace.lines)
        self.assertIn("  F -> id: FIRST(F) += { id }", trace.lines)

    def test_prediction_symbols(self):
        ff = FirstFollow(grammars.expr_ll1())
        trace = NarratingTrace()
        self.assertEqual(ff.prediction_symbols("E'", [EPSILON], trace), {")", EOL})
        self.assertIn("EPSILON in First: add Follow(E') = { $ ) }", trace.lines)
        self.assertEqual(trace.lines[-1], "PS = { $ ) }")

    def test_frame(self):
        df = FirstFollow(grammars.expr()).to_frame()
        self.assertEqual(list(df.index), ["E", "F", "T"])
        self.assertEqual(df.at["F", "First"], "{ ( id }")
        self.assertEqual(df.at["E", "Follow"], "{ $ + ) }")


if __name__ == '__main__':
    unittest.main()
