import re

from grammarkit.grammar import Grammar
from grammarkit.symbols import EPSILON


def make(axiom: str, terminals: list[str], rules: list[tuple[str, str]]) -> Grammar:
    """Builds a grammar from space separated bodies. An empty body is epsilon."""
    g = Grammar()
    for t in terminals:
        g.symbols.declare_terminal(t, re.escape(t))
    for nt, _ in rules:
        if nt not in g.symbols:
            g.symbols.declare_nonterminal(nt)
    g.set_axiom(axiom)
    for nt, body in rules:
        g.add_production(nt, body.split() if body else [EPSILON])
    return g


def expr() -> Grammar:
    return make(
        "E",
        ["+", "*", "(", ")", "id"],
        [
            ("E", "E + T"),
            ("E", "T"),
            ("T", "T * F"),
            ("T", "F"),
            ("F", "( E )"),
            ("F", "id"),
        ],
    )


def expr_ll1() -> Grammar:
    return make(
        "E",
        ["+", "*", "(", ")", "id"],
        [
            ("E", "T E'"),
            ("E'", "+ T E'"),
            ("E'", ""),
            ("T", "F T'"),
            ("T'", "* F T'"),
            ("T'", ""),
            ("F", "( E )"),
            ("F", "id"),
        ],
    )


def nullable_prefix() -> Grammar:
    return make("S", ["b"], [("S", "A b"), ("A", "")])


def common_prefix() -> Grammar:
    return make("S", ["a", "b"], [("S", "a"), ("S", "a b")])


def alternatives() -> Grammar:
    return make("S", ["a", "b"], [("S", "A"), ("S", "B"), ("A", "a"), ("B", "b")])


def assignment() -> Grammar:
    # Classic LR(1) grammar that is not SLR(1)
    return make(
        "S",
        ["=", "*", "id"],
        [
            ("S", "L = R"),
            ("S", "R"),
            ("L", "* R"),
            ("L", "id"),
            ("R", "L"),
        ],
    )


def same_reduction() -> Grammar:
    return make(
        "S",
        ["a", "c"],
        [
            ("S", "A a"),
            ("S", "B a"),
            ("A", "c"),
            ("B", "c"),
        ],
    )


def nullable_axiom() -> Grammar:
    return make("S", ["a"], [("S", "a S"), ("S", "")])


EXPR_TEXT = """\
terminal id [a-z]+;
terminal plus \\+;
terminal times \\*;
terminal lpar \\(;
terminal rpar \\);
start with E;
;
E -> E plus T;
E -> T;
T -> T times F;
T -> F;
F -> lpar E rpar;
F -> id;
;
"""

ALL = [expr, expr_ll1, nullable_prefix, common_prefix, alternatives, assignment, same_reduction, nullable_axiom]
