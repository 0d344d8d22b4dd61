import logging
from pprint import pformat
from typing import Sequence

import pandas as pd

from grammarkit.grammar import Grammar, Production
from grammarkit.symbols import EOL, EPSILON
from grammarkit.trace import QUIET, fmt_set


log = logging.getLogger(__name__)


class FirstFollow:
    """FIRST and FOLLOW sets of a grammar snapshot.

    Both maps are computed on construction and are only valid for the grammar
    as it was at that moment. Build a new instance after the grammar changes.
    """

    def __init__(self, grammar: Grammar, trace=QUIET):
        self.grammar = grammar
        self.symbols = grammar.symbols
        self.first_sets: dict[str, set[str]] = {}
        self.follow_sets: dict[str, set[str]] = {}
        self.passes: dict[str, int] = {"first": 0, "follow": 0}

        self.compute_first_sets(trace)
        self.compute_follow_sets(trace)

    def __getitem__(self, symbols: Sequence[str]) -> set[str]:
        return self.first(symbols)

    def _show(self, symbols) -> str:
        return fmt_set(symbols, self.symbols)

    def first(self, sequence: Sequence[str], trace=QUIET, depth: int = 0) -> set[str]:
        result = set()
        self._first(tuple(sequence), result, trace, depth)
        return result

    def _first(self, rule: tuple[str, ...], result: set[str], trace, depth: int):
        if trace.enabled:
            trace.step("First(%s)", " ".join(rule), depth=depth)

        if not rule or rule == (EPSILON,):
            trace.step("- empty string: add %s", EPSILON, depth=depth)
            result.add(EPSILON)
            return

        head, rest = rule[0], rule[1:]

        if head == EPSILON:
            trace.step("- skip %s", EPSILON, depth=depth)
            self._first(rest, result, trace, depth)
        elif self.symbols.is_terminal(head):
            # Reaching EOL means everything before it was nullable
            if head == EOL:
                trace.step("- reached %s: add %s", EOL, EPSILON, depth=depth)
                result.add(EPSILON)
                return
            trace.step("- terminal %s: add it and stop", head, depth=depth)
            result.add(head)
        else:
            fii = self.first_sets.get(head, set())
            if trace.enabled:
                trace.step("- FIRST(%s) = %s", head, self._show(fii), depth=depth)
            result.update(fii - {EPSILON})

            if EPSILON not in fii:
                return
            trace.step("- %s is nullable, continue with the rest", head, depth=depth)
            self._first(rest, result, trace, depth + 1)

    def compute_first_sets(self, trace=QUIET) -> dict[str, set[str]]:
        first = {nt: set() for nt in self.grammar.rules}
        self.first_sets = first

        n = 0
        is_changing = True
        while is_changing:
            n += 1
            previous = {nt: set(s) for nt, s in first.items()}
            trace.step("FIRST pass %d", n)

            for rule in self.grammar.productions():
                rhs = self.first(rule.consequent)
                if EOL in rhs:
                    rhs.discard(EOL)
                    rhs.add(EPSILON)

                added = rhs - first[rule.antecedent]
                if added and trace.enabled:
                    trace.step("%s: FIRST(%s) += %s", rule, rule.antecedent, self._show(added), depth=1)
                first[rule.antecedent] |= rhs

            is_changing = first != previous

        self.passes["first"] = n
        log.debug("FIRST sets converged after %d passes", n)
        return first

    def _occurrence(self, production: Production, i: int) -> tuple[set[str], bool]:
        """What the occurrence of a non-terminal at `i` contributes to its FOLLOW set.

        Returns the terminals of First(rest) and whether FOLLOW(antecedent)
        has to be merged as well (rest is nullable or empty).
        """
        rest = production.consequent[i + 1:]
        following = self.first(rest) if rest else {EPSILON}
        return following - {EPSILON}, EPSILON in following

    def compute_follow_sets(self, trace=QUIET) -> dict[str, set[str]]:
        follow = {nt: set() for nt in self.grammar.rules}
        self.follow_sets = follow
        if self.grammar.axiom in follow:
            follow[self.grammar.axiom].add(EOL)
            trace.step("FOLLOW(%s) = { %s }: axiom", self.grammar.axiom, EOL)

        n = 0
        is_changing = True
        while is_changing:
            n += 1
            previous = {nt: set(s) for nt, s in follow.items()}
            trace.step("FOLLOW pass %d", n)

            for rule in self.grammar.productions():
                for i, symbol in enumerate(rule.consequent):
                    if symbol not in follow:
                        continue

                    terminals, inherits = self._occurrence(rule, i)
                    if inherits:
                        terminals = terminals | follow[rule.antecedent]

                    added = terminals - follow[symbol]
                    if added and trace.enabled:
                        trace.step("%s: FOLLOW(%s) += %s", rule, symbol, self._show(added), depth=1)
                    follow[symbol] |= terminals

            is_changing = follow != previous

        self.passes["follow"] = n
        log.debug("FOLLOW sets converged after %d passes", n)
        return follow

    def follow(self, nonterminal: str, trace=QUIET) -> set[str]:
        if nonterminal not in self.follow_sets:
            trace.step("%s is not a non-terminal: FOLLOW is empty", nonterminal)
            return set()

        if trace.enabled:
            self._explain_follow(nonterminal, trace)
        return set(self.follow_sets[nonterminal])

    def _explain_follow(self, nonterminal: str, trace):
        trace.step("Follow(%s):", nonterminal)
        if nonterminal == self.grammar.axiom:
            trace.step("- %s is the axiom: add %s", nonterminal, EOL, depth=1)

        occurrences = self.grammar.filter_rules_by_consequent(nonterminal)
        if not occurrences:
            trace.step("- %s does not appear in any consequent", nonterminal, depth=1)

        for antecedent, rule in occurrences:
            trace.step("- in %s", rule, depth=1)
            for i, symbol in enumerate(rule.consequent):
                if symbol != nonterminal:
                    continue

                rest = rule.consequent[i + 1:]
                terminals, inherits = self._occurrence(rule, i)
                if rest:
                    trace.step(
                        "First(%s) without %s = %s", " ".join(rest), EPSILON, self._show(terminals), depth=2
                    )
                else:
                    trace.step("%s is at the end of the production", nonterminal, depth=2)
                if inherits:
                    trace.step(
                        "add Follow(%s) = %s", antecedent, self._show(self.follow_sets[antecedent]), depth=2
                    )

        trace.step("Follow(%s) = %s", nonterminal, self._show(self.follow_sets[nonterminal]))

    def prediction_symbols(self, antecedent: str, consequent: Sequence[str], trace=QUIET) -> set[str]:
        if trace.enabled:
            trace.step("Prediction symbols of %s -> %s:", antecedent, " ".join(consequent))

        hd = self.first(consequent, trace, depth=1)
        if EPSILON not in hd:
            if trace.enabled:
                trace.step("PS = First = %s", self._show(hd))
            return hd

        hd.discard(EPSILON)
        follow = self.follow(antecedent)
        if trace.enabled:
            trace.step("%s in First: add Follow(%s) = %s", EPSILON, antecedent, self._show(follow))
        hd |= follow

        if trace.enabled:
            trace.step("PS = %s", self._show(hd))
        return hd

    def nullable(self, nonterminal: str) -> bool:
        return EPSILON in self.first_sets.get(nonterminal, set())

    def to_frame(self) -> pd.DataFrame:
        records = [
            {
                "Non-terminal": nt,
                "First": self._show(self.first_sets[nt]),
                "Follow": self._show(self.follow_sets[nt]),
            }
            for nt in self.grammar.ordered_nonterminals()
        ]
        return pd.DataFrame.from_records(records, columns=["Non-terminal", "First", "Follow"]).set_index(
            "Non-terminal"
        )

    def __str__(self) -> str:
        return pformat({"first": self.first_sets, "follow": self.follow_sets})
