import logging
from dataclasses import dataclass

import pandas as pd

from grammarkit.first_follow import FirstFollow
from grammarkit.grammar import EMPTY_CELL, Grammar, Production, terminal_alphabet
from grammarkit.trace import QUIET, fmt_set


log = logging.getLogger(__name__)


@dataclass(frozen=True)
class LL1Conflict:
    nonterminal: str
    terminal: str
    productions: tuple[Production, ...]

    def __str__(self) -> str:
        alternatives = ", ".join(str(p) for p in self.productions)
        return f"conflict at ({self.nonterminal}, {self.terminal}): {alternatives}"


class LL1Table:
    """LL(1) prediction table.

    `table[A][t]` lists every production of `A` whose prediction symbols
    contain `t`. A cell with more than one production is a conflict; the
    table keeps all of them so the report can show what collided.
    """

    def __init__(self, grammar: Grammar, first_follow: FirstFollow):
        self.grammar = grammar
        self.first_follow = first_follow
        self.table: dict[str, dict[str, list[Production]]] = {}
        self.conflicts: list[LL1Conflict] = []

    def build(self, trace=QUIET) -> tuple[dict[str, dict[str, list[Production]]], bool]:
        self.table = {}
        self.conflicts = []
        trace.step("Prediction symbols of every production:")

        for nt, productions in self.grammar.rules.items():
            column: dict[str, list[Production]] = {}
            for p in productions:
                ps = self.first_follow.prediction_symbols(nt, p.consequent)
                if trace.enabled:
                    trace.step("PS(%s) = %s", p, fmt_set(ps, self.grammar.symbols), depth=1)
                for symbol in ps:
                    column.setdefault(symbol, []).append(p)
            self.table[nt] = column

        for nt, column in self.table.items():
            for symbol in self.grammar.symbols.ordered(column):
                cell = column[symbol]
                if len(cell) > 1:
                    self.conflicts.append(LL1Conflict(nt, symbol, tuple(cell)))

        if self.conflicts:
            trace.step("Prediction symbol sets overlap, the grammar is not LL(1):")
            for conflict in self.conflicts:
                trace.step("- %s", conflict, depth=1)
        else:
            trace.step("Prediction symbol sets are disjoint, the grammar is LL(1)")

        log.debug("LL(1) table built with %d conflicts", len(self.conflicts))
        return self.table, self.is_ll1

    @property
    def is_ll1(self) -> bool:
        return not self.conflicts

    def cell(self, nonterminal: str, terminal: str) -> list[Production]:
        return list(self.table.get(nonterminal, {}).get(terminal, []))

    def to_frame(self) -> pd.DataFrame:
        columns = [t for t in terminal_alphabet(self.grammar) if any(t in c for c in self.table.values())]
        rows = [nt for nt in self.grammar.ordered_nonterminals() if nt in self.table]

        df = pd.DataFrame(EMPTY_CELL, index=rows, columns=columns, dtype=object)
        for nt in rows:
            for symbol, cell in self.table[nt].items():
                df.at[nt, symbol] = " ".join(f"[ {' '.join(p.consequent)} ]" for p in cell)
        df.index.name = "Non-terminal"
        return df
