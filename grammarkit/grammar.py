import logging
from dataclasses import dataclass
from typing import Iterator, Sequence

from grammarkit.errors import GrammarError, TokenizeError
from grammarkit.symbols import EOL, EPSILON, SymbolTable


log = logging.getLogger(__name__)

EMPTY_CELL = "∅"


@dataclass(frozen=True)
class Production:
    antecedent: str
    consequent: tuple[str, ...]

    def is_empty(self) -> bool:
        return len(self.consequent) == 1 and self.consequent[0] == EPSILON

    def __str__(self) -> str:
        return f"{self.antecedent} -> {' '.join(self.consequent)}"


class Grammar:

    def __init__(self, symbols: SymbolTable | None = None):
        self.symbols = symbols if symbols is not None else SymbolTable()
        self.axiom: str | None = None
        self.rules: dict[str, list[Production]] = {}
        self._changes = 0

    def set_axiom(self, name: str):
        self.axiom = name
        self._changes += 1

    @property
    def revision(self) -> tuple[int, int]:
        """Changes whenever a production, the axiom or a symbol is added."""
        return self._changes, len(self.symbols)

    @property
    def nonterminals(self) -> list[str]:
        return list(self.rules)

    def productions(self) -> Iterator[Production]:
        for productions in self.rules.values():
            yield from productions

    def add_production(self, antecedent: str, consequent: Sequence[str]) -> Production:
        if not self.symbols.is_nonterminal(antecedent):
            self.symbols.declare_nonterminal(antecedent)

        production = Production(antecedent, tuple(consequent))
        self.rules.setdefault(antecedent, []).append(production)
        self._changes += 1
        return production

    def split(self, raw: str) -> list[str]:
        """Segments `raw` into declared symbols using maximal munch.

        Whitespace is ignored. At every offset the longest declared symbol
        starting there is consumed. Raises `TokenizeError` if some offset
        does not start any declared symbol.

        Examples:
            With `E`, `E'`, `+` and `T` declared, `split("E'+T")` returns
            `["E'", "+", "T"]` and `split("EPSILON")` returns `["EPSILON"]`.
        """
        s = "".join(raw.split())
        if s == EPSILON:
            return [EPSILON]
        if not s:
            raise TokenizeError(raw, 0)

        symbols = []
        start = 0
        while start < len(s):
            end = None
            for lookahead in range(start + 1, len(s) + 1):
                if s[start:lookahead] in self.symbols:
                    end = lookahead
            if end is None:
                raise TokenizeError(raw, start)

            symbols.append(s[start:end])
            start = end
        return symbols

    def add_rule(self, antecedent: str, raw_consequent: str) -> Production:
        return self.add_production(antecedent, self.split(raw_consequent))

    def has_empty_production(self, antecedent: str) -> bool:
        return any(p.is_empty() for p in self.rules.get(antecedent, []))

    def filter_rules_by_consequent(self, symbol: str) -> list[tuple[str, Production]]:
        return [(p.antecedent, p) for p in self.productions() if symbol in p.consequent]

    def validate(self):
        problems = []

        if self.axiom is None:
            problems.append("no axiom declared")
        elif not self.rules.get(self.axiom):
            problems.append(f"axiom {self.axiom!r} has no productions")

        seen = set()
        for p in self.productions():
            if p in seen:
                problems.append(f"{p}: duplicate production")
            seen.add(p)
            if EPSILON in p.consequent and not p.is_empty():
                problems.append(f"{p}: {EPSILON} must be the whole consequent")
            for symbol in p.consequent:
                if self.symbols.is_terminal(symbol) or self.rules.get(symbol):
                    continue
                problems.append(f"{p}: {symbol!r} is neither a terminal nor a defined non-terminal")

        if problems:
            raise GrammarError(problems)
        log.debug("grammar with %d productions is valid", sum(len(p) for p in self.rules.values()))

    def ordered_nonterminals(self) -> list[str]:
        """Axiom first, the rest alphabetically."""
        rest = sorted(nt for nt in self.rules if nt != self.axiom)
        return [self.axiom, *rest] if self.axiom in self.rules else rest

    def __str__(self) -> str:
        lines = []
        for nt in self.ordered_nonterminals():
            alternatives = " | ".join(" ".join(p.consequent) for p in self.rules[nt])
            lines.append(f"{nt} -> {alternatives}")
        return "\n".join(lines)


def terminal_alphabet(grammar: Grammar) -> list[str]:
    """Terminals that can label an LL(1) or SLR(1) column, EOL last."""
    return grammar.symbols.terminals(include_eol=False) + [EOL]
