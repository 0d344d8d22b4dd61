from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from grammarkit.errors import SymbolError


EPSILON = "EPSILON"
EOL = "$"


class SymbolKind(Enum):
    TERMINAL = "terminal"
    NONTERMINAL = "non-terminal"


@dataclass(frozen=True)
class Symbol:
    name: str
    kind: SymbolKind
    pattern: str | None = None

    def is_terminal(self) -> bool:
        return self.kind is SymbolKind.TERMINAL


class SymbolTable:
    """Interns grammar symbols.

    Every symbol gets a small integer index the first time it is declared,
    so `name_of(index_of(x)) == x`. EPSILON and EOL are always present with
    indices 0 and 1; they count as terminals but carry no pattern.
    """

    def __init__(self):
        self._symbols: dict[str, Symbol] = {}
        self._index: dict[str, int] = {}
        self._names: list[str] = []

        self._intern(Symbol(EPSILON, SymbolKind.TERMINAL))
        self._intern(Symbol(EOL, SymbolKind.TERMINAL))

    def _intern(self, symbol: Symbol):
        if symbol.name not in self._index:
            self._index[symbol.name] = len(self._names)
            self._names.append(symbol.name)
        self._symbols[symbol.name] = symbol

    def _check_redeclaration(self, symbol: Symbol):
        if symbol.name in (EPSILON, EOL):
            raise SymbolError(f"{symbol.name!r} is reserved")

        old = self._symbols.get(symbol.name)
        if old is not None and old != symbol:
            raise SymbolError(
                f"{symbol.name!r} already declared as {old.kind.value}"
                + (f" with pattern {old.pattern!r}" if old.pattern is not None else "")
            )

    def declare_terminal(self, name: str, pattern: str) -> Symbol:
        symbol = Symbol(name, SymbolKind.TERMINAL, pattern)
        self._check_redeclaration(symbol)
        self._intern(symbol)
        return symbol

    def declare_nonterminal(self, name: str) -> Symbol:
        symbol = Symbol(name, SymbolKind.NONTERMINAL)
        self._check_redeclaration(symbol)
        self._intern(symbol)
        return symbol

    def contains(self, name: str) -> bool:
        return name in self._symbols

    __contains__ = contains

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self):
        return (self._symbols[name] for name in self._names)

    def get(self, name: str) -> Symbol | None:
        return self._symbols.get(name)

    def is_terminal(self, name: str) -> bool:
        symbol = self._symbols.get(name)
        return symbol is not None and symbol.is_terminal()

    def is_terminal_excluding_epsilon(self, name: str) -> bool:
        return name != EPSILON and self.is_terminal(name)

    def is_nonterminal(self, name: str) -> bool:
        symbol = self._symbols.get(name)
        return symbol is not None and not symbol.is_terminal()

    def pattern(self, name: str) -> str | None:
        symbol = self._symbols.get(name)
        return symbol.pattern if symbol else None

    def terminals(self, include_epsilon: bool = False, include_eol: bool = True) -> list[str]:
        names = []
        for name in self._names:
            if not self._symbols[name].is_terminal():
                continue
            if name == EPSILON and not include_epsilon:
                continue
            if name == EOL and not include_eol:
                continue
            names.append(name)
        return names

    def nonterminals(self) -> list[str]:
        return [n for n in self._names if not self._symbols[n].is_terminal()]

    def index_of(self, name: str) -> int:
        return self._index[name]

    def name_of(self, index: int) -> str:
        return self._names[index]

    def ordered(self, names: Iterable[str]) -> list[str]:
        # Undeclared names go last, alphabetically
        return sorted(names, key=lambda n: (self._index.get(n, len(self._names)), n))
