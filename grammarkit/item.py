from dataclasses import dataclass, field
from typing import Self

from grammarkit.grammar import Production
from grammarkit.symbols import EPSILON

DOT = "•"


@dataclass(frozen=True)
class Lr0Item:
    """A production with a dot marking how much of it has been recognized.

    Equality and hash only look at antecedent, consequent and dot; there is
    no lookahead. The item of an epsilon production is complete at dot 0.
    """

    antecedent: str
    consequent: tuple[str, ...]
    dot: int = 0

    def __post_init__(self):
        if not 0 <= self.dot <= len(self.consequent):
            raise IndexError(f"Dot position {self.dot} is out of {self}")

    @classmethod
    def from_production(cls, production: Production, dot: int = 0) -> Self:
        return cls(production.antecedent, production.consequent, dot)

    def is_empty(self) -> bool:
        return self.consequent == (EPSILON,)

    def is_complete(self) -> bool:
        return self.dot == len(self.consequent) or self.is_empty()

    def next_to_dot(self) -> str | None:
        if self.is_complete():
            return None
        return self.consequent[self.dot]

    def advance_dot(self) -> Self:
        if self.is_complete():
            raise IndexError(f"Dot position exceeds symbols amount in {self}")
        return Lr0Item(self.antecedent, self.consequent, self.dot + 1)

    def production(self) -> Production:
        return Production(self.antecedent, self.consequent)

    def __str__(self) -> str:
        rule = list(self.consequent)
        rule.insert(len(rule) if self.is_empty() else self.dot, DOT)
        return f"{self.antecedent} -> {' '.join(rule)}"


@dataclass(eq=False)
class State:
    items: frozenset[Lr0Item]
    id: int = field(default=-1)

    def __eq__(self, other) -> bool:
        if not isinstance(other, State):
            return NotImplemented
        return self.items == other.items

    def __hash__(self) -> int:
        return hash(self.items)

    def __iter__(self):
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def symbols_after_dot(self) -> set[str]:
        return {s for s in (item.next_to_dot() for item in self.items) if s is not None}

    def complete_items(self) -> list[Lr0Item]:
        return [item for item in self.sorted_items() if item.is_complete()]

    def sorted_items(self) -> list[Lr0Item]:
        return sorted(self.items, key=lambda e: (e.dot == 0, str(e)))

    def __str__(self) -> str:
        return f"I{self.id}: " + "; ".join(str(e) for e in self.sorted_items())
