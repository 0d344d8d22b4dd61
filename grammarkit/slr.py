import logging
from dataclasses import dataclass

import pandas as pd

from grammarkit.first_follow import FirstFollow
from grammarkit.grammar import EMPTY_CELL, Production, terminal_alphabet
from grammarkit.lr0 import CanonicalCollection
from grammarkit.symbols import EOL
from grammarkit.trace import QUIET, fmt_set


log = logging.getLogger(__name__)

SHIFT = "shift"
REDUCE = "reduce"
ACCEPT = "accept"


@dataclass(frozen=True)
class Action:
    kind: str
    state: int | None = None
    production: Production | None = None

    def __str__(self) -> str:
        if self.kind == SHIFT:
            return f"s{self.state}"
        if self.kind == REDUCE:
            return f"r({self.production})"
        return "acc"


@dataclass(frozen=True)
class SLR1Conflict:
    state: int
    terminal: str
    actions: tuple[Action, ...]

    @property
    def kind(self) -> str:
        if any(a.kind == SHIFT for a in self.actions):
            return "shift/reduce"
        return "reduce/reduce"

    def __str__(self) -> str:
        return f"{self.kind} conflict in I{self.state} under {self.terminal}: " + ", ".join(
            str(a) for a in self.actions
        )


class SLR1Table:
    """ACTION and GOTO tables of the SLR(1) automaton.

    Reduce lookaheads come from FOLLOW. Like the LL(1) table, a cell keeps
    every action that lands in it and the collision is reported as a
    conflict.
    """

    def __init__(self, collection: CanonicalCollection, first_follow: FirstFollow):
        self.collection = collection
        self.grammar = collection.grammar
        self.first_follow = first_follow
        self.actions: dict[tuple[int, str], list[Action]] = {}
        self.gotos: dict[tuple[int, str], int] = {}
        self.conflicts: list[SLR1Conflict] = []

    def _add(self, state: int, terminal: str, action: Action):
        cell = self.actions.setdefault((state, terminal), [])
        if action not in cell:
            cell.append(action)

    def build(self, trace=QUIET) -> bool:
        self.actions = {}
        self.gotos = {}
        self.conflicts = []
        if not self.collection.states:
            self.collection.build()

        for (i, x), target in self.collection.transitions.items():
            if self.grammar.symbols.is_terminal(x):
                self._add(i, x, Action(SHIFT, state=target))
            else:
                self.gotos[(i, x)] = target

        for state in self.collection.states:
            for item in state.complete_items():
                if item == self.collection.accept_item:
                    trace.step("I%d: %s, accept on %s", state.id, item, EOL)
                    self._add(state.id, EOL, Action(ACCEPT))
                    continue

                follow = self.first_follow.follow(item.antecedent)
                if trace.enabled:
                    trace.step(
                        "I%d: %s, reduce on Follow(%s) = %s",
                        state.id, item, item.antecedent, fmt_set(follow, self.grammar.symbols),
                    )
                for terminal in follow:
                    self._add(state.id, terminal, Action(REDUCE, production=item.production()))

        for (i, terminal) in sorted(self.actions, key=lambda k: (k[0], self.grammar.symbols.index_of(k[1]))):
            cell = self.actions[(i, terminal)]
            if len(cell) > 1:
                conflict = SLR1Conflict(i, terminal, tuple(cell))
                trace.step("- %s", conflict)
                self.conflicts.append(conflict)

        log.debug("SLR(1) table built with %d conflicts", len(self.conflicts))
        return self.is_slr1

    @property
    def is_slr1(self) -> bool:
        return not self.conflicts

    def action(self, state: int, terminal: str) -> list[Action]:
        return list(self.actions.get((state, terminal), []))

    def goto_state(self, state: int, nonterminal: str) -> int | None:
        return self.gotos.get((state, nonterminal))

    def action_frame(self) -> pd.DataFrame:
        index = [state.id for state in self.collection.states]
        action = pd.DataFrame(EMPTY_CELL, index=index, columns=terminal_alphabet(self.grammar), dtype=object)
        for (i, terminal), cell in self.actions.items():
            action.at[i, terminal] = " / ".join(str(a) for a in cell)
        action.index.name = "State"
        return action

    def goto_frame(self) -> pd.DataFrame:
        index = [state.id for state in self.collection.states]
        goto = pd.DataFrame(EMPTY_CELL, index=index, columns=self.grammar.ordered_nonterminals(), dtype=object)
        for (i, nt), target in self.gotos.items():
            goto.at[i, nt] = target
        goto.index.name = "State"
        return goto
