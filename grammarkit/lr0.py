import logging
from collections import deque
from typing import Iterable

import networkx as nx
import pandas as pd

from grammarkit.grammar import EMPTY_CELL, Grammar
from grammarkit.item import Lr0Item, State
from grammarkit.trace import QUIET


log = logging.getLogger(__name__)


def augmented_symbol(grammar: Grammar) -> str:
    """Name of the synthetic start symbol S'. It never clashes with a grammar symbol."""
    name = f"{grammar.axiom}'"
    while name in grammar.symbols or name in grammar.rules:
        name += "'"
    return name


def closure(grammar: Grammar, items: Iterable[Lr0Item], trace=QUIET) -> frozenset[Lr0Item]:
    s = set(items)
    to_process = [item for item in s]

    while to_process:
        # A -> a * B b
        item = to_process.pop()
        c = item.next_to_dot()
        if c not in grammar.rules:
            continue

        for p in grammar.rules[c]:
            new_item = Lr0Item.from_production(p)
            if new_item not in s:
                if trace.enabled:
                    trace.step("%s: add %s", item, new_item, depth=1)
                s.add(new_item)
                to_process.append(new_item)
    return frozenset(s)


def goto(grammar: Grammar, items: Iterable[Lr0Item], x: str, trace=QUIET) -> frozenset[Lr0Item]:
    t = set()

    for item in items:
        if item.next_to_dot() == x:
            t.add(item.advance_dot())

    if trace.enabled:
        trace.step("goto over %s: advance %s", x, "; ".join(sorted(str(e) for e in t)) or "nothing")
    return closure(grammar, t, trace)


class CanonicalCollection:
    """The canonical collection of LR(0) states of the augmented grammar.

    States are told apart by their item sets, never by id, so the set of
    states and the transition relation do not depend on discovery order.
    """

    def __init__(self, grammar: Grammar):
        self.grammar = grammar
        self.start = augmented_symbol(grammar)
        self.start_item = Lr0Item(self.start, (grammar.axiom,))
        self.accept_item = self.start_item.advance_dot()

        self.states: list[State] = []
        self.transitions: dict[tuple[int, str], int] = {}
        self._ids: dict[frozenset[Lr0Item], int] = {}

    def _discover(self, items: frozenset[Lr0Item]) -> State:
        state = State(items, len(self.states))
        self.states.append(state)
        self._ids[items] = state.id
        return state

    def build(self, trace=QUIET, lifo: bool = False) -> list[State]:
        """Worklist construction starting from closure({[S' -> • S]}).

        `lifo` processes the most recently discovered state first and visits
        symbols in reverse order, yielding the same automaton with other ids.
        """
        self.states = []
        self.transitions = {}
        self._ids = {}

        trace.step("I0 = closure({ %s })", self.start_item)
        to_process = deque([self._discover(closure(self.grammar, {self.start_item}, trace))])

        while to_process:
            state = to_process.pop() if lifo else to_process.popleft()
            symbols = self.grammar.symbols.ordered(state.symbols_after_dot())
            if lifo:
                symbols.reverse()

            for x in symbols:
                t = goto(self.grammar, state.items, x)
                target = self._ids.get(t)
                if target is None:
                    new_state = self._discover(t)
                    to_process.append(new_state)
                    target = new_state.id
                    if trace.enabled:
                        trace.step("goto(I%d, %s) = I%d (new): %s", state.id, x, target, new_state)
                elif trace.enabled:
                    trace.step("goto(I%d, %s) = I%d", state.id, x, target)
                self.transitions[(state.id, x)] = target

        log.debug("canonical collection: %d states, %d transitions", len(self.states), len(self.transitions))
        return self.states

    @property
    def initial(self) -> State:
        return self.states[0]

    def state_for(self, items: Iterable[Lr0Item]) -> State | None:
        i = self._ids.get(frozenset(items))
        return None if i is None else self.states[i]

    def accepting(self) -> list[State]:
        return [state for state in self.states if self.accept_item in state.items]

    def all_items(self) -> set[Lr0Item]:
        items = set()
        for state in self.states:
            items |= state.items
        return items

    def to_frame(self) -> pd.DataFrame:
        symbols = self.grammar.symbols.ordered({x for _, x in self.transitions})

        trace_records = []
        for state in self.states:
            record = {v: None for v in symbols}
            record["From"] = state.id
            for x in symbols:
                record[x] = self.transitions.get((state.id, x))
            trace_records.append(record)

        df = pd.DataFrame.from_records(trace_records, columns=["From", *symbols])
        df = df.set_index("From")
        df = df.map(lambda v: EMPTY_CELL if pd.isna(v) else int(v))
        return df

    def to_graph(self) -> nx.DiGraph:
        graph = nx.DiGraph()
        for state in self.states:
            graph.add_node(state.id, items=state.items, label=f"I{state.id}")
        for (source, x), target in self.transitions.items():
            graph.add_edge(source, target, symbol=x)
        return graph

    def __str__(self) -> str:
        return "\n".join(str(state) for state in self.states)
