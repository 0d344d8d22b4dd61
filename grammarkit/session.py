import copy
import logging
from pathlib import Path
from typing import Iterable, Sequence

from grammarkit import loader
from grammarkit.errors import NoGrammarError
from grammarkit.first_follow import FirstFollow
from grammarkit.grammar import Grammar, Production
from grammarkit.item import Lr0Item
from grammarkit.ll1 import LL1Table
from grammarkit.lr0 import CanonicalCollection, closure, goto
from grammarkit.slr import SLR1Table
from grammarkit.symbols import SymbolTable
from grammarkit.trace import QUIET


log = logging.getLogger(__name__)


class Session:
    """One grammar and everything derived from it.

    `load` installs a private copy of the grammar. The FIRST/FOLLOW engine,
    the LL(1) table and the LR(0) automaton are built lazily and thrown away
    whenever another grammar is installed or the installed one is changed
    through `Session.grammar`.
    Sessions share nothing, so several can coexist.

    Every query takes an optional trace sink. Passing a `NarratingTrace`
    gives the step by step explanation of the same computation.
    """

    def __init__(self, grammar: Grammar | None = None):
        self._grammar: Grammar | None = None
        self._invalidate()
        if grammar is not None:
            self.load(grammar)

    def _invalidate(self):
        self._revision = None if self._grammar is None else self._grammar.revision
        self._first_follow: FirstFollow | None = None
        self._ll1: LL1Table | None = None
        self._collection: CanonicalCollection | None = None
        self._slr1: SLR1Table | None = None

    def load(self, grammar: Grammar):
        grammar.validate()
        self._grammar = copy.deepcopy(grammar)
        self._invalidate()
        log.info("installed grammar with axiom %s", grammar.axiom)

    def load_text(self, text: str):
        self.load(loader.loads(text))

    def load_file(self, path: str | Path):
        self.load(loader.load(path))

    @property
    def grammar(self) -> Grammar:
        if self._grammar is None:
            raise NoGrammarError("no grammar loaded")
        return self._grammar

    def _fresh(self) -> Grammar:
        grammar = self.grammar
        if grammar.revision != self._revision:
            log.info("grammar changed since the last query, dropping derived data")
            grammar.validate()
            self._invalidate()
        return grammar

    @property
    def symbols(self) -> SymbolTable:
        return self.grammar.symbols

    @property
    def first_follow(self) -> FirstFollow:
        grammar = self._fresh()
        if self._first_follow is None:
            self._first_follow = FirstFollow(grammar)
        return self._first_follow

    def _sequence(self, sequence: str | Sequence[str]) -> list[str]:
        if isinstance(sequence, str):
            return self.grammar.split(sequence)
        return list(sequence)

    def split(self, raw: str) -> list[str]:
        return self.grammar.split(raw)

    def first(self, sequence: str | Sequence[str], trace=QUIET) -> set[str]:
        return self.first_follow.first(self._sequence(sequence), trace)

    def follow(self, nonterminal: str, trace=QUIET) -> set[str]:
        return self.first_follow.follow(nonterminal, trace)

    def prediction_symbols(self, antecedent: str, consequent: str | Sequence[str], trace=QUIET) -> set[str]:
        return self.first_follow.prediction_symbols(antecedent, self._sequence(consequent), trace)

    def build_ll1_table(self, trace=QUIET) -> tuple[dict[str, dict[str, list[Production]]], bool]:
        self._fresh()
        if self._ll1 is None or trace.enabled:
            self._ll1 = LL1Table(self.grammar, self.first_follow)
            return self._ll1.build(trace)
        return self._ll1.table, self._ll1.is_ll1

    @property
    def ll1(self) -> LL1Table:
        self.build_ll1_table()
        return self._ll1

    def collection(self, trace=QUIET) -> CanonicalCollection:
        self._fresh()
        if self._collection is None or trace.enabled:
            self._collection = CanonicalCollection(self.grammar)
            self._collection.build(trace)
        return self._collection

    def start_item(self) -> Lr0Item:
        return CanonicalCollection(self.grammar).start_item

    def closure(self, items: Iterable[Lr0Item], trace=QUIET) -> frozenset[Lr0Item]:
        return closure(self.grammar, items, trace)

    def goto(self, items: Iterable[Lr0Item], symbol: str, trace=QUIET) -> frozenset[Lr0Item]:
        return goto(self.grammar, items, symbol, trace)

    def all_items(self, trace=QUIET) -> set[Lr0Item]:
        return self.collection(trace).all_items()

    def build_slr1_table(self, trace=QUIET) -> SLR1Table:
        self._fresh()
        if self._slr1 is None or trace.enabled:
            self._slr1 = SLR1Table(self.collection(), self.first_follow)
            self._slr1.build(trace)
        return self._slr1
