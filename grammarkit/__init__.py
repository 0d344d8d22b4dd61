"""Grammar analysis for parser generation.

FIRST/FOLLOW sets, LL(1) prediction tables, and the LR(0) canonical
collection with its SLR(1) tables. A `Session` holds one grammar and builds
the rest on demand:

    session = Session()
    session.load_file("expr.grammar")
    session.follow("E")
    table, is_ll1 = session.build_ll1_table()
"""
from grammarkit.errors import (
    GrammarError,
    GrammarkitError,
    GrammarLoadError,
    NoGrammarError,
    SymbolError,
    TokenizeError,
)
from grammarkit.first_follow import FirstFollow
from grammarkit.grammar import Grammar, Production
from grammarkit.item import DOT, Lr0Item, State
from grammarkit.ll1 import LL1Conflict, LL1Table
from grammarkit.lr0 import CanonicalCollection, augmented_symbol, closure, goto
from grammarkit.session import Session
from grammarkit.slr import Action, SLR1Conflict, SLR1Table
from grammarkit.symbols import EOL, EPSILON, Symbol, SymbolKind, SymbolTable
from grammarkit.trace import NarratingTrace, NullTrace, QUIET
