"""Reader for the grammar text format.

    terminal num [0-9]+;
    terminal plus \\+;
    start with E;
    ;
    E -> E plus num;
    E -> num;
    E ->;
    ;

The header declares terminals (name and an opaque pattern) and the axiom and
ends with a line holding only `;`. The body holds one production per line and
ends with `;` or the end of input. Any other line fails the whole load.
"""
import logging
import re
from pathlib import Path

from grammarkit.errors import GrammarLoadError, GrammarkitError, TokenizeError
from grammarkit.grammar import Grammar
from grammarkit.symbols import EPSILON


log = logging.getLogger(__name__)

NAME = r"[a-zA-Z_'][a-zA-Z_0-9']*"

rx_terminal = re.compile(rf"terminal\s+({NAME})\s+(.*);\s*")
rx_axiom = re.compile(rf"start\s+with\s+({NAME});\s*")
rx_empty_production = re.compile(rf"({NAME})\s*->;\s*")
rx_production = re.compile(rf"({NAME})\s*->\s*([a-zA-Z_'][a-zA-Z_0-9\s$']*);\s*")

END = ";"


def loads(text: str) -> Grammar:
    """Builds a new validated grammar from `text`. Raises `GrammarLoadError`."""
    grammar = Grammar()
    lines = iter(enumerate(text.splitlines(), start=1))

    body: dict[str, list[tuple[int, str]]] = {}
    try:
        for n, line in lines:
            if line == END:
                break
            if m := rx_terminal.fullmatch(line):
                grammar.symbols.declare_terminal(m.group(1), m.group(2))
            elif m := rx_axiom.fullmatch(line):
                if grammar.axiom is not None:
                    raise GrammarLoadError(f"axiom already declared as {grammar.axiom!r}", n)
                grammar.set_axiom(m.group(1))
            else:
                raise GrammarLoadError(f"unexpected header line {line!r}", n)

        for n, line in lines:
            if line == END:
                break
            if m := rx_production.fullmatch(line):
                body.setdefault(m.group(1), []).append((n, m.group(2)))
            elif m := rx_empty_production.fullmatch(line):
                body.setdefault(m.group(1), []).append((n, EPSILON))
            else:
                raise GrammarLoadError(f"unexpected production line {line!r}", n)

        # Non-terminals must be known before any consequent is tokenized
        for antecedent in body:
            grammar.symbols.declare_nonterminal(antecedent)

        for antecedent, consequents in body.items():
            for n, consequent in consequents:
                try:
                    grammar.add_rule(antecedent, consequent)
                except TokenizeError as e:
                    raise GrammarLoadError(str(e), n) from e

        grammar.validate()
    except GrammarLoadError:
        raise
    except GrammarkitError as e:
        raise GrammarLoadError(str(e)) from e

    log.info("loaded grammar with axiom %s and %d non-terminals", grammar.axiom, len(grammar.rules))
    return grammar


def load(path: str | Path) -> Grammar:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise GrammarLoadError(f"cannot read {path}: {e}") from e
    if not text:
        raise GrammarLoadError(f"{path} is empty")
    return loads(text)
