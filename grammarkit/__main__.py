import argparse
import logging
import sys

from grammarkit.errors import GrammarkitError
from grammarkit.session import Session
from grammarkit.trace import QUIET, NarratingTrace, fmt_set


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="grammarkit",
        description="FIRST/FOLLOW sets, LL(1) and SLR(1) tables of a context-free grammar",
    )
    parser.add_argument("grammar", help="grammar file")
    parser.add_argument("--first", metavar="SYMBOLS", action="append", default=[], help="print First(SYMBOLS)")
    parser.add_argument("--follow", metavar="NT", action="append", default=[], help="print Follow(NT)")
    parser.add_argument(
        "--predict", metavar="'A -> SYMBOLS'", action="append", default=[],
        help="print the prediction symbols of a production",
    )
    parser.add_argument("--sets", action="store_true", help="print every FIRST and FOLLOW set")
    parser.add_argument("--ll1", action="store_true", help="build the LL(1) table")
    parser.add_argument("--states", action="store_true", help="print the LR(0) canonical collection")
    parser.add_argument("--slr", action="store_true", help="build the SLR(1) tables")
    parser.add_argument("--draw", metavar="PNG", help="draw the LR(0) automaton to a file")
    parser.add_argument("--teach", action="store_true", help="explain every step")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def run(args: argparse.Namespace, out=None):
    out = out if out is not None else sys.stdout
    session = Session()
    session.load_file(args.grammar)
    trace = NarratingTrace(out) if args.teach else QUIET
    symbols = session.symbols

    print(session.grammar, file=out)

    if args.sets:
        print(session.first_follow.to_frame().to_string(), file=out)

    for raw in args.first:
        print(f"First({raw}) = {fmt_set(session.first(raw, trace), symbols)}", file=out)

    for nt in args.follow:
        print(f"Follow({nt}) = {fmt_set(session.follow(nt, trace), symbols)}", file=out)

    for rule in args.predict:
        antecedent, sep, consequent = rule.partition("->")
        if not sep:
            raise GrammarkitError(f"expected 'A -> SYMBOLS', got {rule!r}")
        ps = session.prediction_symbols(antecedent.strip(), consequent, trace)
        print(f"PS({rule.strip()}) = {fmt_set(ps, symbols)}", file=out)

    if args.ll1:
        _, is_ll1 = session.build_ll1_table(trace)
        print(session.ll1.to_frame().to_string(), file=out)
        print("The grammar is LL(1)" if is_ll1 else "The grammar is not LL(1)", file=out)
        for conflict in session.ll1.conflicts:
            print(f"  {conflict}", file=out)

    if args.states or args.draw:
        collection = session.collection(trace)
        if args.states:
            print(collection, file=out)
            print(collection.to_frame().to_string(), file=out)
        if args.draw:
            from grammarkit.draw import draw_automaton

            draw_automaton(collection, args.draw)

    if args.slr:
        table = session.build_slr1_table(trace)
        print(table.action_frame().to_string(), file=out)
        print(table.goto_frame().to_string(), file=out)
        print("The grammar is SLR(1)" if table.is_slr1 else "The grammar is not SLR(1)", file=out)
        for conflict in table.conflicts:
            print(f"  {conflict}", file=out)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        run(args)
    except GrammarkitError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
