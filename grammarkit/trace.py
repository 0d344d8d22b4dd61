from typing import TextIO


INDENT = "  "


class NullTrace:
    """Sink that drops every step. Used when nobody asked for an explanation."""

    enabled = False

    def step(self, message: str, *args, depth: int = 0):
        pass


QUIET = NullTrace()


class NarratingTrace:
    """Collects a step by step narration of an algorithm.

    Messages use lazy `%` formatting, like `logging`. Every line is kept in
    `lines` and, when `stream` is given, echoed to it as it is produced.
    """

    enabled = True

    def __init__(self, stream: TextIO | None = None):
        self.stream = stream
        self.lines: list[str] = []

    def step(self, message: str, *args, depth: int = 0):
        line = INDENT * depth + (message % args if args else message)
        self.lines.append(line)
        if self.stream is not None:
            print(line, file=self.stream)

    def text(self) -> str:
        return "\n".join(self.lines)

    def __str__(self) -> str:
        return self.text()


def fmt_set(symbols, symbol_table=None) -> str:
    names = symbol_table.ordered(symbols) if symbol_table is not None else sorted(symbols)
    return "{ " + " ".join(names) + " }" if names else "{ }"
