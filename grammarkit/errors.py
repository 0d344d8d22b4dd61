class GrammarkitError(Exception):
    pass


class SymbolError(GrammarkitError):
    pass


class TokenizeError(GrammarkitError, ValueError):

    def __init__(self, raw: str, offset: int):
        super().__init__(f"Cannot tokenize {raw!r}: no symbol starts at offset {offset}")
        self.raw = raw
        self.offset = offset


class GrammarError(GrammarkitError):

    def __init__(self, problems: list[str]):
        super().__init__("Invalid grammar:\n  " + "\n  ".join(problems))
        self.problems = problems


class GrammarLoadError(GrammarkitError):

    def __init__(self, message: str, line: int | None = None):
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
        self.line = line


class NoGrammarError(GrammarkitError):
    pass
