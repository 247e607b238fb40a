"""
Errors raised while reading layout markup.

A ParseError is fatal to the current format call only; callers decide how
to report it.
"""

SNIPPET_LENGTH = 20


class ParseError(Exception):
    """Malformed markup, with the position where reading stopped."""

    def __init__(
        self,
        message: str,
        offset: int = 0,
        line: int = 1,
        snippet: str = "",
    ):
        super().__init__(message)
        self.message = message
        self.offset = offset
        self.line = line
        self.snippet = snippet[:SNIPPET_LENGTH]

    def __str__(self) -> str:
        return f"{self.message} (line {self.line}, offset {self.offset}): {self.snippet!r}"
