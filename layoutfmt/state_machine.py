from dataclasses import dataclass, field
from enum import Enum
from typing import Literal, NamedTuple

from layoutfmt.errors import ParseError


class LayoutTokenizerState(Enum):
    TEXT = 1
    TAG_OPEN = 2
    ATTRIBUTE_OPEN = 3

    COMMENT = 4


class Token(NamedTuple):
    kind: Literal["text", "tag", "comment"]
    value: str
    offset: int
    line: int


@dataclass
class LayoutTokenizerStateMachine:
    buffer: list[str] = field(default_factory=list)
    state: LayoutTokenizerState = LayoutTokenizerState.TEXT
    attribute_quote_char: str | None = None
    after_equal_sign: bool = False

    # position of the character being fed, and where the buffered token began
    position: int = 0
    line: int = 1
    token_offset: int = 0
    token_line: int = 1

    """
    This method is used for only testing purposes.
    """
    def process_string(self, s: str) -> list[Token]:
        tokens: list[Token] = []
        for c in s:
            token = self.feed(c)
            if token:
                tokens.append(token)
        return tokens

    def flush_buffer(self) -> str:
        result = "".join(self.buffer)
        self.buffer = []
        return result

    def error(self, message: str) -> ParseError:
        return ParseError(
            message,
            offset=self.token_offset,
            line=self.token_line,
            snippet="".join(self.buffer),
        )

    def next_state(self, next_char: str) -> LayoutTokenizerState:
        if self.state == LayoutTokenizerState.TEXT:
            if next_char == '<':
                return LayoutTokenizerState.TAG_OPEN
            else:
                return LayoutTokenizerState.TEXT
        elif self.state == LayoutTokenizerState.TAG_OPEN:
            if len(self.buffer) == 3 and "".join(self.buffer) + next_char == "<!--":
                return LayoutTokenizerState.COMMENT
            elif next_char == '>':
                return LayoutTokenizerState.TEXT
            elif next_char == '<':
                raise self.error("unterminated tag")
            elif next_char in ('"', "'") and self.after_equal_sign:
                self.attribute_quote_char = next_char
                return LayoutTokenizerState.ATTRIBUTE_OPEN
        elif self.state == LayoutTokenizerState.ATTRIBUTE_OPEN:
            if next_char == self.attribute_quote_char:
                self.attribute_quote_char = None
                return LayoutTokenizerState.TAG_OPEN
            else:
                return LayoutTokenizerState.ATTRIBUTE_OPEN
        elif self.state == LayoutTokenizerState.COMMENT:
            # "-->" must follow the "<!--" opener, so "<!-->" stays open
            if (
                len(self.buffer) >= 6
                and "".join(self.buffer[-2:]) + next_char == "-->"
            ):
                return LayoutTokenizerState.TEXT
            else:
                return LayoutTokenizerState.COMMENT

        return self.state

    def trigger_action(
        self,
        from_state: LayoutTokenizerState,
        to_state: LayoutTokenizerState
    ) -> Token | None:
        if from_state == LayoutTokenizerState.TEXT \
            and to_state == LayoutTokenizerState.TAG_OPEN:
            # Flush text before <
            content = "".join(self.buffer[:-1])
            token = Token("text", content, self.token_offset, self.token_line)
            self.buffer = self.buffer[-1:]
            self.token_offset = self.position
            self.token_line = self.line
            return token if content else None
        elif from_state == LayoutTokenizerState.TAG_OPEN \
            and to_state == LayoutTokenizerState.TEXT:
            # Keep what is between < and >
            content = "".join(self.buffer[1:-1])
            token = Token("tag", content, self.token_offset, self.token_line)
            self.start_next_token()
            return token
        elif from_state == LayoutTokenizerState.COMMENT \
            and to_state == LayoutTokenizerState.TEXT:
            # Keep what is between <!-- and -->
            body = "".join(self.buffer[4:-3])
            token = Token("comment", body, self.token_offset, self.token_line)
            self.start_next_token()
            return token

        return None

    def start_next_token(self) -> None:
        self.buffer = []
        self.token_offset = self.position + 1
        self.token_line = self.line

    def feed(self, c: str) -> Token | None:
        next_state = self.next_state(c)
        self.buffer.append(c)

        result = self.trigger_action(self.state, next_state)

        if next_state == LayoutTokenizerState.TAG_OPEN:
            if c == '=':
                self.after_equal_sign = True
            elif not c.isspace():
                self.after_equal_sign = False
        else:
            self.after_equal_sign = False

        self.state = next_state
        self.position += 1
        if c == '\n':
            self.line += 1

        return result

    def finish(self) -> Token | None:
        if self.state == LayoutTokenizerState.TAG_OPEN:
            raise self.error("unterminated tag")
        elif self.state == LayoutTokenizerState.ATTRIBUTE_OPEN:
            raise self.error("unterminated attribute value")
        elif self.state == LayoutTokenizerState.COMMENT:
            raise self.error("unterminated comment")

        if not self.buffer:
            return None
        token = Token("text", "".join(self.buffer), self.token_offset, self.token_line)
        self.buffer = []
        return token
