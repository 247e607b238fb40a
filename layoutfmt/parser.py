import re
from dataclasses import dataclass, field
from typing import Literal

from layoutfmt.constants import DEFAULT_SYMBOLS, MAX_NESTING_DEPTH, SymbolTables
from layoutfmt.errors import ParseError
from layoutfmt.node import Comment, Element, Node, Text
from layoutfmt.state_machine import LayoutTokenizerStateMachine, Token


NAME_PATTERN = re.compile(r"[A-Za-z_][\w.:-]*")


@dataclass
class AttributesExtractor:
    text: str = ""
    offset: int = 0
    line: int = 1

    state: Literal['idle', 'name', 'after_name', 'equal_sign', 'value'] \
        = 'idle'

    def error(self, message: str) -> ParseError:
        return ParseError(message, offset=self.offset, line=self.line, snippet=self.text)

    def parse(self) -> list[tuple[str, str]]:
        attributes: list[tuple[str, str]] = []
        seen: set[str] = set()

        attribute_name = ""
        attribute_value = ""
        current_quote_char: str | None = None

        def store(name: str, value: str) -> None:
            if name in seen:
                raise self.error(f"duplicate attribute {name!r}")
            if current_quote_char == "'" and '"' in value:
                raise self.error(f"attribute {name!r} cannot be written with double quotes")
            seen.add(name)
            attributes.append((name, value))

        for c in self.text:
            if self.state == 'idle':
                if c.isspace():
                    continue
                elif c in ('"', "'", '='):
                    raise self.error(f"unexpected {c!r} in tag")
                else:
                    attribute_name = c
                    self.state = 'name'
            elif self.state == 'name':
                if c == '=':
                    self.state = 'equal_sign'
                elif c.isspace():
                    self.state = 'after_name'
                elif c in ('"', "'"):
                    raise self.error(f"unexpected {c!r} in attribute name")
                else:
                    attribute_name += c
            elif self.state == 'after_name':
                if c.isspace():
                    continue
                elif c == '=':
                    self.state = 'equal_sign'
                elif c in ('"', "'"):
                    raise self.error(f"unexpected {c!r} after attribute name")
                else:
                    store(attribute_name, "")
                    attribute_name = c
                    self.state = 'name'
            elif self.state == 'equal_sign':
                if c.isspace():
                    continue
                elif c in ('"', "'"):
                    current_quote_char = c
                    self.state = 'value'
                else:
                    raise self.error(f"attribute {attribute_name!r} value must be quoted")
            elif self.state == 'value':
                if c == current_quote_char:
                    store(attribute_name, attribute_value)
                    attribute_name = ""
                    attribute_value = ""
                    current_quote_char = None
                    self.state = 'idle'
                else:
                    attribute_value += c

        if self.state in ('name', 'after_name'):
            store(attribute_name, "")
        elif self.state == 'equal_sign':
            raise self.error(f"attribute {attribute_name!r} has no value")
        elif self.state == 'value':
            raise self.error("unterminated attribute value")

        for name, _ in attributes:
            if not NAME_PATTERN.fullmatch(name):
                raise self.error(f"invalid attribute name {name!r}")

        return attributes


@dataclass
class LayoutParser:
    body: str = ""
    symbols: SymbolTables = DEFAULT_SYMBOLS
    roots: list[Node] = field(default_factory=list)
    # <?xml ...?> and <!DOCTYPE ...> ahead of any content, as written
    prolog: list[str] = field(default_factory=list)
    unfinished: list[Element] = field(default_factory=list)
    opened_at: list[Token] = field(default_factory=list)
    start_tokens: dict[int, Token] = field(default_factory=dict)

    def parse(self) -> list[Node]:
        state_machine = LayoutTokenizerStateMachine()
        for c in self.body:
            token = state_machine.feed(c)
            if token:
                self.add_token(token)

        token = state_machine.finish()
        if token:
            self.add_token(token)

        return self.finish()

    def add_token(self, token: Token) -> None:
        if token.kind == "text":
            self.add_node(Text(raw=token.value))
        elif token.kind == "comment":
            self.add_node(Comment(body=token.value))
        elif token.kind == "tag":
            self.add_tag(token)

    @property
    def current_children(self) -> list[Node]:
        if self.unfinished:
            return self.unfinished[-1].children
        return self.roots

    def add_node(self, node: Node) -> None:
        self.current_children.append(node)

    def get_attributes(self, token: Token, text: str) -> tuple[str, list[tuple[str, str]]]:
        match = NAME_PATTERN.match(text)
        if not match:
            raise ParseError(
                "invalid tag name", offset=token.offset, line=token.line, snippet=token.value
            )
        tag = match.group()
        rest = text[match.end():]
        if rest and not rest[0].isspace():
            raise ParseError(
                "invalid tag name", offset=token.offset, line=token.line, snippet=token.value
            )

        extractor = AttributesExtractor(text=rest, offset=token.offset, line=token.line)
        attributes = extractor.parse()

        return (tag, attributes)

    def add_tag(self, token: Token) -> None:
        text = token.value
        if text.startswith(('!', '?')):
            self.add_prolog(token)
            return

        if text.startswith('/'):
            name = text[1:].strip()
            if not NAME_PATTERN.fullmatch(name):
                raise ParseError(
                    "invalid closing tag", offset=token.offset, line=token.line, snippet=text
                )
            self.close_tag(name, token)
            return

        self_closing = text.endswith('/')
        if self_closing:
            text = text[:-1]
        tag, attributes = self.get_attributes(token, text)
        node = Element(name=tag, attributes=attributes)
        self.add_node(node)
        self.start_tokens[id(node)] = token
        if not self_closing:
            self.unfinished.append(node)
            self.opened_at.append(token)

    def add_prolog(self, token: Token) -> None:
        text = token.value
        is_declaration = text.startswith('?') and text.endswith('?') and len(text) > 2 \
            and NAME_PATTERN.match(text, 1) is not None
        is_doctype = text.startswith('!DOCTYPE') and text[8:9].isspace()
        at_start = not self.unfinished and all(
            isinstance(node, Text) and node.is_whitespace for node in self.roots
        )
        if not (is_declaration or is_doctype) or not at_start:
            raise ParseError(
                "unsupported markup declaration",
                offset=token.offset, line=token.line, snippet=text,
            )
        self.prolog.append(text)

    def close_tag(self, name: str, token: Token) -> None:
        while self.unfinished and self.unfinished[-1].name != name \
                and self.unfinished[-1].name in self.symbols.void_tags:
            self.close_void_element()

        if not self.unfinished:
            raise ParseError(
                f"unexpected closing tag </{name}>",
                offset=token.offset, line=token.line, snippet=token.value,
            )
        node = self.unfinished[-1]
        if node.name != name:
            raise ParseError(
                f"closing tag </{name}> does not match <{node.name}>",
                offset=token.offset, line=token.line, snippet=token.value,
            )
        self.unfinished.pop()
        self.opened_at.pop()

    def close_void_element(self) -> None:
        # a void element left open gives what was collected under it back
        # to its parent, where it sits right after the element
        node = self.unfinished.pop()
        self.opened_at.pop()
        self.current_children.extend(node.children)
        node.children = []

    def finish(self) -> list[Node]:
        while self.unfinished:
            node = self.unfinished[-1]
            if node.name not in self.symbols.void_tags:
                token = self.opened_at[-1]
                raise ParseError(
                    f"unexpected end of input, <{node.name}> is not closed",
                    offset=token.offset, line=token.line, snippet=token.value,
                )
            self.close_void_element()

        self.check_depth()
        return self.roots

    def check_depth(self) -> None:
        # void elements left open are flattened by now, so only nesting that
        # stays in the tree counts
        stack = [(node, 1) for node in self.roots if isinstance(node, Element)]
        while stack:
            node, depth = stack.pop()
            if depth > MAX_NESTING_DEPTH:
                token = self.start_tokens[id(node)]
                raise ParseError(
                    "elements nested too deeply",
                    offset=token.offset, line=token.line, snippet=token.value,
                )
            stack.extend(
                (child, depth + 1) for child in node.children if isinstance(child, Element)
            )


def parse(text: str, symbols: SymbolTables = DEFAULT_SYMBOLS) -> list[Node]:
    return LayoutParser(body=text, symbols=symbols).parse()
