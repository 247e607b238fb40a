from layoutfmt.constants import DEFAULT_SYMBOLS, SymbolTables
from layoutfmt.errors import ParseError
from layoutfmt.node import Element, Node
from layoutfmt.parser import LayoutParser, parse
from layoutfmt.printer import LayoutPrinter


def has_layout_root(nodes: list[Node], symbols: SymbolTables = DEFAULT_SYMBOLS) -> bool:
    for node in nodes:
        if isinstance(node, Element):
            return not symbols.is_html(node.name)
    return False


def is_layout(text: str, symbols: SymbolTables = DEFAULT_SYMBOLS) -> bool:
    """
    True when the first root element is a layout component rather than
    an HTML tag. Text that does not parse is never a layout.
    """
    try:
        nodes = parse(text, symbols)
    except ParseError:
        return False
    return has_layout_root(nodes, symbols)


def format_layout(text: str, symbols: SymbolTables = DEFAULT_SYMBOLS) -> str:
    """Returns the canonical form of `text`. Raises ParseError."""
    parser = LayoutParser(body=text, symbols=symbols)
    nodes = parser.parse()
    return LayoutPrinter(symbols=symbols).print(nodes, parser.prolog)


def format_if_layout(text: str, symbols: SymbolTables = DEFAULT_SYMBOLS) -> str | None:
    """
    Like format_layout, parsing once, but returns None when `text` is
    well-formed markup that is not a layout.
    """
    parser = LayoutParser(body=text, symbols=symbols)
    nodes = parser.parse()
    if not has_layout_root(nodes, symbols):
        return None
    return LayoutPrinter(symbols=symbols).print(nodes, parser.prolog)
