from dataclasses import dataclass


INDENT = "    "

# deeper markup is rejected by the parser so the printer never recurses past it
MAX_NESTING_DEPTH = 256

# longer attribute expressions are left untouched
MAX_EXPRESSION_TOKENS = 128

LAYOUT_FILE_SUFFIXES = (".xml",)


VOID_TAGS = frozenset([
    'area', 'base', 'br', 'col', 'embed', 'hr', 'img', 'input',
    'link', 'meta', 'param', 'source', 'track', 'wbr',
])

RAW_TEXT_TAGS = frozenset([
    'a', 'abbr', 'b', 'big', 'blockquote', 'button', 'caption', 'cite',
    'code', 'dd', 'del', 'dfn', 'dt', 'em', 'figcaption', 'font',
    'h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'i', 'ins', 'kbd', 'label',
    'legend', 'li', 'mark', 'option', 'p', 'pre', 'q', 's', 'samp',
    'small', 'span', 'strike', 'strong', 'sub', 'sup', 'td', 'textarea',
    'th', 'title', 'tt', 'u', 'var',
])

HTML_TAGS = VOID_TAGS | RAW_TEXT_TAGS | frozenset([
    'address', 'article', 'aside', 'audio', 'body', 'canvas', 'center',
    'colgroup', 'datalist', 'details', 'dialog', 'dir', 'div', 'dl',
    'fieldset', 'figure', 'footer', 'form', 'frame', 'frameset', 'head',
    'header', 'hgroup', 'html', 'iframe', 'main', 'map', 'menu', 'meter',
    'nav', 'noscript', 'object', 'ol', 'optgroup', 'output', 'picture',
    'progress', 'script', 'section', 'select', 'style', 'summary',
    'table', 'tbody', 'template', 'tfoot', 'thead', 'time', 'tr', 'ul',
    'video',
])

EXPRESSION_ATTRIBUTES = frozenset([
    'top', 'left', 'bottom', 'right', 'width', 'height',
    'center.x', 'center.y', 'leading', 'trailing',
    'contentSize.width', 'contentSize.height',
    'contentInset.top', 'contentInset.left',
    'contentInset.bottom', 'contentInset.right',
    'alpha', 'cornerRadius', 'borderWidth', 'rotation',
    'layer.cornerRadius', 'layer.borderWidth', 'layer.opacity',
])


@dataclass(frozen=True)
class SymbolTables:
    """
    Tag and attribute name sets consulted by the parser and the printer.

    Passed explicitly so callers can format with their own vocabulary.
    """
    html_tags: frozenset[str] = HTML_TAGS
    void_tags: frozenset[str] = VOID_TAGS
    raw_text_tags: frozenset[str] = RAW_TEXT_TAGS
    expression_attributes: frozenset[str] = EXPRESSION_ATTRIBUTES

    def is_html(self, name: str) -> bool:
        return name in self.html_tags


DEFAULT_SYMBOLS = SymbolTables()
