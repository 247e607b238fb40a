from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import assert_never

from layoutfmt.constants import DEFAULT_SYMBOLS, INDENT, SymbolTables
from layoutfmt.expression import format_attribute_value
from layoutfmt.node import Comment, Element, Node, Text


@dataclass
class InlineRun:
    """Adjacent text and HTML elements, printed as one piece of markup."""
    nodes: list[Node] = field(default_factory=list)

    @property
    def sole_text(self) -> Text | None:
        if len(self.nodes) == 1 and isinstance(self.nodes[0], Text):
            return self.nodes[0]
        return None


Item = Element | Comment | InlineRun


def reindent(text: str, depth: int) -> str:
    """
    Moves the continuation lines of `text` to `depth`, keeping the
    indentation of each line relative to the others. The first line is
    left alone since it follows whatever precedes it.
    """
    lines = text.split("\n")
    if len(lines) == 1:
        return text

    rest = lines[1:]
    measured = [line for line in rest[:-1] if line.strip()] + [rest[-1]]
    margin = min(len(line) - len(line.lstrip()) for line in measured)
    indent = INDENT * depth

    result = [lines[0]]
    for line in rest[:-1]:
        result.append(indent + line[margin:] if line.strip() else "")
    result.append(indent + rest[-1][margin:])
    return "\n".join(result)


@dataclass
class LayoutPrinter:
    symbols: SymbolTables = DEFAULT_SYMBOLS

    def print(self, nodes: list[Node], prolog: Sequence[str] = ()) -> str:
        parts = [f"<{declaration}>" for declaration in prolog]
        for node in nodes:
            if isinstance(node, Element):
                parts.append(self.print_element(node, 0))
            elif isinstance(node, Comment):
                parts.append(self.print_comment(node, 0))
            elif isinstance(node, Text):
                if not node.is_whitespace:
                    parts.append(reindent(node.raw.strip(), 0))
            else:
                assert_never(node)
        return "\n".join(parts) + "\n"

    def format_attributes(self, element: Element) -> list[str]:
        return [
            f'{name}="{format_attribute_value(name, value, self.symbols)}"'
            for name, value in sorted(element.attributes)
        ]

    def group_children(self, children: list[Node]) -> list[Item]:
        items: list[Item] = []
        run: list[Node] = []

        def flush() -> None:
            if any(isinstance(node, Text) and not node.is_whitespace for node in run):
                items.append(InlineRun(list(run)))
            else:
                items.extend(node for node in run if isinstance(node, Element))
            run.clear()

        for child in children:
            if isinstance(child, Comment):
                flush()
                items.append(child)
            elif isinstance(child, Text):
                run.append(child)
            elif isinstance(child, Element):
                if self.symbols.is_html(child.name):
                    run.append(child)
                else:
                    flush()
                    items.append(child)
            else:
                assert_never(child)
        flush()

        return items

    def print_element(self, element: Element, depth: int) -> str:
        indent = INDENT * depth
        attributes = self.format_attributes(element)
        items = self.group_children(element.children)

        multiline = len(attributes) > 1
        if multiline:
            open_tag = f"{indent}<{element.name}\n" + "\n".join(
                indent + INDENT + attribute for attribute in attributes
            )
        else:
            open_tag = f"{indent}<{element.name}" + "".join(
                " " + attribute for attribute in attributes
            )

        if not items:
            if multiline:
                return f"{open_tag}\n{indent}/>"
            return f"{open_tag}/>"

        open_tag += ">"
        close_tag = f"</{element.name}>"

        if len(items) == 1:
            item = items[0]
            if isinstance(item, Comment) and not multiline:
                return open_tag + self.print_comment(item, 0) + close_tag
            if isinstance(item, InlineRun):
                if element.name in self.symbols.raw_text_tags:
                    content = reindent(self.serialize_run(item), depth)
                    return open_tag + content + close_tag
                text = item.sole_text
                if text is not None:
                    return open_tag + " ".join(text.raw.split()) + close_tag

        lines = [open_tag]
        for index, item in enumerate(items):
            if isinstance(item, Comment) or (index == 0 and multiline):
                lines.append("")
            lines.append(self.print_item(item, depth + 1))
        lines.append(indent + close_tag)
        return "\n".join(lines)

    def print_item(self, item: Item, depth: int) -> str:
        if isinstance(item, Element):
            return self.print_element(item, depth)
        elif isinstance(item, Comment):
            return self.print_comment(item, depth)
        elif isinstance(item, InlineRun):
            content = reindent(self.serialize_run(item).strip(), depth)
            return INDENT * depth + content
        else:
            assert_never(item)

    def print_comment(self, comment: Comment, depth: int) -> str:
        return f"{INDENT * depth}<!--{comment.body}-->"

    def serialize_run(self, run: InlineRun) -> str:
        return "".join(self.serialize_inline(node) for node in run.nodes)

    def serialize_inline(self, node: Node) -> str:
        if isinstance(node, Text):
            return node.raw
        elif isinstance(node, Comment):
            return f"<!--{node.body}-->"
        elif isinstance(node, Element):
            open_tag = " ".join([node.name, *self.format_attributes(node)])
            if not node.children:
                return f"<{open_tag}/>"
            inner = "".join(self.serialize_inline(child) for child in node.children)
            return f"<{open_tag}>{inner}</{node.name}>"
        else:
            assert_never(node)
