from dataclasses import dataclass, field


@dataclass
class Text:
    raw: str = ""

    @property
    def is_whitespace(self) -> bool:
        return not self.raw.strip()


@dataclass
class Comment:
    body: str = ""


@dataclass
class Element:
    name: str = ""
    attributes: list[tuple[str, str]] = field(default_factory=list)
    children: list['Node'] = field(default_factory=list)

    @property
    def self_closing(self) -> bool:
        return all(
            isinstance(child, Text) and child.is_whitespace
            for child in self.children
        )


Node = Element | Text | Comment
