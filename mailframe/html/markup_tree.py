"""
Minimal markup tree.

Generated fragments are parsed back into a small element tree so the
compatibility pass can find positioned tables and re-serialize them. The
tree keeps comments (Outlook conditional blocks) and passes entity and
character references through untouched.
"""

from __future__ import annotations

from html.parser import HTMLParser
from typing import Callable, Iterator, List, Optional, Tuple, Union

VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
})


class Text:
    __slots__ = ("data", "parent")

    def __init__(self, data: str):
        self.data = data
        self.parent: Optional["Element"] = None

    def serialize(self) -> str:
        return self.data


class Comment(Text):
    __slots__ = ()

    def serialize(self) -> str:
        return f"<!--{self.data}-->"


class Declaration(Text):
    __slots__ = ()

    def serialize(self) -> str:
        return f"<!{self.data}>"


Node = Union["Element", Text]


def _escape_attribute(value: str) -> str:
    return value.replace("&", "&amp;").replace('"', "&quot;")


class Element:
    """An element with ordered attributes and child nodes."""

    __slots__ = ("tag", "attrs", "children", "parent")

    def __init__(self, tag: str, attrs: Optional[List[Tuple[str, Optional[str]]]] = None):
        self.tag = tag
        self.attrs: List[Tuple[str, Optional[str]]] = list(attrs or [])
        self.children: List[Node] = []
        self.parent: Optional[Element] = None

    def __repr__(self) -> str:
        return f"Element({self.tag!r}, children={len(self.children)})"

    def append(self, child: Node) -> None:
        child.parent = self
        self.children.append(child)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        for key, value in self.attrs:
            if key == name:
                return value if value is not None else ""
        return default

    def has(self, name: str) -> bool:
        return any(key == name for key, _ in self.attrs)

    def set(self, name: str, value: str) -> None:
        for index, (key, _) in enumerate(self.attrs):
            if key == name:
                self.attrs[index] = (name, value)
                return
        self.attrs.append((name, value))

    def iter_elements(self) -> Iterator["Element"]:
        """Descendant elements in document order (excluding ``self``)."""
        for child in self.children:
            if isinstance(child, Element):
                yield child
                yield from child.iter_elements()

    def find_outermost(self, predicate: Callable[["Element"], bool]) -> List["Element"]:
        """Matching descendants, without descending into a match."""
        found: List[Element] = []
        for child in self.children:
            if not isinstance(child, Element):
                continue
            if predicate(child):
                found.append(child)
            else:
                found.extend(child.find_outermost(predicate))
        return found

    def serialize(self) -> str:
        if self.tag == "#root":
            return self.inner_html()
        attrs = "".join(
            f" {key}" if value is None else f' {key}="{_escape_attribute(value)}"'
            for key, value in self.attrs
        )
        if self.tag in VOID_ELEMENTS:
            return f"<{self.tag}{attrs}>"
        return f"<{self.tag}{attrs}>{self.inner_html()}</{self.tag}>"

    def inner_html(self) -> str:
        return "".join(child.serialize() for child in self.children)


class _TreeBuilder(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=False)
        self.root = Element("#root")
        self.stack: List[Element] = [self.root]

    @property
    def current(self) -> Element:
        return self.stack[-1]

    def handle_starttag(self, tag, attrs):
        element = Element(tag, attrs)
        self.current.append(element)
        if tag not in VOID_ELEMENTS:
            self.stack.append(element)

    def handle_startendtag(self, tag, attrs):
        self.current.append(Element(tag, attrs))

    def handle_endtag(self, tag):
        # Close up to the nearest open element with this tag; stray end tags are dropped.
        for depth in range(len(self.stack) - 1, 0, -1):
            if self.stack[depth].tag == tag:
                del self.stack[depth:]
                return

    def handle_data(self, data):
        self.current.append(Text(data))

    def handle_entityref(self, name):
        self.current.append(Text(f"&{name};"))

    def handle_charref(self, name):
        self.current.append(Text(f"&#{name};"))

    def handle_comment(self, data):
        self.current.append(Comment(data))

    def handle_decl(self, decl):
        self.current.append(Declaration(decl))


def parse_fragment(markup: str) -> Element:
    """Parse ``markup`` into a tree under a synthetic ``#root`` element."""
    builder = _TreeBuilder()
    builder.feed(markup)
    builder.close()
    return builder.root
