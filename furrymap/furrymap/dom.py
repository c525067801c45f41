"""Document helpers shared by the page extractors.

Every matcher takes a node and returns a node, a value, or ``None``. Only
plain CSS combinators are handed to the selector engine; anything that
depends on text content is matched explicitly here.
"""

from __future__ import annotations

import re
from collections.abc import Iterator

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from furrymap.errors import ParseError

_LABEL_SUFFIX_RE = re.compile(r"\s*:$")


def load_document(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "lxml")


def pure_text(node: Tag | None) -> str:
    """Return the text owned directly by *node*, ignoring its descendants."""
    if node is None:
        return ""
    parts = [
        str(child)
        for child in node.children
        if isinstance(child, NavigableString) and not isinstance(child, Comment)
    ]
    return "".join(parts).strip()


def text_of(node: Tag | None) -> str:
    return node.get_text().strip() if node is not None else ""


def attr(node: Tag | None, name: str) -> str | None:
    if node is None:
        return None
    value = node.get(name)
    if isinstance(value, list):
        return " ".join(value)
    return value


def elements_with_id(node: Tag, tag: str, pattern: re.Pattern[str]) -> list[Tag]:
    """All *tag* descendants whose id matches *pattern*."""
    return node.find_all(tag, id=pattern)


def match_id(node: Tag, pattern: re.Pattern[str]) -> re.Match[str]:
    """Match *node*'s id against *pattern*, raising when it does not fit."""
    node_id = attr(node, "id") or ""
    m = pattern.match(node_id)
    if m is None:
        raise ParseError(f"id {node_id!r} does not match {pattern.pattern!r}")
    return m


def child_elements(node: Tag, tag: str | None = None) -> list[Tag]:
    return node.find_all(tag or True, recursive=False)


def last_child_of_type(node: Tag, tag: str) -> Tag | None:
    """First *tag* descendant that is the last element among its siblings."""
    return node.select_one(f"{tag}:last-child")


def adjacent_after(node: Tag, tag: str, after: str) -> Tag | None:
    """First *tag* descendant immediately preceded by an *after* element."""
    return node.select_one(f"{after} + {tag}")


def heading_containing(node: Tag, text: str, tag: str = "h3") -> Tag | None:
    for heading in node.find_all(tag):
        if text in heading.get_text():
            return heading
    return None


def section_body(node: Tag, heading_text: str) -> Tag | None:
    """The ``div`` directly following the heading that contains *heading_text*."""
    heading = heading_containing(node, heading_text)
    if heading is None:
        return None
    body = heading.find_next_sibling()
    if body is None or body.name != "div":
        return None
    return body


def labeled_rows(node: Tag) -> Iterator[tuple[Tag, Tag]]:
    """Yield ``(row, label)`` for every ``div`` that has a direct ``b`` child."""
    for row in node.find_all("div"):
        label = row.find("b", recursive=False)
        if label is not None:
            yield row, label


def labeled_value(node: Tag, label_text: str) -> str | None:
    """Pure text of the row whose bold label reads *label_text*.

    The label must match in full once its trailing colon is dropped.
    """
    for row, label in labeled_rows(node):
        if _LABEL_SUFFIX_RE.sub("", label.get_text().strip()) == label_text:
            return pure_text(row) or None
    return None


def first_leaf_text(node: Tag, tag: str = "div") -> str | None:
    """Text of the first *tag* with no element children and non-empty text."""
    for el in node.find_all(tag):
        if el.find(True) is None:
            text = el.get_text().strip()
            if text:
                return text
    return None
