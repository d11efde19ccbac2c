"""Null-safe helpers over Beautiful Soup trees.

Every lookup here degrades to "not found" (None, "" or an empty list)
instead of raising, so extractors can be handed partial or empty documents.
"""

from typing import Optional, Union

from bs4 import BeautifulSoup, Tag

Node = Union[BeautifulSoup, Tag]


def select_all(node: Optional[Node], selector: str) -> list[Tag]:
    """Return all elements matching ``selector`` under ``node``."""
    if node is None:
        return []
    return list(node.select(selector))


def select_first(node: Optional[Node], selector: str) -> Optional[Tag]:
    """Return the first element matching ``selector`` under ``node``."""
    if node is None:
        return None
    return node.select_one(selector)


def text_of(node: Optional[Node]) -> str:
    """Return the element's text, whitespace-trimmed."""
    if node is None:
        return ""
    return node.get_text().strip()


def attr_of(node: Optional[Tag], name: str) -> Optional[str]:
    """
    Return an attribute as a single string.

    Multi-valued attributes such as ``class`` are joined with spaces, the
    way they appear in the markup.
    """
    if node is None:
        return None
    value = node.get(name)
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return " ".join(value)
    return str(value)


def classes_of(node: Optional[Tag]) -> list[str]:
    """Return the element's class tokens."""
    if node is None:
        return []
    value = node.get("class")
    if not value:
        return []
    if isinstance(value, str):
        return value.split()
    return list(value)


def ancestor(node: Optional[Tag], levels: int) -> Optional[Tag]:
    """Walk ``levels`` parents up; None if the tree is not that deep."""
    current = node
    for _ in range(levels):
        if current is None:
            return None
        current = current.parent
    return current


def child_items(list_element: Tag) -> list[Tag]:
    """Direct ``<li>`` children of a list, ignoring nested sub-lists."""
    return list(list_element.find_all("li", recursive=False))
