"""Minimal structural query interface over parsed HTML.

The extractors only ever need "first element matching a predicate" and
"attribute by name", so that is all this module exposes.  BeautifulSoup does
the actual parsing; nothing outside this module touches :mod:`bs4` types.
"""
from __future__ import annotations

from typing import Callable, Optional

from bs4 import BeautifulSoup, Tag

Predicate = Callable[[Tag], bool]


class Name:
    """Match elements by tag name."""

    def __init__(self, tag_name: str):
        self.tag_name = tag_name

    def __call__(self, tag: Tag) -> bool:
        return tag.name == self.tag_name


class Attr:
    """Match elements whose attribute ``name`` equals ``value`` exactly."""

    def __init__(self, name: str, value: str):
        self.name = name
        self.value = value

    def __call__(self, tag: Tag) -> bool:
        return tag.get(self.name) == self.value


class Class:
    """Match elements that list ``class_name`` in their ``class`` attribute."""

    def __init__(self, class_name: str):
        self.class_name = class_name

    def __call__(self, tag: Tag) -> bool:
        classes = tag.get("class")
        return bool(classes) and self.class_name in classes.split()


class And:
    """Match elements satisfying every predicate."""

    def __init__(self, *predicates: Predicate):
        self.predicates = predicates

    def __call__(self, tag: Tag) -> bool:
        return all(pred(tag) for pred in self.predicates)


class Element:
    """A single element of a parsed document."""

    def __init__(self, tag: Tag):
        self._tag = tag

    @property
    def name(self) -> str:
        return self._tag.name

    def attr(self, name: str) -> Optional[str]:
        """Return the value of attribute ``name`` or ``None`` when absent."""
        return self._tag.get(name)

    def find(self, predicate: Predicate) -> Optional[Element]:
        """Return the first descendant matching ``predicate``."""
        return _find_first(self._tag, predicate)

    def __repr__(self) -> str:
        return f"Element({self._tag.name!r})"


class Document:
    """Parsed markup that answers structural queries."""

    def __init__(self, soup: BeautifulSoup):
        self._soup = soup

    @classmethod
    def from_text(cls, text: str) -> Document:
        # multi_valued_attributes=None keeps ``class``/``rel`` as raw strings
        soup = BeautifulSoup(text, "html.parser", multi_valued_attributes=None)
        return cls(soup)

    def find(self, predicate: Predicate) -> Optional[Element]:
        """Return the first element in document order matching ``predicate``."""
        return _find_first(self._soup, predicate)


def _find_first(root: Tag, predicate: Predicate) -> Optional[Element]:
    tag = root.find(lambda candidate: predicate(candidate))
    return Element(tag) if tag is not None else None
