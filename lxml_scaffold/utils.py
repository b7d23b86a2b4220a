# Copyright (C) 2018-'25  Frank Sachsenheim
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from datetime import datetime, timedelta
from itertools import chain
from typing import TYPE_CHECKING, Any, Final, Optional, TypeVar

from lxml import etree

if TYPE_CHECKING:
    from collections.abc import Callable

    from lxml_scaffold.nodes import Attribute


T = TypeVar("T")

XML_NAMESPACE: Final = "http://www.w3.org/XML/1998/namespace"


def _universal_name(namespace: Optional[str], local_name: str) -> str:
    if namespace:
        return f"{{{namespace}}}{local_name}"
    return local_name


# iteration


def first(iterable: Iterable) -> Optional[Any]:
    """
    Returns the first item of the given :term:`iterable` or :obj:`None` if it's empty.
    Note that the first item is consumed when the iterable is an :term:`iterator`.
    """
    match iterable:
        case Iterator():
            try:
                return next(iterable)
            except StopIteration:
                return None
        case Sequence():
            return iterable[0] if len(iterable) else None
        case _:
            raise TypeError


def last(iterable: Iterable) -> Optional[Any]:
    """
    Returns the last item of the given :term:`iterable` or :obj:`None` if it's empty.
    Note that the whole :term:`iterator` is consumed when such is given.
    """
    match iterable:
        case Iterator():
            result = None
            for result in iterable:
                pass
            return result
        case Sequence():
            return iterable[-1] if len(iterable) else None
        case _:
            raise TypeError


def prefer(items: Iterable[T], predicate: Callable[[T], bool]) -> Iterator[T]:
    """
    Yields the items that satisfy the predicate. If none does, all items are yielded.
    The items are only iterated once and their order is kept.

    >>> "".join(prefer("aDbEcF", str.isupper))
    'DEF'
    >>> "".join(prefer("abc", str.isupper))
    'abc'
    """
    stash: list[T] = []
    preferred_found = False

    for item in items:
        if predicate(item):
            preferred_found = True
            yield item
        elif not preferred_found:
            stash.append(item)

    if not preferred_found:
        yield from stash


# element selection


def ns_elements(
    source: etree._ElementTree | etree._Element | Iterable[etree._Element],
    namespace: Optional[str],
    *local_names: str,
) -> Iterator[etree._Element]:
    """
    Descends one level of child elements per given name, all names are considered in
    the same namespace. When ``source`` is an element tree, the first name must
    match its root element.

    :param source: An element tree, an element or an iterable of elements to start
                   from.
    :param namespace: The elements' namespace, :obj:`None` for elements without one.
    :param local_names: The local names of the elements to descend along.
    """
    if not local_names:
        return

    elements: Iterable[etree._Element]
    if isinstance(source, etree._ElementTree):
        head, *tail = local_names
        root = source.getroot()
        elements = (root,) if root.tag == _universal_name(namespace, head) else ()
        local_names = tuple(tail)
    elif isinstance(source, etree._Element):
        elements = (source,)
    else:
        elements = source

    for local_name in local_names:
        tag = _universal_name(namespace, local_name)
        elements = tuple(
            chain.from_iterable(e.iterchildren(tag) for e in elements)
        )

    yield from elements


def values(elements: Iterable[etree._Element]) -> Iterator[str]:
    """Yields the text content of each element, including all descendants' text."""
    for element in elements:
        yield "".join(element.itertext())


# typed attribute values


def _parse_datetime(value: str) -> datetime:
    return datetime.fromisoformat(value.strip())


def as_datetimes(elements: Iterable[etree._Element]) -> Iterator[datetime]:
    """
    Yields the text content of each element parsed as ISO 8601 timestamp.

    :raises ValueError: If a text content isn't a valid timestamp.
    """
    for value in values(elements):
        yield _parse_datetime(value)


def attribute_as_datetime(attribute: Attribute) -> datetime:
    return _parse_datetime(attribute.value)


def time_from_attribute(element: etree._Element, name: str) -> Optional[datetime]:
    """
    Returns the named attribute's value as timestamp. :obj:`None` is returned if
    the attribute doesn't exist or isn't a valid ISO 8601 timestamp.
    """
    if (value := element.get(name)) is None:
        return None
    try:
        return _parse_datetime(value)
    except ValueError:
        return None


def minutes_from_attribute(element: etree._Element, name: str) -> Optional[timedelta]:
    """
    Returns the named attribute's value, an integer amount of minutes, as duration.
    :obj:`None` is returned if the attribute doesn't exist or isn't an integer.
    """
    if (value := element.get(name)) is None:
        return None
    try:
        return timedelta(minutes=int(value))
    except (OverflowError, ValueError):
        return None


# languages


def xml_language(element: etree._Element) -> Optional[str]:
    """
    Returns the value of the ``xml:lang`` attribute that applies to an element, it
    may be declared on an ancestor.
    """
    for node in chain((element,), element.iterancestors()):
        if (language := node.get(f"{{{XML_NAMESPACE}}}lang")) is not None:
            return language
    return None


def is_language(element: etree._Element, language: str) -> Optional[bool]:
    """
    Tests whether the language that applies to an element starts with the given
    one, case is ignored. :obj:`None` is returned if no language is declared.

    >>> is_language(etree.fromstring('<title xml:lang="en-US"/>'), "en")
    True
    """
    if (declared := xml_language(element)) is None:
        return None
    return declared.casefold().startswith(language.casefold())


__all__ = (
    as_datetimes.__name__,
    attribute_as_datetime.__name__,
    first.__name__,
    is_language.__name__,
    last.__name__,
    minutes_from_attribute.__name__,
    ns_elements.__name__,
    prefer.__name__,
    time_from_attribute.__name__,
    values.__name__,
    xml_language.__name__,
)
