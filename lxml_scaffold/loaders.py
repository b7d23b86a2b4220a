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

"""
The ``loaders`` module provides a set of loaders that produce an element tree's root
from common kinds of sources, and mechanics to register custom loaders and to alter
the loaders configuration.
"""

from __future__ import annotations

from io import IOBase
from pathlib import Path
from typing import TYPE_CHECKING, cast, Any, Callable, Final, IO, Optional

from lxml import etree

from lxml_scaffold.exceptions import FailedDocumentLoading
from lxml_scaffold.nodes import clone

if TYPE_CHECKING:
    from lxml_scaffold.typing import Loader, LoaderResult


# constants

# care has to be taken:
# https://wiki.tei-c.org/index.php/XML_Whitespace#Recommendations
# https://lxml.de/FAQ.html#why-doesn-t-the-pretty-print-option-reformat-my-xml-output
DEFAULT_PARSER: Final = etree.XMLParser(remove_blank_text=True)


# loader registration


configured_loaders: list[Loader] = []
"""
This list contains the loaders that are tried in order by :func:`load_element`.
"""


def register_loader(position: Optional[int] = None) -> Callable[[Loader], Loader]:
    """
    This is a decorator that registers a loader. A loader is called with the source
    and a parser and returns either the loaded root element or a string that
    explains why it couldn't load the source.

    :param position: The index at which the loader is added to
                     :obj:`configured_loaders`, it will be appended if omitted.
    """

    if position is None:

        def register(loader: Loader) -> Loader:
            configured_loaders.append(loader)
            return loader

    else:

        def register(loader: Loader) -> Loader:
            assert isinstance(position, int)
            configured_loaders.insert(position, loader)
            return loader

    return register


# loaders


@register_loader()
def etree_loader(data: Any, parser: etree.XMLParser) -> LoaderResult:
    """
    This loader copies :class:`lxml.etree._Element` and
    :class:`lxml.etree._ElementTree` instances, the original stays untouched.
    """
    if isinstance(data, etree._ElementTree):
        return clone(data.getroot())
    if isinstance(data, etree._Element):
        return clone(data)
    return "The input value is not an lxml element or element tree."


@register_loader()
def path_loader(data: Any, parser: etree.XMLParser) -> LoaderResult:
    """
    This loader loads from a file that is pointed at with a
    :class:`pathlib.Path` instance.
    """
    if isinstance(data, Path):
        with data.open("rb") as file:
            return buffer_loader(file, parser)
    return "The input value is not a pathlib.Path instance."


@register_loader()
def buffer_loader(data: Any, parser: etree.XMLParser) -> LoaderResult:
    """
    This loader loads a document from a :term:`file-like object`.
    """
    if isinstance(data, IOBase):
        try:
            return etree.parse(cast(IO, data), parser=parser).getroot()
        except etree.XMLSyntaxError as e:
            return f"The buffer's content isn't well-formed: {e}"
    return "The input value is no buffer object."


@register_loader()
def text_loader(data: Any, parser: etree.XMLParser) -> LoaderResult:
    """
    Parses a string or a byte sequence containing a full document.
    """
    if isinstance(data, str):
        data = data.encode()
    if isinstance(data, bytes):
        try:
            return etree.fromstring(data, parser)
        except etree.XMLSyntaxError as e:
            return f"The text isn't well-formed: {e}"
    return "The input value is not a byte sequence or a string."


# interface


def load_element(
    source: Any, parser: etree.XMLParser = DEFAULT_PARSER
) -> Optional[etree._Element]:
    """
    Returns the root element of a document that is loaded from ``source`` by the
    first of the :obj:`configured_loaders` that is able to. :obj:`None` is returned
    for :obj:`None`.

    >>> etree.tostring(load_element(b"<root><child/></root>"))
    b'<root><child/></root>'

    :raises FailedDocumentLoading: If no loader can handle the source.
    """
    if source is None:
        return None

    loader_excuses: dict[Loader, str | Exception] = {}

    for loader in configured_loaders:
        try:
            loader_result = loader(source, parser)
        except Exception as e:
            loader_excuses[loader] = e
        else:
            if isinstance(loader_result, str):
                loader_excuses[loader] = loader_result
            else:
                break
    else:
        raise FailedDocumentLoading(source, loader_excuses)

    assert isinstance(loader_result, etree._Element)
    return loader_result


__all__: tuple[str, ...] = (
    "DEFAULT_PARSER",
    "configured_loaders",
    load_element.__name__,
    register_loader.__name__,
)
__all__ += tuple(x.__name__ for x in configured_loaders)
