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

from copy import deepcopy
from typing import TYPE_CHECKING, overload, Any, Optional

from lxml import etree

from lxml_scaffold.exceptions import XPathEvaluationError

if TYPE_CHECKING:
    from lxml_scaffold.typing import (
        NamespaceDeclarations,
        NodeOrAttribute,
        _NamespaceDeclarations,
    )


QName = etree.QName


class Attribute:
    """
    Attribute objects represent one attribute of an element. *lxml* has no node
    objects for attributes, so an instance is a handle that refers to the element
    and the attribute's name. Reading and writing the :attr:`value` is reflected by
    the element.

    Two instances are equal if they refer to the same attribute of the same element.
    """

    __slots__ = ("__element", "__universal_name")

    def __init__(self, element: etree._Element, universal_name: str):
        self.__element = element
        self.__universal_name = universal_name

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Attribute):
            return NotImplemented
        return (
            self.__element is other.parent
            and self.__universal_name == other.universal_name
        )

    def __hash__(self):
        return hash((id(self.__element), self.__universal_name))

    def __repr__(self):
        return (
            f'<{self.__class__.__name__}({self.universal_name}="{self.value}")'
            f" [{hex(id(self))}]>"
        )

    def __str__(self):
        return self.value

    @property
    def local_name(self) -> str:
        """The attribute's local name."""
        return QName(self.__universal_name).localname

    @property
    def namespace(self) -> Optional[str]:
        """The attribute's namespace, :obj:`None` for attributes without one."""
        return QName(self.__universal_name).namespace

    @property
    def parent(self) -> etree._Element:
        """The element that carries the attribute."""
        return self.__element

    @property
    def universal_name(self) -> str:
        """
        The attribute's namespace and local name in `Clark notation`_.

        .. _Clark notation: http://www.jclark.com/xml/xmlns.htm
        """
        return self.__universal_name

    @property
    def value(self) -> str:
        """The attribute's value."""
        return self.__element.attrib[self.__universal_name]

    @value.setter
    def value(self, value: str):
        if not isinstance(value, str):
            raise TypeError
        self.__element.set(self.__universal_name, value)


# evaluation


def _xpath_namespaces(
    namespaces: Optional[NamespaceDeclarations],
) -> _NamespaceDeclarations:
    # XPath 1.0 doesn't know a default namespace, lxml rejects empty prefixes
    if not namespaces:
        return {}
    return {k: v for k, v in namespaces.items() if k}


def xpath_select_objects(
    node: etree._Element,
    expression: str,
    namespaces: Optional[NamespaceDeclarations] = None,
) -> tuple[NodeOrAttribute, ...]:
    """
    Evaluates an XPath 1.0 expression with *lxml* and returns the selected
    elements and :class:`Attribute` handles in document order. Other members of
    a resulting node-set, e.g. text nodes, are returned as *lxml* provides them.

    :param node: The context node.
    :param expression: Any XPath 1.0 expression that evaluates to a node-set.
    :param namespaces: A mapping of prefixes to namespaces.
    :raises XPathEvaluationError: If *lxml* fails to evaluate the expression or it
                                  doesn't yield a node-set.
    """
    try:
        result = node.xpath(expression, namespaces=_xpath_namespaces(namespaces))
    except etree.XPathError as e:
        raise XPathEvaluationError(
            f"The evaluation of `{expression}` failed: {e}"
        ) from e

    if not isinstance(result, list):
        raise XPathEvaluationError(
            f"The expression `{expression}` doesn't evaluate to a node-set."
        )

    return tuple(
        (
            Attribute(item.getparent(), item.attrname)
            if isinstance(item, etree._ElementUnicodeResult) and item.is_attribute
            else item
        )
        for item in result
    )


# copying


@overload
def clone(node: None) -> None: ...


@overload
def clone(node: etree._ElementTree) -> etree._ElementTree: ...


@overload
def clone(node: etree._Element) -> etree._Element: ...


def clone(node):
    """
    Returns a deep, structural copy of an element or an element tree that shares
    nothing with the original. An element's tail text is not copied.
    """
    if node is None:
        return None
    result = deepcopy(node)
    if isinstance(result, etree._Element):
        result.tail = None
    return result


# filters


def is_attribute(obj: Any) -> bool:
    return isinstance(obj, Attribute)


def is_element(obj: Any) -> bool:
    # comments and processing instructions are elements to lxml as well
    return isinstance(obj, etree._Element) and isinstance(obj.tag, str)


__all__ = (
    Attribute.__name__,
    clone.__name__,
    is_attribute.__name__,
    is_element.__name__,
    xpath_select_objects.__name__,
)
