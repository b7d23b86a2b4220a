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
Functions that ensure that the nodes which a path expression describes exist in a
tree. See :func:`lxml_scaffold.xpath.parse` for the supported expressions.

Creation isn't transactional. When an error occurs after some of a path's steps
were created, these remain in the tree. :func:`ensure_xpath` only ever alters a
copy of the tree it's given.
"""

from __future__ import annotations

import warnings
from enum import Enum
from typing import TYPE_CHECKING, Optional

from lxml import etree

from lxml_scaffold.exceptions import (
    InvalidOperation,
    UnexpectedNodeType,
    XPathCreationError,
    XPathEvaluationError,
)
from lxml_scaffold.nodes import (
    Attribute,
    QName,
    clone,
    xpath_select_objects,
)
from lxml_scaffold.utils import first
from lxml_scaffold.xpath import AttributeStep, ElementStep, parse

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from lxml_scaffold.typing import NamespaceDeclarations, NodeOrAttribute
    from lxml_scaffold.xpath import Step


class CreationMode(Enum):
    CREATE_ONLY_IF_MISSING = "create only if missing"
    ALWAYS_CREATE_NEW = "always create new"


# helpers


def _derive_attributes(step: ElementStep) -> dict[str, str]:
    result: dict[str, str] = {}
    demanded: dict[str, str] = {}

    for name, value in step.predicates:
        if value is None:
            result.setdefault(name, "")
            continue

        if name in demanded and demanded[name] != value:
            warnings.warn(
                f"The location step `{step}` demands conflicting values for the "
                f"attribute `{name}`, the value `{value}` is used.",
                category=UserWarning,
            )
        demanded[name] = result[name] = value

    return result


def _new_element(
    context: etree._Element,
    step: ElementStep,
    namespaces: Optional[NamespaceDeclarations],
) -> etree._Element:
    tag: QName

    if step.prefix:
        namespace = (namespaces or {}).get(step.prefix)
        if not namespace:
            raise XPathEvaluationError(
                f"Undefined namespace prefix `{step.prefix}` in the location step "
                f"`{step}`."
            )
        tag = QName(namespace, step.local_name)
    else:
        tag = QName(step.local_name)

    return context.makeelement(tag, attrib=_derive_attributes(step))


def _create(
    node: etree._Element,
    step: Step,
    expression: str,
    namespaces: Optional[NamespaceDeclarations],
    preceding_names: Optional[Sequence[str]],
) -> NodeOrAttribute:
    if isinstance(step, AttributeStep):
        name = step.local_name
        if name in node.attrib:
            raise InvalidOperation(
                f"The element `{node.tag}` already has an attribute `{name}`, it "
                "can't be created again."
            )
        node.set(name, "")
        return Attribute(node, name)

    elif isinstance(step, ElementStep) and step.local_name:
        element = _new_element(node, step, namespaces)
        if preceding_names is None:
            node.append(element)
        else:
            insert_after(node, element, preceding_names, namespaces)
        return element

    raise XPathCreationError(expression, "The location step is not supported")


def _resolve(
    root: etree._Element,
    expression: str,
    namespaces: Optional[NamespaceDeclarations],
    mode: CreationMode,
    preceding_names: Optional[Sequence[str]] = None,
) -> NodeOrAttribute:
    path = parse(expression)
    node: NodeOrAttribute = root

    for index, (cumulative_path, step) in enumerate(path.cumulative_paths()):
        existing = None
        if mode is CreationMode.CREATE_ONLY_IF_MISSING:
            existing = first(xpath_select_objects(root, cumulative_path, namespaces))

        if existing is None:
            # the grammar only allows an attribute step at the end
            assert isinstance(node, etree._Element)
            existing = _create(
                node,
                step,
                expression,
                namespaces,
                preceding_names if index == 0 else None,
            )

        node = existing

    if not xpath_select_objects(root, expression, namespaces):
        raise XPathCreationError(
            expression, "The nodes can't be located after their creation"
        )

    return node


def _resolve_element(
    root: etree._Element,
    expression: str,
    namespaces: Optional[NamespaceDeclarations],
    mode: CreationMode,
    preceding_names: Optional[Sequence[str]] = None,
) -> etree._Element:
    # checked upfront, nothing is created for a path that ends with an attribute
    if parse(expression).targets_attribute:
        raise UnexpectedNodeType(expression, expected="element", found="attribute")

    result = _resolve(root, expression, namespaces, mode, preceding_names)
    assert isinstance(result, etree._Element)
    return result


# api


def create_element(
    root: etree._Element,
    expression: str,
    namespaces: Optional[NamespaceDeclarations] = None,
) -> etree._Element:
    """
    Creates all elements that the expression describes, whether matching ones
    exist or not, and returns the last one.

    :param root: The context node that the expression is relative to.
    :param expression: The path to create, e.g.
                       ``configuration/appSettings/add[@key='name' and @attr]``.
    :param namespaces: A mapping of the prefixes used in the expression to
                       namespaces.
    :raises UnexpectedNodeType: If the expression ends with an attribute step.
    """
    return _resolve_element(
        root, expression, namespaces, CreationMode.ALWAYS_CREATE_NEW
    )


def get_or_create_element(
    root: etree._Element,
    expression: str,
    namespaces: Optional[NamespaceDeclarations] = None,
) -> etree._Element:
    """
    Fetches the first element that the expression selects. Missing elements along
    the path are created, existing ones are used.

    >>> root = etree.fromstring("<root><a/></root>")
    >>> b = get_or_create_element(root, "a/b[@type='x']")
    >>> etree.tostring(root)
    b'<root><a><b type="x"/></a></root>'
    >>> get_or_create_element(root, "a/b[@type='x']") is b
    True

    :param root: The context node that the expression is relative to.
    :param expression: The path to fetch or create.
    :param namespaces: A mapping of the prefixes used in the expression to
                       namespaces.
    :raises UnexpectedNodeType: If the expression ends with an attribute step.
    """
    return _resolve_element(
        root, expression, namespaces, CreationMode.CREATE_ONLY_IF_MISSING
    )


def create_node(
    root: etree._Element,
    expression: str,
    namespaces: Optional[NamespaceDeclarations] = None,
) -> NodeOrAttribute:
    """
    Like :func:`create_element`, but the expression may end with an attribute step,
    e.g. ``configuration/appSettings/add[@key='name']/@value``. New attributes have
    an empty value.
    """
    return _resolve(root, expression, namespaces, CreationMode.ALWAYS_CREATE_NEW)


def get_or_create_node(
    root: etree._Element,
    expression: str,
    namespaces: Optional[NamespaceDeclarations] = None,
) -> NodeOrAttribute:
    """
    Like :func:`get_or_create_element`, but the expression may end with an attribute
    step. An existing attribute is returned with its value untouched.
    """
    return _resolve(root, expression, namespaces, CreationMode.CREATE_ONLY_IF_MISSING)


def get_or_create_element_after(
    root: etree._Element,
    expression: str,
    preceding_names: Optional[Iterable[str]] = None,
    namespaces: Optional[NamespaceDeclarations] = None,
) -> etree._Element:
    """
    Like :func:`get_or_create_element`, but an element that is created for the
    expression's first step is placed among the root's children with
    :func:`insert_after`. Elements for subsequent steps are appended to their
    parents.

    :param preceding_names: The names of elements that the new one shall follow, in
                            ascending priority.
    """
    return _resolve_element(
        root,
        expression,
        namespaces,
        CreationMode.CREATE_ONLY_IF_MISSING,
        preceding_names=() if preceding_names is None else tuple(preceding_names),
    )


def ensure_xpath(
    root: etree._Element,
    expression: str,
    namespaces: Optional[NamespaceDeclarations] = None,
) -> etree._Element:
    """
    Returns ``root`` itself if the expression already selects anything. Otherwise a
    copy of ``root`` is returned that got the missing nodes added as with
    :func:`get_or_create_node`. The given tree is never altered, hence an identity
    check against ``root`` tells whether anything needed to be created.

    >>> root = etree.fromstring("<root><a/></root>")
    >>> ensure_xpath(root, "a") is root
    True
    >>> result = ensure_xpath(root, "a/@b")
    >>> result is root
    False
    >>> etree.tostring(result), etree.tostring(root)
    (b'<root><a b=""/></root>', b'<root><a/></root>')
    """
    # validates the expression before anything is evaluated
    parse(expression)

    if xpath_select_objects(root, expression, namespaces):
        return root

    result = clone(root)
    _resolve(result, expression, namespaces, CreationMode.CREATE_ONLY_IF_MISSING)
    return result


def insert_after(
    parent: etree._Element,
    new_child: etree._Element,
    candidate_names: Iterable[str],
    namespaces: Optional[NamespaceDeclarations] = None,
):
    """
    Inserts ``new_child`` into ``parent`` directly after the last child that is
    named like the last of the ``candidate_names`` that any child has. Hence the
    names' order expresses a priority, not the order of the existing children. If
    no child matches any name, ``new_child`` becomes the first child.

    >>> root = etree.fromstring("<root><c/><b/><a/></root>")
    >>> insert_after(root, etree.Element("d"), ("a", "b", "c"))
    >>> etree.tostring(root)
    b'<root><c/><d/><b/><a/></root>'

    :param parent: The element to insert the new child into.
    :param new_child: The element to insert, it must not be attached to a tree.
    :param candidate_names: Element names, possibly prefixed, in ascending priority.
    :param namespaces: A mapping of the prefixes used in the names to namespaces.
    """
    if new_child.getparent() is not None:
        raise InvalidOperation(
            "An element that shall be inserted must not have a parent. Remove it "
            "from its tree or insert a copy."
        )

    for name in reversed(tuple(candidate_names)):
        sibling = first(xpath_select_objects(parent, f"{name}[last()]", namespaces))
        if sibling is not None:
            assert isinstance(sibling, etree._Element)
            sibling.addnext(new_child)
            return

    parent.insert(0, new_child)


__all__ = (
    CreationMode.__name__,
    create_element.__name__,
    create_node.__name__,
    ensure_xpath.__name__,
    get_or_create_element.__name__,
    get_or_create_element_after.__name__,
    get_or_create_node.__name__,
    insert_after.__name__,
)
