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
*lxml-scaffold* makes sure that the nodes which a simple XPath location path
describes exist in an :mod:`lxml.etree` tree, creating what's missing without
touching what's there:

>>> from lxml import etree
>>> root = etree.fromstring("<configuration/>")
>>> add = get_or_create_element(root, "appSettings/add[@key='name']")
>>> etree.tostring(root)
b'<configuration><appSettings><add key="name"/></appSettings></configuration>'
"""

from __future__ import annotations

from lxml_scaffold.builder import (
    CreationMode,
    create_element,
    create_node,
    ensure_xpath,
    get_or_create_element,
    get_or_create_element_after,
    get_or_create_node,
    insert_after,
)
from lxml_scaffold.exceptions import (
    AbsoluteXPathError,
    InvalidOperation,
    ScaffoldBaseException,
    UnexpectedNodeType,
    XPathCreationError,
    XPathEvaluationError,
    XPathParsingError,
)
from lxml_scaffold.loaders import load_element
from lxml_scaffold.nodes import (
    Attribute,
    clone,
    is_attribute,
    is_element,
    xpath_select_objects,
)
from lxml_scaffold.xpath import parse as parse_xpath


__all__ = (
    AbsoluteXPathError.__name__,
    Attribute.__name__,
    CreationMode.__name__,
    InvalidOperation.__name__,
    ScaffoldBaseException.__name__,
    UnexpectedNodeType.__name__,
    XPathCreationError.__name__,
    XPathEvaluationError.__name__,
    XPathParsingError.__name__,
    clone.__name__,
    create_element.__name__,
    create_node.__name__,
    ensure_xpath.__name__,
    get_or_create_element.__name__,
    get_or_create_element_after.__name__,
    get_or_create_node.__name__,
    insert_after.__name__,
    is_attribute.__name__,
    is_element.__name__,
    load_element.__name__,
    "parse_xpath",
    xpath_select_objects.__name__,
)
