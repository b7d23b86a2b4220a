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

"""These are the specific lxml-scaffold exceptions."""

from __future__ import annotations

from typing import Optional, TYPE_CHECKING, Any

if TYPE_CHECKING:
    from lxml_scaffold.typing import Loader


class ScaffoldBaseException(Exception):
    pass


class AbsoluteXPathError(ScaffoldBaseException, ValueError):
    """
    Raised when an XPath expression is anchored at the document root. All paths
    are evaluated relative to the node they are applied on.
    """

    def __init__(self, expression: str):
        self.expression = expression
        super().__init__(f"Absolute XPath expressions are not supported: {expression}")


class FailedDocumentLoading(ScaffoldBaseException):
    def __init__(self, source: Any, excuses: dict[Loader, str | Exception]):
        self.source = source
        self.excuses = excuses

    def __str__(self):
        return f"Couldn't load {self.source!r} with these loaders: {self.excuses}"


class InvalidOperation(ScaffoldBaseException):
    """Raised when an invalid operation is attempted by the client code."""

    pass


class UnexpectedNodeType(ScaffoldBaseException, TypeError):
    """
    Raised when an expression resolves to another kind of object than the called
    function returns, e.g. an attribute where an element is expected.
    """

    def __init__(self, expression: str, expected: str, found: str):
        self.expression = expression
        super().__init__(
            f"The XPath expression `{expression}` must end in an {expected}, "
            f"not an {found}."
        )


class XPathCreationError(ScaffoldBaseException):
    """
    Raised when the nodes that an expression describes can't be created or can't
    be located after their creation.
    """

    def __init__(self, expression: str, message: str):
        self.expression = expression
        super().__init__(f"{message}: {expression}")


class XPathEvaluationError(ScaffoldBaseException):
    def __init__(self, message: str):
        super().__init__(message)


class XPathParsingError(ScaffoldBaseException):
    """Raised when an XPath expression can't be parsed."""

    def __init__(
        self,
        expression: Optional[str] = None,
        position: Optional[int] = None,
        message: Optional[str] = None,
    ):
        self.expression = expression
        self.position = position
        self.message = message

    def __str__(self):
        expression = self.expression
        assert expression is not None
        assert self.message is not None
        position = self.position
        assert position is not None

        expression_length = len(expression)
        snippet_end = min(position + 16, expression_length)

        if expression_length > snippet_end:
            snippet = f"`{expression[position:snippet_end]}…`"
        else:
            snippet = f"`{expression[position:snippet_end]}`"

        if len(snippet) > 2:
            return (
                f"XPath parsing error at character {position} ({snippet}): "
                f"{self.message}"
            )
        else:
            return f"XPath parsing error at character {position}: {self.message}"


class XPathUnsupportedStandardFeature(XPathParsingError):
    """Raised when an unsupported XPath expression feature is recognized."""

    def __init__(self, expression: str, position: int, feature_description: str):
        super().__init__(
            expression=expression,
            position=position,
            message=f"{feature_description} are not supported. Only child element "
            "steps with attribute comparisons and a trailing attribute step can be "
            "used to create nodes.",
        )


__all__ = (
    AbsoluteXPathError.__name__,
    FailedDocumentLoading.__name__,
    InvalidOperation.__name__,
    ScaffoldBaseException.__name__,
    UnexpectedNodeType.__name__,
    XPathCreationError.__name__,
    XPathEvaluationError.__name__,
    XPathParsingError.__name__,
    XPathUnsupportedStandardFeature.__name__,
)
