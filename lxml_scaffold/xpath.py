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
This is not an XPath implementation. It parses the small subset of location paths
that can describe nodes to create:

- child element steps with an optional namespace prefix,
- optionally one predicate per element step with attribute comparisons against
  literals or attribute existence tests, joined with ``and``,
- optionally one trailing attribute step.

Evaluation of expressions is left to *lxml*.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import TYPE_CHECKING, Final, NamedTuple, Optional, TypeAlias

from lxml_scaffold.exceptions import (
    AbsoluteXPathError,
    XPathParsingError,
    XPathUnsupportedStandardFeature,
)
from lxml_scaffold.grammar import (
    alternatives,
    literal_pattern,
    name_pattern,
    named_group,
    optional,
    predicate_clause_pattern,
    whitespace_pattern,
)

if TYPE_CHECKING:
    from collections.abc import Iterator


# patterns


_match_step: Final = re.compile(
    whitespace_pattern
    + "(?:"
    + alternatives(
        "@" + named_group("attribute", name_pattern),
        optional(named_group("prefix", name_pattern) + ":")
        + named_group("name", name_pattern)
        + optional(
            whitespace_pattern + named_group("predicates", predicate_clause_pattern)
        ),
    )
    + ")"
).match

_match_separator: Final = re.compile(whitespace_pattern + "/").match
_match_end: Final = re.compile(whitespace_pattern + r"\Z").match

_iterate_attribute_comparisons: Final = re.compile(
    "@"
    + named_group("name", name_pattern)
    + optional(
        whitespace_pattern
        + "="
        + whitespace_pattern
        + named_group("literal", literal_pattern)
    )
).finditer

# ordered by the precedence of their detection
_UNSUPPORTED_FEATURES: Final = tuple(
    (re.compile(whitespace_pattern + pattern).match, description)
    for pattern, description in (
        ("/", "Descendant-or-self shortcuts (`//`)"),
        (r"[\w-]+\s*::", "Explicit axes"),
        (r"\.", "Abbreviated self and parent steps"),
        (r"(?:\w+:)?\*", "Wildcards"),
        (r"[\w-]+(?::\w+)?\s*\(", "Function calls and node type tests"),
        (r"\[\s*\d", "Positional predicates"),
        (r"\[[^\]]*\s+or\s", "Disjunctive predicates"),
        (r"\|", "Unions"),
    )
)


# data structures


class AttributePredicate(NamedTuple):
    """
    An attribute comparison within a step's predicate. A ``value`` of :obj:`None`
    tests only for the attribute's existence.
    """

    name: str
    value: Optional[str]

    def __str__(self):
        value = self.value
        if value is None:
            return f"@{self.name}"
        quote = '"' if "'" in value else "'"
        return f"@{self.name}={quote}{value}{quote}"


class ElementStep(NamedTuple):
    source: str
    prefix: Optional[str]
    local_name: str
    predicates: tuple[AttributePredicate, ...] = ()

    def __str__(self):
        result = self.local_name
        if self.prefix:
            result = f"{self.prefix}:{result}"
        if self.predicates:
            result += "[" + " and ".join(str(x) for x in self.predicates) + "]"
        return result


class AttributeStep(NamedTuple):
    source: str
    local_name: str

    def __str__(self):
        return f"@{self.local_name}"


Step: TypeAlias = ElementStep | AttributeStep


class PathExpression:
    """
    The parsed form of an expression, a sequence of steps. Instances are immutable.

    >>> path = parse("a/b[@type='x']/@value")
    >>> len(path)
    3
    >>> [cumulative for cumulative, _ in path.cumulative_paths()]
    ['a', "a/b[@type='x']", "a/b[@type='x']/@value"]
    """

    __slots__ = ("expression", "steps")

    def __init__(self, expression: str, steps: tuple[Step, ...]):
        self.expression: Final = expression
        self.steps: Final = steps

    def __eq__(self, other):
        if not isinstance(other, PathExpression):
            return NotImplemented
        return str(self) == str(other)

    def __hash__(self):
        return hash(str(self))

    def __getitem__(self, index: int) -> Step:
        return self.steps[index]

    def __iter__(self) -> Iterator[Step]:
        return iter(self.steps)

    def __len__(self) -> int:
        return len(self.steps)

    def __repr__(self):
        return f"<{self.__class__.__name__}({self.expression!r}) [{hex(id(self))}]>"

    def __str__(self):
        return "/".join(str(x) for x in self.steps)

    def cumulative_paths(self) -> Iterator[tuple[str, Step]]:
        """
        Yields the expression's prefix that ends with each step, along with that
        step. The prefixes are verbatim substrings of the original expression.
        """
        cumulative = ""
        for step in self.steps:
            cumulative += step.source
            yield cumulative, step

    @property
    def targets_attribute(self) -> bool:
        return isinstance(self.steps[-1], AttributeStep)


# parsing


def reject_absolute_path(expression: str):
    if expression.lstrip().startswith("/"):
        raise AbsoluteXPathError(expression)


def _parse_predicates(clause: str) -> tuple[AttributePredicate, ...]:
    result = []
    for match in _iterate_attribute_comparisons(clause):
        literal = match.group("literal")
        result.append(
            AttributePredicate(
                name=match.group("name"),
                value=None if literal is None else literal[1:-1],
            )
        )
    return tuple(result)


def _skip_whitespace(expression: str, position: int) -> int:
    while position < len(expression) and expression[position].isspace():
        position += 1
    return position


def _parsing_error(expression: str, *positions: int) -> XPathParsingError:
    # the step's start is inspected first, a feature that is recognized there
    # explains a failure that only surfaces later
    for position in positions:
        for match, description in _UNSUPPORTED_FEATURES:
            if match(expression, position):
                return XPathUnsupportedStandardFeature(
                    expression=expression,
                    position=_skip_whitespace(expression, position),
                    feature_description=description,
                )

    position = _skip_whitespace(expression, positions[-1])
    if position == len(expression):
        message = "Unexpected end of the expression, a location step is missing."
    else:
        message = "Unsupported or malformed location step."
    return XPathParsingError(expression=expression, position=position, message=message)


@lru_cache(64)
def parse(expression: str) -> PathExpression:
    """
    Parses an expression into a :class:`PathExpression`.

    :param expression: A relative location path, e.g.
                       ``configuration/ns:add[@key='name' and @default]/@value``.
    :raises AbsoluteXPathError: If the expression starts with a ``/``.
    :raises XPathParsingError: If the expression doesn't comply with the supported
                               grammar.
    """
    reject_absolute_path(expression)

    steps: list[Step] = []
    source_start = position = 0

    while True:
        match = _match_step(expression, position)
        if match is None:
            raise _parsing_error(expression, position)

        position = match.end()
        source = expression[source_start:position]

        if (attribute_name := match.group("attribute")) is not None:
            steps.append(AttributeStep(source=source, local_name=attribute_name))
        else:
            predicates = match.group("predicates")
            steps.append(
                ElementStep(
                    source=source,
                    prefix=match.group("prefix"),
                    local_name=match.group("name"),
                    predicates=(
                        () if predicates is None else _parse_predicates(predicates)
                    ),
                )
            )

        if _match_end(expression, position):
            break

        if (separator := _match_separator(expression, position)) is None:
            raise _parsing_error(expression, match.start(), position)

        if isinstance(steps[-1], AttributeStep):
            raise XPathParsingError(
                expression=expression,
                position=_skip_whitespace(expression, position),
                message="An attribute step is only allowed at the end of a path.",
            )

        # the separator becomes part of the following step's source
        source_start = position
        position = separator.end()

    return PathExpression(expression, tuple(steps))


__all__ = (
    AttributePredicate.__name__,
    AttributeStep.__name__,
    ElementStep.__name__,
    PathExpression.__name__,
    "Step",
    parse.__name__,
    reject_absolute_path.__name__,
)
