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

from typing import Final


# helpers


def alternatives(*choices: str) -> str:
    return "|".join(choices)


def named_group(name: str, content: str) -> str:
    return f"(?P<{name}>{content})"


def optional(content: str) -> str:
    return f"(?:{content})?"


# constants

# https://www.w3.org/TR/REC-xml-names/#NT-NCName
# https://www.w3.org/TR/REC-xml/#NT-Name
# without dots and hyphens, these can't be told apart from XPath syntax here
name_start_characters: Final = (
    "A-Z_a-z"
    r"\u00c0-\u00d6\u00d8-\u00f6\u00f8-\u02ff\u0370-\u037d\u037f-\u1fff"
    r"\u200c-\u200d\u2070-\u218f\u2c00-\u2fef"
    r"\u3001-\ud7ff"
    r"\uf900-\ufdcf\ufdf0-\ufffd"
    r"\U00010000-\U000effff"
)
name_characters: Final = name_start_characters + r"0-9\u00b7\u0300-\u036f\u203f-\u2040"
name_pattern: Final = f"[{name_start_characters}][{name_characters}]*"

whitespace_pattern: Final = r"\s*"

# no escapes within XPath 1.0 literals, the delimiter simply can't occur inside
literal_pattern: Final = alternatives(r"'[^']*'", r'"[^"]*"')

attribute_comparison_pattern: Final = (
    "@"
    + name_pattern
    + optional(whitespace_pattern + "=" + whitespace_pattern + f"(?:{literal_pattern})")
)

predicate_clause_pattern: Final = (
    r"\["
    + whitespace_pattern
    + attribute_comparison_pattern
    + f"(?:\\s+and\\s+{attribute_comparison_pattern})*"
    + whitespace_pattern
    + r"\]"
)


__all__ = (
    "alternatives",
    "attribute_comparison_pattern",
    "literal_pattern",
    "name_characters",
    "name_pattern",
    "name_start_characters",
    "named_group",
    "optional",
    "predicate_clause_pattern",
    "whitespace_pattern",
)
