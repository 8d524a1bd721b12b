# Copyright 2026 The mark-cascade Authors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Unicode Character Database properties used by the heuristics.

The canonical combining class comes with Python. The
Indic_Positional_Category property does not, so it is read from the
UCD’s ``IndicPositionalCategory.txt`` when a project provides that file.
"""


from __future__ import annotations


__all__ = [
    'IndicPositionalCategories',
    'NOT_APPLICABLE',
    'combining_class',
]


import bisect
import re
from typing import Final
from typing import Self
from typing import TYPE_CHECKING
import unicodedata


from utils import MAX_CODEPOINT


if TYPE_CHECKING:
    from collections.abc import Iterable
    from collections.abc import Mapping

    from _typeshed import FileDescriptorOrPath


#: The Indic_Positional_Category value of code points the property does
#: not apply to.
NOT_APPLICABLE: Final[str] = 'NA'


COMMENT_PATTERN: Final = re.compile(r'#.*')


CODE_POINT_RANGE_PATTERN: Final = re.compile(r'([0-9A-Fa-f]{4,6})(?:\.\.([0-9A-Fa-f]{4,6}))?')


def _parse_range(field: str) -> tuple[int, int]:
    match = CODE_POINT_RANGE_PATTERN.fullmatch(field.strip())
    if match is None:
        raise ValueError(f'Invalid code point range: {field!r}')
    start = int(match.group(1), 16)
    end = int(match.group(2), 16) if match.group(2) else start
    if end < start:
        raise ValueError(f'Invalid code point range: {field!r}')
    return start, end


class IndicPositionalCategories:
    """A table of Indic_Positional_Category values.

    Code points not covered by the table have the value
    `NOT_APPLICABLE`.
    """

    def __init__(self, ranges: Iterable[tuple[int, int, str]] = ()) -> None:
        """Initializes this `IndicPositionalCategories`.

        Args:
            ranges: Triples of a first code point, a last code point,
                and the value for every code point between them
                inclusive. The ranges must not overlap.
        """
        self._ranges: list[tuple[int, int, str]] = sorted(ranges)
        self._starts: list[int] = [start for start, _, _ in self._ranges]

    @classmethod
    def parse(cls, lines: Iterable[str]) -> Self:
        """Parses the lines of ``IndicPositionalCategory.txt``.

        Args:
            lines: The lines. Each non-blank line, after removing its
                comment, must have the form ``XXXX..YYYY ; Value`` or
                ``XXXX ; Value``.

        Raises:
            ValueError: If a line is malformed.
        """
        ranges = []
        for line_number, line in enumerate(lines, start=1):
            line = COMMENT_PATTERN.sub('', line).strip()
            if not line:
                continue
            fields = [field.strip() for field in line.split(';')]
            if len(fields) != 2 or not fields[1]:
                raise ValueError(f'Line {line_number}: expected 2 fields: {line!r}')
            start, end = _parse_range(fields[0])
            ranges.append((start, end, fields[1]))
        return cls(ranges)

    @classmethod
    def load(cls, path: FileDescriptorOrPath) -> Self:
        """Loads ``IndicPositionalCategory.txt`` from a file.

        Args:
            path: The path to the file.
        """
        with open(path, encoding='utf-8') as f:
            return cls.parse(f)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str]) -> Self:
        """Builds a table from a mapping of ranges to values.

        Args:
            mapping: A mapping from code point ranges, written like
                ``"0900..0902"`` or ``"0903"``, to values.
        """
        return cls((*_parse_range(key), value) for key, value in mapping.items())

    def get(self, codepoint: int) -> str:
        """Returns the Indic_Positional_Category of a code point.

        Args:
            codepoint: A code point.
        """
        index = bisect.bisect_right(self._starts, codepoint) - 1
        if index >= 0:
            start, end, value = self._ranges[index]
            if start <= codepoint <= end:
                return value
        return NOT_APPLICABLE

    def __len__(self) -> int:
        return len(self._ranges)


def combining_class(codepoint: int) -> int:
    """Returns the canonical combining class of a code point.

    Args:
        codepoint: A code point. Values outside the Unicode code space
            have class 0.
    """
    if not 0 <= codepoint <= MAX_CODEPOINT:
        return 0
    return unicodedata.combining(chr(codepoint))
