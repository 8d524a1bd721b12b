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

"""Miscellaneous constants, functions, and classes.
"""


from __future__ import annotations

import enum
from typing import Final
from typing import Self
from typing import TYPE_CHECKING
from typing import override


if TYPE_CHECKING:
    from collections.abc import Iterable
    from collections.abc import Iterator


#: The distance, in font units, by which the Unicode-derived heuristics
#: separate a non-attached mark from the edge of its base.
HEURISTIC_NUDGE: Final[float] = 50


#: The stroke width assumed for stroked paths when a project does not
#: specify one.
DEFAULT_STROKE_WIDTH: Final[float] = 50


#: The prefixes that mark an item in a member list as a reference to a
#: group rather than a literal glyph name.
GROUP_PREFIXES: Final[tuple[str, ...]] = ('$', '@')


#: The code point after which synthesized ligatures are numbered. The
#: first synthesized ligature gets the next code point, so every one of
#: them lands in Supplementary Private Use Area-B.
VIRTUAL_CODEPOINT_START: Final[int] = 0x100000


#: The highest valid Unicode code point.
MAX_CODEPOINT: Final[int] = 0x10FFFF


#: The separator between the base name and the mark name in a pair name
#: key, as stored in an attachment class’s ``except_pairs``.
PAIR_NAME_SEPARATOR: Final[str] = '-'


class CloneDefault(enum.Enum):
    """The type of `CLONE_DEFAULT`.
    """

    _CLONE_DEFAULT = enum.auto()


#: An object that various classes’ ``clone`` methods interpret as the
#: value of the relevant attribute in the object being cloned.
CLONE_DEFAULT: Final = CloneDefault._CLONE_DEFAULT


@enum.unique
class GlyphClass(enum.StrEnum):
    """A glyph class.

    The members’ values are the strings used for the ``glyphClass``
    field of a character record in a project snapshot.
    """

    #: The class of a glyph that receives marks.
    BASE = 'base'

    #: The class of a combining glyph.
    MARK = 'mark'

    #: The class of a glyph that replaces a base and a mark through
    #: substitution.
    LIGATURE = 'ligature'

    #: The class of a positioned base and mark pair that never exists
    #: as a glyph of its own.
    VIRTUAL = 'virtual'


@enum.unique
class MovementConstraint(enum.StrEnum):
    """Which axes of a mark offset may vary for a positioning rule.
    """

    #: Both axes may vary.
    NONE = 'none'

    #: Only the x axis may vary; y is always 0.
    HORIZONTAL = 'horizontal'

    #: Only the y axis may vary; x is always 0.
    VERTICAL = 'vertical'


@enum.unique
class ClassType(enum.StrEnum):
    """The side of a base and mark pair that an attachment class covers.
    """

    #: The class groups marks. Its counterpart glyphs are bases.
    MARK = 'mark'

    #: The class groups bases. Its counterpart glyphs are marks.
    BASE = 'base'


type PairKey = tuple[int, int]


def pair_key(base_codepoint: int, mark_codepoint: int) -> PairKey:
    """Returns the key of a pair in a positioning map.

    Args:
        base_codepoint: The base’s code point.
        mark_codepoint: The mark’s code point.
    """
    return (base_codepoint, mark_codepoint)


def pair_name_key(base_name: str, mark_name: str) -> str:
    """Returns the name key of a pair, as used in ``except_pairs``.

    The key is never parsed back, so names containing the separator are
    harmless as long as the same key is produced on both sides of a
    comparison.

    Args:
        base_name: The base’s name.
        mark_name: The mark’s name.
    """
    return f'{base_name}{PAIR_NAME_SEPARATOR}{mark_name}'


class Offset:
    """A two-dimensional vector in font units.

    Offsets are immutable. They support addition, subtraction, and
    unpacking into ``x, y``.

    Attributes:
        x: The horizontal component.
        y: The vertical component. Positive values go up.
    """

    def __init__(self, x: float = 0, y: float = 0) -> None:
        """Initializes this `Offset`.

        Args:
            x: The ``x`` attribute.
            y: The ``y`` attribute.
        """
        self.x: Final = float(x)
        self.y: Final = float(y)

    def __add__(self, other: Offset) -> Offset:
        if not isinstance(other, Offset):
            return NotImplemented
        return Offset(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Offset) -> Offset:
        if not isinstance(other, Offset):
            return NotImplemented
        return Offset(self.x - other.x, self.y - other.y)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    @override
    def __repr__(self) -> str:
        return f'Offset({self.x!r}, {self.y!r})'

    @override
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Offset):
            return NotImplemented
        return self.x == other.x and self.y == other.y

    @override
    def __ne__(self, other: object) -> bool:
        eq = self == other
        return eq if eq is NotImplemented else not eq

    @override
    def __hash__(self) -> int:
        return hash((self.x, self.y))

    def constrained(self, constraint: MovementConstraint) -> Self:
        """Returns this offset with the axis a constraint fixes set to 0.

        Args:
            constraint: A movement constraint.
        """
        match constraint:
            case MovementConstraint.HORIZONTAL:
                return type(self)(self.x, 0)
            case MovementConstraint.VERTICAL:
                return type(self)(0, self.y)
            case _:
                return self

    def as_list(self) -> list[float]:
        """Returns this offset as ``[x, y]``.
        """
        return [self.x, self.y]


#: The zero offset.
ZERO_OFFSET: Final[Offset] = Offset()


class OrderedSet[T](dict[T, None]):
    """An ordered set.

    It is a `dict` where the values are all ``None``, with a set-like
    API on top.
    """

    def __init__(
        self,
        iterable: Iterable[T] | None = None,
        /,
    ) -> None:
        """Initializes this `OrderedSet`.

        Args:
            iterable: An optional iterable whose items are to be added
                to this set in the iterable’s natural iteration order.
        """
        super().__init__()
        if iterable:
            for item in iterable:
                self.add(item)

    def add(self, item: T, /) -> None:
        """Adds an item to this set.

        Args:
            item: An item.
        """
        self[item] = None
