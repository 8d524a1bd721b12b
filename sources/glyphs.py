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

"""Characters, their drawn paths, and font metrics.
"""


from __future__ import annotations


__all__ = [
    'Character',
    'FontMetrics',
    'GlyphData',
    'Path',
    'is_glyph_drawn',
]


from typing import Final
from typing import NamedTuple
from typing import Self
from typing import TYPE_CHECKING
from typing import override

from fontTools.pens.recordingPen import replayRecording

from utils import CLONE_DEFAULT
from utils import CloneDefault
from utils import GlyphClass


if TYPE_CHECKING:
    from collections.abc import Iterable
    from collections.abc import Sequence

    from fontTools.pens.basePen import AbstractPen


type Point = tuple[float, float]


type PenCommand = tuple[str, tuple[Point | None, ...]]


def _freeze_command(command: Sequence) -> PenCommand:
    operator, operands = command
    return (
        str(operator),
        tuple(None if point is None else (float(point[0]), float(point[1])) for point in operands),
    )


class Path:
    """A drawn path.

    A path is a recorded pen sequence in the format of
    ``fontTools.pens.recordingPen.RecordingPen.value``: a sequence of
    ``(operator, operands)`` pairs where the operands are points. Only
    point-based operators are supported; components are not.

    Attributes:
        commands: The recorded pen commands.
        stroked: Whether the path is a centreline drawn with the
            project’s stroke width, as opposed to a filled outline.
    """

    def __init__(
        self,
        commands: Iterable[Sequence],
        *,
        stroked: bool = True,
    ) -> None:
        """Initializes this `Path`.

        Args:
            commands: The ``commands`` attribute, as any iterable of
                ``(operator, operands)`` pairs.
            stroked: The ``stroked`` attribute.
        """
        self.commands: Final[tuple[PenCommand, ...]] = tuple(map(_freeze_command, commands))
        self.stroked: Final = stroked

    @classmethod
    def from_points(
        cls,
        points: Sequence[Point],
        *,
        closed: bool = False,
        stroked: bool = True,
    ) -> Self:
        """Returns a polyline path through some points.

        Args:
            points: The points. An empty sequence produces an empty
                path, and a single point produces a dot.
            closed: Whether to close the path.
            stroked: The ``stroked`` attribute.
        """
        if not points:
            return cls([], stroked=stroked)
        commands: list[Sequence] = [('moveTo', (points[0],))]
        commands.extend(('lineTo', (point,)) for point in points[1:])
        commands.append(('closePath' if closed else 'endPath', ()))
        return cls(commands, stroked=stroked)

    @property
    def is_drawn(self) -> bool:
        """Whether this path contains at least one point.
        """
        return any(operands for _, operands in self.commands)

    def draw(self, pen: AbstractPen) -> None:
        """Draws this path with a pen.

        Args:
            pen: A pen.
        """
        replayRecording(self.commands, pen)

    @override
    def __repr__(self) -> str:
        return f'Path({list(self.commands)!r}, stroked={self.stroked!r})'

    @override
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Path):
            return NotImplemented
        return self.commands == other.commands and self.stroked == other.stroked

    @override
    def __hash__(self) -> int:
        return hash(self.commands) ^ hash(self.stroked)


class GlyphData:
    """The drawn geometry of a glyph.

    Attributes:
        paths: The paths, in drawing order.
    """

    def __init__(self, paths: Iterable[Path] = ()) -> None:
        self.paths: Final[tuple[Path, ...]] = tuple(paths)

    @property
    def is_drawn(self) -> bool:
        """Whether any path of this glyph contains a point.
        """
        return any(path.is_drawn for path in self.paths)

    @override
    def __repr__(self) -> str:
        return f'GlyphData({list(self.paths)!r})'

    @override
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GlyphData):
            return NotImplemented
        return self.paths == other.paths

    @override
    def __hash__(self) -> int:
        return hash(self.paths)


def is_glyph_drawn(glyph_data: GlyphData | None) -> bool:
    """Returns whether a glyph has any drawn geometry.

    Args:
        glyph_data: A glyph’s geometry, or ``None`` if the glyph has
            never been drawn.
    """
    return glyph_data is not None and glyph_data.is_drawn


class FontMetrics(NamedTuple):
    """Font-wide vertical metrics and spacing defaults.
    """

    #: The number of font units per em.
    units_per_em: int = 1000

    #: The ascender.
    ascender: float = 800

    #: The descender. This is negative for descenders below the
    #: baseline.
    descender: float = -200

    #: The advance width of a glyph without its own.
    default_advance_width: float = 600

    #: The left side bearing of a glyph without its own.
    default_lsb: float = 50

    #: The right side bearing of a glyph without its own.
    default_rsb: float = 50


class Character:
    """A character record.

    Character records are immutable. To change one, clone it.

    Attributes:
        name: The unique name of the character.
        unicode: The code point, or ``None`` if the glyph is only
            reachable through substitution.
        lsb: The left side bearing, or ``None`` to use the font’s
            default.
        rsb: The right side bearing, or ``None`` to use the font’s
            default.
        glyph_class: The glyph class, or ``None`` if unspecified.
        advance_width: The advance width, or ``None`` to derive it.
        gpos: The GPOS feature tag under which this pair is positioned,
            for ligatures and virtual pairs.
        gsub: The GSUB feature tag under which this ligature is
            substituted.
        position: The names of the base and the mark this character
            positions, for ligatures and virtual pairs.
        composite: The names of the characters this one is composed
            of, if it is built from other characters.
        kern: A kerning hint for the character.
    """

    def __init__(
        self,
        name: str,
        unicode: int | None = None,
        *,
        lsb: float | None = None,
        rsb: float | None = None,
        glyph_class: GlyphClass | None = None,
        advance_width: float | None = None,
        gpos: str | None = None,
        gsub: str | None = None,
        position: tuple[str, str] | None = None,
        composite: Sequence[str] | None = None,
        kern: str | None = None,
    ) -> None:
        self.name: Final = name
        self.unicode: Final = unicode
        self.lsb: Final = lsb
        self.rsb: Final = rsb
        self.glyph_class: Final = glyph_class
        self.advance_width: Final = advance_width
        self.gpos: Final = gpos
        self.gsub: Final = gsub
        self.position: Final = position
        self.composite: Final = None if composite is None else tuple(composite)
        self.kern: Final = kern

    def clone(
        self,
        *,
        name: CloneDefault | str = CLONE_DEFAULT,
        unicode: CloneDefault | int | None = CLONE_DEFAULT,
        lsb: CloneDefault | float | None = CLONE_DEFAULT,
        rsb: CloneDefault | float | None = CLONE_DEFAULT,
        glyph_class: CloneDefault | GlyphClass | None = CLONE_DEFAULT,
        advance_width: CloneDefault | float | None = CLONE_DEFAULT,
        gpos: CloneDefault | str | None = CLONE_DEFAULT,
        gsub: CloneDefault | str | None = CLONE_DEFAULT,
        position: CloneDefault | tuple[str, str] | None = CLONE_DEFAULT,
        composite: CloneDefault | Sequence[str] | None = CLONE_DEFAULT,
        kern: CloneDefault | str | None = CLONE_DEFAULT,
    ) -> Self:
        return type(self)(
            self.name if name is CLONE_DEFAULT else name,
            self.unicode if unicode is CLONE_DEFAULT else unicode,
            lsb=self.lsb if lsb is CLONE_DEFAULT else lsb,
            rsb=self.rsb if rsb is CLONE_DEFAULT else rsb,
            glyph_class=self.glyph_class if glyph_class is CLONE_DEFAULT else glyph_class,
            advance_width=self.advance_width if advance_width is CLONE_DEFAULT else advance_width,
            gpos=self.gpos if gpos is CLONE_DEFAULT else gpos,
            gsub=self.gsub if gsub is CLONE_DEFAULT else gsub,
            position=self.position if position is CLONE_DEFAULT else position,
            composite=self.composite if composite is CLONE_DEFAULT else composite,
            kern=self.kern if kern is CLONE_DEFAULT else kern,
        )

    def _fields(self) -> tuple:
        return (
            self.name,
            self.unicode,
            self.lsb,
            self.rsb,
            self.glyph_class,
            self.advance_width,
            self.gpos,
            self.gsub,
            self.position,
            self.composite,
            self.kern,
        )

    @override
    def __repr__(self) -> str:
        return f'Character({self.name!r}, {self.unicode!r}, glyph_class={self.glyph_class!r})'

    @override
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Character):
            return NotImplemented
        return self._fields() == other._fields()

    @override
    def __hash__(self) -> int:
        return hash(self._fields())
