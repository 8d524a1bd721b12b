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

"""Bounding boxes of drawn paths, and translation and baking of paths.

Every function here allocates fresh outputs and leaves its inputs
untouched.
"""


from __future__ import annotations


__all__ = [
    'BoundingBox',
    'bake_ligature',
    'get_bounding_box',
    'translate_paths',
]


from typing import NamedTuple
from typing import TYPE_CHECKING

from fontTools.misc.arrayTools import insetRect
from fontTools.misc.arrayTools import unionRect
from fontTools.misc.transform import Transform
from fontTools.pens.boundsPen import BoundsPen
from fontTools.pens.recordingPen import RecordingPen
from fontTools.pens.transformPen import TransformPen

from glyphs import GlyphData
from glyphs import Path


if TYPE_CHECKING:
    from collections.abc import Iterable
    from collections.abc import Sequence

    from utils import Offset


class BoundingBox(NamedTuple):
    """An axis-aligned box in font units, with y growing upward.
    """

    #: The left edge.
    x_min: float

    #: The bottom edge.
    y_min: float

    #: The right edge.
    x_max: float

    #: The top edge.
    y_max: float

    @property
    def width(self) -> float:
        return self.x_max - self.x_min

    @property
    def height(self) -> float:
        return self.y_max - self.y_min


def _path_bounds(path: Path, stroke_width: float) -> tuple[float, float, float, float] | None:
    pen = BoundsPen(None)
    path.draw(pen)
    if pen.bounds is None:
        return None
    if path.stroked and stroke_width:
        half = stroke_width / 2
        return insetRect(pen.bounds, -half, -half)
    return pen.bounds


def get_bounding_box(paths: Iterable[Path], stroke_width: float) -> BoundingBox | None:
    """Returns the bounding box of some paths.

    Curves are measured by their extrema, not their control points.

    Args:
        paths: The paths.
        stroke_width: The width of the notional pen drawing the stroked
            paths. Each stroked path’s box is inflated by half of it on
            every side. Outline paths are measured as is.

    Returns:
        The union of the paths’ boxes, or ``None`` if no path contains
        any point.
    """
    rect = None
    for path in paths:
        path_rect = _path_bounds(path, stroke_width)
        if path_rect is None:
            continue
        rect = path_rect if rect is None else unionRect(rect, path_rect)
    if rect is None:
        return None
    return BoundingBox(*rect)


def translate_paths(paths: Iterable[Path], offset: Offset) -> list[Path]:
    """Returns copies of some paths moved by an offset.

    Args:
        paths: The paths.
        offset: The offset by which to move them.
    """
    transformation = Transform().translate(offset.x, offset.y)
    translated = []
    for path in paths:
        pen = RecordingPen()
        path.draw(TransformPen(pen, transformation))
        translated.append(Path(pen.value, stroked=path.stroked))
    return translated


def bake_ligature(
    base_glyph: GlyphData,
    mark_glyph: GlyphData,
    offset: Offset,
) -> GlyphData:
    """Returns the composited geometry of a base with a mark attached.

    The result contains the base’s paths followed by the mark’s paths
    moved by the offset. Overlaps are kept; removing them is the font
    compiler’s job.

    Args:
        base_glyph: The base’s geometry.
        mark_glyph: The mark’s geometry.
        offset: The mark’s offset relative to the base.
    """
    mark_paths: Sequence[Path] = translate_paths(mark_glyph.paths, offset)
    return GlyphData([*base_glyph.paths, *mark_paths])
