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

"""Named locations on a bounding box.
"""


from __future__ import annotations


__all__ = [
    'AttachmentPoint',
    'attachment_point',
    'parse_attachment_point',
]


import enum
from typing import TYPE_CHECKING
from typing import assert_never


from utils import Offset


if TYPE_CHECKING:
    from bounds import BoundingBox


@enum.unique
class AttachmentPoint(enum.StrEnum):
    """A named location on a bounding box.

    The members’ values are the names used in authored attachment
    rules.
    """

    TOP_LEFT = 'topLeft'
    TOP_CENTER = 'topCenter'
    TOP_RIGHT = 'topRight'
    MID_LEFT = 'midLeft'
    MID_RIGHT = 'midRight'
    BOTTOM_LEFT = 'bottomLeft'
    BOTTOM_CENTER = 'bottomCenter'
    BOTTOM_RIGHT = 'bottomRight'


def parse_attachment_point(name: object) -> AttachmentPoint | None:
    """Returns the attachment point with a given name, or ``None`` if
    there is none.

    Args:
        name: A candidate name.
    """
    try:
        return AttachmentPoint(name)
    except ValueError:
        return None


def attachment_point(bbox: BoundingBox, point: AttachmentPoint) -> Offset:
    """Returns the coordinates of an attachment point on a box.

    Args:
        bbox: A bounding box.
        point: The attachment point.
    """
    x_center = bbox.x_min + bbox.width / 2
    y_middle = bbox.y_min + bbox.height / 2
    match point:
        case AttachmentPoint.TOP_LEFT:
            return Offset(bbox.x_min, bbox.y_max)
        case AttachmentPoint.TOP_CENTER:
            return Offset(x_center, bbox.y_max)
        case AttachmentPoint.TOP_RIGHT:
            return Offset(bbox.x_max, bbox.y_max)
        case AttachmentPoint.MID_LEFT:
            return Offset(bbox.x_min, y_middle)
        case AttachmentPoint.MID_RIGHT:
            return Offset(bbox.x_max, y_middle)
        case AttachmentPoint.BOTTOM_LEFT:
            return Offset(bbox.x_min, bbox.y_min)
        case AttachmentPoint.BOTTOM_CENTER:
            return Offset(x_center, bbox.y_min)
        case AttachmentPoint.BOTTOM_RIGHT:
            return Offset(bbox.x_max, bbox.y_min)
        case _:
            assert_never(point)
