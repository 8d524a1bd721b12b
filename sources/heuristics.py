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

"""Default mark offsets.

The default offset of a mark relative to a base is derived from an
attachment rule: a point on the base’s bounding box, a point on the
mark’s bounding box, and a nudge. The mark is moved so that its point
lands on the base’s point plus the nudge.

The rule comes from the first tier in `TIERS` that has one:

1. the mark’s Indic_Positional_Category;
2. the mark’s canonical combining class;
3. a rule authored for the pair, by name or by group.

If no tier has a rule, the mark is set beside the base, separated by the
base’s right side bearing and the mark’s left side bearing.
"""


from __future__ import annotations


__all__ = [
    'AttachmentRule',
    'COMBINING_CLASS_RULES',
    'HeuristicInputs',
    'INDIC_POSITION_RULES',
    'TIERS',
    'combining_class_tier',
    'compute_default_offset',
    'indic_positional_tier',
    'manual_rule_tier',
    'parse_manual_rule',
    'resolve_manual_rule',
    'resolve_rule',
    'side_by_side_offset',
]


from collections.abc import Mapping
from collections.abc import Sequence
import logging
import math
from typing import Final
from typing import NamedTuple
from typing import TYPE_CHECKING


from anchors import AttachmentPoint
from anchors import attachment_point
from anchors import parse_attachment_point
import groups as groups_module
from ucd import combining_class
from utils import HEURISTIC_NUDGE
from utils import MovementConstraint
from utils import Offset
from utils import ZERO_OFFSET


if TYPE_CHECKING:
    from collections.abc import Callable
    from collections.abc import Iterator

    from bounds import BoundingBox
    from glyphs import Character
    from glyphs import FontMetrics
    from groups import Groups
    from ucd import IndicPositionalCategories


type ManualRules = Mapping[str, Mapping[str, Sequence[object]]]


log = logging.getLogger(__name__)


class AttachmentRule(NamedTuple):
    """How to attach a mark to a base.
    """

    #: The point on the base’s bounding box.
    base_point: AttachmentPoint

    #: The point on the mark’s bounding box.
    mark_point: AttachmentPoint

    #: The horizontal nudge added to the base’s point.
    dx: float = 0

    #: The vertical nudge added to the base’s point.
    dy: float = 0

    def offset(self, base_bbox: BoundingBox, mark_bbox: BoundingBox) -> Offset:
        """Returns the offset this rule gives a mark.

        Args:
            base_bbox: The base’s bounding box.
            mark_bbox: The mark’s bounding box.
        """
        return (attachment_point(base_bbox, self.base_point)
            + Offset(self.dx, self.dy)
            - attachment_point(mark_bbox, self.mark_point)
        )


_TOP: Final = (AttachmentPoint.TOP_CENTER, AttachmentPoint.BOTTOM_CENTER)
_BOTTOM: Final = (AttachmentPoint.BOTTOM_CENTER, AttachmentPoint.TOP_CENTER)
_LEFT: Final = (AttachmentPoint.MID_LEFT, AttachmentPoint.MID_RIGHT)
_RIGHT: Final = (AttachmentPoint.MID_RIGHT, AttachmentPoint.MID_LEFT)
_TOP_LEFT: Final = (AttachmentPoint.TOP_LEFT, AttachmentPoint.BOTTOM_RIGHT)
_TOP_RIGHT: Final = (AttachmentPoint.TOP_RIGHT, AttachmentPoint.BOTTOM_LEFT)
_BOTTOM_LEFT: Final = (AttachmentPoint.BOTTOM_LEFT, AttachmentPoint.TOP_RIGHT)
_BOTTOM_RIGHT: Final = (AttachmentPoint.BOTTOM_RIGHT, AttachmentPoint.TOP_LEFT)


#: Attachment rules by Indic_Positional_Category. Other values, including
#: compound ones like ``Top_And_Right``, have no rule.
INDIC_POSITION_RULES: Final[Mapping[str, AttachmentRule]] = {
    'Top': AttachmentRule(*_TOP, 0, HEURISTIC_NUDGE),
    'Bottom': AttachmentRule(*_BOTTOM, 0, -HEURISTIC_NUDGE),
    'Left': AttachmentRule(*_LEFT, -HEURISTIC_NUDGE, 0),
    'Right': AttachmentRule(*_RIGHT, HEURISTIC_NUDGE, 0),
}


#: Attachment rules by canonical combining class. Attached classes touch
#: the base; the others keep `HEURISTIC_NUDGE` units away from it.
COMBINING_CLASS_RULES: Final[Mapping[int, AttachmentRule]] = {
    # Overlay
    1: AttachmentRule(*_TOP),
    # Han reading and kana voicing marks
    6: AttachmentRule(*_TOP_RIGHT),
    8: AttachmentRule(*_TOP_RIGHT),
    # Nukta
    7: AttachmentRule(*_BOTTOM),
    # Virama
    9: AttachmentRule(*_BOTTOM),
    200: AttachmentRule(*_BOTTOM_LEFT),
    202: AttachmentRule(*_BOTTOM),
    204: AttachmentRule(*_BOTTOM_RIGHT),
    208: AttachmentRule(*_LEFT),
    210: AttachmentRule(*_RIGHT),
    212: AttachmentRule(*_TOP_LEFT),
    214: AttachmentRule(*_TOP),
    216: AttachmentRule(*_TOP_RIGHT),
    # Iota subscript
    240: AttachmentRule(*_BOTTOM_RIGHT),
    218: AttachmentRule(*_BOTTOM_LEFT, -HEURISTIC_NUDGE, -HEURISTIC_NUDGE),
    220: AttachmentRule(*_BOTTOM, 0, -HEURISTIC_NUDGE),
    222: AttachmentRule(*_BOTTOM_LEFT, -HEURISTIC_NUDGE, -HEURISTIC_NUDGE),
    224: AttachmentRule(*_BOTTOM_RIGHT, HEURISTIC_NUDGE, -HEURISTIC_NUDGE),
    228: AttachmentRule(*_LEFT, -HEURISTIC_NUDGE, 0),
    230: AttachmentRule(*_TOP, 0, HEURISTIC_NUDGE),
    232: AttachmentRule(*_RIGHT, HEURISTIC_NUDGE, 0),
    233: AttachmentRule(*_TOP_LEFT, -HEURISTIC_NUDGE, HEURISTIC_NUDGE),
    234: AttachmentRule(*_TOP_RIGHT, HEURISTIC_NUDGE, HEURISTIC_NUDGE),
}


#: The rule for a fixed-position combining class (10 through 199) that
#: `COMBINING_CLASS_RULES` does not list.
FIXED_POSITION_RULE: Final[AttachmentRule] = AttachmentRule(*_TOP, 0, HEURISTIC_NUDGE)


class HeuristicInputs(NamedTuple):
    """Everything a tier may consult.
    """

    #: The base.
    base: Character

    #: The mark.
    mark: Character

    #: The authored attachment rules, keyed by base key and then by mark
    #: key, or ``None`` if there are none.
    manual_rules: ManualRules | None

    #: The project’s groups.
    groups: Groups

    #: The Indic_Positional_Category table, or ``None`` if unavailable.
    indic_categories: IndicPositionalCategories | None


type Tier = Callable[[HeuristicInputs], AttachmentRule | None]


def indic_positional_tier(inputs: HeuristicInputs) -> AttachmentRule | None:
    if inputs.mark.unicode is None or inputs.indic_categories is None:
        return None
    return INDIC_POSITION_RULES.get(inputs.indic_categories.get(inputs.mark.unicode))


def combining_class_tier(inputs: HeuristicInputs) -> AttachmentRule | None:
    if inputs.mark.unicode is None:
        return None
    ccc = combining_class(inputs.mark.unicode)
    rule = COMBINING_CLASS_RULES.get(ccc)
    if rule is None and 10 <= ccc <= 199:
        rule = FIXED_POSITION_RULE
    return rule


def _parse_number(value: object) -> float:
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0
    return number if math.isfinite(number) else 0


def parse_manual_rule(entry: object) -> AttachmentRule | None:
    """Parses an authored attachment rule.

    Args:
        entry: A sequence of a base attachment point name, a mark
            attachment point name, and optionally a horizontal and a
            vertical nudge. A nudge may be a number or a numeric string;
            anything else counts as 0.

    Returns:
        The rule, or ``None`` if `entry` is malformed.
    """
    if isinstance(entry, str) or not isinstance(entry, Sequence) or len(entry) < 2:
        return None
    base_point = parse_attachment_point(entry[0])
    mark_point = parse_attachment_point(entry[1])
    if base_point is None or mark_point is None:
        return None
    dx = _parse_number(entry[2]) if len(entry) > 2 else 0
    dy = _parse_number(entry[3]) if len(entry) > 3 else 0
    return AttachmentRule(base_point, mark_point, dx, dy)


def _matching_entries(
    name: str,
    rules: Mapping[str, object],
    groups: Groups,
) -> Iterator[object]:
    literal = rules.get(name)
    if literal is not None:
        yield literal
    for key, value in rules.items():
        if groups_module.is_group_reference(key) and groups_module.is_in_list(name, [key], groups):
            yield value


def resolve_manual_rule(
    base_name: str,
    mark_name: str,
    manual_rules: ManualRules | None,
    groups: Groups,
) -> AttachmentRule | None:
    """Finds the authored attachment rule for a pair.

    Base keys are tried literal first, then group references in order;
    within each matching base key, mark keys are tried the same way.
    Malformed entries are skipped.

    Args:
        base_name: The base’s name.
        mark_name: The mark’s name.
        manual_rules: The authored rules, keyed by base key and then by
            mark key.
        groups: The project’s groups.
    """
    if not manual_rules:
        return None
    if not isinstance(manual_rules, Mapping):
        log.warning('Ignoring malformed attachment rules: %r', manual_rules)
        return None
    for mark_rules in _matching_entries(base_name, manual_rules, groups):
        if not isinstance(mark_rules, Mapping):
            log.warning('Ignoring malformed attachment rules for %s: %r', base_name, mark_rules)
            continue
        for entry in _matching_entries(mark_name, mark_rules, groups):
            rule = parse_manual_rule(entry)
            if rule is None:
                log.warning('Ignoring malformed attachment rule for %s and %s: %r', base_name, mark_name, entry)
                continue
            return rule
    return None


def manual_rule_tier(inputs: HeuristicInputs) -> AttachmentRule | None:
    return resolve_manual_rule(inputs.base.name, inputs.mark.name, inputs.manual_rules, inputs.groups)


#: The tiers, in priority order.
TIERS: Final[Sequence[Tier]] = [
    indic_positional_tier,
    combining_class_tier,
    manual_rule_tier,
]


def resolve_rule(inputs: HeuristicInputs, tiers: Sequence[Tier] = TIERS) -> AttachmentRule | None:
    """Returns the rule from the first tier that has one.

    Args:
        inputs: The tiers’ inputs.
        tiers: The tiers, in priority order.
    """
    for tier in tiers:
        rule = tier(inputs)
        if rule is not None:
            log.debug('%s with %s: %s from %s', inputs.base.name, inputs.mark.name, rule, tier.__name__)
            return rule
    return None


def side_by_side_offset(
    base: Character,
    mark: Character,
    base_bbox: BoundingBox,
    mark_bbox: BoundingBox,
    metrics: FontMetrics,
) -> Offset:
    """Returns the offset that sets a mark to the right of a base.

    Args:
        base: The base.
        mark: The mark.
        base_bbox: The base’s bounding box.
        mark_bbox: The mark’s bounding box.
        metrics: The font metrics, whose default bearings stand in for
            missing bearings.
    """
    base_rsb = metrics.default_rsb if base.rsb is None else base.rsb
    mark_lsb = metrics.default_lsb if mark.lsb is None else mark.lsb
    return Offset(base_bbox.x_max + base_rsb + mark_lsb - mark_bbox.x_min, 0)


def compute_default_offset(
    base: Character,
    mark: Character,
    base_bbox: BoundingBox | None,
    mark_bbox: BoundingBox | None,
    manual_rules: ManualRules | None,
    metrics: FontMetrics,
    movement_constraint: MovementConstraint = MovementConstraint.NONE,
    *,
    groups: Groups | None = None,
    indic_categories: IndicPositionalCategories | None = None,
    tiers: Sequence[Tier] = TIERS,
) -> Offset:
    """Computes the default offset of a mark relative to a base.

    Args:
        base: The base.
        mark: The mark.
        base_bbox: The base’s bounding box, or ``None`` if it has no
            drawn paths.
        mark_bbox: The mark’s bounding box, or ``None`` if it has no
            drawn paths.
        manual_rules: The authored attachment rules.
        metrics: The font metrics.
        movement_constraint: Which axes may be nonzero in the result.
        groups: The project’s groups.
        indic_categories: The Indic_Positional_Category table.
        tiers: The tiers, in priority order.

    Returns:
        The offset, constrained by `movement_constraint`. It is zero if
        either bounding box is missing.
    """
    if base_bbox is None or mark_bbox is None:
        return ZERO_OFFSET
    inputs = HeuristicInputs(base, mark, manual_rules, groups or {}, indic_categories)
    rule = resolve_rule(inputs, tiers)
    if rule is None:
        offset = side_by_side_offset(base, mark, base_bbox, mark_bbox, metrics)
    else:
        offset = rule.offset(base_bbox, mark_bbox)
    return offset.constrained(movement_constraint)
