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

"""Propagation of a confirmed mark offset to the edited pair’s siblings.

When the author moves a mark, what they express is a deviation from the
geometric default, not an absolute position. `apply_edit_and_cascade`
records the new offset, computes the deviation, and gives every sibling
pair its own default plus the same deviation, so that siblings with
different shapes still look consistent.

Nothing here mutates its inputs. Each call returns fresh replacement
structures, so a caller can undo a cascade by keeping the structures it
passed in.
"""


from __future__ import annotations


__all__ = [
    'CascadeContext',
    'CascadeResult',
    'LigatureMetadata',
    'MissingGeometryError',
    'accept_all_defaults',
    'apply_edit_and_cascade',
]


import logging
from typing import Final
from typing import NamedTuple
from typing import Self
from typing import TYPE_CHECKING


from attachment import find_applicable_class
from attachment import is_pair_eligible
from attachment import side_siblings
from bounds import bake_ligature
from bounds import get_bounding_box
from glyphs import FontMetrics
from glyphs import is_glyph_drawn
from heuristics import compute_default_offset
from positioning import find_positioning_rule
from positioning import movement_constraint_for
from positioning import resolve_ligatures
from utils import CLONE_DEFAULT
from utils import ClassType
from utils import DEFAULT_STROKE_WIDTH
from utils import OrderedSet
from utils import pair_key


if TYPE_CHECKING:
    from collections.abc import Callable
    from collections.abc import Iterable
    from collections.abc import Mapping
    from collections.abc import Sequence

    from attachment import AttachmentClass
    from bounds import BoundingBox
    from glyphs import Character
    from glyphs import GlyphData
    from glyphs import Path
    from groups import Groups
    from heuristics import ManualRules
    from positioning import PositioningRule
    from ucd import IndicPositionalCategories
    from utils import CloneDefault
    from utils import GlyphClass
    from utils import MovementConstraint
    from utils import Offset
    from utils import PairKey


type BoundingBoxProvider = Callable[[Sequence[Path], float], BoundingBox | None]


log = logging.getLogger(__name__)


class MissingGeometryError(ValueError):
    """An error raised when the edited pair has a glyph with nothing
    drawn.

    Attributes:
        glyph_name: The name of the glyph.
    """

    def __init__(self, glyph_name: str) -> None:
        super().__init__(f'{glyph_name} has no drawn geometry')
        self.glyph_name: Final = glyph_name


class CascadeContext:
    """A read-only snapshot of everything a cascade consults.

    Attributes:
        characters: The character records, keyed by name.
        glyphs: The drawn glyphs, keyed by code point.
        positioning_map: The recorded offsets, keyed by pair.
        groups: The groups.
        positioning_rules: The positioning rules.
        mark_classes: The mark attachment classes.
        base_classes: The base attachment classes.
        manual_rules: The authored attachment rules for the default
            offset heuristics.
        metrics: The font metrics.
        stroke_width: The width of stroked paths.
        indic_categories: The Indic_Positional_Category table, or
            ``None``.
        ligatures: The characters representing positioned pairs, keyed
            by pair. If not given, they are resolved from the rules.
        bounding_box: The function that measures paths.
    """

    def __init__(
        self,
        *,
        characters: Mapping[str, Character],
        glyphs: Mapping[int, GlyphData],
        positioning_map: Mapping[PairKey, Offset] | None = None,
        groups: Groups | None = None,
        positioning_rules: Sequence[PositioningRule] = (),
        mark_classes: Sequence[AttachmentClass] = (),
        base_classes: Sequence[AttachmentClass] = (),
        manual_rules: ManualRules | None = None,
        metrics: FontMetrics = FontMetrics(),
        stroke_width: float = DEFAULT_STROKE_WIDTH,
        indic_categories: IndicPositionalCategories | None = None,
        feature_ligatures: Mapping[str, Sequence[str]] | None = None,
        ligatures: Mapping[PairKey, Character] | None = None,
        bounding_box: BoundingBoxProvider = get_bounding_box,
    ) -> None:
        self.characters: Final = characters
        self.glyphs: Final = glyphs
        self.positioning_map: Final[Mapping[PairKey, Offset]] = positioning_map or {}
        self.groups: Final[Groups] = groups or {}
        self.positioning_rules: Final = positioning_rules
        self.mark_classes: Final = mark_classes
        self.base_classes: Final = base_classes
        self.manual_rules: Final = manual_rules
        self.metrics: Final = metrics
        self.stroke_width: Final = stroke_width
        self.indic_categories: Final = indic_categories
        self.ligatures: Final[Mapping[PairKey, Character]] = (
            resolve_ligatures(positioning_rules, characters, self.groups, feature_ligatures)
            if ligatures is None
            else ligatures
        )
        self.bounding_box: Final = bounding_box

    def clone(
        self,
        *,
        characters: CloneDefault | Mapping[str, Character] = CLONE_DEFAULT,
        glyphs: CloneDefault | Mapping[int, GlyphData] = CLONE_DEFAULT,
        positioning_map: CloneDefault | Mapping[PairKey, Offset] = CLONE_DEFAULT,
    ) -> Self:
        return type(self)(
            characters=self.characters if characters is CLONE_DEFAULT else characters,
            glyphs=self.glyphs if glyphs is CLONE_DEFAULT else glyphs,
            positioning_map=self.positioning_map if positioning_map is CLONE_DEFAULT else positioning_map,
            groups=self.groups,
            positioning_rules=self.positioning_rules,
            mark_classes=self.mark_classes,
            base_classes=self.base_classes,
            manual_rules=self.manual_rules,
            metrics=self.metrics,
            stroke_width=self.stroke_width,
            indic_categories=self.indic_categories,
            ligatures=self.ligatures,
            bounding_box=self.bounding_box,
        )

    def bounding_box_of(self, character: Character) -> BoundingBox | None:
        """Returns the bounding box of a character’s glyph.

        Args:
            character: A character.

        Returns:
            The bounding box, or ``None`` if the character has no code
            point or nothing drawn.
        """
        if character.unicode is None:
            return None
        glyph_data = self.glyphs.get(character.unicode)
        if not is_glyph_drawn(glyph_data):
            return None
        assert glyph_data is not None
        return self.bounding_box(glyph_data.paths, self.stroke_width)

    def movement_constraint(self, base: Character, mark: Character) -> MovementConstraint:
        return movement_constraint_for(base.name, mark.name, self.positioning_rules, self.groups)

    def default_offset(
        self,
        base: Character,
        mark: Character,
        base_bbox: BoundingBox | None,
        mark_bbox: BoundingBox | None,
    ) -> Offset:
        """Returns the default offset of a pair.

        Args:
            base: The base.
            mark: The mark.
            base_bbox: The base’s bounding box.
            mark_bbox: The mark’s bounding box.
        """
        return compute_default_offset(
            base,
            mark,
            base_bbox,
            mark_bbox,
            self.manual_rules,
            self.metrics,
            self.movement_constraint(base, mark),
            groups=self.groups,
            indic_categories=self.indic_categories,
        )


class LigatureMetadata(NamedTuple):
    """Metadata to store on the edited pair’s ligature.

    The bearings are stored exactly, so ``None`` clears a bearing. Any
    other field that is ``None`` keeps the ligature’s current value.
    """

    #: The left side bearing.
    lsb: float | None = None

    #: The right side bearing.
    rsb: float | None = None

    #: The glyph class.
    glyph_class: GlyphClass | None = None

    #: The advance width.
    advance_width: float | None = None

    #: The GSUB feature tag.
    gsub: str | None = None

    #: The GPOS feature tag.
    gpos: str | None = None

    def apply_to(self, ligature: Character) -> Character:
        """Returns a copy of a ligature with this metadata.

        Args:
            ligature: The ligature.
        """
        return ligature.clone(
            lsb=self.lsb,
            rsb=self.rsb,
            glyph_class=CLONE_DEFAULT if self.glyph_class is None else self.glyph_class,
            advance_width=CLONE_DEFAULT if self.advance_width is None else self.advance_width,
            gsub=CLONE_DEFAULT if self.gsub is None else self.gsub,
            gpos=CLONE_DEFAULT if self.gpos is None else self.gpos,
        )


class CascadeResult(NamedTuple):
    """The replacement structures produced by a cascade.
    """

    #: The full replacement positioning map.
    positioning_map: Mapping[PairKey, Offset]

    #: The full replacement glyph store.
    glyphs: Mapping[int, GlyphData]

    #: The full replacement character records, keyed by name.
    characters: Mapping[str, Character]

    #: The code points of the ligatures whose outlines were stored.
    baked: frozenset[int]

    #: The number of pairs written in addition to the edited pair.
    propagated_count: int


def _require_bounding_box(context: CascadeContext, character: Character) -> BoundingBox:
    bbox = context.bounding_box_of(character)
    if bbox is None:
        raise MissingGeometryError(character.name)
    return bbox


def _gather_side(
    context: CascadeContext,
    class_type: ClassType,
    name: str,
    counterpart_name: str,
    base_name: str,
    mark_name: str,
    classes: Sequence[AttachmentClass],
    siblings: OrderedSet[str],
    classes_in_play: list[AttachmentClass],
) -> None:
    found = find_applicable_class(name, counterpart_name, classes, context.groups)
    if found is None:
        return
    attachment_class = found[1]
    classes_in_play.append(attachment_class)
    if attachment_class.is_excepted(base_name, mark_name):
        log.debug('%s-%s is excepted from %r', base_name, mark_name, attachment_class)
        return
    for sibling in side_siblings(attachment_class, class_type, counterpart_name, context.groups):
        siblings.add(sibling)


def apply_edit_and_cascade(
    edited_pair: tuple[Character, Character],
    new_offset: Offset,
    new_metadata: LigatureMetadata | None,
    context: CascadeContext,
    *,
    new_glyph_data: GlyphData | None = None,
) -> CascadeResult:
    """Records an offset for a pair and propagates it to its siblings.

    The edited pair’s deviation from its default offset is added to
    each sibling pair’s own default offset. Sibling bases come from the
    base class that applies to the edited pair, and sibling marks from
    the mark class that applies to it; every combination of them is
    written. A class contributes no siblings when it excepts the edited
    pair, and a combination that a class excepts is never written.
    Siblings with a glyph that has nothing drawn are skipped.

    When a pair’s positioning rule has a GSUB tag, its ligature’s
    outline is baked from the base and the moved mark.

    Args:
        edited_pair: The base and the mark of the edited pair.
        new_offset: The offset the author chose.
        new_metadata: Metadata to store on the edited pair’s ligature,
            or ``None`` to leave it alone.
        context: The snapshot to start from.
        new_glyph_data: The outline to store for the edited pair’s
            ligature instead of a baked one, or ``None``.

    Raises:
        ValueError: If a glyph of the edited pair has no code point.
        MissingGeometryError: If a glyph of the edited pair has nothing
            drawn.
    """
    base, mark = edited_pair
    if base.unicode is None or mark.unicode is None:
        raise ValueError(f'Cannot position {base.name} with {mark.name}: both need code points')
    positioning_map = dict(context.positioning_map)
    glyphs = dict(context.glyphs)
    characters = dict(context.characters)
    baked: set[int] = set()

    def bake(sibling_base: Character, sibling_mark: Character, key: PairKey, offset: Offset, glyph_data: GlyphData | None = None) -> None:
        rule = find_positioning_rule(sibling_base.name, sibling_mark.name, context.positioning_rules, context.groups)
        ligature = context.ligatures.get(key)
        if rule is None or not rule.gsub or ligature is None or ligature.unicode is None:
            return
        if glyph_data is None:
            glyph_data = bake_ligature(context.glyphs[sibling_base.unicode], context.glyphs[sibling_mark.unicode], offset)  # type: ignore[index]
        glyphs[ligature.unicode] = glyph_data
        baked.add(ligature.unicode)
        characters.setdefault(ligature.name, ligature)

    edited_key = pair_key(base.unicode, mark.unicode)
    positioning_map[edited_key] = new_offset
    base_bbox = _require_bounding_box(context, base)
    mark_bbox = _require_bounding_box(context, mark)
    delta = new_offset - context.default_offset(base, mark, base_bbox, mark_bbox)
    log.debug('%s-%s: %r, deviation %r', base.name, mark.name, new_offset, delta)
    bake(base, mark, edited_key, new_offset, new_glyph_data)

    ligature = context.ligatures.get(edited_key)
    if new_metadata is not None and ligature is not None:
        characters[ligature.name] = new_metadata.apply_to(characters.get(ligature.name, ligature))

    base_names: OrderedSet[str] = OrderedSet([base.name])
    mark_names: OrderedSet[str] = OrderedSet([mark.name])
    classes_in_play: list[AttachmentClass] = []
    _gather_side(context, ClassType.MARK, mark.name, base.name, base.name, mark.name, context.mark_classes, mark_names, classes_in_play)
    _gather_side(context, ClassType.BASE, base.name, mark.name, base.name, mark.name, context.base_classes, base_names, classes_in_play)

    propagated_count = 0
    for sibling_base_name in base_names:
        for sibling_mark_name in mark_names:
            if (sibling_base_name, sibling_mark_name) == (base.name, mark.name):
                continue
            if any(c.is_excepted(sibling_base_name, sibling_mark_name) for c in classes_in_play):
                continue
            sibling_base = context.characters.get(sibling_base_name)
            sibling_mark = context.characters.get(sibling_mark_name)
            if (sibling_base is None
                or sibling_mark is None
                or sibling_base.unicode is None
                or sibling_mark.unicode is None
            ):
                log.debug('Skipping %s-%s: missing character or code point', sibling_base_name, sibling_mark_name)
                continue
            sibling_base_bbox = context.bounding_box_of(sibling_base)
            sibling_mark_bbox = context.bounding_box_of(sibling_mark)
            if sibling_base_bbox is None or sibling_mark_bbox is None:
                log.debug('Skipping %s-%s: nothing drawn', sibling_base_name, sibling_mark_name)
                continue
            key = pair_key(sibling_base.unicode, sibling_mark.unicode)
            default = context.default_offset(sibling_base, sibling_mark, sibling_base_bbox, sibling_mark_bbox)
            offset = (default + delta).constrained(context.movement_constraint(sibling_base, sibling_mark))
            positioning_map[key] = offset
            propagated_count += 1
            bake(sibling_base, sibling_mark, key, offset)

    if propagated_count:
        log.info('Propagated %s-%s to %d sibling pairs', base.name, mark.name, propagated_count)
    return CascadeResult(positioning_map, glyphs, characters, frozenset(baked), propagated_count)


def accept_all_defaults(
    pairs: Iterable[tuple[Character, Character]],
    context: CascadeContext,
) -> CascadeResult:
    """Accepts the default offset of every unpositioned eligible pair.

    Each accepted pair is cascaded in turn with its default offset, so
    its siblings get their own defaults too. Pairs that are already
    positioned, that are not eligible, or that have nothing drawn are
    skipped.

    Args:
        pairs: The base and mark pairs to consider, in order.
        context: The snapshot to start from.

    Returns:
        The combined result. Its `propagated_count` counts the pairs
        written in addition to the accepted ones.
    """
    baked: set[int] = set()
    propagated_count = 0
    for base, mark in pairs:
        if base.unicode is None or mark.unicode is None:
            continue
        if pair_key(base.unicode, mark.unicode) in context.positioning_map:
            continue
        if not is_pair_eligible(base.name, mark.name, context.mark_classes, context.base_classes, context.groups):
            continue
        base_bbox = context.bounding_box_of(base)
        mark_bbox = context.bounding_box_of(mark)
        if base_bbox is None or mark_bbox is None:
            log.debug('Skipping %s-%s: nothing drawn', base.name, mark.name)
            continue
        result = apply_edit_and_cascade(
            (base, mark),
            context.default_offset(base, mark, base_bbox, mark_bbox),
            None,
            context,
        )
        baked |= result.baked
        propagated_count += result.propagated_count
        context = context.clone(
            characters=result.characters,
            glyphs=result.glyphs,
            positioning_map=result.positioning_map,
        )
    return CascadeResult(
        dict(context.positioning_map),
        dict(context.glyphs),
        dict(context.characters),
        frozenset(baked),
        propagated_count,
    )
