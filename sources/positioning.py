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

"""Positioning rules and the ligatures they produce.
"""


from __future__ import annotations


__all__ = [
    'PositioningRule',
    'RulePairs',
    'find_positioning_rule',
    'movement_constraint_for',
    'resolve_ligatures',
    'rule_pairs',
]


import itertools
import logging
from typing import Final
from typing import NamedTuple
from typing import TYPE_CHECKING
from typing import override


from glyphs import Character
from glyphs import is_glyph_drawn
from groups import expand_members
from groups import is_group_reference
from groups import is_in_list
from utils import GlyphClass
from utils import MovementConstraint
from utils import VIRTUAL_CODEPOINT_START
from utils import pair_key


if TYPE_CHECKING:
    from collections.abc import Iterable
    from collections.abc import Mapping
    from collections.abc import Sequence

    from glyphs import GlyphData
    from groups import Groups
    from utils import PairKey


log = logging.getLogger(__name__)


class PositioningRule:
    """A combination of bases and marks that the font positions.

    Attributes:
        base: The bases, as a member list.
        mark: The marks, as a member list.
        gpos: The GPOS feature tag that positions the pairs, or
            ``None``.
        gsub: The GSUB feature tag that substitutes ligatures for the
            pairs, or ``None``.
        movement: Which axes of a pair’s offset may vary.
        ligature_map: The names of the ligatures for specific pairs,
            keyed by base key and then by mark key. A key is a glyph
            name or a group reference.
    """

    def __init__(
        self,
        base: Iterable[str],
        mark: Iterable[str],
        *,
        gpos: str | None = None,
        gsub: str | None = None,
        movement: MovementConstraint = MovementConstraint.NONE,
        ligature_map: Mapping[str, Mapping[str, str]] | None = None,
    ) -> None:
        self.base: Final = tuple(base)
        self.mark: Final = tuple(mark)
        self.gpos: Final = gpos
        self.gsub: Final = gsub
        self.movement: Final = movement
        self.ligature_map: Final[Mapping[str, Mapping[str, str]]] = {
            base_key: dict(mark_map) for base_key, mark_map in (ligature_map or {}).items()
        }

    def covers(self, base_name: str, mark_name: str, groups: Groups) -> bool:
        """Returns whether this rule covers a pair.

        Args:
            base_name: The base’s name.
            mark_name: The mark’s name.
            groups: The project’s groups.
        """
        return is_in_list(base_name, self.base, groups) and is_in_list(mark_name, self.mark, groups)

    def ligature_name(self, base_name: str, mark_name: str, groups: Groups) -> str | None:
        """Returns the name this rule’s ligature map gives a pair.

        Literal keys take precedence over group keys on each side.

        Args:
            base_name: The base’s name.
            mark_name: The mark’s name.
            groups: The project’s groups.

        Returns:
            The ligature name, or ``None`` if the map has none.
        """
        def lookup(name: str, mapping: Mapping[str, object]) -> Iterable[object]:
            if name in mapping:
                yield mapping[name]
            for key, value in mapping.items():
                if is_group_reference(key) and is_in_list(name, [key], groups):
                    yield value

        for mark_map in lookup(base_name, self.ligature_map):
            for ligature_name in lookup(mark_name, mark_map):  # type: ignore[arg-type]
                if ligature_name:
                    return ligature_name  # type: ignore[return-value]
        return None

    @override
    def __repr__(self) -> str:
        return f'PositioningRule({self.base!r}, {self.mark!r}, gpos={self.gpos!r}, gsub={self.gsub!r}, movement={self.movement!r})'


def find_positioning_rule(
    base_name: str,
    mark_name: str,
    rules: Iterable[PositioningRule] | None,
    groups: Groups,
) -> PositioningRule | None:
    """Returns the first rule that covers a pair, or ``None``.

    Args:
        base_name: The base’s name.
        mark_name: The mark’s name.
        rules: The project’s positioning rules.
        groups: The project’s groups.
    """
    for rule in rules or ():
        if rule.covers(base_name, mark_name, groups):
            return rule
    return None


def movement_constraint_for(
    base_name: str,
    mark_name: str,
    rules: Iterable[PositioningRule] | None,
    groups: Groups,
) -> MovementConstraint:
    """Returns the movement constraint of a pair.

    Args:
        base_name: The base’s name.
        mark_name: The mark’s name.
        rules: The project’s positioning rules.
        groups: The project’s groups.
    """
    rule = find_positioning_rule(base_name, mark_name, rules, groups)
    return MovementConstraint.NONE if rule is None else rule.movement


def _components_to_ligatures(feature_ligatures: Mapping[str, Sequence[str]] | None) -> dict[tuple[str, ...], str]:
    components_to_ligatures = {}
    for ligature_name, components in (feature_ligatures or {}).items():
        if len(components) == 2:
            components_to_ligatures[tuple(components)] = ligature_name
    return components_to_ligatures


def resolve_ligatures(
    rules: Iterable[PositioningRule] | None,
    characters: Mapping[str, Character],
    groups: Groups,
    feature_ligatures: Mapping[str, Sequence[str]] | None = None,
) -> dict[PairKey, Character]:
    """Finds the character representing each positioned pair.

    A pair’s ligature is, in order of preference:

    1. the character named by the rule’s ligature map;
    2. the character named in `feature_ligatures` with exactly the
       pair’s components;
    3. the character named by concatenating the base’s and the mark’s
       names;
    4. a new character with a code point counted up from
       `VIRTUAL_CODEPOINT_START`.

    A new character gets the name from the first of the first three
    options that produced a name, and the rule’s feature tags. Its glyph
    class is `GlyphClass.LIGATURE` if the rule substitutes and
    `GlyphClass.VIRTUAL` otherwise.

    When several rules cover a pair, the first one wins, as in
    `find_positioning_rule`.

    Args:
        rules: The project’s positioning rules.
        characters: The project’s characters, keyed by name.
        groups: The project’s groups.
        feature_ligatures: Two-component ligatures from the project’s
            feature definitions, as components keyed by ligature name.

    Returns:
        The ligatures keyed by the pairs’ positioning map keys. Pairs
        with a member lacking a code point are absent.
    """
    components_to_ligatures = _components_to_ligatures(feature_ligatures)
    virtual_codepoints = itertools.count(VIRTUAL_CODEPOINT_START + 1)
    ligatures: dict[PairKey, Character] = {}
    for rule in rules or ():
        marks = expand_members(rule.mark, groups)
        for base_name in expand_members(rule.base, groups):
            base = characters.get(base_name)
            if base is None or base.unicode is None:
                continue
            for mark_name in marks:
                mark = characters.get(mark_name)
                if mark is None or mark.unicode is None:
                    continue
                key = pair_key(base.unicode, mark.unicode)
                if key in ligatures:
                    continue
                ligature_name = (rule.ligature_name(base_name, mark_name, groups)
                    or components_to_ligatures.get((base_name, mark_name))
                )
                ligature = None
                if ligature_name and not is_group_reference(ligature_name):
                    ligature = characters.get(ligature_name)
                if ligature is None:
                    ligature_name = ligature_name or base_name + mark_name
                    ligature = characters.get(ligature_name)
                if ligature is None:
                    ligature = Character(
                        ligature_name,
                        next(virtual_codepoints),
                        glyph_class=GlyphClass.LIGATURE if rule.gsub else GlyphClass.VIRTUAL,
                        gpos=rule.gpos,
                        gsub=rule.gsub,
                        position=(base_name, mark_name),
                    )
                    log.debug('Synthesized %r for %s and %s', ligature, base_name, mark_name)
                ligatures[key] = ligature
    return ligatures


class RulePairs(NamedTuple):
    """The drawn pairs a rule covers.
    """

    #: The pairs whose base and mark are both drawn, in rule order.
    pairs: Sequence[tuple[Character, Character]]

    #: Whether some pair was left out because a member is not drawn.
    has_incomplete: bool


def rule_pairs(
    rule: PositioningRule,
    characters: Mapping[str, Character],
    groups: Groups,
    glyphs: Mapping[int, GlyphData],
) -> RulePairs:
    """Enumerates the pairs a rule covers that can be positioned.

    Args:
        rule: A positioning rule.
        characters: The project’s characters, keyed by name.
        groups: The project’s groups.
        glyphs: The drawn glyphs, keyed by code point.
    """
    pairs = []
    has_incomplete = False
    marks = expand_members(rule.mark, groups)
    for base_name in expand_members(rule.base, groups):
        base = characters.get(base_name)
        if base is None or base.unicode is None:
            continue
        for mark_name in marks:
            mark = characters.get(mark_name)
            if mark is None or mark.unicode is None:
                continue
            if is_glyph_drawn(glyphs.get(base.unicode)) and is_glyph_drawn(glyphs.get(mark.unicode)):
                pairs.append((base, mark))
            else:
                has_incomplete = True
    return RulePairs(pairs, has_incomplete)
