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

"""Project snapshots in JSON.

A snapshot is a JSON object. Every key is optional:

``metrics``
    An object with any of ``unitsPerEm``, ``ascender``, ``descender``,
    ``defaultAdvanceWidth``, ``defaultLSB``, and ``defaultRSB``.
``strokeWidth``
    The width of stroked paths.
``characters``
    A list of character records with ``name`` and optionally
    ``unicode``, ``lsb``, ``rsb``, ``glyphClass``, ``advWidth``,
    ``gpos``, ``gsub``, ``position``, ``composite``, and ``kern``.
``glyphs``
    An object mapping decimal code points to objects with ``paths``.
    A path is either ``{"commands": [[operator, [[x, y], ...]], ...]}``
    or ``{"points": [[x, y], ...], "closed": false}``, optionally with
    ``"stroked": false`` for a filled outline.
``groups``
    An object mapping group names to member lists.
``positioning``
    A list of positioning rules with ``base``, ``mark``, and optionally
    ``gpos``, ``gsub``, ``movement``, and ``ligatureMap``.
``markAttachment``
    The authored attachment rules, as an object mapping base keys to
    objects mapping mark keys to ``[basePoint, markPoint, dx, dy]``.
``markAttachmentClass`` and ``baseAttachmentClass``
    Lists of attachment classes with ``members`` and optionally
    ``name``, ``applies``, ``exceptions``, and ``exceptPairs``.
``markPositioning``
    The positioning map, as an object mapping ``"base-mark"`` code point
    keys to ``[x, y]``.
``featureLigatures``
    An object mapping ligature names to their component names.
"""


from __future__ import annotations


__all__ = [
    'dump_glyphs',
    'dump_positioning_map',
    'load_project',
    'parse_project',
]


import json
import logging
from typing import Any
from typing import Final
from typing import TYPE_CHECKING


from attachment import AttachmentClass
from cascade import CascadeContext
from glyphs import Character
from glyphs import FontMetrics
from glyphs import GlyphData
from glyphs import Path
from positioning import PositioningRule
from ucd import IndicPositionalCategories
from utils import DEFAULT_STROKE_WIDTH
from utils import GlyphClass
from utils import MovementConstraint
from utils import Offset
from utils import pair_key


if TYPE_CHECKING:
    from collections.abc import Iterable
    from collections.abc import Mapping

    from _typeshed import FileDescriptorOrPath

    from utils import PairKey


log = logging.getLogger(__name__)


_METRICS_KEYS: Final = {
    'unitsPerEm': 'units_per_em',
    'ascender': 'ascender',
    'descender': 'descender',
    'defaultAdvanceWidth': 'default_advance_width',
    'defaultLSB': 'default_lsb',
    'defaultRSB': 'default_rsb',
}


def _enum_value[E: (GlyphClass, MovementConstraint)](enum_type: type[E], value: Any, what: str) -> E:
    try:
        return enum_type(value)
    except ValueError:
        raise ValueError(f'Invalid {what}: {value!r}') from None


def _parse_metrics(data: Mapping[str, Any]) -> FontMetrics:
    return FontMetrics(**{field: data[key] for key, field in _METRICS_KEYS.items() if key in data})


def _parse_character(data: Mapping[str, Any]) -> Character:
    if 'name' not in data:
        raise ValueError(f'Character without a name: {data!r}')
    glyph_class = data.get('glyphClass')
    position = data.get('position')
    return Character(
        data['name'],
        data.get('unicode'),
        lsb=data.get('lsb'),
        rsb=data.get('rsb'),
        glyph_class=None if glyph_class is None else _enum_value(GlyphClass, glyph_class, 'glyph class'),
        advance_width=data.get('advWidth'),
        gpos=data.get('gpos'),
        gsub=data.get('gsub'),
        position=None if position is None else tuple(position),
        composite=data.get('composite'),
        kern=data.get('kern'),
    )


def _parse_path(data: Mapping[str, Any]) -> Path:
    stroked = data.get('stroked', True)
    if 'commands' in data:
        return Path(data['commands'], stroked=stroked)
    if 'points' in data:
        return Path.from_points([tuple(point) for point in data['points']], closed=data.get('closed', False), stroked=stroked)
    raise ValueError(f'Path without commands or points: {data!r}')


def _parse_glyphs(data: Mapping[str, Any]) -> dict[int, GlyphData]:
    glyphs = {}
    for codepoint, glyph in data.items():
        try:
            key = int(codepoint)
        except ValueError:
            raise ValueError(f'Invalid code point: {codepoint!r}') from None
        glyphs[key] = GlyphData(map(_parse_path, glyph.get('paths', ())))
    return glyphs


def _parse_positioning_rule(data: Mapping[str, Any]) -> PositioningRule:
    return PositioningRule(
        data.get('base', ()),
        data.get('mark', ()),
        gpos=data.get('gpos'),
        gsub=data.get('gsub'),
        movement=_enum_value(MovementConstraint, data.get('movement', MovementConstraint.NONE), 'movement constraint'),
        ligature_map=data.get('ligatureMap'),
    )


def _parse_attachment_class(data: Mapping[str, Any]) -> AttachmentClass:
    return AttachmentClass(
        data.get('members', ()),
        name=data.get('name'),
        applies=data.get('applies'),
        exceptions=data.get('exceptions'),
        except_pairs=data.get('exceptPairs', ()),
    )


def _parse_positioning_map(data: Mapping[str, Any]) -> dict[PairKey, Offset]:
    positioning_map = {}
    for key, value in data.items():
        base, separator, mark = key.partition('-')
        try:
            if not separator:
                raise ValueError
            parsed_key = pair_key(int(base), int(mark))
            x, y = value
            positioning_map[parsed_key] = Offset(x, y)
        except (TypeError, ValueError):
            raise ValueError(f'Invalid positioning entry: {key!r}: {value!r}') from None
    return positioning_map


def parse_project(
    data: Mapping[str, Any],
    indic_categories: IndicPositionalCategories | None = None,
) -> CascadeContext:
    """Builds a cascade context from a decoded snapshot.

    Args:
        data: The decoded JSON object.
        indic_categories: The Indic_Positional_Category table, or
            ``None``.

    Raises:
        ValueError: If the snapshot is structurally invalid.
    """
    if not isinstance(data, dict):
        raise ValueError(f'A project snapshot must be an object, not {type(data).__name__}')
    characters = {}
    for character_data in data.get('characters', ()):
        character = _parse_character(character_data)
        if character.name in characters:
            log.warning('Duplicate character: %s', character.name)
        characters[character.name] = character
    return CascadeContext(
        characters=characters,
        glyphs=_parse_glyphs(data.get('glyphs', {})),
        positioning_map=_parse_positioning_map(data.get('markPositioning', {})),
        groups=data.get('groups', {}),
        positioning_rules=[*map(_parse_positioning_rule, data.get('positioning', ()))],
        mark_classes=[*map(_parse_attachment_class, data.get('markAttachmentClass', ()))],
        base_classes=[*map(_parse_attachment_class, data.get('baseAttachmentClass', ()))],
        manual_rules=data.get('markAttachment'),
        metrics=_parse_metrics(data.get('metrics', {})),
        stroke_width=data.get('strokeWidth', DEFAULT_STROKE_WIDTH),
        indic_categories=indic_categories,
        feature_ligatures=data.get('featureLigatures'),
    )


def load_project(
    path: FileDescriptorOrPath,
    indic_path: FileDescriptorOrPath | None = None,
) -> CascadeContext:
    """Loads a project snapshot.

    Args:
        path: The path to the JSON snapshot.
        indic_path: The path to ``IndicPositionalCategory.txt``, or
            ``None`` to skip the Indic_Positional_Category heuristics.

    Raises:
        ValueError: If the snapshot is structurally invalid.
    """
    with open(path, encoding='utf-8') as f:
        data = json.load(f)
    indic_categories = None if indic_path is None else IndicPositionalCategories.load(indic_path)
    log.debug('Loaded %s', path)
    return parse_project(data, indic_categories)


def dump_positioning_map(positioning_map: Mapping[PairKey, Offset]) -> dict[str, list[float]]:
    """Returns the JSON form of a positioning map.

    Args:
        positioning_map: The positioning map.
    """
    return {
        f'{base}-{mark}': offset.as_list()
        for (base, mark), offset in sorted(positioning_map.items())
    }


def dump_glyphs(glyphs: Mapping[int, GlyphData], codepoints: Iterable[int]) -> dict[str, Any]:
    """Returns the JSON form of some glyphs.

    Args:
        glyphs: The glyph store.
        codepoints: The code points of the glyphs to dump.
    """
    return {
        str(codepoint): {
            'paths': [
                {
                    'commands': [[operator, [None if point is None else list(point) for point in operands]] for operator, operands in path.commands],
                    'stroked': path.stroked,
                }
                for path in glyphs[codepoint].paths
            ],
        }
        for codepoint in sorted(codepoints)
    }
