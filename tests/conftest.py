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

import pytest

from cascade import CascadeContext
from glyphs import Character
from glyphs import GlyphData
from glyphs import Path
from utils import GlyphClass


KA = Character('ka', 0x0915, glyph_class=GlyphClass.BASE)
KHA = Character('kha', 0x0916, glyph_class=GlyphClass.BASE)
GA = Character('ga', 0x0917, glyph_class=GlyphClass.BASE)
VIRAMA = Character('virama', 0x094D, glyph_class=GlyphClass.MARK)
NUKTA = Character('nukta', 0x093C, glyph_class=GlyphClass.MARK)
ACUTE = Character('acute', 0x0301, glyph_class=GlyphClass.MARK)
DOT = Character('dot', 0xE000, glyph_class=GlyphClass.MARK)
UNENCODED = Character('unencoded', None, glyph_class=GlyphClass.MARK)


def rectangle(x_min, y_min, x_max, y_max, *, stroked=False):
    return Path.from_points(
        [(x_min, y_min), (x_max, y_min), (x_max, y_max), (x_min, y_max)],
        closed=True,
        stroked=stroked,
    )


def box_glyph(x_min, y_min, x_max, y_max):
    return GlyphData([rectangle(x_min, y_min, x_max, y_max)])


# Default offsets with these boxes, for bottom-attached marks:
#   ka-virama (200, -50)    kha-virama (250, -50)
#   ka-nukta  (210, -80)    kha-nukta  (260, -80)
GLYPHS = {
    KA.unicode: box_glyph(0, 0, 500, 600),
    KHA.unicode: box_glyph(0, 0, 600, 600),
    VIRAMA.unicode: box_glyph(0, 0, 100, 50),
    NUKTA.unicode: box_glyph(0, 0, 80, 80),
    ACUTE.unicode: box_glyph(0, 0, 100, 50),
    DOT.unicode: box_glyph(0, 0, 100, 50),
}


def make_context(characters=(KA, KHA, GA, VIRAMA, NUKTA, ACUTE, DOT, UNENCODED), glyphs=None, **kwargs):
    return CascadeContext(
        characters={character.name: character for character in characters},
        glyphs=dict(GLYPHS if glyphs is None else glyphs),
        **kwargs,
    )


@pytest.fixture
def characters():
    return {character.name: character for character in [KA, KHA, GA, VIRAMA, NUKTA, ACUTE, DOT, UNENCODED]}


@pytest.fixture
def glyphs():
    return dict(GLYPHS)
