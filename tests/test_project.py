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

import json

import pytest

from bounds import BoundingBox
from glyphs import FontMetrics
import position
from project import dump_glyphs
from project import dump_positioning_map
from project import load_project
from project import parse_project
from utils import GlyphClass
from utils import MovementConstraint
from utils import Offset
from utils import VIRTUAL_CODEPOINT_START


SNAPSHOT = {
    'metrics': {'unitsPerEm': 2048, 'defaultLSB': 30},
    'strokeWidth': 20,
    'characters': [
        {'name': 'ka', 'unicode': 0x0915, 'glyphClass': 'base'},
        {'name': 'kha', 'unicode': 0x0916, 'glyphClass': 'base', 'rsb': 40},
        {'name': 'virama', 'unicode': 0x094D, 'glyphClass': 'mark'},
    ],
    'glyphs': {
        str(0x0915): {'paths': [{'points': [[0, 0], [500, 0], [500, 600], [0, 600]], 'closed': True, 'stroked': False}]},
        str(0x0916): {'paths': [{'commands': [['moveTo', [[0, 0]]], ['lineTo', [[600, 600]]], ['endPath', []]], 'stroked': False}]},
        str(0x094D): {'paths': [{'points': [[10, 10], [90, 40]]}]},
    },
    'groups': {'consonants': ['ka', 'kha']},
    'positioning': [{'base': ['$consonants'], 'mark': ['virama'], 'gsub': 'abvs', 'movement': 'vertical'}],
    'markAttachment': {'$consonants': {'virama': ['bottomCenter', 'topCenter', 0, -10]}},
    'markAttachmentClass': [],
    'baseAttachmentClass': [{'name': 'velars', 'members': ['$consonants'], 'exceptPairs': []}],
    'markPositioning': {f'{0x0916}-{0x094D}': [1, 2]},
    'featureLigatures': {},
}


def test_parse_project():
    context = parse_project(SNAPSHOT)
    assert context.metrics == FontMetrics(units_per_em=2048, default_lsb=30)
    assert context.stroke_width == 20
    assert context.characters['kha'].rsb == 40
    assert context.characters['ka'].glyph_class is GlyphClass.BASE
    assert context.bounding_box_of(context.characters['ka']) == BoundingBox(0, 0, 500, 600)
    assert context.bounding_box_of(context.characters['kha']) == BoundingBox(0, 0, 600, 600)
    assert context.bounding_box_of(context.characters['virama']) == BoundingBox(0, 0, 100, 50)
    assert context.positioning_rules[0].movement is MovementConstraint.VERTICAL
    assert context.base_classes[0].name == 'velars'
    assert context.positioning_map == {(0x0916, 0x094D): Offset(1, 2)}
    assert context.ligatures[(0x0915, 0x094D)].unicode == VIRTUAL_CODEPOINT_START + 1


@pytest.mark.parametrize('change', [
    {'positioning': [{'base': ['ka'], 'mark': ['virama'], 'movement': 'diagonal'}]},
    {'characters': [{'name': 'ka', 'glyphClass': 'consonant'}]},
    {'characters': [{'unicode': 0x0915}]},
    {'markPositioning': {'ka-virama': [0, 0]}},
    {'markPositioning': {'2325': [0, 0]}},
    {'markPositioning': {'2325-2381': [0]}},
    {'glyphs': {'ka': {'paths': []}}},
    {'glyphs': {'2325': {'paths': [{'stroked': True}]}}},
])
def test_invalid_snapshot(change):
    with pytest.raises(ValueError):
        parse_project({**SNAPSHOT, **change})


def test_snapshot_must_be_an_object():
    with pytest.raises(ValueError):
        parse_project([])


def test_load_project(tmp_path):
    project_path = tmp_path / 'project.json'
    project_path.write_text(json.dumps(SNAPSHOT), encoding='utf-8')
    indic_path = tmp_path / 'IndicPositionalCategory.txt'
    indic_path.write_text('094D ; Bottom # DEVANAGARI SIGN VIRAMA\n', encoding='utf-8')
    context = load_project(project_path, indic_path)
    assert context.indic_categories.get(0x094D) == 'Bottom'
    assert load_project(project_path).indic_categories is None


def test_dump_positioning_map():
    positioning_map = {(0x0916, 0x094D): Offset(1, 2), (0x0915, 0x094D): Offset(-3.5, 0)}
    assert dump_positioning_map(positioning_map) == {
        '2325-2381': [-3.5, 0],
        '2326-2381': [1, 2],
    }
    assert json.loads(json.dumps(dump_positioning_map(positioning_map))) == dump_positioning_map(positioning_map)


def test_dump_glyphs():
    context = parse_project(SNAPSHOT)
    dumped = dump_glyphs(context.glyphs, [0x0916])
    assert dumped == {
        '2326': {'paths': [{'commands': [['moveTo', [[0, 0]]], ['lineTo', [[600, 600]]], ['endPath', []]], 'stroked': False}]},
    }
    assert parse_project({'glyphs': dumped}).glyphs == {0x0916: context.glyphs[0x0916]}


def test_position_main(tmp_path):
    project_path = tmp_path / 'project.json'
    project_path.write_text(json.dumps(SNAPSHOT), encoding='utf-8')
    output_path = tmp_path / 'output.json'
    assert position.main([
        '--project', str(project_path),
        '--base', 'ka',
        '--mark', 'virama',
        '--offset', '0,-70',
        '--output', str(output_path),
    ]) == 0
    output = json.loads(output_path.read_text(encoding='utf-8'))
    assert output['markPositioning'] == {
        '2325-2381': [0, -70],
        '2326-2381': [0, -70],
    }
    assert sorted(output['glyphs']) == [str(VIRTUAL_CODEPOINT_START + 1), str(VIRTUAL_CODEPOINT_START + 2)]


def test_position_main_default_offset(tmp_path, capsys):
    project_path = tmp_path / 'project.json'
    project_path.write_text(json.dumps(SNAPSHOT), encoding='utf-8')
    assert position.main(['--project', str(project_path), '--base', 'kha', '--mark', 'virama']) == 0
    output = json.loads(capsys.readouterr().out)
    assert output['markPositioning']['2326-2381'] == [0, -50]


def test_position_main_errors(tmp_path):
    project_path = tmp_path / 'project.json'
    project_path.write_text(json.dumps(SNAPSHOT), encoding='utf-8')
    with pytest.raises(SystemExit):
        position.main(['--project', str(project_path), '--base', 'ga', '--mark', 'virama'])
    with pytest.raises(SystemExit):
        position.main(['--project', str(project_path), '--base', 'ka', '--mark', 'virama', '--offset', '1'])
