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

from attachment import AttachmentClass
from attachment import class_siblings
from attachment import find_applicable_class
from attachment import find_leader
from attachment import is_pair_eligible
from attachment import pair_class_key
from attachment import resolve_attachment_class
from attachment import side_siblings
from conftest import KHA
from conftest import NUKTA
from conftest import VIRAMA
from utils import ClassType


def test_leader_is_pair_relative():
    marks = AttachmentClass(['m1', 'm2'], except_pairs=['b1-m1'])
    assert find_leader(marks, ClassType.MARK, 'b1', {}) == 'm2'
    assert find_leader(marks, ClassType.MARK, 'b2', {}) == 'm1'
    bases = AttachmentClass(['b1', 'b2'], except_pairs=['b1-m1'])
    assert find_leader(bases, ClassType.BASE, 'm1', {}) == 'b2'
    assert find_leader(bases, ClassType.BASE, 'm2', {}) == 'b1'


def test_degenerate_leader():
    marks = AttachmentClass(['m1', 'm2'], except_pairs=['b1-m1', 'b1-m2'])
    assert find_leader(marks, ClassType.MARK, 'b1', {}) == 'm1'
    assert find_leader(AttachmentClass(['$empty']), ClassType.MARK, 'b1', {}) is None


def test_leader_follows_group_order():
    marks = AttachmentClass(['$signs', 'm0'])
    assert find_leader(marks, ClassType.MARK, 'b', {'signs': ['m2', 'm1']}) == 'm2'


def test_mark_class_takes_priority():
    mark_classes = [AttachmentClass(['virama', 'nukta'])]
    base_classes = [AttachmentClass(['ka', 'kha'])]
    resolution = resolve_attachment_class('kha', 'nukta', mark_classes, base_classes, {})
    assert resolution.active_class is mark_classes[0]
    assert resolution.class_type is ClassType.MARK
    assert resolution.leader == 'virama'
    assert not resolution.is_leader_for_this_pair
    assert not resolution.is_eligible_independent
    assert resolution.has_dual_context


def test_override():
    mark_classes = [AttachmentClass(['virama', 'nukta'])]
    base_classes = [AttachmentClass(['ka', 'kha'])]
    resolution = resolve_attachment_class('ka', 'nukta', mark_classes, base_classes, {}, ClassType.BASE)
    assert resolution.active_class is base_classes[0]
    assert resolution.class_type is ClassType.BASE
    assert resolution.leader == 'ka'
    assert resolution.is_leader_for_this_pair

    resolution = resolve_attachment_class('ka', 'nukta', mark_classes, [], {}, ClassType.BASE)
    assert resolution.class_type is ClassType.MARK
    resolution = resolve_attachment_class('ka', 'nukta', [], base_classes, {}, ClassType.MARK)
    assert resolution.class_type is ClassType.BASE


def test_no_class_is_independent():
    resolution = resolve_attachment_class('ka', 'nukta', None, None, {})
    assert resolution.active_class is None
    assert resolution.class_type is None
    assert resolution.leader is None
    assert resolution.is_eligible_independent
    assert not resolution.has_dual_context


def test_excepted_pair_is_independent():
    mark_classes = [AttachmentClass(['virama', 'nukta'], except_pairs=['ka-nukta'])]
    resolution = resolve_attachment_class('ka', 'nukta', mark_classes, None, {})
    assert resolution.active_class is mark_classes[0]
    assert resolution.leader == 'virama'
    assert resolution.is_eligible_independent


def test_applies_and_exceptions():
    groups = {'velars': ['ka', 'kha']}
    only_velars = AttachmentClass(['virama', 'nukta'], applies=['$velars'])
    not_kha = AttachmentClass(['virama', 'nukta'], exceptions=['kha'])
    assert find_applicable_class('nukta', 'ka', [only_velars], groups) == (0, only_velars)
    assert find_applicable_class('nukta', 'ga', [only_velars], groups) is None
    assert find_applicable_class('nukta', 'ka', [not_kha], groups) == (0, not_kha)
    assert find_applicable_class('nukta', 'kha', [not_kha], groups) is None


def test_first_member_class_is_the_only_candidate():
    first = AttachmentClass(['virama'], applies=['ga'])
    second = AttachmentClass(['virama', 'nukta'])
    assert find_applicable_class('virama', 'ka', [first, second], {}) is None
    assert resolve_attachment_class('ka', 'virama', [first, second], None, {}).is_eligible_independent


def test_empty_class_is_no_class():
    empty = AttachmentClass(['$missing'])
    resolution = resolve_attachment_class('ka', 'nukta', [empty], [empty], {})
    assert resolution.active_class is None
    assert resolution.is_eligible_independent


def test_is_pair_eligible():
    mark_classes = [AttachmentClass(['virama', 'nukta'], except_pairs=['kha-nukta'])]
    base_classes = [AttachmentClass(['ka', 'kha'])]
    assert is_pair_eligible('ka', 'virama', mark_classes, base_classes, {})
    assert not is_pair_eligible('ka', 'nukta', mark_classes, base_classes, {})
    assert not is_pair_eligible('kha', 'virama', mark_classes, base_classes, {})
    assert is_pair_eligible('kha', 'nukta', mark_classes, base_classes, {})
    assert is_pair_eligible('ga', 'acute', mark_classes, base_classes, {})


def test_pair_class_key():
    mark_classes = [AttachmentClass(['acute']), AttachmentClass(['virama', 'nukta'], except_pairs=['kha-nukta'])]
    base_classes = [AttachmentClass(['ka', 'kha'])]
    assert pair_class_key('ka', 'virama', mark_classes, base_classes, {}) == 'BC:0-MC:1'
    assert pair_class_key('kha', 'nukta', mark_classes, base_classes, {}) == 'BC:0-M:nukta'
    assert pair_class_key('ga', 'acute', mark_classes, base_classes, {}) == 'B:ga-MC:0'
    assert pair_class_key('ga', 'dot', mark_classes, base_classes, {}) == 'B:ga-M:dot'


def test_with_pair_linked():
    original = AttachmentClass(['virama', 'nukta'], name='signs', except_pairs=['ka-nukta'])
    unlinked = original.with_pair_linked('kha', 'nukta', False)
    assert unlinked.except_pairs == {'ka-nukta', 'kha-nukta'}
    assert original.except_pairs == {'ka-nukta'}
    linked = unlinked.with_pair_linked('ka', 'nukta', True)
    assert linked.except_pairs == {'kha-nukta'}
    assert linked.members == original.members
    assert linked.name == 'signs'
    assert original.with_pair_linked('ka', 'nukta', False) == original


def test_side_siblings():
    marks = AttachmentClass(['virama', 'nukta', 'acute'], except_pairs=['ka-nukta'])
    assert side_siblings(marks, ClassType.MARK, 'ka', {}) == ['virama', 'acute']
    assert side_siblings(marks, ClassType.MARK, 'kha', {}) == ['virama', 'nukta', 'acute']


def test_class_siblings(characters, glyphs):
    base_classes = [AttachmentClass(['ka', 'kha', 'ga', 'missing'])]
    resolution = resolve_attachment_class('ka', 'virama', None, base_classes, {})
    assert class_siblings(resolution, 'ka', 'virama', characters, glyphs, {}) == [(KHA, VIRAMA)]

    mark_classes = [AttachmentClass(['virama', 'nukta'], except_pairs=['ka-nukta'])]
    resolution = resolve_attachment_class('kha', 'virama', mark_classes, None, {})
    assert class_siblings(resolution, 'kha', 'virama', characters, glyphs, {}) == [(KHA, NUKTA)]
    resolution = resolve_attachment_class('ka', 'nukta', mark_classes, None, {})
    assert class_siblings(resolution, 'ka', 'nukta', characters, glyphs, {}) == []
    resolution = resolve_attachment_class('ka', 'virama', None, None, {})
    assert class_siblings(resolution, 'ka', 'virama', characters, glyphs, {}) == []
