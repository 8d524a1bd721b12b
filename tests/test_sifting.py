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

import functools

from attachment import AttachmentClass
from attachment import pair_class_key
from sifting import Grouper
from sifting import group_pairs


def test_group_pairs_by_class_key():
    mark_classes = [AttachmentClass(['virama', 'nukta'], except_pairs=['kha-nukta'])]
    base_classes = [AttachmentClass(['ka', 'kha'])]
    key = functools.partial(pair_class_key, mark_classes=mark_classes, base_classes=base_classes, groups={})
    pairs = [
        ('ka', 'virama'),
        ('ka', 'nukta'),
        ('kha', 'nukta'),
        ('ga', 'virama'),
        ('kha', 'virama'),
        ('ga', 'acute'),
    ]
    grouper = group_pairs(pairs, lambda pair: key(*pair))
    assert grouper.representatives() == [('ka', 'virama'), ('kha', 'nukta'), ('ga', 'virama'), ('ga', 'acute')]
    assert grouper.counts() == {
        ('ka', 'virama'): 3,
        ('kha', 'nukta'): 1,
        ('ga', 'virama'): 1,
        ('ga', 'acute'): 1,
    }
    assert grouper.group_of(('kha', 'virama')) == [('ka', 'virama'), ('ka', 'nukta'), ('kha', 'virama')]


def test_grouper_skips_empty_groups():
    grouper = Grouper([['a', 'b'], [], ['c']])
    assert grouper.groups() == [['a', 'b'], ['c']]
    assert grouper.group_of('b') == ['a', 'b']
    assert grouper.group_of('d') is None
    assert grouper.representatives() == ['a', 'c']
    assert grouper.counts() == {'a': 2, 'c': 1}
