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

from groups import expand_members
from groups import group_name
from groups import is_group_reference
from groups import is_in_list


@pytest.mark.parametrize('items', [
    [],
    ['a'],
    ['a', 'b', 'a'],
    ['c', 'b', 'a', 'b', 'c'],
])
def test_literal_names_are_deduplicated(items):
    assert expand_members(items, {}) == [*dict.fromkeys(items)]


def test_none_is_empty():
    assert expand_members(None, {}) == []


def test_nested_groups():
    groups = {'consonants': ['ka', '@aspirated'], 'aspirated': ['kha', 'gha']}
    assert expand_members(['$consonants', 'ga'], groups) == ['ka', 'kha', 'gha', 'ga']


def test_blank_items_and_whitespace():
    groups = {'g': [' x ', '']}
    assert expand_members(['  ', ' $g', 'y '], groups) == ['x', 'y']


def test_unknown_group_is_empty():
    assert expand_members(['$missing', 'a'], {}) == ['a']


@pytest.mark.parametrize('groups', [
    {'A': ['$B', 'a'], 'B': ['$A', 'b']},
    {'A': ['$A', 'a', 'b']},
    {'A': ['@B'], 'B': ['$C', 'b'], 'C': ['$A', 'a']},
])
def test_cycles_terminate(groups):
    assert set(expand_members(['$A'], groups)) == {'a', 'b'}


def test_group_referenced_twice_contributes_once():
    groups = {'g': ['a', 'b']}
    assert expand_members(['$g', 'c', '@g'], groups) == ['a', 'b', 'c']


def test_visited_groups_are_per_call():
    groups = {'g': ['a']}
    assert expand_members(['$g'], groups) == ['a']
    assert expand_members(['$g'], groups) == ['a']


def test_is_group_reference():
    assert is_group_reference('$g')
    assert is_group_reference(' @g')
    assert not is_group_reference('g$')
    assert group_name(' @g ') == 'g'


def test_is_in_list():
    groups = {'A': ['$B', 'a'], 'B': ['$A', 'b']}
    assert is_in_list('b', ['$A'], groups)
    assert is_in_list('a', ['x', '$B'], groups)
    assert not is_in_list('c', ['$A'], groups)
    assert not is_in_list('a', None, groups)
    assert not is_in_list('a', ['$missing'], groups)
