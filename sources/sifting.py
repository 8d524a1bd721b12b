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

__all__ = [
    'Grouper',
    'group_pairs',
]


import collections
from collections.abc import Callable
from collections.abc import Collection
from collections.abc import Hashable
from collections.abc import Iterable
from collections.abc import Mapping
from collections.abc import MutableMapping
from collections.abc import MutableSequence
from collections.abc import Sequence
from typing import Generic
from typing import Optional
from typing import TypeVar


_Group = list


_T = TypeVar('_T')


class Grouper(Generic[_T]):
    def __init__(self, groups: Collection[_Group[_T]]):
        self._groups: MutableSequence[_Group[_T]] = []
        self._group_by_item: MutableMapping[_T, _Group] = {}
        for group in groups:
            if group:
                self._add(group)

    def groups(self) -> Sequence[_Group[_T]]:
        return list(self._groups)

    def group_of(self, item: _T) -> Optional[_Group[_T]]:
        return self._group_by_item.get(item)

    def _add(self, group: _Group[_T]) -> None:
        self._groups.append(group)
        for item in group:
            self._group_by_item[item] = group

    def representatives(self) -> Sequence[_T]:
        """Returns the first item of each group, in group order.
        """
        return [group[0] for group in self._groups]

    def counts(self) -> Mapping[_T, int]:
        """Returns the size of each group, keyed by its representative.
        """
        return {group[0]: len(group) for group in self._groups}


def group_pairs(pairs: Iterable[_T], key: Callable[[_T], Hashable]) -> Grouper[_T]:
    """Groups pairs that share a key.

    Args:
        pairs: The pairs, in display order.
        key: A function returning a pair’s class key, such as one built
            on `attachment.pair_class_key`.

    Returns:
        A grouper whose groups are ordered by their first pair, each
        listing its pairs in order.
    """
    group_dict: MutableMapping[Hashable, _Group[_T]] = collections.defaultdict(list)
    for pair in pairs:
        group_dict[key(pair)].append(pair)
    return Grouper(group_dict.values())
