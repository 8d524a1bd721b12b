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

"""Expansion of member lists that refer to named groups.

A member list is a sequence of items. Each item is either a literal
glyph name or a reference to a group, written as the group’s name
prefixed with ``$`` or ``@``. A group is itself a member list, so groups
can nest. Group definitions come from the project and may be cyclic;
expansion always terminates, and a group reached a second time during
one expansion contributes nothing the second time. A reference to an
unknown group contributes nothing.
"""


from __future__ import annotations


__all__ = [
    'expand_members',
    'group_name',
    'is_group_reference',
    'is_in_list',
]


import logging
from typing import TYPE_CHECKING


from utils import GROUP_PREFIXES
from utils import OrderedSet


if TYPE_CHECKING:
    from collections.abc import Iterable
    from collections.abc import Mapping
    from collections.abc import Sequence


type Groups = Mapping[str, Sequence[str]]


log = logging.getLogger(__name__)


def is_group_reference(item: str) -> bool:
    """Returns whether a member list item refers to a group.

    Args:
        item: A member list item.
    """
    return item.strip().startswith(GROUP_PREFIXES)


def group_name(item: str) -> str:
    """Returns the name of the group a group reference refers to.

    Args:
        item: A group reference.
    """
    return item.strip()[1:]


def expand_members(
    items: Iterable[str] | None,
    groups: Groups,
) -> list[str]:
    """Expands a member list into the glyph names it denotes.

    Args:
        items: A member list, or ``None``, which is treated as empty.
        groups: The project’s groups, keyed by name without prefix.

    Returns:
        The deduplicated glyph names, in order of first appearance.
        Blank items are ignored.
    """
    result: OrderedSet[str] = OrderedSet()
    visited: set[str] = set()

    def expand(items: Iterable[str]) -> None:
        for item in items:
            item = item.strip()
            if not item:
                continue
            if not is_group_reference(item):
                result.add(item)
                continue
            name = group_name(item)
            if name in visited:
                continue
            visited.add(name)
            members = groups.get(name)
            if members is None:
                log.debug('Unknown group: %s', item)
                continue
            expand(members)

    if items:
        expand(items)
    return [*result]


def is_in_list(
    name: str,
    items: Iterable[str] | None,
    groups: Groups,
) -> bool:
    """Returns whether a member list denotes a glyph name.

    This is equivalent to ``name in expand_members(items, groups)`` but
    stops as soon as it finds the name.

    Args:
        name: A glyph name.
        items: A member list, or ``None``.
        groups: The project’s groups.
    """
    if not items:
        return False
    visited: set[str] = set()

    def search(items: Iterable[str]) -> bool:
        for item in items:
            item = item.strip()
            if item == name:
                return True
            if not is_group_reference(item):
                continue
            group = group_name(item)
            if group in visited:
                continue
            visited.add(group)
            members = groups.get(group)
            if members is not None and search(members):
                return True
        return False

    return search(items)
