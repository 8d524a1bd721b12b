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

"""Attachment classes and their resolution for a pair.

An attachment class is a set of glyphs on one side of a base and mark
pair that the author wants positioned alike. A mark class groups marks;
its counterparts are bases. A base class groups bases; its counterparts
are marks.

For a given pair, each side has at most one class: the first class in
the project’s list whose members include that side’s glyph, as long as
the class applies to the pair’s counterpart. When both sides have a
class, the mark class governs the pair unless the caller overrides the
choice.

The leader of a class is relative to a counterpart. It is the first
member that, paired with the counterpart, is not one of the class’s
excepted pairs.
"""


from __future__ import annotations


__all__ = [
    'AttachmentClass',
    'ClassResolution',
    'class_siblings',
    'find_applicable_class',
    'find_leader',
    'find_member_class',
    'is_pair_eligible',
    'pair_class_key',
    'resolve_attachment_class',
    'side_siblings',
]


import logging
from typing import Final
from typing import NamedTuple
from typing import Self
from typing import TYPE_CHECKING
from typing import override


from glyphs import is_glyph_drawn
from groups import expand_members
from groups import is_in_list
from utils import ClassType
from utils import pair_name_key


if TYPE_CHECKING:
    from collections.abc import Iterable
    from collections.abc import Mapping
    from collections.abc import Sequence

    from glyphs import Character
    from glyphs import GlyphData
    from groups import Groups


log = logging.getLogger(__name__)


class AttachmentClass:
    """An equivalence class of glyphs on one side of a pair.

    Attachment classes are immutable.

    Attributes:
        members: The member list. Its first glyph is the default
            leader.
        name: A name for diagnostics, or ``None``.
        applies: If nonempty, the member list of the only counterparts
            this class applies to.
        exceptions: The member list of counterparts this class does not
            apply to.
        except_pairs: The name keys of pairs that this class does not
            synchronize, as produced by `utils.pair_name_key`.
    """

    def __init__(
        self,
        members: Iterable[str],
        *,
        name: str | None = None,
        applies: Iterable[str] | None = None,
        exceptions: Iterable[str] | None = None,
        except_pairs: Iterable[str] = (),
    ) -> None:
        self.members: Final = tuple(members)
        self.name: Final = name
        self.applies: Final = tuple(applies or ())
        self.exceptions: Final = tuple(exceptions or ())
        self.except_pairs: Final = frozenset(except_pairs)

    @override
    def __repr__(self) -> str:
        return f'AttachmentClass({self.members!r}, name={self.name!r})'

    @override
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AttachmentClass):
            return NotImplemented
        return (self.members == other.members
            and self.name == other.name
            and self.applies == other.applies
            and self.exceptions == other.exceptions
            and self.except_pairs == other.except_pairs
        )

    @override
    def __hash__(self) -> int:
        return hash((self.members, self.name, self.applies, self.exceptions, self.except_pairs))

    def applies_to(self, counterpart_name: str, groups: Groups) -> bool:
        """Returns whether this class applies to pairs with a given
        counterpart.

        Args:
            counterpart_name: The name of the glyph on the other side of
                the pair.
            groups: The project’s groups.
        """
        if self.applies and not is_in_list(counterpart_name, self.applies, groups):
            return False
        return not is_in_list(counterpart_name, self.exceptions, groups)

    def is_excepted(self, base_name: str, mark_name: str) -> bool:
        """Returns whether a pair is one of this class’s excepted pairs.

        Args:
            base_name: The base’s name.
            mark_name: The mark’s name.
        """
        return pair_name_key(base_name, mark_name) in self.except_pairs

    def with_pair_linked(self, base_name: str, mark_name: str, linked: bool) -> Self:
        """Returns a copy of this class with a pair linked or unlinked.

        A linked pair follows its class. An unlinked pair is one of the
        class’s excepted pairs and is positioned independently.

        Args:
            base_name: The base’s name.
            mark_name: The mark’s name.
            linked: Whether the pair should be linked.
        """
        key = pair_name_key(base_name, mark_name)
        except_pairs = self.except_pairs - {key} if linked else self.except_pairs | {key}
        return type(self)(
            self.members,
            name=self.name,
            applies=self.applies,
            exceptions=self.exceptions,
            except_pairs=except_pairs,
        )


def _substitute(class_type: ClassType, member: str, counterpart_name: str) -> tuple[str, str]:
    match class_type:
        case ClassType.MARK:
            return counterpart_name, member
        case ClassType.BASE:
            return member, counterpart_name


def find_member_class(
    name: str,
    classes: Sequence[AttachmentClass] | None,
    groups: Groups,
) -> tuple[int, AttachmentClass] | None:
    """Finds the first class that has a glyph as a member.

    Args:
        name: The glyph’s name.
        classes: The classes of one side.
        groups: The project’s groups.

    Returns:
        The index and the class, or ``None`` if no class has the glyph.
    """
    for index, attachment_class in enumerate(classes or ()):
        if is_in_list(name, attachment_class.members, groups):
            return index, attachment_class
    return None


def find_applicable_class(
    name: str,
    counterpart_name: str,
    classes: Sequence[AttachmentClass] | None,
    groups: Groups,
) -> tuple[int, AttachmentClass] | None:
    """Finds the class of one side of a pair.

    Only the first class with the glyph as a member is considered. If
    it does not apply to the counterpart, the side has no class.

    Args:
        name: The name of the glyph on the side.
        counterpart_name: The name of the glyph on the other side.
        classes: The classes of the side.
        groups: The project’s groups.

    Returns:
        The index and the class, or ``None``.
    """
    found = find_member_class(name, classes, groups)
    if found is None:
        return None
    if not found[1].applies_to(counterpart_name, groups):
        log.debug('%r does not apply to %s', found[1], counterpart_name)
        return None
    return found


def find_leader(
    attachment_class: AttachmentClass,
    class_type: ClassType,
    counterpart_name: str,
    groups: Groups,
) -> str | None:
    """Finds the leader of a class for a counterpart.

    Args:
        attachment_class: The class.
        class_type: Which side of the pair the class covers.
        counterpart_name: The name of the glyph on the other side.
        groups: The project’s groups.

    Returns:
        The first member that forms a pair with the counterpart that is
        not excepted. If every member is excepted, the first member. If
        the class has no members, ``None``.
    """
    members = expand_members(attachment_class.members, groups)
    if not members:
        return None
    for member in members:
        if not attachment_class.is_excepted(*_substitute(class_type, member, counterpart_name)):
            return member
    log.debug('Every member of %r is excepted for %s; falling back to %s', attachment_class, counterpart_name, members[0])
    return members[0]


class ClassResolution(NamedTuple):
    """Which attachment class governs a pair, and the pair’s role in it.
    """

    #: The governing class, or ``None`` if no class governs the pair.
    active_class: AttachmentClass | None

    #: Which side `active_class` covers, or ``None`` if there is no
    #: active class.
    class_type: ClassType | None

    #: The leader of `active_class` for the pair’s counterpart, or
    #: ``None`` if there is no active class.
    leader: str | None

    #: Whether the pair’s glyph on the governed side is the leader.
    is_leader_for_this_pair: bool

    #: Whether the pair is positioned on its own, either because it is
    #: excepted from the active class or because no class governs it.
    is_eligible_independent: bool

    #: Whether both sides have a class that applies to the pair.
    has_dual_context: bool


def resolve_attachment_class(
    base_name: str,
    mark_name: str,
    mark_classes: Sequence[AttachmentClass] | None,
    base_classes: Sequence[AttachmentClass] | None,
    groups: Groups,
    override: ClassType | None = None,
) -> ClassResolution:
    """Resolves the attachment class that governs a pair.

    Args:
        base_name: The base’s name.
        mark_name: The mark’s name.
        mark_classes: The project’s mark classes.
        base_classes: The project’s base classes.
        groups: The project’s groups.
        override: The side to prefer. It is ignored if that side has no
            class. By default, the mark side is preferred.
    """
    mark_match = find_applicable_class(mark_name, base_name, mark_classes, groups)
    base_match = find_applicable_class(base_name, mark_name, base_classes, groups)
    has_dual_context = mark_match is not None and base_match is not None
    if override is ClassType.BASE and base_match is not None:
        class_type, (_, active_class) = ClassType.BASE, base_match
    elif mark_match is not None:
        class_type, (_, active_class) = ClassType.MARK, mark_match
    elif base_match is not None:
        class_type, (_, active_class) = ClassType.BASE, base_match
    else:
        return ClassResolution(None, None, None, False, True, has_dual_context)
    counterpart_name = base_name if class_type is ClassType.MARK else mark_name
    leader = find_leader(active_class, class_type, counterpart_name, groups)
    if leader is None:
        return ClassResolution(None, None, None, False, True, has_dual_context)
    governed_name = mark_name if class_type is ClassType.MARK else base_name
    return ClassResolution(
        active_class,
        class_type,
        leader,
        governed_name == leader,
        active_class.is_excepted(base_name, mark_name),
        has_dual_context,
    )


def is_pair_eligible(
    base_name: str,
    mark_name: str,
    mark_classes: Sequence[AttachmentClass] | None,
    base_classes: Sequence[AttachmentClass] | None,
    groups: Groups,
) -> bool:
    """Returns whether a pair should be positioned on its own.

    A pair is eligible unless, on some side, a class applies to it, does
    not except it, and has a different leader for its counterpart. The
    mark side is checked first; a pair excepted on the mark side is
    eligible regardless of the base side.

    Args:
        base_name: The base’s name.
        mark_name: The mark’s name.
        mark_classes: The project’s mark classes.
        base_classes: The project’s base classes.
        groups: The project’s groups.
    """
    for class_type, name, counterpart_name, classes in [
        (ClassType.MARK, mark_name, base_name, mark_classes),
        (ClassType.BASE, base_name, mark_name, base_classes),
    ]:
        found = find_applicable_class(name, counterpart_name, classes, groups)
        if found is None:
            continue
        attachment_class = found[1]
        if attachment_class.is_excepted(base_name, mark_name):
            return True
        leader = find_leader(attachment_class, class_type, counterpart_name, groups)
        if leader is not None and leader != name:
            return False
    return True


def pair_class_key(
    base_name: str,
    mark_name: str,
    mark_classes: Sequence[AttachmentClass] | None,
    base_classes: Sequence[AttachmentClass] | None,
    groups: Groups,
) -> str:
    """Returns a key that is shared by pairs positioned alike.

    Each side contributes ``BC:<index>`` or ``MC:<index>`` if a class at
    that index applies to the pair and does not except it, and
    ``B:<name>`` or ``M:<name>`` otherwise.

    Args:
        base_name: The base’s name.
        mark_name: The mark’s name.
        mark_classes: The project’s mark classes.
        base_classes: The project’s base classes.
        groups: The project’s groups.
    """
    base_key = f'B:{base_name}'
    base_match = find_applicable_class(base_name, mark_name, base_classes, groups)
    if base_match is not None and not base_match[1].is_excepted(base_name, mark_name):
        base_key = f'BC:{base_match[0]}'
    mark_key = f'M:{mark_name}'
    mark_match = find_applicable_class(mark_name, base_name, mark_classes, groups)
    if mark_match is not None and not mark_match[1].is_excepted(base_name, mark_name):
        mark_key = f'MC:{mark_match[0]}'
    return f'{base_key}-{mark_key}'


def side_siblings(
    attachment_class: AttachmentClass,
    class_type: ClassType,
    counterpart_name: str,
    groups: Groups,
) -> list[str]:
    """Returns the members of a class that follow it for a counterpart.

    Args:
        attachment_class: The class.
        class_type: Which side of the pair the class covers.
        counterpart_name: The name of the glyph on the other side.
        groups: The project’s groups.

    Returns:
        The members, in order, except those forming an excepted pair with
        the counterpart.
    """
    return [
        member
        for member in expand_members(attachment_class.members, groups)
        if not attachment_class.is_excepted(*_substitute(class_type, member, counterpart_name))
    ]


def class_siblings(
    resolution: ClassResolution,
    base_name: str,
    mark_name: str,
    characters: Mapping[str, Character],
    glyphs: Mapping[int, GlyphData],
    groups: Groups,
) -> list[tuple[Character, Character]]:
    """Returns the pairs that follow a pair through its active class.

    Args:
        resolution: The resolution of the pair.
        base_name: The base’s name.
        mark_name: The mark’s name.
        characters: The project’s characters, keyed by name.
        glyphs: The drawn glyphs, keyed by code point.
        groups: The project’s groups.

    Returns:
        The pairs formed by substituting each non-excepted member of the
        active class on its side, other than the pair itself, whose
        glyphs have code points and are drawn. The result is empty if
        the pair has no active class or is excepted from it.
    """
    if (resolution.active_class is None
        or resolution.class_type is None
        or resolution.is_eligible_independent
    ):
        return []
    counterpart_name = base_name if resolution.class_type is ClassType.MARK else mark_name
    siblings = []
    for member in side_siblings(resolution.active_class, resolution.class_type, counterpart_name, groups):
        sibling_base_name, sibling_mark_name = _substitute(resolution.class_type, member, counterpart_name)
        if (sibling_base_name, sibling_mark_name) == (base_name, mark_name):
            continue
        base = characters.get(sibling_base_name)
        mark = characters.get(sibling_mark_name)
        if (base is None
            or mark is None
            or base.unicode is None
            or mark.unicode is None
            or not is_glyph_drawn(glyphs.get(base.unicode))
            or not is_glyph_drawn(glyphs.get(mark.unicode))
        ):
            continue
        siblings.append((base, mark))
    return siblings
