"""
Structural diff between two canonical JSON values.

Entries follow four kinds:

    ADDED    key present only on the right
    REMOVED  key present only on the left
    EDITED   same location, different scalar or different kind
    ARRAY    element change inside an array; ``index`` locates it and
             ``item`` carries the nested ADDED / REMOVED / EDITED entry

Arrays are compared position by position. Ordering is not ignored here:
both operands must already be canonical (see ``pagediff.canonical``).
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple, Union

from pagediff.canonical import Json, JsonKind, json_equal, kind_of

PathKey = Union[str, int]
Path = Tuple[PathKey, ...]

_MISSING = object()


class DiffKind(Enum):
    ADDED = "N"
    REMOVED = "D"
    EDITED = "E"
    ARRAY = "A"


@dataclass(frozen=True)
class DiffEntry:
    kind: DiffKind
    path: Path = ()
    lhs: Json = None
    rhs: Json = None
    index: Optional[int] = None
    item: Optional["DiffEntry"] = None

    def to_dict(self) -> dict:
        data = {"kind": self.kind.value, "path": list(self.path)}
        if self.kind is DiffKind.ARRAY:
            data["index"] = self.index
            data["item"] = self.item.to_dict() if self.item is not None else None
            return data
        if self.kind is not DiffKind.ADDED:
            data["lhs"] = self.lhs
        if self.kind is not DiffKind.REMOVED:
            data["rhs"] = self.rhs
        return data


def added(path: Path, value: Json) -> DiffEntry:
    return DiffEntry(DiffKind.ADDED, path, rhs=value)


def removed(path: Path, value: Json) -> DiffEntry:
    return DiffEntry(DiffKind.REMOVED, path, lhs=value)


def edited(path: Path, lhs: Json, rhs: Json) -> DiffEntry:
    return DiffEntry(DiffKind.EDITED, path, lhs=lhs, rhs=rhs)


def array_change(path: Path, index: int, item: DiffEntry) -> DiffEntry:
    return DiffEntry(DiffKind.ARRAY, path, index=index, item=item)


def diff(lhs: Json, rhs: Json) -> List[DiffEntry]:
    """
    Return every difference between ``lhs`` and ``rhs``.

    The result is empty exactly when the values are structurally equal.
    """
    changes: List[DiffEntry] = []
    _walk(lhs, rhs, (), changes)
    return changes


def _walk(lhs: Json, rhs: Json, path: Path, changes: List[DiffEntry]) -> None:
    kind = kind_of(lhs)

    if kind is not kind_of(rhs):
        changes.append(edited(path, lhs, rhs))
    elif kind is JsonKind.OBJECT:
        _walk_object(lhs, rhs, path, changes)
    elif kind is JsonKind.ARRAY:
        _walk_array(lhs, rhs, path, changes)
    elif lhs != rhs:
        changes.append(edited(path, lhs, rhs))


def _walk_object(lhs: dict, rhs: dict, path: Path, changes: List[DiffEntry]) -> None:
    for key in sorted(lhs.keys() | rhs.keys()):
        left = lhs.get(key, _MISSING)
        right = rhs.get(key, _MISSING)

        if right is _MISSING:
            changes.append(removed(path + (key,), left))
        elif left is _MISSING:
            changes.append(added(path + (key,), right))
        else:
            _walk(left, right, path + (key,), changes)


def _walk_array(lhs: list, rhs: list, path: Path, changes: List[DiffEntry]) -> None:
    common = min(len(lhs), len(rhs))

    for i in range(common):
        left, right = lhs[i], rhs[i]
        kind = kind_of(left)

        # containers of the same shape: report what changed inside them
        if kind is kind_of(right) and kind in (JsonKind.OBJECT, JsonKind.ARRAY):
            _walk(left, right, path + (i,), changes)
        elif not json_equal(left, right):
            changes.append(array_change(path, i, edited((), left, right)))

    for i in range(common, len(lhs)):
        changes.append(array_change(path, i, removed((), lhs[i])))

    for i in range(common, len(rhs)):
        changes.append(array_change(path, i, added((), rhs[i])))
