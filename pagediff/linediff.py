"""
Line-oriented diff of two formatted HTML strings.
"""

import difflib
from dataclasses import dataclass
from typing import List, Sequence, Tuple


@dataclass(frozen=True)
class Change:
    """One run of consecutive lines sharing a status."""
    value: str
    added: bool = False
    removed: bool = False

    @property
    def count(self) -> int:
        return len(self.value.splitlines())


def _line_key(line: str, ignore_whitespace: bool) -> str:
    return " ".join(line.split()) if ignore_whitespace else line


def _split(text: str, ignore_whitespace: bool) -> Tuple[str, List[str]]:
    """
    Split ``text`` into a leading blank prefix and the units to match.

    With ``ignore_whitespace`` a whitespace-only line rides along with the
    line before it, so it never takes part in matching but still appears
    in the output. Blank lines before the first content line form the prefix.
    """
    lines = text.splitlines(keepends=True)
    if not ignore_whitespace:
        return "", lines

    prefix = ""
    units: List[str] = []
    for line in lines:
        if line.strip():
            units.append(line)
        elif units:
            units[-1] += line
        else:
            prefix += line
    return prefix, units


def diff_lines(text_a: str, text_b: str, ignore_whitespace: bool = True) -> List[Change]:
    """
    Diff two texts line by line.

    With ``ignore_whitespace`` lines are compared with runs of whitespace
    collapsed and whitespace-only lines are skipped when matching, so
    indentation and blank-line churn never shows up as a change. Every
    line of ``text_a`` lands in an unchanged or removed run and every line
    of ``text_b`` in an unchanged or added one, except that unchanged runs
    carry the lines of ``text_a`` only.
    """
    prefix_a, lines_a = _split(text_a, ignore_whitespace)
    _, lines_b = _split(text_b, ignore_whitespace)

    changes: List[Change] = []
    if prefix_a:
        _push(changes, Change(prefix_a))

    matcher = difflib.SequenceMatcher(
        None,
        [_line_key(line, ignore_whitespace) for line in lines_a],
        [_line_key(line, ignore_whitespace) for line in lines_b],
        autojunk=False,
    )

    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            _push(changes, Change("".join(lines_a[i1:i2])))
            continue
        if i2 > i1:
            _push(changes, Change("".join(lines_a[i1:i2]), removed=True))
        if j2 > j1:
            _push(changes, Change("".join(lines_b[j1:j2]), added=True))

    return changes


def _push(changes: List[Change], change: Change) -> None:
    """Append, merging with the previous run when the status matches."""
    if changes:
        last = changes[-1]
        if last.added == change.added and last.removed == change.removed:
            changes[-1] = Change(_join(last.value, change.value), last.added, last.removed)
            return
    changes.append(change)


def _join(head: str, tail: str) -> str:
    if head and not head.endswith("\n"):
        head += "\n"
    return head + tail


def is_identical(changes: Sequence[Change]) -> bool:
    return not any(c.added or c.removed for c in changes)
