"""
Per-type comparison of two pages' structured data.
"""

from dataclasses import dataclass
from typing import List, Tuple

from pagediff.canonical import canonicalize
from pagediff.schemas import SchemaSet
from pagediff.structdiff import DiffEntry, diff


@dataclass(frozen=True)
class TypeComparison:
    type_key: str
    changes: Tuple[DiffEntry, ...]
    count_a: int
    count_b: int

    @property
    def identical(self) -> bool:
        return not self.changes

    def to_dict(self) -> dict:
        return {
            "type": self.type_key,
            "count_a": self.count_a,
            "count_b": self.count_b,
            "identical": self.identical,
            "changes": [change.to_dict() for change in self.changes],
        }


@dataclass(frozen=True)
class ComparisonReport:
    url_a: str
    url_b: str
    total_a: int
    total_b: int
    comparisons: Tuple[TypeComparison, ...] = ()
    warnings: Tuple[str, ...] = ()

    @property
    def all_types_identical(self) -> bool:
        return all(c.identical for c in self.comparisons)

    @property
    def type_counts(self) -> List[Tuple[str, int, int]]:
        return [(c.type_key, c.count_a, c.count_b) for c in self.comparisons]

    def to_dict(self) -> dict:
        return {
            "url_a": self.url_a,
            "url_b": self.url_b,
            "total_a": self.total_a,
            "total_b": self.total_b,
            "all_types_identical": self.all_types_identical,
            "types": [c.to_dict() for c in self.comparisons],
            "warnings": list(self.warnings),
        }


def compare_type(key: str, instances_a: Tuple, instances_b: Tuple) -> TypeComparison:
    # canonicalizing the instance list sorts it as a canonical array
    left = canonicalize(list(instances_a))
    right = canonicalize(list(instances_b))
    return TypeComparison(
        type_key=key,
        changes=tuple(diff(left, right)),
        count_a=len(instances_a),
        count_b=len(instances_b),
    )


def compare(set_a: SchemaSet, set_b: SchemaSet) -> ComparisonReport:
    """
    Compare every type key seen on either page.

    A type missing on one side is diffed against an empty list, so each
    of its instances shows up as an added or removed array element.
    """
    keys = sorted(set_a.by_type.keys() | set_b.by_type.keys())

    comparisons = tuple(
        compare_type(key, set_a.by_type.get(key, ()), set_b.by_type.get(key, ()))
        for key in keys
    )

    return ComparisonReport(
        url_a=set_a.url,
        url_b=set_b.url,
        total_a=set_a.count,
        total_b=set_b.count,
        comparisons=comparisons,
        warnings=set_a.errors + set_b.errors,
    )
