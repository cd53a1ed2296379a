from __future__ import annotations

from pagediff.compare import compare
from pagediff.schemas import SchemaSet, group_by_type
from pagediff.structdiff import DiffKind, array_change, edited, removed


def _set(url: str, *instances, errors=()) -> SchemaSet:
    return SchemaSet(url=url, schemas=instances, by_type=group_by_type(instances), errors=errors)


def test_single_field_edit() -> None:
    report = compare(
        _set("a", {"@type": "Product", "name": "Old"}),
        _set("b", {"@type": "Product", "name": "New"}),
    )

    (product,) = report.comparisons
    assert product.type_key == "Product"
    assert product.changes == (edited((0, "name"), "Old", "New"),)
    assert (product.count_a, product.count_b) == (1, 1)
    assert report.all_types_identical is False


def test_type_missing_on_one_side_is_a_full_removal() -> None:
    report = compare(_set("a", {"name": "X", "@type": "Product"}), _set("b"))

    (product,) = report.comparisons
    assert (product.count_a, product.count_b) == (1, 0)
    assert product.changes == (array_change((), 0, removed((), {"@type": "Product", "name": "X"})),)
    assert report.total_a == 1 and report.total_b == 0
    assert not report.all_types_identical


def test_type_only_on_right_side_is_added() -> None:
    report = compare(_set("a"), _set("b", {"@type": "FAQPage"}, {"@type": "FAQPage", "x": 1}))

    (faq,) = report.comparisons
    assert (faq.count_a, faq.count_b) == (0, 2)
    assert [c.item.kind for c in faq.changes] == [DiffKind.ADDED, DiffKind.ADDED]
    assert [c.index for c in faq.changes] == [0, 1]


def test_instance_order_does_not_matter() -> None:
    first = {"@type": "Product", "name": "A", "offers": [{"price": 1}, {"price": 2}]}
    second = {"@type": "Product", "name": "B"}

    report = compare(
        _set("a", first, second),
        _set("b", second, {"offers": [{"price": 2}, {"price": 1}], "name": "A", "@type": "Product"}),
    )

    assert report.comparisons[0].changes == ()
    assert report.all_types_identical


def test_equal_counts_with_different_content_are_not_identical() -> None:
    report = compare(
        _set("a", {"@type": "Offer", "price": 1}, {"@type": "Product"}),
        _set("b", {"@type": "Offer", "price": 2}, {"@type": "Product"}),
    )

    by_key = {c.type_key: c for c in report.comparisons}
    assert by_key["Offer"].count_a == by_key["Offer"].count_b == 1
    assert not by_key["Offer"].identical
    assert by_key["Product"].identical
    assert not report.all_types_identical


def test_union_of_type_keys_in_sorted_order() -> None:
    report = compare(
        _set("a", {"@type": "WebSite"}, {"@type": ["Product", "Book"]}),
        _set("b", {"@type": "Organization"}, {"@type": ["Book", "Product"]}),
    )

    assert [c.type_key for c in report.comparisons] == ["Book, Product", "Organization", "WebSite"]
    assert report.type_counts == [("Book, Product", 1, 1), ("Organization", 0, 1), ("WebSite", 1, 0)]


def test_warnings_from_both_sides_are_kept() -> None:
    report = compare(_set("a", errors=("bad a",)), _set("b", errors=("bad b",)))
    assert report.warnings == ("bad a", "bad b")
    assert report.comparisons == ()
    assert report.all_types_identical


def test_to_dict() -> None:
    data = compare(
        _set("a", {"@type": "Product", "name": "Old"}),
        _set("b", {"@type": "Product", "name": "New"}),
    ).to_dict()

    assert data["url_a"] == "a"
    assert data["all_types_identical"] is False
    assert data["types"][0]["type"] == "Product"
    assert data["types"][0]["changes"] == [
        {"kind": "E", "path": [0, "name"], "lhs": "Old", "rhs": "New"}
    ]
