import logging

import pytest

from citesmith.collection import (
    UNDEFINED_GROUP,
    Collection,
    CollectionStore,
    group_by,
    load_collection,
    sort_by,
)
from citesmith.entries import normalize_entry
from citesmith.exceptions import CollectionNotFoundError, NoDefaultCollectionError


def _collection(*records: tuple[str, dict[str, str]]) -> Collection:
    return Collection(
        (normalize_entry(key, "misc", fields) for key, fields in records),
        name="sample",
    )


def _years() -> Collection:
    return _collection(
        ("a", {"year": "2020"}),
        ("b", {"year": "2019"}),
        ("c", {}),
        ("d", {"year": "2020"}),
    )


def test_collection_keeps_last_duplicate(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="citesmith.collection"):
        collection = Collection(
            [
                normalize_entry("dup", "misc", {"title": "First"}),
                normalize_entry("other", "misc", {"title": "Other"}),
                normalize_entry("dup", "misc", {"title": "Second"}),
            ],
            name="dupes",
        )

    assert list(collection) == ["other", "dup"]
    assert collection["dup"].get("title") == "Second"
    assert any("Duplicate key 'dup'" in record.getMessage() for record in caplog.records)


def test_sort_by_is_stable_and_puts_missing_values_first() -> None:
    ordered = sort_by(_years(), "year")

    assert list(ordered) == ["c", "b", "a", "d"]


def test_sort_by_reverse_reverses_the_ascending_order() -> None:
    ordered = sort_by(_years(), "year", reverse=True)

    assert list(ordered) == ["d", "a", "b", "c"]


@pytest.mark.parametrize("field", ["year", "title", "missing"])
def test_sorting_a_sorted_collection_in_reverse_is_an_exact_reversal(field: str) -> None:
    collection = _collection(
        ("a", {"year": "2020", "title": "beta"}),
        ("b", {"year": "2019", "title": "Alpha"}),
        ("c", {"title": "beta"}),
        ("d", {"year": "2020"}),
        ("e", {"year": "2019", "title": "alpha"}),
    )

    ascending = sort_by(collection, field)
    descending = sort_by(ascending, field, reverse=True)

    assert list(descending) == list(reversed(list(ascending)))


def test_collection_methods_match_module_functions() -> None:
    collection = _years()

    assert list(collection.sorted_by("year", reverse=True)) == list(
        sort_by(collection, "year", reverse=True)
    )
    assert [group.value for group in collection.grouped_by("year")] == [
        group.value for group in group_by(collection, "year")
    ]


def test_sort_by_compares_lowercased_values() -> None:
    collection = _collection(
        ("x", {"title": "beta"}),
        ("y", {"title": "Alpha"}),
        ("z", {"title": "Gamma"}),
    )

    assert list(sort_by(collection, "title")) == ["y", "x", "z"]


def test_sort_by_does_not_mutate_the_source() -> None:
    collection = _years()
    sort_by(collection, "year")

    assert list(collection) == ["a", "b", "c", "d"]


def test_group_by_partitions_by_value_with_undefined_last() -> None:
    groups = group_by(_years(), "year")

    assert [group.value for group in groups] == ["2019", "2020", UNDEFINED_GROUP]
    assert [list(group.entries) for group in groups] == [["b"], ["a", "d"], ["c"]]


def test_group_by_reverse_keeps_undefined_last() -> None:
    groups = group_by(_years(), "year", reverse=True)

    assert [group.value for group in groups] == ["2020", "2019", UNDEFINED_GROUP]


def test_group_by_omits_empty_undefined_group() -> None:
    collection = _collection(("a", {"year": "2020"}), ("b", {"year": "2021"}))

    assert [group.value for group in group_by(collection, "year")] == ["2020", "2021"]


def test_group_by_membership_is_case_sensitive() -> None:
    collection = _collection(("a", {"keywords": "Widgets"}), ("b", {"keywords": "widgets"}))

    (group,) = group_by(collection, "keywords")

    assert group.value == "widgets"
    assert list(group.entries) == ["b"]


def test_load_collection_applies_load_time_order() -> None:
    payload = b"@misc{new, year = {2021}}\n@misc{old, year = {1999}}\n"

    collection = load_collection("refs", payload, sort_by_field="year")

    assert collection.name == "refs"
    assert list(collection) == ["old", "new"]


def test_store_resolves_default_and_named_collections() -> None:
    store = CollectionStore()
    store.load("first", "@misc{a, title = {A}}")
    store.load("second", "@misc{b, title = {B}}")

    assert store.names == ("first", "second")
    assert list(store.resolve(None, "second")) == ["b"]
    assert list(store.resolve("first")) == ["a"]

    explicit = store.get("first")
    assert store.resolve(explicit) is explicit


def test_store_reports_unknown_and_missing_default() -> None:
    store = CollectionStore([_years()])

    with pytest.raises(CollectionNotFoundError, match="available: sample"):
        store.get("nope")
    with pytest.raises(NoDefaultCollectionError):
        store.resolve(None)


def test_store_requires_named_collections() -> None:
    with pytest.raises(ValueError):
        CollectionStore().add(Collection())
