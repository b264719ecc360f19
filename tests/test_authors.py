import pytest

from citesmith.styles.authors import (
    format_author_full,
    format_author_initials,
    format_author_list,
    join_authors,
    split_authors,
)


def test_split_authors_uses_literal_and_separator() -> None:
    assert split_authors("Smith, John and Doe, Jane") == ["Smith, John", "Doe, Jane"]
    assert split_authors("Anderson, Sandra") == ["Anderson, Sandra"]


@pytest.mark.parametrize(
    ("author", "expected"),
    [
        ("Smith, John", "John Smith"),
        ("Donald E. Knuth", "Donald E. Knuth"),
        ("Plato", "Plato"),
        ("Ford, Jr., Henry", "Ford, Jr., Henry"),
    ],
)
def test_format_author_full(author: str, expected: str) -> None:
    assert format_author_full(author) == expected


@pytest.mark.parametrize(
    ("author", "expected"),
    [
        ("Smith, John", "J. Smith"),
        ("Park, Min-jun", "M. Park"),
        ("Donald E. Knuth", "D. E. Knuth"),
        ("John Smith", "J. Smith"),
        ("Plato", "Plato"),
        ("Ford, Jr., Henry", "Ford, Jr., Henry"),
    ],
)
def test_format_author_initials(author: str, expected: str) -> None:
    assert format_author_initials(author) == expected


def test_join_authors_uses_oxford_comma_for_three_or_more() -> None:
    assert join_authors([]) == ""
    assert join_authors(["A"]) == "A"
    assert join_authors(["A", "B"]) == "A and B"
    assert join_authors(["A", "B", "C"]) == "A, B, and C"


def test_format_author_list_applies_formatter_per_author() -> None:
    value = "Lee, Ann and Park, Min-jun and Chen, Wei"

    assert format_author_list(value, format_author_full) == "Ann Lee, Min-jun Park, and Wei Chen"
    assert format_author_list(value, format_author_initials) == "A. Lee, M. Park, and W. Chen"
