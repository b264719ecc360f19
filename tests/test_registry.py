from citesmith.entries import normalize_entry
from citesmith.registry import CitationRegistry


def test_registry_numbers_in_first_citation_order() -> None:
    registry = CitationRegistry()
    first = registry.register("smith2020", normalize_entry("smith2020", "article", {}))
    second = registry.register("lee2019", normalize_entry("lee2019", "inproceedings", {}))
    again = registry.register("smith2020")

    assert (first.number, second.number) == (1, 2)
    assert again is first
    assert registry.keys() == ["smith2020", "lee2019"]
    assert registry.number("lee2019") == 2
    assert registry.number("unknown") is None


def test_registry_counts_unresolved_keys() -> None:
    registry = CitationRegistry()
    missing = registry.register("ghost")
    found = registry.register("real", normalize_entry("real", "misc", {}))

    assert missing.missing
    assert not found.missing
    assert found.number == 2
    assert list(registry.to_collection("cited")) == ["real"]


def test_registry_clear_restarts_numbering() -> None:
    registry = CitationRegistry()
    registry.register("a")
    registry.register("b")
    registry.clear()

    assert len(registry) == 0
    assert "a" not in registry
    assert registry.register("b").number == 1
