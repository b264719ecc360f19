from pathlib import Path

import pytest

from citesmith.collection import Collection, CollectionStore, load_collection
from citesmith.config import KeyStyle
from citesmith.context import RenderContext


FIXTURE_BIB = Path(__file__).resolve().parent / "fixtures" / "bib" / "publications.bib"


@pytest.fixture
def publications() -> Collection:
    return load_collection(
        "publications",
        FIXTURE_BIB.read_text(encoding="utf-8"),
        source=FIXTURE_BIB,
    )


@pytest.fixture
def store(publications: Collection) -> CollectionStore:
    return CollectionStore([publications])


@pytest.fixture
def context(store: CollectionStore) -> RenderContext:
    return RenderContext(store=store, default="publications", keystyle=KeyStyle.CITEKEY)
