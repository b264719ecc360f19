from pathlib import Path
import textwrap

from pydantic import ValidationError
import pytest

from citesmith.config import BibliographyConfig, KeyStyle


def _write(tmp_path: Path, name: str, content: str) -> Path:
    path = tmp_path / name
    path.write_text(textwrap.dedent(content).strip() + "\n", encoding="utf-8")
    return path


def test_defaults() -> None:
    config = BibliographyConfig()

    assert config.collections == {}
    assert config.default is None
    assert config.style == "default"
    assert config.keystyle is KeyStyle.CITEKEY
    assert config.sort_by is None
    assert config.reverse_order is False


def test_default_falls_back_to_first_collection() -> None:
    config = BibliographyConfig(
        collections={"publications": "bib/pubs.bib", "talks": "bib/talks.bib"}
    )

    assert config.default == "publications"
    assert config.source_paths() == {
        "publications": "bib/pubs.bib",
        "talks": "bib/talks.bib",
    }


def test_unknown_default_is_rejected() -> None:
    with pytest.raises(ValidationError, match="not a configured collection"):
        BibliographyConfig(collections={"a": "a.bib"}, default="b")


def test_unknown_style_is_rejected() -> None:
    with pytest.raises(ValidationError, match="Unsupported bibliography style"):
        BibliographyConfig(style="harvard")


def test_unknown_keys_are_rejected() -> None:
    with pytest.raises(ValidationError):
        BibliographyConfig.model_validate({"colour": "red"})


def test_camel_case_aliases_are_accepted() -> None:
    config = BibliographyConfig.model_validate({"sortBy": "year", "reverseOrder": True})

    assert config.sort_by == "year"
    assert config.reverse_order is True


@pytest.mark.parametrize(
    ("payload", "expected"),
    [
        ({"numbered": True}, KeyStyle.NUMBERED),
        ({"numbered": False}, KeyStyle.CITEKEY),
        ({"numbered": True, "keystyle": "citekey"}, KeyStyle.CITEKEY),
        ({"keystyle": "numbered"}, KeyStyle.NUMBERED),
    ],
)
def test_keystyle_accepts_legacy_numbered_flag(payload: dict, expected: KeyStyle) -> None:
    assert BibliographyConfig.model_validate(payload).keystyle is expected


def test_from_yaml_reads_nested_section(tmp_path: Path) -> None:
    config_path = _write(
        tmp_path,
        "citesmith.yml",
        """
        bibliography:
          collections:
            refs: refs.bib
          style: ieee
          keystyle: numbered
          sortBy: year
        """,
    )

    config = BibliographyConfig.from_yaml(config_path)

    assert config.default == "refs"
    assert config.style == "ieee"
    assert config.keystyle is KeyStyle.NUMBERED
    assert config.sort_by == "year"


def test_from_yaml_rejects_non_mapping(tmp_path: Path) -> None:
    config_path = _write(tmp_path, "broken.yml", "- just\n- a list\n")

    with pytest.raises(ValueError, match="must contain a mapping"):
        BibliographyConfig.from_yaml(config_path)
