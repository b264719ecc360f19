"""Configuration models for the bibliography engine.

BibliographyConfig

`collections` (`dict[str, Path]`)
: Mapping of logical collection names to BibTeX source paths. Paths are
  matched against the keys of the pipeline file map (or MkDocs source paths).

`default` (`str | None`)
: Collection used by citations that do not name one. Falls back to the first
  configured collection.

`style` (`str`)
: Rendering style, `default` or `ieee`.

`keystyle` (`KeyStyle`)
: `citekey` shows the citation key in links and bibliography markers,
  `numbered` shows the order of first citation. The legacy boolean
  `numbered: true` option is accepted as an alias.

`sort_by` (`str | None`)
: Field used to order every collection once at load time. Also accepted as
  `sortBy`.

`reverse_order` (`bool`)
: Reverse the load-time order. Also accepted as `reverseOrder`.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
import yaml

from .styles import get_style


class KeyStyle(str, Enum):
    """How citation links and bibliography markers identify an entry."""

    CITEKEY = "citekey"
    NUMBERED = "numbered"


class BibliographyConfig(BaseModel):
    """Options supplied once when the engine is set up."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    collections: dict[str, Path] = Field(default_factory=dict)
    default: str | None = None
    style: str = "default"
    keystyle: KeyStyle = KeyStyle.CITEKEY
    sort_by: str | None = Field(default=None, alias="sortBy")
    reverse_order: bool = Field(default=False, alias="reverseOrder")

    @model_validator(mode="before")
    @classmethod
    def accept_legacy_numbered(cls, data: Any) -> Any:
        """Translate the boolean ``numbered`` flag into ``keystyle``."""
        if isinstance(data, dict) and "numbered" in data:
            data = dict(data)
            numbered = data.pop("numbered")
            if "keystyle" not in data:
                data["keystyle"] = KeyStyle.NUMBERED if numbered else KeyStyle.CITEKEY
        return data

    @field_validator("style")
    @classmethod
    def check_style(cls, value: str) -> str:
        return get_style(value).name

    @model_validator(mode="after")
    def resolve_default(self) -> BibliographyConfig:
        """Fall back to the first collection and reject unknown defaults."""
        if self.default is None and self.collections:
            self.default = next(iter(self.collections))
        if self.default is not None and self.default not in self.collections:
            raise ValueError(
                f"Default collection '{self.default}' is not a configured collection."
            )
        return self

    @classmethod
    def from_yaml(cls, path: Path | str) -> BibliographyConfig:
        """Load a configuration file, optionally nested under ``bibliography``."""
        with Path(path).open("r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle) or {}
        if not isinstance(payload, dict):
            raise ValueError(f"Configuration file '{path}' must contain a mapping.")
        section = payload.get("bibliography", payload)
        return cls.model_validate(section)

    def source_paths(self) -> dict[str, str]:
        """Return collection sources as POSIX strings keyed by collection name."""
        return {name: path.as_posix() for name, path in self.collections.items()}


__all__ = ["BibliographyConfig", "KeyStyle"]
