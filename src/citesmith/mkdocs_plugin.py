"""MkDocs plugin citing BibTeX references from Markdown pages.

```yaml
plugins:
  - citesmith:
      collections:
        publications: bib/publications.bib
      default: publications
      style: ieee
      keystyle: numbered
      sort_by: year
      reverse_order: true
```

Configured BibTeX files are read from ``docs_dir`` and removed from the site
output. Page Markdown is expanded as a Jinja template with a citation registry
owned by that page, so numbering restarts on every page.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from jinja2 import Environment, TemplateError
from mkdocs.config import config_options
from mkdocs.config.defaults import MkDocsConfig
from mkdocs.exceptions import PluginError
from mkdocs.plugins import BasePlugin
from mkdocs.structure.files import Files
from mkdocs.structure.nav import Navigation
from mkdocs.structure.pages import Page
from pydantic import ValidationError

from .config import BibliographyConfig
from .context import RenderContext
from .diagnostics import LoggingEmitter
from .exceptions import CiteSmithError, CollectionNotFoundError
from .jinja import CONTEXT_VARIABLE, create_environment, install_helpers, render_template
from .pipeline import METADATA_KEY, BibliographyPlugin


log = logging.getLogger("mkdocs.plugins.citesmith")


class CitationPlugin(BasePlugin):
    """Load bibliography collections and expose the citation helpers to pages."""

    config_scheme = (
        ("collections", config_options.Type(dict, default={})),
        ("default", config_options.Type((str, type(None)), default=None)),
        ("style", config_options.Type(str, default="default")),
        ("keystyle", config_options.Type(str, default="citekey")),
        ("sort_by", config_options.Type((str, type(None)), default=None)),
        ("reverse_order", config_options.Type(bool, default=False)),
        ("render_markdown", config_options.Type(bool, default=True)),
    )

    def __init__(self) -> None:
        self._settings: BibliographyConfig | None = None
        self._emitter = LoggingEmitter(logger_obj=log)
        self._environment: Environment | None = None
        self._context: RenderContext | None = None
        self._page_contexts: dict[str, RenderContext] = {}

    def _build_settings(self) -> BibliographyConfig:
        payload = {
            key: self.config.get(key)
            for key in ("collections", "default", "style", "keystyle", "sort_by", "reverse_order")
        }
        try:
            return BibliographyConfig.model_validate(payload)
        except ValidationError as exc:
            raise PluginError(f"citesmith: invalid configuration: {exc}") from exc

    def on_config(self, config: MkDocsConfig) -> MkDocsConfig:
        self._settings = self._build_settings()
        self._environment = create_environment()
        self._page_contexts.clear()
        return config

    def on_files(self, files: Files, *, config: MkDocsConfig) -> Files:
        """Consume the BibTeX sources and publish the bibliography namespace."""
        settings = self._settings or self._build_settings()
        sources: dict[str, bytes] = {}
        for name, path in settings.source_paths().items():
            source = files.get_file_from_path(path)
            if source is None:
                error = CollectionNotFoundError(
                    f"Bibliography source '{path}' for collection '{name}' "
                    f"was not found in '{config.docs_dir}'."
                )
                raise PluginError(f"citesmith: {error}") from error
            sources[path] = Path(source.abs_src_path).read_bytes()
            files.remove(source)

        stage = BibliographyPlugin(settings, emitter=self._emitter)
        try:
            self._context = stage(sources, config.extra)
        except CiteSmithError as exc:
            raise PluginError(f"citesmith: {exc}") from exc
        return files

    def on_env(self, env: Environment, *, config: MkDocsConfig, files: Files) -> Environment:
        install_helpers(env)
        return env

    def on_page_markdown(
        self,
        markdown: str,
        *,
        page: Page,
        config: MkDocsConfig,
        files: Files,
    ) -> str:
        """Expand citation helpers with a registry owned by this page."""
        if self._context is None:
            return markdown
        page_context = self._context.for_page()
        self._page_contexts[page.file.src_uri] = page_context
        if not self.config.get("render_markdown", True):
            return markdown

        environment = self._environment or create_environment()
        try:
            text = render_template(
                environment,
                markdown,
                page_context,
                page=page,
                config=config,
                **{METADATA_KEY: page_context.namespace()},
            )
        except (CiteSmithError, TemplateError) as exc:
            raise PluginError(
                f"citesmith: failed to render '{page.file.src_uri}': {exc}"
            ) from exc

        registry = page_context.registry
        self._emitter.event(
            "page_citations",
            {
                "page": page.file.src_uri,
                "cited": len(registry),
                "missing": sum(1 for citation in registry if citation.missing),
            },
        )
        return text

    def on_page_context(
        self,
        context: dict[str, Any],
        *,
        page: Page,
        config: MkDocsConfig,
        nav: Navigation,
    ) -> dict[str, Any]:
        """Expose the page registry to theme templates."""
        page_context = self._page_contexts.get(page.file.src_uri)
        if page_context is None and self._context is not None:
            page_context = self._context.for_page()
        if page_context is not None:
            context[CONTEXT_VARIABLE] = page_context
            context["citations"] = page_context.registry
        return context


__all__ = ["CitationPlugin"]
