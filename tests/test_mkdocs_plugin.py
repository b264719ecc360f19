from pathlib import Path
import textwrap
from types import SimpleNamespace
from typing import Any

from jinja2 import Environment
from mkdocs.exceptions import PluginError
from mkdocs.structure.files import File, Files
import pytest

from citesmith.jinja import CONTEXT_VARIABLE
from citesmith.mkdocs_plugin import CitationPlugin, log


def _write(tmp_path: Path, name: str, content: str) -> Path:
    path = tmp_path / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(content).strip() + "\n", encoding="utf-8")
    return path


def _plugin(**options: Any) -> CitationPlugin:
    plugin = CitationPlugin()
    plugin.config = {
        "collections": {"publications": "bib/publications.bib"},
        "default": None,
        "style": "default",
        "keystyle": "numbered",
        "sort_by": None,
        "reverse_order": False,
        "render_markdown": True,
        **options,
    }
    return plugin


def _project(tmp_path: Path) -> tuple[SimpleNamespace, Files]:
    docs = tmp_path / "docs"
    _write(
        docs,
        "bib/publications.bib",
        """
        @article{smith2020,
            author = {Smith, John and Doe, Jane},
            title = {On Widgets},
            journal = {J. Widget Res.},
            volume = {3},
            year = {2020},
        }
        @book{knuth1997,
            author = {Knuth, Donald},
            title = {TAOCP},
            year = {1997},
        }
        """,
    )
    _write(docs, "index.md", "# Home")
    site = str(tmp_path / "site")
    files = Files(
        [
            File("bib/publications.bib", str(docs), site, True),
            File("index.md", str(docs), site, True),
        ]
    )
    config = SimpleNamespace(docs_dir=str(docs), extra={})
    return config, files


def _page(src_uri: str) -> SimpleNamespace:
    return SimpleNamespace(file=SimpleNamespace(src_uri=src_uri))


def test_plugin_consumes_bibliography_sources(tmp_path: Path) -> None:
    plugin = _plugin()
    config, files = _project(tmp_path)

    plugin.on_config(config)
    files = plugin.on_files(files, config=config)

    assert [file.src_uri for file in files] == ["index.md"]
    assert config.extra["bibliography"]["default"] == "publications"
    assert config.extra["bibliography"]["keystyle"] == "numbered"


def test_plugin_renders_page_citations(tmp_path: Path) -> None:
    plugin = _plugin(style="ieee")
    config, files = _project(tmp_path)
    plugin.on_config(config)
    plugin.on_files(files, config=config)

    markdown = 'See {{ cite("knuth1997") }} and {{ cite("smith2020 knuth1997") }}.\n\n{{ bibliography() }}'
    first = plugin.on_page_markdown(markdown, page=_page("index.md"), config=config, files=files)
    second = plugin.on_page_markdown(
        '{{ cite("smith2020") }}', page=_page("other.md"), config=config, files=files
    )

    assert 'See [<a href="#bibentry_knuth1997">1</a>]' in first
    assert '[<a href="#bibentry_smith2020">2</a>, <a href="#bibentry_knuth1997">1</a>]' in first
    assert "J. Smith and J. Doe, &ldquo;On Widgets,&rdquo;" in first
    assert second == '[<a href="#bibentry_smith2020">1</a>]'


def test_plugin_exposes_page_registry_to_theme(tmp_path: Path) -> None:
    plugin = _plugin()
    config, files = _project(tmp_path)
    plugin.on_config(config)
    plugin.on_files(files, config=config)
    page = _page("index.md")
    plugin.on_page_markdown('{{ cite("smith2020") }}', page=page, config=config, files=files)

    context = plugin.on_page_context({}, page=page, config=config, nav=None)

    assert context["citations"].keys() == ["smith2020"]
    assert context[CONTEXT_VARIABLE].registry is context["citations"]


def test_plugin_installs_helpers_on_theme_environment(tmp_path: Path) -> None:
    plugin = _plugin()
    config, files = _project(tmp_path)

    env = plugin.on_env(Environment(), config=config, files=files)

    assert {"cite", "bibliography", "bibformat", "bibsort", "bibgroup"} <= set(env.globals)


def test_plugin_can_leave_markdown_untouched(tmp_path: Path) -> None:
    plugin = _plugin(render_markdown=False)
    config, files = _project(tmp_path)
    plugin.on_config(config)
    plugin.on_files(files, config=config)

    markdown = '{{ cite("smith2020") }}'

    assert plugin.on_page_markdown(markdown, page=_page("a.md"), config=config, files=files) == (
        markdown
    )


def test_plugin_reports_missing_sources(tmp_path: Path) -> None:
    plugin = _plugin(collections={"publications": "bib/absent.bib"})
    config, files = _project(tmp_path)
    plugin.on_config(config)

    with pytest.raises(PluginError, match="absent.bib"):
        plugin.on_files(files, config=config)


def test_plugin_rejects_invalid_configuration(tmp_path: Path) -> None:
    plugin = _plugin(style="chicago")
    config, _ = _project(tmp_path)

    with pytest.raises(PluginError, match="invalid configuration"):
        plugin.on_config(config)


def test_plugin_wraps_render_failures(tmp_path: Path) -> None:
    plugin = _plugin()
    config, files = _project(tmp_path)
    plugin.on_config(config)
    plugin.on_files(files, config=config)

    with pytest.raises(PluginError, match="index.md"):
        plugin.on_page_markdown(
            "{{ bibsort('publications') }}", page=_page("index.md"), config=config, files=files
        )


def test_plugin_logs_page_citation_summary(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    plugin = _plugin()
    config, files = _project(tmp_path)
    plugin.on_config(config)
    plugin.on_files(files, config=config)

    recorded: list[str] = []

    def capture(message: str, *args: object) -> None:
        recorded.append(message % args if args else message)

    monkeypatch.setattr(log, "info", capture)

    with pytest.warns(UserWarning):
        plugin.on_page_markdown(
            '{{ cite("smith2020 ghost") }}', page=_page("index.md"), config=config, files=files
        )

    assert "index.md: 2 citation(s), 1 unresolved" in recorded
