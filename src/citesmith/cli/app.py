"""Typer application wiring for the citesmith CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

from markupsafe import escape
from pydantic import ValidationError
import typer

from citesmith import helpers
from citesmith.config import BibliographyConfig
from citesmith.context import RenderContext
from citesmith.exceptions import CiteSmithError, MissingArgumentError
from citesmith.pipeline import BibliographyPlugin

from .bibliography import print_collection_overview
from .state import debug_enabled, emit_error, get_cli_state, set_cli_state


app = typer.Typer(
    help="Render BibTeX bibliographies as HTML citation text.",
    context_settings={"help_option_names": ["--help"]},
    no_args_is_help=True,
)

SourcesArgument = Annotated[
    list[Path],
    typer.Argument(exists=True, dir_okay=False, readable=True, help="BibTeX files."),
]
StyleOption = Annotated[
    str | None,
    typer.Option("--style", "-s", help="Rendering style: default or ieee."),
]


@app.callback()
def configure(
    verbose: Annotated[
        int,
        typer.Option("--verbose", "-v", count=True, help="Increase logging verbosity."),
    ] = 0,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Show full tracebacks on errors."),
    ] = False,
) -> None:
    """Render BibTeX bibliographies as HTML citation text."""
    set_cli_state(verbosity=verbose, debug=debug)


def _load_context(
    sources: list[Path],
    config_path: Path | None = None,
) -> RenderContext:
    """Load sources through the pipeline stage and return the build context."""
    if config_path is not None:
        settings = BibliographyConfig.from_yaml(config_path)
        base_dir = config_path.parent
    else:
        if not sources:
            raise MissingArgumentError("Provide at least one BibTeX file or --config.")
        collections: dict[str, Path] = {}
        for source in sources:
            previous = collections.setdefault(source.stem, source)
            if previous != source:
                raise CiteSmithError(
                    f"'{previous}' and '{source}' would both load as collection "
                    f"'{source.stem}'; rename one of them or use --config."
                )
        settings = BibliographyConfig(collections=collections)
        base_dir = Path()

    files: dict[str, bytes] = {}
    for path in settings.source_paths().values():
        files[path] = (base_dir / path).read_bytes()
    return BibliographyPlugin(settings)(files, {})


def _fail(exc: Exception) -> None:
    if debug_enabled():
        raise exc
    emit_error(str(exc), exception=exc)
    raise typer.Exit(code=1) from exc


@app.command("list")
def list_entries(sources: SourcesArgument) -> None:
    """Show the entries of one or more BibTeX files."""
    try:
        context = _load_context(sources)
    except (CiteSmithError, ValidationError, OSError) as exc:
        _fail(exc)
        return
    print_collection_overview(context.store)


@app.command()
def render(
    sources: Annotated[
        list[Path] | None,
        typer.Argument(dir_okay=False, help="BibTeX files; the first one is rendered."),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", exists=True, dir_okay=False, help="YAML configuration."),
    ] = None,
    collection: Annotated[
        str | None,
        typer.Option("--collection", help="Collection to render (defaults to the default one)."),
    ] = None,
    style: StyleOption = None,
    keystyle: Annotated[
        str | None,
        typer.Option("--keystyle", "-k", help="Marker style: citekey or numbered."),
    ] = None,
    sort_by: Annotated[
        str | None,
        typer.Option("--sort-by", help="Field used to order the entries."),
    ] = None,
    reverse: Annotated[
        bool,
        typer.Option("--reverse", help="Reverse the sort or group order."),
    ] = False,
    group_by: Annotated[
        str | None,
        typer.Option("--group-by", help="Field used to split the bibliography."),
    ] = None,
) -> None:
    """Render a collection as an HTML bibliography."""
    try:
        context = _load_context(list(sources or []), config)
        target = context.resolve(collection)
        if sort_by:
            target = helpers.sort(context, target, sort_by, reverse=reverse)
        if group_by:
            blocks = []
            for group in helpers.group(context, target, group_by, reverse=reverse):
                listing = helpers.bibliography(context, group, keystyle=keystyle, style=style)
                blocks.append(f"<h2>{escape(group.value)}</h2>\n{listing}")
            output = "\n".join(blocks)
        else:
            output = helpers.bibliography(context, target, keystyle=keystyle, style=style)
    except (CiteSmithError, ValidationError, OSError) as exc:
        _fail(exc)
        return
    typer.echo(str(output))


@app.command("format")
def format_command(
    source: Annotated[Path, typer.Argument(exists=True, dir_okay=False, help="BibTeX file.")],
    key: Annotated[str, typer.Argument(help="Citation key of the entry to render.")],
    style: StyleOption = None,
) -> None:
    """Render a single entry."""
    try:
        context = _load_context([source])
        target = context.resolve(None)
        entry = target.get(key)
        if entry is None:
            raise CiteSmithError(f"No entry '{key}' in '{source}'.")
        output = helpers.format_entry(context, entry, style=style)
    except (CiteSmithError, ValidationError, OSError) as exc:
        _fail(exc)
        return
    typer.echo(str(output))


def main() -> None:
    """Entry point compatible with console scripts."""
    try:
        app()
    except KeyboardInterrupt as exc:
        if debug_enabled():
            raise
        emit_error("Operation cancelled by user.", exception=exc)
        raise typer.Exit(code=1) from exc
    except (typer.Exit, SystemExit):
        raise
    except Exception as exc:  # pragma: no cover - defensive catch-all
        state = get_cli_state()
        if state.show_tracebacks:
            from rich.traceback import Traceback

            state.err_console.print(
                Traceback.from_exception(type(exc), exc, exc.__traceback__)
            )
        else:
            emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc


__all__ = ["app", "main"]
