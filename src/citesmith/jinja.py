"""Jinja2 bindings for the bibliography helpers.

Templates reach the page context through a template variable (by default
``bibliography_context``)::

    Widgets are well studied {{ cite("smith2020 doe2021") }}.

    {{ bibliography() }}

    {% for group in bibgroup("publications", "year", reverse=True) %}
      <h2>{{ group.value }}</h2>
      {{ bibliography(group) }}
    {% endfor %}
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from jinja2 import Environment, pass_context
from jinja2.runtime import Context

from . import helpers
from .context import RenderContext
from .exceptions import CiteSmithError
from .registry import CitationRegistry


CONTEXT_VARIABLE = "bibliography_context"


def _page_context(template_context: Context, variable: str) -> RenderContext:
    value = template_context.get(variable)
    if not isinstance(value, RenderContext):
        raise CiteSmithError(
            f"Template variable '{variable}' does not hold a bibliography render context."
        )
    return value


def _bind(function: Callable[..., Any], variable: str) -> Callable[..., Any]:
    @pass_context
    def helper(template_context: Context, *args: Any, **kwargs: Any) -> Any:
        return function(_page_context(template_context, variable), *args, **kwargs)

    helper.__name__ = function.__name__
    helper.__doc__ = function.__doc__
    return helper


def install_helpers(environment: Environment, *, variable: str = CONTEXT_VARIABLE) -> Environment:
    """Register the helpers as globals and filters of ``environment``."""
    environment.globals["cite"] = _bind(helpers.cite, variable)
    environment.globals["bibliography"] = _bind(helpers.bibliography, variable)
    environment.globals["bibformat"] = _bind(helpers.format_entry, variable)
    environment.globals["bibsort"] = _bind(helpers.sort, variable)
    environment.globals["bibgroup"] = _bind(helpers.group, variable)
    environment.filters["bibformat"] = _bind(helpers.format_entry, variable)
    environment.filters["bibsort"] = _bind(helpers.sort, variable)
    environment.filters["bibgroup"] = _bind(helpers.group, variable)
    return environment


def create_environment(**options: Any) -> Environment:
    """Return a Jinja environment with the helpers installed."""
    variable = options.pop("variable", CONTEXT_VARIABLE)
    return install_helpers(Environment(**options), variable=variable)


def render_template(
    environment: Environment,
    source: str,
    context: RenderContext,
    *,
    variable: str = CONTEXT_VARIABLE,
    **variables: Any,
) -> str:
    """Render a template string against an already page-scoped context."""
    template = environment.from_string(source)
    payload = dict(variables)
    payload[variable] = context
    payload.setdefault("citations", context.registry)
    return template.render(payload)


def render_page(
    environment: Environment,
    source: str,
    context: RenderContext,
    *,
    variable: str = CONTEXT_VARIABLE,
    **variables: Any,
) -> tuple[str, CitationRegistry]:
    """Render one page with its own citation registry.

    Returns the rendered text and the registry filled while rendering it.
    """
    page = context.for_page()
    text = render_template(environment, source, page, variable=variable, **variables)
    return text, page.registry


__all__ = [
    "CONTEXT_VARIABLE",
    "create_environment",
    "install_helpers",
    "render_page",
    "render_template",
]
