"""Jinja2 template rendering for template file content.

Provides the ``TemplateRenderer`` class which loads Jinja2 templates from the
``scaffold_engine/templates/content/`` directory, plus helpers that turn a
Jinja2 template or a JSON builder into a pure content producer
(``GenerationContext -> str``).
"""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from scaffold_engine.utils import slugify, to_camel, to_pascal, to_snake

from .models import ContentProducer, GenerationContext


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "content"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates for generated project files.

    The renderer discovers ``.j2`` template files under a configurable
    template directory.  Templates are rendered with a context dictionary
    built from the ``GenerationContext`` (see ``template_vars``).
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        # Register custom filters
        self.env.filters["slugify"] = slugify
        self.env.filters["pascal_case"] = to_pascal
        self.env.filters["snake_case"] = to_snake
        self.env.filters["camel_case"] = to_camel

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"expo/App.tsx.j2"``).
            context: Dictionary of variables available inside the template.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)

    def render_string(self, template_string: str, context: dict[str, Any]) -> str:
        """Render an inline template string with the provided context."""
        template = self.env.from_string(template_string)
        return template.render(**context)

    def list_templates(self, prefix: str = "") -> list[str]:
        """Return a sorted list of all ``.j2`` template paths under *prefix*."""
        search_dir = self.template_dir / prefix if prefix else self.template_dir
        if not search_dir.is_dir():
            return []
        return sorted(
            str(p.relative_to(self.template_dir).as_posix())
            for p in search_dir.rglob("*.j2")
        )


_default_renderer = TemplateRenderer()


# ---------------------------------------------------------------------------
# Context -> template variables
# ---------------------------------------------------------------------------

def template_vars(ctx: GenerationContext) -> dict[str, Any]:
    """Build the Jinja2 variable dictionary for a generation context.

    Only deterministic data is exposed; the generation timestamp is left out
    so rendered output depends on the project description alone.
    """
    constraints = ctx.constraints
    return {
        "project_name": ctx.project_name,
        "project_slug": ctx.project_slug,
        "project_pascal": ctx.project_pascal,
        "archetype": constraints.archetype,
        "platforms": sorted(p.value for p in constraints.platforms),
        "tech_stack": constraints.tech_stack.model_dump(exclude_none=True),
        "requirements": constraints.requirements.model_dump(exclude_none=True),
        "architecture": constraints.architecture.model_dump(exclude_none=True),
        "compliance": constraints.compliance.model_dump(exclude_none=True),
        "variables": dict(ctx.variables),
        "template_name": ctx.template.name,
    }


# ---------------------------------------------------------------------------
# Content producer factories
# ---------------------------------------------------------------------------

def jinja_content(
    template_path: str,
    renderer: TemplateRenderer | None = None,
    **extra: Any,
) -> ContentProducer:
    """Return a content producer rendering *template_path* for a context.

    Extra keyword arguments are passed to the template alongside the
    standard ``template_vars``.
    """
    active = renderer or _default_renderer

    def _produce(ctx: GenerationContext) -> str:
        return active.render(template_path, {**template_vars(ctx), **extra})

    _produce.__name__ = f"jinja:{template_path}"
    return _produce


def json_content(builder: Callable[[GenerationContext], Any]) -> ContentProducer:
    """Wrap a ``context -> JSON-able`` builder into a content producer."""

    def _produce(ctx: GenerationContext) -> str:
        return json.dumps(builder(ctx), indent=2, ensure_ascii=False) + "\n"

    _produce.__name__ = f"json:{getattr(builder, '__name__', 'builder')}"
    return _produce
