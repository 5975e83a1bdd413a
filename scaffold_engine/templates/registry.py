"""Template registry: holds every ``GenerationTemplate`` by id and archetype."""

from __future__ import annotations

from .models import GenerationTemplate


class TemplateRegistry:
    """Read-mostly store of generation templates.

    Registration is idempotent by id: registering a template whose id is
    already known replaces it in place, keeping its original position in
    the registration order.
    """

    def __init__(self, templates: list[GenerationTemplate] | None = None) -> None:
        self._templates: dict[str, GenerationTemplate] = {}
        for template in templates or []:
            self.register(template)

    def register(self, template: GenerationTemplate) -> None:
        self._templates[template.id] = template

    def get_by_id(self, template_id: str) -> GenerationTemplate | None:
        return self._templates.get(template_id)

    def get_by_archetype(self, archetype: str) -> list[GenerationTemplate]:
        """All templates serving *archetype*, in registration order."""
        return [t for t in self._templates.values() if t.archetype == archetype]

    def all(self) -> list[GenerationTemplate]:
        return list(self._templates.values())

    def __len__(self) -> int:
        return len(self._templates)
