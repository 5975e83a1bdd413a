"""Unit tests for TemplateRegistry (scaffold_engine.templates.registry)."""

from __future__ import annotations

import dataclasses

import pytest

from scaffold_engine.templates import GenerationTemplate, TemplateFile, TemplateRegistry


def _variant(template: GenerationTemplate, **changes) -> GenerationTemplate:
    return dataclasses.replace(template, **changes)


class TestTemplateRegistry:
    @pytest.mark.unit
    def test_empty(self):
        registry = TemplateRegistry()
        assert len(registry) == 0
        assert registry.all() == []
        assert registry.get_by_id("x") is None

    @pytest.mark.unit
    def test_lookup_by_id(self, demo_template: GenerationTemplate):
        registry = TemplateRegistry([demo_template])
        assert registry.get_by_id("demo-basic") is demo_template

    @pytest.mark.unit
    def test_lookup_by_archetype_keeps_order(self, demo_template: GenerationTemplate):
        second = _variant(demo_template, id="demo-second")
        other = _variant(demo_template, id="other", archetype="other")
        registry = TemplateRegistry([demo_template, other, second])

        assert [t.id for t in registry.get_by_archetype("demo")] == ["demo-basic", "demo-second"]
        assert registry.get_by_archetype("missing") == []

    @pytest.mark.unit
    def test_reregistering_id_replaces_in_place(self, demo_template: GenerationTemplate):
        second = _variant(demo_template, id="demo-second")
        registry = TemplateRegistry([demo_template, second])

        replacement = _variant(demo_template, files=[TemplateFile("new.txt", "")])
        registry.register(replacement)

        assert len(registry) == 2
        assert [t.id for t in registry.all()] == ["demo-basic", "demo-second"]
        assert registry.get_by_id("demo-basic") is replacement
