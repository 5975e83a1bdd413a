"""Shared pytest fixtures for the Scaffold Engine test suite.

Provides reusable fixtures for:
- A small ``demo`` archetype with a one-file template
- Registries and an orchestrator writing into ``tmp_path``
- A scripted enhancement collaborator
- Mocked Ollama HTTP responses
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from scaffold_engine.config import Config, GenerationConfig
from scaffold_engine.constraints import (
    CapabilityRequirements,
    ConstraintRegistry,
    Platform,
    ProjectConstraints,
    TechStack,
)
from scaffold_engine.enhancer import EnhancementSuggestion
from scaffold_engine.orchestrator import GenerationOrchestrator
from scaffold_engine.templates import (
    FileExistsRule,
    GenerationContext,
    GenerationTemplate,
    TemplateRegistry,
)
from scaffold_engine.templates.models import TemplateFile

DEMO = "demo"


# ---------------------------------------------------------------------------
# Constraints & templates
# ---------------------------------------------------------------------------

@pytest.fixture
def demo_constraints() -> ProjectConstraints:
    """A web-only archetype with no cross-field rules attached."""
    return ProjectConstraints(
        archetype=DEMO,
        platforms=frozenset({Platform.WEB}),
        tech_stack=TechStack(frontend=["HTML"]),
        requirements=CapabilityRequirements(testing=True),
    )


@pytest.fixture
def demo_template(demo_constraints: ProjectConstraints) -> GenerationTemplate:
    """One file (``index.txt``) and one file-exists rule."""
    return GenerationTemplate(
        id="demo-basic",
        name="Demo",
        description="Single text file",
        archetype=DEMO,
        constraints=demo_constraints,
        files=[TemplateFile("index.txt", "hello {{name}}")],
        validation=[FileExistsRule(("index.txt",), "Index exists")],
    )


@pytest.fixture
def constraint_registry(demo_constraints: ProjectConstraints) -> ConstraintRegistry:
    return ConstraintRegistry([demo_constraints])


@pytest.fixture
def template_registry(demo_template: GenerationTemplate) -> TemplateRegistry:
    return TemplateRegistry([demo_template])


@pytest.fixture
def demo_context(
    tmp_path: Path, demo_constraints: ProjectConstraints, demo_template: GenerationTemplate
) -> GenerationContext:
    return GenerationContext(
        project_name="Demo",
        project_path=tmp_path / "Demo",
        constraints=demo_constraints,
        template=demo_template,
    )


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------

@pytest.fixture
def config(tmp_path: Path) -> Config:
    """Config writing into ``tmp_path/out`` with short timeouts."""
    return Config(
        output_dir=tmp_path / "out",
        generation=GenerationConfig(
            command_timeout=30,
            validation_timeout=30,
            enhancement_timeout=5.0,
            max_parallel_writes=4,
        ),
    )


class ScriptedEnhancer:
    """Enhancement collaborator returning canned suggestions and recording calls."""

    def __init__(
        self,
        template: EnhancementSuggestion | dict[str, Any] | None = None,
        tasks: dict[str, EnhancementSuggestion | dict[str, Any]] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.template = template
        self.tasks = tasks or {}
        self.error = error
        self.calls: list[tuple[str, str]] = []

    @staticmethod
    def _coerce(value: EnhancementSuggestion | dict[str, Any] | None) -> EnhancementSuggestion:
        if value is None:
            return EnhancementSuggestion()
        if isinstance(value, dict):
            return EnhancementSuggestion.model_validate(value)
        return value

    async def enhance_template(
        self, context: GenerationContext, requirements: str
    ) -> EnhancementSuggestion:
        self.calls.append(("template", requirements))
        if self.error is not None:
            raise self.error
        return self._coerce(self.template)

    async def enhance_with_task(
        self, context: GenerationContext, task: str
    ) -> EnhancementSuggestion:
        self.calls.append(("task", task))
        if self.error is not None:
            raise self.error
        return self._coerce(self.tasks.get(task))


@pytest.fixture
def make_orchestrator(
    constraint_registry: ConstraintRegistry,
    template_registry: TemplateRegistry,
    config: Config,
):
    """Factory building an orchestrator over the demo registries."""

    def factory(enhancer: Any = None, **overrides: Any) -> GenerationOrchestrator:
        return GenerationOrchestrator(
            overrides.get("constraints", constraint_registry),
            overrides.get("templates", template_registry),
            enhancer,
            overrides.get("config", config),
        )

    return factory


# ---------------------------------------------------------------------------
# Mock Ollama
# ---------------------------------------------------------------------------

def make_ollama_client_mock(payload: dict[str, Any] | str) -> AsyncMock:
    """An ``httpx.AsyncClient`` stand-in answering ``/api/generate`` with *payload*."""
    text = payload if isinstance(payload, str) else json.dumps(payload)
    mock_response = MagicMock()
    mock_response.status_code = 200
    mock_response.json.return_value = {
        "model": "qwen2.5-coder:32b",
        "response": text,
        "done": True,
        "total_duration": 1_234_000_000,
    }
    mock_response.raise_for_status = MagicMock()

    mock_client = AsyncMock()
    mock_client.post = AsyncMock(return_value=mock_response)
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    return mock_client


@pytest.fixture
def mock_ollama():
    """Patch httpx so Ollama returns a one-file suggestion.

    Usage:
        def test_something(mock_ollama):
            with mock_ollama:
                ...
    """
    mock_client = make_ollama_client_mock(
        {"files": [{"path": "docs/NOTES.md", "content": "# Notes\n"}]}
    )
    return patch("httpx.AsyncClient", return_value=mock_client)


@pytest.fixture
def scripted_enhancer() -> type[ScriptedEnhancer]:
    """The ``ScriptedEnhancer`` class, for tests that need custom scripts."""
    return ScriptedEnhancer


@pytest.fixture
def ollama_client_mock():
    """Factory for ``httpx.AsyncClient`` mocks answering with a given payload."""
    return make_ollama_client_mock
