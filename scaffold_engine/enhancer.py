"""Enhancement collaborator: LLM-proposed additions to a generation template.

The orchestrator depends only on the ``EnhancementCollaborator`` protocol:

1. ``enhance_template(context, requirements)`` -- free-text requirements in,
   a structured suggestion of extra files / dependencies / commands out.
2. ``enhance_with_task(context, task)`` -- one of the fixed post-generation
   passes (``POST_ENHANCEMENT_TASKS``); only suggested files are used.

Both calls degrade to an empty ``EnhancementSuggestion`` on any transport,
timeout, parse, or validation failure.  ``OllamaEnhancer`` is the local-LLM
implementation; ``NullEnhancer`` never suggests anything.
"""

from __future__ import annotations

import asyncio
import json
import re
import textwrap
from typing import Any, Optional, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from scaffold_engine.config import Config
from scaffold_engine.ollama_client import OllamaClient
from scaffold_engine.templates.models import (
    DependencyKind,
    GenerationContext,
    TemplateCommand,
    TemplateDependency,
    TemplateFile,
)
from scaffold_engine.utils import print_warning

# Fixed, ordered post-generation passes.
POST_ENHANCEMENT_TASKS: tuple[str, ...] = (
    "Add comprehensive error handling",
    "Implement proper logging",
    "Add input validation",
    "Create unit tests",
    "Add documentation",
)


# ---------------------------------------------------------------------------
# Suggestion models
# ---------------------------------------------------------------------------

class SuggestedFile(BaseModel):
    model_config = ConfigDict(extra="ignore")

    path: str = Field(..., min_length=1)
    content: str
    executable: bool = False

    def to_template_file(self) -> TemplateFile:
        # Model output is source code; its braces belong to the target language.
        return TemplateFile(
            path=self.path,
            content=self.content,
            executable=self.executable,
            substitute=False,
        )


class SuggestedDependency(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1)
    version: Optional[str] = None
    dev: bool = False
    kind: Optional[DependencyKind] = None

    def to_template_dependency(self) -> TemplateDependency:
        kind = self.kind or (DependencyKind.DEV if self.dev else DependencyKind.REGULAR)
        return TemplateDependency(name=self.name, version=self.version, kind=kind)


class SuggestedCommand(BaseModel):
    model_config = ConfigDict(extra="ignore")

    command: str = Field(..., min_length=1)
    description: str = ""
    working_directory: Optional[str] = None

    def to_template_command(self) -> TemplateCommand:
        return TemplateCommand(
            command=self.command,
            description=self.description,
            working_directory=self.working_directory,
        )


class EnhancementSuggestion(BaseModel):
    """A partial template proposed by the collaborator.  Every list may be empty."""

    model_config = ConfigDict(extra="ignore")

    files: list[SuggestedFile] = Field(default_factory=list)
    dependencies: list[SuggestedDependency] = Field(default_factory=list)
    commands: list[SuggestedCommand] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.files or self.dependencies or self.commands)

    def template_files(self) -> list[TemplateFile]:
        return [f.to_template_file() for f in self.files]

    def template_dependencies(self) -> list[TemplateDependency]:
        return [d.to_template_dependency() for d in self.dependencies]

    def template_commands(self) -> list[TemplateCommand]:
        return [c.to_template_command() for c in self.commands]


# ---------------------------------------------------------------------------
# Collaborator protocol
# ---------------------------------------------------------------------------

@runtime_checkable
class EnhancementCollaborator(Protocol):
    """What the orchestrator needs from an enhancement service."""

    async def enhance_template(
        self, context: GenerationContext, requirements: str
    ) -> EnhancementSuggestion: ...

    async def enhance_with_task(
        self, context: GenerationContext, task: str
    ) -> EnhancementSuggestion: ...


class NullEnhancer:
    """Collaborator that never proposes anything."""

    async def enhance_template(
        self, context: GenerationContext, requirements: str
    ) -> EnhancementSuggestion:
        return EnhancementSuggestion()

    async def enhance_with_task(
        self, context: GenerationContext, task: str
    ) -> EnhancementSuggestion:
        return EnhancementSuggestion()


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------

_ARCHITECT_SYSTEM = textwrap.dedent("""\
    You are an expert software architect. Analyze the requirements and
    suggest enhancements to the project template.

    Project Type: {archetype}
    Platforms: {platforms}
    Tech Stack: {tech_stack}
    Existing files: {existing_files}

    Respond ONLY with a JSON object (no markdown fencing) with this schema:
    {{
        "files": [{{"path": "relative/path", "content": "...", "executable": false}}],
        "dependencies": [{{"name": "package", "version": "^1.0.0", "dev": false}}],
        "commands": [{{"command": "npm run ...", "description": "..."}}]
    }}
""")

_ARCHITECT_PROMPT = textwrap.dedent("""\
    Project: {project_name}
    Requirements: {requirements}

    Please suggest specific enhancements to make this project
    production-ready and aligned with the requirements.
""")

_DEVELOPER_SYSTEM = textwrap.dedent("""\
    You are an expert developer. Generate code to enhance the project with:
    {task}

    Project: {project_name}
    Type: {archetype}
    Tech Stack: {tech_stack}

    Provide specific code files and their content.
""")

_DEVELOPER_PROMPT = textwrap.dedent("""\
    Please implement {task} for this {archetype} project.

    Respond ONLY with a JSON object (no markdown fencing) with this schema:
    {{
        "files": [{{"path": "relative/path/to/file.ts", "content": "file content here"}}]
    }}
""")


# ---------------------------------------------------------------------------
# Response parsing
# ---------------------------------------------------------------------------

def _extract_json(raw: str) -> Any:
    """Best-effort extraction of a JSON document from an LLM response.

    Strips markdown code fences and surrounding prose before parsing.
    Raises ``json.JSONDecodeError`` if nothing parses.
    """
    cleaned = re.sub(r"```(?:json)?\s*", "", raw)
    cleaned = cleaned.strip().rstrip("`").strip()

    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        match = re.search(r"\{[\s\S]*\}", cleaned)
        if match is None:
            raise
        return json.loads(match.group(0))


def parse_suggestion(raw: str) -> EnhancementSuggestion:
    """Parse a collaborator response, degrading to an empty suggestion."""
    if not raw.strip():
        return EnhancementSuggestion()
    try:
        data = _extract_json(raw)
    except json.JSONDecodeError as exc:
        print_warning(f"Enhancement response is not valid JSON: {exc}")
        return EnhancementSuggestion()
    if not isinstance(data, dict):
        print_warning("Enhancement response is not a JSON object; ignoring it")
        return EnhancementSuggestion()
    try:
        return EnhancementSuggestion.model_validate(data)
    except ValidationError as exc:
        print_warning(f"Enhancement response has an unexpected shape: {exc.error_count()} error(s)")
        return EnhancementSuggestion()


# ---------------------------------------------------------------------------
# OllamaEnhancer
# ---------------------------------------------------------------------------

class OllamaEnhancer:
    """Enhancement collaborator backed by a local Ollama code model.

    Parameters
    ----------
    client:
        Async Ollama client used for every request.
    model:
        Primary model tag.
    fallback_model:
        Tried when the primary model fails.
    timeout:
        Upper bound in seconds for each collaborator call, including the
        fallback attempt.
    """

    def __init__(
        self,
        client: OllamaClient | None = None,
        *,
        model: str = "qwen2.5-coder:32b",
        fallback_model: str = "qwen2.5-coder:14b",
        timeout: float = 180.0,
    ) -> None:
        self.client = client or OllamaClient()
        self.model = model
        self.fallback_model = fallback_model
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: Config) -> OllamaEnhancer:
        return cls(
            OllamaClient(base_url=config.ollama.url, timeout=config.ollama.timeout),
            model=config.ollama.code_model,
            fallback_model=config.ollama.code_model_fallback,
            timeout=config.generation.enhancement_timeout,
        )

    # -- Public API ----------------------------------------------------------

    async def enhance_template(
        self, context: GenerationContext, requirements: str
    ) -> EnhancementSuggestion:
        constraints = context.constraints
        system = _ARCHITECT_SYSTEM.format(
            archetype=constraints.archetype,
            platforms=", ".join(sorted(p.value for p in constraints.platforms)),
            tech_stack=constraints.tech_stack.model_dump_json(exclude_none=True),
            existing_files=", ".join(f.path for f in context.template.files) or "(none)",
        )
        prompt = _ARCHITECT_PROMPT.format(
            project_name=context.project_name, requirements=requirements
        )
        return await self._ask(prompt, system, {"temperature": 0.3, "num_predict": 2048})

    async def enhance_with_task(
        self, context: GenerationContext, task: str
    ) -> EnhancementSuggestion:
        constraints = context.constraints
        system = _DEVELOPER_SYSTEM.format(
            task=task,
            project_name=context.project_name,
            archetype=constraints.archetype,
            tech_stack=constraints.tech_stack.model_dump_json(exclude_none=True),
        )
        prompt = _DEVELOPER_PROMPT.format(task=task, archetype=constraints.archetype)
        suggestion = await self._ask(prompt, system, {"temperature": 0.2, "num_predict": 1024})
        return EnhancementSuggestion(files=suggestion.files)

    # -- Internals -------------------------------------------------------------

    async def _ask(
        self, prompt: str, system: str, options: dict[str, Any]
    ) -> EnhancementSuggestion:
        try:
            response = await asyncio.wait_for(
                self.client.generate_with_fallback(
                    prompt,
                    primary_model=self.model,
                    fallback_model=self.fallback_model,
                    system=system,
                    format="json",
                    options=options,
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            print_warning(f"Enhancement request timed out after {self.timeout:g}s")
            return EnhancementSuggestion()

        if not response.success:
            print_warning(f"Enhancement request failed: {response.error}")
            return EnhancementSuggestion()
        return parse_suggestion(response.text)
