"""Scaffold Engine configuration.

Centralised, typed configuration for the generation engine. All settings use
Pydantic v2 models so they can be validated at construction time and
serialised to/from JSON or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class OllamaConfig(BaseModel):
    """Configuration for the local Ollama server used for enhancement."""

    url: str = Field(default="http://localhost:11434")
    code_model: str = Field(default="qwen2.5-coder:32b")
    code_model_fallback: str = Field(default="qwen2.5-coder:14b")
    timeout: int = Field(default=120, ge=10, description="Per-request timeout in seconds")


class GenerationConfig(BaseModel):
    """Tuning knobs for a single generation run."""

    command_timeout: int = Field(
        default=600, ge=1, description="Timeout for each template command in seconds"
    )
    validation_timeout: int = Field(
        default=600, ge=1, description="Timeout for each command-based validation rule"
    )
    enhancement_timeout: float = Field(
        default=180.0, gt=0, description="Timeout for each enhancement collaborator call"
    )
    max_parallel_writes: int = Field(
        default=8, ge=1, description="Maximum concurrent file writes while materializing"
    )
    post_enhance: bool = Field(
        default=False, description="Run the fixed post-generation enhancement tasks"
    )
    generator_name: str = Field(default="Scaffold Engine")
    generator_version: str = Field(default="1.0.0")


class Config(BaseModel):
    """Global Scaffold Engine configuration.

    Instances are typically created once by the CLI entry point (or by the
    embedding application) and passed to the ``GenerationOrchestrator``.
    """

    output_dir: Path = Field(default=Path("./generated-projects"))
    ollama: OllamaConfig = Field(default_factory=OllamaConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            SCAFFOLD_OUTPUT_DIR, SCAFFOLD_OLLAMA_URL, SCAFFOLD_OLLAMA_CODE_MODEL,
            SCAFFOLD_OLLAMA_TIMEOUT, SCAFFOLD_COMMAND_TIMEOUT,
            SCAFFOLD_MAX_PARALLEL_WRITES, AI_ENABLE_CODEGEN.

        ``AI_ENABLE_CODEGEN`` is the feature flag for the post-generation
        enhancement pass; only the exact value ``"true"`` enables it.
        """
        ollama_kwargs: dict[str, Any] = {}
        if os.environ.get("SCAFFOLD_OLLAMA_URL"):
            ollama_kwargs["url"] = os.environ["SCAFFOLD_OLLAMA_URL"]
        if os.environ.get("SCAFFOLD_OLLAMA_CODE_MODEL"):
            ollama_kwargs["code_model"] = os.environ["SCAFFOLD_OLLAMA_CODE_MODEL"]
        if os.environ.get("SCAFFOLD_OLLAMA_TIMEOUT"):
            ollama_kwargs["timeout"] = int(os.environ["SCAFFOLD_OLLAMA_TIMEOUT"])

        generation_kwargs: dict[str, Any] = {
            "post_enhance": os.environ.get("AI_ENABLE_CODEGEN") == "true",
        }
        if os.environ.get("SCAFFOLD_COMMAND_TIMEOUT"):
            generation_kwargs["command_timeout"] = int(os.environ["SCAFFOLD_COMMAND_TIMEOUT"])
        if os.environ.get("SCAFFOLD_MAX_PARALLEL_WRITES"):
            generation_kwargs["max_parallel_writes"] = int(
                os.environ["SCAFFOLD_MAX_PARALLEL_WRITES"]
            )

        return cls(
            output_dir=Path(os.environ.get("SCAFFOLD_OUTPUT_DIR", "./generated-projects")),
            ollama=OllamaConfig(**ollama_kwargs),
            generation=GenerationConfig(**generation_kwargs),
        )
