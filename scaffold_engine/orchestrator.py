"""Generation orchestrator: the constraint-driven project generation pipeline.

A run moves through an explicit state machine::

    idle -> validating -> template_selected -> context_built -> [enhancing]
         -> materializing -> command_executing -> validated -> [post_enhancing]
         -> completed

``failed`` is reachable from ``validating`` and ``template_selected`` (the two
fatal stages) and, on cooperative cancellation, from any non-terminal state.

Everything after template selection follows a partial-success policy: a file
that cannot be written or a command that exits non-zero is recorded as a
``Skipped`` outcome and the run continues.  Overall success is the logical AND
of every validation rule.

Usage::

    orchestrator = GenerationOrchestrator.default(Config.from_env())
    result = await orchestrator.generate(
        GenerationRequest(archetype="expo-mobile", project_name="Demo")
    )
"""

from __future__ import annotations

import asyncio
import stat
from collections.abc import Awaitable, Callable, Sequence
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, computed_field

from scaffold_engine.config import Config
from scaffold_engine.constraints import (
    NX_MONOREPO,
    ConstraintOverride,
    ConstraintRegistry,
    ConstraintValidation,
    Platform,
    ProjectConstraints,
    default_constraint_registry,
)
from scaffold_engine.enhancer import (
    POST_ENHANCEMENT_TASKS,
    EnhancementCollaborator,
    EnhancementSuggestion,
    NullEnhancer,
    OllamaEnhancer,
)
from scaffold_engine.templates import (
    GenerationContext,
    GenerationMetadata,
    GenerationTemplate,
    TemplateCommand,
    TemplateFile,
    TemplateRegistry,
    default_template_registry,
)
from scaffold_engine.utils import (
    TIMEOUT_RETURNCODE,
    print_error,
    print_stage_header,
    print_success,
    print_warning,
    resolve_within,
    run_command,
    save_json,
)
from scaffold_engine.validation import ValidationResult, all_passed, run_validations

CANCELLED_ERROR = "Generation cancelled"
VALIDATIONS_FAILED_WARNING = "Some validations failed"


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------

class GenerationState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    TEMPLATE_SELECTED = "template_selected"
    CONTEXT_BUILT = "context_built"
    ENHANCING = "enhancing"
    MATERIALIZING = "materializing"
    COMMAND_EXECUTING = "command_executing"
    VALIDATED = "validated"
    POST_ENHANCING = "post_enhancing"
    COMPLETED = "completed"
    FAILED = "failed"


_S = GenerationState

_TRANSITIONS: dict[GenerationState, frozenset[GenerationState]] = {
    _S.IDLE: frozenset({_S.VALIDATING}),
    _S.VALIDATING: frozenset({_S.TEMPLATE_SELECTED, _S.FAILED}),
    _S.TEMPLATE_SELECTED: frozenset({_S.CONTEXT_BUILT, _S.FAILED}),
    _S.CONTEXT_BUILT: frozenset({_S.ENHANCING, _S.MATERIALIZING}),
    _S.ENHANCING: frozenset({_S.MATERIALIZING}),
    _S.MATERIALIZING: frozenset({_S.COMMAND_EXECUTING}),
    _S.COMMAND_EXECUTING: frozenset({_S.VALIDATED}),
    _S.VALIDATED: frozenset({_S.POST_ENHANCING, _S.COMPLETED}),
    _S.POST_ENHANCING: frozenset({_S.COMPLETED}),
    _S.COMPLETED: frozenset(),
    _S.FAILED: frozenset(),
}

TERMINAL_STATES = frozenset({_S.COMPLETED, _S.FAILED})


class GenerationStateError(Exception):
    """Raised on an illegal state transition (an internal bug, never user input)."""

    def __init__(self, current: GenerationState, target: GenerationState) -> None:
        self.current = current
        self.target = target
        super().__init__(f"Illegal transition {current.value} -> {target.value}")


class _Cancelled(Exception):
    """Unwinds a run once its cancellation token has fired."""


# ---------------------------------------------------------------------------
# Request / outcome / result models
# ---------------------------------------------------------------------------

class GenerationRequest(BaseModel):
    """Everything a caller supplies for one generation run."""

    archetype: str = Field(..., min_length=1)
    project_name: str = Field(..., min_length=1)
    platforms: Optional[list[Platform]] = Field(
        default=None, description="Replaces the archetype's platform set when given"
    )
    custom_requirements: Optional[str] = None
    output_dir: Optional[Path] = Field(
        default=None, description="Parent directory; defaults to Config.output_dir"
    )
    constraint_overrides: Optional[ConstraintOverride] = None
    variables: dict[str, Union[bool, int, float, str]] = Field(default_factory=dict)
    template_id: Optional[str] = None
    post_enhance: Optional[bool] = Field(
        default=None, description="Defaults to Config.generation.post_enhance"
    )


class StepStatus(str, Enum):
    EXECUTED = "executed"
    SKIPPED = "skipped"


class FileOutcome(BaseModel):
    path: str
    status: StepStatus
    reason: Optional[str] = None


class CommandOutcome(BaseModel):
    command: str
    description: str = ""
    status: StepStatus
    reason: Optional[str] = None
    returncode: Optional[int] = None
    stdout: str = ""
    stderr: str = ""


class GenerationResult(BaseModel):
    """Serializable outcome of one generation run."""

    success: bool = False
    archetype: str = ""
    template_id: Optional[str] = None
    project_path: Optional[str] = None
    files_generated: list[str] = Field(default_factory=list)
    commands_executed: list[str] = Field(default_factory=list)
    validation_results: list[ValidationResult] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    next_steps: list[str] = Field(default_factory=list)
    file_outcomes: list[FileOutcome] = Field(default_factory=list)
    command_outcomes: list[CommandOutcome] = Field(default_factory=list)
    enhancement_files: list[str] = Field(default_factory=list)
    states: list[GenerationState] = Field(default_factory=list)
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: Optional[datetime] = None

    @computed_field  # type: ignore[misc]
    @property
    def final_state(self) -> GenerationState:
        return self.states[-1] if self.states else GenerationState.IDLE

    @computed_field  # type: ignore[misc]
    @property
    def duration_seconds(self) -> float:
        if self.finished_at is None:
            return 0.0
        return (self.finished_at - self.started_at).total_seconds()

    @property
    def failed_validations(self) -> list[ValidationResult]:
        return [r for r in self.validation_results if not r.passed]

    def to_report(self) -> dict[str, Any]:
        """Plain JSON-compatible dict of the whole result."""
        return self.model_dump(mode="json")

    async def save(self, path: str | Path) -> Path:
        """Write the report as pretty-printed JSON and return the path."""
        return await save_json(self.to_report(), path)


# ---------------------------------------------------------------------------
# Cancellation
# ---------------------------------------------------------------------------

class CancellationToken:
    """Cooperative cancellation signal checked before every pipeline stage."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


# ---------------------------------------------------------------------------
# Filesystem primitives (run in worker threads)
# ---------------------------------------------------------------------------

def _write_file(target: Path, content: str, executable: bool, overwrite: bool) -> bool:
    """Write one file.  Returns ``False`` when an existing file is kept."""
    if not overwrite and target.exists():
        return False
    target.write_text(content, encoding="utf-8")
    if executable:
        mode = target.stat().st_mode
        target.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return True


# ---------------------------------------------------------------------------
# Per-run state
# ---------------------------------------------------------------------------

class _GenerationRun:
    """Mutable bookkeeping for exactly one ``generate`` call."""

    def __init__(
        self,
        orchestrator: GenerationOrchestrator,
        request: GenerationRequest,
        cancel: CancellationToken | None,
    ) -> None:
        self.orchestrator = orchestrator
        self.config = orchestrator.config
        self.request = request
        self.cancel = cancel
        self.state = GenerationState.IDLE
        self.context: GenerationContext | None = None
        self.result = GenerationResult(
            archetype=request.archetype, states=[GenerationState.IDLE]
        )

    # -- State machine -----------------------------------------------------

    def transition(self, target: GenerationState) -> None:
        if target not in _TRANSITIONS[self.state]:
            raise GenerationStateError(self.state, target)
        self.state = target
        self.result.states.append(target)
        if target not in TERMINAL_STATES:
            print_stage_header(target.value)

    def checkpoint(self) -> None:
        if self.cancel is not None and self.cancel.cancelled:
            raise _Cancelled()

    def fail(self, errors: Sequence[str]) -> GenerationResult:
        self.transition(GenerationState.FAILED)
        self.result.errors.extend(errors)
        for error in errors:
            print_error(error)
        return self.finish()

    def cancelled(self) -> GenerationResult:
        if self.state in TERMINAL_STATES:
            raise GenerationStateError(self.state, GenerationState.FAILED)
        # Cancellation may interrupt any non-terminal stage.
        self.state = GenerationState.FAILED
        self.result.states.append(GenerationState.FAILED)
        self.result.errors.append(CANCELLED_ERROR)
        print_warning(CANCELLED_ERROR)
        return self.finish()

    def finish(self) -> GenerationResult:
        if self.context is not None:
            self.result.next_steps = self.orchestrator.next_steps(self.context)
        self.result.finished_at = datetime.now(timezone.utc)
        return self.result

    # -- Pipeline ----------------------------------------------------------

    async def execute(self) -> GenerationResult:
        try:
            return await self._pipeline()
        except _Cancelled:
            return self.cancelled()

    async def _pipeline(self) -> GenerationResult:
        request = self.request

        # 1. Validating
        self.checkpoint()
        self.transition(GenerationState.VALIDATING)
        project_path = self._project_path()
        self.result.project_path = str(project_path)
        constraints, errors = self._resolve_constraints()
        if errors:
            return self.fail(errors)
        assert constraints is not None

        # 2. Template selection
        self.checkpoint()
        self.transition(GenerationState.TEMPLATE_SELECTED)
        template, error = self._select_template()
        if template is None:
            return self.fail([error])
        self.result.template_id = template.id

        # 3. Context
        self.checkpoint()
        self.transition(GenerationState.CONTEXT_BUILT)
        generation = self.config.generation
        self.context = GenerationContext(
            project_name=request.project_name,
            project_path=project_path,
            constraints=constraints,
            template=template,
            variables=request.variables,
            metadata=GenerationMetadata(
                generated_by=generation.generator_name,
                version=generation.generator_version,
            ),
        )

        # 4. Enhancing (optional)
        requirements = (request.custom_requirements or "").strip()
        if requirements:
            self.checkpoint()
            self.transition(GenerationState.ENHANCING)
            await self._enhance(requirements)

        # 5. Materializing
        self.checkpoint()
        self.transition(GenerationState.MATERIALIZING)
        await self._materialize(self.context.template.files)

        # 6. Commands
        self.checkpoint()
        self.transition(GenerationState.COMMAND_EXECUTING)
        await self._execute_commands(self.context.template.commands)

        # 7. Validation
        self.checkpoint()
        self.transition(GenerationState.VALIDATED)
        self.result.validation_results = await run_validations(
            self.context.template.validation,
            self.context,
            timeout=generation.validation_timeout,
        )
        passed = all_passed(self.result.validation_results)

        # 8. Post-enhancing (optional)
        post_enhance = request.post_enhance
        if post_enhance is None:
            post_enhance = generation.post_enhance
        if post_enhance:
            self.checkpoint()
            self.transition(GenerationState.POST_ENHANCING)
            await self._post_enhance()

        # 9. Completed
        self.checkpoint()
        self.transition(GenerationState.COMPLETED)
        self.result.success = passed
        if passed:
            print_success(f"Generated {request.project_name} at {project_path}")
        else:
            self.result.warnings.append(VALIDATIONS_FAILED_WARNING)
            print_warning(
                f"{VALIDATIONS_FAILED_WARNING}: "
                f"{len(self.result.failed_validations)} of "
                f"{len(self.result.validation_results)} rule(s) did not pass"
            )
        return self.finish()

    # -- Stage helpers -----------------------------------------------------

    def _project_path(self) -> Path:
        base = self.request.output_dir or self.config.output_dir
        return (Path(base) / self.request.project_name).resolve()

    def _resolve_constraints(self) -> tuple[ProjectConstraints | None, list[str]]:
        request = self.request
        name = request.project_name
        if name in (".", "..") or "/" in name or "\\" in name:
            return None, [f"Invalid project name: {name!r}"]

        registry = self.orchestrator.constraints
        base = registry.get(request.archetype)
        if base is None:
            return None, [f"Unknown project type: {request.archetype}"]

        constraints = registry.merge(base, request.constraint_overrides)
        if request.platforms is not None:
            constraints = registry.merge(constraints, {"platforms": request.platforms})

        validation = registry.validate(constraints)
        if not validation.valid:
            return None, list(validation.errors)
        return constraints, []

    def _select_template(self) -> tuple[GenerationTemplate | None, str]:
        templates = self.orchestrator.templates
        archetype = self.request.archetype
        template_id = self.request.template_id
        if template_id is not None:
            template = templates.get_by_id(template_id)
            if template is None or template.archetype != archetype:
                return None, f"Template {template_id!r} is not available for project type: {archetype}"
            return template, ""

        candidates = templates.get_by_archetype(archetype)
        if not candidates:
            return None, f"No templates available for project type: {archetype}"
        # First registered wins.
        return candidates[0], ""

    async def _consult(
        self,
        label: str,
        call: Callable[[], Awaitable[EnhancementSuggestion]],
    ) -> EnhancementSuggestion:
        """Run one collaborator call with its own timeout; never raises."""
        timeout = self.config.generation.enhancement_timeout
        try:
            return await asyncio.wait_for(call(), timeout=timeout)
        except asyncio.TimeoutError:
            print_warning(f"{label} timed out after {timeout:g}s -- continuing without it")
        except Exception as exc:  # noqa: BLE001
            print_warning(f"{label} failed: {exc} -- continuing without it")
        return EnhancementSuggestion()

    async def _enhance(self, requirements: str) -> None:
        assert self.context is not None
        context = self.context
        enhancer = self.orchestrator.enhancer
        suggestion = await self._consult(
            "Template enhancement",
            lambda: enhancer.enhance_template(context, requirements),
        )
        if suggestion.is_empty:
            print_warning("No enhancement suggestions; using the template as-is")
            return
        self.context = context.with_enhancement(
            "requirements",
            files=suggestion.template_files(),
            dependencies=suggestion.template_dependencies(),
            commands=suggestion.template_commands(),
        )

    async def _materialize(self, files: Sequence[TemplateFile]) -> list[FileOutcome]:
        """Write *files*, creating every parent directory before any write.

        Writes to distinct paths run concurrently (bounded by
        ``max_parallel_writes``); writes to the same path keep list order.
        Returns the outcomes in list order and records them on the result.
        """
        assert self.context is not None
        context = self.context
        root = context.project_path
        outcomes: list[FileOutcome | None] = [None] * len(files)

        groups: dict[Path, list[int]] = {}
        for index, template_file in enumerate(files):
            target = resolve_within(root, template_file.path)
            if target is None or target == root:
                outcomes[index] = FileOutcome(
                    path=template_file.path,
                    status=StepStatus.SKIPPED,
                    reason="path escapes the project directory",
                )
                print_warning(f"Skipping {template_file.path}: path escapes the project directory")
                continue
            groups.setdefault(target, []).append(index)

        # Directory creation happens-before any write.
        broken_dirs: dict[Path, str] = {}
        for directory in sorted({root, *(target.parent for target in groups)}):
            try:
                await asyncio.to_thread(directory.mkdir, parents=True, exist_ok=True)
            except OSError as exc:
                broken_dirs[directory] = f"cannot create directory {directory}: {exc}"

        semaphore = asyncio.Semaphore(self.config.generation.max_parallel_writes)

        async def _write_group(target: Path, indices: list[int]) -> None:
            async with semaphore:
                for index in indices:
                    outcomes[index] = await self._write_one(
                        files[index], target, broken_dirs.get(target.parent)
                    )

        await asyncio.gather(
            *(_write_group(target, indices) for target, indices in groups.items())
        )

        written: list[FileOutcome] = [o for o in outcomes if o is not None]
        self.result.file_outcomes.extend(written)
        for outcome in written:
            if outcome.status is StepStatus.EXECUTED and outcome.path not in self.result.files_generated:
                self.result.files_generated.append(outcome.path)
        return written

    async def _write_one(
        self, template_file: TemplateFile, target: Path, dir_error: str | None
    ) -> FileOutcome:
        assert self.context is not None
        path = template_file.path
        if dir_error is not None:
            print_warning(f"Skipping {path}: {dir_error}")
            return FileOutcome(path=path, status=StepStatus.SKIPPED, reason=dir_error)
        try:
            content = template_file.render(self.context)
            written = await asyncio.to_thread(
                _write_file,
                target,
                content,
                template_file.executable,
                template_file.overwrite,
            )
        except Exception as exc:  # noqa: BLE001
            reason = f"{type(exc).__name__}: {exc}"
            print_warning(f"Failed to write {path}: {reason}")
            return FileOutcome(path=path, status=StepStatus.SKIPPED, reason=reason)
        if not written:
            return FileOutcome(
                path=path, status=StepStatus.SKIPPED, reason="file exists and overwrite is disabled"
            )
        return FileOutcome(path=path, status=StepStatus.EXECUTED)

    async def _execute_commands(self, commands: Sequence[TemplateCommand]) -> None:
        """Run commands one after another; a failure never stops the next."""
        assert self.context is not None
        context = self.context
        timeout = self.config.generation.command_timeout

        for template_command in commands:
            self.checkpoint()
            command = context.resolve(template_command.command)
            outcome = CommandOutcome(
                command=command,
                description=template_command.description,
                status=StepStatus.SKIPPED,
            )
            self.result.command_outcomes.append(outcome)

            cwd = context.project_path
            if template_command.working_directory:
                cwd = resolve_within(
                    context.project_path, context.resolve(template_command.working_directory)
                )
                if cwd is None:
                    outcome.reason = "working directory escapes the project directory"
                    print_warning(f"Skipping '{command}': {outcome.reason}")
                    continue

            try:
                returncode, stdout, stderr = await run_command(command, cwd=cwd, timeout=timeout)
            except OSError as exc:
                outcome.reason = f"could not start: {exc}"
                print_warning(f"Command '{command}' {outcome.reason}")
                continue

            outcome.returncode = returncode
            outcome.stdout = stdout
            outcome.stderr = stderr
            if returncode != 0:
                outcome.reason = (
                    f"timed out after {timeout}s" if returncode == TIMEOUT_RETURNCODE
                    else f"exited with status {returncode}"
                )
                print_warning(f"Command '{command}' {outcome.reason}")
                continue

            outcome.status = StepStatus.EXECUTED
            outcome.reason = None
            self.result.commands_executed.append(command)

    async def _post_enhance(self) -> None:
        assert self.context is not None
        enhancer = self.orchestrator.enhancer
        for task in POST_ENHANCEMENT_TASKS:
            self.checkpoint()
            context = self.context
            suggestion = await self._consult(
                f"Enhancement task '{task}'",
                lambda: enhancer.enhance_with_task(context, task),
            )
            files = suggestion.template_files()
            if not files:
                continue
            self.context = context.with_enhancement(f"task:{task}", files=files)
            outcomes = await self._materialize(files)
            for outcome in outcomes:
                if outcome.status is StepStatus.EXECUTED and outcome.path not in self.result.enhancement_files:
                    self.result.enhancement_files.append(outcome.path)


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------

class GenerationOrchestrator:
    """Drives generation runs against read-only constraint and template registries.

    The orchestrator holds no per-run state, so independent runs may execute
    concurrently on the same instance.
    """

    def __init__(
        self,
        constraints: ConstraintRegistry,
        templates: TemplateRegistry,
        enhancer: EnhancementCollaborator | None = None,
        config: Config | None = None,
    ) -> None:
        self.constraints = constraints
        self.templates = templates
        self.enhancer: EnhancementCollaborator = enhancer or NullEnhancer()
        self.config = config or Config()

    @classmethod
    def default(cls, config: Config | None = None, *, use_llm: bool = True) -> GenerationOrchestrator:
        """Orchestrator over the built-in registries (and Ollama when *use_llm*)."""
        config = config or Config.from_env()
        constraints = default_constraint_registry()
        enhancer: EnhancementCollaborator = (
            OllamaEnhancer.from_config(config) if use_llm else NullEnhancer()
        )
        return cls(constraints, default_template_registry(constraints), enhancer, config)

    # -- Public API ----------------------------------------------------------

    async def generate(
        self, request: GenerationRequest, cancel: CancellationToken | None = None
    ) -> GenerationResult:
        """Run the full pipeline for *request*.

        Fatal problems (invalid constraints, no template) come back as a
        failed result with ``errors``; they are never raised.
        """
        return await _GenerationRun(self, request, cancel).execute()

    def list_templates(self, archetype: str | None = None) -> list[GenerationTemplate]:
        if archetype is None:
            return self.templates.all()
        return self.templates.get_by_archetype(archetype)

    def constraints_for(self, archetype: str) -> ProjectConstraints | None:
        return self.constraints.get(archetype)

    def validate_constraints(self, constraints: ProjectConstraints) -> ConstraintValidation:
        return self.constraints.validate(constraints)

    @staticmethod
    def next_steps(context: GenerationContext) -> list[str]:
        """Human follow-up instructions for a generated project."""
        steps = [
            f"cd {context.project_path.name}",
            "Review the generated code and configuration",
            "Install dependencies: npm install",
            "Start development server: npm run dev",
        ]
        if context.constraints.archetype == NX_MONOREPO:
            steps.extend([
                "Build all apps: npm run build:all",
                "Run tests: npm test",
                "Start web app: npm run dev",
                "Start mobile app: npm run dev:mobile",
            ])
        requirements = context.constraints.requirements
        if requirements.testing and "Run tests: npm test" not in steps:
            steps.append("Run tests: npm test")
        if requirements.cicd:
            steps.append("Set up CI/CD pipeline")
        return steps
