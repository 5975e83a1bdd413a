"""Template content model.

A ``GenerationTemplate`` is a declarative, immutable bundle of files to
write, commands to run, dependencies to declare, and validation rules to
check for one archetype.  File content is either a literal string or a pure
function of the ``GenerationContext``.

These types carry callables (content producers, custom predicates), so they
are frozen dataclasses rather than Pydantic models.
"""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import ClassVar, Union

from scaffold_engine.constraints.models import Platform, ProjectConstraints
from scaffold_engine.utils import slugify, to_pascal

VariableValue = Union[str, int, float, bool]
ContentProducer = Callable[["GenerationContext"], str]
ContextPredicate = Callable[["GenerationContext"], Union[bool, Awaitable[bool]]]

_PLACEHOLDER_RE = re.compile(r"\{\{\s*(\w+)\s*\}\}")


# ---------------------------------------------------------------------------
# Placeholder substitution
# ---------------------------------------------------------------------------

def substitute_placeholders(
    text: str, variables: Mapping[str, object], fallback: str
) -> str:
    """Resolve ``{{key}}`` placeholders in *text*.

    A key with a non-empty scalar value in *variables* is replaced by that
    value (booleans render as ``true``/``false``).  Missing or empty keys
    resolve to *fallback*.  Any other value type leaves the placeholder as
    written.
    """

    def _replace(match: re.Match[str]) -> str:
        value = variables.get(match.group(1))
        if value is None or value == "":
            return fallback
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (str, int, float)):
            return str(value)
        return match.group(0)

    return _PLACEHOLDER_RE.sub(_replace, text)


# ---------------------------------------------------------------------------
# Files, commands, dependencies
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TemplateFile:
    """A file to write, relative to the project root."""

    path: str
    content: str | ContentProducer
    executable: bool = False
    overwrite: bool = True
    substitute: bool = True

    def render(self, context: GenerationContext) -> str:
        """Produce the file body for *context*.

        Literal content goes through placeholder substitution unless
        ``substitute`` is off, in which case it is written verbatim.  Producer
        functions receive the context and own their formatting.
        """
        if callable(self.content):
            return self.content(context)
        if not self.substitute:
            return self.content
        return context.resolve(self.content)


@dataclass(frozen=True)
class TemplateCommand:
    """A shell command run from the project root (or ``working_directory``)."""

    command: str
    description: str = ""
    working_directory: str | None = None
    independent: bool = False


class DependencyKind(str, Enum):
    """How a package dependency is declared."""
    REGULAR = "regular"
    DEV = "dev"
    PEER = "peer"
    OPTIONAL = "optional"


@dataclass(frozen=True)
class TemplateDependency:
    """A package the generated project declares.  Purely descriptive."""

    name: str
    version: str | None = None
    kind: DependencyKind = DependencyKind.REGULAR
    platforms: frozenset[Platform] | None = None

    @property
    def dev(self) -> bool:
        return self.kind is DependencyKind.DEV

    @property
    def spec(self) -> str:
        """``name@version`` form used in install commands."""
        return f"{self.name}@{self.version}" if self.version else self.name


# ---------------------------------------------------------------------------
# Validation rules (closed tagged union)
# ---------------------------------------------------------------------------

class RuleType(str, Enum):
    """Tag of a validation rule variant."""
    FILE_EXISTS = "file-exists"
    COMMAND_SUCCESS = "command-success"
    LINT_PASS = "lint-pass"
    TEST_PASS = "test-pass"
    BUILD_SUCCESS = "build-success"
    CUSTOM = "custom"


@dataclass(frozen=True)
class FileExistsRule:
    """Pass iff every listed relative path exists under the project root."""

    files: tuple[str, ...]
    description: str = ""
    type: ClassVar[RuleType] = RuleType.FILE_EXISTS

    def __post_init__(self) -> None:
        object.__setattr__(self, "files", tuple(self.files))


@dataclass(frozen=True)
class CommandSuccessRule:
    """Pass iff ``command`` exits with status zero from the project root."""

    command: str
    description: str = ""
    type: ClassVar[RuleType] = RuleType.COMMAND_SUCCESS


@dataclass(frozen=True)
class LintPassRule:
    command: str
    description: str = ""
    type: ClassVar[RuleType] = RuleType.LINT_PASS


@dataclass(frozen=True)
class TestPassRule:
    __test__ = False

    command: str
    description: str = ""
    type: ClassVar[RuleType] = RuleType.TEST_PASS


@dataclass(frozen=True)
class BuildSuccessRule:
    command: str
    description: str = ""
    type: ClassVar[RuleType] = RuleType.BUILD_SUCCESS


@dataclass(frozen=True)
class CustomRule:
    """Pass iff ``predicate(context)`` is truthy; exceptions count as failure."""

    predicate: ContextPredicate
    description: str = ""
    type: ClassVar[RuleType] = RuleType.CUSTOM


ValidationRule = Union[
    FileExistsRule,
    CommandSuccessRule,
    LintPassRule,
    TestPassRule,
    BuildSuccessRule,
    CustomRule,
]


# ---------------------------------------------------------------------------
# Template
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GenerationTemplate:
    """Declarative description of one project template."""

    id: str
    name: str
    description: str
    archetype: str
    constraints: ProjectConstraints
    files: tuple[TemplateFile, ...] = ()
    commands: tuple[TemplateCommand, ...] = ()
    dependencies: tuple[TemplateDependency, ...] = ()
    validation: tuple[ValidationRule, ...] = ()

    def __post_init__(self) -> None:
        for name in ("files", "commands", "dependencies", "validation"):
            object.__setattr__(self, name, tuple(getattr(self, name)))

    def with_additions(
        self,
        files: Iterable[TemplateFile] = (),
        dependencies: Iterable[TemplateDependency] = (),
        commands: Iterable[TemplateCommand] = (),
    ) -> GenerationTemplate:
        """Return a copy with the given entries appended after the existing ones."""
        return dataclasses.replace(
            self,
            files=self.files + tuple(files),
            dependencies=self.dependencies + tuple(dependencies),
            commands=self.commands + tuple(commands),
        )


# ---------------------------------------------------------------------------
# Generation context
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GenerationMetadata:
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    generated_by: str = "Scaffold Engine"
    version: str = "1.0.0"


@dataclass(frozen=True)
class TemplateMerge:
    """Record of one append-only merge into the context's template."""

    source: str
    files: tuple[str, ...] = ()
    dependencies: tuple[str, ...] = ()
    commands: tuple[str, ...] = ()


@dataclass(frozen=True)
class GenerationContext:
    """Per-run bundle threaded through every pipeline stage.

    The context is immutable.  The only way to change its template is
    ``with_enhancement``, which returns a new context and records the merge.
    """

    project_name: str
    project_path: Path
    constraints: ProjectConstraints
    template: GenerationTemplate
    variables: Mapping[str, VariableValue] = field(default_factory=dict)
    metadata: GenerationMetadata = field(default_factory=GenerationMetadata)
    merges: tuple[TemplateMerge, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "project_path", Path(self.project_path))
        object.__setattr__(self, "variables", MappingProxyType(dict(self.variables)))

    @property
    def project_slug(self) -> str:
        return slugify(self.project_name) or "project"

    @property
    def project_pascal(self) -> str:
        return to_pascal(self.project_slug)

    def resolve(self, text: str) -> str:
        """Substitute ``{{var}}`` placeholders using this context's variables."""
        return substitute_placeholders(text, self.variables, self.project_name)

    def with_enhancement(
        self,
        source: str,
        files: Iterable[TemplateFile] = (),
        dependencies: Iterable[TemplateDependency] = (),
        commands: Iterable[TemplateCommand] = (),
    ) -> GenerationContext:
        """Return a new context whose template has the additions appended."""
        files = tuple(files)
        dependencies = tuple(dependencies)
        commands = tuple(commands)
        merge = TemplateMerge(
            source=source,
            files=tuple(f.path for f in files),
            dependencies=tuple(d.name for d in dependencies),
            commands=tuple(c.command for c in commands),
        )
        return dataclasses.replace(
            self,
            template=self.template.with_additions(files, dependencies, commands),
            merges=self.merges + (merge,),
        )
