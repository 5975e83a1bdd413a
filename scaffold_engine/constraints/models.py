"""Pydantic v2 models for project constraints.

A ``ProjectConstraints`` profile is the declarative requirement set a
generated project must satisfy: target platforms, tech stack, required
capabilities, architecture flags, and compliance flags.  Profiles are frozen;
merging always produces a new value.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class Platform(str, Enum):
    """Target platform for a generated project."""
    WEB = "web"
    MOBILE = "mobile"
    DESKTOP = "desktop"
    SERVER = "server"
    CROSS_PLATFORM = "cross-platform"


# ---------------------------------------------------------------------------
# Nested flag / list groups
# ---------------------------------------------------------------------------

class TechStack(BaseModel):
    """Ordered technology choices per category.

    ``None`` means the category is not declared for the archetype, which is
    different from an explicitly empty list.
    """

    model_config = ConfigDict(frozen=True)

    frontend: Optional[list[str]] = None
    backend: Optional[list[str]] = None
    database: Optional[list[str]] = None
    deployment: Optional[list[str]] = None
    testing: Optional[list[str]] = None
    styling: Optional[list[str]] = None
    state_management: Optional[list[str]] = None
    bundler: Optional[list[str]] = None
    runtime: Optional[list[str]] = None


class CapabilityRequirements(BaseModel):
    """Capabilities the generated project must provide."""

    model_config = ConfigDict(frozen=True)

    authentication: Optional[bool] = None
    database: Optional[bool] = None
    realtime: Optional[bool] = None
    payments: Optional[bool] = None
    analytics: Optional[bool] = None
    testing: Optional[bool] = None
    cicd: Optional[bool] = None
    containerization: Optional[bool] = None
    monitoring: Optional[bool] = None
    seo: Optional[bool] = None

    def enabled(self) -> list[str]:
        """Return the names of every capability flagged ``True``, in field order."""
        return [name for name in type(self).model_fields if getattr(self, name) is True]


class ArchitectureFlags(BaseModel):
    """Architectural shape of the generated project."""

    model_config = ConfigDict(frozen=True)

    monorepo: Optional[bool] = None
    microservices: Optional[bool] = None
    serverless: Optional[bool] = None
    spa: Optional[bool] = None
    ssr: Optional[bool] = None
    static: Optional[bool] = None


class ComplianceFlags(BaseModel):
    """Non-functional compliance targets."""

    model_config = ConfigDict(frozen=True)

    accessibility: Optional[bool] = None
    security: Optional[bool] = None
    performance: Optional[bool] = None
    seo: Optional[bool] = None


# ---------------------------------------------------------------------------
# Top-level profile
# ---------------------------------------------------------------------------

class ProjectConstraints(BaseModel):
    """Canonical constraint profile for one project archetype."""

    model_config = ConfigDict(frozen=True)

    archetype: str = Field(..., description="Archetype tag, e.g. 'expo-mobile'")
    platforms: frozenset[Platform] = Field(
        default_factory=frozenset, description="Target platforms (order irrelevant)"
    )
    tech_stack: TechStack = Field(default_factory=TechStack)
    requirements: CapabilityRequirements = Field(default_factory=CapabilityRequirements)
    architecture: ArchitectureFlags = Field(default_factory=ArchitectureFlags)
    compliance: ComplianceFlags = Field(default_factory=ComplianceFlags)


class ConstraintOverride(BaseModel):
    """Caller-supplied partial constraints merged on top of a canonical profile.

    Every field is optional; ``None`` (at any nesting level) means "keep the
    base value".
    """

    archetype: Optional[str] = None
    platforms: Optional[frozenset[Platform]] = None
    tech_stack: Optional[TechStack] = None
    requirements: Optional[CapabilityRequirements] = None
    architecture: Optional[ArchitectureFlags] = None
    compliance: Optional[ComplianceFlags] = None


class ConstraintValidation(BaseModel):
    """Outcome of validating a constraint profile."""

    valid: bool = Field(default=True)
    errors: list[str] = Field(default_factory=list)
