"""Constraint registry: per-archetype requirement profiles.

Quick usage::

    from scaffold_engine.constraints import default_constraint_registry

    registry = default_constraint_registry()
    profile = registry.get("expo-mobile")
    outcome = registry.validate(profile)
"""

from scaffold_engine.constraints.models import (
    ArchitectureFlags,
    CapabilityRequirements,
    ComplianceFlags,
    ConstraintOverride,
    ConstraintValidation,
    Platform,
    ProjectConstraints,
    TechStack,
)
from scaffold_engine.constraints.profiles import (
    CHROME_EXTENSION,
    CLI_TOOL,
    DEFAULT_PROFILES,
    DISCORD_BOT,
    ELECTRON_DESKTOP,
    EXPO_MOBILE,
    NEXTJS_WEB,
    NODE_BACKEND,
    NX_MONOREPO,
    SHOPIFY_APP,
    VSCODE_EXTENSION,
)
from scaffold_engine.constraints.registry import (
    ConstraintRegistry,
    default_constraint_registry,
)

__all__ = [
    "CHROME_EXTENSION",
    "CLI_TOOL",
    "DEFAULT_PROFILES",
    "DISCORD_BOT",
    "ELECTRON_DESKTOP",
    "EXPO_MOBILE",
    "NEXTJS_WEB",
    "NODE_BACKEND",
    "NX_MONOREPO",
    "SHOPIFY_APP",
    "VSCODE_EXTENSION",
    "ArchitectureFlags",
    "CapabilityRequirements",
    "ComplianceFlags",
    "ConstraintOverride",
    "ConstraintRegistry",
    "ConstraintValidation",
    "Platform",
    "ProjectConstraints",
    "TechStack",
    "default_constraint_registry",
]
