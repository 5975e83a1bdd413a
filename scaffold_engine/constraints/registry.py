"""Constraint registry: canonical profiles, validation, and merging.

The registry is built once at process start and is read-only afterwards.
Validation and merging are pure functions of their inputs; validation
failures are reported as human-readable strings, never raised.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from .models import (
    ConstraintOverride,
    ConstraintValidation,
    Platform,
    ProjectConstraints,
    TechStack,
)
from .profiles import (
    CHROME_EXTENSION,
    DEFAULT_PROFILES,
    DISCORD_BOT,
    ELECTRON_DESKTOP,
    EXPO_MOBILE,
    NEXTJS_WEB,
    NX_MONOREPO,
    VSCODE_EXTENSION,
)

# Frontend technologies that can target a phone.
MOBILE_FRONTENDS: frozenset[str] = frozenset({"react native", "expo"})


class ConstraintRegistry:
    """Holds one canonical ``ProjectConstraints`` profile per archetype."""

    def __init__(self, profiles: list[ProjectConstraints] | None = None) -> None:
        self._profiles: dict[str, ProjectConstraints] = {}
        for profile in profiles or []:
            self.register(profile)

    # -- Registration / lookup ---------------------------------------------

    def register(self, constraints: ProjectConstraints) -> None:
        """Store the canonical profile for ``constraints.archetype`` (last wins)."""
        self._profiles[constraints.archetype] = constraints

    def get(self, archetype: str) -> ProjectConstraints | None:
        return self._profiles.get(archetype)

    def archetypes(self) -> list[str]:
        """Registered archetype tags in registration order."""
        return list(self._profiles)

    def supported_tech_stack(self, archetype: str) -> TechStack | None:
        profile = self.get(archetype)
        return profile.tech_stack if profile else None

    def required_capabilities(self, archetype: str) -> list[str]:
        """Names of the capabilities the archetype's profile requires."""
        profile = self.get(archetype)
        if profile is None:
            return []
        return profile.requirements.enabled()

    # -- Validation ---------------------------------------------------------

    @staticmethod
    def validate(constraints: ProjectConstraints) -> ConstraintValidation:
        """Check cross-field consistency of a constraint profile.

        Never raises; callers must check ``.valid`` before proceeding.
        """
        errors: list[str] = []
        platforms = constraints.platforms

        if not platforms:
            errors.append("At least one target platform is required")

        if constraints.archetype == EXPO_MOBILE and Platform.MOBILE not in platforms:
            errors.append("Expo projects must target mobile platform")

        if constraints.archetype == ELECTRON_DESKTOP and Platform.DESKTOP not in platforms:
            errors.append("Electron projects must target desktop platform")

        if constraints.archetype == NX_MONOREPO and not constraints.architecture.monorepo:
            errors.append("Nx projects must use monorepo architecture")

        frontend = constraints.tech_stack.frontend
        if platforms == {Platform.MOBILE} and frontend is not None:
            if not any(tech.lower() in MOBILE_FRONTENDS for tech in frontend):
                errors.append("Mobile platforms require React Native or Expo frontend")

        return ConstraintValidation(valid=not errors, errors=errors)

    # -- Merging ------------------------------------------------------------

    @staticmethod
    def merge(
        base: ProjectConstraints,
        override: ConstraintOverride | dict[str, Any] | None,
    ) -> ProjectConstraints:
        """Shallow-merge *override* onto *base*, returning a new profile.

        Top-level scalars and the platform set are replaced when given.  The
        nested groups (tech stack, requirements, architecture, compliance)
        are merged key by key: only keys the override sets replace the base.
        """
        if override is None:
            return base
        if isinstance(override, dict):
            override = ConstraintOverride.model_validate(override)

        update: dict[str, Any] = {}
        if override.archetype is not None:
            update["archetype"] = override.archetype
        if override.platforms is not None:
            update["platforms"] = frozenset(override.platforms)

        for group in ("tech_stack", "requirements", "architecture", "compliance"):
            patch = getattr(override, group)
            if patch is None:
                continue
            current: BaseModel = getattr(base, group)
            update[group] = current.model_copy(update=patch.model_dump(exclude_none=True))

        return base.model_copy(update=update)

    # -- Detection ----------------------------------------------------------

    @staticmethod
    def detect_archetype(project_dir: str | Path) -> str | None:
        """Guess the archetype of an existing project from its marker files."""
        root = Path(project_dir)
        if (root / "nx.json").exists():
            return NX_MONOREPO
        if (root / "app.json").exists():
            return EXPO_MOBILE
        if any(root.glob("next.config.*")):
            return NEXTJS_WEB

        package_json = root / "package.json"
        if package_json.exists():
            try:
                package = json.loads(package_json.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError):
                package = {}
            if not isinstance(package, dict):
                package = {}
            deps = {**package.get("dependencies", {}), **package.get("devDependencies", {})}
            if "electron" in deps:
                return ELECTRON_DESKTOP
            if "@types/vscode" in deps or "vscode" in package.get("engines", {}):
                return VSCODE_EXTENSION
            if "discord.js" in deps:
                return DISCORD_BOT

        manifest = root / "manifest.json"
        if manifest.exists():
            try:
                data = json.loads(manifest.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError):
                data = {}
            if not isinstance(data, dict):
                data = {}
            if "manifest_version" in data:
                return CHROME_EXTENSION
        return None


def default_constraint_registry() -> ConstraintRegistry:
    """Build a registry holding every built-in archetype profile."""
    return ConstraintRegistry(DEFAULT_PROFILES)
