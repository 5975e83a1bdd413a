"""Post-generation validation rules.

Each ``ValidationRule`` variant is evaluated by a single ``match`` in
``evaluate_rule``.  Command-based rules (command-success, lint-pass,
test-pass, build-success) share the same mechanics and differ only in how
they are reported.  Overall success is the logical AND of every result.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Iterable, Sequence

from pydantic import BaseModel, Field

from scaffold_engine.templates.models import (
    BuildSuccessRule,
    CommandSuccessRule,
    CustomRule,
    FileExistsRule,
    GenerationContext,
    LintPassRule,
    RuleType,
    TestPassRule,
    ValidationRule,
)
from scaffold_engine.utils import resolve_within, run_command


class ValidationResult(BaseModel):
    """Outcome of one validation rule."""

    rule_type: RuleType
    description: str = ""
    passed: bool
    message: str = Field(default="", description="Human-readable reason, mostly for failures")


# ---------------------------------------------------------------------------
# Rule evaluation
# ---------------------------------------------------------------------------

async def _check_files(rule: FileExistsRule, context: GenerationContext) -> ValidationResult:
    root = context.project_path

    def _scan() -> tuple[list[str], list[str]]:
        missing: list[str] = []
        outside: list[str] = []
        for path in rule.files:
            target = resolve_within(root, path)
            if target is None:
                outside.append(path)
            elif not target.exists():
                missing.append(path)
        return missing, outside

    missing, outside = await asyncio.to_thread(_scan)
    if missing or outside:
        problems: list[str] = []
        if missing:
            problems.append(f"Missing files: {', '.join(missing)}")
        if outside:
            problems.append(f"Outside project: {', '.join(outside)}")
        return ValidationResult(
            rule_type=rule.type,
            description=rule.description,
            passed=False,
            message="; ".join(problems),
        )
    return ValidationResult(
        rule_type=rule.type,
        description=rule.description,
        passed=True,
        message=f"All {len(rule.files)} file(s) present",
    )


async def _check_command(
    rule: CommandSuccessRule | LintPassRule | TestPassRule | BuildSuccessRule,
    context: GenerationContext,
    timeout: int,
) -> ValidationResult:
    command = context.resolve(rule.command)
    try:
        returncode, stdout, stderr = await run_command(
            command, cwd=context.project_path, timeout=timeout
        )
    except OSError as exc:
        return ValidationResult(
            rule_type=rule.type,
            description=rule.description,
            passed=False,
            message=f"Could not run '{command}': {exc}",
        )

    if returncode == 0:
        return ValidationResult(
            rule_type=rule.type,
            description=rule.description,
            passed=True,
            message=f"'{command}' exited with status 0",
        )
    detail = (stderr or stdout)[-500:]
    message = f"'{command}' exited with status {returncode}"
    if detail:
        message = f"{message}: {detail}"
    return ValidationResult(
        rule_type=rule.type, description=rule.description, passed=False, message=message
    )


async def _check_custom(rule: CustomRule, context: GenerationContext) -> ValidationResult:
    try:
        outcome = rule.predicate(context)
        if inspect.isawaitable(outcome):
            outcome = await outcome
    except Exception as exc:  # noqa: BLE001
        return ValidationResult(
            rule_type=rule.type,
            description=rule.description,
            passed=False,
            message=f"Predicate raised {type(exc).__name__}: {exc}",
        )
    passed = bool(outcome)
    return ValidationResult(
        rule_type=rule.type,
        description=rule.description,
        passed=passed,
        message="" if passed else "Predicate returned false",
    )


async def evaluate_rule(
    rule: ValidationRule, context: GenerationContext, timeout: int = 600
) -> ValidationResult:
    """Evaluate one rule against the materialized project.

    Never raises for a rule failure: command errors and predicate
    exceptions become a failed ``ValidationResult``.
    """
    match rule:
        case FileExistsRule():
            return await _check_files(rule, context)
        case CommandSuccessRule() | LintPassRule() | TestPassRule() | BuildSuccessRule():
            return await _check_command(rule, context, timeout)
        case CustomRule():
            return await _check_custom(rule, context)
        case _:
            raise TypeError(f"Unknown validation rule: {rule!r}")


async def run_validations(
    rules: Iterable[ValidationRule], context: GenerationContext, timeout: int = 600
) -> list[ValidationResult]:
    """Evaluate every rule in order; no rule short-circuits another."""
    results: list[ValidationResult] = []
    for rule in rules:
        results.append(await evaluate_rule(rule, context, timeout))
    return results


def all_passed(results: Sequence[ValidationResult]) -> bool:
    """Logical AND over the results (true for an empty list)."""
    return all(result.passed for result in results)
