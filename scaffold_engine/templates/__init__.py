"""Template registry and template content model.

Quick usage::

    from scaffold_engine.constraints import default_constraint_registry
    from scaffold_engine.templates import default_template_registry

    templates = default_template_registry(default_constraint_registry())
    expo = templates.get_by_archetype("expo-mobile")[0]
"""

from scaffold_engine.templates.builtin import (
    builtin_templates,
    default_template_registry,
)
from scaffold_engine.templates.models import (
    BuildSuccessRule,
    CommandSuccessRule,
    CustomRule,
    DependencyKind,
    FileExistsRule,
    GenerationContext,
    GenerationMetadata,
    GenerationTemplate,
    LintPassRule,
    RuleType,
    TemplateCommand,
    TemplateDependency,
    TemplateFile,
    TemplateMerge,
    TestPassRule,
    ValidationRule,
    substitute_placeholders,
)
from scaffold_engine.templates.registry import TemplateRegistry
from scaffold_engine.templates.renderer import (
    TemplateRenderer,
    jinja_content,
    json_content,
    template_vars,
)

__all__ = [
    "BuildSuccessRule",
    "CommandSuccessRule",
    "CustomRule",
    "DependencyKind",
    "FileExistsRule",
    "GenerationContext",
    "GenerationMetadata",
    "GenerationTemplate",
    "LintPassRule",
    "RuleType",
    "TemplateCommand",
    "TemplateDependency",
    "TemplateFile",
    "TemplateMerge",
    "TemplateRegistry",
    "TemplateRenderer",
    "TestPassRule",
    "ValidationRule",
    "builtin_templates",
    "default_template_registry",
    "jinja_content",
    "json_content",
    "substitute_placeholders",
    "template_vars",
]
