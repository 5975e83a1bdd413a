"""Command-line entry point: ``scaffold-engine``.

Examples::

    scaffold-engine generate expo-mobile "Field Notes" -o ./out
    scaffold-engine generate cli-tool mycli --requirements "add a config command"
    scaffold-engine templates
    scaffold-engine archetypes
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from scaffold_engine.config import Config
from scaffold_engine.constraints import Platform
from scaffold_engine.orchestrator import GenerationOrchestrator, GenerationRequest
from scaffold_engine.report import render_archetypes, render_result, render_templates
from scaffold_engine.utils import console


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scaffold-engine",
        description="Scaffold Engine -- constraint-driven project generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  scaffold-engine generate expo-mobile my-app\n"
            "  scaffold-engine generate nx-monorepo acme -o ./projects --post-enhance\n"
            "  scaffold-engine templates\n"
        ),
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Load settings from a saved JSON config instead of the environment",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Generate a new project")
    generate.add_argument("archetype", help="Project type, e.g. expo-mobile")
    generate.add_argument("name", help="Project name (also the directory name)")
    generate.add_argument(
        "--output", "-o",
        default=None,
        help="Parent directory for the project (default: ./generated-projects)",
    )
    generate.add_argument(
        "--platform",
        action="append",
        choices=[p.value for p in Platform],
        default=None,
        help="Target platform; repeat to target several (default: the archetype's)",
    )
    generate.add_argument(
        "--requirements", "-r",
        default=None,
        help="Free-text requirements passed to the enhancement model",
    )
    generate.add_argument("--template", default=None, help="Use this template id")
    generate.add_argument(
        "--var",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Placeholder variable for {{KEY}}; repeatable",
    )
    generate.add_argument(
        "--post-enhance",
        action="store_true",
        default=None,
        help="Run the post-generation enhancement tasks",
    )
    generate.add_argument(
        "--no-post-enhance",
        dest="post_enhance",
        action="store_false",
        help="Skip the post-generation enhancement tasks even if enabled in config",
    )
    generate.add_argument(
        "--no-llm",
        action="store_true",
        help="Skip the local Ollama enhancement model entirely",
    )
    generate.add_argument("--report", default=None, help="Write the JSON result to this path")

    subparsers.add_parser("templates", help="List the registered templates")
    subparsers.add_parser("archetypes", help="List the supported project types")
    return parser


def _parse_vars(pairs: list[str]) -> dict[str, str]:
    variables: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Invalid --var {pair!r}; expected KEY=VALUE")
        variables[key.strip()] = value
    return variables


async def _generate(
    orchestrator: GenerationOrchestrator,
    request: GenerationRequest,
    report: Path | None,
) -> int:
    result = await orchestrator.generate(request)
    render_result(result)
    if report is not None:
        path = await result.save(report)
        console.print(f"[dim]Report written to {path}[/dim]")
    return 0 if result.success else 1


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    config = Config.load(Path(args.config)) if args.config else Config.from_env()

    if args.command == "templates":
        orchestrator = GenerationOrchestrator.default(config, use_llm=False)
        render_templates(orchestrator.list_templates())
        return 0

    if args.command == "archetypes":
        orchestrator = GenerationOrchestrator.default(config, use_llm=False)
        render_archetypes(orchestrator.constraints)
        return 0

    try:
        variables = _parse_vars(args.var)
    except ValueError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        return 2

    request = GenerationRequest(
        archetype=args.archetype,
        project_name=args.name,
        platforms=args.platform,
        custom_requirements=args.requirements,
        output_dir=Path(args.output) if args.output else None,
        variables=variables,
        template_id=args.template,
        post_enhance=args.post_enhance,
    )
    orchestrator = GenerationOrchestrator.default(config, use_llm=not args.no_llm)
    report = Path(args.report) if args.report else None
    return asyncio.run(_generate(orchestrator, request, report))


if __name__ == "__main__":
    sys.exit(main())
