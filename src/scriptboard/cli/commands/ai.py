"""AI collaborator commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from scriptboard.ai import AIResult, AIService
from scriptboard.board import ScriptDocument
from scriptboard.cli.formatters.json_formatter import JsonFormatter
from scriptboard.cli.utils.cli_handler import (
    CLIHandler,
    async_cli_command,
    load_config_with_validation,
)
from scriptboard.llm import create_llm_provider

console = Console()

ai_app = typer.Typer(
    name="ai",
    help="Ask an LLM to summarize, rewrite, fill gaps or brainstorm",
    pretty_exceptions_enable=False,
    add_completion=False,
)

ScriptArgument = Annotated[Path, typer.Argument(help="Path to the script file")]
IndexArgument = Annotated[
    int, typer.Argument(help="Block index as shown by 'scriptboard board'")
]
JsonOption = Annotated[bool, typer.Option("--json", help="Output as JSON")]
ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config", "-c", help="Path to configuration file (YAML, TOML, or JSON)"
    ),
]


def _report(result: AIResult, json_output: bool, title: str) -> None:
    handler = CLIHandler(console)
    if not result.success:
        handler.handle_error(RuntimeError(result.error), json_output)
    if json_output:
        print(JsonFormatter().format(result))
        return
    console.print(Panel(escape(result.text), title=title, border_style="green"))


@ai_app.command(name="summarize")
@async_cli_command
async def summarize(
    script: ScriptArgument,
    index: IndexArgument,
    json_output: JsonOption = False,
    config: ConfigOption = None,
) -> None:
    """Write a one-sentence summary into a block."""
    settings = load_config_with_validation(config)
    async with create_llm_provider(settings) as provider:
        service = AIService(ScriptDocument(script), provider, settings)
        result = await service.summarize_block(index)
    _report(result, json_output, f"Summary of block {result.block_index}")


@ai_app.command(name="summarize-all")
@async_cli_command
async def summarize_all(
    script: ScriptArgument,
    json_output: JsonOption = False,
    config: ConfigOption = None,
) -> None:
    """Summarize every scene that has no summary, in one request."""
    settings = load_config_with_validation(config)
    async with create_llm_provider(settings) as provider:
        service = AIService(ScriptDocument(script), provider, settings)
        result = await service.summarize_all()

    handler = CLIHandler(console)
    if not result.success:
        handler.handle_error(RuntimeError(result.error), json_output)
    if json_output:
        print(JsonFormatter().format(result))
    elif result.attempted == 0:
        console.print("[green]Every scene already has a summary[/green]")
    else:
        console.print(
            f"[green]Applied {result.applied} of {result.attempted} summaries[/green]"
        )


@ai_app.command(name="rewrite")
@async_cli_command
async def rewrite(
    script: ScriptArgument,
    index: IndexArgument,
    json_output: JsonOption = False,
    config: ConfigOption = None,
) -> None:
    """Expand a block's rough notes into screenplay text."""
    settings = load_config_with_validation(config)
    async with create_llm_provider(settings) as provider:
        service = AIService(ScriptDocument(script), provider, settings)
        result = await service.rewrite_block(index)
    _report(result, json_output, f"Rewrote block {result.block_index}")


@ai_app.command(name="generate")
@async_cli_command
async def generate(
    script: ScriptArgument,
    after: Annotated[
        int, typer.Argument(help="Insert after this block; 0 means after the preamble")
    ],
    json_output: JsonOption = False,
    config: ConfigOption = None,
) -> None:
    """Write a new scene that bridges its neighbors."""
    settings = load_config_with_validation(config)
    async with create_llm_provider(settings) as provider:
        service = AIService(ScriptDocument(script), provider, settings)
        result = await service.generate_scene(after)
    _report(result, json_output, f"New block {result.block_index}")


@ai_app.command(name="brainstorm")
@async_cli_command
async def brainstorm(
    script: ScriptArgument,
    index: IndexArgument,
    json_output: JsonOption = False,
    config: ConfigOption = None,
) -> None:
    """Ask questions about a block without changing it."""
    settings = load_config_with_validation(config)
    async with create_llm_provider(settings) as provider:
        service = AIService(ScriptDocument(script), provider, settings)
        result = await service.brainstorm(index)
    _report(result, json_output, "Questions")
