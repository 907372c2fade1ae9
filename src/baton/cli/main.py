"""Baton CLI application."""

import logging
from enum import StrEnum
from pathlib import Path
from typing import Annotated

import typer
from rich import print as rprint

import baton as baton_pkg
from baton.agents import ToolFailurePolicy, TraceMode


class OutputFormat(StrEnum):
    """Output format for CLI commands."""

    human = "human"
    json = "json"
    jsonl = "jsonl"


app = typer.Typer(
    name="baton",
    help="Research assistant that delegates email drafting to a second agent.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    if value:
        rprint(f"baton {baton_pkg.__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Log run progress to stderr."),
    ] = False,
) -> None:
    """Baton — multi-agent delegation with a shared usage ledger."""
    from dotenv import load_dotenv

    load_dotenv()
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
        )


@app.command("chat")
def chat(
    prompt: Annotated[str, typer.Argument(help="What to ask the research assistant")],
    model: Annotated[
        str | None,
        typer.Option("--model", "-m", help="Model for both agents (provider:name)"),
    ] = None,
    delegate_model: Annotated[
        str | None,
        typer.Option("--delegate-model", help="Separate model for the email agent"),
    ] = None,
    sources: Annotated[
        Path | None,
        typer.Option("--sources", "-s", help="JSON file with search results to serve"),
    ] = None,
    sender: Annotated[
        str,
        typer.Option("--sender", help="From-address for drafted emails"),
    ] = "assistant@example.com",
    trace: Annotated[
        TraceMode,
        typer.Option("--trace", help="Delegation trace visibility"),
    ] = TraceMode.opaque,
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Fail the turn when any tool fails"),
    ] = False,
    max_depth: Annotated[
        int,
        typer.Option("--max-depth", help="Maximum delegation depth", min=1),
    ] = 1,
    format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format"),
    ] = OutputFormat.human,
) -> None:
    """Run one research-assistant turn and show its trace."""
    from baton.cli.chat import chat_command
    from baton.providers import ModelRoster, ProviderConfig, resolve_default_model

    try:
        roster = ModelRoster.single(model or resolve_default_model())
    except RuntimeError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e
    if delegate_model:
        roster.delegate = ProviderConfig.from_model_string(delegate_model)

    exit_code = chat_command(
        prompt=prompt,
        roster=roster,
        format=format.value,
        sources=sources,
        sender=sender,
        trace_mode=trace,
        failure_policy=ToolFailurePolicy.fail if strict else ToolFailurePolicy.recover,
        max_depth=max_depth,
    )
    raise typer.Exit(exit_code)
