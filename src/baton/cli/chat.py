"""CLI command for a single research-assistant turn."""

import asyncio
import json
from pathlib import Path

from pydantic import TypeAdapter
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from baton.agents import (
    Agent,
    RunCompleted,
    RunEvent,
    StateChanged,
    ToolCallFinished,
    ToolCallStarted,
    ToolFailurePolicy,
    TraceMode,
)
from baton.assistant import (
    AssistantConfig,
    EmailDeps,
    InMemoryDraftBox,
    ResearchDeps,
    SearchResult,
    StaticSearch,
    build_assistant,
)
from baton.errors import BatonError
from baton.providers import Generator, ModelRoster, PydanticAIGenerator
from baton.types import AgentResult, ToolCallRecord

console = Console()


def build_generators(roster: ModelRoster) -> tuple[Generator[ResearchDeps], Generator[EmailDeps]]:
    """Create one Pydantic AI generator per role."""
    return (
        PydanticAIGenerator(roster.orchestrator.model_string, retries=roster.orchestrator.retries),
        PydanticAIGenerator(roster.delegate.model_string, retries=roster.delegate.retries),
    )


def load_sources(path: Path | None) -> list[SearchResult]:
    """Load canned search results from a JSON list of {title, url, snippet}."""
    if path is None:
        return []
    return TypeAdapter(list[SearchResult]).validate_json(path.read_text(encoding="utf-8"))


def chat_command(
    prompt: str,
    roster: ModelRoster,
    format: str = "human",
    sources: Path | None = None,
    sender: str = "assistant@example.com",
    trace_mode: TraceMode = TraceMode.opaque,
    failure_policy: ToolFailurePolicy = ToolFailurePolicy.recover,
    max_depth: int = 1,
) -> int:
    """Run one orchestrator turn and render it.

    Args:
        prompt: User prompt for the orchestrator
        roster: Models per agent role
        format: Output format: "human", "json", or "jsonl"
        sources: Optional JSON file with canned search results
        sender: From-address for drafted emails
        trace_mode: Delegation trace visibility
        failure_policy: Reaction to failed tools
        max_depth: Maximum delegation depth

    Returns:
        Exit code (0 = completed, 2 = completed degraded, 1 = failed)
    """
    config = AssistantConfig(
        max_delegation_depth=max_depth,
        trace_mode=trace_mode,
        failure_policy=failure_policy,
    )
    try:
        search = StaticSearch(load_sources(sources))
        orchestrator_gen, delegate_gen = build_generators(roster)
    except Exception as e:
        _output_error(str(e), (), format)
        return 1

    drafts = InMemoryDraftBox()
    deps = ResearchDeps(search=search, email=EmailDeps(drafts=drafts, sender=sender))
    agent = build_assistant(orchestrator_gen, delegate_gen, config)

    try:
        result = asyncio.run(_stream(agent, prompt, deps, format))
    except BatonError as e:
        _output_error(str(e), e.tool_calls, format)
        return 1

    _output_result(result, drafts, format)
    return 2 if result.degraded else 0


async def _stream(
    agent: Agent[ResearchDeps, str], prompt: str, deps: ResearchDeps, format: str
) -> AgentResult[str]:
    result: AgentResult[str] | None = None
    async for event in agent.run_stream(prompt, deps):
        if format == "jsonl":
            print(event.model_dump_json())
        elif format == "human":
            _render_event(event)
        if isinstance(event, RunCompleted) and event.depth == 0:
            result = event.result
    if result is None:
        raise RuntimeError(f"{agent.name} finished without a result")
    return result


def _render_event(event: RunEvent) -> None:
    indent = "  " * event.depth
    if isinstance(event, StateChanged):
        console.print(f"{indent}[dim]{event.agent}: {event.state}[/dim]")
    elif isinstance(event, ToolCallStarted):
        args = json.dumps(event.arguments, default=str)
        console.print(f"{indent}[cyan]→ {event.agent} calls {event.tool_name}[/cyan] {args}")
    elif isinstance(event, ToolCallFinished):
        record = event.record
        if record.failed:
            console.print(f"{indent}[red]✗ {record.tool_name}: {record.error}[/red]")
        else:
            console.print(f"{indent}[green]✓ {record.tool_name}[/green] {record.result_summary}")


def _trace_table(tool_calls: tuple[ToolCallRecord, ...]) -> Table:
    table = Table(title="Tool calls", show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Tool")
    table.add_column("Arguments")
    table.add_column("Result")
    for i, record in enumerate(tool_calls, 1):
        outcome = f"[red]{record.error}[/red]" if record.failed else record.result_summary
        table.add_row(str(i), record.tool_name, json.dumps(record.arguments, default=str), outcome)
    return table


def _output_result(result: AgentResult[str], drafts: InMemoryDraftBox, format: str) -> None:
    if format == "json":
        payload = result.model_dump(mode="json")
        payload["drafts"] = [d.model_dump() for d in drafts.drafts]
        print(json.dumps(payload, indent=2))
        return

    if format == "jsonl":
        return

    console.print()
    console.print(Panel(result.data, title=f"{result.agent} answer"))
    if result.tool_calls:
        console.print(_trace_table(result.tool_calls))
    for draft in drafts.drafts:
        console.print(f"[dim]Draft {draft.draft_id} → {draft.to}: {draft.subject}[/dim]")

    usage = result.usage
    console.print(
        f"[dim]Usage: {usage.requests_issued} requests, {usage.units_consumed} units, "
        f"${usage.cost_usd:.4f}[/dim]"
    )
    if usage.saturated:
        console.print("[yellow]Usage counters saturated; totals are a lower bound.[/yellow]")
    if result.degraded:
        console.print("[yellow]⚠ Answered with degraded information:[/yellow]")
        for note in result.recoveries:
            console.print(f"  [yellow]- {note}[/yellow]")


def _output_error(message: str, tool_calls: tuple[ToolCallRecord, ...], format: str) -> None:
    if format == "human":
        console.print(f"[red]Error:[/red] {message}")
        if tool_calls:
            console.print(_trace_table(tool_calls))
    else:
        calls = [record.model_dump(mode="json") for record in tool_calls]
        print(json.dumps({"error": message, "tool_calls": calls}))
