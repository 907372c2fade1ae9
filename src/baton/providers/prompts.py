"""Planning prompt rendering for model-backed generators.

Kept deliberately plain: the tool list and the trace so far, then the prompt.
"""

import json

from baton.providers.base import GenerationRequest
from baton.types import ToolCallRecord

DECISION_INSTRUCTIONS = (
    "Decide the next step. To call a tool, set tool_name and arguments. "
    "To finish, leave tool_name empty and put the complete reply in answer."
)


def format_history_entry(record: ToolCallRecord, value: str | None = None) -> str:
    """Render one trace entry, with the full tool return when available."""
    args = json.dumps(record.arguments, sort_keys=True, default=str)
    if record.failed:
        return f"- {record.tool_name}({args}) FAILED: {record.error}"
    shown = record.result_summary if value is None else value
    return f"- {record.tool_name}({args}) -> {shown}"


def build_planning_prompt(request: GenerationRequest) -> str:
    """Build the user prompt for one planning step.

    Args:
        request: Generation request with prompt, tools and history

    Returns:
        Prompt string
    """
    sections = [request.prompt]

    if request.tools:
        lines = [f"- {spec.signature()}: {spec.description}" for spec in request.tools]
        sections.append("Available tools:\n" + "\n".join(lines))

    if request.history:
        # tool_returns, when given, is aligned with history
        returns = request.tool_returns or (None,) * len(request.history)
        lines = [
            format_history_entry(record, value)
            for record, value in zip(request.history, returns, strict=True)
        ]
        sections.append("Tool results so far:\n" + "\n".join(lines))

    sections.append(DECISION_INSTRUCTIONS)
    return "\n\n".join(sections)
