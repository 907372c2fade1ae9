"""Baton types — shared vocabulary for runs, traces and usage."""

from baton.types.base import AgentResult, RunState, ToolCallRecord, ToolCallStatus, UsageSnapshot

__all__ = [
    "AgentResult",
    "RunState",
    "ToolCallRecord",
    "ToolCallStatus",
    "UsageSnapshot",
]
