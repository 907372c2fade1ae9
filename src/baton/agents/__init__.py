"""Agents — the run loop, tools and the delegation bridge.

Public API exports for the agents module.
"""

from baton.agents.agent import Agent, ToolFailurePolicy
from baton.agents.bridge import AgentTool, TraceMode
from baton.agents.events import (
    EventCallback,
    RunCompleted,
    RunEvent,
    StateChanged,
    ToolCallFinished,
    ToolCallStarted,
)
from baton.agents.tools import BaseTool, RunContext, Tool, ToolOutput, ToolSet, digest

__all__ = [
    "Agent",
    "AgentTool",
    "BaseTool",
    "EventCallback",
    "RunCompleted",
    "RunContext",
    "RunEvent",
    "StateChanged",
    "Tool",
    "ToolCallFinished",
    "ToolCallStarted",
    "ToolFailurePolicy",
    "ToolOutput",
    "ToolSet",
    "TraceMode",
    "digest",
]
