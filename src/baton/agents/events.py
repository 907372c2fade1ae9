"""Run events streamed to an observing front-end.

Events from delegated sub-runs flow through the same callback as the parent's, tagged
with the emitting agent and its delegation depth. They are observation only: a parent's
trace never includes its delegate's tool calls.
"""

from collections.abc import Callable
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from baton.types import AgentResult, RunState, ToolCallRecord


class StateChanged(BaseModel):
    """An agent run moved to a new lifecycle state."""

    kind: Literal["state"] = "state"
    agent: str
    depth: int
    state: RunState

    model_config = ConfigDict(frozen=True)


class ToolCallStarted(BaseModel):
    """An agent is about to invoke a tool."""

    kind: Literal["tool_started"] = "tool_started"
    agent: str
    depth: int
    tool_name: str
    arguments: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)


class ToolCallFinished(BaseModel):
    """A tool invocation finished; `record` is what was appended to the trace."""

    kind: Literal["tool_finished"] = "tool_finished"
    agent: str
    depth: int
    record: ToolCallRecord

    model_config = ConfigDict(frozen=True)


class RunCompleted(BaseModel):
    """An agent run produced its result."""

    kind: Literal["completed"] = "completed"
    agent: str
    depth: int
    result: AgentResult

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


type RunEvent = StateChanged | ToolCallStarted | ToolCallFinished | RunCompleted

type EventCallback = Callable[[RunEvent], None]
