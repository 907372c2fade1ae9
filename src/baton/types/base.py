"""Foundational types for agent runs.

These types are shared across all modules and form the core vocabulary of the system:
- UsageSnapshot: immutable copy of a UsageLedger's totals
- ToolCallRecord: one entry in a run's trace
- AgentResult: structured output from an agent run

These types have no dependencies on other baton modules (pure foundation layer).
"""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RunState(StrEnum):
    """Lifecycle states of a single agent run."""

    received = "received"
    planning = "planning"
    tool_executing = "tool_executing"
    finalizing = "finalizing"
    completed = "completed"
    failed = "failed"


class ToolCallStatus(StrEnum):
    """Outcome of a single tool invocation."""

    succeeded = "succeeded"
    failed = "failed"


class UsageSnapshot(BaseModel):
    """Point-in-time copy of a UsageLedger.

    `saturated` is True once any counter hit the ledger's limit, meaning the totals
    are a lower bound rather than exact.
    """

    requests_issued: int = 0
    units_consumed: int = 0
    cost_usd: float = 0.0
    saturated: bool = False

    model_config = ConfigDict(frozen=True)


class ToolCallRecord(BaseModel):
    """One tool invocation, plain or delegated, as seen by the calling agent."""

    tool_name: str
    arguments: dict[str, Any] = Field(default_factory=dict)
    result_summary: str = ""
    status: ToolCallStatus = ToolCallStatus.succeeded
    error: str | None = None
    nested: "AgentResult | None" = None

    model_config = ConfigDict(frozen=True)

    @property
    def failed(self) -> bool:
        return self.status == ToolCallStatus.failed


class AgentResult[DataT](BaseModel):
    """Result from an agent run.

    Generic over data type to support both structured (BaseModel) and unstructured (str)
    outputs. Produced exactly once per successful run.
    """

    agent: str
    data: DataT
    usage: UsageSnapshot
    tool_calls: tuple[ToolCallRecord, ...] = ()
    state: RunState = RunState.completed
    degraded: bool = False
    recoveries: tuple[str, ...] = ()
    duration_ms: int = 0

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


ToolCallRecord.model_rebuild()
