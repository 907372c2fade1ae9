"""Baton — multi-agent delegation core.

An orchestrator agent calls a secondary agent as an ordinary tool, sharing one usage
ledger across the whole call tree and streaming the delegation to its caller.
"""

from baton.agents import Agent, AgentTool, Tool, ToolFailurePolicy, TraceMode
from baton.errors import (
    BatonError,
    DelegationDepthExceeded,
    DelegationFailure,
    GenerationFailure,
    InvalidInput,
    LedgerClosed,
    LedgerOverflow,
    StepLimitExceeded,
    ToolFailure,
)
from baton.types import AgentResult, RunState, ToolCallRecord, ToolCallStatus, UsageSnapshot
from baton.usage import UsageLedger

__version__ = "0.1.0.dev0"

__all__ = [
    "Agent",
    "AgentResult",
    "AgentTool",
    "BatonError",
    "DelegationDepthExceeded",
    "DelegationFailure",
    "GenerationFailure",
    "InvalidInput",
    "LedgerClosed",
    "LedgerOverflow",
    "RunState",
    "StepLimitExceeded",
    "Tool",
    "ToolCallRecord",
    "ToolCallStatus",
    "ToolFailure",
    "ToolFailurePolicy",
    "TraceMode",
    "UsageLedger",
    "UsageSnapshot",
    "__version__",
]
