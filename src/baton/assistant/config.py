"""Research assistant configuration."""

from pydantic import BaseModel, Field

from baton.agents import ToolFailurePolicy, TraceMode


class AssistantConfig(BaseModel):
    """Wiring options for the orchestrator / delegate pair."""

    max_delegation_depth: int = Field(default=1, ge=1)
    max_steps: int = Field(default=8, ge=1)
    trace_mode: TraceMode = TraceMode.opaque
    failure_policy: ToolFailurePolicy = ToolFailurePolicy.recover
    digest_length: int = Field(default=200, ge=1)
    max_search_results: int = Field(default=5, ge=1)
