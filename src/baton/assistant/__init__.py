"""Research assistant: an orchestrator that delegates email drafting.

Public API exports for the assistant module.
"""

from baton.assistant.agents import (
    DELEGATION_TOOL_NAME,
    EMAIL_AGENT_NAME,
    RESEARCH_AGENT_NAME,
    build_assistant,
    build_email_agent,
    build_research_agent,
)
from baton.assistant.config import AssistantConfig
from baton.assistant.deps import (
    Draft,
    DraftBox,
    EmailDeps,
    InMemoryDraftBox,
    ResearchDeps,
    SearchBackend,
    SearchResult,
    StaticSearch,
)

__all__ = [
    "DELEGATION_TOOL_NAME",
    "EMAIL_AGENT_NAME",
    "RESEARCH_AGENT_NAME",
    "AssistantConfig",
    "Draft",
    "DraftBox",
    "EmailDeps",
    "InMemoryDraftBox",
    "ResearchDeps",
    "SearchBackend",
    "SearchResult",
    "StaticSearch",
    "build_assistant",
    "build_email_agent",
    "build_research_agent",
]
