"""Baton providers — the language-model boundary of an agent."""

from baton.providers.base import (
    FinalAnswer,
    GenerationRequest,
    GenerationStep,
    Generator,
    ToolCall,
    ToolSpec,
)
from baton.providers.config import ModelRoster, ProviderConfig, resolve_default_model
from baton.providers.pydantic_ai import PlannerDecision, PydanticAIGenerator

__all__ = [
    "FinalAnswer",
    "GenerationRequest",
    "GenerationStep",
    "Generator",
    "ModelRoster",
    "PlannerDecision",
    "ProviderConfig",
    "PydanticAIGenerator",
    "ToolCall",
    "ToolSpec",
    "resolve_default_model",
]
