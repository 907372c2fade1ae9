"""Core provider abstractions.

This module defines the boundary between an agent and its language model:
- ToolSpec: what the model is told about one available tool
- GenerationRequest: everything one planning step sees
- ToolCall / FinalAnswer: the two outcomes of a planning step
- Generator: abstract base class for all provider implementations

No pydantic-ai dependency here — pure foundation layer.
"""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from baton.types import ToolCallRecord


class ToolSpec(BaseModel):
    """Description of one tool as presented to the model."""

    name: str
    description: str = ""
    parameters: dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    def signature(self) -> str:
        """Render as `name(a: str, b: int)` for prompt building."""
        params = ", ".join(f"{k}: {v}" for k, v in self.parameters.items())
        return f"{self.name}({params})"


class GenerationRequest(BaseModel):
    """Input of a single planning step."""

    prompt: str
    system_directive: str
    tools: tuple[ToolSpec, ...] = ()
    history: tuple[ToolCallRecord, ...] = ()
    tool_returns: tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True)


class ToolCall(BaseModel):
    """Planning outcome: invoke a tool, then plan again."""

    tool_name: str
    arguments: dict[str, Any] = Field(default_factory=dict)
    units: int = 0
    cost_usd: float = 0.0

    model_config = ConfigDict(frozen=True)


class FinalAnswer(BaseModel):
    """Planning outcome: the run is done, `text` becomes the result data."""

    text: str
    units: int = 0
    cost_usd: float = 0.0

    model_config = ConfigDict(frozen=True)


type GenerationStep = ToolCall | FinalAnswer


class Generator[DepsT](ABC):
    """Abstract base class for all generation providers.

    Generic over DepsT, the dependency bundle of the agent the generator serves.
    """

    @abstractmethod
    async def generate(self, request: GenerationRequest, deps: DepsT) -> GenerationStep:
        """Run one planning step.

        Args:
            request: Prompt, system directive, available tools and trace so far
            deps: The calling agent's dependency bundle

        Returns:
            A ToolCall or a FinalAnswer, carrying the usage it consumed

        Raises:
            GenerationFailure: If the provider call fails
        """
        ...
