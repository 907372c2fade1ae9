"""Pydantic AI generator implementation.

Wraps a Pydantic AI Agent whose structured output is a PlannerDecision, and maps its
RunUsage onto the units and cost that the calling agent records on its ledger.
"""

from typing import Any

from pydantic import BaseModel, Field
from pydantic_ai import Agent, RunContext
from pydantic_ai.exceptions import AgentRunError
from pydantic_ai.models import KnownModelName, Model

from baton.errors import GenerationFailure
from baton.providers.base import (
    FinalAnswer,
    GenerationRequest,
    GenerationStep,
    Generator,
    ToolCall,
)
from baton.providers.prompts import build_planning_prompt
from baton.usage.pricing import calculate_cost


class PlannerDecision(BaseModel):
    """Structured output requested from the model at every planning step."""

    tool_name: str | None = Field(default=None, description="Tool to call, empty to finish")
    arguments: dict[str, Any] = Field(default_factory=dict, description="Tool arguments")
    answer: str | None = Field(default=None, description="Final reply when not calling a tool")


def _system_directive(ctx: RunContext[GenerationRequest]) -> str:
    return ctx.deps.system_directive


class PydanticAIGenerator[DepsT](Generator[DepsT]):
    """Pydantic AI implementation of Generator.

    Example:
        generator = PydanticAIGenerator(model="anthropic:claude-sonnet-4-5")

        # Offline, no API key
        generator = PydanticAIGenerator(model=TestModel(custom_output_args={"answer": "hi"}))
    """

    def __init__(self, model: Model | KnownModelName | str, retries: int = 1) -> None:
        """Initialize generator with a model.

        Args:
            model: Pydantic AI model (Model instance or "provider:name" shorthand)
            retries: Output validation retries inside Pydantic AI
        """
        self._agent: Agent[GenerationRequest, PlannerDecision] = Agent(
            model=model,
            output_type=PlannerDecision,
            deps_type=GenerationRequest,
            retries=retries,
        )
        self._agent.system_prompt(_system_directive)

        self.model_name, self.provider_name = self._parse_model_name(model)

    def _parse_model_name(self, model: Model | KnownModelName | str) -> tuple[str, str]:
        """Extract model name and provider from model identifier.

        Args:
            model: Model specification

        Returns:
            Tuple of (model_name, provider_name)
        """
        if isinstance(model, Model):
            return (model.model_name, model.system)

        # Shorthand like "anthropic:claude-sonnet-4-5"
        if ":" in model:
            provider, model_name = model.split(":", 1)
            return (model_name, provider)
        return (model, "unknown")

    async def generate(self, request: GenerationRequest, deps: DepsT) -> GenerationStep:
        """Run one planning step through Pydantic AI.

        Args:
            request: Prompt, directive, tools and trace so far
            deps: The calling agent's dependency bundle (not sent to the model)

        Returns:
            ToolCall when the model picked a tool, FinalAnswer otherwise

        Raises:
            GenerationFailure: If Pydantic AI reports a failed run or the provider call
                raises (network, client or configuration errors)
        """
        try:
            result = await self._agent.run(
                build_planning_prompt(request),
                deps=request,
            )
        except AgentRunError as e:
            raise GenerationFailure(f"{self.provider_name}:{self.model_name} failed: {e}") from e
        except Exception as e:
            raise GenerationFailure(
                f"{self.provider_name}:{self.model_name} request error: {e!r}"
            ) from e

        run_usage = result.usage()
        input_tokens = run_usage.input_tokens or 0
        output_tokens = run_usage.output_tokens or 0
        units = input_tokens + output_tokens
        cost = calculate_cost(input_tokens, output_tokens, self.model_name)

        decision = result.output
        if decision.tool_name:
            return ToolCall(
                tool_name=decision.tool_name,
                arguments=decision.arguments,
                units=units,
                cost_usd=cost,
            )
        return FinalAnswer(text=decision.answer or "", units=units, cost_usd=cost)
