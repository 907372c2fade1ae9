"""Provider configuration models.

Defines per-provider configuration and per-role model roster.
Uses BaseModel (not BaseSettings); only the CLI front-end reads the environment.
"""

import os

from pydantic import BaseModel


def resolve_default_model() -> str:
    """Resolve the default AI model based on available credentials.

    Checks in order:
    1. ANTHROPIC_API_KEY set → "anthropic:claude-sonnet-4-5"
    2. OPENAI_API_KEY set → "openai:gpt-4o"
    3. Neither → raise RuntimeError with clear instructions

    Returns:
        Full model string ready for PydanticAIGenerator.
    """
    if os.environ.get("ANTHROPIC_API_KEY"):
        return "anthropic:claude-sonnet-4-5"

    if os.environ.get("OPENAI_API_KEY"):
        return "openai:gpt-4o"

    msg = (
        "No AI provider configured. Either:\n"
        "  1. Set ANTHROPIC_API_KEY environment variable, or\n"
        "  2. Set OPENAI_API_KEY environment variable, or\n"
        "  3. Pass --model explicitly (e.g. --model anthropic:claude-haiku-4-5)"
    )
    raise RuntimeError(msg)


class ProviderConfig(BaseModel):
    """Configuration for a single AI provider/model."""

    provider: str = "anthropic"
    model: str = "claude-sonnet-4-5"
    retries: int = 1

    @property
    def model_string(self) -> str:
        """Shorthand accepted by Pydantic AI, e.g. "anthropic:claude-sonnet-4-5"."""
        return f"{self.provider}:{self.model}"

    @classmethod
    def from_model_string(cls, model: str) -> "ProviderConfig":
        """Build from "provider:name" shorthand."""
        if ":" in model:
            provider, name = model.split(":", 1)
            return cls(provider=provider, model=name)
        return cls(model=model)


class ModelRoster(BaseModel):
    """Per-role model assignment.

    - orchestrator: plans, searches and decides when to delegate (Sonnet)
    - delegate: drafts emails from research context (Haiku, cheaper)
    """

    orchestrator: ProviderConfig = ProviderConfig(model="claude-sonnet-4-5")
    delegate: ProviderConfig = ProviderConfig(model="claude-haiku-4-5")

    @classmethod
    def single(cls, model: str) -> "ModelRoster":
        """Use the same model for every role."""
        config = ProviderConfig.from_model_string(model)
        return cls(orchestrator=config, delegate=config)
