"""Tool Invocation Bridge — another agent exposed as a plain tool.

The bridge builds a sub-prompt from the declared arguments alone, runs the secondary
agent on the caller's own ledger one level deeper, and hands its data back as a
string. The caller records a single ToolCallRecord for the whole delegation.
"""

import logging
import string
from collections.abc import Callable, Sequence
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from baton.agents.tools import (
    DEFAULT_DIGEST_LENGTH,
    BaseTool,
    RunContext,
    ToolOutput,
    digest,
    render_value,
)
from baton.errors import DelegationDepthExceeded, DelegationFailure, InvalidInput, LedgerClosed
from baton.providers.base import ToolSpec

if TYPE_CHECKING:
    from baton.agents.agent import Agent

logger = logging.getLogger(__name__)


class TraceMode(StrEnum):
    """How much of a delegated run the parent's trace exposes.

    opaque: the record carries only a digest of the delegate's result
    nested: the record also carries the delegate's full AgentResult
    """

    opaque = "opaque"
    nested = "nested"


class AgentTool[ParentDepsT, ChildDepsT](BaseTool):
    """Delegation tool bound to a secondary agent."""

    def __init__(
        self,
        agent: "Agent[ChildDepsT, Any]",
        *,
        name: str,
        description: str,
        parameters: Sequence[str],
        deps: ChildDepsT | None = None,
        deps_factory: Callable[[ParentDepsT], ChildDepsT] | None = None,
        prompt_template: str | None = None,
        max_depth: int = 1,
        trace_mode: TraceMode = TraceMode.opaque,
        digest_length: int = DEFAULT_DIGEST_LENGTH,
    ) -> None:
        """Bind a secondary agent as a tool.

        Args:
            agent: Secondary agent to run on each invocation
            name: Tool name shown to the calling agent's generator
            description: Tool description shown to the generator
            parameters: Declared argument names, in sub-prompt order
            deps: Fixed dependency bundle for the secondary agent
            deps_factory: Derives the secondary bundle from the caller's bundle
            prompt_template: Optional str.format template over the arguments
            max_depth: Deepest delegation level this tool may start
            trace_mode: Whether to attach the nested AgentResult to the record
            digest_length: Maximum length of the record's result summary

        Raises:
            ValueError: On an invalid configuration
        """
        if (deps is None) == (deps_factory is None):
            raise ValueError("exactly one of deps or deps_factory is required")
        if max_depth < 1:
            raise ValueError("max_depth must be at least 1")
        if not parameters:
            raise ValueError("a delegation tool needs at least one parameter")
        if prompt_template is not None:
            _check_template(prompt_template, parameters)

        self.agent = agent
        self.name = name
        self.description = description
        self.parameters = tuple(parameters)
        self.deps = deps
        self.deps_factory = deps_factory
        self.prompt_template = prompt_template
        self.max_depth = max_depth
        self.trace_mode = trace_mode
        self.digest_length = digest_length

    def spec(self) -> ToolSpec:
        return ToolSpec(
            name=self.name,
            description=self.description,
            parameters={param: "str" for param in self.parameters},
        )

    def build_sub_prompt(self, arguments: dict[str, Any]) -> str:
        """Build the secondary agent's prompt from the declared arguments only.

        Raises:
            InvalidInput: If arguments are missing or undeclared, or the template
                cannot be filled from them
        """
        missing = [param for param in self.parameters if param not in arguments]
        undeclared = sorted(set(arguments) - set(self.parameters))
        if missing or undeclared:
            raise InvalidInput(
                f"Tool '{self.name}' arguments mismatch: "
                f"missing={missing}, undeclared={undeclared}"
            )

        if self.prompt_template is not None:
            try:
                return self.prompt_template.format(**arguments)
            except (KeyError, IndexError, ValueError, AttributeError) as e:
                raise InvalidInput(f"Tool '{self.name}' prompt template failed: {e!r}") from e
        return "\n".join(f"{param}: {arguments[param]}" for param in self.parameters)

    def resolve_deps(self, parent_deps: ParentDepsT) -> ChildDepsT:
        if self.deps_factory is not None:
            return self.deps_factory(parent_deps)
        return self.deps  # type: ignore[return-value]

    async def invoke(self, arguments: dict[str, Any], ctx: RunContext[Any]) -> ToolOutput:
        depth = ctx.depth + 1
        if depth > self.max_depth:
            raise DelegationDepthExceeded(self.name, depth, self.max_depth)

        sub_prompt = self.build_sub_prompt(arguments)
        child_deps = self.resolve_deps(ctx.deps)

        logger.debug("%s delegating to %s at depth %d", ctx.agent, self.agent.name, depth)
        try:
            result = await self.agent.run(
                sub_prompt,
                child_deps,
                ctx.ledger,
                depth=depth,
                on_event=ctx.on_event,
            )
        except (DelegationDepthExceeded, LedgerClosed):
            raise
        except Exception as e:
            raise DelegationFailure(self.name, e) from e

        value = render_value(result.data)
        return ToolOutput(
            value=value,
            summary=digest(value, self.digest_length),
            nested=result if self.trace_mode == TraceMode.nested else None,
        )


def _check_template(template: str, parameters: Sequence[str]) -> None:
    """Reject templates that are malformed or name fields outside `parameters`."""
    try:
        parsed = list(string.Formatter().parse(template))
    except ValueError as e:
        raise ValueError(f"invalid prompt_template: {e}") from e

    for _, field, _, _ in parsed:
        if field is None:
            continue
        # "{a.b}" and "{a[0]}" both look up argument "a"
        root = field.split(".", 1)[0].split("[", 1)[0]
        if root not in parameters:
            raise ValueError(
                f"prompt_template field {{{field}}} is not a declared parameter "
                f"(declared: {', '.join(parameters)})"
            )
