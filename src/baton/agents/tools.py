"""Tools an agent may invoke during a run.

An agent's tools form a closed set fixed at construction time and resolved by name.
A tool is either a plain function (Tool) or another agent behind the delegation
bridge (AgentTool, see baton.agents.bridge). Both share the BaseTool interface, so the
calling agent cannot tell them apart.
"""

import inspect
import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import Any, get_type_hints

from pydantic import BaseModel, ConfigDict, ValidationError, create_model
from pydantic_core import to_json

from baton.agents.events import EventCallback
from baton.errors import DelegationDepthExceeded, InvalidInput, LedgerClosed, ToolFailure
from baton.providers.base import ToolSpec
from baton.types import AgentResult
from baton.usage.ledger import UsageLedger

DEFAULT_DIGEST_LENGTH = 200


@dataclass(frozen=True)
class RunContext[DepsT]:
    """What a tool sees of the run invoking it."""

    agent: str
    deps: DepsT
    ledger: UsageLedger
    depth: int = 0
    on_event: EventCallback | None = None


@dataclass(frozen=True)
class ToolOutput:
    """Value returned to the calling agent, plus what goes into its trace."""

    value: str
    summary: str
    nested: AgentResult | None = None


def digest(text: str, limit: int = DEFAULT_DIGEST_LENGTH) -> str:
    """Collapse whitespace and truncate to at most `limit` characters."""
    flat = re.sub(r"\s+", " ", text).strip()
    if len(flat) <= limit:
        return flat
    return flat[: max(limit - 1, 0)] + "…"


def render_value(value: Any) -> str:
    """Render a tool or agent result as the string handed back to a model."""
    if isinstance(value, str):
        return value
    if isinstance(value, BaseModel):
        return value.model_dump_json()
    return to_json(value).decode()


class BaseTool(ABC):
    """A named capability an agent can invoke."""

    name: str
    description: str

    @abstractmethod
    def spec(self) -> ToolSpec:
        """Describe the tool for the generation step."""
        ...

    @abstractmethod
    async def invoke(self, arguments: dict[str, Any], ctx: RunContext[Any]) -> ToolOutput:
        """Invoke the tool.

        Args:
            arguments: Arguments chosen by the generation step
            ctx: Context of the calling run

        Returns:
            ToolOutput for the caller and its trace

        Raises:
            InvalidInput: If the arguments do not match the declared parameters
            ToolFailure: If the tool itself failed
        """
        ...


class Tool(BaseTool):
    """Plain function tool.

    Sync and async functions are supported. A function whose first parameter is named
    `ctx` receives the RunContext of the calling run. Arguments are validated against
    the function's signature before the call.
    """

    def __init__(
        self,
        function: Callable[..., Any],
        name: str | None = None,
        description: str | None = None,
        digest_length: int = DEFAULT_DIGEST_LENGTH,
    ) -> None:
        self.function = function
        self.name = name or function.__name__
        self.description = description or _first_doc_line(function)
        self.digest_length = digest_length

        params = list(inspect.signature(function).parameters.values())
        self.takes_ctx = bool(params) and params[0].name == "ctx"
        if self.takes_ctx:
            params = params[1:]

        hints = get_type_hints(function)
        fields: dict[str, Any] = {}
        for param in params:
            annotation = hints.get(param.name, Any)
            default = ... if param.default is inspect.Parameter.empty else param.default
            fields[param.name] = (annotation, default)

        self.parameters = {
            param.name: _type_name(hints.get(param.name, Any)) for param in params
        }
        self._arguments_model = create_model(
            f"{self.name}_arguments",
            __config__=ConfigDict(extra="forbid"),
            **fields,
        )

    def spec(self) -> ToolSpec:
        return ToolSpec(name=self.name, description=self.description, parameters=self.parameters)

    async def invoke(self, arguments: dict[str, Any], ctx: RunContext[Any]) -> ToolOutput:
        try:
            validated = self._arguments_model.model_validate(arguments)
        except ValidationError as e:
            raise InvalidInput(f"Invalid arguments for tool '{self.name}': {e}") from e
        kwargs = {name: getattr(validated, name) for name in self.parameters}

        try:
            if self.takes_ctx:
                value = self.function(ctx, **kwargs)
            else:
                value = self.function(**kwargs)
            if inspect.isawaitable(value):
                value = await value
        except (DelegationDepthExceeded, LedgerClosed):
            raise
        except Exception as e:
            raise ToolFailure(self.name, e) from e

        text = render_value(value)
        return ToolOutput(value=text, summary=digest(text, self.digest_length))


class ToolSet:
    """Closed, name-indexed set of tools."""

    def __init__(self, tools: Iterable[BaseTool] = ()) -> None:
        self._tools: dict[str, BaseTool] = {}
        for tool in tools:
            if tool.name in self._tools:
                raise ValueError(f"Duplicate tool name: {tool.name}")
            self._tools[tool.name] = tool

    def get(self, name: str) -> BaseTool | None:
        return self._tools.get(name)

    def specs(self) -> tuple[ToolSpec, ...]:
        return tuple(tool.spec() for tool in self._tools.values())

    def names(self) -> list[str]:
        return list(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[BaseTool]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)


def _first_doc_line(function: Callable[..., Any]) -> str:
    doc = inspect.getdoc(function)
    return doc.splitlines()[0] if doc else ""


def _type_name(annotation: Any) -> str:
    if isinstance(annotation, type):
        return annotation.__name__
    return str(annotation).replace("typing.", "")
