"""Agent — one behavior profile turning a prompt into a typed result.

A run alternates planning steps (the generator's decision) and tool invocations until
the generator answers:

    received → planning → {tool_executing → planning}* → finalizing → completed
                                                                    ↘ failed

The ledger handed to `run` is threaded unchanged into every delegated sub-run.
"""

import asyncio
import logging
import time
from collections.abc import AsyncIterator, Iterable
from enum import StrEnum
from typing import Any

from pydantic import TypeAdapter, ValidationError

from baton.agents.events import (
    EventCallback,
    RunCompleted,
    RunEvent,
    StateChanged,
    ToolCallFinished,
    ToolCallStarted,
)
from baton.agents.tools import BaseTool, RunContext, ToolSet
from baton.errors import (
    BatonError,
    DelegationDepthExceeded,
    GenerationFailure,
    InvalidInput,
    StepLimitExceeded,
    ToolFailure,
)
from baton.providers.base import FinalAnswer, GenerationRequest, Generator, ToolCall
from baton.types import AgentResult, RunState, ToolCallRecord, ToolCallStatus
from baton.usage.ledger import UsageLedger

logger = logging.getLogger(__name__)


class ToolFailurePolicy(StrEnum):
    """What a run does when one of its tools fails.

    recover: record the failure, tell the generator, keep planning; result is degraded
    fail: fail the run with the ToolFailure / DelegationFailure
    """

    recover = "recover"
    fail = "fail"


class Agent[DepsT, DataT]:
    """A configured unit of work: system directive, generator and a closed tool set.

    Generic over:
    - DepsT: the dependency bundle type passed to each run
    - DataT: the result data type (str or anything pydantic can validate from JSON)
    """

    def __init__(
        self,
        name: str,
        system_directive: str,
        generator: Generator[DepsT],
        tools: Iterable[BaseTool] = (),
        output_type: type[DataT] = str,  # type: ignore[assignment]
        max_steps: int = 8,
        failure_policy: ToolFailurePolicy = ToolFailurePolicy.recover,
    ) -> None:
        """Initialize agent.

        Args:
            name: Agent name used in traces, events and logs
            system_directive: Behavior profile passed to every generation step
            generator: Language model boundary
            tools: Tools available to this agent, fixed for its lifetime
            output_type: Result data type
            max_steps: Planning steps allowed before giving up
            failure_policy: Reaction to a failed tool invocation

        Raises:
            ValueError: If max_steps is not positive or tool names collide
        """
        if max_steps <= 0:
            raise ValueError("max_steps must be positive")

        self.name = name
        self.system_directive = system_directive
        self.generator = generator
        self.tools = ToolSet(tools)
        self.output_type = output_type
        self.max_steps = max_steps
        self.failure_policy = failure_policy
        self._output_adapter: TypeAdapter[DataT] | None = (
            None if output_type is str else TypeAdapter(output_type)
        )

    def __repr__(self) -> str:
        return f"Agent(name={self.name!r}, tools={self.tools.names()})"

    async def run(
        self,
        prompt: str,
        deps: DepsT,
        ledger: UsageLedger | None = None,
        *,
        depth: int = 0,
        on_event: EventCallback | None = None,
    ) -> AgentResult[DataT]:
        """Run the agent to completion.

        Args:
            prompt: Non-empty user or sub-agent prompt
            deps: Dependency bundle, read-only for the run
            ledger: Shared ledger; a fresh one is created (and closed afterwards) if None
            depth: Delegation depth, 0 for a top-level run
            on_event: Observer receiving RunEvents, shared with delegated runs

        Returns:
            AgentResult with data, usage snapshot and trace

        Raises:
            InvalidInput: If the prompt is empty (nothing is recorded)
            GenerationFailure: If a generation step fails or returns an unusable plan
            StepLimitExceeded: If max_steps pass without a final answer
            ToolFailure: If a tool fails under the fail policy
            DelegationFailure: If a delegation fails under the fail policy
            DelegationDepthExceeded: If a delegation chain goes too deep
        """
        if not prompt or not prompt.strip():
            raise InvalidInput(f"Agent '{self.name}' received an empty prompt")

        owns_ledger = ledger is None
        if ledger is None:
            ledger = UsageLedger()

        ctx = RunContext(agent=self.name, deps=deps, ledger=ledger, depth=depth, on_event=on_event)
        trace: list[ToolCallRecord] = []
        returns: list[str] = []
        recoveries: list[str] = []
        start = time.monotonic()

        self._emit_state(ctx, RunState.received)
        try:
            data = await self._plan(prompt, ctx, trace, returns, recoveries)
            result = AgentResult(
                agent=self.name,
                data=data,
                usage=ledger.snapshot(),
                tool_calls=tuple(trace),
                state=RunState.completed,
                degraded=bool(recoveries),
                recoveries=tuple(recoveries),
                duration_ms=int((time.monotonic() - start) * 1000),
            )
        except BaseException as e:
            if isinstance(e, BatonError):
                e.tool_calls = tuple(trace)
            logger.debug("Agent %s failed at depth %d: %r", self.name, depth, e)
            self._emit_state(ctx, RunState.failed)
            raise
        finally:
            if owns_ledger:
                ledger.close()

        self._emit_state(ctx, RunState.completed)
        self._emit(ctx, RunCompleted(agent=self.name, depth=depth, result=result))
        logger.info(
            "Agent %s completed: %d tool call(s), %d unit(s), degraded=%s",
            self.name,
            len(trace),
            result.usage.units_consumed,
            result.degraded,
        )
        return result

    async def run_stream(
        self,
        prompt: str,
        deps: DepsT,
        ledger: UsageLedger | None = None,
    ) -> AsyncIterator[RunEvent]:
        """Run the agent, yielding RunEvents as they happen.

        The last event of a successful run is the top-level RunCompleted. A failed run
        re-raises its error after the events that preceded it. Closing the iterator
        early cancels the run, including any delegated sub-run in flight.
        """
        queue: asyncio.Queue[RunEvent | None] = asyncio.Queue()

        async def drive() -> AgentResult[DataT]:
            try:
                return await self.run(prompt, deps, ledger, on_event=queue.put_nowait)
            finally:
                queue.put_nowait(None)

        task = asyncio.create_task(drive())
        try:
            while (event := await queue.get()) is not None:
                yield event
            task.result()
        finally:
            if not task.done():
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    logger.debug("Streamed run of %s cancelled", self.name)

    async def _plan(
        self,
        prompt: str,
        ctx: RunContext[DepsT],
        trace: list[ToolCallRecord],
        returns: list[str],
        recoveries: list[str],
    ) -> DataT:
        specs = self.tools.specs()
        for step_number in range(1, self.max_steps + 1):
            self._emit_state(ctx, RunState.planning)
            request = GenerationRequest(
                prompt=prompt,
                system_directive=self.system_directive,
                tools=specs,
                history=tuple(trace),
                tool_returns=tuple(returns),
            )
            step = await self.generator.generate(request, ctx.deps)
            ctx.ledger.record(step.units, requests=1, cost_usd=step.cost_usd)
            logger.debug("Agent %s step %d: %s", self.name, step_number, type(step).__name__)

            if isinstance(step, FinalAnswer):
                self._emit_state(ctx, RunState.finalizing)
                return self._convert(step.text)

            self._emit_state(ctx, RunState.tool_executing)
            await self._invoke_tool(step, ctx, trace, returns, recoveries)

        raise StepLimitExceeded(self.name, self.max_steps)

    async def _invoke_tool(
        self,
        call: ToolCall,
        ctx: RunContext[DepsT],
        trace: list[ToolCallRecord],
        returns: list[str],
        recoveries: list[str],
    ) -> None:
        tool = self.tools.get(call.tool_name)
        if tool is None:
            raise GenerationFailure(
                f"Agent '{self.name}' requested unknown tool '{call.tool_name}' "
                f"(available: {', '.join(self.tools.names()) or 'none'})"
            )

        self._emit(
            ctx,
            ToolCallStarted(
                agent=self.name, depth=ctx.depth, tool_name=tool.name, arguments=call.arguments
            ),
        )
        try:
            output = await tool.invoke(call.arguments, ctx)
        except DelegationDepthExceeded as e:
            self._append(ctx, trace, returns, self._failed_record(call, e), str(e))
            raise
        except (ToolFailure, InvalidInput) as e:
            failure = e if isinstance(e, ToolFailure) else ToolFailure(call.tool_name, e)
            self._append(ctx, trace, returns, self._failed_record(call, failure), str(failure))
            if self.failure_policy == ToolFailurePolicy.fail:
                if failure is e:
                    raise
                raise failure from e
            logger.warning("Agent %s recovering from failed tool: %s", self.name, failure)
            recoveries.append(str(failure))
            return

        record = ToolCallRecord(
            tool_name=tool.name,
            arguments=call.arguments,
            result_summary=output.summary,
            nested=output.nested,
        )
        self._append(ctx, trace, returns, record, output.value)

    def _failed_record(self, call: ToolCall, error: BaseException) -> ToolCallRecord:
        return ToolCallRecord(
            tool_name=call.tool_name,
            arguments=call.arguments,
            status=ToolCallStatus.failed,
            error=str(error),
        )

    def _append(
        self,
        ctx: RunContext[DepsT],
        trace: list[ToolCallRecord],
        returns: list[str],
        record: ToolCallRecord,
        value: str,
    ) -> None:
        trace.append(record)
        returns.append(value)
        self._emit(ctx, ToolCallFinished(agent=self.name, depth=ctx.depth, record=record))

    def _convert(self, text: str) -> DataT:
        if not text.strip():
            raise GenerationFailure(f"Agent '{self.name}' produced an empty answer")
        if self._output_adapter is None:
            return text  # type: ignore[return-value]
        try:
            return self._output_adapter.validate_json(text)
        except ValidationError as e:
            raise GenerationFailure(
                f"Agent '{self.name}' answer is not a valid {self.output_type.__name__}: {e}"
            ) from e

    def _emit_state(self, ctx: RunContext[DepsT], state: RunState) -> None:
        self._emit(ctx, StateChanged(agent=self.name, depth=ctx.depth, state=state))

    def _emit(self, ctx: RunContext[DepsT], event: RunEvent) -> None:
        if ctx.on_event is not None:
            ctx.on_event(event)
