"""End-to-end tests for the research orchestrator and its email delegate."""

import pytest

from baton.agents import Agent, AgentTool, RunEvent, ToolCallStarted, ToolFailurePolicy, TraceMode
from baton.assistant import (
    DELEGATION_TOOL_NAME,
    AssistantConfig,
    EmailDeps,
    InMemoryDraftBox,
    ResearchDeps,
    SearchResult,
    StaticSearch,
    build_assistant,
    build_email_agent,
    build_research_agent,
)
from baton.errors import DelegationDepthExceeded, DelegationFailure, GenerationFailure
from baton.providers.base import FinalAnswer, GenerationRequest, ToolCall
from baton.types import ToolCallStatus
from baton.usage.ledger import UsageLedger

PROMPT = "Research quantum computing and email the findings to a@b.com"

SOURCES = [
    SearchResult(title="Qubits explained", url="https://example.com/q", snippet="Superposition"),
    SearchResult(title="Error correction", url="https://example.com/e", snippet="Surface codes"),
]


async def summarize(request: GenerationRequest) -> FinalAnswer:
    """Final orchestrator step: mention the topic and what the delegate reported."""
    return FinalAnswer(
        text=f"Quantum computing research done. Email drafted: {request.tool_returns[-1]}",
        units=15,
    )


def delegate_steps() -> list:
    return [
        ToolCall(
            tool_name="save_draft",
            arguments={"to": "a@b.com", "subject": "Quantum computing", "body": "Findings..."},
            units=5,
        ),
        FinalAnswer(text="Drafted email to a@b.com: Quantum computing", units=7),
    ]


def delegation_call(units: int = 10) -> ToolCall:
    return ToolCall(
        tool_name=DELEGATION_TOOL_NAME,
        arguments={
            "recipient": "a@b.com",
            "subject": "Quantum computing",
            "context": "Qubits, superposition, error correction",
        },
        units=units,
    )


@pytest.fixture
def drafts() -> InMemoryDraftBox:
    return InMemoryDraftBox()


@pytest.fixture
def deps(drafts: InMemoryDraftBox) -> ResearchDeps:
    email = EmailDeps(drafts=drafts, sender="me@x.io")
    return ResearchDeps(search=StaticSearch(SOURCES), email=email)


class TestResearchAndEmailScenario:
    """The orchestrator delegates drafting to the email agent."""

    async def test_single_delegation_record_and_shared_ledger(
        self, scripted, deps: ResearchDeps, drafts: InMemoryDraftBox
    ) -> None:
        orchestrator = scripted([delegation_call(units=10), summarize])
        delegate = scripted(delegate_steps())
        agent = build_assistant(orchestrator, delegate)
        ledger = UsageLedger()

        result = await agent.run(PROMPT, deps, ledger)

        (record,) = result.tool_calls
        assert record.tool_name == DELEGATION_TOOL_NAME
        assert record.status == ToolCallStatus.succeeded
        assert record.arguments["recipient"] == "a@b.com"
        assert record.nested is None
        # Orchestrator 10 + 15, delegate 5 + 7
        assert result.usage.units_consumed == 37
        assert result.usage.requests_issued == 4
        assert ledger.snapshot() == result.usage
        assert "Quantum computing" in result.data
        assert "Email drafted" in result.data
        assert result.degraded is False

        (draft,) = drafts.drafts
        assert draft.to == "a@b.com"
        assert draft.sender == "me@x.io"

    async def test_delegate_receives_constructed_sub_prompt(self, scripted, deps) -> None:
        delegate = scripted(delegate_steps())
        agent = build_assistant(scripted([delegation_call(), summarize]), delegate)

        await agent.run(PROMPT, deps)

        sub_prompt = delegate.requests[0].prompt
        assert "Recipient: a@b.com" in sub_prompt
        assert "Subject: Quantum computing" in sub_prompt
        assert "Qubits, superposition, error correction" in sub_prompt
        assert isinstance(delegate.deps_seen[0], EmailDeps)

    async def test_search_then_delegate(self, scripted, deps: ResearchDeps) -> None:
        orchestrator = scripted(
            [
                ToolCall(tool_name="search_web", arguments={"query": "quantum computing"}, units=3),
                delegation_call(),
                summarize,
            ]
        )
        agent = build_assistant(orchestrator, scripted(delegate_steps()))

        result = await agent.run(PROMPT, deps)

        assert [r.tool_name for r in result.tool_calls] == ["search_web", DELEGATION_TOOL_NAME]
        assert "Qubits explained" in result.tool_calls[0].result_summary
        assert deps.search.queries == ["quantum computing"]  # type: ignore[attr-defined]
        delegation_records = [r for r in result.tool_calls if r.tool_name == DELEGATION_TOOL_NAME]
        assert len(delegation_records) == 1

    async def test_search_respects_configured_cap(self, scripted, deps: ResearchDeps) -> None:
        orchestrator = scripted(
            [
                ToolCall(tool_name="search_web", arguments={"query": "q", "max_results": 10}),
                FinalAnswer(text="done"),
            ]
        )
        config = AssistantConfig(max_search_results=1)
        agent = build_assistant(orchestrator, scripted([]), config)

        result = await agent.run("search", deps)

        assert "Qubits explained" in result.tool_calls[0].result_summary
        assert "Error correction" not in result.tool_calls[0].result_summary

    async def test_ledger_monotonic_across_delegation(self, scripted, deps) -> None:
        ledger = UsageLedger()
        before = []

        def observe(event: RunEvent) -> None:
            if isinstance(event, ToolCallStarted) and event.tool_name == DELEGATION_TOOL_NAME:
                before.append(ledger.snapshot())

        agent = build_assistant(
            scripted([delegation_call(), summarize]), scripted(delegate_steps())
        )
        result = await agent.run(PROMPT, deps, ledger, on_event=observe)

        assert result.usage.units_consumed >= before[0].units_consumed
        assert result.usage.requests_issued > before[0].requests_issued

    async def test_fresh_ledgers_are_equal(self, scripted) -> None:
        agent = build_assistant(
            scripted([delegation_call(), summarize]), scripted(delegate_steps())
        )

        first = await agent.run(PROMPT, ResearchDeps(search=StaticSearch(SOURCES)))
        second = await agent.run(PROMPT, ResearchDeps(search=StaticSearch(SOURCES)))

        assert first.usage == second.usage
        assert first.data == second.data

    async def test_nested_trace_mode(self, scripted, deps) -> None:
        config = AssistantConfig(trace_mode=TraceMode.nested)
        agent = build_assistant(
            scripted([delegation_call(), summarize]), scripted(delegate_steps()), config
        )
        result = await agent.run(PROMPT, deps)

        (record,) = result.tool_calls
        assert record.nested is not None
        assert [r.tool_name for r in record.nested.tool_calls] == ["save_draft"]


class TestDelegationFailure:
    """The delegate fails; the orchestrator recovers or fails per policy."""

    async def test_recovers_with_degraded_result(self, scripted, deps, drafts) -> None:
        async def apologize(request: GenerationRequest) -> FinalAnswer:
            assert request.history[-1].failed
            return FinalAnswer(text="Research done, but the email could not be drafted.")

        agent = build_assistant(
            scripted([delegation_call(), apologize]),
            scripted([GenerationFailure("email model down")]),
        )
        result = await agent.run(PROMPT, deps)

        (record,) = result.tool_calls
        assert record.tool_name == DELEGATION_TOOL_NAME
        assert record.status == ToolCallStatus.failed
        assert "email model down" in (record.error or "")
        assert result.degraded is True
        assert result.recoveries
        assert drafts.drafts == []

    async def test_fails_under_fail_policy(self, scripted, deps) -> None:
        config = AssistantConfig(failure_policy=ToolFailurePolicy.fail)
        cause = GenerationFailure("email model down")
        agent = build_assistant(
            scripted([delegation_call(), summarize]), scripted([cause]), config
        )
        ledger = UsageLedger()

        with pytest.raises(DelegationFailure) as exc_info:
            await agent.run(PROMPT, deps, ledger)

        assert exc_info.value.cause is cause
        (record,) = exc_info.value.tool_calls
        assert record.failed is True
        assert record.tool_name == DELEGATION_TOOL_NAME
        # The orchestrator's planning step was still charged
        assert ledger.snapshot().units_consumed == 10


class TestDelegationDepth:
    """A delegate that tries to delegate further hits the depth limit."""

    async def test_second_level_delegation_fails_fast(self, scripted, deps) -> None:
        third_generator = scripted([FinalAnswer(text="should never run")])
        third = Agent(name="third", system_directive="t", generator=third_generator)
        onward = AgentTool(
            third, name="forward", description="Forward again", parameters=["q"], deps="x"
        )
        delegate_generator = scripted(
            [ToolCall(tool_name="forward", arguments={"q": "again"}), FinalAnswer(text="x")]
        )
        email_agent = Agent(
            name="email",
            system_directive="e",
            generator=delegate_generator,
            tools=[onward],
        )
        agent = build_research_agent(scripted([delegation_call(), summarize]), email_agent)

        with pytest.raises(DelegationDepthExceeded) as exc_info:
            await agent.run(PROMPT, deps)

        assert exc_info.value.depth == 2
        assert exc_info.value.max_depth == 1
        assert third_generator.requests == []
        (record,) = exc_info.value.tool_calls
        assert record.tool_name == DELEGATION_TOOL_NAME
        assert record.failed is True

    async def test_depth_exceeded_not_recovered(self, scripted, deps) -> None:
        """Even under the recover policy, a depth violation is fatal."""
        third = Agent(name="third", system_directive="t", generator=scripted([]))
        onward = AgentTool(third, name="forward", description="d", parameters=["q"], deps="x")
        email_agent = Agent(
            name="email",
            system_directive="e",
            generator=scripted([ToolCall(tool_name="forward", arguments={"q": "a"})]),
            tools=[onward],
            failure_policy=ToolFailurePolicy.recover,
        )
        agent = build_research_agent(
            scripted([delegation_call(), summarize]),
            email_agent,
            AssistantConfig(failure_policy=ToolFailurePolicy.recover),
        )

        with pytest.raises(DelegationDepthExceeded):
            await agent.run(PROMPT, deps)

    async def test_email_agent_has_no_delegation_tool(self, scripted) -> None:
        email_agent = build_email_agent(scripted([]))
        assert email_agent.tools.names() == ["save_draft"]
