"""Orchestrator / delegate wiring.

The research agent (orchestrator) owns a plain search tool and a delegation tool bound
to the email agent (delegate). The email agent has no delegation tool of its own.
"""

from baton.agents import Agent, AgentTool, RunContext, Tool
from baton.assistant.config import AssistantConfig
from baton.assistant.deps import EmailDeps, ResearchDeps
from baton.assistant.prompts import EMAIL_DIRECTIVE, EMAIL_PROMPT_TEMPLATE, RESEARCH_DIRECTIVE
from baton.providers.base import Generator

RESEARCH_AGENT_NAME = "research"
EMAIL_AGENT_NAME = "email"
DELEGATION_TOOL_NAME = "create_email_draft"


def save_draft(ctx: RunContext[EmailDeps], to: str, subject: str, body: str) -> str:
    """Save an email draft and return its id."""
    draft = ctx.deps.drafts.save(sender=ctx.deps.sender, to=to, subject=subject, body=body)
    return f"Saved {draft.draft_id} to {draft.to}: {draft.subject}"


def make_search_tool(config: AssistantConfig) -> Tool:
    """Build the search_web tool, capped at the configured result count."""

    async def search_web(ctx: RunContext[ResearchDeps], query: str, max_results: int = 5) -> str:
        """Search the web and return numbered results with URLs and snippets."""
        limit = min(max_results, config.max_search_results)
        results = await ctx.deps.search.search(query, limit)
        if not results:
            return f"No results for '{query}'."
        return "\n".join(
            f"{i}. {r.title} ({r.url}) {r.snippet}".rstrip() for i, r in enumerate(results, 1)
        )

    return Tool(search_web, digest_length=config.digest_length)


def build_email_agent(
    generator: Generator[EmailDeps],
    config: AssistantConfig | None = None,
) -> Agent[EmailDeps, str]:
    """Build the delegate agent that drafts emails."""
    config = config or AssistantConfig()
    return Agent(
        name=EMAIL_AGENT_NAME,
        system_directive=EMAIL_DIRECTIVE,
        generator=generator,
        tools=[Tool(save_draft, digest_length=config.digest_length)],
        max_steps=config.max_steps,
        failure_policy=config.failure_policy,
    )


def build_research_agent(
    generator: Generator[ResearchDeps],
    email_agent: Agent[EmailDeps, str],
    config: AssistantConfig | None = None,
) -> Agent[ResearchDeps, str]:
    """Build the orchestrator agent with search and email delegation."""
    config = config or AssistantConfig()
    delegation: AgentTool[ResearchDeps, EmailDeps] = AgentTool(
        email_agent,
        name=DELEGATION_TOOL_NAME,
        description="Have the email agent draft an email from research context.",
        parameters=("recipient", "subject", "context"),
        deps_factory=lambda deps: deps.email,
        prompt_template=EMAIL_PROMPT_TEMPLATE,
        max_depth=config.max_delegation_depth,
        trace_mode=config.trace_mode,
        digest_length=config.digest_length,
    )
    return Agent(
        name=RESEARCH_AGENT_NAME,
        system_directive=RESEARCH_DIRECTIVE,
        generator=generator,
        tools=[make_search_tool(config), delegation],
        max_steps=config.max_steps,
        failure_policy=config.failure_policy,
    )


def build_assistant(
    orchestrator: Generator[ResearchDeps],
    delegate: Generator[EmailDeps],
    config: AssistantConfig | None = None,
) -> Agent[ResearchDeps, str]:
    """Build the orchestrator with its delegate wired in."""
    config = config or AssistantConfig()
    return build_research_agent(orchestrator, build_email_agent(delegate, config), config)
