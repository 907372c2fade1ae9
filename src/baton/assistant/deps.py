"""Dependency bundles and collaborators for the research assistant.

Bundles are frozen for the duration of a run. The backends they point to are external
collaborators; the in-memory versions here serve offline use and tests.
"""

import itertools
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

from pydantic import BaseModel, ConfigDict


class SearchResult(BaseModel):
    """One web search hit."""

    title: str
    url: str
    snippet: str = ""

    model_config = ConfigDict(frozen=True)


class Draft(BaseModel):
    """An email draft saved by the email agent."""

    draft_id: str
    sender: str
    to: str
    subject: str
    body: str

    model_config = ConfigDict(frozen=True)


class SearchBackend(Protocol):
    """Web search provider."""

    async def search(self, query: str, max_results: int) -> list[SearchResult]: ...


class DraftBox(Protocol):
    """Mailbox that stores drafts."""

    def save(self, sender: str, to: str, subject: str, body: str) -> Draft: ...


class StaticSearch:
    """Search backend answering every query with the same results."""

    def __init__(self, results: Sequence[SearchResult] = ()) -> None:
        self.results = list(results)
        self.queries: list[str] = []

    async def search(self, query: str, max_results: int) -> list[SearchResult]:
        self.queries.append(query)
        return self.results[:max_results]


class InMemoryDraftBox:
    """Draft store kept in process memory."""

    def __init__(self) -> None:
        self.drafts: list[Draft] = []
        self._ids = itertools.count(1)

    def save(self, sender: str, to: str, subject: str, body: str) -> Draft:
        draft = Draft(
            draft_id=f"draft-{next(self._ids)}",
            sender=sender,
            to=to,
            subject=subject,
            body=body,
        )
        self.drafts.append(draft)
        return draft


@dataclass(frozen=True)
class EmailDeps:
    """Dependencies of the email-drafting delegate."""

    drafts: DraftBox
    sender: str = "assistant@example.com"


@dataclass(frozen=True)
class ResearchDeps:
    """Dependencies of the research orchestrator.

    `email` is handed to the delegate whenever the orchestrator delegates a draft.
    """

    search: SearchBackend
    email: EmailDeps = field(default_factory=lambda: EmailDeps(drafts=InMemoryDraftBox()))
