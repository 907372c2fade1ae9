"""Shared test fixtures."""

from collections.abc import Awaitable, Callable, Sequence
from typing import Any

import pytest
from pydantic_ai import models

from baton.providers.base import GenerationRequest, GenerationStep, Generator

type StepFunction = Callable[[GenerationRequest], Awaitable[GenerationStep]]
type ScriptItem = GenerationStep | BaseException | StepFunction


class ScriptedGenerator(Generator[Any]):
    """Deterministic generator: step N is chosen by how many tools already ran.

    Being keyed on the request's history rather than on call count, one instance can
    serve any number of independent runs.
    """

    def __init__(self, steps: Sequence[ScriptItem]) -> None:
        self.steps = list(steps)
        self.requests: list[GenerationRequest] = []
        self.deps_seen: list[Any] = []

    async def generate(self, request: GenerationRequest, deps: Any) -> GenerationStep:
        self.requests.append(request)
        self.deps_seen.append(deps)
        item = self.steps[len(request.history)]
        if isinstance(item, BaseException):
            raise item
        if callable(item):
            return await item(request)
        return item


@pytest.fixture(autouse=True)
def _prevent_real_api_calls() -> None:
    """Safety: block real API calls in all tests."""
    original = models.ALLOW_MODEL_REQUESTS
    models.ALLOW_MODEL_REQUESTS = False
    yield
    models.ALLOW_MODEL_REQUESTS = original


@pytest.fixture
def scripted() -> type[ScriptedGenerator]:
    """The ScriptedGenerator class, for building stub generation steps."""
    return ScriptedGenerator
