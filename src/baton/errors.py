"""Error taxonomy for agent runs and delegation.

Every error raised out of `Agent.run` carries the partial trace of the run that
failed in `tool_calls`, so a front-end can still show what was attempted.
"""

from baton.types import ToolCallRecord


class BatonError(Exception):
    """Base class for all baton run errors."""

    retryable: bool = False

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.tool_calls: tuple[ToolCallRecord, ...] = ()


class InvalidInput(BatonError):
    """Caller error: empty prompt, undeclared or missing tool arguments."""


class GenerationFailure(BatonError):
    """The generation step failed or produced an unusable plan."""

    retryable = True


class StepLimitExceeded(BatonError):
    """An agent planned more steps than it is allowed without answering."""

    def __init__(self, agent: str, max_steps: int) -> None:
        super().__init__(f"Agent '{agent}' exceeded {max_steps} planning steps")
        self.agent = agent
        self.max_steps = max_steps


class ToolFailure(BatonError):
    """A tool invocation failed. The original error is kept in `cause`."""

    def __init__(self, tool_name: str, cause: BaseException) -> None:
        super().__init__(f"Tool '{tool_name}' failed: {cause}")
        self.tool_name = tool_name
        self.cause = cause

    @property
    def retryable(self) -> bool:  # type: ignore[override]
        return getattr(self.cause, "retryable", False)


class DelegationFailure(ToolFailure):
    """A delegated sub-agent run failed."""

    def __init__(self, tool_name: str, cause: BaseException) -> None:
        super().__init__(tool_name, cause)
        self.args = (f"Delegation via '{tool_name}' failed: {cause}",)


class DelegationDepthExceeded(BatonError):
    """A delegation chain went deeper than its configured maximum."""

    def __init__(self, tool_name: str, depth: int, max_depth: int) -> None:
        super().__init__(
            f"Delegation via '{tool_name}' would reach depth {depth}, max is {max_depth}"
        )
        self.tool_name = tool_name
        self.depth = depth
        self.max_depth = max_depth


class LedgerClosed(BatonError):
    """A closed UsageLedger was asked to record more usage."""


class LedgerOverflow(UserWarning):
    """A UsageLedger counter saturated; totals are now a lower bound."""
