"""
Exception hierarchy for Verdandi.

- StructuralError: an invalid declaration sequence (raised while building)
- SkipSignal: "this scope is intentionally not evaluated right now"
- HookFailedError: a hook raised; aborts the remaining work of its group
- CallbackKindError: a coroutine callback reached the blocking runner
- ExamplesFailedError: one or more examples failed during a run
"""

from __future__ import annotations

import typing as _typing

if _typing.TYPE_CHECKING:
    import verdandi.builder.rules as _rules
    import verdandi.runner.outcomes as _outcomes


class VerdandiError(Exception):
    """Base exception for all Verdandi errors."""

    pass


class StructuralError(VerdandiError):
    """Raised when a declaration sequence violates the ordering rules."""

    def __init__(self, rule: _rules.SequenceRule, detail: str | None = None) -> None:
        """
        Initialize the exception.

        Args:
            rule: The violated rule. Its value is the stable message.
            detail: Optional context, such as the offending declaration.
        """
        self.rule = rule
        self.detail = detail
        message = rule.value
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class SkipSignal(VerdandiError):
    """
    Raised to skip the enclosing scope without failing.

    Raised in a before-all hook, the rest of the group is skipped. Raised
    in a before-each hook or around-each hook, only the current element is
    skipped. Raised in an example, only that example is skipped.
    """

    def __init__(self, reason: str = "") -> None:
        self.reason = reason
        super().__init__(reason or "skipped")


def skip(reason: str = "") -> _typing.NoReturn:
    """Skip the current example, element or group."""
    raise SkipSignal(reason)


class HookFailedError(VerdandiError):
    """Raised when a hook or wrap hook raises an error."""

    def __init__(self, description: str, original: BaseException) -> None:
        """
        Initialize the exception.

        Args:
            description: Full description of the failing hook.
            original: The error raised by the hook callback.
        """
        self.description = description
        self.original = original
        super().__init__(f"{description} {original}".strip())


class CallbackKindError(VerdandiError):
    """Raised when a callback's calling convention cannot be honoured."""

    pass


class ExamplesFailedError(VerdandiError):
    """Raised at the end of a run when any example failed."""

    def __init__(self, report: _outcomes.RunReport) -> None:
        self.report = report
        failed = report.failed
        lines = [f"{len(failed)} example(s) failed:"]
        lines.extend(f"  {outcome.summary}" for outcome in failed)
        super().__init__("\n".join(lines))
