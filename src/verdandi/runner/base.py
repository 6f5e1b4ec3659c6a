"""
Shared runner machinery.

Both runners walk a Group tree with the same algorithm; RunnerBase holds
the parts that do not depend on the calling convention: run setup and
teardown, outcome recording, and failure conversion.
"""

from __future__ import annotations

import logging as _logging
import typing as _typing

import verdandi.config.settings as config_settings
import verdandi.core.elements as elements
import verdandi.core.errors as errors
import verdandi.reporting.base as reporting_base
import verdandi.reporting.factory as reporting_factory
import verdandi.runner.context as context
import verdandi.runner.outcomes as outcomes

_logger = _logging.getLogger(__name__)


def error_message(error: BaseException) -> str:
    """Message recorded for a failure: str(error), or the type name if empty."""
    return str(error) or type(error).__name__


def outcome_kind(element: elements.Element) -> outcomes.OutcomeKind:
    if isinstance(element, elements.Group):
        return outcomes.OutcomeKind.GROUP
    if isinstance(element, elements.Example):
        return outcomes.OutcomeKind.EXAMPLE
    return outcomes.OutcomeKind.HOOK


class RunnerBase:
    """
    Base class for the blocking and the asyncio runner.

    Args:
        settings: Runner settings (default: Settings() from the environment).
        reporters: Reporters notified of every outcome.
        console: Add the console reporter selected by reporting.console.
        raise_on_failure: Override execution.raise_on_failure.
    """

    def __init__(
        self,
        settings: config_settings.Settings | None = None,
        reporters: _typing.Iterable[reporting_base.Reporter] = (),
        *,
        console: bool = True,
        raise_on_failure: bool | None = None,
    ) -> None:
        self.settings = settings if settings is not None else config_settings.Settings()
        self.reporters: list[reporting_base.Reporter] = list(reporters)
        if console:
            reporter = reporting_factory.create_console_reporter(self.settings.reporting)
            if reporter is not None:
                self.reporters.append(reporter)
        self.raise_on_failure = (
            self.settings.execution.raise_on_failure
            if raise_on_failure is None
            else raise_on_failure
        )

    # =========================================================================
    # Run lifecycle
    # =========================================================================

    def _start(self, group: elements.Group) -> context.RunContext:
        """Create the run context for a top-level run of group."""
        active = context.current_run()
        if active is not None:
            _logger.error(
                "running new element %r when already running %r",
                group.description,
                active.description,
            )
        run = context.RunContext(reporters=self.reporters)
        for reporter in self.reporters:
            reporter.run_started(group)
        return run

    def _finish(self, run: context.RunContext) -> outcomes.RunReport:
        """
        Complete a run that did not abort.

        Raises:
            ExamplesFailedError: If examples failed and raise_on_failure is set.
        """
        report = run.report
        for reporter in self.reporters:
            reporter.run_finished(report)
        if report.failed and self.raise_on_failure:
            raise errors.ExamplesFailedError(report)
        return report

    # =========================================================================
    # Outcomes
    # =========================================================================

    def _record_skip(
        self,
        run: context.RunContext,
        element: elements.Element,
        signal: errors.SkipSignal,
    ) -> None:
        """Record element as skipped. element must not be on the stack yet."""
        run.record(
            outcomes.Outcome(
                run.describe(element),
                outcomes.OutcomeStatus.SKIPPED,
                outcome_kind(element),
                signal.reason,
            )
        )

    def _record_example(
        self,
        run: context.RunContext,
        error: BaseException | None,
        duration: float,
    ) -> None:
        """Record the outcome of the example on top of the stack."""
        description = run.description
        if error is None:
            outcome = outcomes.Outcome(
                description, outcomes.OutcomeStatus.PASSED, duration=duration
            )
        elif isinstance(error, errors.SkipSignal):
            outcome = outcomes.Outcome(
                description,
                outcomes.OutcomeStatus.SKIPPED,
                message=error.reason,
                duration=duration,
            )
        else:
            _logger.debug("Example failed: %s", description, exc_info=error)
            outcome = outcomes.Outcome(
                description,
                outcomes.OutcomeStatus.FAILED,
                message=error_message(error),
                error=error,
                duration=duration,
            )
        run.record(outcome)

    def _record_group_skip(self, run: context.RunContext, signal: errors.SkipSignal) -> None:
        """Record that the group on top of the stack skipped in before-all."""
        _logger.info(
            "Skipping %r from before all: %s", run.description, signal.reason or "no reason"
        )
        run.record(
            outcomes.Outcome(
                run.description,
                outcomes.OutcomeStatus.SKIPPED,
                outcomes.OutcomeKind.GROUP,
                signal.reason,
            )
        )

    def _hook_failed(
        self, run: context.RunContext, description: str, error: Exception
    ) -> _typing.NoReturn:
        """Record a failed hook and raise HookFailedError chained to error."""
        run.record(
            outcomes.Outcome(
                description,
                outcomes.OutcomeStatus.FAILED,
                outcomes.OutcomeKind.HOOK,
                error_message(error),
                error,
            )
        )
        raise errors.HookFailedError(description, error) from error

    # =========================================================================
    # Logging helpers
    # =========================================================================

    def _log_not_proceeded(
        self, run: context.RunContext, wrap: elements.WrapHook, description: str
    ) -> None:
        _logger.debug(
            "%r never called its continuation; wrapped scope did not run in %r",
            wrap.description,
            description or run.description,
        )

    def _log_after_skip(self, run: context.RunContext, signal: errors.SkipSignal) -> None:
        _logger.info(
            "Skip in %r stops the remaining after hooks: %s",
            run.description,
            signal.reason or "no reason",
        )

    def _log_cleanup_failure(self, run: context.RunContext, hook: elements.Hook) -> None:
        _logger.error(
            "Cleanup hook %r failed while unwinding %r",
            hook.description,
            run.description,
            exc_info=True,
        )

    def _log_discarded(self, run: context.RunContext, error: BaseException) -> None:
        _logger.warning(
            "Discarding failure from concurrent branch of %r: %s",
            run.description,
            error_message(error),
        )

    def _nothing_to_run(self, run: context.RunContext) -> None:
        _logger.debug("Nothing to run in %r; all children filtered out", run.description)
