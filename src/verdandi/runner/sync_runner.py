"""
Blocking runner.

Walks a Group tree calling every callback directly. Children of a
concurrent group run on a thread pool; each worker gets a copy of the
caller's contextvars and a fork of the run context.
"""

from __future__ import annotations

import concurrent.futures as _futures
import contextvars as _contextvars
import functools as _functools
import inspect as _inspect
import logging as _logging
import time as _time
import typing as _typing

import verdandi.core.elements as elements
import verdandi.core.errors as errors
import verdandi.core.filtering as filtering
import verdandi.runner.base as base
import verdandi.runner.context as context
import verdandi.runner.outcomes as outcomes

_logger = _logging.getLogger(__name__)

Proceed = _typing.Callable[[], None]


class SyncRunner(base.RunnerBase):
    """
    Runs a tree of synchronous callbacks.

    Usage:
        report = SyncRunner().run(tree)
    """

    def run(self, group: elements.Group) -> outcomes.RunReport:
        """
        Run group and everything below it.

        Returns:
            The run report.

        Raises:
            CallbackKindError: If the tree contains coroutine callbacks.
            HookFailedError: If a hook failed.
            ExamplesFailedError: If examples failed and raise_on_failure is set.
        """
        if group.is_async:
            raise errors.CallbackKindError(
                f"Group {group.description!r} contains coroutine callbacks; "
                "run it with AsyncRunner"
            )
        run = self._start(group)
        with context.bind(run):
            self.run_element(run, group)
        return self._finish(run)

    # =========================================================================
    # Tree walk
    # =========================================================================

    def run_element(self, run: context.RunContext, element: elements.ExampleElement) -> None:
        """Push element and run it."""
        with run.entered(element):
            if isinstance(element, elements.Group):
                self._run_group(run, element)
            else:
                self._run_example(run, element)

    def run_group(self, run: context.RunContext, group: elements.Group) -> None:
        """Run a group that is already on the stack, including its enclosure."""
        self._run_group(run, group)

    def _run_group(self, run: context.RunContext, group: elements.Group) -> None:
        enclosure = group.enclosure
        if enclosure is None or enclosure.is_excluded:
            self._run_group_body(run, group)
            return
        try:
            self.call_wrap(
                run, enclosure, lambda: self._run_group_body(run, group), run.description
            )
        except errors.SkipSignal as signal:
            self._record_group_skip(run, signal)

    def _run_group_body(self, run: context.RunContext, group: elements.Group) -> None:
        selected = filtering.select_executable(group.children)
        if not selected:
            self._nothing_to_run(run)
            return

        try:
            self._run_hooks(run, group.before_all)
        except errors.SkipSignal as signal:
            self._record_group_skip(run, signal)
            return
        except Exception:
            self._attempt_cleanup(run, group.after_all)
            raise

        try:
            if group.is_concurrent and len(selected) > 1:
                self._run_concurrently(run, group, selected)
            else:
                for element in selected:
                    self._run_child(run, group, element)
        except Exception:
            self._attempt_cleanup(run, group.after_all)
            raise

        self._run_after_hooks(run, group.after_all)

    def _run_child(
        self,
        run: context.RunContext,
        group: elements.Group,
        element: elements.ExampleElement,
    ) -> None:
        """Run one element of group with its before-each, wraps and after-each."""
        try:
            self._run_hooks(run, group.before_each)
        except errors.SkipSignal as signal:
            self._record_skip(run, element, signal)
            self._run_after_hooks(run, group.after_each)
            return
        except Exception:
            self._attempt_cleanup(run, group.after_each)
            raise

        try:
            self.compose_wraps(run, group.around_each, element)()
        except errors.SkipSignal as signal:
            self._record_skip(run, element, signal)
        except Exception:
            self._attempt_cleanup(run, group.after_each)
            raise

        self._run_after_hooks(run, group.after_each)

    def _run_concurrently(
        self,
        run: context.RunContext,
        group: elements.Group,
        selected: list[elements.ExampleElement],
    ) -> None:
        first_error: BaseException | None = None
        with _futures.ThreadPoolExecutor(
            max_workers=self.settings.execution.max_workers,
            thread_name_prefix="verdandi",
        ) as pool:
            pending = [
                pool.submit(
                    _contextvars.copy_context().run,
                    self._run_branch,
                    run.fork(),
                    group,
                    element,
                )
                for element in selected
            ]
            for future in _futures.as_completed(pending):
                error = future.exception()
                if error is None:
                    continue
                if first_error is None:
                    first_error = error
                else:
                    self._log_discarded(run, error)
        if first_error is not None:
            raise first_error

    def _run_branch(
        self,
        branch: context.RunContext,
        group: elements.Group,
        element: elements.ExampleElement,
    ) -> None:
        with context.bind(branch):
            self._run_child(branch, group, element)

    # =========================================================================
    # Hooks
    # =========================================================================

    def _run_hook(self, run: context.RunContext, hook: elements.Hook) -> None:
        with run.entered(hook):
            try:
                self._invoke(hook.callback)
            except errors.VerdandiError:
                raise
            except Exception as e:
                self._hook_failed(run, run.description, e)

    def _run_hooks(
        self, run: context.RunContext, hooks: _typing.Iterable[elements.Hook]
    ) -> None:
        for hook in filtering.select_hooks(hooks):
            self._run_hook(run, hook)

    def _run_after_hooks(
        self, run: context.RunContext, hooks: _typing.Iterable[elements.Hook]
    ) -> None:
        for hook in filtering.select_hooks(hooks):
            try:
                self._run_hook(run, hook)
            except errors.SkipSignal as signal:
                self._log_after_skip(run, signal)
                return

    def _attempt_cleanup(
        self, run: context.RunContext, hooks: _typing.Iterable[elements.Hook]
    ) -> None:
        """Run after hooks while an error propagates; their failures are logged."""
        for hook in filtering.select_hooks(hooks):
            try:
                self._run_hook(run, hook)
            except errors.SkipSignal as signal:
                self._log_after_skip(run, signal)
                return
            except Exception:
                self._log_cleanup_failure(run, hook)

    # =========================================================================
    # Wrap hooks
    # =========================================================================

    def compose_wraps(
        self,
        run: context.RunContext,
        wraps: _typing.Iterable[elements.WrapHook],
        element: elements.ExampleElement,
    ) -> Proceed:
        """
        Nest wraps outer-to-inner around running element.

        Returns:
            A zero-argument callable running the whole chain.
        """

        def innermost() -> None:
            self.run_element(run, element)

        def wrap_around(proceed: Proceed, wrap: elements.WrapHook) -> Proceed:
            return _functools.partial(self.call_wrap, run, wrap, proceed, None)

        return _functools.reduce(
            wrap_around, reversed(filtering.select_wrap_hooks(wraps)), innermost
        )

    def call_wrap(
        self,
        run: context.RunContext,
        wrap: elements.WrapHook,
        proceed: Proceed,
        description: str | None,
    ) -> None:
        """
        Call a wrap hook with a continuation running proceed.

        Args:
            description: Description used if the hook fails; defaults to
                the wrap hook's own full description.

        Raises:
            SkipSignal: If the wrap hook itself skipped.
            HookFailedError: If the wrap hook raised.
        """
        proceeded = False

        def continuation() -> None:
            nonlocal proceeded
            proceeded = True
            proceed()

        try:
            self._invoke(wrap.callback, continuation)
        except errors.VerdandiError:
            raise
        except Exception as e:
            self._hook_failed(run, description or run.describe(wrap), e)

        if not proceeded:
            self._log_not_proceeded(run, wrap, description or "")

    # =========================================================================
    # Examples
    # =========================================================================

    def _run_example(self, run: context.RunContext, example: elements.Example) -> None:
        error: BaseException | None = None
        started = _time.monotonic()
        try:
            self._invoke(example.callback)
        except Exception as e:
            error = e
        self._record_example(run, error, _time.monotonic() - started)

    def _invoke(
        self, callback: _typing.Callable[..., _typing.Any], *args: _typing.Any
    ) -> _typing.Any:
        result = callback(*args)
        if _inspect.isawaitable(result):
            if _inspect.iscoroutine(result):
                result.close()
            raise errors.CallbackKindError(
                f"{getattr(callback, '__qualname__', callback)!r} returned an awaitable "
                "in a blocking run"
            )
        return result
