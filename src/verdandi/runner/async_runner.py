"""
Asyncio runner.

Walks a Group tree awaiting coroutine callbacks and calling synchronous
callbacks inline. Children of a concurrent group run as asyncio tasks;
each task runs on a fork of the run context.

A synchronous wrap hook or enclosure gets a synchronous continuation, so
the scope it wraps is handed to a SyncRunner and must not contain
coroutine callbacks.
"""

from __future__ import annotations

import asyncio as _asyncio
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
import verdandi.runner.sync_runner as sync_runner

_logger = _logging.getLogger(__name__)

AsyncProceed = _typing.Callable[[], _typing.Awaitable[None]]


class AsyncRunner(base.RunnerBase):
    """
    Runs a tree of coroutine and synchronous callbacks.

    Usage:
        report = await AsyncRunner().run(tree)
    """

    async def run(self, group: elements.Group) -> outcomes.RunReport:
        """
        Run group and everything below it.

        Returns:
            The run report.

        Raises:
            HookFailedError: If a hook failed.
            CallbackKindError: If a synchronous wrap hook wraps coroutine callbacks.
            ExamplesFailedError: If examples failed and raise_on_failure is set.
        """
        run = self._start(group)
        with context.bind(run):
            await self._run_element(run, group)
        return self._finish(run)

    def _sync_delegate(self) -> sync_runner.SyncRunner:
        return sync_runner.SyncRunner(
            self.settings, console=False, raise_on_failure=self.raise_on_failure
        )

    # =========================================================================
    # Tree walk
    # =========================================================================

    async def _run_element(
        self, run: context.RunContext, element: elements.ExampleElement
    ) -> None:
        with run.entered(element):
            if isinstance(element, elements.Group):
                await self._run_group(run, element)
            else:
                await self._run_example(run, element)

    async def _run_group(self, run: context.RunContext, group: elements.Group) -> None:
        enclosure = group.enclosure
        if enclosure is None or enclosure.is_excluded:
            await self._run_group_body(run, group)
            return

        if not enclosure.is_async:
            scope = [item for item in group.iter_callbacks() if item is not enclosure]
            self._require_sync(enclosure, scope, run)
            self._sync_delegate().run_group(run, group)
            return

        try:
            await self._call_wrap(
                run, enclosure, lambda: self._run_group_body(run, group), run.description
            )
        except errors.SkipSignal as signal:
            self._record_group_skip(run, signal)

    async def _run_group_body(self, run: context.RunContext, group: elements.Group) -> None:
        selected = filtering.select_executable(group.children)
        if not selected:
            self._nothing_to_run(run)
            return

        try:
            await self._run_hooks(run, group.before_all)
        except errors.SkipSignal as signal:
            self._record_group_skip(run, signal)
            return
        except Exception:
            await self._attempt_cleanup(run, group.after_all)
            raise

        try:
            if group.is_concurrent and len(selected) > 1:
                await self._run_concurrently(run, group, selected)
            else:
                for element in selected:
                    await self._run_child(run, group, element)
        except Exception:
            await self._attempt_cleanup(run, group.after_all)
            raise

        await self._run_after_hooks(run, group.after_all)

    async def _run_child(
        self,
        run: context.RunContext,
        group: elements.Group,
        element: elements.ExampleElement,
    ) -> None:
        """Run one element of group with its before-each, wraps and after-each."""
        try:
            await self._run_hooks(run, group.before_each)
        except errors.SkipSignal as signal:
            self._record_skip(run, element, signal)
            await self._run_after_hooks(run, group.after_each)
            return
        except Exception:
            await self._attempt_cleanup(run, group.after_each)
            raise

        try:
            await self._compose_wraps(run, group.around_each, element)()
        except errors.SkipSignal as signal:
            self._record_skip(run, element, signal)
        except Exception:
            await self._attempt_cleanup(run, group.after_each)
            raise

        await self._run_after_hooks(run, group.after_each)

    async def _run_concurrently(
        self,
        run: context.RunContext,
        group: elements.Group,
        selected: list[elements.ExampleElement],
    ) -> None:
        tasks = [
            _asyncio.ensure_future(self._run_branch(run.fork(), group, element))
            for element in selected
        ]
        first_error: BaseException | None = None
        try:
            for next_done in _asyncio.as_completed(tasks):
                try:
                    await next_done
                except Exception as error:
                    if first_error is None:
                        first_error = error
                    else:
                        self._log_discarded(run, error)
        except _asyncio.CancelledError:
            for task in tasks:
                task.cancel()
            raise
        if first_error is not None:
            raise first_error

    async def _run_branch(
        self,
        branch: context.RunContext,
        group: elements.Group,
        element: elements.ExampleElement,
    ) -> None:
        with context.bind(branch):
            await self._run_child(branch, group, element)

    # =========================================================================
    # Hooks
    # =========================================================================

    async def _run_hook(self, run: context.RunContext, hook: elements.Hook) -> None:
        with run.entered(hook):
            try:
                await self._invoke(hook.callback)
            except errors.VerdandiError:
                raise
            except Exception as e:
                self._hook_failed(run, run.description, e)

    async def _run_hooks(
        self, run: context.RunContext, hooks: _typing.Iterable[elements.Hook]
    ) -> None:
        for hook in filtering.select_hooks(hooks):
            await self._run_hook(run, hook)

    async def _run_after_hooks(
        self, run: context.RunContext, hooks: _typing.Iterable[elements.Hook]
    ) -> None:
        for hook in filtering.select_hooks(hooks):
            try:
                await self._run_hook(run, hook)
            except errors.SkipSignal as signal:
                self._log_after_skip(run, signal)
                return

    async def _attempt_cleanup(
        self, run: context.RunContext, hooks: _typing.Iterable[elements.Hook]
    ) -> None:
        """Run after hooks while an error propagates; their failures are logged."""
        for hook in filtering.select_hooks(hooks):
            try:
                await self._run_hook(run, hook)
            except errors.SkipSignal as signal:
                self._log_after_skip(run, signal)
                return
            except Exception:
                self._log_cleanup_failure(run, hook)

    # =========================================================================
    # Wrap hooks
    # =========================================================================

    def _require_sync(
        self,
        wrap: elements.WrapHook,
        scope: _typing.Iterable[elements.Hook | elements.WrapHook | elements.ExampleElement],
        run: context.RunContext,
    ) -> None:
        """Reject a synchronous wrap hook whose wrapped scope needs awaiting."""
        if any(element.is_async for element in scope):
            raise errors.CallbackKindError(
                f"Synchronous {wrap.description!r} in {run.description!r} "
                "wraps coroutine callbacks"
            )

    def _compose_wraps(
        self,
        run: context.RunContext,
        wraps: _typing.Iterable[elements.WrapHook],
        element: elements.ExampleElement,
    ) -> AsyncProceed:
        """
        Nest wraps outer-to-inner around running element.

        Coroutine wraps nest as usual. From the first synchronous wrap on,
        the rest of the chain and the element run in a SyncRunner.
        """
        selected = filtering.select_wrap_hooks(wraps)
        split = next(
            (index for index, wrap in enumerate(selected) if not wrap.is_async),
            len(selected),
        )
        outer, inner = selected[:split], selected[split:]

        if inner:
            self._require_sync(inner[0], [*inner[1:], element], run)
            blocking = self._sync_delegate().compose_wraps(run, inner, element)

            async def innermost() -> None:
                blocking()

        else:

            async def innermost() -> None:
                await self._run_element(run, element)

        def wrap_around(proceed: AsyncProceed, wrap: elements.WrapHook) -> AsyncProceed:
            return _functools.partial(self._call_wrap, run, wrap, proceed, None)

        return _functools.reduce(wrap_around, reversed(outer), innermost)

    async def _call_wrap(
        self,
        run: context.RunContext,
        wrap: elements.WrapHook,
        proceed: AsyncProceed,
        description: str | None,
    ) -> None:
        """
        Await a coroutine wrap hook with a continuation awaiting proceed.

        Raises:
            SkipSignal: If the wrap hook itself skipped.
            HookFailedError: If the wrap hook raised.
        """
        proceeded = False

        async def continuation() -> None:
            nonlocal proceeded
            proceeded = True
            await proceed()

        try:
            await self._invoke(wrap.callback, continuation)
        except errors.VerdandiError:
            raise
        except Exception as e:
            self._hook_failed(run, description or run.describe(wrap), e)

        if not proceeded:
            self._log_not_proceeded(run, wrap, description or "")

    # =========================================================================
    # Examples
    # =========================================================================

    async def _run_example(self, run: context.RunContext, example: elements.Example) -> None:
        error: BaseException | None = None
        started = _time.monotonic()
        try:
            await self._invoke(example.callback)
        except Exception as e:
            error = e
        self._record_example(run, error, _time.monotonic() - started)

    async def _invoke(
        self, callback: _typing.Callable[..., _typing.Any], *args: _typing.Any
    ) -> _typing.Any:
        result = callback(*args)
        if _inspect.isawaitable(result):
            result = await result
        return result
