"""
Example: coroutine examples declared with GroupScope, run concurrently.

Run with:
    VERDANDI_REPORTING__CONSOLE=rich python examples/async_scope_spec.py
"""

from __future__ import annotations

import asyncio as _asyncio

import verdandi as _verdandi

cache: dict[str, str] = {}

with _verdandi.GroupScope("Cache") as spec:

    @spec.before_all
    async def warm_up() -> None:
        await _asyncio.sleep(0)
        cache["greeting"] = "hello"

    @spec.around_each(name="timeout")
    async def with_timeout(proceed: _verdandi.Continuation) -> None:
        await _asyncio.wait_for(proceed(), timeout=1.0)

    with spec.describe("lookups", traits=[_verdandi.Trait.CONCURRENT]) as lookups:
        for key in ("greeting", "missing", "other"):

            @lookups.it(f"looks up {key!r}")
            async def look_up(key: str = key) -> None:
                await _asyncio.sleep(0.01)
                current = _verdandi.current_run()
                if key not in cache:
                    _verdandi.skip(f"{current.description if current else key} not cached")

    @spec.after_all
    def clear() -> None:
        cache.clear()


async def main() -> None:
    report = await spec.group.run_async(raise_on_failure=False)
    print(report.to_dict()["counts"])


if __name__ == "__main__":
    _asyncio.run(main())
