"""
Example: a specification for a stack, using the functional API.

Run with:
    VERDANDI_REPORTING__CONSOLE=plain python examples/stack_spec.py
"""

from __future__ import annotations

import verdandi as _verdandi

items: list[int] = []


def push_one() -> None:
    items.append(1)


def check_empty() -> None:
    assert items == []


def check_one() -> None:
    assert items == [1]


def check_pop() -> None:
    assert items.pop() == 1
    assert items == []


def in_transaction(proceed: _verdandi.Continuation) -> None:
    snapshot = list(items)
    try:
        proceed()
    finally:
        items[:] = snapshot


tree = _verdandi.describe(
    "Stack",
    _verdandi.before_each(items.clear, name="reset"),
    _verdandi.it("starts empty", check_empty),
    _verdandi.describe(
        "after one push",
        _verdandi.before_each(push_one),
        _verdandi.around_each(in_transaction),
        _verdandi.it("has one item", check_one),
        _verdandi.it("pops what was pushed", check_pop),
    ),
    _verdandi.describe(
        "with many items",
        _verdandi.each(
            [2, 5, 10],
            lambda n: _verdandi.it(f"holds {n} items", lambda: items.extend(range(n))),
        ),
    ),
    _verdandi.xit("shrinks on its own", lambda: _verdandi.skip("not implemented")),
    _verdandi.after_all(items.clear),
)


if __name__ == "__main__":
    report = tree.run()
    print(report.counts())
