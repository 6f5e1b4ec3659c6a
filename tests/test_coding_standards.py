"""
Tests that enforce coding standards.

Source and test files use 'import x as _x' for external modules and
'import verdandi.a.b as b' for internal ones; 'from X import Y' is only
allowed in __init__.py re-exports, for __future__ and under TYPE_CHECKING.
"""

import pathlib as _pathlib
import re as _re

import pytest as _pytest

# Directories to check
SRC_DIR = _pathlib.Path(__file__).parent.parent / "src" / "verdandi"
TESTS_DIR = _pathlib.Path(__file__).parent.parent / "tests"

_BARE_EXCEPT = _re.compile(r"^\s*except\s*:")


def _python_files(directory: _pathlib.Path) -> list[_pathlib.Path]:
    return sorted(directory.rglob("*.py"))


def _find_from_imports(content: str) -> list[tuple[int, str]]:
    """
    Find 'from X import Y' statements outside TYPE_CHECKING blocks.

    Returns list of (line_number, stripped_line) tuples.
    """
    found: list[tuple[int, str]] = []
    in_type_checking = False

    for number, line in enumerate(content.split("\n"), start=1):
        stripped = line.strip()

        if stripped in ("if TYPE_CHECKING:", "if _typing.TYPE_CHECKING:"):
            in_type_checking = True
            continue

        # A non-indented statement ends the block
        if in_type_checking and stripped and not line[:1].isspace() and not stripped.startswith("#"):
            in_type_checking = False

        if in_type_checking:
            continue

        if stripped.startswith("from ") and " import " in stripped:
            if stripped.startswith("from __future__ import"):
                continue
            found.append((number, stripped))

    return found


def _violations(paths: list[_pathlib.Path]) -> list[str]:
    result: list[str] = []
    for path in paths:
        if path.name == "__init__.py":
            continue
        for number, line in _find_from_imports(path.read_text()):
            result.append(f"{path}:{number}: {line}")
    return result


class TestImportStyle:
    """Tests for import style compliance."""

    def test_src_no_from_imports(self) -> None:
        """Source modules should not use 'from X import Y'."""
        violations = _violations(_python_files(SRC_DIR))
        if violations:
            _pytest.fail(
                "Found forbidden 'from X import Y' imports:\n"
                + "\n".join(f"  {v}" for v in violations)
                + "\n\nUse 'import X as _x' (external) or 'import X as x' (internal) instead."
            )

    def test_tests_no_from_imports(self) -> None:
        """Test modules should not use 'from X import Y'."""
        paths = [p for p in _python_files(TESTS_DIR) if p.name != "test_coding_standards.py"]
        violations = _violations(paths)
        if violations:
            _pytest.fail(
                "Found forbidden 'from X import Y' imports:\n"
                + "\n".join(f"  {v}" for v in violations)
            )


class TestExceptStyle:
    """Tests for exception handling style."""

    def test_src_has_no_bare_except(self) -> None:
        """Source modules should name the exceptions they catch."""
        violations = [
            f"{path}:{number}"
            for path in _python_files(SRC_DIR)
            for number, line in enumerate(path.read_text().split("\n"), start=1)
            if _BARE_EXCEPT.match(line)
        ]
        assert violations == []


class TestImportDetection:
    """Tests for the detection logic itself."""

    def test_detects_from_import(self) -> None:
        """Should detect a plain from import."""
        assert _find_from_imports("from pathlib import Path") == [
            (1, "from pathlib import Path")
        ]

    def test_allows_future_imports(self) -> None:
        """Should allow __future__ imports."""
        assert _find_from_imports("from __future__ import annotations") == []

    def test_ignores_type_checking_block(self) -> None:
        """Should ignore imports inside TYPE_CHECKING blocks."""
        content = """
import typing as _typing

if _typing.TYPE_CHECKING:
    from some_module import SomeType

def foo():
    pass
"""
        assert _find_from_imports(content) == []

    def test_detects_import_after_type_checking(self) -> None:
        """Should still detect imports after the TYPE_CHECKING block ends."""
        content = """
import typing as _typing

if _typing.TYPE_CHECKING:
    from allowed import Type

from forbidden import Other
"""
        imports = _find_from_imports(content)
        assert len(imports) == 1
        assert imports[0][1] == "from forbidden import Other"
