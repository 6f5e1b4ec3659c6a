"""
Status icons for console reporters.

Padding uses Rich's cell_len so icons of different terminal widths line
up in columns.
"""

import rich.cells as _rich_cells

import verdandi.runner.outcomes as outcomes

ICON_PASSED = "✓"
ICON_FAILED = "✗"
ICON_SKIPPED = "↷"

# Target width for icon + padding (in terminal cells)
DEFAULT_ICON_WIDTH = 2


def cell_ljust(text: str, width: int) -> str:
    """Left-justify text to a cell width (pad on right).

    Like str.ljust() but uses terminal cell width instead of character count.
    """
    current = _rich_cells.cell_len(text)
    return text + " " * max(0, width - current)


_ICONS = {
    outcomes.OutcomeStatus.PASSED: ICON_PASSED,
    outcomes.OutcomeStatus.FAILED: ICON_FAILED,
    outcomes.OutcomeStatus.SKIPPED: ICON_SKIPPED,
}


def status_icon(status: outcomes.OutcomeStatus) -> str:
    """Padded icon for an outcome status."""
    return cell_ljust(_ICONS[status], DEFAULT_ICON_WIDTH)
