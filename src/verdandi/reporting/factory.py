"""Reporter selection from settings."""

import logging as _logging
import typing as _typing

import verdandi.reporting.base as base
import verdandi.reporting.plain as plain
import verdandi.reporting.rich_reporter as rich_reporter

if _typing.TYPE_CHECKING:
    import verdandi.config.types as config_types

_logger = _logging.getLogger(__name__)


def create_console_reporter(
    reporting: "config_types.ReportingConfig",
    *,
    output: _typing.TextIO | None = None,
) -> base.Reporter | None:
    """
    Create the console reporter named by reporting.console.

    Args:
        reporting: The reporting config section.
        output: Stream for the plain reporter (default: sys.stdout).

    Returns:
        A reporter, or None when reporting.console is "none".
    """
    if reporting.console == "plain":
        return plain.PlainTextReporter(output, show_passed=reporting.show_passed)
    if reporting.console == "rich":
        return rich_reporter.RichConsoleReporter(show_passed=reporting.show_passed)
    _logger.debug("No console reporter configured")
    return None
