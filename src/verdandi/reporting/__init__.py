"""
Outcome reporters for Verdandi.

Reporters receive every outcome of a run as it happens:
- CollectingReporter: keeps outcomes in memory
- PlainTextReporter: one plain line per outcome
- RichConsoleReporter: colored lines and a summary table
"""

from verdandi.reporting.base import Reporter
from verdandi.reporting.collecting import CollectingReporter
from verdandi.reporting.factory import create_console_reporter
from verdandi.reporting.plain import PlainTextReporter
from verdandi.reporting.rich_reporter import RichConsoleReporter

__all__ = [
    "CollectingReporter",
    "PlainTextReporter",
    "Reporter",
    "RichConsoleReporter",
    "create_console_reporter",
]
