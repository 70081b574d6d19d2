"""Logging setup for the command line interface."""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = 'cxxmodgen'
DIAGNOSTIC_LOGGER_NAME = 'cxxmodgen.codegen.router'


def is_diagnostic(record: logging.LogRecord) -> bool:
    """Whether ``record`` is a skipped-symbol diagnostic."""
    return record.name == DIAGNOSTIC_LOGGER_NAME and record.levelno >= logging.WARNING


class DiagnosticHandler(logging.Handler):
    """Prints each record as one unwrapped, unprefixed console line.

    Diagnostics are meant to be grepped, so they bypass the column layout of
    RichHandler, which wraps long messages at the console width.
    """

    def __init__(self, console: Console):
        super().__init__()
        self.console = console
        self.addFilter(is_diagnostic)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.console.print(
                self.format(record), markup=False, highlight=False, soft_wrap=True
            )
        except Exception:
            self.handleError(record)


def configure_logging(verbose: bool = False, console: Console | None = None) -> None:
    """Send cxxmodgen log records to stderr through rich.

    Skipped-symbol diagnostics are warnings and always shown, one line each
    as ``<name> has internal linkage. Skipping.``; ``verbose`` adds
    per-declaration debug output. Calling this again replaces the handlers
    installed by an earlier call.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, (RichHandler, DiagnosticHandler)):
            logger.removeHandler(handler)

    console = console or Console(stderr=True, soft_wrap=True)

    handler = RichHandler(
        console=console,
        show_time=False,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter('%(message)s'))
    handler.addFilter(lambda record: not is_diagnostic(record))
    logger.addHandler(handler)

    diagnostics = DiagnosticHandler(console)
    diagnostics.setFormatter(logging.Formatter('%(message)s'))
    logger.addHandler(diagnostics)

    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
