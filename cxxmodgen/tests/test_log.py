"""Tests for CLI logging setup."""

import io
import logging

import pytest
from rich.console import Console

from cxxmodgen.log import (
    DIAGNOSTIC_LOGGER_NAME,
    LOGGER_NAME,
    DiagnosticHandler,
    configure_logging,
)


@pytest.fixture
def stream():
    buffer = io.StringIO()
    yield buffer
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


def narrow_console(stream):
    return Console(file=stream, width=40, soft_wrap=True)


class TestConfigureLogging:
    def test_diagnostic_is_a_single_unprefixed_line(self, stream):
        configure_logging(console=narrow_console(stream))
        name = 'very_long_namespace_name::another_long_namespace::helper'

        logging.getLogger(DIAGNOSTIC_LOGGER_NAME).warning(
            f'{name} has internal linkage. Skipping.'
        )

        assert stream.getvalue().splitlines() == [
            f'{name} has internal linkage. Skipping.'
        ]

    def test_diagnostic_is_not_printed_twice(self, stream):
        configure_logging(console=narrow_console(stream))

        logging.getLogger(DIAGNOSTIC_LOGGER_NAME).warning('x has internal linkage.')

        assert stream.getvalue().count('x has internal linkage.') == 1

    def test_other_records_go_through_rich(self, stream):
        configure_logging(console=narrow_console(stream))

        logging.getLogger('cxxmodgen.codegen.wrapper').info('Wrote module a')

        assert 'Wrote module a' in stream.getvalue()

    def test_debug_only_when_verbose(self, stream):
        configure_logging(console=narrow_console(stream))
        logging.getLogger(DIAGNOSTIC_LOGGER_NAME).debug('ns::f: exported')
        assert stream.getvalue() == ''

        configure_logging(verbose=True, console=narrow_console(stream))
        logging.getLogger(DIAGNOSTIC_LOGGER_NAME).debug('ns::f: exported')
        assert 'ns::f: exported' in stream.getvalue()

    def test_reconfiguring_replaces_handlers(self, stream):
        configure_logging(console=narrow_console(stream))
        configure_logging(console=narrow_console(stream))

        handlers = logging.getLogger(LOGGER_NAME).handlers
        assert len(handlers) == 2
        assert sum(isinstance(h, DiagnosticHandler) for h in handlers) == 1
