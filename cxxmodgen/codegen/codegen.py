"""Code generation driver for cxxmodgen.

This module provides the Codegen class, which runs one ModuleWrapper over the
records reported for a configured translation unit, and ``generate_all`` for
processing every unit of a configuration.
"""

import logging
from dataclasses import dataclass

from cxxmodgen.codegen.emitter import EmittedArtifacts
from cxxmodgen.codegen.file_writer import TextFileWriter
from cxxmodgen.codegen.records import load_records
from cxxmodgen.codegen.wrapper import ModuleWrapper
from cxxmodgen.config import GeneratorConfig, UnitConfig
from cxxmodgen.exceptions import CxxModGenError

logger = logging.getLogger(__name__)


class Codegen:
    """Generates the module wrapper for one translation unit.

    Attributes:
        config: The UnitConfig naming the source, its records and the output.
        writer: The file writer used for the artifacts.

    Example:
        >>> from cxxmodgen.config import UnitConfig
        >>> from cxxmodgen.codegen.codegen import Codegen
        >>>
        >>> config = UnitConfig(
        ...     source='include/fmt/core.h',
        ...     records='build/core.decls.jsonl',
        ...     output_dir='modules',
        ...     filter='fmt::',
        ... )
        >>> Codegen(config).generate()
        # Creates modules/core.cppm
    """

    def __init__(self, config: UnitConfig, writer: TextFileWriter | None = None):
        self.config = config
        self.writer = writer

    def generate(self) -> EmittedArtifacts:
        """Load the records and write the wrapper.

        The record stream is read completely before anything is written, so a
        broken stream leaves the output directory untouched.

        Raises:
            RecordLoadError: If the records cannot be loaded.
            ConfigurationError: If the unit cannot be set up.
            OutputError: If an artifact cannot be written.
        """
        records = load_records(self.config.records)

        with ModuleWrapper(self.config.source, self.config, self.writer) as wrapper:
            wrapper.add_all(records)

        return wrapper.artifacts


@dataclass
class UnitResult:
    """Outcome of generating one configured unit."""

    unit: UnitConfig
    artifacts: EmittedArtifacts | None = None
    error: CxxModGenError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def generate_all(
    config: GeneratorConfig, writer: TextFileWriter | None = None
) -> list[UnitResult]:
    """Generate every unit in the configuration.

    A failing unit does not stop the others; its error is recorded in the
    returned result.
    """
    results = []
    for unit in config.units:
        try:
            artifacts = Codegen(unit, writer).generate()
        except CxxModGenError as e:
            logger.error(f'Failed to wrap {unit.source}: {e}')
            results.append(UnitResult(unit=unit, error=e))
        else:
            results.append(UnitResult(unit=unit, artifacts=artifacts))
    return results
