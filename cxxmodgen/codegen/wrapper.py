"""Per-translation-unit orchestration.

A ModuleWrapper collects the declaration records reported for one source
file and, once the traversal is complete, writes the module wrapper for it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from cxxmodgen.codegen.emitter import EmittedArtifacts, WrapperEmitter
from cxxmodgen.codegen.router import RouteOutcome, SymbolRouter
from cxxmodgen.codegen.tree import NamespaceTree
from cxxmodgen.config import MODULE_NAME_PATTERN
from cxxmodgen.exceptions import ConfigurationError

if TYPE_CHECKING:
    from cxxmodgen.codegen.file_writer import TextFileWriter
    from cxxmodgen.codegen.records import DeclarationRecord
    from cxxmodgen.config import WrapperConfig

logger = logging.getLogger(__name__)


class WrapperState(str, Enum):
    CREATED = 'created'
    COLLECTING = 'collecting'
    FINALIZING = 'finalizing'
    FLUSHED = 'flushed'


class ModuleWrapper:
    """Builds the module wrapper of a single translation unit.

    The wrapper owns one SymbolRouter and two NamespaceTrees: one for
    re-exported symbols and one for internal-linkage declarations. Records
    are routed as they arrive; ``finalize()`` renders and writes the artifacts
    exactly once.

    Used as a context manager, the wrapper is finalized on exit even when
    collection raised, so whatever was collected is still written and the
    original exception propagates afterwards.

    Attributes:
        source_file: Canonical path of the original source file.
        module_name: Name of the generated module.
        exported_tree: Re-export statements by namespace.
        internal_tree: Internal-linkage declarations by namespace.
        state: Current lifecycle state.

    Example:
        >>> with ModuleWrapper('include/a.h', WrapperConfig(output_dir='out')) as wrapper:
        ...     wrapper.add_all(records)
        >>> wrapper.artifacts.module_path
        PosixUPath('out/a.cppm')
    """

    def __init__(
        self,
        source_file: str | Path,
        config: WrapperConfig,
        writer: TextFileWriter | None = None,
        diagnostic: Callable[[str], None] | None = None,
    ):
        """Initialize the wrapper for one source file.

        Args:
            source_file: The original header or source file. Must exist.
            config: Settings for this unit.
            writer: Optional custom file writer.
            diagnostic: Optional callback for skipped-symbol diagnostics.

        Raises:
            ConfigurationError: If the source file does not exist, the output
                directory is not usable, or no valid module name results.
        """
        try:
            self.source_file = Path(source_file).resolve(strict=True)
        except OSError as e:
            raise ConfigurationError(
                f"Source file '{source_file}' cannot be resolved: {e}"
            ) from e
        if not self.source_file.is_file():
            raise ConfigurationError(f"Source '{self.source_file}' is not a file")

        output_dir = Path(config.output_dir)
        if output_dir.exists() and not output_dir.is_dir():
            raise ConfigurationError(
                f"Output path '{output_dir}' is not a directory", field='output_dir'
            )

        self.module_name = config.module_name or self.source_file.stem
        if not MODULE_NAME_PATTERN.match(self.module_name):
            raise ConfigurationError(
                f"'{self.module_name}' is not a valid module name; "
                'set an explicit module name',
                field='module_name',
            )

        self.config = config
        self.exported_tree = NamespaceTree()
        self.internal_tree = NamespaceTree()
        self.router = SymbolRouter(
            self.exported_tree,
            self.internal_tree,
            filter=config.filter,
            internal_linkage=config.internal_linkage,
            diagnostic=diagnostic,
        )
        self.emitter = WrapperEmitter(config, writer)
        self.state = WrapperState.CREATED
        self.artifacts: EmittedArtifacts | None = None

    def add(self, record: DeclarationRecord) -> RouteOutcome:
        """Route one declaration record.

        Raises:
            RuntimeError: If the wrapper has already been finalized.
        """
        if self.state in (WrapperState.FINALIZING, WrapperState.FLUSHED):
            raise RuntimeError(
                f'Cannot add declarations to {self.source_file.name}: '
                f'wrapper is {self.state.value}'
            )
        self.state = WrapperState.COLLECTING
        return self.router.route(record)

    def add_all(self, records: Iterable[DeclarationRecord]) -> None:
        for record in records:
            self.add(record)

    def finalize(self) -> EmittedArtifacts:
        """Write the artifacts. Later calls return the first result.

        Raises:
            OutputError: If an artifact cannot be written.
        """
        if self.state is WrapperState.FLUSHED:
            return self.artifacts
        if self.state is WrapperState.FINALIZING:
            raise RuntimeError(
                f'Finalization of {self.source_file.name} already ran and failed'
            )

        self.state = WrapperState.FINALIZING
        self.artifacts = self.emitter.emit(
            self.source_file, self.module_name, self.exported_tree, self.internal_tree
        )
        self.state = WrapperState.FLUSHED

        stats = self.router.stats
        logger.info(
            f'Wrote module {self.module_name} to {self.artifacts.module_path} '
            f'({stats[RouteOutcome.EXPORTED]} exported, '
            f'{stats[RouteOutcome.INTERNAL]} internal, '
            f'{stats[RouteOutcome.SKIPPED_INTERNAL]} skipped)'
        )
        return self.artifacts

    def __enter__(self) -> ModuleWrapper:
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self.state in (WrapperState.CREATED, WrapperState.COLLECTING):
            if exc is not None:
                logger.warning(
                    f'Collection for {self.source_file.name} stopped early: {exc}; '
                    'writing what was collected'
                )
            self.finalize()
        return False
