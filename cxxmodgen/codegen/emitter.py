"""Module wrapper emitter.

This module renders namespace trees into the two artifacts of a wrapped
translation unit: the module interface source, which textually includes the
original header and re-exports its symbols, and the optional header holding
declarations with internal linkage.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from upath import UPath

from cxxmodgen.codegen.file_writer import TextFileWriter

if TYPE_CHECKING:
    from cxxmodgen.codegen.tree import NamespaceTree
    from cxxmodgen.config import WrapperConfig

GLOBAL_MODULE_FRAGMENT = 'module;'
HEADER_PREAMBLE = '#pragma once'


@dataclass(frozen=True)
class EmittedArtifacts:
    """Information about the files written for one translation unit.

    Attributes:
        module_name: The name in the ``export module`` declaration.
        module_path: The module interface source that was written.
        header_path: The internal-linkage header, if one was written.
    """

    module_name: str
    module_path: UPath
    header_path: UPath | None = None

    @property
    def paths(self) -> list[UPath]:
        return [p for p in (self.module_path, self.header_path) if p is not None]


def render_module_source(
    source_file: Path, module_name: str, exported_tree: NamespaceTree
) -> str:
    """Render the module interface source.

    The include uses the absolute path of the original file, so the output
    does not depend on where the generator ran.
    """
    lines = [
        GLOBAL_MODULE_FRAGMENT,
        f'#include "{source_file.as_posix()}"',
        f'export module {module_name};',
    ]
    return '\n'.join(lines) + '\n' + exported_tree.serialize(use_export_prefix=True)


def render_header(internal_tree: NamespaceTree) -> str:
    return HEADER_PREAMBLE + '\n' + internal_tree.serialize(use_export_prefix=False)


class WrapperEmitter:
    """Writes the artifacts of a translation unit to the output directory.

    Files are named after the base name of the original source:
    ``<output_dir>/<base><module_extension>`` always, and
    ``<output_dir>/<base><header_extension>`` when internal-linkage
    declarations are collected into a header.
    """

    def __init__(self, config: WrapperConfig, writer: TextFileWriter | None = None):
        self.config = config
        self.output_dir = UPath(config.output_dir)
        self.writer = writer or TextFileWriter()

    def module_path(self, base_name: str) -> UPath:
        return self.output_dir / f'{base_name}{self.config.module_extension}'

    def header_path(self, base_name: str) -> UPath:
        return self.output_dir / f'{base_name}{self.config.header_extension}'

    def emit(
        self,
        source_file: Path,
        module_name: str,
        exported_tree: NamespaceTree,
        internal_tree: NamespaceTree,
    ) -> EmittedArtifacts:
        """Render and write all artifacts for one translation unit.

        Both files are staged before either is moved into place, so failing
        to write one leaves the previous version of the other untouched.

        Raises:
            OutputError: If any file cannot be written.
        """
        base_name = source_file.stem

        # render everything before touching the filesystem
        files = []
        if self.config.emit_header:
            files.append((render_header(internal_tree), self.header_path(base_name)))
        files.append(
            (
                render_module_source(source_file, module_name, exported_tree),
                self.module_path(base_name),
            )
        )

        *header_paths, module_path = self.writer.write_all(files)
        header_path = header_paths[0] if header_paths else None

        return EmittedArtifacts(
            module_name=module_name, module_path=module_path, header_path=header_path
        )
