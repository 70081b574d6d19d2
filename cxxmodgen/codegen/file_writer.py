"""File writing utilities for generated artifacts.

This module provides the writer used to put generated module sources and
headers on disk without ever leaving a half-written file behind.
"""

import logging
import os
import tempfile
from collections.abc import Iterable
from pathlib import Path

from upath import UPath

from cxxmodgen.exceptions import OutputError

logger = logging.getLogger(__name__)


def _is_local(path: UPath) -> bool:
    return not getattr(path, 'protocol', '')


class TextFileWriter:
    """Writes generated text files.

    Local files are written atomically: the content goes to a temporary file
    in the target directory and is then moved over the target, so readers see
    either the previous file or the complete new one. Other filesystems
    supported by ``universal_pathlib`` are written directly.

    Example:
        >>> writer = TextFileWriter()
        >>> writer.write('module;\\n', 'out/a.cppm')
    """

    def write(self, content: str, path: UPath | Path | str) -> UPath:
        """Write ``content`` to ``path``, creating parent directories.

        Args:
            content: Text to write.
            path: Destination file.

        Returns:
            The path that was written.

        Raises:
            OutputError: If the directory cannot be created or the file
                cannot be written.
        """
        path = UPath(path)
        self._make_parent(path)

        if _is_local(path):
            target = Path(str(path))
            self._commit(self._stage(content, target), target)
        else:
            try:
                path.write_text(content, encoding='utf-8')
            except OSError as e:
                raise OutputError(str(path), cause=e) from e

        logger.debug(f'Wrote {len(content)} characters to {path}')
        return path

    def write_all(
        self, files: Iterable[tuple[str, UPath | Path | str]]
    ) -> list[UPath]:
        """Write several files, replacing none of them unless all were written.

        Local files are first written to temporary files next to their
        targets and only moved into place once every one of them succeeded.
        Other filesystems are written in the given order.

        Args:
            files: ``(content, path)`` pairs.

        Returns:
            The paths that were written, in the given order.

        Raises:
            OutputError: If any file cannot be written.
        """
        files = [(content, UPath(path)) for content, path in files]
        if not all(_is_local(path) for _, path in files):
            return [self.write(content, path) for content, path in files]

        staged = []
        try:
            for content, path in files:
                self._make_parent(path)
                target = Path(str(path))
                staged.append((self._stage(content, target), target))
        except OutputError:
            for temp_path, _ in staged:
                Path(temp_path).unlink(missing_ok=True)
            raise

        for index, (temp_path, target) in enumerate(staged):
            try:
                self._commit(temp_path, target)
            except OutputError:
                for leftover, _ in staged[index + 1 :]:
                    Path(leftover).unlink(missing_ok=True)
                raise

        for content, path in files:
            logger.debug(f'Wrote {len(content)} characters to {path}')
        return [path for _, path in files]

    def _make_parent(self, path: UPath) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputError(str(path), cause=e) from e

    def _stage(self, content: str, path: Path) -> str:
        temp_path = None
        try:
            with tempfile.NamedTemporaryFile(
                mode='w',
                encoding='utf-8',
                newline='',
                dir=str(path.parent),
                prefix=f'.{path.name}.',
                suffix='.tmp',
                delete=False,
            ) as f:
                temp_path = f.name
                f.write(content)
        except OSError as e:
            if temp_path is not None:
                Path(temp_path).unlink(missing_ok=True)
            raise OutputError(str(path), cause=e) from e
        return temp_path

    def _commit(self, temp_path: str, path: Path) -> None:
        try:
            os.replace(temp_path, str(path))
        except OSError as e:
            Path(temp_path).unlink(missing_ok=True)
            raise OutputError(str(path), cause=e) from e
