#!/usr/bin/env python3
"""Recursive traversal of an asset root.

This module provides:
- TreeWalker: depth-first enumeration of regular files
- PrintWatchSink: prints one rebuild hint per visited entry

Entries are visited in the order the operating system lists them, which is
not sorted and may differ between platforms. Every visited entry, including
the root and each directory, is reported to the watch callback so the
surrounding build tool can schedule a rebuild when it changes.

Example:
    >>> walker = TreeWalker("web/dist", watch=PrintWatchSink())
    >>> [c.relative_path for c in walker.walk()]
    ['index.html', 'js/app.js']
"""

import os
import sys
from typing import Callable, Iterator, List, Optional, TextIO

from assetembed.core.constants import DEFAULT_WATCH_FORMAT, ErrorCode, FilePath
from assetembed.core.errors import TraversalError
from assetembed.core.validators import validate_watch_format
from assetembed.infrastructure.logger import get_logger
from assetembed.pipeline.records import AssetCandidate

WatchCallback = Callable[[FilePath], None]


class PrintWatchSink:
    """Watch callback printing a single advisory line per path.

    Use ``cargo:rerun-if-changed={path}`` as the format inside a Cargo
    build script.
    """

    def __init__(self, fmt: str = DEFAULT_WATCH_FORMAT, stream: Optional[TextIO] = None):
        """Initialize watch sink.

        Args:
            fmt: Line format, ``{path}`` is replaced by the visited path
            stream: Output stream (default: stdout at call time)

        Raises:
            ValidationError: If fmt uses a placeholder other than {path}
        """
        validate_watch_format(fmt)
        self._format = fmt
        self._stream = stream

    @property
    def format(self) -> str:
        return self._format

    def __call__(self, path: FilePath) -> None:
        stream = self._stream or sys.stdout
        print(self._format.format(path=path), file=stream)


class TreeWalker:
    """Enumerate every regular file below a root directory.

    Directories are descended into but never emitted. Symlinked directories
    are not followed; symlinks to regular files are emitted.
    """

    def __init__(self, root: FilePath, watch: Optional[WatchCallback] = None):
        """Initialize tree walker.

        Args:
            root: Asset root directory
            watch: Optional callback receiving every visited path
        """
        self._root = os.path.abspath(root)
        self._watch = watch
        self._logger = get_logger()

    @property
    def root(self) -> FilePath:
        return self._root

    def report(self, path: FilePath) -> None:
        """Send a path to the watch callback, if any."""
        if self._watch is not None:
            self._watch(path)

    def walk(self) -> Iterator[AssetCandidate]:
        """Yield a candidate for every regular file under the root.

        Yields:
            AssetCandidate in traversal order

        Raises:
            TraversalError: If the root or any directory cannot be read
        """
        if not os.path.isdir(self._root):
            raise TraversalError(
                f"Asset root is not a directory: {self._root}",
                ErrorCode.NOT_FOUND,
                path=self._root,
            )

        self.report(self._root)
        yield from self._walk_directory(self._root)

    def _walk_directory(self, directory: FilePath) -> Iterator[AssetCandidate]:
        for entry in self._list(directory):
            self.report(entry.path)

            try:
                if entry.is_dir(follow_symlinks=False):
                    yield from self._walk_directory(entry.path)
                    continue
                is_file = entry.is_file()
            except OSError as e:
                raise TraversalError(
                    f"Unable to stat {entry.path}: {e}",
                    _error_code(e),
                    path=entry.path,
                ) from e

            if not is_file:
                self._logger.debug("Skipping non-regular entry", path=entry.path)
                continue

            yield AssetCandidate(
                path=entry.path,
                relative_path=os.path.relpath(entry.path, self._root),
            )

    def _list(self, directory: FilePath) -> List[os.DirEntry]:
        # Listing is materialized so the directory handle is released
        # before descending.
        try:
            with os.scandir(directory) as it:
                return list(it)
        except OSError as e:
            raise TraversalError(
                f"Unable to read directory {directory}: {e}",
                _error_code(e),
                path=directory,
            ) from e


def _error_code(error: OSError) -> ErrorCode:
    if isinstance(error, PermissionError):
        return ErrorCode.PERMISSION_DENIED
    if isinstance(error, FileNotFoundError):
        return ErrorCode.NOT_FOUND
    return ErrorCode.INTERNAL_ERROR
