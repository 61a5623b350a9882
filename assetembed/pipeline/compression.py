#!/usr/bin/env python3
"""Detection of precompressed sibling files.

A precompressed variant lives next to its source file with the compression
suffix appended to the full file name:

    app.js      -> app.js.gz, app.js.br

Siblings are only looked up, never created. Existence is checked when the
artifact is generated.

Example:
    >>> probe = CompressionProbe(gzip=True, brotli=True)
    >>> probe.probe("web/dist/app.js")
    SiblingProbe(has_gzip=True, has_brotli=False)
"""

import os
from enum import Enum
from typing import NamedTuple, Optional, Tuple

from assetembed.core.constants import BROTLI_SUFFIX, GZIP_SUFFIX, FilePath
from assetembed.rules.patterns import PathType, file_extension


class CompressionAlgorithm(Enum):
    """Supported precompressed variants."""

    GZIP = "gzip"
    BROTLI = "brotli"

    @property
    def suffix(self) -> str:
        """Suffix appended to the source file name."""
        if self == CompressionAlgorithm.GZIP:
            return GZIP_SUFFIX
        return BROTLI_SUFFIX

    @property
    def extension(self) -> str:
        """Extension of a sibling file, without the period."""
        return self.suffix[1:]


class SiblingProbe(NamedTuple):
    """Which precompressed siblings exist for a file."""

    has_gzip: bool
    has_brotli: bool


class CompressionProbe:
    """Look up gzip and brotli siblings for accepted files.

    Disabled algorithms are never reported, and their sibling files are not
    treated as sibling data.
    """

    def __init__(self, gzip: bool = True, brotli: bool = True):
        """Initialize compression probe.

        Args:
            gzip: Look for ``<file>.gz`` siblings
            brotli: Look for ``<file>.br`` siblings
        """
        self._enabled = {
            CompressionAlgorithm.GZIP: gzip,
            CompressionAlgorithm.BROTLI: brotli,
        }

    def is_enabled(self, algorithm: CompressionAlgorithm) -> bool:
        return self._enabled[algorithm]

    @staticmethod
    def sibling_path(path: FilePath, algorithm: CompressionAlgorithm) -> FilePath:
        """Path of the sibling for an algorithm, whether or not it exists."""
        return os.fspath(path) + algorithm.suffix

    def _exists(self, path: FilePath, algorithm: CompressionAlgorithm) -> bool:
        if not self._enabled[algorithm]:
            return False
        return os.path.exists(self.sibling_path(path, algorithm))

    def probe(self, path: FilePath) -> SiblingProbe:
        """Check which siblings exist.

        Args:
            path: Source file path

        Returns:
            SiblingProbe flags
        """
        return SiblingProbe(
            has_gzip=self._exists(path, CompressionAlgorithm.GZIP),
            has_brotli=self._exists(path, CompressionAlgorithm.BROTLI),
        )

    def siblings(self, path: FilePath) -> Tuple[Optional[FilePath], Optional[FilePath]]:
        """Get the existing sibling paths.

        Args:
            path: Source file path

        Returns:
            (gzip path or None, brotli path or None)
        """
        found = self.probe(path)
        gzip_path = self.sibling_path(path, CompressionAlgorithm.GZIP) if found.has_gzip else None
        brotli_path = (
            self.sibling_path(path, CompressionAlgorithm.BROTLI) if found.has_brotli else None
        )
        return gzip_path, brotli_path

    def is_sibling(self, relative_path: PathType) -> bool:
        """Check if a candidate is itself sibling data.

        Sibling files are embedded alongside their source, never as
        standalone records.

        Args:
            relative_path: Candidate path

        Returns:
            True if the candidate carries an enabled compression extension
        """
        extension = file_extension(relative_path)
        if extension is None:
            return False

        for algorithm, enabled in self._enabled.items():
            if enabled and extension == algorithm.extension:
                return True
        return False
