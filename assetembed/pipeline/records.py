"""Data records flowing through an asset pipeline."""

from dataclasses import dataclass
from typing import Optional

from assetembed.core.constants import FilePath, Uri


@dataclass(frozen=True)
class AssetCandidate:
    """A regular file found under the asset root, before filtering."""

    path: FilePath  # Absolute path
    relative_path: FilePath  # Relative to the asset root, platform separators


@dataclass(frozen=True)
class AssetRecord:
    """An accepted file, ready for the artifact generator.

    Built once per accepted file during traversal and never mutated.
    """

    uri: Uri
    path: FilePath
    gzip_path: Optional[FilePath] = None
    brotli_path: Optional[FilePath] = None
    mime: Optional[str] = None

    @property
    def has_gzip(self) -> bool:
        return self.gzip_path is not None

    @property
    def has_brotli(self) -> bool:
        return self.brotli_path is not None
