#!/usr/bin/env python3
"""Plain and web asset pipelines.

Assets embeds every accepted file as ``Asset(uri, data)``. WebAssets adds
the precompressed gzip and brotli siblings of each file and a MIME type,
and serves ``index.html`` at its directory's URI.

Example:
    >>> web = (
    ...     WebAssets("WEB", "web/dist")
    ...     .filter(Filter.exclude_regex(r"\\.map$"))
    ...     .brotli(False)
    ...     .build()
    ... )
    >>> codegen.pipe(web)
"""

import mimetypes
from typing import Optional

from assetembed.core.constants import FilePath, PipelineKind
from assetembed.pipeline.base import Pipeline, PipelineBuilder, PipelineConfig
from assetembed.pipeline.compression import CompressionProbe
from assetembed.pipeline.paths import normalize
from assetembed.pipeline.records import AssetCandidate, AssetRecord


class AssetsPipeline(Pipeline):
    """Embed accepted files without compression or MIME data."""

    kind = PipelineKind.PLAIN

    def make_record(self, candidate: AssetCandidate) -> AssetRecord:
        uri = normalize(candidate.path, self._config.root, self._config.prefix)
        return AssetRecord(uri=uri, path=candidate.path)


class WebAssetsPipeline(Pipeline):
    """Embed accepted files with their compressed siblings and MIME type.

    Files ending in an enabled compression extension are never records of
    their own; they are attached to the file they compress.
    """

    kind = PipelineKind.WEB

    def __init__(self, config: PipelineConfig):
        super().__init__(config)
        self._probe = CompressionProbe(gzip=config.gzip, brotli=config.brotli)

    def reset_stats(self) -> None:
        super().reset_stats()
        self._stats["siblings_skipped"] = 0

    @property
    def probe(self) -> CompressionProbe:
        return self._probe

    def accepts(self, candidate: AssetCandidate) -> bool:
        if self._probe.is_sibling(candidate.relative_path):
            self._stats["siblings_skipped"] += 1
            return False
        return super().accepts(candidate)

    def rejection_reason(self, candidate: AssetCandidate) -> str:
        if self._probe.is_sibling(candidate.relative_path):
            return "compressed sibling"
        return super().rejection_reason(candidate)

    def make_record(self, candidate: AssetCandidate) -> AssetRecord:
        uri = normalize(candidate.path, self._config.root, self._config.prefix, web=True)
        gzip_path, brotli_path = self._probe.siblings(candidate.path)
        return AssetRecord(
            uri=uri,
            path=candidate.path,
            gzip_path=gzip_path,
            brotli_path=brotli_path,
            mime=self.mime_for(candidate.path),
        )

    def mime_for(self, path: FilePath) -> str:
        """MIME type recorded for a file.

        Without guessing every file gets the configured default.
        """
        if not self._config.guess_mime:
            return self._config.mime_default

        guessed: Optional[str]
        guessed, _ = mimetypes.guess_type(path, strict=False)
        return guessed or self._config.mime_default


class Assets(PipelineBuilder):
    """Builder for a plain asset pipeline.

    An empty result is an error unless ``allow_empty()`` is set.
    """

    default_allow_empty = False

    def build(self) -> AssetsPipeline:
        return AssetsPipeline(self._config)


class WebAssets(PipelineBuilder):
    """Builder for a web asset pipeline.

    Gzip and brotli siblings are picked up by default. An empty result is
    allowed by default.
    """

    default_allow_empty = True

    def gzip(self, enabled: bool = True) -> "WebAssets":
        """Attach ``<file>.gz`` siblings."""
        return self._update(gzip=enabled)

    def brotli(self, enabled: bool = True) -> "WebAssets":
        """Attach ``<file>.br`` siblings."""
        return self._update(brotli=enabled)

    def guess_mime(self, enabled: bool = True) -> "WebAssets":
        """Guess each file's MIME type from its name."""
        return self._update(guess_mime=enabled)

    def mime_default(self, mime: str) -> "WebAssets":
        """MIME type used when none is guessed."""
        return self._update(mime_default=mime)

    def build(self) -> WebAssetsPipeline:
        return WebAssetsPipeline(self._config)
