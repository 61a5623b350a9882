#!/usr/bin/env python3
"""Base classes for asset pipelines.

This module provides the foundation shared by every pipeline kind:
- PipelineConfig: the immutable, finalized settings of one pipeline
- PipelineBuilder: chaining setters that finalize into a pipeline
- Pipeline: abstract base exposing render() to the Codegen registry

A pipeline walks its asset root, filters the candidates, builds one record
per accepted file and hands the batch to the artifact generator.

Example:
    >>> pipeline = (
    ...     Assets("ASSETS", "../resources")
    ...     .filter(Filter.exclude_extension("png"))
    ...     .build()
    ... )
    >>> source = pipeline.render()
"""

import os
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Tuple, TypeVar, Union

from assetembed.core.constants import (
    DEFAULT_MIME,
    DEFAULT_PREFIX,
    FilePath,
    ListPolicy,
    OutputTarget,
    PipelineKind,
)
from assetembed.core.errors import DuplicateUriError, EmptyResultError
from assetembed.infrastructure.logger import get_logger
from assetembed.pipeline.generator import ArtifactGenerator
from assetembed.pipeline.records import AssetCandidate, AssetRecord
from assetembed.pipeline.walker import TreeWalker, WatchCallback
from assetembed.rules.engine import Filter, FilterChain

B = TypeVar("B", bound="PipelineBuilder")


@dataclass(frozen=True)
class PipelineConfig:
    """Finalized settings of one pipeline."""

    identifier: str
    root: FilePath
    prefix: str = DEFAULT_PREFIX
    policy: ListPolicy = ListPolicy.BLACKLIST
    filters: Tuple[Filter, ...] = ()
    gzip: bool = True  # web only
    brotli: bool = True  # web only
    allow_empty: bool = False
    guess_mime: bool = False  # web only
    mime_default: str = DEFAULT_MIME  # web only

    @property
    def chain(self) -> FilterChain:
        return FilterChain(self.filters, self.policy)


class Pipeline(ABC):
    """Abstract base class for asset pipelines.

    Subclasses decide how candidates are accepted and how records are
    built. Everything else, including the empty-result guard and the
    duplicate URI check, is shared.
    """

    kind: PipelineKind = PipelineKind.PLAIN

    def __init__(self, config: PipelineConfig):
        """Initialize pipeline.

        Args:
            config: Finalized pipeline settings
        """
        self._config = config
        self._chain = config.chain
        self._stats: Dict[str, Any] = {}
        self.reset_stats()

    @property
    def config(self) -> PipelineConfig:
        return self._config

    @property
    def identifier(self) -> str:
        return self._config.identifier

    @property
    def web(self) -> bool:
        return self.kind == PipelineKind.WEB

    @abstractmethod
    def make_record(self, candidate: AssetCandidate) -> AssetRecord:
        """Build the record for an accepted candidate.

        Args:
            candidate: Accepted file

        Returns:
            AssetRecord for the generator
        """

    def accepts(self, candidate: AssetCandidate) -> bool:
        """Decide whether a candidate becomes a record.

        Args:
            candidate: File found under the asset root

        Returns:
            True if the candidate is accepted
        """
        return self._chain.accepts(candidate.relative_path)

    def rejection_reason(self, candidate: AssetCandidate) -> str:
        """Describe what rejected a candidate, for debug logging."""
        decided_by = self._chain.matching_filter(candidate.relative_path)
        if decided_by is None:
            return f"policy={self._chain.policy.value}"
        return str(decided_by)

    def collect(self, watch: Optional[WatchCallback] = None) -> List[AssetRecord]:
        """Walk the asset root and build records in traversal order.

        Args:
            watch: Optional callback receiving every visited path

        Returns:
            Records of all accepted files

        Raises:
            TraversalError: If the asset root cannot be walked
            PathError: If a file cannot be expressed relative to the root
            DuplicateUriError: If two files normalize to the same URI
        """
        logger = get_logger()
        walker = TreeWalker(self._config.root, watch)
        records: List[AssetRecord] = []
        seen: Dict[str, str] = {}

        if self._chain.rejects_everything:
            # Whitelist without filters; nothing can match.
            logger.debug("Whitelist has no filters, skipping traversal")
            walker.report(walker.root)
            return records

        for candidate in walker.walk():
            self._stats["files_seen"] += 1

            if not self.accepts(candidate):
                self._stats["rejected"] += 1
                logger.debug(
                    "Rejected file",
                    path=candidate.relative_path,
                    reason=self.rejection_reason(candidate),
                )
                continue

            record = self.make_record(candidate)
            if record.uri in seen:
                raise DuplicateUriError(
                    f"URI {record.uri} produced by both {seen[record.uri]} and {record.path}",
                    path=record.path,
                )
            seen[record.uri] = record.path

            self._stats["accepted"] += 1
            logger.debug("Accepted file", path=candidate.relative_path, uri=record.uri)
            records.append(record)

        return records

    def render(
        self,
        target: Union[str, OutputTarget] = OutputTarget.PYTHON,
        watch: Optional[WatchCallback] = None,
    ) -> str:
        """Render this pipeline's declaration.

        Args:
            target: Output language
            watch: Optional callback receiving every visited path

        Returns:
            Generated source text for one constant

        Raises:
            EmptyResultError: If nothing matched and empty output is not allowed
            AssetEmbedError: On any traversal, path or I/O failure
        """
        logger = get_logger()
        start_time = time.time()

        with logger.add_context(pipeline=self.identifier):
            generator = ArtifactGenerator(target)
            records = self.collect(watch)

            if not records and not self._config.allow_empty:
                raise EmptyResultError(
                    f"No assets were matched under {os.path.abspath(self._config.root)}, "
                    f"something is wrong",
                    path=self._config.root,
                )

            source = generator.generate(self.identifier, records, web=self.web)

            duration_ms = (time.time() - start_time) * 1000
            self._stats["renders"] += 1
            self._stats["total_duration_ms"] += duration_ms
            logger.info(
                "Rendered pipeline",
                kind=self.kind.value,
                records=len(records),
                duration_ms=round(duration_ms, 2),
            )

        return source

    def get_stats(self) -> Dict[str, Any]:
        """Get pipeline statistics.

        Returns:
            Statistics dictionary
        """
        return self._stats.copy()

    def reset_stats(self) -> None:
        """Reset pipeline statistics."""
        self._stats = {
            "files_seen": 0,
            "accepted": 0,
            "rejected": 0,
            "renders": 0,
            "total_duration_ms": 0.0,
        }

    def __repr__(self) -> str:
        """String representation."""
        return f"<{self.__class__.__name__} identifier={self.identifier} root={self._config.root}>"


class PipelineBuilder(ABC):
    """Chaining configuration for a pipeline.

    Every setter returns the builder itself. ``build()`` freezes the
    settings into an immutable pipeline; later changes to the builder do not
    affect pipelines already built.
    """

    def __init__(self, identifier: str, path: FilePath):
        """Initialize builder.

        By default the filter list is a blacklist with no filters and the
        URI prefix is ``/``.

        Args:
            identifier: Name of the generated constant
            path: Asset root directory
        """
        self._config = PipelineConfig(
            identifier=identifier,
            root=os.fspath(path),
            allow_empty=self.default_allow_empty,
        )

    default_allow_empty: bool = False

    def _update(self: B, **changes: Any) -> B:
        self._config = replace(self._config, **changes)
        return self

    def filter(self: B, filter_: Filter) -> B:
        """Add a filter.

        Filters are applied in the order they were added and the first
        matching filter decides. To include all Lua files except those in
        one folder, add the exclusion before the inclusion.
        """
        return self._update(filters=self._config.filters + (filter_,))

    def filters(self: B, *filters: Filter) -> B:
        """Add several filters in order."""
        return self._update(filters=self._config.filters + tuple(filters))

    def prefix(self: B, prefix: str) -> B:
        """Set the URI prefix, relative to the web root (default ``/``)."""
        return self._update(prefix=prefix)

    def set_path(self: B, path: FilePath) -> B:
        """Set the asset root directory."""
        return self._update(root=os.fspath(path))

    def blacklist(self: B) -> B:
        """Accept files unless a filter excludes them."""
        return self._update(policy=ListPolicy.BLACKLIST)

    def whitelist(self: B) -> B:
        """Reject files unless a filter includes them."""
        return self._update(policy=ListPolicy.WHITELIST)

    def policy(self: B, policy: Union[str, ListPolicy]) -> B:
        return self._update(policy=ListPolicy(policy))

    def allow_empty(self: B, allow: bool = True) -> B:
        """Allow rendering an empty sequence when nothing matches."""
        return self._update(allow_empty=allow)

    @property
    def config(self) -> PipelineConfig:
        return self._config

    @abstractmethod
    def build(self) -> Pipeline:
        """Finalize the settings into a pipeline."""
