#!/usr/bin/env python3
"""Generated artifact registry.

Codegen collects finalized pipelines and writes their declarations, in
registration order, into a single generated source file.

By default the file is ``$OUT_DIR/assets.py`` (``assets.rs`` for the rust
target). Use ``set_path`` to choose another destination.

Example:
    >>> Codegen().pipe(
    ...     Assets("ASSETS", "../resources").filter(Filter.exclude_extension("png"))
    ... ).write()
    1243
"""

import os
from typing import List, Optional, Union

from assetembed.core.constants import (
    DEFAULT_FILENAME_STEM,
    OUT_DIR_ENV,
    ErrorCode,
    FilePath,
    OutputTarget,
)
from assetembed.core.errors import AssetIOError, PathNotSetError
from assetembed.infrastructure.logger import get_logger
from assetembed.pipeline.base import Pipeline, PipelineBuilder
from assetembed.pipeline.generator import ArtifactGenerator
from assetembed.pipeline.walker import WatchCallback


class Codegen:
    """Ordered collection of pipelines rendered into one artifact."""

    def __init__(
        self,
        path: Optional[FilePath] = None,
        target: Union[str, OutputTarget] = OutputTarget.PYTHON,
        watch: Optional[WatchCallback] = None,
    ):
        """Initialize codegen.

        Args:
            path: Destination file (default: ``$OUT_DIR/assets.<ext>``)
            target: Output language
            watch: Optional callback receiving every path visited while
                rendering
        """
        self._path = os.fspath(path) if path is not None else None
        self._target = OutputTarget(target)
        self._watch = watch
        self._pipelines: List[Pipeline] = []

    @property
    def path(self) -> Optional[FilePath]:
        """Destination file, or None if neither set nor derivable."""
        if self._path is not None:
            return self._path

        out_dir = os.environ.get(OUT_DIR_ENV)
        if not out_dir:
            return None
        return os.path.join(out_dir, f"{DEFAULT_FILENAME_STEM}.{self._target.extension}")

    @property
    def target(self) -> OutputTarget:
        return self._target

    @property
    def pipelines(self) -> List[Pipeline]:
        return list(self._pipelines)

    def set_path(self, path: FilePath) -> "Codegen":
        self._path = os.fspath(path)
        return self

    def set_target(self, target: Union[str, OutputTarget]) -> "Codegen":
        self._target = OutputTarget(target)
        return self

    def set_watch(self, watch: Optional[WatchCallback]) -> "Codegen":
        self._watch = watch
        return self

    def pipe(self, pipeline: Union[Pipeline, PipelineBuilder]) -> "Codegen":
        """Register a pipeline.

        A builder is finalized on registration.

        Args:
            pipeline: Pipeline or builder to append

        Returns:
            self
        """
        if isinstance(pipeline, PipelineBuilder):
            pipeline = pipeline.build()
        self._pipelines.append(pipeline)
        return self

    def render(self) -> str:
        """Render the complete artifact.

        Returns:
            Header followed by every pipeline's declaration

        Raises:
            AssetEmbedError: If any pipeline fails
        """
        generator = ArtifactGenerator(self._target)
        parts = [generator.header()]
        for pipeline in self._pipelines:
            parts.append(pipeline.render(self._target, self._watch))
        return "".join(parts)

    def write(self) -> int:
        """Render all pipelines and write the artifact.

        Nothing is written unless every pipeline renders successfully.

        Returns:
            Number of bytes written

        Raises:
            PathNotSetError: If no destination is set and OUT_DIR is unset
            AssetIOError: If the destination cannot be written
            AssetEmbedError: If any pipeline fails
        """
        logger = get_logger()
        path = self.path
        if path is None:
            raise PathNotSetError(
                f"Output path is not set and {OUT_DIR_ENV} is not defined; "
                f"call set_path() or run inside a build script"
            )

        data = self.render().encode("utf-8")

        tmp_path = path + ".tmp"
        try:
            directory = os.path.dirname(path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(tmp_path, "wb") as f:
                f.write(data)
            os.replace(tmp_path, path)
        except OSError as e:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            code = ErrorCode.PERMISSION_DENIED if isinstance(e, PermissionError) else ErrorCode.INTERNAL_ERROR
            raise AssetIOError(f"Unable to write {path}: {e}", code, path=path) from e

        logger.info(f"written {len(data)} bytes to {path}", pipelines=len(self._pipelines))
        return len(data)

    def __len__(self) -> int:
        return len(self._pipelines)

    def __repr__(self) -> str:
        return f"<Codegen target={self._target.value} pipelines={len(self._pipelines)}>"
