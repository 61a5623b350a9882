"""assetembed Pipelines.

This module provides the stages that turn an asset root into source code:
- TreeWalker: recursive file enumeration with watch reporting
- CompressionProbe: gzip/brotli sibling detection
- normalize: public URI derivation
- ArtifactGenerator: Jinja2 rendering of records
- Assets / WebAssets: builders for plain and web pipelines
"""

from .assets import Assets, AssetsPipeline, WebAssets, WebAssetsPipeline
from .base import Pipeline, PipelineBuilder, PipelineConfig
from .compression import CompressionAlgorithm, CompressionProbe, SiblingProbe
from .generator import ArtifactGenerator
from .paths import normalize, relative_to_root
from .records import AssetCandidate, AssetRecord
from .walker import PrintWatchSink, TreeWalker, WatchCallback

__all__ = [
    # Builders
    "Assets",
    "WebAssets",
    "PipelineBuilder",
    # Pipelines
    "Pipeline",
    "PipelineConfig",
    "AssetsPipeline",
    "WebAssetsPipeline",
    # Stages
    "TreeWalker",
    "PrintWatchSink",
    "WatchCallback",
    "CompressionAlgorithm",
    "CompressionProbe",
    "SiblingProbe",
    "normalize",
    "relative_to_root",
    "ArtifactGenerator",
    # Records
    "AssetCandidate",
    "AssetRecord",
]
