"""assetembed - Build-time asset embedding.

Walks asset directories, filters their files and generates a source module
that carries every accepted file's bytes as a constant.

Example:
    >>> from assetembed import Assets, Codegen, Filter
    >>> Codegen("build/assets.py").pipe(
    ...     Assets("ASSETS", "resources").filter(Filter.exclude_extension("png"))
    ... ).write()
"""

from assetembed.codegen import Codegen
from assetembed.core.constants import ASSETEMBED_VERSION, ListPolicy, OutputTarget
from assetembed.core.errors import AssetEmbedError
from assetembed.pipeline import Assets, PrintWatchSink, WebAssets
from assetembed.rules import Filter, FilterChain

__version__ = ASSETEMBED_VERSION

__all__ = [
    "__version__",
    "Codegen",
    "Assets",
    "WebAssets",
    "Filter",
    "FilterChain",
    "ListPolicy",
    "OutputTarget",
    "PrintWatchSink",
    "AssetEmbedError",
]
