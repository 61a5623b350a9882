"""Public URI derivation for asset files.

A URI is ``/`` joined with the configured prefix and the file's path
relative to the asset root, always using ``/`` separators. In web mode an
``index.html`` serves at its directory's own URI.

    root=web/dist, prefix=/          web/dist/js/app.js      -> /js/app.js
    root=web/dist, prefix=/static    web/dist/js/app.js      -> /static/js/app.js
    root=web/dist, web mode          web/dist/about/index.html -> /about
"""

import os
from pathlib import Path, PurePath, PurePosixPath

from assetembed.core.constants import DEFAULT_PREFIX, INDEX_FILENAME, ErrorCode, FilePath, Uri
from assetembed.core.errors import PathError


def relative_to_root(path: FilePath, root: FilePath) -> PurePath:
    """Strip the asset root from a path.

    Args:
        path: File path under the root
        root: Asset root directory

    Returns:
        Path relative to the root

    Raises:
        PathError: If the path is not below the root
    """
    absolute = Path(os.path.abspath(path))
    absolute_root = Path(os.path.abspath(root))

    try:
        relative = absolute.relative_to(absolute_root)
    except ValueError:
        raise PathError(
            f"Path {path} is not under asset root {root}",
            ErrorCode.INVALID_INPUT,
            path=os.fspath(path),
        )

    if not relative.parts:
        raise PathError(f"Path {path} is the asset root itself", path=os.fspath(path))

    return relative


def normalize(path: FilePath, root: FilePath, prefix: str = DEFAULT_PREFIX, web: bool = False) -> Uri:
    """Derive the public URI of a file.

    Args:
        path: File path under the root
        root: Asset root directory
        prefix: URI prefix joined between ``/`` and the relative path
        web: Serve ``index.html`` at its parent directory

    Returns:
        URI starting with ``/``

    Raises:
        PathError: If the path is not below the root
    """
    relative = relative_to_root(path, root)
    prefix_parts = [part for part in prefix.replace("\\", "/").split("/") if part]

    uri = PurePosixPath("/", *prefix_parts, *relative.parts)

    if web and uri.name == INDEX_FILENAME:
        uri = uri.parent

    return str(uri)
