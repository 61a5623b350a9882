"""Record types imported by generated python artifacts.

A generated module looks like::

    from assetembed.runtime import Asset, WebAsset

    WEB: Tuple[WebAsset, ...] = (
        WebAsset(uri='/', data=b'<html>...', data_gz=None, data_br=None, mime='text/plain'),
    )
"""

from dataclasses import dataclass
from typing import Optional

from assetembed.core.constants import DEFAULT_MIME


@dataclass(frozen=True)
class Asset:
    """An embedded file."""

    uri: str
    data: bytes


@dataclass(frozen=True)
class WebAsset:
    """An embedded file with optional precompressed variants."""

    uri: str
    data: bytes
    data_gz: Optional[bytes] = None
    data_br: Optional[bytes] = None
    mime: str = DEFAULT_MIME

    @property
    def mime_type(self) -> str:
        return self.mime

    @property
    def has_gzip(self) -> bool:
        return self.data_gz is not None

    @property
    def has_brotli(self) -> bool:
        return self.data_br is not None
