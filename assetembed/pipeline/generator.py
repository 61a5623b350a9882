#!/usr/bin/env python3
"""Generated source rendering using Jinja2.

This module turns a batch of asset records into one declaration of a named,
fixed-length constant sequence:
- python target: a tuple of ``Asset``/``WebAsset`` with payloads captured as
  bytes literals at generation time
- rust target: ``const NAME: [Asset; N]`` using ``include_bytes!``

Records keep the order they were collected in.

Example:
    >>> generator = ArtifactGenerator(target="python")
    >>> print(generator.generate("DATA", [AssetRecord("/a.txt", "/srv/a.txt")]))
    DATA: Tuple[Asset, ...] = (
        Asset(
            uri='/a.txt',
            data=b'hello world',
        ),
    )
"""

import os
from typing import Any, Dict, Optional, Sequence, Union

import jinja2

from assetembed.core.constants import ASSETEMBED_VERSION, DEFAULT_MIME, ErrorCode, OutputTarget
from assetembed.core.errors import AssetIOError
from assetembed.core.validators import validate_identifier
from assetembed.pipeline.records import AssetRecord

TEMPLATES = {
    "python/header": (
        "# Generated by assetembed {{ version }}. Do not edit.\n"
        "from typing import Tuple\n"
        "\n"
        "from assetembed.runtime import Asset, WebAsset\n"
    ),
    "python/declaration": (
        "\n"
        "{{ identifier }}: Tuple[{{ record_type }}, ...] = (\n"
        "{% for record in records %}\n"
        "    {{ record_type }}(\n"
        "        uri={{ record.uri }},\n"
        "        data={{ record.data }},\n"
        "{% if web %}\n"
        "        data_gz={{ record.data_gz }},\n"
        "        data_br={{ record.data_br }},\n"
        "        mime={{ record.mime }},\n"
        "{% endif %}\n"
        "    ),\n"
        "{% endfor %}\n"
        ")\n"
    ),
    "rust/header": "// Generated by assetembed {{ version }}. Do not edit.\n",
    "rust/declaration": (
        "\n"
        "const {{ identifier }}: [{{ record_type }}; {{ count }}] = [\n"
        "{% for record in records %}\n"
        "    {{ record_type }} {\n"
        "        uri: {{ record.uri }},\n"
        "        data: {{ record.data }},\n"
        "{% if web %}\n"
        "        data_gz: {{ record.data_gz }},\n"
        "        data_br: {{ record.data_br }},\n"
        "        mime: {{ record.mime }},\n"
        "{% endif %}\n"
        "    },\n"
        "{% endfor %}\n"
        "];\n"
    ),
}


def rust_string_literal(value: str) -> str:
    """Quote a string as a Rust string literal."""
    escaped = []
    for char in value:
        if char == "\\":
            escaped.append("\\\\")
        elif char == '"':
            escaped.append('\\"')
        elif char == "\n":
            escaped.append("\\n")
        elif char == "\r":
            escaped.append("\\r")
        elif char == "\t":
            escaped.append("\\t")
        elif ord(char) < 0x20 or ord(char) == 0x7F:
            escaped.append(f"\\u{{{ord(char):x}}}")
        else:
            escaped.append(char)
    return '"' + "".join(escaped) + '"'


def read_payload(path: str) -> bytes:
    """Read a file's bytes for embedding.

    Args:
        path: File to read

    Returns:
        File contents

    Raises:
        AssetIOError: If the file cannot be read
    """
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        code = ErrorCode.PERMISSION_DENIED if isinstance(e, PermissionError) else ErrorCode.INTERNAL_ERROR
        raise AssetIOError(f"Unable to read asset {path}: {e}", code, path=path) from e


class ArtifactGenerator:
    """Render asset records as generated source code.

    One generator renders declarations for a single output language.
    """

    def __init__(self, target: Union[str, OutputTarget] = OutputTarget.PYTHON):
        """Initialize artifact generator.

        Args:
            target: Output language ("python" or "rust")
        """
        self._target = OutputTarget(target)
        self._env = jinja2.Environment(
            loader=jinja2.DictLoader(TEMPLATES),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=jinja2.StrictUndefined,
        )

    @property
    def target(self) -> OutputTarget:
        return self._target

    def header(self) -> str:
        """Preamble written once at the top of the artifact."""
        template = self._env.get_template(f"{self._target.value}/header")
        return template.render(version=ASSETEMBED_VERSION)

    def generate(self, identifier: str, records: Sequence[AssetRecord], web: bool = False) -> str:
        """Render one declaration.

        Args:
            identifier: Name of the generated constant
            records: Records in output order
            web: Emit WebAsset records with compressed payloads and MIME

        Returns:
            Generated source text

        Raises:
            InvalidIdentifierError: If identifier is invalid for the target
            AssetIOError: If a payload cannot be read
        """
        validate_identifier(identifier, self._target)

        if self._target == OutputTarget.PYTHON:
            literals = [self._python_literals(record) for record in records]
        else:
            literals = [self._rust_literals(record) for record in records]

        template = self._env.get_template(f"{self._target.value}/declaration")
        return template.render(
            identifier=identifier,
            record_type="WebAsset" if web else "Asset",
            count=len(literals),
            records=literals,
            web=web,
        )

    def _python_literals(self, record: AssetRecord) -> Dict[str, Any]:
        return {
            "uri": repr(record.uri),
            "data": repr(read_payload(record.path)),
            "data_gz": self._python_optional(record.gzip_path),
            "data_br": self._python_optional(record.brotli_path),
            "mime": repr(record.mime or DEFAULT_MIME),
        }

    @staticmethod
    def _python_optional(path: Optional[str]) -> str:
        if path is None:
            return "None"
        return repr(read_payload(path))

    def _rust_literals(self, record: AssetRecord) -> Dict[str, Any]:
        # The compiler reads the payload; only check that it will be able to.
        self._check_readable(record.path)
        return {
            "uri": rust_string_literal(record.uri),
            "data": f"include_bytes!({rust_string_literal(record.path)})",
            "data_gz": self._rust_optional(record.gzip_path),
            "data_br": self._rust_optional(record.brotli_path),
            "mime": rust_string_literal(record.mime or DEFAULT_MIME),
        }

    def _rust_optional(self, path: Optional[str]) -> str:
        if path is None:
            return "None"
        self._check_readable(path)
        return f"Some(include_bytes!({rust_string_literal(path)}))"

    @staticmethod
    def _check_readable(path: str) -> None:
        if not os.path.isfile(path) or not os.access(path, os.R_OK):
            raise AssetIOError(f"Unable to read asset {path}", ErrorCode.PERMISSION_DENIED, path=path)

