"""Shared pytest fixtures for assetembed tests."""
import io
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Generator

import pytest
import yaml

from assetembed.infrastructure.logger import Logger, LogLevel, set_global_logger


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def asset_dir(temp_dir: Path) -> Path:
    """Create a plain asset tree."""
    assets = temp_dir / "assets"
    assets.mkdir()

    (assets / "a.txt").write_bytes(b"0123456789")
    (assets / "b.png").write_bytes(b"\x89PNG\r\n\x1a\n")

    (assets / "lua").mkdir()
    (assets / "lua" / "init.lua").write_text("return {}")
    (assets / "lua" / "vendor").mkdir()
    (assets / "lua" / "vendor" / "json.lua").write_text("return json")

    return assets


@pytest.fixture
def web_dir(temp_dir: Path) -> Path:
    """Create a web distribution tree with precompressed siblings."""
    dist = temp_dir / "web" / "dist"
    dist.mkdir(parents=True)

    (dist / "index.html").write_text("<html>home</html>")
    (dist / "about").mkdir()
    (dist / "about" / "index.html").write_text("<html>about</html>")

    (dist / "js").mkdir()
    (dist / "js" / "app.js").write_text("console.log('app')")
    (dist / "js" / "app.js.gz").write_bytes(b"\x1f\x8bgzip")
    (dist / "js" / "app.js.br").write_bytes(b"brotli")
    (dist / "js" / "app.js.map").write_text("{}")

    (dist / "style.css").write_text("body {}")
    (dist / "style.css.gz").write_bytes(b"\x1f\x8bcss")

    return dist


@pytest.fixture
def sample_config(asset_dir: Path, web_dir: Path, temp_dir: Path) -> Dict[str, Any]:
    """Provide a sample assetembed configuration."""
    return {
        "assetembed": {
            "output": {
                "path": str(temp_dir / "out" / "assets.py"),
                "target": "python",
            },
            "logging": {
                "level": "DEBUG",
                "file": None,
            },
            "pipelines": [
                {
                    "name": "ASSETS",
                    "root": str(asset_dir),
                    "filters": [
                        {"type": "exclude", "extension": "png"},
                    ],
                },
                {
                    "name": "WEB",
                    "kind": "web",
                    "root": str(web_dir),
                    "brotli": False,
                    "filters": [
                        {"type": "exclude", "pattern": r"\.map$"},
                    ],
                },
            ],
        }
    }


@pytest.fixture
def config_file(temp_dir: Path, sample_config: Dict[str, Any]) -> Path:
    """Create a configuration file."""
    config_path = temp_dir / "assetembed.yaml"
    with open(config_path, "w") as f:
        yaml.dump(sample_config, f)
    return config_path


@pytest.fixture
def log_stream() -> Generator[io.StringIO, None, None]:
    """Install a global debug logger writing to a string buffer."""
    import logging

    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter("%(levelname)s - %(message)s"))
    set_global_logger(Logger("assetembed", level=LogLevel.DEBUG, handlers=[handler]))
    yield stream


@pytest.fixture(autouse=True)
def reset_singletons(monkeypatch):
    """Reset the global logger and build environment between tests."""
    monkeypatch.delenv("OUT_DIR", raising=False)
    for key in list(os.environ):
        if key.startswith("ASSETEMBED_"):
            monkeypatch.delenv(key, raising=False)

    yield

    set_global_logger(None)
