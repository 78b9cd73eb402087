"""Shared test fixtures for assetdump tests."""

import io
import os
from pathlib import Path

import pytest
from rich.console import Console
from typer.testing import CliRunner

from assetdump.output import OutputContext

MANIFEST = """[assets.app_js]
inputs = ["js/a.js", "js/b.js"]
output = "js/app.js"

[assets.site_css]
inputs = ["css/*.css"]
filters = ["strip"]
output = "css/*.css"
"""


@pytest.fixture
def runner() -> CliRunner:
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture
def output() -> io.StringIO:
    """Buffer receiving console output."""
    return io.StringIO()


@pytest.fixture
def ctx(output: io.StringIO) -> OutputContext:
    """Output context writing to the ``output`` buffer."""
    console = Console(file=output, force_terminal=False, width=500)
    return OutputContext(console=console)


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    """Create an asset source tree with a manifest.

    Sources get fixed modification times: a.js=1000, b.js=2000,
    site.css=1500.
    """
    root = tmp_path / "assets"
    (root / "js").mkdir(parents=True)
    (root / "css").mkdir()
    (root / "js" / "a.js").write_text("var a = 1;\n")
    (root / "js" / "b.js").write_text("var b = 2;\n")
    (root / "css" / "site.css").write_text("body { margin: 0; }   \n")
    (root / "assets.toml").write_text(MANIFEST)

    os.utime(root / "js" / "a.js", (1000, 1000))
    os.utime(root / "js" / "b.js", (2000, 2000))
    os.utime(root / "css" / "site.css", (1500, 1500))
    return root


@pytest.fixture
def manifest(source_dir: Path) -> Path:
    """Path to the asset manifest."""
    return source_dir / "assets.toml"


@pytest.fixture
def write_to(tmp_path: Path) -> Path:
    """Output root (not created)."""
    return tmp_path / "public"
