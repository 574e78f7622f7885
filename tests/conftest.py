import gzip
import shutil
import tempfile
import xml.etree.ElementTree as ET
from pathlib import Path

import pytest


@pytest.fixture
def temp_workspace():
    """Create a temporary directory for test files."""
    temp_dir = tempfile.mkdtemp()
    yield Path(temp_dir)
    shutil.rmtree(temp_dir)


@pytest.fixture
def sample_repo(temp_workspace):
    """Create a sample repository structure for testing."""
    repo_root = temp_workspace / "sample_repo"
    repo_root.mkdir()

    # Create directory structure
    (repo_root / "src").mkdir()
    (repo_root / "src" / "utils").mkdir()
    (repo_root / "docs").mkdir()
    (repo_root / ".git").mkdir()
    (repo_root / "node_modules").mkdir()

    # Create files
    (repo_root / "README.md").write_text("# Sample Repository\n\nTest repository for xdir")
    (repo_root / "src" / "main.py").write_text("def main():\n    print('Hello, World!')")
    (repo_root / "src" / "utils" / "helpers.py").write_text("def helper():\n    return 42")
    (repo_root / "docs" / "guide.txt").write_text("Read the code.")
    (repo_root / ".git" / "HEAD.txt").write_text("ref: refs/heads/main")
    (repo_root / "node_modules" / "index.js").write_text("module.exports = {}")
    (repo_root / ".env").write_text("SECRET=1")

    # Create binary file
    (repo_root / "image.png").write_bytes(b'\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR')

    return repo_root


@pytest.fixture
def output_file(temp_workspace):
    """Output location outside the scanned tree."""
    return temp_workspace / "out" / "output.xml"


def parse_document(path):
    """Parse a (possibly gzipped) output document into an ElementTree root."""
    path = Path(path)
    if path.suffix == ".gz":
        with gzip.open(path, "rb") as f:
            return ET.fromstring(f.read())
    return ET.fromstring(path.read_bytes())


def file_elements(root):
    """Map of file name -> <file> element, in document order."""
    return {element.get("name"): element for element in root.findall("file")}
