"""shared fixtures for the crateyard test suite."""
import hashlib
import io
import json
import shutil
import sys
import tarfile
import tempfile
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


def build_tarball(name: str, version: str, files: dict = None, top: str = None) -> bytes:
    """build a gzipped tarball holding a single `<name>-<version>` directory."""
    top = top or f"{name}-{version}"
    files = files if files is not None else {
        "crate.json": json.dumps({"name": name, "version": version}),
        "src/lib.txt": f"{name} {version}\n",
    }
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        for rel, text in files.items():
            data = text.encode()
            info = tarfile.TarInfo(f"{top}/{rel}")
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))
    return buf.getvalue()


def sha256(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


@pytest.fixture
def temp_dir():
    """create a temporary directory."""
    temp_dir = Path(tempfile.mkdtemp())
    yield temp_dir
    # cleanup
    if temp_dir.exists():
        shutil.rmtree(temp_dir)
