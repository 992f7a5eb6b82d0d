"""
Pytest configuration and shared fixtures for test suite.
"""

import pytest
import tempfile
import shutil
from pathlib import Path

import numpy as np
from PIL import Image, ExifTags


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir)
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture(autouse=True)
def isolated_user_config(temp_dir, monkeypatch):
    """Point the user config at an empty directory and clear overrides."""
    from photoprint.user_config import get_user_config

    for var in (
        'PHOTOPRINT_WORKERS', 'PHOTOPRINT_FUZZ', 'PHOTOPRINT_LOW_THRESHOLD',
        'PHOTOPRINT_HIGH_THRESHOLD', 'PHOTOPRINT_SIZE', 'PHOTOPRINT_BIT_DEPTH',
        'PHOTOPRINT_EXTENSIONS',
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv('PHOTOPRINT_CONFIG_DIR', str(temp_dir / 'config'))
    get_user_config().reload()
    yield
    get_user_config().reload()


@pytest.fixture
def make_photo():
    """
    Factory writing a deterministic noise image.

    Usage: make_photo(path, seed=1, size=(64, 48), taken=None)
    ``taken`` is an EXIF timestamp such as '2019:07:04 18:30:05'.
    """
    def _make(path, seed=1, size=(64, 48), taken=None):
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        rng = np.random.default_rng(seed)
        pixels = rng.integers(0, 256, size=(size[1], size[0], 3), dtype=np.uint8)
        img = Image.fromarray(pixels, 'RGB')
        options = {}
        if taken is not None:
            exif = Image.Exif()
            exif[ExifTags.Base.DateTimeOriginal] = taken
            options['exif'] = exif
        img.save(path, **options)
        return path

    return _make


@pytest.fixture
def photo_dirs(temp_dir):
    """Create empty source, fingerprint and search directories."""
    dirs = {}
    for name in ('photos', 'fingerprints', 'search'):
        d = temp_dir / name
        d.mkdir()
        dirs[name] = d
    return dirs


@pytest.fixture
def tree(temp_dir):
    """
    Create a nested tree of plain files.

    Returns:
        (root, set of absolute file paths)
    """
    root = temp_dir / "tree"
    files = [
        "a.txt",
        "b.jpg",
        "one/c.png",
        "one/two/d.tif",
        "one/two/three/e.dat",
        "other/f.jpeg",
    ]
    for rel in files:
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"x")
    (root / "empty_dir").mkdir()
    return root, {str(root / rel) for rel in files}
