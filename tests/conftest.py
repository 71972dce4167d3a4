import os
import time

import pytest


@pytest.fixture
def temp_dir(tmp_path):
    directory = tmp_path / "uploads" / "temp"
    directory.mkdir(parents=True)
    return directory


# Fixture factory to create files in temp_dir with a given age in seconds
@pytest.fixture
def make_temp_file(temp_dir):
    def _make_temp_file(name: str, age: float, content: bytes = b"data"):
        path = temp_dir / name
        path.write_bytes(content)
        mtime = time.time() - age
        os.utime(path, (mtime, mtime))
        return path

    return _make_temp_file
