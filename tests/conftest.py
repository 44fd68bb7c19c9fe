from pathlib import Path

import pytest


EXAMPLES_DIR = Path(__file__).resolve().parent.parent / 'examples'


@pytest.fixture
def example_file():
    """Return the path of a sample program in examples/."""
    def _path(name: str) -> str:
        return str(EXAMPLES_DIR / name)
    return _path


@pytest.fixture(autouse=True)
def _isolate_debug_file(tmp_path, monkeypatch):
    # Interpreter writes debug.txt to the working directory when -v is used.
    monkeypatch.chdir(tmp_path)
