from pathlib import Path

import pytest

DEFINITIONS_DIR = Path(__file__).resolve().parent.parent / "definitions"


@pytest.fixture
def definitions_dir():
    return DEFINITIONS_DIR


@pytest.fixture
def write_definition(tmp_path):
    """Write definition source to a temporary .tm file and return its path."""
    def _write(source, name="machine.tm"):
        path = tmp_path / name
        path.write_text(source, encoding="utf-8")
        return path
    return _write
