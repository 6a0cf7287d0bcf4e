import sys
from pathlib import Path
from typing import List

import pytest


FAKE_ENCODER = '''
import sys

data = sys.stdin.buffer.read()
with open(sys.argv[1], "w") as f:
    f.write(str(data.count(b"\\x89PNG\\r\\n\\x1a\\n")))
sys.exit(int(sys.argv[2]))
'''

# Exits without reading stdin, so writes hit a broken pipe
EARLY_EXIT_ENCODER = '''
import sys
sys.stdin.close()
sys.exit(int(sys.argv[1]))
'''


@pytest.fixture
def write_csv(tmp_path):
    """Write CSV lines to a file and return its path."""
    def _write(lines: List[str], name: str = "pixels.csv") -> Path:
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n")
        return path
    return _write


@pytest.fixture
def fake_encoder(tmp_path):
    """
    Build a command for a stand-in encoder that counts PNG payloads on
    stdin and exits with the given code.

    Returns (command, path of the file the payload count is written to).
    """
    script = tmp_path / "fake_encoder.py"
    script.write_text(FAKE_ENCODER)
    count_file = tmp_path / "frame_count.txt"

    def _make(exit_code: int = 0):
        return [sys.executable, str(script), str(count_file), str(exit_code)], count_file
    return _make


@pytest.fixture
def early_exit_encoder(tmp_path):
    script = tmp_path / "early_exit_encoder.py"
    script.write_text(EARLY_EXIT_ENCODER)

    def _make(exit_code: int = 0):
        return [sys.executable, str(script), str(exit_code)]
    return _make
