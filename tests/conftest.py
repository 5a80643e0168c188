"""Shared test fixtures for the image-to-text test suite."""

import io
import stat
import sys
from collections.abc import Callable
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from src.ocr.tesseract_engine import TesseractEngine

# Stand-in for the tesseract executable. It records what it was given in
# RECORD (the scratch directory is gone by the time tests look) and then
# behaves according to BEHAVIOR.
_STUB_SOURCE = '''
import json
import os
import sys

RECORD = {record!r}
BEHAVIOR = {behavior!r}
TEXT = {text!r}

input_path, output_path = sys.argv[1], sys.argv[2]
with open(input_path, "rb") as f:
    data = f.read()

listed = []
try:
    lines = data.decode("utf-8").splitlines()
except UnicodeDecodeError:
    lines = []
for line in lines:
    if line and os.path.isfile(line):
        with open(line, "rb") as f:
            listed.append({{"path": line, "hex": f.read().hex()}})

with open(RECORD, "w") as f:
    json.dump(
        {{
            "argv": sys.argv[1:],
            "cwd": os.getcwd(),
            "tessdata": os.environ.get("TESSDATA_PREFIX"),
            "input_hex": data.hex(),
            "listed": listed,
            "scratch": os.path.dirname(input_path),
            "scratch_entries": sorted(os.listdir(os.path.dirname(input_path))),
        }},
        f,
    )

if BEHAVIOR == "success":
    with open(output_path + ".txt", "w", encoding="utf-8") as f:
        f.write(TEXT)
elif BEHAVIOR == "echo":
    with open(output_path + ".txt", "w", encoding="utf-8") as f:
        f.write(data.decode("utf-8"))
elif BEHAVIOR == "binary":
    with open(output_path + ".txt", "wb") as f:
        f.write(b"\\xff\\xfe\\xfa")
elif BEHAVIOR == "fail":
    sys.stderr.write(TEXT)
    sys.exit(1)
'''


def _make_png(width: int, height: int, value: int) -> bytes:
    """Encode a solid grayscale image as PNG bytes."""
    image = Image.fromarray(np.full((height, width), value, dtype=np.uint8))
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    """A small synthetic PNG image."""
    return _make_png(30, 20, 255)


@pytest.fixture
def png_pages() -> list[bytes]:
    """Three distinct synthetic PNG pages."""
    return [_make_png(10 + i, 10, 40 * i) for i in range(3)]


@pytest.fixture
def stub_tesseract(tmp_path: Path) -> Callable[..., Path]:
    """Factory installing a fake ``tesseract`` executable in a directory.

    Returns the path of the JSON record the stub writes on each run.
    """

    def install(
        install_dir: Path, behavior: str = "success", text: str = "HELLO"
    ) -> Path:
        install_dir.mkdir(parents=True, exist_ok=True)
        record = install_dir / "record.json"
        script = install_dir / "stub.py"
        script.write_text(
            _STUB_SOURCE.format(record=str(record), behavior=behavior, text=text)
        )
        wrapper = install_dir / "tesseract"
        wrapper.write_text(f'#!/bin/sh\nexec "{sys.executable}" "{script}" "$@"\n')
        wrapper.chmod(wrapper.stat().st_mode | stat.S_IEXEC)
        return record

    return install


@pytest.fixture
def make_engine(
    tmp_path: Path, stub_tesseract: Callable[..., Path]
) -> Callable[..., tuple[TesseractEngine, Path]]:
    """Factory building an engine wired to a stub executable.

    Returns ``(engine, record_path)``.
    """

    def build(
        behavior: str = "success",
        text: str = "HELLO",
        name: str = "default",
        tessdata_dir: str | None = None,
    ) -> tuple[TesseractEngine, Path]:
        install_dir = tmp_path / name / "tesseract-ocr"
        record = stub_tesseract(install_dir, behavior, text)
        engine = TesseractEngine(
            tesseract_dir=str(install_dir),
            tessdata_dir=tessdata_dir,
            scratch_dir=str(tmp_path / name / "scratch"),
        )
        return engine, record

    return build


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent
