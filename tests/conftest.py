from __future__ import annotations

import io
import subprocess
import sys
import tempfile
from pathlib import Path

import img2pdf
import pytest
from PIL import Image


ROOT = Path(__file__).resolve().parents[1]
SCRIPTS = ROOT / "scripts"
SCRIPTS_STR = str(SCRIPTS)
if SCRIPTS_STR not in sys.path:
    sys.path.insert(0, SCRIPTS_STR)

import check_dependencies  # noqa: E402
import optimize_pdf  # noqa: E402
import pdf_to_images  # noqa: E402
import scratch_dir  # noqa: E402


def png_bytes(size=(24, 32), color=(200, 30, 30)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


def write_png(path: Path, size=(24, 32), color=(200, 30, 30)) -> Path:
    path.write_bytes(png_bytes(size, color))
    return path


@pytest.fixture
def sample_pdf(tmp_path: Path) -> Path:
    """A real two-page PDF built without any external tools."""
    pdf = tmp_path / "report.pdf"
    pdf.write_bytes(img2pdf.convert([png_bytes(color=(0, 0, 0)), png_bytes(color=(0, 0, 255))]))
    return pdf


@pytest.fixture
def tools_on_path(monkeypatch):
    monkeypatch.setattr(check_dependencies.shutil, "which", lambda name: f"/usr/bin/{name}")


class FakePoppler:
    """Stands in for pdftoppm/pdfinfo behind pdf2image."""

    def __init__(self, pages: int = 2):
        self.pages = pages
        self.render_calls = []

    def pdfinfo(self, pdf_path, timeout=None, **kwargs):
        return {"Pages": self.pages}

    def convert(self, pdf_path, dpi=200, output_folder=None, fmt="ppm", paths_only=False, timeout=None, **kwargs):
        self.render_calls.append({"pdf_path": pdf_path, "dpi": dpi, "timeout": timeout})
        paths = []
        for page in range(1, self.pages + 1):
            # pdftoppm style names: <prefix>-<page>.png
            target = Path(output_folder) / f"3f2a9c-{page:02d}.{fmt}"
            write_png(target, color=(page * 20 % 256, 0, 0))
            paths.append(str(target))
        return paths


@pytest.fixture
def fake_poppler(monkeypatch) -> FakePoppler:
    fake = FakePoppler()
    monkeypatch.setattr(pdf_to_images, "pdfinfo_from_path", fake.pdfinfo)
    monkeypatch.setattr(pdf_to_images, "convert_from_path", fake.convert)
    monkeypatch.setattr(optimize_pdf, "pdfinfo_from_path", fake.pdfinfo)
    return fake


class FakeGhostscript:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls = []

    def __call__(self, cmd, **kwargs):
        self.calls.append(list(cmd))
        if self.fail:
            raise subprocess.CalledProcessError(1, cmd, output=b"", stderr=b"Error: /undefined in --run--")
        target = next(arg.split("=", 1)[1] for arg in cmd if arg.startswith("-sOutputFile="))
        Path(target).write_bytes(Path(cmd[-1]).read_bytes())
        return subprocess.CompletedProcess(cmd, 0, b"", b"")


@pytest.fixture
def fake_gs(monkeypatch) -> FakeGhostscript:
    fake = FakeGhostscript()
    monkeypatch.setattr(optimize_pdf.subprocess, "run", fake)
    return fake


@pytest.fixture
def scratch_dirs(monkeypatch) -> list:
    """Records every scratch directory handed out during the test."""
    created = []
    real_mkdtemp = tempfile.mkdtemp

    def recording_mkdtemp(*args, **kwargs):
        path = real_mkdtemp(*args, **kwargs)
        created.append(Path(path))
        return path

    monkeypatch.setattr(scratch_dir.tempfile, "mkdtemp", recording_mkdtemp)
    return created
