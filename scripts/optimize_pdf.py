"""
Optimize PDF - Rewrite a PDF through Ghostscript and swap it into place
"""

import os
import shutil
import subprocess
from pathlib import Path

from pdf2image import pdfinfo_from_path
from pdf2image.exceptions import PDFPageCountError, PDFPopplerTimeoutError, PDFSyntaxError

import report
from conversion_types import OptimizationFailure

COMPATIBILITY_LEVEL = "1.4"
PDF_SETTINGS = "default"


def ghostscript_command(source, target, gs_binary="gs"):
    # absolute paths keep names starting with "-" from being read as switches
    return [
        gs_binary,
        "-dNOPAUSE",
        "-dBATCH",
        "-dSAFER",
        "-dQUIET",
        "-sDEVICE=pdfwrite",
        f"-dCompatibilityLevel={COMPATIBILITY_LEVEL}",
        f"-dPDFSETTINGS=/{PDF_SETTINGS}",
        f"-sOutputFile={Path(target).absolute()}",
        str(Path(source).absolute()),
    ]


def _page_count(pdf_path, timeout=None):
    try:
        return int(pdfinfo_from_path(str(pdf_path), timeout=timeout).get("Pages", 0))
    except (PDFPageCountError, PDFSyntaxError, PDFPopplerTimeoutError):
        return None


def optimize_pdf(source, target, gs_binary="gs", expected_pages=None, timeout=None, verbose=False):
    """Rewrite ``source`` into ``target`` with Ghostscript's pdfwrite device.

    Raises OptimizationFailure when Ghostscript fails, times out, writes
    nothing, or produces a document with a different page count.
    """
    target = Path(target)
    cmd = ghostscript_command(source, target, gs_binary)
    if verbose:
        report.command(cmd)

    try:
        subprocess.run(cmd, check=True, capture_output=True, timeout=timeout)
    except subprocess.CalledProcessError as e:
        detail = (e.stderr or b"").decode("utf-8", "replace").strip()
        message = f"Ghostscript exited with status {e.returncode}"
        if detail:
            message = f"{message}: {detail.splitlines()[-1]}"
        raise OptimizationFailure(message, cmd) from e
    except subprocess.TimeoutExpired as e:
        raise OptimizationFailure(f"Ghostscript timed out after {timeout} seconds", cmd) from e
    except OSError as e:
        raise OptimizationFailure(f"Could not run Ghostscript: {e}", cmd) from e

    if not target.is_file() or target.stat().st_size == 0:
        raise OptimizationFailure("Ghostscript produced no output", cmd)

    if expected_pages is not None:
        pages = _page_count(target, timeout=timeout)
        if pages is not None and pages != expected_pages:
            raise OptimizationFailure(
                f"Optimized PDF has {pages} pages, expected {expected_pages}", cmd
            )

    return target


def replace_file(source, destination):
    """Move ``source`` over ``destination`` so readers never see a half-written file.

    The copy lands next to ``destination`` first because ``os.replace`` is only
    atomic within one filesystem and the scratch directory may live elsewhere.
    """
    destination = Path(destination)
    staging = destination.with_name(f".{destination.name}.tmp")
    try:
        shutil.copyfile(source, staging)
        os.replace(staging, destination)
    except OSError as e:
        if staging.exists():
            staging.unlink()
        raise OptimizationFailure(f"Could not replace {destination}: {e}") from e
