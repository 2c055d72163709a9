#!/usr/bin/env python3
"""
PDF to Images - Validate a PDF and rasterize its pages to PNG images
Usage: python pdf_to_images.py <pdf_path> <output_dir> [dpi]
"""

import json
import os
import sys
from pathlib import Path

from pdf2image import convert_from_path, pdfinfo_from_path
from pdf2image.exceptions import PDFPageCountError, PDFPopplerTimeoutError, PDFSyntaxError

import report
from conversion_types import DEFAULT_DPI, MAX_DPI, MIN_DPI, InputError, Stage, StageFailure

PDF_MAGIC = b"%PDF-"
# PDF readers accept the header anywhere in the first 1024 bytes
HEADER_WINDOW = 1024
PAGE_PREFIX = "page-"


def inspect_pdf(pdf_path, timeout=None):
    """Check that ``pdf_path`` is a readable PDF and return its page count.

    The content is inspected, not the file name: the header must carry the
    PDF magic and poppler's ``pdfinfo`` must be able to open the document.
    """
    pdf_path = Path(pdf_path)
    if not pdf_path.is_file():
        raise InputError(f"Input file does not exist: {pdf_path}")

    try:
        with pdf_path.open("rb") as f:
            head = f.read(HEADER_WINDOW)
    except OSError as e:
        raise InputError(f"Input file cannot be read: {pdf_path} ({e.strerror or e})") from e
    if PDF_MAGIC not in head:
        raise InputError(f"Input file is not a PDF: {pdf_path}")

    try:
        info = pdfinfo_from_path(str(pdf_path), timeout=timeout)
    except PDFPopplerTimeoutError as e:
        raise InputError(f"Timed out inspecting PDF: {pdf_path}") from e
    except (PDFPageCountError, PDFSyntaxError) as e:
        raise InputError(f"Input file is not a readable PDF: {pdf_path} ({e})") from e

    return int(info.get("Pages", 0))


def page_name(index, total):
    """Zero-padded so that sorting names sorts pages."""
    width = max(3, len(str(total)))
    return f"{PAGE_PREFIX}{index:0{width}d}.png"


def rasterize_pdf(pdf_path, output_dir, dpi=DEFAULT_DPI, timeout=None, verbose=False):
    """Render every page of ``pdf_path`` into ``output_dir`` and return the image paths in page order."""
    output_dir = Path(output_dir)

    # pdf2image picks its own file prefix; this is the equivalent pdftoppm call
    cmd = ["pdftoppm", "-r", str(dpi), "-png", str(pdf_path), str(output_dir / PAGE_PREFIX)]
    if verbose:
        report.command(cmd, equivalent=True)

    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        rendered = convert_from_path(
            str(pdf_path),
            dpi=dpi,
            output_folder=str(output_dir),
            fmt="png",
            paths_only=True,
            timeout=timeout,
        )
    except Exception as e:
        raise StageFailure(Stage.RASTERIZING, f"Failed to convert PDF to images: {e}", cmd) from e

    if not rendered:
        raise StageFailure(Stage.RASTERIZING, "No images were generated from PDF", cmd)

    # pdf2image returns the files in page order
    image_paths = []
    try:
        for i, source in enumerate(rendered, start=1):
            target = output_dir / page_name(i, len(rendered))
            os.replace(source, target)
            image_paths.append(target)
    except OSError as e:
        raise StageFailure(Stage.RASTERIZING, f"Could not name page images: {e}", cmd) from e

    return image_paths


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) < 2:
        print("Usage: python pdf_to_images.py <pdf_path> <output_dir> [dpi]", file=sys.stderr)
        return 1

    pdf_path = argv[0]
    output_dir = argv[1]
    try:
        dpi = int(argv[2]) if len(argv) > 2 else DEFAULT_DPI
    except ValueError:
        print(f"Error: DPI must be a number: {argv[2]}", file=sys.stderr)
        return 1
    if not MIN_DPI <= dpi <= MAX_DPI:
        print(f"Error: DPI must be between {MIN_DPI} and {MAX_DPI}: {dpi}", file=sys.stderr)
        return 1

    try:
        page_count = inspect_pdf(pdf_path)
        print(f"Converting PDF to images with DPI={dpi}...")
        print(f"Total pages: {page_count}")
        image_paths = rasterize_pdf(pdf_path, output_dir, dpi=dpi)
    except (InputError, StageFailure) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for path in image_paths:
        print(f"  Saved: {path.name}")

    print(f"\nConversion complete! {len(image_paths)} pages saved to {output_dir}")

    # Output JSON for easy parsing
    result = {
        "output_dir": str(output_dir),
        "page_count": len(image_paths),
        "images": [str(path) for path in image_paths],
    }
    print(f"\nJSON_RESULT:{json.dumps(result)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
