#!/usr/bin/env python3
"""
Images to PDF - Merge page images into a single PDF file
Usage: python images_to_pdf.py <image_dir> <output_path> [dpi] [--pattern GLOB]
"""

import json
import os
import sys
from pathlib import Path

import img2pdf

import report
from conversion_types import DEFAULT_DPI, Stage, StageFailure, UsageArgumentParser, UsageError


def assemble_pdf(image_paths, output_path, dpi=DEFAULT_DPI, verbose=False):
    """Write ``image_paths``, in the given order, as the pages of ``output_path``.

    Every image is placed at ``dpi`` so a page keeps the physical size of the
    page it was rendered from. Returns the number of pages written.
    """
    image_paths = [str(path) for path in image_paths]
    output_path = Path(output_path)

    # img2pdf runs in-process; this is its command line equivalent
    cmd = ["img2pdf", "--imgsize", f"{dpi}dpi", "-o", str(output_path), *image_paths]
    if verbose:
        report.command(cmd, equivalent=True)

    if not image_paths:
        raise StageFailure(Stage.REASSEMBLING, "No images to convert back to PDF", cmd)

    layout = img2pdf.get_fixed_dpi_layout_fun((dpi, dpi))
    try:
        # Create output directory if needed
        output_path.parent.mkdir(parents=True, exist_ok=True)
        # build the document before touching the output so a failure leaves no partial file
        data = img2pdf.convert(image_paths, layout_fun=layout)
        with open(output_path, "wb") as f:
            f.write(data)
    except Exception as e:
        raise StageFailure(Stage.REASSEMBLING, f"Failed to convert images back to PDF: {e}", cmd) from e

    return len(image_paths)


def find_images(image_dir, pattern="*.png"):
    image_dir = Path(image_dir)
    image_files = sorted(image_dir.glob(pattern))

    if not image_files:
        # Try without pattern, just get all images
        image_files = sorted(
            path for ext in ("*.png", "*.jpg", "*.jpeg") for path in image_dir.glob(ext)
        )

    return [path for path in image_files if path.is_file()]


def main(argv=None):
    parser = UsageArgumentParser(description="Merge images into a PDF file")
    parser.add_argument("image_dir", help="Directory containing the page images")
    parser.add_argument("output_path", help="PDF file to write")
    parser.add_argument("dpi", nargs="?", type=int, default=DEFAULT_DPI, help="Image resolution")
    parser.add_argument("--pattern", default="*.png", help="Glob selecting the images (default: *.png)")
    try:
        args = parser.parse_args(argv)
    except UsageError as e:
        parser.print_usage(sys.stderr)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not os.path.isdir(args.image_dir):
        print(f"Error: Directory not found: {args.image_dir}", file=sys.stderr)
        return 1

    image_files = find_images(args.image_dir, args.pattern)
    if not image_files:
        print(f"Error: No images found in {args.image_dir}", file=sys.stderr)
        return 1

    print(f"Found {len(image_files)} images")
    for path in image_files:
        print(f"  - {path.name}")

    print(f"\nMerging to PDF: {args.output_path}")
    try:
        page_count = assemble_pdf(image_files, args.output_path, dpi=args.dpi)
    except StageFailure as e:
        print(f"Error creating PDF: {e}", file=sys.stderr)
        return 1

    # Get file size
    size_bytes = os.path.getsize(args.output_path)
    size_mb = size_bytes / (1024 * 1024)

    print(f"\nPDF created successfully!")
    print(f"  Output: {args.output_path}")
    print(f"  Size: {size_mb:.2f} MB")
    print(f"  Pages: {page_count}")

    # Output JSON for easy parsing
    result = {
        "output_path": args.output_path,
        "page_count": page_count,
        "size_bytes": size_bytes,
    }
    print(f"JSON_RESULT:{json.dumps(result)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
