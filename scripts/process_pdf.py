#!/usr/bin/env python3
"""
Process PDF - Complete pipeline: PDF -> Images -> PDF, producing a trusted copy
Usage: python process_pdf.py [OPTIONS] <input.pdf> [output.pdf]

Rasterizing every page drops JavaScript, forms, links, embedded files and
anything else that cannot survive being turned into pixels.
"""

import argparse
import json
import os
import sys
from pathlib import Path

import report
from check_dependencies import check_dependencies, find_ghostscript
from conversion_types import (
    DEFAULT_DPI,
    MAX_DPI,
    MIN_DPI,
    TRUSTED_SUFFIX,
    ConversionError,
    ConversionRequest,
    ConversionResult,
    OptimizationFailure,
    UsageArgumentParser,
    UsageError,
)
from images_to_pdf import assemble_pdf
from optimize_pdf import optimize_pdf, replace_file
from pdf_to_images import inspect_pdf, rasterize_pdf
from scratch_dir import scratch_directory

PROG = "pdf-trusted-converter"

DESCRIPTION = """\
Convert PDF to trusted format by converting to images and back to PDF.
This removes JavaScript, forms, links, and other potentially dangerous elements."""

EPILOG = f"""\
examples:
  {PROG} document.pdf trusted_document.pdf
  {PROG} --batch document.pdf
  {PROG} -d 600 high_quality.pdf output.pdf

requirements:
  poppler      (brew install poppler / apt-get install poppler-utils)
  ghostscript  (brew install ghostscript / apt-get install ghostscript)"""


def build_parser():
    parser = UsageArgumentParser(
        prog=PROG,
        usage=f"{PROG} [OPTIONS] <input.pdf> [output.pdf]",
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument("paths", nargs="*", metavar="PDF", help="input PDF, then optional output PDF")
    parser.add_argument(
        "-d", "--dpi", type=int, default=DEFAULT_DPI,
        help=f"Set DPI for conversion, {MIN_DPI}-{MAX_DPI} (default: {DEFAULT_DPI})",
    )
    parser.add_argument(
        "-b", "--batch", action="store_true",
        help="Batch mode: write <input>.trusted.pdf, ignoring any output argument",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Echo every external command before running it")
    parser.add_argument(
        "-t", "--timeout", type=float, default=None, metavar="SECONDS",
        help="Give up on any external tool that runs longer than this",
    )
    parser.add_argument("-h", "--help", action="store_true", help="Show this help message")
    return parser


def trusted_output_path(input_path):
    input_path = Path(input_path)
    return input_path.with_name(input_path.stem + TRUSTED_SUFFIX)


def build_request(args):
    """Validate parsed arguments and turn them into a ConversionRequest."""
    if not MIN_DPI <= args.dpi <= MAX_DPI:
        raise UsageError(f"DPI must be a number between {MIN_DPI} and {MAX_DPI}")
    if args.timeout is not None and args.timeout <= 0:
        raise UsageError("Timeout must be a positive number of seconds")
    if not args.paths:
        raise UsageError("Input PDF file is required")
    if len(args.paths) > 2:
        raise UsageError("Too many arguments")

    input_path = Path(args.paths[0])
    if args.batch or len(args.paths) < 2:
        output_path = trusted_output_path(input_path)
    else:
        output_path = Path(args.paths[1])

    return ConversionRequest(
        input_path=input_path,
        output_path=output_path,
        dpi=args.dpi,
        verbose=args.verbose,
        batch_mode=args.batch,
        timeout=args.timeout,
    )


def confirm_overwrite(path, ask=None):
    ask = ask or input
    try:
        reply = ask(f"Output file already exists: {path}. Overwrite? (y/N): ")
    except EOFError:
        print()
        return False
    return reply.strip().lower() in ("y", "yes")


def file_size(path):
    try:
        return os.path.getsize(path)
    except OSError:
        return None


def convert_pdf_to_trusted(request, expected_pages=None):
    """Rasterize, reassemble and optimize ``request.input_path`` into ``request.output_path``.

    The input is expected to have passed ``inspect_pdf`` already. Raises
    StageFailure when rasterizing or reassembling fails; an optimizer failure
    only produces a warning and the reassembled PDF is kept.
    """
    report.info("Converting PDF to trusted format...")
    report.info(f"Input: {request.input_path}")
    report.info(f"Output: {request.output_path}")
    report.info(f"DPI: {request.dpi}")

    original_size = file_size(request.input_path)
    optimized = False

    with scratch_directory() as temp_dir:
        # Step 1: Convert PDF pages to PNG images
        report.info("Step 1: Converting PDF pages to images...")
        pages = rasterize_pdf(
            request.input_path,
            temp_dir / "pages",
            dpi=request.dpi,
            timeout=request.timeout,
            verbose=request.verbose,
        )
        report.info(f"Generated {len(pages)} page images")
        if expected_pages and expected_pages != len(pages):
            report.warning(f"PDF reports {expected_pages} pages but {len(pages)} were rendered")

        # Step 2: Convert images back to PDF
        report.info("Step 2: Converting images back to PDF...")
        assemble_pdf(pages, request.output_path, dpi=request.dpi, verbose=request.verbose)

        # Step 3: Optimize the output PDF
        report.info("Step 3: Optimizing output PDF...")
        try:
            optimize_pdf(
                request.output_path,
                temp_dir / "optimized.pdf",
                gs_binary=find_ghostscript() or "gs",
                expected_pages=len(pages),
                timeout=request.timeout,
                verbose=request.verbose,
            )
            replace_file(temp_dir / "optimized.pdf", request.output_path)
            optimized = True
            report.info("PDF optimization completed")
        except OptimizationFailure as e:
            report.warning(f"PDF optimization failed, keeping unoptimized version ({e})")
            if request.verbose and e.command:
                report.warning(f"Failed command: {report.format_command(e.command)}")

    return ConversionResult(
        original_size=original_size,
        output_size=file_size(request.output_path),
        page_count=len(pages),
        dpi_used=request.dpi,
        optimized=optimized,
    )


def print_summary(request, result):
    report.success("PDF conversion completed successfully!")
    report.info("Summary:")
    report.info(f"  - Original file: {request.input_path} ({report.format_size(result.original_size)})")
    report.info(f"  - Trusted file: {request.output_path} ({report.format_size(result.output_size)})")
    report.info(f"  - Pages processed: {result.page_count}")
    report.info(f"  - DPI used: {result.dpi_used}")
    report.info(f"  - Optimized: {'yes' if result.optimized else 'no'}")
    report.warning("Note: Text is now embedded as images and cannot be selected or searched.")

    # Output JSON for easy parsing
    payload = {"input_pdf": str(request.input_path), "output_pdf": str(request.output_path)}
    payload.update(result.as_dict())
    print(f"JSON_RESULT:{json.dumps(payload)}", flush=True)


def main(argv=None):
    parser = build_parser()
    try:
        args = parser.parse_intermixed_args(argv)
        if args.help:
            parser.print_help()
            return 0
        request = build_request(args)
    except UsageError as e:
        report.error(str(e))
        parser.print_help(sys.stderr)
        return e.exit_code

    if request.output_path.exists() and not confirm_overwrite(request.output_path):
        report.info("Operation cancelled by user")
        return 0

    try:
        check_dependencies()
        expected_pages = inspect_pdf(request.input_path, timeout=request.timeout)
        result = convert_pdf_to_trusted(request, expected_pages=expected_pages)
    except ConversionError as e:
        for line in str(e).splitlines():
            report.error(line)
        if request.verbose and e.command:
            report.error(f"Failed command: {report.format_command(e.command)}")
        return e.exit_code
    except KeyboardInterrupt:
        report.error("Interrupted")
        return 130

    print_summary(request, result)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
