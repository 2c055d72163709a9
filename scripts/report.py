"""
Report - Leveled console messages for the converter
Usage: from report import info, success, warning, error
"""

import shlex
import sys

RED = "\033[0;31m"
GREEN = "\033[0;32m"
YELLOW = "\033[1;33m"
BLUE = "\033[0;34m"
RESET = "\033[0m"


def _marker(label, color, stream):
    isatty = getattr(stream, "isatty", None)
    if isatty is not None and isatty():
        return f"{color}[{label}]{RESET}"
    return f"[{label}]"


def _emit(label, color, message, stream):
    print(f"{_marker(label, color, stream)} {message}", file=stream, flush=True)


def info(message):
    _emit("INFO", BLUE, message, sys.stdout)


def success(message):
    _emit("SUCCESS", GREEN, message, sys.stdout)


def warning(message):
    _emit("WARNING", YELLOW, message, sys.stderr)


def error(message):
    _emit("ERROR", RED, message, sys.stderr)


def format_command(argv):
    return shlex.join(str(arg) for arg in argv)


def command(argv, equivalent=False):
    """Echo an external command line before it runs (verbose mode).

    ``equivalent`` marks work done by a Python wrapper, where ``argv`` is the
    command line that would do the same thing rather than the exact one.
    """
    label = "Running (equivalent)" if equivalent else "Running"
    info(f"{label}: {format_command(argv)}")


def format_size(size_bytes):
    if size_bytes is None:
        return "unknown"
    size_mb = size_bytes / (1024 * 1024)
    return f"{size_bytes} bytes, {size_mb:.2f} MB"
