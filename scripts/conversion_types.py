"""
Conversion Types - Request/result records and the error hierarchy shared by the stage scripts
"""

import argparse
import enum
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

MIN_DPI = 72
MAX_DPI = 600
DEFAULT_DPI = 300
TRUSTED_SUFFIX = ".trusted.pdf"


class Stage(enum.Enum):
    """Pipeline stages whose failure aborts the conversion."""

    RASTERIZING = "rasterizing"
    REASSEMBLING = "reassembling"


@dataclass(frozen=True)
class ConversionRequest:
    input_path: Path
    output_path: Path
    dpi: int = DEFAULT_DPI
    verbose: bool = False
    batch_mode: bool = False
    timeout: Optional[float] = None


@dataclass(frozen=True)
class ConversionResult:
    original_size: Optional[int]
    output_size: Optional[int]
    page_count: int
    dpi_used: int
    optimized: bool

    def as_dict(self):
        return {
            "original_size_bytes": self.original_size,
            "output_size_bytes": self.output_size,
            "page_count": self.page_count,
            "dpi": self.dpi_used,
            "optimized": self.optimized,
        }


class ConversionError(Exception):
    """Base class for failures that end the run with a non-zero exit code."""

    exit_code = 1

    def __init__(self, message, command=None):
        super().__init__(message)
        self.command = list(command) if command else None


class UsageError(ConversionError):
    pass


class DependencyError(ConversionError):
    def __init__(self, missing, hint=""):
        message = f"Missing dependencies: {' '.join(missing)}"
        if hint:
            message = f"{message}\n{hint}"
        super().__init__(message)
        self.missing = list(missing)


class InputError(ConversionError):
    pass


class StageFailure(ConversionError):
    def __init__(self, stage, message, command=None):
        super().__init__(message, command)
        self.stage = stage


class OptimizationFailure(ConversionError):
    """Raised by the optimizer; the pipeline keeps the unoptimized PDF."""


class UsageArgumentParser(argparse.ArgumentParser):
    # argparse exits with status 2 on bad input; bad usage is status 1 here
    def error(self, message):
        raise UsageError(message)
