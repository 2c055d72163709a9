"""
Check Dependencies - Verify the external converters are on PATH
Usage: python check_dependencies.py
"""

import shutil
import sys

from conversion_types import DependencyError

GHOSTSCRIPT_NAMES = ("gs", "gswin64c", "gswin32c")
POPPLER_TOOLS = ("pdftoppm", "pdfinfo")

# Package name as reported to the user -> per-platform install names
INSTALL_NAMES = {
    "poppler": {"darwin": "poppler", "linux": "poppler-utils"},
    "ghostscript": {"darwin": "ghostscript", "linux": "ghostscript"},
}


def find_ghostscript():
    for name in GHOSTSCRIPT_NAMES:
        if shutil.which(name):
            return name
    return None


def missing_dependencies():
    missing = []
    if not all(shutil.which(tool) for tool in POPPLER_TOOLS):
        missing.append("poppler")
    if find_ghostscript() is None:
        missing.append("ghostscript")
    return missing


def install_hint(missing, platform=None):
    platform = platform or sys.platform
    if platform == "darwin":
        names = [INSTALL_NAMES[name]["darwin"] for name in missing]
        return f"Install with: brew install {' '.join(names)}"
    if platform.startswith("linux"):
        names = [INSTALL_NAMES[name]["linux"] for name in missing]
        return f"Install with: sudo apt-get install {' '.join(names)}"
    return f"Install {' and '.join(missing)} and make sure they are on PATH"


def check_dependencies():
    """Raise DependencyError naming every missing tool package."""
    missing = missing_dependencies()
    if missing:
        raise DependencyError(missing, install_hint(missing))


def main():
    missing = missing_dependencies()
    if missing:
        print(f"Missing dependencies: {' '.join(missing)}", file=sys.stderr)
        print(install_hint(missing), file=sys.stderr)
        return 1
    print(f"All dependencies found (ghostscript: {find_ghostscript()})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
