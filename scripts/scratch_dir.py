"""
Scratch Dir - Temporary working directory that is removed on every exit path
"""

import shutil
import signal
import tempfile
from contextlib import contextmanager
from pathlib import Path

SCRATCH_PREFIX = "pdf_trusted_"


def _exit_on_signal(signum, frame):
    raise SystemExit(128 + signum)


def _termination_signals():
    return [getattr(signal, name) for name in ("SIGTERM", "SIGHUP") if hasattr(signal, name)]


@contextmanager
def scratch_directory(prefix=SCRATCH_PREFIX):
    """Yield a fresh temporary directory and remove it however the block exits.

    SIGTERM and SIGHUP are turned into SystemExit while the block runs, so the
    ``finally`` clause also runs when the process is asked to terminate.
    KeyboardInterrupt already unwinds through it.
    """
    temp_dir = Path(tempfile.mkdtemp(prefix=prefix))
    previous = {}
    try:
        for signum in _termination_signals():
            try:
                previous[signum] = signal.signal(signum, _exit_on_signal)
            except ValueError:
                # not the main thread
                break
        yield temp_dir
    finally:
        for signum, handler in previous.items():
            signal.signal(signum, handler if handler is not None else signal.SIG_DFL)
        shutil.rmtree(temp_dir, ignore_errors=True)
