from __future__ import annotations

import os
import signal
import sys

import pytest

from scratch_dir import scratch_directory


def test_removed_after_normal_exit() -> None:
    with scratch_directory() as temp_dir:
        (temp_dir / "page-001.png").write_bytes(b"x")
        (temp_dir / "nested").mkdir()
        assert temp_dir.is_dir()
        assert temp_dir.name.startswith("pdf_trusted_")
    assert not temp_dir.exists()


def test_removed_after_error() -> None:
    with pytest.raises(RuntimeError):
        with scratch_directory() as temp_dir:
            (temp_dir / "optimized.pdf").write_bytes(b"%PDF")
            raise RuntimeError("stage failed")
    assert not temp_dir.exists()


def test_each_scope_gets_its_own_directory() -> None:
    with scratch_directory() as first, scratch_directory() as second:
        assert first != second


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals")
def test_removed_when_terminated() -> None:
    with pytest.raises(SystemExit) as excinfo:
        with scratch_directory() as temp_dir:
            os.kill(os.getpid(), signal.SIGTERM)
            # the handler runs between bytecodes; give it a chance
            for _ in range(1000):
                pass
    assert excinfo.value.code == 128 + signal.SIGTERM
    assert not temp_dir.exists()


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals")
def test_previous_handler_restored() -> None:
    def sentinel(signum, frame):
        pass

    previous = signal.signal(signal.SIGTERM, sentinel)
    try:
        with scratch_directory():
            assert signal.getsignal(signal.SIGTERM) is not sentinel
        assert signal.getsignal(signal.SIGTERM) is sentinel
    finally:
        signal.signal(signal.SIGTERM, previous)
