from __future__ import annotations

import contextlib
import os
import shutil
from collections.abc import Iterator
from typing import BinaryIO

from .errors import (
    FallbackPromotionError,
    OutputCreateError,
    OutputFinalizeError,
    OutputWriteError,
)


UNKNOWN_RUN_ID = "unknown"


def run_log_path(output_prefix: str, run_id: str, output_dir: str | None = None) -> str:
    return os.path.join(output_dir or "", f"{output_prefix}.run_{run_id}.log")


def common_temp_path(output_prefix: str, output_dir: str | None = None) -> str:
    return os.path.join(output_dir or "", f"{output_prefix}.common.tmp")


class CommonBuffer:
    """
    Scratch file holding every line seen so far that carried no run token. Used to
    seed each run file when it is first opened, and promoted to the run_unknown
    output if the whole input turns out to have no run tokens at all.

    As a context manager, the scratch file is always closed and removed on exit
    (unless it has already been promoted).
    """
    def __init__(self, path: str):
        self.path = path
        self.lines_written = 0
        self._file: BinaryIO | None = None

    def open(self) -> CommonBuffer:
        try:
            self._file = open(self.path, "wb+")
        except OSError as exc:
            raise OutputCreateError("cannot create common temp file", exc) from exc
        return self

    @property
    def closed(self) -> bool:
        return self._file is None or self._file.closed

    def write(self, line: bytes) -> None:
        try:
            self._file.write(line)
        except OSError as exc:
            raise OutputWriteError("writing common temp file", exc) from exc
        self.lines_written += 1

    def flush(self) -> None:
        try:
            self._file.flush()
        except OSError as exc:
            raise OutputFinalizeError("flushing common temp file", exc) from exc

    def copy_into(self, target: BinaryIO) -> None:
        """
        Copy everything buffered so far into target. Raises OSError from either
        file; the write position of the buffer is left at the end.
        """
        self.flush()
        self._file.seek(0)
        try:
            shutil.copyfileobj(self._file, target)
        finally:
            self._file.seek(0, os.SEEK_END)

    def close(self) -> None:
        if self.closed:
            return
        try:
            self._file.close()
        except OSError as exc:
            raise OutputFinalizeError("closing common temp file", exc) from exc

    def discard(self) -> None:
        self.close()
        with contextlib.suppress(FileNotFoundError):
            os.remove(self.path)

    def promote(self, dest_path: str) -> None:
        """
        Turn the scratch file into the final output at dest_path. Tries a rename
        first, and falls back to copying and deleting if the rename fails.
        """
        self.close()
        try:
            os.replace(self.path, dest_path)
        except OSError:
            self._copy_then_delete(dest_path)

    def _copy_then_delete(self, dest_path: str) -> None:
        try:
            shutil.copyfile(self.path, dest_path)
            os.remove(self.path)
        except OSError as exc:
            raise FallbackPromotionError(f"copying common temp file to {dest_path}", exc) from exc

    def __enter__(self) -> CommonBuffer:
        if self._file is None:
            self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.close()
        elif not self.closed:
            # already failing, let the original error propagate
            with contextlib.suppress(OSError):
                self._file.close()
        with contextlib.suppress(FileNotFoundError):
            os.remove(self.path)


class RunSink:
    """
    Output file for a single run. Lines are appended in the order they are written;
    close() flushes and closes the file, and is called on exit when used as a
    context manager.
    """
    def __init__(self, run_id: str, path: str):
        self.run_id = run_id
        self.path = path
        self.lines_written = 0
        self._file: BinaryIO | None = None

    def open(self) -> RunSink:
        try:
            self._file = open(self.path, "wb")
        except OSError as exc:
            raise OutputCreateError(f"opening run file for {self.run_id}", exc) from exc
        return self

    @property
    def closed(self) -> bool:
        return self._file is None or self._file.closed

    def seed(self, common: CommonBuffer) -> None:
        try:
            common.copy_into(self._file)
        except OSError as exc:
            raise OutputWriteError(f"seeding run file for {self.run_id} from common temp file", exc) from exc
        self.lines_written += common.lines_written

    def write(self, line: bytes) -> None:
        try:
            self._file.write(line)
        except OSError as exc:
            raise OutputWriteError(f"writing run file for {self.run_id}", exc) from exc
        self.lines_written += 1

    def close(self) -> None:
        if self.closed:
            return
        try:
            self._file.flush()
        except OSError as exc:
            raise OutputFinalizeError(f"flushing run file for {self.run_id}", exc) from exc
        try:
            self._file.close()
        except OSError as exc:
            raise OutputFinalizeError(f"closing run file for {self.run_id}", exc) from exc

    def __enter__(self) -> RunSink:
        if self._file is None:
            self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.close()
        elif not self.closed:
            with contextlib.suppress(OSError):
                self._file.close()


class RunSinks:
    """
    Mapping of run id to its RunSink. Sinks are created lazily by ensure_sink(),
    and each new sink is seeded with the current content of the common buffer
    before any run-specific line is written to it.
    """
    def __init__(self, common: CommonBuffer, output_prefix: str, output_dir: str | None = None):
        self.common = common
        self.output_prefix = output_prefix
        self.output_dir = output_dir
        self._sinks: dict[str, RunSink] = {}
        self._exit_stack = contextlib.ExitStack()

    def ensure_sink(self, run_id: str) -> RunSink:
        sink = self._sinks.get(run_id)
        if sink is None:
            path = run_log_path(self.output_prefix, run_id, self.output_dir)
            sink = self._exit_stack.enter_context(RunSink(run_id, path))
            sink.seed(self.common)
            self._sinks[run_id] = sink
        return sink

    def broadcast(self, line: bytes) -> None:
        for sink in self._sinks.values():
            sink.write(line)

    def close_all(self) -> None:
        for sink in self._sinks.values():
            sink.close()

    def __contains__(self, run_id: str) -> bool:
        return run_id in self._sinks

    def __iter__(self) -> Iterator[RunSink]:
        return iter(self._sinks.values())

    def __len__(self) -> int:
        return len(self._sinks)

    def __enter__(self) -> RunSinks:
        self._exit_stack.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        return self._exit_stack.__exit__(exc_type, exc_val, exc_tb)
