from __future__ import annotations

from collections.abc import Iterable
from typing import NamedTuple

from .run_tokens import RunTokenScanner
from .sinks import (
    UNKNOWN_RUN_ID,
    CommonBuffer,
    RunSinks,
    common_temp_path,
    run_log_path,
)


class RunOutput(NamedTuple):
    run_id: str
    path: str
    lines: int


class SplitResult(NamedTuple):
    input_name: str
    runs: list[RunOutput]
    fallback_path: str | None
    total_lines: int

    @property
    def outputs(self) -> list[RunOutput]:
        if self.fallback_path is not None:
            return [RunOutput(UNKNOWN_RUN_ID, self.fallback_path, self.total_lines)]
        return self.runs


class LogSplitter:
    """
    Single-pass splitter that routes each line of a combined PTP log to per-run output
    files, based on the run tokens (such as "ptp4l.3.config") found in the line.

    - a line with one or more run tokens is written to the file for each run named
      on the line
    - a line with no run token is global; it is written to every run file opened so
      far, and kept in a common buffer so that run files opened later start with it
    - if no run token is found in the whole input, every line goes to a single
      "run_unknown" file
    """
    def __init__(self, output_prefix: str, output_dir: str | None = None):
        self.output_prefix = output_prefix
        self.output_dir = output_dir

    @property
    def fallback_path(self) -> str:
        return run_log_path(self.output_prefix, UNKNOWN_RUN_ID, self.output_dir)

    def split(self, lines: Iterable[bytes], input_name: str = "stdin") -> SplitResult:
        scan = RunTokenScanner()

        with CommonBuffer(common_temp_path(self.output_prefix, self.output_dir)) as common, \
                RunSinks(common, self.output_prefix, self.output_dir) as run_sinks:

            for line in lines:
                # last line of input may not be newline-terminated
                if not line.endswith(b"\n"):
                    line += b"\n"

                run_ids = scan(line)
                if run_ids:
                    for run_id in run_ids:
                        run_sinks.ensure_sink(run_id).write(line)
                else:
                    common.write(line)
                    run_sinks.broadcast(line)

            common.flush()
            run_sinks.close_all()

            if scan.any_run_found:
                common.discard()
                fallback_path = None
            else:
                fallback_path = self.fallback_path
                common.promote(fallback_path)

            runs = [RunOutput(sink.run_id, sink.path, sink.lines_written) for sink in run_sinks]

        return SplitResult(
            input_name=input_name,
            runs=runs,
            fallback_path=fallback_path,
            total_lines=scan.lines_scanned,
        )
