from __future__ import annotations

import re


# matches config file names like "ptp4l.3.config" or "phc2sys.12.config", capturing the run number
RUN_TOKEN_PATTERN = rb"\b[A-Za-z0-9_-]+\.(\d+)\.config\b"

_find_all_run_tokens = re.compile(RUN_TOKEN_PATTERN).findall


def find_run_ids(line: bytes) -> set[str]:
    """
    Return the set of distinct run ids found in a log line. Run ids are kept as
    the literal digit strings from the line, so "01" and "1" are different runs.
    """
    return {run_id.decode("ascii") for run_id in _find_all_run_tokens(line)}


class RunTokenScanner:
    """
    Callable class wrapping find_run_ids, keeping counts of all lines scanned and
    of those lines that carried at least one run token.
    """
    def __init__(self):
        self.lines_scanned = 0
        self.lines_tagged = 0

    def __call__(self, line: bytes) -> set[str]:
        run_ids = find_run_ids(line)
        self.lines_scanned += 1
        if run_ids:
            self.lines_tagged += 1
        return run_ids

    @property
    def any_run_found(self) -> bool:
        return self.lines_tagged > 0


if __name__ == '__main__':
    for sample in [
        b"ptp4l[1234.567]: [ptp4l.0.config] master offset -3 s2 freq +12 path delay 410",
        b"phc2sys[1234.568]: [phc2sys.1.config] CLOCK_REALTIME phc offset 5 s2 freq -7",
        b"ts2phc.2.config and ptp4l.2.config and ptp4l.03.config",
        b"ptp4l.abc.config: not a run",
        b"daemon started",
    ]:
        print(sample, sorted(find_run_ids(sample)))
