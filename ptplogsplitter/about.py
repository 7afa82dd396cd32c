text = r"""
Reads a combined log of several PTP daemon runs (ptp4l, phc2sys, ts2phc, ...)
and splits it into one file per run. A run is identified by the number in its
config file name, as found anywhere in a log line:

    ptp4l[2512.113]: [ptp4l.0.config] port 1: LISTENING to MASTER on ...
    phc2sys[2513.420]: [phc2sys.1.config] CLOCK_REALTIME phc offset -12 ...

Output files are written as:

    <prefix>.run_<N>.log     one per run number N found in the input
    <prefix>.run_unknown.log only if no run tokens were found; holds all lines

Lines with no run token are included in every run file, including files for
runs that first appear later in the log. A line naming several runs is written
to each of those runs' files.

The prefix defaults to the input file name without a trailing .log or .txt,
or "split" when reading from stdin.

ptp-log-splitter version 0.1.0
MIT License
"""  # noqa
