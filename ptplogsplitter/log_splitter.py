import argparse
import os
import sys

import littletable as lt

from . import about
from .errors import LogSplitterError
from .file_reading import InputReader
from .splitting import LogSplitter, SplitResult


DEFAULT_OUTPUT_PREFIX = "split"
STRIPPED_INPUT_EXTENSIONS = (".log", ".txt")


def make_argument_parser():
    parser = argparse.ArgumentParser(
        prog="ptp-log-splitter",
        description="Split combined PTP daemon logs into per-run files, based on tokens like"
                    " 'ptp4l.N.config' or 'phc2sys.N.config'.",
        epilog=about.text,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    parser.add_argument("-h", "--help", "-help", action="help", help="show this help message and exit")
    parser.add_argument(
        "--input", "-input", "-i",
        default=None,
        help="input log file ('-' or omitted to read stdin)"
    )
    parser.add_argument(
        "--outprefix", "-outprefix", "-o",
        default="",
        help="output file prefix (defaults to input file name without .log/.txt, or 'split' for stdin)"
    )
    parser.add_argument(
        "--outdir", "-d",
        default=None,
        help="directory to write output files to (defaults to the current directory)"
    )
    parser.add_argument("--summary", action="store_true", help="show a table of the files written")
    parser.add_argument("--csv", help="save the table of files written to CSV file")

    return parser


def derive_output_prefix(input_file: str | None) -> str:
    if not input_file or input_file == "-":
        return DEFAULT_OUTPUT_PREFIX

    base = os.path.basename(input_file)
    for ext in STRIPPED_INPUT_EXTENSIONS:
        if base.lower().endswith(ext):
            return base[:-len(ext)]
    return base


class LogSplitterApplication:
    def __init__(self, config: argparse.Namespace):
        self.config = config

        self.input_file = config.input
        self.output_prefix = config.outprefix or derive_output_prefix(self.input_file)
        self.output_dir = config.outdir

        self.show_summary = config.summary
        self.save_to_csv = config.csv

    def run(self) -> SplitResult:
        reader = InputReader.get_reader(self.input_file)

        splitter = LogSplitter(self.output_prefix, self.output_dir)
        result = splitter.split(reader, reader.display_name)

        if result.fallback_path is not None:
            print(
                f"No run tokens found in {result.input_name}. Wrote all lines to {result.fallback_path}",
                file=sys.stderr,
            )

        if self.show_summary or self.save_to_csv:
            self._report_outputs(result)

        return result

    def _report_outputs(self, result: SplitResult):
        fields = ["run", "file", "lines"]

        # build a littletable Table of the files written, one row per run
        outputs_table = lt.Table()
        outputs_table.insert_many(
            {"run": output.run_id, "file": output.path, "lines": output.lines}
            for output in result.outputs
        )

        if self.save_to_csv:
            outputs_table.csv_export(self.save_to_csv, fieldnames=fields)

        if self.show_summary:
            outputs_table.present(fields=fields)


def main(argv: list[str] | None = None):

    parser = make_argument_parser()
    args_ns = parser.parse_args(argv)

    try:
        app = LogSplitterApplication(args_ns)
        app.run()
    except LogSplitterError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(exc.exit_status)


if __name__ == '__main__':
    main()
