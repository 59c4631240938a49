#!/usr/bin/env python3
"""
Parquet Preview Tool

Shows the schema and the first rows of a Parquet file, either in an
interactive terminal viewer or as a plain-text report on stdout.

Usage:
    parquet-preview data/sample.parquet
    parquet-preview data/sample.parquet --rows 50 --headless
    parquet-preview data/sample.parquet --schema --headless
"""

import argparse
import os
import sys
from datetime import datetime

from config import DEFAULT_LOGS_FOLDER, DEFAULT_PAGE_SIZE, DEFAULT_ROW_COUNT
from errors import PreviewError
from logger import LoggerManager, log_error, log_info, setup_logging
from processor import PreviewProcessor
from report import TextReport, render_file_summary, render_schema
from viewer import TableView


# =============================================================================
# ARGUMENT PARSING
# =============================================================================

def non_negative_int(text):
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {text!r}")
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {value}")
    return value


def positive_int(text):
    value = non_negative_int(text)
    if value == 0:
        raise argparse.ArgumentTypeError("must be >= 1")
    return value


def build_parser():
    parser = argparse.ArgumentParser(
        prog='parquet-preview',
        description="Inspect the schema and first rows of a Parquet file."
    )
    parser.add_argument('path', metavar='FILE', help="Path to the Parquet file")
    parser.add_argument('-r', '--rows', type=non_negative_int, default=DEFAULT_ROW_COUNT,
                        help=f"Number of rows to preview from the top of the file (default: {DEFAULT_ROW_COUNT})")
    parser.add_argument('--headless', action='store_true',
                        help="Print the preview to stdout instead of starting the viewer")
    parser.add_argument('--schema', action='store_true',
                        help="Also print the column list with types and nullability")
    parser.add_argument('--page-size', type=positive_int, default=DEFAULT_PAGE_SIZE,
                        help=f"Rows per page in the viewer (default: {DEFAULT_PAGE_SIZE})")
    parser.add_argument('--progress', action='store_true',
                        help="Show a progress bar while sampling rows")
    parser.add_argument('--log-file', nargs='?', const='', default=None,
                        help=f"Append a DEBUG log to this file (no value: a timestamped file in '{DEFAULT_LOGS_FOLDER}')")
    parser.add_argument('-v', '--verbose', action='store_true',
                        help="Echo progress messages on stderr")
    return parser


def generate_log_filename(file_path):
    """Generate timestamped log filename based on the previewed file."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    stem = os.path.splitext(os.path.basename(file_path))[0]
    return os.path.join(DEFAULT_LOGS_FOLDER, f"preview_log_{stem}_{timestamp}.txt")


# =============================================================================
# MAIN APPLICATION
# =============================================================================

class PreviewApplication:
    """Main application class for the Parquet preview tool."""

    def __init__(self, args, stdout=None, input_func=input):
        self.args = args
        self.stdout = stdout if stdout is not None else sys.stdout
        self.input_func = input_func
        self.logger = None
        self.processor = None

    def run(self):
        """
        Main application entry point.

        Returns:
            int: Process exit status
        """
        try:
            self._setup_logging()
            preview = self._load_preview()
            if self.args.headless:
                self._print_report(preview)
            else:
                self._launch_viewer(preview)
            return 0

        except KeyboardInterrupt:
            print("\n\nPreview interrupted by user. Exiting...", file=sys.stderr)
            return 0
        except (PreviewError, OSError, ValueError) as e:
            self._handle_error(e)
            return 1
        finally:
            self._cleanup()

    def _setup_logging(self):
        log_file = self.args.log_file
        if log_file == '':
            log_file = generate_log_filename(self.args.path)

        self.logger = setup_logging(log_file, os.path.basename(self.args.path), self.args.verbose)
        self.logger.section_header("Preview Started")
        log_info(f"File: {self.args.path}")
        log_info(f"Requested rows: {self.args.rows}")
        log_info(f"Mode: {'headless' if self.args.headless else 'interactive'}")
        if log_file:
            log_info(f"Log file: {log_file}")

    def _load_preview(self):
        self.processor = PreviewProcessor(show_progress=self.args.progress)
        return self.processor.load_preview(self.args.path, self.args.rows)

    def _schema_text(self, preview):
        summary = self.processor.describe_file(self.args.path)
        return render_schema(preview) + render_file_summary(summary)

    def _print_report(self, preview):
        if self.args.schema:
            self.stdout.write(self._schema_text(preview))
            self.stdout.write('\n')
        TextReport().write(preview, self.stdout)
        log_info(f"Printed {preview.row_count} rows")

    def _launch_viewer(self, preview):
        def output(text):
            print(text, file=self.stdout)

        if self.args.schema:
            output(self._schema_text(preview))

        view = TableView(preview, page_size=self.args.page_size,
                         input_func=self.input_func, output=output)
        view.run()

    def _handle_error(self, error):
        """Handle application errors with proper logging."""
        # The message below is the console report; the log record goes to the file only
        log_error(f"Application error: {error}", console=False)
        print(f"\n❌ Preview failed: {error}", file=sys.stderr)

    def _cleanup(self):
        """Cleanup resources and close logging."""
        if self.logger:
            LoggerManager.close()
            self.logger = None


def main(argv=None):
    """Main entry point for the application."""
    args = build_parser().parse_args(argv)
    return PreviewApplication(args).run()


if __name__ == "__main__":
    sys.exit(main())
