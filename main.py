#!/usr/bin/env python3
"""
Media Language Filter

Keeps only the audio tracks of whitelisted languages in MKV/MP4 files:
- Video: first video stream, copied
- Audio: every track whose language tag is on the whitelist, copied in stream order
- Subtitles: all subtitle streams, copied
- Optionally marks the first track of a chosen language as default

Files are remuxed to `<file>.temp` and renamed over the original only after
ffmpeg succeeded.

Usage:
  python main.py                                  (interactive)
  python main.py /path/to/movies -l "eng jpn" -d eng --yes
  python main.py /path/to/file.mkv -l eng --dry-run --debug

Requires: ffmpeg, ffprobe in PATH
"""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

from langfilter import __version__
from langfilter.ffmpeg_runner import check_dependencies, is_interrupted, setup_signal_handlers
from langfilter.file_utils import find_media_files
from langfilter.logging_setup import DEFAULT_LOG_DIR, LoggingSetupError, setup_logging
from langfilter.models import FileResult, Outcome, RunStats, REASON_PROCESSING_FAILED
from langfilter.parallel_processor import create_parallel_processor
from langfilter.preferences import ConfigurationError, build_config
from langfilter.processor import process_file
from langfilter.reporter import report_run
from langfilter.rich_console import rich_output

APP_NAME = 'Media Language Filter'
EXIT_FATAL = 2
EXIT_INTERRUPTED = 130

logger = logging.getLogger('langfilter.main')


def positive_float(value):
    number = float(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f'must be positive: {value}')
    return number


def positive_int(value):
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f'must be at least 1: {value}')
    return number


def parse_arguments(argv=None):
    """Parse command line arguments; anything missing is asked for interactively"""
    ap = argparse.ArgumentParser(description='Keep only whitelisted audio languages in MKV/MP4 files')
    ap.add_argument('root', type=Path, nargs='?', default=None,
                    help='Directory to process recursively, or a single MKV/MP4 file')
    ap.add_argument('--languages', '-l', type=str, default=None,
                    help='Languages to keep, 3-letter codes separated by spaces or commas (e.g. "eng jpn")')
    ap.add_argument('--default-language', '-d', type=str, default=None,
                    help='Language whose first kept track becomes the default audio track')
    ap.add_argument('--yes', '-y', action='store_true', help='Do not ask for confirmation before processing')
    ap.add_argument('--dry-run', action='store_true', help='Only show what would happen')
    ap.add_argument('--debug', action='store_true', help='Show the ffmpeg command for each file')
    ap.add_argument('--backup', action='store_true',
                    help='Keep a <file>.backup copy while a file is being processed')
    ap.add_argument('--timeout', type=positive_float, default=None,
                    help='Seconds before a remux is aborted and treated as failed (default: no limit)')
    ap.add_argument('--probe-timeout', type=positive_float, default=60.0,
                    help='Seconds before an ffprobe call is aborted (default: 60)')
    ap.add_argument('--workers', type=positive_int, default=1,
                    help='Number of files processed at the same time (default: 1)')
    ap.add_argument('--log-dir', type=Path, default=DEFAULT_LOG_DIR,
                    help=f'Directory for log files (default: {DEFAULT_LOG_DIR})')
    return ap.parse_args(argv)


def fatal(message: str):
    rich_output.print_error(message)
    logger.error(message)
    sys.exit(EXIT_FATAL)


def ensure_dependencies():
    """Exit when ffmpeg or ffprobe is missing"""
    rich_output.print_info("Checking required packages...")
    missing = check_dependencies()
    if missing:
        rich_output.print_error(f"Missing required packages: {' '.join(missing)}")
        rich_output.console.print("Please install the missing packages:")
        rich_output.console.print("  Ubuntu/Debian: sudo apt install ffmpeg")
        rich_output.console.print("  Fedora/RHEL:   sudo dnf install ffmpeg")
        rich_output.console.print("  macOS:         brew install ffmpeg")
        sys.exit(EXIT_FATAL)
    rich_output.print_success("All required packages are installed")


def process_files_batch(files, config, stats: RunStats):
    """Process files one after another and add each result to stats"""
    for file_path in files:
        if is_interrupted():
            rich_output.print_interrupted()
            stats.interrupted = True
            break

        try:
            result = process_file(file_path, config, rich_output)
        except Exception as e:
            logger.exception("Unexpected error while processing %s", file_path)
            rich_output.print_error(f"Error processing {file_path}", str(e))
            result = FileResult(file_path=file_path, outcome=Outcome.ERROR,
                                reason=REASON_PROCESSING_FAILED)

        stats.add_result(result)
        if result.outcome == Outcome.INTERRUPTED:
            break

    return stats


def run_filter(config, files) -> RunStats:
    """Process all files sequentially or in parallel and collect the statistics"""
    stats = RunStats(total_files=len(files), start_time=datetime.now())

    if config.workers > 1:
        processor = create_parallel_processor(config.workers, rich_output)
        for result in processor.process_batch(files, config):
            stats.add_result(result)
    else:
        process_files_batch(files, config, stats)

    stats.end_time = datetime.now()
    return stats


def main(argv=None):
    args = parse_arguments(argv)
    rich_output.print_header(f"{APP_NAME} v{__version__}")

    ensure_dependencies()

    try:
        log_file = setup_logging(args.log_dir)
    except LoggingSetupError as e:
        fatal(str(e))
    logger.info("=== %s v%s Started ===", APP_NAME, __version__)
    logger.info("Log file: %s", log_file)
    logger.info("Dependency check passed")

    try:
        config = build_config(args, rich_output)
    except ConfigurationError as e:
        fatal(f"{e} Exiting.")

    logger.info("Languages to keep: %s", ' '.join(config.languages))
    logger.info("Default language: %s", config.default_language or 'None')
    logger.info("Target directory: %s", config.target)

    rich_output.print_config_summary(config, log_file)
    if not args.yes and not rich_output.ask_confirmation("Proceed with processing?"):
        rich_output.print_info("Processing cancelled by user")
        logger.info("Processing cancelled by user")
        return 0

    # Only now: Ctrl+C during the prompts should still abort right away
    setup_signal_handlers()

    rich_output.print_info(f"Scanning directory: {config.target}")
    logger.info("Starting directory scan")
    files = find_media_files(config.target)
    rich_output.print_info(f"Found {len(files)} media files")

    stats = run_filter(config, files)
    report_run(stats, log_file, rich_output)
    logger.info("=== %s Processing Complete ===", APP_NAME)

    return EXIT_INTERRUPTED if stats.interrupted else 0


if __name__ == '__main__':
    sys.exit(main())
