"""
End-of-run summary for the log file and the console
"""

import logging
from pathlib import Path
from typing import Optional

from .models import RunStats
from .rich_console import RichOutput, rich_output

logger = logging.getLogger(__name__)


def log_summary(stats: RunStats):
    """Write counts and the itemized file lists to the log"""
    logger.info("=== PROCESSING SUMMARY ===")
    logger.info("Total files: %d", stats.total_files)
    logger.info("Processed: %d", stats.processed_count)
    logger.info("Skipped: %d", stats.skipped_count)
    logger.info("Errors: %d", stats.error_count)
    if stats.processing_duration is not None:
        logger.info("Duration: %.1fs", stats.processing_duration)
    if stats.interrupted:
        logger.info("Run was interrupted after %d of %d files",
                    stats.finished_count, stats.total_files)

    sections = (
        ("SUCCESSFULLY PROCESSED FILES:", stats.processed),
        ("SKIPPED FILES:", stats.skipped),
        ("ERROR FILES:", stats.errored),
    )
    for title, results in sections:
        if not results:
            continue
        logger.info(title)
        for result in results:
            logger.info("  - %s", result.summary)


def report_run(stats: RunStats, log_file: Optional[Path] = None,
               output: RichOutput = rich_output):
    """Render the summary to the console and append it to the log"""
    log_summary(stats)
    output.print_final_summary(stats, log_file)
