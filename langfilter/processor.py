"""
Main file processing logic
"""

import logging
import os
import shutil
import time
from pathlib import Path
from typing import List, Optional

from .ffmpeg_builder import build_remux_cmd
from .ffmpeg_runner import RETURN_INTERRUPTED, RETURN_TIMEOUT, get_duration, is_interrupted, run
from .file_utils import backup_path_for, format_file_size, remove_transient, temp_path_for
from .media_analyzer import analyze_file
from .models import (
    FileResult, FilterConfig, Outcome, TrackSelection,
    REASON_BACKUP_FAILED, REASON_DRY_RUN, REASON_INTERRUPTED, REASON_NO_TRACKS_TO_MAP,
    REASON_NO_WHITELISTED, REASON_PROCESSING_FAILED, REASON_REPLACE_FAILED, REASON_TIMED_OUT,
)
from .rich_console import RichOutput, rich_output

logger = logging.getLogger(__name__)


def _result(src: Path, outcome: Outcome, reason: Optional[str], started: float,
            selections: Optional[List[TrackSelection]] = None) -> FileResult:
    result = FileResult(
        file_path=src,
        outcome=outcome,
        reason=reason,
        selections=selections or [],
        processing_time=max(0.0, time.monotonic() - started),
    )
    if outcome == Outcome.PROCESSED:
        logger.info("SUCCESS: Processed %s", src)
    elif outcome == Outcome.SKIPPED:
        logger.info("SKIPPED: %s (%s)", src, reason)
    else:
        logger.error("ERROR: %s (%s)", src, reason)
    return result


def _run_remux(cmd, src: Path, config: FilterConfig, output: RichOutput, show_progress: bool):
    """Run ffmpeg, with a progress bar when running in the foreground"""
    if not show_progress:
        return run(cmd, timeout=config.timeout)

    duration = get_duration(src, timeout=config.probe_timeout)
    with output.create_progress_bar(duration) as progress:
        task_id = progress.add_task(f"Remuxing {src.name}", total=duration)

        def on_progress(current_time):
            progress.update(task_id, completed=current_time)

        return run(cmd, timeout=config.timeout, show_progress=True,
                   duration=duration, progress_callback=on_progress)


def _restore_from_backup(src: Path, backup_path: Optional[Path]):
    """Put the backup back if the original has gone missing"""
    if backup_path is None or src.exists() or not backup_path.exists():
        return
    try:
        os.replace(backup_path, src)
        logger.warning("Restored %s from backup", src)
    except OSError as e:
        logger.error("Could not restore %s from %s: %s", src, backup_path, e)


def process_file(src: Path, config: FilterConfig, output: RichOutput = rich_output,
                 show_progress: bool = True) -> FileResult:
    """Filter the audio tracks of a single file in place.

    The remux is written next to the original and renamed over it only after
    ffmpeg succeeded, so every failure leaves the original content in place and
    removes the temp (and backup) file.
    """
    started = time.monotonic()
    output.print_file_path(src)
    logger.info("Processing file: %s", src)

    analysis = analyze_file(src, config.languages, config.default_language,
                            timeout=config.probe_timeout)
    if is_interrupted():
        # An interrupted probe looks like a file without audio metadata
        output.print_interrupted(f"Analysis of {src.name} interrupted")
        return _result(src, Outcome.INTERRUPTED, REASON_INTERRUPTED, started)

    if not analysis.eligible:
        output.print_skipped(f"No whitelisted languages found in {src.name} - skipping")
        return _result(src, Outcome.SKIPPED, REASON_NO_WHITELISTED, started)

    temp_path = temp_path_for(src, config.run_token)
    cmd = build_remux_cmd(src, temp_path, analysis.selections)
    if not cmd:
        # Unreachable while eligibility is derived from the selection itself
        output.print_skipped(f"No audio tracks to map for {src.name} - skipping")
        return _result(src, Outcome.SKIPPED, REASON_NO_TRACKS_TO_MAP, started)

    output.print_track_selection(analysis, cmd if config.debug else None)

    if config.dry_run:
        output.print_skipped("DRY-RUN: would be processed")
        return _result(src, Outcome.SKIPPED, REASON_DRY_RUN, started, analysis.selections)

    backup_path = None
    if config.keep_backup:
        backup_path = backup_path_for(src, config.run_token)
        try:
            shutil.copy2(src, backup_path)
        except OSError as e:
            output.print_error(f"Failed to create backup for {src.name}", str(e))
            remove_transient(backup_path)
            return _result(src, Outcome.ERROR, REASON_BACKUP_FAILED, started)

    logger.info("FFmpeg command: %s", ' '.join(cmd))
    try:
        ret, _, err = _run_remux(cmd, src, config, output, show_progress)
    except Exception as e:
        logger.exception("Unexpected error while running ffmpeg for %s", src)
        ret, err = 1, str(e)

    if ret != 0:
        remove_transient(temp_path)
        _restore_from_backup(src, backup_path)
        if backup_path:
            remove_transient(backup_path)

        if ret == RETURN_INTERRUPTED:
            output.print_interrupted(f"Processing of {src.name} interrupted, original kept")
            return _result(src, Outcome.INTERRUPTED, REASON_INTERRUPTED, started)
        if ret == RETURN_TIMEOUT:
            output.print_error(f"FFmpeg timed out after {config.timeout:g}s for {src.name}")
            return _result(src, Outcome.ERROR, REASON_TIMED_OUT, started)

        output.print_error(f"FFmpeg processing failed for {src.name} (exit code {ret})",
                           err.strip() or None)
        logger.error("FFmpeg exit code %s for %s: %s", ret, src, err.strip())
        return _result(src, Outcome.ERROR, REASON_PROCESSING_FAILED, started)

    try:
        os.replace(temp_path, src)
    except OSError as e:
        output.print_error(f"Failed to replace original file {src.name}", str(e))
        _restore_from_backup(src, backup_path)
        remove_transient(temp_path)
        if backup_path and src.exists():
            remove_transient(backup_path)
        return _result(src, Outcome.ERROR, REASON_REPLACE_FAILED, started)

    if backup_path:
        remove_transient(backup_path)

    output.print_success(f"Successfully processed {src.name} ({format_file_size(src.stat().st_size)})")
    return _result(src, Outcome.PROCESSED, None, started, analysis.selections)
