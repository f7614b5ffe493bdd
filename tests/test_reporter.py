"""
Test run statistics, the log file setup and the end-of-run report
"""

import logging
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from conftest import console_text
from langfilter.logging_setup import APP_LOGGER, LoggingSetupError, setup_logging
from langfilter.models import FileResult, FilterConfig, Outcome, RunStats
from langfilter.reporter import report_run


def result(name, outcome, reason=None):
    return FileResult(file_path=Path('/media') / name, outcome=outcome, reason=reason)


@pytest.fixture
def stats():
    started = datetime(2024, 1, 1, 12, 0, 0)
    run_stats = RunStats(total_files=4, start_time=started, end_time=started + timedelta(seconds=90))
    run_stats.add_result(result('a.mkv', Outcome.PROCESSED))
    run_stats.add_result(result('b.mkv', Outcome.SKIPPED, 'no whitelisted languages'))
    run_stats.add_result(result('c.mp4', Outcome.ERROR, 'processing failed'))
    run_stats.add_result(result('d.mkv', Outcome.PROCESSED))
    return run_stats


@pytest.fixture
def log_file(temp_dirs):
    path = setup_logging(temp_dirs['logs'])
    yield path
    logger = logging.getLogger(APP_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


class TestRunStats:
    """Test the result accumulator"""

    def test_counts(self, stats):
        assert stats.processed_count == 2
        assert stats.skipped_count == 1
        assert stats.error_count == 1
        assert stats.finished_count == 4
        assert stats.processing_duration == 90.0
        assert not stats.interrupted

    def test_interrupted_counts_as_error(self):
        run_stats = RunStats(total_files=2)
        run_stats.add_result(result('a.mkv', Outcome.INTERRUPTED, 'interrupted'))

        assert run_stats.interrupted
        assert run_stats.error_count == 1
        assert run_stats.processing_duration is None


class TestFilterConfig:
    """Test configuration validation"""

    def test_default_must_be_kept(self, tmp_path):
        with pytest.raises(ValueError):
            FilterConfig(languages=['eng'], default_language='jpn', target=tmp_path)

    def test_languages_required(self, tmp_path):
        with pytest.raises(ValueError):
            FilterConfig(languages=[], target=tmp_path)

    def test_timeout_positive(self, tmp_path):
        with pytest.raises(ValueError):
            FilterConfig(languages=['eng'], target=tmp_path, timeout=0)

    def test_workers_at_least_one(self, tmp_path):
        with pytest.raises(ValueError):
            FilterConfig(languages=['eng'], target=tmp_path, workers=0)


class TestLoggingSetup:
    """Test the log file location"""

    def test_creates_timestamped_log(self, log_file, temp_dirs):
        assert log_file.parent == temp_dirs['logs']
        assert log_file.name.startswith('processing-')
        assert log_file.suffix == '.log'

        logging.getLogger('langfilter.test').info("hello log")
        assert 'hello log' in log_file.read_text(encoding='utf-8')

    def test_unwritable_location(self, temp_dirs):
        blocker = temp_dirs['temp'] / 'not_a_dir'
        blocker.write_text('x')

        with pytest.raises(LoggingSetupError):
            setup_logging(blocker / 'logs')


class TestReport:
    """Test the summary written to log and console"""

    def test_report_itemizes_outcomes(self, stats, log_file, quiet_output):
        report_run(stats, log_file, quiet_output)

        log_text = log_file.read_text(encoding='utf-8')
        assert 'Total files: 4' in log_text
        assert 'Processed: 2' in log_text
        assert 'Skipped: 1' in log_text
        assert 'Errors: 1' in log_text
        assert 'SUCCESSFULLY PROCESSED FILES:' in log_text
        assert '/media/b.mkv: no whitelisted languages' in log_text
        assert '/media/c.mp4: processing failed' in log_text

        text = console_text(quiet_output)
        assert 'Processing Complete' in text
        assert 'Processed files:' in text
        assert '/media/a.mkv' in text
        assert '/media/c.mp4: processing failed' in text
        assert str(log_file) in text

    def test_report_interrupted_run(self, log_file, quiet_output):
        run_stats = RunStats(total_files=3)
        run_stats.add_result(result('a.mkv', Outcome.INTERRUPTED, 'interrupted'))

        report_run(run_stats, log_file, quiet_output)

        assert 'Processing Interrupted' in console_text(quiet_output)
        assert 'interrupted after 1 of 3 files' in log_file.read_text(encoding='utf-8')
