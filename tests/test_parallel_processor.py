"""
Test concurrent processing through dask
"""

import warnings
from pathlib import Path
from unittest.mock import patch

from langfilter.ffmpeg_runner import signal_handler
from langfilter.models import FileResult, Outcome
from langfilter.parallel_processor import create_parallel_processor


def files(n):
    return [Path(f'/media/movie{i}.mkv') for i in range(n)]


class TestParallelProcessor:
    """Test result collection and failure isolation"""

    def test_results_in_input_order(self, make_config, quiet_output):
        def fake(path, config, output, show_progress=True):
            assert show_progress is False
            return FileResult(file_path=path, outcome=Outcome.PROCESSED)

        processor = create_parallel_processor(3, quiet_output)
        with patch('langfilter.parallel_processor.process_file', side_effect=fake):
            results = processor.process_batch(files(5), make_config())

        assert [r.file_path for r in results] == files(5)
        assert all(r.outcome == Outcome.PROCESSED for r in results)

    def test_run_token_is_added(self, make_config, quiet_output):
        processor = create_parallel_processor(2, quiet_output)
        config = processor.prepare_config(make_config())

        assert config.run_token
        assert processor.prepare_config(config).run_token == config.run_token

    def test_run_token_copy_is_quiet(self, make_config, quiet_output):
        original = make_config()
        processor = create_parallel_processor(2, quiet_output)

        with warnings.catch_warnings():
            warnings.simplefilter('error')
            config = processor.prepare_config(original)

        assert original.run_token is None
        assert config.languages == original.languages

    def test_exception_becomes_error_result(self, make_config, quiet_output):
        def fake(path, config, output, show_progress=True):
            if path.name == 'movie1.mkv':
                raise RuntimeError('boom')
            return FileResult(file_path=path, outcome=Outcome.SKIPPED, reason='no whitelisted languages')

        processor = create_parallel_processor(2, quiet_output)
        with patch('langfilter.parallel_processor.process_file', side_effect=fake):
            results = processor.process_batch(files(3), make_config())

        assert [r.outcome for r in results] == [Outcome.SKIPPED, Outcome.ERROR, Outcome.SKIPPED]
        assert results[1].reason == 'processing failed'

    def test_interrupted_files_are_not_started(self, make_config, quiet_output):
        signal_handler(2, None)
        processor = create_parallel_processor(2, quiet_output)
        with patch('langfilter.parallel_processor.process_file') as mock_process:
            results = processor.process_batch(files(2), make_config())

        mock_process.assert_not_called()
        assert all(r.outcome == Outcome.INTERRUPTED for r in results)

    def test_empty_batch(self, make_config, quiet_output):
        assert create_parallel_processor(2, quiet_output).process_batch([], make_config()) == []

    def test_default_worker_count(self, quiet_output):
        assert 1 <= create_parallel_processor(None, quiet_output).max_workers <= 4
