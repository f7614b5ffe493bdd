"""
Dask-based parallel file processing
"""

import logging
import os
import uuid
from pathlib import Path
from typing import List, Optional

import dask
from dask import delayed

from .ffmpeg_runner import is_interrupted
from .models import FileResult, FilterConfig, Outcome, REASON_INTERRUPTED, REASON_PROCESSING_FAILED
from .processor import process_file
from .rich_console import RichOutput, rich_output

logger = logging.getLogger(__name__)


class ParallelProcessor:
    """Runs process_file for several files at once on dask's threaded scheduler.

    Each task returns its own FileResult; results are merged by the caller
    once dask.compute returns, so the run statistics are only touched by one
    thread.
    """

    def __init__(self, max_workers: Optional[int] = None, output: RichOutput = rich_output):
        self.max_workers = max_workers or self.get_optimal_worker_count()
        self.output = output

    @staticmethod
    def get_optimal_worker_count() -> int:
        # Stream copies are disk bound; more than a few concurrent remuxes only thrash
        return min(os.cpu_count() or 1, 4)

    def prepare_config(self, config: FilterConfig) -> FilterConfig:
        """Give the run a token so temp/backup names can't collide"""
        if config.run_token:
            return config
        return config.copy(update={'run_token': uuid.uuid4().hex[:8]})

    def _process_single_file(self, path: Path, config: FilterConfig) -> FileResult:
        """Wrapper for process_file; one failing file must not abort the batch"""
        if is_interrupted():
            return FileResult(file_path=path, outcome=Outcome.INTERRUPTED,
                              reason=REASON_INTERRUPTED)
        try:
            return process_file(path, config, self.output, show_progress=False)
        except Exception:
            logger.exception("Unexpected error while processing %s", path)
            return FileResult(file_path=path, outcome=Outcome.ERROR,
                              reason=REASON_PROCESSING_FAILED)

    def process_batch(self, file_paths: List[Path], config: FilterConfig) -> List[FileResult]:
        """Process files concurrently, returning results in input order"""
        if not file_paths:
            return []

        config = self.prepare_config(config)
        self.output.print_info(
            f"Processing {len(file_paths)} files with {self.max_workers} workers...")
        logger.info("Parallel run with %d workers, token %s", self.max_workers, config.run_token)

        tasks = [delayed(self._process_single_file, pure=False)(path, config) for path in file_paths]
        results = dask.compute(*tasks, scheduler='threads', num_workers=self.max_workers)
        return list(results)


def create_parallel_processor(max_workers: Optional[int] = None,
                              output: RichOutput = rich_output) -> ParallelProcessor:
    """Factory function to create a parallel processor"""
    return ParallelProcessor(max_workers=max_workers, output=output)
