"""
Media language filter library modules

Keeps only whitelisted audio languages in MKV/MP4 files by remuxing with ffmpeg.
"""

# Import all public interfaces for easy access
from .models import (
    AudioTrack, TrackSelection, FileAnalysis, FilterConfig, FileResult, RunStats, Outcome
)
from .language_utils import parse_language_list, select_tracks
from .ffmpeg_runner import run, run_simple, probe_audio_tracks, get_duration, check_dependencies
from .media_analyzer import parse_probe_output, discover_audio_tracks, analyze_file
from .ffmpeg_builder import build_remux_cmd
from .file_utils import MEDIA_EXTS, find_media_files, temp_path_for, backup_path_for
from .processor import process_file
from .parallel_processor import ParallelProcessor, create_parallel_processor
from .reporter import report_run

__version__ = '1.0.0'

__all__ = [
    'AudioTrack', 'TrackSelection', 'FileAnalysis', 'FilterConfig', 'FileResult', 'RunStats', 'Outcome',
    'parse_language_list', 'select_tracks',
    'run', 'run_simple', 'probe_audio_tracks', 'get_duration', 'check_dependencies',
    'parse_probe_output', 'discover_audio_tracks', 'analyze_file',
    'build_remux_cmd',
    'MEDIA_EXTS', 'find_media_files', 'temp_path_for', 'backup_path_for',
    'process_file',
    'ParallelProcessor', 'create_parallel_processor',
    'report_run',
]
