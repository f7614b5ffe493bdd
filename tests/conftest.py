"""
pytest configuration and fixtures for the media language filter tests

Integration fixtures generate small synthetic files with ffmpeg into a
temporary directory and are skipped when ffmpeg/ffprobe are not available.
"""

import io
import json
import shutil
import subprocess
import sys
from pathlib import Path

import pytest
from rich.console import Console

# Add the project root to path for importing
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))
from langfilter.ffmpeg_runner import reset_interrupted
from langfilter.models import FilterConfig
from langfilter.rich_console import RichOutput
from generate_test_files import TEST_FILES, generate_test_files


@pytest.fixture(autouse=True)
def clear_interrupt_flag():
    """The interrupt flag is process wide; never leak it between tests"""
    reset_interrupted()
    yield
    reset_interrupted()


@pytest.fixture
def quiet_output():
    """RichOutput writing into a buffer instead of the terminal"""
    return RichOutput(Console(file=io.StringIO(), width=400, force_terminal=False))


def console_text(output: RichOutput) -> str:
    return output.console.file.getvalue()


@pytest.fixture
def temp_dirs(tmp_path):
    """Create temporary directories for testing outputs"""
    dirs = {
        'temp': tmp_path,
        'media': tmp_path / 'media',
        'logs': tmp_path / 'logs',
    }
    for dir_path in dirs.values():
        dir_path.mkdir(exist_ok=True)
    return dirs


@pytest.fixture
def make_config(temp_dirs):
    """Factory for FilterConfig with test defaults"""
    def _make_config(**overrides):
        values = {
            'languages': ['eng', 'jpn'],
            'default_language': 'eng',
            'target': temp_dirs['media'],
            'probe_timeout': 30.0,
        }
        values.update(overrides)
        return FilterConfig(**values)

    return _make_config


@pytest.fixture(scope="session")
def check_ffmpeg():
    """Check if ffmpeg is available before running tests"""
    try:
        subprocess.run(['ffmpeg', '-version'], capture_output=True, check=True)
        subprocess.run(['ffprobe', '-version'], capture_output=True, check=True)
    except (subprocess.CalledProcessError, FileNotFoundError):
        pytest.skip("ffmpeg and/or ffprobe not available")


@pytest.fixture(scope="session")
def video_files_dir(check_ffmpeg, tmp_path_factory):
    """Directory with freshly generated synthetic media files"""
    video_dir = tmp_path_factory.mktemp('video_files')
    created = generate_test_files(video_dir)
    missing = [spec['name'] for spec in TEST_FILES if spec['name'] not in created]
    if missing:
        pytest.skip(f"Could not generate test files: {missing}")
    return video_dir


@pytest.fixture
def sample_files(video_files_dir, temp_dirs):
    """Fresh copies of the generated files; processing modifies them in place"""
    files = {}
    for spec in TEST_FILES:
        dst = temp_dirs['media'] / spec['name']
        shutil.copy2(video_files_dir / spec['name'], dst)
        files[spec['name']] = dst
    return files


def ffprobe_streams(path: Path) -> list:
    """All streams of a file as reported by ffprobe"""
    result = subprocess.run([
        'ffprobe', '-v', 'error',
        '-show_entries', 'stream=index,codec_type:stream_tags=language:stream_disposition=default',
        '-of', 'json', str(path)
    ], capture_output=True, text=True, check=True)
    return json.loads(result.stdout or '{}').get('streams', [])


def audio_layout(path: Path) -> list:
    """(language, is_default) for each audio stream in output order"""
    return [
        (s.get('tags', {}).get('language'), s.get('disposition', {}).get('default') == 1)
        for s in ffprobe_streams(path) if s.get('codec_type') == 'audio'
    ]


def transient_files(directory: Path) -> list:
    """Leftover temp/backup files"""
    return sorted(p.name for p in directory.rglob('*')
                  if p.name.endswith('.temp') or p.name.endswith('.backup'))
