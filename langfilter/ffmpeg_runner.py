"""
FFmpeg/FFprobe command execution with timeouts, progress monitoring and signal handling
"""

import logging
import re
import shutil
import signal
import subprocess
import threading
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)

REQUIRED_TOOLS = ('ffmpeg', 'ffprobe')

RETURN_TIMEOUT = 124
RETURN_CANNOT_EXECUTE = 126
RETURN_NOT_FOUND = 127
RETURN_INTERRUPTED = 130

# Running ffmpeg/ffprobe processes, terminated on SIGINT/SIGTERM
_active_processes = set()
_active_lock = threading.Lock()
_interrupted = threading.Event()

# key=value lines written by `-progress`
PROGRESS_LINE_RE = re.compile(r"^[a-z_]+=\S*$")


class ProgressMonitor:
    """Tracks ffmpeg's position from `-progress pipe:2` output"""

    def __init__(self, duration_seconds=None):
        self.duration = duration_seconds
        self.current_time = 0.0
        self.progress_percent = 0.0

    def parse_progress_line(self, line):
        """Parse one progress line, return True when the position changed"""
        line = line.strip()
        if not line.startswith('out_time_us='):
            return False
        try:
            microseconds = int(line.split('=', 1)[1])
        except (ValueError, IndexError):
            # ffmpeg reports N/A before the first packet is written
            return False
        self.current_time = microseconds / 1_000_000
        if self.duration and self.duration > 0:
            self.progress_percent = min(100.0, (self.current_time / self.duration) * 100)
        return True


def check_dependencies(tools=REQUIRED_TOOLS) -> List[str]:
    """Return the required executables missing from PATH"""
    return [tool for tool in tools if shutil.which(tool) is None]


def is_interrupted() -> bool:
    return _interrupted.is_set()


def reset_interrupted():
    _interrupted.clear()


def _terminate(process):
    if process.poll() is not None:
        return
    process.terminate()
    try:
        process.wait(timeout=5)
    except subprocess.TimeoutExpired:
        logger.warning("ffmpeg did not stop after SIGTERM, killing pid %s", process.pid)
        process.kill()
        process.wait()


def signal_handler(signum, frame):
    """Stop running child processes; the current file is rolled back by its caller"""
    logger.warning("Interrupted by signal %s", signum)
    _interrupted.set()
    with _active_lock:
        processes = list(_active_processes)
    for process in processes:
        try:
            _terminate(process)
        except OSError as e:
            logger.error("Failed to stop pid %s: %s", process.pid, e)


def setup_signal_handlers():
    """Set up signal handlers for graceful interruption"""
    signal.signal(signal.SIGINT, signal_handler)   # Ctrl+C
    signal.signal(signal.SIGTERM, signal_handler)  # Termination signal


def _as_text(data):
    if data is None:
        return ''
    if isinstance(data, bytes):
        return data.decode('utf-8', errors='replace')
    return data


def run(cmd, timeout: Optional[float] = None, show_progress: bool = False,
        duration: Optional[float] = None, progress_callback=None):
    """Execute command, return (returncode, stdout, stderr).

    A timeout kills the process and returns RETURN_TIMEOUT, an interruption
    returns RETURN_INTERRUPTED.
    """
    if is_interrupted():
        return RETURN_INTERRUPTED, '', 'Process interrupted'

    # Ensure command list contains strings for Windows compatibility
    cmd_str = [str(c) for c in cmd]

    try:
        p = subprocess.Popen(cmd_str, stdin=subprocess.DEVNULL, stdout=subprocess.PIPE,
                             stderr=subprocess.PIPE, text=True, errors='replace')
    except FileNotFoundError as e:
        return RETURN_NOT_FOUND, '', str(e)
    except OSError as e:
        return RETURN_CANNOT_EXECUTE, '', str(e)

    with _active_lock:
        _active_processes.add(p)

    timed_out = threading.Event()

    def kill_on_timeout():
        timed_out.set()
        p.kill()

    timer = None
    if timeout:
        timer = threading.Timer(timeout, kill_on_timeout)
        timer.daemon = True
        timer.start()

    stderr_lines = []
    try:
        if show_progress:
            progress = ProgressMonitor(duration)
            # Read stderr line by line for progress updates
            for line in p.stderr:
                if progress.parse_progress_line(line):
                    if progress_callback:
                        progress_callback(progress.current_time)
                elif not PROGRESS_LINE_RE.match(line.strip()):
                    stderr_lines.append(line)
            stdout = p.stdout.read()
            p.wait()
        else:
            stdout, stderr = p.communicate()
            stderr_lines.extend(line for line in _as_text(stderr).splitlines(keepends=True)
                                if not PROGRESS_LINE_RE.match(line.strip()))
    finally:
        if timer:
            timer.cancel()
        with _active_lock:
            _active_processes.discard(p)

    stderr = _as_text(''.join(_as_text(line) for line in stderr_lines))
    stdout = _as_text(stdout)

    if timed_out.is_set():
        return RETURN_TIMEOUT, stdout, stderr
    if is_interrupted():
        return RETURN_INTERRUPTED, stdout, stderr
    return p.returncode, stdout, stderr


def run_simple(cmd, timeout: Optional[float] = None):
    """Simple run function for ffprobe calls"""
    return run(cmd, timeout=timeout, show_progress=False)


def probe_audio_tracks(path: Path, timeout: Optional[float] = None) -> str:
    """Return ffprobe's `<index>,<language>` lines for the audio streams of a file.

    An empty string means there is no usable audio metadata: the probe failed,
    timed out or the file has no audio streams.
    """
    cmd = [
        'ffprobe', '-v', 'error',
        '-select_streams', 'a',
        '-show_entries', 'stream=index:stream_tags=language',
        '-of', 'csv=p=0',
        str(path)
    ]
    code, out, err = run_simple(cmd, timeout=timeout)
    if code == RETURN_INTERRUPTED:
        logger.info("ffprobe interrupted for %s", path)
        return ''
    if code == RETURN_TIMEOUT:
        logger.warning("ffprobe timed out after %ss for %s", timeout, path)
        return ''
    if code != 0:
        logger.warning("ffprobe failed for %s (exit %s): %s", path, code, err.strip())
        return ''
    return out or ''


def get_duration(path: Path, timeout: Optional[float] = None):
    """Get duration of media file in seconds"""
    cmd = [
        'ffprobe', '-v', 'error',
        '-show_entries', 'format=duration',
        '-of', 'csv=p=0',
        str(path)
    ]
    code, out, err = run_simple(cmd, timeout=timeout)
    if code != 0:
        return None
    try:
        return float(out.strip())
    except (ValueError, AttributeError):
        return None
