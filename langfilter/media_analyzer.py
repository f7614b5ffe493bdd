"""
Audio track analysis for a single media file
"""

import logging
from pathlib import Path
from typing import List, Optional

from .ffmpeg_runner import probe_audio_tracks
from .language_utils import select_tracks
from .models import AudioTrack, FileAnalysis

logger = logging.getLogger(__name__)


def parse_probe_output(output: str) -> List[AudioTrack]:
    """Parse `<stream_index>,<language>` lines into tracks ordered by stream index"""
    tracks = []
    for line in (output or '').splitlines():
        line = line.strip()
        if not line:
            continue
        index_str, _, language = line.partition(',')
        try:
            index = int(index_str)
        except ValueError:
            logger.debug("Ignoring unexpected ffprobe line: %r", line)
            continue
        if index < 0:
            logger.debug("Ignoring negative stream index: %r", line)
            continue
        # Further fields (e.g. a second tag) are not part of the language
        language = language.split(',')[0].strip()
        tracks.append(AudioTrack(index=index, language=language or None))
    return sorted(tracks, key=lambda t: t.index)


def discover_audio_tracks(path: Path, timeout: Optional[float] = None) -> List[AudioTrack]:
    """Probe a file; an empty list means no audio metadata"""
    return parse_probe_output(probe_audio_tracks(path, timeout=timeout))


def analyze_file(path: Path, languages: List[str], default_language: Optional[str] = None,
                 timeout: Optional[float] = None) -> FileAnalysis:
    """Probe once and decide both eligibility and the track selection"""
    tracks = discover_audio_tracks(path, timeout=timeout)
    if not tracks:
        logger.info("No audio metadata in %s", path)
    selections = select_tracks(tracks, languages, default_language)
    return FileAnalysis(file_path=path, tracks=tracks, selections=selections)
