"""
FFmpeg command building for audio track filtering
"""

from pathlib import Path
from typing import List, Optional

from .models import TrackSelection

# Muxer per container extension; the temp file's own suffix can't be used
OUTPUT_FORMATS = {
    '.mkv': 'matroska',
    '.mp4': 'mp4',
}


def output_format_for(path: Path) -> str:
    try:
        return OUTPUT_FORMATS[path.suffix.lower()]
    except KeyError:
        raise ValueError(f'Unsupported container: {path.suffix}') from None


def build_remux_cmd(inp: Path, out: Path, selections: List[TrackSelection],
                    container_path: Optional[Path] = None):
    """Build the stream-copy command keeping video, selected audio and subtitles.

    `container_path` decides the output muxer and defaults to the input path.
    """
    if not selections:
        return None

    fmt = output_format_for(container_path or inp)
    base = ['ffmpeg', '-nostdin', '-y', '-hide_banner', '-loglevel', 'error',
            '-progress', 'pipe:2', '-i', str(inp)]

    # First video stream, then the whitelisted audio in stream order, then all subtitles
    map_args = ['-map', '0:v:0']
    for selection in selections:
        map_args.extend(['-map', f'0:{selection.source_index}'])
    map_args.extend(['-map', '0:s?'])

    disposition_args = []
    for selection in selections:
        disposition_args.extend([
            f'-disposition:a:{selection.output_position}',
            'default' if selection.default else '0',
        ])

    cmd = base + map_args + ['-c', 'copy'] + disposition_args
    if fmt == 'mp4':
        cmd.extend(['-movflags', '+faststart'])
    cmd.extend(['-f', fmt, str(out)])
    return cmd
