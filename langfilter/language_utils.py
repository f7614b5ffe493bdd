"""
Language whitelist parsing and audio track selection
"""

import re
from typing import List, Optional

from .models import AudioTrack, TrackSelection

# ISO 639-2 codes as written by ffmpeg/mkvmerge
LANGUAGE_CODE_RE = re.compile(r'^[a-z]{3}$')

COMMON_LANGUAGES = {
    'eng': 'English', 'jpn': 'Japanese', 'fre': 'French', 'ger': 'German',
    'spa': 'Spanish', 'ita': 'Italian', 'kor': 'Korean', 'chi': 'Chinese',
}


def parse_language_list(text: Optional[str]) -> List[str]:
    """Split user input on spaces/commas, lower-case and de-duplicate (order kept)"""
    if not text:
        return []
    languages = []
    for lang in re.split(r'[\s,]+', text.strip()):
        lang = lang.lower()
        if lang and lang not in languages:
            languages.append(lang)
    return languages


def is_valid_language_code(lang: str) -> bool:
    return bool(LANGUAGE_CODE_RE.match(lang or ''))


def invalid_language_codes(languages: List[str]) -> List[str]:
    """Codes that don't look like 3-letter ISO 639-2 codes"""
    return [lang for lang in languages if not is_valid_language_code(lang)]


def select_tracks(tracks: List[AudioTrack], languages: List[str],
                  default_language: Optional[str] = None) -> List[TrackSelection]:
    """Pick whitelisted audio tracks and assign output positions and the default flag.

    Tracks are taken in ascending stream index order. A track is kept when its
    language tag equals one of the whitelisted tags; whitelist order has no
    priority. The first kept track in the default language becomes the default,
    every other kept track is explicitly marked as not default.
    """
    keep = set(languages)
    selections = []
    default_set = False

    for track in sorted(tracks, key=lambda t: t.index):
        if not track.language or track.language not in keep:
            continue

        is_default = False
        if default_language and track.language == default_language and not default_set:
            is_default = True
            default_set = True

        selections.append(TrackSelection(
            source_index=track.index,
            output_position=len(selections),
            language=track.language,
            default=is_default,
        ))

    return selections
