"""
Test analysis of generated synthetic media files
"""

import pytest
from langfilter import analyze_file, discover_audio_tracks


class TestSyntheticFileAnalysis:
    """Probe the generated files with the real ffprobe"""

    def test_multilingual_mkv_tracks(self, sample_files):
        tracks = discover_audio_tracks(sample_files['multilingual.mkv'], timeout=30)

        assert [t.language for t in tracks] == ['jpn', 'eng', 'ger']
        # Stream 0 is the video
        assert [t.index for t in tracks] == [1, 2, 3]

    def test_multilingual_mp4_tracks(self, sample_files):
        tracks = discover_audio_tracks(sample_files['multilingual.mp4'], timeout=30)
        assert [t.language for t in tracks] == ['jpn', 'eng', 'ger']

    def test_no_audio(self, sample_files):
        assert discover_audio_tracks(sample_files['no_audio.mkv'], timeout=30) == []

    def test_untagged_audio_is_not_eligible(self, sample_files):
        analysis = analyze_file(sample_files['untagged.mkv'], ['eng'], timeout=30)
        assert analysis.has_audio_metadata
        assert not analysis.eligible

    def test_not_a_media_file(self, temp_dirs):
        bogus = temp_dirs['media'] / 'bogus.mkv'
        bogus.write_text('not a matroska file')
        assert discover_audio_tracks(bogus, timeout=30) == []

    @pytest.mark.parametrize("languages,expected", [
        (['eng', 'jpn'], [1, 2]),
        (['ger'], [3]),
        (['fre'], []),
    ])
    def test_selection_on_real_file(self, sample_files, languages, expected):
        analysis = analyze_file(sample_files['multilingual.mkv'], languages, timeout=30)
        assert [s.source_index for s in analysis.selections] == expected
