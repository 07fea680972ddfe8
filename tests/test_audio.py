"""Tests for the audio module."""
import subprocess
from unittest.mock import MagicMock, patch

import pytest
from splitscribe.audio import (
    _SILENCE_END_RE,
    _SILENCE_START_RE,
    detect_silences,
    fixed_chunks,
    media_duration,
    parse_silences,
    plan_chunks,
    render_chunk,
    to_wav_16k_mono,
)


class TestParseSilences:
    """Tests for silence parsing."""

    def test_regexes(self):
        """Test the silencedetect line patterns."""
        assert _SILENCE_START_RE.search("[silencedetect @ 0x1] silence_start: 1.5").group(1) == "1.5"
        assert _SILENCE_END_RE.search("silence_end: 2.75 | silence_duration: 1.25").group(1) == "2.75"
        assert _SILENCE_START_RE.search("size=N/A time=00:00:05") is None

    def test_pairs(self):
        """Test pairing starts with ends."""
        stderr = "silence_start: 1.0\nsilence_end: 2.0\nsilence_start: 5.0\nsilence_end: 6.5\n"
        assert parse_silences(stderr) == [(1.0, 2.0), (5.0, 6.5)]

    def test_end_without_start(self):
        """Test that a lone end becomes a zero-length silence."""
        assert parse_silences("silence_end: 3.0\n") == [(3.0, 3.0)]

    def test_unterminated_start(self):
        """Test that a trailing start is ignored."""
        assert parse_silences("silence_start: 9.0\n") == []


class TestDetectSilences:
    """Tests for detect_silences function."""

    @patch("splitscribe.audio.ffmpeg_ok")
    def test_no_ffmpeg(self, mock_ok):
        """Test that nothing is detected without ffmpeg."""
        mock_ok.return_value = False
        assert detect_silences("a.wav", min_silence_dur=0.4, silence_threshold_db=-30.0) == []

    @patch("splitscribe.audio.run_cmd_text")
    @patch("splitscribe.audio.ffmpeg_ok")
    def test_failure(self, mock_ok, mock_run):
        """Test that a failing ffmpeg yields no silences."""
        mock_ok.return_value = True
        mock_run.return_value = (1, "", "silence_start: 1.0\nsilence_end: 2.0\n")
        assert detect_silences("a.wav", min_silence_dur=0.4, silence_threshold_db=-30.0) == []

    @patch("splitscribe.audio.run_cmd_text")
    @patch("splitscribe.audio.ffmpeg_ok")
    def test_filter_and_sorting(self, mock_ok, mock_run):
        """Test the filter arguments and sorted output."""
        mock_ok.return_value = True
        mock_run.return_value = (0, "", "silence_end: 9.0\nsilence_start: 1.0\nsilence_end: 2.0\n")
        result = detect_silences("a.wav", min_silence_dur=0.4, silence_threshold_db=-30.0)
        assert result == [(1.0, 2.0), (9.0, 9.0)]
        cmd = mock_run.call_args[0][0]
        assert "silencedetect=noise=-30.0dB:d=0.4" in cmd


class TestPlanChunks:
    """Tests for plan_chunks and fixed_chunks."""

    def test_cuts_on_silence(self):
        """Test that chunks end on the latest usable silence."""
        silences = [(100, 101), (550, 552), (700, 701), (1150, 1152)]
        assert plan_chunks(1500, silences) == [(0.0, 552), (552, 1152), (1152, 1500)]

    def test_ignores_early_silence(self):
        """Test that silences inside the minimum chunk length are skipped."""
        assert plan_chunks(700, [(10, 12)]) == [(0.0, 600), (600, 700)]

    def test_short_media(self):
        """Test media shorter than one chunk."""
        assert plan_chunks(42.0, []) == [(0.0, 42.0)]

    @pytest.mark.parametrize("duration", [0, -1])
    def test_no_duration(self, duration):
        """Test that an empty duration gives no chunks."""
        assert plan_chunks(duration, []) == []

    def test_fixed(self):
        """Test fixed-length chunking."""
        assert fixed_chunks(1300, 600) == [(0.0, 600), (600, 1200), (1200, 1300)]

    def test_contiguous(self):
        """Test that chunks cover the duration without gaps."""
        silences = [(float(t), float(t) + 0.5) for t in range(45, 3000, 97)]
        chunks = plan_chunks(3000, silences, chunk_seconds=300, min_chunk_seconds=30)
        assert chunks[0][0] == 0.0
        assert chunks[-1][1] == 3000
        for (_, end), (start, _) in zip(chunks, chunks[1:]):
            assert end == start
        assert all(end - start <= 300 for start, end in chunks)


class TestFfmpegConversion:
    """Tests for to_wav_16k_mono and render_chunk."""

    @patch("splitscribe.audio.subprocess.run")
    def test_to_wav_command(self, mock_run):
        """Test the conversion command."""
        mock_run.return_value = MagicMock(returncode=0, stderr="")
        to_wav_16k_mono("talk.mp4", "talk.wav")
        cmd = mock_run.call_args[0][0]
        assert cmd[0] == "ffmpeg"
        assert cmd[cmd.index("-ar") + 1] == "16000"
        assert cmd[cmd.index("-ac") + 1] == "1"
        assert cmd[-1] == "talk.wav"

    @patch("splitscribe.audio.subprocess.run")
    def test_to_wav_failure(self, mock_run):
        """Test that a failure raises CalledProcessError with the stderr tail."""
        mock_run.return_value = MagicMock(returncode=1, stderr="line\n" * 30 + "Invalid data")
        with pytest.raises(subprocess.CalledProcessError) as exc:
            to_wav_16k_mono("bad.mp4", "bad.wav")
        assert exc.value.stderr.endswith("Invalid data")
        assert len(exc.value.stderr.splitlines()) == 20

    @patch("splitscribe.audio.subprocess.run")
    def test_render_chunk_times(self, mock_run):
        """Test the chunk cut arguments."""
        mock_run.return_value = MagicMock(returncode=0, stderr="")
        render_chunk("talk.wav", 552.0, 1152.25, "chunk_001.wav")
        cmd = mock_run.call_args[0][0]
        assert cmd[cmd.index("-ss") + 1] == "552.000"
        assert cmd[cmd.index("-to") + 1] == "1152.250"


class TestMediaDuration:
    """Tests for media_duration function."""

    @patch("splitscribe.audio.probe_duration_seconds")
    def test_probed(self, mock_probe):
        """Test a probed duration."""
        mock_probe.return_value = 12.5
        assert media_duration("talk.mp3") == 12.5

    @patch("splitscribe.audio.probe_duration_seconds")
    def test_unknown(self, mock_probe):
        """Test that an unknown duration is 0.0."""
        mock_probe.return_value = None
        assert media_duration("talk.mp3") == 0.0
