import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from sheetgen.errors import ArgumentError, LilyError
from sheetgen.interpret import MusicIntInfo
from sheetgen.lily import LilyBreak, LilyNote
from sheetgen.pipeline import (
    Arguments,
    RefreshOutput,
    RefreshState,
    build_lilypond,
    refresh,
    start_refresh,
)
from sheetgen.sanitizer import LilySanitizer
from sheetgen.tools import DIR_NAME


def _fake_run(lily_code=0):
    def run(cmd, cwd=None, **kwargs):
        work = Path(cwd)
        if cmd[0] == "lilypond":
            if lily_code != 0:
                return subprocess.CompletedProcess(cmd, lily_code, b"", b"bad")
            (work / "score-page2.png").write_bytes(b"p2")
            (work / "score-page1.png").write_bytes(b"p1")
            (work / "score.preview.png").write_bytes(b"pre")
            (work / "score.midi").write_bytes(b"midi")
        else:
            (work / "score.wav").write_bytes(b"wav")
        return subprocess.CompletedProcess(cmd, 0, b"", b"")

    return run


def test_arguments_from_argv():
    args = Arguments.from_argv(["prog", "font.sf2"])
    assert args.sound_font_path == Path("font.sf2")


@pytest.mark.parametrize("argv", [["prog"], ["prog", "a", "b"]])
def test_arguments_wrong_count(argv):
    with pytest.raises(ArgumentError):
        Arguments.from_argv(argv)


def test_refresh_state_text(tmp_path):
    states = []
    with patch("platformdirs.user_cache_dir", return_value=str(tmp_path)), patch(
        "subprocess.run", side_effect=_fake_run()
    ):
        refresh("\\score{}", Path("font.sf2"), states.append)

    assert [str(state) for state in states] == [
        "Lilypond compilation",
        "Loading generated pages",
        "Converting MIDI to audio",
        "Loading audio",
        "Done",
    ]
    assert str(RefreshState.BEGIN) == ""


def test_build_lilypond_contains_notes():
    text = str(build_lilypond("F+F", MusicIntInfo()))
    assert "\\clef treble" in text
    assert "\\key c \\major" in text
    assert "c'1 d'1" in text


def test_build_lilypond_applies_sanitizer():
    lily = build_lilypond("FFFF", MusicIntInfo(), LilySanitizer(max_line_notes=2))
    symbols = lily.staves[0].symbols
    notes = [s for s in symbols if isinstance(s, LilyNote)]
    breaks = [s for s in symbols if isinstance(s, LilyBreak)]
    assert len(notes) == 4
    assert len(breaks) == len(notes) // 2


def test_build_lilypond_invalid_symbol():
    with pytest.raises(ValueError):
        build_lilypond("FX", MusicIntInfo())


def test_refresh_runs_all_stages(tmp_path):
    states = []
    with patch("platformdirs.user_cache_dir", return_value=str(tmp_path)), patch(
        "subprocess.run", side_effect=_fake_run()
    ):
        out = refresh("\\score{}", Path("font.sf2"), states.append)

    work = tmp_path / DIR_NAME
    assert isinstance(out, RefreshOutput)
    assert states == [
        RefreshState.LILY_COMPILATION,
        RefreshState.TEXTURE_LOADING,
        RefreshState.FLUIDSYNTH,
        RefreshState.AUDIO_LOADING,
        RefreshState.DONE,
    ]
    assert out.pages_data == [b"p1", b"p2"]
    assert out.audio_data == b"wav"
    assert out.score_image_paths == [work / "score-page1.png", work / "score-page2.png"]
    assert out.score_audio_path == work / "score.wav"


def test_start_refresh_returns_future(tmp_path):
    states = []
    with patch("platformdirs.user_cache_dir", return_value=str(tmp_path)), patch(
        "subprocess.run", side_effect=_fake_run()
    ):
        future = start_refresh("\\score{}", Path("font.sf2"), states.append)
        out = future.result(timeout=10)
    assert states[0] == RefreshState.BEGIN
    assert states[-1] == RefreshState.DONE
    assert out.audio_data == b"wav"


def test_start_refresh_propagates_errors(tmp_path):
    with patch("platformdirs.user_cache_dir", return_value=str(tmp_path)), patch(
        "subprocess.run", side_effect=_fake_run(lily_code=1)
    ):
        future = start_refresh("\\score{}", Path("font.sf2"))
        with pytest.raises(LilyError):
            future.result(timeout=10)