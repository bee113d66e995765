"""Running the external engraver and synthesizer that render a score."""

from __future__ import annotations

import os
import re
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import platformdirs

from .errors import FluidsynthError, LilyError, PathError

DIR_NAME = "music_sheet_gen"
"""Name of the directory the application keeps its files in."""

SAMPLE_RATE = 44100
"""Sample rate of the rendered audio."""

_PAGE_NUMBER = re.compile(r".*?(\d+)\.png")

PathLike = Union[str, "os.PathLike[str]"]


@dataclass(frozen=True)
class LilyOutput:
    """Files produced by a lilypond run."""

    pages: list[Path]
    preview_path: Path
    midi_path: Path


@dataclass(frozen=True)
class FluidsynthOutput:
    """Files produced by a fluidsynth run."""

    wav_path: Path


def cache_dir() -> Path:
    """The directory rendered files are written to."""
    return Path(platformdirs.user_cache_dir()) / DIR_NAME


def page_sort_key(path: PathLike) -> tuple[int, int]:
    """Sort key putting non-page images first, then pages by their number."""
    name = Path(path).name
    if "page" not in name:
        return (0, 0)
    match = _PAGE_NUMBER.fullmatch(name)
    if match is None:
        return (2, 0)
    return (1, int(match.group(1)))


def _failure_reason(code: int, label: str, output: bytes) -> str:
    text = output.decode("utf-8", errors="replace")
    return f"Exit code: {code}, {label}: \n{text}"


def lilypond(
    lily_str: str, filename: str, directory: Optional[PathLike] = None
) -> LilyOutput:
    """Engrave ``lily_str`` into PNG pages, a preview image and a MIDI file.

    ``directory`` (the cache directory by default) is emptied first.
    """
    work_dir = Path(directory) if directory is not None else cache_dir()
    if work_dir.exists():
        shutil.rmtree(work_dir)
    work_dir.mkdir(parents=True)

    input_path = work_dir / "input.ily"
    preview_path = work_dir / f"{filename}.preview.png"
    midi_path = work_dir / f"{filename}.midi"

    try:
        input_path.write_text(lily_str, encoding="utf-8")
    except OSError as exc:
        raise PathError(input_path, exc) from exc

    result = subprocess.run(
        ["lilypond", "--png", "-dpreview", "-o", filename, str(input_path)],
        cwd=work_dir,
        capture_output=True,
    )
    if result.returncode != 0:
        raise LilyError(_failure_reason(result.returncode, "Stderr", result.stderr))

    pages = sorted(
        (
            entry
            for entry in work_dir.iterdir()
            if entry.name.startswith(filename)
            and entry.name.endswith(".png")
            and "preview" not in entry.name
        ),
        key=page_sort_key,
    )

    if not midi_path.exists() or not preview_path.exists() or not pages:
        raise LilyError("Not all files were generated.")

    return LilyOutput(pages=pages, preview_path=preview_path, midi_path=midi_path)


def fluidsynth(
    sf_path: PathLike,
    midi_path: PathLike,
    filename: str,
    directory: Optional[PathLike] = None,
) -> FluidsynthOutput:
    """Synthesize ``midi_path`` with the sound font ``sf_path`` into a WAV file."""
    work_dir = Path(directory) if directory is not None else cache_dir()
    work_dir.mkdir(parents=True, exist_ok=True)

    wav_name = f"{filename}.wav"
    wav_path = work_dir / wav_name

    result = subprocess.run(
        [
            "fluidsynth",
            "-ni",
            os.fspath(sf_path),
            os.fspath(midi_path),
            "-F",
            wav_name,
            "-r",
            str(SAMPLE_RATE),
        ],
        cwd=work_dir,
        capture_output=True,
    )
    if result.returncode != 0:
        raise LilyError(_failure_reason(result.returncode, "Stdout", result.stdout))

    if not wav_path.exists():
        raise FluidsynthError("WAV file was not generated.")

    return FluidsynthOutput(wav_path=wav_path)