"""Turning an L-system word into engraved pages and rendered audio."""

from __future__ import annotations

import enum
import sys
import threading
from concurrent.futures import Future
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Sequence

from .errors import ArgumentError, AudioError, PathError
from .interpret import MusicIntInfo, MusicInterpret
from .lily import Lilypond
from .sanitizer import LilySanitizer
from .tools import fluidsynth, lilypond

StateCallback = Callable[["RefreshState"], None]


@dataclass(frozen=True)
class Arguments:
    """Command line arguments of the application."""

    sound_font_path: Path

    @classmethod
    def from_argv(cls, argv: Optional[Sequence[str]] = None) -> Arguments:
        """Parse ``argv`` (program name first); exactly one argument is required."""
        args = list(sys.argv if argv is None else argv)
        if len(args) != 2:
            raise ArgumentError("Invalid number of arguments")
        return cls(sound_font_path=Path(args[1]))


class RefreshState(enum.Enum):
    """Stage of rendering a score."""

    BEGIN = ""
    LILY_COMPILATION = "Lilypond compilation"
    TEXTURE_LOADING = "Loading generated pages"
    FLUIDSYNTH = "Converting MIDI to audio"
    AUDIO_LOADING = "Loading audio"
    DONE = "Done"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class RefreshOutput:
    """Everything a finished render produced."""

    pages_data: list[bytes]
    audio_data: bytes
    score_image_paths: list[Path]
    score_audio_path: Path


def build_lilypond(
    word: str, int_info: MusicIntInfo, sanitizer: Optional[LilySanitizer] = None
) -> Lilypond:
    """Interpret ``word`` as music and produce a sanitized LilyPond score."""
    score = MusicInterpret(int_info).translate(word).sanitized()
    return Lilypond.from_score(score).sanitized_with(sanitizer or LilySanitizer())


def _read_page(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as exc:
        raise PathError(path, exc) from exc


def _read_audio(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as exc:
        raise AudioError(str(exc)) from exc


def refresh(
    lily_input: str, sf_path: Path, on_state: Optional[StateCallback] = None
) -> RefreshOutput:
    """Engrave ``lily_input``, synthesize its audio and load the results.

    ``on_state`` is told about every stage as it starts.
    """

    def report(state: RefreshState) -> None:
        if on_state is not None:
            on_state(state)

    report(RefreshState.LILY_COMPILATION)
    lily_output = lilypond(lily_input, "score")

    report(RefreshState.TEXTURE_LOADING)
    pages_data = [_read_page(page) for page in lily_output.pages]

    report(RefreshState.FLUIDSYNTH)
    fluid_output = fluidsynth(sf_path, lily_output.midi_path, "score")

    report(RefreshState.AUDIO_LOADING)
    audio_data = _read_audio(fluid_output.wav_path)

    report(RefreshState.DONE)
    return RefreshOutput(
        pages_data=pages_data,
        audio_data=audio_data,
        score_image_paths=list(lily_output.pages),
        score_audio_path=fluid_output.wav_path,
    )


def start_refresh(
    lily_input: str, sf_path: Path, on_state: Optional[StateCallback] = None
) -> "Future[RefreshOutput]":
    """Run :func:`refresh` on a background thread and return its future."""
    future: Future[RefreshOutput] = Future()
    if on_state is not None:
        on_state(RefreshState.BEGIN)

    def run() -> None:
        if not future.set_running_or_notify_cancel():
            return
        try:
            result = refresh(lily_input, sf_path, on_state)
        except Exception as exc:
            future.set_exception(exc)
        else:
            future.set_result(result)

    threading.Thread(target=run, name="refresh", daemon=True).start()
    return future