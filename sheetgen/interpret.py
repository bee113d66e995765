"""Interpretation of L-system words as music."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from .notation import (
    Clef,
    ExtNoteName,
    KeySignature,
    KeySignatureType,
    Note,
    NoteLength,
    NoteName,
    Octave,
    Pitch,
    Score,
    Stave,
    Tempo,
    TimeSignature,
)
from .scale import ScaleType, make_scale


def _default_key() -> KeySignature:
    return KeySignature(ExtNoteName(NoteName.C), KeySignatureType.MAJ)


def _default_first_note() -> Note:
    return Note(Pitch.create(NoteName.C, Octave.O4), NoteLength.L1)


@dataclass
class MusicIntInfo:
    """Initial settings for translating an L-system word into a score."""

    clef: Clef = Clef.TREBLE
    key_signature: KeySignature = field(default_factory=_default_key)
    first_note: Note = field(default_factory=_default_first_note)
    time_signature: TimeSignature = field(default_factory=TimeSignature.common)
    tempo: Tempo = field(default_factory=Tempo)
    scale_type: ScaleType = ScaleType.BASIC


@dataclass
class MusicInterpret:
    """Translates words over ``F + - d [ ]`` into a single-stave score.

    ``F`` writes the current note, ``+`` and ``-`` move it one step of the
    scale, ``d`` halves its length, ``[`` saves it and ``]`` restores it.
    """

    int_info: MusicIntInfo = field(default_factory=MusicIntInfo)

    def translate(self, text: str) -> Score:
        """Build the score described by ``text``."""
        info = self.int_info
        scale = make_scale(info.scale_type, info.key_signature)
        note = info.first_note.copy()
        notes: list[Note] = []
        stack: list[Note] = []

        for symbol in text:
            match symbol:
                case "F":
                    notes.append(note.copy())
                case "+":
                    scale.advance(note.pitch)
                case "-":
                    scale.recede(note.pitch)
                case "d":
                    note.duration = note.duration.halved()
                case "[":
                    stack.append(note.copy())
                case "]":
                    if not stack:
                        raise ValueError("Unbalanced ']': no saved state to restore")
                    note = stack.pop()
                case _:
                    raise ValueError(f"Invalid symbol: {symbol!r}")

        header = [
            info.clef,
            info.key_signature,
            replace(info.tempo),
            replace(info.time_signature),
        ]
        return Score(staves=[Stave(header + notes)])