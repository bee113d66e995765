"""LilyPond representation of a score and its textual rendering."""

from __future__ import annotations

import copy as _copy
import enum
from dataclasses import dataclass, field
from typing import Protocol, Union

from .notation import (
    Accidental,
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


class LilyClef(enum.Enum):
    TREBLE = "treble"
    BASS = "bass"

    @classmethod
    def from_clef(cls, clef: Clef) -> LilyClef:
        return cls.TREBLE if clef is Clef.TREBLE else cls.BASS

    def __str__(self) -> str:
        return f"\\clef {self.value}"


class LilyNoteName(enum.Enum):
    """Note names in the German LilyPond language; the value is the spelling."""

    CES = "ces"
    C = "c"
    CIS = "cis"
    DES = "des"
    D = "d"
    DIS = "dis"
    ES = "es"
    E = "e"
    EIS = "eis"
    FES = "fes"
    F = "f"
    FIS = "fis"
    GES = "ges"
    G = "g"
    GIS = "gis"
    AS = "as"
    A = "a"
    AIS = "ais"
    HES = "b"
    H = "h"
    HIS = "his"

    @classmethod
    def from_ext(cls, ext: ExtNoteName) -> LilyNoteName:
        natural, sharp, flat = _NAME_TABLE[ext.note_name]
        if ext.accidental is Accidental.SHARP:
            return sharp
        if ext.accidental is Accidental.FLAT:
            return flat
        return natural

    @classmethod
    def from_pitch(cls, pitch: Pitch) -> LilyNoteName:
        return cls.from_ext(pitch.ext)

    def __str__(self) -> str:
        return self.value


_NAME_TABLE = {
    NoteName.C: (LilyNoteName.C, LilyNoteName.CIS, LilyNoteName.CES),
    NoteName.D: (LilyNoteName.D, LilyNoteName.DIS, LilyNoteName.DES),
    NoteName.E: (LilyNoteName.E, LilyNoteName.EIS, LilyNoteName.ES),
    NoteName.F: (LilyNoteName.F, LilyNoteName.FIS, LilyNoteName.FES),
    NoteName.G: (LilyNoteName.G, LilyNoteName.GIS, LilyNoteName.GES),
    NoteName.A: (LilyNoteName.A, LilyNoteName.AIS, LilyNoteName.AS),
    NoteName.B: (LilyNoteName.H, LilyNoteName.HIS, LilyNoteName.HES),
}


class LilyKeyType(enum.Enum):
    MAJOR = "\\major"
    MINOR = "\\minor"

    @classmethod
    def from_signature_type(cls, signature_type: KeySignatureType) -> LilyKeyType:
        return cls.MAJOR if signature_type is KeySignatureType.MAJ else cls.MINOR

    def __str__(self) -> str:
        return self.value


class LilyNoteLength(enum.Enum):
    L1 = 1
    L2 = 2
    L4 = 4
    L8 = 8
    L16 = 16
    L32 = 32
    L64 = 64
    L128 = 128

    @classmethod
    def from_note_length(cls, length: NoteLength) -> LilyNoteLength:
        return cls(length.value)

    def value_128(self) -> int:
        """Length measured in 1/128 notes."""
        return 128 // self.value

    def __str__(self) -> str:
        return str(self.value)


@dataclass
class LilyTime:
    nom: int
    denom: LilyNoteLength

    @classmethod
    def common(cls) -> LilyTime:
        return cls(4, LilyNoteLength.L4)

    @classmethod
    def from_time_signature(cls, time: TimeSignature) -> LilyTime:
        return cls(
            time.beat_count, LilyNoteLength.from_note_length(time.single_beat_note)
        )

    def __str__(self) -> str:
        return f"\\time {self.nom}/{self.denom}"


@dataclass
class LilyTempo:
    note_length: LilyNoteLength
    speed: int

    @classmethod
    def from_tempo(cls, tempo: Tempo) -> LilyTempo:
        return cls(LilyNoteLength.from_note_length(tempo.note_length), tempo.speed)

    def __str__(self) -> str:
        return f"\\tempo {self.note_length} = {self.speed}"


@dataclass
class LilyKey:
    note: LilyNoteName
    key_type: LilyKeyType

    @classmethod
    def from_key_signature(cls, key: KeySignature) -> LilyKey:
        return cls(
            LilyNoteName.from_ext(key.ext),
            LilyKeyType.from_signature_type(key.signature_type),
        )

    def __str__(self) -> str:
        return f"\\key {self.note} {self.key_type}"


@dataclass(frozen=True)
class OctaveRelative:
    """Octave marks relative to LilyPond's small octave."""

    times: int
    upward: bool = True

    @classmethod
    def up(cls, times: int) -> OctaveRelative:
        return cls(times, True)

    @classmethod
    def down(cls, times: int) -> OctaveRelative:
        return cls(times, False)

    @classmethod
    def from_octave(cls, octave: Octave) -> OctaveRelative:
        offset = octave.value - 3
        return cls.up(offset) if offset >= 0 else cls.down(-offset)

    def __str__(self) -> str:
        return ("'" if self.upward else ",") * self.times


@dataclass
class LilyNote:
    note_name: LilyNoteName
    octave_relative: OctaveRelative
    length: LilyNoteLength

    @classmethod
    def from_note(cls, note: Note) -> LilyNote:
        return cls(
            LilyNoteName.from_pitch(note.pitch),
            OctaveRelative.from_octave(note.pitch.octave),
            LilyNoteLength.from_note_length(note.duration),
        )

    def __str__(self) -> str:
        return f"{self.note_name}{self.octave_relative}{self.length}"


@dataclass(frozen=True)
class LilyBreak:
    """A forced line break."""

    def __str__(self) -> str:
        return "\\break"


LilySymbol = Union[LilyClef, LilyKey, LilyTime, LilyNote, LilyTempo, LilyBreak]


def lily_symbol(symbol: object) -> LilySymbol:
    """Convert a notation symbol into its LilyPond counterpart."""
    if isinstance(symbol, Clef):
        return LilyClef.from_clef(symbol)
    if isinstance(symbol, TimeSignature):
        return LilyTime.from_time_signature(symbol)
    if isinstance(symbol, KeySignature):
        return LilyKey.from_key_signature(symbol)
    if isinstance(symbol, Note):
        return LilyNote.from_note(symbol)
    if isinstance(symbol, Tempo):
        return LilyTempo.from_tempo(symbol)
    raise ValueError(f"Invalid symbol for conversion: {symbol!r}")


@dataclass
class LilyStave:
    symbols: list[LilySymbol] = field(default_factory=list)

    @classmethod
    def from_stave(cls, stave: Stave) -> LilyStave:
        return cls([lily_symbol(s) for s in stave.symbols])

    def __str__(self) -> str:
        body = " ".join(str(s) for s in self.symbols)
        return f"\n\\new Staff {{ {body} }}\n"


class _Sanitizer(Protocol):
    def sanitize(self, score: Lilypond) -> None: ...


@dataclass
class Lilypond:
    version: str = "2.25.20"
    language: str = "deutsch"
    staves: list[LilyStave] = field(default_factory=list)

    @classmethod
    def from_score(cls, score: Score) -> Lilypond:
        return cls(staves=[LilyStave.from_stave(s) for s in score.staves])

    def sanitized_with(self, sanitizer: _Sanitizer) -> Lilypond:
        """Return a copy processed by ``sanitizer``."""
        result = _copy.deepcopy(self)
        sanitizer.sanitize(result)
        return result

    def __str__(self) -> str:
        staves = "".join(str(s) for s in self.staves)
        return (
            f'\\version "{self.version}"\n\\language "{self.language}"\n'
            f"\\score{{{staves}\\layout{{}}\\midi{{}}}}"
        )