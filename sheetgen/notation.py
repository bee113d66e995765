"""The stored structure of a score: pitches, notes, staves and scores."""

from __future__ import annotations

import copy as _copy
import enum
import logging
from dataclasses import dataclass, field, replace
from typing import Optional, Union

log = logging.getLogger(__name__)

TONE_COUNT = 7
"""Number of tones in one octave."""

HALFTONE_COUNT = 12
"""Number of halftones in one octave."""


class Clef(enum.Enum):
    TREBLE = "treble"
    BASS = "bass"


class KeySignatureType(enum.Enum):
    MAJ = "maj"
    MIN = "min"


class Accidental(enum.Enum):
    SHARP = "sharp"
    FLAT = "flat"


_HALFTONES = (0, 2, 4, 5, 7, 9, 11)


class NoteName(enum.Enum):
    C = 0
    D = 1
    E = 2
    F = 3
    G = 4
    A = 5
    B = 6

    def next(self) -> NoteName:
        """The following note name, wrapping from B to C."""
        return NoteName((self.value + 1) % TONE_COUNT)

    def prev(self) -> NoteName:
        """The preceding note name, wrapping from C to B."""
        return NoteName((self.value - 1) % TONE_COUNT)

    def diatonic_value(self) -> int:
        """Position of the note within the octave, 0 for C to 6 for B."""
        return self.value

    def halftone_value(self) -> int:
        """Halftones above C of the natural note."""
        return _HALFTONES[self.value]


class Octave(enum.Enum):
    O0 = 0
    O1 = 1
    O2 = 2
    O3 = 3
    O4 = 4
    O5 = 5
    O6 = 6
    O7 = 7
    O8 = 8
    O9 = 9

    def try_next(self) -> Optional[Octave]:
        """The octave above, or None for the highest one."""
        return None if self is Octave.O9 else Octave(self.value + 1)

    def try_prev(self) -> Optional[Octave]:
        """The octave below, or None for the lowest one."""
        return None if self is Octave.O0 else Octave(self.value - 1)


class NoteLength(enum.Enum):
    L1 = 1
    L2 = 2
    L4 = 4
    L8 = 8
    L16 = 16
    L32 = 32
    L64 = 64
    L128 = 128

    def half(self) -> Optional[NoteLength]:
        """The length half as long, or None for the shortest one."""
        return None if self is NoteLength.L128 else NoteLength(self.value * 2)

    def halved(self) -> NoteLength:
        """The length half as long; the shortest length stays as it is."""
        shorter = self.half()
        if shorter is None:
            log.warning("Trying to halve 1/128 note. Ignoring.")
            return self
        return shorter


@dataclass(frozen=True)
class ExtNoteName:
    note_name: NoteName
    accidental: Optional[Accidental] = None

    def halftone_value(self) -> int:
        """Halftone within the octave after applying the accidental."""
        value = self.note_name.halftone_value()
        if self.accidental is Accidental.SHARP:
            value += 1
        elif self.accidental is Accidental.FLAT:
            value -= 1
        return value % HALFTONE_COUNT


@dataclass(frozen=True)
class KeySignature:
    ext: ExtNoteName
    signature_type: KeySignatureType


@dataclass
class TimeSignature:
    beat_count: int
    single_beat_note: NoteLength

    @classmethod
    def common(cls) -> TimeSignature:
        """Common time, 4/4."""
        return cls(4, NoteLength.L4)


@dataclass
class Tempo:
    note_length: NoteLength = NoteLength.L4
    speed: int = 100


@dataclass(eq=False)
class Pitch:
    ext: ExtNoteName
    octave: Octave

    @classmethod
    def create(
        cls,
        note_name: NoteName,
        octave: Octave,
        accidental: Optional[Accidental] = None,
    ) -> Pitch:
        return cls(ExtNoteName(note_name, accidental), octave)

    @property
    def note_name(self) -> NoteName:
        return self.ext.note_name

    @property
    def accidental(self) -> Optional[Accidental]:
        return self.ext.accidental

    def halftone_value(self) -> int:
        """Halftone within the octave after applying the accidental."""
        return self.ext.halftone_value()

    def real_octave(self) -> Octave:
        """Octave the sounding pitch lies in, taking accidentals into account."""
        if self.note_name is NoteName.C and self.accidental is Accidental.FLAT:
            octave = self.octave.try_prev()
        elif self.note_name is NoteName.B and self.accidental is Accidental.SHARP:
            octave = self.octave.try_next()
        else:
            return self.octave
        if octave is None:
            raise ValueError(f"{self!r} lies outside the available octaves")
        return octave

    def move_halftone_up(self) -> None:
        """Raise the pitch by one halftone."""
        accidental = self.accidental
        if accidental is Accidental.SHARP:
            if self.note_name is NoteName.B:
                octave = self.octave.try_next()
                if octave is None:
                    log.warning("Cannot move %r halftone up.", self)
                else:
                    self.octave = octave
            elif self.note_name is not NoteName.E:
                accidental = None
            self.ext = ExtNoteName(self.note_name.next(), accidental)
        elif accidental is Accidental.FLAT:
            self.ext = replace(self.ext, accidental=None)
        else:
            self.ext = replace(self.ext, accidental=Accidental.SHARP)

    def move_halftone_down(self) -> None:
        """Lower the pitch by one halftone."""
        accidental = self.accidental
        if accidental is Accidental.SHARP:
            self.ext = replace(self.ext, accidental=None)
        elif accidental is Accidental.FLAT:
            if self.note_name is NoteName.C:
                octave = self.octave.try_prev()
                if octave is None:
                    log.warning("Cannot move %r halftone down.", self)
                else:
                    self.octave = octave
            elif self.note_name is not NoteName.F:
                accidental = None
            self.ext = ExtNoteName(self.note_name.prev(), accidental)
        else:
            self.ext = replace(self.ext, accidental=Accidental.FLAT)

    def move_tone_up(self) -> None:
        """Raise the pitch by a whole tone."""
        self.move_halftone_up()
        self.move_halftone_up()

    def move_tone_down(self) -> None:
        """Lower the pitch by a whole tone."""
        self.move_halftone_down()
        self.move_halftone_down()

    def copy(self) -> Pitch:
        return Pitch(self.ext, self.octave)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Pitch):
            return NotImplemented
        return (
            self.real_octave() == other.real_octave()
            and self.halftone_value() == other.halftone_value()
        )

    __hash__ = None  # type: ignore[assignment]


@dataclass
class Note:
    pitch: Pitch
    duration: NoteLength

    def copy(self) -> Note:
        return Note(self.pitch.copy(), self.duration)


@dataclass
class Chord:
    """Notes of the same length sounding together."""

    pitches: list[Pitch]
    duration: NoteLength


@dataclass
class Rest:
    length: NoteLength


Symbol = Union[Clef, TimeSignature, KeySignature, Chord, Note, Rest, Tempo]


@dataclass
class ScoreInfo:
    name: Optional[str] = None
    author: Optional[str] = None
    transcriber: Optional[str] = None


@dataclass
class Stave:
    symbols: list[Symbol] = field(default_factory=list)


@dataclass
class Score:
    staves: list[Stave] = field(default_factory=list)
    info: ScoreInfo = field(default_factory=ScoreInfo)
    tempo: int = 90

    def sanitized(self) -> Score:
        """Return a copy with accidentals spelled to suit each stave's key."""
        from .sanitizer import ScoreSanitizer

        result = _copy.deepcopy(self)
        ScoreSanitizer().sanitize(result)
        return result