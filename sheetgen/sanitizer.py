"""Sanitizers that tidy up scores before they are rendered."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .errors import (
    FoundNoteWithoutKeyError,
    MissingTimeSignatureError,
    StaveKeyNotFoundError,
)
from .lily import LilyBreak, LilyNote, Lilypond, LilyStave, LilySymbol, LilyTime
from .notation import (
    Accidental,
    Chord,
    ExtNoteName,
    KeySignature,
    KeySignatureType,
    Note,
    NoteName,
    Octave,
    Pitch,
    Score,
    Stave,
)

_SHARP = Accidental.SHARP
_FLAT = Accidental.FLAT


def _major(note_name: NoteName, accidental: Optional[Accidental] = None) -> KeySignature:
    return KeySignature(ExtNoteName(note_name, accidental), KeySignatureType.MAJ)


SHARP_KEYS: tuple[KeySignature, ...] = (
    _major(NoteName.C),
    _major(NoteName.G),
    _major(NoteName.D),
    _major(NoteName.A),
    _major(NoteName.E),
    _major(NoteName.B),
    _major(NoteName.E, _SHARP),
    _major(NoteName.B, _SHARP),
    _major(NoteName.F, _FLAT),
    _major(NoteName.C, _SHARP),
)
"""Keys whose notes are preferably spelled with sharps."""

FLAT_KEYS: tuple[KeySignature, ...] = (
    _major(NoteName.F),
    _major(NoteName.B, _FLAT),
    _major(NoteName.E, _FLAT),
    _major(NoteName.A, _FLAT),
    _major(NoteName.D, _FLAT),
    _major(NoteName.G, _FLAT),
    _major(NoteName.C, _FLAT),
    _major(NoteName.A, _SHARP),
    _major(NoteName.D, _SHARP),
    _major(NoteName.G, _SHARP),
    _major(NoteName.F, _SHARP),
)
"""Keys whose notes are preferably spelled with flats."""


def _octave_below(octave: Octave) -> Octave:
    lower = octave.try_prev()
    if lower is None:
        raise ValueError(f"There is no octave below {octave.name}")
    return lower


def _octave_above(octave: Octave) -> Octave:
    higher = octave.try_next()
    if higher is None:
        raise ValueError(f"There is no octave above {octave.name}")
    return higher


def _respell(
    pitch: Pitch, note_name: NoteName, octave: Octave, accidental: Optional[Accidental]
) -> None:
    pitch.ext = ExtNoteName(note_name, accidental)
    pitch.octave = octave


def to_pref_synonym(pitch: Pitch, prefer: Optional[Accidental]) -> None:
    """Respell ``pitch`` in place as an enharmonic synonym using ``prefer``.

    With no preference, only the naturally spelled synonyms of E#, Fb, B#
    and Cb are used.
    """
    name, accidental, octave = pitch.note_name, pitch.accidental, pitch.octave

    if prefer is _SHARP:
        if accidental is _FLAT:
            if name is NoteName.C:
                _respell(pitch, NoteName.B, _octave_below(octave), None)
            elif name is NoteName.F:
                _respell(pitch, NoteName.E, octave, None)
            else:
                _respell(pitch, name.prev(), octave, _SHARP)
    elif prefer is _FLAT:
        if accidental is _SHARP:
            if name is NoteName.B:
                _respell(pitch, NoteName.C, _octave_above(octave), None)
            elif name is NoteName.E:
                _respell(pitch, NoteName.F, octave, None)
            else:
                _respell(pitch, name.next(), octave, _FLAT)
    else:
        if name is NoteName.E and accidental is _SHARP:
            _respell(pitch, NoteName.F, octave, None)
        elif name is NoteName.F and accidental is _FLAT:
            _respell(pitch, NoteName.E, octave, None)
        elif name is NoteName.B and accidental is _SHARP:
            _respell(pitch, NoteName.C, _octave_above(octave), None)
        elif name is NoteName.C and accidental is _FLAT:
            _respell(pitch, NoteName.B, _octave_below(octave), None)


def preferred_accidental(key: KeySignature) -> Optional[Accidental]:
    """The accidental notes in ``key`` are preferably spelled with, if any."""
    if key in SHARP_KEYS:
        return _SHARP
    if key in FLAT_KEYS:
        return _FLAT
    return None


class ScoreSanitizer:
    """Spells accidentals of every note to match the key it is written in."""

    def sanitize(self, score: Score) -> None:
        """Sanitize every stave of ``score`` in place."""
        for stave in score.staves:
            self._sanitize_stave(stave)

    @staticmethod
    def _pitch_to_pref(prefer: Optional[Accidental], pitch: Pitch) -> None:
        name, accidental = pitch.note_name, pitch.accidental
        if prefer is _SHARP:
            if accidental is None and name in (NoteName.C, NoteName.F):
                return
            if accidental is _SHARP and name in (NoteName.B, NoteName.E):
                to_pref_synonym(pitch, None)
                return
        elif prefer is _FLAT:
            if accidental is None and name in (NoteName.E, NoteName.B):
                return
            if accidental is _FLAT and name in (NoteName.F, NoteName.C):
                to_pref_synonym(pitch, None)
                return
        to_pref_synonym(pitch, prefer)

    @staticmethod
    def _find_first_key(stave: Stave) -> tuple[KeySignature, int]:
        for index, symbol in enumerate(stave.symbols):
            if isinstance(symbol, (Note, Chord)):
                raise FoundNoteWithoutKeyError()
            if isinstance(symbol, KeySignature):
                return symbol, index
        raise StaveKeyNotFoundError()

    def _sanitize_stave(self, stave: Stave) -> None:
        key, key_pos = self._find_first_key(stave)
        prefer = preferred_accidental(key)

        for symbol in stave.symbols[key_pos + 1 :]:
            if isinstance(symbol, KeySignature):
                prefer = preferred_accidental(symbol)
            elif isinstance(symbol, Note):
                self._pitch_to_pref(prefer, symbol.pitch)
            elif isinstance(symbol, Chord):
                for pitch in symbol.pitches:
                    self._pitch_to_pref(prefer, pitch)


@dataclass
class LilySanitizer:
    """Inserts line breaks so that lines hold a bounded number of notes and bars."""

    max_line_notes: int = 45
    max_line_bars: int = 7

    def sanitize(self, score: Lilypond) -> None:
        """Sanitize every stave of ``score`` in place."""
        for stave in score.staves:
            self._sanitize_stave(stave)

    def _sanitize_stave(self, stave: LilyStave) -> None:
        time = next((s for s in stave.symbols if isinstance(s, LilyTime)), None)
        if time is None:
            raise MissingTimeSignatureError()

        total_bar_len = time.nom * time.denom.value_128()
        line_notes = 0
        line_bars = 0
        current_bar_len = 0
        symbols: list[LilySymbol] = []

        for symbol in stave.symbols:
            symbols.append(symbol)
            if not isinstance(symbol, LilyNote):
                continue

            line_notes += 1
            current_bar_len += symbol.length.value_128()
            if current_bar_len >= total_bar_len:
                line_bars += 1
                current_bar_len -= total_bar_len

            if line_notes >= self.max_line_notes or line_bars >= self.max_line_bars:
                symbols.append(LilyBreak())
                line_notes = 0
                line_bars = 0

        stave.symbols = symbols