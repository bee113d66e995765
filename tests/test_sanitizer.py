import pytest

from sheetgen.errors import (
    FoundNoteWithoutKeyError,
    MissingTimeSignatureError,
    StaveKeyNotFoundError,
)
from sheetgen.lily import (
    LilyBreak,
    LilyClef,
    LilyNote,
    LilyNoteLength,
    LilyNoteName,
    Lilypond,
    LilyStave,
    LilyTime,
    OctaveRelative,
)
from sheetgen.notation import (
    Accidental,
    Chord,
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
)
from sheetgen.sanitizer import (
    LilySanitizer,
    ScoreSanitizer,
    preferred_accidental,
    to_pref_synonym,
)

SHARP = Accidental.SHARP
FLAT = Accidental.FLAT
B, C, D, E, F, G, A = (
    NoteName.B,
    NoteName.C,
    NoteName.D,
    NoteName.E,
    NoteName.F,
    NoteName.G,
    NoteName.A,
)
O0, O3, O4, O5 = Octave.O0, Octave.O3, Octave.O4, Octave.O5


def spelled(pitch):
    return (pitch.note_name, pitch.octave, pitch.accidental)


def key(name, accidental=None, kind=KeySignatureType.MAJ):
    return KeySignature(ExtNoteName(name, accidental), kind)


def converted(pitch, prefer):
    to_pref_synonym(pitch, prefer)
    return spelled(pitch)


def test_prefer_none():
    assert converted(Pitch.create(B, O4, SHARP), None) == (C, O5, None)
    assert converted(Pitch.create(C, O4, SHARP), None) == (C, O4, SHARP)
    assert converted(Pitch.create(E, O4, SHARP), None) == (F, O4, None)
    assert converted(Pitch.create(C, O5, FLAT), None) == (B, O4, None)
    assert converted(Pitch.create(E, O4, FLAT), None) == (E, O4, FLAT)
    assert converted(Pitch.create(F, O4, FLAT), None) == (E, O4, None)


def test_prefer_sharp():
    assert converted(Pitch.create(C, O4, FLAT), SHARP) == (B, O3, None)
    assert converted(Pitch.create(D, O4, FLAT), SHARP) == (C, O4, SHARP)
    assert converted(Pitch.create(F, O4, FLAT), SHARP) == (E, O4, None)
    assert converted(Pitch.create(E, O4, None), SHARP) == (E, O4, None)


def test_prefer_flat():
    assert converted(Pitch.create(B, O4, SHARP), FLAT) == (C, O5, None)
    assert converted(Pitch.create(C, O4, SHARP), FLAT) == (D, O4, FLAT)
    assert converted(Pitch.create(E, O4, SHARP), FLAT) == (F, O4, None)
    assert converted(Pitch.create(F, O4, None), FLAT) == (F, O4, None)


def test_respelling_keeps_sounding_pitch():
    pitch = Pitch.create(G, O4, SHARP)
    original = pitch.copy()
    to_pref_synonym(pitch, FLAT)
    assert spelled(pitch) == (A, O4, FLAT)
    assert pitch == original


def test_prefer_sharp_below_lowest_octave_raises():
    with pytest.raises(ValueError):
        to_pref_synonym(Pitch.create(C, O0, FLAT), SHARP)


@pytest.mark.parametrize(
    "signature, expected",
    [
        (key(C), SHARP),
        (key(G), SHARP),
        (key(F, FLAT), SHARP),
        (key(F), FLAT),
        (key(B, FLAT), FLAT),
        (key(F, SHARP), FLAT),
        (key(A, None, KeySignatureType.MIN), None),
        (key(D, SHARP, KeySignatureType.MIN), None),
    ],
)
def test_preferred_accidental(signature, expected):
    assert preferred_accidental(signature) is expected


def test_score_sanitizer_respells_notes_to_flats():
    note = Note(Pitch.create(A, O4, SHARP), NoteLength.L4)
    score = Score(staves=[Stave([Clef.TREBLE, key(F), note])])
    ScoreSanitizer().sanitize(score)
    assert spelled(score.staves[0].symbols[2].pitch) == (B, O4, FLAT)


def test_score_sanitizer_keeps_natural_in_sharp_key():
    note = Note(Pitch.create(F, O4, None), NoteLength.L4)
    flat_note = Note(Pitch.create(D, O4, FLAT), NoteLength.L4)
    score = Score(staves=[Stave([key(G), note, flat_note])])
    ScoreSanitizer().sanitize(score)
    assert spelled(score.staves[0].symbols[1].pitch) == (F, O4, None)
    assert spelled(score.staves[0].symbols[2].pitch) == (C, O4, SHARP)


def test_score_sanitizer_follows_key_changes_and_chords():
    first = Note(Pitch.create(G, O4, FLAT), NoteLength.L4)
    chord = Chord(
        [Pitch.create(C, O4, SHARP), Pitch.create(E, O4, SHARP)], NoteLength.L2
    )
    stave = Stave([key(D), first, key(E, FLAT), chord])
    ScoreSanitizer().sanitize(Score(staves=[stave]))
    assert spelled(first.pitch) == (F, O4, SHARP)
    assert [spelled(p) for p in chord.pitches] == [(D, O4, FLAT), (F, O4, None)]


def test_score_sanitizer_minor_key_uses_natural_synonyms():
    note = Note(Pitch.create(E, O4, SHARP), NoteLength.L4)
    sharp = Note(Pitch.create(C, O4, SHARP), NoteLength.L4)
    stave = Stave([key(A, None, KeySignatureType.MIN), note, sharp])
    ScoreSanitizer().sanitize(Score(staves=[stave]))
    assert spelled(note.pitch) == (F, O4, None)
    assert spelled(sharp.pitch) == (C, O4, SHARP)


def test_score_sanitizer_note_before_key():
    note = Note(Pitch.create(C, O4), NoteLength.L4)
    score = Score(staves=[Stave([Clef.TREBLE, note, key(C)])])
    with pytest.raises(FoundNoteWithoutKeyError):
        ScoreSanitizer().sanitize(score)


def test_score_sanitizer_missing_key():
    score = Score(staves=[Stave([Clef.BASS])])
    with pytest.raises(StaveKeyNotFoundError):
        ScoreSanitizer().sanitize(score)


def test_score_sanitized_returns_copy():
    note = Note(Pitch.create(A, O4, SHARP), NoteLength.L4)
    score = Score(staves=[Stave([key(F), note])])
    result = score.sanitized()
    assert spelled(result.staves[0].symbols[1].pitch) == (B, O4, FLAT)
    assert spelled(note.pitch) == (A, O4, SHARP)


def quarter():
    return LilyNote(LilyNoteName.C, OctaveRelative.up(1), LilyNoteLength.L4)


def test_lily_sanitizer_defaults():
    sanitizer = LilySanitizer()
    assert (sanitizer.max_line_notes, sanitizer.max_line_bars) == (45, 7)


def test_lily_sanitizer_breaks_after_bars():
    notes = [quarter() for _ in range(10)]
    time = LilyTime.common()
    stave = LilyStave([LilyClef.TREBLE, time, *notes])
    LilySanitizer(max_line_notes=45, max_line_bars=1).sanitize(
        Lilypond(staves=[stave])
    )
    expected = [
        LilyClef.TREBLE,
        time,
        *notes[:4],
        LilyBreak(),
        *notes[4:8],
        LilyBreak(),
        *notes[8:],
    ]
    assert stave.symbols == expected


def test_lily_sanitizer_breaks_after_notes():
    notes = [quarter() for _ in range(7)]
    time = LilyTime(3, LilyNoteLength.L8)
    stave = LilyStave([time, *notes])
    LilySanitizer(max_line_notes=3, max_line_bars=30).sanitize(
        Lilypond(staves=[stave])
    )
    expected = [
        time,
        *notes[:3],
        LilyBreak(),
        *notes[3:6],
        LilyBreak(),
        notes[6],
    ]
    assert stave.symbols == expected


def test_lily_sanitizer_renders_break():
    notes = [quarter() for _ in range(4)]
    lily = Lilypond(staves=[LilyStave([LilyTime.common(), *notes])])
    result = lily.sanitized_with(LilySanitizer(max_line_bars=1))
    assert str(result.staves[0]).strip() == (
        "\\new Staff { \\time 4/4 c'4 c'4 c'4 c'4 \\break }"
    )
    assert len(lily.staves[0].symbols) == 5


def test_lily_sanitizer_missing_time():
    lily = Lilypond(staves=[LilyStave([LilyClef.BASS, quarter()])])
    with pytest.raises(MissingTimeSignatureError):
        LilySanitizer().sanitize(lily)