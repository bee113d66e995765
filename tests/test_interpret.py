import pytest

from sheetgen.interpret import MusicInterpret, MusicIntInfo
from sheetgen.notation import (
    Clef,
    ExtNoteName,
    KeySignature,
    KeySignatureType,
    Note,
    NoteLength,
    NoteName,
    Octave,
    Pitch,
    Tempo,
    TimeSignature,
)
from sheetgen.scale import BasicScale, ScaleType


def notes_of(score):
    return [s for s in score.staves[0].symbols if isinstance(s, Note)]


def test_default_info():
    info = MusicIntInfo()
    assert info.clef is Clef.TREBLE
    assert info.key_signature == KeySignature(
        ExtNoteName(NoteName.C), KeySignatureType.MAJ
    )
    assert info.first_note.pitch == Pitch.create(NoteName.C, Octave.O4)
    assert info.first_note.duration is NoteLength.L1
    assert info.time_signature == TimeSignature.common()
    assert info.tempo == Tempo()
    assert info.scale_type is ScaleType.BASIC


def test_header_symbols():
    info = MusicIntInfo()
    score = MusicInterpret(info).translate("")
    assert len(score.staves) == 1
    assert score.staves[0].symbols == [
        info.clef,
        info.key_signature,
        info.tempo,
        info.time_signature,
    ]


def test_note_count_matches_f_count():
    word = "F++++F--F++F"
    score = MusicInterpret().translate(word)
    assert len(notes_of(score)) == word.count("F")


def test_first_note_is_written_first():
    info = MusicIntInfo()
    (note,) = notes_of(MusicInterpret(info).translate("F"))
    assert note.pitch == info.first_note.pitch
    assert note.duration is info.first_note.duration


def test_plus_moves_up_the_scale():
    first, second = notes_of(MusicInterpret().translate("F+F"))
    assert second.pitch == Pitch.create(NoteName.D, Octave.O4)
    assert BasicScale(MusicIntInfo().key_signature).prev(second.pitch) == first.pitch


def test_minus_moves_down_the_scale():
    _, second = notes_of(MusicInterpret().translate("F-F"))
    assert second.pitch == Pitch.create(NoteName.B, Octave.O3)


def test_plus_then_minus_returns_to_start():
    first, second = notes_of(MusicInterpret().translate("F+-F"))
    assert first.pitch == second.pitch


def test_d_halves_duration():
    notes = notes_of(MusicInterpret().translate("FdFdF"))
    durations = [n.duration for n in notes]
    assert durations[1] == durations[0].half()
    assert durations[2] == durations[1].half()


def test_brackets_restore_saved_note():
    first, second, third = notes_of(MusicInterpret().translate("F[+dF]F"))
    assert third.pitch == first.pitch
    assert third.duration is first.duration
    assert second.pitch != first.pitch


def test_translate_does_not_mutate_info():
    info = MusicIntInfo()
    MusicInterpret(info).translate("++dd")
    assert info.first_note.pitch == Pitch.create(NoteName.C, Octave.O4)
    assert info.first_note.duration is NoteLength.L1


def test_written_notes_are_independent_copies():
    first, second = notes_of(MusicInterpret().translate("FF"))
    first.pitch.move_tone_up()
    assert second.pitch == MusicIntInfo().first_note.pitch


def test_unbalanced_closing_bracket_raises():
    with pytest.raises(ValueError):
        MusicInterpret().translate("F]")


@pytest.mark.parametrize("word", ["x", "F F", "F*F"])
def test_invalid_symbol_raises(word):
    with pytest.raises(ValueError):
        MusicInterpret().translate(word)