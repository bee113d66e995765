# sheetgen

Turn the words grown by a context-sensitive stochastic L-system into music:
a LilyPond score, engraved pages, a MIDI file and a rendered WAV.

## How it works

1. **Grammar** (`sheetgen.rules`). Rules are written as `left -> right % p`,
   where `p` is a fraction (`1/2`) or a decimal (`0.5`). White space in a rule
   is ignored. `CSSLRule.parse` reads one rule, and
   `CSSLRuleSet.from_str_rules` reads a list. A rule matches a piece of text
   when the text ends with the rule's left side. `CSSLRuleSet.select` picks
   one of the matching rules at random, weighted by `p`, or returns `None`.
2. **Rewriting** (`sheetgen.rewriter`, `sheetgen.lsystem`).
   `CSSLRewriter.rewrite` works through the word from right to left with a
   window of up to three characters. A selected rule replaces its whole left
   side. When no rule is selected, the last character of the window is kept.
   `CSSLSystem.step` rewrites the current word once, counts the step in
   `state.iter_num`, and returns the rules it used.
3. **Interpretation** (`sheetgen.interpret`). `MusicInterpret.translate`
   reads the word as instructions and builds a one-stave `Score`:

   | symbol | meaning                                |
   |--------|----------------------------------------|
   | `F`    | write the current note                 |
   | `+`    | move the note one step up the scale    |
   | `-`    | move the note one step down the scale  |
   | `d`    | halve the current note's length        |
   | `[`    | push the current note on a stack       |
   | `]`    | pop the note back from the stack       |

   Any other character, and a `]` with nothing on the stack, raises
   `ValueError`. The scale is `ScaleType.BASIC` (major or natural minor) or
   `ScaleType.JAZZ_LIKE`. The jazz-like scale accepts only major keys.
4. **Engraving** (`sheetgen.sanitizer`, `sheetgen.lily`, `sheetgen.tools`).
   `Score.sanitized` respells accidentals to suit the key.
   `Lilypond.from_score` converts the score, and `LilySanitizer` inserts
   `\break`s. `tools.lilypond` compiles the result with the `lilypond`
   program, and `tools.fluidsynth` renders the MIDI file to a 44100 Hz WAV
   with `fluidsynth` and a sound font.

## Requirements

- Python 3.10 or newer
- `lilypond` and `fluidsynth` on your `PATH`, needed only for engraving and
  audio
- a `.sf2` sound font, needed only for audio

## Example

```python
from sheetgen.lsystem import CSSLSystem
from sheetgen.interpret import MusicIntInfo
from sheetgen.sanitizer import LilySanitizer
from sheetgen.pipeline import build_lilypond, refresh

system = CSSLSystem.from_rules(
    "F++++F--F++F",
    [
        "F -> F % 1/2",
        "F -> FF % 1/6",
        "F -> F+F % 1/6",
        "F -> F-F % 1/6",
    ],
)

for _ in range(4):
    used = system.step()      # the rules applied in this step

print(system.state)           # "(iter 4): ..."

lily = build_lilypond(system.state.word, MusicIntInfo(), LilySanitizer())
print(lily)                   # LilyPond source text

# Compile the score and render audio with an installed sound font.
output = refresh(str(lily), "/path/to/soundfont.sf2", print)
print(output.score_image_paths, output.score_audio_path)
```

`MusicIntInfo` has these defaults:

- treble clef
- C major
- a first note of c' lasting a whole note
- 4/4 time
- a tempo of quarter note = 100

Change its fields before building the score. The default `LilySanitizer`
breaks a line after 45 notes or 7 bars. You can set `max_line_notes` and
`max_line_bars` to change this.

`refresh` calls its callback with each `RefreshState` as that stage starts.
`start_refresh` runs the same work on a background thread and returns a
`concurrent.futures.Future`.

Rendered files go to `tools.cache_dir()`. This is a `music_sheet_gen` folder
inside the user cache directory. `tools.lilypond` deletes that directory and
creates it again before each run, unless you pass a different `directory`.

## Editing grammars

`sheetgen.editing.RuleEditState` holds rule text, one rule per line, together
with a list of parsed rules. `RuleEditState.from_ruleset` fills both from a
`CSSLRuleSet`. `check()` raises an error in two cases:

- a non-empty line is not a valid rule
- for some context character (the last character of a left side), the
  probabilities of the held rules do not add up to 1 within 0.001

`rule_sums()` lists those sums per context character. `axiom_has_whitespace()`
reports whether an axiom holds white space, which rule parsing ignores.

`sheetgen.app.AppState` holds the grammar, the axiom, the interpretation
settings, the running L-system and the history of used rules.
`default_rules()` returns the grammar it starts with. `ControlPanel` offers
`step`, `back` and `retry_step`. `GrammarEdit.apply` checks an edited grammar
and installs it. `AppState.export()` packs the generated pages and audio into
a `.tar` archive.

## Errors

Rule parsing and score processing raise subclasses of
`sheetgen.errors.AppError`. For example:

- `CSSRuleParseError` and `CSSRuleParseNumError` for malformed rules
- `CSSRuleSumNotOneError` from `RuleEditState.check`
- `StaveKeyNotFoundError` and `FoundNoteWithoutKeyError` from
  `ScoreSanitizer`
- `MissingTimeSignatureError` from `LilySanitizer`
- `LilyError` when `lilypond` or `fluidsynth` exits with an error, or when
  `lilypond` leaves out expected files
- `FluidsynthError` when no WAV file was written
- `ArgumentError` from `Arguments.from_argv` when not given exactly one
  argument

Invalid interpretation input raises `ValueError`.

## What it does not do

This package is a library only:

- It installs no command. `Arguments.from_argv` parses a sound-font path, but
  nothing in the package starts from it.
- It has no graphical interface.
- It does not play audio. `RefreshOutput` holds the page images and the WAV
  data as bytes, for you to display or play however you like.
- It does not save application state between runs.