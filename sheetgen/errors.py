"""Application errors and small text helpers."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

# Characters that str.isspace() accepts but that are not Unicode white space.
_SEPARATOR_CONTROLS = frozenset("\x1c\x1d\x1e\x1f")


def _lower_exp(value: float) -> str:
    """Format a number in shortest scientific form, e.g. ``1e-3``."""
    if value == 0:
        return "0e0"
    try:
        number = Decimal(repr(float(value))).normalize()
    except InvalidOperation:
        return repr(float(value))
    if not number.is_finite():
        return repr(float(value))
    sign, digits, exponent = number.as_tuple()
    head, rest = str(digits[0]), "".join(str(d) for d in digits[1:])
    mantissa = f"{head}.{rest}" if rest else head
    return f"{'-' if sign else ''}{mantissa}e{exponent + len(digits) - 1}"


class AppError(Exception):
    """Base class of all errors raised by the package."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class CSSRuleParseError(AppError):
    """A rule string does not have the expected shape."""

    def __init__(self, rule: str) -> None:
        super().__init__(f"CSSRule has invalid format: '{rule}'")
        self.rule = rule


class CSSRuleParseNumError(AppError):
    """A rule's probability could not be parsed as a number."""

    def __init__(self, rule: str, reason: str) -> None:
        super().__init__(f"CSSRule has invalid format: {reason}: '{rule}'")
        self.rule = rule
        self.reason = reason


class StaveKeyNotFoundError(AppError):
    """A stave holds no key signature."""

    def __init__(self) -> None:
        super().__init__("Cannot find Key symbol in stave.")


class FoundNoteWithoutKeyError(AppError):
    """A note appears before any key signature."""

    def __init__(self) -> None:
        super().__init__("Found a note that isn't bound by any key.")


class CSSRuleSumNotOneError(AppError):
    """The probabilities of rules sharing a context char do not sum to one."""

    def __init__(self, char: str, tolerance: float) -> None:
        super().__init__(
            f"CSSRule probability sum isn't 1 for context char '{char}'. "
            f"Tolerance is: {_lower_exp(tolerance)}"
        )
        self.char = char
        self.tolerance = tolerance


class LilyError(AppError):
    """Running lilypond failed."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Lilypond translation failed: {reason}")
        self.reason = reason


class FluidsynthError(AppError):
    """Running fluidsynth failed."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Fluidsynth translation failed: {reason}")
        self.reason = reason


class PathError(AppError):
    """An operation on a file path failed."""

    def __init__(self, path: object, reason: object) -> None:
        super().__init__(f"Path '{path}': {reason}")
        self.path = str(path)
        self.reason = str(reason)


class AudioError(AppError):
    """Loading or decoding audio failed."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Audio error: {reason}")
        self.reason = reason


class ArgumentError(AppError):
    """The command line arguments are invalid."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Argument error: {reason}")
        self.reason = reason


class MissingTimeSignatureError(AppError):
    """A score has no time signature."""

    def __init__(self) -> None:
        super().__init__("Score is missing a time signature.")


def without_whitespaces(text: str) -> str:
    """Return ``text`` with every white-space character removed."""
    return "".join(
        c for c in text if not c.isspace() or c in _SEPARATOR_CONTROLS
    )