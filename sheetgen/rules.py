"""Context-sensitive stochastic L-system rules and rule sets."""

from __future__ import annotations

import math
import random
import re
import struct
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterator, Optional, Sequence

from .errors import CSSRuleParseError, CSSRuleParseNumError, without_whitespaces

_FRACTION_RULE = re.compile(r"(.*?)->(.*?)%(.*?)/(.*?)")
_DECIMAL_RULE = re.compile(r"(.*?)->(.*?)%([\d.]*?)")
_INTEGER = re.compile(r"[+-]?[0-9]+")
_FLOAT = re.compile(r"[0-9]+\.?[0-9]*|\.[0-9]+")

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1


def _f32(value: float) -> float:
    """Round ``value`` to the nearest single-precision float."""
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def _format_f32(value: float) -> str:
    """Shortest positional decimal that reads back as the same single float."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    text = repr(value)
    for digits in range(1, 10):
        candidate = f"{value:.{digits}g}"
        if _f32(float(candidate)) == value:
            text = candidate
            break
    return format(Decimal(text), "f")


def _parse_i32(text: str, rule: str) -> int:
    if not text:
        raise CSSRuleParseNumError(rule, "cannot parse integer from empty string")
    if not _INTEGER.fullmatch(text):
        raise CSSRuleParseNumError(rule, "invalid digit found in string")
    value = int(text)
    if value > _I32_MAX:
        raise CSSRuleParseNumError(rule, "number too large to fit in target type")
    if value < _I32_MIN:
        raise CSSRuleParseNumError(rule, "number too small to fit in target type")
    return value


def _parse_f32(text: str, rule: str) -> float:
    if not text:
        raise CSSRuleParseNumError(rule, "cannot parse float from empty string")
    if not _FLOAT.fullmatch(text):
        raise CSSRuleParseNumError(rule, "invalid float literal")
    return _f32(float(text))


def _divide(nom: int, denom: int) -> float:
    nom_f, denom_f = _f32(float(nom)), _f32(float(denom))
    if denom_f == 0:
        return math.nan if nom_f == 0 else math.copysign(math.inf, nom_f)
    return _f32(nom_f / denom_f)


@dataclass(frozen=True)
class CSSLRule:
    """A rule ``abc -> w`` applied with probability ``p``.

    The left side is matched against the end of the inspected text, so
    its leading characters act as context.
    """

    left: str
    right: str
    p: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "p", _f32(float(self.p)))

    def matches(self, text: str) -> bool:
        """Whether ``text`` ends with the rule's left side."""
        return text.endswith(self.left)

    @classmethod
    def parse(cls, text: str) -> CSSLRule:
        """Parse a rule written as ``A -> B % a/b`` or ``A -> B % 0.5``.

        White space anywhere in the text is ignored.
        """
        compact = without_whitespaces(text)

        match = _FRACTION_RULE.fullmatch(compact)
        if match is not None:
            left, right, nom_text, denom_text = match.groups()
            nom = _parse_i32(nom_text, text)
            denom = _parse_i32(denom_text, text)
            return cls(left, right, _divide(nom, denom))

        match = _DECIMAL_RULE.fullmatch(compact)
        if match is not None:
            left, right, p_text = match.groups()
            return cls(left, right, _parse_f32(p_text, text))

        raise CSSRuleParseError(text)

    def __str__(self) -> str:
        return f"{self.left} -> {self.right} % {_format_f32(self.p)}"


@dataclass
class CSSLRuleSet:
    """The rules of a context-sensitive stochastic L-system."""

    rules: list[CSSLRule] = field(default_factory=list)

    @classmethod
    def from_str_rules(cls, rules: Sequence[str]) -> CSSLRuleSet:
        """Parse every rule string; the first invalid one raises."""
        return cls([CSSLRule.parse(r) for r in rules])

    def select(self, left: str) -> Optional[CSSLRule]:
        """Pick one of the rules matching ``left`` at random, weighted by ``p``.

        Returns None when no rule matches.
        """
        matching = [r for r in self.rules if r.matches(left)]

        total_p = 0.0
        for rule in matching:
            total_p = _f32(total_p + rule.p)
        threshold = random.random() * total_p

        acc = 0.0
        for rule in matching:
            acc = _f32(acc + rule.p)
            if acc > threshold:
                return rule
        return None

    def __iter__(self) -> Iterator[CSSLRule]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    def __str__(self) -> str:
        return "{ " + ", ".join(str(r) for r in self.rules) + " }"