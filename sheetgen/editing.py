"""Editing of grammar rules and the axiom, with probability checks."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field

from .errors import CSSRuleSumNotOneError, without_whitespaces
from .rules import CSSLRule, CSSLRuleSet

RULE_EPS = 0.001
"""Tolerance of the probability sum of rules sharing a context char."""


def _f32(value: float) -> float:
    return struct.unpack("f", struct.pack("f", value))[0]


_LOWER = _f32(1.0 - _f32(RULE_EPS))
_UPPER = _f32(1.0 + _f32(RULE_EPS))


def _context_char(rule: CSSLRule) -> str:
    if not rule.left:
        raise ValueError(f"Rule '{rule}' has an empty left side")
    return rule.left[-1]


def _grouped_sums(rules: list[CSSLRule]) -> dict[str, float]:
    sums: dict[str, float] = {}
    for rule in rules:
        char = _context_char(rule)
        sums[char] = _f32(sums.get(char, 0.0) + rule.p)
    return sums


def _within_tolerance(p_sum: float) -> bool:
    return _LOWER <= p_sum <= _UPPER


def _non_empty_lines(text: str) -> list[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]


@dataclass
class RuleEditState:
    """Rule text as edited by the user and the rules parsed from it."""

    text: str = ""
    rules: list[CSSLRule] = field(default_factory=list)

    @classmethod
    def from_ruleset(cls, ruleset: CSSLRuleSet) -> RuleEditState:
        """Start editing the rules of ``ruleset``, one per line."""
        rules = list(ruleset.rules)
        return cls("".join(f"{rule}\n" for rule in rules), rules)

    def update_rules(self) -> None:
        """Re-parse the text, keeping only the lines that are valid rules."""
        parsed: list[CSSLRule] = []
        for line in _non_empty_lines(self.text):
            try:
                parsed.append(CSSLRule.parse(line))
            except ValueError:
                continue
        self.rules = parsed

    def check(self) -> None:
        """Raise if a line is not a rule or a context char's sum is not one."""
        for line in _non_empty_lines(self.text):
            CSSLRule.parse(line)

        for char, p_sum in _grouped_sums(self.rules).items():
            if not _within_tolerance(p_sum):
                raise CSSRuleSumNotOneError(char, RULE_EPS)


@dataclass(frozen=True)
class RuleSum:
    """Probability sum of the rules sharing one context char."""

    char: str
    p_sum: float

    @property
    def within_tolerance(self) -> bool:
        return _within_tolerance(self.p_sum)

    @property
    def diff(self) -> float:
        return _f32(1.0 - self.p_sum)

    def __str__(self) -> str:
        return f"{self.char}: {self.p_sum:.4f}"


def rule_sums(rules: list[CSSLRule]) -> list[RuleSum]:
    """Probability sums per context char, ordered by the char."""
    return [
        RuleSum(char, p_sum) for char, p_sum in sorted(_grouped_sums(rules).items())
    ]


def axiom_has_whitespace(text: str) -> bool:
    """Whether the axiom holds white space, which is ignored."""
    return without_whitespaces(text) != text