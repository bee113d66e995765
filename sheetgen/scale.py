"""Scales that move pitches step by step within a key."""

from __future__ import annotations

import abc
import enum
import logging
from dataclasses import dataclass

from .notation import HALFTONE_COUNT, KeySignature, KeySignatureType, Pitch

log = logging.getLogger(__name__)


class ScaleType(enum.Enum):
    BASIC = "basic"
    JAZZ_LIKE = "jazz_like"


class Scale(abc.ABC):
    """Moves pitches up and down by one step of a scale in a key."""

    key: KeySignature

    @abc.abstractmethod
    def advance(self, pitch: Pitch) -> None:
        """Move ``pitch`` one step up, in place."""

    @abc.abstractmethod
    def recede(self, pitch: Pitch) -> None:
        """Move ``pitch`` one step down, in place."""

    def next(self, pitch: Pitch) -> Pitch:
        """A copy of ``pitch`` moved one step up."""
        moved = pitch.copy()
        self.advance(moved)
        return moved

    def prev(self, pitch: Pitch) -> Pitch:
        """A copy of ``pitch`` moved one step down."""
        moved = pitch.copy()
        self.recede(moved)
        return moved

    def _rank(self, pitch: Pitch) -> int:
        return (
            pitch.halftone_value() + HALFTONE_COUNT - self.key.ext.halftone_value()
        ) % HALFTONE_COUNT


@dataclass
class BasicScale(Scale):
    """Major or natural minor scale."""

    key: KeySignature

    def advance(self, pitch: Pitch) -> None:
        rank = self._rank(pitch)
        halftone_ranks = (4, 11) if self.key.signature_type is KeySignatureType.MAJ else (2, 7)
        if rank in halftone_ranks:
            pitch.move_halftone_up()
        else:
            pitch.move_tone_up()

    def recede(self, pitch: Pitch) -> None:
        rank = self._rank(pitch)
        halftone_ranks = (0, 5) if self.key.signature_type is KeySignatureType.MAJ else (3, 8)
        if rank in halftone_ranks:
            pitch.move_halftone_down()
        else:
            pitch.move_tone_down()


@dataclass
class JazzLikeScale(Scale):
    """Major scale with jazz-like colouring; minor keys are not supported."""

    key: KeySignature

    def _require_major(self) -> None:
        if self.key.signature_type is not KeySignatureType.MAJ:
            raise ValueError("Jazz-like scale supports only major keys")

    def advance(self, pitch: Pitch) -> None:
        self._require_major()
        rank = self._rank(pitch)
        if rank in (2, 9):
            pitch.move_tone_up()
            pitch.move_halftone_up()
        elif rank in (7, 8):
            pitch.move_halftone_up()
        else:
            pitch.move_tone_up()

    def recede(self, pitch: Pitch) -> None:
        rank = self._rank(pitch)
        log.info(
            "rank = %s, pitch = %r, key = %s", rank, pitch, self.key.signature_type
        )
        self._require_major()
        if rank in (0, 5):
            pitch.move_tone_down()
            pitch.move_halftone_down()
        elif rank in (8, 9):
            pitch.move_halftone_down()
        else:
            pitch.move_tone_down()


def make_scale(scale_type: ScaleType, key: KeySignature) -> Scale:
    """Create the scale of ``scale_type`` in ``key``."""
    if scale_type is ScaleType.JAZZ_LIKE:
        return JazzLikeScale(key)
    return BasicScale(key)