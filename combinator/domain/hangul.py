from __future__ import annotations

"""Hangul syllable space (domain layer).

This module contains *no* I/O.

It centralises:
- The jamo tables for initial (ini), medial (mid) and final (fin) positions
- Enumeration of every (ini, mid, fin) triple in canonical order
- The Unicode syllable codepoint formula and its inverse

Primary API:
- iter_syllables()
- syllable_codepoint(ini, mid, fin)
- match_string(ini, mid, fin)
"""

from typing import Final, Iterator, NamedTuple, Optional

from combinator.domain.enums import JamoSlot


# -----------------------------------------------------------------------------
# Domain data: jamo ordering
# -----------------------------------------------------------------------------

# Initial consonants (Choseong) in standard Unicode Hangul order
INI_CHARS: Final[tuple[str, ...]] = (
    "ㄱ", "ㄲ", "ㄴ", "ㄷ", "ㄸ", "ㄹ", "ㅁ", "ㅂ", "ㅃ",
    "ㅅ", "ㅆ", "ㅇ", "ㅈ", "ㅉ", "ㅊ", "ㅋ", "ㅌ", "ㅍ", "ㅎ",
)

# Vowels (Jungseong) in standard Unicode Hangul order
MID_CHARS: Final[tuple[str, ...]] = (
    "ㅏ", "ㅐ", "ㅑ", "ㅒ", "ㅓ", "ㅔ", "ㅕ", "ㅖ",
    "ㅗ", "ㅘ", "ㅙ", "ㅚ", "ㅛ",
    "ㅜ", "ㅝ", "ㅞ", "ㅟ", "ㅠ",
    "ㅡ", "ㅢ", "ㅣ",
)

NO_FINAL: Final[str] = "0"

# Final consonants (Jongseong) in standard Unicode Hangul order.
# Index 0 is "no final"; it is spelled NO_FINAL so rule patterns can match it.
FIN_CHARS: Final[tuple[str, ...]] = (
    NO_FINAL,
    "ㄱ", "ㄲ", "ㄳ",
    "ㄴ", "ㄵ", "ㄶ",
    "ㄷ",
    "ㄹ", "ㄺ", "ㄻ", "ㄼ", "ㄽ", "ㄾ", "ㄿ", "ㅀ",
    "ㅁ",
    "ㅂ", "ㅄ",
    "ㅅ", "ㅆ",
    "ㅇ",
    "ㅈ", "ㅊ",
    "ㅋ",
    "ㅌ",
    "ㅍ",
    "ㅎ",
)

NUM_INI: Final[int] = len(INI_CHARS)
NUM_MID: Final[int] = len(MID_CHARS)
NUM_FIN: Final[int] = len(FIN_CHARS)
NUM_SYLLABLES: Final[int] = NUM_INI * NUM_MID * NUM_FIN

SYLLABLE_BASE: Final[int] = 0xAC00
SYLLABLE_LAST: Final[int] = SYLLABLE_BASE + NUM_SYLLABLES - 1

_SLOT_CHARS: Final[dict[JamoSlot, tuple[str, ...]]] = {
    JamoSlot.INI: INI_CHARS,
    JamoSlot.MID: MID_CHARS,
    JamoSlot.FIN: FIN_CHARS,
}


class SyllableIndex(NamedTuple):
    """One (ini, mid, fin) triple. fin == 0 means no final consonant."""

    ini: int
    mid: int
    fin: int

    def index_for(self, slot: JamoSlot) -> int:
        if slot is JamoSlot.INI:
            return self.ini
        if slot is JamoSlot.MID:
            return self.mid
        return self.fin

    @property
    def codepoint(self) -> int:
        return syllable_codepoint(self.ini, self.mid, self.fin)

    @property
    def label(self) -> str:
        """The three-jamo spelling used in rule matching and diagnostics."""
        return INI_CHARS[self.ini] + MID_CHARS[self.mid] + FIN_CHARS[self.fin]


# -----------------------------------------------------------------------------
# Domain logic
# -----------------------------------------------------------------------------

def slot_size(slot: JamoSlot) -> int:
    return len(_SLOT_CHARS[slot])


def slot_chars(slot: JamoSlot) -> tuple[str, ...]:
    return _SLOT_CHARS[slot]


def jamo_char(slot: JamoSlot, index: int) -> str:
    """Return the jamo glyph at `index` for a slot (IndexError if out of range)."""
    chars = _SLOT_CHARS[slot]
    if not 0 <= index < len(chars):
        raise IndexError("{} index out of range: {}".format(slot.value, index))
    return chars[index]


def in_bounds(ini: int, mid: int, fin: int) -> bool:
    return 0 <= ini < NUM_INI and 0 <= mid < NUM_MID and 0 <= fin < NUM_FIN


def match_string(ini: int, mid: int, fin: int) -> Optional[str]:
    """Return the 3-character string rules are matched against, or None if out of range."""
    if not in_bounds(ini, mid, fin):
        return None
    return INI_CHARS[ini] + MID_CHARS[mid] + FIN_CHARS[fin]


def iter_syllables() -> Iterator[SyllableIndex]:
    """Yield every triple, ini outermost and fin innermost."""
    for ini in range(NUM_INI):
        yield from iter_row(ini)


def iter_row(ini: int) -> Iterator[SyllableIndex]:
    """Yield the triples sharing one initial, in canonical order."""
    for mid in range(NUM_MID):
        for fin in range(NUM_FIN):
            yield SyllableIndex(ini, mid, fin)


def syllable_codepoint(ini: int, mid: int, fin: int) -> int:
    """Compose a syllable codepoint.

    Notes:
        This uses the Unicode Hangul Syllables algorithm:
        SBase + (LIndex * VCount + VIndex) * TCount + TIndex
    """
    return SYLLABLE_BASE + (ini * NUM_MID + mid) * NUM_FIN + fin


def decompose_codepoint(codepoint: int) -> SyllableIndex:
    """Inverse of syllable_codepoint().

    Raises:
        ValueError: if `codepoint` is not a precomposed Hangul syllable.
    """
    if not SYLLABLE_BASE <= codepoint <= SYLLABLE_LAST:
        raise ValueError("Not a Hangul syllable codepoint: U+{:04X}".format(codepoint))
    q = codepoint - SYLLABLE_BASE
    return SyllableIndex(q // (NUM_MID * NUM_FIN), (q % (NUM_MID * NUM_FIN)) // NUM_FIN, q % NUM_FIN)
