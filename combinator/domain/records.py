from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from combinator.domain.bitmap import bitmap_hex
from combinator.domain.hangul import SyllableIndex


@dataclass(frozen=True)
class SyllableRecord:
    """One composed syllable, ready to be written by the sinks."""

    syllable: SyllableIndex
    bitmap: bytes
    ini_variant: Optional[int]
    mid_variant: Optional[int]
    fin_variant: Optional[int]

    @property
    def codepoint(self) -> int:
        return self.syllable.codepoint

    @property
    def complete(self) -> bool:
        """True when every jamo the syllable needs resolved to a variant."""
        return (
            self.ini_variant is not None
            and self.mid_variant is not None
            and (self.syllable.fin == 0 or self.fin_variant is not None)
        )

    @property
    def variants(self) -> list[Optional[int]]:
        return [self.ini_variant, self.mid_variant, self.fin_variant]

    def hex_line(self) -> str:
        return "{:04X}:{}".format(self.codepoint, bitmap_hex(self.bitmap))
