from __future__ import annotations

from enum import Enum


class JamoSlot(Enum):
    """Position of a jamo inside a syllable block."""

    INI = "ini"
    MID = "mid"
    FIN = "fin"


class ZipSource(Enum):
    """Which hex stream is archived into out.zip."""

    COMPLETE = "complete"
    ALL = "all"
