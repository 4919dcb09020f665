from __future__ import annotations

"""Workspace loading.

A workspace is a directory laid out as:

    config.yaml                      global settings (optional)
    src/ini/<jamo>/config.yaml       rules for one initial (optional)
    src/ini/<jamo>/glyphs.bmp        its sprite sheet (optional; also glyphs.<jamo>.bmp)
    src/mid/<jamo>/...
    src/fin/<jamo>/...               the "no final" jamo lives in src/fin/0/

Jamo config files look like:

    regex:
      "ㄱ[ㅗㅛㅜㅠㅡ].": 1
      "ㄱ..": 0
    default: 0

Everything is loaded, ranked and validated up front. After load() the
workspace is read-only.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final, Mapping, Optional

from combinator.domain.enums import JamoSlot
from combinator.domain.errors import ConfigError
from combinator.domain.hangul import SyllableIndex, slot_chars
from combinator.domain.rules import GlyphRules
from combinator.services.settings_store import GlobalConfig, SettingsStore, read_yaml_mapping
from combinator.services.sprite_sheet import SpriteSheet

logger = logging.getLogger(__name__)


SOURCE_DIRNAME: Final[str] = "src"
JAMO_CONFIG_FILENAME: Final[str] = "config.yaml"

_JAMO_KEYS: Final[frozenset[str]] = frozenset({"regex", "default"})


@dataclass(frozen=True)
class JamoSource:
    """Rules and (optional) sprite sheet for one jamo in one slot."""

    slot: JamoSlot
    char: str
    rules: GlyphRules
    sheet: Optional[SpriteSheet] = None

    @property
    def where(self) -> str:
        return "{}/{}".format(self.slot.value, self.char)


@dataclass(frozen=True)
class Workspace:
    path: Path
    config: GlobalConfig
    sources: Mapping[JamoSlot, tuple[JamoSource, ...]]

    @classmethod
    def load(cls, path: str | Path, **overrides: Any) -> "Workspace":
        """Load a workspace directory.

        Args:
            path: workspace root.
            overrides: config.yaml keys whose values replace the file's
                (None values are ignored).

        Raises:
            ConfigError: on any malformed file or sheet/rule mismatch.
        """
        root = Path(path)
        if not root.is_dir():
            raise ConfigError("Workspace directory not found: {}".format(root))

        config = SettingsStore(root).global_config(**overrides)

        sources = {slot: tuple(_load_jamo(root, slot, char) for char in slot_chars(slot)) for slot in JamoSlot}
        workspace = cls(path=root, config=config, sources=sources)
        workspace.validate()
        return workspace

    def source(self, slot: JamoSlot, index: int) -> JamoSource:
        return self.sources[slot][index]

    def find_variant(self, slot: JamoSlot, syllable: SyllableIndex) -> Optional[int]:
        """Resolve the variant of `slot`'s jamo for a syllable, or None."""
        rules = self.sources[slot][syllable.index_for(slot)].rules
        return rules.resolve(syllable.ini, syllable.mid, syllable.fin)

    def validate(self) -> None:
        """Check that every sheet holds every variant its rules can produce.

        Raises:
            ConfigError: naming the jamo, the variant and the sheet size.
        """
        size = self.config.size
        for slot in JamoSlot:
            for src in self.sources[slot]:
                highest = src.rules.max_variant()
                if src.sheet is None or highest is None:
                    continue
                capacity = src.sheet.capacity(size)
                if highest >= capacity:
                    raise ConfigError(
                        "{}: rule variant {} does not fit sprite sheet {} ({}x{}, {} cells of {}px)".format(
                            src.where, highest, src.sheet.name, src.sheet.width, src.sheet.height, capacity, size
                        )
                    )

    @property
    def out_dir(self) -> Path:
        return self.path / self.config.out_dir


def _load_jamo(root: Path, slot: JamoSlot, char: str) -> JamoSource:
    jamo_dir = root / SOURCE_DIRNAME / slot.value / char
    where = "{}/{}".format(slot.value, char)

    data = read_yaml_mapping(jamo_dir / JAMO_CONFIG_FILENAME)
    if data is None:
        rules = GlyphRules.unconfigured()
    else:
        unknown = sorted(set(data) - _JAMO_KEYS, key=str)
        if unknown:
            raise ConfigError("{}: unknown key(s) in {}: {}".format(where, JAMO_CONFIG_FILENAME, ", ".join(map(str, unknown))))
        rules = GlyphRules.from_mapping(data.get("regex"), data.get("default"), where=where)
        logger.debug("%s: loaded %d rule(s)", where, len(rules))

    sheet = None
    for candidate in (jamo_dir / "glyphs.bmp", jamo_dir / "glyphs.{}.bmp".format(char)):
        if candidate.is_file():
            sheet = SpriteSheet.open(candidate)
            logger.debug("%s: sprite sheet %s (%dx%d)", where, candidate.name, sheet.width, sheet.height)
            break

    return JamoSource(slot=slot, char=char, rules=rules, sheet=sheet)
