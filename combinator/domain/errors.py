from __future__ import annotations


class CombinatorError(Exception):
    """Base class for failures that abort a font build."""


class ConfigError(CombinatorError, ValueError):
    """A workspace file or setting cannot be turned into rules/sheets."""


class SpriteBoundsError(CombinatorError, IndexError):
    """A variant addresses pixels outside its sprite sheet."""
