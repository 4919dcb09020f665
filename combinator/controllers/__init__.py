"""
Controller package exports.

This file exists to provide a stable import surface for the build drivers.
"""

from .syllable_emitter import EmitSummary, SyllableEmitter  # noqa: F401

__all__ = [
    "EmitSummary",
    "SyllableEmitter",
]
