"""Nenegana: kana drills with a quiz sequencer and romaji answer matching."""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
