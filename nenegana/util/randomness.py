from __future__ import annotations

"""Randomness helpers for quiz ordering and seeding."""

import os
import random
from typing import Optional


def seed_from_env() -> Optional[int]:
    """Return the integer SEED env var, or None if unset or malformed."""
    seed = os.environ.get("SEED")
    if seed is None:
        return None
    try:
        return int(seed)
    except ValueError:
        return None


def make_rng(seed: Optional[int] = None) -> random.Random:
    """Build a private RNG.

    An explicit seed wins; otherwise SEED from the environment is used, and
    without either the generator is seeded from the OS.
    """
    if seed is None:
        seed = seed_from_env()
    return random.Random(seed)
