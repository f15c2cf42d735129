from .normalize import ROMAJI_ALIASES, answers_match, normalize

__all__ = ["ROMAJI_ALIASES", "answers_match", "normalize"]
