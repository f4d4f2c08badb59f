"""
Qualitative feedback captured when an exercise is completed.

Difficulty is a closed set of five values. Free-form strings coming from the
store or from clients are normalised with Difficulty.parse() at the adapter
boundary; the progression policy only ever sees Difficulty members.
"""

import unicodedata
from enum import Enum
from typing import Optional, Union


class Difficulty(str, Enum):
    """Self-reported difficulty of a completed exercise."""

    MUITO_FACIL = "muito_facil"
    FACIL = "facil"
    MODERADO = "moderado"
    DIFICIL = "dificil"
    MUITO_DIFICIL = "muito_dificil"

    @classmethod
    def parse(cls, value: Union[str, "Difficulty", None]) -> Optional["Difficulty"]:
        """
        Normalise a stored or submitted difficulty label.

        Accepts the canonical values, labels used by earlier versions of the
        workout screen ("muito_leve", "bom", "socorro", ...) and English names.
        Case, accents, spaces and hyphens are ignored.

        Args:
            value: Raw label, a Difficulty, or None

        Returns:
            Difficulty member, or None when value is None/blank

        Raises:
            ValueError: If the label is not recognised
        """
        if value is None:
            return None
        if isinstance(value, Difficulty):
            return value

        key = _normalise_label(value)
        if not key:
            return None

        try:
            return cls(key)
        except ValueError:
            pass

        if key in _ALIASES:
            return _ALIASES[key]

        raise ValueError(f"Unknown difficulty: {value!r}")


_ALIASES = {
    # Earlier workout screen labels
    "muito_leve": Difficulty.MUITO_FACIL,
    "leve": Difficulty.FACIL,
    "bom": Difficulty.MODERADO,
    "pesado": Difficulty.DIFICIL,
    "muito_pesado": Difficulty.DIFICIL,
    "errei_carga": Difficulty.MUITO_DIFICIL,
    "errei_na_carga": Difficulty.MUITO_DIFICIL,
    "socorro": Difficulty.MUITO_DIFICIL,
    "socorro_estagnei": Difficulty.MUITO_DIFICIL,
    # English
    "very_easy": Difficulty.MUITO_FACIL,
    "easy": Difficulty.FACIL,
    "moderate": Difficulty.MODERADO,
    "hard": Difficulty.DIFICIL,
    "very_hard": Difficulty.MUITO_DIFICIL,
}


def _normalise_label(value: str) -> str:
    decomposed = unicodedata.normalize("NFKD", str(value))
    ascii_only = "".join(c for c in decomposed if not unicodedata.combining(c))
    key = ascii_only.strip().lower()
    for sep in (" ", "-", ","):
        key = key.replace(sep, "_")
    key = key.replace("!", "")
    while "__" in key:
        key = key.replace("__", "_")
    return key.strip("_")


# Fatigue ratings are on a 1-5 scale (1 = barely tired, 5 = exhausted)
LOW_FATIGUE_MAX = 2
HIGH_FATIGUE_MIN = 4
