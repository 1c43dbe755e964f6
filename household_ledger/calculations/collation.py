"""Case-insensitive, accent-aware ordering of display names."""

import unicodedata


def collation_key(text: str) -> tuple[str, str]:
    """
    Sort key for names.

    Primary: accents stripped and case folded, so "Éclair" sorts with
    "eclair" and "Zebra" after "apple". Secondary: the case-folded
    original, so the ordering is total and deterministic.
    """
    folded = text.casefold()
    decomposed = unicodedata.normalize("NFKD", folded)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base, folded
